"""Data models for the strategy consistency engine."""

from .content import (
    StrategicApproach,
    ContentModel,
    BaseDocumentContent,
    CanvasContent,
    StrategicPriority,
    CompetitiveAnalysis,
    StrategyContent,
    Objective,
    OKRContent,
    SubscriptionTier,
    RevenueProjection,
    CostProjection,
    Profitability,
    FinancialScenario,
    FinancialContent,
)
from .document import (
    DocumentKind,
    Document,
    DocumentContent,
    CONTENT_MODELS,
    content_model_for,
    empty_documents,
)
from .finding import (
    Severity,
    SEVERITY_ORDER,
    OperationName,
    Action,
    Inconsistency,
    Suggestion,
    Finding,
)
from .wizard import TOTAL_STEPS, WizardPhase, WizardState, WizardReply
from .error import ErrorResponse
from .api import (
    ReplySource,
    WizardStatus,
    ChatReply,
    FindingView,
    ApplyResult,
    MessageRequest,
    DocumentUpdateRequest,
    DocumentListResponse,
)

__all__ = [
    # Content models
    "StrategicApproach",
    "ContentModel",
    "BaseDocumentContent",
    "CanvasContent",
    "StrategicPriority",
    "CompetitiveAnalysis",
    "StrategyContent",
    "Objective",
    "OKRContent",
    "SubscriptionTier",
    "RevenueProjection",
    "CostProjection",
    "Profitability",
    "FinancialScenario",
    "FinancialContent",
    # Document models
    "DocumentKind",
    "Document",
    "DocumentContent",
    "CONTENT_MODELS",
    "content_model_for",
    "empty_documents",
    # Finding models
    "Severity",
    "SEVERITY_ORDER",
    "OperationName",
    "Action",
    "Inconsistency",
    "Suggestion",
    "Finding",
    # Wizard models
    "TOTAL_STEPS",
    "WizardPhase",
    "WizardState",
    "WizardReply",
    # Error
    "ErrorResponse",
    # API models
    "ReplySource",
    "WizardStatus",
    "ChatReply",
    "FindingView",
    "ApplyResult",
    "MessageRequest",
    "DocumentUpdateRequest",
    "DocumentListResponse",
]
