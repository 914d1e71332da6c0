"""
Inconsistency / Suggestion 모델입니다.

두 모델은 같은 수명주기(생성 → 적용 → 구현 완료 기록)를 가지며,
둘 다 적용 시 실행할 Action을 포함합니다.

id 규칙:
┌──────────────┬────────┬──────────────────────────────────────────────┐
│ 종류         │ 접두사 │ 해시 입력                                    │
├──────────────┼────────┼──────────────────────────────────────────────┤
│ Inconsistency│ inc-   │ 규칙 이름, source 종류, target 종류, 핵심 값 │
│ Suggestion   │ sug-   │ 규칙 이름, 문서 종류, 핵심 값                │
└──────────────┴────────┴──────────────────────────────────────────────┘
"""

from enum import Enum
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field

from .document import DocumentKind


class Severity(str, Enum):
    """발견 항목 심각도."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


SEVERITY_ORDER = {Severity.HIGH: 0, Severity.MEDIUM: 1, Severity.LOW: 2}


class OperationName(str, Enum):
    """등록된 문서 변환 연산 (닫힌 열거형)."""
    # OKRs
    ADD_KEY_RESULT = "add_key_result"
    ADD_PRIORITY_OBJECTIVE = "add_priority_objective"
    ALIGN_REVENUE_KEY_RESULT = "align_revenue_key_result"
    ADD_PRODUCT_DEVELOPMENT_OBJECTIVE = "add_product_development_objective"
    # Canvas
    ADD_ACQUISITION_CHANNELS = "add_acquisition_channels"
    ADD_RISK_MANAGEMENT = "add_risk_management"
    # Strategy
    ADD_STRATEGIC_PRIORITIES = "add_strategic_priorities"
    ADD_COMPETITIVE_ANALYSIS = "add_competitive_analysis"
    # FinancialProjection
    ALIGN_REVENUE_TARGET = "align_revenue_target"
    ALIGN_PROFIT_MARGIN = "align_profit_margin"
    ALIGN_SUBSCRIBER_PROJECTION = "align_subscriber_projection"
    ADD_SENSITIVITY_ANALYSIS = "add_sensitivity_analysis"
    ADJUST_MRR_TARGET = "adjust_mrr_target"


class Action(BaseModel):
    """적용할 수정: 대상 문서 종류 + 연산 + 연산 파라미터."""

    model_config = ConfigDict(frozen=True)

    document_kind: DocumentKind = Field(..., description="변경될 문서 종류")
    operation: OperationName = Field(..., description="변환 연산")
    params: dict[str, Any] = Field(default_factory=dict, description="연산 파라미터")


class Inconsistency(BaseModel):
    """두 문서 사이의 규칙 위반."""

    model_config = ConfigDict(frozen=True)

    id: str
    rule: str = Field(..., description="위반을 감지한 규칙 이름")
    source_kind: DocumentKind = Field(..., description="주장이 있는 문서")
    target_kind: DocumentKind = Field(..., description="주장을 반영해야 하는 문서")
    severity: Severity
    text: str
    action: Action

    def involves(self, kind: DocumentKind) -> bool:
        return kind in (self.source_kind, self.target_kind)


class Suggestion(BaseModel):
    """단일 문서 개선 제안."""

    model_config = ConfigDict(frozen=True)

    id: str
    rule: str
    document_kind: DocumentKind
    severity: Severity
    text: str
    action: Action


Finding = Union[Inconsistency, Suggestion]
