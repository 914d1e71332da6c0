"""
Consistency layer.

- ConsistencyChecker: 문서 쌍 규칙 → Inconsistency
- SuggestionSource: 단일 문서 규칙 → Suggestion
- DocumentAnalyzer: 두 결과의 합
"""

from .claims import TRACKED_METRICS, TrackedMetric, MetricTarget
from .rules import BaseConsistencyRule, RuleFinding, DEFAULT_RULES
from .checker import ConsistencyChecker, CheckReport
from .suggestion_source import BaseSuggestionRule, SuggestionSource, default_suggestion_rules
from .analyzer import DocumentAnalyzer

__all__ = [
    "TRACKED_METRICS",
    "TrackedMetric",
    "MetricTarget",
    "BaseConsistencyRule",
    "RuleFinding",
    "DEFAULT_RULES",
    "ConsistencyChecker",
    "CheckReport",
    "BaseSuggestionRule",
    "SuggestionSource",
    "default_suggestion_rules",
    "DocumentAnalyzer",
]
