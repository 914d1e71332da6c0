"""
SuggestionSource: 단일 문서 개선 제안 생성기.

문서 간 위반이 아니라 한 문서 안에서 빠진 섹션이나 비현실적인 수치를 찾아
Suggestion을 만듭니다. id 규칙과 예외 격리는 ConsistencyChecker와 같습니다.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional

from strategy_sync.config import get_settings
from strategy_sync.exceptions import RuleEvaluationError
from strategy_sync.models import (
    Action,
    CanvasContent,
    Document,
    DocumentKind,
    FinancialContent,
    OKRContent,
    OperationName,
    Severity,
    StrategyContent,
    Suggestion,
)
from strategy_sync.utils.fingerprint import make_finding_id
from strategy_sync.utils.money import format_money

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SuggestionDraft:
    severity: Severity
    text: str
    operation: OperationName
    params: dict[str, Any] = field(default_factory=dict)
    fingerprint: tuple[Any, ...] = field(default_factory=tuple)


class BaseSuggestionRule(ABC):
    """단일 문서 제안 규칙 기본 클래스."""

    name: str = ""
    kind: DocumentKind

    @abstractmethod
    def evaluate(self, content: Any) -> list[SuggestionDraft]:
        pass


class StrategicPrioritiesSuggestion(BaseSuggestionRule):
    name = "strategic_priorities_missing"
    kind = DocumentKind.STRATEGY

    def evaluate(self, strategy: StrategyContent) -> list[SuggestionDraft]:
        if strategy.strategic_priorities:
            return []
        return [
            SuggestionDraft(
                severity=Severity.MEDIUM,
                text="Add key strategic priorities with concrete customer acquisition channels.",
                operation=OperationName.ADD_STRATEGIC_PRIORITIES,
            )
        ]


class CompetitiveAnalysisSuggestion(BaseSuggestionRule):
    name = "competitive_analysis_missing"
    kind = DocumentKind.STRATEGY

    def evaluate(self, strategy: StrategyContent) -> list[SuggestionDraft]:
        if strategy.competitive_analysis is not None:
            return []
        return [
            SuggestionDraft(
                severity=Severity.LOW,
                text="Add a competitive analysis section describing the market landscape and your advantage.",
                operation=OperationName.ADD_COMPETITIVE_ANALYSIS,
            )
        ]


class ProductDevelopmentSuggestion(BaseSuggestionRule):
    name = "product_development_objective_missing"
    kind = DocumentKind.OKRS

    def evaluate(self, okrs: OKRContent) -> list[SuggestionDraft]:
        if any("product" in objective.title.lower() for objective in okrs.objectives):
            return []
        return [
            SuggestionDraft(
                severity=Severity.LOW,
                text="Add an objective for product development milestones.",
                operation=OperationName.ADD_PRODUCT_DEVELOPMENT_OBJECTIVE,
            )
        ]


class SensitivityAnalysisSuggestion(BaseSuggestionRule):
    name = "sensitivity_analysis_missing"
    kind = DocumentKind.FINANCIAL

    def evaluate(self, financial: FinancialContent) -> list[SuggestionDraft]:
        if financial.sensitivity_analysis:
            return []
        return [
            SuggestionDraft(
                severity=Severity.MEDIUM,
                text="Add a sensitivity analysis showing how revenue and profit react to changed assumptions.",
                operation=OperationName.ADD_SENSITIVITY_ANALYSIS,
            )
        ]


class MRRRealismSuggestion(BaseSuggestionRule):
    """MRR이 요금제 구성(가격 × 구독자)에서 계산한 값과 허용 오차 이상 다름."""

    name = "mrr_unrealistic"
    kind = DocumentKind.FINANCIAL

    def __init__(self, tolerance: Optional[float] = None):
        self._tolerance = tolerance

    @property
    def tolerance(self) -> float:
        if self._tolerance is None:
            return get_settings().mrr_tolerance
        return self._tolerance

    def evaluate(self, financial: FinancialContent) -> list[SuggestionDraft]:
        stated = financial.revenue.mrr
        derived = financial.revenue.tier_mrr()
        if not financial.revenue.subscriptions or derived == 0:
            return []
        if abs(stated - derived) <= self.tolerance * derived:
            return []
        return [
            SuggestionDraft(
                severity=Severity.LOW,
                text=(
                    f"Financial projection shows {format_money(stated)} MRR but the subscription "
                    f"tier mix supports {format_money(derived)}."
                ),
                operation=OperationName.ADJUST_MRR_TARGET,
                params={"mrr": derived},
                fingerprint=(stated, derived),
            )
        ]


class RiskManagementSuggestion(BaseSuggestionRule):
    name = "risk_management_missing"
    kind = DocumentKind.CANVAS

    def evaluate(self, canvas: CanvasContent) -> list[SuggestionDraft]:
        if canvas.risk_management:
            return []
        return [
            SuggestionDraft(
                severity=Severity.LOW,
                text="Add risk management strategies to the business model.",
                operation=OperationName.ADD_RISK_MANAGEMENT,
            )
        ]


def default_suggestion_rules() -> tuple[BaseSuggestionRule, ...]:
    return (
        StrategicPrioritiesSuggestion(),
        CompetitiveAnalysisSuggestion(),
        ProductDevelopmentSuggestion(),
        SensitivityAnalysisSuggestion(),
        MRRRealismSuggestion(),
        RiskManagementSuggestion(),
    )


class SuggestionSource:
    """단일 문서 제안 규칙 레지스트리 실행기."""

    def __init__(self, rules: Optional[Iterable[BaseSuggestionRule]] = None):
        self._rules = tuple(rules) if rules is not None else default_suggestion_rules()

    def suggest(self, documents: Mapping[DocumentKind, Document]) -> list[Suggestion]:
        suggestions: list[Suggestion] = []
        seen: set[str] = set()

        for rule in self._rules:
            document = documents.get(rule.kind)
            if document is None or document.is_empty():
                continue

            try:
                built = [self._to_suggestion(rule, draft) for draft in rule.evaluate(document.content)]
            except Exception as e:
                error = RuleEvaluationError(
                    f"제안 규칙 평가 실패: {rule.name}",
                    details={"rule": rule.name, "error": f"{type(e).__name__}: {e}"},
                )
                logger.warning(f"[Suggestions] {error.message} ({type(e).__name__}: {e})")
                continue

            for suggestion in built:
                if suggestion.id in seen:
                    continue
                seen.add(suggestion.id)
                suggestions.append(suggestion)

        return suggestions

    @staticmethod
    def _to_suggestion(rule: BaseSuggestionRule, draft: SuggestionDraft) -> Suggestion:
        return Suggestion(
            id=make_finding_id("sug", rule.name, [rule.kind, *draft.fingerprint]),
            rule=rule.name,
            document_kind=rule.kind,
            severity=draft.severity,
            text=draft.text,
            action=Action(document_kind=rule.kind, operation=draft.operation, params=draft.params),
        )
