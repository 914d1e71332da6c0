"""
문서 쌍 정합성 규칙.

각 규칙은 검사하는 문서 종류 쌍(kinds)을 선언하고, 두 문서의 구조화 콘텐츠를 받아
위반 사항(RuleFinding) 목록을 반환합니다. 규칙은 서로 독립적이며 순서와 무관합니다.

id 생성, 빈 문서 건너뛰기, 예외 격리는 ConsistencyChecker가 담당합니다.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from strategy_sync.models import (
    Action,
    CanvasContent,
    DocumentKind,
    FinancialContent,
    OKRContent,
    OperationName,
    Severity,
    StrategyContent,
)
from strategy_sync.utils.money import format_money, format_percent

from .claims import (
    margin_targets,
    mentions_all,
    metric_targets,
    revenue_claims,
    same_value,
    significant_words,
    subscriber_claims,
    tracks_metric,
)


@dataclass(frozen=True)
class RuleFinding:
    """규칙 하나가 감지한 위반 (id 부여 전)."""

    source_kind: DocumentKind
    target_kind: DocumentKind
    severity: Severity
    text: str
    action: Action
    fingerprint: tuple[Any, ...] = field(default_factory=tuple)


class BaseConsistencyRule(ABC):
    """
    문서 쌍 규칙 기본 클래스.

    Attributes:
        name: 규칙 이름 (id 해시 입력)
        kinds: 검사하는 문서 종류 쌍. evaluate()는 이 순서대로 콘텐츠를 받습니다.
    """

    name: str = ""
    kinds: tuple[DocumentKind, DocumentKind]

    @abstractmethod
    def evaluate(self, first: Any, second: Any) -> list[RuleFinding]:
        """두 문서 콘텐츠를 검사하여 위반 목록 반환."""
        pass


class StrategyGoalMetricRule(BaseConsistencyRule):
    """Strategy 목표의 비율 지표 목표치가 OKR 핵심 결과에 있어야 함."""

    name = "strategy_goal_metric"
    kinds = (DocumentKind.STRATEGY, DocumentKind.OKRS)

    def evaluate(self, strategy: StrategyContent, okrs: OKRContent) -> list[RuleFinding]:
        findings = []
        okr_lines = okrs.text_lines()
        for goal in strategy.business_goals:
            for target in metric_targets(goal):
                if tracks_metric(okr_lines, target):
                    continue
                metric = target.definition
                findings.append(
                    RuleFinding(
                        source_kind=DocumentKind.STRATEGY,
                        target_kind=DocumentKind.OKRS,
                        severity=metric.severity,
                        text=(
                            f"Strategy sets a {metric.label.lower()} target of "
                            f"{format_percent(target.value)} but no OKR key result tracks it."
                        ),
                        action=Action(
                            document_kind=DocumentKind.OKRS,
                            operation=OperationName.ADD_KEY_RESULT,
                            params={"metric": metric.key, "value": target.value},
                        ),
                        fingerprint=(metric.key, target.value),
                    )
                )
        return findings


class StrategicPriorityCoverageRule(BaseConsistencyRule):
    """Strategy의 전략적 우선순위마다 이를 다루는 OKR 목표가 있어야 함."""

    name = "strategic_priority_coverage"
    kinds = (DocumentKind.STRATEGY, DocumentKind.OKRS)

    def evaluate(self, strategy: StrategyContent, okrs: OKRContent) -> list[RuleFinding]:
        findings = []
        objective_texts = [
            " ".join([objective.title, objective.rationale, *objective.key_results])
            for objective in okrs.objectives
        ]
        for priority in strategy.strategic_priorities:
            words = significant_words(priority.name)
            if not words:
                continue
            if any(mentions_all(text, words) for text in objective_texts):
                continue
            findings.append(
                RuleFinding(
                    source_kind=DocumentKind.STRATEGY,
                    target_kind=DocumentKind.OKRS,
                    severity=Severity.MEDIUM,
                    text=(
                        f"Strategic priority '{priority.name}' is not reflected in any OKR objective."
                    ),
                    action=Action(
                        document_kind=DocumentKind.OKRS,
                        operation=OperationName.ADD_PRIORITY_OBJECTIVE,
                        params={"priority": priority.name},
                    ),
                    fingerprint=tuple(words),
                )
            )
        return findings


class SubscriberAcquisitionRule(BaseConsistencyRule):
    """OKR 구독자 목표가 있으면 Canvas에 고객 획득 채널이 있어야 함."""

    name = "subscriber_acquisition"
    kinds = (DocumentKind.CANVAS, DocumentKind.OKRS)

    def evaluate(self, canvas: CanvasContent, okrs: OKRContent) -> list[RuleFinding]:
        targets = subscriber_claims(okrs.text_lines())
        if not targets or canvas.customer_acquisition:
            return []
        return [
            RuleFinding(
                source_kind=DocumentKind.OKRS,
                target_kind=DocumentKind.CANVAS,
                severity=Severity.MEDIUM,
                text=(
                    f"OKRs target {targets[0]:,} subscribers but the Canvas "
                    f"defines no customer acquisition channels."
                ),
                action=Action(
                    document_kind=DocumentKind.CANVAS,
                    operation=OperationName.ADD_ACQUISITION_CHANNELS,
                    params={"subscribers": targets[0]},
                ),
                fingerprint=(targets[0],),
            )
        ]


class StrategyRevenueRule(BaseConsistencyRule):
    """Strategy 목표의 첫해 매출 금액이 모두 재무 추정 총매출과 같아야 함."""

    name = "strategy_revenue"
    kinds = (DocumentKind.FINANCIAL, DocumentKind.STRATEGY)

    def evaluate(self, financial: FinancialContent, strategy: StrategyContent) -> list[RuleFinding]:
        projected = financial.revenue.total
        mismatched = [figure for figure in revenue_claims(strategy.business_goals) if figure != projected]
        if not mismatched:
            return []
        target = mismatched[0]
        return [
            RuleFinding(
                source_kind=DocumentKind.STRATEGY,
                target_kind=DocumentKind.FINANCIAL,
                severity=Severity.HIGH,
                text=(
                    f"Strategy targets {format_money(target)} in revenue but the financial "
                    f"projection totals {format_money(financial.revenue.total)}."
                ),
                action=Action(
                    document_kind=DocumentKind.FINANCIAL,
                    operation=OperationName.ALIGN_REVENUE_TARGET,
                    params={"revenue": target},
                ),
                fingerprint=(target,),
            )
        ]


class StrategyProfitMarginRule(BaseConsistencyRule):
    """Strategy 목표의 이익률이 재무 추정 이익률과 같아야 함."""

    name = "strategy_profit_margin"
    kinds = (DocumentKind.FINANCIAL, DocumentKind.STRATEGY)

    def evaluate(self, financial: FinancialContent, strategy: StrategyContent) -> list[RuleFinding]:
        margins: list[float] = []
        for goal in strategy.business_goals:
            margins.extend(margin_targets(goal))
        if not margins:
            return []
        projected = financial.profitability.profit_margin
        if any(same_value(margin, projected) for margin in margins):
            return []
        target = margins[0]
        return [
            RuleFinding(
                source_kind=DocumentKind.STRATEGY,
                target_kind=DocumentKind.FINANCIAL,
                severity=Severity.MEDIUM,
                text=(
                    f"Strategy targets a {format_percent(target)} profit margin but the financial "
                    f"projection shows {format_percent(projected)}."
                ),
                action=Action(
                    document_kind=DocumentKind.FINANCIAL,
                    operation=OperationName.ALIGN_PROFIT_MARGIN,
                    params={"margin": target},
                ),
                fingerprint=(target,),
            )
        ]


class OKRRevenueRule(BaseConsistencyRule):
    """OKR의 첫해 매출 목표가 모두 재무 추정 총매출과 같아야 함."""

    name = "okr_revenue"
    kinds = (DocumentKind.OKRS, DocumentKind.FINANCIAL)

    def evaluate(self, okrs: OKRContent, financial: FinancialContent) -> list[RuleFinding]:
        projected = financial.revenue.total
        mismatched = [figure for figure in revenue_claims(okrs.text_lines()) if figure != projected]
        if not mismatched:
            return []
        return [
            RuleFinding(
                source_kind=DocumentKind.FINANCIAL,
                target_kind=DocumentKind.OKRS,
                severity=Severity.MEDIUM,
                text=(
                    f"OKRs target {format_money(mismatched[0])} in revenue but the financial "
                    f"projection totals {format_money(projected)}."
                ),
                action=Action(
                    document_kind=DocumentKind.OKRS,
                    operation=OperationName.ALIGN_REVENUE_KEY_RESULT,
                    params={"revenue": projected},
                ),
                fingerprint=(tuple(sorted(mismatched)), projected),
            )
        ]


class OKRSubscriberRule(BaseConsistencyRule):
    """OKR 구독자 목표가 재무 추정 요금제별 구독자 합계와 같아야 함."""

    name = "okr_subscribers"
    kinds = (DocumentKind.OKRS, DocumentKind.FINANCIAL)

    def evaluate(self, okrs: OKRContent, financial: FinancialContent) -> list[RuleFinding]:
        targets = subscriber_claims(okrs.text_lines())
        projected = financial.revenue.subscriber_total()
        if not targets or projected in targets:
            return []
        target = targets[0]
        return [
            RuleFinding(
                source_kind=DocumentKind.OKRS,
                target_kind=DocumentKind.FINANCIAL,
                severity=Severity.MEDIUM,
                text=(
                    f"OKRs target {target:,} subscribers but the financial projection "
                    f"assumes {projected:,}."
                ),
                action=Action(
                    document_kind=DocumentKind.FINANCIAL,
                    operation=OperationName.ALIGN_SUBSCRIBER_PROJECTION,
                    params={"subscribers": target},
                ),
                fingerprint=(target,),
            )
        ]


DEFAULT_RULES: tuple[BaseConsistencyRule, ...] = (
    StrategyGoalMetricRule(),
    StrategicPriorityCoverageRule(),
    SubscriberAcquisitionRule(),
    StrategyRevenueRule(),
    StrategyProfitMarginRule(),
    OKRRevenueRule(),
    OKRSubscriberRule(),
)
