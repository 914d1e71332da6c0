"""
문서 변환 함수와 (문서 종류, 연산) 레지스트리.

모든 변환 함수는 (복사된 콘텐츠, 파라미터)를 받아 콘텐츠를 반환하며,
"이미 반영되어 있는지"를 먼저 확인하므로 두 번 적용해도 결과가 같습니다.
"""

from typing import Any, Callable, Mapping

from strategy_sync.layers.consistency.claims import (
    TRACKED_METRICS,
    MetricTarget,
    mentions_all,
    revenue_amount_matches,
    revenue_figures,
    significant_words,
    tracks_metric,
)
from strategy_sync.models import (
    CanvasContent,
    CompetitiveAnalysis,
    DocumentKind,
    FinancialContent,
    Objective,
    OKRContent,
    OperationName,
    StrategicPriority,
    StrategyContent,
)
from strategy_sync.utils.financials import churn_sensitivity, rebalance, set_subscribers
from strategy_sync.utils.money import format_money, format_percent


MutationFn = Callable[[Any, Mapping[str, Any]], Any]


ACQUISITION_CHANNELS = [
    "Targeted LinkedIn Ads for startup founders / scale-up CEOs",
    "Bi-weekly live demo webinars",
    "Partnerships with 2-3 startup accelerators or VC networks",
    "Direct founder-led outreach to potential Enterprise clients",
    "Thought leadership content on strategy + systems thinking",
]

RISK_MANAGEMENT = [
    "AI regulation & data privacy: GDPR-first data handling and regular compliance reviews",
    "Economic climate: keep 6 months of runway and a low fixed-cost base",
    "Competitive imitation: ship integrations and workflow depth that are hard to copy",
    "Churn traps: quarterly customer health reviews with early-warning usage signals",
]

MARKET_LANDSCAPE = [
    "Generic project management tools cover execution but not strategy",
    "Consulting firms deliver strategy work at high cost and slow cadence",
    "Point solutions for OKRs or financial modelling stay disconnected from each other",
]

COMPETITIVE_ADVANTAGE = [
    "One workspace that keeps Canvas, Strategy, OKRs and financials aligned",
    "Guided authoring that produces a consistent plan in minutes",
    "Continuous consistency checks with one-click fixes",
]

PRODUCT_DEVELOPMENT_OBJECTIVE = Objective(
    title="Ship a Market-Ready Product Roadmap",
    rationale="Turn the strategy into a product customers can adopt without hand-holding.",
    key_results=[
        "Release the core planning workspace to all paying tiers by end of Q2",
        "Launch at least 3 third-party integrations by end of Q3",
        "Keep critical bug resolution time under 48 hours",
    ],
)


# ---------------------------------------------------------------------------
# OKRs
# ---------------------------------------------------------------------------

def add_key_result(okrs: OKRContent, params: Mapping[str, Any]) -> OKRContent:
    target = MetricTarget(metric=params["metric"], value=float(params["value"]))
    if tracks_metric(okrs.text_lines(), target):
        return okrs

    metric = TRACKED_METRICS[target.metric]
    key_result = metric.key_result_template.format(value=format_percent(target.value))
    for objective in okrs.objectives:
        if objective.title.lower() == metric.objective_title.lower():
            objective.key_results.append(key_result)
            return okrs

    okrs.objectives.append(
        Objective(
            title=metric.objective_title,
            rationale=f"Track the {metric.label.lower()} target set in the strategy.",
            key_results=[key_result],
        )
    )
    return okrs


def add_priority_objective(okrs: OKRContent, params: Mapping[str, Any]) -> OKRContent:
    priority = str(params["priority"])
    words = significant_words(priority)
    for objective in okrs.objectives:
        text = " ".join([objective.title, objective.rationale, *objective.key_results])
        if mentions_all(text, words):
            return okrs

    okrs.objectives.append(
        Objective(
            title=f"Advance {priority}",
            rationale=f"Deliver on the '{priority}' strategic priority.",
            key_results=[
                f"Launch the first {priority.lower()} initiatives by end of Q2",
                f"Review {priority.lower()} progress in every quarterly strategy review",
            ],
        )
    )
    return okrs


def align_revenue_key_result(okrs: OKRContent, params: Mapping[str, Any]) -> OKRContent:
    revenue = int(params["revenue"])

    def align(line: str) -> str:
        figures = revenue_figures(line)
        if not figures or all(figure == revenue for figure in figures):
            return line
        # 매출 금액 토큰만 교체 (단가, 파일럿 규모 등은 유지)
        for match in reversed(revenue_amount_matches(line)):
            replacement = format_money(revenue, match.group("currency"))
            line = line[:match.start()] + replacement + line[match.end():]
        return line

    claimed = False
    for objective in okrs.objectives:
        claimed = claimed or bool(revenue_figures(objective.title))
        objective.title = align(objective.title)
        aligned = []
        for key_result in objective.key_results:
            claimed = claimed or bool(revenue_figures(key_result))
            aligned.append(align(key_result))
        objective.key_results = aligned

    if not claimed:
        okrs.objectives.insert(
            0,
            Objective(
                title=f"Achieve {format_money(revenue)} in Total First-Year Revenue",
                rationale="Keep the revenue objective aligned with the financial projection.",
            ),
        )
    return okrs


def add_product_development_objective(okrs: OKRContent, params: Mapping[str, Any]) -> OKRContent:
    if any("product" in objective.title.lower() for objective in okrs.objectives):
        return okrs
    okrs.objectives.append(PRODUCT_DEVELOPMENT_OBJECTIVE.model_copy(deep=True))
    return okrs


# ---------------------------------------------------------------------------
# Canvas
# ---------------------------------------------------------------------------

def add_acquisition_channels(canvas: CanvasContent, params: Mapping[str, Any]) -> CanvasContent:
    existing = {channel.lower() for channel in canvas.customer_acquisition}
    for channel in ACQUISITION_CHANNELS:
        if channel.lower() not in existing:
            canvas.customer_acquisition.append(channel)
    return canvas


def add_risk_management(canvas: CanvasContent, params: Mapping[str, Any]) -> CanvasContent:
    existing = {risk.lower() for risk in canvas.risk_management}
    for risk in RISK_MANAGEMENT:
        if risk.lower() not in existing:
            canvas.risk_management.append(risk)
    return canvas


# ---------------------------------------------------------------------------
# Strategy
# ---------------------------------------------------------------------------

def add_strategic_priorities(strategy: StrategyContent, params: Mapping[str, Any]) -> StrategyContent:
    name = str(params.get("priority") or "Customer Acquisition")
    if any(priority.name.lower() == name.lower() for priority in strategy.strategic_priorities):
        return strategy
    strategy.strategic_priorities.append(
        StrategicPriority(name=name, initiatives=list(ACQUISITION_CHANNELS))
    )
    return strategy


def add_competitive_analysis(strategy: StrategyContent, params: Mapping[str, Any]) -> StrategyContent:
    if strategy.competitive_analysis is not None:
        return strategy
    strategy.competitive_analysis = CompetitiveAnalysis(
        market_landscape=list(MARKET_LANDSCAPE),
        competitive_advantage=list(COMPETITIVE_ADVANTAGE),
    )
    return strategy


# ---------------------------------------------------------------------------
# Financial projection
# ---------------------------------------------------------------------------

def align_revenue_target(financial: FinancialContent, params: Mapping[str, Any]) -> FinancialContent:
    rebalance(financial, total_revenue=int(params["revenue"]))
    return financial


def align_profit_margin(financial: FinancialContent, params: Mapping[str, Any]) -> FinancialContent:
    rebalance(financial, profit_margin=float(params["margin"]))
    return financial


def align_subscriber_projection(financial: FinancialContent, params: Mapping[str, Any]) -> FinancialContent:
    set_subscribers(financial, int(params["subscribers"]))
    rebalance(financial)
    return financial


def add_sensitivity_analysis(financial: FinancialContent, params: Mapping[str, Any]) -> FinancialContent:
    if financial.sensitivity_analysis:
        return financial

    lines = []
    mrr = financial.revenue.mrr or financial.revenue.tier_mrr()
    if mrr:
        for name, churn, year_end_mrr, percent in churn_sensitivity(mrr):
            lines.append(
                f"{name}: {format_percent(churn)} monthly churn → year-end MRR "
                f"{format_money(year_end_mrr)} ({percent}% of target)"
            )
    for scenario in financial.scenarios:
        net_profit = int(round(scenario.revenue * scenario.profit_margin / 100))
        lines.append(
            f"{scenario.name.capitalize()} scenario: {format_money(scenario.revenue)} at "
            f"{format_percent(scenario.profit_margin)} margin → net profit {format_money(net_profit)}"
        )
    if not lines:
        total = financial.revenue.total
        for label, factor in (("Revenue -20%", 0.8), ("Revenue +20%", 1.2)):
            lines.append(f"{label}: {format_money(int(round(total * factor)))}")
    financial.sensitivity_analysis = lines
    return financial


def adjust_mrr_target(financial: FinancialContent, params: Mapping[str, Any]) -> FinancialContent:
    mrr = params.get("mrr")
    financial.revenue.mrr = int(mrr) if mrr is not None else financial.revenue.tier_mrr()
    return financial


MUTATION_REGISTRY: dict[tuple[DocumentKind, OperationName], MutationFn] = {
    (DocumentKind.OKRS, OperationName.ADD_KEY_RESULT): add_key_result,
    (DocumentKind.OKRS, OperationName.ADD_PRIORITY_OBJECTIVE): add_priority_objective,
    (DocumentKind.OKRS, OperationName.ALIGN_REVENUE_KEY_RESULT): align_revenue_key_result,
    (DocumentKind.OKRS, OperationName.ADD_PRODUCT_DEVELOPMENT_OBJECTIVE): add_product_development_objective,
    (DocumentKind.CANVAS, OperationName.ADD_ACQUISITION_CHANNELS): add_acquisition_channels,
    (DocumentKind.CANVAS, OperationName.ADD_RISK_MANAGEMENT): add_risk_management,
    (DocumentKind.STRATEGY, OperationName.ADD_STRATEGIC_PRIORITIES): add_strategic_priorities,
    (DocumentKind.STRATEGY, OperationName.ADD_COMPETITIVE_ANALYSIS): add_competitive_analysis,
    (DocumentKind.FINANCIAL, OperationName.ALIGN_REVENUE_TARGET): align_revenue_target,
    (DocumentKind.FINANCIAL, OperationName.ALIGN_PROFIT_MARGIN): align_profit_margin,
    (DocumentKind.FINANCIAL, OperationName.ALIGN_SUBSCRIBER_PROJECTION): align_subscriber_projection,
    (DocumentKind.FINANCIAL, OperationName.ADD_SENSITIVITY_ANALYSIS): add_sensitivity_analysis,
    (DocumentKind.FINANCIAL, OperationName.ADJUST_MRR_TARGET): adjust_mrr_target,
}
