"""
템플릿 기반 DocumentAuthor.

위저드 답변 4개에서 한 벌의 수치(매출, 이익률, 구독자 수)를 정한 뒤
그 값만으로 문서 4종을 함께 만듭니다. 문서마다 같은 값을 같은 표기로 쓰므로
생성 직후 정합성 검사에서 불일치가 나오지 않습니다.

생성 순서:
1. parse_answers()로 입력값 결정
2. 재무 추정 (요금제 배분 → 구독 매출 → 파일럿 → 비용 → 수익성)
3. Strategy 목표 (매출·이익률·지표 목표)
4. OKRs (Strategy 목표의 지표를 핵심 결과로 포함, 재무와 같은 매출·구독자 수)
5. Canvas (구독자 목표를 반영한 고객 획득 채널 포함)
"""

import logging
from typing import Mapping

from strategy_sync.layers.consistency.claims import TRACKED_METRICS
from strategy_sync.models import (
    CanvasContent,
    Document,
    DocumentKind,
    FinancialContent,
    Objective,
    OKRContent,
    StrategicApproach,
    StrategyContent,
)
from strategy_sync.utils.financials import DEFAULT_TIERS, default_tiers, rebalance
from strategy_sync.utils.money import format_money, format_percent

from .answer_parser import StrategyInputs, parse_answers

logger = logging.getLogger(__name__)


PROFITABILITY_GOALS = {
    StrategicApproach.CONSERVATIVE: "Achieve sustainable profitability within 1 year",
    StrategicApproach.MODERATE: "Reach operational profitability within 2 years",
    StrategicApproach.AGGRESSIVE: "Scale rapidly while reaching profitability within 3 years",
}

GUIDING_PRINCIPLES = [
    "Focus on Integration: Always align strategy with financial and operational realities",
    "Embrace Systems Thinking: Use holistic analysis to anticipate market dynamics",
    "Prioritize Customer Success: Design solutions for long-term retention and ROI",
]

SATISFACTION_TARGET = 90.0
PLANNING_CYCLE_TARGET = 50.0


class TemplateDocumentAuthor:
    """답변 → 서로 정합한 Canvas / Strategy / OKRs / FinancialProjection."""

    async def generate(self, answers: Mapping[int, str]) -> dict[DocumentKind, Document]:
        inputs = parse_answers(answers)
        logger.info(
            f"[Author] 문서 생성: 매출 {format_money(inputs.revenue_target)}, "
            f"이익률 {format_percent(inputs.profit_margin)}, 구독자 {inputs.subscriber_target}"
        )

        financial = self.build_financial(inputs)
        contents = {
            DocumentKind.CANVAS: self.build_canvas(inputs),
            DocumentKind.STRATEGY: self.build_strategy(inputs),
            DocumentKind.OKRS: self.build_okrs(inputs, financial),
            DocumentKind.FINANCIAL: financial,
        }
        return {kind: Document.create(kind, content) for kind, content in contents.items()}

    def build_financial(self, inputs: StrategyInputs) -> FinancialContent:
        financial = FinancialContent(scenarios=[s.model_copy() for s in inputs.scenarios])
        financial.revenue.subscriptions = default_tiers(inputs.subscriber_target)
        rebalance(
            financial,
            total_revenue=inputs.revenue_target,
            profit_margin=inputs.profit_margin,
        )
        financial.revenue.mrr = financial.revenue.tier_mrr()

        for scenario in financial.scenarios:
            net_profit = int(round(scenario.revenue * scenario.profit_margin / 100))
            financial.sensitivity_analysis.append(
                f"{scenario.name.capitalize()} scenario: {format_money(scenario.revenue)} at "
                f"{format_percent(scenario.profit_margin)} margin → net profit {format_money(net_profit)}"
            )
        return financial

    def build_strategy(self, inputs: StrategyInputs) -> StrategyContent:
        segment = inputs.customer_segments[0].lower()
        value = inputs.value_proposition[0].lower()
        approach = inputs.approach.value

        return StrategyContent(
            vision=(
                f"To become the standard integrated platform that empowers {segment} "
                f"with sustainable, data-driven success through our {value}."
            ),
            mission=(
                f"We enable organizations to adapt swiftly and align their strategic decisions "
                f"using a {approach} approach to growth and innovation."
            ),
            business_goals=[
                PROFITABILITY_GOALS[inputs.approach],
                f"Achieve {format_money(inputs.revenue_target)} in first-year revenue",
                f"Sustain a {format_percent(inputs.profit_margin)} profit margin in the expected scenario",
                f"Demonstrate {format_percent(PLANNING_CYCLE_TARGET)} reduction in planning cycle times for users",
                f"Attain customer satisfaction rating over {format_percent(SATISFACTION_TARGET)} within 18 months",
            ],
            guiding_principles=list(GUIDING_PRINCIPLES),
        )

    def build_okrs(self, inputs: StrategyInputs, financial: FinancialContent) -> OKRContent:
        satisfaction = TRACKED_METRICS["customer_satisfaction"]
        planning_cycle = TRACKED_METRICS["planning_cycle"]

        objectives = [
            Objective(
                title=f"Achieve {format_money(financial.revenue.total)} in Total First-Year Revenue",
                rationale="Secure short-term financial viability and prove the business model.",
                key_results=[
                    f"Generate a minimum of {format_money(financial.revenue.mrr)} in Monthly Recurring "
                    f"Revenue (MRR) by Month 12",
                    "Close at least 8 high-ticket pilot engagements (≥ €5,000 each) within Year 1",
                    "Convert at least 40% of new signups to Pro or Enterprise tiers on an annual plan",
                ],
            ),
            Objective(
                title="Grow Subscription Base & Reduce Churn",
                rationale=(
                    "Establish recurring subscription income through focused customer "
                    "acquisition and stable retention."
                ),
                key_results=[
                    f"Reach {financial.revenue.subscriber_total():,} total paying subscribers "
                    f"by end of Year 1 (across all tiers)",
                    "Maintain a monthly churn rate below 5%",
                    "Attain ≥ 40% of subscribers on Pro or Enterprise plans within 6 months",
                ],
            ),
            Objective(
                title=satisfaction.objective_title,
                rationale="Ensure high user satisfaction that drives retention and referrals.",
                key_results=[
                    satisfaction.key_result_template.format(value=format_percent(SATISFACTION_TARGET)),
                    planning_cycle.key_result_template.format(value=format_percent(PLANNING_CYCLE_TARGET)),
                    "Achieve a Net Promoter Score (NPS) ≥ 50 by end of Year 1",
                    "Collect at least 10 customer case studies showing measurable ROI",
                ],
            ),
        ]

        if inputs.objectives:
            objectives.append(
                Objective(
                    title="Deliver Founder-Defined Priorities",
                    rationale="Goals stated during strategy setup.",
                    key_results=list(inputs.objectives),
                )
            )
        return OKRContent(objectives=objectives)

    def build_canvas(self, inputs: StrategyInputs) -> CanvasContent:
        tiers = ", ".join(f"{name} {format_money(price)}/mo" for name, price, _ in DEFAULT_TIERS)
        segments = inputs.customer_segments

        return CanvasContent(
            customer_segments=list(segments),
            pain_points=list(inputs.pain_points),
            value_proposition=list(inputs.value_proposition),
            revenue_model=[
                f"Subscription tiers: {tiers}",
                "Pilot engagements and consulting (€5,000 - €10,000 each)",
            ],
            cost_structure=[
                "Product development (60% of costs)",
                "Marketing and sales (25% of costs)",
                "Operations and infrastructure (15% of costs)",
            ],
            customer_acquisition=[
                f"Founder-led outreach and webinars to reach {inputs.subscriber_target:,} paying subscribers",
                "Targeted LinkedIn campaigns for startup founders and scale-up CEOs",
                "Partnerships with startup accelerators and VC networks",
            ],
            where_to_play=[
                f"Focus on {segments[0].lower()} and {segments[1].lower() if len(segments) > 1 else 'related markets'}"
            ],
            how_to_win=[
                f"Differentiate through {inputs.value_proposition[0].lower()} with a "
                f"{inputs.approach.value} growth approach"
            ],
            approach=inputs.approach,
        )
