"""
문서 종류별 구조화 콘텐츠 모델입니다.

각 모델은 JSON 직렬화 시 camelCase 별칭(customerSegments, keyResults 등)을 쓰고,
파이썬 코드에서는 snake_case 필드명으로 접근합니다.

모든 콘텐츠 모델은 두 가지를 제공합니다:
- is_empty(): 프로젝트 생성 직후의 기본(빈) 상태인지 여부
- to_markdown(): 화면 표시용 렌더링 (콘텐츠만으로 재생성 가능)
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from strategy_sync.utils.money import format_money, format_percent


class StrategicApproach(str, Enum):
    """
    전략적 접근 방식.

    - CONSERVATIVE: 안정성과 꾸준한 수익성 우선
    - MODERATE: 성장과 리스크 관리의 균형
    - AGGRESSIVE: 높은 리스크를 감수한 빠른 성장
    """
    CONSERVATIVE = "conservative"
    MODERATE = "moderate"
    AGGRESSIVE = "aggressive"


class ContentModel(BaseModel):
    """콘텐츠 모델 공통 설정 (camelCase 별칭 허용)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class BaseDocumentContent(ContentModel, ABC):
    """문서 한 종류의 최상위 콘텐츠."""

    @abstractmethod
    def is_empty(self) -> bool:
        """기본(빈) 상태인지 여부."""
        pass

    @abstractmethod
    def to_markdown(self) -> str:
        """화면 표시용 Markdown."""
        pass


def _bullets(lines: list[str], title: str, items: list[str]) -> None:
    if not items:
        return
    lines.append(f"## {title}")
    lines.append("")
    for item in items:
        lines.append(f"- {item}")
    lines.append("")


# ---------------------------------------------------------------------------
# Canvas
# ---------------------------------------------------------------------------

class CanvasContent(BaseDocumentContent):
    """Business Model Canvas."""

    customer_segments: list[str] = Field(default_factory=list, description="고객 세그먼트")
    value_proposition: list[str] = Field(default_factory=list, description="가치 제안")
    pain_points: list[str] = Field(default_factory=list, description="해결하는 고객 문제")
    revenue_model: list[str] = Field(default_factory=list, description="수익 모델")
    cost_structure: list[str] = Field(default_factory=list, description="비용 구조")
    customer_acquisition: list[str] = Field(default_factory=list, description="고객 획득 채널")
    where_to_play: list[str] = Field(default_factory=list, description="Where to Play")
    how_to_win: list[str] = Field(default_factory=list, description="How to Win")
    approach: Optional[StrategicApproach] = Field(default=None, description="전략적 접근 방식")
    risk_management: list[str] = Field(default_factory=list, description="리스크 관리")

    def is_empty(self) -> bool:
        return self.approach is None and not any(
            [
                self.customer_segments,
                self.value_proposition,
                self.pain_points,
                self.revenue_model,
                self.cost_structure,
                self.customer_acquisition,
                self.where_to_play,
                self.how_to_win,
                self.risk_management,
            ]
        )

    def to_markdown(self) -> str:
        lines = ["# Business Model Canvas", ""]
        _bullets(lines, "Customer Segments", self.customer_segments)
        _bullets(lines, "Pain Points", self.pain_points)
        _bullets(lines, "Value Proposition", self.value_proposition)
        _bullets(lines, "Revenue Model", self.revenue_model)
        _bullets(lines, "Cost Structure", self.cost_structure)
        _bullets(lines, "Customer Acquisition", self.customer_acquisition)
        if self.approach or self.where_to_play or self.how_to_win:
            lines.append("## Strategy")
            lines.append("")
            if self.approach:
                lines.append(f"**Approach:** {self.approach.value.capitalize()}")
                lines.append("")
            _bullets(lines, "Where to Play", self.where_to_play)
            _bullets(lines, "How to Win", self.how_to_win)
        _bullets(lines, "Risk Management", self.risk_management)
        return "\n".join(lines).rstrip() + "\n"


# ---------------------------------------------------------------------------
# Strategy
# ---------------------------------------------------------------------------

class StrategicPriority(ContentModel):
    name: str = Field(..., description="우선순위 이름")
    initiatives: list[str] = Field(default_factory=list, description="세부 실행 과제")


class CompetitiveAnalysis(ContentModel):
    market_landscape: list[str] = Field(default_factory=list, description="시장 현황")
    competitive_advantage: list[str] = Field(default_factory=list, description="경쟁 우위")


class StrategyContent(BaseDocumentContent):
    """Strategy 문서."""

    vision: str = Field(default="", description="비전")
    mission: str = Field(default="", description="미션")
    business_goals: list[str] = Field(default_factory=list, description="사업 목표")
    guiding_principles: list[str] = Field(default_factory=list, description="전략 원칙")
    strategic_priorities: list[StrategicPriority] = Field(
        default_factory=list, description="전략적 우선순위"
    )
    competitive_analysis: Optional[CompetitiveAnalysis] = Field(
        default=None, description="경쟁 분석"
    )

    def is_empty(self) -> bool:
        return not (
            self.vision.strip()
            or self.mission.strip()
            or self.business_goals
            or self.guiding_principles
            or self.strategic_priorities
            or self.competitive_analysis
        )

    def to_markdown(self) -> str:
        lines = ["# Strategy", ""]
        if self.vision:
            lines.extend(["## Vision", "", self.vision, ""])
        if self.mission:
            lines.extend(["## Mission", "", self.mission, ""])
        _bullets(lines, "Business Goals", self.business_goals)
        _bullets(lines, "Guiding Principles", self.guiding_principles)
        if self.strategic_priorities:
            lines.extend(["## Key Strategic Priorities", ""])
            for priority in self.strategic_priorities:
                lines.append(f"### {priority.name}")
                lines.append("")
                for initiative in priority.initiatives:
                    lines.append(f"- {initiative}")
                lines.append("")
        if self.competitive_analysis:
            lines.extend(["## Competitive Analysis", ""])
            _bullets(lines, "Market Landscape", self.competitive_analysis.market_landscape)
            _bullets(lines, "Competitive Advantage", self.competitive_analysis.competitive_advantage)
        return "\n".join(lines).rstrip() + "\n"


# ---------------------------------------------------------------------------
# OKRs
# ---------------------------------------------------------------------------

class Objective(ContentModel):
    title: str = Field(..., description="목표")
    rationale: str = Field(default="", description="목표 설정 근거")
    key_results: list[str] = Field(default_factory=list, description="핵심 결과")

    def text_lines(self) -> list[str]:
        """목표 제목과 핵심 결과 (수치 검사 대상)."""
        return [self.title, *self.key_results]


class OKRContent(BaseDocumentContent):
    """Objectives & Key Results."""

    objectives: list[Objective] = Field(default_factory=list, description="목표 목록")

    def is_empty(self) -> bool:
        return not self.objectives

    def text_lines(self) -> list[str]:
        return [line for objective in self.objectives for line in objective.text_lines()]

    def to_markdown(self) -> str:
        lines = ["# Objectives & Key Results", ""]
        for number, objective in enumerate(self.objectives, start=1):
            lines.append(f"## Objective {number}: {objective.title}")
            lines.append("")
            if objective.rationale:
                lines.append(f"*{objective.rationale}*")
                lines.append("")
            for index, key_result in enumerate(objective.key_results, start=1):
                lines.append(f"{number}.{index}. {key_result}")
            lines.append("")
        return "\n".join(lines).rstrip() + "\n"


# ---------------------------------------------------------------------------
# Financial projection
# ---------------------------------------------------------------------------

class SubscriptionTier(ContentModel):
    tier: str = Field(..., description="요금제 이름")
    monthly_price: int = Field(..., ge=0, description="월 요금")
    subscribers: int = Field(default=0, ge=0, description="구독자 수")
    annual_revenue: int = Field(default=0, description="연간 매출")

    @property
    def monthly_revenue(self) -> int:
        return self.monthly_price * self.subscribers


class RevenueProjection(ContentModel):
    subscriptions: list[SubscriptionTier] = Field(default_factory=list)
    total_subscription: int = 0
    pilots: int = Field(default=0, description="파일럿/컨설팅 매출")
    total: int = Field(default=0, description="연간 총매출")
    mrr: int = Field(default=0, description="월 반복 매출 (MRR)")

    def subscriber_total(self) -> int:
        return sum(tier.subscribers for tier in self.subscriptions)

    def tier_mrr(self) -> int:
        return sum(tier.monthly_revenue for tier in self.subscriptions)


class CostProjection(ContentModel):
    development: int = 0
    marketing: int = 0
    operations: int = 0
    total: int = 0


class Profitability(ContentModel):
    total_revenue: int = 0
    total_costs: int = 0
    net_profit: int = 0
    profit_margin: float = 0.0


class FinancialScenario(ContentModel):
    name: str = Field(..., description="시나리오 이름 (optimistic/expected/pessimistic)")
    revenue: int = 0
    profit_margin: float = 0.0


class FinancialContent(BaseDocumentContent):
    """Financial Projection."""

    revenue: RevenueProjection = Field(default_factory=RevenueProjection)
    costs: CostProjection = Field(default_factory=CostProjection)
    profitability: Profitability = Field(default_factory=Profitability)
    scenarios: list[FinancialScenario] = Field(default_factory=list)
    sensitivity_analysis: list[str] = Field(default_factory=list)

    def is_empty(self) -> bool:
        return (
            self.revenue.total == 0
            and not self.revenue.subscriptions
            and self.costs.total == 0
            and not self.scenarios
        )

    def to_markdown(self) -> str:
        lines = ["# Financial Projection", ""]

        lines.extend(["## Revenue", ""])
        if self.revenue.subscriptions:
            lines.append("| Tier | Price / month | Subscribers | Annual revenue |")
            lines.append("|------|---------------|-------------|----------------|")
            for tier in self.revenue.subscriptions:
                lines.append(
                    f"| {tier.tier} | {format_money(tier.monthly_price)} | "
                    f"{tier.subscribers:,} | {format_money(tier.annual_revenue)} |"
                )
            lines.append("")
            lines.append(f"- Subscription revenue: {format_money(self.revenue.total_subscription)}")
        lines.append(f"- Pilots & consulting: {format_money(self.revenue.pilots)}")
        lines.append(f"- **Total revenue: {format_money(self.revenue.total)}**")
        lines.append(f"- Monthly recurring revenue (MRR): {format_money(self.revenue.mrr)}")
        lines.append("")

        lines.extend(["## Costs", ""])
        lines.append(f"- Development: {format_money(self.costs.development)}")
        lines.append(f"- Marketing: {format_money(self.costs.marketing)}")
        lines.append(f"- Operations: {format_money(self.costs.operations)}")
        lines.append(f"- **Total costs: {format_money(self.costs.total)}**")
        lines.append("")

        lines.extend(["## Profitability", ""])
        lines.append(f"- Net profit: {format_money(self.profitability.net_profit)}")
        lines.append(f"- Profit margin: {format_percent(self.profitability.profit_margin)}")
        lines.append("")

        if self.scenarios:
            lines.extend(["## Scenarios", ""])
            for scenario in self.scenarios:
                lines.append(
                    f"- {scenario.name.capitalize()}: {format_money(scenario.revenue)} "
                    f"at {format_percent(scenario.profit_margin)} margin"
                )
            lines.append("")

        _bullets(lines, "Sensitivity Analysis", self.sensitivity_analysis)
        return "\n".join(lines).rstrip() + "\n"
