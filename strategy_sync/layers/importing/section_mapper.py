"""
섹션 → 구조화 콘텐츠 매핑.

마크다운과 표(CSV/XLSX) 가져오기는 모두 먼저 (제목, 항목 목록) 섹션 목록을 만들고,
이 모듈이 문서 종류에 맞게 필드로 옮깁니다.

- Canvas / Strategy: 섹션 제목 별칭 → 필드
- OKRs: 섹션 하나 = 목표 하나 (항목 = 핵심 결과, "Rationale:" 항목 = 근거)
- FinancialProjection: "키: 값" 쌍과 요금제 표 행 → 수치 필드
"""

import re
from dataclasses import dataclass, field
from typing import Optional

from strategy_sync.exceptions import FileImportError
from strategy_sync.layers.authoring.answer_parser import parse_approach
from strategy_sync.models import (
    BaseDocumentContent,
    CanvasContent,
    CompetitiveAnalysis,
    DocumentKind,
    FinancialContent,
    FinancialScenario,
    Objective,
    OKRContent,
    StrategicPriority,
    StrategyContent,
    SubscriptionTier,
)
from strategy_sync.utils.financials import rebalance, update_subscription_revenue
from strategy_sync.utils.money import MONEY_PATTERN, find_amounts


@dataclass
class Section:
    heading: str
    items: list[str] = field(default_factory=list)
    parent: str = ""  # 상위 제목 (### 하위 섹션일 때)


CANVAS_ALIASES = {
    "customer_segments": ("customer segments", "segments", "customers", "target customers"),
    "value_proposition": ("value proposition", "value propositions", "value"),
    "pain_points": ("pain points", "problems", "pains"),
    "revenue_model": ("revenue model", "revenue streams", "revenue"),
    "cost_structure": ("cost structure", "costs"),
    "customer_acquisition": ("customer acquisition", "acquisition channels", "acquisition", "channels"),
    "where_to_play": ("where to play",),
    "how_to_win": ("how to win",),
    "risk_management": ("risk management", "risks"),
}

STRATEGY_ALIASES = {
    "vision": ("vision",),
    "mission": ("mission",),
    "business_goals": ("business goals", "goals"),
    "guiding_principles": ("guiding principles", "strategic principles", "principles", "guiding policy"),
    "strategic_priorities": ("key strategic priorities", "strategic priorities", "priorities"),
    "market_landscape": ("market landscape",),
    "competitive_advantage": ("competitive advantage",),
}

OKR_TITLES = {"okrs", "okr", "objectives & key results", "objectives and key results"}
KEY_RESULT_HEADINGS = {"key results", "krs", "key result"}

SENSITIVITY_HEADINGS = {"sensitivity analysis", "sensitivity"}

SCENARIO_KEYS = {
    "optimistic": "optimistic",
    "best case": "optimistic",
    "expected": "expected",
    "base case": "expected",
    "pessimistic": "pessimistic",
    "worst case": "pessimistic",
}

FINANCIAL_KEYS = {
    "total revenue": ("revenue", "total"),
    "revenue": ("revenue", "total"),
    "subscription revenue": ("revenue", "total_subscription"),
    "pilots & consulting": ("revenue", "pilots"),
    "pilots": ("revenue", "pilots"),
    "monthly recurring revenue (mrr)": ("revenue", "mrr"),
    "monthly recurring revenue": ("revenue", "mrr"),
    "mrr": ("revenue", "mrr"),
    "development": ("costs", "development"),
    "marketing": ("costs", "marketing"),
    "operations": ("costs", "operations"),
    "total costs": ("costs", "total"),
    "net profit": ("profitability", "net_profit"),
    "profit margin": ("profitability", "profit_margin"),
    "margin": ("profitability", "profit_margin"),
}

_KEY_VALUE = re.compile(r"^\s*\**(?P<key>[^:*|]+?)\**\s*:\s*\**(?P<value>.+?)\**\s*$")
_PERCENT = re.compile(r"(\d+(?:\.\d+)?)\s?%")
_OBJECTIVE_PREFIX = re.compile(r"^objective\s*\d*\s*[:.\-]?\s*", re.IGNORECASE)
_RATIONALE_PREFIX = re.compile(r"^(rationale|why)\s*:\s*", re.IGNORECASE)


def normalize_heading(heading: str) -> str:
    return " ".join(re.sub(r"[#*_`]", "", heading).lower().split())


def strip_emphasis(item: str) -> str:
    return item.strip().strip("*_").strip()


def _is_emphasized(item: str) -> bool:
    text = item.strip()
    return len(text) > 2 and text[0] == text[-1] and text[0] in "*_" and not text.startswith("**")


def _match_field(heading: str, aliases: dict[str, tuple[str, ...]]) -> Optional[str]:
    normalized = normalize_heading(heading)
    for field_name, names in aliases.items():
        if normalized in names:
            return field_name
    return None


def build_content(kind: DocumentKind, sections: list[Section]) -> BaseDocumentContent:
    """섹션 목록 → kind에 맞는 콘텐츠 모델."""
    kind = DocumentKind(kind)
    builders = {
        DocumentKind.CANVAS: build_canvas,
        DocumentKind.STRATEGY: build_strategy,
        DocumentKind.OKRS: build_okrs,
        DocumentKind.FINANCIAL: build_financial,
    }
    content = builders[kind](sections)
    if content.is_empty():
        raise FileImportError(
            f"{kind.value} 문서로 인식할 수 있는 내용이 없습니다",
            details={"target_kind": kind.value, "sections": [s.heading for s in sections]},
        )
    return content


def build_canvas(sections: list[Section]) -> CanvasContent:
    canvas = CanvasContent()
    for section in sections:
        if normalize_heading(section.heading) in ("approach", "strategic approach") and section.items:
            canvas.approach = parse_approach(section.items[0])
            continue

        field_name = _match_field(section.heading, CANVAS_ALIASES)
        for item in section.items:
            pair = split_key_value(item)
            if pair and normalize_heading(pair[0]) == "approach":
                canvas.approach = parse_approach(pair[1])
            elif field_name:
                getattr(canvas, field_name).append(strip_emphasis(item))
    return canvas


def build_strategy(sections: list[Section]) -> StrategyContent:
    strategy = StrategyContent()
    landscape: list[str] = []
    advantage: list[str] = []

    for section in sections:
        items = [strip_emphasis(item) for item in section.items]
        if _match_field(section.parent, STRATEGY_ALIASES) == "strategic_priorities":
            # ### 우선순위 이름 + 실행 과제 목록
            strategy.strategic_priorities.append(
                StrategicPriority(name=strip_emphasis(section.heading), initiatives=items)
            )
            continue

        field_name = _match_field(section.heading, STRATEGY_ALIASES)
        if field_name in ("vision", "mission"):
            setattr(strategy, field_name, " ".join(items).strip())
        elif field_name in ("business_goals", "guiding_principles"):
            getattr(strategy, field_name).extend(items)
        elif field_name == "strategic_priorities":
            for item in items:
                name, _, initiatives = item.partition(":")
                strategy.strategic_priorities.append(
                    StrategicPriority(
                        name=name.strip(),
                        initiatives=[i.strip() for i in initiatives.split(";") if i.strip()],
                    )
                )
        elif field_name == "market_landscape":
            landscape.extend(items)
        elif field_name == "competitive_advantage":
            advantage.extend(items)

    if landscape or advantage:
        strategy.competitive_analysis = CompetitiveAnalysis(
            market_landscape=landscape, competitive_advantage=advantage
        )
    return strategy


def build_okrs(sections: list[Section]) -> OKRContent:
    okrs = OKRContent()
    for section in sections:
        if not section.heading.strip() or normalize_heading(section.heading) in OKR_TITLES:
            continue
        if normalize_heading(section.heading) in KEY_RESULT_HEADINGS and okrs.objectives:
            okrs.objectives[-1].key_results.extend(strip_emphasis(item) for item in section.items)
            continue

        rationale = ""
        key_results = []
        for item in section.items:
            if _RATIONALE_PREFIX.match(strip_emphasis(item)):
                rationale = _RATIONALE_PREFIX.sub("", strip_emphasis(item))
            elif _is_emphasized(item) and not key_results and not rationale:
                rationale = strip_emphasis(item)
            else:
                key_results.append(strip_emphasis(item))

        title = _OBJECTIVE_PREFIX.sub("", strip_emphasis(section.heading)).strip()
        okrs.objectives.append(Objective(title=title, rationale=rationale, key_results=key_results))
    return okrs


def build_financial(sections: list[Section]) -> FinancialContent:
    """
    재무 섹션 → FinancialContent.

    명시된 총매출/이익률을 기준으로 rebalance()하여 비용과 수익성을 다시 맞춥니다.
    총매출이 없으면 구독 매출 + 파일럿, 이익률이 없으면 명시된 비용으로 계산합니다.
    """
    financial = FinancialContent()
    seen: set[str] = set()

    for section in sections:
        if normalize_heading(section.heading) in SENSITIVITY_HEADINGS:
            financial.sensitivity_analysis.extend(section.items)
            continue
        for item in section.items:
            if item.lstrip().startswith("|"):
                tier = parse_table_row(item)
                if tier:
                    financial.revenue.subscriptions.append(tier)
                continue
            pair = split_key_value(item)
            if pair:
                _apply_financial_pair(financial, *pair, seen=seen)

    revenue = financial.revenue
    update_subscription_revenue(financial)
    if "mrr" not in seen:
        revenue.mrr = revenue.tier_mrr()
    if "total" not in seen:
        revenue.total = revenue.total_subscription + revenue.pilots
    if not revenue.total:
        return financial

    if "profit_margin" not in seen:
        explicit_costs = (
            financial.costs.development + financial.costs.marketing + financial.costs.operations
        )
        financial.profitability.profit_margin = round(
            100 * (revenue.total - explicit_costs) / revenue.total, 2
        )
    pilots = revenue.pilots
    rebalance(financial)
    if "total" not in seen:
        revenue.pilots = pilots
    return financial


def _apply_financial_pair(financial: FinancialContent, key: str, value: str, seen: set[str]) -> None:
    normalized = normalize_heading(key)

    if normalized in SCENARIO_KEYS:
        amounts = find_amounts(value)
        percents = _PERCENT.findall(value)
        if amounts:
            financial.scenarios.append(
                FinancialScenario(
                    name=SCENARIO_KEYS[normalized],
                    revenue=amounts[0],
                    profit_margin=float(percents[0]) if percents else 0.0,
                )
            )
        return

    target = FINANCIAL_KEYS.get(normalized)
    if target is None:
        tier = parse_tier(key, value)
        if tier:
            financial.revenue.subscriptions.append(tier)
        return

    group, attribute = target
    if attribute == "profit_margin":
        percents = _PERCENT.findall(value) or re.findall(r"\d+(?:\.\d+)?", value)
        if percents:
            financial.profitability.profit_margin = float(percents[0])
            seen.add(attribute)
        return

    amounts = find_amounts(value) or _plain_numbers(value)
    if amounts:
        setattr(getattr(financial, group), attribute, amounts[0])
        seen.add(attribute)


def split_key_value(item: str) -> Optional[tuple[str, str]]:
    match = _KEY_VALUE.match(item)
    if not match:
        return None
    return match.group("key").strip(), match.group("value").strip()


def parse_tier(name: str, value: str) -> Optional[SubscriptionTier]:
    """"Basic: €49/mo x 180" 형식의 요금제 행. 구독자 수가 없으면 요금제로 보지 않습니다."""
    amounts = find_amounts(value)
    counts = _plain_numbers(MONEY_PATTERN.sub(" ", value))
    if not amounts or not counts:
        return None
    return SubscriptionTier(tier=name.strip(), monthly_price=amounts[0], subscribers=counts[0])


def parse_table_row(row: str) -> Optional[SubscriptionTier]:
    """"| Basic | €49 | 180 | €105,840 |" 형식의 요금제 표 행 (헤더/구분선은 None)."""
    cells = [cell.strip() for cell in row.strip().strip("|").split("|")]
    if len(cells) < 3:
        return None
    prices = find_amounts(cells[1]) or _plain_numbers(cells[1])
    counts = _plain_numbers(cells[2])
    if not prices or not counts:
        return None
    return SubscriptionTier(tier=cells[0], monthly_price=prices[0], subscribers=counts[0])


def _plain_numbers(value: str) -> list[int]:
    return [int(n.replace(",", "")) for n in re.findall(r"\d{1,3}(?:,\d{3})+|\d+", value)]
