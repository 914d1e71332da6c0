"""
위저드 답변 파서.

자유 입력 4개를 문서 생성에 필요한 값(StrategyInputs)으로 변환합니다.
값을 찾지 못하면 기본값을 사용합니다.

단계별 추출 항목:
┌──────┬──────────────────────┬──────────────────────────────────────────┐
│ 단계 │ 주제                 │ 추출                                     │
├──────┼──────────────────────┼──────────────────────────────────────────┤
│ 1    │ 비즈니스 모델        │ 고객 세그먼트, 고객 문제, 가치 제안      │
│ 2    │ 전략 방향            │ conservative / moderate / aggressive     │
│ 3    │ OKR                  │ 목표 문장, 매출 목표, 구독자 목표        │
│ 4    │ 재무 목표            │ 시나리오별 매출·이익률, 투자 여력        │
└──────┴──────────────────────┴──────────────────────────────────────────┘

매출·이익률 결정 순서: 4단계 expected 시나리오 → 4단계 단독 값 → 3단계 → 기본값
"""

import re
from typing import Mapping, Optional

from pydantic import BaseModel, Field

from strategy_sync.layers.consistency.claims import revenue_figures, subscriber_targets
from strategy_sync.models import FinancialScenario, StrategicApproach
from strategy_sync.utils.money import find_amounts


DEFAULT_REVENUE = 400_000
DEFAULT_PROFIT_MARGIN = 40.0
DEFAULT_SUBSCRIBERS = 300

DEFAULT_SEGMENTS = ["Early-stage startups", "Small and medium-sized enterprises"]
DEFAULT_VALUE_PROPOSITION = ["Integrated strategy platform", "Time-saving planning automation"]

_CLAUSE_SPLIT = re.compile(r"[;\n]+|,\s+")
_OBJECTIVE_SPLIT = re.compile(r"[\n;]+|(?<=[a-z])\.\s+|,\s+")
_PERCENT = re.compile(r"(\d+(?:\.\d+)?)\s?%")

_PAIN_LABELS = ("problem", "pain", "struggle", "challenge")
_VALUE_LABELS = ("value", "proposition", "solution", "offer", "benefit")
_SEGMENT_LABELS = ("target", "customer", "segment", "audience")

_SCENARIO_NAMES = {
    "optimistic": "optimistic",
    "best": "optimistic",
    "expected": "expected",
    "realistic": "expected",
    "base": "expected",
    "pessimistic": "pessimistic",
    "worst": "pessimistic",
}


class StrategyInputs(BaseModel):
    """문서 생성 입력값."""

    customer_segments: list[str] = Field(default_factory=list)
    pain_points: list[str] = Field(default_factory=list)
    value_proposition: list[str] = Field(default_factory=list)
    approach: StrategicApproach = StrategicApproach.MODERATE
    objectives: list[str] = Field(default_factory=list, description="수치 목표를 제외한 3단계 목표")
    subscriber_target: int = DEFAULT_SUBSCRIBERS
    revenue_target: int = DEFAULT_REVENUE
    profit_margin: float = DEFAULT_PROFIT_MARGIN
    scenarios: list[FinancialScenario] = Field(default_factory=list)
    investment_capacity: Optional[int] = None


def _strip_label(clause: str, labels: tuple[str, ...]) -> str:
    text = clause.strip()
    if ":" in text:
        return text.split(":", 1)[1].strip()
    lowered = text.lower()
    for label in labels:
        if lowered.startswith(label + " "):
            return text[len(label):].strip()
    return text


def _capitalize(text: str) -> str:
    text = text.strip().rstrip(".")
    return text[:1].upper() + text[1:] if text else text


def _starts_with_any(clause: str, labels: tuple[str, ...]) -> bool:
    lowered = clause.strip().lower()
    return any(re.match(rf"{label}\w*\b", lowered) for label in labels)


def parse_business_model(answer: str) -> tuple[list[str], list[str], list[str]]:
    """1단계: (고객 세그먼트, 고객 문제, 가치 제안)."""
    segments: list[str] = []
    pains: list[str] = []
    values: list[str] = []

    for clause in _CLAUSE_SPLIT.split(answer or ""):
        if not clause.strip():
            continue
        if _starts_with_any(clause, _PAIN_LABELS):
            pains.append(_capitalize(_strip_label(clause, _PAIN_LABELS)))
        elif _starts_with_any(clause, _VALUE_LABELS):
            values.append(_capitalize(_strip_label(clause, _VALUE_LABELS)))
        elif _starts_with_any(clause, _SEGMENT_LABELS) or not segments:
            segments.append(_capitalize(_strip_label(clause, _SEGMENT_LABELS)))
        else:
            values.append(_capitalize(clause))

    return (
        [s for s in segments if s] or list(DEFAULT_SEGMENTS),
        [p for p in pains if p],
        [v for v in values if v] or list(DEFAULT_VALUE_PROPOSITION),
    )


def parse_approach(answer: str) -> StrategicApproach:
    """2단계: 전략적 접근 (언급이 없으면 moderate)."""
    lowered = (answer or "").lower()
    if "conservative" in lowered or "stability" in lowered:
        return StrategicApproach.CONSERVATIVE
    if "aggressive" in lowered or "rapid" in lowered:
        return StrategicApproach.AGGRESSIVE
    return StrategicApproach.MODERATE


def parse_objectives(answer: str) -> tuple[list[str], Optional[int], Optional[int]]:
    """
    3단계: (수치 목표를 제외한 목표 문장, 매출 목표, 구독자 목표).

    매출/구독자 수치가 있는 문장은 재무 값으로 옮기고 목표 문장에서는 뺍니다.
    """
    objectives: list[str] = []
    revenue: Optional[int] = None
    subscribers: Optional[int] = None

    for clause in _OBJECTIVE_SPLIT.split(answer or ""):
        clause = clause.strip().strip("-•*").strip()
        if not clause:
            continue
        figures = revenue_figures(clause)
        targets = subscriber_targets(clause)
        if figures or targets:
            if figures and revenue is None:
                revenue = figures[0]
            if targets and subscribers is None:
                subscribers = targets[0]
            continue
        objectives.append(_capitalize(clause))

    return objectives, revenue, subscribers


def parse_financial_goals(answer: str) -> tuple[list[FinancialScenario], Optional[int], Optional[float], Optional[int]]:
    """
    4단계: (시나리오 목록, 단독 매출, 단독 이익률, 투자 여력).

    "expected €400k/40%" 형식은 시나리오로, "revenue €400k, margin 40%" 형식은 단독 값으로 읽습니다.
    """
    scenarios: dict[str, FinancialScenario] = {}
    revenue: Optional[int] = None
    margin: Optional[float] = None
    investment: Optional[int] = None

    for clause in _CLAUSE_SPLIT.split(answer or ""):
        lowered = clause.lower()
        amounts = find_amounts(clause)
        percents = [float(value) for value in _PERCENT.findall(clause)]

        name = next(
            (canonical for word, canonical in _SCENARIO_NAMES.items() if re.search(rf"\b{word}\b", lowered)),
            None,
        )
        if name and amounts:
            if name not in scenarios:
                scenarios[name] = FinancialScenario(
                    name=name,
                    revenue=amounts[0],
                    profit_margin=percents[0] if percents else DEFAULT_PROFIT_MARGIN,
                )
            continue

        if re.search(r"invest|capital|funding|budget", lowered) and amounts:
            investment = investment or amounts[0]
        elif amounts and revenue is None:
            revenue = amounts[0]
        if re.search(r"margin|profit", lowered) and percents and margin is None:
            margin = percents[0]

    ordered = [scenarios[key] for key in ("optimistic", "expected", "pessimistic") if key in scenarios]
    return ordered, revenue, margin, investment


def parse_answers(answers: Mapping[int, str]) -> StrategyInputs:
    """4개 답변 → StrategyInputs."""
    segments, pains, values = parse_business_model(answers.get(1, ""))
    approach = parse_approach(answers.get(2, ""))
    objectives, stated_revenue, stated_subscribers = parse_objectives(answers.get(3, ""))
    scenarios, financial_revenue, financial_margin, investment = parse_financial_goals(answers.get(4, ""))

    expected = next((s for s in scenarios if s.name == "expected"), None)
    revenue = (
        (expected.revenue if expected else None)
        or financial_revenue
        or stated_revenue
        or DEFAULT_REVENUE
    )
    if expected is not None:
        margin = expected.profit_margin
    elif financial_margin is not None:
        margin = financial_margin
    else:
        margin = DEFAULT_PROFIT_MARGIN

    return StrategyInputs(
        customer_segments=segments,
        pain_points=pains,
        value_proposition=values,
        approach=approach,
        objectives=objectives,
        subscriber_target=stated_subscribers if stated_subscribers is not None else DEFAULT_SUBSCRIBERS,
        revenue_target=revenue,
        profit_margin=round(margin, 2),
        scenarios=scenarios,
        investment_capacity=investment,
    )
