"""
문서 텍스트에서 수치 주장(claim)을 읽어내는 함수 모음.

정합성 규칙과 문서 작성기(author)가 같은 함수를 사용하므로,
작성기가 쓴 문장은 규칙이 항상 같은 값으로 읽습니다.

지원하는 주장:
┌───────────────┬──────────────────────────────────────┬────────────────┐
│ 종류          │ 예시                                 │ 결과           │
├───────────────┼──────────────────────────────────────┼────────────────┤
│ 연 매출       │ "Achieve €400K in first-year revenue"│ 400000         │
│ 지표 목표     │ "customer satisfaction over 90%"     │ (csat, 90)     │
│ 이익률        │ "Sustain a 40% profit margin"        │ 40.0           │
│ 구독자 목표   │ "Reach 300 total paying subscribers" │ 300            │
└───────────────┴──────────────────────────────────────┴────────────────┘
"""

import math
import re
from dataclasses import dataclass
from typing import Iterable

from strategy_sync.models import Severity
from strategy_sync.utils.money import MONEY_PATTERN, parse_amount


@dataclass(frozen=True)
class TrackedMetric:
    """Strategy 목표와 OKR 핵심 결과 사이에서 추적하는 비율 지표."""

    key: str
    label: str
    keywords: tuple[str, ...]
    severity: Severity
    objective_title: str
    key_result_template: str  # {value} 자리에 목표값


TRACKED_METRICS: dict[str, TrackedMetric] = {
    metric.key: metric
    for metric in (
        TrackedMetric(
            key="customer_satisfaction",
            label="Customer Satisfaction Score",
            keywords=("customer satisfaction", "satisfaction", "csat"),
            severity=Severity.HIGH,
            objective_title="Deliver Exceptional Customer Satisfaction",
            key_result_template="Maintain a Customer Satisfaction Score ≥ {value} across all paying tiers",
        ),
        TrackedMetric(
            key="churn",
            label="Monthly Churn",
            keywords=("churn",),
            severity=Severity.MEDIUM,
            objective_title="Grow Subscription Base & Reduce Churn",
            key_result_template="Keep monthly churn at or below {value}",
        ),
        TrackedMetric(
            key="retention",
            label="Customer Retention",
            keywords=("retention", "retain"),
            severity=Severity.MEDIUM,
            objective_title="Grow Subscription Base & Reduce Churn",
            key_result_template="Achieve a customer retention rate of {value}",
        ),
        TrackedMetric(
            key="conversion",
            label="Conversion Rate",
            keywords=("conversion", "convert"),
            severity=Severity.MEDIUM,
            objective_title="Improve Funnel Conversion",
            key_result_template="Reach a trial-to-paid conversion rate of {value}",
        ),
        TrackedMetric(
            key="planning_cycle",
            label="Planning Cycle Time Reduction",
            keywords=("planning cycle", "cycle time"),
            severity=Severity.LOW,
            objective_title="Prove Measurable Customer Value",
            key_result_template="Demonstrate a {value} reduction in planning cycle times for active users",
        ),
    )
}

_PERCENT = re.compile(r"(\d+(?:\.\d+)?)\s?%")
_REVENUE_WORDS = re.compile(r"\b(revenue|sales|turnover)\b", re.IGNORECASE)
_RECURRING_WORDS = re.compile(r"\b(mrr|arr|monthly|recurring)\b", re.IGNORECASE)
_LONG_RANGE = re.compile(
    r"\byear\s*[2-9]\b|\b(?:[2-9]|10)\s*-?\s*years?\b|\blong[- ]term\b",
    re.IGNORECASE,
)
_MARGIN_WORDS = re.compile(r"\bmargins?\b", re.IGNORECASE)
_SUBSCRIBERS = re.compile(
    r"(?<![\d.,])(\d{1,3}(?:,\d{3})+|\d+)\s+(?:[A-Za-z()-]+\s+){0,3}?subscribers?\b",
    re.IGNORECASE,
)
_CLAUSES = re.compile(r"[,;]|\band\b|\bwhile\b")
_STOPWORDS = {"and", "the", "for", "with", "from", "into", "our", "your", "of", "to", "a", "an", "in", "on", "&"}


@dataclass(frozen=True)
class MetricTarget:
    metric: str
    value: float

    @property
    def definition(self) -> TrackedMetric:
        return TRACKED_METRICS[self.metric]


def same_value(left: float, right: float) -> bool:
    return math.isclose(left, right, rel_tol=1e-9, abs_tol=1e-6)


def revenue_amount_matches(line: str) -> list[re.Match]:
    """
    연 매출 주장으로 읽히는 금액 토큰.

    "revenue"류 단어가 있고 월/반복 매출(MRR, monthly)이 아닌 문장에서,
    매출 단어마다 가장 가까운 금액 하나만 인정합니다.
    ("€1M revenue from 8 pilots at €5,000 each" -> €1M)
    재무 추정은 첫해 기준이므로 "by year 3", "5-year" 같은 장기 목표도 제외합니다.
    """
    if not line or not _REVENUE_WORDS.search(line):
        return []
    if _RECURRING_WORDS.search(line) or _LONG_RANGE.search(line):
        return []

    amounts = list(MONEY_PATTERN.finditer(line))
    chosen: list[re.Match] = []
    for word in _REVENUE_WORDS.finditer(line):
        if not amounts:
            break
        nearest = min(amounts, key=lambda m: _gap(m.span(), word.span()))
        if nearest not in chosen:
            chosen.append(nearest)
    return sorted(chosen, key=lambda m: m.start())


def _gap(left: tuple[int, int], right: tuple[int, int]) -> int:
    return max(right[0] - left[1], left[0] - right[1], 0)


def revenue_figures(line: str) -> list[int]:
    """연 매출 주장 금액."""
    return [parse_amount(m.group("number"), m.group("suffix")) for m in revenue_amount_matches(line)]


def revenue_claims(lines: Iterable[str]) -> list[int]:
    """여러 줄에서 중복 없이 순서대로 모은 매출 주장."""
    figures: list[int] = []
    for line in lines:
        for figure in revenue_figures(line):
            if figure not in figures:
                figures.append(figure)
    return figures


def _keyword_positions(clause: str) -> list[tuple[int, str]]:
    positions: list[tuple[int, str]] = []
    for metric in TRACKED_METRICS.values():
        for keyword in metric.keywords:
            for match in re.finditer(re.escape(keyword), clause):
                positions.append((match.start(), metric.key))
    return sorted(positions)


def metric_targets(line: str) -> list[MetricTarget]:
    """
    비율 지표 목표.

    문장을 절(쉼표, and 등)로 나눈 뒤, 각 퍼센트 값은 같은 절에서 바로 앞에 나온
    지표 키워드에 귀속됩니다. 앞에 없으면 뒤에 나오는 첫 키워드를 씁니다.
    ("churn below 5%", "90% customer satisfaction")
    이익률(margin)을 말하는 절은 건너뜁니다.
    """
    if not line:
        return []

    targets: list[MetricTarget] = []
    for clause in _CLAUSES.split(line.lower()):
        if _MARGIN_WORDS.search(clause):
            continue
        positions = _keyword_positions(clause)
        if not positions:
            continue
        for match in _PERCENT.finditer(clause):
            preceding = [item for item in positions if item[0] < match.start()]
            metric = preceding[-1][1] if preceding else positions[0][1]
            target = MetricTarget(metric=metric, value=float(match.group(1)))
            if target not in targets:
                targets.append(target)
    return targets


def tracks_metric(lines: Iterable[str], target: MetricTarget) -> bool:
    """주어진 줄들 중 같은 지표·같은 값을 명시한 줄이 있는지."""
    for line in lines:
        for found in metric_targets(line):
            if found.metric == target.metric and same_value(found.value, target.value):
                return True
    return False


def margin_targets(line: str) -> list[float]:
    """이익률 주장 (margin이 언급된 문장의 퍼센트 값)."""
    if not line or not _MARGIN_WORDS.search(line):
        return []
    return [float(value) for value in _PERCENT.findall(line)]


def subscriber_targets(line: str) -> list[int]:
    """구독자 수 목표 ("300 total paying subscribers")."""
    if not line:
        return []
    return [int(number.replace(",", "")) for number in _SUBSCRIBERS.findall(line)]


def subscriber_claims(lines: Iterable[str]) -> list[int]:
    targets: list[int] = []
    for line in lines:
        for target in subscriber_targets(line):
            if target not in targets:
                targets.append(target)
    return targets


def significant_words(phrase: str) -> list[str]:
    """우선순위 이름 비교용 핵심 단어 (불용어 제거, 소문자)."""
    words = re.findall(r"[a-z0-9]+", phrase.lower())
    return [word for word in words if word not in _STOPWORDS and len(word) > 2]


def mentions_all(text: str, words: Iterable[str]) -> bool:
    lowered = text.lower()
    return all(re.search(rf"\b{re.escape(word)}", lowered) for word in words)
