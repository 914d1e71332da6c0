"""
재무 추정 계산 유틸리티.

문서 작성기와 SuggestionApplier가 같은 계산을 쓰므로, 한쪽이 만든
재무 문서를 다른 쪽이 다시 계산해도 값이 바뀌지 않습니다.
"""

from typing import Optional, Sequence

from strategy_sync.models import FinancialContent, SubscriptionTier


# (요금제, 월 요금, 구독자 비중)
DEFAULT_TIERS: tuple[tuple[str, int, float], ...] = (
    ("Basic", 49, 0.6),
    ("Pro", 99, 0.3),
    ("Enterprise", 299, 0.1),
)

# 비용 항목별 비중 (개발 / 마케팅 / 운영)
DEFAULT_COST_SPLIT: tuple[float, float, float] = (0.60, 0.25, 0.15)

EXPECTED_MONTHLY_CHURN = 4.0
CHURN_SCENARIOS: tuple[tuple[str, float], ...] = (
    ("Best case", 2.0),
    ("Expected", EXPECTED_MONTHLY_CHURN),
    ("Worst case", 7.0),
)


def distribute(total: int, weights: Sequence[float]) -> list[int]:
    """
    total을 weights 비율로 나눈 정수 목록 (최대 나머지 방식, 합계 = total).

    weights가 이미 total로 합산되는 정수이면 그대로 반환됩니다.
    """
    if not weights:
        return []
    weight_sum = float(sum(weights))
    if weight_sum <= 0:
        weights = [1.0] * len(weights)
        weight_sum = float(len(weights))

    exact = [total * weight / weight_sum for weight in weights]
    shares = [int(value) for value in exact]
    remainder = total - sum(shares)
    order = sorted(range(len(exact)), key=lambda i: (-(exact[i] - shares[i]), i))
    for index in order[:remainder]:
        shares[index] += 1
    return shares


def default_tiers(subscribers: int) -> list[SubscriptionTier]:
    counts = distribute(subscribers, [share for _, _, share in DEFAULT_TIERS])
    return [
        SubscriptionTier(tier=name, monthly_price=price, subscribers=count)
        for (name, price, _), count in zip(DEFAULT_TIERS, counts)
    ]


def set_subscribers(financial: FinancialContent, subscribers: int) -> None:
    """요금제별 구독자 수를 현재 비중대로 다시 배분하고 구독 매출/MRR 재계산."""
    tiers = financial.revenue.subscriptions
    if not tiers:
        financial.revenue.subscriptions = default_tiers(subscribers)
    else:
        counts = distribute(subscribers, [tier.subscribers for tier in tiers])
        for tier, count in zip(tiers, counts):
            tier.subscribers = count
    update_subscription_revenue(financial)
    financial.revenue.mrr = financial.revenue.tier_mrr()


def update_subscription_revenue(financial: FinancialContent) -> None:
    for tier in financial.revenue.subscriptions:
        tier.annual_revenue = tier.monthly_price * tier.subscribers * 12
    financial.revenue.total_subscription = sum(
        tier.annual_revenue for tier in financial.revenue.subscriptions
    )


def rebalance(
    financial: FinancialContent,
    total_revenue: Optional[int] = None,
    profit_margin: Optional[float] = None,
) -> None:
    """
    총매출/이익률 기준으로 파일럿 매출, 비용, 수익성 재계산.

    - pilots = max(총매출 - 구독 매출, 0)
    - 총비용 = 총매출 × (1 - 이익률)
    - 비용 항목은 기존 비중 유지 (없으면 60/25/15)
    """
    if total_revenue is not None:
        financial.revenue.total = int(total_revenue)
    if profit_margin is not None:
        financial.profitability.profit_margin = float(profit_margin)

    revenue = financial.revenue
    update_subscription_revenue(financial)
    revenue.pilots = max(revenue.total - revenue.total_subscription, 0)

    margin = financial.profitability.profit_margin
    total_costs = int(round(revenue.total * (1 - margin / 100)))
    costs = financial.costs
    current = [costs.development, costs.marketing, costs.operations]
    weights = current if sum(current) > 0 else list(DEFAULT_COST_SPLIT)
    costs.development, costs.marketing, costs.operations = distribute(total_costs, weights)
    costs.total = total_costs

    financial.profitability.total_revenue = revenue.total
    financial.profitability.total_costs = total_costs
    financial.profitability.net_profit = revenue.total - total_costs


def churn_sensitivity(mrr: int) -> list[tuple[str, float, int, int]]:
    """
    월 이탈률 시나리오별 연말 MRR.

    Returns:
        (시나리오, 월 이탈률, 연말 MRR, 목표 대비 %) 목록
    """
    rows = []
    for name, churn in CHURN_SCENARIOS:
        factor = ((1 - churn / 100) / (1 - EXPECTED_MONTHLY_CHURN / 100)) ** 6
        rows.append((name, churn, int(round(mrr * factor, -2)), int(round(factor * 100))))
    return rows
