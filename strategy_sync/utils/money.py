"""금액/비율 표기 유틸리티.

문서 본문에 쓰인 금액(€400K, €400,000, $1.2M)을 정수로 읽고,
정수를 다시 같은 표기법으로 씁니다. format_money()의 출력은
parse_amount()로 항상 같은 값으로 되돌아와야 합니다.
"""

import re
from typing import Optional


MONEY_PATTERN = re.compile(
    r"(?P<currency>[€$£])\s?(?P<number>\d+(?:[.,]\d+)*)\s?(?P<suffix>[kKmM])?(?![\w%])"
)

_THOUSANDS = re.compile(r"\d{1,3}(?:[.,]\d{3})+")

_MULTIPLIERS = {"k": 1_000, "m": 1_000_000}


def parse_amount(number: str, suffix: Optional[str] = None) -> int:
    """숫자 토큰과 단위(k/M)를 정수 금액으로 변환."""
    if _THOUSANDS.fullmatch(number):
        value = float(re.sub(r"[.,]", "", number))
    else:
        value = float(number.replace(",", "."))
    multiplier = _MULTIPLIERS.get((suffix or "").lower(), 1)
    return int(round(value * multiplier))


def find_amounts(text: str) -> list[int]:
    """텍스트에 등장하는 모든 통화 금액."""
    return [
        parse_amount(m.group("number"), m.group("suffix"))
        for m in MONEY_PATTERN.finditer(text or "")
    ]


def format_money(amount: int, currency: str = "€") -> str:
    """
    금액 표기.

    400000 -> €400K, 1250000 -> €1.25M, 26700 -> €26,700
    """
    amount = int(amount)
    if amount >= 1_000_000 and amount % 10_000 == 0:
        return f"{currency}{amount / 1_000_000:g}M"
    if 0 < amount < 1_000_000 and amount % 1_000 == 0 and amount >= 100_000:
        return f"{currency}{amount // 1_000}K"
    return f"{currency}{amount:,}"


def format_percent(value: float) -> str:
    return f"{value:g}%"
