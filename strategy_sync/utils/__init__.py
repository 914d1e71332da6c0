"""공용 유틸리티."""

from .money import MONEY_PATTERN, find_amounts, format_money, format_percent, parse_amount
from .fingerprint import make_finding_id

__all__ = [
    "MONEY_PATTERN",
    "find_amounts",
    "format_money",
    "format_percent",
    "parse_amount",
    "make_finding_id",
]
