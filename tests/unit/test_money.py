"""Unit tests for money and percent notation helpers."""

import pytest

from strategy_sync.utils.money import find_amounts, format_money, format_percent, parse_amount


class TestParseAmount:
    def test_thousand_suffix(self):
        assert parse_amount("400", "K") == 400_000
        assert parse_amount("400", "k") == 400_000

    def test_million_suffix_with_decimal(self):
        assert parse_amount("1.2", "M") == 1_200_000

    def test_decimal_comma(self):
        assert parse_amount("1,5", "M") == 1_500_000

    def test_thousands_separators(self):
        assert parse_amount("400,000") == 400_000
        assert parse_amount("1.250.000") == 1_250_000

    def test_plain_number(self):
        assert parse_amount("49") == 49


class TestFindAmounts:
    def test_single_amount(self):
        assert find_amounts("Achieve €400K in first-year revenue") == [400_000]

    def test_multiple_currencies(self):
        assert find_amounts("Raise $1.2M, then spend £26,700") == [1_200_000, 26_700]

    def test_amount_followed_by_slash(self):
        assert find_amounts("expected €400k/40%") == [400_000]

    def test_percent_is_not_money(self):
        assert find_amounts("Reach 40% margin and 300 subscribers") == []

    def test_empty_text(self):
        assert find_amounts("") == []
        assert find_amounts(None) == []


class TestFormatMoney:
    @pytest.mark.parametrize("amount, expected", [
        (400_000, "€400K"),
        (1_250_000, "€1.25M"),
        (1_000_000, "€1M"),
        (26_700, "€26,700"),
        (105_840, "€105,840"),
        (49, "€49"),
        (0, "€0"),
    ])
    def test_notation(self, amount, expected):
        assert format_money(amount) == expected

    def test_custom_currency(self):
        assert format_money(400_000, "$") == "$400K"

    @pytest.mark.parametrize("amount", [49, 5_000, 26_700, 105_840, 400_000, 1_250_000])
    def test_formatted_amount_parses_back(self, amount):
        assert find_amounts(format_money(amount)) == [amount]


class TestFormatPercent:
    def test_whole_number(self):
        assert format_percent(40.0) == "40%"

    def test_fraction(self):
        assert format_percent(12.5) == "12.5%"
