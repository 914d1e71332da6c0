"""Unit tests for content-addressed finding ids."""

from strategy_sync.models import DocumentKind
from strategy_sync.utils.fingerprint import make_finding_id


class TestMakeFindingId:
    def test_format(self):
        finding_id = make_finding_id("inc", "strategy_revenue", [DocumentKind.STRATEGY, 400_000])
        assert finding_id.startswith("inc-")
        assert len(finding_id) == len("inc-") + 12

    def test_deterministic(self):
        parts = [DocumentKind.STRATEGY, DocumentKind.OKRS, "customer_satisfaction", 90.0]
        assert make_finding_id("inc", "rule", parts) == make_finding_id("inc", "rule", list(parts))

    def test_enum_and_value_normalized(self):
        assert make_finding_id("inc", "rule", [DocumentKind.OKRS, 90.0]) == make_finding_id(
            "inc", "rule", ["okrs", 90]
        )

    def test_whitespace_and_case_normalized(self):
        assert make_finding_id("inc", "rule", ["Customer  Acquisition"]) == make_finding_id(
            "inc", "rule", ["customer acquisition"]
        )

    def test_rule_name_changes_id(self):
        assert make_finding_id("inc", "rule_a", [1]) != make_finding_id("inc", "rule_b", [1])

    def test_salient_value_changes_id(self):
        assert make_finding_id("inc", "rule", [90]) != make_finding_id("inc", "rule", [95])

    def test_order_matters(self):
        assert make_finding_id("inc", "rule", ["a", "b"]) != make_finding_id("inc", "rule", ["b", "a"])
