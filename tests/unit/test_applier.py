"""Unit tests for SuggestionApplier and the mutation registry."""

import pytest

from strategy_sync.layers.applier import MUTATION_REGISTRY, SuggestionApplier
from strategy_sync.layers.consistency import ConsistencyChecker
from strategy_sync.models import (
    Action,
    Document,
    DocumentKind,
    OperationName,
)


# 연산별 대표 파라미터
PARAMS = {
    OperationName.ADD_KEY_RESULT: {"metric": "customer_satisfaction", "value": 90.0},
    OperationName.ADD_PRIORITY_OBJECTIVE: {"priority": "Enterprise Market Expansion"},
    OperationName.ALIGN_REVENUE_KEY_RESULT: {"revenue": 450_000},
    OperationName.ALIGN_REVENUE_TARGET: {"revenue": 500_000},
    OperationName.ALIGN_PROFIT_MARGIN: {"margin": 30.0},
    OperationName.ALIGN_SUBSCRIBER_PROJECTION: {"subscribers": 500},
    OperationName.ADJUST_MRR_TARGET: {"mrr": 26_700},
}


def _action(kind, operation):
    return Action(document_kind=kind, operation=operation, params=PARAMS.get(operation, {}))


@pytest.fixture
def applier():
    return SuggestionApplier()


class TestRegistry:
    def test_every_operation_is_registered(self):
        registered = {operation for _, operation in MUTATION_REGISTRY}
        assert registered == set(OperationName)

    def test_supports(self, applier):
        assert applier.supports(DocumentKind.OKRS, OperationName.ADD_KEY_RESULT)
        assert not applier.supports(DocumentKind.CANVAS, OperationName.ADD_KEY_RESULT)


class TestApply:
    @pytest.mark.parametrize("kind,operation", sorted(MUTATION_REGISTRY, key=lambda k: k[1].value))
    def test_idempotent(self, applier, aligned_documents, kind, operation):
        action = _action(kind, operation)
        once = applier.apply(aligned_documents[kind], action)
        twice = applier.apply(once, action)
        assert twice.content == once.content

    @pytest.mark.parametrize("kind,operation", sorted(MUTATION_REGISTRY, key=lambda k: k[1].value))
    def test_original_unchanged(self, applier, aligned_documents, kind, operation):
        original = aligned_documents[kind]
        snapshot = original.model_copy(deep=True)

        applier.apply(original, _action(kind, operation))

        assert original == snapshot

    def test_returns_new_document(self, applier, aligned_documents):
        okrs = aligned_documents[DocumentKind.OKRS]
        updated = applier.apply(okrs, _action(DocumentKind.OKRS, OperationName.ADD_KEY_RESULT))

        assert updated is not okrs
        assert updated.last_modified > okrs.last_modified
        assert "90%" in updated.rendered

    def test_unsupported_combination_returns_same_document(self, applier, aligned_documents):
        canvas = aligned_documents[DocumentKind.CANVAS]
        action = Action(document_kind=DocumentKind.CANVAS, operation=OperationName.ADD_KEY_RESULT)
        assert applier.apply(canvas, action) is canvas

    def test_kind_mismatch_returns_same_document(self, applier, aligned_documents):
        canvas = aligned_documents[DocumentKind.CANVAS]
        action = _action(DocumentKind.OKRS, OperationName.ADD_KEY_RESULT)
        assert applier.apply(canvas, action) is canvas

    def test_failing_mutation_returns_same_document(self, aligned_documents):
        def explode(content, params):
            raise RuntimeError("boom")

        applier = SuggestionApplier(registry={(DocumentKind.OKRS, OperationName.ADD_KEY_RESULT): explode})
        okrs = aligned_documents[DocumentKind.OKRS]
        assert applier.apply(okrs, _action(DocumentKind.OKRS, OperationName.ADD_KEY_RESULT)) is okrs

    def test_missing_param_returns_same_document(self, applier, aligned_documents):
        okrs = aligned_documents[DocumentKind.OKRS]
        action = Action(document_kind=DocumentKind.OKRS, operation=OperationName.ADD_KEY_RESULT)
        assert applier.apply(okrs, action) is okrs


class TestMutations:
    def test_key_result_joins_existing_objective(self, applier, aligned_documents):
        action = _action(DocumentKind.OKRS, OperationName.ADD_KEY_RESULT)
        once = applier.apply(aligned_documents[DocumentKind.OKRS], action)
        objectives = once.content.objectives
        assert len(objectives) == 2

        again = applier.apply(once, Action(
            document_kind=DocumentKind.OKRS,
            operation=OperationName.ADD_KEY_RESULT,
            params={"metric": "customer_satisfaction", "value": 95.0},
        ))
        assert len(again.content.objectives) == 2
        assert len(again.content.objectives[1].key_results) == 2

    def test_priority_objective(self, applier, aligned_documents):
        action = _action(DocumentKind.OKRS, OperationName.ADD_PRIORITY_OBJECTIVE)
        updated = applier.apply(aligned_documents[DocumentKind.OKRS], action)
        assert updated.content.objectives[-1].title == "Advance Enterprise Market Expansion"

    def test_revenue_key_result_rewritten(self, applier, aligned_documents):
        action = _action(DocumentKind.OKRS, OperationName.ALIGN_REVENUE_KEY_RESULT)
        updated = applier.apply(aligned_documents[DocumentKind.OKRS], action)
        assert updated.content.objectives[0].title == "Achieve €450K in Total First-Year Revenue"

    def test_revenue_key_result_keeps_other_amounts(self, applier, aligned_documents):
        okrs = aligned_documents[DocumentKind.OKRS].content.model_copy(deep=True)
        okrs.objectives[0].key_results.append("Reach €1M revenue from 8 pilots at €5,000 each")
        documents = dict(aligned_documents)
        documents[DocumentKind.OKRS] = Document.create(DocumentKind.OKRS, okrs)

        checker = ConsistencyChecker()
        [inconsistency] = checker.check(documents)
        assert inconsistency.rule == "okr_revenue"
        documents[DocumentKind.OKRS] = applier.apply(documents[DocumentKind.OKRS], inconsistency.action)

        key_results = documents[DocumentKind.OKRS].content.objectives[0].key_results
        assert key_results[-1] == "Reach €400K revenue from 8 pilots at €5,000 each"
        assert checker.check(documents) == []

    def test_revenue_objective_inserted_when_absent(self, applier):
        okrs = Document.create(DocumentKind.OKRS)
        action = _action(DocumentKind.OKRS, OperationName.ALIGN_REVENUE_KEY_RESULT)
        updated = applier.apply(okrs, action)
        assert updated.content.objectives[0].title == "Achieve €450K in Total First-Year Revenue"

    def test_revenue_target_resolves_inconsistency(self, applier, aligned_documents):
        strategy = aligned_documents[DocumentKind.STRATEGY].content.model_copy(deep=True)
        strategy.business_goals[0] = "Achieve €500K in first-year revenue"
        documents = dict(aligned_documents)
        documents[DocumentKind.STRATEGY] = Document.create(DocumentKind.STRATEGY, strategy)

        checker = ConsistencyChecker()
        [inconsistency] = checker.check(documents)
        documents[DocumentKind.FINANCIAL] = applier.apply(
            documents[DocumentKind.FINANCIAL], inconsistency.action
        )

        assert documents[DocumentKind.FINANCIAL].content.revenue.total == 500_000
        assert [i for i in checker.check(documents) if i.rule == "strategy_revenue"] == []

    def test_acquisition_channels_keep_existing(self, applier, aligned_documents):
        action = _action(DocumentKind.CANVAS, OperationName.ADD_ACQUISITION_CHANNELS)
        updated = applier.apply(aligned_documents[DocumentKind.CANVAS], action)
        channels = updated.content.customer_acquisition
        assert channels[0] == "Founder-led webinars"
        assert len(channels) > 1

    def test_strategic_priorities_default_name(self, applier, aligned_documents):
        action = _action(DocumentKind.STRATEGY, OperationName.ADD_STRATEGIC_PRIORITIES)
        updated = applier.apply(aligned_documents[DocumentKind.STRATEGY], action)
        assert [p.name for p in updated.content.strategic_priorities] == ["Customer Acquisition"]

    def test_sensitivity_analysis_lists_churn_scenarios(self, applier, aligned_documents):
        action = _action(DocumentKind.FINANCIAL, OperationName.ADD_SENSITIVITY_ANALYSIS)
        updated = applier.apply(aligned_documents[DocumentKind.FINANCIAL], action)
        lines = updated.content.sensitivity_analysis
        assert lines
        assert any("churn" in line for line in lines)

    def test_adjust_mrr_without_param_uses_tier_mix(self, applier, aligned_documents):
        financial = aligned_documents[DocumentKind.FINANCIAL].content.model_copy(deep=True)
        financial.revenue.mrr = 40_000
        doc = Document.create(DocumentKind.FINANCIAL, financial)

        action = Action(document_kind=DocumentKind.FINANCIAL, operation=OperationName.ADJUST_MRR_TARGET)
        assert applier.apply(doc, action).content.revenue.mrr == 26_700
