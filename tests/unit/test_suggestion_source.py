"""Unit tests for single-document SuggestionSource rules."""

from strategy_sync.layers.consistency import DocumentAnalyzer, SuggestionSource
from strategy_sync.layers.consistency.suggestion_source import (
    BaseSuggestionRule,
    MRRRealismSuggestion,
    SuggestionDraft,
    default_suggestion_rules,
)
from strategy_sync.models import (
    CompetitiveAnalysis,
    Document,
    DocumentKind,
    Inconsistency,
    OperationName,
    Severity,
    StrategicPriority,
    Suggestion,
)


def _with(documents, kind, content):
    updated = dict(documents)
    updated[kind] = Document.create(kind, content)
    return updated


class BrokenSuggestion(BaseSuggestionRule):
    name = "broken"
    kind = DocumentKind.CANVAS

    def evaluate(self, content):
        raise KeyError("missing")


class LazilyBrokenSuggestion(BaseSuggestionRule):
    name = "lazily_broken"
    kind = DocumentKind.STRATEGY

    def evaluate(self, content):
        yield SuggestionDraft(
            severity=Severity.LOW,
            text="first draft",
            operation=OperationName.ADD_STRATEGIC_PRIORITIES,
        )
        raise RuntimeError("boom")


class MalformedSuggestion(BaseSuggestionRule):
    name = "malformed"
    kind = DocumentKind.OKRS

    def evaluate(self, content):
        return [SuggestionDraft(severity="urgent", text="bad", operation=OperationName.ADD_KEY_RESULT)]


class TestSuggestionSource:
    def test_missing_sections_on_aligned_documents(self, aligned_documents):
        suggestions = SuggestionSource().suggest(aligned_documents)
        assert {s.rule for s in suggestions} == {
            "strategic_priorities_missing",
            "competitive_analysis_missing",
            "product_development_objective_missing",
            "sensitivity_analysis_missing",
            "risk_management_missing",
        }
        assert all(s.id.startswith("sug-") for s in suggestions)
        assert all(s.action.document_kind == s.document_kind for s in suggestions)

    def test_empty_documents_get_no_suggestions(self):
        documents = {kind: Document.create(kind) for kind in DocumentKind}
        assert SuggestionSource().suggest(documents) == []

    def test_ids_are_deterministic(self, aligned_documents):
        first = [s.id for s in SuggestionSource().suggest(aligned_documents)]
        second = [s.id for s in SuggestionSource().suggest(aligned_documents)]
        assert first == second
        assert len(set(first)) == len(first)

    def test_complete_strategy_gets_no_strategy_suggestions(self, aligned_documents):
        strategy = aligned_documents[DocumentKind.STRATEGY].content.model_copy(deep=True)
        strategy.strategic_priorities.append(StrategicPriority(name="Customer Acquisition"))
        strategy.competitive_analysis = CompetitiveAnalysis(market_landscape=["Crowded"])
        documents = _with(aligned_documents, DocumentKind.STRATEGY, strategy)

        suggestions = SuggestionSource().suggest(documents)
        assert not [s for s in suggestions if s.document_kind == DocumentKind.STRATEGY]

    def test_broken_rule_is_isolated(self, aligned_documents):
        source = SuggestionSource(rules=[BrokenSuggestion(), *default_suggestion_rules()])
        suggestions = source.suggest(aligned_documents)
        assert len(suggestions) == 5

    def test_rule_failing_mid_iteration_is_isolated(self, aligned_documents):
        source = SuggestionSource(rules=[LazilyBrokenSuggestion(), *default_suggestion_rules()])
        suggestions = source.suggest(aligned_documents)
        assert "lazily_broken" not in {s.rule for s in suggestions}
        assert len(suggestions) == 5

    def test_malformed_draft_is_isolated(self, aligned_documents):
        source = SuggestionSource(rules=[MalformedSuggestion(), *default_suggestion_rules()])
        suggestions = source.suggest(aligned_documents)
        assert "malformed" not in {s.rule for s in suggestions}
        assert len(suggestions) == 5


class TestMRRRealism:
    def test_unrealistic_mrr(self, aligned_documents):
        financial = aligned_documents[DocumentKind.FINANCIAL].content.model_copy(deep=True)
        financial.revenue.mrr = 40_000
        documents = _with(aligned_documents, DocumentKind.FINANCIAL, financial)

        suggestions = SuggestionSource(rules=[MRRRealismSuggestion(tolerance=0.05)]).suggest(documents)
        assert len(suggestions) == 1
        assert suggestions[0].action.operation == OperationName.ADJUST_MRR_TARGET
        assert suggestions[0].action.params == {"mrr": 26_700}
        assert "€40,000" in suggestions[0].text

    def test_within_tolerance(self, aligned_documents):
        financial = aligned_documents[DocumentKind.FINANCIAL].content.model_copy(deep=True)
        financial.revenue.mrr = 27_000
        documents = _with(aligned_documents, DocumentKind.FINANCIAL, financial)

        assert SuggestionSource(rules=[MRRRealismSuggestion(tolerance=0.05)]).suggest(documents) == []

    def test_wide_tolerance(self, aligned_documents):
        financial = aligned_documents[DocumentKind.FINANCIAL].content.model_copy(deep=True)
        financial.revenue.mrr = 40_000
        documents = _with(aligned_documents, DocumentKind.FINANCIAL, financial)

        assert SuggestionSource(rules=[MRRRealismSuggestion(tolerance=0.5)]).suggest(documents) == []


class TestDocumentAnalyzer:
    def test_combines_inconsistencies_and_suggestions(self, aligned_documents):
        strategy = aligned_documents[DocumentKind.STRATEGY].content.model_copy(deep=True)
        strategy.business_goals.append("Attain customer satisfaction rating over 90% within 18 months")
        documents = _with(aligned_documents, DocumentKind.STRATEGY, strategy)

        findings = DocumentAnalyzer().analyze(documents)

        assert sum(isinstance(f, Inconsistency) for f in findings) == 1
        assert sum(isinstance(f, Suggestion) for f in findings) == 5
        assert isinstance(findings[0], Inconsistency)
