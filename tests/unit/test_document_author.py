"""Unit tests for TemplateDocumentAuthor."""

import pytest

from strategy_sync.layers.authoring import TemplateDocumentAuthor
from strategy_sync.layers.consistency import ConsistencyChecker
from strategy_sync.models import DocumentKind


@pytest.fixture
def author():
    return TemplateDocumentAuthor()


class TestGenerate:
    async def test_generates_all_kinds(self, author, wizard_answers):
        documents = await author.generate(wizard_answers)

        assert set(documents) == set(DocumentKind)
        assert all(not doc.is_empty() for doc in documents.values())
        assert all(doc.kind == kind for kind, doc in documents.items())

    async def test_generated_documents_are_consistent(self, author, wizard_answers):
        documents = await author.generate(wizard_answers)
        assert ConsistencyChecker().check(documents) == []

    async def test_defaults_are_consistent(self, author):
        documents = await author.generate({})
        assert ConsistencyChecker().check(documents) == []

    async def test_other_figures_are_consistent(self, author):
        answers = {
            1: "Target mid-sized agencies",
            2: "aggressive",
            3: "Launch in Germany, 1,000 subscribers",
            4: "revenue €1.2M, margin 25%",
        }
        documents = await author.generate(answers)
        assert ConsistencyChecker().check(documents) == []

    async def test_figures_with_thousands_separators(self, author, wizard_answers):
        answers = {**wizard_answers, 4: "optimistic €1,500,000/45%, expected €1,200,000/40%"}
        documents = await author.generate(answers)

        assert documents[DocumentKind.FINANCIAL].content.revenue.total == 1_200_000
        assert "Achieve €1.2M in first-year revenue" in documents[DocumentKind.STRATEGY].content.business_goals
        assert ConsistencyChecker().check(documents) == []


class TestFigures:
    async def test_financial_projection(self, author, wizard_answers):
        documents = await author.generate(wizard_answers)
        financial = documents[DocumentKind.FINANCIAL].content

        assert financial.revenue.total == 400_000
        assert financial.revenue.subscriber_total() == 300
        assert financial.revenue.mrr == 26_700
        assert financial.profitability.profit_margin == 40.0
        assert financial.profitability.net_profit == 160_000
        assert [s.name for s in financial.scenarios] == ["optimistic", "expected", "pessimistic"]

    async def test_strategy_goals(self, author, wizard_answers):
        documents = await author.generate(wizard_answers)
        goals = documents[DocumentKind.STRATEGY].content.business_goals

        assert "Achieve €400K in first-year revenue" in goals
        assert "Sustain a 40% profit margin in the expected scenario" in goals

    async def test_okrs(self, author, wizard_answers):
        documents = await author.generate(wizard_answers)
        objectives = documents[DocumentKind.OKRS].content.objectives

        assert len(objectives) == 3
        assert objectives[0].title == "Achieve €400K in Total First-Year Revenue"

    async def test_stated_objectives_become_okr(self, author, wizard_answers):
        wizard_answers[3] = "Launch the MVP by Q2, reach €100k revenue, 300 subscribers"
        documents = await author.generate(wizard_answers)
        objectives = documents[DocumentKind.OKRS].content.objectives

        assert objectives[-1].title == "Deliver Founder-Defined Priorities"
        assert objectives[-1].key_results == ["Launch the MVP by Q2"]

    async def test_canvas(self, author, wizard_answers):
        documents = await author.generate(wizard_answers)
        canvas = documents[DocumentKind.CANVAS].content

        assert canvas.customer_segments == ["Small startups"]
        assert canvas.pain_points == ["Fragmented tools"]
        assert canvas.customer_acquisition
