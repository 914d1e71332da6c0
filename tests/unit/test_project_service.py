"""
Unit tests for ProjectService.

Runs against a temporary FileStorage with the template responder and author,
except where a failing store is injected to check rollback.
"""

import asyncio

import pytest
from unittest.mock import AsyncMock

from strategy_sync.exceptions import (
    CollaboratorFailure,
    FindingNotFoundError,
    InputValidationError,
)
from strategy_sync.layers.authoring import TemplateDocumentAuthor
from strategy_sync.layers.wizard import GREETING_MESSAGE, STEP_PROMPTS
from strategy_sync.layers.wizard.prompts.wizard_prompts import GENERATING_MESSAGE
from strategy_sync.models import (
    DocumentKind,
    Inconsistency,
    ReplySource,
    Suggestion,
    WizardPhase,
)
from strategy_sync.services.project_service import ProjectService


PROJECT = "demo"
SATISFACTION_GOAL = "Attain customer satisfaction rating over 90% within 18 months"


async def _load_aligned(service, aligned_documents, extra_goal=None):
    for kind, document in aligned_documents.items():
        content = document.content.model_dump()
        if kind == DocumentKind.STRATEGY and extra_goal:
            content["business_goals"].append(extra_goal)
        await service.update_document(PROJECT, kind, content)


async def _run_wizard(service, answers):
    await service.start_wizard(PROJECT)
    reply = None
    for step in (1, 2, 3, 4):
        reply = await service.handle_message(PROJECT, answers[step])
    return reply


class TestDocuments:
    async def test_new_project_has_empty_documents(self, project_service):
        documents = await project_service.get_documents(PROJECT)
        assert set(documents) == set(DocumentKind)
        assert all(doc.is_empty() for doc in documents.values())

    async def test_update_document_persists(self, project_service, temp_storage, strategy_content):
        document = await project_service.update_document(
            PROJECT, DocumentKind.STRATEGY, strategy_content.model_dump(by_alias=True)
        )

        assert document.content == strategy_content
        stored = await temp_storage.load_documents(PROJECT)
        assert stored[DocumentKind.STRATEGY].content == strategy_content

    async def test_update_rejects_invalid_content(self, project_service):
        with pytest.raises(InputValidationError):
            await project_service.update_document(PROJECT, DocumentKind.OKRS, {"objectives": "nope"})

    async def test_invalid_project_id(self, project_service):
        with pytest.raises(InputValidationError):
            await project_service.get_documents("../etc")

    async def test_import_document(self, project_service, okr_content):
        document = await project_service.import_document(
            PROJECT, DocumentKind.OKRS, "okrs.md", okr_content.to_markdown().encode()
        )
        assert document.content == okr_content

    async def test_save_failure_leaves_context_unchanged(self, mock_store, strategy_content):
        mock_store.save_document = AsyncMock(return_value=False)
        service = ProjectService(store=mock_store, author=TemplateDocumentAuthor())

        with pytest.raises(CollaboratorFailure):
            await service.update_document(PROJECT, DocumentKind.STRATEGY, strategy_content.model_dump())

        document = await service.get_document(PROJECT, DocumentKind.STRATEGY)
        assert document.is_empty()


class TestFindings:
    async def test_inconsistency_visible_from_both_documents(self, project_service, aligned_documents):
        await _load_aligned(project_service, aligned_documents, SATISFACTION_GOAL)

        from_strategy = await project_service.get_inconsistencies(PROJECT, DocumentKind.STRATEGY)
        from_okrs = await project_service.get_inconsistencies(PROJECT, DocumentKind.OKRS)
        from_canvas = await project_service.get_inconsistencies(PROJECT, DocumentKind.CANVAS)

        assert len(from_strategy) == 1
        assert isinstance(from_strategy[0].finding, Inconsistency)
        assert [v.finding.id for v in from_okrs] == [v.finding.id for v in from_strategy]
        assert from_canvas == []

    async def test_suggestions_per_document(self, project_service, aligned_documents):
        await _load_aligned(project_service, aligned_documents)

        views = await project_service.get_suggestions(PROJECT, DocumentKind.STRATEGY)
        assert {v.finding.rule for v in views} == {
            "strategic_priorities_missing",
            "competitive_analysis_missing",
        }
        assert all(isinstance(v.finding, Suggestion) and not v.implemented for v in views)

    async def test_get_finding_not_found(self, project_service):
        with pytest.raises(FindingNotFoundError):
            await project_service.get_finding(PROJECT, "inc-000000000000")


class TestApplySuggestion:
    async def test_apply_inconsistency(self, project_service, aligned_documents):
        await _load_aligned(project_service, aligned_documents, SATISFACTION_GOAL)
        [view] = await project_service.get_inconsistencies(PROJECT, DocumentKind.STRATEGY)

        result = await project_service.apply_suggestion(PROJECT, view.finding.id)

        assert result.applied
        assert result.implemented
        assert result.document.kind == DocumentKind.OKRS
        assert "90%" in result.document.rendered
        assert await project_service.get_inconsistencies(PROJECT, DocumentKind.STRATEGY) == []
        assert await project_service.is_implemented(PROJECT, view.finding.id)

    async def test_reapply_implemented_is_noop(self, project_service, aligned_documents):
        await _load_aligned(project_service, aligned_documents, SATISFACTION_GOAL)
        [view] = await project_service.get_inconsistencies(PROJECT, DocumentKind.OKRS)
        await project_service.apply_suggestion(PROJECT, view.finding.id)
        before = await project_service.get_document(PROJECT, DocumentKind.OKRS)

        result = await project_service.apply_suggestion(PROJECT, view.finding.id)

        assert not result.applied
        assert result.implemented
        assert result.document is None
        assert await project_service.get_document(PROJECT, DocumentKind.OKRS) is before

    async def test_apply_unknown_id(self, project_service):
        with pytest.raises(FindingNotFoundError):
            await project_service.apply_suggestion(PROJECT, "sug-unknown")

    async def test_apply_suggestion_marks_implemented(self, project_service, aligned_documents):
        await _load_aligned(project_service, aligned_documents)
        views = await project_service.get_suggestions(PROJECT, DocumentKind.CANVAS)
        [risk] = [v for v in views if v.finding.rule == "risk_management_missing"]

        result = await project_service.apply_suggestion(PROJECT, risk.finding.id)

        assert result.applied
        assert result.document.content.risk_management
        remaining = await project_service.get_suggestions(PROJECT, DocumentKind.CANVAS)
        assert risk.finding.id not in [v.finding.id for v in remaining]

    async def test_implemented_persisted_across_service_instances(
        self, project_service, temp_storage, aligned_documents
    ):
        await _load_aligned(project_service, aligned_documents, SATISFACTION_GOAL)
        [view] = await project_service.get_inconsistencies(PROJECT, DocumentKind.OKRS)
        await project_service.apply_suggestion(PROJECT, view.finding.id)

        reloaded = ProjectService(store=temp_storage, author=TemplateDocumentAuthor())

        assert await reloaded.is_implemented(PROJECT, view.finding.id)
        okrs = await reloaded.get_document(PROJECT, DocumentKind.OKRS)
        assert "90%" in okrs.rendered

    async def test_implemented_save_failure_rolls_back(self, mock_store, aligned_documents):
        service = ProjectService(store=mock_store, author=TemplateDocumentAuthor())
        await _load_aligned(service, aligned_documents, SATISFACTION_GOAL)
        [view] = await service.get_inconsistencies(PROJECT, DocumentKind.OKRS)
        before = await service.get_document(PROJECT, DocumentKind.OKRS)
        mock_store.save_implemented = AsyncMock(side_effect=OSError("disk full"))

        with pytest.raises(CollaboratorFailure):
            await service.apply_suggestion(PROJECT, view.finding.id)

        assert await service.get_document(PROJECT, DocumentKind.OKRS) is before
        assert not await service.is_implemented(PROJECT, view.finding.id)
        # 이미 저장한 OKRs는 이전 내용으로 다시 저장
        assert mock_store.save_document.await_args.args[1] is before


class TestChat:
    async def test_greeting_without_documents(self, project_service):
        reply = await project_service.greeting(PROJECT)
        assert reply.message == GREETING_MESSAGE
        assert reply.source == ReplySource.SYSTEM

    async def test_greeting_with_documents(self, project_service, aligned_documents):
        await _load_aligned(project_service, aligned_documents, SATISFACTION_GOAL)
        reply = await project_service.greeting(PROJECT)
        assert reply.message == (
            "Welcome back! Your documents currently have 1 open inconsistencies "
            "and 5 suggestions for improvement."
        )

    async def test_message_goes_to_responder_when_wizard_inactive(self, project_service):
        reply = await project_service.handle_message(PROJECT, "hello there")
        assert reply.source == ReplySource.RESPONDER
        assert reply.wizard.phase == WizardPhase.INACTIVE

    async def test_responder_failure(self, mock_store, mock_responder):
        mock_responder.respond = AsyncMock(side_effect=TimeoutError("slow"))
        service = ProjectService(store=mock_store, responder=mock_responder, author=TemplateDocumentAuthor())

        with pytest.raises(CollaboratorFailure) as exc_info:
            await service.handle_message(PROJECT, "hello")
        assert exc_info.value.details["collaborator"] == "TextResponder"

    async def test_submit_wizard_while_inactive(self, project_service):
        reply = await project_service.submit_wizard(PROJECT, "an answer")
        assert reply.message == "The guided strategy setup is not active."
        assert not reply.documents_generated


class TestWizardFlow:
    async def test_wizard_generates_consistent_documents(self, project_service, wizard_answers):
        status = await project_service.start_wizard(PROJECT)
        assert status.phase == WizardPhase.AWAITING
        assert status.step == 1
        assert status.prompt == STEP_PROMPTS[1]

        reply = await project_service.handle_message(PROJECT, wizard_answers[1])
        assert reply.source == ReplySource.WIZARD
        assert reply.message == STEP_PROMPTS[2]
        assert reply.wizard.answered_steps == [1]

        await project_service.handle_message(PROJECT, wizard_answers[2])
        await project_service.handle_message(PROJECT, wizard_answers[3])
        reply = await project_service.handle_message(PROJECT, wizard_answers[4])

        assert reply.documents_generated
        assert reply.wizard.phase == WizardPhase.INACTIVE
        documents = await project_service.get_documents(PROJECT)
        assert all(not doc.is_empty() for doc in documents.values())
        for kind in DocumentKind:
            assert await project_service.get_inconsistencies(PROJECT, kind) == []

    async def test_greeting_during_wizard_repeats_prompt(self, project_service, wizard_answers):
        await project_service.start_wizard(PROJECT)
        await project_service.handle_message(PROJECT, wizard_answers[1])

        reply = await project_service.greeting(PROJECT)
        assert reply.source == ReplySource.WIZARD
        assert reply.message == STEP_PROMPTS[2]

    async def test_cancel_keeps_documents(self, project_service, aligned_documents, wizard_answers):
        await _load_aligned(project_service, aligned_documents)
        before = await project_service.get_documents(PROJECT)
        await project_service.start_wizard(PROJECT)
        await project_service.handle_message(PROJECT, wizard_answers[1])

        status = await project_service.cancel_wizard(PROJECT)

        assert status.phase == WizardPhase.INACTIVE
        assert await project_service.get_documents(PROJECT) == before

    async def test_wizard_replaces_existing_documents(self, project_service, aligned_documents, wizard_answers):
        await _load_aligned(project_service, aligned_documents, SATISFACTION_GOAL)
        reply = await _run_wizard(project_service, wizard_answers)

        assert reply.documents_generated
        strategy = await project_service.get_document(PROJECT, DocumentKind.STRATEGY)
        assert "small startups" in strategy.content.vision


    async def test_submit_while_generating_changes_nothing(self, temp_storage, gated_author, wizard_answers):
        service = ProjectService(store=temp_storage, responder=AsyncMock(), author=gated_author)
        await service.start_wizard(PROJECT)
        for step in (1, 2, 3):
            await service.submit_wizard(PROJECT, wizard_answers[step])

        generation = asyncio.create_task(service.submit_wizard(PROJECT, wizard_answers[4]))
        await gated_author.started.wait()
        ctx = await service.get_context(PROJECT)
        answers_before = dict(ctx.wizard.answers)

        submitted = await service.submit_wizard(PROJECT, "Actually, make it aggressive")
        chatted = await service.handle_message(PROJECT, "Another answer")

        assert submitted.message == GENERATING_MESSAGE
        assert submitted.source == ReplySource.SYSTEM
        assert chatted.message == GENERATING_MESSAGE
        assert ctx.wizard.phase == WizardPhase.GENERATING
        assert ctx.wizard.answers == answers_before
        service.responder.respond.assert_not_awaited()

        gated_author.release.set()
        reply = await generation
        assert reply.documents_generated
        strategy = await service.get_document(PROJECT, DocumentKind.STRATEGY)
        assert "moderate" in strategy.content.mission


class TestReset:
    async def test_reset_clears_documents_and_ledger(self, project_service, temp_storage, aligned_documents):
        await _load_aligned(project_service, aligned_documents, SATISFACTION_GOAL)
        [view] = await project_service.get_inconsistencies(PROJECT, DocumentKind.OKRS)
        await project_service.apply_suggestion(PROJECT, view.finding.id)

        documents = await project_service.reset_project(PROJECT)

        assert all(doc.is_empty() for doc in documents.values())
        assert not await project_service.is_implemented(PROJECT, view.finding.id)
        assert await temp_storage.load_documents(PROJECT) == {}
        assert await temp_storage.load_implemented(PROJECT) == set()

    async def test_reset_cancels_wizard(self, project_service, wizard_answers):
        await project_service.start_wizard(PROJECT)
        await project_service.handle_message(PROJECT, wizard_answers[1])

        await project_service.reset_project(PROJECT)

        status = await project_service.wizard_status(PROJECT)
        assert status.phase == WizardPhase.INACTIVE
        assert status.answered_steps == []

