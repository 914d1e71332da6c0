"""
ProjectService: 프로젝트 단위 작업의 진입점 (API가 사용하는 인터페이스).

프로젝트마다 ProjectContext(문서, ledger, 위저드 상태, asyncio.Lock)를 하나씩 두고,
문서를 바꾸는 모든 작업은 같은 순서를 따릅니다.

1. (잠금) 새 Document 계산
2. 저장소에 저장 (실패 시 CollaboratorFailure, 컨텍스트는 그대로)
3. 컨텍스트에 반영 → 분석 재실행 → ledger.refresh()

suggestion 적용 흐름:
┌──────────────────────────┬─────────────────────────────────────────────┐
│ 상황                     │ 결과                                        │
├──────────────────────────┼─────────────────────────────────────────────┤
│ active에 있음            │ 적용 → 저장 → 재분석 → 구현 완료 기록       │
│ active에 없음, 구현 완료 │ 문서 변경 없음 (document=None)              │
│ active에 없음, 미구현    │ FindingNotFoundError                        │
│ 적용 불가 (applier 거부) │ 문서 변경 없음, 구현 완료로 기록하지 않음   │
│ 저장 실패                │ CollaboratorFailure, 상태 변경 없음         │
└──────────────────────────┴─────────────────────────────────────────────┘
"""

import asyncio
import logging
from typing import Any, Mapping, Optional

from pydantic import ValidationError

from strategy_sync.context import ProjectContext
from strategy_sync.exceptions import (
    CollaboratorFailure,
    FindingNotFoundError,
    InputValidationError,
)
from strategy_sync.interfaces import DocumentAuthor, DocumentStore, FileAdapter, TextResponder
from strategy_sync.layers.applier import SuggestionApplier
from strategy_sync.layers.authoring import TemplateDocumentAuthor
from strategy_sync.layers.consistency import DocumentAnalyzer
from strategy_sync.layers.importing import get_importer_factory
from strategy_sync.layers.wizard import GREETING_MESSAGE, STEP_PROMPTS, STEP_TITLES, GuidedStrategyWizard
from strategy_sync.layers.wizard.prompts.wizard_prompts import GENERATING_MESSAGE
from strategy_sync.models import (
    ApplyResult,
    ChatReply,
    Document,
    DocumentKind,
    Finding,
    FindingView,
    Inconsistency,
    ReplySource,
    Suggestion,
    WizardPhase,
    WizardStatus,
    content_model_for,
)
from strategy_sync.utils.validation import validate_project_id

from .file_storage import get_file_storage
from .text_responder import get_text_responder

logger = logging.getLogger(__name__)


class ProjectService:
    def __init__(
        self,
        store: Optional[DocumentStore] = None,
        responder: Optional[TextResponder] = None,
        author: Optional[DocumentAuthor] = None,
        adapter: Optional[FileAdapter] = None,
        analyzer: Optional[DocumentAnalyzer] = None,
        applier: Optional[SuggestionApplier] = None,
    ):
        self.store = store or get_file_storage()
        self.responder = responder or get_text_responder()
        self.adapter = adapter or get_importer_factory()
        self.analyzer = analyzer or DocumentAnalyzer()
        self.applier = applier or SuggestionApplier()
        self.wizard = GuidedStrategyWizard(
            author=author or TemplateDocumentAuthor(),
            analyzer=self.analyzer,
            store=self.store,
        )
        self._contexts: dict[str, ProjectContext] = {}
        self._contexts_lock = asyncio.Lock()

    # ==================== 컨텍스트 ====================

    async def get_context(self, project_id: str) -> ProjectContext:
        """프로젝트 컨텍스트 (처음 접근 시 저장소에서 문서와 구현 완료 기록을 읽음)."""
        project_id = validate_project_id(project_id)
        ctx = self._contexts.get(project_id)
        if ctx is not None:
            return ctx

        async with self._contexts_lock:
            ctx = self._contexts.get(project_id)
            if ctx is None:
                ctx = ProjectContext(project_id=project_id)
                stored = await self.store.load_documents(project_id)
                ctx.documents.update(stored)
                ctx.ledger.restore_implemented(await self.store.load_implemented(project_id))
                ctx.ledger.refresh(self.analyzer.analyze(ctx.documents))
                self._contexts[project_id] = ctx
                logger.info(
                    f"[Project] {project_id}: 로드 (문서 {len(stored)}종, "
                    f"구현 완료 {len(ctx.ledger.implemented)}건)"
                )
        return ctx

    # ==================== 문서 ====================

    async def get_documents(self, project_id: str) -> dict[DocumentKind, Document]:
        ctx = await self.get_context(project_id)
        return ctx.snapshot()

    async def get_document(self, project_id: str, kind: DocumentKind) -> Document:
        ctx = await self.get_context(project_id)
        return ctx.document(kind)

    async def update_document(
        self, project_id: str, kind: DocumentKind, content: Mapping[str, Any]
    ) -> Document:
        """구조화 콘텐츠 전체 교체 (수동 편집)."""
        kind = DocumentKind(kind)
        try:
            parsed = content_model_for(kind).model_validate(dict(content))
        except ValidationError as e:
            raise InputValidationError(
                f"{kind.value} 문서 형식이 올바르지 않습니다",
                details={"errors": e.errors(include_url=False)},
            ) from e
        return await self._replace_content(project_id, kind, parsed)

    async def import_document(
        self, project_id: str, kind: DocumentKind, filename: str, data: bytes
    ) -> Document:
        """업로드 파일 → 문서 교체. 변환 실패 시 FileImportError / InputValidationError."""
        kind = DocumentKind(kind)
        content = await self.adapter.to_structured_content(filename, data, kind)
        return await self._replace_content(project_id, kind, content)

    async def _replace_content(self, project_id: str, kind: DocumentKind, content) -> Document:
        ctx = await self.get_context(project_id)
        async with ctx.lock:
            document = ctx.document(kind).with_content(content)
            await self._save(ctx, document)
            ctx.replace(document)
            self._reanalyze(ctx)
            logger.info(f"[Project] {ctx.project_id}: {kind.value} 교체")
            return document

    # ==================== 발견 항목 ====================

    async def get_inconsistencies(self, project_id: str, kind: DocumentKind) -> list[FindingView]:
        """kind가 source 또는 target인 Inconsistency."""
        ctx = await self.get_context(project_id)
        return self._views(ctx, ctx.ledger.involving(kind))

    async def get_suggestions(self, project_id: str, kind: DocumentKind) -> list[FindingView]:
        ctx = await self.get_context(project_id)
        return self._views(ctx, ctx.ledger.suggestions_for(kind))

    async def get_finding(self, project_id: str, finding_id: str) -> FindingView:
        ctx = await self.get_context(project_id)
        finding = ctx.ledger.get(finding_id)
        if finding is None:
            raise FindingNotFoundError(
                f"항목을 찾을 수 없습니다: {finding_id}",
                details={"project_id": ctx.project_id, "finding_id": finding_id},
            )
        return FindingView(finding=finding, implemented=ctx.ledger.is_implemented(finding_id))

    async def is_implemented(self, project_id: str, finding_id: str) -> bool:
        ctx = await self.get_context(project_id)
        return ctx.ledger.is_implemented(finding_id)

    async def apply_suggestion(self, project_id: str, finding_id: str) -> ApplyResult:
        """
        Suggestion/Inconsistency의 Action을 적용.

        Raises:
            FindingNotFoundError: active에도 구현 완료 기록에도 없는 id
            CollaboratorFailure: 저장 실패 (문서/ledger 변경 없음)
        """
        ctx = await self.get_context(project_id)
        async with ctx.lock:
            finding = ctx.ledger.get(finding_id)
            if finding is None:
                if ctx.ledger.is_implemented(finding_id):
                    logger.info(f"[Project] {ctx.project_id}: 이미 구현된 항목 {finding_id}")
                    return self._apply_result(ctx, finding_id, None, applied=False)
                raise FindingNotFoundError(
                    f"항목을 찾을 수 없습니다: {finding_id}",
                    details={"project_id": ctx.project_id, "finding_id": finding_id},
                )

            current = ctx.document(finding.action.document_kind)
            updated = self.applier.apply(current, finding.action)
            if updated is current:
                return self._apply_result(ctx, finding_id, current, applied=False)

            changed = updated.content != current.content
            if changed:
                await self._save(ctx, updated)
            implemented = set(ctx.ledger.implemented) | {finding_id}
            try:
                await self._save_implemented(ctx, implemented)
            except CollaboratorFailure:
                if changed:
                    await self._restore(ctx, current)
                raise

            if changed:
                ctx.replace(updated)
                self._reanalyze(ctx)
            ctx.ledger.mark_implemented(finding_id)
            logger.info(
                f"[Project] {ctx.project_id}: {finding.rule} 적용 → "
                f"{finding.action.document_kind.value} ({finding_id})"
            )
            return self._apply_result(ctx, finding_id, ctx.document(finding.action.document_kind), applied=changed)

    # ==================== 대화 / 위저드 ====================

    async def handle_message(self, project_id: str, text: str) -> ChatReply:
        """
        자유 입력 처리.

        위저드가 답변을 기다리는 중이면 위저드가 소비하고, 생성 중이면 안내 메시지,
        그 외에는 TextResponder가 응답합니다.
        """
        ctx = await self.get_context(project_id)
        if ctx.wizard.phase == WizardPhase.GENERATING:
            return self._reply(ctx, GENERATING_MESSAGE, ReplySource.SYSTEM)

        if ctx.wizard.phase == WizardPhase.AWAITING:
            async with ctx.lock:
                reply = await self.wizard.submit(ctx, text)
            if reply.accepted:
                return self._reply(
                    ctx, reply.message or "", ReplySource.WIZARD, documents_generated=reply.completed
                )

        try:
            message = await self.responder.respond(text, ctx.snapshot())
        except CollaboratorFailure:
            raise
        except Exception as e:
            logger.error(f"[Project] 응답 생성 실패: {type(e).__name__}: {e}")
            raise CollaboratorFailure(
                "응답 생성에 실패했습니다",
                details={"collaborator": "TextResponder", "error": str(e)},
            ) from e
        return self._reply(ctx, message, ReplySource.RESPONDER)

    async def greeting(self, project_id: str) -> ChatReply:
        """문서가 모두 비어 있으면 위저드 안내, 아니면 현재 상태 요약."""
        ctx = await self.get_context(project_id)
        if ctx.wizard.phase == WizardPhase.AWAITING:
            return self._reply(ctx, self.wizard.current_prompt(ctx) or "", ReplySource.WIZARD)
        if ctx.all_empty():
            return self._reply(ctx, GREETING_MESSAGE, ReplySource.SYSTEM)

        open_findings = [f for f in ctx.ledger.active if not ctx.ledger.is_implemented(f.id)]
        inconsistencies = sum(isinstance(f, Inconsistency) for f in open_findings)
        suggestions = sum(isinstance(f, Suggestion) for f in open_findings)
        return self._reply(
            ctx,
            f"Welcome back! Your documents currently have {inconsistencies} open "
            f"inconsistencies and {suggestions} suggestions for improvement.",
            ReplySource.SYSTEM,
        )

    async def start_wizard(self, project_id: str) -> WizardStatus:
        ctx = await self.get_context(project_id)
        self.wizard.start(ctx)
        return self._wizard_status(ctx)

    async def submit_wizard(self, project_id: str, text: str) -> ChatReply:
        """위저드 답변 제출 (위저드가 답변을 기다리지 않으면 무시됨)."""
        ctx = await self.get_context(project_id)
        if ctx.wizard.phase == WizardPhase.GENERATING:
            return self._reply(ctx, GENERATING_MESSAGE, ReplySource.SYSTEM)
        async with ctx.lock:
            reply = await self.wizard.submit(ctx, text)
        message = reply.message if reply.accepted else "The guided strategy setup is not active."
        return self._reply(ctx, message or "", ReplySource.WIZARD, documents_generated=reply.completed)

    async def cancel_wizard(self, project_id: str) -> WizardStatus:
        ctx = await self.get_context(project_id)
        self.wizard.cancel(ctx)
        return self._wizard_status(ctx)

    async def current_prompt(self, project_id: str) -> Optional[str]:
        ctx = await self.get_context(project_id)
        return self.wizard.current_prompt(ctx)

    async def wizard_status(self, project_id: str) -> WizardStatus:
        ctx = await self.get_context(project_id)
        return self._wizard_status(ctx)

    # ==================== 프로젝트 ====================

    async def reset_project(self, project_id: str) -> dict[DocumentKind, Document]:
        """저장된 문서/구현 완료 기록 삭제 후 빈 문서 4종으로 초기화."""
        ctx = await self.get_context(project_id)
        async with ctx.lock:
            try:
                await self.store.delete_project(ctx.project_id)
            except Exception as e:
                raise CollaboratorFailure(
                    "프로젝트 삭제에 실패했습니다",
                    details={"collaborator": "DocumentStore", "error": str(e)},
                ) from e

            fresh = ProjectContext(project_id=ctx.project_id)
            ctx.documents = fresh.documents
            ctx.wizard = fresh.wizard
            ctx.ledger.reset()
            logger.info(f"[Project] {ctx.project_id}: 초기화")
            return ctx.snapshot()

    # ==================== 내부 도우미 함수들 ====================

    def _reanalyze(self, ctx: ProjectContext) -> None:
        ctx.ledger.refresh(self.analyzer.analyze(ctx.documents))

    async def _save(self, ctx: ProjectContext, document: Document) -> None:
        try:
            saved = await self.store.save_document(ctx.project_id, document)
        except Exception as e:
            logger.error(f"[Project] {document.kind.value} 저장 실패: {e}")
            raise CollaboratorFailure(
                f"문서 저장 실패: {document.kind.value}",
                details={"collaborator": "DocumentStore", "error": str(e)},
            ) from e
        if not saved:
            raise CollaboratorFailure(
                f"문서 저장 실패: {document.kind.value}",
                details={"collaborator": "DocumentStore", "kind": document.kind.value},
            )

    async def _save_implemented(self, ctx: ProjectContext, finding_ids: set[str]) -> None:
        try:
            saved = await self.store.save_implemented(ctx.project_id, finding_ids)
        except Exception as e:
            logger.error(f"[Project] 구현 완료 기록 저장 실패: {e}")
            raise CollaboratorFailure(
                "구현 완료 기록 저장에 실패했습니다",
                details={"collaborator": "DocumentStore", "error": str(e)},
            ) from e
        if not saved:
            raise CollaboratorFailure(
                "구현 완료 기록 저장에 실패했습니다",
                details={"collaborator": "DocumentStore"},
            )

    async def _restore(self, ctx: ProjectContext, document: Document) -> None:
        try:
            await self.store.save_document(ctx.project_id, document)
        except Exception as e:
            logger.error(f"[Project] {document.kind.value} 복원 저장 실패: {e}")

    @staticmethod
    def _views(ctx: ProjectContext, findings: list[Finding]) -> list[FindingView]:
        return [
            FindingView(finding=finding, implemented=ctx.ledger.is_implemented(finding.id))
            for finding in findings
        ]

    @staticmethod
    def _apply_result(
        ctx: ProjectContext, finding_id: str, document: Optional[Document], applied: bool
    ) -> ApplyResult:
        return ApplyResult(
            finding_id=finding_id,
            applied=applied,
            implemented=ctx.ledger.is_implemented(finding_id),
            document=document,
        )

    def _wizard_status(self, ctx: ProjectContext) -> WizardStatus:
        state = ctx.wizard
        step = state.step if state.phase == WizardPhase.AWAITING else None
        return WizardStatus(
            phase=state.phase,
            step=state.step,
            title=STEP_TITLES.get(step) if step else None,
            prompt=STEP_PROMPTS.get(step) if step else None,
            answered_steps=sorted(state.answers),
        )

    def _reply(
        self,
        ctx: ProjectContext,
        message: str,
        source: ReplySource,
        documents_generated: bool = False,
    ) -> ChatReply:
        return ChatReply(
            message=message,
            source=source,
            wizard=self._wizard_status(ctx),
            documents_generated=documents_generated,
        )


# 싱글톤 인스턴스 (프로그램 전체에서 공유)
_project_service: Optional[ProjectService] = None


def get_project_service() -> ProjectService:
    """ProjectService 인스턴스를 반환합니다."""
    global _project_service
    if _project_service is None:
        _project_service = ProjectService()
    return _project_service
