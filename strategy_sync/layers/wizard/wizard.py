"""
GuidedStrategyWizard: 4단계 인터뷰 상태 기계.

상태 전이:
┌────────────────┬──────────────┬────────────────┬──────────────────────────────┐
│ 현재 상태      │ 입력         │ 다음 상태      │ 부수 효과                    │
├────────────────┼──────────────┼────────────────┼──────────────────────────────┤
│ inactive       │ start()      │ awaiting(1)    │ P1 반환                      │
│ awaiting(n<4)  │ submit(text) │ awaiting(n+1)  │ answers[n] 기록, P(n+1) 반환 │
│ awaiting(4)    │ submit(text) │ generating     │ answers[4] 기록, 문서 생성   │
│ generating     │ (생성 완료)  │ inactive       │ 문서 4종 교체, ledger 갱신   │
│ awaiting(n)    │ cancel()     │ inactive       │ answers 폐기                 │
│ inactive       │ submit(text) │ inactive       │ 무시 (debug 로그)            │
│ generating     │ submit(text) │ generating     │ 무시 (debug 로그)            │
└────────────────┴──────────────┴────────────────┴──────────────────────────────┘

문서 생성 또는 저장이 실패하면 awaiting(4) (answers[4] 미기록)으로 되돌리고
CollaboratorFailure를 호출자에게 전파합니다. 사용자는 같은 답변으로 재시도할 수 있습니다.
"""

import logging
from typing import Mapping, Optional

from strategy_sync.context import ProjectContext
from strategy_sync.exceptions import CollaboratorFailure, InvalidTransitionError
from strategy_sync.interfaces import DocumentAuthor, DocumentStore
from strategy_sync.layers.consistency import DocumentAnalyzer
from strategy_sync.models import (
    TOTAL_STEPS,
    Document,
    DocumentKind,
    WizardPhase,
    WizardReply,
    WizardState,
)

from .prompts.wizard_prompts import (
    CANCELLED_MESSAGE,
    COMPLETION_MESSAGE,
    STEP_PROMPTS,
)

logger = logging.getLogger(__name__)


class GuidedStrategyWizard:
    def __init__(
        self,
        author: DocumentAuthor,
        analyzer: Optional[DocumentAnalyzer] = None,
        store: Optional[DocumentStore] = None,
    ):
        self.author = author
        self.analyzer = analyzer or DocumentAnalyzer()
        self.store = store

    def start(self, ctx: ProjectContext) -> Optional[str]:
        """새 인터뷰 시작. 이미 진행 중이면 무시하고 현재 프롬프트 반환."""
        if ctx.wizard.phase != WizardPhase.INACTIVE:
            self._ignore(ctx, "start")
            return self.current_prompt(ctx)

        ctx.wizard = WizardState.awaiting(1)
        logger.info(f"[Wizard] {ctx.project_id}: 시작")
        return STEP_PROMPTS[1]

    def current_prompt(self, ctx: ProjectContext) -> Optional[str]:
        if ctx.wizard.phase != WizardPhase.AWAITING:
            return None
        return STEP_PROMPTS[ctx.wizard.step]

    def cancel(self, ctx: ProjectContext) -> Optional[str]:
        """진행 중인 답변을 폐기. 문서는 변경하지 않습니다."""
        if ctx.wizard.phase != WizardPhase.AWAITING:
            self._ignore(ctx, "cancel")
            return None

        logger.info(f"[Wizard] {ctx.project_id}: {ctx.wizard.step}단계에서 취소")
        ctx.wizard = WizardState()
        return CANCELLED_MESSAGE

    async def submit(self, ctx: ProjectContext, text: str) -> WizardReply:
        """
        현재 단계 답변 제출.

        Args:
            ctx: 프로젝트 컨텍스트
            text: 사용자 답변

        Returns:
            WizardReply (accepted=False이면 아무것도 바뀌지 않음)

        Raises:
            CollaboratorFailure: 문서 생성/저장 실패 (상태는 제출 전으로 복원됨)
        """
        state = ctx.wizard
        if state.phase != WizardPhase.AWAITING:
            self._ignore(ctx, "submit")
            return WizardReply(accepted=False)

        next_state = state.record(text)
        if next_state.phase == WizardPhase.AWAITING:
            ctx.wizard = next_state
            logger.info(f"[Wizard] {ctx.project_id}: {state.step}단계 답변 기록")
            return WizardReply(
                accepted=True,
                message=STEP_PROMPTS[next_state.step],
                step=next_state.step,
            )

        ctx.wizard = next_state
        try:
            documents = await self._generate(next_state.answers)
            await self._persist(ctx, documents)
        except Exception:
            ctx.wizard = state
            raise

        ctx.documents.update(documents)
        ctx.ledger.refresh(self.analyzer.analyze(ctx.documents))
        ctx.wizard = WizardState()
        logger.info(f"[Wizard] {ctx.project_id}: 문서 {len(documents)}종 생성 완료")
        return WizardReply(accepted=True, message=COMPLETION_MESSAGE, completed=True)

    async def _generate(self, answers: Mapping[int, str]) -> dict[DocumentKind, Document]:
        try:
            documents = await self.author.generate(dict(answers))
        except Exception as e:
            logger.error(f"[Wizard] 문서 생성 실패: {type(e).__name__}: {e}")
            raise CollaboratorFailure(
                "문서 생성에 실패했습니다",
                details={"collaborator": "DocumentAuthor", "error": str(e)},
            ) from e

        missing = [kind.value for kind in DocumentKind if kind not in documents]
        if missing:
            raise CollaboratorFailure(
                "문서 생성 결과에 누락된 문서가 있습니다",
                details={"collaborator": "DocumentAuthor", "missing": missing},
            )
        return {kind: documents[kind] for kind in DocumentKind}

    async def _persist(self, ctx: ProjectContext, documents: Mapping[DocumentKind, Document]) -> None:
        """문서 4종 저장. 중간에 실패하면 이미 저장한 문서를 이전 내용으로 되돌립니다."""
        if self.store is None:
            return

        saved: list[DocumentKind] = []
        try:
            for kind, document in documents.items():
                if not await self.store.save_document(ctx.project_id, document):
                    raise CollaboratorFailure(
                        f"문서 저장 실패: {kind.value}",
                        details={"collaborator": "DocumentStore", "kind": kind.value},
                    )
                saved.append(kind)
        except Exception as e:
            await self._restore(ctx, saved)
            if isinstance(e, CollaboratorFailure):
                raise
            raise CollaboratorFailure(
                "문서 저장에 실패했습니다",
                details={"collaborator": "DocumentStore", "error": str(e)},
            ) from e

    async def _restore(self, ctx: ProjectContext, kinds: list[DocumentKind]) -> None:
        for kind in kinds:
            try:
                await self.store.save_document(ctx.project_id, ctx.documents[kind])
            except Exception as e:
                logger.error(f"[Wizard] {kind.value} 복원 저장 실패: {e}")

    @staticmethod
    def _ignore(ctx: ProjectContext, operation: str) -> None:
        error = InvalidTransitionError(
            f"{ctx.wizard.phase.value} 상태에서 {operation} 무시",
            details={"project_id": ctx.project_id, "step": ctx.wizard.step},
        )
        logger.debug(f"[Wizard] {error.message}")
