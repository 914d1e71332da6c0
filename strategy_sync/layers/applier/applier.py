"""
SuggestionApplier: Action → 새 Document.

(문서 종류, 연산) 레지스트리에서 변환 함수를 찾아 콘텐츠 사본에 적용합니다.
원본 Document는 변경되지 않습니다 (copy-on-write).

결과 판별:
- 변환 성공: 새 Document 반환 (rendered 재생성, last_modified 갱신)
- 등록되지 않은 조합 / 변환 중 예외: 원본 Document를 그대로 반환 (경고 로그)
호출자는 `result is doc`으로 적용 여부를 확인합니다.
"""

import logging
from typing import Mapping, Optional

from strategy_sync.exceptions import UnsupportedActionError
from strategy_sync.models import Action, Document, DocumentKind, OperationName

from .mutations import MUTATION_REGISTRY, MutationFn

logger = logging.getLogger(__name__)


class SuggestionApplier:
    def __init__(
        self,
        registry: Optional[Mapping[tuple[DocumentKind, OperationName], MutationFn]] = None,
    ):
        self._registry = dict(registry if registry is not None else MUTATION_REGISTRY)

    def supports(self, kind: DocumentKind, operation: OperationName) -> bool:
        return (DocumentKind(kind), OperationName(operation)) in self._registry

    def apply(self, doc: Document, action: Action) -> Document:
        """
        Action을 문서에 적용.

        Args:
            doc: 대상 문서 (변경되지 않음)
            action: 적용할 수정

        Returns:
            새 Document, 적용할 수 없으면 doc 자체
        """
        mutation = self._registry.get((doc.kind, action.operation))
        if action.document_kind != doc.kind or mutation is None:
            error = UnsupportedActionError(
                f"지원하지 않는 수정: {doc.kind.value} / {action.operation.value}",
                details={
                    "document_kind": doc.kind.value,
                    "action_document_kind": action.document_kind.value,
                    "operation": action.operation.value,
                },
            )
            logger.warning(f"[Applier] {error.message}")
            return doc

        try:
            content = mutation(doc.content.model_copy(deep=True), action.params)
        except Exception as e:
            logger.warning(
                f"[Applier] 변환 실패: {doc.kind.value} / {action.operation.value} "
                f"({type(e).__name__}: {e})"
            )
            return doc

        logger.info(f"[Applier] 적용 완료: {doc.kind.value} / {action.operation.value}")
        return doc.with_content(content)
