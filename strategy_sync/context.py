"""
ProjectContext: 프로젝트 하나의 세션 상태.

전역 상태 대신 이 객체를 모든 컴포넌트 호출에 명시적으로 전달합니다.
documents는 종류별 불변 Document 스냅샷이며 항상 통째로 교체됩니다.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Optional

from strategy_sync.layers.ledger import SuggestionLedger
from strategy_sync.models import Document, DocumentKind, WizardState, empty_documents


@dataclass
class ProjectContext:
    project_id: str
    documents: dict[DocumentKind, Document] = field(default_factory=empty_documents)
    ledger: SuggestionLedger = field(default_factory=SuggestionLedger)
    wizard: WizardState = field(default_factory=WizardState)
    lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)

    def snapshot(self) -> dict[DocumentKind, Document]:
        """현재 문서 맵의 얕은 복사본 (Document 자체는 불변)."""
        return dict(self.documents)

    def document(self, kind: DocumentKind) -> Document:
        return self.documents[DocumentKind(kind)]

    def replace(self, document: Document) -> Optional[Document]:
        """문서 교체, 이전 문서 반환."""
        previous = self.documents.get(document.kind)
        self.documents[document.kind] = document
        return previous

    def all_empty(self) -> bool:
        return all(document.is_empty() for document in self.documents.values())
