"""
외부 협력자 인터페이스.

코어(위저드, 프로젝트 서비스)는 아래 Protocol에만 의존하며,
구현체는 주입됩니다 (FileStorage, TemplateTextResponder, TemplateDocumentAuthor 등).
"""

from typing import Mapping, Protocol, runtime_checkable

from strategy_sync.models import Document, DocumentContent, DocumentKind


@runtime_checkable
class DocumentStore(Protocol):
    """문서 저장소."""

    async def save_document(self, project_id: str, document: Document) -> bool: ...

    async def load_documents(self, project_id: str) -> dict[DocumentKind, Document]: ...

    async def save_implemented(self, project_id: str, finding_ids: set[str]) -> bool: ...

    async def load_implemented(self, project_id: str) -> set[str]: ...

    async def delete_project(self, project_id: str) -> bool: ...


@runtime_checkable
class TextResponder(Protocol):
    """자유 입력에 대한 응답 생성기."""

    async def respond(self, prompt_text: str, documents: Mapping[DocumentKind, Document]) -> str: ...


@runtime_checkable
class DocumentAuthor(Protocol):
    """위저드 답변 4개 → 문서 4종 (서로 정합한 상태로 함께 생성)."""

    async def generate(self, answers: Mapping[int, str]) -> dict[DocumentKind, Document]: ...


@runtime_checkable
class FileAdapter(Protocol):
    """업로드 파일 → 구조화 콘텐츠."""

    async def to_structured_content(
        self, filename: str, data: bytes, target_kind: DocumentKind
    ) -> DocumentContent: ...
