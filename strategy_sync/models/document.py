"""
Document 모델입니다.

프로젝트당 문서 종류(DocumentKind)별로 정확히 하나의 Document가 존재합니다.
Document는 불변(frozen) 값 객체이며, 변경은 항상 새 Document로 교체합니다.
rendered는 content에서 매번 파생되므로 content와 어긋날 수 없습니다.
"""

from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, computed_field, field_validator

from .content import (
    BaseDocumentContent,
    CanvasContent,
    FinancialContent,
    OKRContent,
    StrategyContent,
)


class DocumentKind(str, Enum):
    """문서 종류 (닫힌 열거형)."""
    CANVAS = "Canvas"
    STRATEGY = "Strategy"
    OKRS = "OKRs"
    FINANCIAL = "FinancialProjection"


CONTENT_MODELS: dict[DocumentKind, type[BaseDocumentContent]] = {
    DocumentKind.CANVAS: CanvasContent,
    DocumentKind.STRATEGY: StrategyContent,
    DocumentKind.OKRS: OKRContent,
    DocumentKind.FINANCIAL: FinancialContent,
}

DocumentContent = Union[CanvasContent, StrategyContent, OKRContent, FinancialContent]


def content_model_for(kind: DocumentKind) -> type[BaseDocumentContent]:
    return CONTENT_MODELS[DocumentKind(kind)]


class Document(BaseModel):
    """
    기획 문서 스냅샷.

    Attributes:
        kind: 문서 종류 (프로젝트 내 식별자)
        content: 종류별 구조화 콘텐츠
        rendered: content에서 파생된 마크다운 (읽기 전용)
        last_modified: 마지막 수정 시각
    """

    model_config = ConfigDict(frozen=True)

    kind: DocumentKind
    content: DocumentContent
    last_modified: datetime = Field(default_factory=datetime.now, description="마지막 수정 시각")

    @field_validator("content", mode="before")
    @classmethod
    def _coerce_content(cls, value: Any, info: ValidationInfo) -> Any:
        """kind에 맞는 콘텐츠 모델로 변환."""
        kind = info.data.get("kind")
        if kind is None:
            return value
        model = content_model_for(kind)
        if isinstance(value, model):
            return value
        if isinstance(value, BaseModel):
            value = value.model_dump()
        return model.model_validate(value or {})

    @computed_field  # type: ignore[prop-decorator]
    @property
    def rendered(self) -> str:
        return self.content.to_markdown()

    @classmethod
    def create(cls, kind: DocumentKind, content: Optional[DocumentContent] = None) -> "Document":
        """빈(기본) 콘텐츠 또는 주어진 콘텐츠로 문서 생성."""
        kind = DocumentKind(kind)
        if content is None:
            content = content_model_for(kind)()
        return cls(kind=kind, content=content)

    def with_content(self, content: DocumentContent) -> "Document":
        """새 콘텐츠를 가진 새 문서 (last_modified 갱신)."""
        modified = max(datetime.now(), self.last_modified + timedelta(microseconds=1))
        return Document(kind=self.kind, content=content, last_modified=modified)

    def is_empty(self) -> bool:
        return self.content.is_empty()


def empty_documents() -> dict[DocumentKind, Document]:
    """프로젝트 생성 시의 기본 문서 4종."""
    return {kind: Document.create(kind) for kind in DocumentKind}
