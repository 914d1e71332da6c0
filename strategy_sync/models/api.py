"""
API 요청/응답 모델입니다.
ProjectService가 반환하고 FastAPI 엔드포인트가 그대로 직렬화합니다.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field

from .document import Document, DocumentKind
from .finding import Finding
from .wizard import WizardPhase


class ReplySource(str, Enum):
    """대화 응답 출처."""

    WIZARD = "wizard"           # 위저드가 입력을 답변으로 소비
    RESPONDER = "responder"     # TextResponder 응답
    SYSTEM = "system"           # 인사/상태 안내


class WizardStatus(BaseModel):
    """위저드 진행 상태."""

    phase: WizardPhase
    step: Optional[int] = None
    title: Optional[str] = Field(default=None, description="현재 단계 제목")
    prompt: Optional[str] = Field(default=None, description="현재 단계 질문")
    answered_steps: list[int] = Field(default_factory=list)


class ChatReply(BaseModel):
    """자유 입력에 대한 응답."""

    message: str
    source: ReplySource
    wizard: WizardStatus
    documents_generated: bool = False


class FindingView(BaseModel):
    """발견 항목 + 구현 완료 여부."""

    finding: Finding
    implemented: bool = False


class ApplyResult(BaseModel):
    """suggestion/inconsistency 적용 결과."""

    finding_id: str
    applied: bool = Field(..., description="문서 내용이 실제로 바뀌었는지")
    implemented: bool
    document: Optional[Document] = Field(default=None, description="적용 후 대상 문서")


class MessageRequest(BaseModel):
    text: str = Field(..., min_length=1, max_length=20_000)


class DocumentUpdateRequest(BaseModel):
    """구조화 콘텐츠 전체 교체 (camelCase 또는 snake_case 키)."""

    content: dict[str, Any]


class DocumentListResponse(BaseModel):
    project_id: str
    documents: dict[DocumentKind, Document]
