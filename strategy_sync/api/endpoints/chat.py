"""
대화 API입니다.
위저드가 진행 중이면 입력을 위저드 답변으로, 아니면 응답기(TextResponder)로 보냅니다.
"""

from fastapi import APIRouter, Depends

from strategy_sync.models import ChatReply, MessageRequest
from strategy_sync.services.project_service import ProjectService, get_project_service

router = APIRouter()


@router.post("/{project_id}/chat", response_model=ChatReply)
async def chat(
    project_id: str,
    request: MessageRequest,
    service: ProjectService = Depends(get_project_service),
) -> ChatReply:
    return await service.handle_message(project_id, request.text)


@router.get("/{project_id}/greeting", response_model=ChatReply)
async def greeting(
    project_id: str,
    service: ProjectService = Depends(get_project_service),
) -> ChatReply:
    """문서가 비어 있으면 위저드 시작을 안내합니다."""
    return await service.greeting(project_id)
