"""
가이드 위저드 API입니다.
4단계 질문(비즈니스 모델 → 전략 방향 → OKR → 재무 목표)에 답하면 문서 4종이 함께 생성됩니다.
"""

from fastapi import APIRouter, Depends

from strategy_sync.models import ChatReply, MessageRequest, WizardStatus
from strategy_sync.services.project_service import ProjectService, get_project_service

router = APIRouter()


@router.get("/{project_id}/wizard", response_model=WizardStatus)
async def get_wizard(
    project_id: str,
    service: ProjectService = Depends(get_project_service),
) -> WizardStatus:
    return await service.wizard_status(project_id)


@router.post("/{project_id}/wizard/start", response_model=WizardStatus)
async def start_wizard(
    project_id: str,
    service: ProjectService = Depends(get_project_service),
) -> WizardStatus:
    """이미 진행 중이면 상태를 바꾸지 않고 현재 단계를 반환합니다."""
    return await service.start_wizard(project_id)


@router.post("/{project_id}/wizard/submit", response_model=ChatReply)
async def submit_wizard(
    project_id: str,
    request: MessageRequest,
    service: ProjectService = Depends(get_project_service),
) -> ChatReply:
    """현재 단계 답변 제출. 4단계 답변 후 문서 생성 실패 시 502 (ERR_COLLAB_001)."""
    return await service.submit_wizard(project_id, request.text)


@router.post("/{project_id}/wizard/cancel", response_model=WizardStatus)
async def cancel_wizard(
    project_id: str,
    service: ProjectService = Depends(get_project_service),
) -> WizardStatus:
    return await service.cancel_wizard(project_id)
