"""
발견 항목(Inconsistency / Suggestion) API입니다.

- 불일치는 source/target 어느 쪽 문서로 조회해도 같은 항목이 보입니다.
- 적용(apply)하면 대상 문서가 수정되고 항목이 구현 완료로 기록됩니다.
"""

from fastapi import APIRouter, Depends, Query

from strategy_sync.models import ApplyResult, DocumentKind, FindingView
from strategy_sync.services.project_service import ProjectService, get_project_service

router = APIRouter()


@router.get("/{project_id}/inconsistencies", response_model=list[FindingView])
async def list_inconsistencies(
    project_id: str,
    kind: DocumentKind = Query(..., description="조회할 문서 종류"),
    service: ProjectService = Depends(get_project_service),
) -> list[FindingView]:
    return await service.get_inconsistencies(project_id, kind)


@router.get("/{project_id}/suggestions", response_model=list[FindingView])
async def list_suggestions(
    project_id: str,
    kind: DocumentKind = Query(..., description="조회할 문서 종류"),
    service: ProjectService = Depends(get_project_service),
) -> list[FindingView]:
    return await service.get_suggestions(project_id, kind)


@router.get("/{project_id}/findings/{finding_id}", response_model=FindingView)
async def get_finding(
    project_id: str,
    finding_id: str,
    service: ProjectService = Depends(get_project_service),
) -> FindingView:
    """없는 id는 404 (ERR_FINDING_001)."""
    return await service.get_finding(project_id, finding_id)


@router.post("/{project_id}/findings/{finding_id}/apply", response_model=ApplyResult)
async def apply_finding(
    project_id: str,
    finding_id: str,
    service: ProjectService = Depends(get_project_service),
) -> ApplyResult:
    """
    항목의 수정 사항을 적용합니다.
    같은 항목을 다시 적용해도 문서는 한 번 적용한 상태 그대로입니다.
    """
    return await service.apply_suggestion(project_id, finding_id)
