"""
문서 API입니다.
프로젝트의 문서 4종을 조회하고, 수동 편집/파일 가져오기로 교체하며, 프로젝트를 초기화합니다.
문서가 바뀔 때마다 정합성 분석이 다시 실행됩니다.
"""

from fastapi import APIRouter, Depends, File, UploadFile

from strategy_sync.models import Document, DocumentKind, DocumentListResponse, DocumentUpdateRequest
from strategy_sync.services.project_service import ProjectService, get_project_service

router = APIRouter()


@router.get("/{project_id}/documents", response_model=DocumentListResponse)
async def list_documents(
    project_id: str,
    service: ProjectService = Depends(get_project_service),
) -> DocumentListResponse:
    """프로젝트의 문서 4종 (없는 문서는 빈 문서)."""
    documents = await service.get_documents(project_id)
    return DocumentListResponse(project_id=project_id, documents=documents)


@router.get("/{project_id}/documents/{kind}", response_model=Document)
async def get_document(
    project_id: str,
    kind: DocumentKind,
    service: ProjectService = Depends(get_project_service),
) -> Document:
    return await service.get_document(project_id, kind)


@router.put("/{project_id}/documents/{kind}", response_model=Document)
async def update_document(
    project_id: str,
    kind: DocumentKind,
    request: DocumentUpdateRequest,
    service: ProjectService = Depends(get_project_service),
) -> Document:
    """
    구조화 콘텐츠 전체 교체.
    형식이 맞지 않으면 400 (ERR_INPUT_001), 저장 실패 시 502 (ERR_COLLAB_001).
    """
    return await service.update_document(project_id, kind, request.content)


@router.post("/{project_id}/documents/{kind}/import", response_model=Document)
async def import_document(
    project_id: str,
    kind: DocumentKind,
    file: UploadFile = File(...),
    service: ProjectService = Depends(get_project_service),
) -> Document:
    """
    파일 가져오기 API.

    지원 형식: JSON, 마크다운/텍스트(md, txt), 표(csv, xlsx, xls)
    """
    data = await file.read()
    return await service.import_document(project_id, kind, file.filename or "", data)


@router.post("/{project_id}/reset", response_model=DocumentListResponse)
async def reset_project(
    project_id: str,
    service: ProjectService = Depends(get_project_service),
) -> DocumentListResponse:
    """저장된 문서와 구현 완료 기록을 모두 지우고 빈 문서로 초기화."""
    documents = await service.reset_project(project_id)
    return DocumentListResponse(project_id=project_id, documents=documents)
