"""
파일 기반 저장소 서비스입니다.
데이터베이스 대신 파일 시스템(폴더와 파일)을 사용하여 프로젝트 문서를 저장합니다.

저장 구조:
    {data_dir}/projects/{project_id}/Canvas.json
    {data_dir}/projects/{project_id}/Strategy.json
    {data_dir}/projects/{project_id}/OKRs.json
    {data_dir}/projects/{project_id}/FinancialProjection.json
    {data_dir}/projects/{project_id}/implemented.json
"""

import logging
import shutil
from datetime import datetime
from pathlib import Path
from typing import Optional, TypeVar, Type

import aiofiles
from pydantic import BaseModel, Field

from strategy_sync.config import get_settings
from strategy_sync.exceptions import StorageError
from strategy_sync.models import Document, DocumentKind
from strategy_sync.utils.validation import validate_project_id

logger = logging.getLogger(__name__)


T = TypeVar("T", bound=BaseModel)


class ImplementedRecord(BaseModel):
    """구현 완료된 finding id 목록."""

    finding_ids: list[str] = Field(default_factory=list)
    updated_at: datetime = Field(default_factory=datetime.now)


class FileStorage:
    """JSON 파일 기반의 단순 문서 저장소 클래스입니다."""

    def __init__(self, base_path: Optional[str] = None):
        # 기본 저장 경로 설정 (기본값: settings.data_dir)
        self.base_path = Path(base_path or get_settings().data_dir)
        self.projects_path = self.base_path / "projects"
        self.projects_path.mkdir(parents=True, exist_ok=True)

    def project_path(self, project_id: str) -> Path:
        return self.projects_path / validate_project_id(project_id)

    # ==================== 문서 ====================

    async def save_document(self, project_id: str, document: Document) -> bool:
        """문서를 파일로 저장합니다. 실패 시 StorageError."""
        project_dir = self.project_path(project_id)
        project_dir.mkdir(parents=True, exist_ok=True)
        await self._save_model(project_dir / f"{document.kind.value}.json", document)
        return True

    async def load_documents(self, project_id: str) -> dict[DocumentKind, Document]:
        """저장된 문서를 모두 읽어옵니다 (없는 종류는 결과에서 빠짐)."""
        project_dir = self.project_path(project_id)
        documents: dict[DocumentKind, Document] = {}
        for kind in DocumentKind:
            document = await self._load_model(project_dir / f"{kind.value}.json", Document)
            if document is not None:
                documents[kind] = document
        return documents

    # ==================== 구현 완료 기록 ====================

    async def save_implemented(self, project_id: str, finding_ids: set[str]) -> bool:
        project_dir = self.project_path(project_id)
        project_dir.mkdir(parents=True, exist_ok=True)
        record = ImplementedRecord(finding_ids=sorted(finding_ids))
        await self._save_model(project_dir / "implemented.json", record)
        return True

    async def load_implemented(self, project_id: str) -> set[str]:
        record = await self._load_model(
            self.project_path(project_id) / "implemented.json", ImplementedRecord
        )
        return set(record.finding_ids) if record else set()

    # ==================== 프로젝트 ====================

    async def delete_project(self, project_id: str) -> bool:
        """프로젝트 폴더를 통째로 삭제합니다."""
        project_dir = self.project_path(project_id)
        if project_dir.exists():
            shutil.rmtree(project_dir)
            return True
        return False

    def list_projects(self) -> list[str]:
        return sorted(path.name for path in self.projects_path.iterdir() if path.is_dir())

    # ==================== 내부 도우미 함수들 ====================

    async def _save_model(self, file_path: Path, model: BaseModel):
        """데이터 모델을 JSON 파일로 저장하는 공통 함수"""
        try:
            async with aiofiles.open(file_path, "w", encoding="utf-8") as f:
                await f.write(model.model_dump_json(indent=2))
        except Exception as e:
            logger.error(f"파일 저장 실패 {file_path}: {e}", exc_info=True)
            raise StorageError(
                f"파일 저장에 실패했습니다: {file_path.name}",
                details={"path": str(file_path), "error": str(e)},
            )

    async def _load_model(self, file_path: Path, model_class: Type[T]) -> Optional[T]:
        """JSON 파일을 읽어서 데이터 모델로 변환하는 공통 함수"""
        if not file_path.exists():
            return None

        try:
            async with aiofiles.open(file_path, "r", encoding="utf-8") as f:
                content = await f.read()
            return model_class.model_validate_json(content)
        except Exception as e:
            logger.error(f"파일 로딩 에러 {file_path}: {e}", exc_info=True)
            return None


# 싱글톤 인스턴스 (프로그램 전체에서 공유)
_file_storage: Optional[FileStorage] = None


def get_file_storage() -> FileStorage:
    """FileStorage 인스턴스를 반환합니다."""
    global _file_storage
    if _file_storage is None:
        _file_storage = FileStorage()
    return _file_storage
