"""
Importer 팩토리(Importer Factory) 모듈입니다.
업로드된 파일을 검증한 뒤 확장자에 맞는 Importer를 찾아 구조화 콘텐츠로 변환합니다.
FileAdapter 인터페이스의 기본 구현입니다.
"""

import logging
from typing import Dict, Optional, Type

from strategy_sync.exceptions import FileImportError
from strategy_sync.models import DocumentContent, DocumentKind
from strategy_sync.utils.validation import (
    validate_file_extension,
    validate_file_signature,
    validate_file_size,
    validate_filename,
)
from .base_importer import BaseImporter

logger = logging.getLogger(__name__)


class ImporterFactory:
    """
    확장자별 Importer를 생성하고 파일 가져오기를 위임하는 클래스입니다.
    """

    def __init__(self):
        self._importers: Dict[str, BaseImporter] = {}
        self._importer_classes: Dict[str, Type[BaseImporter]] = {}

        # 사용 가능한 Importer 등록
        self._register_importers()

    def _register_importers(self):
        """모든 종류의 Importer 클래스를 확장자별로 등록하는 내부 함수"""
        from .importers.json_importer import JsonImporter
        from .importers.table_importer import TableImporter
        from .importers.text_importer import TextImporter

        for importer_class in (JsonImporter, TextImporter, TableImporter):
            importer = importer_class()
            for ext in importer.supported_extensions:
                self._importer_classes[ext] = importer_class
                self._importers.setdefault(ext, importer)

    @property
    def supported_extensions(self) -> list[str]:
        return sorted(self._importer_classes)

    def get_importer(self, extension: str) -> BaseImporter:
        """확장자에 맞는 Importer 인스턴스를 반환합니다."""
        importer = self._importers.get(extension.lower())
        if importer is None:
            raise FileImportError(
                f"지원하지 않는 파일 형식입니다: {extension}",
                details={"extension": extension, "supported": self.supported_extensions},
            )
        return importer

    async def to_structured_content(
        self,
        filename: str,
        data: bytes,
        target_kind: DocumentKind,
    ) -> DocumentContent:
        """
        업로드 파일 → target_kind 콘텐츠.

        Raises:
            InputValidationError: 파일명/크기/형식 검증 실패
            FileImportError: 내용을 해석할 수 없음
        """
        safe_name = validate_filename(filename)
        validate_file_size(len(data))
        extension = validate_file_extension(safe_name)
        validate_file_signature(data, extension)

        if not data.strip():
            raise FileImportError("빈 파일입니다", details={"filename": safe_name})

        importer = self.get_importer(extension)
        logger.info(f"[Import] {safe_name} → {DocumentKind(target_kind).value} ({type(importer).__name__})")
        return await importer.to_structured_content(data, safe_name, DocumentKind(target_kind))


# 싱글톤 인스턴스
_importer_factory: Optional[ImporterFactory] = None


def get_importer_factory() -> ImporterFactory:
    """ImporterFactory 인스턴스를 반환합니다."""
    global _importer_factory
    if _importer_factory is None:
        _importer_factory = ImporterFactory()
    return _importer_factory
