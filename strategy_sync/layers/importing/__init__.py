"""Importing Layer: 업로드 파일 → 구조화 문서 콘텐츠."""

from .base_importer import BaseImporter
from .importer_factory import ImporterFactory, get_importer_factory
from .section_mapper import Section, build_content

__all__ = [
    "BaseImporter",
    "ImporterFactory",
    "get_importer_factory",
    "Section",
    "build_content",
]
