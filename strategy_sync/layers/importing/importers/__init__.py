"""파일 형식별 Importer."""

from .json_importer import JsonImporter
from .table_importer import TableImporter
from .text_importer import TextImporter, parse_sections

__all__ = ["JsonImporter", "TableImporter", "TextImporter", "parse_sections"]
