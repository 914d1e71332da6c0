"""
JSON 파일 Importer.

다음 형식을 받습니다 (키는 camelCase 또는 snake_case):
- 콘텐츠 객체 그대로: {"vision": "...", "businessGoals": [...]}
- 내보낸 Document: {"kind": "Strategy", "content": {...}, ...}
- 래핑된 콘텐츠: {"raw": {...}}
"""

import json
import logging

from pydantic import ValidationError

from strategy_sync.exceptions import FileImportError
from strategy_sync.models import DocumentContent, DocumentKind, content_model_for
from ..base_importer import BaseImporter

logger = logging.getLogger(__name__)


class JsonImporter(BaseImporter):
    """구조화된 JSON 문서를 그대로 검증하는 Importer입니다."""

    @property
    def supported_extensions(self) -> list[str]:
        return [".json"]

    async def to_structured_content(
        self,
        data: bytes,
        filename: str,
        target_kind: DocumentKind,
    ) -> DocumentContent:
        text = self.decode(data, filename)
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as e:
            raise FileImportError(
                f"JSON 형식이 올바르지 않습니다: {filename}",
                details={"filename": filename, "line": e.lineno, "error": e.msg},
            ) from e

        if not isinstance(payload, dict):
            raise FileImportError(
                "JSON 최상위 값은 객체여야 합니다",
                details={"filename": filename, "type": type(payload).__name__},
            )

        kind = DocumentKind(target_kind)
        declared = payload.get("kind")
        if declared is not None and declared != kind.value:
            raise FileImportError(
                f"문서 종류가 다릅니다: {declared} (대상: {kind.value})",
                details={"filename": filename, "kind": declared, "target_kind": kind.value},
            )

        for key in ("content", "raw"):
            if isinstance(payload.get(key), dict):
                payload = payload[key]
                break

        try:
            content = content_model_for(kind).model_validate(payload)
        except ValidationError as e:
            raise FileImportError(
                f"{kind.value} 문서 형식이 올바르지 않습니다",
                details={"filename": filename, "errors": e.errors(include_url=False)},
            ) from e

        if content.is_empty():
            raise FileImportError(
                f"{kind.value} 문서로 인식할 수 있는 내용이 없습니다",
                details={"filename": filename, "target_kind": kind.value},
            )
        logger.info(f"[Import] JSON → {kind.value}: {filename}")
        return content
