"""
엑셀(.xlsx, .xls) 및 CSV 파일 Importer입니다.
Pandas 라이브러리를 사용하여 표를 읽고 (섹션, 값) 행으로 변환합니다.

표 형식:
┌───────────────────────┬──────────────────────────────────────┐
│ section (1열)         │ value (2열 이후)                     │
├───────────────────────┼──────────────────────────────────────┤
│ Vision                │ To become the standard platform...   │
│ Business Goals        │ Achieve €400K in first-year revenue  │
│ Business Goals        │ Sustain a 40% profit margin          │
│ Total revenue         │ 400000                               │
│ Basic                 │ 49  (3열: 180 = 구독자 수)           │
└───────────────────────┴──────────────────────────────────────┘

"section"/"value" 이름의 열이 있으면 그 열을, 없으면 앞의 두 열을 사용합니다.
같은 섹션 이름이 이어지는 행은 하나의 섹션으로 묶입니다.
"""

import io
import logging

import pandas as pd

from strategy_sync.exceptions import FileImportError
from strategy_sync.models import DocumentContent, DocumentKind
from ..base_importer import BaseImporter
from ..section_mapper import Section, build_content

logger = logging.getLogger(__name__)


class TableImporter(BaseImporter):
    """Excel 및 CSV 데이터를 처리하는 Importer입니다."""

    @property
    def supported_extensions(self) -> list[str]:
        return [".xlsx", ".xls", ".csv"]

    async def to_structured_content(
        self,
        data: bytes,
        filename: str,
        target_kind: DocumentKind,
    ) -> DocumentContent:
        kind = DocumentKind(target_kind)
        df_dict = self._read_frames(data, filename)

        sections: list[Section] = []
        for sheet_name, df in df_dict.items():
            rows = self._rows(df)
            logger.debug(f"[Import] {filename}/{sheet_name}: {len(rows)}행")
            sections.extend(self._to_sections(rows, kind))

        logger.info(f"[Import] 표 → {kind.value}: {filename} (섹션 {len(sections)}개)")
        return build_content(kind, sections)

    def _read_frames(self, data: bytes, filename: str) -> dict[str, pd.DataFrame]:
        """파일 형식에 따라 Pandas로 읽기 (엑셀은 모든 시트)."""
        ext = "." + filename.lower().split(".")[-1] if "." in filename else ""
        try:
            if ext == ".csv":
                return {"Sheet1": pd.read_csv(io.BytesIO(data), dtype=str, keep_default_na=False)}
            xlsx = pd.ExcelFile(io.BytesIO(data))
            return {
                name: pd.read_excel(xlsx, sheet_name=name, dtype=str, keep_default_na=False)
                for name in xlsx.sheet_names
            }
        except (ValueError, OSError, pd.errors.ParserError) as e:
            raise FileImportError(
                f"표 파일을 읽을 수 없습니다: {filename}",
                details={"filename": filename, "error": str(e)},
            ) from e

    @staticmethod
    def _rows(df: pd.DataFrame) -> list[tuple[str, list[str]]]:
        """(섹션, 값 목록) 행. 빈 셀은 건너뜁니다."""
        if df.empty or len(df.columns) < 2:
            return []

        columns = {str(column).strip().lower(): column for column in df.columns}
        if "section" in columns and "value" in columns:
            key_column = columns["section"]
            value_columns = [columns["value"]] + [
                column for column in df.columns if column not in (columns["section"], columns["value"])
            ]
        else:
            key_column = df.columns[0]
            value_columns = list(df.columns[1:])

        rows = []
        for _, record in df.iterrows():
            key = _cell(record[key_column])
            values = [_cell(record[column]) for column in value_columns]
            values = [value for value in values if value]
            if key and values:
                rows.append((key, values))
        return rows

    @staticmethod
    def _to_sections(rows: list[tuple[str, list[str]]], kind: DocumentKind) -> list[Section]:
        if kind == DocumentKind.FINANCIAL:
            # 재무 행은 "키: 값" 항목 또는 요금제 표 행으로 변환
            items = [
                f"| {key} | {' | '.join(values)} |" if len(values) >= 2 else f"{key}: {values[0]}"
                for key, values in rows
            ]
            return [Section(heading="", items=items)]

        sections: list[Section] = []
        for key, values in rows:
            if not sections or sections[-1].heading != key:
                sections.append(Section(heading=key))
            sections[-1].items.append(" ".join(values))
        return sections


def _cell(value) -> str:
    text = str(value).strip()
    if text.endswith(".0") and text[:-2].isdigit():
        text = text[:-2]
    return text
