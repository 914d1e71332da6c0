"""
텍스트 파일(.txt)과 마크다운 파일(.md) Importer입니다.

`#` 제목은 섹션을 나누고, 글머리 기호/번호 목록과 일반 문단은 섹션 항목이 됩니다.
`###` 제목은 바로 위 `##` 제목을 parent로 기억합니다 (예: 전략 우선순위별 실행 과제).
제목 없이 `Vision:` 처럼 콜론으로 끝나는 짧은 줄도 제목으로 봅니다.
"""

import logging
import re

from strategy_sync.models import DocumentContent, DocumentKind
from ..base_importer import BaseImporter
from ..section_mapper import Section, build_content

logger = logging.getLogger(__name__)


_HEADING = re.compile(r"^(?P<level>#{1,6})\s+(?P<title>.+?)\s*#*\s*$")
_LIST_MARKER = re.compile(r"^(?:[-*+•]|\d+(?:\.\d+)*[.)])\s+")
_TABLE_SEPARATOR = re.compile(r"^\|?\s*:?-{3,}")


def parse_sections(text: str) -> list[Section]:
    """마크다운/텍스트 → 섹션 목록 (빈 섹션 포함, 문서 순서 유지)."""
    sections: list[Section] = [Section(heading="")]
    parents: dict[int, str] = {}

    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or _TABLE_SEPARATOR.match(line):
            continue

        heading = _HEADING.match(line)
        if heading:
            level = len(heading.group("level"))
            title = heading.group("title")
            parents = {k: v for k, v in parents.items() if k < level}
            parent = parents.get(level - 1, "") if level > 2 else ""
            parents[level] = title
            sections.append(Section(heading=title, parent=parent))
            continue

        if line.endswith(":") and len(line) < 60 and not _LIST_MARKER.match(line):
            # "Vision:" 형식의 일반 텍스트 제목
            sections.append(Section(heading=line.rstrip(":").strip()))
            continue

        sections[-1].items.append(_LIST_MARKER.sub("", line))

    return [s for s in sections if s.heading or s.items]


class TextImporter(BaseImporter):
    """일반 텍스트 및 마크다운 문서를 처리하는 Importer입니다."""

    @property
    def supported_extensions(self) -> list[str]:
        return [".txt", ".md", ".markdown"]

    async def to_structured_content(
        self,
        data: bytes,
        filename: str,
        target_kind: DocumentKind,
    ) -> DocumentContent:
        sections = parse_sections(self.decode(data, filename))
        logger.info(f"[Import] 텍스트 → {DocumentKind(target_kind).value}: {filename} (섹션 {len(sections)}개)")
        return build_content(target_kind, sections)
