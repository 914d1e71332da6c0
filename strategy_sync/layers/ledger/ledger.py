"""
SuggestionLedger: 발견 항목 수명주기 추적.

active는 마지막 분석 결과로 통째로 교체되고, implemented는 한 번 들어간 id를
reset() 전까지 절대 잃지 않습니다. 따라서 조건이 해소되어 active에서 사라진
항목이나, 내용이 되돌아가 다시 나타난 항목도 구현 완료로 표시됩니다.
"""

import logging
from typing import Iterable, Optional

from strategy_sync.models import DocumentKind, Finding, Inconsistency, Suggestion

logger = logging.getLogger(__name__)


class SuggestionLedger:
    def __init__(self):
        self._active: dict[str, Finding] = {}
        self._implemented: set[str] = set()

    def refresh(self, findings: Iterable[Finding]) -> None:
        """active를 최신 분석 결과로 교체 (implemented는 건드리지 않음)."""
        self._active = {finding.id: finding for finding in findings}
        logger.debug(f"[Ledger] active {len(self._active)}건으로 갱신")

    def is_implemented(self, finding_id: str) -> bool:
        return finding_id in self._implemented

    def mark_implemented(self, finding_id: str) -> None:
        if finding_id in self._implemented:
            return
        self._implemented.add(finding_id)
        logger.info(f"[Ledger] 구현 완료 기록: {finding_id}")

    def restore_implemented(self, finding_ids: Iterable[str]) -> None:
        """저장소에서 읽은 구현 완료 id 복원."""
        self._implemented.update(finding_ids)

    def get(self, finding_id: str) -> Optional[Finding]:
        return self._active.get(finding_id)

    def for_document(self, kind: DocumentKind) -> list[Finding]:
        """
        문서별 항목.

        Suggestion은 action.document_kind 기준, Inconsistency는 source_kind 기준입니다.
        """
        kind = DocumentKind(kind)
        results: list[Finding] = []
        for finding in self._active.values():
            if isinstance(finding, Inconsistency):
                if finding.source_kind == kind:
                    results.append(finding)
            elif finding.action.document_kind == kind:
                results.append(finding)
        return results

    def involving(self, kind: DocumentKind) -> list[Inconsistency]:
        """source 또는 target이 kind인 Inconsistency (양쪽 문서에서 보이는 하나의 위반)."""
        kind = DocumentKind(kind)
        return [
            finding
            for finding in self._active.values()
            if isinstance(finding, Inconsistency) and finding.involves(kind)
        ]

    def suggestions_for(self, kind: DocumentKind) -> list[Suggestion]:
        return [
            finding
            for finding in self.for_document(kind)
            if isinstance(finding, Suggestion)
        ]

    @property
    def active(self) -> list[Finding]:
        return list(self._active.values())

    @property
    def implemented(self) -> frozenset[str]:
        return frozenset(self._implemented)

    def reset(self) -> None:
        self._active.clear()
        self._implemented.clear()
        logger.info("[Ledger] 초기화")
