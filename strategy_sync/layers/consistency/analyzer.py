"""ConsistencyChecker와 SuggestionSource를 묶어 ledger에 넣을 전체 발견 항목을 만듭니다."""

from typing import Mapping, Optional

from strategy_sync.models import Document, DocumentKind, Finding

from .checker import ConsistencyChecker
from .suggestion_source import SuggestionSource


class DocumentAnalyzer:
    def __init__(
        self,
        checker: Optional[ConsistencyChecker] = None,
        suggestion_source: Optional[SuggestionSource] = None,
    ):
        self.checker = checker or ConsistencyChecker()
        self.suggestion_source = suggestion_source or SuggestionSource()

    def analyze(self, documents: Mapping[DocumentKind, Document]) -> list[Finding]:
        findings: list[Finding] = list(self.checker.check(documents))
        findings.extend(self.suggestion_source.suggest(documents))
        return findings
