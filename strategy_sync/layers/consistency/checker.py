"""
ConsistencyChecker: 문서 집합 → Inconsistency 목록.

순수 함수입니다. 같은 입력에는 항상 같은 id 집합을 반환하며
문서나 외부 상태를 변경하지 않습니다.

처리 흐름:
1. 규칙 레지스트리를 순서대로 순회
2. 규칙이 검사하는 두 문서 중 하나라도 없거나 비어 있으면 건너뜀
3. 규칙 실행 (예외는 RuleEvaluationError로 기록 후 건너뜀)
4. 발견 항목에 내용 기반 id 부여, id 기준 중복 제거
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Mapping, Optional

from strategy_sync.exceptions import RuleEvaluationError
from strategy_sync.models import Document, DocumentKind, Inconsistency
from strategy_sync.utils.fingerprint import make_finding_id

from .rules import DEFAULT_RULES, BaseConsistencyRule, RuleFinding

logger = logging.getLogger(__name__)


@dataclass
class CheckReport:
    """검사 결과와 실패한 규칙 목록."""

    inconsistencies: list[Inconsistency] = field(default_factory=list)
    errors: list[RuleEvaluationError] = field(default_factory=list)


class ConsistencyChecker:
    """문서 쌍 규칙 레지스트리를 실행하는 검사기."""

    def __init__(self, rules: Optional[Iterable[BaseConsistencyRule]] = None):
        self._rules = tuple(rules) if rules is not None else DEFAULT_RULES

    @property
    def rules(self) -> tuple[BaseConsistencyRule, ...]:
        return self._rules

    def check(self, documents: Mapping[DocumentKind, Document]) -> list[Inconsistency]:
        return self.check_with_report(documents).inconsistencies

    def check_with_report(self, documents: Mapping[DocumentKind, Document]) -> CheckReport:
        report = CheckReport()
        seen: set[str] = set()

        for rule in self._rules:
            first, second = (documents.get(kind) for kind in rule.kinds)
            if first is None or second is None or first.is_empty() or second.is_empty():
                continue

            try:
                inconsistencies = [
                    self._to_inconsistency(rule, finding)
                    for finding in rule.evaluate(first.content, second.content)
                ]
            except Exception as e:
                error = RuleEvaluationError(
                    f"규칙 평가 실패: {rule.name}",
                    details={"rule": rule.name, "error": f"{type(e).__name__}: {e}"},
                )
                logger.warning(f"[Checker] {error.message} ({type(e).__name__}: {e})")
                report.errors.append(error)
                continue

            for inconsistency in inconsistencies:
                if inconsistency.id in seen:
                    continue
                seen.add(inconsistency.id)
                report.inconsistencies.append(inconsistency)

        logger.debug(
            f"[Checker] {len(self._rules)}개 규칙 실행, "
            f"불일치 {len(report.inconsistencies)}건, 실패 {len(report.errors)}건"
        )
        return report

    @staticmethod
    def _to_inconsistency(rule: BaseConsistencyRule, finding: RuleFinding) -> Inconsistency:
        finding_id = make_finding_id(
            "inc",
            rule.name,
            [finding.source_kind, finding.target_kind, *finding.fingerprint],
        )
        return Inconsistency(
            id=finding_id,
            rule=rule.name,
            source_kind=finding.source_kind,
            target_kind=finding.target_kind,
            severity=finding.severity,
            text=finding.text,
            action=finding.action,
        )
