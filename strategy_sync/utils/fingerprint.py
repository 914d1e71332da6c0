"""Finding id 생성.

id는 (규칙 이름, 원본 문서 종류, 대상 문서 종류, 핵심 내용)의 해시입니다.
같은 위반이 남아 있는 동안에는 재검사해도 같은 id가 나옵니다.
"""

import hashlib
from typing import Any, Iterable


def make_finding_id(prefix: str, rule: str, parts: Iterable[Any]) -> str:
    """
    내용 기반 finding id.

    Args:
        prefix: "inc" (Inconsistency) 또는 "sug" (Suggestion)
        rule: 규칙 이름
        parts: 문서 종류와 핵심 값들 (순서 유지)

    Returns:
        예: "inc-3f9a0c1d2b4e"
    """
    normalized = [rule] + [_normalize(p) for p in parts]
    digest = hashlib.sha1("|".join(normalized).encode("utf-8")).hexdigest()
    return f"{prefix}-{digest[:12]}"


def _normalize(value: Any) -> str:
    if hasattr(value, "value"):
        value = value.value
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, str):
        return " ".join(value.lower().split())
    if isinstance(value, (list, tuple)):
        return ",".join(_normalize(v) for v in value)
    return str(value)
