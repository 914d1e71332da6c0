"""입력 유효성 검증 유틸리티.

파일 가져오기와 프로젝트 식별자에 대한 보안 및 무결성 검증을 수행합니다.
"""

import os
import re

from strategy_sync.config import get_settings
from strategy_sync.exceptions import InputValidationError


# 가져오기 허용 파일 확장자 목록
ALLOWED_EXTENSIONS = {
    ".json",
    ".md", ".markdown", ".txt",
    ".csv", ".xlsx", ".xls",
}

# 매직 넘버 기반 파일 시그니처 (확장자 → 시그니처 바이트)
FILE_SIGNATURES = {
    ".xlsx": b"PK",          # ZIP-based (Office Open XML)
    ".xls": b"\xd0\xcf\x11", # OLE2 compound document
}

# 위험한 파일명 패턴
DANGEROUS_PATTERNS = re.compile(r"[<>:\"|?*\x00-\x1f]")

# 프로젝트 id: 저장소 폴더 이름으로 사용
PROJECT_ID_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_-]{0,63}$")


def validate_project_id(project_id: str) -> str:
    """
    프로젝트 id 검증.

    Raises:
        InputValidationError: 영문/숫자/_/- 외 문자 또는 64자 초과
    """
    if not project_id or not PROJECT_ID_PATTERN.match(project_id):
        raise InputValidationError(
            "잘못된 프로젝트 id입니다",
            details={"project_id": project_id},
        )
    return project_id


def validate_filename(filename: str) -> str:
    """
    파일명 유효성 검증.

    - 경로 순회 공격 방지 (../, / 등)
    - 널 바이트 제거
    - 위험 문자 검사
    - 길이 제한

    Returns:
        정리된 안전한 파일명

    Raises:
        InputValidationError: 유효하지 않은 파일명
    """
    settings = get_settings()

    if not filename or not filename.strip():
        raise InputValidationError("파일명이 비어있습니다")

    cleaned = filename.replace("\x00", "")

    basename = os.path.basename(cleaned)
    if basename != cleaned or ".." in cleaned:
        raise InputValidationError(
            "잘못된 파일명입니다: 경로 순회가 감지되었습니다",
            details={"filename": filename},
        )

    if DANGEROUS_PATTERNS.search(basename):
        raise InputValidationError(
            "파일명에 허용되지 않는 문자가 포함되어 있습니다",
            details={"filename": filename},
        )

    if len(basename) > settings.max_filename_length:
        raise InputValidationError(
            f"파일명이 너무 깁니다 (최대 {settings.max_filename_length}자)",
            details={"filename": basename, "length": len(basename)},
        )

    if not os.path.splitext(basename)[0]:
        raise InputValidationError(
            "파일명이 비어있습니다 (확장자만 존재)",
            details={"filename": basename},
        )

    return basename


def validate_file_size(file_size: int) -> None:
    """
    파일 크기 검증.

    Raises:
        InputValidationError: 크기 제한 초과
    """
    settings = get_settings()
    max_bytes = settings.max_file_size_mb * 1024 * 1024

    if file_size > max_bytes:
        raise InputValidationError(
            f"파일 크기가 제한을 초과했습니다 (최대 {settings.max_file_size_mb}MB)",
            details={
                "file_size_bytes": file_size,
                "max_size_bytes": max_bytes,
            },
        )


def validate_file_extension(filename: str) -> str:
    """
    파일 확장자 검증.

    Returns:
        소문자로 변환된 확장자 (예: ".csv")

    Raises:
        InputValidationError: 허용되지 않는 확장자
    """
    ext = os.path.splitext(filename)[1].lower()

    if not ext:
        raise InputValidationError(
            "파일에 확장자가 없습니다",
            details={"filename": filename},
        )

    if ext not in ALLOWED_EXTENSIONS:
        raise InputValidationError(
            f"허용되지 않는 파일 형식입니다: {ext}",
            details={
                "extension": ext,
                "allowed": sorted(ALLOWED_EXTENSIONS),
            },
        )

    return ext


def validate_file_signature(content: bytes, extension: str) -> None:
    """
    매직 넘버 기반 파일 내용 검증.

    시그니처가 정의되지 않은 확장자(텍스트 계열)는 검증을 건너뜁니다.

    Raises:
        InputValidationError: 시그니처 불일치
    """
    expected = FILE_SIGNATURES.get(extension)
    if expected is None:
        return

    if not content or len(content) < len(expected):
        raise InputValidationError(
            "파일 내용이 비어있거나 손상되었습니다",
            details={"extension": extension},
        )

    if not content.startswith(expected):
        raise InputValidationError(
            f"파일 내용이 확장자({extension})와 일치하지 않습니다",
            details={"extension": extension},
        )
