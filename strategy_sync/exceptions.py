"""
strategy-sync 커스텀 예외 계층입니다.
각 레이어/서비스별 구조화된 에러 코드와 메시지를 제공합니다.

규칙/변환 내부 에러(RuleEvaluationError, UnsupportedActionError)와
잘못된 상태 전이(InvalidTransitionError)는 로그만 남기고 전파하지 않습니다.
외부 협력자 에러(CollaboratorFailure)는 호출자에게 전파됩니다.
"""

from typing import Optional, Any


class StrategySyncError(Exception):
    """strategy-sync 기본 예외 클래스."""

    def __init__(
        self,
        message: str,
        error_code: str = "ERR_UNKNOWN",
        details: Optional[Any] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.details = details
        super().__init__(self.message)


class UnsupportedActionError(StrategySyncError):
    """Applier: (문서 종류, 연산) 조합에 등록된 변환이 없음."""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message, error_code="ERR_ACTION_001", details=details)


class RuleEvaluationError(StrategySyncError):
    """Checker: 정합성 규칙 평가 중 예외 발생."""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message, error_code="ERR_RULE_001", details=details)


class CollaboratorFailure(StrategySyncError):
    """외부 협력자(save, TextResponder, DocumentAuthor) 호출 실패."""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message, error_code="ERR_COLLAB_001", details=details)


class InvalidTransitionError(StrategySyncError):
    """Wizard: 현재 상태에서 허용되지 않는 전이."""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message, error_code="ERR_WIZARD_001", details=details)


class FindingNotFoundError(StrategySyncError):
    """존재하지 않는 Suggestion/Inconsistency id."""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message, error_code="ERR_FINDING_001", details=details)


class FileImportError(StrategySyncError):
    """파일 가져오기(구조화 변환) 단계 에러."""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message, error_code="ERR_IMPORT_001", details=details)


class StorageError(StrategySyncError):
    """파일 저장소 관련 에러."""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message, error_code="ERR_STORE_001", details=details)


class ClaudeClientError(StrategySyncError):
    """Claude AI 클라이언트 통신 에러."""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message, error_code="ERR_CLAUDE_001", details=details)


class InputValidationError(StrategySyncError):
    """입력 유효성 검증 에러 (400 응답)."""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message, error_code="ERR_INPUT_001", details=details)
