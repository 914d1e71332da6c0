"""모든 파일 가져오기(Importer) 클래스가 상속받는 기본 클래스입니다.

가져오기 흐름:
1. bytes → 텍스트/표 읽기 (Importer별 구현)
2. (제목, 항목) 섹션 목록으로 정리
3. section_mapper.build_content()로 대상 문서 종류의 콘텐츠 모델 생성
"""

from abc import ABC, abstractmethod

from strategy_sync.exceptions import FileImportError
from strategy_sync.models import DocumentContent, DocumentKind


class BaseImporter(ABC):
    """
    모든 Importer의 부모(Base) 클래스입니다.

    모든 Importer는 이 클래스를 상속받아 `to_structured_content` 메서드를 구현해야 합니다.
    """

    @property
    @abstractmethod
    def supported_extensions(self) -> list[str]:
        """이 Importer가 처리할 수 있는 파일 확장자 목록 (예: ['.md', '.txt'])"""
        pass

    @abstractmethod
    async def to_structured_content(
        self,
        data: bytes,
        filename: str,
        target_kind: DocumentKind,
    ) -> DocumentContent:
        """
        파일 내용을 대상 문서 종류의 콘텐츠로 변환합니다. (자식 클래스에서 반드시 구현해야 함)

        Args:
            data: 파일 내용
            filename: 원본 파일명 (에러 메시지용)
            target_kind: 만들 문서 종류

        Returns:
            DocumentContent: target_kind에 맞는 콘텐츠 모델

        Raises:
            FileImportError: 읽을 수 없거나 인식할 내용이 없는 경우
        """
        pass

    def can_import(self, filename: str) -> bool:
        """주어진 파일명을 이 Importer가 처리할 수 있는지 확인하는 함수"""
        ext = "." + filename.lower().split(".")[-1] if "." in filename else ""
        return ext in self.supported_extensions

    @staticmethod
    def decode(data: bytes, filename: str) -> str:
        """UTF-8 (BOM 포함) 텍스트로 디코딩."""
        try:
            return data.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise FileImportError(
                f"UTF-8 텍스트 파일이 아닙니다: {filename}",
                details={"filename": filename, "position": e.start},
            ) from e
