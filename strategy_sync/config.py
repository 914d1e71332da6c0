from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """
    애플리케이션의 설정을 관리하는 클래스입니다.
    환경 변수(.env 파일)에서 설정값을 읽어옵니다.
    """

    app_name: str = "strategy-sync"

    # 서버 설정: 서버가 실행될 주소와 포트 번호
    host: str = "0.0.0.0"  # 모든 외부 접속 허용
    port: int = 8000
    allowed_origins: list[str] = ["*"]  # CORS 허용 출처
    log_level: str = "INFO"

    # 저장소 설정: 프로젝트 문서가 JSON 파일로 저장될 위치
    data_dir: str = "data"

    # 대화 응답 설정
    text_responder: str = "template"  # template | claude
    claude_model: str = "claude-sonnet-4-20250514"  # claude 응답기가 사용할 모델
    claude_timeout_seconds: int = 300
    claude_max_retries: int = 3

    # 정합성 검사 설정
    mrr_tolerance: float = 0.05  # 요금제 구성 대비 MRR 허용 오차 비율

    # 파일 가져오기 제한
    max_file_size_mb: int = 10
    max_filename_length: int = 255

    class Config:
        # 설정을 읽어올 파일 지정
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache()
def get_settings() -> Settings:
    """
    설정을 가져오는 함수입니다.
    @lru_cache를 사용하여 한 번 읽은 설정은 메모리에 저장해두고 재사용합니다.
    """
    return Settings()
