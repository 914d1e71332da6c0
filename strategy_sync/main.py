"""
strategy-sync 문서 정합성 엔진의 메인 진입점 파일입니다.
웹 서버 애플리케이션을 생성하고 설정하는 역할을 담당합니다.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from strategy_sync import __version__
from strategy_sync.api.router import api_router
from strategy_sync.config import get_settings
from strategy_sync.exceptions import (
    ClaudeClientError,
    CollaboratorFailure,
    FileImportError,
    FindingNotFoundError,
    InputValidationError,
    StrategySyncError,
)
from strategy_sync.models import ErrorResponse

logger = logging.getLogger(__name__)


# 예외 → HTTP 상태 코드 (목록에 없으면 500)
STATUS_CODES: dict[type[StrategySyncError], int] = {
    FindingNotFoundError: 404,
    InputValidationError: 400,
    FileImportError: 400,
    CollaboratorFailure: 502,
    ClaudeClientError: 502,
}


def status_code_for(exc: StrategySyncError) -> int:
    for exc_type, status_code in STATUS_CODES.items():
        if isinstance(exc, exc_type):
            return status_code
    return 500


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    애플리케이션의 생명주기(시작과 종료)를 관리하는 함수입니다.
    """
    settings = get_settings()
    logger.info(f"strategy-sync가 다음 주소에서 시작됩니다: {settings.host}:{settings.port}")
    logger.info(f"문서 저장 위치: {settings.data_dir}, 응답기: {settings.text_responder}")

    yield

    logger.info("strategy-sync가 종료됩니다")


def create_app() -> FastAPI:
    """
    FastAPI 웹 애플리케이션을 생성하고 설정하는 함수입니다.

    주요 기능:
    1. 로깅 설정 (settings.log_level)
    2. CORS 설정 (프론트엔드와의 통신 허용 설정)
    3. 예외 핸들러 (커스텀 예외 → ErrorResponse JSON)
    4. API 라우터 연결 (/api/v1)
    """
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    app = FastAPI(
        title="strategy-sync",
        description="Canvas / Strategy / OKRs / Financial Projection 문서 간 정합성 엔진",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # CORS 미들웨어 설정: 프론트엔드 웹페이지가 이 서버에 접속할 수 있도록 허용
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # 글로벌 예외 핸들러: 커스텀 예외를 구조화된 JSON 응답으로 변환
    @app.exception_handler(StrategySyncError)
    async def strategy_sync_error_handler(request: Request, exc: StrategySyncError):
        status_code = status_code_for(exc)
        if status_code >= 500:
            logger.error(f"[API] {exc.error_code}: {exc.message} ({request.url.path})")
        error = ErrorResponse(error_code=exc.error_code, message=exc.message, details=exc.details)
        return JSONResponse(status_code=status_code, content=error.model_dump(mode="json"))

    @app.exception_handler(Exception)
    async def general_error_handler(request: Request, exc: Exception):
        logger.error(f"처리되지 않은 예외: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error_code": "ERR_INTERNAL",
                "message": "내부 서버 오류가 발생했습니다",
                "details": None,
                "timestamp": datetime.now().isoformat(),
            },
        )

    # API 라우터 포함: /api/v1 주소 아래에 모든 기능을 연결합니다.
    app.include_router(api_router, prefix="/api/v1")

    @app.get("/")
    async def root():
        """루트 엔드포인트: 서버 기본 정보."""
        return {
            "name": "strategy-sync",
            "version": __version__,
            "description": "기획 문서 4종의 정합성 검사와 수정 제안",
            "docs": "/docs",
            "api": "/api/v1",
        }

    return app


# 애플리케이션 인스턴스 생성
app = create_app()


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(
        "strategy_sync.main:app",
        host=settings.host,
        port=settings.port,
        reload=True,
    )
