"""
API 라우터 설정 파일입니다.
각 기능별로 나누어진 API 주소들을 하나로 모으는 역할을 합니다.
"""

from fastapi import APIRouter

from strategy_sync.api.endpoints import health, documents, findings, wizard, chat

# 메인 API 라우터 생성
api_router = APIRouter()

# 헬스 체크 엔드포인트: 서버 상태 확인용 (/health)
api_router.include_router(
    health.router,
    prefix="/health",
    tags=["health"]
)

# 문서 엔드포인트: 조회, 수동 편집, 파일 가져오기, 초기화 (/projects/{id}/documents)
api_router.include_router(
    documents.router,
    prefix="/projects",
    tags=["documents"]
)

# 발견 항목 엔드포인트: 불일치/제안 조회 및 적용 (/projects/{id}/inconsistencies, ...)
api_router.include_router(
    findings.router,
    prefix="/projects",
    tags=["findings"]
)

# 위저드 엔드포인트: 4단계 가이드 인터뷰 (/projects/{id}/wizard)
api_router.include_router(
    wizard.router,
    prefix="/projects",
    tags=["wizard"]
)

# 대화 엔드포인트: 자유 입력과 인사 (/projects/{id}/chat)
api_router.include_router(
    chat.router,
    prefix="/projects",
    tags=["chat"]
)
