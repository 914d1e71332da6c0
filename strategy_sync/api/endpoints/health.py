"""
헬스 체크(Health Check) 엔드포인트입니다.
서버가 살아서 정상적으로 응답하는지 확인하는 용도입니다.
"""

from fastapi import APIRouter

from strategy_sync import __version__
from strategy_sync.config import get_settings

router = APIRouter()


@router.get("")
async def health_check():
    """
    기본 상태 확인 함수.
    서버가 켜져 있으면 {"status": "healthy"}를 반환합니다.
    """
    return {"status": "healthy"}


@router.get("/detail")
async def health_check_detail():
    """
    상세 상태 확인 함수.
    현재 설정 정보(어떤 응답기를 쓰는지 등)도 같이 보여줍니다.
    """
    settings = get_settings()
    return {
        "status": "healthy",
        "version": __version__,
        "config": {
            "text_responder": settings.text_responder,  # template | claude
            "claude_model": settings.claude_model,
            "data_dir": settings.data_dir,
            "mrr_tolerance": settings.mrr_tolerance,
        }
    }
