"""
자유 입력 대화 응답기 (TextResponder 구현).

- TemplateTextResponder: 키워드 기반 고정 응답 (외부 호출 없음, 기본값)
- ClaudeTextResponder: Claude CLI로 문서 내용을 참고해 응답

settings.text_responder 값("template" | "claude")으로 선택합니다.
"""

import logging
from typing import Mapping, Optional

from strategy_sync.config import get_settings
from strategy_sync.models import Document, DocumentKind
from strategy_sync.utils.money import format_money

from .claude_client import ClaudeClient, get_claude_client

logger = logging.getLogger(__name__)


# (키워드, 응답) - 앞에서부터 처음 일치하는 항목 사용
CANNED_REPLIES: list[tuple[tuple[str, ...], str]] = [
    (
        ("inconsisten", "align", "coherence"),
        "I've compared your documents for contradictions. Open the inconsistencies panel on any "
        "document to see where your Strategy, OKRs, Canvas and Financial Projection disagree, and "
        "apply the proposed fix to bring them back in line.",
    ),
    (
        ("strategy", "document"),
        "I've analyzed your strategy documents and found some areas for improvement. I recommend "
        "ensuring alignment between your strategic objectives and your financial projections, "
        "especially regarding the growth assumptions. Would you like me to suggest specific changes?",
    ),
    (
        ("financial", "projection", "money", "revenue"),
        "{financial_summary}Make sure your customer acquisition strategy supports the subscriber "
        "numbers behind these figures. Would you like me to help align your marketing strategy "
        "with this goal?",
    ),
    (
        ("okr", "objective", "goal"),
        "Every measurable goal in your Strategy should have a matching key result in your OKRs. "
        "Would you like me to suggest ways to track these targets and align them with your "
        "product development priorities?",
    ),
    (
        ("canvas", "model"),
        "Your business model canvas could be strengthened by more clearly defining your customer "
        "acquisition channels. This would help ensure alignment with your financial projections "
        "and OKRs.",
    ),
]

DEFAULT_REPLY = (
    "I'm analyzing your input. Based on systems thinking principles, I see some potential "
    "improvements for your strategy. Would you like me to elaborate on specific adjustments to "
    "strengthen alignment between your strategic elements?"
)


class TemplateTextResponder:
    """키워드 → 고정 응답."""

    async def respond(self, prompt_text: str, documents: Mapping[DocumentKind, Document]) -> str:
        lowered = (prompt_text or "").lower()
        for keywords, reply in CANNED_REPLIES:
            if any(keyword in lowered for keyword in keywords):
                return reply.format(financial_summary=self._financial_summary(documents))
        return DEFAULT_REPLY

    @staticmethod
    def _financial_summary(documents: Mapping[DocumentKind, Document]) -> str:
        financial = documents.get(DocumentKind.FINANCIAL)
        if financial is None or financial.is_empty():
            return "You don't have a financial projection yet. "
        revenue = financial.content.revenue
        return (
            f"Your financial projection targets {format_money(revenue.total)} in revenue with "
            f"{revenue.subscriber_total():,} subscribers and an MRR of {format_money(revenue.mrr)}. "
        )


SYSTEM_PROMPT = """사용자의 질문에 영어로 답하세요.
아래 문서 4종(Business Model Canvas, Strategy, OKRs, Financial Projection)의 현재 내용을 참고하고,
문서 간 수치나 목표가 서로 맞지 않는 부분이 있으면 구체적으로 짚어 주세요.
답변은 3~6문장으로 간결하게 작성합니다."""


class ClaudeTextResponder:
    """Claude CLI 기반 응답기."""

    def __init__(self, client: Optional[ClaudeClient] = None):
        self.client = client or get_claude_client()

    async def respond(self, prompt_text: str, documents: Mapping[DocumentKind, Document]) -> str:
        sections = [
            f"## {kind.value}\n\n{document.rendered}"
            for kind, document in documents.items()
            if not document.is_empty()
        ]
        context = "\n\n".join(sections) or "(아직 작성된 문서가 없습니다)"
        user_prompt = f"# 현재 문서\n\n{context}\n\n# 사용자 질문\n\n{prompt_text}"

        logger.info(f"[Responder] Claude 응답 요청 (문서 {len(sections)}종)")
        return await self.client.complete(SYSTEM_PROMPT, user_prompt)


def get_text_responder():
    """settings.text_responder에 맞는 응답기를 반환합니다."""
    if get_settings().text_responder == "claude":
        return ClaudeTextResponder()
    return TemplateTextResponder()
