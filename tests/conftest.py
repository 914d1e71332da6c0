"""공유 pytest fixture 모음."""

import asyncio

import pytest
from unittest.mock import AsyncMock

from strategy_sync.context import ProjectContext
from strategy_sync.models import (
    CanvasContent,
    Document,
    DocumentKind,
    FinancialContent,
    Objective,
    OKRContent,
    StrategicApproach,
    StrategyContent,
)
from strategy_sync.utils.financials import rebalance, set_subscribers


# 문서 4종을 모두 채우는 위저드 답변 예시
WIZARD_ANSWERS = {
    1: "Target small startups, problem: fragmented tools, value: integration",
    2: "moderate growth approach",
    3: "reach €100k revenue, 300 subscribers",
    4: "optimistic €450k/45%, expected €400k/40%, pessimistic €350k/35%",
}


@pytest.fixture
def wizard_answers():
    return dict(WIZARD_ANSWERS)


@pytest.fixture
def canvas_content():
    """고객 획득 채널이 있는 Canvas."""
    return CanvasContent(
        customer_segments=["Early-stage startups", "Small and medium-sized enterprises"],
        value_proposition=["Integrated strategy platform"],
        pain_points=["Fragmented planning tools"],
        customer_acquisition=["Founder-led webinars"],
        approach=StrategicApproach.MODERATE,
    )


@pytest.fixture
def strategy_content():
    """재무 추정과 같은 매출(€400K)·이익률(40%)을 목표로 하는 Strategy."""
    return StrategyContent(
        vision="To become the standard integrated platform for early-stage startups.",
        mission="We help founders align strategy, goals and financials.",
        business_goals=[
            "Achieve €400K in first-year revenue",
            "Sustain a 40% profit margin in the expected scenario",
        ],
    )


@pytest.fixture
def okr_content():
    """재무 추정과 같은 매출·구독자 수를 목표로 하는 OKRs."""
    return OKRContent(
        objectives=[
            Objective(
                title="Achieve €400K in Total First-Year Revenue",
                rationale="Prove the business model.",
                key_results=["Reach 300 total paying subscribers by end of Year 1"],
            )
        ]
    )


@pytest.fixture
def financial_content():
    """구독자 300명 (Basic/Pro/Enterprise), 총매출 €400K, 이익률 40%."""
    financial = FinancialContent()
    set_subscribers(financial, 300)
    rebalance(financial, total_revenue=400_000, profit_margin=40.0)
    return financial


@pytest.fixture
def aligned_documents(canvas_content, strategy_content, okr_content, financial_content):
    """서로 불일치가 없는 문서 4종."""
    return {
        DocumentKind.CANVAS: Document.create(DocumentKind.CANVAS, canvas_content),
        DocumentKind.STRATEGY: Document.create(DocumentKind.STRATEGY, strategy_content),
        DocumentKind.OKRS: Document.create(DocumentKind.OKRS, okr_content),
        DocumentKind.FINANCIAL: Document.create(DocumentKind.FINANCIAL, financial_content),
    }


@pytest.fixture
def project_context():
    """빈 문서 4종으로 시작하는 ProjectContext."""
    return ProjectContext(project_id="test-project")


@pytest.fixture
def mock_store():
    """DocumentStore mock fixture (모든 저장 성공)."""
    store = AsyncMock()
    store.save_document = AsyncMock(return_value=True)
    store.load_documents = AsyncMock(return_value={})
    store.save_implemented = AsyncMock(return_value=True)
    store.load_implemented = AsyncMock(return_value=set())
    store.delete_project = AsyncMock(return_value=True)
    return store


@pytest.fixture
def mock_responder():
    """TextResponder mock fixture."""
    responder = AsyncMock()
    responder.respond = AsyncMock(return_value="mocked reply")
    return responder


class GatedAuthor:
    """release가 설정될 때까지 생성을 멈추는 DocumentAuthor (생성 중 상태 재현용)."""

    def __init__(self):
        from strategy_sync.layers.authoring import TemplateDocumentAuthor

        self.started = asyncio.Event()
        self.release = asyncio.Event()
        self._author = TemplateDocumentAuthor()

    async def generate(self, answers):
        self.started.set()
        await self.release.wait()
        return await self._author.generate(answers)


@pytest.fixture
def gated_author():
    return GatedAuthor()


@pytest.fixture
def mock_claude_client():
    """ClaudeClient mock fixture."""
    client = AsyncMock()
    client.complete = AsyncMock(return_value="mocked response")
    return client


@pytest.fixture
def temp_storage(tmp_path):
    """임시 디렉토리 기반 FileStorage fixture."""
    from strategy_sync.services.file_storage import FileStorage
    return FileStorage(base_path=str(tmp_path))


@pytest.fixture
def project_service(temp_storage):
    """임시 저장소 + 템플릿 응답기/작성기를 쓰는 ProjectService."""
    from strategy_sync.layers.authoring import TemplateDocumentAuthor
    from strategy_sync.services.project_service import ProjectService
    from strategy_sync.services.text_responder import TemplateTextResponder

    return ProjectService(
        store=temp_storage,
        responder=TemplateTextResponder(),
        author=TemplateDocumentAuthor(),
    )


@pytest.fixture
async def async_client(project_service):
    """httpx AsyncClient fixture (FastAPI 테스트용, ProjectService 의존성 교체)."""
    from httpx import AsyncClient, ASGITransport
    from strategy_sync.main import app
    from strategy_sync.services.project_service import get_project_service

    app.dependency_overrides[get_project_service] = lambda: project_service
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
