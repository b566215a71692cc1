"""
뷰가 사용하는 서비스 객체 조립.

생성 클라이언트와 저장소는 프로세스당 한 번만 만들고, 테스트는
`set_roadmap_service()`로 대역이 주입된 서비스를 끼워 넣습니다.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from skillmap_ai.ai_core.client.gemini_client import GeminiClient
from skillmap_ai.ai_core.client.github_client import GitHubClient
from skillmap_ai.ai_core.client.pdf_text_extractor import PdfTextExtractor
from skillmap_ai.ai_core.common.retry_policy import RetryPolicy
from skillmap_ai.ai_core.config.model_router import ModelRouter
from skillmap_ai.ai_core.config.roadmap_settings import RoadmapSettings, get_roadmap_settings
from skillmap_ai.ai_core.repository.in_memory_roadmap_store import InMemoryRoadmapStore
from skillmap_ai.ai_core.repository.roadmap_store import RoadmapStore
from skillmap_ai.ai_core.service.assessment.question_picker import QuestionPicker
from skillmap_ai.ai_core.service.graph.enrichment_merger import EnrichmentMerger
from skillmap_ai.ai_core.service.graph.prompt_builder import PromptBuilder
from skillmap_ai.ai_core.service.graph.roadmap_generator import RoadmapGeneratorService
from skillmap_ai.ai_core.service.progress.progression_engine import ProgressionEngine
from skillmap_ai.ai_core.service.roadmap_management.roadmap_service import RoadmapService

_override: Optional[RoadmapService] = None


@lru_cache(maxsize=1)
def get_generation_client() -> GeminiClient:
    settings = get_roadmap_settings()
    return GeminiClient(
        api_key=settings.secret("GEMINI_API_KEY"),
        model=settings.AI_DEFAULT_MODEL,
        retry_policy=RetryPolicy(
            max_attempts=settings.AI_RETRY_MAX_ATTEMPTS,
            base_delay=settings.retry_base_delay_seconds,
        ),
        disabled=settings.llm_disabled,
    )


@lru_cache(maxsize=1)
def get_github_client() -> GitHubClient:
    settings = get_roadmap_settings()
    return GitHubClient(
        token=settings.secret("GITHUB_TOKEN"),
        api_url=settings.GITHUB_API_URL,
        timeout=settings.GITHUB_TIMEOUT,
    )


@lru_cache(maxsize=1)
def get_pdf_extractor() -> PdfTextExtractor:
    return PdfTextExtractor()


@lru_cache(maxsize=1)
def get_question_picker() -> QuestionPicker:
    return QuestionPicker()


def build_store(settings: RoadmapSettings) -> RoadmapStore:
    """
    @param {RoadmapSettings} settings - ROADMAP_STORE_BACKEND를 읽을 설정.
    @returns {RoadmapStore} 선택된 저장소 구현.
    """
    if settings.ROADMAP_STORE_BACKEND == "memory":
        return InMemoryRoadmapStore()
    # Django 앱 레지스트리가 준비된 뒤에만 모델을 import할 수 있음
    from skillmap_ai.ai_core.repository.django_roadmap_store import DjangoRoadmapStore

    return DjangoRoadmapStore()


def build_roadmap_service(settings: RoadmapSettings) -> RoadmapService:
    """
    설정값으로 생성 파이프라인과 저장소, 진행 엔진을 조립합니다.

    @param {RoadmapSettings} settings - 로드맵 설정.
    @returns {RoadmapService} 조립된 파사드.
    """
    client = get_generation_client()
    github_client = get_github_client()
    prompt_builder = PromptBuilder(resume_max_chars=settings.ROADMAP_RESUME_MAX_CHARS)
    generator = RoadmapGeneratorService(
        client=client,
        router=ModelRouter(
            default_model=settings.AI_DEFAULT_MODEL,
            analysis_model=settings.AI_ANALYSIS_MODEL,
            long_prompt_chars=settings.ROADMAP_LONG_PROMPT_CHARS,
        ),
        prompt_builder=prompt_builder,
        merger=EnrichmentMerger(client, prompt_builder, batch_size=settings.ROADMAP_ENRICHMENT_BATCH_SIZE),
    )
    engine = ProgressionEngine(repository_checker=github_client, allow_reopen=settings.ROADMAP_ALLOW_REOPEN)
    return RoadmapService(
        generator=generator,
        store=build_store(settings),
        engine=engine,
        github_client=github_client,
    )


@lru_cache(maxsize=1)
def _default_roadmap_service() -> RoadmapService:
    return build_roadmap_service(get_roadmap_settings())


def get_roadmap_service() -> RoadmapService:
    if _override is not None:
        return _override
    return _default_roadmap_service()


def set_roadmap_service(service: Optional[RoadmapService]) -> None:
    """
    @param {Optional[RoadmapService]} service - 주입할 서비스 (None이면 기본값 복원).
    @returns {None}
    """
    global _override
    _override = service
