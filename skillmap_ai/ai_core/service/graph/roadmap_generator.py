from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import Callable, Optional

from skillmap_ai.ai_core.client.generation_client import GenerationClient
from skillmap_ai.ai_core.config.model_router import ModelRouter
from skillmap_ai.ai_core.domain.roadmap_graph import RoadmapGraph
from skillmap_ai.ai_core.service.graph.enrichment_merger import EnrichmentMerger, apply_details
from skillmap_ai.ai_core.service.graph.graph_normalizer import GraphNormalizer
from skillmap_ai.ai_core.service.graph.prompt_builder import GenerationContext, PromptBuilder
from skillmap_ai.ai_core.service.graph.response_parser import parse_json_object

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class RoadmapGeneratorService:
    """구조 합성 + 상세 보강 2단계 로드맵 생성 서비스."""

    def __init__(
        self,
        client: GenerationClient,
        router: Optional[ModelRouter] = None,
        prompt_builder: Optional[PromptBuilder] = None,
        normalizer: Optional[GraphNormalizer] = None,
        merger: Optional[EnrichmentMerger] = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """
        로드맵 생성에 필요한 의존성을 초기화합니다.

        @param {GenerationClient} client - 생성 협력자 (테스트에서는 대역).
        @param {Optional[ModelRouter]} router - 모델 라우터.
        @param {Optional[PromptBuilder]} prompt_builder - 프롬프트 빌더.
        @param {Optional[GraphNormalizer]} normalizer - 구조 정규화기.
        @param {Optional[EnrichmentMerger]} merger - 상세 보강기.
        @param {Callable[[], datetime]} clock - 생성 시각 공급자.
        @returns {None} 내부 상태를 구성합니다.
        """
        self._client = client
        self._router = router or ModelRouter()
        self._prompt_builder = prompt_builder or PromptBuilder()
        self._normalizer = normalizer or GraphNormalizer()
        self._merger = merger or EnrichmentMerger(client, self._prompt_builder)
        self._clock = clock

    def build(self, owner_id: str, context: GenerationContext) -> RoadmapGraph:
        """
        생성 입력으로부터 저장 전 로드맵 그래프를 만듭니다.

        구조 호출 → 파싱 → 정규화(사이클 거부) → 배치별 보강 → 병합 순서로
        진행하며, 어느 단계든 실패하면 예외가 그대로 전파됩니다.

        @param {str} owner_id - 소유자 ID.
        @param {GenerationContext} context - 생성 입력.
        @returns {RoadmapGraph} ID가 비어 있는 새 그래프.
        @raises GenerationFailure - 호출 실패 (보강 실패는 EnrichmentFailure).
        @raises MalformedResponse - 구조 응답 파싱 실패.
        @raises GraphValidationError - 구조 불변식 위반 또는 사이클.
        """
        structure_prompt = self._prompt_builder.structure_prompt(context)
        decision = self._router.route(context.kind, len(structure_prompt))
        logger.info(
            "로드맵 구조 생성 시작",
            extra={"kind": context.kind.value, "model": decision.model_name, "reason": decision.reason},
        )

        start_time = time.time()
        raw_text = self._client.call(structure_prompt, decision.model_name)
        structure = self._normalizer.normalize(parse_json_object(raw_text))
        structure_seconds = round(time.time() - start_time, 2)

        start_time = time.time()
        details = self._merger.collect_details(context, structure.nodes, decision.model_name)
        nodes = apply_details(structure.nodes, details)
        enrichment_seconds = round(time.time() - start_time, 2)

        logger.info(
            "로드맵 생성 완료",
            extra={
                "kind": context.kind.value,
                "node_count": len(nodes),
                "edge_count": len(structure.edges),
                "enriched_nodes": len(details),
                "structure_seconds": structure_seconds,
                "enrichment_seconds": enrichment_seconds,
            },
        )
        return RoadmapGraph(
            owner_id=owner_id,
            domain_label=context.label,
            kind=context.kind,
            nodes=nodes,
            edges=list(structure.edges),
            created_at=self._clock(),
        )
