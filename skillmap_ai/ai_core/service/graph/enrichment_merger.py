from __future__ import annotations

import logging
import time
from dataclasses import replace
from typing import Dict, List, Sequence

from skillmap_ai.ai_core.client.generation_client import GenerationClient
from skillmap_ai.ai_core.common.exceptions import EnrichmentFailure, GenerationFailure, MalformedResponse
from skillmap_ai.ai_core.domain.node_details import DEFAULT_ESTIMATED_TIME, NodeDetails, details_map
from skillmap_ai.ai_core.domain.roadmap_node import RoadmapNode
from skillmap_ai.ai_core.service.graph.prompt_builder import GenerationContext, PromptBuilder
from skillmap_ai.ai_core.service.graph.response_parser import parse_json_object

logger = logging.getLogger(__name__)


def partition(nodes: Sequence[RoadmapNode], batch_size: int) -> List[List[RoadmapNode]]:
    """
    노드를 고정 크기의 연속 배치로 나눕니다. 마지막 배치는 더 작을 수 있습니다.

    @param {Sequence[RoadmapNode]} nodes - 정규화된 노드 목록.
    @param {int} batch_size - 배치 크기 (1 이상).
    @returns {List[List[RoadmapNode]]} 배치 목록.
    """
    if batch_size < 1:
        raise ValueError("batch_size는 1 이상이어야 합니다.")
    return [list(nodes[start:start + batch_size]) for start in range(0, len(nodes), batch_size)]


class EnrichmentMerger:
    """
    노드 상세 정보(설명, 예상 시간, 자료, 프로젝트 아이디어)를 배치 단위로 보강합니다.

    배치는 순서대로 하나씩 호출하며, 하나라도 실패하면 전체 보강 단계가
    EnrichmentFailure로 실패합니다. 이미 끝난 배치 결과는 버립니다.
    """

    def __init__(
        self,
        client: GenerationClient,
        prompt_builder: PromptBuilder,
        batch_size: int = 5,
    ) -> None:
        """
        @param {GenerationClient} client - 생성 협력자.
        @param {PromptBuilder} prompt_builder - 보강 프롬프트 빌더.
        @param {int} batch_size - 배치당 노드 수.
        @returns {None}
        """
        if batch_size < 1:
            raise ValueError("batch_size는 1 이상이어야 합니다.")
        self._client = client
        self._prompt_builder = prompt_builder
        self._batch_size = batch_size

    def collect_details(
        self,
        context: GenerationContext,
        nodes: Sequence[RoadmapNode],
        model: str,
    ) -> Dict[str, NodeDetails]:
        """
        모든 배치의 `{nodeId: details}`를 하나의 맵으로 모읍니다.

        @param {GenerationContext} context - 생성 입력.
        @param {Sequence[RoadmapNode]} nodes - 정규화된 노드.
        @param {str} model - 사용할 모델.
        @returns {Dict[str, NodeDetails]} 노드 ID → 상세 정보.
        @raises EnrichmentFailure - 어느 한 배치의 호출/파싱이 실패한 경우.
        """
        merged: Dict[str, NodeDetails] = {}
        batches = partition(nodes, self._batch_size)
        for index, batch in enumerate(batches):
            batch_ids = {node.node_id for node in batch}
            prompt = self._prompt_builder.enrichment_prompt(context, batch)
            start_time = time.time()
            try:
                raw_text = self._client.call(prompt, model)
                payload = parse_json_object(raw_text)
            except (GenerationFailure, MalformedResponse) as exc:
                logger.error(
                    "노드 상세 보강 배치 실패",
                    extra={"batch_index": index, "batch_count": len(batches), "error": str(exc)},
                )
                raise EnrichmentFailure(
                    f"{index + 1}/{len(batches)}번째 보강 배치 실패: {exc.message}",
                    batch_index=index,
                    completed_batches=index,
                    cause_code=exc.error_code,
                ) from exc

            batch_details = details_map(payload)
            for node_id, details in batch_details.items():
                if node_id in batch_ids:
                    merged[node_id] = details
            logger.info(
                "노드 상세 보강 배치 완료",
                extra={
                    "batch_index": index,
                    "batch_size": len(batch),
                    "returned": len(batch_details),
                    "elapsed_seconds": round(time.time() - start_time, 2),
                },
            )
        return merged


def apply_details(nodes: Sequence[RoadmapNode], details: Dict[str, NodeDetails]) -> List[RoadmapNode]:
    """
    상세 정보를 노드에 병합합니다. 항목이 없는 필드는 기본값으로 채웁니다.

    기본값: description "", estimated_time "TBD", resources [], project_idea "".
    노드에 이미 값이 있으면 보강 결과가 비어 있을 때 기존 값을 유지합니다.

    @param {Sequence[RoadmapNode]} nodes - 정규화된 노드.
    @param {Dict[str, NodeDetails]} details - collect_details 결과.
    @returns {List[RoadmapNode]} 새 노드 목록 (입력은 변경하지 않음).
    """
    merged_nodes: List[RoadmapNode] = []
    for node in nodes:
        found = details.get(node.node_id, NodeDetails())
        merged_nodes.append(
            replace(
                node,
                description=found.description or node.description or "",
                estimated_time=found.estimated_time or node.estimated_time or DEFAULT_ESTIMATED_TIME,
                resources=list(found.resources or node.resources),
                project_idea=found.project_idea or node.project_idea or "",
            )
        )
    return merged_nodes
