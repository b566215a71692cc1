from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional, Set, Tuple

import networkx as nx

from skillmap_ai.ai_core.common.exceptions import GraphCycleDetected, GraphValidationError
from skillmap_ai.ai_core.domain.node_details import NodeDetails
from skillmap_ai.ai_core.domain.node_status import NodeStatus
from skillmap_ai.ai_core.domain.roadmap_edge import RoadmapEdge, default_edge_id
from skillmap_ai.ai_core.domain.roadmap_node import TOPIC_KIND, NodePosition, RoadmapNode

logger = logging.getLogger(__name__)

POSITION_STEP_Y = 100


@dataclass(frozen=True)
class NormalizedStructure:
    """정규화된 노드/엣지와 버려진 엣지 기록."""

    nodes: List[RoadmapNode]
    edges: List[RoadmapEdge]
    dropped_edges: List[Tuple[str, str]] = field(default_factory=list)


class GraphNormalizer:
    """
    LLM 후보 구조를 엄격한 내부 스키마로 정규화합니다.

    - 노드 ID: 비어 있지 않은 값은 문자열로 유지, 없으면 `node-<index>`
    - 상태: 소문자로 바꾼 뒤 {completed, pending, locked} 밖이면 locked
    - 위치: 없으면 `{x: 0, y: index * 100}`
    - 엣지: ID가 없으면 `e<source>-<target>`, 모르는 노드를 가리키면 버림
    - 사이클: 위상 정렬이 불가능하면 GraphCycleDetected

    순수 함수이며 같은 입력에는 항상 같은 결과를 돌려줍니다.
    """

    def normalize(self, candidate: Any) -> NormalizedStructure:
        """
        @param {Any} candidate - ResponseParser가 돌려준 JSON 객체.
        @returns {NormalizedStructure} 검증된 노드/엣지.
        @raises GraphValidationError - 노드 목록이 없거나 ID가 중복된 경우.
        @raises GraphCycleDetected - 엣지 집합에 사이클이 있는 경우.
        """
        if not isinstance(candidate, dict):
            raise GraphValidationError("후보 구조가 JSON 객체가 아닙니다.")
        raw_nodes = candidate.get("nodes")
        if not isinstance(raw_nodes, list) or not raw_nodes:
            raise GraphValidationError("후보 구조에 노드 목록이 없습니다.")
        raw_edges = candidate.get("edges") or []
        if not isinstance(raw_edges, list):
            raise GraphValidationError("후보 구조의 edges가 목록이 아닙니다.")

        nodes = [self._normalize_node(raw, index) for index, raw in enumerate(raw_nodes)]
        node_ids: Set[str] = set()
        for node in nodes:
            if node.node_id in node_ids:
                raise GraphValidationError(f"노드 ID가 중복되었습니다: {node.node_id}")
            node_ids.add(node.node_id)

        edges, dropped = self._normalize_edges(raw_edges, node_ids)
        if dropped:
            logger.warning("알 수 없는 노드를 가리키는 엣지 제거", extra={"dropped_edges": dropped})

        _ensure_acyclic(nodes, edges)
        return NormalizedStructure(nodes=nodes, edges=edges, dropped_edges=dropped)

    def _normalize_node(self, raw: Any, index: int) -> RoadmapNode:
        if not isinstance(raw, dict):
            raise GraphValidationError(f"{index}번째 노드가 JSON 객체가 아닙니다.")
        # 프론트엔드 형식({id, type, data: {...}, status})도 허용
        data = raw.get("data") if isinstance(raw.get("data"), dict) else {}
        fields = {**data, **{key: value for key, value in raw.items() if key != "data"}}

        node_id = _as_id(fields.get("id")) or f"node-{index}"
        label = _as_id(fields.get("label")) or node_id
        details = NodeDetails.from_payload(fields)
        return RoadmapNode(
            node_id=node_id,
            label=label,
            status=NodeStatus.coerce(fields.get("status")),
            kind=TOPIC_KIND,
            description=details.description,
            estimated_time=details.estimated_time,
            resources=list(details.resources),
            project_idea=details.project_idea,
            position=_position(fields.get("position"), index),
        )

    def _normalize_edges(
        self, raw_edges: List[Any], node_ids: Set[str]
    ) -> Tuple[List[RoadmapEdge], List[Tuple[str, str]]]:
        edges: List[RoadmapEdge] = []
        dropped: List[Tuple[str, str]] = []
        seen: Set[Tuple[str, str]] = set()
        for raw in raw_edges:
            if not isinstance(raw, dict):
                dropped.append(("", ""))
                continue
            source = _as_id(raw.get("source"))
            target = _as_id(raw.get("target"))
            if source not in node_ids or target not in node_ids:
                dropped.append((source, target))
                continue
            if (source, target) in seen:
                continue
            seen.add((source, target))
            edge_id = _as_id(raw.get("id")) or default_edge_id(source, target)
            edges.append(RoadmapEdge(edge_id=edge_id, source=source, target=target))
        return edges, dropped


def _ensure_acyclic(nodes: List[RoadmapNode], edges: List[RoadmapEdge]) -> None:
    """
    위상 정렬 가능 여부를 확인합니다.

    @raises GraphCycleDetected - 사이클(자기 루프 포함)이 있는 경우.
    """
    graph = nx.DiGraph()
    graph.add_nodes_from(node.node_id for node in nodes)
    graph.add_edges_from((edge.source, edge.target) for edge in edges)
    if nx.is_directed_acyclic_graph(graph):
        return
    cycle = [(str(u), str(v)) for u, v in nx.find_cycle(graph)]
    logger.warning("사이클이 있는 로드맵 구조 거부", extra={"cycle": cycle})
    path = " -> ".join([cycle[0][0]] + [v for _, v in cycle])
    raise GraphCycleDetected(f"로드맵 구조에 사이클이 있습니다: {path}", cycle=cycle)


def _as_id(value: Any) -> str:
    if value is None or isinstance(value, bool):
        return ""
    if isinstance(value, (str, int, float)):
        return str(value).strip()
    return ""


def _position(raw: Any, index: int) -> NodePosition:
    if isinstance(raw, dict):
        x, y = raw.get("x"), raw.get("y")
        if _is_number(x) and _is_number(y):
            return NodePosition(x=x, y=y)
    return NodePosition(x=0, y=index * POSITION_STEP_Y)


def _is_number(value: Optional[Any]) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)
