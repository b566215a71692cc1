from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from skillmap_ai.ai_core.domain.node_status import NodeStatus, RoadmapKind
from skillmap_ai.ai_core.domain.roadmap_edge import RoadmapEdge
from skillmap_ai.ai_core.domain.roadmap_node import RoadmapNode


@dataclass
class RoadmapGraph:
    """
    학습 로드맵 애그리거트 루트.

    노드 순서는 저장 순서(표시 순서)이며 레이아웃 순서가 아닙니다.
    version은 저장할 때마다 1씩 증가하며 낙관적 동시성 검사에 사용됩니다.
    """

    owner_id: str
    domain_label: str
    kind: RoadmapKind
    nodes: List[RoadmapNode]
    edges: List[RoadmapEdge]
    created_at: datetime
    roadmap_id: str = ""
    version: int = 1

    def find_node(self, node_id: str) -> Optional[RoadmapNode]:
        """
        @param {str} node_id - 찾을 노드 ID.
        @returns {Optional[RoadmapNode]} 노드 또는 None.
        """
        for node in self.nodes:
            if node.node_id == node_id:
                return node
        return None

    def successors(self, node_id: str) -> List[str]:
        """
        @param {str} node_id - 기준 노드 ID.
        @returns {List[str]} 직접 후속 노드 ID 목록 (엣지 순서).
        """
        return [edge.target for edge in self.edges if edge.source == node_id]

    def status_counts(self) -> Dict[str, int]:
        counts = {status.value: 0 for status in NodeStatus}
        for node in self.nodes:
            counts[node.status.value] += 1
        return counts

    def to_dict(self) -> Dict[str, Any]:
        """
        @returns {Dict[str, Any]} 영속화용 논리 레코드.
        """
        return {
            "id": self.roadmap_id,
            "owner_id": self.owner_id,
            "domain_label": self.domain_label,
            "kind": self.kind.value,
            "nodes": [node.to_dict() for node in self.nodes],
            "edges": [edge.to_dict() for edge in self.edges],
            "created_at": self.created_at.isoformat(),
            "version": self.version,
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "RoadmapGraph":
        created_at = payload["created_at"]
        if isinstance(created_at, str):
            created_at = datetime.fromisoformat(created_at)
        return cls(
            roadmap_id=str(payload["id"]),
            owner_id=str(payload["owner_id"]),
            domain_label=payload.get("domain_label", ""),
            kind=RoadmapKind(payload.get("kind", RoadmapKind.STANDARD.value)),
            nodes=[RoadmapNode.from_dict(node) for node in payload.get("nodes", [])],
            edges=[RoadmapEdge.from_dict(edge) for edge in payload.get("edges", [])],
            created_at=created_at,
            version=int(payload.get("version", 1)),
        )


@dataclass(frozen=True)
class RoadmapSummary:
    """목록 조회용 로드맵 요약."""

    roadmap_id: str
    domain_label: str
    kind: RoadmapKind
    created_at: datetime
    node_count: int
    completed_count: int
    status_counts: Dict[str, int] = field(default_factory=dict)

    @property
    def progress(self) -> float:
        if not self.node_count:
            return 0.0
        return round(self.completed_count / self.node_count, 4)

    @classmethod
    def from_graph(cls, graph: RoadmapGraph) -> "RoadmapSummary":
        counts = graph.status_counts()
        return cls(
            roadmap_id=graph.roadmap_id,
            domain_label=graph.domain_label,
            kind=graph.kind,
            created_at=graph.created_at,
            node_count=len(graph.nodes),
            completed_count=counts[NodeStatus.COMPLETED.value],
            status_counts=counts,
        )
