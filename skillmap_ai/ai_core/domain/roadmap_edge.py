from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class RoadmapEdge:
    """선수 관계 엣지 (source가 target의 선수 주제)."""

    edge_id: str
    source: str
    target: str

    def to_dict(self) -> Dict[str, str]:
        return {"id": self.edge_id, "source": self.source, "target": self.target}

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "RoadmapEdge":
        return cls(edge_id=str(payload["id"]), source=str(payload["source"]), target=str(payload["target"]))


def default_edge_id(source: str, target: str) -> str:
    """
    @param {str} source - 출발 노드 ID.
    @param {str} target - 도착 노드 ID.
    @returns {str} `e<source>-<target>` 형식의 엣지 ID.
    """
    return f"e{source}-{target}"
