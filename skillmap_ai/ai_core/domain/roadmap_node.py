from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

from skillmap_ai.ai_core.domain.node_status import NodeStatus

TOPIC_KIND = "topic"


@dataclass(frozen=True)
class NodeResource:
    """노드 학습 자료 (제목/URL)."""

    title: str
    url: str

    def to_dict(self) -> Dict[str, str]:
        return {"title": self.title, "url": self.url}


@dataclass(frozen=True)
class NodePosition:
    """프론트엔드 레이아웃 힌트."""

    x: float = 0
    y: float = 0

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y}


@dataclass
class RoadmapNode:
    """로드맵을 구성하는 개별 학습 주제 노드."""

    node_id: str
    label: str
    status: NodeStatus = NodeStatus.LOCKED
    kind: str = TOPIC_KIND
    description: str = ""
    estimated_time: str = ""
    resources: List[NodeResource] = field(default_factory=list)
    project_idea: str = ""
    position: NodePosition = field(default_factory=NodePosition)

    def to_dict(self) -> Dict[str, Any]:
        """
        @returns {Dict[str, Any]} 저장/응답용 노드 레코드.
        """
        return {
            "id": self.node_id,
            "kind": self.kind,
            "label": self.label,
            "description": self.description,
            "estimated_time": self.estimated_time,
            "resources": [resource.to_dict() for resource in self.resources],
            "project_idea": self.project_idea,
            "status": self.status.value,
            "position": self.position.to_dict(),
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "RoadmapNode":
        """
        저장된 노드 레코드를 복원합니다. 검증은 정규화 단계에서 끝난 상태를 가정합니다.

        @param {Dict[str, Any]} payload - to_dict() 결과 형태의 레코드.
        @returns {RoadmapNode} 복원된 노드.
        """
        position = payload.get("position") or {}
        return cls(
            node_id=str(payload["id"]),
            label=payload.get("label", ""),
            status=NodeStatus.coerce(payload.get("status")),
            kind=payload.get("kind", TOPIC_KIND),
            description=payload.get("description", ""),
            estimated_time=payload.get("estimated_time", ""),
            resources=[
                NodeResource(title=item.get("title", ""), url=item.get("url", ""))
                for item in payload.get("resources", [])
            ],
            project_idea=payload.get("project_idea", ""),
            position=NodePosition(x=position.get("x", 0), y=position.get("y", 0)),
        )
