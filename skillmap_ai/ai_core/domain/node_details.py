from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

from skillmap_ai.ai_core.domain.roadmap_node import NodeResource

DEFAULT_ESTIMATED_TIME = "TBD"


@dataclass(frozen=True)
class NodeDetails:
    """보강 호출이 노드 하나에 대해 돌려준 상세 정보."""

    description: str = ""
    estimated_time: str = ""
    resources: List[NodeResource] = field(default_factory=list)
    project_idea: str = ""

    @classmethod
    def from_payload(cls, payload: Any) -> "NodeDetails":
        """
        신뢰할 수 없는 LLM 페이로드에서 상세 정보를 추출합니다.

        camelCase(LLM 응답)와 snake_case(저장 레코드) 키를 모두 허용하며,
        형식이 맞지 않는 필드는 빈 값으로 둡니다.

        @param {Any} payload - 노드 ID에 매핑된 원시 값.
        @returns {NodeDetails} 정리된 상세 정보.
        """
        if not isinstance(payload, dict):
            return cls()
        return cls(
            description=_text(payload.get("description")),
            estimated_time=_text(payload.get("estimatedTime", payload.get("estimated_time"))),
            resources=parse_resources(payload.get("resources")),
            project_idea=_text(payload.get("projectIdea", payload.get("project_idea"))),
        )


def parse_resources(raw: Any) -> List[NodeResource]:
    """
    @param {Any} raw - `[{title, url}, ...]` 형태가 기대되는 값.
    @returns {List[NodeResource]} 제목 또는 URL이 있는 항목만.
    """
    if not isinstance(raw, list):
        return []
    resources: List[NodeResource] = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        title = _text(item.get("title"))
        url = _text(item.get("url"))
        if title or url:
            resources.append(NodeResource(title=title, url=url))
    return resources


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return ""


def details_map(payload: Dict[str, Any]) -> Dict[str, NodeDetails]:
    """
    @param {Dict[str, Any]} payload - `{nodeId: details}` 형태의 파싱 결과.
    @returns {Dict[str, NodeDetails]} 노드 ID(문자열) → 상세 정보.
    """
    return {str(node_id): NodeDetails.from_payload(value) for node_id, value in payload.items()}
