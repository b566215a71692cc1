from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from typing import List, Optional

from skillmap_ai.ai_core.domain.roadmap_graph import RoadmapGraph


def generate_roadmap_id() -> str:
    return f"rm_{uuid.uuid4().hex[:12]}"


class RoadmapStore(ABC):
    """
    로드맵 저장소 인터페이스.

    조회는 소유자 범위로 제한되며 다른 사용자의 로드맵은 RoadmapNotFound로
    보고합니다 (존재 여부를 노출하지 않음). 소유자가 바뀐 그래프의 저장은
    Forbidden입니다.
    """

    @abstractmethod
    def create(self, graph: RoadmapGraph) -> str:
        """
        @param graph ID가 비어 있는 새 그래프.
        @returns 부여된 로드맵 ID.
        @raises RoadmapAlreadyExists 같은 ID가 이미 저장된 경우.
        """
        raise NotImplementedError

    @abstractmethod
    def get(self, roadmap_id: str, owner_id: str) -> RoadmapGraph:
        """
        @param roadmap_id 로드맵 ID.
        @param owner_id 요청자 ID.
        @returns 저장된 그래프 복사본.
        @raises RoadmapNotFound 없거나 다른 사용자의 로드맵인 경우.
        """
        raise NotImplementedError

    @abstractmethod
    def list_by_owner(self, owner_id: str) -> List[RoadmapGraph]:
        """
        @param owner_id 요청자 ID.
        @returns 생성 시각 내림차순 그래프 리스트.
        """
        raise NotImplementedError

    @abstractmethod
    def save(self, graph: RoadmapGraph) -> RoadmapGraph:
        """
        노드/엣지 전체를 원자적으로 교체합니다.

        @param graph 읽은 시점의 version을 가진 변경된 그래프.
        @returns version이 1 증가한 그래프.
        @raises RoadmapNotFound 저장된 로드맵이 없는 경우.
        @raises Forbidden 저장된 소유자와 그래프의 소유자가 다른 경우.
        @raises ConcurrentModification 저장된 version이 다른 경우.
        """
        raise NotImplementedError

    def latest(self, owner_id: str) -> Optional[RoadmapGraph]:
        """
        @param owner_id 요청자 ID.
        @returns 가장 최근 그래프 또는 None.
        """
        graphs = self.list_by_owner(owner_id)
        return graphs[0] if graphs else None
