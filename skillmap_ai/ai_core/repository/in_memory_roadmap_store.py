from __future__ import annotations

import copy
import threading
from dataclasses import replace
from typing import Callable, Dict, List

from skillmap_ai.ai_core.common.exceptions import (
    ConcurrentModification,
    Forbidden,
    RoadmapAlreadyExists,
    RoadmapNotFound,
)
from skillmap_ai.ai_core.domain.roadmap_graph import RoadmapGraph
from skillmap_ai.ai_core.repository.roadmap_store import RoadmapStore, generate_roadmap_id


class InMemoryRoadmapStore(RoadmapStore):
    """프로세스 메모리 기반 로드맵 저장소. 저장/반환 시 깊은 복사를 사용합니다."""

    def __init__(self, id_factory: Callable[[], str] = generate_roadmap_id) -> None:
        """
        @param id_factory 로드맵 ID 생성 함수.
        @returns None
        """
        self._graphs: Dict[str, RoadmapGraph] = {}
        self._lock = threading.Lock()
        self._id_factory = id_factory

    def create(self, graph: RoadmapGraph) -> str:
        roadmap_id = graph.roadmap_id or self._id_factory()
        stored = replace(copy.deepcopy(graph), roadmap_id=roadmap_id, version=1)
        with self._lock:
            if roadmap_id in self._graphs:
                raise RoadmapAlreadyExists(f"이미 존재하는 로드맵 ID입니다: {roadmap_id}")
            self._graphs[roadmap_id] = stored
        return roadmap_id

    def get(self, roadmap_id: str, owner_id: str) -> RoadmapGraph:
        with self._lock:
            stored = self._graphs.get(roadmap_id)
            if stored is None or stored.owner_id != owner_id:
                raise RoadmapNotFound(f"로드맵을 찾을 수 없습니다: {roadmap_id}")
            return copy.deepcopy(stored)

    def list_by_owner(self, owner_id: str) -> List[RoadmapGraph]:
        with self._lock:
            owned = [copy.deepcopy(graph) for graph in self._graphs.values() if graph.owner_id == owner_id]
        return sorted(owned, key=lambda graph: graph.created_at, reverse=True)

    def save(self, graph: RoadmapGraph) -> RoadmapGraph:
        with self._lock:
            stored = self._graphs.get(graph.roadmap_id)
            if stored is None:
                raise RoadmapNotFound(f"로드맵을 찾을 수 없습니다: {graph.roadmap_id}")
            if stored.owner_id != graph.owner_id:
                raise Forbidden(f"다른 사용자의 로드맵은 수정할 수 없습니다: {graph.roadmap_id}")
            if stored.version != graph.version:
                raise ConcurrentModification(
                    f"로드맵이 다른 요청에서 변경되었습니다: {graph.roadmap_id} "
                    f"(expected={graph.version}, actual={stored.version})"
                )
            # 소유자/생성 시각/종류는 저장된 값을 유지
            updated = replace(
                stored,
                domain_label=graph.domain_label,
                nodes=copy.deepcopy(graph.nodes),
                edges=copy.deepcopy(graph.edges),
                version=stored.version + 1,
            )
            self._graphs[graph.roadmap_id] = updated
            return copy.deepcopy(updated)

    def size(self) -> int:
        """
        @returns 저장된 로드맵 개수.
        """
        return len(self._graphs)
