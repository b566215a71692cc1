from __future__ import annotations

import logging
from typing import Any, Dict, List

from django.db import IntegrityError, transaction
from django.db.models import F
from django.utils import timezone

from skillmap_ai.ai_core.common.exceptions import (
    ConcurrentModification,
    Forbidden,
    RoadmapAlreadyExists,
    RoadmapNotFound,
)
from skillmap_ai.ai_core.domain.roadmap_graph import RoadmapGraph
from skillmap_ai.ai_core.models import RoadmapRecord
from skillmap_ai.ai_core.repository.roadmap_store import RoadmapStore, generate_roadmap_id

logger = logging.getLogger(__name__)


class DjangoRoadmapStore(RoadmapStore):
    """
    Django ORM 기반 로드맵 저장소.

    노드/엣지는 한 행의 JSON 컬럼에 함께 저장되므로 한 번의 UPDATE로
    컬렉션 전체가 교체됩니다. 동시 저장은 version 조건부 UPDATE로 감지합니다.
    """

    def create(self, graph: RoadmapGraph) -> str:
        roadmap_id = graph.roadmap_id or generate_roadmap_id()
        payload = graph.to_dict()
        try:
            with transaction.atomic():
                RoadmapRecord.objects.create(
                    roadmap_id=roadmap_id,
                    owner_id=graph.owner_id,
                    domain_label=graph.domain_label,
                    kind=graph.kind.value,
                    nodes=payload["nodes"],
                    edges=payload["edges"],
                    version=1,
                    created_at=graph.created_at,
                )
        except IntegrityError as exc:
            raise RoadmapAlreadyExists(f"이미 존재하는 로드맵 ID입니다: {roadmap_id}") from exc
        logger.info(
            "로드맵 저장",
            extra={"roadmap_id": roadmap_id, "owner_id": graph.owner_id, "node_count": len(graph.nodes)},
        )
        return roadmap_id

    def get(self, roadmap_id: str, owner_id: str) -> RoadmapGraph:
        try:
            record = RoadmapRecord.objects.get(roadmap_id=roadmap_id, owner_id=owner_id)
        except RoadmapRecord.DoesNotExist as exc:
            raise RoadmapNotFound(f"로드맵을 찾을 수 없습니다: {roadmap_id}") from exc
        return _to_graph(record)

    def list_by_owner(self, owner_id: str) -> List[RoadmapGraph]:
        records = RoadmapRecord.objects.filter(owner_id=owner_id).order_by("-created_at")
        return [_to_graph(record) for record in records]

    def save(self, graph: RoadmapGraph) -> RoadmapGraph:
        payload = graph.to_dict()
        with transaction.atomic():
            updated = RoadmapRecord.objects.filter(
                roadmap_id=graph.roadmap_id,
                owner_id=graph.owner_id,
                version=graph.version,
            ).update(
                domain_label=graph.domain_label,
                nodes=payload["nodes"],
                edges=payload["edges"],
                version=F("version") + 1,
                updated_at=timezone.now(),
            )
            if not updated:
                stored_owner = (
                    RoadmapRecord.objects.filter(roadmap_id=graph.roadmap_id).values_list("owner_id", flat=True).first()
                )
                if stored_owner is None:
                    raise RoadmapNotFound(f"로드맵을 찾을 수 없습니다: {graph.roadmap_id}")
                if stored_owner != graph.owner_id:
                    raise Forbidden(f"다른 사용자의 로드맵은 수정할 수 없습니다: {graph.roadmap_id}")
                logger.warning(
                    "로드맵 동시 수정 감지",
                    extra={"roadmap_id": graph.roadmap_id, "expected_version": graph.version},
                )
                raise ConcurrentModification(f"로드맵이 다른 요청에서 변경되었습니다: {graph.roadmap_id}")
            record = RoadmapRecord.objects.get(roadmap_id=graph.roadmap_id)
        return _to_graph(record)


def _to_graph(record: RoadmapRecord) -> RoadmapGraph:
    payload: Dict[str, Any] = {
        "id": record.roadmap_id,
        "owner_id": record.owner_id,
        "domain_label": record.domain_label,
        "kind": record.kind,
        "nodes": record.nodes or [],
        "edges": record.edges or [],
        "created_at": record.created_at,
        "version": record.version,
    }
    return RoadmapGraph.from_dict(payload)
