from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

import fitz  # PyMuPDF

from skillmap_ai.ai_core.common.exceptions import GenerationFailure, RepositoryLookupError
from skillmap_ai.ai_core.domain.node_status import NodeStatus, RoadmapKind
from skillmap_ai.ai_core.domain.repository_manifest import RepositoryManifest
from skillmap_ai.ai_core.domain.roadmap_edge import RoadmapEdge
from skillmap_ai.ai_core.domain.roadmap_graph import RoadmapGraph
from skillmap_ai.ai_core.domain.roadmap_node import RoadmapNode

FIXED_TIME = datetime(2025, 1, 1, 9, 0, tzinfo=timezone.utc)

Reply = Union[str, Dict[str, Any], Exception]


class FakeGenerationClient:
    """순서대로 준비된 응답을 돌려주는 생성 클라이언트 대역."""

    def __init__(self, replies: Sequence[Reply]) -> None:
        self._replies: List[Reply] = list(replies)
        self.calls: List[Tuple[str, str]] = []

    def call(self, prompt: str, model: str) -> str:
        self.calls.append((prompt, model))
        if not self._replies:
            raise GenerationFailure("준비된 응답이 없습니다.")
        reply = self._replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        if isinstance(reply, dict):
            return json.dumps(reply)
        return reply


class FakeRepositoryChecker:
    """저장소 존재 여부를 고정값으로 돌려주는 대역."""

    def __init__(self, exists: bool = True, error: Optional[Exception] = None) -> None:
        self._exists = exists
        self._error = error
        self.calls: List[Tuple[str, str]] = []

    def repository_exists(self, owner: str, name: str) -> bool:
        self.calls.append((owner, name))
        if self._error is not None:
            raise self._error
        return self._exists


class FakeGitHubClient(FakeRepositoryChecker):
    """매니페스트/언어 조회까지 흉내 내는 GitHub 클라이언트 대역."""

    def __init__(
        self,
        manifest: Optional[RepositoryManifest] = None,
        languages: Optional[List[str]] = None,
        exists: bool = True,
    ) -> None:
        super().__init__(exists=exists)
        self._manifest = manifest
        self._languages = languages

    def available(self) -> bool:
        return True

    def detect_manifest(self, owner: str, repo: str) -> Optional[RepositoryManifest]:
        return self._manifest

    def list_user_languages(self, username: str, limit: int = 10) -> List[str]:
        if self._languages is None:
            raise RepositoryLookupError("GitHub 사용자 저장소 조회 실패 (상태 404)")
        return list(self._languages)


def fixed_clock() -> Callable[[], datetime]:
    return lambda: FIXED_TIME


def chain_graph(owner_id: str = "user_1", statuses: Sequence[NodeStatus] = ()) -> RoadmapGraph:
    """
    A -> B -> C 선형 그래프를 만듭니다.

    @param {str} owner_id - 소유자 ID.
    @param {Sequence[NodeStatus]} statuses - A, B, C 순서의 상태 (기본은 모두 locked).
    @returns {RoadmapGraph} 테스트용 그래프.
    """
    statuses = list(statuses) or [NodeStatus.LOCKED] * 3
    nodes = [
        RoadmapNode(node_id=node_id, label=f"Topic {node_id}", status=status)
        for node_id, status in zip(["A", "B", "C"], statuses)
    ]
    edges = [
        RoadmapEdge(edge_id="eA-B", source="A", target="B"),
        RoadmapEdge(edge_id="eB-C", source="B", target="C"),
    ]
    return RoadmapGraph(
        owner_id=owner_id,
        domain_label="Backend Developer",
        kind=RoadmapKind.STANDARD,
        nodes=nodes,
        edges=edges,
        created_at=FIXED_TIME,
    )


STRUCTURE_REPLY = {
    "nodes": [
        {"id": "1", "label": "X", "status": "completed"},
        {"id": "2", "label": "Y", "status": "pending"},
    ],
    "edges": [{"source": "1", "target": "2"}],
}

ENRICHMENT_REPLY = {
    "2": {
        "description": "Learn Y",
        "estimatedTime": "2 Days",
        "resources": [{"title": "Y docs", "url": "https://example.com/y"}],
        "projectIdea": "Build a Y demo",
    }
}


def make_pdf(*lines: str) -> bytes:
    """
    메모리에서 한 페이지짜리 PDF를 만듭니다. 줄이 없으면 빈 페이지가 됩니다.

    @param {str} lines - 페이지에 적을 텍스트 줄.
    @returns {bytes} PDF 파일 바이트.
    """
    document = fitz.open()
    page = document.new_page()
    for index, line in enumerate(lines):
        page.insert_text((72, 72 + index * 20), line)
    data = document.tobytes()
    document.close()
    return data
