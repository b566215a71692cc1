from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, List, Optional, Protocol

from skillmap_ai.ai_core.common.exceptions import (
    InvalidStatus,
    InvalidTransition,
    NodeNotFound,
    RepositoryLookupError,
    VerificationFailed,
)
from skillmap_ai.ai_core.domain.node_status import NodeStatus
from skillmap_ai.ai_core.domain.roadmap_graph import RoadmapGraph

logger = logging.getLogger(__name__)


class RepositoryChecker(Protocol):
    """저장소 존재 확인 협력자."""

    def repository_exists(self, owner: str, name: str) -> bool:
        ...


@dataclass(frozen=True)
class ProgressionResult:
    """상태 전이 결과."""

    graph: RoadmapGraph
    previous_status: NodeStatus
    unlocked: List[str] = field(default_factory=list)
    changed: bool = True


class ProgressionEngine:
    """
    노드 상태 머신.

    상태: locked / pending / completed. 노드를 completed로 바꾸면
    직접 후속 노드 중 locked인 노드만 pending으로 바꿉니다 (단일 단계).
    후속 노드의 다른 선수 노드 상태는 보지 않습니다.
    """

    def __init__(self, repository_checker: Optional[RepositoryChecker] = None, allow_reopen: bool = False) -> None:
        """
        @param {Optional[RepositoryChecker]} repository_checker - verify_and_complete용 협력자.
        @param {bool} allow_reopen - completed 노드를 직접 호출로 되돌릴 수 있는지 여부.
        @returns {None}
        """
        self._repository_checker = repository_checker
        self._allow_reopen = allow_reopen

    def set_status(self, graph: RoadmapGraph, node_id: str, new_status: Any) -> ProgressionResult:
        """
        노드 상태를 바꾸고 필요하면 후속 노드를 해제합니다. 입력 그래프는 바꾸지 않습니다.

        @param {RoadmapGraph} graph - 현재 그래프.
        @param {str} node_id - 대상 노드 ID.
        @param {Any} new_status - 새 상태 (NodeStatus 또는 문자열).
        @returns {ProgressionResult} 새 그래프와 해제된 노드 목록.
        @raises NodeNotFound - 노드가 그래프에 없는 경우.
        @raises InvalidStatus - 상태 값이 도메인 밖인 경우.
        @raises InvalidTransition - completed를 되돌리려는데 정책상 허용되지 않는 경우.
        """
        status = parse_status(new_status)
        current = graph.find_node(node_id)
        if current is None:
            raise NodeNotFound(f"노드를 찾을 수 없습니다: {node_id}")

        previous = current.status
        if previous is NodeStatus.COMPLETED:
            if status is NodeStatus.COMPLETED:
                return ProgressionResult(graph=graph, previous_status=previous, changed=False)
            if not self._allow_reopen:
                raise InvalidTransition(f"완료된 노드는 되돌릴 수 없습니다: {node_id}")

        unlock_targets = set(graph.successors(node_id)) if status is NodeStatus.COMPLETED else set()
        unlocked: List[str] = []
        nodes = []
        for node in graph.nodes:
            if node.node_id == node_id:
                nodes.append(replace(node, status=status))
            elif node.node_id in unlock_targets and node.status is NodeStatus.LOCKED:
                nodes.append(replace(node, status=NodeStatus.PENDING))
                unlocked.append(node.node_id)
            else:
                nodes.append(node)

        logger.info(
            "노드 상태 변경",
            extra={
                "roadmap_id": graph.roadmap_id,
                "node_id": node_id,
                "from": previous.value,
                "to": status.value,
                "unlocked": unlocked,
            },
        )
        return ProgressionResult(
            graph=replace(graph, nodes=nodes, edges=list(graph.edges)),
            previous_status=previous,
            unlocked=unlocked,
            changed=previous is not status or bool(unlocked),
        )

    def verify_and_complete(self, graph: RoadmapGraph, node_id: str, repo_owner: str, repo_name: str) -> ProgressionResult:
        """
        외부 저장소가 존재할 때만 노드를 completed로 바꿉니다.

        @param {RoadmapGraph} graph - 현재 그래프.
        @param {str} node_id - 대상 노드 ID.
        @param {str} repo_owner - 저장소 소유자.
        @param {str} repo_name - 저장소 이름.
        @returns {ProgressionResult} set_status 결과.
        @raises NodeNotFound - 노드가 그래프에 없는 경우 (외부 확인 전에 검사).
        @raises VerificationFailed - 저장소가 없거나 확인 호출이 실패한 경우.
        """
        if graph.find_node(node_id) is None:
            raise NodeNotFound(f"노드를 찾을 수 없습니다: {node_id}")
        if self._repository_checker is None:
            raise VerificationFailed("저장소 확인 협력자가 구성되지 않았습니다.")
        if not repo_owner or not repo_name:
            raise VerificationFailed("저장소 소유자와 이름이 필요합니다.")

        try:
            exists = self._repository_checker.repository_exists(repo_owner, repo_name)
        except RepositoryLookupError as exc:
            logger.warning(
                "저장소 확인 호출 실패",
                extra={"repository": f"{repo_owner}/{repo_name}", "error": str(exc)},
            )
            raise VerificationFailed(f"저장소를 확인할 수 없습니다: {repo_owner}/{repo_name}") from exc

        if not exists:
            logger.info("저장소 확인 실패", extra={"repository": f"{repo_owner}/{repo_name}", "node_id": node_id})
            raise VerificationFailed(f"저장소를 찾을 수 없습니다: {repo_owner}/{repo_name}")

        logger.info("저장소 확인 성공", extra={"repository": f"{repo_owner}/{repo_name}", "node_id": node_id})
        return self.set_status(graph, node_id, NodeStatus.COMPLETED)


def parse_status(value: Any) -> NodeStatus:
    """
    요청 입력을 상태로 변환합니다. 정규화와 달리 모르는 값은 거부합니다.

    @param {Any} value - NodeStatus 또는 문자열.
    @returns {NodeStatus} 상태.
    @raises InvalidStatus - 도메인 밖의 값.
    """
    if isinstance(value, NodeStatus):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        for status in NodeStatus:
            if status.value == lowered:
                return status
    raise InvalidStatus(f"지원하지 않는 상태입니다: {value!r}")
