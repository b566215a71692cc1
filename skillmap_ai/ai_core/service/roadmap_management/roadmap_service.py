from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from skillmap_ai.ai_core.client.github_client import GitHubClient, parse_repository_url
from skillmap_ai.ai_core.common.exceptions import (
    AuthenticationRequired,
    InvalidRepositoryUrl,
    ManifestNotFound,
    RoadmapNotFound,
    VerificationFailed,
)
from skillmap_ai.ai_core.domain.generation_context import DomainContext, RepositoryContext, ResumeContext
from skillmap_ai.ai_core.domain.roadmap_graph import RoadmapGraph, RoadmapSummary
from skillmap_ai.ai_core.repository.roadmap_store import RoadmapStore
from skillmap_ai.ai_core.service.graph.prompt_builder import GenerationContext
from skillmap_ai.ai_core.service.graph.roadmap_generator import RoadmapGeneratorService
from skillmap_ai.ai_core.service.progress.progression_engine import ProgressionEngine

logger = logging.getLogger(__name__)


class RoadmapService:
    """
    로드맵 생성/조회/진행 유스케이스 파사드.

    생성 경로는 그래프가 완성된 뒤에만 한 번 저장하므로, 생성 단계의
    어떤 실패도 저장소에 흔적을 남기지 않습니다.
    """

    def __init__(
        self,
        generator: RoadmapGeneratorService,
        store: RoadmapStore,
        engine: ProgressionEngine,
        github_client: Optional[GitHubClient] = None,
    ) -> None:
        """
        @param {RoadmapGeneratorService} generator - 2단계 생성 파이프라인.
        @param {RoadmapStore} store - 로드맵 저장소.
        @param {ProgressionEngine} engine - 노드 상태 머신.
        @param {Optional[GitHubClient]} github_client - 매니페스트/언어 조회용 클라이언트.
        @returns {None}
        """
        self._generator = generator
        self._store = store
        self._engine = engine
        self._github_client = github_client

    # -------------------------------------------------------------------------
    # 생성
    # -------------------------------------------------------------------------

    def generate_roadmap(self, owner_id: str, domain: str, verified_skills: Optional[Sequence[str]] = None) -> RoadmapGraph:
        """
        @param {str} owner_id - 요청자 ID.
        @param {str} domain - 학습 목표 도메인.
        @param {Optional[Sequence[str]]} verified_skills - 이미 검증된 스킬.
        @returns {RoadmapGraph} 저장된 그래프.
        """
        context = DomainContext(domain=domain.strip(), verified_skills=list(verified_skills or []))
        return self._generate(owner_id, context)

    def generate_from_resume(
        self,
        owner_id: str,
        domain: str,
        resume_text: str,
        verified_skills: Optional[Sequence[str]] = None,
    ) -> RoadmapGraph:
        """
        @param {str} owner_id - 요청자 ID.
        @param {str} domain - 목표 역할/도메인.
        @param {str} resume_text - 추출이 끝난 이력서 평문.
        @param {Optional[Sequence[str]]} verified_skills - 이미 검증된 스킬.
        @returns {RoadmapGraph} 저장된 그래프.
        """
        context = ResumeContext(
            domain=domain.strip(),
            resume_text=resume_text,
            verified_skills=list(verified_skills or []),
        )
        return self._generate(owner_id, context)

    def generate_from_repository(
        self,
        owner_id: str,
        repo_owner: str,
        repo_name: str,
        manifest_text: str,
        detected_ecosystem: str,
    ) -> RoadmapGraph:
        context = RepositoryContext(
            owner=repo_owner,
            name=repo_name,
            ecosystem=detected_ecosystem,
            manifest_text=manifest_text,
        )
        return self._generate(owner_id, context)

    def generate_from_repository_url(self, owner_id: str, repo_url: str) -> RoadmapGraph:
        """
        저장소 URL에서 매니페스트를 찾아 저장소 기반 로드맵을 만듭니다.

        @param {str} owner_id - 요청자 ID.
        @param {str} repo_url - GitHub 저장소 URL.
        @returns {RoadmapGraph} 저장된 그래프.
        @raises InvalidRepositoryUrl - URL 형식 오류.
        @raises ManifestNotFound - 지원하는 매니페스트가 없는 경우.
        """
        _require_owner(owner_id)
        repo_owner, repo_name = parse_repository_url(repo_url)
        manifest = self._require_github().detect_manifest(repo_owner, repo_name)
        if manifest is None:
            raise ManifestNotFound(
                f"지원하는 매니페스트(package.json, go.mod, requirements.txt)가 없습니다: {repo_owner}/{repo_name}"
            )
        return self.generate_from_repository(
            owner_id,
            repo_owner=manifest.owner,
            repo_name=manifest.name,
            manifest_text=manifest.content,
            detected_ecosystem=manifest.ecosystem,
        )

    def sync_github_skills(self, github_username: str) -> List[str]:
        """
        GitHub 사용자의 최근 저장소 10개에서 주 언어를 모아 검증 스킬로 돌려줍니다.

        @param {str} github_username - GitHub 사용자명.
        @returns {List[str]} 중복 없는 언어 목록.
        """
        languages = self._require_github().list_user_languages(github_username.strip(), limit=10)
        logger.info("GitHub 스킬 동기화", extra={"github_username": github_username, "skills": languages})
        return languages

    # -------------------------------------------------------------------------
    # 조회
    # -------------------------------------------------------------------------

    def get_roadmap(self, owner_id: str, roadmap_id: str) -> RoadmapGraph:
        _require_owner(owner_id)
        return self._store.get(roadmap_id, owner_id)

    def list_roadmaps(self, owner_id: str) -> List[RoadmapSummary]:
        """
        @param {str} owner_id - 요청자 ID.
        @returns {List[RoadmapSummary]} 생성 시각 내림차순 요약 목록.
        """
        _require_owner(owner_id)
        return [RoadmapSummary.from_graph(graph) for graph in self._store.list_by_owner(owner_id)]

    def get_latest_roadmap(self, owner_id: str) -> RoadmapGraph:
        _require_owner(owner_id)
        latest = self._store.latest(owner_id)
        if latest is None:
            raise RoadmapNotFound("생성된 로드맵이 없습니다.")
        return latest

    # -------------------------------------------------------------------------
    # 진행
    # -------------------------------------------------------------------------

    def update_node_status(self, owner_id: str, roadmap_id: str, node_id: str, new_status: str) -> RoadmapGraph:
        """
        읽기 → 전이 → 저장. 저장 시 version이 다르면 ConcurrentModification.

        @param {str} owner_id - 요청자 ID.
        @param {str} roadmap_id - 로드맵 ID.
        @param {str} node_id - 노드 ID.
        @param {str} new_status - locked / pending / completed.
        @returns {RoadmapGraph} 저장된 그래프.
        """
        _require_owner(owner_id)
        graph = self._store.get(roadmap_id, owner_id)
        result = self._engine.set_status(graph, node_id, new_status)
        if not result.changed:
            return graph
        return self._store.save(result.graph)

    def verify_node(self, owner_id: str, roadmap_id: str, node_id: str, repo_owner: str, repo_name: str) -> RoadmapGraph:
        _require_owner(owner_id)
        graph = self._store.get(roadmap_id, owner_id)
        result = self._engine.verify_and_complete(graph, node_id, repo_owner, repo_name)
        if not result.changed:
            return graph
        return self._store.save(result.graph)

    def verify_node_by_url(self, owner_id: str, roadmap_id: str, node_id: str, repo_url: str) -> RoadmapGraph:
        """
        @param {str} repo_url - 과제 결과물 저장소 URL.
        @raises VerificationFailed - URL을 해석할 수 없는 경우.
        """
        try:
            repo_owner, repo_name = parse_repository_url(repo_url)
        except InvalidRepositoryUrl as exc:
            raise VerificationFailed(exc.message) from exc
        return self.verify_node(owner_id, roadmap_id, node_id, repo_owner, repo_name)

    # -------------------------------------------------------------------------
    # 내부
    # -------------------------------------------------------------------------

    def _generate(self, owner_id: str, context: GenerationContext) -> RoadmapGraph:
        _require_owner(owner_id)
        graph = self._generator.build(owner_id, context)
        roadmap_id = self._store.create(graph)
        logger.info(
            "로드맵 생성 및 저장 완료",
            extra={"roadmap_id": roadmap_id, "owner_id": owner_id, "kind": context.kind.value},
        )
        return self._store.get(roadmap_id, owner_id)

    def _require_github(self) -> GitHubClient:
        if self._github_client is None:
            raise VerificationFailed("저장소 조회 클라이언트가 구성되지 않았습니다.")
        return self._github_client


def _require_owner(owner_id: str) -> None:
    if not owner_id or not str(owner_id).strip():
        raise AuthenticationRequired("사용자 식별 정보가 필요합니다.")
