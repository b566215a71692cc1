from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from skillmap_ai.ai_core.domain.node_status import RoadmapKind


@dataclass(frozen=True)
class DomainContext:
    """도메인 기반 생성 입력."""

    domain: str
    verified_skills: List[str] = field(default_factory=list)

    @property
    def kind(self) -> RoadmapKind:
        return RoadmapKind.STANDARD

    @property
    def label(self) -> str:
        return self.domain


@dataclass(frozen=True)
class ResumeContext:
    """이력서 기반 생성 입력. resume_text는 추출된 평문."""

    domain: str
    resume_text: str
    verified_skills: List[str] = field(default_factory=list)

    @property
    def kind(self) -> RoadmapKind:
        return RoadmapKind.RESUME

    @property
    def label(self) -> str:
        return f"Resume Analysis: {self.domain}"


@dataclass(frozen=True)
class RepositoryContext:
    """저장소 기반 생성 입력."""

    owner: str
    name: str
    ecosystem: str
    manifest_text: str

    @property
    def kind(self) -> RoadmapKind:
        return RoadmapKind.REPOSITORY

    @property
    def label(self) -> str:
        return f"{self.owner}/{self.name}"
