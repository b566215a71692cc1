from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class RepositoryManifest:
    """저장소에서 감지한 의존성 매니페스트."""

    owner: str
    name: str
    path: str
    ecosystem: str
    content: str
