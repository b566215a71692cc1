from __future__ import annotations

import re
from typing import List, Sequence, Union

from skillmap_ai.ai_core.domain.generation_context import DomainContext, RepositoryContext, ResumeContext
from skillmap_ai.ai_core.domain.roadmap_node import RoadmapNode

GenerationContext = Union[DomainContext, ResumeContext, RepositoryContext]

TRUNCATION_MARKER = "..."
MAX_STRUCTURE_NODES = 15
MIN_STRUCTURE_NODES = 10

_WHITESPACE_RE = re.compile(r"\s+")

_STATUS_RULES = (
    '- If a topic matches a VERIFIED skill, or is a prerequisite of one, set "status": "completed".\n'
    '- The immediate next topics to study get "status": "pending".\n'
    '- Every other topic gets "status": "locked".'
)

_STRUCTURE_FORMAT = """{
    "nodes": [
        { "id": "1", "label": "Topic Name", "status": "completed" | "pending" | "locked" }
    ],
    "edges": [
        { "id": "e1-2", "source": "1", "target": "2" }
    ]
}"""

_ENRICHMENT_FORMAT = """{
    "<id>": {
        "description": "%s",
        "estimatedTime": "%s",
        "resources": [{ "title": "Resource Name", "url": "https://..." }],
        "projectIdea": "A practical project to apply this"
    }
}"""


class PromptBuilder:
    """
    생성 경로별 구조/보강 프롬프트를 만드는 순수 빌더.

    네트워크 호출이나 상태 변경이 없으며 같은 입력에는 같은 프롬프트를 돌려줍니다.
    """

    def __init__(self, resume_max_chars: int = 10_000, max_nodes: int = MAX_STRUCTURE_NODES) -> None:
        """
        @param {int} resume_max_chars - 프롬프트에 넣을 이력서 최대 글자 수.
        @param {int} max_nodes - 구조 프롬프트가 요구하는 최대 노드 수.
        @returns {None}
        """
        self._resume_max_chars = resume_max_chars
        self._max_nodes = max_nodes

    # -------------------------------------------------------------------------
    # 구조 프롬프트
    # -------------------------------------------------------------------------

    def structure_prompt(self, context: GenerationContext) -> str:
        """
        @param {GenerationContext} context - 생성 입력.
        @returns {str} id/label/status만 요구하는 경량 DAG 프롬프트.
        """
        if isinstance(context, ResumeContext):
            return self._resume_structure(context)
        if isinstance(context, RepositoryContext):
            return self._repository_structure(context)
        return self._domain_structure(context)

    def _domain_structure(self, context: DomainContext) -> str:
        return (
            "Act as a Senior Engineering Mentor.\n"
            f'Create a LIGHTWEIGHT learning roadmap structure for: "{context.domain}".\n\n'
            "--- USER CONTEXT ---\n"
            f"VERIFIED skills (the user already knows these): [{_join_skills(context.verified_skills)}]\n\n"
            "--- INSTRUCTIONS ---\n"
            f"1. Generate a Directed Acyclic Graph (DAG) of {self._node_range()} learning topics (at most {self._max_nodes} nodes).\n"
            "2. Each node has ONLY \"id\", \"label\" and \"status\". Details come later.\n"
            f"{_STATUS_RULES}\n"
            "3. Edges point from a prerequisite to the topic that depends on it. No cycles.\n"
            "4. Return ONLY valid JSON. No markdown. No text.\n\n"
            f"JSON FORMAT:\n{_STRUCTURE_FORMAT}\n"
        )

    def _resume_structure(self, context: ResumeContext) -> str:
        resume_text = truncate_resume(context.resume_text, self._resume_max_chars)
        return (
            "Act as a Senior Engineering Mentor.\n"
            f'The user wants to learn: "{context.domain}".\n\n'
            "Here is their RESUME (parsed text):\n"
            f'"{resume_text}"\n\n'
            f"VERIFIED skills: [{_join_skills(context.verified_skills)}]\n\n"
            "--- INSTRUCTIONS ---\n"
            "1. Analyze the resume to understand their current tech stack. Skills shown in the resume count as VERIFIED.\n"
            f'2. Compare it against the requirements for "{context.domain}" and identify the gaps.\n'
            f"3. Construct a LIGHTWEIGHT roadmap DAG of {self._node_range()} topics (at most {self._max_nodes} nodes).\n"
            "   Each node has ONLY \"id\", \"label\" and \"status\".\n"
            f"{_STATUS_RULES}\n"
            "4. Edges point from a prerequisite to the topic that depends on it. No cycles.\n"
            "5. Return ONLY valid JSON. No markdown.\n\n"
            f"JSON FORMAT:\n{_STRUCTURE_FORMAT}\n"
        )

    def _repository_structure(self, context: RepositoryContext) -> str:
        return (
            "Act as a Senior Technical Architect and Open Source Maintainer.\n"
            "I want to understand the architecture and tech stack of a specific project.\n\n"
            "--- PROJECT CONTEXT ---\n"
            f"Language: {context.ecosystem}\n"
            f"Repo Owner/Name: {context.owner}/{context.name}\n"
            "Manifest File Content:\n"
            f'"{context.manifest_text}"\n\n'
            "--- INSTRUCTIONS ---\n"
            "1. Identify the core runtime stack (frameworks, ORMs, state management, API clients).\n"
            "   IGNORE build tools, linters and testing libraries unless central to the architecture.\n"
            f"2. Construct a LIGHTWEIGHT learning roadmap DAG of at most {self._max_nodes} nodes.\n"
            "   Each node has ONLY \"id\", \"label\" and \"status\".\n"
            f'   - Root node: the main language ("{context.ecosystem}"), treated as VERIFIED.\n'
            f"{_STATUS_RULES}\n"
            "3. Edges point from a prerequisite to the topic that depends on it. No cycles.\n"
            "4. Return ONLY valid JSON. No markdown.\n\n"
            f"JSON FORMAT:\n{_STRUCTURE_FORMAT}\n"
        )

    # -------------------------------------------------------------------------
    # 보강 프롬프트
    # -------------------------------------------------------------------------

    def enrichment_prompt(self, context: GenerationContext, batch: Sequence[RoadmapNode]) -> str:
        """
        @param {GenerationContext} context - 생성 입력.
        @param {Sequence[RoadmapNode]} batch - 정규화된 노드 배치.
        @returns {str} 노드 ID를 키로 하는 상세 정보 요청 프롬프트.
        """
        topics = "\n".join(
            f"- ID: {node.node_id}, Topic: {node.label}, Status: {node.status.value}" for node in batch
        )
        if isinstance(context, RepositoryContext):
            return (
                f"You are enriching roadmap nodes for understanding the repo: "
                f"{context.owner}/{context.name} ({context.ecosystem}).\n\n"
                "For each topic below, explain WHY it is likely used in this specific repo.\n\n"
                f"TOPICS:\n{topics}\n\n"
                "Return ONLY valid JSON keyed by the topic ID. No markdown.\n"
                "Format:\n"
                + _ENRICHMENT_FORMAT % (
                    "Why it is used in this repo (e.g. 'Likely used to validate API request schemas')",
                    "Time to learn enough to understand the codebase (e.g. 2 days, 4 hours)",
                )
                + "\n"
            )
        return (
            f'You are enriching learning roadmap nodes for someone learning: "{context.domain}".\n\n'
            'For each topic below, provide learning details. For "completed" topics, keep it brief.\n\n'
            f"TOPICS:\n{topics}\n\n"
            "Return ONLY valid JSON keyed by the topic ID. No markdown.\n"
            "Format:\n"
            + _ENRICHMENT_FORMAT % (
                "Brief 1-2 sentence explanation",
                "e.g. 0 hours for completed, 4 Hours, 2 Days for new topics",
            )
            + "\n"
        )

    def _node_range(self) -> str:
        low = min(MIN_STRUCTURE_NODES, self._max_nodes)
        return f"{low}-{self._max_nodes}"


def truncate_resume(text: str, max_chars: int) -> str:
    """
    이력서 텍스트의 공백을 정리하고 최대 길이로 자릅니다.

    @param {str} text - 추출된 이력서 평문.
    @param {int} max_chars - 최대 글자 수.
    @returns {str} 잘린 경우 TRUNCATION_MARKER가 붙은 문자열.
    """
    collapsed = _WHITESPACE_RE.sub(" ", text or "").strip()
    if len(collapsed) > max_chars:
        return collapsed[:max_chars] + TRUNCATION_MARKER
    return collapsed


def _join_skills(skills: List[str]) -> str:
    cleaned = [skill.strip() for skill in skills if skill and skill.strip()]
    return ", ".join(cleaned)
