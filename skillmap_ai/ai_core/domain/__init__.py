from skillmap_ai.ai_core.domain.assessment_question import AssessmentQuestion
from skillmap_ai.ai_core.domain.generation_context import DomainContext, RepositoryContext, ResumeContext
from skillmap_ai.ai_core.domain.node_details import DEFAULT_ESTIMATED_TIME, NodeDetails
from skillmap_ai.ai_core.domain.node_status import NodeStatus, RoadmapKind
from skillmap_ai.ai_core.domain.repository_manifest import RepositoryManifest
from skillmap_ai.ai_core.domain.roadmap_edge import RoadmapEdge
from skillmap_ai.ai_core.domain.roadmap_graph import RoadmapGraph, RoadmapSummary
from skillmap_ai.ai_core.domain.roadmap_node import NodePosition, NodeResource, RoadmapNode

__all__ = [
    "AssessmentQuestion",
    "DEFAULT_ESTIMATED_TIME",
    "DomainContext",
    "NodeDetails",
    "NodePosition",
    "NodeResource",
    "NodeStatus",
    "RepositoryContext",
    "RepositoryManifest",
    "ResumeContext",
    "RoadmapEdge",
    "RoadmapGraph",
    "RoadmapKind",
    "RoadmapNode",
    "RoadmapSummary",
]
