from skillmap_ai.ai_core.repository.in_memory_roadmap_store import InMemoryRoadmapStore
from skillmap_ai.ai_core.repository.roadmap_store import RoadmapStore, generate_roadmap_id

__all__ = [
    "InMemoryRoadmapStore",
    "RoadmapStore",
    "generate_roadmap_id",
]
