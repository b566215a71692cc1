from __future__ import annotations

from enum import Enum
from typing import Any


class NodeStatus(str, Enum):
    """로드맵 노드 진행 상태."""

    LOCKED = "locked"
    PENDING = "pending"
    COMPLETED = "completed"

    @classmethod
    def coerce(cls, value: Any) -> "NodeStatus":
        """
        임의 입력을 상태로 변환합니다. 인식할 수 없으면 LOCKED.

        @param {Any} value - LLM 또는 저장소에서 온 원시 상태 값.
        @returns {NodeStatus} 정규화된 상태.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            lowered = value.strip().lower()
            for status in cls:
                if status.value == lowered:
                    return status
        return cls.LOCKED


class RoadmapKind(str, Enum):
    """로드맵 생성 경로."""

    STANDARD = "standard"
    RESUME = "resume-derived"
    REPOSITORY = "repository-derived"
