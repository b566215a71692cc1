from __future__ import annotations

from typing import Any, Dict, List, Optional


class RoadmapError(Exception):
    """로드맵 도메인 오류의 최상위 클래스."""

    error_code = "roadmap_error"
    http_status = 500

    def __init__(self, message: str = "") -> None:
        """
        @param {str} message - 사용자에게 노출 가능한 오류 메시지.
        @returns {None}
        """
        super().__init__(message or self.error_code)
        self.message = message or self.error_code

    def details(self) -> Dict[str, Any]:
        """
        @returns {Dict[str, Any]} 응답의 details 필드에 실을 부가 정보 (없으면 빈 dict).
        """
        return {}


# -----------------------------------------------------------------------------
# 생성 파이프라인 오류
# -----------------------------------------------------------------------------

class GenerationFailure(RoadmapError):
    """LLM 호출이 재시도 후에도 실패했거나 재시도 불가 오류를 반환함."""

    error_code = "generation_failure"
    http_status = 502

    def __init__(self, message: str = "", attempts: int = 0, transient: bool = False) -> None:
        """
        @param {str} message - 오류 메시지.
        @param {int} attempts - 실제 수행된 호출 횟수.
        @param {bool} transient - 마지막 오류가 일시적(503) 오류였는지 여부.
        @returns {None}
        """
        super().__init__(message)
        self.attempts = attempts
        self.transient = transient


class EnrichmentFailure(GenerationFailure):
    """상세 보강 단계에서 한 배치가 실패함."""

    error_code = "enrichment_failure"

    def __init__(
        self,
        message: str = "",
        batch_index: int = 0,
        completed_batches: int = 0,
        cause_code: str = "generation_failure",
    ) -> None:
        """
        @param {int} batch_index - 실패한 배치 위치 (0부터).
        @param {int} completed_batches - 실패 전에 끝난 배치 수.
        @param {str} cause_code - 원인 오류 코드 (generation_failure / malformed_response).
        @returns {None}
        """
        super().__init__(message)
        self.batch_index = batch_index
        self.completed_batches = completed_batches
        self.cause_code = cause_code

    def details(self) -> Dict[str, Any]:
        return {
            "cause": self.cause_code,
            "batch_index": self.batch_index,
            "completed_batches": self.completed_batches,
        }


class ServiceUnavailable(Exception):
    """생성 서비스가 일시적으로 사용 불가(503)함. 재시도 대상."""


class MalformedResponse(RoadmapError):
    """LLM 출력이 JSON 객체로 파싱되지 않음."""

    error_code = "malformed_response"
    http_status = 502


class GraphValidationError(RoadmapError):
    """후보 그래프가 구조 불변식을 위반함."""

    error_code = "graph_invalid"
    http_status = 422


class GraphCycleDetected(GraphValidationError):
    """엣지 집합에 사이클이 존재함."""

    error_code = "graph_cycle_detected"

    def __init__(self, message: str = "", cycle: Optional[List[tuple[str, str]]] = None) -> None:
        super().__init__(message)
        self.cycle = cycle or []


# -----------------------------------------------------------------------------
# 조회/진행 오류
# -----------------------------------------------------------------------------

class RoadmapNotFound(RoadmapError):
    error_code = "roadmap_not_found"
    http_status = 404


class NodeNotFound(RoadmapError):
    error_code = "node_not_found"
    http_status = 404


class ManifestNotFound(RoadmapError):
    error_code = "manifest_not_found"
    http_status = 404


class InvalidRepositoryUrl(RoadmapError):
    error_code = "invalid_repository_url"
    http_status = 400


class VerificationFailed(RoadmapError):
    """외부 저장소 존재 확인 실패 또는 URL 파싱 실패."""

    error_code = "verification_failed"
    http_status = 422


class InvalidStatus(RoadmapError):
    error_code = "invalid_status"
    http_status = 400


class InvalidTransition(RoadmapError):
    """완료 노드를 되돌리는 전이가 정책상 허용되지 않음."""

    error_code = "invalid_transition"
    http_status = 409


class RoadmapAlreadyExists(RoadmapError):
    """같은 ID의 로드맵이 이미 저장되어 있음."""

    error_code = "roadmap_already_exists"
    http_status = 409


class ConcurrentModification(RoadmapError):
    """저장 시점의 버전이 읽은 시점과 다름."""

    error_code = "concurrent_modification"
    http_status = 409


class AuthenticationRequired(RoadmapError):
    error_code = "authentication_required"
    http_status = 401


class Forbidden(RoadmapError):
    error_code = "forbidden"
    http_status = 403


class RepositoryLookupError(Exception):
    """저장소 API 호출 자체가 실패함 (네트워크/권한/한도)."""


class ResumeExtractionError(RoadmapError):
    """업로드된 이력서 PDF에서 텍스트를 읽지 못함."""

    error_code = "resume_unreadable"
    http_status = 422
