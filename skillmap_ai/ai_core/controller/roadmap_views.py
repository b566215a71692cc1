from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict

from drf_spectacular.utils import OpenApiExample, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from skillmap_ai.ai_core.controller import dependencies
from skillmap_ai.ai_core.controller.authentication import HeaderUserAuthentication
from skillmap_ai.ai_core.controller.serializers import (
    AssessmentQuestionSerializer,
    ErrorSerializer,
    GenerateRoadmapRequestSerializer,
    GithubSkillsRequestSerializer,
    GithubSkillsSerializer,
    HealthCheckSerializer,
    NextQuestionRequestSerializer,
    NodeStatusUpdateRequestSerializer,
    RepositoryDecodeRequestSerializer,
    ResumeAnalyseRequestSerializer,
    RoadmapGraphSerializer,
    RoadmapSummarySerializer,
    VerifyNodeRequestSerializer,
)
from skillmap_ai.ai_core.config.roadmap_settings import get_roadmap_settings
from skillmap_ai.ai_core.domain.roadmap_graph import RoadmapGraph, RoadmapSummary
from skillmap_ai.ai_core.service.assessment.question_picker import pick_next_difficulty

_GENERATION_ERRORS = {
    401: OpenApiResponse(ErrorSerializer, description="X-User-Id 헤더 없음"),
    422: OpenApiResponse(ErrorSerializer, description="구조 검증 실패 (사이클 등)"),
    502: OpenApiResponse(ErrorSerializer, description="생성 호출/응답 파싱 실패"),
}

_EXAMPLE_GRAPH = {
    "id": "rm_3f2a9c1d0b7e",
    "owner_id": "user_1",
    "domain_label": "Backend Developer",
    "kind": "standard",
    "nodes": [
        {
            "id": "1",
            "kind": "topic",
            "label": "HTTP Basics",
            "description": "Requests, responses and status codes.",
            "estimated_time": "0 hours",
            "resources": [{"title": "MDN HTTP", "url": "https://developer.mozilla.org/docs/Web/HTTP"}],
            "project_idea": "",
            "status": "completed",
            "position": {"x": 0, "y": 0},
        },
        {
            "id": "2",
            "kind": "topic",
            "label": "REST API Design",
            "description": "Resource modelling and versioning.",
            "estimated_time": "2 Days",
            "resources": [],
            "project_idea": "Design a todo API",
            "status": "pending",
            "position": {"x": 0, "y": 100},
        },
    ],
    "edges": [{"id": "e1-2", "source": "1", "target": "2"}],
    "created_at": "2025-01-01T00:00:00+00:00",
    "version": 1,
}


class RoadmapAPIView(APIView):
    """인증이 필요한 로드맵 API의 공통 베이스."""

    authentication_classes = [HeaderUserAuthentication]
    permission_classes = [IsAuthenticated]

    @staticmethod
    def owner_id(request) -> str:
        return str(request.user)


# =============================================================================
# 로드맵 생성
# =============================================================================

class RoadmapGenerateAPIView(RoadmapAPIView):
    """도메인과 검증된 스킬로 로드맵을 생성합니다."""

    @extend_schema(
        summary="도메인 기반 로드맵 생성",
        request=GenerateRoadmapRequestSerializer,
        responses={201: RoadmapGraphSerializer, **_GENERATION_ERRORS},
        examples=[
            OpenApiExample(
                "request",
                value={"domain": "Backend Developer", "verified_skills": ["Python"]},
                request_only=True,
            ),
            OpenApiExample("response", value=_EXAMPLE_GRAPH, response_only=True),
        ],
    )
    def post(self, request) -> Response:
        """
        @param {Request} request - `{domain, verified_skills?}` JSON.
        @returns {Response} 저장된 로드맵 (201).
        """
        serializer = GenerateRoadmapRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        graph = dependencies.get_roadmap_service().generate_roadmap(
            self.owner_id(request),
            serializer.validated_data["domain"],
            serializer.validated_data["verified_skills"],
        )
        return _graph_response(graph, status.HTTP_201_CREATED)


class ResumeAnalyseAPIView(RoadmapAPIView):
    """이력서(PDF 또는 평문)를 분석해 부족한 역량 중심의 로드맵을 생성합니다."""

    parser_classes = [MultiPartParser, FormParser, JSONParser]

    @extend_schema(
        summary="이력서 기반 로드맵 생성",
        request={"multipart/form-data": ResumeAnalyseRequestSerializer, "application/json": ResumeAnalyseRequestSerializer},
        responses={201: RoadmapGraphSerializer, **_GENERATION_ERRORS},
    )
    def post(self, request) -> Response:
        serializer = ResumeAnalyseRequestSerializer(
            data=request.data,
            context={"max_upload_bytes": get_roadmap_settings().RESUME_MAX_UPLOAD_BYTES},
        )
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        resume_file = data.get("resume")
        if resume_file is not None:
            resume_text = dependencies.get_pdf_extractor().extract_text(resume_file.read())
        else:
            resume_text = data["resume_text"]

        graph = dependencies.get_roadmap_service().generate_from_resume(
            self.owner_id(request),
            data["domain"],
            resume_text,
            data["verified_skills"],
        )
        return _graph_response(graph, status.HTTP_201_CREATED)


class RepositoryDecodeAPIView(RoadmapAPIView):
    """GitHub 저장소의 기술 스택을 이해하기 위한 로드맵을 생성합니다."""

    @extend_schema(
        summary="저장소 기반 로드맵 생성",
        request=RepositoryDecodeRequestSerializer,
        responses={
            201: RoadmapGraphSerializer,
            400: OpenApiResponse(ErrorSerializer, description="GitHub 저장소 URL 형식 오류"),
            404: OpenApiResponse(ErrorSerializer, description="지원하는 매니페스트 없음"),
            **_GENERATION_ERRORS,
        },
    )
    def post(self, request) -> Response:
        serializer = RepositoryDecodeRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        graph = dependencies.get_roadmap_service().generate_from_repository_url(
            self.owner_id(request),
            serializer.validated_data["repo_url"],
        )
        return _graph_response(graph, status.HTTP_201_CREATED)


# =============================================================================
# 로드맵 조회
# =============================================================================

class RoadmapListAPIView(RoadmapAPIView):
    @extend_schema(summary="내 로드맵 목록", responses={200: RoadmapSummarySerializer(many=True)})
    def get(self, request) -> Response:
        """
        @param {Request} request - DRF 요청 객체.
        @returns {Response} 생성 시각 내림차순 요약 목록.
        """
        summaries = dependencies.get_roadmap_service().list_roadmaps(self.owner_id(request))
        payload = [_summary_payload(summary) for summary in summaries]
        return _serialize(RoadmapSummarySerializer, payload, many=True)


class LatestRoadmapAPIView(RoadmapAPIView):
    @extend_schema(
        summary="가장 최근 로드맵",
        responses={200: RoadmapGraphSerializer, 404: OpenApiResponse(ErrorSerializer)},
    )
    def get(self, request) -> Response:
        graph = dependencies.get_roadmap_service().get_latest_roadmap(self.owner_id(request))
        return _graph_response(graph)


class RoadmapDetailAPIView(RoadmapAPIView):
    @extend_schema(
        summary="로드맵 단건 조회",
        responses={200: RoadmapGraphSerializer, 404: OpenApiResponse(ErrorSerializer)},
    )
    def get(self, request, roadmap_id: str) -> Response:
        graph = dependencies.get_roadmap_service().get_roadmap(self.owner_id(request), roadmap_id)
        return _graph_response(graph)


# =============================================================================
# 진행 상태
# =============================================================================

class NodeStatusUpdateAPIView(RoadmapAPIView):
    """노드 상태를 바꾸고 직접 후속 노드를 해제합니다."""

    @extend_schema(
        summary="노드 상태 변경",
        request=NodeStatusUpdateRequestSerializer,
        responses={
            200: RoadmapGraphSerializer,
            400: OpenApiResponse(ErrorSerializer, description="지원하지 않는 상태"),
            404: OpenApiResponse(ErrorSerializer, description="로드맵/노드 없음"),
            409: OpenApiResponse(ErrorSerializer, description="완료 노드 되돌리기 또는 동시 수정"),
        },
    )
    def put(self, request) -> Response:
        serializer = NodeStatusUpdateRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        graph = dependencies.get_roadmap_service().update_node_status(
            self.owner_id(request),
            data["roadmap_id"],
            data["node_id"],
            data["status"],
        )
        return _graph_response(graph)


class VerifyNodeAPIView(RoadmapAPIView):
    """과제 저장소가 존재하면 노드를 완료 처리합니다."""

    @extend_schema(
        summary="프로젝트 저장소로 노드 완료 검증",
        request=VerifyNodeRequestSerializer,
        responses={
            200: RoadmapGraphSerializer,
            404: OpenApiResponse(ErrorSerializer, description="로드맵/노드 없음"),
            422: OpenApiResponse(ErrorSerializer, description="저장소 확인 실패"),
        },
    )
    def post(self, request) -> Response:
        serializer = VerifyNodeRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        graph = dependencies.get_roadmap_service().verify_node_by_url(
            self.owner_id(request),
            data["roadmap_id"],
            data["node_id"],
            data["github_repo_url"],
        )
        return _graph_response(graph)


# =============================================================================
# 스킬 / 퀴즈
# =============================================================================

class GithubSkillsAPIView(RoadmapAPIView):
    @extend_schema(
        summary="GitHub 언어로 검증 스킬 수집",
        request=GithubSkillsRequestSerializer,
        responses={200: GithubSkillsSerializer, 502: OpenApiResponse(ErrorSerializer)},
    )
    def post(self, request) -> Response:
        serializer = GithubSkillsRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        username = serializer.validated_data["github_username"]
        skills = dependencies.get_roadmap_service().sync_github_skills(username)
        return _serialize(GithubSkillsSerializer, {"github_username": username, "verified_skills": skills})


class NextQuestionAPIView(RoadmapAPIView):
    """직전 답의 정오에 따라 난이도를 조절한 다음 문항을 돌려줍니다."""

    @extend_schema(
        summary="적응형 퀴즈 다음 문항",
        request=NextQuestionRequestSerializer,
        responses={200: AssessmentQuestionSerializer, 204: None},
    )
    def post(self, request) -> Response:
        serializer = NextQuestionRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        answered = data["answered_question_ids"]
        difficulty = pick_next_difficulty(data["current_difficulty"], data["previous_was_correct"], len(answered))
        question = dependencies.get_question_picker().next_question(data["domain"], difficulty, answered)
        if question is None:
            return Response(status=status.HTTP_204_NO_CONTENT)
        payload = {
            "id": question.question_id,
            "domain": question.domain,
            "question": question.question,
            "options": question.options,
            "difficulty": question.difficulty,
            "fallback": question.difficulty != difficulty,
        }
        return _serialize(AssessmentQuestionSerializer, payload)


# =============================================================================
# 헬스체크 API
# =============================================================================

class HealthCheckAPIView(APIView):
    """
    API 헬스체크 엔드포인트.

    서버 상태와 생성 클라이언트 사용 가능 여부를 확인합니다.
    """

    authentication_classes = []
    permission_classes = [AllowAny]

    @extend_schema(summary="헬스체크", responses={200: HealthCheckSerializer})
    def get(self, request) -> Response:
        settings = get_roadmap_settings()
        payload = {
            "status": "ok",
            "version": "1.0.0",
            "services": {
                "gemini": dependencies.get_generation_client().available(),
                "github": dependencies.get_github_client().available(),
                "store_backend": settings.ROADMAP_STORE_BACKEND,
            },
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        return _serialize(HealthCheckSerializer, payload)


def _serialize(serializer_class, payload, many: bool = False, status_code: int = status.HTTP_200_OK) -> Response:
    """
    @param serializer_class 사용할 DRF Serializer 클래스.
    @param payload 응답 데이터.
    @param many 리스트 여부.
    @param status_code HTTP 상태 코드.
    @returns 직렬화된 DRF Response.
    """
    serializer = serializer_class(payload, many=many)
    return Response(serializer.data, status=status_code)


def _graph_response(graph: RoadmapGraph, status_code: int = status.HTTP_200_OK) -> Response:
    return _serialize(RoadmapGraphSerializer, graph.to_dict(), status_code=status_code)


def _summary_payload(summary: RoadmapSummary) -> Dict[str, Any]:
    return {
        "id": summary.roadmap_id,
        "domain_label": summary.domain_label,
        "kind": summary.kind.value,
        "created_at": summary.created_at.isoformat(),
        "node_count": summary.node_count,
        "completed_count": summary.completed_count,
        "progress": summary.progress,
        "status_counts": summary.status_counts,
    }
