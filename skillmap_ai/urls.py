from django.urls import path

from skillmap_ai.ai_core.controller.docs_views import RedocUIView, RoadmapSchemaView, SwaggerUIView
from skillmap_ai.ai_core.controller.roadmap_views import (
    GithubSkillsAPIView,
    HealthCheckAPIView,
    LatestRoadmapAPIView,
    NextQuestionAPIView,
    NodeStatusUpdateAPIView,
    RepositoryDecodeAPIView,
    ResumeAnalyseAPIView,
    RoadmapDetailAPIView,
    RoadmapGenerateAPIView,
    RoadmapListAPIView,
    VerifyNodeAPIView,
)

API_PREFIX = "api/v1"

urlpatterns = [
    # OpenAPI 스키마 및 문서
    path(f"{API_PREFIX}/schema/", RoadmapSchemaView.as_view(), name="schema"),
    path(f"{API_PREFIX}/docs/", SwaggerUIView.as_view(url_name="schema"), name="swagger-ui"),
    path(f"{API_PREFIX}/redoc/", RedocUIView.as_view(url_name="schema"), name="redoc"),

    # 헬스체크 API
    path(f"{API_PREFIX}/health/", HealthCheckAPIView.as_view(), name="health-check"),

    # 로드맵 생성 API
    path(f"{API_PREFIX}/roadmap/generate", RoadmapGenerateAPIView.as_view(), name="roadmap-generate"),
    path(f"{API_PREFIX}/resume/analyse", ResumeAnalyseAPIView.as_view(), name="resume-analyse"),
    path(f"{API_PREFIX}/oss/decode", RepositoryDecodeAPIView.as_view(), name="oss-decode"),

    # 로드맵 조회 API (고정 경로를 <roadmap_id>보다 먼저 둠)
    path(f"{API_PREFIX}/roadmap/all", RoadmapListAPIView.as_view(), name="roadmap-list"),
    path(f"{API_PREFIX}/roadmap/view", LatestRoadmapAPIView.as_view(), name="roadmap-latest"),

    # 진행 상태 API
    path(f"{API_PREFIX}/roadmap/update", NodeStatusUpdateAPIView.as_view(), name="roadmap-update"),
    path(f"{API_PREFIX}/roadmap/verify-node", VerifyNodeAPIView.as_view(), name="roadmap-verify-node"),
    path(f"{API_PREFIX}/roadmap/<str:roadmap_id>", RoadmapDetailAPIView.as_view(), name="roadmap-detail"),

    # 스킬 / 퀴즈 API
    path(f"{API_PREFIX}/github/skills", GithubSkillsAPIView.as_view(), name="github-skills"),
    path(f"{API_PREFIX}/questions/next", NextQuestionAPIView.as_view(), name="questions-next"),
]
