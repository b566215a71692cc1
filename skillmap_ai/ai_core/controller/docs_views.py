from __future__ import annotations

from drf_spectacular.utils import OpenApiTypes, extend_schema
from drf_spectacular.views import SpectacularAPIView, SpectacularRedocView, SpectacularSwaggerView
from rest_framework.permissions import AllowAny


class PublicDocsMixin:
    """문서 화면은 게이트웨이 사용자 헤더 없이도 열 수 있어야 합니다."""

    authentication_classes = []
    permission_classes = [AllowAny]


class RoadmapSchemaView(PublicDocsMixin, SpectacularAPIView):
    """로드맵 API의 OpenAPI 스키마 (기본 YAML, `?format=json`이면 JSON)."""


class SwaggerUIView(PublicDocsMixin, SpectacularSwaggerView):
    @extend_schema(
        summary="Swagger UI",
        description="X-User-Id 헤더를 Authorize에 입력하면 로드맵 API를 바로 호출해 볼 수 있습니다.",
        responses={200: OpenApiTypes.STR},
    )
    def get(self, request, *args, **kwargs):
        """
        @param {Request} request - DRF 요청 객체.
        @returns {Response} Swagger UI HTML 응답.
        """
        return super().get(request, *args, **kwargs)


class RedocUIView(PublicDocsMixin, SpectacularRedocView):
    @extend_schema(summary="Redoc UI", responses={200: OpenApiTypes.STR})
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)
