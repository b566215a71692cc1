from __future__ import annotations

import logging

from rest_framework import status
from rest_framework.exceptions import APIException, NotAuthenticated
from rest_framework.response import Response
from rest_framework.views import exception_handler

from skillmap_ai.ai_core.common.exceptions import RepositoryLookupError, RoadmapError

logger = logging.getLogger(__name__)


def roadmap_exception_handler(exc, context):
    """
    도메인 예외를 `{"error": code, "message": str}` 응답으로 변환합니다.

    그 외 예외는 DRF 기본 처리기에 맡기고 같은 형태로 감쌉니다.

    @param {Exception} exc - 뷰에서 발생한 예외.
    @param {dict} context - DRF 예외 컨텍스트.
    @returns {Optional[Response]} 응답 (None이면 Django가 500 처리).
    """
    view = context.get("view")
    view_name = type(view).__name__ if view is not None else ""

    if isinstance(exc, RoadmapError):
        log = logger.warning if exc.http_status < 500 else logger.error
        log(
            "요청 처리 실패",
            extra={"view": view_name, "error_code": exc.error_code, "error": exc.message},
        )
        body = {"error": exc.error_code, "message": exc.message}
        details = exc.details()
        if details:
            body["details"] = details
        return Response(body, status=exc.http_status)

    if isinstance(exc, RepositoryLookupError):
        logger.error("저장소 API 호출 실패", extra={"view": view_name, "error": str(exc)})
        return Response(
            {"error": "repository_lookup_failed", "message": str(exc)},
            status=status.HTTP_502_BAD_GATEWAY,
        )

    response = exception_handler(exc, context)
    if response is None:
        return None

    if isinstance(exc, NotAuthenticated):
        response.data = {"error": "authentication_required", "message": str(exc.detail)}
    elif isinstance(exc, APIException):
        code = exc.get_codes() if not isinstance(exc.detail, (dict, list)) else exc.default_code
        response.data = {"error": str(code), "message": _first_message(exc.detail), "details": exc.detail}
    return response


def _first_message(detail) -> str:
    if isinstance(detail, dict):
        for value in detail.values():
            return _first_message(value)
        return ""
    if isinstance(detail, list):
        return _first_message(detail[0]) if detail else ""
    return str(detail)
