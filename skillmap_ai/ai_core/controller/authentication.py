from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from drf_spectacular.extensions import OpenApiAuthenticationExtension
from rest_framework.authentication import BaseAuthentication

USER_ID_HEADER = "X-User-Id"


@dataclass(frozen=True)
class GatewayUser:
    """
    업스트림 인증 게이트웨이가 넘겨준 불투명 사용자 ID.

    DRF의 IsAuthenticated가 요구하는 is_authenticated만 제공합니다.
    """

    user_id: str

    @property
    def is_authenticated(self) -> bool:
        return True

    def __str__(self) -> str:
        return self.user_id


class HeaderUserAuthentication(BaseAuthentication):
    """`X-User-Id` 헤더로 사용자를 식별합니다. 헤더가 없으면 익명으로 둡니다."""

    def authenticate(self, request) -> Optional[Tuple[GatewayUser, None]]:
        """
        @param {Request} request - DRF 요청 객체.
        @returns {Optional[Tuple[GatewayUser, None]]} 헤더가 있으면 (사용자, None).
        """
        user_id = (request.headers.get(USER_ID_HEADER) or "").strip()
        if not user_id:
            return None
        return GatewayUser(user_id=user_id), None

    def authenticate_header(self, request) -> str:
        # 401 응답의 WWW-Authenticate 값
        return USER_ID_HEADER


class HeaderUserAuthenticationScheme(OpenApiAuthenticationExtension):
    """OpenAPI 문서에 헤더 인증 방식을 노출합니다."""

    target_class = "skillmap_ai.ai_core.controller.authentication.HeaderUserAuthentication"
    name = "UserIdHeader"

    def get_security_definition(self, auto_schema):
        return {"type": "apiKey", "in": "header", "name": USER_ID_HEADER}
