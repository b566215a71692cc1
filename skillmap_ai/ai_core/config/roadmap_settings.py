"""
로드맵 생성/진행 관련 환경변수 스키마.

Django 설정(`skillmap_ai.settings`)과 분리되어 있어 서비스 계층과 테스트에서
Django 없이도 로드할 수 있습니다. Django 설정 모듈은 이 객체를 그대로 노출합니다.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parent.parent.parent.parent


class RoadmapSettings(BaseSettings):
    """로드맵 파이프라인 설정."""

    # LLM
    GEMINI_API_KEY: Optional[SecretStr] = None
    AI_DISABLE_LLM: bool = False
    AI_DISABLE_EXTERNAL: bool = False
    AI_DEFAULT_MODEL: str = "gemini-2.5-flash"
    AI_ANALYSIS_MODEL: str = "gemini-2.5-pro"
    AI_RETRY_MAX_ATTEMPTS: int = Field(default=3, ge=1, description="503 응답 시 최대 시도 횟수")
    AI_RETRY_BASE_DELAY_MS: int = Field(default=1000, ge=0, description="지수 백오프 시작 지연(ms)")

    # 생성 파이프라인
    ROADMAP_ENRICHMENT_BATCH_SIZE: int = Field(default=5, ge=1)
    ROADMAP_RESUME_MAX_CHARS: int = Field(default=10_000, ge=1)
    ROADMAP_LONG_PROMPT_CHARS: int = Field(default=6_000, ge=1, description="분석 모델로 전환할 프롬프트 길이")

    # 진행 엔진
    ROADMAP_ALLOW_REOPEN: bool = False

    # 저장소
    ROADMAP_STORE_BACKEND: Literal["django", "memory"] = "django"

    # GitHub
    GITHUB_TOKEN: Optional[SecretStr] = None
    GITHUB_API_URL: str = "https://api.github.com"
    GITHUB_TIMEOUT: int = 10

    # 업로드
    RESUME_MAX_UPLOAD_BYTES: int = 5 * 1024 * 1024

    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
    )

    @property
    def retry_base_delay_seconds(self) -> float:
        return self.AI_RETRY_BASE_DELAY_MS / 1000.0

    @property
    def llm_disabled(self) -> bool:
        return self.AI_DISABLE_LLM or self.AI_DISABLE_EXTERNAL

    def secret(self, name: str) -> str:
        """
        @param {str} name - SecretStr 필드 이름.
        @returns {str} 비밀 값 또는 빈 문자열.
        """
        value = getattr(self, name)
        return value.get_secret_value() if value else ""


@lru_cache(maxsize=1)
def get_roadmap_settings() -> RoadmapSettings:
    """
    프로세스 단위로 한 번만 로드된 설정을 반환합니다.

    @returns {RoadmapSettings} 설정 객체.
    """
    return RoadmapSettings()
