# =============================================================================
# Google Gemini API 클라이언트
# =============================================================================
# 로드맵 생성 파이프라인이 사용하는 텍스트 생성 협력자입니다.
# `call(prompt, model) -> str` 하나만 노출하며, 응답 해석(JSON 파싱)은
# 파이프라인의 ResponseParser가 담당합니다.
#
# 재시도 규칙:
#   - 503 (service unavailable) 계열 오류만 지수 백오프로 재시도
#   - 인증 실패, 잘못된 요청, 한도 초과 등은 즉시 실패
#   - 최종 실패는 GenerationFailure로 감싸서 전파
#
# 환경 변수:
#   - GEMINI_API_KEY: Google AI Studio에서 발급받은 API 키
#   - AI_DISABLE_LLM / AI_DISABLE_EXTERNAL: "true"면 호출 비활성화
#
# 사용 예시:
#   client = GeminiClient(api_key="...", retry_policy=RetryPolicy(max_attempts=3))
#   raw_text = client.call(prompt, "gemini-2.5-flash")
# =============================================================================

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from google import genai
from google.genai import errors as genai_errors
from google.genai import types as genai_types

from skillmap_ai.ai_core.common.exceptions import GenerationFailure, ServiceUnavailable
from skillmap_ai.ai_core.common.retry_policy import RetryPolicy

logger = logging.getLogger(__name__)


class GeminiModel(str, Enum):
    """
    사용 가능한 Gemini 모델 목록.

    - FLASH_25: 빠른 응답, 도메인 기반 로드맵 생성 기본값
    - PRO_25: 이력서/저장소 분석처럼 긴 입력의 추론
    """

    FLASH_25 = "gemini-2.5-flash"
    PRO_25 = "gemini-2.5-pro"
    FLASH_20 = "gemini-2.0-flash"


@dataclass
class GenerationConfig:
    """
    텍스트 생성 설정.

    Attributes:
        temperature (float):
            응답의 무작위성. 구조 생성은 결정적인 출력이 유리하므로 낮게 둡니다.
        max_output_tokens (int):
            최대 출력 토큰 수.
        response_mime_type (str):
            "application/json"이면 모델에 JSON 전용 출력을 요청합니다.
    """

    temperature: float = 0.4
    max_output_tokens: int = 8192
    response_mime_type: str = "application/json"
    stop_sequences: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """설정을 GenerateContentConfig 인자 딕셔너리로 변환합니다."""
        config: Dict[str, Any] = {
            "temperature": self.temperature,
            "max_output_tokens": self.max_output_tokens,
        }
        if self.response_mime_type:
            config["response_mime_type"] = self.response_mime_type
        if self.stop_sequences:
            config["stop_sequences"] = self.stop_sequences
        return config


class GeminiClient:
    """
    Google Gemini API 클라이언트.

    Attributes:
        model_name (str): 호출 시 모델을 지정하지 않았을 때 사용할 기본 모델.
        is_available (bool): API 키가 있고 비활성화되지 않은 경우 True.

    Example:
        >>> client = GeminiClient(api_key="...")
        >>> text = client.call("Return JSON only: {...}", GeminiModel.FLASH_25.value)
    """

    DEFAULT_MODEL = GeminiModel.FLASH_25

    def __init__(
        self,
        api_key: str = "",
        model: str = DEFAULT_MODEL.value,
        retry_policy: Optional[RetryPolicy] = None,
        config: Optional[GenerationConfig] = None,
        disabled: bool = False,
        sdk_client: Optional[Any] = None,
    ) -> None:
        """
        GeminiClient 인스턴스를 초기화합니다.

        Args:
            api_key:
                Gemini API 키.
            model:
                기본 모델 이름.
            retry_policy:
                503 재시도 정책. None이면 3회/1초 기본 정책.
            config:
                생성 설정. None이면 JSON 출력 기본 설정.
            disabled:
                True면 모든 호출이 GenerationFailure로 즉시 실패합니다.
            sdk_client:
                미리 구성된 `genai.Client` (테스트에서 대역 주입용).
        """
        self._model = model
        self._retry_policy = retry_policy or RetryPolicy()
        self._config = config or GenerationConfig()
        self._disabled = disabled

        self._client: Optional[Any] = sdk_client
        if self._client is None and api_key and not disabled:
            self._client = genai.Client(api_key=api_key)
            logger.info("Gemini 클라이언트 초기화 성공", extra={"model": self._model})
        elif disabled:
            logger.info("Gemini 클라이언트가 환경변수로 비활성화됨")

    @property
    def model_name(self) -> str:
        return self._model

    @property
    def is_available(self) -> bool:
        return self._client is not None and not self._disabled

    def available(self) -> bool:
        """is_available 프로퍼티의 메서드 형태."""
        return self.is_available

    # -------------------------------------------------------------------------
    # 생성
    # -------------------------------------------------------------------------

    def call(self, prompt: str, model: Optional[str] = None) -> str:
        """
        프롬프트를 보내고 원본 텍스트 응답을 반환합니다.

        Args:
            prompt: 생성 요청 프롬프트.
            model: 사용할 모델. None이면 기본 모델.

        Returns:
            str: 모델이 돌려준 원본 텍스트 (비어 있을 수 있음).

        Raises:
            GenerationFailure: 클라이언트 비활성/미구성, 재시도 소진, 재시도 불가 오류.
        """
        model_name = model or self._model
        if not self.is_available:
            raise GenerationFailure("LLM 클라이언트를 사용할 수 없습니다 (API 키 미설정 또는 비활성화).")

        attempts = 0

        def _attempt() -> str:
            nonlocal attempts
            attempts += 1
            return self._execute_generation(prompt, model_name)

        start_time = time.time()
        try:
            text = self._retry_policy.call(_attempt)
        except Exception as exc:
            transient = self._retry_policy.is_retryable(exc)
            logger.error(
                "텍스트 생성 실패",
                extra={"model": model_name, "attempts": attempts, "transient": transient, "error": str(exc)},
            )
            raise GenerationFailure(
                f"생성 호출 실패 ({attempts}회 시도): {exc}",
                attempts=attempts,
                transient=transient,
            ) from exc

        logger.debug(
            "텍스트 생성 완료",
            extra={
                "model": model_name,
                "attempts": attempts,
                "elapsed_seconds": round(time.time() - start_time, 2),
                "response_length": len(text),
            },
        )
        return text

    def _execute_generation(self, prompt: str, model: str) -> str:
        """
        실제 API 호출을 한 번 수행합니다.

        503 응답은 ServiceUnavailable로 바꿔 재시도 정책이 인식하도록 합니다.
        """
        try:
            response = self._client.models.generate_content(
                model=model,
                contents=prompt,
                config=genai_types.GenerateContentConfig(**self._config.to_dict()),
            )
        except genai_errors.APIError as exc:
            if exc.code == 503:
                raise ServiceUnavailable(str(exc)) from exc
            raise
        return getattr(response, "text", "") or ""

    def health_check(self) -> Dict[str, Any]:
        """
        클라이언트 상태를 반환합니다.

        Returns:
            Dict[str, Any]: available, model, disabled, max_attempts 정보.
        """
        return {
            "available": self.is_available,
            "model": self._model,
            "disabled": self._disabled,
            "max_attempts": self._retry_policy.max_attempts,
        }

    def __repr__(self) -> str:
        return f"GeminiClient(model={self._model!r}, available={self.is_available})"
