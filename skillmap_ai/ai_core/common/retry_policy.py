from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, TypeVar

from tenacity import (
    Retrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from skillmap_ai.ai_core.common.exceptions import ServiceUnavailable

logger = logging.getLogger(__name__)

T = TypeVar("T")


def is_service_unavailable(exc: BaseException) -> bool:
    """
    일시적 사용 불가(503) 계열 오류인지 판별합니다.

    google-genai의 APIError는 `code`, 일반 HTTP 오류는 `status`/`status_code`에
    상태 코드를 담습니다. 그 외 오류는 재시도 대상이 아닙니다.

    @param {BaseException} exc - 발생한 예외.
    @returns {bool} 재시도 대상이면 True.
    """
    if isinstance(exc, ServiceUnavailable):
        return True
    for attr in ("code", "status", "status_code"):
        if getattr(exc, attr, None) == 503:
            return True
    return False


@dataclass(frozen=True)
class RetryPolicy:
    """
    지수 백오프 재시도 정책.

    첫 재시도 전 `base_delay`초를 기다리고 이후 매 시도마다 두 배로 늘립니다.
    `is_retryable`이 False를 돌려주는 오류는 즉시 다시 던집니다.

    Example:
        >>> policy = RetryPolicy(max_attempts=3, base_delay=1.0)
        >>> policy.call(client_call, prompt)
    """

    max_attempts: int = 3
    base_delay: float = 1.0
    is_retryable: Callable[[BaseException], bool] = is_service_unavailable
    sleep: Callable[[float], None] = field(default=time.sleep, compare=False)

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts는 1 이상이어야 합니다.")
        if self.base_delay < 0:
            raise ValueError("base_delay는 0 이상이어야 합니다.")

    def delay_for(self, attempt_number: int) -> float:
        """
        @param {int} attempt_number - 실패한 시도 번호 (1부터).
        @returns {float} 다음 시도 전 대기 시간(초).
        """
        return self.base_delay * (2 ** (attempt_number - 1))

    def call(self, func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        """
        정책에 따라 함수를 호출합니다. 마지막 오류는 원래 타입 그대로 전파됩니다.

        @param {Callable} func - 호출할 함수.
        @returns 함수 반환값.
        """
        retrying = Retrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=self.base_delay, exp_base=2),
            retry=retry_if_exception(self.is_retryable),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            sleep=self.sleep,
            reraise=True,
        )
        return retrying(func, *args, **kwargs)
