from __future__ import annotations

from typing import Protocol


class GenerationClient(Protocol):
    """
    외부 텍스트 생성 협력자 인터페이스.

    구현체는 일시적 오류 재시도를 내부에서 처리하고, 최종 실패 시
    GenerationFailure를 던져야 합니다.
    """

    def call(self, prompt: str, model: str) -> str:
        ...
