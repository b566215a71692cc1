from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict

from skillmap_ai.ai_core.common.exceptions import MalformedResponse

logger = logging.getLogger(__name__)

_LEADING_FENCE_RE = re.compile(r"^```[a-zA-Z]*\s*")
_TRAILING_FENCE_RE = re.compile(r"\s*```$")
_CODE_BLOCK_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)```")
_JSON_OBJECT_RE = re.compile(r"\{.*\}", re.DOTALL)


def strip_code_fence(text: str) -> str:
    """
    앞뒤의 코드 펜스(```json / ```)를 제거합니다.

    @param {str} text - LLM 원본 응답.
    @returns {str} 펜스가 제거된 문자열.
    """
    stripped = text.strip()
    stripped = _LEADING_FENCE_RE.sub("", stripped, count=1)
    stripped = _TRAILING_FENCE_RE.sub("", stripped, count=1)
    return stripped.strip()


def parse_json_object(raw_text: str) -> Dict[str, Any]:
    """
    LLM 응답에서 JSON 객체를 파싱합니다. 그래프 의미 검증은 하지 않습니다.

    여러 단계를 거쳐 추출을 시도합니다:
    1. 앞뒤 코드 펜스를 제거한 전체 텍스트
    2. 본문 중간의 코드 블록
    3. 가장 바깥쪽 `{...}` 구간

    @param {str} raw_text - LLM 원본 응답.
    @returns {Dict[str, Any]} 최상위 JSON 객체.
    @raises MalformedResponse - 비어 있거나 JSON 객체를 찾지 못한 경우.
    """
    if not raw_text or not raw_text.strip():
        raise MalformedResponse("생성 응답이 비어 있습니다.")

    candidates = [strip_code_fence(raw_text)]
    block = _CODE_BLOCK_RE.search(raw_text)
    if block:
        candidates.append(block.group(1).strip())
    span = _JSON_OBJECT_RE.search(raw_text)
    if span:
        candidates.append(span.group(0))

    preview = raw_text[:100]
    for index, candidate in enumerate(candidates):
        try:
            parsed = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(parsed, dict):
            return parsed
        if index == 0:
            # 전체가 유효한 JSON인데 객체가 아니면 안쪽 조각을 뒤지지 않음
            logger.warning("생성 응답의 최상위 값이 객체가 아님", extra={"text_preview": preview})
            raise MalformedResponse("생성 응답의 최상위 값이 JSON 객체가 아닙니다.")

    logger.warning("생성 응답 JSON 파싱 실패", extra={"text_preview": preview})
    raise MalformedResponse("생성 응답을 JSON으로 해석할 수 없습니다.")
