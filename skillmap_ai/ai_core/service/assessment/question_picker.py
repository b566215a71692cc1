from __future__ import annotations

import logging
import random
from typing import Iterable, Optional

from skillmap_ai.ai_core.domain.assessment_question import AssessmentQuestion
from skillmap_ai.ai_core.service.assessment.question_bank import InMemoryQuestionBank

logger = logging.getLogger(__name__)

MIN_DIFFICULTY = 1
MEDIUM_DIFFICULTY = 2
MAX_DIFFICULTY = 3


def pick_next_difficulty(current: int, was_correct: bool, answered_count: int) -> int:
    """
    다음 문항 난이도를 계산합니다.

    첫 문항은 항상 보통(2). 정답이면 한 단계 올리고, 오답이면 한 단계 내리며
    1~3 범위로 고정합니다.

    @param {int} current - 현재 난이도.
    @param {bool} was_correct - 직전 답의 정답 여부.
    @param {int} answered_count - 지금까지 답한 문항 수.
    @returns {int} 다음 난이도.
    """
    if answered_count <= 0:
        return MEDIUM_DIFFICULTY
    if was_correct:
        return min(MAX_DIFFICULTY, current + 1)
    return max(MIN_DIFFICULTY, current - 1)


class QuestionPicker:
    """이미 푼 문항을 제외하고 목표 난이도의 문항을 무작위로 고릅니다."""

    def __init__(self, bank: Optional[InMemoryQuestionBank] = None, rng: Optional[random.Random] = None) -> None:
        self._bank = bank or InMemoryQuestionBank()
        self._rng = rng or random.Random()

    def next_question(self, domain: str, difficulty: int, exclude_ids: Iterable[str] = ()) -> Optional[AssessmentQuestion]:
        """
        @param {str} domain - 문항 도메인.
        @param {int} difficulty - 목표 난이도.
        @param {Iterable[str]} exclude_ids - 이미 답한 문항 ID.
        @returns {Optional[AssessmentQuestion]} 목표 난이도 문항, 없으면 같은 도메인의 아무 문항, 그것도 없으면 None.
        """
        excluded = set(exclude_ids)
        candidates = [q for q in self._bank.find(domain, difficulty) if q.question_id not in excluded]
        if candidates:
            return self._rng.choice(candidates)

        fallback = [q for q in self._bank.find(domain) if q.question_id not in excluded]
        if fallback:
            logger.info("대체 난이도 문항 선택", extra={"domain": domain, "difficulty": difficulty})
            return self._rng.choice(fallback)
        return None
