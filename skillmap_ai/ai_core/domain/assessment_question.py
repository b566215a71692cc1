from __future__ import annotations

from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class AssessmentQuestion:
    """적응형 퀴즈 문항. difficulty는 1(쉬움)~3(어려움)."""

    question_id: str
    domain: str
    question: str
    options: List[str] = field(default_factory=list)
    correct_answer: str = ""
    difficulty: int = 2
