from __future__ import annotations

from typing import Iterable, List, Optional

from skillmap_ai.ai_core.domain.assessment_question import AssessmentQuestion

REACT_DOMAIN = "frontend_react"

DEFAULT_QUESTIONS: List[AssessmentQuestion] = [
    AssessmentQuestion(
        question_id="react-1-state",
        domain=REACT_DOMAIN,
        question="What is the primary purpose of `useState` in React?",
        options=[
            "To manage local component state",
            "To fetch data from an API",
            "To route to different pages",
            "To memorize heavy calculations",
        ],
        correct_answer="To manage local component state",
        difficulty=1,
    ),
    AssessmentQuestion(
        question_id="react-1-jsx",
        domain=REACT_DOMAIN,
        question="What does JSX stand for?",
        options=["JavaScript XML", "Java Syntax Extension", "JSON Xchange Schema", "JavaScript Xhtml"],
        correct_answer="JavaScript XML",
        difficulty=1,
    ),
    AssessmentQuestion(
        question_id="react-2-effect-deps",
        domain=REACT_DOMAIN,
        question="What is the dependency array in `useEffect` used for?",
        options=[
            "To control when the effect re-runs",
            "To list the libraries imported",
            "To store the API response",
            "To declare state variables",
        ],
        correct_answer="To control when the effect re-runs",
        difficulty=2,
    ),
    AssessmentQuestion(
        question_id="react-2-context",
        domain=REACT_DOMAIN,
        question="How can you pass data deep down the component tree without prop drilling?",
        options=["Context API", "useRef", "useState", "Portals"],
        correct_answer="Context API",
        difficulty=2,
    ),
    AssessmentQuestion(
        question_id="react-3-concurrent",
        domain=REACT_DOMAIN,
        question="In React 18, what feature allows rendering to be interrupted to keep the UI responsive?",
        options=["Concurrent rendering", "Strict mode", "Server components", "Error boundaries"],
        correct_answer="Concurrent rendering",
        difficulty=3,
    ),
    AssessmentQuestion(
        question_id="react-3-keys",
        domain=REACT_DOMAIN,
        question="Why does React warn when list items use the array index as `key` after reordering?",
        options=[
            "Component state can attach to the wrong item",
            "Indexes are not serializable",
            "Keys must be strings longer than 8 characters",
            "React cannot render arrays without ids",
        ],
        correct_answer="Component state can attach to the wrong item",
        difficulty=3,
    ),
]


class InMemoryQuestionBank:
    """도메인별 퀴즈 문항 저장소."""

    def __init__(self, questions: Optional[Iterable[AssessmentQuestion]] = None) -> None:
        """
        @param questions 초기 문항. None이면 기본 문항.
        @returns None
        """
        self._questions: List[AssessmentQuestion] = list(DEFAULT_QUESTIONS if questions is None else questions)

    def find(self, domain: str, difficulty: Optional[int] = None) -> List[AssessmentQuestion]:
        """
        @param domain 문항 도메인.
        @param difficulty 난이도 필터 (None이면 전체).
        @returns 조건에 맞는 문항 리스트.
        """
        return [
            question
            for question in self._questions
            if question.domain == domain and (difficulty is None or question.difficulty == difficulty)
        ]
