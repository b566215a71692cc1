import random
import unittest

from skillmap_ai.ai_core.domain.assessment_question import AssessmentQuestion
from skillmap_ai.ai_core.service.assessment.question_bank import REACT_DOMAIN, InMemoryQuestionBank
from skillmap_ai.ai_core.service.assessment.question_picker import QuestionPicker, pick_next_difficulty


class PickNextDifficultyTests(unittest.TestCase):
    def test_first_question_is_medium(self) -> None:
        self.assertEqual(pick_next_difficulty(1, False, 0), 2)
        self.assertEqual(pick_next_difficulty(3, True, 0), 2)

    def test_moves_one_step_and_clamps(self) -> None:
        self.assertEqual(pick_next_difficulty(2, True, 1), 3)
        self.assertEqual(pick_next_difficulty(3, True, 2), 3)
        self.assertEqual(pick_next_difficulty(2, False, 1), 1)
        self.assertEqual(pick_next_difficulty(1, False, 2), 1)


class QuestionPickerTests(unittest.TestCase):
    def setUp(self) -> None:
        self.picker = QuestionPicker(rng=random.Random(7))

    def test_picks_target_difficulty(self) -> None:
        for difficulty in (1, 2, 3):
            with self.subTest(difficulty=difficulty):
                question = self.picker.next_question(REACT_DOMAIN, difficulty)
                self.assertEqual(question.difficulty, difficulty)

    def test_excludes_answered_questions(self) -> None:
        question = self.picker.next_question(REACT_DOMAIN, 1, exclude_ids=["react-1-state"])
        self.assertEqual(question.question_id, "react-1-jsx")

    def test_falls_back_to_other_difficulty(self) -> None:
        """
        목표 난이도 문항을 모두 풀었으면 같은 도메인의 다른 문항을 고르는지 검증합니다.

        @returns {None} 테스트만 수행합니다.
        """
        question = self.picker.next_question(REACT_DOMAIN, 3, exclude_ids=["react-3-concurrent", "react-3-keys"])
        self.assertIsNotNone(question)
        self.assertNotEqual(question.difficulty, 3)

    def test_returns_none_when_exhausted(self) -> None:
        bank = InMemoryQuestionBank([AssessmentQuestion(question_id="q1", domain="go", question="?", difficulty=1)])
        picker = QuestionPicker(bank=bank)
        self.assertIsNone(picker.next_question("go", 2, exclude_ids=["q1"]))
        self.assertIsNone(picker.next_question("unknown", 2))


if __name__ == "__main__":
    unittest.main()
