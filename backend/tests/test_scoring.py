"""
Unit tests for answer classification and score computation
"""
from types import SimpleNamespace

import pytest

from assessments.services.scoring import (
    CORRECT, INCORRECT, UNANSWERED, accuracy_percent, classify_answer,
    compute_score, marks_per_question, normalize_selection, round_half_up, score_answers,
)


def _questions(correct_sets):
    return {
        index + 1: SimpleNamespace(id=index + 1, correct_options=correct)
        for index, correct in enumerate(correct_sets)
    }


@pytest.mark.unit
class TestClassifyAnswer:

    def test_exact_set_is_correct(self):
        assert classify_answer([0], [0]) == CORRECT

    def test_order_does_not_matter(self):
        assert classify_answer([2, 0], [0, 2]) == CORRECT

    def test_subset_is_incorrect(self):
        """No partial credit on multi-select"""
        assert classify_answer([0], [0, 2]) == INCORRECT

    def test_superset_is_incorrect(self):
        assert classify_answer([0, 1, 2], [0, 2]) == INCORRECT

    def test_empty_or_missing_is_unanswered(self):
        assert classify_answer([], [1]) == UNANSWERED
        assert classify_answer(None, [1]) == UNANSWERED


@pytest.mark.unit
class TestScoreAnswers:

    def test_seven_correct_two_wrong_one_blank(self):
        """100 marks over 10 questions with 0.5 negative: 7*10 - 2*0.5 = 69"""
        # Arrange
        questions = _questions([[0]] * 10)
        answers = {qid: [0] for qid in range(1, 8)}
        answers[8] = [1]
        answers[9] = [3]

        # Act
        result = score_answers(list(range(1, 11)), questions, answers, total_marks=100, negative_marking=0.5)

        # Assert
        assert (result.correct, result.incorrect, result.unanswered) == (7, 2, 1)
        assert result.score == 69
        assert result.total == 10

    def test_score_clamped_at_zero(self):
        questions = _questions([[0]] * 4)
        answers = {1: [1], 2: [1], 3: [1], 4: [1]}

        result = score_answers([1, 2, 3, 4], questions, answers, total_marks=4, negative_marking=1)

        assert result.incorrect == 4
        assert result.score == 0

    def test_fractional_marks_are_not_rounded(self):
        questions = _questions([[0]] * 47)
        answers = {1: [0]}

        result = score_answers(list(range(1, 48)), questions, answers, total_marks=150, negative_marking=0)

        assert result.score == pytest.approx(150 / 47)

    def test_missing_catalog_question_is_skipped(self):
        questions = _questions([[0], [1]])
        answers = {1: [0], 2: [1], 99: [0]}

        result = score_answers([1, 2, 3], questions, answers, total_marks=30, negative_marking=0)

        assert (result.correct, result.incorrect, result.unanswered) == (2, 0, 0)
        assert result.score == 20

    def test_answers_outside_test_ignored(self):
        questions = _questions([[0], [1]])

        result = score_answers([1], questions, {2: [1]}, total_marks=10, negative_marking=1)

        assert result.unanswered == 1
        assert result.score == 0


@pytest.mark.unit
class TestScoringHelpers:

    def test_marks_per_question_without_questions(self):
        assert marks_per_question(100, 0) == 0

    def test_compute_score_never_negative(self):
        assert compute_score(0, 3, 10, 0.5) == 0
        assert compute_score(1, 1, 10, 0.5) == 9.5

    def test_normalize_selection_sorts_and_dedupes(self):
        assert normalize_selection([3, 1, 3, 0]) == [0, 1, 3]

    def test_accuracy_percent(self):
        assert accuracy_percent(3, 1, 0) == 75
        assert accuracy_percent(0, 0, 0) == 0

    def test_round_half_up(self):
        assert round_half_up(62.5) == 63
        assert round_half_up(2.5) == 3
        assert round_half_up(66.66) == 67
        assert round_half_up(33.3) == 33
