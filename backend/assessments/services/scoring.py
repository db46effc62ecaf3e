"""
Scoring of one attempt against its test.

Matching is exact-set equality between the selected and correct option indices,
so multi-select questions never earn partial credit. Scores are clamped at zero
and stored unrounded.
"""

import math
from dataclasses import dataclass
from typing import Iterable, List, Mapping, Optional, Sequence

CORRECT = 'correct'
INCORRECT = 'incorrect'
UNANSWERED = 'unanswered'


@dataclass
class ScoreResult:
    correct: int
    incorrect: int
    unanswered: int
    score: float

    @property
    def total(self) -> int:
        return self.correct + self.incorrect + self.unanswered


def normalize_selection(indices: Iterable[int]) -> List[int]:
    """Sorted, de-duplicated option indices."""
    return sorted({int(i) for i in indices})


def classify_answer(selected: Optional[Sequence[int]], correct_options: Sequence[int]) -> str:
    """Return CORRECT, INCORRECT or UNANSWERED for one question."""
    if not selected:
        return UNANSWERED
    if set(selected) == set(correct_options):
        return CORRECT
    return INCORRECT


def marks_per_question(total_marks: float, question_count: int) -> float:
    if question_count <= 0:
        return 0.0
    return total_marks / question_count


def compute_score(correct: int, incorrect: int, per_question: float, negative_marking: float) -> float:
    return max(0.0, correct * per_question - incorrect * negative_marking)


def score_answers(
    question_ids: Sequence[int],
    questions_by_id: Mapping[int, object],
    answers_by_question: Mapping[int, Sequence[int]],
    total_marks: float,
    negative_marking: float,
) -> ScoreResult:
    """
    Score an attempt by walking the test's question list in order.

    Questions that no longer exist in the catalog are skipped. Answers for
    question ids outside the test are ignored.
    """
    correct = incorrect = unanswered = 0

    for question_id in question_ids:
        question = questions_by_id.get(int(question_id))
        if question is None:
            continue

        outcome = classify_answer(answers_by_question.get(int(question_id)), question.correct_options)
        if outcome == CORRECT:
            correct += 1
        elif outcome == INCORRECT:
            incorrect += 1
        else:
            unanswered += 1

    per_question = marks_per_question(total_marks, len(question_ids))
    return ScoreResult(
        correct=correct,
        incorrect=incorrect,
        unanswered=unanswered,
        score=compute_score(correct, incorrect, per_question, negative_marking),
    )


def accuracy_percent(correct: int, incorrect: int, unanswered: int) -> float:
    total = correct + incorrect + unanswered
    return (correct / total) * 100 if total > 0 else 0.0


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up, for display percentages."""
    return int(math.floor(value + 0.5))
