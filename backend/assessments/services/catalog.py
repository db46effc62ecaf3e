"""Read access to tests and questions."""

from typing import Dict, Iterable

from ..errors import NotFoundError
from ..models import Question, Test


def get_test(test_id) -> Test:
    try:
        return Test.objects.get(id=test_id)
    except (Test.DoesNotExist, ValueError, TypeError):
        raise NotFoundError(f"Test {test_id} not found", resource_type="test")


def load_questions(question_ids: Iterable) -> Dict[int, Question]:
    """Map question id -> Question for the ids that still exist."""
    ids = {int(qid) for qid in question_ids}
    if not ids:
        return {}
    return Question.objects.in_bulk(list(ids))


def questions_for_tests(tests: Iterable[Test]) -> Dict[int, Question]:
    """One query for the union of several tests' question lists."""
    ids = set()
    for test in tests:
        ids.update(int(qid) for qid in (test.question_ids or []))
    return load_questions(ids)
