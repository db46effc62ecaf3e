"""
Canonical-attempt rule shared by every aggregate.

A student may retry a test, but every count, average, rank and badge treats only the
earliest-started attempt per (user, test) as real. All aggregators go through
keep_first_attempts instead of grouping on their own.
"""

from typing import Iterable, List, TypeVar

T = TypeVar('T')


def _field(item, name):
    if isinstance(item, dict):
        return item[name]
    return getattr(item, name)


def keep_first_attempts(attempts: Iterable[T]) -> List[T]:
    """
    Collapse attempts to one per (user_id, test_id), keeping the smallest started_at.

    Works on model instances or dicts. On an exact started_at tie the attempt seen
    first in input order wins. Result order follows the first appearance of each pair.
    """
    first = {}
    for attempt in attempts:
        key = (str(_field(attempt, 'user_id')), str(_field(attempt, 'test_id')))
        existing = first.get(key)
        if existing is None or _field(attempt, 'started_at') < _field(existing, 'started_at'):
            first[key] = attempt
    return list(first.values())
