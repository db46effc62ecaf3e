"""
Attempt selection pipeline used by every aggregate.

1. submitted attempts only
2. whose test has its answer key published
3. collapsed to the canonical (first-started) attempt per user and test
"""

from typing import List

from django.db.models import QuerySet

from ..models import Attempt
from .dedup import keep_first_attempts


def published_submitted_attempts(**filters) -> QuerySet:
    return (
        Attempt.objects
        .filter(status=Attempt.STATUS_SUBMITTED, test__answer_key_published=True, **filters)
        .select_related('test', 'user')
        .order_by('started_at', 'id')
    )


def canonical_attempts(queryset: QuerySet = None, **filters) -> List[Attempt]:
    """Steps 1-3 applied to `queryset` (or a fresh one built from `filters`)."""
    if queryset is None:
        queryset = published_submitted_attempts(**filters)
    return keep_first_attempts(queryset)
