"""
Achievement badges detected from a student's attempt history.

Badges are recomputed on every request and never stored. For comeback-king and
streak-master, earned_at is the time of detection rather than the true first
occurrence.
"""

import logging
from collections import OrderedDict
from datetime import timedelta
from typing import Dict, List, Optional

from django.conf import settings
from django.utils import timezone

from ..models import Attempt, UserAccount
from .attempt_filters import canonical_attempts
from .scoring import accuracy_percent

logger = logging.getLogger(__name__)

PERFECTIONIST = 'perfectionist'
SPEED_DEMON = 'speed-demon'
COMEBACK_KING = 'comeback-king'
STREAK_MASTER = 'streak-master'

ACHIEVEMENT_CATALOG = {
    PERFECTIONIST: {
        'name': 'Perfectionist',
        'description': 'Scored full marks on a test',
        'icon': 'Award',
    },
    SPEED_DEMON: {
        'name': 'Speed Demon',
        'description': 'Finished a test in under half the allotted time',
        'icon': 'Rocket',
    },
    COMEBACK_KING: {
        'name': 'Comeback King',
        'description': 'Improved accuracy by 30 points on a retaken test',
        'icon': 'RefreshCcw',
    },
    STREAK_MASTER: {
        'name': 'Streak Master',
        'description': 'Submitted tests on 7 consecutive days',
        'icon': 'Flame',
    },
}


def _setting(name, default):
    return getattr(settings, 'ASSESSMENT_SETTINGS', {}).get(name, default)


def _badge(achievement_id: str, earned_at) -> dict:
    return {'id': achievement_id, **ACHIEVEMENT_CATALOG[achievement_id], 'earned_at': earned_at}


def find_perfect_attempt(attempts: List[Attempt]) -> Optional[Attempt]:
    for attempt in attempts:
        total = attempt.questions_seen
        if total > 0 and attempt.correct == total:
            return attempt
    return None


def find_fast_attempt(attempts: List[Attempt]) -> Optional[Attempt]:
    """First attempt finished in under half the test's duration."""
    for attempt in attempts:
        if attempt.submitted_at is None:
            continue
        elapsed_ms = (attempt.submitted_at - attempt.started_at).total_seconds() * 1000
        if elapsed_ms < 0.5 * attempt.test.duration_ms:
            return attempt
    return None


def has_comeback(attempts: List[Attempt], min_improvement: float) -> bool:
    """
    True if any test taken twice or more shows last-attempt accuracy at least
    `min_improvement` points above first-attempt accuracy. `attempts` must be
    ordered oldest first.
    """
    by_test: Dict[int, List[float]] = OrderedDict()
    for attempt in attempts:
        by_test.setdefault(attempt.test_id, []).append(
            accuracy_percent(attempt.correct, attempt.incorrect, attempt.unanswered)
        )

    for accuracies in by_test.values():
        if len(accuracies) >= 2 and accuracies[-1] - accuracies[0] >= min_improvement:
            return True
    return False


def longest_daily_streak(attempts: List[Attempt]) -> int:
    """Longest run of consecutive local calendar days with at least one submission."""
    days = sorted({
        timezone.localtime(a.submitted_at).date()
        for a in attempts
        if a.submitted_at is not None
    })
    if not days:
        return 0

    longest = current = 1
    for previous, day in zip(days, days[1:]):
        if day - previous == timedelta(days=1):
            current += 1
            longest = max(longest, current)
        else:
            current = 1
    return longest


def get_student_achievements(user: UserAccount) -> List[dict]:
    now = timezone.now()
    streak_days = _setting('STREAK_DAYS', 7)
    achievements = []

    attempts = sorted(canonical_attempts(user=user), key=lambda a: a.started_at)

    perfect = find_perfect_attempt(attempts)
    if perfect is not None:
        achievements.append(_badge(PERFECTIONIST, perfect.submitted_at or perfect.started_at))

    fast = find_fast_attempt(attempts)
    if fast is not None:
        achievements.append(_badge(SPEED_DEMON, fast.submitted_at))

    if has_comeback(attempts, _setting('COMEBACK_MIN_IMPROVEMENT', 30)):
        achievements.append(_badge(COMEBACK_KING, now))

    submitted = [a for a in attempts if a.submitted_at is not None]
    if len(submitted) >= streak_days and longest_daily_streak(submitted) >= streak_days:
        achievements.append(_badge(STREAK_MASTER, now))

    logger.debug(f"User {user.user_id} holds {len(achievements)} achievements")
    return achievements
