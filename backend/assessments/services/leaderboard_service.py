"""
Leaderboards and per-test rank.

Every ranking runs on canonical attempts (submitted, answer key published,
first attempt per user and test). Ties on total score go to the user whose last
counted submission came first, then to user_id, so re-runs are stable.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Set

from django.conf import settings

from ..access import ensure_same_organization
from ..errors import NotFoundError
from ..models import Attempt, Batch, Test, UserAccount, UserSettings
from . import leaderboard_cache
from .attempt_filters import canonical_attempts
from .catalog import get_test
from .tiers import calculate_tier

logger = logging.getLogger(__name__)


def _setting(name, default):
    return getattr(settings, 'ASSESSMENT_SETTINGS', {}).get(name, default)


@dataclass
class UserStats:
    user_id: str
    total_score: float = 0.0
    tests_completed: int = 0
    total_correct: int = 0
    total_questions: int = 0
    last_submitted_at: Optional[datetime] = None

    @property
    def avg_accuracy(self) -> float:
        if self.total_questions <= 0:
            return 0.0
        return (self.total_correct / self.total_questions) * 100


def aggregate_user_stats(attempts: Iterable[Attempt]) -> List[UserStats]:
    """Sum score, count, correct and questions seen per user."""
    stats: Dict[str, UserStats] = {}
    for attempt in attempts:
        entry = stats.get(attempt.user_id)
        if entry is None:
            entry = stats[attempt.user_id] = UserStats(user_id=attempt.user_id)
        entry.total_score += attempt.score
        entry.tests_completed += 1
        entry.total_correct += attempt.correct
        entry.total_questions += attempt.questions_seen
        if attempt.submitted_at and (entry.last_submitted_at is None or attempt.submitted_at > entry.last_submitted_at):
            entry.last_submitted_at = attempt.submitted_at
    return list(stats.values())


def _timestamp(value: Optional[datetime]) -> float:
    return value.timestamp() if value else float('inf')


def rank_user_stats(stats: Iterable[UserStats]) -> List[UserStats]:
    return sorted(stats, key=lambda s: (-s.total_score, _timestamp(s.last_submitted_at), str(s.user_id)))


def rank_test_attempts(attempts: Iterable[Attempt]) -> List[Attempt]:
    return sorted(attempts, key=lambda a: (-a.score, _timestamp(a.submitted_at), str(a.user_id)))


def global_top_user_ids(organization_id) -> Set[str]:
    """
    User ids of the organization-wide top by total score, before any visibility
    filtering. Used for the Legend tier in every scope.
    """
    ranked = rank_user_stats(aggregate_user_stats(
        canonical_attempts(user__organization_id=organization_id)
    ))
    pool = _setting('TOP_TIER_POOL_SIZE', 10)
    return {s.user_id for s in ranked[:pool]}


def hidden_user_ids(user_ids: Iterable[str]) -> Set[str]:
    """Suspended users and users who opted out of leaderboards."""
    user_ids = list(user_ids)
    suspended = set(
        UserAccount.objects.filter(user_id__in=user_ids, is_suspended=True).values_list('user_id', flat=True)
    )
    opted_out = set(
        UserSettings.objects.filter(user_id__in=user_ids, show_on_leaderboard=False).values_list('user_id', flat=True)
    )
    return suspended | opted_out


def _clamp_limit(limit) -> int:
    default = _setting('LEADERBOARD_DEFAULT_LIMIT', 20)
    maximum = _setting('LEADERBOARD_MAX_LIMIT', 100)
    if not limit:
        return default
    return max(1, min(int(limit), maximum))


def _build_entries(ranked: List[UserStats], top_ids: Set[str], limit: int, include_batch: bool) -> List[dict]:
    hidden = hidden_user_ids(s.user_id for s in ranked)
    visible = [s for s in ranked if s.user_id not in hidden][:limit]
    users = UserAccount.objects.select_related('batch').in_bulk([s.user_id for s in visible])

    entries = []
    for index, stats in enumerate(visible):
        user = users.get(stats.user_id)
        entry = {
            'rank': index + 1,
            'user_id': stats.user_id,
            'user_name': user.full_name if user else 'Unknown',
            'total_score': stats.total_score,
            'tests_completed': stats.tests_completed,
            'avg_accuracy': stats.avg_accuracy,
            'tier': calculate_tier(stats.tests_completed, stats.avg_accuracy, stats.user_id in top_ids).to_dict(),
        }
        if include_batch:
            entry['batch_name'] = user.batch.name if user and user.batch else None
        entries.append(entry)
    return entries


def compute_global_leaderboard(organization_id, limit) -> List[dict]:
    ranked = rank_user_stats(aggregate_user_stats(
        canonical_attempts(user__organization_id=organization_id)
    ))
    top_ids = {s.user_id for s in ranked[:_setting('TOP_TIER_POOL_SIZE', 10)]}
    return _build_entries(ranked, top_ids, limit, include_batch=True)


def compute_batch_leaderboard(batch: Batch, limit) -> List[dict]:
    ranked = rank_user_stats(aggregate_user_stats(
        canonical_attempts(user__batch=batch)
    ))
    return _build_entries(ranked, global_top_user_ids(batch.organization_id), limit, include_batch=False)


def compute_test_leaderboard(test: Test, limit) -> List[dict]:
    if not test.answer_key_published:
        return []

    ranked = rank_test_attempts(canonical_attempts(test=test))
    hidden = hidden_user_ids(a.user_id for a in ranked)
    visible = [a for a in ranked if a.user_id not in hidden][:limit]

    return [
        {
            'rank': index + 1,
            'user_id': attempt.user_id,
            'user_name': attempt.user.full_name,
            'score': attempt.score,
            'correct': attempt.correct,
            'time_taken_seconds': attempt.time_taken_seconds or 0,
        }
        for index, attempt in enumerate(visible)
    ]


def get_global_leaderboard(caller: UserAccount, limit=None) -> List[dict]:
    limit = _clamp_limit(limit)
    org = caller.organization_id
    return leaderboard_cache.get_or_compute(
        'global', org, 'all', limit,
        lambda: compute_global_leaderboard(org, limit)
    )


def get_batch_leaderboard(caller: UserAccount, batch_id, limit=None) -> List[dict]:
    try:
        batch = Batch.objects.get(id=batch_id)
    except (Batch.DoesNotExist, ValueError, TypeError):
        raise NotFoundError(f"Batch {batch_id} not found", resource_type="batch")
    ensure_same_organization(caller, batch.organization_id)

    limit = _clamp_limit(limit)
    return leaderboard_cache.get_or_compute(
        'batch', batch.organization_id, batch.id, limit,
        lambda: compute_batch_leaderboard(batch, limit)
    )


def get_test_leaderboard(caller: UserAccount, test_id) -> List[dict]:
    test = get_test(test_id)
    ensure_same_organization(caller, test.organization_id)

    size = _setting('TEST_LEADERBOARD_SIZE', 10)
    return leaderboard_cache.get_or_compute(
        'test', test.organization_id, test.id, size,
        lambda: compute_test_leaderboard(test, size)
    )


def get_user_test_rank(caller: UserAccount, test_id, user_id=None) -> dict:
    """
    1-based position of `user_id` (default: caller) among canonical attempts at the
    test. Not visibility-filtered. Null rank while the answer key is unpublished.
    """
    test = get_test(test_id)
    ensure_same_organization(caller, test.organization_id)
    user_id = str(user_id or caller.user_id)

    if not test.answer_key_published:
        return {'rank': None, 'total_participants': 0}

    ranked = rank_test_attempts(canonical_attempts(test=test))
    rank = next((index + 1 for index, a in enumerate(ranked) if str(a.user_id) == user_id), None)
    return {'rank': rank, 'total_participants': len(ranked)}


def warm_organization_leaderboards(organization_id) -> int:
    """Recompute the cached global and batch leaderboards. Returns how many were warmed."""
    limit = _clamp_limit(None)
    warmed = 0

    leaderboard_cache.get_or_compute(
        'global', organization_id, 'all', limit,
        lambda: compute_global_leaderboard(organization_id, limit)
    )
    warmed += 1

    for batch in Batch.objects.filter(organization_id=organization_id, is_active=True):
        leaderboard_cache.get_or_compute(
            'batch', organization_id, batch.id, limit,
            lambda batch=batch: compute_batch_leaderboard(batch, limit)
        )
        warmed += 1

    logger.info(f"Warmed {warmed} leaderboards for organization {organization_id}")
    return warmed
