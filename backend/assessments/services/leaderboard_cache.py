"""
Read-through cache for leaderboards.

Entries are keyed by (scope, organization, scope id, limit, version). Anything that
changes a ranking bumps the organization's version, which orphans every older
entry at once; the cache TTL reclaims them.
"""

import logging
import time

from django.conf import settings
from django.core.cache import cache

logger = logging.getLogger(__name__)


def _ttl() -> int:
    return getattr(settings, 'ASSESSMENT_SETTINGS', {}).get('LEADERBOARD_CACHE_TTL', 300)


def _version_key(organization_id) -> str:
    return f"leaderboard-version:{organization_id}"


def get_version(organization_id) -> int:
    key = _version_key(organization_id)
    version = cache.get(key)
    if version is None:
        # Seeded from the clock so a lost counter never reuses an old version
        cache.add(key, int(time.time() * 1000), timeout=None)
        version = cache.get(key)
    return version


def bump_version(organization_id) -> None:
    key = _version_key(organization_id)
    try:
        cache.incr(key)
    except ValueError:
        cache.set(key, int(time.time() * 1000), timeout=None)
    logger.debug(f"Leaderboard version bumped for organization {organization_id}")


def cache_key(scope: str, organization_id, scope_id, limit) -> str:
    version = get_version(organization_id)
    return f"leaderboard:{scope}:{organization_id}:{scope_id}:{limit}:v{version}"


def get_or_compute(scope: str, organization_id, scope_id, limit, compute):
    """Return the cached value for this leaderboard, computing and storing it on a miss."""
    key = cache_key(scope, organization_id, scope_id, limit)
    value = cache.get(key)
    if value is not None:
        return value

    value = compute()
    cache.set(key, value, timeout=_ttl())
    return value
