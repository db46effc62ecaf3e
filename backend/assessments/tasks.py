import logging

from celery import shared_task

logger = logging.getLogger(__name__)


@shared_task(
    bind=True,
    autoretry_for=(Exception,),
    retry_kwargs={"max_retries": 2},
    retry_backoff=True,
    soft_time_limit=60,
    time_limit=120,
)
def warm_leaderboards_task(self, organization_id: str):
    """Recompute an organization's global and batch leaderboards into the cache."""
    try:
        from .services.leaderboard_service import warm_organization_leaderboards
        return warm_organization_leaderboards(organization_id)
    except Exception:
        logger.exception('warm_leaderboards_task failed')
        raise
