"""
Django signals that keep cached leaderboards in step with the data they rank.
"""
import logging

from django.db import transaction
from django.db.models.signals import post_save
from django.dispatch import receiver

from .models import Attempt, Test, UserAccount, UserSettings
from .services import leaderboard_cache

logger = logging.getLogger(__name__)


def _enqueue_warmup(organization_id):
    try:
        from .tasks import warm_leaderboards_task
        warm_leaderboards_task.delay(organization_id)
    except Exception:
        # Cache warming is best-effort; the read-through path recomputes on a miss
        logger.exception(f"Could not enqueue leaderboard warmup for organization {organization_id}")


def _invalidate(organization_ids, warm=False):
    for organization_id in {org for org in organization_ids if org}:
        leaderboard_cache.bump_version(organization_id)
        if warm:
            _enqueue_warmup(organization_id)


@receiver(post_save, sender=Attempt)
def invalidate_leaderboards_on_submission(sender, instance, created, update_fields=None, **kwargs):
    """
    A newly submitted attempt changes rankings. Invalidate after commit so readers
    never cache a ranking computed from a rolled-back submission.
    """
    if instance.status != Attempt.STATUS_SUBMITTED:
        return
    if update_fields is not None and 'status' not in update_fields:
        return

    organizations = [instance.user.organization_id, instance.test.organization_id]
    logger.info(f"Attempt {instance.id} submitted, invalidating leaderboards for {set(organizations)}")
    transaction.on_commit(lambda: _invalidate(organizations, warm=True))


@receiver(post_save, sender=Test)
def invalidate_leaderboards_on_test_change(sender, instance, created, **kwargs):
    # Publishing an answer key adds its attempts to every ranking
    if created:
        return
    transaction.on_commit(lambda: _invalidate([instance.organization_id]))


@receiver(post_save, sender=UserAccount)
def invalidate_leaderboards_on_account_change(sender, instance, created, **kwargs):
    if created:
        return
    transaction.on_commit(lambda: _invalidate([instance.organization_id]))


@receiver(post_save, sender=UserSettings)
def invalidate_leaderboards_on_settings_change(sender, instance, **kwargs):
    organization_id = UserAccount.objects.filter(user_id=instance.user_id).values_list('organization_id', flat=True).first()
    transaction.on_commit(lambda: _invalidate([organization_id]))
