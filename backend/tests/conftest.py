"""
Test configuration and fixtures for the assessment engine
"""
from datetime import timedelta

import pytest
from django.core.cache import cache
from django.utils import timezone
from rest_framework.test import APIClient

from assessments import models

ORG_ID = 'org-alpha'
OTHER_ORG_ID = 'org-beta'


@pytest.fixture(autouse=True)
def clear_leaderboard_cache():
    """LocMem cache outlives a test; start each one cold"""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def api_client():
    """Provide DRF APIClient for testing REST endpoints"""
    return APIClient()


@pytest.fixture
def batch(db):
    return models.Batch.objects.create(name='Morning Batch', organization_id=ORG_ID)


@pytest.fixture
def other_batch(db):
    return models.Batch.objects.create(name='Evening Batch', organization_id=ORG_ID)


@pytest.fixture
def student(batch):
    return models.UserAccount.objects.create(
        user_id='STU001',
        full_name='Asha Rao',
        email='asha@example.com',
        role=models.UserAccount.ROLE_STUDENT,
        organization_id=ORG_ID,
        batch=batch,
    )


@pytest.fixture
def second_student(batch):
    return models.UserAccount.objects.create(
        user_id='STU002',
        full_name='Bilal Khan',
        email='bilal@example.com',
        role=models.UserAccount.ROLE_STUDENT,
        organization_id=ORG_ID,
        batch=batch,
    )


@pytest.fixture
def admin_user(db):
    return models.UserAccount.objects.create(
        user_id='ADM001',
        full_name='Priya Menon',
        email='priya@example.com',
        role=models.UserAccount.ROLE_ADMIN,
        organization_id=ORG_ID,
    )


@pytest.fixture
def outsider(db):
    """A student from a different organization"""
    return models.UserAccount.objects.create(
        user_id='STU900',
        full_name='Chen Wei',
        role=models.UserAccount.ROLE_STUDENT,
        organization_id=OTHER_ORG_ID,
    )


@pytest.fixture
def questions(db):
    """Four single-answer questions across two subjects plus one multi-select"""
    specs = [
        ('Physics', [0]),
        ('Physics', [1]),
        ('Chemistry', [2]),
        ('Chemistry', [0, 2]),
    ]
    created = []
    for i, (subject, correct) in enumerate(specs):
        created.append(models.Question.objects.create(
            organization_id=ORG_ID,
            text=f'Question {i + 1}: what is the right option?',
            options=['Option A', 'Option B', 'Option C', 'Option D'],
            correct_options=correct,
            subject=subject,
            topic=f'{subject} basics',
            explanation=f'Explanation {i + 1}',
        ))
    return created


@pytest.fixture
def published_test(questions):
    """40 marks over 4 questions (10 each), 1 mark negative, answer key out"""
    return models.Test.objects.create(
        organization_id=ORG_ID,
        title='Mock Test 1',
        question_ids=[q.id for q in questions],
        duration_minutes=60,
        total_marks=40,
        negative_marking=1,
        status=models.Test.STATUS_PUBLISHED,
        answer_key_published=True,
    )


@pytest.fixture
def unpublished_key_test(questions):
    """Open for attempts but answer key still secret"""
    return models.Test.objects.create(
        organization_id=ORG_ID,
        title='Mock Test 2',
        question_ids=[q.id for q in questions],
        duration_minutes=60,
        total_marks=40,
        negative_marking=1,
        status=models.Test.STATUS_PUBLISHED,
        answer_key_published=False,
    )


@pytest.fixture
def make_test(questions):
    """Factory for extra published tests"""
    def _make(title='Extra Test', **overrides):
        fields = {
            'organization_id': ORG_ID,
            'title': title,
            'question_ids': [q.id for q in questions],
            'duration_minutes': 60,
            'total_marks': 40,
            'negative_marking': 0,
            'status': models.Test.STATUS_PUBLISHED,
            'answer_key_published': True,
        }
        fields.update(overrides)
        return models.Test.objects.create(**fields)
    return _make


@pytest.fixture
def make_attempt(db):
    """
    Factory for already-submitted attempts with explicit counts and timings.
    `started_at` defaults to an hour ago; `minutes` is the time spent.
    """
    def _make(user, test, score=0, correct=0, incorrect=0, unanswered=None,
              started_at=None, minutes=30, status=models.Attempt.STATUS_SUBMITTED):
        started_at = started_at or (timezone.now() - timedelta(hours=1))
        total = test.question_count
        if unanswered is None:
            unanswered = max(0, total - correct - incorrect)
        return models.Attempt.objects.create(
            user=user,
            test=test,
            status=status,
            score=score,
            total_questions=total,
            correct=correct,
            incorrect=incorrect,
            unanswered=unanswered,
            started_at=started_at,
            submitted_at=started_at + timedelta(minutes=minutes) if status == models.Attempt.STATUS_SUBMITTED else None,
        )
    return _make


@pytest.fixture
def student_client(api_client, student):
    api_client.force_authenticate(user=student)
    api_client.user = student
    return api_client


@pytest.fixture
def admin_client(admin_user):
    client = APIClient()
    client.force_authenticate(user=admin_user)
    client.user = admin_user
    return client
