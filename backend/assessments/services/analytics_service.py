"""
Student, test and organization analytics.

All figures are built from canonical attempts only: submitted, answer key
published, first attempt per user and test.
"""

import logging
from datetime import date, timedelta
from typing import Dict, List, Optional

from django.conf import settings
from django.utils import timezone

from ..access import ensure_same_organization, get_user_in_organization
from ..models import Attempt, Question, Test, UserAccount, UserSettings
from .attempt_filters import canonical_attempts
from .catalog import get_test, questions_for_tests
from .leaderboard_service import aggregate_user_stats, rank_user_stats
from .scoring import CORRECT, accuracy_percent, classify_answer, round_half_up
from .tiers import calculate_tier

logger = logging.getLogger(__name__)

RECENT_ATTEMPTS = 5

SCORE_BANDS = [
    ("0-20%", 20),
    ("21-40%", 40),
    ("41-60%", 60),
    ("61-80%", 80),
    ("81-100%", None),
]


def _setting(name, default):
    return getattr(settings, 'ASSESSMENT_SETTINGS', {}).get(name, default)


def _answers_map(attempt: Attempt) -> Dict[int, List[int]]:
    # Uses the prefetched `answers` relation when present
    return {answer.question_id: answer.selected_options for answer in attempt.answers.all()}


def _attempt_summary(attempt: Attempt) -> dict:
    return {
        'attempt_id': attempt.id,
        'test_id': attempt.test_id,
        'test_title': attempt.test.title if attempt.test else 'Unknown Test',
        'score': attempt.score,
        'correct': attempt.correct,
        'incorrect': attempt.incorrect,
        'unanswered': attempt.unanswered,
        'started_at': attempt.started_at,
        'submitted_at': attempt.submitted_at,
    }


def subject_wise_performance(attempts: List[Attempt], questions: Dict[int, Question]) -> List[dict]:
    """
    Per-subject (correct, total) across the attempts, walking each attempt's test
    question list. Questions missing from the catalog are skipped.
    """
    subjects: Dict[str, dict] = {}
    for attempt in attempts:
        answers = _answers_map(attempt)
        for question_id in attempt.test.question_ids or []:
            question = questions.get(int(question_id))
            if question is None:
                continue

            row = subjects.setdefault(question.subject, {'subject': question.subject, 'correct': 0, 'total': 0})
            row['total'] += 1
            if classify_answer(answers.get(question.id), question.correct_options) == CORRECT:
                row['correct'] += 1

    for row in subjects.values():
        row['accuracy'] = (row['correct'] / row['total']) * 100 if row['total'] else 0
    return list(subjects.values())


def get_student_analytics(user: UserAccount) -> dict:
    """Totals, average score, subject-wise breakdown and the most recent attempts."""
    queryset = (
        Attempt.objects
        .filter(user=user, status=Attempt.STATUS_SUBMITTED, test__answer_key_published=True)
        .select_related('test')
        .prefetch_related('answers')
        .order_by('started_at', 'id')
    )
    attempts = canonical_attempts(queryset)

    if not attempts:
        return {
            'user_id': user.user_id,
            'total_tests_taken': 0,
            'average_score': 0,
            'total_correct': 0,
            'total_incorrect': 0,
            'subject_wise_performance': [],
            'recent_attempts': [],
        }

    questions = questions_for_tests({a.test_id: a.test for a in attempts}.values())
    recent = sorted(attempts, key=lambda a: a.started_at, reverse=True)[:RECENT_ATTEMPTS]

    return {
        'user_id': user.user_id,
        'total_tests_taken': len(attempts),
        'average_score': sum(a.score for a in attempts) / len(attempts),
        'total_correct': sum(a.correct for a in attempts),
        'total_incorrect': sum(a.incorrect for a in attempts),
        'subject_wise_performance': subject_wise_performance(attempts, questions),
        'recent_attempts': [_attempt_summary(a) for a in recent],
    }


def _trend_label(moment) -> str:
    if moment is None:
        return ''
    local = timezone.localtime(moment)
    return f"{local.strftime('%b')} {local.day}"


def get_performance_trend(user: UserAccount, limit: Optional[int] = None) -> List[dict]:
    """
    The newest `limit` canonical attempts, returned oldest first. Accuracy is a
    whole-number percentage rounded half up.
    """
    default = _setting('TREND_DEFAULT_LIMIT', 10)
    maximum = _setting('TREND_MAX_LIMIT', 50)
    limit = default if limit is None else int(limit)
    limit = max(1, min(limit, maximum))

    attempts = canonical_attempts(user=user)
    newest = sorted(attempts, key=lambda a: a.started_at, reverse=True)[:limit]

    trend = []
    for attempt in newest:
        accuracy = accuracy_percent(attempt.correct, attempt.incorrect, attempt.unanswered)
        trend.append({
            'attempt_id': attempt.id,
            'test_id': attempt.test_id,
            'test_title': attempt.test.title,
            'score': attempt.score,
            'accuracy': round_half_up(accuracy),
            'submitted_at': attempt.submitted_at,
            'date': _trend_label(attempt.submitted_at),
        })
    trend.reverse()
    return trend


def get_activity_heatmap(user: UserAccount, start_date: Optional[date] = None, end_date: Optional[date] = None) -> List[dict]:
    """
    Attempt count and total score per local calendar day of submission, for days
    within [start_date, end_date] inclusive. Defaults to the last year.
    """
    today = timezone.localdate()
    end_date = end_date or today
    start_date = start_date or (end_date - timedelta(days=_setting('HEATMAP_DEFAULT_DAYS', 365)))

    buckets: Dict[date, dict] = {}
    for attempt in canonical_attempts(user=user):
        if attempt.submitted_at is None:
            continue
        day = timezone.localtime(attempt.submitted_at).date()
        if not start_date <= day <= end_date:
            continue
        bucket = buckets.setdefault(day, {'date': day.isoformat(), 'count': 0, 'total_score': 0.0})
        bucket['count'] += 1
        bucket['total_score'] += attempt.score

    return [buckets[day] for day in sorted(buckets)]


def _empty_test_analytics(test: Test) -> dict:
    return {
        'test_id': test.id,
        'title': test.title,
        'answer_key_published': test.answer_key_published,
        'total_attempts': 0,
        'average_score': 0,
        'highest_score': 0,
        'lowest_score': 0,
        'question_wise_analysis': [],
        'score_distribution': [{'range': label, 'count': 0} for label, _ in SCORE_BANDS],
    }


def _band_index(percentage: float) -> int:
    for index, (_, upper) in enumerate(SCORE_BANDS):
        if upper is None or percentage <= upper:
            return index
    return len(SCORE_BANDS) - 1


def get_test_analytics(caller: UserAccount, test_id) -> dict:
    """Admin view of one test: score spread, per-question success rate, distribution."""
    test = get_test(test_id)
    ensure_same_organization(caller, test.organization_id)

    analytics = _empty_test_analytics(test)
    if not test.answer_key_published:
        return analytics

    queryset = (
        Attempt.objects
        .filter(test=test, status=Attempt.STATUS_SUBMITTED)
        .select_related('test')
        .prefetch_related('answers')
        .order_by('started_at', 'id')
    )
    attempts = canonical_attempts(queryset)
    if not attempts:
        return analytics

    scores = [a.score for a in attempts]
    analytics.update({
        'total_attempts': len(attempts),
        'average_score': sum(scores) / len(scores),
        'highest_score': max(scores),
        'lowest_score': min(scores),
    })

    questions = questions_for_tests([test])
    answer_maps = [_answers_map(a) for a in attempts]
    for question_id in test.question_ids or []:
        question = questions.get(int(question_id))
        if question is None:
            continue
        correct_attempts = sum(
            1 for answers in answer_maps
            if classify_answer(answers.get(question.id), question.correct_options) == CORRECT
        )
        analytics['question_wise_analysis'].append({
            'question_id': question.id,
            'question_text': question.text[:50] + ('...' if len(question.text) > 50 else ''),
            'correct_attempts': correct_attempts,
            'total_attempts': len(attempts),
            'success_rate': (correct_attempts / len(attempts)) * 100,
        })

    for attempt in attempts:
        percentage = (attempt.score / test.total_marks) * 100 if test.total_marks else 0
        analytics['score_distribution'][_band_index(percentage)]['count'] += 1

    return analytics


def get_admin_dashboard(caller: UserAccount) -> dict:
    org = caller.organization_id
    tests = Test.objects.filter(organization_id=org)
    attempts = canonical_attempts(test__organization_id=org)

    return {
        'total_students': UserAccount.objects.filter(organization_id=org, role=UserAccount.ROLE_STUDENT).count(),
        'total_tests': tests.count(),
        'published_tests': tests.filter(status=Test.STATUS_PUBLISHED).count(),
        'total_questions': Question.objects.filter(organization_id=org).count(),
        'total_attempts': len(attempts),
        'average_score': sum(a.score for a in attempts) / len(attempts) if attempts else 0,
    }


def get_public_student_analytics(caller: UserAccount, user_id) -> dict:
    """
    Profile card for any member of the caller's organization. Stats are withheld
    when the member turned `show_stats` off.
    """
    target = get_user_in_organization(caller, user_id)
    prefs = UserSettings.objects.filter(user=target).first()
    show_stats = prefs.show_stats if prefs else True
    show_heatmap = prefs.show_heatmap if prefs else True

    if not show_stats:
        return {'user_id': target.user_id, 'user_name': target.full_name, 'is_private': True, 'show_heatmap': show_heatmap}

    attempts = canonical_attempts(user=target)
    total_correct = sum(a.correct for a in attempts)
    total_questions = sum(a.questions_seen for a in attempts)
    avg_accuracy = (total_correct / total_questions) * 100 if total_questions > 0 else 0

    ranked = rank_user_stats(aggregate_user_stats(
        canonical_attempts(user__organization_id=target.organization_id)
    ))
    rank = next((index + 1 for index, s in enumerate(ranked) if s.user_id == target.user_id), None)
    pool = _setting('TOP_TIER_POOL_SIZE', 10)
    is_top = target.user_id in {s.user_id for s in ranked[:pool]}

    return {
        'user_id': target.user_id,
        'user_name': target.full_name,
        'is_private': False,
        'show_heatmap': show_heatmap,
        'total_tests_taken': len(attempts),
        'avg_accuracy': round_half_up(avg_accuracy * 10) / 10,
        'tier': calculate_tier(len(attempts), avg_accuracy, is_top).to_dict(),
        'total_score': sum(a.score for a in attempts),
        'rank': rank,
    }
