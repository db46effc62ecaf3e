"""
Tests for student, test and organization analytics
"""
from datetime import date, datetime, timedelta, timezone as dt_timezone

import pytest

from assessments import models
from assessments.errors import AuthorizationError
from assessments.services import analytics_service, attempt_service


def _day(d, hour=10):
    return datetime(2025, 3, d, hour, 0, tzinfo=dt_timezone.utc)


def _take(user, test, questions, selections):
    """Run a full attempt through the lifecycle so answers are stored"""
    attempt = attempt_service.start_attempt(user, test.id).attempt
    for question, selected in zip(questions, selections):
        attempt_service.save_answer(user, attempt.id, question.id, selected)
    return attempt_service.submit_attempt(user, attempt.id).attempt


@pytest.mark.integration
@pytest.mark.django_db
class TestStudentAnalytics:

    def test_empty_history(self, student):
        result = analytics_service.get_student_analytics(student)

        assert result['total_tests_taken'] == 0
        assert result['average_score'] == 0
        assert result['subject_wise_performance'] == []
        assert result['recent_attempts'] == []

    def test_totals_and_subjects(self, student, published_test, make_test, questions):
        # Arrange - two tests over the same four questions
        second = make_test(title='Mock Test 3')
        _take(student, published_test, questions, [[0], [1], [0], []])
        _take(student, second, questions, [[0], [0], [2], [0, 2]])

        # Act
        result = analytics_service.get_student_analytics(student)

        # Assert
        assert result['total_tests_taken'] == 2
        assert result['total_correct'] == 5
        assert result['total_incorrect'] == 2
        subjects = {row['subject']: row for row in result['subject_wise_performance']}
        assert subjects['Physics'] == {'subject': 'Physics', 'correct': 3, 'total': 4, 'accuracy': 75.0}
        assert subjects['Chemistry']['correct'] == 2
        assert subjects['Chemistry']['total'] == 4

    def test_retake_ignored(self, student, published_test, questions):
        first = _take(student, published_test, questions, [[0], [], [], []])
        _take(student, published_test, questions, [[0], [1], [2], [0, 2]])

        result = analytics_service.get_student_analytics(student)

        assert result['total_tests_taken'] == 1
        assert result['average_score'] == first.score
        assert result['recent_attempts'][0]['attempt_id'] == first.id

    def test_unpublished_key_excluded(self, student, unpublished_key_test, questions):
        _take(student, unpublished_key_test, questions, [[0], [1], [2], [0, 2]])

        assert analytics_service.get_student_analytics(student)['total_tests_taken'] == 0


@pytest.mark.integration
@pytest.mark.django_db
class TestPerformanceTrend:

    def test_newest_limited_then_chronological(self, student, make_test, make_attempt):
        # Arrange - four tests on consecutive days
        attempts = [
            make_attempt(student, make_test(title=f'T{i}'), score=i, correct=i % 4, started_at=_day(i + 1))
            for i in range(4)
        ]

        # Act
        trend = analytics_service.get_performance_trend(student, limit=3)

        # Assert
        assert [row['attempt_id'] for row in trend] == [a.id for a in attempts[1:]]
        assert trend[0]['date'] == 'Mar 2'

    def test_zero_limit_clamps_to_one(self, student, make_test, make_attempt):
        attempts = [
            make_attempt(student, make_test(title=f'T{i}'), correct=1, started_at=_day(i + 1))
            for i in range(3)
        ]

        trend = analytics_service.get_performance_trend(student, limit=0)

        assert [row['attempt_id'] for row in trend] == [attempts[-1].id]

    def test_missing_limit_uses_default(self, student, make_test, make_attempt, settings):
        settings.ASSESSMENT_SETTINGS = {'TREND_DEFAULT_LIMIT': 2}
        for i in range(3):
            make_attempt(student, make_test(title=f'T{i}'), correct=1, started_at=_day(i + 1))

        assert len(analytics_service.get_performance_trend(student)) == 2

    def test_accuracy_rounds_half_up(self, student, make_test, make_attempt):
        test = make_test(question_ids=[1, 2, 3, 4, 5, 6, 7, 8])
        make_attempt(student, test, correct=5, incorrect=3, unanswered=0)

        trend = analytics_service.get_performance_trend(student)

        assert trend[0]['accuracy'] == 63  # 62.5


@pytest.mark.integration
@pytest.mark.django_db
class TestActivityHeatmap:

    def test_buckets_by_day_inside_range(self, student, make_test, make_attempt):
        make_attempt(student, make_test(title='A'), score=10, started_at=_day(1, 9))
        make_attempt(student, make_test(title='B'), score=15, started_at=_day(1, 14))
        make_attempt(student, make_test(title='C'), score=5, started_at=_day(3))
        make_attempt(student, make_test(title='D'), score=7, started_at=_day(20))

        heatmap = analytics_service.get_activity_heatmap(student, date(2025, 3, 1), date(2025, 3, 10))

        assert heatmap == [
            {'date': '2025-03-01', 'count': 2, 'total_score': 25.0},
            {'date': '2025-03-03', 'count': 1, 'total_score': 5.0},
        ]

    def test_uses_local_calendar_day(self, settings, student, make_test, make_attempt):
        # 20:00 UTC started, submitted 20:30 UTC = 02:00 next day in Kolkata
        settings.TIME_ZONE = 'Asia/Kolkata'
        make_attempt(student, make_test(), score=10, started_at=_day(1, 20))

        heatmap = analytics_service.get_activity_heatmap(student, date(2025, 3, 1), date(2025, 3, 5))

        assert [row['date'] for row in heatmap] == ['2025-03-02']


@pytest.mark.integration
@pytest.mark.django_db
class TestTestAnalytics:

    def test_distribution_and_question_rates(self, admin_user, student, second_student, published_test, questions):
        _take(student, published_test, questions, [[0], [1], [2], [0, 2]])    # 40 -> 100%
        _take(second_student, published_test, questions, [[0], [], [], []])   # 10 -> 25%

        result = analytics_service.get_test_analytics(admin_user, published_test.id)

        assert result['total_attempts'] == 2
        assert result['highest_score'] == 40
        assert result['lowest_score'] == 10
        assert result['average_score'] == 25
        counts = {band['range']: band['count'] for band in result['score_distribution']}
        assert counts == {'0-20%': 0, '21-40%': 1, '41-60%': 0, '61-80%': 0, '81-100%': 1}
        assert result['question_wise_analysis'][0]['success_rate'] == 100
        assert result['question_wise_analysis'][1]['success_rate'] == 50

    def test_unpublished_key_returns_empty_shape(self, admin_user, student, unpublished_key_test, questions):
        _take(student, unpublished_key_test, questions, [[0], [1], [2], [0, 2]])

        result = analytics_service.get_test_analytics(admin_user, unpublished_key_test.id)

        assert result['total_attempts'] == 0
        assert len(result['score_distribution']) == 5

    def test_cross_organization(self, published_test):
        foreign_admin = models.UserAccount.objects.create(
            user_id='ADM900', full_name='Other Admin', role=models.UserAccount.ROLE_ADMIN, organization_id='org-beta'
        )

        with pytest.raises(AuthorizationError):
            analytics_service.get_test_analytics(foreign_admin, published_test.id)


@pytest.mark.integration
@pytest.mark.django_db
class TestAdminDashboard:

    def test_counts(self, admin_user, student, second_student, published_test, unpublished_key_test, make_attempt):
        make_attempt(student, published_test, score=30)
        make_attempt(second_student, published_test, score=10)
        make_attempt(student, unpublished_key_test, score=40)

        result = analytics_service.get_admin_dashboard(admin_user)

        assert result['total_students'] == 2
        assert result['total_tests'] == 2
        assert result['published_tests'] == 2
        assert result['total_questions'] == 4
        assert result['total_attempts'] == 2
        assert result['average_score'] == 20


@pytest.mark.integration
@pytest.mark.django_db
class TestPublicProfile:

    def test_profile_with_rank_and_tier(self, second_student, student, published_test, make_attempt):
        make_attempt(student, published_test, score=30, correct=3, incorrect=1, unanswered=0)

        profile = analytics_service.get_public_student_analytics(second_student, student.user_id)

        assert profile['is_private'] is False
        assert profile['total_tests_taken'] == 1
        assert profile['avg_accuracy'] == 75.0
        assert profile['total_score'] == 30
        assert profile['rank'] == 1
        assert profile['tier']['name'] == 'Rising Star'

    def test_private_profile(self, second_student, student):
        models.UserSettings.objects.create(user=student, show_stats=False)

        profile = analytics_service.get_public_student_analytics(second_student, student.user_id)

        assert profile == {
            'user_id': student.user_id,
            'user_name': student.full_name,
            'is_private': True,
            'show_heatmap': True,
        }

    def test_other_organization_hidden(self, outsider, student):
        with pytest.raises(AuthorizationError):
            analytics_service.get_public_student_analytics(outsider, student.user_id)
