"""
Tests for achievement detection
"""
from datetime import datetime, timedelta, timezone as dt_timezone

import pytest

from assessments.services.achievement_service import (
    COMEBACK_KING, PERFECTIONIST, SPEED_DEMON, STREAK_MASTER,
    get_student_achievements, has_comeback, longest_daily_streak,
)


def _start(day, hour=9):
    return datetime(2025, 5, 1, hour, 0, tzinfo=dt_timezone.utc) + timedelta(days=day)


def _ids(achievements):
    return {a['id'] for a in achievements}


@pytest.mark.integration
@pytest.mark.django_db
class TestAchievements:

    def test_no_history(self, student):
        assert get_student_achievements(student) == []

    def test_perfectionist(self, student, published_test, make_attempt):
        make_attempt(student, published_test, score=40, correct=4, minutes=45)

        achievements = get_student_achievements(student)

        assert _ids(achievements) == {PERFECTIONIST}
        assert achievements[0]['icon'] == 'Award'

    def test_speed_demon_under_half_the_duration(self, student, published_test, make_attempt):
        # 60 minute test finished in 29
        make_attempt(student, published_test, score=10, correct=1, minutes=29)

        assert SPEED_DEMON in _ids(get_student_achievements(student))

    def test_exactly_half_is_not_speed_demon(self, student, published_test, make_attempt):
        make_attempt(student, published_test, score=10, correct=1, minutes=30)

        assert SPEED_DEMON not in _ids(get_student_achievements(student))

    def test_unpublished_key_earns_nothing(self, student, unpublished_key_test, make_attempt):
        make_attempt(student, unpublished_key_test, score=40, correct=4, minutes=5)

        assert get_student_achievements(student) == []

    def test_retake_is_not_a_comeback(self, student, published_test, make_attempt):
        # Only the first attempt per test counts, so the retake is never seen
        make_attempt(student, published_test, correct=1, incorrect=3, unanswered=0, started_at=_start(0), minutes=45)
        make_attempt(student, published_test, correct=4, incorrect=0, unanswered=0, started_at=_start(1), minutes=45)

        achievements = get_student_achievements(student)

        assert COMEBACK_KING not in _ids(achievements)
        assert PERFECTIONIST not in _ids(achievements)

    def test_seven_day_streak(self, student, make_test, make_attempt):
        # Gap before the run
        make_attempt(student, make_test(title='Warmup'), correct=1, started_at=_start(0), minutes=45)
        for day in range(3, 10):
            make_attempt(student, make_test(title=f'Day {day}'), correct=1, started_at=_start(day), minutes=45)

        assert STREAK_MASTER in _ids(get_student_achievements(student))

    def test_six_day_streak_is_not_enough(self, student, make_test, make_attempt):
        make_attempt(student, make_test(title='Far'), correct=1, started_at=_start(20), minutes=45)
        for day in range(6):
            make_attempt(student, make_test(title=f'Day {day}'), correct=1, started_at=_start(day), minutes=45)

        assert STREAK_MASTER not in _ids(get_student_achievements(student))


@pytest.mark.unit
class TestLongestDailyStreak:

    class _Attempt:
        def __init__(self, submitted_at):
            self.submitted_at = submitted_at

    def test_same_day_counts_once(self):
        attempts = [self._Attempt(_start(0, 8)), self._Attempt(_start(0, 18)), self._Attempt(_start(1))]

        assert longest_daily_streak(attempts) == 2

    def test_gap_resets_run(self):
        attempts = [self._Attempt(_start(d)) for d in (0, 1, 2, 5, 6)]

        assert longest_daily_streak(attempts) == 3

    def test_empty(self):
        assert longest_daily_streak([]) == 0


@pytest.mark.unit
class TestHasComeback:

    class _Attempt:
        def __init__(self, test_id, correct, incorrect):
            self.test_id = test_id
            self.correct = correct
            self.incorrect = incorrect
            self.unanswered = 0

    def test_improvement_at_threshold(self):
        attempts = [self._Attempt(1, 1, 3), self._Attempt(1, 3, 1)]

        assert has_comeback(attempts, 30) is True

    def test_improvement_below_threshold(self):
        attempts = [self._Attempt(1, 2, 2), self._Attempt(1, 3, 1)]

        assert has_comeback(attempts, 30) is False

    def test_one_attempt_per_test(self):
        attempts = [self._Attempt(1, 0, 4), self._Attempt(2, 4, 0)]

        assert has_comeback(attempts, 30) is False
