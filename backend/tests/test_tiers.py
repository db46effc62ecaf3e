"""
Unit tests for tier assignment
"""
import pytest

from assessments.services.tiers import (
    CONSISTENT_PERFORMER, LEGEND, NEWCOMER, QUICK_LEARNER, RISING_STAR,
    SUBJECT_MASTER, TEST_CHAMPION, calculate_tier,
)


@pytest.mark.unit
class TestCalculateTier:

    @pytest.mark.parametrize('completed, accuracy, top, expected', [
        (0, 0, False, NEWCOMER),
        (1, 10, False, RISING_STAR),
        (6, 51, False, QUICK_LEARNER),
        (16, 61, False, CONSISTENT_PERFORMER),
        (31, 71, False, TEST_CHAMPION),
        (51, 81, False, SUBJECT_MASTER),
        (100, 86, True, LEGEND),
    ])
    def test_each_row(self, completed, accuracy, top, expected):
        assert calculate_tier(completed, accuracy, top) == expected

    def test_accuracy_thresholds_are_strict(self):
        assert calculate_tier(6, 50.0, False) == RISING_STAR
        assert calculate_tier(16, 60.0, False) == QUICK_LEARNER

    def test_six_attempts_at_51_percent_is_quick_learner(self):
        tier = calculate_tier(6, 51.0, False)

        assert tier.tier == 2
        assert tier.name == 'Quick Learner'

    def test_legend_requires_top_pool(self):
        assert calculate_tier(150, 95, False) == SUBJECT_MASTER
        assert calculate_tier(150, 95, True) == LEGEND

    def test_to_dict_carries_icon(self):
        assert LEGEND.to_dict() == {'tier': 6, 'name': 'Legend', 'icon': 'Flame'}
