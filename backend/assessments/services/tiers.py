"""Gamification tiers derived from attempts completed, accuracy and top-pool membership."""

from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class Tier:
    tier: int
    name: str
    icon: str

    def to_dict(self):
        return asdict(self)


LEGEND = Tier(6, 'Legend', 'Flame')
SUBJECT_MASTER = Tier(5, 'Subject Master', 'Crown')
TEST_CHAMPION = Tier(4, 'Test Champion', 'Trophy')
CONSISTENT_PERFORMER = Tier(3, 'Consistent Performer', 'TrendingUp')
QUICK_LEARNER = Tier(2, 'Quick Learner', 'Zap')
RISING_STAR = Tier(1, 'Rising Star', 'Star')
NEWCOMER = Tier(0, 'Newcomer', 'User')


def calculate_tier(tests_completed: int, avg_accuracy: float, is_top_ten: bool) -> Tier:
    """
    First matching row wins. Accuracy thresholds are strict, so 50.0 is not > 50.
    """
    if tests_completed >= 100 and avg_accuracy > 85 and is_top_ten:
        return LEGEND
    if tests_completed >= 51 and avg_accuracy > 80:
        return SUBJECT_MASTER
    if tests_completed >= 31 and avg_accuracy > 70:
        return TEST_CHAMPION
    if tests_completed >= 16 and avg_accuracy > 60:
        return CONSISTENT_PERFORMER
    if tests_completed >= 6 and avg_accuracy > 50:
        return QUICK_LEARNER
    if tests_completed >= 1:
        return RISING_STAR
    return NEWCOMER
