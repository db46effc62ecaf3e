# Import all views to make them available when importing from assessments.views
from .attempt_views import AttemptViewSet
from .analytics_views import (
    student_analytics, performance_trend, activity_heatmap, student_achievements,
    public_profile, test_analytics, admin_dashboard,
)
from .leaderboard_views import global_leaderboard, batch_leaderboard, test_leaderboard, test_rank
