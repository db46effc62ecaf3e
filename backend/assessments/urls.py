from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import (
    AttemptViewSet,
    student_analytics,
    performance_trend,
    activity_heatmap,
    student_achievements,
    public_profile,
    test_analytics,
    admin_dashboard,
    global_leaderboard,
    batch_leaderboard,
    test_leaderboard,
    test_rank,
)

router = DefaultRouter()
router.register(r"attempts", AttemptViewSet, basename="attempt")

urlpatterns = [
    path("", include(router.urls)),

    # Analytics
    path("analytics/students/<str:user_id>/", student_analytics, name="student-analytics"),
    path("analytics/students/<str:user_id>/trend/", performance_trend, name="student-trend"),
    path("analytics/students/<str:user_id>/heatmap/", activity_heatmap, name="student-heatmap"),
    path("analytics/students/<str:user_id>/achievements/", student_achievements, name="student-achievements"),
    path("analytics/students/<str:user_id>/profile/", public_profile, name="student-profile"),
    path("analytics/tests/<int:test_id>/", test_analytics, name="test-analytics"),
    path("analytics/admin-dashboard/", admin_dashboard, name="admin-dashboard"),

    # Leaderboards
    path("leaderboards/global/", global_leaderboard, name="leaderboard-global"),
    path("leaderboards/batches/<int:batch_id>/", batch_leaderboard, name="leaderboard-batch"),
    path("leaderboards/tests/<int:test_id>/", test_leaderboard, name="leaderboard-test"),
    path("leaderboards/tests/<int:test_id>/rank/", test_rank, name="leaderboard-test-rank"),
]
