from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..access import ensure_can_view_user, require_admin, require_caller
from ..services import achievement_service, analytics_service
from .utils import date_param, int_param


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def student_analytics(request, user_id):
    """
    Totals, average score and subject-wise performance across the student's
    first attempts at tests whose answer key is published.
    """
    target = ensure_can_view_user(require_caller(request.user), user_id)
    return Response(analytics_service.get_student_analytics(target))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def performance_trend(request, user_id):
    target = ensure_can_view_user(require_caller(request.user), user_id)
    limit = int_param(request, 'limit')
    return Response(analytics_service.get_performance_trend(target, limit))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def activity_heatmap(request, user_id):
    """Per-day attempt count and score total; optional `start_date`/`end_date` (YYYY-MM-DD)."""
    target = ensure_can_view_user(require_caller(request.user), user_id)
    start = date_param(request, 'start_date', 'startDate')
    end = date_param(request, 'end_date', 'endDate')
    return Response(analytics_service.get_activity_heatmap(target, start, end))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def student_achievements(request, user_id):
    target = ensure_can_view_user(require_caller(request.user), user_id)
    return Response(achievement_service.get_student_achievements(target))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def public_profile(request, user_id):
    caller = require_caller(request.user)
    return Response(analytics_service.get_public_student_analytics(caller, user_id))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def test_analytics(request, test_id):
    admin = require_admin(request.user)
    return Response(analytics_service.get_test_analytics(admin, test_id))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def admin_dashboard(request):
    admin = require_admin(request.user)
    return Response(analytics_service.get_admin_dashboard(admin))
