from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..access import require_caller
from ..services import leaderboard_service
from .utils import int_param, query_param


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def global_leaderboard(request):
    """Organization-wide ranking by total score. Optional `limit`."""
    caller = require_caller(request.user)
    return Response(leaderboard_service.get_global_leaderboard(caller, int_param(request, 'limit')))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def batch_leaderboard(request, batch_id):
    caller = require_caller(request.user)
    return Response(leaderboard_service.get_batch_leaderboard(caller, batch_id, int_param(request, 'limit')))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def test_leaderboard(request, test_id):
    caller = require_caller(request.user)
    return Response(leaderboard_service.get_test_leaderboard(caller, test_id))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def test_rank(request, test_id):
    """Rank of `user_id` (default: caller) on one test."""
    caller = require_caller(request.user)
    user_id = query_param(request, 'user_id', 'userId')
    return Response(leaderboard_service.get_user_test_rank(caller, test_id, user_id))
