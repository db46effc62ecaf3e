from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..access import ensure_can_view_user, require_caller
from ..serializers import (
    AttemptAnswerSerializer, AttemptDetailSerializer, AttemptListSerializer,
    AttemptSerializer, SaveAnswerSerializer, StartAttemptSerializer,
)
from ..services import attempt_service
from .utils import int_param, query_param


class AttemptViewSet(viewsets.GenericViewSet):
    """
    API endpoint for test attempts.

    Attempts are always created for and modified by the authenticated caller.
    Reads of another user's attempts require admin role in the same organization.
    """
    serializer_class = AttemptSerializer
    permission_classes = [IsAuthenticated]

    def list(self, request):
        """Attempts of `user_id` (default: caller), newest first."""
        caller = require_caller(request.user)
        user_id = query_param(request, 'user_id', 'userId') or caller.user_id
        target = ensure_can_view_user(caller, user_id)

        queryset = attempt_service.list_attempts_for_user(target)
        page = self.paginate_queryset(queryset)
        if page is not None:
            serializer = AttemptListSerializer(page, many=True, context=self.get_serializer_context())
            return self.get_paginated_response(serializer.data)

        serializer = AttemptListSerializer(queryset, many=True, context=self.get_serializer_context())
        return Response(serializer.data)

    def retrieve(self, request, pk=None):
        caller = require_caller(request.user)
        attempt = attempt_service.get_attempt_with_details(caller, pk)
        serializer = AttemptDetailSerializer(attempt, context=self.get_serializer_context())
        return Response(serializer.data)

    def create(self, request):
        """Start (or resume) an attempt at `test_id`. Pass `force_new` to abandon a stale one."""
        caller = require_caller(request.user)
        serializer = StartAttemptSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = attempt_service.start_attempt(
            caller,
            serializer.validated_data['test_id'],
            force_new=serializer.validated_data['force_new'],
        )

        data = AttemptSerializer(result.attempt, context=self.get_serializer_context()).data
        data['resumed'] = not result.created
        data['force_submitted_attempt_id'] = result.force_submitted_id
        return Response(data, status=status.HTTP_201_CREATED if result.created else status.HTTP_200_OK)

    @action(detail=True, methods=['post'], url_path='save-answer')
    def save_answer(self, request, pk=None):
        caller = require_caller(request.user)
        serializer = SaveAnswerSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        answer = attempt_service.save_answer(
            caller,
            pk,
            serializer.validated_data['question_id'],
            serializer.validated_data['selected_options'],
        )
        return Response(AttemptAnswerSerializer(answer).data)

    @action(detail=True, methods=['post'])
    def submit(self, request, pk=None):
        caller = require_caller(request.user)
        result = attempt_service.submit_attempt(caller, pk)

        data = AttemptSerializer(result.attempt, context=self.get_serializer_context()).data
        data['is_late'] = result.is_late
        return Response(data)

    @action(detail=True, methods=['get'])
    def breakdown(self, request, pk=None):
        caller = require_caller(request.user)
        return Response(attempt_service.get_attempt_breakdown(caller, pk))

    @action(detail=False, methods=['get'])
    def current(self, request):
        """Resume check for the caller: in-progress attempt at `test_id`, else the latest, else 204."""
        caller = require_caller(request.user)
        test_id = int_param(request, 'test_id', 'testId', required=True)

        attempt = attempt_service.get_attempt_for_user_and_test(caller, test_id)
        if attempt is None:
            return Response(status=status.HTTP_204_NO_CONTENT)
        return Response(AttemptSerializer(attempt, context=self.get_serializer_context()).data)
