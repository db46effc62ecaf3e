from rest_framework import serializers

from .models import Attempt, AttemptAnswer, Test

# Hidden from non-admins until the test's answer key is published
SCORING_FIELDS = ('score', 'correct', 'incorrect', 'unanswered', 'percentage')


def _viewer_is_admin(context):
    request = context.get('request')
    user = getattr(request, 'user', None)
    return bool(getattr(user, 'is_admin', False))


class TestSummarySerializer(serializers.ModelSerializer):
    question_count = serializers.IntegerField(read_only=True)

    class Meta:
        model = Test
        fields = [
            'id', 'title', 'description', 'question_ids', 'question_count',
            'duration_minutes', 'total_marks', 'negative_marking', 'status',
            'answer_key_published',
        ]


class AttemptAnswerSerializer(serializers.ModelSerializer):
    question_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = AttemptAnswer
        fields = ['question_id', 'selected_options', 'answered_at']


class AttemptSerializer(serializers.ModelSerializer):
    """Attempt with scoring fields redacted for non-admins while the answer key is secret."""
    user_id = serializers.CharField(read_only=True)
    test_id = serializers.IntegerField(read_only=True)
    time_taken_seconds = serializers.IntegerField(read_only=True)

    class Meta:
        model = Attempt
        fields = [
            'id', 'user_id', 'test_id', 'status', 'score', 'total_questions',
            'correct', 'incorrect', 'unanswered', 'started_at', 'submitted_at',
            'time_taken_seconds',
        ]

    def to_representation(self, instance):
        data = super().to_representation(instance)
        data['answer_key_published'] = instance.test.answer_key_published
        if not instance.test.answer_key_published and not _viewer_is_admin(self.context):
            for field in SCORING_FIELDS:
                if field in data:
                    data[field] = None
        return data


class AttemptListSerializer(AttemptSerializer):
    """Attempt row enriched with test title, total marks and percentage."""
    test_title = serializers.CharField(source='test.title', read_only=True)
    total_marks = serializers.FloatField(source='test.total_marks', read_only=True)
    percentage = serializers.SerializerMethodField()

    class Meta(AttemptSerializer.Meta):
        fields = AttemptSerializer.Meta.fields + ['test_title', 'total_marks', 'percentage']

    def get_percentage(self, obj):
        if not obj.test.total_marks:
            return 0
        return round((obj.score / obj.test.total_marks) * 100, 1)


class AttemptDetailSerializer(AttemptSerializer):
    test = TestSummarySerializer(read_only=True)
    answers = AttemptAnswerSerializer(many=True, read_only=True)

    class Meta(AttemptSerializer.Meta):
        fields = AttemptSerializer.Meta.fields + ['test', 'answers']


class StartAttemptSerializer(serializers.Serializer):
    test_id = serializers.IntegerField()
    force_new = serializers.BooleanField(required=False, default=False)


class SaveAnswerSerializer(serializers.Serializer):
    question_id = serializers.IntegerField()
    selected_options = serializers.ListField(child=serializers.IntegerField(), allow_empty=True)
