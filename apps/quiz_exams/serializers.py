from rest_framework import serializers
from django.contrib.auth import get_user_model
from .models import Exam, Question, Attempt, AnalyticsSummary

User = get_user_model()


class LearnerSerializer(serializers.ModelSerializer):
    """Public identity only. Never expose email on leaderboards."""
    name = serializers.CharField(source='display_name', read_only=True)

    class Meta:
        model = User
        fields = ['id', 'username', 'name']


class QuestionSerializer(serializers.ModelSerializer):
    """
    Public question view - excludes correct_answer.
    Learners must never see answers before submission.
    """
    class Meta:
        model = Question
        fields = ['id', 'question_text', 'options', 'marks', 'difficulty', 'order']


class QuestionDetailSerializer(serializers.ModelSerializer):
    """
    Staff view - includes correct_answer and is writable.
    The exam comes from the URL on create and cannot be moved afterwards.
    """
    options = serializers.ListField(
        child=serializers.CharField(trim_whitespace=False),
        min_length=2
    )
    correct_answer = serializers.CharField(trim_whitespace=False)

    class Meta:
        model = Question
        fields = ['id', 'exam', 'question_text', 'options', 'correct_answer',
                  'marks', 'difficulty', 'order', 'created_at']
        read_only_fields = ['id', 'exam', 'created_at']


class ExamListSerializer(serializers.ModelSerializer):
    """Lightweight exam listing for browse view."""
    question_count = serializers.SerializerMethodField()

    class Meta:
        model = Exam
        fields = ['id', 'title', 'course', 'month_number', 'duration_minutes',
                  'instructions', 'total_marks', 'is_active', 'question_count', 'created_at']
        read_only_fields = ['id', 'total_marks', 'created_at']

    def get_question_count(self, obj):
        return obj.questions.count()


class ExamDetailSerializer(serializers.ModelSerializer):
    """Full exam with questions for take-exam view."""
    questions = QuestionSerializer(many=True, read_only=True)

    class Meta:
        model = Exam
        fields = ['id', 'title', 'course', 'month_number', 'duration_minutes',
                  'instructions', 'total_marks', 'is_active', 'questions', 'created_at']
        read_only_fields = ['id', 'total_marks', 'created_at']


class ExamAdminDetailSerializer(ExamDetailSerializer):
    questions = QuestionDetailSerializer(many=True, read_only=True)


class StrictCharField(serializers.CharField):
    """CharField that refuses numbers and booleans instead of casting them."""
    default_error_messages = {
        'not_a_string': 'Answers must be strings.',
    }

    def to_internal_value(self, data):
        if not isinstance(data, str):
            self.fail('not_a_string')
        return super().to_internal_value(data)


class AnswerSubmissionSerializer(serializers.Serializer):
    """
    Validates the submit payload: {"answers": {question_id: answer}}.
    Answers are compared verbatim, so whitespace is kept.
    """
    answers = serializers.DictField(
        child=StrictCharField(allow_blank=True, trim_whitespace=False)
    )


class AttemptSerializer(serializers.ModelSerializer):
    exam_title = serializers.CharField(source='exam.title', read_only=True)
    duration_minutes = serializers.IntegerField(source='exam.duration_minutes', read_only=True)
    status = serializers.SerializerMethodField()

    class Meta:
        model = Attempt
        fields = ['id', 'exam', 'exam_title', 'duration_minutes', 'status',
                  'score', 'total_marks', 'percentage', 'rank',
                  'started_at', 'submitted_at']

    def get_status(self, obj):
        return 'active' if obj.is_active else 'submitted'


class AttemptDetailSerializer(AttemptSerializer):
    """Attempt with its per-question audit record."""

    class Meta(AttemptSerializer.Meta):
        fields = AttemptSerializer.Meta.fields + ['details']


class LeaderboardEntrySerializer(serializers.ModelSerializer):
    learner = LearnerSerializer(read_only=True)

    class Meta:
        model = Attempt
        fields = ['id', 'rank', 'learner', 'score', 'total_marks',
                  'percentage', 'submitted_at']


class AnalyticsSummarySerializer(serializers.ModelSerializer):
    exam_title = serializers.CharField(source='exam.title', read_only=True)
    topper = LearnerSerializer(read_only=True)

    class Meta:
        model = AnalyticsSummary
        fields = ['exam', 'exam_title', 'average_percentage', 'highest_percentage',
                  'lowest_percentage', 'total_attempts', 'topper', 'updated_at']
