import uuid
from django.db import models
from django.contrib.auth.models import AbstractUser
from django.core.validators import MinValueValidator, MaxValueValidator
from django.utils import timezone


class User(AbstractUser):
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'users'
        indexes = [
            models.Index(fields=['email'], name='users_email_idx'),
        ]

    @property
    def display_name(self):
        return self.get_full_name() or self.username


class Exam(models.Model):
    """
    A timed quiz attached to a course schedule slot.

    total_marks is a derived value kept in sync with the question set by
    signals.recompute_total_marks. standings_stale is set when the rank and
    analytics recompute after a submission could not complete.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    title = models.CharField(max_length=255)
    course = models.CharField(max_length=100)
    month_number = models.PositiveIntegerField(
        default=1,
        validators=[MinValueValidator(1), MaxValueValidator(12)]
    )
    duration_minutes = models.IntegerField(
        default=30,
        validators=[MinValueValidator(1), MaxValueValidator(300)]
    )
    instructions = models.TextField(blank=True)
    total_marks = models.PositiveIntegerField(default=0, editable=False)
    is_active = models.BooleanField(default=True)
    standings_stale = models.BooleanField(default=False, editable=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'quiz_exams'
        ordering = ['course', 'month_number', '-created_at']
        indexes = [
            models.Index(fields=['course', 'month_number'], name='quiz_exams_course_month_idx'),
            models.Index(fields=['is_active'], name='quiz_exams_is_active_idx'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(duration_minutes__gt=0),
                name='chk_quiz_exams_duration_minutes'
            ),
        ]

    def __str__(self):
        return f"{self.course} - {self.title}"


class Question(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    EASY = 'EASY'
    MEDIUM = 'MEDIUM'
    HARD = 'HARD'
    DIFFICULTY_CHOICES = [
        (EASY, 'Easy'),
        (MEDIUM, 'Medium'),
        (HARD, 'Hard'),
    ]

    exam = models.ForeignKey(
        Exam,
        on_delete=models.CASCADE,
        related_name='questions'
    )
    question_text = models.TextField()
    options = models.JSONField(default=list)
    # Not checked against options; a mismatch makes the question unanswerable
    correct_answer = models.TextField()
    marks = models.IntegerField(default=1, validators=[MinValueValidator(1)])
    difficulty = models.CharField(
        max_length=10,
        choices=DIFFICULTY_CHOICES,
        default=MEDIUM
    )
    order = models.IntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'quiz_exam_questions'
        ordering = ['exam', 'order', 'created_at']
        indexes = [
            models.Index(fields=['exam', 'order'], name='quiz_questions_exam_order_idx'),
            models.Index(fields=['difficulty'], name='quiz_questions_difficulty_idx'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(marks__gt=0),
                name='chk_quiz_questions_marks'
            ),
        ]

    def __str__(self):
        return f"Q{self.order}: {self.question_text[:50]}"


class Attempt(models.Model):
    """
    One learner's run at an exam.

    Active while submitted_at is null, Submitted once it is set. The
    conditional unique constraint allows a single active attempt per
    learner and exam; any number of submitted ones may pile up behind it.
    details is the per-question audit record written at submission.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    exam = models.ForeignKey(
        Exam,
        on_delete=models.CASCADE,
        related_name='attempts'
    )
    learner = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='quiz_attempts'
    )
    score = models.IntegerField(default=0)
    total_marks = models.IntegerField(default=0)
    percentage = models.FloatField(default=0.0)
    started_at = models.DateTimeField(default=timezone.now)
    submitted_at = models.DateTimeField(null=True, blank=True)
    rank = models.PositiveIntegerField(null=True, blank=True)
    details = models.JSONField(default=dict, blank=True)

    class Meta:
        db_table = 'quiz_exam_attempts'
        ordering = ['-started_at']
        constraints = [
            models.UniqueConstraint(
                fields=['exam', 'learner'],
                condition=models.Q(submitted_at__isnull=True),
                name='unique_active_attempt_per_learner'
            ),
            models.CheckConstraint(
                condition=models.Q(score__gte=0),
                name='chk_quiz_attempts_score'
            ),
            models.CheckConstraint(
                condition=models.Q(percentage__gte=0.0, percentage__lte=100.0),
                name='chk_quiz_attempts_percentage'
            ),
            models.CheckConstraint(
                condition=(
                    models.Q(submitted_at__isnull=True)
                    | models.Q(submitted_at__gte=models.F('started_at'))
                ),
                name='chk_quiz_attempts_submitted_after_started'
            ),
            models.CheckConstraint(
                condition=models.Q(rank__isnull=True) | models.Q(rank__gt=0),
                name='chk_quiz_attempts_rank'
            ),
        ]
        # Leaderboard and ranking both scan submitted attempts of one exam
        indexes = [
            models.Index(
                fields=['exam', '-percentage', 'submitted_at'],
                name='quiz_attempts_standing_idx'
            ),
            models.Index(fields=['learner', '-started_at'], name='quiz_attempts_learner_idx'),
            models.Index(fields=['exam', 'learner'], name='quiz_attempts_exam_learner_idx'),
        ]

    @property
    def is_active(self):
        return self.submitted_at is None

    def __str__(self):
        return f"{self.learner.username} - {self.exam.title}"


class AnalyticsSummary(models.Model):
    """
    Cached aggregate over the submitted attempts of one exam.
    Every field can be rebuilt from Attempt rows; see analytics.rebuild_analytics.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    exam = models.OneToOneField(
        Exam,
        on_delete=models.CASCADE,
        related_name='analytics'
    )
    average_percentage = models.FloatField(default=0.0)
    highest_percentage = models.FloatField(default=0.0)
    lowest_percentage = models.FloatField(default=0.0)
    total_attempts = models.PositiveIntegerField(default=0)
    topper = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='topped_exams'
    )
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'quiz_exam_analytics'
        constraints = [
            models.CheckConstraint(
                condition=(
                    models.Q(lowest_percentage__lte=models.F('average_percentage'))
                    & models.Q(average_percentage__lte=models.F('highest_percentage'))
                ),
                name='chk_quiz_analytics_score_consistency'
            ),
        ]

    def __str__(self):
        return f"Analytics for {self.exam.title}"
