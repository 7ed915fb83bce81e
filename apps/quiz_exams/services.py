"""
Attempt lifecycle: start, submit, and the standings recompute that follows
every submission.

Submissions for one exam are serialized by exam_critical_section: a
process-local lock per exam plus a row lock on the exam inside a single
transaction. The score write, rank recompute and analytics rebuild all
commit together, so nobody can observe a scored attempt without its rank
unless the recompute itself gave up (standings_stale).
"""
import logging
import threading
import weakref
from collections import namedtuple
from collections.abc import Mapping
from contextlib import contextmanager

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import DatabaseError, transaction
from django.utils import timezone

from .analytics import rebuild_analytics
from .exceptions import (
    ConcurrencyConflict,
    InactiveExam,
    InvalidAnswerPayload,
    NoActiveAttempt,
    NotFound,
)
from .models import AnalyticsSummary, Attempt, Exam
from .ranking import recompute_ranks
from .scoring import score_submission

logger = logging.getLogger(__name__)

SubmissionResult = namedtuple('SubmissionResult', ['attempt', 'rank', 'details'])

# Locks live only while some caller holds them
_registry_lock = threading.Lock()
_exam_locks = weakref.WeakValueDictionary()


def _lock_for(exam_id):
    key = str(exam_id)
    with _registry_lock:
        lock = _exam_locks.get(key)
        if lock is None:
            lock = threading.Lock()
            _exam_locks[key] = lock
        return lock


@contextmanager
def exam_critical_section(exam_id):
    """
    Yields the exam row locked for update inside a transaction.
    Different exams get different locks and never wait on each other.
    Unknown exams raise NotFound before any lock is created.
    """
    exam_id = get_exam(exam_id).pk

    with _lock_for(exam_id):
        with transaction.atomic():
            exam = Exam.objects.select_for_update().filter(pk=exam_id).first()
            if exam is None:
                raise NotFound('Quiz not found')
            yield exam


def get_exam(exam_id):
    try:
        exam = Exam.objects.filter(pk=exam_id).first()
    except ValidationError:
        exam = None
    if exam is None:
        raise NotFound('Quiz not found')
    return exam


def active_attempt(exam_id, learner):
    return Attempt.objects.filter(
        exam_id=exam_id,
        learner=learner,
        submitted_at__isnull=True,
    ).first()


def start_attempt(exam_id, learner):
    """
    Returns (attempt, created).

    Re-entering an exam hands back the live attempt untouched so the timer
    is not reset. Only when there is none do the existence and active
    checks apply.
    """
    existing = active_attempt(exam_id, learner)
    if existing is not None:
        logger.info("Resumed attempt %s for learner %s", existing.pk, learner.pk)
        return existing, False

    exam = get_exam(exam_id)
    if not exam.is_active:
        raise InactiveExam()

    # The conditional unique constraint turns a concurrent double start
    # into an IntegrityError, which get_or_create resolves into a lookup.
    attempt, created = Attempt.objects.get_or_create(
        exam=exam,
        learner=learner,
        submitted_at=None,
        defaults={
            'total_marks': exam.total_marks,
            'started_at': timezone.now(),
        },
    )

    if created:
        logger.info("Started attempt %s on exam %s for learner %s", attempt.pk, exam.pk, learner.pk)
    return attempt, created


def validate_answers(answers):
    """Answers must be a mapping of question id strings to answer strings."""
    if not isinstance(answers, Mapping):
        raise InvalidAnswerPayload()

    for question_id, answer in answers.items():
        if not isinstance(question_id, str):
            raise InvalidAnswerPayload(f'Question id {question_id!r} must be a string')
        if not isinstance(answer, str):
            raise InvalidAnswerPayload(f'Answer for question {question_id} must be a string')

    return dict(answers)


def submit_attempt(exam_id, learner, answers):
    """
    Scores the learner's active attempt and re-ranks the exam.

    Returns SubmissionResult(attempt, rank, details). rank is None only if
    the standings recompute exhausted its retries, in which case the score
    is still saved and the exam is flagged for a rebuild on next read.
    """
    answers = validate_answers(answers)

    with exam_critical_section(exam_id) as exam:
        attempt = (
            Attempt.objects.select_for_update()
            .filter(exam=exam, learner=learner, submitted_at__isnull=True)
            .first()
        )
        if attempt is None:
            raise NoActiveAttempt()

        result = score_submission(exam.questions.all(), answers)

        attempt.score = result.score
        attempt.total_marks = result.total_marks
        attempt.percentage = result.percentage
        attempt.details = result.details
        attempt.submitted_at = max(timezone.now(), attempt.started_at)
        attempt.save(update_fields=[
            'score', 'total_marks', 'percentage', 'details', 'submitted_at'
        ])

        recompute_standings(exam)
        attempt.refresh_from_db(fields=['rank'])

    logger.info(
        "Attempt %s submitted: %s/%s (%.2f%%), rank %s",
        attempt.pk, attempt.score, attempt.total_marks, attempt.percentage, attempt.rank,
    )
    return SubmissionResult(attempt=attempt, rank=attempt.rank, details=result.details)


def recompute_standings(exam):
    """
    Re-ranks every submitted attempt and rebuilds the analytics row.

    Caller must hold exam_critical_section for this exam. Each try runs in
    its own savepoint so a failed one leaves nothing behind. Returns True on
    success; on exhaustion marks the exam stale and returns False.
    """
    max_retries = getattr(settings, 'QUIZ_STANDINGS_MAX_RETRIES', 3)

    for try_number in range(1, max_retries + 1):
        try:
            with transaction.atomic():
                ranked = recompute_ranks(exam)
                rebuild_analytics(exam, ranked)
                if exam.standings_stale:
                    Exam.objects.filter(pk=exam.pk).update(standings_stale=False)
                    exam.standings_stale = False
            return True
        except (ConcurrencyConflict, DatabaseError) as exc:
            logger.warning(
                "Standings recompute for exam %s failed (try %s/%s): %s",
                exam.pk, try_number, max_retries, exc,
            )

    logger.error("Standings for exam %s left stale after %s tries", exam.pk, max_retries)
    Exam.objects.filter(pk=exam.pk).update(standings_stale=True)
    exam.standings_stale = True
    return False


def ensure_fresh_standings(exam):
    """Rebuilds standings before a read if an earlier recompute gave up."""
    if not exam.standings_stale:
        return exam

    with exam_critical_section(exam.pk) as locked:
        if locked.standings_stale:
            logger.info("Refreshing stale standings for exam %s", locked.pk)
            recompute_standings(locked)
    return locked


def get_analytics(exam_id):
    exam = ensure_fresh_standings(get_exam(exam_id))

    summary = (
        AnalyticsSummary.objects.select_related('exam', 'topper')
        .filter(exam=exam)
        .first()
    )
    if summary is None:
        raise NotFound('Analytics not found')
    return summary
