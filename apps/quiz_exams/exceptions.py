"""
Error taxonomy for the attempt engine.

Every engine error is a DRF APIException so the service layer can raise it
directly and views get the right status code for free. The handler below
renders them in the same {'error': ...} shape the rest of the API uses.
"""
import logging

from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class QuizExamError(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Quiz exam request could not be processed.'
    default_code = 'quiz_exam_error'


class NotFound(QuizExamError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Not found.'
    default_code = 'not_found'


class InactiveExam(QuizExamError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Quiz is not active.'
    default_code = 'inactive_exam'


class NoActiveAttempt(QuizExamError):
    """Submit without a live attempt: never started, or already submitted."""
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'No active attempt found.'
    default_code = 'no_active_attempt'


class InvalidAnswerPayload(QuizExamError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Answers must map question ids to answer strings.'
    default_code = 'invalid_answer_payload'


class ConcurrencyConflict(QuizExamError):
    """
    Raised inside the standings recompute when it lost a race.
    The submit flow retries on it and never lets it reach a client.
    """
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Standings changed during recompute.'
    default_code = 'concurrency_conflict'


def quiz_exception_handler(exc, context):
    response = exception_handler(exc, context)

    if response is None:
        return None

    view = context.get('view')
    logger.warning(
        "%s rejected with %s: %s",
        view.__class__.__name__ if view else 'request',
        response.status_code,
        exc,
    )

    if isinstance(exc, QuizExamError):
        response.data = {
            'error': exc.detail if isinstance(exc.detail, (dict, list)) else str(exc.detail),
            'code': exc.default_code,
        }

    return response
