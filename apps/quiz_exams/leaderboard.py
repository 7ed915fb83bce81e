"""
Read-only leaderboard projection.

Ranks come straight from Attempt.rank as written by the ranking module;
this module orders by the same key but never assigns or writes a rank.
"""
from collections import namedtuple

from .ranking import STANDING_ORDER, submitted_attempts
from .services import ensure_fresh_standings, get_exam

Leaderboard = namedtuple('Leaderboard', ['exam', 'entries', 'requester_position', 'total_attempts'])


def get_leaderboard(exam_id, requesting_learner=None):
    exam = ensure_fresh_standings(get_exam(exam_id))

    entries = list(submitted_attempts(exam).order_by(*STANDING_ORDER))

    return Leaderboard(
        exam=exam,
        entries=entries,
        requester_position=find_requester_position(exam, requesting_learner),
        total_attempts=len(entries),
    )


def find_requester_position(exam, learner):
    """
    The learner's best standing on this exam, or None.

    A learner with several submitted attempts is represented by the
    highest-ranked one.
    """
    if learner is None or not learner.is_authenticated:
        return None

    return (
        submitted_attempts(exam)
        .filter(learner=learner)
        .order_by(*STANDING_ORDER)
        .first()
    )
