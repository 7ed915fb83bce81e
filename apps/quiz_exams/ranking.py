"""
Rank assignment over the submitted attempts of one exam.

Ranks are always recomputed from the full submitted set, never patched in
place, so running it twice gives the same answer. Order is percentage
descending, then earliest submission, then attempt id for identical
timestamps. Ties on percentage still get distinct consecutive ranks.
"""
from .exceptions import ConcurrencyConflict
from .models import Attempt

# Same order as ranking_key, expressed for the ORM
STANDING_ORDER = ('-percentage', 'submitted_at', 'id')


def ranking_key(attempt):
    return (-attempt.percentage, attempt.submitted_at, str(attempt.id))


def order_attempts(attempts):
    return sorted(attempts, key=ranking_key)


def compute_ranks(attempts):
    """Pairs each attempt with its 1-based position in the total order."""
    return [
        (attempt, position)
        for position, attempt in enumerate(order_attempts(attempts), start=1)
    ]


def submitted_attempts(exam):
    return Attempt.objects.filter(
        exam=exam,
        submitted_at__isnull=False,
    ).select_related('learner')


def recompute_ranks(exam):
    """
    Rewrites Attempt.rank for every submitted attempt of the exam.

    Must run inside the exam's critical section. Returns the attempts in
    rank order so the analytics rebuild sees exactly the same set.
    Raises ConcurrencyConflict if the submitted set changed while ranking.
    """
    attempts = list(submitted_attempts(exam))
    ranked = compute_ranks(attempts)

    changed = []
    for attempt, position in ranked:
        if attempt.rank != position:
            attempt.rank = position
            changed.append(attempt)

    if changed:
        Attempt.objects.bulk_update(changed, ['rank'])

    if submitted_attempts(exam).count() != len(ranked):
        raise ConcurrencyConflict(
            f"Submitted attempts for exam {exam.pk} changed during ranking"
        )

    return [attempt for attempt, _ in ranked]
