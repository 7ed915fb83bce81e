"""
Analytics cache: one AnalyticsSummary row per exam, rebuilt from scratch
after every submission using the freshly ranked attempt list.
"""
import logging

from .models import AnalyticsSummary

logger = logging.getLogger(__name__)


def summarize(ranked_attempts):
    """
    Aggregates an already rank-ordered attempt list.
    Returns None for an empty list so callers never write degenerate zeros.
    """
    if not ranked_attempts:
        return None

    percentages = [attempt.percentage for attempt in ranked_attempts]
    highest = max(percentages)
    lowest = min(percentages)
    average = sum(percentages) / len(percentages)

    return {
        'total_attempts': len(ranked_attempts),
        # float summation can drift a hair outside [lowest, highest]
        'average_percentage': min(max(average, lowest), highest),
        'highest_percentage': highest,
        'lowest_percentage': lowest,
        'topper': ranked_attempts[0].learner,
    }


def rebuild_analytics(exam, ranked_attempts):
    """Upserts the exam's summary; leaves any existing row alone when there is nothing to summarize."""
    values = summarize(ranked_attempts)

    if values is None:
        logger.debug("No submitted attempts for exam %s, analytics left as is", exam.pk)
        return AnalyticsSummary.objects.filter(exam=exam).first()

    summary, _ = AnalyticsSummary.objects.update_or_create(
        exam=exam,
        defaults=values,
    )
    return summary
