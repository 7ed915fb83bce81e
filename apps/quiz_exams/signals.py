"""
Keeps Exam.total_marks equal to the sum of its questions' marks.

Attempts snapshot total_marks at start, so it has to be current before
the next start or submit reads it.
"""
from django.db.models import Sum
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from .models import Exam, Question


def recompute_total_marks(exam_id):
    total = Question.objects.filter(exam_id=exam_id).aggregate(total=Sum('marks'))['total'] or 0
    Exam.objects.filter(pk=exam_id).update(total_marks=total)
    return total


@receiver(post_save, sender=Question)
def question_saved(sender, instance, **kwargs):
    recompute_total_marks(instance.exam_id)


@receiver(post_delete, sender=Question)
def question_deleted(sender, instance, **kwargs):
    # Also fires during an exam cascade delete; the update then matches no row
    recompute_total_marks(instance.exam_id)
