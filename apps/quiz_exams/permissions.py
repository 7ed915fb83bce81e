from rest_framework import permissions


class IsAttemptOwner(permissions.BasePermission):
    """
    Only allow learners to access their own attempts.

    The detail blob holds correct answers, so another learner's attempt is
    off limits even after submission.
    """

    def has_object_permission(self, request, view, obj):
        return obj.learner_id == request.user.id


class IsStaffOrReadOnly(permissions.BasePermission):
    """Learners browse exams; only staff manage them."""

    def has_permission(self, request, view):
        if request.method in permissions.SAFE_METHODS:
            return True
        return bool(request.user and request.user.is_staff)
