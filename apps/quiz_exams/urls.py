from django.urls import path
from .views import (
    ExamListView,
    ExamDetailView,
    QuestionCreateView,
    QuestionDetailView,
    AttemptStartView,
    AttemptSubmitView,
    ExamAnalyticsView,
    LeaderboardView,
    AttemptListView,
    AttemptDetailView,
)

urlpatterns = [
    # Exams and questions
    path('exams/', ExamListView.as_view(), name='exam-list'),
    path('exams/<uuid:pk>/', ExamDetailView.as_view(), name='exam-detail'),
    path('exams/<uuid:pk>/questions/', QuestionCreateView.as_view(), name='question-create'),
    path('questions/<uuid:pk>/', QuestionDetailView.as_view(), name='question-detail'),

    # Attempt lifecycle
    path('exams/<uuid:pk>/start/', AttemptStartView.as_view(), name='attempt-start'),
    path('exams/<uuid:pk>/submit/', AttemptSubmitView.as_view(), name='attempt-submit'),

    # Standings
    path('exams/<uuid:pk>/analytics/', ExamAnalyticsView.as_view(), name='exam-analytics'),
    path('exams/<uuid:pk>/leaderboard/', LeaderboardView.as_view(), name='exam-leaderboard'),

    # Learner history
    path('attempts/mine/', AttemptListView.as_view(), name='attempt-list'),
    path('attempts/<uuid:pk>/', AttemptDetailView.as_view(), name='attempt-detail'),
]
