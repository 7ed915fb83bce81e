from rest_framework import status, generics
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated, IsAdminUser
from django.shortcuts import get_object_or_404
from django.utils.cache import add_never_cache_headers
from drf_spectacular.utils import extend_schema

from .models import Exam, Question, Attempt
from .serializers import (
    ExamListSerializer,
    ExamDetailSerializer,
    ExamAdminDetailSerializer,
    QuestionDetailSerializer,
    AnswerSubmissionSerializer,
    AttemptSerializer,
    AttemptDetailSerializer,
    LeaderboardEntrySerializer,
    AnalyticsSummarySerializer,
)
from .exceptions import InvalidAnswerPayload
from .leaderboard import get_leaderboard
from .permissions import IsAttemptOwner, IsStaffOrReadOnly
from .services import start_attempt, submit_attempt, get_analytics


def _visible_exams(user):
    queryset = Exam.objects.prefetch_related('questions')
    if user.is_staff:
        return queryset
    return queryset.filter(is_active=True)


@extend_schema(tags=['Exams'])
class ExamListView(generics.ListCreateAPIView):
    """
    Browse exams; staff can also create them.
    Optional filters: ?course=, ?month_number=, ?is_active=
    """
    permission_classes = [IsAuthenticated, IsStaffOrReadOnly]
    serializer_class = ExamListSerializer

    def get_queryset(self):
        queryset = _visible_exams(self.request.user)
        params = self.request.query_params

        if params.get('course'):
            queryset = queryset.filter(course=params['course'])
        if params.get('month_number', '').isdigit():
            queryset = queryset.filter(month_number=int(params['month_number']))
        if params.get('is_active') in ('true', 'false'):
            queryset = queryset.filter(is_active=params['is_active'] == 'true')

        return queryset


@extend_schema(tags=['Exams'])
class ExamDetailView(generics.RetrieveUpdateDestroyAPIView):
    permission_classes = [IsAuthenticated, IsStaffOrReadOnly]
    lookup_field = 'pk'

    def get_queryset(self):
        return _visible_exams(self.request.user)

    def get_serializer_class(self):
        if self.request.user.is_staff:
            return ExamAdminDetailSerializer
        return ExamDetailSerializer


@extend_schema(tags=['Exams'])
class QuestionCreateView(generics.CreateAPIView):
    """Adds a question to an exam; total_marks follows via signals."""
    permission_classes = [IsAdminUser]
    serializer_class = QuestionDetailSerializer

    def perform_create(self, serializer):
        exam = get_object_or_404(Exam, pk=self.kwargs['pk'])
        serializer.save(exam=exam)


@extend_schema(tags=['Exams'])
class QuestionDetailView(generics.RetrieveUpdateDestroyAPIView):
    permission_classes = [IsAdminUser]
    serializer_class = QuestionDetailSerializer
    queryset = Question.objects.select_related('exam').all()
    lookup_field = 'pk'


class AttemptStartView(APIView):
    """
    Start, or resume, the learner's attempt.
    201 for a new attempt, 200 when an active one is handed back.
    """
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=['Attempts'], request=None, responses=AttemptSerializer)
    def post(self, request, pk):
        attempt, created = start_attempt(pk, request.user)
        return Response(
            AttemptSerializer(attempt).data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK
        )


class AttemptSubmitView(APIView):
    """
    Submit answers for the learner's active attempt.

    Identity comes from request.user, never from the payload. Scoring,
    ranking and analytics happen in one go inside submit_attempt.
    """
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=['Attempts'], request=AnswerSubmissionSerializer)
    def post(self, request, pk):
        serializer = AnswerSubmissionSerializer(data=request.data)

        if not serializer.is_valid():
            raise InvalidAnswerPayload(serializer.errors)

        result = submit_attempt(pk, request.user, serializer.validated_data['answers'])

        return Response({
            'attempt': AttemptSerializer(result.attempt).data,
            'rank': result.rank,
            'question_results': result.details,
        })


class ExamAnalyticsView(APIView):
    permission_classes = [IsAdminUser]

    @extend_schema(tags=['Standings'], responses=AnalyticsSummarySerializer)
    def get(self, request, pk):
        summary = get_analytics(pk)
        return Response(AnalyticsSummarySerializer(summary).data)


class LeaderboardView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=['Standings'])
    def get(self, request, pk):
        board = get_leaderboard(pk, request.user)

        position = None
        if board.requester_position is not None:
            position = LeaderboardEntrySerializer(board.requester_position).data

        response = Response({
            'exam': board.exam.pk,
            'entries': LeaderboardEntrySerializer(board.entries, many=True).data,
            'requester_position': position,
            'total_attempts': board.total_attempts,
        })
        # Standings move with every submission
        add_never_cache_headers(response)
        return response


@extend_schema(tags=['Attempts'])
class AttemptListView(generics.ListAPIView):
    """
    List the learner's own attempts, newest first.
    select_related('exam') prevents N+1 on exam lookups.
    """
    permission_classes = [IsAuthenticated]
    serializer_class = AttemptSerializer

    def get_queryset(self):
        return Attempt.objects.filter(
            learner=self.request.user
        ).select_related('exam').order_by('-started_at')


@extend_schema(tags=['Attempts'])
class AttemptDetailView(generics.RetrieveAPIView):
    permission_classes = [IsAuthenticated, IsAttemptOwner]
    serializer_class = AttemptDetailSerializer
    lookup_field = 'pk'

    def get_queryset(self):
        return Attempt.objects.select_related('exam', 'learner')
