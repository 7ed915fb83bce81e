"""
Tests covering the attempt engine and its API.

Tests On:
- Scoring accuracy and edge cases
- Attempt lifecycle (idempotent start, single submit)
- Rank ordering and analytics consistency
- Standings recompute retries and stale rebuilds
- Concurrent submissions to one exam
- Permissions and payload validation over HTTP
"""
import threading
import uuid
from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta
from io import StringIO
from types import SimpleNamespace
from unittest import mock

from django.contrib.auth import get_user_model
from django.core.management import call_command
from django.core.management.base import CommandError
from django.db import connection
from django.test import SimpleTestCase, TestCase, TransactionTestCase
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from .analytics import rebuild_analytics, summarize
from .exceptions import (
    ConcurrencyConflict,
    InactiveExam,
    InvalidAnswerPayload,
    NoActiveAttempt,
    NotFound,
)
from .leaderboard import get_leaderboard
from .models import AnalyticsSummary, Attempt, Exam, Question
from .ranking import compute_ranks, recompute_ranks
from .scoring import ExactMatchScorer, score_submission
from .services import _exam_locks, _lock_for, get_analytics, start_attempt, submit_attempt

User = get_user_model()


def make_exam(questions=((5, 'A'), (5, 'B')), **kwargs):
    """Creates an exam with one question per (marks, correct_answer) pair."""
    fields = {'title': 'Weekly Quiz', 'course': 'CS101', 'duration_minutes': 30}
    fields.update(kwargs)
    exam = Exam.objects.create(**fields)

    created = [
        Question.objects.create(
            exam=exam,
            question_text=f'Question {order}',
            options=['A', 'B', 'C', 'D'],
            correct_answer=answer,
            marks=marks,
            order=order
        )
        for order, (marks, answer) in enumerate(questions, start=1)
    ]

    exam.refresh_from_db()
    return exam, created


def answers_for(questions, *values):
    return {str(question.id): value for question, value in zip(questions, values)}


class ScoringTestCase(SimpleTestCase):
    """Scoring is pure, so unsaved questions are enough."""

    def setUp(self):
        self.q1 = Question(id=uuid.uuid4(), correct_answer='A', marks=5)
        self.q2 = Question(id=uuid.uuid4(), correct_answer='B', marks=5)

    def test_half_right_scores_fifty_percent(self):
        result = score_submission(
            [self.q1, self.q2],
            {str(self.q1.id): 'A', str(self.q2.id): 'C'}
        )

        self.assertEqual(result.score, 5)
        self.assertEqual(result.total_marks, 10)
        self.assertEqual(result.percentage, 50.0)
        self.assertEqual(result.details[str(self.q1.id)], {
            'answer': 'A', 'correct_answer': 'A', 'is_correct': True, 'marks': 5
        })
        self.assertEqual(result.details[str(self.q2.id)], {
            'answer': 'C', 'correct_answer': 'B', 'is_correct': False, 'marks': 0
        })

    def test_comparison_is_exact(self):
        """No case folding and no trimming."""
        scorer = ExactMatchScorer()

        self.assertFalse(scorer.grade_answer(self.q1, 'a')['is_correct'])
        self.assertFalse(scorer.grade_answer(self.q1, ' A')['is_correct'])
        self.assertTrue(scorer.grade_answer(self.q1, 'A')['is_correct'])

    def test_missing_and_unknown_answers(self):
        result = score_submission(
            [self.q1, self.q2],
            {str(self.q1.id): 'A', str(uuid.uuid4()): 'B'}
        )

        self.assertEqual(result.score, 5)
        self.assertEqual(set(result.details), {str(self.q1.id), str(self.q2.id)})
        self.assertIsNone(result.details[str(self.q2.id)]['answer'])
        self.assertFalse(result.details[str(self.q2.id)]['is_correct'])

    def test_no_questions_gives_zero_percent(self):
        result = score_submission([], {'anything': 'A'})

        self.assertEqual(result.score, 0)
        self.assertEqual(result.total_marks, 0)
        self.assertEqual(result.percentage, 0.0)
        self.assertEqual(result.details, {})


class RankingTestCase(SimpleTestCase):

    def _attempt(self, percentage, minutes):
        base = timezone.now()
        return SimpleNamespace(
            id=uuid.uuid4(),
            percentage=percentage,
            submitted_at=base.replace(microsecond=0) + timedelta(minutes=minutes),
        )

    def test_ties_broken_by_earlier_submission(self):
        first = self._attempt(80.0, 1)
        second = self._attempt(80.0, 2)
        third = self._attempt(60.0, 0)

        ranked = compute_ranks([third, second, first])

        self.assertEqual(
            [(attempt, rank) for attempt, rank in ranked],
            [(first, 1), (second, 2), (third, 3)]
        )

    def test_ranks_are_a_permutation(self):
        attempts = [self._attempt(float(p), m) for m, p in enumerate([50, 90, 50, 70, 90, 10])]

        ranks = sorted(rank for _, rank in compute_ranks(attempts))

        self.assertEqual(ranks, list(range(1, len(attempts) + 1)))


class AnalyticsTestCase(TestCase):

    def test_summary_of_nothing_is_none(self):
        self.assertIsNone(summarize([]))

    def test_average_stays_between_low_and_high(self):
        learner = User.objects.create(username='solo')
        attempts = [SimpleNamespace(percentage=100.0 / 3, learner=learner) for _ in range(3)]

        values = summarize(attempts)

        self.assertLessEqual(values['lowest_percentage'], values['average_percentage'])
        self.assertLessEqual(values['average_percentage'], values['highest_percentage'])

    def test_empty_rebuild_keeps_existing_summary(self):
        exam, _ = make_exam()
        learner = User.objects.create(username='topper')
        AnalyticsSummary.objects.create(
            exam=exam,
            average_percentage=70.0,
            highest_percentage=90.0,
            lowest_percentage=50.0,
            total_attempts=2,
            topper=learner
        )

        rebuild_analytics(exam, [])

        summary = AnalyticsSummary.objects.get(exam=exam)
        self.assertEqual(summary.total_attempts, 2)
        self.assertEqual(summary.highest_percentage, 90.0)
        self.assertEqual(summary.topper, learner)


class TotalMarksTestCase(TestCase):
    """Question changes keep Exam.total_marks in step."""

    def test_total_marks_follow_question_changes(self):
        exam, questions = make_exam(questions=[(2, 'A'), (3, 'B')])
        self.assertEqual(exam.total_marks, 5)

        questions[0].marks = 7
        questions[0].save()
        exam.refresh_from_db()
        self.assertEqual(exam.total_marks, 10)

        questions[1].delete()
        exam.refresh_from_db()
        self.assertEqual(exam.total_marks, 7)


class AttemptLifecycleTestCase(TestCase):

    def setUp(self):
        self.exam, self.questions = make_exam()
        self.learner = User.objects.create(username='learner1')

    def test_start_is_idempotent(self):
        first, created = start_attempt(self.exam.id, self.learner)
        second, created_again = start_attempt(self.exam.id, self.learner)

        self.assertTrue(created)
        self.assertFalse(created_again)
        self.assertEqual(first.id, second.id)
        self.assertEqual(first.started_at, second.started_at)
        self.assertEqual(first.total_marks, 10)
        self.assertEqual(Attempt.objects.filter(exam=self.exam, learner=self.learner).count(), 1)

    def test_start_unknown_exam(self):
        with self.assertRaises(NotFound):
            start_attempt(uuid.uuid4(), self.learner)

    def test_submit_unknown_exam_creates_no_lock(self):
        """Unknown ids are rejected before a per-exam lock is made."""
        unknown = uuid.uuid4()

        for exam_id in (unknown, 'not-a-uuid'):
            with self.assertRaises(NotFound):
                submit_attempt(exam_id, self.learner, {})

        self.assertNotIn(str(unknown), _exam_locks)
        self.assertNotIn('not-a-uuid', _exam_locks)

    def test_start_inactive_exam(self):
        self.exam.is_active = False
        self.exam.save()

        with self.assertRaises(InactiveExam):
            start_attempt(self.exam.id, self.learner)
        self.assertFalse(Attempt.objects.exists())

    def test_live_attempt_survives_exam_deactivation(self):
        attempt, _ = start_attempt(self.exam.id, self.learner)
        Exam.objects.filter(pk=self.exam.pk).update(is_active=False)

        resumed, created = start_attempt(self.exam.id, self.learner)

        self.assertFalse(created)
        self.assertEqual(resumed.id, attempt.id)

    def test_submit_scores_and_ranks(self):
        start_attempt(self.exam.id, self.learner)

        result = submit_attempt(self.exam.id, self.learner, answers_for(self.questions, 'A', 'C'))

        self.assertEqual(result.attempt.score, 5)
        self.assertEqual(result.attempt.total_marks, 10)
        self.assertEqual(result.attempt.percentage, 50.0)
        self.assertEqual(result.rank, 1)
        self.assertIsNotNone(result.attempt.submitted_at)
        self.assertGreaterEqual(result.attempt.submitted_at, result.attempt.started_at)

        stored = Attempt.objects.get(pk=result.attempt.pk)
        self.assertEqual(stored.details, result.details)
        self.assertEqual(stored.rank, 1)

    def test_submit_without_start(self):
        with self.assertRaises(NoActiveAttempt):
            submit_attempt(self.exam.id, self.learner, {})

    def test_second_submit_is_rejected(self):
        start_attempt(self.exam.id, self.learner)
        first = submit_attempt(self.exam.id, self.learner, answers_for(self.questions, 'A', 'B'))

        with self.assertRaises(NoActiveAttempt):
            submit_attempt(self.exam.id, self.learner, answers_for(self.questions, 'C', 'C'))

        stored = Attempt.objects.get(pk=first.attempt.pk)
        self.assertEqual(stored.score, 10)
        self.assertEqual(stored.rank, 1)

    def test_malformed_answers_rejected_without_side_effects(self):
        attempt, _ = start_attempt(self.exam.id, self.learner)

        for payload in (['A', 'B'], 'A', {str(self.questions[0].id): 5}, {1: 'A'}):
            with self.assertRaises(InvalidAnswerPayload):
                submit_attempt(self.exam.id, self.learner, payload)

        attempt.refresh_from_db()
        self.assertTrue(attempt.is_active)

    def test_exam_without_questions(self):
        exam, _ = make_exam(questions=[])
        start_attempt(exam.id, self.learner)

        result = submit_attempt(exam.id, self.learner, {})

        self.assertEqual(result.attempt.total_marks, 0)
        self.assertEqual(result.attempt.percentage, 0.0)

    def test_retake_creates_new_attempt(self):
        start_attempt(self.exam.id, self.learner)
        submit_attempt(self.exam.id, self.learner, answers_for(self.questions, 'A', 'C'))

        retake, created = start_attempt(self.exam.id, self.learner)

        self.assertTrue(created)
        self.assertTrue(retake.is_active)
        self.assertEqual(Attempt.objects.filter(exam=self.exam, learner=self.learner).count(), 2)


class StandingsTestCase(TestCase):
    """Three learners, 80/80/60, submitting in order L1, L2, L3."""

    def setUp(self):
        self.exam, self.questions = make_exam(questions=[(1, 'A')] * 5)
        self.learners = [
            User.objects.create(username=f'learner{i}', first_name=f'Learner{i}')
            for i in range(1, 4)
        ]

    def _submit_in_order(self, correct_counts):
        base = timezone.now() + timedelta(minutes=1)
        results = []
        for offset, (learner, correct) in enumerate(zip(self.learners, correct_counts)):
            start_attempt(self.exam.id, learner)
            values = ['A'] * correct + ['X'] * (len(self.questions) - correct)
            with mock.patch('django.utils.timezone.now', return_value=base + timedelta(seconds=offset)):
                results.append(
                    submit_attempt(self.exam.id, learner, answers_for(self.questions, *values))
                )
        return results

    def test_ranks_and_analytics(self):
        self._submit_in_order([4, 4, 3])

        ranks = {
            attempt.learner_id: attempt.rank
            for attempt in Attempt.objects.filter(exam=self.exam)
        }
        self.assertEqual(ranks, {
            self.learners[0].id: 1,
            self.learners[1].id: 2,
            self.learners[2].id: 3,
        })

        summary = get_analytics(self.exam.id)
        self.assertEqual(summary.total_attempts, 3)
        self.assertAlmostEqual(summary.average_percentage, 73.33, places=2)
        self.assertEqual(summary.highest_percentage, 80.0)
        self.assertEqual(summary.lowest_percentage, 60.0)
        self.assertEqual(summary.topper, self.learners[0])

    def test_later_better_score_takes_first_place(self):
        self._submit_in_order([2, 3, 5])

        ranks = dict(Attempt.objects.filter(exam=self.exam).values_list('learner_id', 'rank'))

        self.assertEqual(ranks[self.learners[2].id], 1)
        self.assertEqual(ranks[self.learners[1].id], 2)
        self.assertEqual(ranks[self.learners[0].id], 3)

    def test_leaderboard_serves_stored_ranks(self):
        self._submit_in_order([4, 4, 3])

        board = get_leaderboard(self.exam.id, self.learners[1])

        self.assertEqual(board.total_attempts, 3)
        self.assertEqual([entry.learner for entry in board.entries], self.learners)
        self.assertEqual([entry.rank for entry in board.entries], [1, 2, 3])
        self.assertEqual(board.requester_position.rank, 2)

    def test_leaderboard_without_own_attempt(self):
        self._submit_in_order([4, 4, 3])
        outsider = User.objects.create(username='outsider')

        board = get_leaderboard(self.exam.id, outsider)

        self.assertIsNone(board.requester_position)

    def test_analytics_missing_before_any_submission(self):
        with self.assertRaises(NotFound):
            get_analytics(self.exam.id)

    def test_recompute_is_idempotent(self):
        self._submit_in_order([4, 4, 3])
        before = dict(Attempt.objects.values_list('id', 'rank'))

        recompute_ranks(self.exam)

        self.assertEqual(dict(Attempt.objects.values_list('id', 'rank')), before)


class StandingsRetryTestCase(TestCase):

    def setUp(self):
        self.exam, self.questions = make_exam()
        self.learner = User.objects.create(username='learner1')
        start_attempt(self.exam.id, self.learner)

    def test_retry_after_conflict(self):
        calls = []

        def flaky(exam):
            calls.append(exam)
            if len(calls) == 1:
                raise ConcurrencyConflict()
            return recompute_ranks(exam)

        with mock.patch('apps.quiz_exams.services.recompute_ranks', side_effect=flaky):
            result = submit_attempt(self.exam.id, self.learner, answers_for(self.questions, 'A', 'B'))

        self.assertEqual(len(calls), 2)
        self.assertEqual(result.rank, 1)
        self.exam.refresh_from_db()
        self.assertFalse(self.exam.standings_stale)

    def test_exhausted_retries_keep_score_and_mark_stale(self):
        with mock.patch(
            'apps.quiz_exams.services.recompute_ranks',
            side_effect=ConcurrencyConflict()
        ):
            result = submit_attempt(self.exam.id, self.learner, answers_for(self.questions, 'A', 'B'))

        self.assertIsNone(result.rank)
        stored = Attempt.objects.get(pk=result.attempt.pk)
        self.assertEqual(stored.score, 10)
        self.assertIsNotNone(stored.submitted_at)
        self.exam.refresh_from_db()
        self.assertTrue(self.exam.standings_stale)

        # The next read rebuilds what the submission could not
        board = get_leaderboard(self.exam.id, self.learner)

        self.assertEqual(board.requester_position.rank, 1)
        self.exam.refresh_from_db()
        self.assertFalse(self.exam.standings_stale)
        self.assertEqual(AnalyticsSummary.objects.get(exam=self.exam).total_attempts, 1)

    def test_recompute_standings_command(self):
        with mock.patch(
            'apps.quiz_exams.services.recompute_ranks',
            side_effect=ConcurrencyConflict()
        ):
            submit_attempt(self.exam.id, self.learner, answers_for(self.questions, 'A', 'C'))

        call_command('recompute_standings', stdout=StringIO())

        self.exam.refresh_from_db()
        self.assertFalse(self.exam.standings_stale)
        self.assertEqual(Attempt.objects.get(learner=self.learner).rank, 1)

    def test_recompute_standings_command_unknown_exam(self):
        for exam_id in (str(uuid.uuid4()), 'not-a-uuid'):
            with self.assertRaises(CommandError):
                call_command('recompute_standings', exam_id, stdout=StringIO())


class ExamLockTestCase(SimpleTestCase):

    def test_one_lock_per_exam(self):
        exam_id = uuid.uuid4()

        self.assertIs(_lock_for(exam_id), _lock_for(str(exam_id)))
        self.assertIsNot(_lock_for(exam_id), _lock_for(uuid.uuid4()))


class ConcurrentSubmissionTestCase(TransactionTestCase):

    def test_fifty_learners_submit_at_once(self):
        exam, questions = make_exam(questions=[(1, 'A')] * 5)
        learners = [User.objects.create(username=f'learner{i:02d}') for i in range(50)]
        for learner in learners:
            start_attempt(exam.id, learner)

        def submit(index):
            try:
                correct = index % 6
                values = ['A'] * correct + ['X'] * (len(questions) - correct)
                return submit_attempt(exam.id, learners[index], answers_for(questions, *values))
            finally:
                connection.close()

        with ThreadPoolExecutor(max_workers=10) as pool:
            results = list(pool.map(submit, range(50)))

        self.assertEqual(len(results), 50)

        summary = AnalyticsSummary.objects.get(exam=exam)
        self.assertEqual(summary.total_attempts, 50)
        self.assertLessEqual(summary.lowest_percentage, summary.average_percentage)
        self.assertLessEqual(summary.average_percentage, summary.highest_percentage)

        standings = list(
            Attempt.objects.filter(exam=exam, submitted_at__isnull=False).order_by('rank')
        )
        self.assertEqual([attempt.rank for attempt in standings], list(range(1, 51)))
        percentages = [attempt.percentage for attempt in standings]
        self.assertEqual(percentages, sorted(percentages, reverse=True))
        self.assertEqual(summary.topper_id, standings[0].learner_id)


class ConcurrentStartTestCase(TransactionTestCase):

    def test_double_click_start_opens_one_attempt(self):
        exam, _ = make_exam()
        learner = User.objects.create(username='learner1')
        workers = 8
        barrier = threading.Barrier(workers)

        def start(_):
            try:
                barrier.wait()
                attempt, _ = start_attempt(exam.id, learner)
                return attempt.id
            finally:
                connection.close()

        with ThreadPoolExecutor(max_workers=workers) as pool:
            attempt_ids = set(pool.map(start, range(workers)))

        self.assertEqual(len(attempt_ids), 1)
        self.assertEqual(Attempt.objects.filter(exam=exam, learner=learner).count(), 1)


class AttemptApiTestCase(APITestCase):

    def setUp(self):
        self.exam, self.questions = make_exam()
        self.learner = User.objects.create_user(username='student1', password='pass12345')
        self.other = User.objects.create_user(username='student2', password='pass12345')
        self.staff = User.objects.create_user(username='instructor', password='pass12345', is_staff=True)

    def _start(self, user):
        self.client.force_authenticate(user=user)
        return self.client.post(f'/api/exams/{self.exam.id}/start/')

    def _submit(self, user, answers):
        self.client.force_authenticate(user=user)
        return self.client.post(
            f'/api/exams/{self.exam.id}/submit/',
            {'answers': answers},
            format='json'
        )

    def test_requires_authentication(self):
        response = self.client.post(f'/api/exams/{self.exam.id}/start/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_start_then_resume(self):
        first = self._start(self.learner)
        second = self._start(self.learner)

        self.assertEqual(first.status_code, status.HTTP_201_CREATED)
        self.assertEqual(second.status_code, status.HTTP_200_OK)
        self.assertEqual(first.data['id'], second.data['id'])
        self.assertEqual(first.data['status'], 'active')
        self.assertEqual(first.data['total_marks'], 10)

    def test_start_unknown_exam(self):
        self.client.force_authenticate(user=self.learner)
        response = self.client.post(f'/api/exams/{uuid.uuid4()}/start/')

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['code'], 'not_found')

    def test_start_inactive_exam(self):
        self.exam.is_active = False
        self.exam.save()

        response = self._start(self.learner)

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['code'], 'inactive_exam')

    def test_submit_flow(self):
        self._start(self.learner)
        response = self._submit(self.learner, answers_for(self.questions, 'A', 'C'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['rank'], 1)
        self.assertEqual(response.data['attempt']['score'], 5)
        self.assertEqual(response.data['attempt']['percentage'], 50.0)
        self.assertEqual(response.data['attempt']['status'], 'submitted')
        self.assertEqual(
            response.data['question_results'][str(self.questions[1].id)],
            {'answer': 'C', 'correct_answer': 'B', 'is_correct': False, 'marks': 0}
        )

    def test_double_submit_rejected(self):
        self._start(self.learner)
        self._submit(self.learner, answers_for(self.questions, 'A', 'B'))

        response = self._submit(self.learner, answers_for(self.questions, 'C', 'C'))

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['code'], 'no_active_attempt')
        self.assertEqual(Attempt.objects.get(learner=self.learner).score, 10)

    def test_malformed_payload(self):
        self._start(self.learner)

        response = self._submit(self.learner, ['A', 'B'])

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['code'], 'invalid_answer_payload')
        self.assertTrue(Attempt.objects.get(learner=self.learner).is_active)

    def test_numeric_answer_rejected(self):
        """JSON numbers are not cast to strings; the attempt stays open."""
        self._start(self.learner)

        response = self._submit(self.learner, {str(self.questions[0].id): 5})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['code'], 'invalid_answer_payload')
        self.assertTrue(Attempt.objects.get(learner=self.learner).is_active)

    def test_leaderboard(self):
        for user, values in ((self.learner, ('A', 'B')), (self.other, ('A', 'C'))):
            self._start(user)
            self._submit(user, answers_for(self.questions, *values))

        self.client.force_authenticate(user=self.other)
        response = self.client.get(f'/api/exams/{self.exam.id}/leaderboard/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total_attempts'], 2)
        self.assertEqual(
            [entry['learner']['username'] for entry in response.data['entries']],
            ['student1', 'student2']
        )
        self.assertEqual([entry['rank'] for entry in response.data['entries']], [1, 2])
        self.assertEqual(response.data['requester_position']['rank'], 2)
        self.assertNotIn('email', response.data['entries'][0]['learner'])
        self.assertIn('no-cache', response['Cache-Control'])

    def test_analytics_is_staff_only(self):
        self._start(self.learner)
        self._submit(self.learner, answers_for(self.questions, 'A', 'B'))

        self.client.force_authenticate(user=self.learner)
        forbidden = self.client.get(f'/api/exams/{self.exam.id}/analytics/')
        self.assertEqual(forbidden.status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(user=self.staff)
        response = self.client.get(f'/api/exams/{self.exam.id}/analytics/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total_attempts'], 1)
        self.assertEqual(response.data['highest_percentage'], 100.0)
        self.assertEqual(response.data['topper']['username'], 'student1')

    def test_analytics_not_found_before_submissions(self):
        self.client.force_authenticate(user=self.staff)
        response = self.client.get(f'/api/exams/{self.exam.id}/analytics/')

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_cannot_view_other_learner_attempt(self):
        attempt_id = self._start(self.learner).data['id']

        self.client.force_authenticate(user=self.other)
        response = self.client.get(f'/api/attempts/{attempt_id}/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(user=self.learner)
        response = self.client.get(f'/api/attempts/{attempt_id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('details', response.data)

    def test_my_attempts(self):
        self._start(self.learner)
        self._start(self.other)

        self.client.force_authenticate(user=self.learner)
        response = self.client.get('/api/attempts/mine/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 1)


class ExamManagementApiTestCase(APITestCase):

    def setUp(self):
        self.exam, self.questions = make_exam()
        self.learner = User.objects.create_user(username='student1', password='pass12345')
        self.staff = User.objects.create_user(username='instructor', password='pass12345', is_staff=True)

    def test_learner_never_sees_correct_answers(self):
        self.client.force_authenticate(user=self.learner)
        response = self.client.get(f'/api/exams/{self.exam.id}/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['questions']), 2)
        self.assertNotIn('correct_answer', response.data['questions'][0])

    def test_learner_cannot_see_inactive_exams(self):
        Exam.objects.create(title='Hidden', course='CS101', is_active=False)

        self.client.force_authenticate(user=self.learner)
        response = self.client.get('/api/exams/')

        self.assertEqual([exam['title'] for exam in response.data['results']], ['Weekly Quiz'])

    def test_learner_cannot_create_exam(self):
        self.client.force_authenticate(user=self.learner)
        response = self.client.post('/api/exams/', {'title': 'New', 'course': 'CS101'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_staff_question_changes_update_total_marks(self):
        self.client.force_authenticate(user=self.staff)

        created = self.client.post(
            f'/api/exams/{self.exam.id}/questions/',
            {
                'question_text': 'Pick C',
                'options': ['A', 'B', 'C'],
                'correct_answer': 'C',
                'marks': 4,
                'difficulty': 'HARD',
            },
            format='json'
        )
        self.assertEqual(created.status_code, status.HTTP_201_CREATED)
        self.exam.refresh_from_db()
        self.assertEqual(self.exam.total_marks, 14)

        deleted = self.client.delete(f'/api/questions/{self.questions[0].id}/')
        self.assertEqual(deleted.status_code, status.HTTP_204_NO_CONTENT)
        self.exam.refresh_from_db()
        self.assertEqual(self.exam.total_marks, 9)

    def test_question_needs_two_options(self):
        self.client.force_authenticate(user=self.staff)
        response = self.client.post(
            f'/api/exams/{self.exam.id}/questions/',
            {'question_text': 'Only one', 'options': ['A'], 'correct_answer': 'A', 'marks': 1},
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('options', response.data)
