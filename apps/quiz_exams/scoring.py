"""
Scoring for single-answer multiple choice quizzes.

Architecture:
- ExactMatchScorer: grades one question, exact and case-sensitive
- score_submission: folds a whole question set into a ScoreResult

No database access happens here. The caller passes the exam's current
questions and the learner's answer map, and persists what comes back.
"""
from collections import namedtuple


ScoreResult = namedtuple('ScoreResult', ['score', 'total_marks', 'percentage', 'details'])


class ExactMatchScorer:
    """
    Compares the submitted string to the question's correct answer as-is.

    No trimming or case folding: "A" and "a " are different answers. Partial
    credit does not exist, a question is worth its marks or nothing.
    """

    def grade_answer(self, question, submitted_answer):
        """
        Returns dict: {
            'answer': str | None,
            'correct_answer': str,
            'is_correct': bool,
            'marks': int
        }
        """
        is_correct = (
            submitted_answer is not None
            and submitted_answer == question.correct_answer
        )

        return {
            'answer': submitted_answer,
            'correct_answer': question.correct_answer,
            'is_correct': is_correct,
            'marks': question.marks if is_correct else 0,
        }


def calculate_percentage(score, total_marks):
    """Percentage of total_marks, 0.0 for an exam with no marks to earn."""
    if total_marks <= 0:
        return 0.0
    return 100.0 * score / total_marks


def score_submission(questions, answers, scorer=None):
    """
    Grades every question of the exam against the answer map.

    Answers keyed by ids that are not in `questions` are ignored; questions
    without an answer are recorded with answer None and earn nothing. The
    returned details are keyed by the question id string and are stored
    verbatim as the attempt's audit record.
    """
    scorer = scorer or ExactMatchScorer()

    score = 0
    total_marks = 0
    details = {}

    for question in questions:
        key = str(question.id)
        result = scorer.grade_answer(question, answers.get(key))
        details[key] = result

        score += result['marks']
        total_marks += question.marks

    return ScoreResult(
        score=score,
        total_marks=total_marks,
        percentage=calculate_percentage(score, total_marks),
        details=details,
    )
