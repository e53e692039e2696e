import logging
from decimal import Decimal, ROUND_HALF_UP

from sqlalchemy.orm import joinedload

from classes.answer_recorder import AnswerRecorder
from classes.attempt_session import load_attempt
from classes.errors import AlreadySubmittedError, ValidationError
from classes.results import service_call
from models import Question, QuizAnswer, QuizAttempt
from models.quiz_attempts import STATUS_GRADED
from utils.helpers import utcnow

logger = logging.getLogger(__name__)


def calculate_score(correct_count, answered_count):
    """Percentage of answered questions that are correct, rounded half up.

    Unanswered questions are not part of the denominator, so skipping a
    question never lowers the score.
    """
    if answered_count <= 0:
        return 0
    ratio = Decimal(correct_count) / Decimal(answered_count) * 100
    return int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class Scorer:
    """Grades a submitted attempt and serves graded results."""

    def __init__(self, session, recorder=None, clock=utcnow):
        self.session = session
        self.clock = clock
        self.recorder = recorder or AnswerRecorder(session, clock=clock)

    def _elapsed_seconds(self, attempt, now):
        if not attempt.started_at:
            return None
        return max(0, int((now - attempt.started_at).total_seconds()))

    @service_call
    def submit(self, student_id, attempt_id, answers=None, time_taken=None, expected_version=None):
        attempt = load_attempt(self.session, attempt_id, student_id)
        if attempt.is_completed:
            raise AlreadySubmittedError()
        if time_taken is not None and (isinstance(time_taken, bool) or not isinstance(time_taken, int) or time_taken < 0):
            raise ValidationError("time_taken must be a non-negative number of seconds")
        if expected_version is not None and (isinstance(expected_version, bool) or not isinstance(expected_version, int)):
            raise ValidationError("version must be an integer")

        version = attempt.version if expected_version is None else expected_version
        self.recorder.record(attempt, answers or [])

        recorded = self.session.query(QuizAnswer.is_correct).filter(QuizAnswer.attempt_id == attempt.id).all()
        if not recorded:
            raise ValidationError("Please answer at least one question before submitting")

        correct_count = sum(1 for row in recorded if row.is_correct)
        answered_count = len(recorded)
        score = calculate_score(correct_count, answered_count)
        now = self.clock()
        if time_taken is None:
            time_taken = self._elapsed_seconds(attempt, now)

        # single conditional write: counters, score and completion land together or not at all
        updated = (
            self.session.query(QuizAttempt)
            .filter(
                QuizAttempt.id == attempt.id,
                QuizAttempt.is_completed.is_(False),
                QuizAttempt.version == version,
            )
            .update(
                {
                    QuizAttempt.correct_answers: correct_count,
                    QuizAttempt.score: score,
                    QuizAttempt.time_taken: time_taken,
                    QuizAttempt.completed_at: now,
                    QuizAttempt.is_completed: True,
                    QuizAttempt.status: STATUS_GRADED,
                    QuizAttempt.version: QuizAttempt.version + 1,
                },
                synchronize_session=False,
            )
        )
        if updated != 1:
            raise AlreadySubmittedError()
        self.session.commit()

        logger.info(
            "Attempt %s graded: %s/%s correct, score %s",
            attempt_id, correct_count, answered_count, score,
        )
        return {
            "attempt_id": attempt_id,
            "correct_answers": correct_count,
            "answered_questions": answered_count,
            "total_questions": attempt.total_questions,
            "score": score,
            "time_taken": time_taken,
            "completed_at": now.isoformat(),
        }

    @service_call
    def get_result(self, principal, attempt_id):
        """Graded attempt with every answered question, its explanation and options."""
        student_id = principal.id if principal.is_student else None
        attempt = load_attempt(self.session, attempt_id, student_id)

        answers = (
            self.session.query(QuizAnswer)
            .options(joinedload(QuizAnswer.question).selectinload(Question.options))
            .filter(QuizAnswer.attempt_id == attempt.id)
            .order_by(QuizAnswer.id)
            .all()
        )

        questions = []
        for answer in answers:
            question = answer.question
            questions.append({
                "id": question.id,
                "question_text": question.question_text,
                "explanation": question.explanation,
                "image_url": question.image_url,
                "audio_url": question.audio_url,
                "selected_option_id": answer.selected_option_id,
                "is_correct": answer.is_correct,
                "options": [
                    {
                        "id": option.id,
                        "option_text": option.option_text,
                        "is_correct": option.is_correct,
                        "is_selected": option.id == answer.selected_option_id,
                    }
                    for option in question.options
                ],
            })

        return {"attempt": attempt.to_dict(), "questions": questions}

    @service_call
    def list_results(self, principal, student_id=None, category_id=None, limit=None):
        query = (
            self.session.query(QuizAttempt)
            .options(
                joinedload(QuizAttempt.category),
                joinedload(QuizAttempt.difficulty),
                joinedload(QuizAttempt.student),
            )
            .filter(QuizAttempt.is_completed.is_(True))
        )
        if principal.is_student:
            query = query.filter(QuizAttempt.student_id == principal.id)
        elif student_id:
            query = query.filter(QuizAttempt.student_id == student_id)
        if category_id:
            query = query.filter(QuizAttempt.category_id == category_id)

        query = query.order_by(QuizAttempt.completed_at.desc(), QuizAttempt.id.desc())
        if limit:
            query = query.limit(limit)
        return [attempt.to_dict() for attempt in query.all()]
