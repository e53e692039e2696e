import logging

from sqlalchemy.exc import IntegrityError

from classes.attempt_session import load_attempt
from classes.errors import AlreadySubmittedError, DuplicateAnswerError, ValidationError
from classes.results import service_call
from classes.validators import validate_id
from models import AttemptQuestion, Question, QuestionOption, QuizAnswer
from utils.helpers import utcnow

logger = logging.getLogger(__name__)


class AnswerRecorder:
    """Stores one answer per question per attempt, with its correctness copied from the option."""

    def __init__(self, session, clock=utcnow):
        self.session = session
        self.clock = clock

    def _normalise(self, answers):
        if not isinstance(answers, list):
            raise ValidationError("'answers' must be a list.")

        entries = []
        seen = set()
        for answer in answers:
            if not isinstance(answer, dict):
                raise ValidationError("Each answer must be an object.")
            question_id = validate_id("question_id", answer.get("question_id"))
            option_id = validate_id("selected_option_id", answer.get("selected_option_id"))
            if question_id in seen:
                raise DuplicateAnswerError(f"Question {question_id} was answered more than once")
            seen.add(question_id)
            entries.append((question_id, option_id))
        return entries

    def record(self, attempt, answers):
        """Validate and add answer rows for ``attempt``; the caller owns the commit."""
        if attempt.is_completed:
            raise AlreadySubmittedError()

        entries = self._normalise(answers)
        if not entries:
            return []

        question_ids = [question_id for question_id, _ in entries]
        already_answered = {
            row.question_id
            for row in self.session.query(QuizAnswer.question_id).filter(QuizAnswer.attempt_id == attempt.id)
        }
        repeated = sorted(already_answered.intersection(question_ids))
        if repeated:
            raise DuplicateAnswerError(f"Question {repeated[0]} already answered for this attempt")
        if len(already_answered) + len(entries) > attempt.total_questions:
            raise ValidationError("More answers than questions in this attempt")

        served = {
            row.question_id
            for row in self.session.query(AttemptQuestion.question_id).filter(AttemptQuestion.attempt_id == attempt.id)
        }
        questions = {
            q.id: q
            for q in self.session.query(Question).filter(Question.id.in_(question_ids)).all()
        }
        options = {
            o.id: o
            for o in self.session.query(QuestionOption)
            .filter(QuestionOption.id.in_([option_id for _, option_id in entries]))
            .all()
        }

        answered_at = self.clock()
        rows = []
        for question_id, option_id in entries:
            question = questions.get(question_id)
            if question is None or question_id not in served:
                raise ValidationError(f"Question {question_id} is not part of this quiz")
            option = options.get(option_id)
            if option is None or option.question_id != question_id:
                raise ValidationError(f"Option {option_id} does not belong to question {question_id}")

            rows.append(QuizAnswer(
                attempt_id=attempt.id,
                question_id=question_id,
                selected_option_id=option_id,
                is_correct=bool(option.is_correct),
                answered_at=answered_at,
            ))

        self.session.add_all(rows)
        try:
            self.session.flush()
        except IntegrityError:
            raise DuplicateAnswerError()
        return rows

    @service_call
    def record_answers(self, student_id, attempt_id, answers):
        attempt = load_attempt(self.session, attempt_id, student_id)
        rows = self.record(attempt, answers)
        self.session.commit()

        logger.info("Recorded %s answers for attempt %s", len(rows), attempt_id)
        return {
            "attempt_id": attempt_id,
            "recorded": len(rows),
            "answers": [row.to_dict() for row in rows],
        }
