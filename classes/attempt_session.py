import logging
import random

from sqlalchemy.orm import joinedload, selectinload

from classes.errors import NotFoundError
from classes.results import service_call
from classes.validators import validate_id, validate_question_count
from models import AttemptQuestion, Question, QuizAttempt
from models.quiz_attempts import STATUS_IN_PROGRESS
from utils.helpers import utcnow

logger = logging.getLogger(__name__)


def load_attempt(session, attempt_id, student_id=None):
    """Fetch an attempt, hiding attempts that belong to another student."""
    query = session.query(QuizAttempt).options(
        joinedload(QuizAttempt.category),
        joinedload(QuizAttempt.difficulty),
    ).filter(QuizAttempt.id == attempt_id)
    attempt = query.first()
    if not attempt or (student_id is not None and attempt.student_id != student_id):
        raise NotFoundError("Quiz attempt not found")
    return attempt


class AttemptSession:
    """Starts quiz attempts and serves their question sets."""

    def __init__(self, session, settings=None, rng=None, clock=utcnow):
        self.session = session
        settings = settings or {}
        self.default_count = settings.get("QUIZ_DEFAULT_QUESTION_COUNT", 10)
        self.max_count = settings.get("QUIZ_MAX_QUESTIONS", 50)
        self.rng = rng or random.Random()
        self.clock = clock

    @service_call
    def start(self, student_id, category_id, difficulty_id, question_count=None):
        category_id = validate_id("category_id", category_id)
        difficulty_id = validate_id("difficulty_id", difficulty_id)
        if question_count is None:
            question_count = self.default_count
        question_count = validate_question_count(question_count, self.max_count)

        candidate_ids = [
            row.id
            for row in self.session.query(Question.id)
            .filter(
                Question.category_id == category_id,
                Question.difficulty_id == difficulty_id,
                Question.is_active.is_(True),
            )
            .order_by(Question.id)
            .all()
        ]
        if not candidate_ids:
            raise NotFoundError("No questions available for this quiz")

        # sample() already returns the picks in random order
        chosen_ids = self.rng.sample(candidate_ids, min(question_count, len(candidate_ids)))
        by_id = {
            q.id: q
            for q in self.session.query(Question)
            .options(selectinload(Question.options))
            .filter(Question.id.in_(chosen_ids))
            .all()
        }
        questions = [by_id[question_id] for question_id in chosen_ids]

        attempt = QuizAttempt(
            student_id=student_id,
            category_id=category_id,
            difficulty_id=difficulty_id,
            total_questions=len(questions),
            correct_answers=0,
            score=0,
            started_at=self.clock(),
            is_completed=False,
            status=STATUS_IN_PROGRESS,
            version=0,
        )
        attempt.served_questions = [
            AttemptQuestion(question_id=question_id, position=position)
            for position, question_id in enumerate(chosen_ids)
        ]
        self.session.add(attempt)
        self.session.commit()

        logger.info(
            "Student %s started attempt %s (category=%s, difficulty=%s, questions=%s)",
            student_id, attempt.id, category_id, difficulty_id, len(questions),
        )

        return {
            "attempt_id": attempt.id,
            "version": attempt.version,
            "category_id": category_id,
            "difficulty_id": difficulty_id,
            "category_name": attempt.category.name if attempt.category else None,
            "difficulty_name": attempt.difficulty.name if attempt.difficulty else None,
            "total_questions": attempt.total_questions,
            "started_at": attempt.started_at.isoformat(),
            "questions": [question.to_quiz_dict() for question in questions],
        }

    @service_call
    def get_attempt(self, student_id, attempt_id):
        """The attempt and, while it is in progress, its questions in served order."""
        attempt = load_attempt(self.session, validate_id("attempt_id", attempt_id), student_id)
        data = attempt.to_dict()
        if not attempt.is_completed:
            served = (
                self.session.query(AttemptQuestion)
                .options(joinedload(AttemptQuestion.question).selectinload(Question.options))
                .filter(AttemptQuestion.attempt_id == attempt.id)
                .order_by(AttemptQuestion.position)
                .all()
            )
            data["questions"] = [row.question.to_quiz_dict() for row in served]
        return data
