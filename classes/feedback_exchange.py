import logging

from sqlalchemy.orm import joinedload

from classes.attempt_session import load_attempt
from classes.errors import NotFoundError, ValidationError
from classes.principal import SUPER_TUTOR, TUTOR
from classes.results import service_call
from classes.validators import sanitize_rich_text, validate_id, validate_rating, validate_required_text
from models import Feedback, QuizAttempt, StudentFeedback, User

logger = logging.getLogger(__name__)


class FeedbackExchange:
    """Tutor feedback on graded attempts and the students' replies."""

    def __init__(self, session):
        self.session = session

    def _completed_attempt(self, attempt_id, student_id=None):
        attempt = load_attempt(self.session, validate_id("attempt_id", attempt_id), student_id)
        if not attempt.is_completed:
            raise ValidationError("Feedback can only be given on a completed quiz")
        return attempt

    def _query(self):
        return self.session.query(Feedback).options(
            joinedload(Feedback.tutor),
            joinedload(Feedback.attempt).joinedload(QuizAttempt.category),
            joinedload(Feedback.attempt).joinedload(QuizAttempt.difficulty),
        )

    def _own_feedback(self, principal, feedback_id):
        feedback = self._query().filter(Feedback.id == feedback_id).first()
        if not feedback or (feedback.tutor_id != principal.id and not principal.is_super_tutor):
            raise NotFoundError("Feedback not found")
        return feedback

    @service_call
    def create_feedback(self, tutor_id, attempt_id, feedback_text, rating=None, recommendations=None):
        text = validate_required_text("Feedback text", sanitize_rich_text(feedback_text))
        rating = validate_rating(rating)
        attempt = self._completed_attempt(attempt_id)

        feedback = Feedback(
            attempt_id=attempt.id,
            student_id=attempt.student_id,
            tutor_id=tutor_id,
            feedback_text=text,
            recommendations=sanitize_rich_text(recommendations),
            rating=rating,
        )
        self.session.add(feedback)
        self.session.commit()

        logger.info("Tutor %s left feedback %s on attempt %s", tutor_id, feedback.id, attempt.id)
        return feedback.to_dict()

    @service_call
    def update_feedback(self, principal, feedback_id, feedback_text, rating=None, recommendations=None):
        """Replace text, rating and recommendations; omitted values become empty."""
        feedback = self._own_feedback(principal, feedback_id)
        feedback.feedback_text = validate_required_text("Feedback text", sanitize_rich_text(feedback_text))
        feedback.rating = validate_rating(rating)
        feedback.recommendations = sanitize_rich_text(recommendations)
        self.session.commit()

        logger.info("Feedback %s updated by user %s", feedback_id, principal.id)
        return feedback.to_dict()

    @service_call
    def delete_feedback(self, principal, feedback_id):
        feedback = self._own_feedback(principal, feedback_id)
        self.session.delete(feedback)
        self.session.commit()

        logger.info("Feedback %s deleted by user %s", feedback_id, principal.id)
        return {"id": feedback_id, "deleted": True}

    @service_call
    def list_feedback(self, principal, student_id=None):
        query = self._query()
        if principal.is_student:
            query = query.filter(Feedback.student_id == principal.id)
        else:
            if not principal.is_super_tutor:
                query = query.filter(Feedback.tutor_id == principal.id)
            if student_id:
                query = query.filter(Feedback.student_id == student_id)
        feedback_rows = query.order_by(Feedback.created_at.desc(), Feedback.id.desc()).all()

        replies = {}
        attempt_ids = [row.attempt_id for row in feedback_rows]
        if attempt_ids:
            for reply in (
                self.session.query(StudentFeedback)
                .filter(StudentFeedback.attempt_id.in_(attempt_ids))
                .order_by(StudentFeedback.id)
            ):
                replies[reply.attempt_id] = reply.to_dict()

        items = []
        for row in feedback_rows:
            item = row.to_dict()
            item["student_feedback"] = replies.get(row.attempt_id)
            items.append(item)
        return items

    @service_call
    def feedback_for_attempt(self, principal, attempt_id):
        student_id = principal.id if principal.is_student else None
        attempt = load_attempt(self.session, attempt_id, student_id)
        query = self._query().filter(Feedback.attempt_id == attempt.id)
        if principal.role == TUTOR:
            query = query.filter(Feedback.tutor_id == principal.id)
        return [row.to_dict() for row in query.order_by(Feedback.id).all()]

    @service_call
    def create_student_feedback(self, student_id, attempt_id, feedback_text, rating=None, tutor_id=None):
        text = validate_required_text("Feedback text", sanitize_rich_text(feedback_text))
        rating = validate_rating(rating)
        attempt = self._completed_attempt(attempt_id, student_id)

        if tutor_id is not None:
            tutor_id = validate_id("tutor_id", tutor_id)
            tutor = self.session.get(User, tutor_id)
            if not tutor or not tutor.is_active:
                raise NotFoundError("Tutor not found")
            if tutor.role not in (TUTOR, SUPER_TUTOR):
                raise ValidationError("tutor_id must refer to a tutor")
        else:
            reviewed = (
                self.session.query(Feedback.tutor_id)
                .filter(Feedback.attempt_id == attempt.id)
                .order_by(Feedback.id.desc())
                .first()
            )
            tutor_id = reviewed.tutor_id if reviewed else None

        reply = StudentFeedback(
            attempt_id=attempt.id,
            student_id=student_id,
            tutor_id=tutor_id,
            feedback_text=text,
            rating=rating,
        )
        self.session.add(reply)
        self.session.commit()

        logger.info("Student %s replied on attempt %s", student_id, attempt.id)
        return reply.to_dict()
