from models import db
from utils.helpers import utcnow


class Feedback(db.Model):
    """Tutor feedback on a graded attempt."""
    __tablename__ = "feedback"

    id = db.Column(db.Integer, primary_key=True)
    attempt_id = db.Column(db.Integer, db.ForeignKey("quiz_attempts.id", ondelete="CASCADE"), nullable=False, index=True)
    student_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    tutor_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    feedback_text = db.Column(db.Text, nullable=False)
    recommendations = db.Column(db.Text, nullable=True)
    rating = db.Column(db.Integer, nullable=True)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    attempt = db.relationship("QuizAttempt", backref=db.backref("feedback", lazy=True, cascade="all, delete-orphan"))
    tutor = db.relationship("User", foreign_keys=[tutor_id])
    student = db.relationship("User", foreign_keys=[student_id])

    def to_dict(self):
        return {
            "id": self.id,
            "attempt_id": self.attempt_id,
            "student_id": self.student_id,
            "tutor_id": self.tutor_id,
            "tutor_name": self.tutor.full_name if self.tutor else None,
            "feedback_text": self.feedback_text,
            "recommendations": self.recommendations,
            "rating": self.rating,
            "attempt": {
                "id": self.attempt.id,
                "score": self.attempt.score,
                "category_name": self.attempt.category.name if self.attempt.category else None,
                "difficulty_name": self.attempt.difficulty.name if self.attempt.difficulty else None,
            } if self.attempt else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


class StudentFeedback(db.Model):
    """A student's response about an attempt and the tutor who reviewed it."""
    __tablename__ = "student_feedback"

    id = db.Column(db.Integer, primary_key=True)
    attempt_id = db.Column(db.Integer, db.ForeignKey("quiz_attempts.id", ondelete="CASCADE"), nullable=False, index=True)
    student_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    tutor_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True)
    feedback_text = db.Column(db.Text, nullable=False)
    rating = db.Column(db.Integer, nullable=True)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    attempt = db.relationship("QuizAttempt", backref=db.backref("student_feedback", lazy=True, cascade="all, delete-orphan"))

    def to_dict(self):
        return {
            "id": self.id,
            "attempt_id": self.attempt_id,
            "student_id": self.student_id,
            "tutor_id": self.tutor_id,
            "feedback_text": self.feedback_text,
            "rating": self.rating,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
