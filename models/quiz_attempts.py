from models import db
from utils.helpers import utcnow

STATUS_IN_PROGRESS = "in_progress"
STATUS_GRADED = "graded"


class QuizAttempt(db.Model):
    __tablename__ = "quiz_attempts"

    id = db.Column(db.Integer, primary_key=True)
    student_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    category_id = db.Column(db.Integer, db.ForeignKey("categories.id"), nullable=False, index=True)
    difficulty_id = db.Column(db.Integer, db.ForeignKey("difficulty_levels.id"), nullable=False)
    total_questions = db.Column(db.Integer, nullable=False)
    correct_answers = db.Column(db.Integer, nullable=False, default=0)
    score = db.Column(db.Float, nullable=False, default=0)
    time_taken = db.Column(db.Integer, nullable=True)  # seconds
    started_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    completed_at = db.Column(db.DateTime, nullable=True)
    is_completed = db.Column(db.Boolean, nullable=False, default=False, index=True)
    status = db.Column(db.String(20), nullable=False, default=STATUS_IN_PROGRESS)
    version = db.Column(db.Integer, nullable=False, default=0)

    student = db.relationship("User", backref=db.backref("quiz_attempts", lazy=True))
    category = db.relationship("Category")
    difficulty = db.relationship("DifficultyLevel")
    answers = db.relationship(
        "QuizAnswer",
        back_populates="attempt",
        order_by="QuizAnswer.id",
        lazy=True,
        cascade="all, delete-orphan",
    )
    served_questions = db.relationship(
        "AttemptQuestion",
        back_populates="attempt",
        order_by="AttemptQuestion.position",
        lazy=True,
        cascade="all, delete-orphan",
    )

    def to_dict(self):
        return {
            "id": self.id,
            "student_id": self.student_id,
            "student_name": self.student.full_name if self.student else None,
            "category_id": self.category_id,
            "difficulty_id": self.difficulty_id,
            "category_name": self.category.name if self.category else None,
            "difficulty_name": self.difficulty.name if self.difficulty else None,
            "total_questions": self.total_questions,
            "correct_answers": self.correct_answers,
            "score": self.score,
            "time_taken": self.time_taken,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "is_completed": self.is_completed,
            "status": self.status,
        }


class AttemptQuestion(db.Model):
    """A question served to an attempt, in the order it was shown."""
    __tablename__ = "attempt_questions"
    __table_args__ = (
        db.UniqueConstraint("attempt_id", "question_id", name="uq_attempt_question"),
    )

    id = db.Column(db.Integer, primary_key=True)
    attempt_id = db.Column(db.Integer, db.ForeignKey("quiz_attempts.id", ondelete="CASCADE"), nullable=False, index=True)
    question_id = db.Column(db.Integer, db.ForeignKey("questions.id"), nullable=False)
    position = db.Column(db.Integer, nullable=False)

    attempt = db.relationship("QuizAttempt", back_populates="served_questions")
    question = db.relationship("Question")
