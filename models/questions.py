from models import db
from utils.helpers import utcnow


class Question(db.Model):
    __tablename__ = "questions"

    id = db.Column(db.Integer, primary_key=True)
    category_id = db.Column(db.Integer, db.ForeignKey("categories.id"), nullable=False)
    difficulty_id = db.Column(db.Integer, db.ForeignKey("difficulty_levels.id"), nullable=False)
    question_text = db.Column(db.Text, nullable=False)
    explanation = db.Column(db.Text, nullable=True)
    image_url = db.Column(db.Text, nullable=True)
    audio_url = db.Column(db.Text, nullable=True)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    created_by = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    category = db.relationship("Category", backref=db.backref("questions", lazy=True))
    difficulty = db.relationship("DifficultyLevel", backref=db.backref("questions", lazy=True))
    author = db.relationship("User", backref=db.backref("questions", lazy=True))
    options = db.relationship(
        "QuestionOption",
        back_populates="question",
        order_by="QuestionOption.order_index",
        cascade="all, delete-orphan",
        lazy=True,
    )

    def __repr__(self):
        return f"<Question {self.id}>"

    def to_dict(self, include_answers=True):
        return {
            "id": self.id,
            "category_id": self.category_id,
            "difficulty_id": self.difficulty_id,
            "category_name": self.category.name if self.category else None,
            "difficulty_name": self.difficulty.name if self.difficulty else None,
            "question_text": self.question_text,
            "explanation": self.explanation if include_answers else None,
            "image_url": self.image_url,
            "audio_url": self.audio_url,
            "is_active": self.is_active,
            "created_by": self.created_by,
            "author_name": self.author.full_name if self.author else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "options": [option.to_dict(include_answers) for option in self.options],
        }

    def to_quiz_dict(self):
        """Shape served to a student taking a quiz: no correctness, no explanation."""
        return {
            "id": self.id,
            "question_text": self.question_text,
            "image_url": self.image_url,
            "audio_url": self.audio_url,
            "options": [{"id": o.id, "option_text": o.option_text} for o in self.options],
        }


class QuestionOption(db.Model):
    __tablename__ = "question_options"
    __table_args__ = (
        db.UniqueConstraint("question_id", "order_index", name="uq_question_option_order"),
    )

    id = db.Column(db.Integer, primary_key=True)
    question_id = db.Column(db.Integer, db.ForeignKey("questions.id", ondelete="CASCADE"), nullable=False)
    option_text = db.Column(db.Text, nullable=False)
    is_correct = db.Column(db.Boolean, nullable=False, default=False)
    order_index = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    question = db.relationship("Question", back_populates="options")

    def to_dict(self, include_answers=True):
        data = {
            "id": self.id,
            "question_id": self.question_id,
            "option_text": self.option_text,
            "order_index": self.order_index,
        }
        if include_answers:
            data["is_correct"] = self.is_correct
        return data
