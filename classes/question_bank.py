import logging
import math

from sqlalchemy.orm import joinedload, selectinload

from classes.errors import NotFoundError, ValidationError
from classes.results import service_call
from classes.validators import sanitize_rich_text, validate_id, validate_options, validate_required_text
from models import AttemptQuestion, Category, DifficultyLevel, Question, QuestionOption, QuizAnswer

logger = logging.getLogger(__name__)


class QuestionBank:
    """Questions and their option sets, owned by tutors."""

    def __init__(self, session, settings=None):
        self.session = session
        settings = settings or {}
        self.min_options = settings.get("QUESTION_MIN_OPTIONS", 2)
        self.max_options = settings.get("QUESTION_MAX_OPTIONS", 6)

    def _query(self):
        return self.session.query(Question).options(
            joinedload(Question.category),
            joinedload(Question.difficulty),
            joinedload(Question.author),
            selectinload(Question.options),
        )

    def _load(self, question_id):
        question = self._query().filter(Question.id == question_id).first()
        if not question:
            raise NotFoundError("Question not found")
        return question

    @service_call
    def list_questions(self, category_id=None, difficulty_id=None, search=None, page=1, limit=10, author_id=None):
        page = max(1, int(page or 1))
        limit = max(1, min(int(limit or 10), 100))

        filters = [Question.is_active.is_(True)]
        if category_id:
            filters.append(Question.category_id == category_id)
        if difficulty_id:
            filters.append(Question.difficulty_id == difficulty_id)
        if author_id:
            filters.append(Question.created_by == author_id)
        if search:
            filters.append(Question.question_text.ilike(f"%{search}%"))

        total_count = self.session.query(Question).filter(*filters).count()
        questions = (
            self._query()
            .filter(*filters)
            .order_by(Question.created_at.desc(), Question.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        total_pages = math.ceil(total_count / limit)

        return {
            "questions": [q.to_dict() for q in questions],
            "pagination": {
                "currentPage": page,
                "totalPages": total_pages,
                "totalCount": total_count,
                "hasNext": page < total_pages,
                "hasPrev": page > 1,
            },
        }

    @service_call
    def get_question(self, question_id):
        return self._load(question_id).to_dict()

    def _clean_payload(self, data):
        if not isinstance(data, dict):
            raise ValidationError("Question data is required")

        category_id = validate_id("category_id", data.get("category_id"))
        difficulty_id = validate_id("difficulty_id", data.get("difficulty_id"))
        if not self.session.get(Category, category_id):
            raise ValidationError("Please select a category")
        if not self.session.get(DifficultyLevel, difficulty_id):
            raise ValidationError("Please select a difficulty level")

        return {
            "category_id": category_id,
            "difficulty_id": difficulty_id,
            "question_text": validate_required_text("Question text", data.get("question_text")),
            "explanation": sanitize_rich_text(data.get("explanation")),
            "image_url": data.get("image_url") or None,
            "audio_url": data.get("audio_url") or None,
        }

    def _option_rows(self, options):
        return [
            QuestionOption(option_text=option["option_text"], is_correct=option["is_correct"], order_index=index)
            for index, option in enumerate(options)
        ]

    @service_call
    def create_question(self, author_id, data):
        fields = self._clean_payload(data)
        options = validate_options(data.get("options"), self.min_options, self.max_options)

        question = Question(created_by=author_id, **fields)
        question.options = self._option_rows(options)
        self.session.add(question)
        self.session.commit()

        logger.info("Question %s created by user %s", question.id, author_id)
        return self._load(question.id).to_dict()

    @service_call
    def update_question(self, question_id, data):
        """Replace the question fields and its whole option set in one transaction."""
        question = self._load(question_id)
        fields = self._clean_payload(data)
        options = validate_options(data.get("options"), self.min_options, self.max_options)

        for key, value in fields.items():
            setattr(question, key, value)
        if "is_active" in data:
            question.is_active = bool(data["is_active"])

        # old rows must be gone before new ones reuse their order_index
        question.options.clear()
        self.session.flush()
        question.options.extend(self._option_rows(options))
        self.session.commit()

        logger.info("Question %s updated", question_id)
        return self._load(question_id).to_dict()

    @service_call
    def delete_question(self, question_id):
        question = self.session.get(Question, question_id)
        if not question:
            raise NotFoundError("Question not found")

        answered = self.session.query(QuizAnswer.id).filter(QuizAnswer.question_id == question_id).first()
        served = self.session.query(AttemptQuestion.id).filter(AttemptQuestion.question_id == question_id).first()
        if answered or served:
            question.is_active = False
            self.session.commit()
            logger.info("Question %s is part of past attempts, deactivated instead of deleted", question_id)
            return {"id": question_id, "deleted": False, "deactivated": True}

        self.session.delete(question)
        self.session.commit()
        logger.info("Question %s deleted", question_id)
        return {"id": question_id, "deleted": True, "deactivated": False}
