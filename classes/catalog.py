import logging
from collections import Counter

from classes.errors import NotFoundError, ValidationError
from classes.results import service_call
from classes.validators import validate_length, validate_required_text
from models import Category, DifficultyLevel, Question

logger = logging.getLogger(__name__)


class Catalog:
    """Categories, difficulty levels and the quizzes students can pick from."""

    def __init__(self, session):
        self.session = session

    def _name_taken(self, name, exclude_id=None):
        query = self.session.query(Category.id).filter(Category.name == name)
        if exclude_id is not None:
            query = query.filter(Category.id != exclude_id)
        return query.first() is not None

    @service_call
    def list_categories(self):
        categories = (
            self.session.query(Category)
            .filter(Category.is_active.is_(True))
            .order_by(Category.name)
            .all()
        )
        return [category.to_dict() for category in categories]

    @service_call
    def create_category(self, author_id, data):
        name = validate_required_text("Category name", (data or {}).get("name"))
        validate_length("Category name", name, 100)
        if self._name_taken(name):
            raise ValidationError("A category with this name already exists")

        category = Category(name=name, description=data.get("description"), created_by=author_id)
        self.session.add(category)
        self.session.commit()
        logger.info("Category %s created by user %s", category.id, author_id)
        return category.to_dict()

    @service_call
    def update_category(self, category_id, data):
        category = self.session.get(Category, category_id)
        if not category:
            raise NotFoundError("Category not found")
        data = data or {}

        if "name" in data:
            name = validate_required_text("Category name", data.get("name"))
            validate_length("Category name", name, 100)
            if self._name_taken(name, exclude_id=category_id):
                raise ValidationError("A category with this name already exists")
            category.name = name
        if "description" in data:
            category.description = data.get("description")
        if "is_active" in data:
            category.is_active = bool(data.get("is_active"))

        self.session.commit()
        return category.to_dict()

    @service_call
    def delete_category(self, category_id):
        category = self.session.get(Category, category_id)
        if not category:
            raise NotFoundError("Category not found")
        in_use = self.session.query(Question.id).filter(Question.category_id == category_id).first()
        if in_use:
            raise ValidationError("Category still has questions; deactivate it instead")

        self.session.delete(category)
        self.session.commit()
        logger.info("Category %s deleted", category_id)
        return {"id": category_id, "deleted": True}

    @service_call
    def list_difficulty_levels(self):
        levels = (
            self.session.query(DifficultyLevel)
            .filter(DifficultyLevel.is_active.is_(True))
            .order_by(DifficultyLevel.order_index, DifficultyLevel.id)
            .all()
        )
        return [level.to_dict() for level in levels]

    @service_call
    def available_quizzes(self):
        """Active categories, each with the active difficulty levels that have questions."""
        counts = Counter(
            (row.category_id, row.difficulty_id)
            for row in self.session.query(Question.category_id, Question.difficulty_id)
            .filter(Question.is_active.is_(True))
            .all()
        )
        categories = (
            self.session.query(Category)
            .filter(Category.is_active.is_(True))
            .order_by(Category.name)
            .all()
        )
        levels = (
            self.session.query(DifficultyLevel)
            .filter(DifficultyLevel.is_active.is_(True))
            .order_by(DifficultyLevel.order_index, DifficultyLevel.id)
            .all()
        )

        quizzes = []
        for category in categories:
            difficulties = [
                {
                    "id": level.id,
                    "name": level.name,
                    "description": level.description,
                    "question_count": counts[(category.id, level.id)],
                }
                for level in levels
                if counts[(category.id, level.id)]
            ]
            if difficulties:
                quizzes.append({
                    "id": category.id,
                    "name": category.name,
                    "description": category.description,
                    "difficulties": difficulties,
                })
        return quizzes
