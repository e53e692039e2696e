import logging

from sqlalchemy import func, or_

from classes.errors import NotFoundError, ValidationError
from classes.validators import validate_length, validate_required_text
from classes.results import service_call
from models import QuizAttempt, User
from models.users import ROLES
from utils.helpers import mean, round_score

logger = logging.getLogger(__name__)


class UserDirectory:
    """User listing and profile maintenance for super tutors."""

    def __init__(self, session):
        self.session = session

    def _load(self, user_id):
        user = self.session.get(User, user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    @service_call
    def list_users(self, role=None, search=None, limit=None):
        query = self.session.query(User).filter(User.is_active.is_(True))
        if role:
            if role not in ROLES:
                raise ValidationError(f"Invalid role. Must be one of {', '.join(ROLES)}")
            query = query.filter(User.role == role)
        if search:
            pattern = f"%{search}%"
            query = query.filter(or_(
                User.first_name.ilike(pattern),
                User.last_name.ilike(pattern),
                User.username.ilike(pattern),
            ))
        query = query.order_by(User.created_at.desc(), User.id.desc())
        if limit:
            query = query.limit(limit)
        return {"users": [user.to_dict() for user in query.all()]}

    @service_call
    def list_students(self):
        """Active students with their completed-attempt counts and mean score."""
        students = (
            self.session.query(User)
            .filter(User.role == "student", User.is_active.is_(True))
            .order_by(User.last_name, User.first_name, User.id)
            .all()
        )
        scores = {}
        for row in (
            self.session.query(QuizAttempt.student_id, QuizAttempt.score)
            .filter(QuizAttempt.is_completed.is_(True))
            .all()
        ):
            scores.setdefault(row.student_id, []).append(row.score)

        users = []
        for student in students:
            item = student.to_dict()
            item["total_attempts"] = len(scores.get(student.id, []))
            item["average_score"] = round_score(mean(scores.get(student.id, [])))
            users.append(item)
        return {"users": users}

    def _username_taken(self, username):
        return self.session.query(User.id).filter(func.lower(User.username) == username.lower()).first() is not None

    @service_call
    def username_available(self, username):
        """Usernames are compared case-insensitively."""
        username = validate_required_text("username", username)
        return {"available": not self._username_taken(username), "username": username}

    @service_call
    def create_user(self, data):
        """Create a profile row; credentials live with the identity provider."""
        data = data or {}
        username = validate_required_text("username", data.get("username"))
        validate_length("username", username, 50)
        if self._username_taken(username):
            raise ValidationError(f"Username '{username}' is already taken")

        role = data.get("role") or "student"
        if role not in ROLES:
            raise ValidationError(f"Invalid role. Must be one of {', '.join(ROLES)}")

        email = data.get("email")
        if email is not None:
            email = validate_required_text("email", email)
            validate_length("email", email, 100)
            if self.session.query(User.id).filter(func.lower(User.email) == email.lower()).first():
                raise ValidationError("Email is already registered")

        user = User(username=username, role=role)
        user.apply_profile({
            "first_name": data.get("first_name"),
            "last_name": data.get("last_name"),
            "email": email,
            "avatar_url": data.get("avatar_url"),
        })
        self.session.add(user)
        self.session.commit()
        logger.info("User %s created with role %s", user.id, role)
        return user.to_dict()

    @service_call
    def get_user(self, user_id):
        return self._load(user_id).to_dict()

    @service_call
    def update_user(self, user_id, data):
        user = self._load(user_id)
        data = data or {}
        user.apply_profile(data)
        if "role" in data:
            if data["role"] not in ROLES:
                raise ValidationError(f"Invalid role. Must be one of {', '.join(ROLES)}")
            user.role = data["role"]
        self.session.commit()
        logger.info("User %s updated", user_id)
        return user.to_dict()

    @service_call
    def deactivate_user(self, user_id):
        user = self._load(user_id)
        user.is_active = False
        self.session.commit()
        logger.info("User %s deactivated", user_id)
        return user.to_dict()
