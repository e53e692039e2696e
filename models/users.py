from models import db
from utils.helpers import utcnow
from classes.validators import validate_length, validate_required_text

ROLES = ("student", "tutor", "super_tutor")


class User(db.Model):
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(50), nullable=False, unique=True)
    email = db.Column(db.String(100), nullable=True, unique=True)
    first_name = db.Column(db.String(100), nullable=False)
    last_name = db.Column(db.String(100), nullable=False)
    role = db.Column(db.String(20), nullable=False, default="student")  # 'student', 'tutor', 'super_tutor'
    avatar_url = db.Column(db.Text, nullable=True)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}".strip()

    def apply_profile(self, data):
        """Copy editable profile fields from a request payload."""
        for field in ("first_name", "last_name", "email", "avatar_url"):
            if field in data:
                value = data[field]
                if field in ("first_name", "last_name"):
                    value = validate_required_text(field, value)
                    validate_length(field, value, 100)
                setattr(self, field, value)

    def __repr__(self):
        return f"<User {self.username} ({self.role})>"

    def to_dict(self):
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "full_name": self.full_name,
            "role": self.role,
            "avatar_url": self.avatar_url,
            "is_active": self.is_active,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
