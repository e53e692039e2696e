from dataclasses import dataclass

STUDENT = "student"
TUTOR = "tutor"
SUPER_TUTOR = "super_tutor"


@dataclass(frozen=True)
class Principal:
    """Authenticated caller, resolved by the identity provider before any manager call."""

    id: int
    role: str

    @property
    def is_student(self):
        return self.role == STUDENT

    @property
    def is_super_tutor(self):
        return self.role == SUPER_TUTOR
