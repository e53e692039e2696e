from flask_sqlalchemy import SQLAlchemy

# Initialize SQLAlchemy
db = SQLAlchemy()

# Import models
from models.users import User

from models.categories import Category, DifficultyLevel
from models.questions import Question, QuestionOption

from models.quiz_attempts import AttemptQuestion, QuizAttempt
from models.quiz_answers import QuizAnswer

from models.feedback import Feedback, StudentFeedback
