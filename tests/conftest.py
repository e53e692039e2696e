import os
import sys

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from app import create_app
from classes.principal import Principal
from models import Category, DifficultyLevel, Question, QuestionOption, User, db
from utils.tokens import get_jwt_token


@pytest.fixture
def app():
    app = create_app("testing")
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def users(app):
    student = User(username='student_one', email='one@example.com', first_name='Ana', last_name='Lopez', role='student')
    other_student = User(username='student_two', email='two@example.com', first_name='Ben', last_name='Okafor', role='student')
    tutor = User(username='tutor_one', email='tutor@example.com', first_name='Tara', last_name='Nguyen', role='tutor')
    db.session.add_all([student, other_student, tutor])
    db.session.commit()
    return {'student': student, 'other_student': other_student, 'tutor': tutor}


@pytest.fixture
def super_tutor(app):
    user = User(username='admin', email='admin@example.com', first_name='Sam', last_name='Reyes', role='super_tutor')
    db.session.add(user)
    db.session.commit()
    return user


def add_question(category, difficulty, author, text, options=('right', 'wrong', 'also wrong'), correct=0):
    question = Question(
        category_id=category.id,
        difficulty_id=difficulty.id,
        question_text=text,
        explanation=f'Explanation for {text}',
        created_by=author.id if author else None,
    )
    question.options = [
        QuestionOption(option_text=option, is_correct=index == correct, order_index=index)
        for index, option in enumerate(options)
    ]
    db.session.add(question)
    db.session.commit()
    return question


@pytest.fixture
def quiz_data(users):
    grammar = Category(name='Grammar', description='Tenses and sentence structure', created_by=users['tutor'].id)
    vocabulary = Category(name='Vocabulary', description='Word meanings', created_by=users['tutor'].id)
    beginner = DifficultyLevel(name='Beginner', description='Basic questions', order_index=1)
    advanced = DifficultyLevel(name='Advanced', description='Hard questions', order_index=3)
    db.session.add_all([grammar, vocabulary, beginner, advanced])
    db.session.commit()

    questions = [
        add_question(grammar, beginner, users['tutor'], 'Past tense of "go"?', ('went', 'goed', 'gone')),
        add_question(grammar, beginner, users['tutor'], 'Which word is a noun?', ('quickly', 'book', 'run'), correct=1),
        add_question(grammar, beginner, users['tutor'], 'Form of "to be" for "I"?', ('is', 'are', 'am'), correct=2),
    ]
    return {
        'grammar': grammar,
        'vocabulary': vocabulary,
        'beginner': beginner,
        'advanced': advanced,
        'questions': questions,
    }


def correct_option(question):
    return next(option for option in question.options if option.is_correct)


def wrong_option(question):
    return next(option for option in question.options if not option.is_correct)


def principal_for(user):
    return Principal(id=user.id, role=user.role)


def auth_headers(user):
    token = get_jwt_token({'user_id': user.id, 'role': user.role})
    return {'Authorization': f'Bearer {token}'}
