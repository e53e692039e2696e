from datetime import timedelta

from classes.catalog import Catalog
from classes.user_directory import UserDirectory
from models import Category, User, db

from utils.helpers import utcnow

from conftest import add_question


def test_available_quizzes_only_lists_populated_pairs(app, users, quiz_data):
    add_question(quiz_data['vocabulary'], quiz_data['advanced'], users['tutor'], 'Meaning of "meticulous"?')
    retired = add_question(quiz_data['vocabulary'], quiz_data['beginner'], users['tutor'], 'Retired question')
    retired.is_active = False
    db.session.add(Category(name='Listening', description='Audio questions'))
    db.session.commit()

    result = Catalog(db.session).available_quizzes()

    assert result.success
    assert [(quiz['name'], [(d['name'], d['question_count']) for d in quiz['difficulties']]) for quiz in result.data] == [
        ('Grammar', [('Beginner', 3)]),
        ('Vocabulary', [('Advanced', 1)]),
    ]


def test_category_names_are_unique(app, users, quiz_data):
    catalog = Catalog(db.session)

    created = catalog.create_category(users['tutor'].id, {'name': ' Writing ', 'description': 'Composition'})
    duplicate = catalog.create_category(users['tutor'].id, {'name': 'Grammar'})
    renamed = catalog.update_category(created.data['id'], {'name': 'Vocabulary'})

    assert created.data['name'] == 'Writing'
    assert duplicate.code == 'validation_error'
    assert renamed.code == 'validation_error'


def test_category_with_questions_cannot_be_deleted(app, users, quiz_data):
    catalog = Catalog(db.session)

    blocked = catalog.delete_category(quiz_data['grammar'].id)
    deleted = catalog.delete_category(quiz_data['vocabulary'].id)

    assert blocked.code == 'validation_error'
    assert deleted.data == {'id': quiz_data['vocabulary'].id, 'deleted': True}
    assert [c['name'] for c in catalog.list_categories().data] == ['Grammar']


def test_difficulty_levels_follow_order_index(app, quiz_data):
    result = Catalog(db.session).list_difficulty_levels()

    assert [level['name'] for level in result.data] == ['Beginner', 'Advanced']


def test_user_directory_filters_and_updates(app, users, super_tutor):
    directory = UserDirectory(db.session)

    students = directory.list_users(role='student')
    searched = directory.list_users(search='nguy')
    bad_role = directory.list_users(role='admin')

    assert {u['username'] for u in students.data['users']} == {'student_one', 'student_two'}
    assert [u['username'] for u in searched.data['users']] == ['tutor_one']
    assert bad_role.code == 'validation_error'

    updated = directory.update_user(users['student'].id, {'first_name': ' Anna ', 'role': 'tutor'})
    assert updated.data['full_name'] == 'Anna Lopez'
    assert updated.data['role'] == 'tutor'
    assert directory.update_user(users['student'].id, {'last_name': ''}).code == 'validation_error'

    directory.deactivate_user(users['other_student'].id)
    assert db.session.get(User, users['other_student'].id).is_active is False
    assert directory.list_users(role='student').data['users'] == []
    assert directory.get_user(12345).status == 404


def test_username_availability_ignores_case(app, users):
    directory = UserDirectory(db.session)

    assert directory.username_available('Student_One').data == {'available': False, 'username': 'Student_One'}
    assert directory.username_available(' new_learner ').data == {'available': True, 'username': 'new_learner'}
    assert directory.username_available('   ').code == 'validation_error'


def test_create_user_adds_a_profile(app, users):
    directory = UserDirectory(db.session)

    created = directory.create_user({
        'username': 'new_tutor', 'first_name': 'Lina', 'last_name': 'Park', 'email': 'lina@example.com', 'role': 'tutor',
    })
    assert created.success, created.error
    assert created.data['full_name'] == 'Lina Park'
    assert created.data['role'] == 'tutor'
    assert directory.create_user({'username': 'quiet', 'first_name': 'Q', 'last_name': 'Lee'}).data['role'] == 'student'

    assert directory.create_user({'username': 'NEW_TUTOR', 'first_name': 'X', 'last_name': 'Y'}).code == 'validation_error'
    assert directory.create_user(
        {'username': 'other', 'first_name': 'X', 'last_name': 'Y', 'email': 'LINA@example.com'}
    ).code == 'validation_error'
    assert directory.create_user({'username': 'x' * 51, 'first_name': 'X', 'last_name': 'Y'}).code == 'validation_error'
    assert directory.create_user({'username': 'nameless'}).code == 'validation_error'
    assert directory.create_user({'username': 'admin2', 'first_name': 'X', 'last_name': 'Y', 'role': 'owner'}).code == 'validation_error'
    assert db.session.query(User).filter(User.username.in_(['other', 'nameless', 'admin2'])).count() == 0


def test_timestamps_are_stamped_in_utc(app):
    assert User.__table__.c.created_at.default.is_callable

    user = User(username='clock_check', first_name='Cal', last_name='Vo')
    db.session.add(user)
    db.session.commit()

    assert abs(user.created_at - utcnow()) < timedelta(minutes=1)
