import jwt

from conftest import auth_headers, correct_option, wrong_option


def test_home(client):
    response = client.get('/')

    assert response.status_code == 200
    assert b'Quiz Platform' in response.data


def test_missing_or_bad_token_is_unauthorized(client, users):
    assert client.get('/api/student/progress').status_code == 401
    assert client.get('/api/tutor/analytics').status_code == 401

    response = client.get('/api/student/progress', headers={'Authorization': 'Bearer not-a-token'})
    assert response.status_code == 401
    assert response.get_json() == {'success': False, 'data': None, 'error': 'Invalid token'}


def test_token_without_role_is_rejected(app, client, users):
    token = jwt.encode({'user_id': users['student'].id}, app.config['SECRET_KEY'], algorithm='HS256')

    response = client.get('/api/student/progress', headers={'Authorization': f'Bearer {token}'})

    assert response.status_code == 401


def test_roles_are_enforced(client, users, super_tutor):
    student = auth_headers(users['student'])
    tutor = auth_headers(users['tutor'])

    assert client.get('/api/tutor/analytics', headers=student).status_code == 403
    assert client.get('/api/super-tutor/analytics', headers=tutor).status_code == 403
    assert client.get('/api/student/progress', headers=tutor).status_code == 403
    assert client.get('/api/tutor/analytics', headers=auth_headers(super_tutor)).status_code == 200


def test_token_from_cookie(client, users):
    token = auth_headers(users['student'])['Authorization'].split(' ', 1)[1]
    client.set_cookie('access_token', token)

    response = client.get('/api/student/progress')

    assert response.status_code == 200
    assert response.get_json()['data']['totalAttempts'] == 0


def test_student_quiz_flow(client, users, quiz_data):
    headers = auth_headers(users['student'])

    available = client.get('/api/student/quizzes/available', headers=headers).get_json()
    assert available['data'][0]['name'] == 'Grammar'

    start = client.post('/api/student/quiz/start', json={
        'category_id': quiz_data['grammar'].id,
        'difficulty_id': quiz_data['beginner'].id,
        'question_count': 3,
    }, headers=headers)
    assert start.status_code == 201
    started = start.get_json()['data']
    assert started['total_questions'] == 3

    first, second, _ = quiz_data['questions']
    submit = client.post(f"/api/student/quiz/{started['attempt_id']}/submit", json={
        'answers': [
            {'question_id': first.id, 'selected_option_id': correct_option(first).id},
            {'question_id': second.id, 'selected_option_id': wrong_option(second).id},
        ],
        'time_taken': 42,
        'version': started['version'],
    }, headers=headers)
    assert submit.status_code == 200
    assert submit.get_json()['data']['score'] == 50

    resubmit = client.post(f"/api/student/quiz/{started['attempt_id']}/submit", json={
        'answers': [{'question_id': first.id, 'selected_option_id': correct_option(first).id}],
    }, headers=headers)
    assert resubmit.status_code == 409
    assert resubmit.get_json()['error'] == 'Quiz attempt not found or already completed'

    results = client.get(f"/api/student/quiz/{started['attempt_id']}/results", headers=headers).get_json()
    assert results['data']['attempt']['is_completed'] is True
    assert len(results['data']['questions']) == 2

    progress = client.get('/api/student/progress', headers=headers).get_json()
    assert progress['data']['totalAttempts'] == 1
    assert progress['data']['averageScore'] == 50


def test_start_with_no_questions_is_not_found(client, users, quiz_data):
    response = client.post('/api/student/quiz/start', json={
        'category_id': quiz_data['vocabulary'].id,
        'difficulty_id': quiz_data['beginner'].id,
    }, headers=auth_headers(users['student']))

    assert response.status_code == 404
    assert response.get_json()['error'] == 'No questions available for this quiz'


def test_start_validates_question_count(client, users, quiz_data):
    response = client.post('/api/student/quiz/start', json={
        'category_id': quiz_data['grammar'].id,
        'difficulty_id': quiz_data['beginner'].id,
        'question_count': 0,
    }, headers=auth_headers(users['student']))

    assert response.status_code == 400


def test_tutor_question_and_feedback_endpoints(client, users, quiz_data):
    tutor = auth_headers(users['tutor'])
    student = auth_headers(users['student'])

    created = client.post('/api/tutor/questions', json={
        'category_id': quiz_data['grammar'].id,
        'difficulty_id': quiz_data['beginner'].id,
        'question_text': 'Which is an adverb?',
        'options': [
            {'option_text': 'quickly', 'is_correct': True},
            {'option_text': 'quick', 'is_correct': False},
        ],
    }, headers=tutor)
    assert created.status_code == 201

    invalid = client.post('/api/tutor/questions', json={
        'category_id': quiz_data['grammar'].id,
        'difficulty_id': quiz_data['beginner'].id,
        'question_text': 'No answer marked',
        'options': [{'option_text': 'a'}, {'option_text': 'b'}],
    }, headers=tutor)
    assert invalid.status_code == 400
    assert invalid.get_json()['error'] == 'Please select the correct answer'

    listing = client.get('/api/tutor/questions?limit=2', headers=tutor).get_json()
    assert listing['data']['pagination']['totalCount'] == 4

    started = client.post('/api/student/quiz/start', json={
        'category_id': quiz_data['grammar'].id,
        'difficulty_id': quiz_data['beginner'].id,
    }, headers=student).get_json()['data']
    question = quiz_data['questions'][0]
    client.post(f"/api/student/quiz/{started['attempt_id']}/submit", json={
        'answers': [{'question_id': question.id, 'selected_option_id': correct_option(question).id}],
    }, headers=student)

    feedback = client.post('/api/tutor/feedback', json={
        'attempt_id': started['attempt_id'],
        'feedback_text': 'Great start',
        'rating': 5,
    }, headers=tutor)
    assert feedback.status_code == 201
    feedback_id = feedback.get_json()['data']['id']

    bad_rating = client.put(f'/api/tutor/feedback/{feedback_id}', json={
        'feedback_text': 'Great start', 'rating': 6,
    }, headers=tutor)
    assert bad_rating.status_code == 400

    seen = client.get('/api/student/feedback', headers=student).get_json()
    assert seen['data'][0]['rating'] == 5

    students = client.get('/api/tutor/students', headers=tutor).get_json()
    scored = {row['username']: row['total_attempts'] for row in students['data']['users']}
    assert scored == {'student_one': 1, 'student_two': 0}


def test_dashboards_report_each_section(client, users, quiz_data, super_tutor):
    student = client.get('/api/student/dashboard', headers=auth_headers(users['student']))
    tutor = client.get('/api/tutor/dashboard', headers=auth_headers(users['tutor']))
    admin = client.get('/api/super-tutor/dashboard', headers=auth_headers(super_tutor))

    assert set(student.get_json()) == {'progress', 'recent_results', 'feedback', 'available_quizzes'}
    assert all(section['success'] for section in student.get_json().values())
    assert set(tutor.get_json()) == {'analytics', 'recent_results', 'feedback'}
    assert admin.get_json()['analytics']['data']['totalUsers'] == 4
    assert admin.status_code == 200


def test_super_tutor_user_management(client, users, super_tutor):
    headers = auth_headers(super_tutor)

    listed = client.get('/api/super-tutor/users?role=tutor', headers=headers).get_json()
    assert [u['username'] for u in listed['data']['users']] == ['tutor_one']

    updated = client.put(f"/api/super-tutor/users/{users['student'].id}", json={'role': 'wizard'}, headers=headers)
    assert updated.status_code == 400

    removed = client.delete(f"/api/super-tutor/users/{users['other_student'].id}", headers=headers)
    assert removed.get_json()['data']['is_active'] is False


def test_super_tutor_creates_users(client, users, super_tutor):
    headers = auth_headers(super_tutor)

    before = client.get('/api/super-tutor/users/username-available?username=Fresh_Face', headers=headers)
    created = client.post(
        '/api/super-tutor/users',
        json={'username': 'fresh_face', 'first_name': 'Noa', 'last_name': 'Silva'},
        headers=headers,
    )
    after = client.get('/api/super-tutor/users/username-available?username=Fresh_Face', headers=headers)
    forbidden = client.post(
        '/api/super-tutor/users',
        json={'username': 'sneaky', 'first_name': 'S', 'last_name': 'T'},
        headers=auth_headers(users['tutor']),
    )

    assert before.get_json()['data'] == {'available': True, 'username': 'Fresh_Face'}
    assert created.status_code == 201
    assert created.get_json()['data']['role'] == 'student'
    assert after.get_json()['data']['available'] is False
    assert forbidden.status_code == 403
