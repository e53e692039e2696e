from datetime import datetime, timedelta

from classes.progress_aggregator import ProgressAggregator, daily_series, weekly_counts
from models import QuizAttempt, User, db
from models.quiz_attempts import STATUS_GRADED
from utils.helpers import utcnow

from conftest import add_question


def completed_attempt(student, quiz_data, score, completed_at=None, category=None):
    attempt = QuizAttempt(
        student_id=student.id,
        category_id=(category or quiz_data['grammar']).id,
        difficulty_id=quiz_data['beginner'].id,
        total_questions=5,
        correct_answers=round(score / 20),
        score=score,
        time_taken=120,
        started_at=(completed_at or utcnow()) - timedelta(minutes=2),
        completed_at=completed_at or utcnow(),
        is_completed=True,
        status=STATUS_GRADED,
        version=1,
    )
    db.session.add(attempt)
    db.session.commit()
    return attempt


def test_student_progress_without_attempts_is_zero(app, users):
    result = ProgressAggregator(db.session).student_progress(users['student'].id)

    assert result.success
    assert result.data == {
        'totalAttempts': 0,
        'averageScore': 0,
        'bestScore': 0,
        'categoryStats': {},
        'recentAttempts': [],
    }


def test_student_progress_groups_by_category(app, users, quiz_data):
    student = users['student']
    now = utcnow()
    completed_attempt(student, quiz_data, 40, now - timedelta(days=2))
    completed_attempt(student, quiz_data, 80, now - timedelta(days=1))
    completed_attempt(student, quiz_data, 100, now, category=quiz_data['vocabulary'])
    completed_attempt(users['other_student'], quiz_data, 10)
    db.session.add(QuizAttempt(
        student_id=student.id,
        category_id=quiz_data['grammar'].id,
        difficulty_id=quiz_data['beginner'].id,
        total_questions=3,
    ))
    db.session.commit()

    data = ProgressAggregator(db.session).student_progress(student.id).data

    assert data['totalAttempts'] == 3
    assert data['averageScore'] == 73.33
    assert data['bestScore'] == 100
    assert data['categoryStats'] == {
        'Grammar': {'attempts': 2, 'averageScore': 60.0, 'bestScore': 80},
        'Vocabulary': {'attempts': 1, 'averageScore': 100.0, 'bestScore': 100},
    }
    assert [a['score'] for a in data['recentAttempts']] == [100, 80, 40]


def test_system_analytics_totals(app, users, quiz_data):
    for text in ('Opposite of "big"?', 'Synonym for "fast"?'):
        add_question(quiz_data['vocabulary'], quiz_data['beginner'], users['tutor'], text)
    completed_attempt(users['student'], quiz_data, 80)
    completed_attempt(users['other_student'], quiz_data, 60)

    data = ProgressAggregator(db.session).system_analytics(now=utcnow() + timedelta(minutes=1)).data

    assert data['totalUsers'] == 3
    assert data['userStats'] == {'student': 2, 'tutor': 1}
    assert data['totalQuestions'] == 5
    assert data['totalQuizzes'] == 2
    assert data['averageScore'] == 70
    assert data['newUsersThisWeek'] == 3
    assert data['newUsersLastWeek'] == 0
    assert data['newUsersChange'] == 3
    assert data['scoreChange'] == 0
    assert data['questionsByCategory'] == [
        {'category': 'Grammar', 'count': 3},
        {'category': 'Vocabulary', 'count': 2},
    ]
    assert sum(day['count'] for day in data['userGrowth']) == 3


def test_system_analytics_ignores_inactive_users_and_questions(app, users, quiz_data):
    users['other_student'].is_active = False
    quiz_data['questions'][0].is_active = False
    db.session.commit()

    data = ProgressAggregator(db.session).system_analytics().data

    assert data['totalUsers'] == 2
    assert data['userStats'] == {'student': 1, 'tutor': 1}
    assert data['totalQuestions'] == 2


def test_system_analytics_week_over_week_scores(app, users, quiz_data):
    now = utcnow()
    completed_attempt(users['student'], quiz_data, 90, now - timedelta(days=1))
    completed_attempt(users['student'], quiz_data, 70, now - timedelta(days=2))
    completed_attempt(users['student'], quiz_data, 60, now - timedelta(days=9))
    completed_attempt(users['student'], quiz_data, 10, now - timedelta(days=20))

    data = ProgressAggregator(db.session).system_analytics(now=now).data

    assert data['newAttemptsThisWeek'] == 2
    assert data['newAttemptsLastWeek'] == 1
    assert data['newAttemptsChange'] == 1
    assert data['scoreChange'] == 20


def test_weekly_counts_window_edges():
    now = datetime(2024, 5, 15, 12, 0, 0)
    timestamps = [
        now,
        now - timedelta(days=7),
        now - timedelta(days=7, seconds=1),
        now - timedelta(days=14),
        now - timedelta(days=14, seconds=1),
        now + timedelta(seconds=1),
        None,
    ]

    assert weekly_counts(timestamps, now) == (2, 2)


def test_daily_series_is_sparse():
    now = datetime(2024, 5, 15, 12, 0, 0)
    timestamps = [
        datetime(2024, 5, 15, 8, 0),
        datetime(2024, 5, 15, 9, 30),
        datetime(2024, 5, 10, 23, 59),
        datetime(2024, 4, 16, 0, 0),
        datetime(2024, 4, 15, 23, 59),
    ]

    assert daily_series(timestamps, now) == [
        {'date': '2024-04-16', 'count': 1},
        {'date': '2024-05-10', 'count': 1},
        {'date': '2024-05-15', 'count': 2},
    ]


def test_tutor_analytics_leaderboard(app, users, quiz_data):
    third = User(username='student_three', first_name='Cara', last_name='Diaz', role='student')
    db.session.add(third)
    db.session.commit()
    completed_attempt(users['student'], quiz_data, 70)
    completed_attempt(users['other_student'], quiz_data, 90)
    completed_attempt(users['other_student'], quiz_data, 50)
    completed_attempt(third, quiz_data, 100)

    data = ProgressAggregator(db.session).tutor_analytics(users['tutor'].id).data

    assert data['totalQuestions'] == 3
    assert data['questionsByDifficulty'] == [{'difficulty': 'Beginner', 'count': 3}]
    assert data['totalAttempts'] == 4
    assert data['averageScore'] == 77.5
    assert [(row['student_name'], row['average_score']) for row in data['studentPerformance']] == [
        ('Cara Diaz', 100.0),
        ('Ana Lopez', 70.0),
        ('Ben Okafor', 70.0),
    ]
    assert data['studentPerformance'][2]['attempts'] == 2


def test_tutor_analytics_only_counts_own_questions(app, users, quiz_data, super_tutor):
    add_question(quiz_data['vocabulary'], quiz_data['advanced'], super_tutor, 'Meaning of "ubiquitous"?')

    tutor_data = ProgressAggregator(db.session).tutor_analytics(users['tutor'].id).data
    admin_data = ProgressAggregator(db.session).tutor_analytics(super_tutor.id).data

    assert tutor_data['totalQuestions'] == 3
    assert admin_data['questionsByCategory'] == [{'category': 'Vocabulary', 'count': 1}]
    assert admin_data['studentPerformance'] == []
