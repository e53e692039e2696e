"""Read-only statistics over completed quiz attempts.

Every call fetches the raw rows it needs and reduces them in Python; nothing
is cached between calls.
"""
import logging
from collections import Counter
from datetime import timedelta

from sqlalchemy.orm import joinedload

from classes.results import service_call
from models import Category, DifficultyLevel, Question, QuizAttempt, User
from utils.helpers import mean, round_score, utcnow

logger = logging.getLogger(__name__)

RECENT_ATTEMPTS_LIMIT = 10
LEADERBOARD_SIZE = 10
GROWTH_WINDOW_DAYS = 30
WEEK = timedelta(days=7)


def category_breakdown(attempts):
    """Attempts count, mean and best score per category name, in first-seen order."""
    grouped = {}
    for attempt in attempts:
        name = attempt.category.name if attempt.category else "Unknown"
        grouped.setdefault(name, []).append(attempt.score or 0)
    return {
        name: {
            "attempts": len(scores),
            "averageScore": round_score(mean(scores)),
            "bestScore": max(scores),
        }
        for name, scores in grouped.items()
    }


def weekly_counts(timestamps, now):
    """Counts in the trailing 7 days and in the 7 days before that."""
    this_week = sum(1 for ts in timestamps if ts and now - WEEK <= ts <= now)
    last_week = sum(1 for ts in timestamps if ts and now - 2 * WEEK <= ts < now - WEEK)
    return this_week, last_week


def daily_series(timestamps, now, days=GROWTH_WINDOW_DAYS):
    """Per-day counts over the last ``days`` days; days with no events are left out."""
    first_day = (now - timedelta(days=days - 1)).date()
    counts = Counter(ts.date() for ts in timestamps if ts and first_day <= ts.date() <= now.date())
    return [{"date": day.isoformat(), "count": counts[day]} for day in sorted(counts)]


def summarise_attempt(attempt):
    return {
        "id": attempt.id,
        "student_id": attempt.student_id,
        "student_name": attempt.student.full_name if attempt.student else None,
        "category_name": attempt.category.name if attempt.category else None,
        "difficulty_name": attempt.difficulty.name if attempt.difficulty else None,
        "score": attempt.score,
        "correct_answers": attempt.correct_answers,
        "total_questions": attempt.total_questions,
        "completed_at": attempt.completed_at.isoformat() if attempt.completed_at else None,
    }


class ProgressAggregator:
    """Single home for the student, tutor and system dashboards' statistics."""

    def __init__(self, session, clock=utcnow):
        self.session = session
        self.clock = clock

    def _completed_attempts(self, student_id=None):
        query = (
            self.session.query(QuizAttempt)
            .options(
                joinedload(QuizAttempt.category),
                joinedload(QuizAttempt.difficulty),
                joinedload(QuizAttempt.student),
            )
            .filter(QuizAttempt.is_completed.is_(True))
        )
        if student_id is not None:
            query = query.filter(QuizAttempt.student_id == student_id)
        return query.order_by(QuizAttempt.id).all()

    @staticmethod
    def _newest_first(attempts):
        return sorted(attempts, key=lambda a: (a.completed_at is not None, a.completed_at, a.id), reverse=True)

    @service_call
    def student_progress(self, student_id):
        attempts = self._completed_attempts(student_id)
        scores = [attempt.score or 0 for attempt in attempts]

        return {
            "totalAttempts": len(attempts),
            "averageScore": round_score(mean(scores)),
            "bestScore": max(scores) if scores else 0,
            "categoryStats": category_breakdown(attempts),
            "recentAttempts": [summarise_attempt(a) for a in self._newest_first(attempts)[:RECENT_ATTEMPTS_LIMIT]],
        }

    @service_call
    def system_analytics(self, now=None):
        now = now or self.clock()

        users = self.session.query(User.role, User.created_at).filter(User.is_active.is_(True)).all()
        questions = (
            self.session.query(Question.created_at, Category.name)
            .outerjoin(Category, Question.category_id == Category.id)
            .filter(Question.is_active.is_(True))
            .all()
        )
        attempts = (
            self.session.query(QuizAttempt.score, QuizAttempt.completed_at)
            .filter(QuizAttempt.is_completed.is_(True))
            .all()
        )

        user_stats = Counter(user.role for user in users)
        users_this_week, users_last_week = weekly_counts([u.created_at for u in users], now)
        questions_this_week, questions_last_week = weekly_counts([q.created_at for q in questions], now)
        attempts_this_week, attempts_last_week = weekly_counts([a.completed_at for a in attempts], now)

        this_week_scores = [a.score for a in attempts if a.completed_at and now - WEEK <= a.completed_at <= now]
        last_week_scores = [
            a.score for a in attempts if a.completed_at and now - 2 * WEEK <= a.completed_at < now - WEEK
        ]
        score_change = 0
        if this_week_scores and last_week_scores:
            score_change = round_score(mean(this_week_scores) - mean(last_week_scores))

        by_category = Counter(q.name or "Unknown" for q in questions)

        return {
            "totalUsers": len(users),
            "userStats": dict(user_stats),
            "totalQuestions": len(questions),
            "totalQuizzes": len(attempts),
            "averageScore": round_score(mean(a.score for a in attempts)),
            "newUsersThisWeek": users_this_week,
            "newUsersLastWeek": users_last_week,
            "newUsersChange": users_this_week - users_last_week,
            "newQuestionsThisWeek": questions_this_week,
            "newQuestionsLastWeek": questions_last_week,
            "newQuestionsChange": questions_this_week - questions_last_week,
            "newAttemptsThisWeek": attempts_this_week,
            "newAttemptsLastWeek": attempts_last_week,
            "newAttemptsChange": attempts_this_week - attempts_last_week,
            "scoreChange": score_change,
            "questionsByCategory": [
                {"category": name, "count": count} for name, count in sorted(by_category.items())
            ],
            "userGrowth": daily_series([u.created_at for u in users], now),
        }

    @service_call
    def tutor_analytics(self, tutor_id):
        own_questions = (
            self.session.query(Category.name, DifficultyLevel.name)
            .select_from(Question)
            .outerjoin(Category, Question.category_id == Category.id)
            .outerjoin(DifficultyLevel, Question.difficulty_id == DifficultyLevel.id)
            .filter(Question.created_by == tutor_id, Question.is_active.is_(True))
            .all()
        )
        by_category = Counter(category or "Unknown" for category, _ in own_questions)
        by_difficulty = Counter(difficulty or "Unknown" for _, difficulty in own_questions)

        attempts = self._completed_attempts()

        return {
            "totalQuestions": len(own_questions),
            "questionsByCategory": [
                {"category": name, "count": count} for name, count in sorted(by_category.items())
            ],
            "questionsByDifficulty": [
                {"difficulty": name, "count": count} for name, count in sorted(by_difficulty.items())
            ],
            "totalAttempts": len(attempts),
            "averageScore": round_score(mean(a.score for a in attempts)),
            "categoryStats": category_breakdown(attempts),
            "recentAttempts": [summarise_attempt(a) for a in self._newest_first(attempts)[:RECENT_ATTEMPTS_LIMIT]],
            "studentPerformance": self._leaderboard(attempts),
        }

    def _leaderboard(self, attempts):
        """Top students by mean score; the stable sort keeps query order for ties."""
        grouped = {}
        for attempt in attempts:
            entry = grouped.setdefault(attempt.student_id, {
                "student_id": attempt.student_id,
                "student_name": attempt.student.full_name if attempt.student else None,
                "scores": [],
            })
            entry["scores"].append(attempt.score or 0)

        rows = [
            {
                "student_id": entry["student_id"],
                "student_name": entry["student_name"],
                "attempts": len(entry["scores"]),
                "average_score": round_score(mean(entry["scores"])),
            }
            for entry in grouped.values()
        ]
        rows.sort(key=lambda row: row["average_score"], reverse=True)
        return rows[:LEADERBOARD_SIZE]
