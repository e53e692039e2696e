from flask import Blueprint, current_app, g, request

from classes.answer_recorder import AnswerRecorder
from classes.attempt_session import AttemptSession
from classes.catalog import Catalog
from classes.feedback_exchange import FeedbackExchange
from classes.principal import STUDENT
from classes.progress_aggregator import ProgressAggregator
from classes.scorer import Scorer
from models import db
from utils.utils import json_body, login_required, respond, role_required

# Students' blueprint
student_bp = Blueprint("student", __name__)


@login_required
@role_required(STUDENT)
def _authorise():
    return None

@student_bp.before_request
def require_student():
    # preflight requests carry no credentials
    if request.method != "OPTIONS":
        return _authorise()


@student_bp.route("/quizzes/available", methods=["GET"])
def get_available_quizzes():
    return respond(Catalog(db.session).available_quizzes())

# Start a Quiz Attempt
@student_bp.route("/quiz/start", methods=["POST"])
def start_quiz():
    data = json_body()
    result = AttemptSession(db.session, current_app.config).start(
        g.principal.id,
        data.get("category_id"),
        data.get("difficulty_id"),
        data.get("question_count"),
    )
    return respond(result, 201)

@student_bp.route("/quiz/<int:attempt_id>", methods=["GET"])
def get_attempt(attempt_id):
    return respond(AttemptSession(db.session, current_app.config).get_attempt(g.principal.id, attempt_id))

@student_bp.route("/quiz/<int:attempt_id>/answers", methods=["POST"])
def record_answers(attempt_id):
    data = json_body()
    result = AnswerRecorder(db.session).record_answers(g.principal.id, attempt_id, data.get("answers"))
    return respond(result, 201)

@student_bp.route("/quiz/<int:attempt_id>/submit", methods=["POST"])
def submit_quiz(attempt_id):
    """Grades the quiz from every answer recorded for the attempt."""
    data = json_body()
    current_app.logger.info("Student %s submitting attempt %s", g.principal.id, attempt_id)
    result = Scorer(db.session).submit(
        g.principal.id,
        attempt_id,
        data.get("answers"),
        time_taken=data.get("time_taken"),
        expected_version=data.get("version"),
    )
    return respond(result)

#Get Quiz Results
@student_bp.route("/quiz/<int:attempt_id>/results", methods=["GET"])
def get_quiz_results(attempt_id):
    return respond(Scorer(db.session).get_result(g.principal, attempt_id))

@student_bp.route("/quiz/<int:attempt_id>/feedback", methods=["GET"])
def get_attempt_feedback(attempt_id):
    return respond(FeedbackExchange(db.session).feedback_for_attempt(g.principal, attempt_id))

@student_bp.route("/results", methods=["GET"])
def get_results():
    result = Scorer(db.session).list_results(
        g.principal,
        category_id=request.args.get("category_id", type=int),
        limit=request.args.get("limit", type=int),
    )
    return respond(result)

@student_bp.route("/progress", methods=["GET"])
def get_progress():
    return respond(ProgressAggregator(db.session).student_progress(g.principal.id))

@student_bp.route("/dashboard", methods=["GET"])
def get_student_dashboard():
    """Each section succeeds or fails on its own."""
    sections = {
        "progress": ProgressAggregator(db.session).student_progress(g.principal.id),
        "recent_results": Scorer(db.session).list_results(g.principal, limit=5),
        "feedback": FeedbackExchange(db.session).list_feedback(g.principal),
        "available_quizzes": Catalog(db.session).available_quizzes(),
    }
    for name, section in sections.items():
        if not section.success:
            current_app.logger.warning("Student dashboard section %s failed: %s", name, section.error)
    return {name: section.to_dict() for name, section in sections.items()}, 200

@student_bp.route("/feedback", methods=["GET"])
def get_feedback():
    return respond(FeedbackExchange(db.session).list_feedback(g.principal))

@student_bp.route("/feedback", methods=["POST"])
def create_student_feedback():
    data = json_body()
    result = FeedbackExchange(db.session).create_student_feedback(
        g.principal.id,
        data.get("attempt_id"),
        data.get("feedback_text"),
        rating=data.get("rating"),
        tutor_id=data.get("tutor_id"),
    )
    return respond(result, 201)
