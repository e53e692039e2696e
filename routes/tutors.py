from flask import Blueprint, current_app, g, request

from classes.catalog import Catalog
from classes.feedback_exchange import FeedbackExchange
from classes.principal import SUPER_TUTOR, TUTOR
from classes.progress_aggregator import ProgressAggregator
from classes.question_bank import QuestionBank
from classes.scorer import Scorer
from classes.user_directory import UserDirectory
from models import db
from utils.utils import json_body, login_required, respond, role_required

# Tutors' blueprint
tutor_bp = Blueprint("tutor", __name__)

STAFF = (TUTOR, SUPER_TUTOR)

#__________________________________________________________________________________________ * Questions *__________________________________________________

# fetch questions with filters and pagination
@tutor_bp.route("/questions", methods=["GET"])
@login_required
@role_required(*STAFF)
def get_questions():
    result = QuestionBank(db.session, current_app.config).list_questions(
        category_id=request.args.get("category_id", type=int),
        difficulty_id=request.args.get("difficulty_id", type=int),
        search=request.args.get("search"),
        page=request.args.get("page", 1, type=int),
        limit=request.args.get("limit", 10, type=int),
    )
    return respond(result)

@tutor_bp.route("/questions/<int:question_id>", methods=["GET"])
@login_required
@role_required(*STAFF)
def get_question(question_id):
    return respond(QuestionBank(db.session, current_app.config).get_question(question_id))

@tutor_bp.route("/questions", methods=["POST"])
@login_required
@role_required(*STAFF)
def create_question():
    result = QuestionBank(db.session, current_app.config).create_question(g.principal.id, json_body())
    return respond(result, 201)

@tutor_bp.route("/questions/<int:question_id>", methods=["PUT"])
@login_required
@role_required(*STAFF)
def update_question(question_id):
    return respond(QuestionBank(db.session, current_app.config).update_question(question_id, json_body()))

@tutor_bp.route("/questions/<int:question_id>", methods=["DELETE"])
@login_required
@role_required(*STAFF)
def delete_question(question_id):
    return respond(QuestionBank(db.session, current_app.config).delete_question(question_id))

#__________________________________________________________________________________________ * Categories *__________________________________________________

@tutor_bp.route("/categories", methods=["GET"])
@login_required
@role_required(*STAFF)
def get_categories():
    return respond(Catalog(db.session).list_categories())

@tutor_bp.route("/categories", methods=["POST"])
@login_required
@role_required(*STAFF)
def create_category():
    return respond(Catalog(db.session).create_category(g.principal.id, json_body()), 201)

@tutor_bp.route("/categories/<int:category_id>", methods=["PUT"])
@login_required
@role_required(*STAFF)
def update_category(category_id):
    return respond(Catalog(db.session).update_category(category_id, json_body()))

@tutor_bp.route("/categories/<int:category_id>", methods=["DELETE"])
@login_required
@role_required(*STAFF)
def delete_category(category_id):
    return respond(Catalog(db.session).delete_category(category_id))

@tutor_bp.route("/difficulty-levels", methods=["GET"])
@login_required
@role_required(*STAFF)
def get_difficulty_levels():
    return respond(Catalog(db.session).list_difficulty_levels())

#__________________________________________________________________________________________ * Results *__________________________________________________

@tutor_bp.route("/results", methods=["GET"])
@login_required
@role_required(*STAFF)
def get_results():
    result = Scorer(db.session).list_results(
        g.principal,
        student_id=request.args.get("student_id", type=int),
        category_id=request.args.get("category_id", type=int),
        limit=request.args.get("limit", type=int),
    )
    return respond(result)

@tutor_bp.route("/results/<int:attempt_id>", methods=["GET"])
@login_required
@role_required(*STAFF)
def get_result(attempt_id):
    return respond(Scorer(db.session).get_result(g.principal, attempt_id))

@tutor_bp.route("/students", methods=["GET"])
@login_required
@role_required(*STAFF)
def get_students():
    return respond(UserDirectory(db.session).list_students())

@tutor_bp.route("/students/<int:student_id>/progress", methods=["GET"])
@login_required
@role_required(*STAFF)
def get_student_progress(student_id):
    return respond(ProgressAggregator(db.session).student_progress(student_id))

#__________________________________________________________________________________________ * Analytics *__________________________________________________

@tutor_bp.route("/analytics", methods=["GET"])
@login_required
@role_required(*STAFF)
def get_tutor_analytics():
    return respond(ProgressAggregator(db.session).tutor_analytics(g.principal.id))

@tutor_bp.route("/dashboard", methods=["GET"])
@login_required
@role_required(*STAFF)
def get_tutor_dashboard():
    sections = {
        "analytics": ProgressAggregator(db.session).tutor_analytics(g.principal.id),
        "recent_results": Scorer(db.session).list_results(g.principal, limit=10),
        "feedback": FeedbackExchange(db.session).list_feedback(g.principal),
    }
    for name, section in sections.items():
        if not section.success:
            current_app.logger.warning("Tutor dashboard section %s failed: %s", name, section.error)
    return {name: section.to_dict() for name, section in sections.items()}, 200

#__________________________________________________________________________________________ * Feedback *__________________________________________________

@tutor_bp.route("/feedback", methods=["GET"])
@login_required
@role_required(*STAFF)
def get_feedback():
    result = FeedbackExchange(db.session).list_feedback(
        g.principal, student_id=request.args.get("student_id", type=int)
    )
    return respond(result)

@tutor_bp.route("/results/<int:attempt_id>/feedback", methods=["GET"])
@login_required
@role_required(*STAFF)
def get_attempt_feedback(attempt_id):
    return respond(FeedbackExchange(db.session).feedback_for_attempt(g.principal, attempt_id))

@tutor_bp.route("/feedback", methods=["POST"])
@login_required
@role_required(*STAFF)
def create_feedback():
    data = json_body()
    result = FeedbackExchange(db.session).create_feedback(
        g.principal.id,
        data.get("attempt_id"),
        data.get("feedback_text"),
        rating=data.get("rating"),
        recommendations=data.get("recommendations"),
    )
    return respond(result, 201)

@tutor_bp.route("/feedback/<int:feedback_id>", methods=["PUT"])
@login_required
@role_required(*STAFF)
def update_feedback(feedback_id):
    data = json_body()
    result = FeedbackExchange(db.session).update_feedback(
        g.principal,
        feedback_id,
        data.get("feedback_text"),
        rating=data.get("rating"),
        recommendations=data.get("recommendations"),
    )
    return respond(result)

@tutor_bp.route("/feedback/<int:feedback_id>", methods=["DELETE"])
@login_required
@role_required(*STAFF)
def delete_feedback(feedback_id):
    return respond(FeedbackExchange(db.session).delete_feedback(g.principal, feedback_id))
