from flask import Blueprint, current_app, g, request

from classes.principal import SUPER_TUTOR
from classes.progress_aggregator import ProgressAggregator
from classes.user_directory import UserDirectory
from models import db
from utils.utils import json_body, login_required, respond, role_required

# Super tutors' blueprint
super_tutor_bp = Blueprint("super_tutor", __name__)


@login_required
@role_required(SUPER_TUTOR)
def _authorise():
    return None

@super_tutor_bp.before_request
def require_super_tutor():
    if request.method != "OPTIONS":
        return _authorise()


@super_tutor_bp.route("/analytics", methods=["GET"])
def get_system_analytics():
    return respond(ProgressAggregator(db.session).system_analytics())

@super_tutor_bp.route("/dashboard", methods=["GET"])
def get_admin_dashboard():
    sections = {
        "analytics": ProgressAggregator(db.session).system_analytics(),
        "recent_users": UserDirectory(db.session).list_users(limit=10),
    }
    for name, section in sections.items():
        if not section.success:
            current_app.logger.warning("Admin dashboard section %s failed: %s", name, section.error)
    return {name: section.to_dict() for name, section in sections.items()}, 200

#__________________________________________________________________________________________ * Users *__________________________________________________

@super_tutor_bp.route("/users", methods=["GET"])
def get_users():
    result = UserDirectory(db.session).list_users(
        role=request.args.get("role"),
        search=request.args.get("search"),
        limit=request.args.get("limit", type=int),
    )
    return respond(result)

@super_tutor_bp.route("/users", methods=["POST"])
def create_user():
    current_app.logger.info("Super tutor %s creating a user", g.principal.id)
    return respond(UserDirectory(db.session).create_user(json_body()), success_status=201)

@super_tutor_bp.route("/users/username-available", methods=["GET"])
def check_username():
    return respond(UserDirectory(db.session).username_available(request.args.get("username")))

@super_tutor_bp.route("/users/<int:user_id>", methods=["GET"])
def get_user(user_id):
    return respond(UserDirectory(db.session).get_user(user_id))

@super_tutor_bp.route("/users/<int:user_id>", methods=["PUT"])
def update_user(user_id):
    current_app.logger.info("Super tutor %s updating user %s", g.principal.id, user_id)
    return respond(UserDirectory(db.session).update_user(user_id, json_body()))

@super_tutor_bp.route("/users/<int:user_id>", methods=["DELETE"])
def deactivate_user(user_id):
    return respond(UserDirectory(db.session).deactivate_user(user_id))
