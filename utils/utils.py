from functools import wraps
from flask import request, jsonify, g
from classes.errors import PermissionDeniedError
from classes.principal import Principal
from classes.results import ServiceResult
from utils.tokens import decode_jwt


def _request_token():
    token = request.cookies.get("access_token")
    if token:
        return token
    header = request.headers.get("Authorization", "")
    if header.startswith("Bearer "):
        return header[len("Bearer "):].strip()
    return None

def login_required(f):
    @wraps(f)
    def decorated_function(*args, **kwargs):
        token = _request_token()
        if not token:
            return jsonify({"success": False, "data": None, "error": "Unauthorized"}), 401

        decoded = decode_jwt(token)
        try:
            principal = Principal(id=int(decoded["user_id"]), role=decoded["role"])
        except (TypeError, KeyError, ValueError):
            return jsonify({"success": False, "data": None, "error": "Invalid token"}), 401

        g.user = decoded
        g.principal = principal
        return f(*args, **kwargs)

    return decorated_function

def role_required(*roles):
    """Only let principals with one of ``roles`` through; use under login_required."""
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if g.principal.role not in roles:
                return respond(ServiceResult.fail(PermissionDeniedError()))
            return f(*args, **kwargs)
        return decorated_function
    return decorator

def respond(result, success_status=200):
    """Turn a ServiceResult into the JSON envelope every route answers with."""
    status = success_status if result.success else result.status
    return jsonify(result.to_dict()), status

def json_body():
    return request.get_json(silent=True) or {}
