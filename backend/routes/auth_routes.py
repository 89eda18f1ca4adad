from flask import Blueprint, jsonify

from routes.auth_utils import current_flow
from services.errors import ValidationError
from utils.payload import require_json

auth_bp = Blueprint("auth", __name__)


def _credentials():
    body = require_json()
    email = body.get("email") or ""
    password = body.get("password") or ""
    if not isinstance(email, str) or not isinstance(password, str):
        raise ValidationError("Email and password must be strings")
    return email.strip().lower(), password


@auth_bp.post("/register")
def register():
    email, password = _credentials()
    user = current_flow().register(email, password)
    return jsonify({"message": "User registered successfully", "id": user.id}), 201


@auth_bp.post("/login")
def login():
    email, password = _credentials()
    token = current_flow().login(email, password)
    return jsonify({"message": "User logged in successfully", "token": token})
