from flask import Blueprint, current_app, g, jsonify, request

from routes.auth_utils import current_flow, require_auth
from utils.payload import parse_due_date, parse_limit, require_json

todo_bp = Blueprint("todos", __name__)


@todo_bp.get("")
@require_auth
def list_todos():
    limit = parse_limit(request.args.get("limit"), current_app.config["DEFAULT_LIST_LIMIT"])
    items = current_flow().list_items(g.token, limit)
    return jsonify([t.to_dict() for t in items])


@todo_bp.post("")
@require_auth
def create_todo():
    body = require_json()
    item = current_flow().create_item(
        g.token,
        name=body.get("name"),
        description=body.get("description"),
        due_date=parse_due_date(body.get("due_date")),
        priority=body.get("priority"),
    )
    return jsonify(item.to_dict()), 201


@todo_bp.get("/<todo_id>")
@require_auth
def get_todo(todo_id: str):
    item = current_flow().get_item(g.token, todo_id)
    return jsonify(item.to_dict())


@todo_bp.put("/<todo_id>")
@require_auth
def update_todo(todo_id: str):
    body = require_json()
    item = current_flow().update_item(
        g.token,
        todo_id,
        description=body.get("description"),
        due_date=parse_due_date(body.get("due_date")),
        priority=body.get("priority"),
    )
    return jsonify(item.to_dict())


@todo_bp.patch("/<todo_id>/complete")
@require_auth
def complete_todo(todo_id: str):
    item = current_flow().complete_item(g.token, todo_id)
    return jsonify(item.to_dict())


@todo_bp.delete("/<todo_id>")
@require_auth
def delete_todo(todo_id: str):
    current_flow().delete_item(g.token, todo_id)
    return jsonify({"message": "Item deleted successfully"})
