from datetime import datetime
from typing import Optional

from flask import request

from services.errors import ValidationError


def require_json() -> dict:
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body


def parse_due_date(value) -> Optional[datetime]:
    """Accept an ISO-8601 datetime, 'YYYY-MM-DD' or 'dd/mm/yyyy'."""
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ValidationError("due_date must be a string")
    s = value.strip()
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(s)
    except ValueError:
        pass
    # dd/mm/yyyy or dd-mm-yyyy
    if len(s) == 10 and s[2] in "-/" and s[5] == s[2]:
        try:
            return datetime.strptime(s, f"%d{s[2]}%m{s[2]}%Y")
        except ValueError:
            pass
    raise ValidationError(f"due_date is not a valid date: {value!r}")


def parse_limit(value, default: int) -> int:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError("limit must be an integer")
