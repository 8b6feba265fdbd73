from datetime import datetime

from flask import request

from .errors import BadRequest


def json_body():
    data = request.get_json(silent=True)
    if data is None:
        data = request.form.to_dict() if request.form else None
    if data is None:
        if request.data:
            raise BadRequest("Invalid request body")
        return {}
    if not isinstance(data, dict):
        raise BadRequest("Invalid request body")
    return data


def parse_date(value, label):
    if not value:
        raise BadRequest(f"{label} is required")
    try:
        return datetime.strptime(str(value)[:10], '%Y-%m-%d').date()
    except ValueError:
        raise BadRequest(f"Invalid {label.lower()} format. Use YYYY-MM-DD")


def parse_int(value, label):
    if value is None or value == '':
        raise BadRequest(f"{label} is required")
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise BadRequest(f"{label} must be a whole number")
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        raise BadRequest(f"{label} must be a whole number")


def parse_bool(value, default=False):
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ('1', 'true', 'yes', 'on')
