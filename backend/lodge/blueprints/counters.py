from flask import Blueprint, jsonify
from ..auth import admin_required
from ..numbering import list_counters, set_starting_number
from ..payload import json_body, parse_int

counters_bp = Blueprint('counters', __name__)


@counters_bp.get('')
def show_counters():
    return jsonify(list_counters())


@counters_bp.post('/update')
@admin_required
def update_counter():
    data = json_body()
    series = data.get('counter_type')
    starting_number = parse_int(data.get('starting_number'), "Starting number")
    warning = set_starting_number(series, starting_number)

    body = {'message': f"{series} counter updated to start from {starting_number}"}
    if warning:
        body['warning'] = warning
    return jsonify(body)
