import re
from flask import Blueprint, jsonify
from ..errors import BadRequest, NotFound
from ..extensions import db
from ..models import BusinessSettings
from ..payload import json_body

settings_bp = Blueprint('settings', __name__)

GSTIN_PATTERN = re.compile(r'^[0-9]{2}[A-Z]{5}[0-9]{4}[A-Z]{1}[1-9A-Z]{1}Z[0-9A-Z]{1}$')


def _gst_percentage(value):
    try:
        pct = float(value if value not in (None, '') else 0)
    except (TypeError, ValueError):
        raise BadRequest("GST percentage must be a number")
    if pct < 0 or pct > 100:
        raise BadRequest("GST percentage must be between 0 and 100")
    return pct


@settings_bp.get('')
def show_settings():
    s = BusinessSettings.query.first()
    if s is None:
        raise NotFound("No settings found")
    return jsonify(s.to_dict())


@settings_bp.post('')
def save_settings():
    data = json_body()
    name = (data.get('property_name') or '').strip()
    if not name:
        raise BadRequest("Property name is required")
    gst_number = (data.get('gst_number') or '').strip().upper()
    if gst_number and not GSTIN_PATTERN.match(gst_number):
        raise BadRequest("Invalid GST number format")

    s = BusinessSettings.query.first()
    if s is None:
        s = BusinessSettings()
        db.session.add(s)
    s.property_name = name
    s.property_address = (data.get('property_address') or '').strip()
    s.phone = (data.get('phone') or '').strip()
    s.gst_number = gst_number
    s.gst_percentage = _gst_percentage(data.get('gst_percentage'))
    s.state_name = (data.get('state_name') or '').strip()
    s.state_code = (data.get('state_code') or '').strip()
    db.session.commit()
    return jsonify(s.to_dict())
