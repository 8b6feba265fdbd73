from flask import Blueprint, jsonify
from ..accounting import to_money
from ..errors import BadRequest, Conflict
from ..extensions import db
from ..models import Room, RoomType, Booking
from ..payload import json_body, parse_int
from ..states import RoomStatus

room_types_bp = Blueprint('room_types', __name__)
rooms_bp = Blueprint('rooms', __name__)


@room_types_bp.get('')
def list_room_types():
    rows = RoomType.query.order_by(RoomType.name).all()
    return jsonify([t.to_dict() for t in rows])


@room_types_bp.post('')
def create_room_type():
    data = json_body()
    name = (data.get('name') or '').strip()
    if not name:
        raise BadRequest("Room type name is required")
    if RoomType.query.filter_by(name=name).first():
        raise Conflict("Room type already exists")
    rate = to_money(data.get('default_rate'))
    if rate < 0:
        raise BadRequest("Default rate cannot be negative")

    t = RoomType(name=name, default_rate=rate)
    db.session.add(t)
    db.session.commit()
    return jsonify(t.to_dict()), 201


@room_types_bp.delete('/<int:type_id>')
def delete_room_type(type_id):
    t = RoomType.query.get_or_404(type_id, description="Room type not found")
    if Room.query.filter_by(type_id=t.id).first():
        raise Conflict("Cannot delete room type that is in use")
    db.session.delete(t)
    db.session.commit()
    return jsonify({'message': 'Room type deleted successfully'})


@rooms_bp.get('')
def list_rooms():
    rows = Room.query.order_by(Room.number).all()
    return jsonify([r.to_dict() for r in rows])


@rooms_bp.post('')
def create_room():
    data = json_body()
    number = str(data.get('number') or '').strip()
    if not number:
        raise BadRequest("Room number is required")
    if not data.get('type_id'):
        raise BadRequest("Room type is required")
    room_type = db.session.get(RoomType, parse_int(data['type_id'], "Room type"))
    if room_type is None:
        raise BadRequest("Invalid room type")
    if Room.query.filter_by(number=number).first():
        raise Conflict("Room number already exists")

    status = data.get('status') or RoomStatus.AVAILABLE.value
    if status not in RoomStatus._value2member_map_:
        raise BadRequest("Invalid room status")

    r = Room(number=number, type_id=room_type.id, status=status)
    db.session.add(r)
    db.session.commit()
    return jsonify(r.to_dict()), 201


@rooms_bp.delete('/<int:room_id>')
def delete_room(room_id):
    r = Room.query.get_or_404(room_id, description="Room not found")
    if Booking.query.filter_by(room_id=r.id).first():
        raise Conflict("Cannot delete a room that has bookings")
    db.session.delete(r)
    db.session.commit()
    return jsonify({'message': 'Room deleted successfully'})
