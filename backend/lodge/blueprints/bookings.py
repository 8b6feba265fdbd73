import logging
from datetime import date

from flask import Blueprint, jsonify, request

from ..accounting import compute_stay, to_money
from ..auth import current_user
from ..billing import generate_room_bill, preview_room_bill, print_view
from ..errors import BadRequest, Conflict, NotFound
from ..extensions import db
from ..models import Booking, Customer, Room
from ..payload import json_body, parse_bool, parse_date, parse_int
from ..states import ACTIVE_BOOKING_STATUSES, BookingStatus, RoomStatus, can_transition

logger = logging.getLogger(__name__)

bookings_bp = Blueprint('bookings', __name__)

# room status that follows each booking status
ROOM_STATUS_FOR = {
    BookingStatus.CHECKED_IN.value: RoomStatus.OCCUPIED.value,
    BookingStatus.CHECKED_OUT.value: RoomStatus.AVAILABLE.value,
}


def overlapping_booking(room_id, check_in, check_out):
    return Booking.query.filter(
        Booking.room_id == room_id,
        Booking.status.in_(ACTIVE_BOOKING_STATUSES),
        Booking.check_in < check_out,
        Booking.check_out > check_in,
    ).first()


def change_status(booking: Booking, target: str):
    if target not in BookingStatus._value2member_map_:
        raise BadRequest("Invalid status")
    if booking.status == target:
        return booking
    if not can_transition(booking.status, target):
        raise Conflict(f"Booking cannot move from {booking.status} to {target}")

    if target == BookingStatus.CANCELLED.value and booking.status == BookingStatus.CHECKED_IN.value:
        booking.room.status = RoomStatus.AVAILABLE.value
    elif target in ROOM_STATUS_FOR:
        booking.room.status = ROOM_STATUS_FOR[target]
    logger.info("booking %s: %s -> %s", booking.id, booking.status, target)
    booking.status = target
    db.session.commit()
    return booking


@bookings_bp.get('')
def list_bookings():
    query = Booking.query
    if request.args.get('status'):
        query = query.filter_by(status=request.args['status'])
    if request.args.get('customer_id'):
        query = query.filter_by(customer_id=parse_int(request.args['customer_id'], "Customer"))
    rows = query.order_by(Booking.created_at.desc(), Booking.id.desc()).all()
    return jsonify([b.to_dict() for b in rows])


@bookings_bp.get('/<int:booking_id>')
def show_booking(booking_id):
    b = Booking.query.get_or_404(booking_id, description="Booking not found")
    return jsonify(b.to_dict())


@bookings_bp.post('')
def create_booking():
    data = json_body()
    if not data.get('customer_id') or not data.get('room_id') or not data.get('check_in') or not data.get('check_out'):
        raise BadRequest("Customer, room, check-in and check-out are required")

    check_in = parse_date(data['check_in'], "Check-in date")
    check_out = parse_date(data['check_out'], "Check-out date")
    if check_in < date.today():
        raise BadRequest("Check-in date cannot be in the past")

    customer = db.session.get(Customer, parse_int(data['customer_id'], "Customer"))
    if customer is None:
        raise BadRequest("Customer not found")
    room = db.session.get(Room, parse_int(data['room_id'], "Room"))
    if room is None:
        raise BadRequest("Room not found")
    if room.status == RoomStatus.MAINTENANCE.value:
        raise Conflict("Room is under maintenance")

    rate = data.get('price_per_night')
    if rate in (None, ''):
        rate = room.room_type.default_rate
    stay = compute_stay(check_in, check_out, rate)

    if overlapping_booking(room.id, check_in, check_out):
        raise Conflict("Room is not available for the selected dates")

    b = Booking(customer_id=customer.id,
                room_id=room.id,
                check_in=check_in,
                check_out=check_out,
                price_per_night=to_money(rate),
                nights=stay.nights,
                total_amount=stay.subtotal,
                status=BookingStatus.CONFIRMED.value)
    db.session.add(b)
    db.session.commit()
    logger.info("booking %s created for room %s, %s nights", b.id, room.number, stay.nights)
    return jsonify(b.to_dict()), 201


@bookings_bp.put('/<int:booking_id>')
def update_booking(booking_id):
    b = Booking.query.get_or_404(booking_id, description="Booking not found")
    data = json_body()
    change_status(b, data.get('status') or '')
    return jsonify({'message': 'Booking updated successfully', 'booking': b.to_dict()})


@bookings_bp.put('/<int:booking_id>/cancel')
def cancel_booking(booking_id):
    b = Booking.query.get_or_404(booking_id, description="Booking not found")
    if b.status == BookingStatus.CANCELLED.value:
        raise BadRequest("Booking is already cancelled")
    if b.status == BookingStatus.CHECKED_OUT.value:
        raise BadRequest("Cannot cancel a completed booking")
    change_status(b, BookingStatus.CANCELLED.value)
    return jsonify({'message': 'Booking cancelled successfully'})


def _include_gst(source):
    return parse_bool(source.get('include_gst'), default=True)


@bookings_bp.get('/<int:booking_id>/bill-preview')
def bill_preview(booking_id):
    b = Booking.query.get_or_404(booking_id, description="Booking not found")
    return jsonify(preview_room_bill(b, _include_gst(request.args)))


@bookings_bp.post('/<int:booking_id>/generate-bill')
def generate_bill(booking_id):
    b = Booking.query.get_or_404(booking_id, description="Booking not found")
    bill = generate_room_bill(b, _include_gst(json_body()), current_user())
    return jsonify(print_view(bill)), 201


@bookings_bp.get('/<int:booking_id>/bill')
def show_booking_bill(booking_id):
    b = Booking.query.get_or_404(booking_id, description="Booking not found")
    if b.bill is None:
        raise NotFound("Bill not found")
    return jsonify(print_view(b.bill))
