from datetime import date
from flask import Blueprint, jsonify
from sqlalchemy import func
from ..extensions import db
from ..models import Customer, Room, Booking, Bill
from ..states import ACTIVE_BOOKING_STATUSES, BillStatus, BookingStatus, RoomStatus

main_bp = Blueprint('main', __name__)


@main_bp.get('/health')
def health():
    return jsonify({'status': 'ok'})


@main_bp.get('/dashboard')
def dashboard():
    today = date.today()
    revenue = (db.session.query(func.coalesce(func.sum(Bill.total_amount), 0))
               .filter(Bill.status != BillStatus.DRAFT.value).scalar())
    stats = {
        'customers': Customer.query.count(),
        'rooms': Room.query.count(),
        'available_rooms': Room.query.filter_by(status=RoomStatus.AVAILABLE.value).count(),
        'occupied_rooms': Room.query.filter_by(status=RoomStatus.OCCUPIED.value).count(),
        'active_bookings': Booking.query.filter(Booking.status.in_(ACTIVE_BOOKING_STATUSES)).count(),
        'arrivals_today': Booking.query.filter_by(check_in=today,
                                                  status=BookingStatus.CONFIRMED.value).count(),
        'unpaid_bills': Bill.query.filter(Bill.status.in_(
            [BillStatus.FINALIZED.value, BillStatus.UNPAID.value])).count(),
        'total_revenue': float(revenue),
    }
    return jsonify(stats)
