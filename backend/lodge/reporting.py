"""Rental report: filtered bill rows, summary totals and CSV export."""
from dataclasses import dataclass, asdict
from datetime import date, datetime
from decimal import Decimal, InvalidOperation

import pandas as pd
from sqlalchemy import Date, func

from .accounting import ZERO, to_money
from .errors import BadRequest
from .extensions import db
from .models import Bill, Booking, Customer, Room, RoomType
from .states import BillStatus

DATE_TYPES = ('check_in', 'check_out', 'booking_date', 'bill_date')
GST_FILTERS = ('all', 'gst_only', 'non_gst_only')

CSV_COLUMNS = [
    ('booking_id', 'Booking ID'),
    ('bill_number', 'Bill Number'),
    ('booking_date', 'Booking Date'),
    ('check_in', 'Check In'),
    ('check_out', 'Check Out'),
    ('nights', 'Nights'),
    ('customer_name', 'Customer Name'),
    ('customer_phone', 'Customer Phone'),
    ('room_number', 'Room Number'),
    ('room_type', 'Room Type'),
    ('price_per_night', 'Price Per Night'),
    ('subtotal', 'Subtotal'),
    ('gst_included', 'GST Included'),
    ('gst_percent', 'GST %'),
    ('gst_amount', 'GST Amount'),
    ('total_amount', 'Total Amount'),
    ('status', 'Status'),
    ('bill_date', 'Bill Date'),
]
MONEY_COLUMNS = ('price_per_night', 'subtotal', 'gst_percent', 'gst_amount', 'total_amount')


def _parse_date(value, name):
    if not value:
        return None
    try:
        return datetime.strptime(value, '%Y-%m-%d').date()
    except ValueError:
        raise BadRequest(f"Invalid {name}. Use YYYY-MM-DD")


def _parse_amount(value):
    if not value:
        return None
    try:
        amount = Decimal(value)
    except InvalidOperation:
        return None
    return amount if amount.is_finite() else None


@dataclass
class RentalReportFilter:
    date_from: date | None = None
    date_to: date | None = None
    date_type: str = 'check_in'
    customer_name: str = ''
    room_type: str = ''
    room_number: str = ''
    status: str = ''
    gst_filter: str = 'all'
    min_amount: Decimal | None = None
    max_amount: Decimal | None = None

    @classmethod
    def from_args(cls, args):
        date_type = args.get('date_type') or 'check_in'
        if date_type not in DATE_TYPES:
            date_type = 'check_in'
        gst_filter = args.get('gst_filter') or 'all'
        if gst_filter not in GST_FILTERS:
            gst_filter = 'all'
        return cls(
            date_from=_parse_date(args.get('date_from'), 'date_from'),
            date_to=_parse_date(args.get('date_to'), 'date_to'),
            date_type=date_type,
            customer_name=(args.get('customer_name') or '').strip(),
            room_type=(args.get('room_type') or '').strip(),
            room_number=(args.get('room_number') or '').strip(),
            status=(args.get('status') or '').strip(),
            gst_filter=gst_filter,
            min_amount=_parse_amount(args.get('min_amount')),
            max_amount=_parse_amount(args.get('max_amount')),
        )

    def to_dict(self):
        out = asdict(self)
        for key in ('date_from', 'date_to'):
            out[key] = out[key].isoformat() if out[key] else ''
        for key in ('min_amount', 'max_amount'):
            out[key] = str(out[key]) if out[key] is not None else ''
        return out


def _date_column(date_type):
    if date_type == 'check_out':
        return Booking.check_out
    if date_type == 'booking_date':
        return func.date(Booking.created_at, type_=Date)
    if date_type == 'bill_date':
        return Bill.bill_date
    return Booking.check_in


def build_query(filters: RentalReportFilter):
    query = (
        db.session.query(Bill, Booking, Customer, Room, RoomType)
        .join(Customer, Bill.customer_id == Customer.id)
        .outerjoin(Booking, Bill.booking_id == Booking.id)
        .outerjoin(Room, Booking.room_id == Room.id)
        .outerjoin(RoomType, Room.type_id == RoomType.id)
        .filter(Bill.status != BillStatus.DRAFT.value)
    )

    date_col = _date_column(filters.date_type)
    if filters.date_from:
        query = query.filter(date_col >= filters.date_from)
    if filters.date_to:
        query = query.filter(date_col <= filters.date_to)
    if filters.customer_name:
        query = query.filter(Customer.name.ilike(f"%{filters.customer_name}%"))
    if filters.room_type:
        query = query.filter(RoomType.name.ilike(f"%{filters.room_type}%"))
    if filters.room_number:
        query = query.filter(Room.number.ilike(f"%{filters.room_number}%"))
    if filters.status:
        query = query.filter(Booking.status == filters.status)
    if filters.gst_filter == 'gst_only':
        query = query.filter(Bill.gst_included.is_(True))
    elif filters.gst_filter == 'non_gst_only':
        query = query.filter(Bill.gst_included.is_(False))
    if filters.min_amount is not None:
        query = query.filter(Bill.total_amount >= filters.min_amount)
    if filters.max_amount is not None:
        query = query.filter(Bill.total_amount <= filters.max_amount)

    return query.order_by(Booking.check_in.desc(), Bill.created_at.desc(), Bill.id.desc())


def _iso(value):
    return value.isoformat() if value is not None else ''


def query_rows(filters: RentalReportFilter):
    rows = []
    for bill, booking, customer, room, room_type in build_query(filters).all():
        rows.append({
            'bill_id': bill.id,
            'booking_id': booking.id if booking else None,
            'bill_number': bill.bill_number or '',
            'booking_date': _iso(booking.created_at.date()) if booking and booking.created_at else '',
            'check_in': _iso(booking.check_in) if booking else '',
            'check_out': _iso(booking.check_out) if booking else '',
            'nights': booking.nights if booking else 0,
            'customer_id': customer.id,
            'customer_name': customer.name,
            'customer_phone': customer.phone,
            'room_number': room.number if room else '',
            'room_type': room_type.name if room_type else '',
            'price_per_night': float(booking.price_per_night) if booking else 0.0,
            'subtotal': float(bill.subtotal),
            'gst_included': bool(bill.gst_included),
            'gst_percent': float(bill.gst_percent or 0),
            'gst_amount': float(bill.gst_amount or 0),
            'total_amount': float(bill.total_amount),
            'status': booking.status if booking else '',
            'bill_status': bill.status,
            'bill_type': bill.bill_type,
            'bill_date': _iso(bill.bill_date),
        })
    return rows


def summarize(rows):
    """Reduce report rows to the summary block shown above the table."""
    total_revenue = total_gst = total_non_gst = total_gst_revenue = ZERO
    total_nights = 0
    customers = set()

    for row in rows:
        amount = to_money(row['total_amount'])
        total_revenue += amount
        if row['gst_included']:
            total_gst += to_money(row['gst_amount'])
            total_gst_revenue += amount
        else:
            total_non_gst += amount
        total_nights += int(row.get('nights') or 0)
        customers.add(row['customer_id'])

    count = len(rows)
    return {
        'total_bookings': count,
        'total_revenue': float(total_revenue),
        'total_gst_amount': float(total_gst),
        'total_non_gst': float(total_non_gst),
        'total_gst_revenue': float(total_gst_revenue),
        'average_stay_nights': total_nights / count if count else 0,
        'unique_customers': len(customers),
    }


def export_csv(rows) -> str:
    df = pd.DataFrame(rows, columns=[key for key, _ in CSV_COLUMNS])
    for key in MONEY_COLUMNS:
        df[key] = df[key].map(lambda v: f"{v:.2f}")
    df['gst_included'] = df['gst_included'].map(lambda v: 'Yes' if v else 'No')
    # manual bills have no booking; pandas turns the gaps into NaN floats
    df['booking_id'] = df['booking_id'].map(lambda v: '' if pd.isna(v) else str(int(v)))
    df = df.rename(columns=dict(CSV_COLUMNS))
    return df.to_csv(index=False)


def report_filename(today: date | None = None) -> str:
    return f"rental_report_{(today or date.today()).isoformat()}.csv"
