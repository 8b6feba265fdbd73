"""Bill life cycle: room bills from bookings, manual bills, finalization and payments."""
import logging
from datetime import date, datetime

from .accounting import bill_totals, amount_in_words, is_settled, to_money
from .errors import BadRequest, Conflict
from .extensions import db
from .models import Bill, BillItem, BusinessSettings, Payment
from .numbering import next_number, series_for
from .payload import parse_bool
from .states import BillStatus, BookingStatus, can_transition

logger = logging.getLogger(__name__)

MANUAL_BILL_TYPES = ('WALK_IN', 'FOOD', 'MANUAL')
PAYMENT_METHODS = ('Cash', 'Card', 'UPI')


def lodge_settings() -> BusinessSettings:
    settings = BusinessSettings.query.first()
    if settings is None:
        raise BadRequest("Business settings not configured")
    return settings


def preview_room_bill(booking, include_gst: bool):
    settings = lodge_settings()
    totals = bill_totals(booking.total_amount, settings.gst_percentage, include_gst)
    return {
        'booking_id': booking.id,
        'nights': booking.nights,
        'price_per_night': float(booking.price_per_night),
        'subtotal': float(totals.subtotal),
        'gst_included': include_gst,
        'gst_percent': float(totals.gst_percent),
        'gst_amount': float(totals.gst_amount),
        'total_amount': float(totals.total_amount),
        'series': series_for(include_gst),
    }


def generate_room_bill(booking, include_gst: bool, user=None) -> Bill:
    if booking.bill is not None:
        raise Conflict("Bill already exists for this booking")
    if booking.status == BookingStatus.CANCELLED.value:
        raise BadRequest("Cannot generate a bill for a cancelled booking")

    settings = lodge_settings()
    totals = bill_totals(booking.total_amount, settings.gst_percentage, include_gst)
    number = next_number(series_for(include_gst))

    bill = Bill(customer_id=booking.customer_id,
                booking_id=booking.id,
                bill_type='ROOM',
                bill_number=number,
                bill_date=date.today(),
                subtotal=totals.subtotal,
                gst_included=include_gst,
                gst_percent=totals.gst_percent,
                gst_amount=totals.gst_amount,
                discount_amount=totals.discount_amount,
                total_amount=totals.total_amount,
                status=BillStatus.FINALIZED.value,
                generated_by=user.id if user else None,
                finalized_at=datetime.utcnow())
    db.session.add(bill)
    db.session.commit()
    logger.info("bill %s generated for booking %s, total %s", number, booking.id, totals.total_amount)
    return bill


def _line_items(raw_items):
    if not isinstance(raw_items, list) or not raw_items:
        raise BadRequest("At least one line item is required")
    items = []
    for raw in raw_items:
        description = str((raw or {}).get('description') or '').strip()
        amount = to_money((raw or {}).get('amount'))
        if not description:
            raise BadRequest("Line item description is required")
        if amount <= 0:
            raise BadRequest("Line item amount must be positive")
        items.append(BillItem(description=description, amount=amount))
    return items


def apply_manual_fields(bill: Bill, data: dict):
    """Set type, items, GST flag and discount of a draft bill and recompute its totals."""
    bill_type = data.get('bill_type', bill.bill_type or 'MANUAL')
    if bill_type not in MANUAL_BILL_TYPES:
        raise BadRequest("Bill type must be one of " + ", ".join(MANUAL_BILL_TYPES))
    include_gst = parse_bool(data.get('include_gst'), bool(bill.gst_included))

    items = _line_items(data['line_items']) if 'line_items' in data else list(bill.items)
    if not items:
        raise BadRequest("At least one line item is required")
    subtotal = sum((item.amount for item in items), to_money(0))
    gst_percent = lodge_settings().gst_percentage if include_gst else 0
    totals = bill_totals(subtotal, gst_percent, include_gst,
                         data.get('discount_amount', bill.discount_amount or 0))

    bill.bill_type = bill_type
    bill.items = items
    bill.gst_included = include_gst
    bill.subtotal = totals.subtotal
    bill.gst_percent = totals.gst_percent
    bill.gst_amount = totals.gst_amount
    bill.discount_amount = totals.discount_amount
    bill.total_amount = totals.total_amount
    return bill


def ensure_status_change(bill: Bill, target: BillStatus):
    if not can_transition(bill.status, target):
        raise Conflict(f"Bill cannot move from {bill.status} to {target.value}")


def finalize_bill(bill: Bill) -> Bill:
    ensure_status_change(bill, BillStatus.FINALIZED)
    number = next_number(series_for(bill.gst_included))
    bill.bill_number = number
    bill.status = BillStatus.FINALIZED.value
    bill.finalized_at = datetime.utcnow()
    db.session.commit()
    logger.info("bill %s finalized as %s", bill.id, number)
    return bill


def record_payment(bill: Bill, amount, method: str, payment_date: date) -> Payment:
    if bill.status == BillStatus.DRAFT.value:
        raise Conflict("Finalize the bill before recording payments")
    if bill.status == BillStatus.PAID.value:
        raise Conflict("Bill is already paid")
    if method not in PAYMENT_METHODS:
        raise BadRequest("Payment method must be one of " + ", ".join(PAYMENT_METHODS))
    amount = to_money(amount)
    if amount <= 0:
        raise BadRequest("Payment amount must be positive")
    paid_before = to_money(bill.amount_paid)
    balance = to_money(bill.total_amount) - paid_before
    if amount > balance:
        raise BadRequest(f"Payment exceeds the balance due of {balance}")

    payment = Payment(bill=bill, amount=amount, payment_method=method, payment_date=payment_date)
    db.session.add(payment)
    target = BillStatus.PAID if is_settled(bill.total_amount, paid_before + amount) else BillStatus.UNPAID
    if bill.status != target.value:
        ensure_status_change(bill, target)
        bill.status = target.value
    db.session.commit()
    logger.info("payment of %s recorded against bill %s, status %s", amount, bill.bill_number, bill.status)
    return payment


def print_view(bill: Bill) -> dict:
    """Bill enriched with lodge, customer and stay details for the printed invoice."""
    data = bill.to_dict()
    settings = BusinessSettings.query.first()
    customer = bill.customer
    booking = bill.booking
    data.update({
        'business_name': settings.property_name if settings else '',
        'business_address': (settings.property_address or '') if settings else '',
        'business_gst': (settings.gst_number or '') if settings else '',
        'business_state_name': (settings.state_name or '') if settings else '',
        'business_state_code': (settings.state_code or '') if settings else '',
        'customer_name': customer.name if customer else '',
        'customer_phone': customer.phone if customer else '',
        'customer_address': customer.address if customer else '',
        'amount_in_words': amount_in_words(bill.total_amount),
    })
    if booking is not None:
        data.update({
            'room_number': booking.room.number if booking.room else '',
            'room_type_name': booking.room.room_type.name if booking.room and booking.room.room_type else '',
            'check_in': booking.check_in.isoformat(),
            'check_out': booking.check_out.isoformat(),
            'nights': booking.nights,
            'price_per_night': float(booking.price_per_night),
        })
    return data
