from enum import Enum


class BookingStatus(str, Enum):
    CONFIRMED = 'confirmed'
    CHECKED_IN = 'checked_in'
    CHECKED_OUT = 'checked_out'
    CANCELLED = 'cancelled'


class BillStatus(str, Enum):
    DRAFT = 'DRAFT'
    FINALIZED = 'FINALIZED'
    UNPAID = 'UNPAID'
    PAID = 'PAID'


class RoomStatus(str, Enum):
    AVAILABLE = 'AVAILABLE'
    OCCUPIED = 'OCCUPIED'
    MAINTENANCE = 'MAINTENANCE'


TRANSITIONS = {
    BookingStatus.CONFIRMED: {BookingStatus.CHECKED_IN, BookingStatus.CANCELLED},
    BookingStatus.CHECKED_IN: {BookingStatus.CHECKED_OUT, BookingStatus.CANCELLED},
    BookingStatus.CHECKED_OUT: set(),
    BookingStatus.CANCELLED: set(),
    BillStatus.DRAFT: {BillStatus.FINALIZED},
    BillStatus.FINALIZED: {BillStatus.UNPAID, BillStatus.PAID},
    BillStatus.UNPAID: {BillStatus.PAID},
    BillStatus.PAID: set(),
}

# bookings in these states hold their room for the booked dates
ACTIVE_BOOKING_STATUSES = (BookingStatus.CONFIRMED.value, BookingStatus.CHECKED_IN.value)


def _coerce(value, enum_cls):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        raise ValueError(f"Invalid status: {value!r}")


def can_transition(current, target) -> bool:
    """True when a record in ``current`` may move to ``target``.

    Both values must belong to the same enumeration; plain strings are
    accepted and looked up in the enumeration of ``current``.
    """
    enum_cls = type(current) if isinstance(current, Enum) else None
    if enum_cls is None:
        enum_cls = BookingStatus if current in BookingStatus._value2member_map_ else BillStatus
    current = _coerce(current, enum_cls)
    target = _coerce(target, enum_cls)
    return target in TRANSITIONS[current]
