"""Sequential invoice numbers, one series for GST bills and one for the rest."""
import logging

from flask import current_app
from sqlalchemy import update

from .errors import BadRequest, Conflict, InvoiceNumberTaken
from .extensions import db
from .models import Bill, InvoiceCounter

logger = logging.getLogger(__name__)

GST = 'GST'
NON_GST = 'NON_GST'
PREFIXES = {GST: 'TG', NON_GST: 'TC'}
PADDING = 6

REGRESSION_REJECT = 'reject'
REGRESSION_WARN = 'warn'


def series_for(gst_included: bool) -> str:
    return GST if gst_included else NON_GST


def format_number(series: str, number: int) -> str:
    return f"{PREFIXES[series]}-{number:0{PADDING}d}"


def _check_series(series):
    if series not in PREFIXES:
        raise BadRequest("Counter type must be 'GST' or 'NON_GST'")


def get_counter(series: str) -> InvoiceCounter:
    _check_series(series)
    row = InvoiceCounter.query.filter_by(counter_type=series).first()
    if not row:
        row = InvoiceCounter(counter_type=series, current_number=0)
        db.session.add(row)
        db.session.flush()
    return row


def ensure_counters():
    for series in PREFIXES:
        get_counter(series)
    db.session.commit()


def next_number(series: str) -> str:
    """Issue the next number of ``series``.

    The increment is a single UPDATE so the row stays locked by this
    transaction until the caller commits; concurrent callers queue behind it.
    """
    counter = get_counter(series)
    db.session.execute(
        update(InvoiceCounter)
        .where(InvoiceCounter.counter_type == series)
        .values(current_number=InvoiceCounter.current_number + 1)
        .execution_options(synchronize_session=False)
    )
    db.session.refresh(counter)
    formatted = format_number(series, counter.current_number)

    if Bill.query.filter_by(bill_number=formatted).first() is not None:
        # keep the counter past the collision so the retry gets a fresh number
        db.session.commit()
        logger.warning("invoice number %s already issued, counter moved past it", formatted)
        raise InvoiceNumberTaken(formatted)

    logger.info("issued invoice number %s", formatted)
    return formatted


def set_starting_number(series: str, starting_number: int) -> str | None:
    """Make ``starting_number`` the next number issued for ``series``.

    Returns a warning message when the counter was moved backwards under the
    ``warn`` policy, otherwise None.
    """
    _check_series(series)
    if not isinstance(starting_number, int) or isinstance(starting_number, bool) or starting_number < 1:
        raise BadRequest("Starting number must be at least 1")

    counter = get_counter(series)
    warning = None
    if starting_number <= counter.current_number:
        policy = current_app.config.get('INVOICE_COUNTER_REGRESSION', REGRESSION_REJECT)
        last = format_number(series, counter.current_number)
        if policy != REGRESSION_WARN:
            raise Conflict(f"Starting number must be greater than {counter.current_number} ({last} already issued)")
        warning = f"{series} numbers up to {last} were already issued; duplicates will be rejected"
        logger.warning("counter %s moved back from %s to %s", series, counter.current_number, starting_number - 1)

    counter.current_number = starting_number - 1
    db.session.commit()
    logger.info("counter %s re-baselined to start from %s", series, starting_number)
    return warning


def list_counters():
    rows = []
    for series in sorted(PREFIXES):
        counter = get_counter(series)
        rows.append({
            'counter_type': series,
            'prefix': PREFIXES[series],
            'current_number': counter.current_number,
            'next_number': format_number(series, counter.current_number + 1),
            'updated_at': counter.updated_at.isoformat() if counter.updated_at else None,
        })
    return rows
