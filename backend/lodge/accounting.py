"""Money arithmetic for stays and bills.

All amounts are :class:`~decimal.Decimal`. Every computed amount is quantized
to two places with ``ROUND_HALF_UP`` and totals are sums of quantized parts,
so a preview and the persisted bill always agree to the paisa.
"""
import math
from collections import namedtuple
from datetime import date, datetime, timedelta
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, ROUND_FLOOR

TWOPLACES = Decimal('0.01')
ZERO = Decimal('0.00')
ONE_DAY = timedelta(days=1)

StayCharge = namedtuple('StayCharge', 'nights subtotal')
GSTBreakdown = namedtuple('GSTBreakdown', 'gst_percent gst_amount total')
BillTotals = namedtuple('BillTotals', 'subtotal gst_percent gst_amount discount_amount total_amount')


class BillingError(ValueError):
    """Input that cannot produce a valid bill."""


def to_money(value) -> Decimal:
    if value is None or value == '':
        return ZERO
    try:
        amount = Decimal(str(value))
        # NaN and Infinity parse but cannot be compared
        if not amount.is_finite():
            raise InvalidOperation(value)
        return amount.quantize(TWOPLACES, rounding=ROUND_HALF_UP)
    except (InvalidOperation, ValueError):
        raise BillingError(f"Invalid amount: {value!r}")


def _as_datetime(value):
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    raise BillingError(f"Invalid date: {value!r}")


def count_nights(check_in, check_out) -> int:
    start, end = _as_datetime(check_in), _as_datetime(check_out)
    if end <= start:
        raise BillingError("Check-out date must be after check-in date")
    return max(1, math.ceil((end - start) / ONE_DAY))


def compute_stay(check_in, check_out, rate_per_night) -> StayCharge:
    nights = count_nights(check_in, check_out)
    rate = to_money(rate_per_night)
    if rate <= 0:
        raise BillingError("Price per night must be positive")
    return StayCharge(nights, (rate * nights).quantize(TWOPLACES))


def apply_gst(subtotal, gst_percent, included: bool) -> GSTBreakdown:
    subtotal = to_money(subtotal)
    if subtotal < 0:
        raise BillingError("Subtotal cannot be negative")
    if not included:
        return GSTBreakdown(ZERO, ZERO, subtotal)

    pct = Decimal(str(gst_percent))
    if pct < 0 or pct > 100:
        raise BillingError("GST percentage must be between 0 and 100")
    gst_amount = (subtotal * pct / Decimal(100)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)
    return GSTBreakdown(pct.quantize(TWOPLACES), gst_amount, subtotal + gst_amount)


def bill_totals(subtotal, gst_percent, included: bool, discount=0) -> BillTotals:
    subtotal = to_money(subtotal)
    gst = apply_gst(subtotal, gst_percent, included)
    discount = to_money(discount)
    if discount < 0:
        raise BillingError("Discount cannot be negative")
    if discount > gst.total:
        raise BillingError("Discount cannot exceed the bill amount")
    return BillTotals(subtotal, gst.gst_percent, gst.gst_amount, discount, gst.total - discount)


def is_settled(total_amount, paid_amount) -> bool:
    return to_money(paid_amount) >= to_money(total_amount)


_ONES = ['', 'One', 'Two', 'Three', 'Four', 'Five', 'Six', 'Seven', 'Eight', 'Nine',
         'Ten', 'Eleven', 'Twelve', 'Thirteen', 'Fourteen', 'Fifteen', 'Sixteen',
         'Seventeen', 'Eighteen', 'Nineteen']
_TENS = ['', '', 'Twenty', 'Thirty', 'Forty', 'Fifty', 'Sixty', 'Seventy', 'Eighty', 'Ninety']


def _two_digits(n: int) -> str:
    if n < 20:
        return _ONES[n]
    return ' '.join(w for w in (_TENS[n // 10], _ONES[n % 10]) if w)


def _below_thousand(n: int) -> str:
    parts = []
    if n >= 100:
        parts.append(f"{_ONES[n // 100]} Hundred")
    if n % 100:
        parts.append(_two_digits(n % 100))
    return ' '.join(parts)


def _indian_words(n: int) -> str:
    crore, n = divmod(n, 10000000)
    lakh, n = divmod(n, 100000)
    thousand, n = divmod(n, 1000)

    parts = []
    if crore:
        parts.append(f"{_indian_words(crore)} Crore")
    if lakh:
        parts.append(f"{_two_digits(lakh)} Lakh")
    if thousand:
        parts.append(f"{_two_digits(thousand)} Thousand")
    if n:
        parts.append(_below_thousand(n))
    return ' '.join(parts)


def amount_in_words(total) -> str:
    """Spell the rupee part of ``total`` for the printed invoice.

    >>> amount_in_words(2360)
    'INR Two Thousand Three Hundred Sixty Only'
    """
    amount = Decimal(str(total))
    if amount < 0:
        raise BillingError("Amount cannot be negative")
    rupees = int(amount.to_integral_value(rounding=ROUND_FLOOR))
    words = _indian_words(rupees) if rupees else 'Zero'
    return f"INR {words} Only"
