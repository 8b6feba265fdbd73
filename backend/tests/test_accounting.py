from datetime import date, datetime
from decimal import Decimal

import pytest

from lodge.accounting import (BillingError, amount_in_words, apply_gst, bill_totals,
                              compute_stay, count_nights, is_settled, to_money)


def test_stay_of_two_nights():
    stay = compute_stay(date(2024, 1, 1), date(2024, 1, 3), 1500)
    assert stay.nights == 2
    assert stay.subtotal == Decimal('3000.00')


def test_partial_days_round_up():
    assert count_nights(datetime(2024, 1, 1, 12), datetime(2024, 1, 2, 13)) == 2
    assert count_nights(datetime(2024, 1, 1, 10), datetime(2024, 1, 1, 15)) == 1


@pytest.mark.parametrize('check_in, check_out', [
    (date(2024, 1, 3), date(2024, 1, 1)),
    (date(2024, 1, 1), date(2024, 1, 1)),
])
def test_stay_rejects_non_positive_range(check_in, check_out):
    with pytest.raises(BillingError):
        compute_stay(check_in, check_out, 1000)


@pytest.mark.parametrize('rate', [0, -10, '0.00'])
def test_stay_rejects_non_positive_rate(rate):
    with pytest.raises(BillingError):
        compute_stay(date(2024, 1, 1), date(2024, 1, 2), rate)


def test_gst_included():
    gst = apply_gst(2000, 18, True)
    assert gst.gst_amount == Decimal('360.00')
    assert gst.total == Decimal('2360.00')
    assert gst.total - Decimal('2000') == gst.gst_amount


def test_gst_not_included():
    gst = apply_gst(2000, 18, False)
    assert gst.gst_amount == 0
    assert gst.gst_percent == 0
    assert gst.total == Decimal('2000.00')


def test_gst_rounds_half_up_to_paisa():
    gst = apply_gst('999.99', 12, True)
    assert gst.gst_amount == Decimal('120.00')
    assert gst.total == Decimal('1119.99')
    assert gst.total - Decimal('999.99') == gst.gst_amount


def test_gst_rejects_bad_percentage():
    with pytest.raises(BillingError):
        apply_gst(100, 120, True)


def test_bill_totals_with_discount():
    totals = bill_totals(1000, 12, True, discount=20)
    assert totals.gst_amount == Decimal('120.00')
    assert totals.total_amount == Decimal('1100.00')
    assert totals.total_amount == totals.subtotal + totals.gst_amount - totals.discount_amount


def test_discount_cannot_exceed_bill():
    with pytest.raises(BillingError):
        bill_totals(100, 0, False, discount=150)


@pytest.mark.parametrize('amount, words', [
    (2360, 'INR Two Thousand Three Hundred Sixty Only'),
    (0, 'INR Zero Only'),
    (2360.75, 'INR Two Thousand Three Hundred Sixty Only'),
    (0.99, 'INR Zero Only'),
    (20000, 'INR Twenty Thousand Only'),
    (100000, 'INR One Lakh Only'),
    (1180, 'INR One Thousand One Hundred Eighty Only'),
    (12345678, 'INR One Crore Twenty Three Lakh Forty Five Thousand Six Hundred Seventy Eight Only'),
    (1000000000, 'INR One Hundred Crore Only'),
])
def test_amount_in_words(amount, words):
    assert amount_in_words(amount) == words


def test_amount_in_words_rejects_negative():
    with pytest.raises(BillingError):
        amount_in_words(-5)


def test_settled_compares_at_paisa():
    assert is_settled(Decimal('0.30'), 0.1 + 0.2)
    assert is_settled(100, '100.00')
    assert not is_settled(100, '99.99')


@pytest.mark.parametrize('value', ['NaN', 'nan', 'Infinity', '-Infinity', 'sNaN', 'abc', '1e40'])
def test_to_money_rejects_non_numbers(value):
    with pytest.raises(BillingError):
        to_money(value)


def test_stay_rejects_nan_rate():
    with pytest.raises(BillingError):
        compute_stay(date(2024, 1, 1), date(2024, 1, 2), 'NaN')
