from datetime import date

import pytest

from lodge.errors import BadRequest
from lodge.reporting import RentalReportFilter, export_csv, report_filename, summarize


def _row(**kw):
    row = {'booking_id': 1, 'bill_number': '', 'booking_date': '', 'check_in': '', 'check_out': '',
           'nights': 1, 'customer_id': 1, 'customer_name': 'A', 'customer_phone': '',
           'room_number': '', 'room_type': '', 'price_per_night': 0.0, 'subtotal': 0.0,
           'gst_included': False, 'gst_percent': 0.0, 'gst_amount': 0.0, 'total_amount': 0.0,
           'status': '', 'bill_date': ''}
    row.update(kw)
    return row


ROWS = [
    _row(booking_id=1, customer_id=1, nights=1, gst_included=True, gst_percent=18.0,
         subtotal=1000.0, gst_amount=180.0, total_amount=1180.0),
    _row(booking_id=2, customer_id=2, nights=2, gst_included=True, gst_percent=18.0,
         subtotal=2000.0, gst_amount=360.0, total_amount=2360.0),
    _row(booking_id=3, customer_id=1, nights=3, subtotal=1000.0, total_amount=1000.0),
]


def test_summary():
    summary = summarize(ROWS)
    assert summary['total_bookings'] == 3
    assert summary['total_revenue'] == 4540.0
    assert summary['total_gst_amount'] == 540.0
    assert summary['total_non_gst'] == 1000.0
    assert summary['total_gst_revenue'] == 3540.0
    assert summary['average_stay_nights'] == 2.0
    assert summary['unique_customers'] == 2


def test_empty_summary():
    summary = summarize([])
    assert summary['total_bookings'] == 0
    assert summary['average_stay_nights'] == 0
    assert summary['total_revenue'] == 0


def test_filter_defaults():
    f = RentalReportFilter.from_args({'date_type': 'nonsense', 'gst_filter': '', 'min_amount': 'abc'})
    assert f.date_type == 'check_in'
    assert f.gst_filter == 'all'
    assert f.min_amount is None


def test_filter_rejects_bad_date():
    with pytest.raises(BadRequest):
        RentalReportFilter.from_args({'date_from': '01/02/2024'})


def test_csv_export():
    text = export_csv(ROWS)
    lines = text.strip().splitlines()
    assert lines[0].startswith('Booking ID,Bill Number,Booking Date')
    assert len(lines) == 4
    assert ',Yes,18.00,180.00,1180.00,' in lines[1]
    assert ',No,0.00,0.00,1000.00,' in lines[3]


def test_csv_export_without_booking():
    text = export_csv([_row(booking_id=None, total_amount=50.0)])
    assert text.splitlines()[1].startswith(',')


def test_report_filename():
    assert report_filename(date(2024, 3, 9)) == 'rental_report_2024-03-09.csv'


@pytest.mark.parametrize('value', ['NaN', 'Infinity', '-inf'])
def test_filter_ignores_non_finite_amounts(value):
    f = RentalReportFilter.from_args({'min_amount': value, 'max_amount': value})
    assert f.min_amount is None
    assert f.max_amount is None
