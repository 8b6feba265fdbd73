from datetime import date, timedelta

import pytest

from lodge import create_app
from lodge.extensions import db
from lodge.models import BusinessSettings, Customer, Room, RoomType
from lodge.numbering import ensure_counters


@pytest.fixture
def app(tmp_path):
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'UPLOAD_FOLDER': str(tmp_path / 'uploads'),
        'AUTH_REQUIRED': False,
        'INVOICE_COUNTER_REGRESSION': 'reject',
        'SECRET_KEY': 'test-secret',
    })
    with app.app_context():
        db.create_all()
        ensure_counters()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def lodge_settings(app):
    s = BusinessSettings(property_name='Trinity Lodge', property_address='12 Temple Road',
                         gst_number='33ABCDE1234F1Z5', gst_percentage=18)
    db.session.add(s)
    db.session.commit()
    return s


@pytest.fixture
def room(app):
    room_type = RoomType(name='Deluxe', default_rate=1000)
    r = Room(number='101', room_type=room_type)
    db.session.add(r)
    db.session.commit()
    return r


@pytest.fixture
def customer(app):
    c = Customer(name='Ravi Kumar', address='4 Lake View', phone='9876543210')
    db.session.add(c)
    db.session.commit()
    return c


def days_from_now(n):
    return (date.today() + timedelta(days=n)).isoformat()


@pytest.fixture
def make_booking(client, customer, room):
    def _make(check_in=1, check_out=3, price=1000, room_id=None, customer_id=None):
        resp = client.post('/api/bookings', json={
            'customer_id': customer_id or customer.id,
            'room_id': room_id or room.id,
            'check_in': days_from_now(check_in),
            'check_out': days_from_now(check_out),
            'price_per_night': price,
        })
        assert resp.status_code == 201, resp.get_json()
        return resp.get_json()
    return _make
