from datetime import datetime
from werkzeug.security import generate_password_hash, check_password_hash
from .extensions import db
from .states import BookingStatus, BillStatus, RoomStatus


def _money(value):
    return float(value) if value is not None else 0.0


def _iso(value):
    return value.isoformat() if value is not None else None


class User(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(64), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(db.String(10), nullable=False, default='STAFF')  # ADMIN/STAFF
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)

    def to_dict(self):
        return {'id': self.id, 'username': self.username, 'role': self.role,
                'created_at': _iso(self.created_at)}


class Customer(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    address = db.Column(db.Text, nullable=False)
    phone = db.Column(db.String(32), nullable=False)
    id_proof_type = db.Column(db.String(32))
    id_proof_number = db.Column(db.String(64))
    id_card_photo = db.Column(db.String(255))
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'address': self.address,
            'phone': self.phone,
            'id_proof_type': self.id_proof_type,
            'id_proof_number': self.id_proof_number,
            'id_card_photo': self.id_card_photo or '',
            'created_at': _iso(self.created_at),
        }


class RoomType(db.Model):
    __tablename__ = 'room_type'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(80), unique=True, nullable=False)
    default_rate = db.Column(db.Numeric(10,2), default=0)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {'id': self.id, 'name': self.name, 'default_rate': _money(self.default_rate),
                'created_at': _iso(self.created_at)}


class Room(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    number = db.Column(db.String(20), unique=True, nullable=False)
    type_id = db.Column(db.Integer, db.ForeignKey('room_type.id'), nullable=False)
    status = db.Column(db.String(20), nullable=False, default=RoomStatus.AVAILABLE.value)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    room_type = db.relationship('RoomType')

    def to_dict(self):
        return {
            'id': self.id,
            'number': self.number,
            'type_id': self.type_id,
            'type_name': self.room_type.name if self.room_type else None,
            'default_rate': _money(self.room_type.default_rate) if self.room_type else 0.0,
            'status': self.status,
            'created_at': _iso(self.created_at),
        }


class Booking(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    customer_id = db.Column(db.Integer, db.ForeignKey('customer.id'), nullable=False)
    room_id = db.Column(db.Integer, db.ForeignKey('room.id'), nullable=False)
    check_in = db.Column(db.Date, nullable=False)
    check_out = db.Column(db.Date, nullable=False)
    price_per_night = db.Column(db.Numeric(10,2), nullable=False)
    nights = db.Column(db.Integer, nullable=False)
    total_amount = db.Column(db.Numeric(10,2), nullable=False)
    status = db.Column(db.String(20), nullable=False, default=BookingStatus.CONFIRMED.value)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    customer = db.relationship('Customer', backref='bookings')
    room = db.relationship('Room')

    def to_dict(self):
        return {
            'id': self.id,
            'customer_id': self.customer_id,
            'room_id': self.room_id,
            'check_in': _iso(self.check_in),
            'check_out': _iso(self.check_out),
            'price_per_night': _money(self.price_per_night),
            'nights': self.nights,
            'total_amount': _money(self.total_amount),
            'status': self.status,
            'created_at': _iso(self.created_at),
            'customer_name': self.customer.name if self.customer else None,
            'customer_phone': self.customer.phone if self.customer else None,
            'room_number': self.room.number if self.room else None,
            'room_type_name': self.room.room_type.name if self.room and self.room.room_type else None,
        }


class Bill(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    customer_id = db.Column(db.Integer, db.ForeignKey('customer.id'), nullable=False)
    booking_id = db.Column(db.Integer, db.ForeignKey('booking.id'), unique=True)
    bill_type = db.Column(db.String(20), nullable=False, default='ROOM')  # ROOM/WALK_IN/FOOD/MANUAL
    bill_number = db.Column(db.String(20), unique=True)
    bill_date = db.Column(db.Date, nullable=False)
    subtotal = db.Column(db.Numeric(10,2), default=0)
    gst_included = db.Column(db.Boolean, default=False)
    gst_percent = db.Column(db.Numeric(5,2), default=0)
    gst_amount = db.Column(db.Numeric(10,2), default=0)
    discount_amount = db.Column(db.Numeric(10,2), default=0)
    total_amount = db.Column(db.Numeric(10,2), default=0)
    status = db.Column(db.String(20), nullable=False, default=BillStatus.DRAFT.value)
    generated_by = db.Column(db.Integer, db.ForeignKey('user.id'))
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    finalized_at = db.Column(db.DateTime)

    customer = db.relationship('Customer')
    booking = db.relationship('Booking', backref=db.backref('bill', uselist=False))

    @property
    def amount_paid(self):
        return sum((p.amount for p in self.payments), 0)

    def to_dict(self):
        return {
            'id': self.id,
            'customer_id': self.customer_id,
            'booking_id': self.booking_id,
            'bill_type': self.bill_type,
            'bill_number': self.bill_number,
            'bill_date': _iso(self.bill_date),
            'subtotal': _money(self.subtotal),
            'gst_included': bool(self.gst_included),
            'gst_percent': _money(self.gst_percent),
            'gst_amount': _money(self.gst_amount),
            'discount_amount': _money(self.discount_amount),
            'total_amount': _money(self.total_amount),
            'amount_paid': _money(self.amount_paid),
            'status': self.status,
            'created_at': _iso(self.created_at),
            'finalized_at': _iso(self.finalized_at),
            'line_items': [item.to_dict() for item in self.items],
        }


class BillItem(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    bill_id = db.Column(db.Integer, db.ForeignKey('bill.id'), nullable=False)
    description = db.Column(db.String(255), nullable=False)
    amount = db.Column(db.Numeric(10,2), nullable=False)

    bill = db.relationship('Bill', backref=db.backref('items', cascade='all, delete-orphan'))

    def to_dict(self):
        return {'id': self.id, 'description': self.description, 'amount': _money(self.amount)}


class Payment(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    bill_id = db.Column(db.Integer, db.ForeignKey('bill.id'), nullable=False)
    amount = db.Column(db.Numeric(10,2), nullable=False)
    payment_method = db.Column(db.String(10), nullable=False)  # Cash/Card/UPI
    payment_date = db.Column(db.Date, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    bill = db.relationship('Bill', backref=db.backref('payments', order_by='Payment.id'))

    def to_dict(self):
        return {
            'id': self.id,
            'bill_id': self.bill_id,
            'amount': _money(self.amount),
            'payment_method': self.payment_method,
            'payment_date': _iso(self.payment_date),
            'created_at': _iso(self.created_at),
        }


class InvoiceCounter(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    counter_type = db.Column(db.String(10), unique=True, nullable=False)  # GST/NON_GST
    current_number = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class BusinessSettings(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    property_name = db.Column(db.String(255), nullable=False)
    property_address = db.Column(db.Text)
    phone = db.Column(db.String(32))
    gst_number = db.Column(db.String(20))
    gst_percentage = db.Column(db.Numeric(5,2), default=0)
    state_name = db.Column(db.String(100))
    state_code = db.Column(db.String(10))
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'property_name': self.property_name,
            'property_address': self.property_address or '',
            'phone': self.phone or '',
            'gst_number': self.gst_number or '',
            'gst_percentage': _money(self.gst_percentage),
            'state_name': self.state_name or '',
            'state_code': self.state_code or '',
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at),
        }
