import os
import uuid

from flask import Blueprint, current_app, jsonify, request
from sqlalchemy import func, or_
from werkzeug.utils import secure_filename

from ..errors import BadRequest
from ..extensions import db
from ..models import Customer, Booking
from ..payload import json_body
from ..states import BookingStatus

customers_bp = Blueprint('customers', __name__)


def allowed_file(filename):
    return '.' in filename and filename.rsplit('.', 1)[1].lower() in current_app.config['ALLOWED_EXTENSIONS']


def save_id_card(upload):
    if not allowed_file(upload.filename):
        raise BadRequest("Invalid file type. Allowed: " + ", ".join(sorted(current_app.config['ALLOWED_EXTENSIONS'])))
    folder = os.path.join(current_app.config['UPLOAD_FOLDER'], 'ids')
    os.makedirs(folder, exist_ok=True)
    filename = f"{uuid.uuid4().hex}_{secure_filename(upload.filename)}"
    upload.save(os.path.join(folder, filename))
    return f"ids/{filename}"


@customers_bp.get('')
def list_customers():
    q = request.args.get('search')
    query = Customer.query
    if q:
        query = query.filter(or_(Customer.name.ilike(f"%{q}%"), Customer.phone.ilike(f"%{q}%")))
    rows = query.order_by(Customer.created_at.desc(), Customer.id.desc()).all()
    return jsonify([c.to_dict() for c in rows])


@customers_bp.post('')
def create_customer():
    data = json_body()
    name = (data.get('name') or '').strip()
    address = (data.get('address') or '').strip()
    phone = (data.get('phone') or '').strip()
    if not name or not address or not phone:
        raise BadRequest("Name, address, and phone are required")

    photo = request.files.get('id_card_photo')
    c = Customer(name=name,
                 address=address,
                 phone=phone,
                 id_proof_type=(data.get('id_proof_type') or '').strip() or None,
                 id_proof_number=(data.get('id_proof_number') or '').strip() or None,
                 id_card_photo=save_id_card(photo) if photo and photo.filename else None)
    db.session.add(c)
    db.session.commit()
    return jsonify(c.to_dict()), 201


@customers_bp.get('/<int:customer_id>')
def show_customer(customer_id):
    c = Customer.query.get_or_404(customer_id, description="Customer not found")
    return jsonify(c.to_dict())


@customers_bp.get('/<int:customer_id>/history')
def customer_history(customer_id):
    c = Customer.query.get_or_404(customer_id, description="Customer not found")
    bookings = (Booking.query.filter_by(customer_id=c.id)
                .order_by(Booking.created_at.desc(), Booking.id.desc()).all())

    rows = []
    for b in bookings:
        row = b.to_dict()
        row.update({
            'has_bill': b.bill is not None,
            'bill_id': b.bill.id if b.bill else 0,
            'bill_number': (b.bill.bill_number or '') if b.bill else '',
            'bill_total': float(b.bill.total_amount) if b.bill else 0.0,
        })
        rows.append(row)

    total_bookings, total_spent, total_nights = (
        db.session.query(func.count(Booking.id),
                         func.coalesce(func.sum(Booking.total_amount), 0),
                         func.coalesce(func.sum(Booking.nights), 0))
        .filter(Booking.customer_id == c.id, Booking.status != BookingStatus.CANCELLED.value)
        .one()
    )

    return jsonify({
        'customer': c.to_dict(),
        'statistics': {
            'total_bookings': total_bookings,
            'total_spent': float(total_spent),
            'total_nights': int(total_nights),
        },
        'bookings': rows,
    })
