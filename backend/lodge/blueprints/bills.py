from datetime import date
from flask import Blueprint, jsonify, request
from ..auth import current_user
from ..billing import apply_manual_fields, finalize_bill, record_payment, print_view
from ..errors import BadRequest, Conflict
from ..extensions import db
from ..models import Bill, Customer
from ..payload import json_body, parse_date, parse_int
from ..states import BillStatus

bills_bp = Blueprint('bills', __name__)


@bills_bp.get('')
def list_bills():
    query = Bill.query
    if request.args.get('status'):
        query = query.filter_by(status=request.args['status'])
    if request.args.get('customer_id'):
        query = query.filter_by(customer_id=parse_int(request.args['customer_id'], "Customer"))
    rows = query.order_by(Bill.id.desc()).all()
    return jsonify([b.to_dict() for b in rows])


@bills_bp.post('')
def create_bill():
    data = json_body()
    customer = db.session.get(Customer, parse_int(data.get('customer_id'), "Customer"))
    if customer is None:
        raise BadRequest("Customer not found")
    bill_date = parse_date(data['bill_date'], "Bill date") if data.get('bill_date') else date.today()

    user = current_user()
    bill = Bill(customer_id=customer.id,
                bill_date=bill_date,
                status=BillStatus.DRAFT.value,
                generated_by=user.id if user else None)
    apply_manual_fields(bill, data)
    db.session.add(bill)
    db.session.commit()
    return jsonify(bill.to_dict()), 201


@bills_bp.get('/<int:bill_id>')
def show_bill(bill_id):
    bill = Bill.query.get_or_404(bill_id, description="Bill not found")
    return jsonify(print_view(bill))


@bills_bp.put('/<int:bill_id>')
def update_bill(bill_id):
    bill = Bill.query.get_or_404(bill_id, description="Bill not found")
    if bill.status != BillStatus.DRAFT.value:
        raise Conflict("Only draft bills can be edited")
    data = json_body()
    if data.get('bill_date'):
        bill.bill_date = parse_date(data['bill_date'], "Bill date")
    apply_manual_fields(bill, data)
    db.session.commit()
    return jsonify(bill.to_dict())


@bills_bp.post('/<int:bill_id>/finalize')
def finalize(bill_id):
    bill = Bill.query.get_or_404(bill_id, description="Bill not found")
    finalize_bill(bill)
    return jsonify(print_view(bill))


@bills_bp.get('/<int:bill_id>/payments')
def list_payments(bill_id):
    bill = Bill.query.get_or_404(bill_id, description="Bill not found")
    return jsonify([p.to_dict() for p in bill.payments])


@bills_bp.post('/<int:bill_id>/payments')
def create_payment(bill_id):
    bill = Bill.query.get_or_404(bill_id, description="Bill not found")
    data = json_body()
    payment_date = parse_date(data['payment_date'], "Payment date") if data.get('payment_date') else date.today()
    payment = record_payment(bill, data.get('amount'), data.get('payment_method') or '', payment_date)
    return jsonify({'payment': payment.to_dict(), 'bill': bill.to_dict()}), 201
