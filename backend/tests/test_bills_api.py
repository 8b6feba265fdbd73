import pytest


@pytest.fixture
def draft(client, customer, lodge_settings):
    resp = client.post('/api/bills', json={
        'customer_id': customer.id,
        'bill_type': 'FOOD',
        'include_gst': True,
        'discount_amount': 18,
        'line_items': [{'description': 'Dinner', 'amount': 600},
                       {'description': 'Breakfast', 'amount': '400.00'}],
    })
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()


def test_manual_bill_starts_as_draft(draft):
    assert draft['status'] == 'DRAFT'
    assert draft['bill_number'] is None
    assert draft['subtotal'] == 1000
    assert draft['gst_amount'] == 180
    assert draft['discount_amount'] == 18
    assert draft['total_amount'] == 1162
    assert [i['description'] for i in draft['line_items']] == ['Dinner', 'Breakfast']


def test_manual_bill_validation(client, customer, lodge_settings):
    base = {'customer_id': customer.id, 'line_items': [{'description': 'Tea', 'amount': 20}]}
    assert client.post('/api/bills', json={**base, 'bill_type': 'ROOM'}).status_code == 400
    assert client.post('/api/bills', json={**base, 'line_items': []}).status_code == 400
    assert client.post('/api/bills', json={**base, 'line_items': [{'description': 'Tea', 'amount': 0}]}).status_code == 400
    assert client.post('/api/bills', json={**base, 'discount_amount': 500}).status_code == 400
    assert client.post('/api/bills', json={**base, 'customer_id': 999}).status_code == 400


def test_edit_draft(client, draft):
    resp = client.put(f"/api/bills/{draft['id']}", json={
        'include_gst': False, 'discount_amount': 0,
        'line_items': [{'description': 'Laundry', 'amount': 250}],
    })
    assert resp.status_code == 200
    body = resp.get_json()
    assert body['total_amount'] == 250
    assert body['gst_amount'] == 0
    assert [i['description'] for i in body['line_items']] == ['Laundry']


def test_finalize_assigns_number(client, draft):
    resp = client.post(f"/api/bills/{draft['id']}/finalize")
    assert resp.status_code == 200
    body = resp.get_json()
    assert body['status'] == 'FINALIZED'
    assert body['bill_number'] == 'TG-000001'
    assert body['amount_in_words'] == 'INR One Thousand One Hundred Sixty Two Only'

    assert client.post(f"/api/bills/{draft['id']}/finalize").status_code == 409
    assert client.put(f"/api/bills/{draft['id']}", json={'discount_amount': 0}).status_code == 409


def test_non_gst_draft_uses_its_own_series(client, customer, lodge_settings):
    bill = client.post('/api/bills', json={
        'customer_id': customer.id, 'include_gst': False,
        'line_items': [{'description': 'Extra bed', 'amount': 300}],
    }).get_json()
    body = client.post(f"/api/bills/{bill['id']}/finalize").get_json()
    assert body['bill_number'] == 'TC-000001'


def test_payments(client, draft):
    client.post(f"/api/bills/{draft['id']}/finalize")

    resp = client.post(f"/api/bills/{draft['id']}/payments",
                       json={'amount': 500, 'payment_method': 'Cash'})
    assert resp.status_code == 201
    assert resp.get_json()['bill']['status'] == 'UNPAID'
    assert resp.get_json()['bill']['amount_paid'] == 500

    resp = client.post(f"/api/bills/{draft['id']}/payments",
                       json={'amount': 662, 'payment_method': 'UPI', 'payment_date': '2024-03-01'})
    assert resp.status_code == 201
    assert resp.get_json()['bill']['status'] == 'PAID'

    payments = client.get(f"/api/bills/{draft['id']}/payments").get_json()
    assert [p['amount'] for p in payments] == [500, 662]
    assert client.post(f"/api/bills/{draft['id']}/payments",
                       json={'amount': 1, 'payment_method': 'Cash'}).status_code == 409


def test_payment_rules(client, draft):
    resp = client.post(f"/api/bills/{draft['id']}/payments", json={'amount': 100, 'payment_method': 'Cash'})
    assert resp.status_code == 409

    client.post(f"/api/bills/{draft['id']}/finalize")
    assert client.post(f"/api/bills/{draft['id']}/payments",
                       json={'amount': 5000, 'payment_method': 'Cash'}).status_code == 400
    assert client.post(f"/api/bills/{draft['id']}/payments",
                       json={'amount': 100, 'payment_method': 'Cheque'}).status_code == 400
    assert client.post(f"/api/bills/{draft['id']}/payments",
                       json={'amount': -1, 'payment_method': 'Cash'}).status_code == 400


def test_list_bills(client, draft, make_booking):
    booking = make_booking()
    client.post(f"/api/bookings/{booking['id']}/generate-bill")
    assert len(client.get('/api/bills').get_json()) == 2
    drafts = client.get('/api/bills?status=DRAFT').get_json()
    assert [b['id'] for b in drafts] == [draft['id']]


def test_unknown_bill(client):
    resp = client.get('/api/bills/77')
    assert resp.status_code == 404
    assert resp.get_json()['error'] == 'Bill not found'


def test_non_numeric_amounts_are_rejected(client, customer, lodge_settings, draft):
    resp = client.post('/api/bills', json={
        'customer_id': customer.id,
        'line_items': [{'description': 'Tea', 'amount': 'NaN'}],
    })
    assert resp.status_code == 400

    client.post(f"/api/bills/{draft['id']}/finalize")
    resp = client.post(f"/api/bills/{draft['id']}/payments",
                       json={'amount': 'Infinity', 'payment_method': 'Cash'})
    assert resp.status_code == 400
