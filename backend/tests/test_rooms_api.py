from conftest import days_from_now


def test_room_types(client):
    resp = client.post('/api/room-types', json={'name': 'Suite', 'default_rate': 2500})
    assert resp.status_code == 201
    assert resp.get_json()['default_rate'] == 2500
    assert [t['name'] for t in client.get('/api/room-types').get_json()] == ['Suite']


def test_room_type_rules(client):
    assert client.post('/api/room-types', json={'name': ''}).status_code == 400
    client.post('/api/room-types', json={'name': 'Suite', 'default_rate': 2500})
    assert client.post('/api/room-types', json={'name': 'Suite'}).status_code == 409
    assert client.post('/api/room-types', json={'name': 'Attic', 'default_rate': -1}).status_code == 400


def test_room_type_in_use(client, room):
    resp = client.delete(f'/api/room-types/{room.type_id}')
    assert resp.status_code == 409
    assert resp.get_json()['error'] == 'Cannot delete room type that is in use'


def test_delete_unused_room_type(client):
    type_id = client.post('/api/room-types', json={'name': 'Dorm', 'default_rate': 300}).get_json()['id']
    assert client.delete(f'/api/room-types/{type_id}').status_code == 200
    assert client.get('/api/room-types').get_json() == []


def test_create_room(client, room):
    resp = client.post('/api/rooms', json={'number': '102', 'type_id': room.type_id})
    assert resp.status_code == 201
    body = resp.get_json()
    assert body['status'] == 'AVAILABLE'
    assert body['type_name'] == 'Deluxe'
    assert [r['number'] for r in client.get('/api/rooms').get_json()] == ['101', '102']


def test_room_rules(client, room):
    assert client.post('/api/rooms', json={'type_id': room.type_id}).status_code == 400
    resp = client.post('/api/rooms', json={'number': '301', 'type_id': 999})
    assert resp.status_code == 400
    assert resp.get_json()['error'] == 'Invalid room type'
    assert client.post('/api/rooms', json={'number': '101', 'type_id': room.type_id}).status_code == 409
    assert client.post('/api/rooms', json={'number': '302', 'type_id': room.type_id,
                                           'status': 'BROKEN'}).status_code == 400


def test_delete_room(client, room, make_booking):
    spare = client.post('/api/rooms', json={'number': '103', 'type_id': room.type_id}).get_json()
    assert client.delete(f"/api/rooms/{spare['id']}").status_code == 200

    make_booking()
    assert client.delete(f'/api/rooms/{room.id}').status_code == 409


def test_maintenance_room_cannot_be_booked(client, room, customer):
    spare = client.post('/api/rooms', json={'number': '104', 'type_id': room.type_id,
                                            'status': 'MAINTENANCE'}).get_json()
    resp = client.post('/api/bookings', json={
        'customer_id': customer.id, 'room_id': spare['id'], 'price_per_night': 900,
        'check_in': days_from_now(1), 'check_out': days_from_now(2),
    })
    assert resp.status_code == 409
