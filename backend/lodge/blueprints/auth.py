from flask import Blueprint, jsonify
from ..auth import ROLES, create_token, current_user, login_required
from ..errors import BadRequest, Conflict, Unauthorized
from ..extensions import db
from ..models import User
from ..payload import json_body

auth_bp = Blueprint('auth', __name__)


def _credentials(data):
    username = (data.get('username') or '').strip()
    password = data.get('password') or ''
    if not username or not password:
        raise BadRequest("Username and password are required")
    return username, password


@auth_bp.post('/register')
def register():
    data = json_body()
    username, password = _credentials(data)
    if len(password) < 6:
        raise BadRequest("Password must be at least 6 characters")
    role = (data.get('role') or 'STAFF').upper()
    if role not in ROLES:
        raise BadRequest("Role must be ADMIN or STAFF")
    if role == 'ADMIN' and User.query.first() is not None:
        user = current_user()
        if user is None or user.role != 'ADMIN':
            raise Unauthorized("Only an admin can create admin users")
    if User.query.filter_by(username=username).first():
        raise Conflict("Username already exists")

    user = User(username=username, role=role)
    user.set_password(password)
    db.session.add(user)
    db.session.commit()
    return jsonify({'token': create_token(user), 'user': user.to_dict()}), 201


@auth_bp.post('/login')
def login():
    username, password = _credentials(json_body())
    user = User.query.filter_by(username=username).first()
    if user is None or not user.check_password(password):
        raise Unauthorized("Invalid credentials")
    return jsonify({'token': create_token(user), 'user': user.to_dict()})


@auth_bp.get('/me')
@login_required
def me():
    return jsonify(current_user().to_dict())
