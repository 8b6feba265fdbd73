from datetime import datetime, timedelta
from functools import wraps

from flask import current_app, request
from jose import jwt, JWTError

from .errors import APIError, Unauthorized
from .extensions import db
from .models import User

ROLES = ('ADMIN', 'STAFF')
OPEN_ENDPOINTS = {'auth.login', 'auth.register', 'main.health', 'uploaded_file', 'static'}


def create_token(user: User) -> str:
    now = datetime.utcnow()
    payload = {
        'sub': str(user.id),
        'username': user.username,
        'role': user.role,
        'iat': now,
        'exp': now + timedelta(minutes=current_app.config['TOKEN_EXPIRE_MINUTES']),
    }
    return jwt.encode(payload, current_app.config['SECRET_KEY'],
                      algorithm=current_app.config['TOKEN_ALGORITHM'])


def current_user():
    """User named by the request's bearer token, or None."""
    header = request.headers.get('Authorization', '')
    scheme, _, token = header.partition(' ')
    if scheme.lower() != 'bearer' or not token:
        return None
    try:
        payload = jwt.decode(token, current_app.config['SECRET_KEY'],
                             algorithms=[current_app.config['TOKEN_ALGORITHM']])
    except JWTError:
        return None
    return db.session.get(User, int(payload['sub']))


def require_token():
    """before_request guard used when AUTH_REQUIRED is on."""
    if not current_app.config.get('AUTH_REQUIRED'):
        return None
    if request.method == 'OPTIONS' or request.endpoint in OPEN_ENDPOINTS:
        return None
    if current_user() is None:
        raise Unauthorized("Authentication required")
    return None


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if current_user() is None:
            raise Unauthorized("Authentication required")
        return view(*args, **kwargs)
    return wrapper


def admin_required(view):
    """Restrict ``view`` to ADMIN users while AUTH_REQUIRED is on."""
    @wraps(view)
    def wrapper(*args, **kwargs):
        if not current_app.config.get('AUTH_REQUIRED'):
            return view(*args, **kwargs)
        user = current_user()
        if user is None:
            raise Unauthorized("Authentication required")
        if user.role != 'ADMIN':
            raise APIError("Admin access required", 403)
        return view(*args, **kwargs)
    return wrapper
