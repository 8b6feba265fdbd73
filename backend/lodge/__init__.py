import logging
import os

from flask import Flask, request, send_from_directory
from .config import Config
from .extensions import init_extensions
from .errors import register_error_handlers
from .auth import require_token

# blueprints
from .blueprints.main import main_bp
from .blueprints.auth import auth_bp
from .blueprints.customers import customers_bp
from .blueprints.rooms import room_types_bp, rooms_bp
from .blueprints.bookings import bookings_bp
from .blueprints.bills import bills_bp
from .blueprints.settings import settings_bp
from .blueprints.counters import counters_bp
from .blueprints.reports import reports_bp


def allowed_origins(value):
    if isinstance(value, str):
        value = value.split(',')
    return {origin.strip() for origin in value if origin.strip()}


def configure_logging(app: Flask):
    level = getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logging.getLogger('lodge').setLevel(level)


def create_app(config_overrides=None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if config_overrides:
        app.config.update(config_overrides)

    configure_logging(app)
    init_extensions(app)
    register_error_handlers(app)

    app.register_blueprint(main_bp, url_prefix="/api")
    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(customers_bp, url_prefix="/api/customers")
    app.register_blueprint(room_types_bp, url_prefix="/api/room-types")
    app.register_blueprint(rooms_bp, url_prefix="/api/rooms")
    app.register_blueprint(bookings_bp, url_prefix="/api/bookings")
    app.register_blueprint(bills_bp, url_prefix="/api/bills")
    app.register_blueprint(settings_bp, url_prefix="/api/settings")
    app.register_blueprint(counters_bp, url_prefix="/api/invoice-counters")
    app.register_blueprint(reports_bp, url_prefix="/api/reports")

    app.before_request(require_token)

    @app.after_request
    def add_cors_headers(response):
        allowed = allowed_origins(app.config['CORS_ORIGINS'])
        origin = request.headers.get('Origin')
        if '*' in allowed:
            response.headers['Access-Control-Allow-Origin'] = '*'
        else:
            response.vary.add('Origin')
            if origin in allowed:
                response.headers['Access-Control-Allow-Origin'] = origin
        response.headers['Access-Control-Allow-Methods'] = 'GET, POST, PUT, DELETE, OPTIONS'
        response.headers['Access-Control-Allow-Headers'] = 'Content-Type, Authorization'
        return response

    @app.get('/uploads/<path:filename>')
    def uploaded_file(filename):
        return send_from_directory(os.path.abspath(app.config['UPLOAD_FOLDER']), filename)

    return app
