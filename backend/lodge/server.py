"""Entry point used by the desktop shell: ``SERVER_PORT`` and ``DATABASE_PATH`` come from the environment."""
import logging

from . import create_app
from .extensions import db
from .numbering import ensure_counters

logger = logging.getLogger(__name__)


def main():
    app = create_app()
    with app.app_context():
        db.create_all()
        ensure_counters()
    port = app.config['SERVER_PORT']
    logger.info("serving on 127.0.0.1:%s (%s)", port, app.config['SQLALCHEMY_DATABASE_URI'])
    app.run(host='127.0.0.1', port=port)


if __name__ == '__main__':
    main()
