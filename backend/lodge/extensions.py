from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask import Flask
from sqlalchemy import event
from sqlalchemy.engine import Engine

db = SQLAlchemy()
migrate = Migrate()


@event.listens_for(Engine, "connect")
def _sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores REFERENCES unless asked; room types in use must stay put
    if type(dbapi_connection).__module__.startswith("sqlite3"):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def init_extensions(app: Flask):
    db.init_app(app)
    migrate.init_app(app, db)
