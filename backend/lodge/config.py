import os
from dotenv import load_dotenv

load_dotenv()


def _database_uri():
    if os.getenv("DATABASE_URL"):
        return os.getenv("DATABASE_URL")
    # the desktop shell hands us a file path instead of a URL
    if os.getenv("DATABASE_PATH"):
        return "sqlite:///" + os.path.abspath(os.getenv("DATABASE_PATH"))
    return "sqlite:///lodge.db"


def _flag(name, default="false"):
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Config:
    SQLALCHEMY_DATABASE_URI = _database_uri()
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
    APP_NAME = os.getenv("APP_NAME", "Lodge Manager")

    DEFAULT_GST_PERCENT = float(os.getenv("DEFAULT_GST_PERCENT", 12))
    INVOICE_COUNTER_REGRESSION = os.getenv("INVOICE_COUNTER_REGRESSION", "reject")  # reject/warn

    UPLOAD_FOLDER = os.getenv("UPLOADS_DIR", os.path.join(os.getcwd(), "uploads"))
    MAX_CONTENT_LENGTH = 10 * 1024 * 1024  # 10MB
    ALLOWED_EXTENSIONS = {"png", "jpg", "jpeg", "gif", "pdf"}

    AUTH_REQUIRED = _flag("AUTH_REQUIRED")
    TOKEN_ALGORITHM = "HS256"
    TOKEN_EXPIRE_MINUTES = int(os.getenv("TOKEN_EXPIRE_MINUTES", 60 * 12))

    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")  # "*" or comma-separated origins
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    SERVER_PORT = int(os.getenv("SERVER_PORT", 8080))
