import os
from dotenv import load_dotenv

load_dotenv()

BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))


def _database_uri():
    database_url = os.getenv("DATABASE_URL")
    if database_url:
        # SQLAlchemy necesita postgresql://
        if database_url.startswith("postgres://"):
            database_url = database_url.replace("postgres://", "postgresql://", 1)
        return database_url
    return "sqlite:///" + os.path.join(BASE_DIR, "instance", "catalog.db")


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-key-change-in-production")

    SQLALCHEMY_DATABASE_URI = _database_uri()
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Upload gambar cover
    UPLOAD_FOLDER = os.getenv("UPLOAD_FOLDER", os.path.join(BASE_DIR, "static", "uploads"))
    UPLOAD_URL_PREFIX = "/uploads"
    UPLOAD_MAX_SIZE = 5 * 1024 * 1024  # 5 MB
    UPLOAD_ALLOWED_MIME_TYPES = ("image/jpeg", "image/png", "image/webp")
    UPLOAD_TIMEZONE = os.getenv("UPLOAD_TIMEZONE", "Asia/Jakarta")
    MAX_CONTENT_LENGTH = 16 * 1024 * 1024  # 16 MB

    DEFAULT_PAGE_LENGTH = 10
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    LOG_LEVEL = "DEBUG"
