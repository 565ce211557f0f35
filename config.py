"""Configuration module for the shop data service."""
import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def _database_url():
    """Resolve the store location: DATABASE_URL > DATABASE_FILE > local file."""
    url = os.getenv('DATABASE_URL')
    if url:
        return url
    db_file = os.getenv('DATABASE_FILE', 'shopsystem.sqlite3')
    return f"sqlite:///{db_file}"


class Config:
    """Base configuration class."""

    # Flask
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')
    DEBUG = os.getenv('FLASK_DEBUG', '0') == '1'
    ENV = os.getenv('FLASK_ENV', 'production')
    TESTING = False

    # Store
    SQLALCHEMY_DATABASE_URI = _database_url()
    SQLALCHEMY_ECHO = os.getenv('SQLALCHEMY_ECHO', 'false').lower() == 'true'

    # Connection pool: every call holds exactly one connection
    DB_POOL_SIZE = int(os.getenv('DB_POOL_SIZE', '5'))
    DB_MAX_OVERFLOW = int(os.getenv('DB_MAX_OVERFLOW', '0'))
    DB_POOL_TIMEOUT = int(os.getenv('DB_POOL_TIMEOUT', '10'))  # seconds

    # Create missing tables on startup
    DB_CREATE_SCHEMA = os.getenv('DB_CREATE_SCHEMA', 'true').lower() == 'true'

    # Logging
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

    # Reporting
    CASHBOX_HISTORY_LIMIT = int(os.getenv('CASHBOX_HISTORY_LIMIT', '10'))

    # Error tracking
    SENTRY_DSN = os.getenv('SENTRY_DSN')


class TestingConfig(Config):
    """Configuration used by the test suite."""

    TESTING = True
    ENV = 'testing'
    SQLALCHEMY_ECHO = False
    DB_POOL_SIZE = 2
    DB_POOL_TIMEOUT = 2
    LOG_LEVEL = 'DEBUG'
    SENTRY_DSN = None
