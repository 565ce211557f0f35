"""Database configuration and the store handle."""
import logging
from contextlib import contextmanager

from flask import current_app
from sqlalchemy import BigInteger, Integer, create_engine, event, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

from shopdb.exceptions import ShopError, translate_db_error

logger = logging.getLogger(__name__)

# Create SQLAlchemy base
Base = declarative_base()

# SQLite only autoincrements INTEGER PRIMARY KEY columns
SerialId = BigInteger().with_variant(Integer, 'sqlite')

EXTENSION_KEY = 'shopdb.store'


class Store:
    """
    Handle on the canonical store.

    Owns a bounded connection pool. Constructed once at service start and
    disposed at shutdown; every operation borrows one connection through
    ``session_scope``.
    """

    def __init__(self, database_uri, pool_size=5, max_overflow=0, pool_timeout=10, echo=False):
        self.database_uri = database_uri
        url = make_url(database_uri)
        if url.get_backend_name() == 'sqlite' and url.database in (None, '', ':memory:'):
            # An in-memory database lives in a single shared connection
            pool_args = {'poolclass': StaticPool, 'connect_args': {'check_same_thread': False}}
        else:
            pool_args = {
                'pool_size': pool_size,
                'max_overflow': max_overflow,
                'pool_timeout': pool_timeout,
            }
        self.engine = create_engine(
            database_uri,
            echo=echo,
            pool_pre_ping=True,  # Enable connection health checks
            **pool_args
        )
        if self.engine.dialect.name == 'sqlite':
            event.listen(self.engine, 'connect', _enable_sqlite_foreign_keys)

        self._session_factory = sessionmaker(
            bind=self.engine, autoflush=False, expire_on_commit=False
        )

    def create_schema(self):
        """Create all tables that do not exist yet."""
        # Import models so the metadata is complete
        from shopdb import models  # noqa: F401
        Base.metadata.create_all(self.engine)

    def dispose(self):
        """Close every pooled connection."""
        self.engine.dispose()

    @contextmanager
    def session_scope(self):
        """
        Run one operation on one pooled connection.

        Commits on success, rolls back on any error and translates store
        failures into the service's error taxonomy.
        """
        try:
            session = self._session_factory()
        except SQLAlchemyError as e:
            raise translate_db_error(e) from e

        try:
            yield session
            session.commit()
        except ShopError:
            session.rollback()
            raise
        except SQLAlchemyError as e:
            session.rollback()
            error = translate_db_error(e)
            logger.warning(f"Store error translated to {error.kind}: {e}")
            raise error from e
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def __repr__(self):
        return f"<Store(uri='{self.engine.url.render_as_string(hide_password=True)}')>"


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def init_db(app):
    """Create the store handle for the app and register it as an extension."""
    store = Store(
        app.config['SQLALCHEMY_DATABASE_URI'],
        pool_size=app.config.get('DB_POOL_SIZE', 5),
        max_overflow=app.config.get('DB_MAX_OVERFLOW', 0),
        pool_timeout=app.config.get('DB_POOL_TIMEOUT', 10),
        echo=app.config.get('SQLALCHEMY_ECHO', False),
    )

    if app.config.get('DB_CREATE_SCHEMA', True):
        store.create_schema()

    app.extensions[EXTENSION_KEY] = store
    app.logger.info(f"Store ready: {store!r}")
    return store


def get_store(app=None) -> Store:
    """Get the store handle of the given (or current) app."""
    app = app or current_app
    return app.extensions[EXTENSION_KEY]
