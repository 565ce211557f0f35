import pytest

from config import TestingConfig
from shopdb import create_app
from shopdb.database import get_store
from shopdb.models import Authentication, User
from shopdb.services.catalog_service import add_category, new_product
from shopdb.services.inventory_service import restock


@pytest.fixture(scope='function')
def app(tmp_path):
    """Create application instance backed by a fresh SQLite file."""

    class Config(TestingConfig):
        SQLALCHEMY_DATABASE_URI = f"sqlite:///{tmp_path / 'shop.sqlite3'}"

    app = create_app(Config)
    yield app
    get_store(app).dispose()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def runner(app):
    """Create CLI runner."""
    return app.test_cli_runner()


@pytest.fixture(scope='function')
def store(app):
    return get_store(app)


@pytest.fixture(scope='function')
def session(store):
    """One store session, committed at teardown."""
    with store.session_scope() as session:
        yield session


@pytest.fixture(scope='function')
def category(session):
    """Create the 'Drinks' category."""
    return add_category(session, 'Drinks')


@pytest.fixture(scope='function')
def product(session, category, member):
    """
    Product 4001 priced (t=0, member=100, guest=120) and restocked
    (t=100, qty=10, cost=80).
    """
    new_product(session, 4001, 'Club Mate', category, 100, 120)
    restock(session, member.id, 4001, 10, 80, timestamp=100)
    return 4001


@pytest.fixture(scope='function')
def member(session):
    """Create member 5."""
    user = User(id=5, firstname='Ada', lastname='Lovelace', email='ada@example.org')
    session.add(user)
    session.flush()
    return user


@pytest.fixture(scope='function')
def guest(session):
    """Create the guest account (id 0)."""
    user = User(id=0, firstname='Guest', lastname='')
    session.add(user)
    session.flush()
    return user


@pytest.fixture(scope='function')
def loss_account(session):
    """Create the loss/donation account (id -3)."""
    user = User(id=-3, firstname='Loss', lastname='Donation', hidden=True)
    session.add(user)
    session.flush()
    return user


@pytest.fixture(scope='function')
def superuser(session, member):
    """Give member 5 a password, a session token and the superuser flag."""
    auth = Authentication(user=member.id, superuser=True, session='token-ada')
    auth.set_password('secret')
    session.add(auth)
    session.flush()
    return auth
