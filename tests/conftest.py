" PyTest Config. This contains global-level pytest fixtures. "
import datetime
import os
import os.path

import pytest
from flask import g
from freezegun import freeze_time

from main import create_app, db as db_obj
from models import Organization, User, UserRole, UserStatus

# A Thursday, mid-month
FAKE_NOW = datetime.datetime(2024, 6, 20, 12, 0)


@pytest.fixture(scope="module")
def app():
    """Fixture to provide an instance of the app.
    This will also create a Flask app_context and tear it down.

    The database is created and dropped once per test module.
    """
    if "SETTINGS_FILE" not in os.environ:
        root = os.path.join(os.path.dirname(os.path.abspath(__file__)), "..")
        os.environ["SETTINGS_FILE"] = os.path.join(root, "config", "test.cfg")

    app = create_app()

    # Requests reuse the module-wide app context pushed below, so its `g`
    # outlives each request. Drop Flask-Login's cached user afterwards so
    # every request authenticates afresh, as it would in production.
    @app.teardown_request
    def _forget_login_user(exc):
        g.pop("_login_user", None)

    freezer = freeze_time(FAKE_NOW)
    freezer.start()
    with app.app_context():
        db_obj.create_all()

        yield app

        db_obj.session.close()
        db_obj.drop_all()
    freezer.stop()


@pytest.fixture
def client(app):
    "Yield a test HTTP client for the app"
    yield app.test_client()


@pytest.fixture(scope="module")
def db(app):
    "Yield the DB object"
    yield db_obj


@pytest.fixture(scope="module")
def org(db):
    "Yield the organization the test user belongs to."
    org = Organization("Test Kitchen", '["1 Test Street"]')
    db.session.add(org)
    db.session.commit()
    yield org


@pytest.fixture(scope="module")
def user(db, org):
    "Yield an approved admin. Note that this user will be identical across all tests in a module."
    user = User("admin@example.com", "Test", "Admin", organization=org, role=UserRole.ADMIN)
    user.status = UserStatus.APPROVED
    db.session.add(user)
    db.session.commit()
    yield user


@pytest.fixture
def headers_for(app):
    "Build Authorization headers for any user"

    def headers(user):
        return {"Authorization": f"Bearer {user.generate_api_token(app.config['SECRET_KEY'])}"}

    return headers


@pytest.fixture
def auth_headers(headers_for, user):
    "Headers authenticating requests as the test user"
    return headers_for(user)


@pytest.fixture
def make_user(db, org):
    "Factory for extra users in the test organization"

    def make(email, first_name, last_name="", status=UserStatus.APPROVED, organization=None):
        user = User(email, first_name, last_name, organization=organization or org)
        user.status = status
        db.session.add(user)
        db.session.commit()
        return user

    return make
