"""
Shared pytest fixtures for the Household Finance test suite.

All tests run against an in-memory SQLite database (TestingConfig).
A single app context is pushed for the whole session so that SQLAlchemy
objects remain attached throughout.  After each test, clean_db wipes all
rows so tests are fully independent.
"""
import pytest
from flask import g

from app import create_app
from extensions import db as _db


# ---------------------------------------------------------------------------
# Application / database lifecycle
# ---------------------------------------------------------------------------

@pytest.fixture(scope='session')
def app():
    """Create a test Flask application with an in-memory SQLite database."""
    application = create_app('testing')

    # Requests reuse the session-wide app context (and so its ``g``); drop
    # the cached Flask-Login user so every request authenticates afresh.
    @application.before_request
    def _forget_cached_user():
        g.pop('_login_user', None)

    ctx = application.app_context()
    ctx.push()
    _db.create_all()
    yield application
    _db.session.remove()
    _db.drop_all()
    ctx.pop()


@pytest.fixture(autouse=True)
def clean_db(app):
    """Wipe every table after each test so tests never share state."""
    yield
    _db.session.rollback()
    for table in reversed(_db.metadata.sorted_tables):
        _db.session.execute(table.delete())
    _db.session.commit()
    _db.session.expunge_all()


@pytest.fixture
def client(app):
    return app.test_client()


# ---------------------------------------------------------------------------
# Common model helpers
# ---------------------------------------------------------------------------

def _create_user(email, display_name=None, password='TestPass1!'):
    from models.users import User
    u = User(email=email, display_name=display_name or email.split('@')[0].title())
    u.set_password(password)
    _db.session.add(u)
    _db.session.commit()
    return u


@pytest.fixture
def make_user(app):
    """Return a helper that registers a user directly in the database."""
    return _create_user


@pytest.fixture
def owner(app):
    return _create_user('owner@example.com', 'Owner')


@pytest.fixture
def household(owner):
    """A household created (and owned) by ``owner``."""
    from services.membership_service import MembershipService
    return MembershipService.create_household(owner, 'Home')


@pytest.fixture
def member(household):
    """An approved, non-owner member of ``household``."""
    from services.membership_service import MembershipService
    u = _create_user('member@example.com', 'Member')
    MembershipService.join_household(u, household.invite_code)
    MembershipService.approve_member(household.owner, u.id)
    return u


@pytest.fixture
def outsider(app):
    """A user with a household of their own."""
    from services.membership_service import MembershipService
    u = _create_user('outsider@example.com', 'Outsider')
    MembershipService.create_household(u, 'Elsewhere')
    return u


@pytest.fixture
def auth_headers(app):
    """Return a helper that builds bearer-token headers for a user."""
    from services.user_service import UserService

    def _headers(user):
        return {'Authorization': f'Bearer {UserService.issue_token(user)}'}
    return _headers
