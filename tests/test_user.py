"""
Tests for the User model and UserService: password hashing, registration
and credential checks.
"""
import pytest

from models.users import User
from services.user_service import INVALID_CREDENTIALS, UserService
from utils.errors import EmailTaken, ValidationError


# ---------------------------------------------------------------------------
# Password hashing
# ---------------------------------------------------------------------------

class TestPasswordHashing:
    def test_correct_password_accepted(self, app, owner):
        assert owner.check_password('TestPass1!') is True

    def test_wrong_password_rejected(self, app, owner):
        assert owner.check_password('WrongPass99!') is False

    def test_password_is_hashed(self, app, owner):
        assert owner.password_hash != 'TestPass1!', \
            "password_hash must store a hash, not the plain-text password"


# ---------------------------------------------------------------------------
# Registration
# ---------------------------------------------------------------------------

class TestRegister:
    def test_new_user_is_pending_without_household(self, app):
        user = UserService.register('a@x.com', 'pw1', 'A')

        assert user.id is not None
        assert user.membership_status == User.STATUS_PENDING
        assert user.household_id is None

    def test_email_is_normalised(self, app):
        user = UserService.register('  Mixed@Example.COM ', 'pw1', 'Mixed')
        assert user.email == 'mixed@example.com'

    def test_duplicate_email_rejected(self, app):
        UserService.register('a@x.com', 'pw1', 'A')
        with pytest.raises(EmailTaken):
            UserService.register('A@x.com', 'pw2', 'Other A')

    def test_projection(self, app):
        user = UserService.register('a@x.com', 'pw1', 'A')
        assert user.to_dict() == {
            'id': user.id,
            'email': 'a@x.com',
            'displayName': 'A',
            'householdId': None,
            'membershipStatus': 'pending',
        }


# ---------------------------------------------------------------------------
# Login
# ---------------------------------------------------------------------------

class TestAuthenticate:
    def test_valid_credentials(self, app, owner):
        user = UserService.authenticate('OWNER@example.com', 'TestPass1!')
        assert user.id == owner.id
        assert user.last_login is not None

    def test_wrong_password_and_unknown_email_look_the_same(self, app, owner):
        with pytest.raises(ValidationError) as wrong_password:
            UserService.authenticate('owner@example.com', 'nope')
        with pytest.raises(ValidationError) as unknown_email:
            UserService.authenticate('nobody@example.com', 'nope')

        assert wrong_password.value.message == unknown_email.value.message == INVALID_CREDENTIALS, \
            "Login errors must not reveal whether the email is registered"

    def test_inactive_user_cannot_log_in(self, app, owner):
        owner.is_active = False
        with pytest.raises(ValidationError):
            UserService.authenticate('owner@example.com', 'TestPass1!')
