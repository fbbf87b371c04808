"""
User Service
Registration, credential checks and bearer-token issuing
"""
from flask import current_app
from flask_jwt_extended import create_access_token
from sqlalchemy.exc import IntegrityError

from extensions import db
from models.users import User
from utils.db_helpers import unit_of_work
from utils.errors import EmailTaken, ValidationError

# Same message for unknown email and wrong password, so login does not
# reveal which addresses are registered
INVALID_CREDENTIALS = 'Invalid email or password.'


def normalize_email(email):
    return (email or '').strip().lower()


class UserService:

    @staticmethod
    def register(email, password, display_name):
        email = normalize_email(email)
        if User.query.filter_by(email=email).first() is not None:
            raise EmailTaken(details={'email': email})

        try:
            with unit_of_work():
                user = User(
                    email=email,
                    display_name=display_name.strip(),
                    membership_status=User.STATUS_PENDING,
                )
                user.set_password(password)
                db.session.add(user)
        except IntegrityError:
            # Lost a race with a concurrent registration of the same address
            raise EmailTaken(details={'email': email})

        current_app.logger.info(f'User {user.id} registered ({email})')
        return user

    @staticmethod
    def authenticate(email, password):
        """Return the user for valid credentials, else raise a generic ``ValidationError``."""
        user = User.query.filter_by(email=normalize_email(email)).first()
        if user is None or not user.is_active or not user.check_password(password):
            current_app.logger.warning(f'Failed login for {normalize_email(email)}')
            raise ValidationError(INVALID_CREDENTIALS)

        user.update_last_login()
        return user

    @staticmethod
    def issue_token(user):
        """Bearer token carrying the user's id (identity) and email."""
        return create_access_token(identity=str(user.id), additional_claims={'email': user.email})
