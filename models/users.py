"""
User Model for Authentication
A registered person who may belong to one household
"""
from extensions import db
from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash
from datetime import datetime, timezone


class User(UserMixin, db.Model):
    """User account for authentication and household membership"""
    __tablename__ = 'users'

    STATUS_PENDING = 'pending'
    STATUS_APPROVED = 'approved'
    MEMBERSHIP_STATUSES = (STATUS_PENDING, STATUS_APPROVED)

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(120), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    display_name = db.Column(db.String(100), nullable=False)
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc).replace(tzinfo=None), nullable=False)
    last_login = db.Column(db.DateTime)

    # Household membership
    household_id = db.Column(db.Integer, db.ForeignKey('households.id'), nullable=True, index=True)
    # 'pending' = waiting for the owner's approval; 'approved' = full member
    membership_status = db.Column(db.String(20), nullable=False, default=STATUS_PENDING)

    # Relationship back to Household
    household = db.relationship('Household', back_populates='members', foreign_keys=[household_id])

    def set_password(self, password):
        """Hash and set the user's password"""
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        """Check if provided password matches the hash"""
        return check_password_hash(self.password_hash, password)

    def update_last_login(self):
        """Update the last login timestamp"""
        self.last_login = datetime.now(timezone.utc).replace(tzinfo=None)
        db.session.commit()

    @property
    def is_approved(self):
        return self.membership_status == self.STATUS_APPROVED

    def to_dict(self):
        """Current-user projection returned by the auth endpoints."""
        return {
            'id': self.id,
            'email': self.email,
            'displayName': self.display_name,
            'householdId': self.household_id,
            'membershipStatus': self.membership_status,
        }

    def to_member_dict(self):
        """Projection embedded in the household's member list."""
        return {
            'id': self.id,
            'displayName': self.display_name,
            'email': self.email,
            'membershipStatus': self.membership_status,
        }

    def __repr__(self):
        return f'<User {self.email}>'
