"""
Household and Invitation models for multi-user support.
A Household groups users together into a shared finance pool.
Invitations are per-email codes that let a registered user join.
"""
from datetime import datetime, timezone
from sqlalchemy import text
from extensions import db


class Household(db.Model):
    """Represents a household sharing a single data pool."""
    __tablename__ = 'households'

    CURRENCIES = ('HUF', 'EUR', 'USD')

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    # Open join code, e.g. 'HOME- 4821'
    invite_code = db.Column(db.String(20), unique=True, nullable=False, index=True)
    currency = db.Column(db.String(3), nullable=False, default='HUF')
    owner_id = db.Column(db.Integer, db.ForeignKey('users.id', use_alter=True, name='fk_households_owner_id'),
                         nullable=False)
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc).replace(tzinfo=None), nullable=False)

    # Relationships
    members = db.relationship('User', back_populates='household', lazy='dynamic',
                              foreign_keys='User.household_id')
    owner = db.relationship('User', foreign_keys=[owner_id], viewonly=True)
    invitations = db.relationship('Invitation', back_populates='household', lazy='dynamic')

    def to_dict(self, include_members=False):
        data = {
            'id': self.id,
            'name': self.name,
            'inviteCode': self.invite_code,
            'currency': self.currency,
            'ownerId': self.owner_id,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
        }
        if include_members:
            data['members'] = [m.to_member_dict() for m in sorted(self.members, key=lambda m: m.id)]
        return data

    def __repr__(self):
        return f'<Household {self.name}>'


class Invitation(db.Model):
    """Targeted invitation for one registered user's email address."""
    __tablename__ = 'invitations'
    __table_args__ = (
        # At most one pending invitation per (household, email)
        db.Index('uq_invitations_pending_email', 'household_id', 'email', unique=True,
                 sqlite_where=text("status = 'pending'"),
                 postgresql_where=text("status = 'pending'")),
    )

    STATUS_PENDING = 'pending'
    STATUS_ACCEPTED = 'accepted'
    STATUS_REVOKED = 'revoked'
    STATUSES = (STATUS_PENDING, STATUS_ACCEPTED, STATUS_REVOKED)

    id = db.Column(db.Integer, primary_key=True)
    household_id = db.Column(db.Integer, db.ForeignKey('households.id'), nullable=False, index=True)
    email = db.Column(db.String(120), nullable=False, index=True)
    code = db.Column(db.String(6), unique=True, nullable=False)
    status = db.Column(db.String(20), nullable=False, default=STATUS_PENDING)

    # Audit
    created_by_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc).replace(tzinfo=None), nullable=False)
    accepted_at = db.Column(db.DateTime, nullable=True)

    # Relationships
    household = db.relationship('Household', back_populates='invitations')
    created_by = db.relationship('User', foreign_keys=[created_by_id])

    @property
    def is_pending(self):
        return self.status == self.STATUS_PENDING

    def to_dict(self):
        return {
            'id': self.id,
            'email': self.email,
            'code': self.code,
            'status': self.status,
            'householdId': self.household_id,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f'<Invitation {self.email} {self.status}>'
