"""
Append-only audit log.

Every mutating, household-attributable action writes exactly one AuditLog
row in the same transaction as the change itself.  Rows are never updated or
deleted through the ORM; the mapper events below refuse to flush either.
"""
from datetime import datetime, timezone
from sqlalchemy import event
from extensions import db


# Closed set of action types and the shape of their ``original_data`` payload
ACTION_TYPES = {
    'CREATE_HOUSEHOLD':      ('name', 'inviteCode'),
    'JOIN_HOUSEHOLD':        ('code',),
    'APPROVE_MEMBER':        ('memberId', 'memberName'),
    'REMOVE_MEMBER':         ('memberId', 'memberName', 'selfLeave'),
    'SEND_INVITATION':       ('invitationId', 'email'),
    'REVOKE_INVITATION':     ('invitationId', 'email'),
    'ACCEPT_INVITATION':     ('invitationId', 'email'),
    'CREATE_RECURRING':      ('name', 'amount'),
    'UPDATE_RECURRING':      ('id', 'updates'),
    'DELETE_RECURRING':      ('id', 'name'),
    'CREATE_TRANSACTION':    ('amount', 'description', 'type', 'recurringItemId'),
    'DELETE_TRANSACTION':    ('id', 'amount', 'desc'),
    'CREATE_SAVING':         ('savingId', 'name', 'target', 'currentAmount'),
    'UPDATE_SAVING':         ('savingId', 'old', 'new'),
    'UPDATE_SAVING_BALANCE': ('savingId', 'name', 'diff', 'newBalance', 'description'),
    'DELETE_SAVING':         ('savingId', 'name'),
    'CREATE_SHOPPING_LIST':  ('listId', 'name'),
    'DELETE_SHOPPING_LIST':  ('listId', 'name'),
    'ADD_SHOPPING_ITEM':     ('listId', 'itemId', 'name', 'quantity', 'unit'),
    'UPDATE_SHOPPING_ITEM':  ('listId', 'itemId', 'updates', 'listStatus'),
    'DELETE_SHOPPING_ITEM':  ('listId', 'itemId', 'name'),
}


class AuditLog(db.Model):
    __tablename__ = 'audit_logs'

    id = db.Column(db.Integer, primary_key=True)
    household_id = db.Column(db.Integer, db.ForeignKey('households.id'), nullable=False, index=True)
    action_type = db.Column(db.String(40), nullable=False, index=True)
    original_data = db.Column(db.JSON, nullable=False)
    timestamp = db.Column(db.DateTime, nullable=False, index=True,
                          default=lambda: datetime.now(timezone.utc).replace(tzinfo=None))
    performed_by_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)

    actor = db.relationship('User', foreign_keys=[performed_by_id])

    def to_dict(self):
        return {
            'id': self.id,
            'actionType': self.action_type,
            'originalData': self.original_data,
            'timestamp': self.timestamp.isoformat(),
            'performedByUserId': self.performed_by_id,
            'householdId': self.household_id,
            'actor': {'displayName': self.actor.display_name} if self.actor else None,
        }

    def __repr__(self):
        return f'<AuditLog {self.action_type} by {self.performed_by_id}>'


@event.listens_for(AuditLog, 'before_update')
def _refuse_update(mapper, connection, target):
    raise RuntimeError('Audit log entries are append-only and cannot be updated.')


@event.listens_for(AuditLog, 'before_delete')
def _refuse_delete(mapper, connection, target):
    raise RuntimeError('Audit log entries are append-only and cannot be deleted.')
