"""
Audit Service
Appends audit entries and reads the household's history back
"""
from decimal import Decimal

from flask import current_app

from extensions import db
from models.audit import ACTION_TYPES, AuditLog


class AuditService:

    @staticmethod
    def record(action_type, payload, actor_id, household_id):
        """Stage an audit entry in the current session.

        Does not commit: the caller commits it together with the change it
        describes, so a failed operation never leaves an entry behind.
        """
        if action_type not in ACTION_TYPES:
            raise ValueError(f'Unknown audit action type: {action_type}')
        entry = AuditLog(
            action_type=action_type,
            original_data=_json_safe(payload),
            performed_by_id=actor_id,
            household_id=household_id,
        )
        db.session.add(entry)
        return entry

    @staticmethod
    def recent(household_id, limit=None):
        """Most recent entries of a household, newest first."""
        if limit is None:
            limit = current_app.config.get('AUDIT_LOG_PAGE_SIZE', 50)
        return (
            AuditLog.query
            .filter_by(household_id=household_id)
            .order_by(AuditLog.timestamp.desc(), AuditLog.id.desc())
            .limit(limit)
            .all()
        )

    @staticmethod
    def entries_for_saving(goal, action_types=None):
        """All entries about *goal*, newest first.

        Filters on the ``savingId`` carried in every savings payload.
        """
        query = AuditLog.query.filter_by(household_id=goal.household_id)
        if action_types:
            query = query.filter(AuditLog.action_type.in_(action_types))
        entries = query.order_by(AuditLog.timestamp.desc(), AuditLog.id.desc()).all()
        return [e for e in entries if (e.original_data or {}).get('savingId') == goal.id]

    @staticmethod
    def saving_history(goal):
        """Deposits and withdrawals of *goal*, newest first."""
        return AuditService.entries_for_saving(goal, ['UPDATE_SAVING_BALANCE'])

    @staticmethod
    def replay_saving_balance(goal):
        """Rebuild *goal*'s balance from its opening amount and every diff."""
        entries = AuditService.entries_for_saving(goal, ['CREATE_SAVING', 'UPDATE_SAVING_BALANCE'])
        balance = Decimal('0')
        for entry in reversed(entries):
            data = entry.original_data
            if entry.action_type == 'CREATE_SAVING':
                balance = Decimal(str(data.get('currentAmount') or 0))
            else:
                balance += Decimal(str(data['diff']))
        return balance


def _json_safe(value):
    """Convert Decimals and dates inside *value* to JSON-friendly types."""
    if isinstance(value, dict):
        return {k: _json_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_safe(v) for v in value]
    if isinstance(value, Decimal):
        return float(value)
    if hasattr(value, 'isoformat'):
        return value.isoformat()
    return value
