"""
Transaction Service
Household transaction ledger: listing, recording and soft deletion
"""
from datetime import date

from flask import current_app

from extensions import db
from models.recurring import RecurringItem
from models.transactions import Transaction
from services.audit_service import AuditService
from services.recurring_service import month_bounds
from utils.db_helpers import household_query, live_get, unit_of_work
from utils.errors import NotAuthorized, NotFoundError
from utils.permissions import get_household_record, require_household


class TransactionService:

    @staticmethod
    def default_range(today=None):
        """The current calendar month."""
        today = today or date.today()
        return month_bounds(today.year, today.month)

    @staticmethod
    def scoped_query(acting_user, mine_only=False):
        """Live transactions of the caller's household (or only their own)."""
        household_id = require_household(acting_user)
        query = household_query(Transaction, household_id)
        if mine_only:
            query = query.filter(Transaction.created_by_id == acting_user.id)
        return query

    @staticmethod
    def list_transactions(acting_user, start_date=None, end_date=None):
        default_start, default_end = TransactionService.default_range()
        start_date = start_date or default_start
        end_date = end_date or default_end
        return (
            TransactionService.scoped_query(acting_user)
            .filter(Transaction.transaction_date.between(start_date, end_date))
            .order_by(Transaction.transaction_date.desc(), Transaction.created_at.desc(),
                      Transaction.id.desc())
            .all()
        )

    @staticmethod
    def create_transaction(acting_user, amount, type, transaction_date, category=None,
                           description=None, recurring_item_id=None):
        household_id = require_household(acting_user)
        with unit_of_work():
            if recurring_item_id:
                get_household_record(RecurringItem, recurring_item_id, acting_user,
                                     label='Recurring item')
            txn = Transaction(
                household_id=household_id,
                created_by_id=acting_user.id,
                amount=amount,
                type=type,
                category=category or current_app.config.get('DEFAULT_TRANSACTION_CATEGORY', 'Other'),
                transaction_date=transaction_date,
                description=description,
                is_recurring_instance=bool(recurring_item_id),
                recurring_item_id=recurring_item_id or None,
            )
            db.session.add(txn)
            db.session.flush()
            AuditService.record('CREATE_TRANSACTION',
                                {'amount': amount, 'description': description, 'type': type,
                                 'recurringItemId': txn.recurring_item_id},
                                acting_user.id, household_id)
        return txn

    @staticmethod
    def delete_transaction(acting_user, transaction_id):
        """Soft delete; only the member who recorded it may delete it."""
        household_id = require_household(acting_user)
        with unit_of_work():
            txn = live_get(Transaction, transaction_id, for_update=True)
            if txn is None or txn.household_id != household_id:
                raise NotFoundError('Transaction not found.', details={'id': transaction_id})
            if txn.created_by_id != acting_user.id:
                raise NotAuthorized('Only the member who recorded this transaction can delete it.')

            txn.soft_delete()
            AuditService.record('DELETE_TRANSACTION',
                                {'id': txn.id, 'amount': txn.amount, 'desc': txn.description},
                                acting_user.id, household_id)
        return txn
