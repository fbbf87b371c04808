"""
Recurring Service
Due-month calculation for recurring items and their materialization into
transactions.

``is_due_in_month`` and ``compute_target_payment_date`` are pure: they look
only at the item and the requested month (plus an explicit *today* for the
current-month default) and never touch the database.
"""
import calendar
from datetime import date

from flask import current_app

from extensions import db
from models.household import Household
from models.recurring import RecurringItem
from models.transactions import Transaction
from services.audit_service import AuditService
from utils.db_helpers import household_query, unit_of_work
from utils.errors import ConflictError, ValidationError
from utils.permissions import get_household_record, require_household


# Months between two consecutive due months, per frequency
FREQUENCY_MONTHS = {
    RecurringItem.MONTHLY: 1,
    RecurringItem.BIMONTHLY: 2,
    RecurringItem.QUARTERLY: 3,
    RecurringItem.HALF_YEARLY: 6,
    RecurringItem.YEARLY: 12,
}


def months_since_start(item, year, month):
    """Whole calendar months from the item's start month to (year, month)."""
    return (year - item.start_date.year) * 12 + (month - item.start_date.month)


def is_due_in_month(item, year, month):
    """True if *item* falls due in calendar month (*year*, *month*), month 1-12."""
    if not item.active:
        return False
    diff = months_since_start(item, year, month)
    if diff < 0:
        return False
    try:
        interval = FREQUENCY_MONTHS[item.frequency]
    except KeyError:
        raise ValueError(f'Unknown recurring frequency: {item.frequency}')
    return diff % interval == 0


def compute_target_payment_date(item, year, month, today=None):
    """Date the item should be paid in (*year*, *month*).

    ``pay_day`` is clamped to the month's last day (31 in February becomes
    the 28th or 29th).  Without a pay day the 1st is used, except in the
    current month where today's date is used.
    """
    last_day = calendar.monthrange(year, month)[1]
    if item.pay_day:
        return date(year, month, min(item.pay_day, last_day))
    today = today or date.today()
    if (today.year, today.month) == (year, month):
        return today
    return date(year, month, 1)


def month_bounds(year, month):
    """First and last day of a calendar month."""
    return date(year, month, 1), date(year, month, calendar.monthrange(year, month)[1])


class RecurringService:

    @staticmethod
    def list_items(acting_user):
        household_id = require_household(acting_user)
        return (
            household_query(RecurringItem, household_id)
            .filter_by(active=True)
            .order_by(RecurringItem.created_at.desc(), RecurringItem.id.desc())
            .all()
        )

    @staticmethod
    def create_item(acting_user, name, amount, frequency=None, category=None, auto_pay=False,
                    pay_day=None, start_date=None):
        household_id = require_household(acting_user)
        with unit_of_work():
            item = RecurringItem(
                household_id=household_id,
                name=name,
                amount=amount,
                category=category or current_app.config.get('DEFAULT_TRANSACTION_CATEGORY', 'Other'),
                frequency=frequency or RecurringItem.MONTHLY,
                active=True,
                auto_pay=bool(auto_pay),
                pay_day=pay_day or None,
                start_date=start_date or date.today(),
            )
            db.session.add(item)
            db.session.flush()
            AuditService.record('CREATE_RECURRING', {'name': name, 'amount': amount},
                                acting_user.id, household_id)
        return item

    @staticmethod
    def update_item(acting_user, item_id, updates):
        """Apply *updates* (attribute name → value) to an item of the household."""
        with unit_of_work():
            item = get_household_record(RecurringItem, item_id, acting_user, for_update=True,
                                        label='Recurring item')
            for attr, value in updates.items():
                setattr(item, attr, value)
            AuditService.record('UPDATE_RECURRING', {'id': item.id, 'updates': updates},
                                acting_user.id, item.household_id)
        return item

    @staticmethod
    def deactivate_item(acting_user, item_id):
        """Soft delete: the item stops being due but keeps its history."""
        with unit_of_work():
            item = get_household_record(RecurringItem, item_id, acting_user, for_update=True,
                                        label='Recurring item')
            item.active = False
            AuditService.record('DELETE_RECURRING', {'id': item.id, 'name': item.name},
                                acting_user.id, item.household_id)
        return item

    # ------------------------------------------------------------------
    # Materialization
    # ------------------------------------------------------------------

    @staticmethod
    def paid_transaction(item, year, month):
        """Live transaction that paid *item* in the given month, if any."""
        start, end = month_bounds(year, month)
        return (
            Transaction.query
            .filter(Transaction.recurring_item_id == item.id,
                    Transaction.deleted_at.is_(None),
                    Transaction.transaction_date.between(start, end))
            .order_by(Transaction.transaction_date.desc())
            .first()
        )

    @staticmethod
    def due_for_month(acting_user, year, month, today=None):
        """Status of every active item for one month."""
        rows = []
        for item in RecurringService.list_items(acting_user):
            due = is_due_in_month(item, year, month)
            paid = RecurringService.paid_transaction(item, year, month) if due else None
            rows.append({
                'item': item,
                'due': due,
                'targetPaymentDate': compute_target_payment_date(item, year, month, today) if due else None,
                'paidTransaction': paid,
            })
        return rows

    @staticmethod
    def pay_item(acting_user, item_id, year, month, amount=None, payment_date=None,
                 description=None, today=None):
        """Create the EXPENSE transaction that pays *item* for one month."""
        today = today or date.today()
        if (year, month) > (today.year, today.month):
            raise ValidationError('Future months cannot be paid yet.')
        if payment_date is not None:
            start, end = month_bounds(year, month)
            if not start <= payment_date <= end:
                raise ValidationError(f'The payment date must fall in {year}-{month:02d}.',
                                      details={'field': 'date'})

        with unit_of_work():
            item = get_household_record(RecurringItem, item_id, acting_user, for_update=True,
                                        label='Recurring item')
            if not is_due_in_month(item, year, month):
                raise ValidationError(f'{item.name} is not due in {year}-{month:02d}.')
            if RecurringService.paid_transaction(item, year, month) is not None:
                raise ConflictError(f'{item.name} is already paid for {year}-{month:02d}.')

            txn = RecurringService._materialize(
                item, acting_user.id, year, month,
                amount=amount, payment_date=payment_date, description=description, today=today,
            )
        return txn

    @staticmethod
    def run_autopay(year, month, today=None):
        """Pay every due, unpaid auto-pay item whose payment date has arrived.

        Attributed to each household's owner.  Returns the created transactions.
        """
        today = today or date.today()
        created = []
        items = (
            RecurringItem.query
            .filter_by(active=True, auto_pay=True)
            .order_by(RecurringItem.household_id, RecurringItem.id)
            .all()
        )
        for item in items:
            if not is_due_in_month(item, year, month):
                continue
            target = compute_target_payment_date(item, year, month, today)
            if target > today:
                continue
            if RecurringService.paid_transaction(item, year, month) is not None:
                continue
            owner_id = db.session.get(Household, item.household_id).owner_id
            with unit_of_work():
                txn = RecurringService._materialize(item, owner_id, year, month, today=today)
            current_app.logger.info(f'autopay: recurring item {item.id} paid for {year}-{month:02d}')
            created.append(txn)
        return created

    @staticmethod
    def _materialize(item, actor_id, year, month, amount=None, payment_date=None,
                     description=None, today=None):
        txn = Transaction(
            household_id=item.household_id,
            created_by_id=actor_id,
            amount=amount if amount is not None else item.amount,
            type=Transaction.EXPENSE,
            category=item.category or current_app.config.get('DEFAULT_TRANSACTION_CATEGORY', 'Other'),
            transaction_date=payment_date or compute_target_payment_date(item, year, month, today),
            description=description or item.name,
            is_recurring_instance=True,
            recurring_item_id=item.id,
        )
        db.session.add(txn)
        db.session.flush()
        AuditService.record('CREATE_TRANSACTION',
                            {'amount': txn.amount, 'description': txn.description,
                             'type': txn.type, 'recurringItemId': item.id},
                            actor_id, item.household_id)
        return txn
