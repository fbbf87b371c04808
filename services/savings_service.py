"""
Savings Service
Savings goals and their balance ledger.

The balance only moves through ``apply_balance_delta``: the goal row is read
under a row lock, the non-negative check runs against that locked value, and
the new balance is committed together with its UPDATE_SAVING_BALANCE entry.
Two concurrent deposits therefore both land, and a withdrawal can never be
validated against a stale balance.
"""
from decimal import Decimal

from flask import current_app

from extensions import db
from models.savings import MAX_AMOUNT, SavingGoal
from services.audit_service import AuditService
from utils.db_helpers import household_query, unit_of_work
from utils.errors import InsufficientFunds, ValidationError
from utils.permissions import get_household_record, require_household

CENT = Decimal('0.01')


class _Unset:
    """Marker for "field not supplied", as opposed to an explicit ``None``."""

    def __repr__(self):
        return 'UNSET'


UNSET = _Unset()


def _money(value):
    amount = Decimal(str(value))
    if not amount.is_finite() or abs(amount) > MAX_AMOUNT:
        raise ValidationError(f'Amounts must be finite and no larger than {MAX_AMOUNT}.',
                              details={'amount': str(value)})
    return amount.quantize(CENT)


class SavingsService:

    @staticmethod
    def list_goals(acting_user):
        household_id = require_household(acting_user)
        return (
            household_query(SavingGoal, household_id)
            .order_by(SavingGoal.created_at.desc(), SavingGoal.id.desc())
            .all()
        )

    @staticmethod
    def get_goal(acting_user, goal_id):
        return get_household_record(SavingGoal, goal_id, acting_user, label='Saving goal')

    @staticmethod
    def create_goal(acting_user, name, current_amount=None, target_amount=None, color=None):
        household_id = require_household(acting_user)
        opening = _money(current_amount or 0)
        if opening < 0:
            raise InsufficientFunds('The opening balance cannot be negative.')

        with unit_of_work():
            goal = SavingGoal(
                household_id=household_id,
                name=name,
                current_amount=opening,
                target_amount=_money(target_amount) if target_amount else None,
                color=color or '#5D9CEC',
            )
            db.session.add(goal)
            db.session.flush()
            AuditService.record('CREATE_SAVING',
                                {'savingId': goal.id, 'name': name, 'target': goal.target_amount,
                                 'currentAmount': opening},
                                acting_user.id, household_id)
        return goal

    @staticmethod
    def apply_balance_delta(acting_user, goal_id, delta, description=None):
        """Deposit (positive *delta*) into or withdraw (negative) from a goal.

        A withdrawal that would take the balance below zero is rejected whole:
        no balance change, no audit entry.
        """
        delta = _money(delta)
        if delta == 0:
            raise ValidationError('The amount must not be zero.', details={'field': 'amountDiff'})

        with unit_of_work():
            goal = get_household_record(SavingGoal, goal_id, acting_user, for_update=True,
                                        label='Saving goal')
            new_balance = _money(goal.current_amount) + delta
            if new_balance < 0:
                current_app.logger.warning(
                    f'Withdrawal of {-delta} from saving goal {goal.id} rejected: balance {goal.current_amount}'
                )
                raise InsufficientFunds(details={'savingId': goal.id,
                                                 'currentAmount': float(goal.current_amount),
                                                 'diff': float(delta)})
            if new_balance > MAX_AMOUNT:
                raise ValidationError(f'The balance cannot exceed {MAX_AMOUNT}.',
                                      details={'savingId': goal.id, 'diff': float(delta)})

            goal.current_amount = new_balance
            AuditService.record('UPDATE_SAVING_BALANCE', {
                'savingId': goal.id,
                'name': goal.name,
                'diff': delta,
                'newBalance': new_balance,
                'description': description or ('Deposit' if delta > 0 else 'Withdrawal'),
            }, acting_user.id, goal.household_id)

        current_app.logger.info(f'Saving goal {goal.id} balance {delta:+} -> {new_balance}')
        return goal

    @staticmethod
    def edit_goal_metadata(acting_user, goal_id, name=UNSET, target_amount=UNSET, color=UNSET):
        """Change name, target or colour; never the balance.

        ``target_amount=None`` clears the target; ``UNSET`` leaves it alone.
        """
        with unit_of_work():
            goal = get_household_record(SavingGoal, goal_id, acting_user, for_update=True,
                                        label='Saving goal')
            old = {'name': goal.name, 'target': goal.target_amount}

            if name is not UNSET and name:
                goal.name = name
            if target_amount is not UNSET:
                goal.target_amount = _money(target_amount) if target_amount is not None else None
            if color is not UNSET and color:
                goal.color = color

            AuditService.record('UPDATE_SAVING', {
                'savingId': goal.id,
                'old': old,
                'new': {'name': goal.name, 'target': goal.target_amount},
            }, acting_user.id, goal.household_id)
        return goal

    @staticmethod
    def delete_goal(acting_user, goal_id):
        with unit_of_work():
            goal = get_household_record(SavingGoal, goal_id, acting_user, for_update=True,
                                        label='Saving goal')
            goal.soft_delete()
            AuditService.record('DELETE_SAVING', {'savingId': goal.id, 'name': goal.name},
                                acting_user.id, goal.household_id)
        return goal

    @staticmethod
    def history(acting_user, goal_id):
        goal = SavingsService.get_goal(acting_user, goal_id)
        return AuditService.saving_history(goal)
