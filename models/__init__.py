# Models package - Import all models for Flask-SQLAlchemy

from models.audit import AuditLog
from models.household import Household, Invitation
from models.recurring import RecurringItem
from models.savings import SavingGoal
from models.shopping import ShoppingItem, ShoppingList
from models.transactions import Transaction
from models.users import User

__all__ = [
    'AuditLog',
    'Household',
    'Invitation',
    'RecurringItem',
    'SavingGoal',
    'ShoppingItem',
    'ShoppingList',
    'Transaction',
    'User',
]
