from datetime import datetime, timezone
from extensions import db
from models.mixins import SoftDeleteMixin


class Transaction(SoftDeleteMixin, db.Model):
    """A realized income or expense, created by one household member."""
    __tablename__ = 'transactions'

    INCOME = 'INCOME'
    EXPENSE = 'EXPENSE'
    TYPES = (INCOME, EXPENSE)

    id = db.Column(db.Integer, primary_key=True)
    household_id = db.Column(db.Integer, db.ForeignKey('households.id'), nullable=False, index=True)
    created_by_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    amount = db.Column(db.Integer, nullable=False)
    type = db.Column(db.String(10), nullable=False)
    category = db.Column(db.String(50), nullable=False)
    transaction_date = db.Column(db.Date, nullable=False, index=True)
    description = db.Column(db.String(255))

    # Link to the recurring item this payment materializes
    is_recurring_instance = db.Column(db.Boolean, nullable=False, default=False)
    recurring_item_id = db.Column(db.Integer, db.ForeignKey('recurring_items.id'), nullable=True, index=True)

    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc).replace(tzinfo=None))

    # Relationships
    creator = db.relationship('User', foreign_keys=[created_by_id])
    recurring_item = db.relationship('RecurringItem', back_populates='transactions')

    def to_dict(self):
        return {
            'id': self.id,
            'amount': self.amount,
            'type': self.type,
            'category': self.category,
            'date': self.transaction_date.isoformat(),
            'description': self.description,
            'isRecurringInstance': self.is_recurring_instance,
            'recurringItemId': self.recurring_item_id,
            'householdId': self.household_id,
            'createdBy': self.created_by_id,
            'creator': {
                'id': self.creator.id,
                'displayName': self.creator.display_name,
            } if self.creator else None,
        }

    def __repr__(self):
        return f'<Transaction {self.transaction_date}: {self.type} {self.amount}>'
