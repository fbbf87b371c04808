from extensions import db
from datetime import datetime, timezone


class RecurringItem(db.Model):
    """Planned periodic obligation (rent, subscriptions, insurance...).

    ``amount`` is the planned value; what was actually paid lives on the
    Transactions materialized from this item.  Items are deactivated
    (``active = False``) instead of being deleted.
    """
    __tablename__ = 'recurring_items'

    MONTHLY = 'MONTHLY'
    BIMONTHLY = 'BIMONTHLY'
    QUARTERLY = 'QUARTERLY'
    HALF_YEARLY = 'HALF-YEARLY'
    YEARLY = 'YEARLY'
    FREQUENCIES = (MONTHLY, BIMONTHLY, QUARTERLY, HALF_YEARLY, YEARLY)

    id = db.Column(db.Integer, primary_key=True)
    household_id = db.Column(db.Integer, db.ForeignKey('households.id'), nullable=False, index=True)
    name = db.Column(db.String(100), nullable=False)
    amount = db.Column(db.Integer, nullable=False)  # minor currency units
    category = db.Column(db.String(50), nullable=True)

    # Schedule
    frequency = db.Column(db.String(20), nullable=False, default=MONTHLY)
    start_date = db.Column(db.Date, nullable=False)
    pay_day = db.Column(db.Integer, nullable=True)  # Day of month 1-31, clamped to month length

    active = db.Column(db.Boolean, nullable=False, default=True)
    auto_pay = db.Column(db.Boolean, nullable=False, default=False)

    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc).replace(tzinfo=None))
    updated_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc).replace(tzinfo=None), onupdate=lambda: datetime.now(timezone.utc).replace(tzinfo=None))

    # Relationships
    transactions = db.relationship('Transaction', back_populates='recurring_item', lazy='dynamic')

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'amount': self.amount,
            'category': self.category,
            'frequency': self.frequency,
            'startDate': self.start_date.isoformat() if self.start_date else None,
            'payDay': self.pay_day,
            'active': self.active,
            'autoPay': self.auto_pay,
            'householdId': self.household_id,
        }

    def __repr__(self):
        return f'<RecurringItem {self.name} {self.frequency}: {self.amount}>'
