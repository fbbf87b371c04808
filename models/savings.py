from datetime import datetime, timezone
from decimal import Decimal
from extensions import db
from models.mixins import SoftDeleteMixin

# Largest value a Numeric(12, 2) column holds
MAX_AMOUNT = Decimal('9999999999.99')


class SavingGoal(SoftDeleteMixin, db.Model):
    """Household savings pot with an optional target.

    ``current_amount`` only changes through ``SavingsService.apply_balance_delta``
    and can never go below zero.
    """
    __tablename__ = 'saving_goals'
    __table_args__ = (
        db.CheckConstraint('current_amount >= 0', name='ck_saving_goals_current_amount_non_negative'),
    )

    id = db.Column(db.Integer, primary_key=True)
    household_id = db.Column(db.Integer, db.ForeignKey('households.id'), nullable=False, index=True)
    name = db.Column(db.String(100), nullable=False)
    current_amount = db.Column(db.Numeric(12, 2), nullable=False, default=Decimal('0'))
    target_amount = db.Column(db.Numeric(12, 2), nullable=True)  # None = no target
    color = db.Column(db.String(7), nullable=False, default='#5D9CEC')

    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc).replace(tzinfo=None))
    updated_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc).replace(tzinfo=None), onupdate=lambda: datetime.now(timezone.utc).replace(tzinfo=None))

    @property
    def progress_percent(self):
        if not self.target_amount:
            return None
        return round(float(self.current_amount) / float(self.target_amount) * 100, 1)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'currentAmount': float(self.current_amount),
            'targetAmount': float(self.target_amount) if self.target_amount is not None else None,
            'progressPercent': self.progress_percent,
            'color': self.color,
            'householdId': self.household_id,
        }

    def __repr__(self):
        return f'<SavingGoal {self.name}: {self.current_amount}/{self.target_amount}>'
