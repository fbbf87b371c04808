from wtforms import DecimalField, StringField
from wtforms.validators import DataRequired, InputRequired, Length, NumberRange, Optional, StopValidation

from models.savings import MAX_AMOUNT
from utils.request_data import APIForm


class FiniteAmount:
    """Reject NaN, infinities and amounts too large to store.

    Must come before ``NumberRange``, which cannot compare NaN.
    """

    def __init__(self, message=None):
        self.message = message or f'Must be a finite amount no larger than {MAX_AMOUNT}'

    def __call__(self, form, field):
        if field.data is None:
            return
        if not field.data.is_finite() or abs(field.data) > MAX_AMOUNT:
            raise StopValidation(self.message)


class SavingGoalForm(APIForm):
    name = StringField('Name', validators=[
        DataRequired(message='Name is required'),
        Length(max=100)
    ])
    currentAmount = DecimalField('Current amount', places=2, validators=[
        Optional(), FiniteAmount(), NumberRange(min=0, message='Current amount cannot be negative')
    ])
    targetAmount = DecimalField('Target amount', places=2, validators=[
        Optional(), FiniteAmount(), NumberRange(min=0)
    ])
    color = StringField('Colour', validators=[Optional(), Length(max=7)])


class SavingGoalUpdateForm(APIForm):
    """Metadata only; the balance moves through the balance endpoint."""
    name = StringField('Name', validators=[Optional(), Length(max=100)])
    targetAmount = DecimalField('Target amount', places=2, validators=[
        Optional(), FiniteAmount(), NumberRange(min=0)
    ])
    color = StringField('Colour', validators=[Optional(), Length(max=7)])


class BalanceForm(APIForm):
    amountDiff = DecimalField('Amount', places=2, validators=[
        InputRequired(message='amountDiff is required'),
        FiniteAmount()
    ])
    description = StringField('Description', validators=[Optional(), Length(max=255)])
