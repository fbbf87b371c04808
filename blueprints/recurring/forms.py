"""
Recurring item request bodies
"""
from wtforms import BooleanField, DateField, IntegerField, StringField
from wtforms.validators import AnyOf, DataRequired, InputRequired, Length, NumberRange, Optional

from models.recurring import RecurringItem
from utils.request_data import APIForm


class RecurringItemForm(APIForm):
    name = StringField('Name', validators=[
        DataRequired(message='Name is required'),
        Length(max=100)
    ])
    amount = IntegerField('Amount', validators=[
        InputRequired(message='Amount is required'),
        NumberRange(min=0, message='Amount cannot be negative')
    ])
    frequency = StringField('Frequency', validators=[Optional(), AnyOf(RecurringItem.FREQUENCIES)])
    category = StringField('Category', validators=[Optional(), Length(max=50)])
    autoPay = BooleanField('Auto pay')
    payDay = IntegerField('Pay day', validators=[Optional(), NumberRange(min=1, max=31)])
    startDate = DateField('Start date', format='%Y-%m-%d', validators=[Optional()])


class RecurringUpdateForm(APIForm):
    """Partial update; only the keys present in the body are applied."""
    name = StringField('Name', validators=[Optional(), Length(max=100)])
    amount = IntegerField('Amount', validators=[Optional(), NumberRange(min=0)])
    frequency = StringField('Frequency', validators=[Optional(), AnyOf(RecurringItem.FREQUENCIES)])
    category = StringField('Category', validators=[Optional(), Length(max=50)])
    autoPay = BooleanField('Auto pay')
    payDay = IntegerField('Pay day', validators=[Optional(), NumberRange(min=1, max=31)])
    startDate = DateField('Start date', format='%Y-%m-%d', validators=[Optional()])
    active = BooleanField('Active')


class PayRecurringForm(APIForm):
    year = IntegerField('Year', validators=[
        InputRequired(message='Year is required'),
        NumberRange(min=1, max=9999, message='Year must be between 1 and 9999')
    ])
    month = IntegerField('Month', validators=[
        InputRequired(message='Month is required'),
        NumberRange(min=1, max=12, message='Month must be between 1 and 12')
    ])
    amount = IntegerField('Amount', validators=[Optional(), NumberRange(min=0)])
    date = DateField('Payment date', format='%Y-%m-%d', validators=[Optional()])
    description = StringField('Description', validators=[Optional(), Length(max=255)])
