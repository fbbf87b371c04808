from wtforms import DateField, IntegerField, StringField
from wtforms.validators import AnyOf, DataRequired, InputRequired, Length, NumberRange, Optional

from models.transactions import Transaction
from utils.request_data import APIForm


class TransactionForm(APIForm):
    """Body of ``POST /transactions``: amount, type and date are required."""
    amount = IntegerField('Amount', validators=[
        InputRequired(message='Amount is required'),
        NumberRange(min=1, message='Amount must be positive')
    ])
    type = StringField('Type', validators=[
        DataRequired(message='Type is required'),
        AnyOf(Transaction.TYPES, message='Type must be INCOME or EXPENSE')
    ])
    category = StringField('Category', validators=[Optional(), Length(max=50)])
    date = DateField('Date', format='%Y-%m-%d', validators=[
        InputRequired(message='Date is required')
    ])
    description = StringField('Description', validators=[Optional(), Length(max=255)])
    recurringItemId = IntegerField('Recurring item', validators=[Optional()])
