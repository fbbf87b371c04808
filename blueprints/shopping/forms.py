from wtforms import BooleanField, FloatField, StringField
from wtforms.validators import AnyOf, DataRequired, Length, NumberRange, Optional

from models.shopping import ShoppingItem
from utils.request_data import APIForm


class ShoppingListForm(APIForm):
    name = StringField('Name', validators=[
        DataRequired(message='Name is required'),
        Length(max=100)
    ])


class ShoppingItemForm(APIForm):
    name = StringField('Name', validators=[
        DataRequired(message='Name is required'),
        Length(max=100)
    ])
    quantity = FloatField('Quantity', validators=[Optional(), NumberRange(min=0)])
    unit = StringField('Unit', validators=[Optional(), AnyOf(ShoppingItem.UNITS)])


class ShoppingItemUpdateForm(APIForm):
    isBought = BooleanField('Bought')
    quantity = FloatField('Quantity', validators=[Optional(), NumberRange(min=0)])
