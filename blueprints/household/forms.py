from wtforms import StringField
from wtforms.validators import AnyOf, DataRequired, Email, Length, Optional

from models.household import Household
from utils.request_data import APIForm


class CreateHouseholdForm(APIForm):
    name = StringField('Household name', validators=[
        DataRequired(message='Household name is required'),
        Length(max=100, message='Household name must be at most 100 characters')
    ])
    currency = StringField('Currency', validators=[Optional(), AnyOf(Household.CURRENCIES)])


class JoinHouseholdForm(APIForm):
    code = StringField('Invite code', validators=[DataRequired(message='Invite code is required')])


class InvitationForm(APIForm):
    email = StringField('Email', validators=[
        DataRequired(message='Email is required'),
        Email(message='Invalid email address')
    ])


class AcceptInvitationForm(APIForm):
    code = StringField('Invitation code', validators=[
        DataRequired(message='Invitation code is required')
    ])
