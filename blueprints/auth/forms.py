"""
Authentication Forms
JSON bodies for registration and login
"""
from wtforms import StringField, PasswordField
from wtforms.validators import DataRequired, Email, Length

from utils.request_data import APIForm


class LoginForm(APIForm):
    """Login body"""
    email = StringField('Email', validators=[
        DataRequired(message='Email is required'),
    ])
    password = PasswordField('Password', validators=[
        DataRequired(message='Password is required')
    ])


class RegisterForm(APIForm):
    """Registration body"""
    email = StringField('Email', validators=[
        DataRequired(message='Email is required'),
        Email(message='Invalid email address'),
        Length(max=120),
    ])
    password = PasswordField('Password', validators=[
        DataRequired(message='Password is required')
    ])
    displayName = StringField('Display name', validators=[
        DataRequired(message='Display name is required'),
        Length(max=100, message='Display name must be at most 100 characters')
    ])
