"""
Authentication Routes
Registration, login and the current-user projection
"""
from flask import jsonify
from flask_login import login_required, current_user

from . import users_bp
from .forms import LoginForm, RegisterForm
from extensions import limiter
from services.user_service import UserService
from utils.request_data import parse_form


@users_bp.route('/register', methods=['POST'])
@limiter.limit("10 per minute")
def register():
    form = parse_form(RegisterForm)
    user = UserService.register(form.email.data, form.password.data, form.displayName.data)
    return jsonify(token=UserService.issue_token(user), user=user.to_dict()), 201


@users_bp.route('/login', methods=['POST'])
@limiter.limit("10 per minute")  # Rate limit login attempts
def login():
    form = parse_form(LoginForm)
    user = UserService.authenticate(form.email.data, form.password.data)
    return jsonify(token=UserService.issue_token(user), user=user.to_dict())


@users_bp.route('/me', methods=['GET'])
@login_required
def me():
    return jsonify(current_user.to_dict())
