"""Household blueprint – membership, approval and invitations."""
from flask import Blueprint
from flask_login import login_required

household_bp = Blueprint('household', __name__)

# Require authentication for all routes in this blueprint
@household_bp.before_request
@login_required
def require_login():
    pass

from . import routes  # noqa: E402,F401
