from flask import Blueprint
from flask_login import login_required

audit_logs_bp = Blueprint('audit_logs', __name__)

# Require authentication for all routes in this blueprint
@audit_logs_bp.before_request
@login_required
def require_login():
    pass

from . import routes  # noqa: E402,F401
