from flask import Blueprint
from flask_login import login_required

stats_bp = Blueprint('stats', __name__)

# Require authentication for all routes in this blueprint
@stats_bp.before_request
@login_required
def require_login():
    pass

from . import routes  # noqa: E402,F401
