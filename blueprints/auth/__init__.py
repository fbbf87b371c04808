from flask import Blueprint

users_bp = Blueprint('users', __name__)

# register/login are public; /me applies login_required itself

from . import routes  # noqa: E402,F401
