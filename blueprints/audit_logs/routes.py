from flask import jsonify
from flask_login import current_user

from . import audit_logs_bp
from services.audit_service import AuditService
from utils.permissions import require_household


@audit_logs_bp.route('', methods=['GET'])
def recent():
    """Latest household activity, newest first"""
    household_id = require_household(current_user)
    return jsonify([entry.to_dict() for entry in AuditService.recent(household_id)])
