# bengal_portal/middleware/auth.py

from functools import wraps
from flask import jsonify
from flask_login import current_user
import logging

from bengal_portal.models import Role

logger = logging.getLogger(__name__)

def admin_required(f):
    """
    Decorator to ensure a user is logged in and has the ADMIN role.
    This must be placed AFTER the @login_required decorator.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not current_user.is_authenticated:
            logger.warning("Unauthenticated access attempt to an admin-only route.")
            return jsonify({'error': 'Authentication required'}), 401

        if getattr(current_user, 'role', None) != Role.ADMIN:
            logger.warning(f"User '{current_user.id}' (role: {getattr(current_user, 'role', 'N/A')}) attempted to access an admin-only route.")
            return jsonify({'error': 'Admin access required'}), 403

        return f(*args, **kwargs)
    return decorated_function

def customer_required(f):
    """
    Decorator to ensure the logged-in user is a customer.
    This must be placed AFTER the @login_required decorator.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not current_user.is_authenticated:
            return jsonify({'error': 'Authentication required'}), 401

        if getattr(current_user, 'role', None) != Role.CUSTOMER:
            logger.warning(f"User '{current_user.id}' attempted to access a customer-only route.")
            return jsonify({'error': 'Customer access required'}), 403

        return f(*args, **kwargs)
    return decorated_function

def can_view_job(user, job):
    """Admins see every job; customers only their own."""
    return user.role == Role.ADMIN or job.customer_id == user.id
