# bengal_portal/routes/customers.py
from flask import Blueprint, request, jsonify
from flask_login import login_required, current_user
import logging

from bengal_portal.middleware.auth import admin_required
from bengal_portal.models import Role
from bengal_portal.services.customer_directory import project, customer_summary
from bengal_portal.services.portal import get_portal

customers_bp = Blueprint('customers', __name__)
logger = logging.getLogger(__name__)

@customers_bp.route('', methods=['GET'])
@login_required
@admin_required
def get_customers():
    """Customer directory derived from the job list, optionally searched with ?q="""
    customers = project(get_portal().jobs.list_jobs())

    search_term = request.args.get('q', '').strip().lower()
    if search_term:
        customers = [
            c for c in customers
            if search_term in (c.name or '').lower()
            or search_term in (c.email or '').lower()
            or search_term in c.id.lower()
        ]

    return jsonify([c.to_dict() for c in customers])

@customers_bp.route('/<string:customer_id>/summary', methods=['GET'])
@login_required
def get_customer_summary(customer_id):
    if current_user.role != Role.ADMIN and customer_id != current_user.id:
        return jsonify({'error': 'Access denied'}), 403
    return _summary_response(customer_id)

@customers_bp.route('/me/summary', methods=['GET'])
@login_required
def get_my_summary():
    return _summary_response(current_user.id)

def _summary_response(customer_id):
    portal = get_portal()
    summary = customer_summary(customer_id, portal.jobs.list_jobs(), portal.quotes.list_quotes())
    return jsonify(summary)
