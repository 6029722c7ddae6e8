# bengal_portal/routes/jobs.py
from flask import Blueprint, request, jsonify, current_app
from flask_login import login_required, current_user
import logging

from bengal_portal.middleware.auth import admin_required, can_view_job
from bengal_portal.middleware.request_body import json_object_body
from bengal_portal.models import Role
from bengal_portal.services.date_utils import parse_job_date
from bengal_portal.services.job_service import ALL, generate_invite_reference
from bengal_portal.services.portal import get_portal
from bengal_portal.services.warranty import classify, warranty_to_dict

jobs_bp = Blueprint('jobs', __name__)
logger = logging.getLogger(__name__)

def serialize_job(job):
    """Job payload with its warranty classification attached"""
    data = job.to_dict()
    try:
        data['warranty'] = warranty_to_dict(classify(job.warranty_end_date))
    except ValueError:
        logger.warning(f"Job {job.id} has an unreadable warranty end date '{job.warranty_end_date}'")
        data['warranty'] = None
    return data

@jobs_bp.route('', methods=['GET'])
@login_required
def get_jobs():
    """
    List jobs, optionally filtered by status or by warranties expiring soon.
    Customers get the same filters applied to their own jobs only.
    """
    manager = get_portal().jobs

    expiring_within = request.args.get('expiring_within')
    status = request.args.get('status', ALL)

    if expiring_within is not None:
        try:
            days = int(expiring_within)
        except ValueError:
            return jsonify({'error': 'expiring_within must be a whole number of days'}), 400
        jobs = manager.filter_expiring_within(days)
    else:
        jobs = manager.filter_by_status(status)

    if current_user.role == Role.CUSTOMER:
        own = manager.jobs_for_customer(current_user.id)
        jobs = [j for j in jobs if j in own]

    return jsonify([serialize_job(j) for j in jobs])

@jobs_bp.route('/expiring', methods=['GET'])
@login_required
@admin_required
def get_expiring_jobs():
    """Jobs whose warranty ends within the configured horizon (90 days by default)"""
    days = current_app.config.get('WARRANTY_HORIZON_DAYS', 90)
    jobs = get_portal().jobs.filter_expiring_within(days)
    return jsonify({'horizon_days': days, 'jobs': [serialize_job(j) for j in jobs]})

@jobs_bp.route('/calendar/<string:date_str>', methods=['GET'])
@login_required
@admin_required
def get_jobs_for_date(date_str):
    """Jobs starting on a given day"""
    try:
        day = parse_job_date(date_str)
    except ValueError:
        return jsonify({'error': 'Invalid date format. Use YYYY-MM-DD.'}), 400

    jobs = get_portal().jobs.jobs_starting_on(day)
    return jsonify({'date': day.isoformat(), 'jobs': [serialize_job(j) for j in jobs]})

@jobs_bp.route('', methods=['POST'])
@login_required
@admin_required
def create_job():
    data = json_object_body()

    job = get_portal().jobs.create_job(data)
    return jsonify(serialize_job(job)), 201

@jobs_bp.route('/<string:job_id>', methods=['GET'])
@login_required
def get_job(job_id):
    job = get_portal().jobs.get_job(job_id)
    if not can_view_job(current_user, job):
        logger.warning(f"User {current_user.id} tried to open job {job_id} belonging to {job.customer_id}")
        return jsonify({'error': f'Job {job_id} not found'}), 404
    return jsonify(serialize_job(job))

@jobs_bp.route('/<string:job_id>', methods=['PUT'])
@login_required
@admin_required
def update_job(job_id):
    data = json_object_body()

    job = get_portal().jobs.update_job(job_id, data)
    return jsonify(serialize_job(job))

@jobs_bp.route('/<string:job_id>', methods=['DELETE'])
@login_required
@admin_required
def delete_job(job_id):
    """Delete a job permanently; the caller must pass ?confirm=true"""
    confirmed = request.args.get('confirm', '').lower() in ('true', '1', 'yes')
    removed = get_portal().jobs.delete_job(job_id, confirmed=confirmed)

    return jsonify({
        'success': True,
        'message': f'Job {removed.id} deleted successfully'
    })

@jobs_bp.route('/<string:job_id>/status', methods=['PUT'])
@login_required
@admin_required
def update_job_status(job_id):
    data = json_object_body()

    new_status = data.get('status')
    if not new_status:
        return jsonify({'error': 'status is required'}), 400

    job = get_portal().jobs.set_status(job_id, new_status)
    logger.info(f"Job {job_id} status set to '{job.status.value}' by user {current_user.id}")
    return jsonify(serialize_job(job))

@jobs_bp.route('/<string:job_id>/warranty', methods=['PUT'])
@login_required
@admin_required
def update_warranty(job_id):
    data = json_object_body(required=False)
    if not data.get('warrantyEndDate'):
        return jsonify({'error': 'warrantyEndDate is required'}), 400

    job = get_portal().jobs.set_warranty_end(job_id, data['warrantyEndDate'])
    return jsonify(serialize_job(job))

@jobs_bp.route('/<string:job_id>/notes', methods=['POST'])
@login_required
def add_note(job_id):
    """Post a log entry; staff and the job's customer may both write"""
    manager = get_portal().jobs
    job = manager.get_job(job_id)
    if not can_view_job(current_user, job):
        return jsonify({'error': f'Job {job_id} not found'}), 404

    data = json_object_body(required=False)
    note = manager.append_note(job_id, data.get('text'), current_user.role, images=data.get('images'))
    return jsonify(note.to_dict()), 201

@jobs_bp.route('/<string:job_id>/invite', methods=['GET'])
@login_required
@admin_required
def get_invite_link(job_id):
    job = get_portal().jobs.get_job(job_id)
    link = generate_invite_reference(job, current_app.config.get('PORTAL_BASE_URL', request.host_url))

    return jsonify({
        'job_id': job.id,
        'customer_id': job.customer_id,
        'customer_name': job.customer_name or 'Customer',
        'invite_link': link
    })
