# bengal_portal/routes/auth.py
from flask import Blueprint, request, jsonify, redirect, url_for, session
from flask_login import login_user, logout_user, login_required, current_user
from datetime import datetime
import logging

from bengal_portal.middleware.request_body import json_object_body
from bengal_portal.services.job_service import INVITE_PARAM
from bengal_portal.services.portal import get_portal

auth_bp = Blueprint('auth', __name__)
logger = logging.getLogger(__name__)

@auth_bp.route('/login', methods=['POST'])
def login():
    """Log in as the canned identity for the chosen role"""
    data = json_object_body(required=False)
    role = data.get('role')

    if not role:
        return jsonify({'error': 'role is required'}), 400

    user = get_portal().identity.login_as(role)
    login_user(user, remember=True)
    logger.info(f"Login successful for {user.id} ({user.role.value}) from {request.remote_addr}")

    return jsonify({
        'message': 'Login successful',
        'user': user.to_dict(),
        'timestamp': datetime.utcnow().isoformat()
    }), 200

@auth_bp.route('/invite', methods=['GET'])
def accept_invite():
    """
    Resolve an invite link.

    A valid code logs the job's customer in and redirects to the same URL
    without the code, so the link cannot be replayed by reloading the page.
    """
    context = request.args.to_dict()
    had_code = INVITE_PARAM in context

    user = get_portal().identity.resolve(context)

    if had_code and INVITE_PARAM not in context:
        login_user(user, remember=True)
        return redirect(url_for('auth.accept_invite', **context), code=303)

    if user is None:
        logger.warning(f"Invite resolution failed from {request.remote_addr}")
        return jsonify({
            'error': 'Invalid or expired invite code',
            'code': 'INVALID_INVITE'
        }), 401

    login_user(user, remember=True)
    return jsonify({'user': user.to_dict()}), 200

@auth_bp.route('/logout', methods=['POST'])
def logout():
    """Clear the portal session. Jobs, quotes and chat history are kept."""
    was_authenticated = current_user.is_authenticated

    get_portal().identity.logout()
    session.clear()
    logout_user()

    return jsonify({
        'message': 'Logout successful',
        'success': True,
        'was_authenticated': was_authenticated,
        'timestamp': datetime.utcnow().isoformat()
    }), 200

@auth_bp.route('/me', methods=['GET'])
@login_required
def me():
    return jsonify({'user': current_user.to_dict()}), 200

@auth_bp.route('/profile', methods=['PUT'])
@login_required
def update_profile():
    """Edit name, email, phone and address of the logged-in user"""
    data = json_object_body()
    if not data:
        return jsonify({'error': 'No profile fields given'}), 400

    user = get_portal().identity.update_profile(data)
    login_user(user, remember=True)
    return jsonify({'message': 'Profile updated', 'user': user.to_dict()}), 200
