# bengal_portal/routes/assistant.py
from flask import Blueprint, jsonify
from flask_login import login_required
import logging

from bengal_portal.middleware.request_body import json_object_body
from bengal_portal.services.portal import get_portal

assistant_bp = Blueprint('assistant', __name__)
logger = logging.getLogger(__name__)

@assistant_bp.route('/history', methods=['GET'])
@login_required
def get_history():
    turns = get_portal().chat.history()
    return jsonify([t.to_dict() for t in turns])

@assistant_bp.route('/history', methods=['POST'])
@login_required
def send_message():
    """
    Send one message to the assistant.

    The assistant's answer (or a fallback apology when it cannot be reached)
    is appended to the stored history and returned.
    """
    data = json_object_body(required=False)
    reply = get_portal().chat.send(data.get('message'))
    return jsonify(reply.to_dict()), 201

@assistant_bp.route('/history', methods=['DELETE'])
@login_required
def clear_history():
    get_portal().chat.clear()
    return jsonify({'success': True, 'message': 'Chat history cleared'})
