# bengal_portal/routes/quotes.py
from flask import Blueprint, request, jsonify
from flask_login import login_required, current_user
import logging

from bengal_portal.middleware.auth import admin_required, customer_required
from bengal_portal.middleware.request_body import json_object_body
from bengal_portal.models import Role, DEFAULT_CATALOG, find_product
from bengal_portal.services.portal import get_portal

quotes_bp = Blueprint('quotes', __name__)
logger = logging.getLogger(__name__)

VIEWS = ('pending', 'paid')

@quotes_bp.route('/products', methods=['GET'])
def get_products():
    """Catalog items a quote can be requested against"""
    return jsonify([p.to_dict() for p in DEFAULT_CATALOG])

@quotes_bp.route('', methods=['GET'])
@login_required
def get_quotes():
    """
    Admins get every quote, split by ?view=pending|paid when asked.
    Customers only ever see their own requests.
    """
    manager = get_portal().quotes
    view = request.args.get('view')

    if view and view not in VIEWS:
        return jsonify({'error': f"view must be one of {', '.join(VIEWS)}"}), 400

    if view == 'pending':
        quotes = manager.pending()
    elif view == 'paid':
        quotes = manager.paid()
    else:
        quotes = manager.list_quotes()

    if current_user.role == Role.CUSTOMER:
        quotes = [q for q in quotes if q.customer_id == current_user.id]

    return jsonify([q.to_dict() for q in quotes])

@quotes_bp.route('/<string:quote_id>', methods=['GET'])
@login_required
def get_quote(quote_id):
    quote = get_portal().quotes.get_quote(quote_id)
    if current_user.role != Role.ADMIN and quote.customer_id != current_user.id:
        return jsonify({'error': f'Quote {quote_id} not found'}), 404
    return jsonify(quote.to_dict())

@quotes_bp.route('', methods=['POST'])
@login_required
@customer_required
def request_quote():
    data = json_object_body(required=False)

    product_id = data.get('productId')
    if not product_id:
        return jsonify({'error': 'productId is required'}), 400

    product = find_product(product_id)
    if product is None:
        return jsonify({'error': f'Product {product_id} not found'}), 404

    quote = get_portal().quotes.request_quote(
        product,
        current_user,
        notes=data.get('notes'),
        media=data.get('applianceImage'),
    )
    return jsonify(quote.to_dict()), 201

@quotes_bp.route('/<string:quote_id>/price', methods=['PUT'])
@login_required
@admin_required
def price_quote(quote_id):
    data = json_object_body(required=False)

    quote = get_portal().quotes.price_quote(
        quote_id,
        data.get('price'),
        admin_notes=data.get('adminNotes'),
    )
    return jsonify(quote.to_dict())

@quotes_bp.route('/<string:quote_id>/pay', methods=['POST'])
@login_required
@customer_required
def pay_quote(quote_id):
    """Accept a priced quote and get the checkout link"""
    portal = get_portal()
    quote = portal.quotes.get_quote(quote_id)
    if quote.customer_id != current_user.id:
        logger.warning(f"Customer {current_user.id} tried to pay quote {quote_id} belonging to {quote.customer_id}")
        return jsonify({'error': f'Quote {quote_id} not found'}), 404

    quote = portal.quotes.accept_and_pay(quote_id)

    return jsonify({
        'quote': quote.to_dict(),
        'checkoutUrl': portal.payment_gateway.checkout_url_for(quote)
    })
