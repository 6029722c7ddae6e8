# bengal_portal/services/payment_service.py

import logging
from urllib.parse import urlencode

logger = logging.getLogger(__name__)

DEFAULT_CHECKOUT_URL = 'https://www.paypal.com/checkoutnow'


class RedirectPaymentGateway:
    """
    Sends the customer to an external checkout page.

    No callback comes back from the checkout provider, so nothing here can
    confirm that money actually moved.
    """

    def __init__(self, checkout_url=DEFAULT_CHECKOUT_URL):
        self.checkout_url = checkout_url

    def checkout_url_for(self, quote):
        params = {'reference': quote.id}
        if quote.price is not None:
            params['amount'] = f"{quote.price:.2f}"
        return f"{self.checkout_url}?{urlencode(params)}"

    def redirect(self, quote):
        url = self.checkout_url_for(quote)
        logger.info(f"Redirecting customer {quote.customer_id} to checkout for quote {quote.id}")
        return url
