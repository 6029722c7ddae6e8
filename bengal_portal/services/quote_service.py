# bengal_portal/services/quote_service.py

import logging
import random
from dataclasses import replace

from bengal_portal.errors import ValidationError, NotFoundError
from bengal_portal.models import QuoteRequest, QuoteStatus
from bengal_portal.services.date_utils import utc_now, format_datetime_for_response
from bengal_portal.services.references import generate_reference
from bengal_portal.services.state_machine import QUOTE_TRANSITIONS
from bengal_portal.services.validation import clean_text, clean_amount

logger = logging.getLogger(__name__)


class QuoteLifecycleManager:
    """
    Quote requests move NEW -> QUOTED -> PAID and never back.

    Payment is client-asserted: accept_and_pay marks the quote PAID and hands
    the checkout redirect to the payment gateway without waiting for, or
    checking, any confirmation.
    """

    def __init__(self, repository, payment_gateway, rng=None):
        self.repository = repository
        self.payment_gateway = payment_gateway
        self.rng = rng or random.Random()

    def list_quotes(self):
        return self.repository.load()

    def get_quote(self, quote_id):
        quote = next((q for q in self.repository.load() if q.id == quote_id), None)
        if quote is None:
            raise NotFoundError(f"Quote {quote_id} not found")
        return quote

    def pending(self):
        return [q for q in self.repository.load() if q.is_open]

    def paid(self):
        return [q for q in self.repository.load() if q.status == QuoteStatus.PAID]

    def quotes_for_customer(self, customer_id):
        return [q for q in self.repository.load() if q.customer_id == customer_id]

    def _index_of(self, quotes, quote_id):
        for index, quote in enumerate(quotes):
            if quote.id == quote_id:
                return index
        raise NotFoundError(f"Quote {quote_id} not found")

    def request_quote(self, product, customer, notes=None, media=None, now=None):
        if customer is None:
            raise ValidationError("You must be logged in to request a quote")

        quotes = self.repository.load()
        quote = QuoteRequest(
            id=generate_reference('Q', {q.id for q in quotes}, rng=self.rng),
            product_name=product.name,
            product_image=product.image,
            customer_id=customer.id,
            customer_name=customer.name,
            customer_email=customer.email,
            date=format_datetime_for_response(now or utc_now()),
            status=QuoteStatus.NEW,
            customer_notes=clean_text(notes, 'Notes') or None,
            appliance_image=clean_text(media, 'Appliance image') or None,
        )

        self.repository.save([quote] + quotes)
        logger.info(f"Quote {quote.id} requested by {customer.id} for '{product.name}'")
        return quote

    def price_quote(self, quote_id, price, admin_notes=None):
        if price is None or price == '':
            raise ValidationError("A price is required to send a quote")
        price = clean_amount(price, 'Price')
        admin_notes = clean_text(admin_notes, 'Admin notes') or None

        quotes = self.repository.load()
        index = self._index_of(quotes, quote_id)
        current = quotes[index]
        QUOTE_TRANSITIONS.check(current.status, QuoteStatus.QUOTED)

        quotes[index] = replace(
            current,
            price=price,
            admin_notes=admin_notes,
            status=QuoteStatus.QUOTED,
        )
        self.repository.save(quotes)
        logger.info(f"Quote {quote_id} priced at {price:.2f} (was {current.status.value})")
        return quotes[index]

    def accept_and_pay(self, quote_id):
        quotes = self.repository.load()
        index = self._index_of(quotes, quote_id)
        current = quotes[index]
        QUOTE_TRANSITIONS.check(current.status, QuoteStatus.PAID)

        quotes[index] = replace(current, status=QuoteStatus.PAID)
        self.repository.save(quotes)
        logger.info(f"Quote {quote_id} marked PAID by customer {current.customer_id}")

        try:
            self.payment_gateway.redirect(quotes[index])
        except Exception as e:
            # The redirect is fire-and-forget; the quote stays PAID.
            logger.error(f"Payment redirect for quote {quote_id} failed: {str(e)}")

        return quotes[index]
