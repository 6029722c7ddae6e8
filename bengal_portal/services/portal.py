# bengal_portal/services/portal.py
"""Wires the store, repositories and managers together for one application."""

from flask import current_app

from bengal_portal.errors import CorruptSessionError
from bengal_portal.models import Job, QuoteRequest, User, ChatTurn
from bengal_portal.services.assistant_service import AssistantChatSession, OpenAIAssistant
from bengal_portal.services.identity_service import IdentityResolver
from bengal_portal.services.job_service import JobLifecycleManager, demo_jobs
from bengal_portal.services.payment_service import RedirectPaymentGateway
from bengal_portal.services.quote_service import QuoteLifecycleManager
from bengal_portal.services.store import (
    CollectionRepository, RecordRepository, SqlAlchemyStore,
    SESSION_KEY, JOBS_KEY, QUOTES_KEY, CHAT_HISTORY_KEY,
)

EXTENSION_KEY = 'bengal_portal'


class PortalServices:

    def __init__(self, store, config, assistant=None, payment_gateway=None):
        self.store = store
        self.config = config

        job_seed = demo_jobs if config.get('SEED_DEMO_DATA', False) else None
        self.jobs = JobLifecycleManager(
            CollectionRepository(store, JOBS_KEY, Job.from_dict, seed=job_seed)
        )

        self.payment_gateway = payment_gateway or RedirectPaymentGateway(
            config.get('PAYMENT_CHECKOUT_URL', 'https://www.paypal.com/checkoutnow')
        )
        self.quotes = QuoteLifecycleManager(
            CollectionRepository(store, QUOTES_KEY, QuoteRequest.from_dict),
            self.payment_gateway,
        )

        self.identity = IdentityResolver(
            RecordRepository(store, SESSION_KEY, User.from_dict, corrupt_error=CorruptSessionError),
            self.jobs,
            service_email=config.get('SERVICE_EMAIL', 'client@bengalwelding.co.uk'),
        )

        self.chat = AssistantChatSession(
            CollectionRepository(store, CHAT_HISTORY_KEY, ChatTurn.from_dict),
            assistant or OpenAIAssistant(
                api_key=config.get('OPENAI_API_KEY'),
                model=config.get('ASSISTANT_MODEL', 'gpt-4o-mini'),
            ),
        )


def init_portal(app, store=None, **overrides):
    """Attach a PortalServices instance to the app."""
    if store is None:
        store = SqlAlchemyStore(prefix=app.config.get('STORE_KEY_PREFIX', ''))
    services = PortalServices(store, app.config, **overrides)
    app.extensions[EXTENSION_KEY] = services
    app.logger.info(f"✓ Portal services initialised on {type(store).__name__}")
    return services


def get_portal():
    return current_app.extensions[EXTENSION_KEY]
