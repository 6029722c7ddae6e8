import random
from datetime import datetime

import pytest
import pytz

from bengal_portal.app import create_app
from bengal_portal.models import Job, QuoteRequest, User, ChatTurn, JobStatus, PaymentStatus
from bengal_portal.errors import AssistantUnavailableError, CorruptSessionError
from bengal_portal.services.store import (
    MemoryStore, CollectionRepository, RecordRepository,
    SESSION_KEY, JOBS_KEY, QUOTES_KEY, CHAT_HISTORY_KEY,
)
from bengal_portal.services.job_service import JobLifecycleManager
from bengal_portal.services.quote_service import QuoteLifecycleManager
from bengal_portal.services.payment_service import RedirectPaymentGateway


class FakeAssistant:
    """Stands in for the OpenAI-backed assistant"""

    def __init__(self, answer="Our engineers can service that unit.", fail=False):
        self.answer = answer
        self.fail = fail
        self.calls = []

    def reply(self, turns):
        self.calls.append(list(turns))
        if self.fail:
            raise AssistantUnavailableError("assistant offline")
        return self.answer


@pytest.fixture
def fixed_now():
    return datetime(2025, 6, 1, 12, 0, 0, tzinfo=pytz.utc)


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def job_repository(store):
    return CollectionRepository(store, JOBS_KEY, Job.from_dict)


@pytest.fixture
def job_manager(job_repository, rng):
    return JobLifecycleManager(job_repository, rng=rng)


@pytest.fixture
def quote_manager(store, rng):
    repository = CollectionRepository(store, QUOTES_KEY, QuoteRequest.from_dict)
    return QuoteLifecycleManager(repository, RedirectPaymentGateway(), rng=rng)


@pytest.fixture
def session_repository(store):
    return RecordRepository(store, SESSION_KEY, User.from_dict, corrupt_error=CorruptSessionError)


@pytest.fixture
def history_repository(store):
    return CollectionRepository(store, CHAT_HISTORY_KEY, ChatTurn.from_dict)


@pytest.fixture
def make_job():
    """Build a Job with sensible defaults"""
    def _make_job(job_id='J-0001', customer_id='CUST-1000', **overrides):
        values = dict(
            id=job_id,
            title='Canopy Install',
            customer_id=customer_id,
            start_date='2025-05-01',
            warranty_end_date='2026-05-01',
            status=JobStatus.PENDING,
            payment_status=PaymentStatus.UNPAID,
            customer_name='Spice Route Ltd',
            customer_email='kitchen@spiceroute.co.uk',
        )
        values.update(overrides)
        return Job(**values)
    return _make_job


@pytest.fixture
def assistant():
    return FakeAssistant()


@pytest.fixture
def app(assistant):
    app = create_app('testing', store=MemoryStore(), assistant=assistant)
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def login(client):
    """Log the test client in as ADMIN or CUSTOMER"""
    def _login(role):
        response = client.post('/api/auth/login', json={'role': role})
        assert response.status_code == 200
        return response.get_json()['user']
    return _login
