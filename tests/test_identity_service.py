import pytest

from bengal_portal.errors import ValidationError, NotFoundError
from bengal_portal.models import Role, DEMO_ADMIN, DEMO_CUSTOMER
from bengal_portal.services.identity_service import IdentityResolver, FALLBACK_CUSTOMER_NAME
from bengal_portal.services.store import SESSION_KEY, JOBS_KEY


@pytest.fixture
def resolver(session_repository, job_manager, job_repository, make_job):
    job_repository.save([
        make_job('J-0001', customer_id='CUST-1000', customer_name='Spice Route Ltd'),
        make_job('J-0002', customer_id='', customer_name=None),
    ])
    return IdentityResolver(session_repository, job_manager, service_email='client@bengalwelding.co.uk')


class TestInviteResolution:

    def test_invite_code_logs_in_job_customer(self, resolver, store):
        context = {'code': 'J-0001', 'tab': 'jobs'}
        user = resolver.resolve(context)

        assert user.id == 'CUST-1000'
        assert user.name == 'Spice Route Ltd'
        assert user.role == Role.CUSTOMER
        assert user.email == 'client@bengalwelding.co.uk'
        assert context == {'tab': 'jobs'}
        assert store.get(SESSION_KEY) is not None

    def test_invite_for_job_without_customer_details(self, resolver):
        user = resolver.resolve({'code': 'J-0002'})
        assert user.id == 'u-J-0002'
        assert user.name == FALLBACK_CUSTOMER_NAME

    def test_invite_wins_over_existing_session(self, resolver):
        resolver.login_as(Role.ADMIN)
        user = resolver.resolve({'code': 'J-0001'})
        assert user.id == 'CUST-1000'
        assert resolver.current().id == 'CUST-1000'

    def test_unknown_code_falls_through_to_session(self, resolver):
        resolver.login_as('ADMIN')
        context = {'code': 'J-9999'}
        user = resolver.resolve(context)
        assert user.id == DEMO_ADMIN.id
        assert context == {'code': 'J-9999'}

    def test_nothing_to_go_on(self, resolver):
        assert resolver.resolve({'code': 'J-9999'}) is None
        assert resolver.resolve() is None

    def test_role_choice_is_last_resort(self, resolver):
        assert resolver.resolve({}, role='CUSTOMER').id == DEMO_CUSTOMER.id


class TestSession:

    def test_corrupt_session_counts_as_absent(self, resolver, store):
        store.set(SESSION_KEY, '{"id": "u1"')
        assert resolver.current() is None
        assert store.get(SESSION_KEY) is None

    def test_session_missing_fields_counts_as_absent(self, resolver, store):
        store.set(SESSION_KEY, '{"id": "u1"}')
        assert resolver.resolve() is None

    def test_login_as_role(self, resolver):
        user = resolver.login_as('CUSTOMER')
        assert user == DEMO_CUSTOMER
        assert resolver.current() == DEMO_CUSTOMER

    def test_unknown_role(self, resolver):
        with pytest.raises(ValidationError):
            resolver.login_as('SUPERUSER')

    def test_logout_keeps_business_data(self, resolver, store):
        resolver.login_as('ADMIN')
        resolver.logout()

        assert resolver.current() is None
        assert store.get(SESSION_KEY) is None
        assert store.get(JOBS_KEY) is not None


class TestProfile:

    def test_update_profile(self, resolver):
        resolver.login_as('CUSTOMER')
        user = resolver.update_profile({
            'name': ' John Doe Engineering Ltd ',
            'phone': '07700 900123',
            'email': 'accounts@doe-eng.com',
        })

        assert user.name == 'John Doe Engineering Ltd'
        assert user.phone == '07700 900123'
        assert user.email == 'accounts@doe-eng.com'
        assert user.role == Role.CUSTOMER
        assert resolver.current() == user

    def test_invalid_email(self, resolver):
        resolver.login_as('CUSTOMER')
        with pytest.raises(ValidationError):
            resolver.update_profile({'email': 'not-an-email'})

    def test_blank_name(self, resolver):
        resolver.login_as('CUSTOMER')
        with pytest.raises(ValidationError):
            resolver.update_profile({'name': '  '})

    @pytest.mark.parametrize('fields', [{'name': 42}, {'phone': ['07700', '900123']}])
    def test_non_text_fields(self, resolver, fields):
        before = resolver.login_as('CUSTOMER')
        with pytest.raises(ValidationError):
            resolver.update_profile(fields)
        assert resolver.current() == before

    def test_requires_session(self, resolver):
        with pytest.raises(NotFoundError):
            resolver.update_profile({'name': 'Someone'})
