import re

import pytest


class TestHealthAndAuth:

    def test_health(self, client):
        response = client.get('/api/health')
        data = response.get_json()
        assert response.status_code == 200
        assert data['checks']['database']['connected'] is True
        assert data['checks']['portal']['store'] == 'MemoryStore'
        assert data['checks']['application']['blueprints']['missing_critical'] == []
        assert data['checks']['imports']['all_critical_present'] is True
        assert data['checks']['imports']['failed_imports'] == 0

    def test_index_lists_endpoints(self, client):
        data = client.get('/').get_json()
        assert data['endpoints']['quotes'] == '/api/quotes'

    def test_jobs_require_login(self, client):
        response = client.get('/api/jobs')
        assert response.status_code == 401
        assert response.get_json()['code'] == 'UNAUTHORIZED'

    def test_login_and_me(self, client, login):
        user = login('ADMIN')
        assert user['role'] == 'ADMIN'
        me = client.get('/api/auth/me').get_json()['user']
        assert me['id'] == 'a1'

    def test_login_with_unknown_role(self, client):
        response = client.post('/api/auth/login', json={'role': 'OWNER'})
        assert response.status_code == 400
        assert response.get_json()['code'] == 'VALIDATION_ERROR'

    def test_logout(self, client, login):
        login('CUSTOMER')
        response = client.post('/api/auth/logout')
        assert response.status_code == 200
        assert client.get('/api/auth/me').status_code == 401

    def test_profile_update(self, client, login):
        login('CUSTOMER')
        response = client.put('/api/auth/profile', json={'phone': '07700 900456'})
        assert response.status_code == 200
        assert response.get_json()['user']['phone'] == '07700 900456'

        response = client.put('/api/auth/profile', json={'email': 'nope'})
        assert response.status_code == 400

        response = client.put('/api/auth/profile', json=['phone', '07700 900456'])
        assert response.status_code == 400
        assert response.get_json()['code'] == 'VALIDATION_ERROR'

    def test_unknown_endpoint(self, client):
        response = client.get('/api/nothing-here')
        assert response.status_code == 404
        assert response.get_json()['code'] == 'NOT_FOUND'


class TestJobRoutes:

    @pytest.fixture
    def created_job(self, client, login):
        login('ADMIN')
        response = client.post('/api/jobs', json={
            'title': 'Extraction Canopy',
            'customerName': 'Spice Route Ltd',
            'customerEmail': 'kitchen@spiceroute.co.uk',
            'startDate': '2025-06-02',
            'warrantyEndDate': '2026-06-02',
            'amount': 1200,
        })
        assert response.status_code == 201
        return response.get_json()

    def test_create_job(self, created_job):
        assert re.match(r'^J-\d{4}$', created_job['id'])
        assert re.match(r'^CUST-\d{4}$', created_job['customerId'])
        assert created_job['status'] == 'PENDING'
        assert created_job['warranty']['label'] in ('Active', 'Expiring Soon', 'Expired')

    def test_create_job_validation(self, client, login):
        login('ADMIN')
        response = client.post('/api/jobs', json={'customerName': 'Nobody'})
        assert response.status_code == 400
        assert response.get_json()['code'] == 'VALIDATION_ERROR'

    def test_customer_cannot_create_jobs(self, client, login):
        login('CUSTOMER')
        response = client.post('/api/jobs', json={'title': 'x', 'customerName': 'y'})
        assert response.status_code == 403

    def test_list_and_filter(self, client, created_job):
        assert len(client.get('/api/jobs').get_json()) == 1
        assert client.get('/api/jobs?status=COMPLETED').get_json() == []
        assert client.get('/api/jobs?status=BOGUS').status_code == 400
        assert client.get('/api/jobs?expiring_within=abc').status_code == 400

    def test_update_status_and_warranty(self, client, created_job):
        job_id = created_job['id']

        response = client.put(f'/api/jobs/{job_id}/status', json={'status': 'COMPLETED'})
        assert response.get_json()['status'] == 'COMPLETED'

        response = client.put(f'/api/jobs/{job_id}/status', json={'status': 'IN_PROGRESS'})
        assert response.get_json()['status'] == 'IN_PROGRESS'

        response = client.put(f'/api/jobs/{job_id}/warranty', json={'warrantyEndDate': '2027-01-01'})
        assert response.get_json()['warrantyEndDate'] == '2027-01-01'

    def test_edit_job(self, client, created_job):
        job_id = created_job['id']
        response = client.put(f'/api/jobs/{job_id}', json={'title': 'Extraction Canopy (rev 2)', 'customerId': ''})
        data = response.get_json()
        assert response.status_code == 200
        assert data['title'] == 'Extraction Canopy (rev 2)'
        assert data['customerId'] == created_job['customerId']

    def test_notes(self, client, created_job):
        job_id = created_job['id']
        response = client.post(f'/api/jobs/{job_id}/notes', json={'text': 'Canopy delivered'})
        assert response.status_code == 201
        assert response.get_json()['author'] == 'Engineer/Staff'

        notes = client.get(f'/api/jobs/{job_id}').get_json()['notes']
        assert [n['text'] for n in notes] == ['Canopy delivered']

        assert client.post(f'/api/jobs/{job_id}/notes', json={'text': ''}).status_code == 400

    def test_delete_needs_confirmation(self, client, created_job):
        job_id = created_job['id']
        assert client.delete(f'/api/jobs/{job_id}').status_code == 400
        assert client.delete(f'/api/jobs/{job_id}?confirm=true').status_code == 200
        assert client.get(f'/api/jobs/{job_id}').status_code == 404

    def test_calendar(self, client, created_job):
        data = client.get('/api/jobs/calendar/2025-06-02').get_json()
        assert [j['id'] for j in data['jobs']] == [created_job['id']]
        assert client.get('/api/jobs/calendar/02-06-2025').status_code == 400

    def test_customer_sees_only_own_jobs(self, client, created_job, login):
        login('CUSTOMER')
        assert client.get('/api/jobs').get_json() == []
        assert client.get(f"/api/jobs/{created_job['id']}").status_code == 404

    def test_malformed_payloads_are_rejected(self, client, created_job):
        job_id = created_job['id']

        response = client.put(f'/api/jobs/{job_id}/status', json=['COMPLETED'])
        assert response.status_code == 400
        assert response.get_json()['code'] == 'VALIDATION_ERROR'

        response = client.put(f'/api/jobs/{job_id}', json={'startDate': 20250602})
        assert response.status_code == 400

        response = client.put(f'/api/jobs/{job_id}', json={'amount': 'NaN'})
        assert response.status_code == 400

        response = client.put(f'/api/jobs/{job_id}/warranty', json={'warrantyEndDate': 20260602})
        assert response.status_code == 400

        response = client.post(f'/api/jobs/{job_id}/notes', json={'text': {'body': 'Delivered'}})
        assert response.status_code == 400

        response = client.post('/api/jobs', json='Extraction Canopy')
        assert response.status_code == 400

        assert client.get(f'/api/jobs/{job_id}').get_json()['startDate'] == '2025-06-02'

    def test_customer_filters_apply_to_own_jobs(self, client, login):
        login('ADMIN')
        for title, status in (('Canopy', 'COMPLETED'), ('Hot Cupboard', 'PENDING')):
            job = client.post('/api/jobs', json={'title': title, 'customerName': 'Demo', 'customerId': 'u1'}).get_json()
            client.put(f"/api/jobs/{job['id']}/status", json={'status': status})
        client.post('/api/jobs', json={'title': 'Someone Else', 'customerName': 'Other', 'customerId': 'CUST-9999'})

        login('CUSTOMER')
        assert len(client.get('/api/jobs').get_json()) == 2
        completed = client.get('/api/jobs?status=COMPLETED').get_json()
        assert [j['title'] for j in completed] == ['Canopy']
        assert client.get('/api/jobs?expiring_within=30').get_json() == []
        assert client.get('/api/jobs?status=BOGUS').status_code == 400


class TestInviteFlow:

    def test_invite_link_logs_customer_in(self, client, login):
        login('ADMIN')
        job = client.post('/api/jobs', json={
            'title': 'Hot Cupboard Repair',
            'customerName': 'Curry Corner',
            'customerId': 'CUST-4321',
        }).get_json()

        link = client.get(f"/api/jobs/{job['id']}/invite").get_json()['invite_link']
        assert link.endswith(f"/login/customer?code={job['id']}")

        response = client.get(f"/api/auth/invite?code={job['id']}")
        assert response.status_code == 303
        assert 'code=' not in response.headers['Location']

        response = client.get(f"/api/auth/invite?code={job['id']}", follow_redirects=True)
        user = response.get_json()['user']
        assert user['id'] == 'CUST-4321'
        assert user['role'] == 'CUSTOMER'

        jobs = client.get('/api/jobs').get_json()
        assert [j['id'] for j in jobs] == [job['id']]

    def test_unknown_invite_code(self, client):
        response = client.get('/api/auth/invite?code=J-0000')
        assert response.status_code == 401
        assert response.get_json()['code'] == 'INVALID_INVITE'


class TestQuoteRoutes:

    def test_quote_lifecycle(self, client, login):
        login('CUSTOMER')
        response = client.post('/api/quotes', json={'productId': 'p5', 'notes': 'For the back kitchen'})
        assert response.status_code == 201
        quote = response.get_json()
        assert quote['status'] == 'NEW'

        # Cannot pay before a price is set
        assert client.post(f"/api/quotes/{quote['id']}/pay").status_code == 409

        login('ADMIN')
        pending = client.get('/api/quotes?view=pending').get_json()
        assert [q['id'] for q in pending] == [quote['id']]

        response = client.put(f"/api/quotes/{quote['id']}/price", json={'price': 640, 'adminNotes': 'Fitted'})
        assert response.get_json()['status'] == 'QUOTED'

        login('CUSTOMER')
        response = client.post(f"/api/quotes/{quote['id']}/pay")
        data = response.get_json()
        assert response.status_code == 200
        assert data['quote']['status'] == 'PAID'
        assert f"reference={quote['id']}" in data['checkoutUrl']

        login('ADMIN')
        response = client.put(f"/api/quotes/{quote['id']}/price", json={'price': 1})
        assert response.status_code == 409
        assert response.get_json()['code'] == 'INVALID_TRANSITION'
        assert [q['id'] for q in client.get('/api/quotes?view=paid').get_json()] == [quote['id']]

    def test_unknown_product(self, client, login):
        login('CUSTOMER')
        assert client.post('/api/quotes', json={'productId': 'p404'}).status_code == 404

    def test_malformed_quote_payloads(self, client, login):
        login('CUSTOMER')
        assert client.post('/api/quotes', json=['p5']).status_code == 400
        assert client.post('/api/quotes', json={'productId': 'p5', 'notes': 7}).status_code == 400
        quote = client.post('/api/quotes', json={'productId': 'p5'}).get_json()

        login('ADMIN')
        for price in ('inf', '1e400', [640]):
            response = client.put(f"/api/quotes/{quote['id']}/price", json={'price': price})
            assert response.status_code == 400
        assert client.get(f"/api/quotes/{quote['id']}").get_json()['status'] == 'NEW'

    def test_admin_cannot_request_quotes(self, client, login):
        login('ADMIN')
        assert client.post('/api/quotes', json={'productId': 'p1'}).status_code == 403

    def test_products(self, client):
        products = client.get('/api/quotes/products').get_json()
        assert len(products) == 7


class TestCustomerRoutes:

    def test_directory_and_summary(self, client, login):
        login('ADMIN')
        client.post('/api/jobs', json={'title': 'A', 'customerName': 'Spice Route Ltd', 'customerId': 'CUST-1000'})
        client.post('/api/jobs', json={'title': 'B', 'customerName': 'Renamed', 'customerId': 'CUST-1000'})

        customers = client.get('/api/customers').get_json()
        assert [c['id'] for c in customers] == ['CUST-1000']
        assert customers[0]['name'] == 'Renamed'

        assert client.get('/api/customers?q=spice').get_json() == []

        summary = client.get('/api/customers/CUST-1000/summary').get_json()
        assert summary['openJobs'] == 2

    def test_customer_summary_for_self(self, client, login):
        login('CUSTOMER')
        summary = client.get('/api/customers/me/summary').get_json()
        assert summary['customerId'] == 'u1'
        assert client.get('/api/customers').status_code == 403


class TestAssistantRoutes:

    def test_chat_round_trip(self, client, login, assistant):
        login('CUSTOMER')
        response = client.post('/api/assistant/history', json={'message': 'Do you service stockpots?'})
        assert response.status_code == 201
        assert response.get_json() == {'role': 'assistant', 'content': assistant.answer}

        history = client.get('/api/assistant/history').get_json()
        assert [t['role'] for t in history] == ['user', 'assistant']

        assert client.post('/api/assistant/history', json={'message': ''}).status_code == 400
        assert client.post('/api/assistant/history', json={'message': 5}).status_code == 400
        assert client.post('/api/assistant/history', json=['Hello']).status_code == 400
        assert len(client.get('/api/assistant/history').get_json()) == 2

        client.delete('/api/assistant/history')
        assert client.get('/api/assistant/history').get_json() == []
