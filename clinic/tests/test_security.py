from unittest import mock

import pytest
from django.urls import reverse
from rest_framework.test import APIClient

from clinic.models import AuditEvent, Patient, Profile, User

pytestmark = pytest.mark.django_db

PASSWORD = 'Consult0rio!'


def signup(client, email='maria@psi.test', password=PASSWORD, full_name='Dra. Maria Silva'):
    return client.post(reverse('signup_view'), {'email': email, 'password': password, 'full_name': full_name}, format='json')


def login(client, email, password):
    return client.post(reverse('login_view'), {'email': email, 'password': password}, format='json')


def bearer(client, access):
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {access}')
    return client


def test_signup_creates_account_profile_and_tokens():
    client = APIClient()
    r = signup(client, email='  Maria@PSI.test ')
    assert r.status_code == 201
    assert r.data['access'] and r.data['refresh']
    assert r.data['user']['email'] == 'maria@psi.test'
    assert r.data['user']['full_name'] == 'Dra. Maria Silva'
    user = User.objects.get(email='maria@psi.test')
    assert Profile.objects.get(user=user).full_name == 'Dra. Maria Silva'
    assert AuditEvent.objects.filter(action='signup', user=user).exists()


def test_signup_rejects_duplicate_email():
    client = APIClient()
    assert signup(client).status_code == 201
    r = signup(client, email='MARIA@psi.test')
    assert r.status_code == 400
    assert r.data['error']['message']['email'] == ['Este email já está cadastrado']
    assert User.objects.filter(email='maria@psi.test').count() == 1


def test_signup_requires_name_and_password_length():
    client = APIClient()
    r = signup(client, full_name='   ')
    assert r.status_code == 400
    assert r.data['error']['message']['full_name'] == ['Nome obrigatório']
    r = signup(client, password='abc12')
    assert r.status_code == 400
    assert 'password' in r.data['error']['message']
    assert not User.objects.exists()


def test_login_with_wrong_password_is_rejected_and_audited():
    client = APIClient()
    signup(client)
    r = login(client, 'maria@psi.test', 'wrong-password')
    assert r.status_code == 400
    assert r.data['ok'] is False
    assert r.data['error']['message'] == 'Email ou senha incorretos'
    assert AuditEvent.objects.filter(action='login', detail__result='fail').exists()


def test_login_returns_tokens_usable_as_bearer():
    client = APIClient()
    signup(client)
    r = login(client, 'MARIA@psi.test', PASSWORD)
    assert r.status_code == 200
    assert r.data['ok'] is True
    me = bearer(APIClient(), r.data['access']).get(reverse('me_view'))
    assert me.status_code == 200
    assert me.data['email'] == 'maria@psi.test'


def test_invalid_bearer_token_is_unauthorized():
    client = bearer(APIClient(), 'not-a-jwt')
    r = client.get(reverse('patients_list'))
    assert r.status_code == 401
    assert r.data['ok'] is False


def test_refresh_issues_new_access_token():
    client = APIClient()
    tokens = signup(client).data
    r = client.post(reverse('refresh_view'), {'refresh': tokens['refresh']}, format='json')
    assert r.status_code == 200
    assert r.data['access']


def test_logout_blacklists_refresh_token():
    client = APIClient()
    tokens = signup(client).data
    bearer(client, tokens['access'])
    r = client.post(reverse('logout_view'), {'refresh': tokens['refresh']}, format='json')
    assert r.status_code == 200
    assert r.data['blacklisted'] == 1
    r = APIClient().post(reverse('refresh_view'), {'refresh': tokens['refresh']}, format='json')
    assert r.status_code == 401


def test_logout_rejects_refresh_token_of_other_user():
    a = APIClient()
    tokens_a = signup(a, email='a@psi.test').data
    b = APIClient()
    tokens_b = signup(b, email='b@psi.test').data
    bearer(a, tokens_a['access'])
    r = a.post(reverse('logout_view'), {'refresh': tokens_b['refresh']}, format='json')
    assert r.status_code == 400


def test_profile_update():
    client = APIClient()
    tokens = signup(client).data
    bearer(client, tokens['access'])
    r = client.patch(reverse('profile_view'), {'crp': '06/123456', 'phone': '11912345678'}, format='json')
    assert r.status_code == 200
    assert r.data['crp'] == '06/123456'
    assert r.data['full_name'] == 'Dra. Maria Silva'
    r = client.patch(reverse('profile_view'), {'full_name': ''}, format='json')
    assert r.status_code == 400


def test_profile_is_created_for_users_made_outside_signup():
    u = User.objects.create_user(username='admin@psi.test', email='admin@psi.test', password=PASSWORD)
    assert Profile.objects.get(user=u).full_name == 'Psicólogo(a)'


def test_jwt_flow_keeps_patients_isolated():
    a = APIClient()
    bearer(a, signup(a, email='a@psi.test').data['access'])
    b = APIClient()
    bearer(b, signup(b, email='b@psi.test').data['access'])

    created = a.post(reverse('patients_list'), {'full_name': 'Paciente A'}, format='json')
    assert created.status_code == 201
    pid = created.data['id']

    assert b.get(reverse('patients_list')).data == []
    assert b.get(reverse('patient_detail', args=[pid])).status_code == 404
    assert b.post(reverse('patient_records', args=[pid]), {'session_notes': 'x'}, format='json').status_code == 404
    assert Patient.objects.get(id=pid).psychologist.email == 'a@psi.test'


def test_login_ignores_stale_bearer_header():
    signup(APIClient())
    client = bearer(APIClient(), 'expired.or.garbage')
    r = login(client, 'maria@psi.test', PASSWORD)
    assert r.status_code == 200
    assert r.data['access']


def test_signup_while_signed_in_does_not_bind_caller_as_owner():
    a = APIClient()
    bearer(a, signup(a, email='a@psi.test').data['access'])
    with mock.patch('clinic.authentication.rls.bind_user') as bind:
        r = signup(a, email='b@psi.test', full_name='Dr. B')
    assert r.status_code == 201
    bind.assert_not_called()
    assert r.data['user']['email'] == 'b@psi.test'
    assert Profile.objects.get(user__email='b@psi.test').full_name == 'Dr. B'
