from unittest import mock

import pytest
from django.core.management import call_command
from django.db import DatabaseError, connection, transaction
from rest_framework.test import APIClient

from clinic import rls
from clinic.models import Patient, PatientRecord, Profile, User

postgres_only = pytest.mark.skipif(connection.vendor != 'postgresql', reason='row-level security needs PostgreSQL')

RLS_TEST_ROLE = 'psicare_rls_test'


def test_policies_cover_every_operation_on_owner_column():
    stmts = rls.policy_statements('patients', 'psychologist_id')
    joined = '\n'.join(stmts)
    assert 'ENABLE ROW LEVEL SECURITY' in joined
    assert 'FORCE ROW LEVEL SECURITY' in joined
    for op in ('SELECT', 'INSERT', 'UPDATE', 'DELETE'):
        assert f'FOR {op}' in joined
    assert 'WITH CHECK' in joined
    assert "current_setting('app.current_user_id', true)" in joined
    assert 'psychologist_id::text' in joined


def test_drop_statements_mirror_policies():
    stmts = rls.drop_statements('patient_records')
    assert len([s for s in stmts if s.startswith('DROP POLICY')]) == 4
    assert stmts[-1].endswith('DISABLE ROW LEVEL SECURITY')


def test_every_owned_table_is_protected():
    tables = dict(rls.PROTECTED_TABLES)
    assert tables[Patient._meta.db_table] == 'psychologist_id'
    assert tables[PatientRecord._meta.db_table] == 'psychologist_id'
    assert tables['profiles'] == 'user_id'


def test_bind_user_is_noop_without_postgres():
    conn = mock.MagicMock(vendor='sqlite')
    assert rls.bind_user(mock.Mock(pk=1), conn) is False
    conn.cursor.assert_not_called()


def test_bind_user_sets_transaction_local_owner():
    conn = mock.MagicMock(vendor='postgresql')
    conn.get_autocommit.return_value = False
    cursor = conn.cursor.return_value.__enter__.return_value
    assert rls.bind_user(mock.Mock(pk=42), conn) is True
    cursor.execute.assert_called_once_with("SELECT set_config(%s, %s, true)", ['app.current_user_id', '42'])


@pytest.mark.django_db
def test_jwt_authentication_binds_row_owner():
    client = APIClient()
    tokens = client.post('/api/auth/signup', {'email': 'rls@psi.test', 'password': 'Consult0rio!', 'full_name': 'Dr. RLS'}, format='json').data
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {tokens['access']}")
    with mock.patch('clinic.authentication.rls.bind_user') as bind:
        r = client.get('/api/patients')
    assert r.status_code == 200
    bind.assert_called_once()
    assert bind.call_args.args[0].email == 'rls@psi.test'


@pytest.mark.django_db
def test_owned_by_ignores_anonymous():
    u = User.objects.create_user(username='o@psi.test', email='o@psi.test', password='Consult0rio!')
    Patient.objects.create(psychologist=u, full_name='P')
    assert Patient.objects.owned_by(None).count() == 0
    assert Patient.objects.owned_by(u).count() == 1


@pytest.mark.django_db
def test_seed_demo_is_idempotent():
    call_command('seed_demo', '--with-data')
    call_command('seed_demo', '--with-data')
    user = User.objects.get(email='demo@psicare.local')
    assert user.check_password('psicare123')
    assert user.profile.full_name == 'Dr(a). Demo'
    assert Patient.objects.owned_by(user).count() == 4
    assert PatientRecord.objects.owned_by(user).count() == 1 + 2 + 3 + 4


@pytest.mark.django_db
def test_healthz():
    r = APIClient().get('/healthz')
    assert r.status_code == 200
    assert r.json() == {'ok': True, 'db': True}


def _drop_privileges(cur):
    """Superusers and BYPASSRLS roles ignore policies; switch to a plain role for this transaction."""
    cur.execute("SELECT rolsuper OR rolbypassrls FROM pg_roles WHERE rolname = current_user")
    if not cur.fetchone()[0]:
        return
    cur.execute("SELECT 1 FROM pg_roles WHERE rolname = %s", [RLS_TEST_ROLE])
    if cur.fetchone() is None:
        cur.execute(f"CREATE ROLE {RLS_TEST_ROLE} NOLOGIN")
    cur.execute(f"GRANT USAGE ON SCHEMA public TO {RLS_TEST_ROLE}")
    for table, _column in rls.PROTECTED_TABLES:
        cur.execute(f'GRANT SELECT, INSERT, UPDATE, DELETE ON "{table}" TO {RLS_TEST_ROLE}')
    cur.execute(f"SET LOCAL ROLE {RLS_TEST_ROLE}")


@postgres_only
@pytest.mark.django_db
def test_policies_restrict_rows_to_bound_owner():
    a = User.objects.create_user(username='a@rls.test', email='a@rls.test', password='Consult0rio!')
    b = User.objects.create_user(username='b@rls.test', email='b@rls.test', password='Consult0rio!')
    mine = Patient.objects.create(psychologist=a, full_name='Paciente A')
    theirs = Patient.objects.create(psychologist=b, full_name='Paciente B')

    with connection.cursor() as cur:
        _drop_privileges(cur)

    # unbound: nothing is filtered
    assert Patient.objects.count() == 2
    assert Profile.objects.count() == 2

    assert rls.bind_user(a) is True
    assert list(Patient.objects.values_list('id', flat=True)) == [mine.id]
    assert list(Profile.objects.values_list('user_id', flat=True)) == [a.pk]
    assert Patient.objects.filter(pk=theirs.pk).update(full_name='Alterado') == 0
    assert Patient.objects.filter(pk=theirs.pk).delete()[0] == 0

    with pytest.raises(DatabaseError):
        with transaction.atomic():
            Patient.objects.create(psychologist=b, full_name='Intruso')
    with pytest.raises(DatabaseError):
        with transaction.atomic():
            PatientRecord.objects.create(patient=mine, psychologist=b)

    Patient.objects.create(psychologist=a, full_name='Outro de A')
    assert Patient.objects.count() == 2

    # clearing the binding lifts the restriction again
    with connection.cursor() as cur:
        cur.execute("SELECT set_config(%s, '', true)", [rls.SETTING_NAME])
    assert Patient.objects.count() == 3
    assert Patient.objects.get(pk=theirs.pk).full_name == 'Paciente B'
