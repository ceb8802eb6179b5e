"""
PostgreSQL row-level security for the clinic tables.

Ownership is enforced twice.  The API always scopes querysets with
``owned_by`` (see :mod:`clinic.models`); on PostgreSQL the database
additionally refuses rows whose owner column differs from the
transaction-local setting ``app.current_user_id``.  The setting is bound
by :class:`clinic.authentication.OwnerScopedJWTAuthentication` once a
request is authenticated.  When it is unset (admin, management commands,
migrations) the policies do not restrict.

On any other database vendor every function here is a no-op.
"""
from __future__ import annotations

import logging

from django.db import connection

logger = logging.getLogger(__name__)

SETTING_NAME = 'app.current_user_id'

# (table, owner column)
PROTECTED_TABLES = (
    ('profiles', 'user_id'),
    ('patients', 'psychologist_id'),
    ('patient_records', 'psychologist_id'),
)

_CURRENT = f"NULLIF(current_setting('{SETTING_NAME}', true), '')"


def _owner_predicate(column: str) -> str:
    return f"({_CURRENT} IS NULL OR {column}::text = {_CURRENT})"


def policy_statements(table: str, column: str) -> list[str]:
    pred = _owner_predicate(column)
    return [
        f'ALTER TABLE "{table}" ENABLE ROW LEVEL SECURITY',
        f'ALTER TABLE "{table}" FORCE ROW LEVEL SECURITY',
        f'CREATE POLICY "{table}_owner_select" ON "{table}" FOR SELECT USING {pred}',
        f'CREATE POLICY "{table}_owner_insert" ON "{table}" FOR INSERT WITH CHECK {pred}',
        f'CREATE POLICY "{table}_owner_update" ON "{table}" FOR UPDATE USING {pred} WITH CHECK {pred}',
        f'CREATE POLICY "{table}_owner_delete" ON "{table}" FOR DELETE USING {pred}',
    ]


def drop_statements(table: str) -> list[str]:
    stmts = [
        f'DROP POLICY IF EXISTS "{table}_owner_{op}" ON "{table}"'
        for op in ('select', 'insert', 'update', 'delete')
    ]
    stmts.append(f'ALTER TABLE "{table}" NO FORCE ROW LEVEL SECURITY')
    stmts.append(f'ALTER TABLE "{table}" DISABLE ROW LEVEL SECURITY')
    return stmts


def is_supported(conn=None) -> bool:
    return (conn or connection).vendor == 'postgresql'


def bind_user(user, conn=None) -> bool:
    """Bind ``user`` as the row owner for the current transaction.

    Returns False when the backend has no row-level security.
    """
    conn = conn or connection
    if not is_supported(conn):
        return False
    if conn.get_autocommit():
        # set_config(..., true) would vanish at the end of the statement
        logger.warning("RLS binding requested outside a transaction for user %s", user.pk)
    with conn.cursor() as cur:
        cur.execute("SELECT set_config(%s, %s, true)", [SETTING_NAME, str(user.pk)])
    return True
