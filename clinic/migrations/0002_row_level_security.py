from django.db import migrations

from clinic.rls import PROTECTED_TABLES, drop_statements, is_supported, policy_statements


def enable_rls(apps, schema_editor):
    if not is_supported(schema_editor.connection):
        return
    for table, column in PROTECTED_TABLES:
        for stmt in policy_statements(table, column):
            schema_editor.execute(stmt)


def disable_rls(apps, schema_editor):
    if not is_supported(schema_editor.connection):
        return
    for table, _column in PROTECTED_TABLES:
        for stmt in drop_statements(table):
            schema_editor.execute(stmt)


class Migration(migrations.Migration):

    dependencies = [
        ('clinic', '0001_initial'),
    ]

    operations = [
        migrations.RunPython(enable_rls, disable_rls),
    ]
