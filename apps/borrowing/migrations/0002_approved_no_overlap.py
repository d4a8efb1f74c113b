"""
Exclusion constraint for approved requests on PostgreSQL

Approved ranges of the same horse may not share a day. The Conflict Guard
enforces this at transition time; the constraint refuses any write that
slips past it. Other database backends skip this migration.
"""

from django.db import migrations

CONSTRAINT_NAME = "borrow_request_approved_no_overlap"


def add_exclusion_constraint(apps, schema_editor):
    if schema_editor.connection.vendor != "postgresql":
        return
    schema_editor.execute("CREATE EXTENSION IF NOT EXISTS btree_gist")
    schema_editor.execute(
        f"""
        ALTER TABLE borrowing_borrowrequest
        ADD CONSTRAINT {CONSTRAINT_NAME}
        EXCLUDE USING gist (
            horse_id WITH =,
            daterange(start_date, end_date, '[]') WITH &&
        )
        WHERE (status = 'approved')
        """
    )


def drop_exclusion_constraint(apps, schema_editor):
    if schema_editor.connection.vendor != "postgresql":
        return
    schema_editor.execute(
        f"ALTER TABLE borrowing_borrowrequest DROP CONSTRAINT IF EXISTS {CONSTRAINT_NAME}"
    )


class Migration(migrations.Migration):

    dependencies = [
        ("borrowing", "0001_initial"),
    ]

    operations = [
        migrations.RunPython(add_exclusion_constraint, drop_exclusion_constraint),
    ]
