"""
Rewrite legacy status spellings and widen the exclusion constraint

Rows written as ``accepted`` or ``declined`` are stored with their
canonical spelling. On PostgreSQL the approved-overlap constraint is
recreated to match every approved spelling, so a row inserted with a
legacy spelling afterwards is still covered.
"""

from django.db import migrations

CONSTRAINT_NAME = "borrow_request_approved_no_overlap"

LEGACY_STATUSES = {
    "accepted": "approved",
    "declined": "rejected",
}


def rewrite_legacy_statuses(apps, schema_editor):
    BorrowRequest = apps.get_model("borrowing", "BorrowRequest")
    for legacy, canonical in LEGACY_STATUSES.items():
        BorrowRequest.objects.filter(status=legacy).update(status=canonical)


def _replace_constraint(schema_editor, predicate):
    if schema_editor.connection.vendor != "postgresql":
        return
    schema_editor.execute(
        f"ALTER TABLE borrowing_borrowrequest DROP CONSTRAINT IF EXISTS {CONSTRAINT_NAME}"
    )
    schema_editor.execute(
        f"""
        ALTER TABLE borrowing_borrowrequest
        ADD CONSTRAINT {CONSTRAINT_NAME}
        EXCLUDE USING gist (
            horse_id WITH =,
            daterange(start_date, end_date, '[]') WITH &&
        )
        WHERE ({predicate})
        """
    )


def widen_exclusion_constraint(apps, schema_editor):
    _replace_constraint(schema_editor, "status IN ('approved', 'accepted')")


def narrow_exclusion_constraint(apps, schema_editor):
    _replace_constraint(schema_editor, "status = 'approved'")


class Migration(migrations.Migration):

    dependencies = [
        ("borrowing", "0002_approved_no_overlap"),
    ]

    operations = [
        migrations.RunPython(rewrite_legacy_statuses, migrations.RunPython.noop),
        migrations.RunPython(widen_exclusion_constraint, narrow_exclusion_constraint),
    ]
