"""Queryset helpers shared by the repositories."""

from django.db import transaction


def lock_queryset_if_possible(queryset):
    """Apply select_for_update when inside transaction.atomic()."""
    connection = transaction.get_connection(queryset.db)
    if connection.in_atomic_block:
        return queryset.select_for_update()
    return queryset
