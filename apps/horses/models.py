"""Horse listing model."""

from __future__ import annotations

import uuid

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Horse(models.Model):
    """A horse offered for borrowing by its owner.

    The row doubles as the per-horse lock for booking transitions: every
    create / approve runs ``SELECT ... FOR UPDATE`` on it before checking
    availability.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="horses",
    )
    name = models.CharField(_("Name"), max_length=120)
    breed = models.CharField(_("Breed"), max_length=120, blank=True)
    location = models.CharField(_("Location"), max_length=255, blank=True)
    description = models.TextField(_("Description"), blank=True)
    is_active = models.BooleanField(_("Accepting requests"), default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Horse")
        verbose_name_plural = _("Horses")
        ordering = ["name"]
        indexes = [
            models.Index(fields=["owner", "is_active"], name="horse_owner_active_idx"),
        ]

    def __str__(self) -> str:
        return self.name
