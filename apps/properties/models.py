"""Property models.

A property is bookable between ``available_from`` and ``available_to``
(both inclusive for booking containment) while its status is ``active``.
"""

from __future__ import annotations

import uuid

from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from shared.domain.value_objects import DateRange


class Property(models.Model):
    """Rental property listing."""

    class Status(models.TextChoices):
        ACTIVE = "active", _("Active")
        INACTIVE = "inactive", _("Inactive")
        ARCHIVED = "archived", _("Archived")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    title = models.CharField(max_length=255)
    description = models.TextField(max_length=1000)
    price_per_night = models.DecimalField(max_digits=10, decimal_places=2)
    available_from = models.DateField()
    available_to = models.DateField()
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.ACTIVE)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Property")
        verbose_name_plural = _("Properties")
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(available_to__gt=models.F("available_from")),
                name="property_valid_window",
            ),
            models.CheckConstraint(
                condition=models.Q(price_per_night__gt=0),
                name="property_positive_price",
            ),
        ]
        indexes = [
            models.Index(fields=["status"], name="property_status_idx"),
        ]

    def __str__(self) -> str:
        return self.title

    @property
    def window(self) -> DateRange:
        return DateRange(self.available_from, self.available_to)

    def archive(self) -> bool:
        if self.status == self.Status.ARCHIVED:
            return False
        self.status = self.Status.ARCHIVED
        self.save(update_fields=["status", "updated_at"])
        return True
