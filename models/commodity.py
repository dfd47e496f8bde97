"""
Commodity model.

Commodity = anything with a value: an item, a resource, a service.
Valued per cookbook by ecoengine.services.valuation.
"""

import uuid

from django.core.exceptions import ValidationError
from django.db import models
from django.utils.translation import gettext_lazy as _


class Commodity(models.Model):
    """
    A commodity that recipes produce and consume.

    The uuid is the commodity id everywhere outside the database
    (snapshots, analyses, API payloads).
    """

    uuid = models.UUIDField(
        default=uuid.uuid4,
        editable=False,
        unique=True,
        verbose_name=_("UUID"),
    )
    label = models.CharField(
        max_length=200,
        verbose_name=_("Label"),
        help_text=_("Human readable name (ex: Iron Ingot)"),
    )

    # A commodity may implement a more abstract one (ex: Oak Planks → Planks)
    abstraction = models.ForeignKey(
        "self",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="implementations",
        verbose_name=_("Abstraction"),
    )

    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("created at"))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_("updated at"))

    class Meta:
        db_table = "ecoengine_commodity"
        verbose_name = _("Commodity")
        verbose_name_plural = _("Commodities")
        ordering = ["label"]

    def clean(self):
        super().clean()
        if not self.label or not self.label.strip():
            raise ValidationError({"label": _("Label must not be blank.")})
        if self.abstraction_id is not None and self.abstraction_id == self.pk:
            raise ValidationError({"abstraction": _("A commodity cannot abstract itself.")})

    def save(self, *args, **kwargs):
        if self.label:
            self.label = self.label.strip()
        self.full_clean()
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return self.label
