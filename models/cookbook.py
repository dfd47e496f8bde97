"""
Cookbook model.

Cookbook = a named collection of recipes plus the pantry of commodities
they are allowed to touch. Forking a cookbook (ecoengine.service) copies
both, so two versions of an economy can be compared.
"""

import uuid

from django.core.exceptions import ValidationError
from django.db import models
from django.utils.translation import gettext_lazy as _
from simple_history.models import HistoricalRecords


class Cookbook(models.Model):
    """
    Scope of one valuation.

    The pantry is the set of commodities in play: anything outside it is
    invisible to the analyzer even if a recipe references it.
    """

    uuid = models.UUIDField(
        default=uuid.uuid4,
        editable=False,
        unique=True,
        verbose_name=_("UUID"),
    )
    parent = models.ForeignKey(
        "self",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="children",
        verbose_name=_("Parent"),
        help_text=_("Cookbook this one was forked from"),
    )
    description = models.TextField(
        blank=True,
        verbose_name=_("Description"),
    )
    pantry = models.ManyToManyField(
        "ecoengine.Commodity",
        blank=True,
        related_name="cookbooks",
        verbose_name=_("Pantry"),
    )

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("created at"))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_("updated at"))

    # History
    history = HistoricalRecords()

    class Meta:
        db_table = "ecoengine_cookbook"
        verbose_name = _("Cookbook")
        verbose_name_plural = _("Cookbooks")
        ordering = ["-created_at"]

    def clean(self):
        super().clean()
        if self.description:
            self.description = self.description.strip()
        if self.parent_id is None and not self.description:
            raise ValidationError(
                _("A cookbook needs a parent and/or a description.")
            )

    def save(self, *args, **kwargs):
        self.full_clean()
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return self.description or str(self.uuid)

    def pantry_ids(self) -> set:
        """UUIDs of every commodity in the pantry."""
        return set(self.pantry.values_list("uuid", flat=True))

    def has_in_pantry(self, commodity) -> bool:
        return self.pantry.filter(pk=commodity.pk).exists()
