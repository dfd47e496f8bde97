"""
Tests for EcoEngine admin registration.
"""

import pytest
from django.contrib import admin
from django.contrib.auth import get_user_model
from django.test import Client
from simple_history.admin import SimpleHistoryAdmin

from ecoengine.models import Commodity, Cookbook, Recipe


def test_models_registered():
    assert isinstance(admin.site._registry[Commodity], admin.ModelAdmin)
    assert isinstance(admin.site._registry[Cookbook], SimpleHistoryAdmin)
    assert isinstance(admin.site._registry[Recipe], SimpleHistoryAdmin)


@pytest.mark.urls("ecoengine.tests.admin_urls")
def test_recipe_changelist(db):
    user = get_user_model().objects.create_superuser("admin", "admin@example.com", "pw")
    client = Client()
    client.force_login(user)

    response = client.get("/admin/ecoengine/recipe/")

    assert response.status_code == 200
