"""
EcoEngine Settings.

Supports two formats (dict takes priority):

    # Option 1: Dict
    ECOENGINE = {
        "SNAPSHOT_BACKEND": "ecoengine.adapters.orm.OrmSnapshotBackend",
        "MEMOIZE": True,
    }

    # Option 2: Flat
    ECOENGINE_SNAPSHOT_BACKEND = "ecoengine.adapters.orm.OrmSnapshotBackend"
    ECOENGINE_MEMOIZE = True

All settings have defaults, so no configuration is required.
"""

import threading

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured


# ── Defaults ──

DEFAULTS = {
    "SNAPSHOT_BACKEND": "ecoengine.adapters.orm.OrmSnapshotBackend",
    "MEMOIZE": True,
    "VALUE_DECIMAL_PLACES": 4,
    "VALUE_PRECISION": 28,
}


# ── Accessors ──

_sentinel = object()


def get_setting(name, default=_sentinel):
    """
    Get an ecoengine setting.

    Looks up in order:
    1. ECOENGINE dict (e.g. ECOENGINE = {"MEMOIZE": False})
    2. Flat setting (e.g. ECOENGINE_MEMOIZE = False)
    3. DEFAULTS
    """
    ecoengine_dict = getattr(settings, "ECOENGINE", {})
    if name in ecoengine_dict:
        return ecoengine_dict[name]

    flat_value = getattr(settings, f"ECOENGINE_{name}", _sentinel)
    if flat_value is not _sentinel:
        return flat_value

    if default is not _sentinel:
        return default

    return DEFAULTS.get(name)


_snapshot_backend_lock = threading.Lock()
_snapshot_backend_instance = None


def get_snapshot_backend():
    """
    Return the configured snapshot backend instance.

    The snapshot backend reads a cookbook's pantry and recipes and
    freezes them into a RecipeGraphSnapshot for the valuation engine.

    Raises:
        ImproperlyConfigured: If SNAPSHOT_BACKEND cannot be imported
    """
    global _snapshot_backend_instance

    if _snapshot_backend_instance is None:
        with _snapshot_backend_lock:
            if _snapshot_backend_instance is None:  # double-checked
                from django.utils.module_loading import import_string

                path = get_setting("SNAPSHOT_BACKEND")
                try:
                    _snapshot_backend_instance = import_string(path)()
                except ImportError as e:
                    raise ImproperlyConfigured(
                        f"Failed to import snapshot backend '{path}': {e}"
                    ) from e

    return _snapshot_backend_instance


def reset_snapshot_backend() -> None:
    """Reset singleton (for tests)."""
    global _snapshot_backend_instance
    _snapshot_backend_instance = None
