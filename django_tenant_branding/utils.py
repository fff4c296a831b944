from collections.abc import Mapping

from django.apps import apps
from django.db.models.base import Model
from django.utils.module_loading import import_string

from .conf import settings


def get_tenant_model() -> type[Model]:
    return apps.get_model(settings.TENANT_MODEL)


def get_domain_model() -> type[Model]:
    return apps.get_model(settings.DOMAIN_MODEL)


def deep_merge(base: Mapping, patch: Mapping) -> dict:
    """Return ``base`` with ``patch`` merged in; nested mappings merge recursively."""
    merged = dict(base)
    for key, value in patch.items():
        current = merged.get(key)
        if isinstance(value, Mapping) and isinstance(current, Mapping):
            merged[key] = deep_merge(current, value)
        elif isinstance(value, Mapping):
            merged[key] = deep_merge({}, value)
        else:
            merged[key] = value
    return merged


_backends: dict[str, object] = {}


def _load_backend(dotted_path: str):
    backend = _backends.get(dotted_path)
    if backend is None:
        backend = import_string(dotted_path)()
        _backends[dotted_path] = backend
    return backend


def get_document_store():
    """Return the process-wide document store configured in ``DOCUMENT_STORE``."""
    return _load_backend(settings.DOCUMENT_STORE)


def get_tenant_directory():
    """Return the process-wide tenant directory configured in ``TENANT_DIRECTORY``."""
    return _load_backend(settings.TENANT_DIRECTORY)


def get_tenant_resolver():
    return import_string(settings.TENANT_RESOLVER)(directory=get_tenant_directory())


def reset_backends():
    """Forget loaded backends so the next lookup re-reads the settings."""
    _backends.clear()
