"""
Django ORM backed tenant directory and document store.

Collections map onto models:

    "tenants"                 -> settings.TENANT_MODEL, keyed by ``tenant_id``;
                                 writable fields: name, owner_id, status,
                                 branding, settings
    LEGACY_COLLECTION         -> SiteSettings, keyed by ``key``; the whole
                                 ``data`` JSON is the document

Live subscriptions are ``post_save`` receivers. A receiver is connected the
first time a collection is watched and stays connected for the lifetime of
the store; it only dispatches to listeners registered for the saved key.
Snapshots are delivered from the thread that performed the save.
"""

import itertools
import logging
import threading
from collections.abc import Mapping
from typing import Optional

from django.db import DatabaseError
from django.db.models.signals import post_save

from django_tenant_branding.conf import settings
from django_tenant_branding.constants import constants
from django_tenant_branding.domains import normalize_host
from django_tenant_branding.exceptions import DocumentStoreError, TenantNotFound
from django_tenant_branding.models import SiteSettings
from django_tenant_branding.utils import deep_merge, get_domain_model, get_tenant_model

from .base import (
    BaseDocumentStore,
    BaseTenantDirectory,
    ErrorCallback,
    Snapshot,
    SnapshotCallback,
    TenantRecord,
    Unsubscribe,
)

logger = logging.getLogger(__name__)

TENANT_WRITABLE_FIELDS = ("name", "owner_id", "status", "branding", "settings")


class ModelTenantDirectory(BaseTenantDirectory):
    def find_by_domain(self, hostname: str) -> list[TenantRecord]:
        Domain = get_domain_model()
        matches = Domain.objects.select_related("tenant").filter(
            domain=normalize_host(hostname)
        )
        return [match.tenant.to_record() for match in matches]

    def get_by_id(self, tenant_id: str) -> Optional[TenantRecord]:
        Tenant = get_tenant_model()
        try:
            return Tenant.objects.get(tenant_id=tenant_id).to_record()
        except Tenant.DoesNotExist:
            return None


class ModelDocumentStore(BaseDocumentStore):
    def __init__(self):
        self._listeners: dict[tuple[str, str], dict[int, tuple]] = {}
        self._connected: set[str] = set()
        self._ids = itertools.count(1)
        self._lock = threading.RLock()

    # --- Reads ---
    def get(self, collection: str, key: str) -> Snapshot:
        try:
            if collection == constants.TENANTS_COLLECTION:
                Tenant = get_tenant_model()
                try:
                    return Tenant.objects.get(tenant_id=key).to_document()
                except Tenant.DoesNotExist:
                    return None
            if collection == settings.LEGACY_COLLECTION:
                row = SiteSettings.objects.filter(key=key).first()
                return dict(row.data or {}) if row is not None else None
        except DatabaseError as e:
            raise DocumentStoreError(f"Unable to read {collection}/{key}: {e}") from e
        raise DocumentStoreError(f"Unknown collection '{collection}'")

    # --- Writes ---
    def set(self, collection: str, key: str, data: Mapping, merge: bool = True) -> None:
        try:
            if collection == constants.TENANTS_COLLECTION:
                self._set_tenant(key, data, merge)
                return
            if collection == settings.LEGACY_COLLECTION:
                row, _ = SiteSettings.objects.get_or_create(key=key)
                row.data = deep_merge(row.data or {}, data) if merge else dict(data)
                row.save()
                return
        except DatabaseError as e:
            raise DocumentStoreError(f"Unable to write {collection}/{key}: {e}") from e
        raise DocumentStoreError(f"Unknown collection '{collection}'")

    def _set_tenant(self, key, data, merge):
        Tenant = get_tenant_model()
        try:
            tenant = Tenant.objects.get(tenant_id=key)
        except Tenant.DoesNotExist:
            raise TenantNotFound(f"Tenant '{key}' does not exist") from None

        for field in TENANT_WRITABLE_FIELDS:
            if field not in data:
                continue
            value = data[field]
            current = getattr(tenant, field)
            if merge and isinstance(value, Mapping) and isinstance(current, Mapping):
                value = deep_merge(current, value)
            setattr(tenant, field, value)
        tenant.save()

    # --- Subscriptions ---
    def subscribe(
        self,
        collection: str,
        key: str,
        on_snapshot: SnapshotCallback,
        on_error: Optional[ErrorCallback] = None,
    ) -> Unsubscribe:
        self._connect(collection)
        listener_id = next(self._ids)
        with self._lock:
            self._listeners.setdefault((collection, key), {})[listener_id] = (
                on_snapshot,
                on_error,
            )

        def unsubscribe():
            with self._lock:
                self._listeners.get((collection, key), {}).pop(listener_id, None)

        try:
            snapshot = self.get(collection, key)
        except DocumentStoreError:
            unsubscribe()
            raise
        on_snapshot(snapshot)
        return unsubscribe

    def _connect(self, collection):
        with self._lock:
            if collection in self._connected:
                return
            if collection == constants.TENANTS_COLLECTION:
                sender = get_tenant_model()
                receiver = self._on_tenant_saved
            elif collection == settings.LEGACY_COLLECTION:
                sender = SiteSettings
                receiver = self._on_site_settings_saved
            else:
                raise DocumentStoreError(f"Unknown collection '{collection}'")
            post_save.connect(
                receiver,
                sender=sender,
                weak=False,
                dispatch_uid=f"tenant_branding_{id(self)}_{collection}",
            )
            self._connected.add(collection)

    def _listeners_for(self, collection, key):
        with self._lock:
            return list(self._listeners.get((collection, key), {}).values())

    def _dispatch(self, collection, key, build_snapshot):
        listeners = self._listeners_for(collection, key)
        if not listeners:
            return
        try:
            snapshot = build_snapshot()
        except DatabaseError as e:
            error = DocumentStoreError(f"Unable to read {collection}/{key}: {e}")
            logger.warning("Snapshot for %s/%s failed: %s", collection, key, e)
            for _, on_error in listeners:
                if on_error is not None:
                    on_error(error)
            return
        for on_snapshot, _ in listeners:
            on_snapshot(snapshot)

    def _on_tenant_saved(self, sender, instance, **kwargs):
        self._dispatch(
            constants.TENANTS_COLLECTION, instance.tenant_id, instance.to_document
        )

    def _on_site_settings_saved(self, sender, instance, **kwargs):
        self._dispatch(
            settings.LEGACY_COLLECTION, instance.key, lambda: dict(instance.data or {})
        )
