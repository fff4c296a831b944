"""In-process document store and tenant directory.

Useful for local development and tests. Snapshots are deep copies, so
callers can never mutate stored state by accident, and listeners are
notified synchronously from the writing call.
"""

import copy
import itertools
import threading
from collections.abc import Mapping
from typing import Optional

from django_tenant_branding.constants import constants
from django_tenant_branding.domains import normalize_host
from django_tenant_branding.utils import deep_merge

from .base import (
    BaseDocumentStore,
    BaseTenantDirectory,
    ErrorCallback,
    Snapshot,
    SnapshotCallback,
    TenantRecord,
    Unsubscribe,
)

class InMemoryDocumentStore(BaseDocumentStore):
    def __init__(self, initial: Optional[Mapping[str, Mapping[str, Mapping]]] = None):
        self._collections: dict[str, dict[str, dict]] = {}
        self._listeners: dict[tuple[str, str], dict[int, SnapshotCallback]] = {}
        self._ids = itertools.count(1)
        self._lock = threading.RLock()
        for collection, documents in (initial or {}).items():
            for key, data in documents.items():
                self._collections.setdefault(collection, {})[key] = copy.deepcopy(dict(data))

    def get(self, collection: str, key: str) -> Snapshot:
        with self._lock:
            data = self._collections.get(collection, {}).get(key)
            return copy.deepcopy(data) if data is not None else None

    def documents(self, collection: str) -> dict[str, dict]:
        with self._lock:
            return copy.deepcopy(self._collections.get(collection, {}))

    def set(self, collection: str, key: str, data: Mapping, merge: bool = True) -> None:
        with self._lock:
            documents = self._collections.setdefault(collection, {})
            current = documents.get(key)
            if merge and current is not None:
                documents[key] = deep_merge(current, data)
            else:
                documents[key] = deep_merge({}, data)
            listeners = list(self._listeners.get((collection, key), {}).values())
        self._notify(collection, key, listeners)

    def delete(self, collection: str, key: str) -> None:
        with self._lock:
            self._collections.get(collection, {}).pop(key, None)
            listeners = list(self._listeners.get((collection, key), {}).values())
        self._notify(collection, key, listeners)

    def _notify(self, collection, key, listeners):
        for listener in listeners:
            listener(self.get(collection, key))

    def subscribe(
        self,
        collection: str,
        key: str,
        on_snapshot: SnapshotCallback,
        on_error: Optional[ErrorCallback] = None,
    ) -> Unsubscribe:
        listener_id = next(self._ids)
        with self._lock:
            self._listeners.setdefault((collection, key), {})[listener_id] = on_snapshot

        def unsubscribe():
            with self._lock:
                self._listeners.get((collection, key), {}).pop(listener_id, None)

        on_snapshot(self.get(collection, key))
        return unsubscribe

    def listener_count(self, collection: str, key: str) -> int:
        with self._lock:
            return len(self._listeners.get((collection, key), {}))


class InMemoryTenantDirectory(BaseTenantDirectory):
    """Directory reading tenant documents from an :class:`InMemoryDocumentStore`."""

    def __init__(self, store: Optional[InMemoryDocumentStore] = None):
        self.store = store if store is not None else InMemoryDocumentStore()

    def _records(self):
        for tenant_id, data in self.store.documents(constants.TENANTS_COLLECTION).items():
            yield TenantRecord.from_document(tenant_id, data)

    def find_by_domain(self, hostname: str) -> list[TenantRecord]:
        host = normalize_host(hostname)
        return [
            record
            for record in self._records()
            if host in {normalize_host(domain) for domain in record.domains}
        ]

    def get_by_id(self, tenant_id: str) -> Optional[TenantRecord]:
        data = self.store.get(constants.TENANTS_COLLECTION, tenant_id)
        if data is None:
            return None
        return TenantRecord.from_document(tenant_id, data)

    def add(self, record: TenantRecord) -> TenantRecord:
        self.store.set(constants.TENANTS_COLLECTION, record.id, record.to_document(), merge=False)
        return record


_shared_store = InMemoryDocumentStore()


def shared_store() -> InMemoryDocumentStore:
    """Factory for ``DOCUMENT_STORE`` sharing one in-memory store per process."""
    return _shared_store


def shared_directory() -> InMemoryTenantDirectory:
    """Factory for ``TENANT_DIRECTORY`` reading tenants from :func:`shared_store`."""
    return InMemoryTenantDirectory(_shared_store)
