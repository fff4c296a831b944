"""
Collaborator interfaces: the tenant directory and the document store.

The resolution subsystem never talks to a database directly. It asks a
*tenant directory* which tenant owns a hostname and reads, writes and
watches configuration through a *document store* that addresses data as
``(collection, key)`` pairs:

    ("tenants", "<tenant id>")      per-tenant document; branding lives
                                    under its "branding" sub-object and an
                                    optional "settings" bag
    ("site_settings", "config")     legacy single-tenant document; branding
                                    keys at top level

Backends:
    - stores.memory.InMemoryDocumentStore / InMemoryTenantDirectory
    - stores.orm.ModelDocumentStore / ModelTenantDirectory

Writing a backend:
    ```python
    class RedisDocumentStore(BaseDocumentStore):
        def get(self, collection, key): ...
        def set(self, collection, key, data, merge=True): ...
        def subscribe(self, collection, key, on_snapshot, on_error=None): ...
    ```

Subscriptions must deliver the current snapshot (``None`` for a missing
document) right away and then one snapshot per change, until the returned
callable is invoked.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Optional

Snapshot = Optional[dict]
SnapshotCallback = Callable[[Snapshot], None]
ErrorCallback = Callable[[BaseException], None]
Unsubscribe = Callable[[], None]


@dataclass(frozen=True)
class TenantRecord:
    id: str
    name: str = ""
    domains: tuple[str, ...] = ()
    owner_id: Optional[str] = None
    status: str = "active"
    branding: dict = field(default_factory=dict)
    settings: Optional[dict] = None

    @classmethod
    def from_document(cls, tenant_id: str, data: Mapping[str, Any]) -> "TenantRecord":
        """Build a record from a raw tenant document, tolerating missing keys."""
        branding = data.get("branding")
        settings = data.get("settings")
        return cls(
            id=tenant_id,
            name=data.get("name") or "",
            domains=tuple(data.get("domains") or ()),
            owner_id=data.get("owner_id") or None,
            status=data.get("status") or "active",
            branding=dict(branding) if isinstance(branding, Mapping) else {},
            settings=dict(settings) if isinstance(settings, Mapping) else None,
        )

    def to_document(self) -> dict:
        return {
            "name": self.name,
            "domains": list(self.domains),
            "owner_id": self.owner_id,
            "status": self.status,
            "branding": dict(self.branding),
            "settings": dict(self.settings) if self.settings is not None else None,
        }


class BaseTenantDirectory:
    def find_by_domain(self, hostname: str) -> list[TenantRecord]:
        """Return the tenants whose domain list contains ``hostname`` exactly."""
        raise NotImplementedError

    def get_by_id(self, tenant_id: str) -> Optional[TenantRecord]:
        raise NotImplementedError


class BaseDocumentStore:
    def get(self, collection: str, key: str) -> Snapshot:
        raise NotImplementedError

    def set(self, collection: str, key: str, data: Mapping, merge: bool = True) -> None:
        """Write ``data``; with ``merge`` nested maps are merged into the stored document."""
        raise NotImplementedError

    def subscribe(
        self,
        collection: str,
        key: str,
        on_snapshot: SnapshotCallback,
        on_error: Optional[ErrorCallback] = None,
    ) -> Unsubscribe:
        raise NotImplementedError
