"""Addressing of the branding documents a session can subscribe to.

A tenant document keeps branding under its ``branding`` sub-object, next to
an optional ``settings`` bag written by the earlier combined schema. The
legacy single-tenant document keeps branding keys at the top level. Both
are described by :class:`BrandingDocument`, so the session treats them the
same way and only the document id differs.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Optional

from .conf import settings
from .constants import constants


@dataclass(frozen=True)
class BrandingDocument:
    collection: str
    key: str
    nested: bool = True

    @property
    def path(self) -> str:
        return f"{self.collection}/{self.key}"

    def layers(self, snapshot: Optional[Mapping]) -> tuple[Optional[Mapping], Optional[Mapping]]:
        """Split a snapshot into its ``(branding, settings)`` merge layers."""
        if not isinstance(snapshot, Mapping):
            return None, None
        if not self.nested:
            return snapshot, None
        return snapshot.get("branding"), snapshot.get("settings")

    def to_write(self, patch: Mapping) -> dict:
        """Wrap a branding patch into the write accepted by the store."""
        if self.nested:
            return {"branding": dict(patch)}
        return dict(patch)


def tenant_document(tenant_id: str) -> BrandingDocument:
    return BrandingDocument(constants.TENANTS_COLLECTION, tenant_id, nested=True)


def legacy_document() -> BrandingDocument:
    return BrandingDocument(settings.LEGACY_COLLECTION, settings.LEGACY_KEY, nested=False)
