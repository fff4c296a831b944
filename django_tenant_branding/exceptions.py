"""
Exception classes for django-tenant-branding.

Every failure inside the resolution subsystem has a defined fallback, so
most of these exceptions are caught internally and turned into a degraded
but working state (the default brand). Only ``BrandingSaveError`` and
``PresetNotFound`` are meant to reach the code that initiated an action.

Hierarchy:
    TenantBrandingError
    ├── DirectoryLookupError       tenant directory query failed
    │   └── ResolutionTimeout      directory query exceeded RESOLVE_TIMEOUT
    ├── DocumentStoreError         document fetch/subscribe/write failed
    ├── BrandingSaveError          a branding patch could not be persisted
    ├── PresetNotFound             unknown theme preset key (also a KeyError)
    └── TenantNotFound             explicit by-id lookup found nothing

Usage:
    from django_tenant_branding.exceptions import BrandingSaveError

    try:
        session.update_branding({"primary_color": "#112233"})
    except BrandingSaveError:
        # the local, optimistic state is kept; ask the user to retry
        ...
"""


class TenantBrandingError(Exception):
    """Base class for every error raised by this package."""


class DirectoryLookupError(TenantBrandingError):
    """
    Raised when the tenant directory cannot answer a hostname query.

    This covers transport and permission failures of the directory
    collaborator. It is never raised for "no tenant matches"; resolvers
    return ``None`` in that case.

    The live session catches it and falls back to the legacy/platform
    document, logging a warning. End users never see it.
    """


class ResolutionTimeout(DirectoryLookupError):
    """Raised when tenant resolution does not finish within RESOLVE_TIMEOUT."""


class DocumentStoreError(TenantBrandingError):
    """
    Raised by document stores when a read, subscription or write fails.

    During resolution and subscription this degrades to the default brand.
    During a write it is wrapped into ``BrandingSaveError``.
    """


class BrandingSaveError(TenantBrandingError):
    """
    Raised when a branding patch could not be written to the store.

    The optimistic local state is left in place so the user does not lose
    the edit; saving is not retried automatically.
    """


class PresetNotFound(TenantBrandingError, KeyError):
    """Raised when a theme preset key is not part of the catalog."""

    def __str__(self):
        return Exception.__str__(self)


class TenantNotFound(TenantBrandingError):
    """Raised when a tenant is requested by id and does not exist."""
