"""
Tenant Resolver Base Module

A resolver answers one question: which tenant owns the hostname a visitor
used? It returns a :class:`~django_tenant_branding.stores.base.TenantRecord`
or ``None``.

``None`` is a normal answer, not an error. It means "platform root" (a
loopback host or a reserved platform subdomain) or "no tenant registered
for this host". Callers then serve the legacy single-tenant configuration
or the system defaults.

Resolvers raise only when the tenant directory itself fails. They raise
:class:`~django_tenant_branding.exceptions.DirectoryLookupError`, which the
live session treats as "no tenant": it logs a warning and keeps serving the
default brand rather than a blank page.

Resolution strategies:
    - DomainTenantResolver: exact match against each tenant's domain list
      (``agent-a.kynguyenrealai.com``, ``agent-a.localhost``, custom domains)
    - SubdomainTenantResolver: first host label is the tenant id

Configuration:
    ```python
    TENANT_BRANDING = {
        "TENANT_RESOLVER": "django_tenant_branding.resolvers.DomainTenantResolver",
    }
    ```

Custom resolver:
    ```python
    class HeaderTenantResolver(BaseTenantResolver):
        def resolve(self, hostname):
            ...
    ```
"""

import logging

from django_tenant_branding.domains import HostClass, classify_host, normalize_host
from django_tenant_branding.exceptions import DirectoryLookupError
from django_tenant_branding.utils import get_tenant_directory

logger = logging.getLogger(__name__)


class BaseTenantResolver:
    def __init__(self, directory=None):
        self._directory = directory

    @property
    def directory(self):
        if self._directory is None:
            self._directory = get_tenant_directory()
        return self._directory

    def resolve(self, hostname: str):
        """
        Return the tenant owning ``hostname`` or ``None``.

        Raises:
            DirectoryLookupError: the directory query failed.
        """
        raise NotImplementedError

    def _lookup(self, func, *args):
        try:
            return func(*args)
        except DirectoryLookupError:
            raise
        except Exception as e:
            raise DirectoryLookupError(f"Tenant directory lookup failed: {e}") from e

    def _is_platform_root(self, hostname) -> bool:
        if classify_host(hostname) is HostClass.PLATFORM_ROOT:
            logger.info("Platform root detected: %s", normalize_host(hostname))
            return True
        return False
