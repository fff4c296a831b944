from .base import BaseTenantResolver, logger
from django_tenant_branding.domains import normalize_host


class DomainTenantResolver(BaseTenantResolver):
    """Resolve tenants by exact membership of the host in their domain list.

    The directory is expected to enforce domain uniqueness; if it returns
    several tenants the first one wins.
    """

    def resolve(self, hostname: str):
        if self._is_platform_root(hostname):
            return None

        host = normalize_host(hostname)
        matches = self._lookup(self.directory.find_by_domain, host)
        if not matches:
            logger.info("No tenant registered for %s", host)
            return None
        if len(matches) > 1:
            logger.warning(
                "Host %s matches %d tenants, using %s",
                host,
                len(matches),
                matches[0].id,
            )
        return matches[0]
