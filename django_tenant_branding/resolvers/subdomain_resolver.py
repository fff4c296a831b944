from .base import BaseTenantResolver
from django_tenant_branding.domains import normalize_host


class SubdomainTenantResolver(BaseTenantResolver):
    def resolve(self, hostname: str):
        if self._is_platform_root(hostname):
            return None
        tenant_id = normalize_host(hostname).split(".")[0]
        return self._lookup(self.directory.get_by_id, tenant_id)
