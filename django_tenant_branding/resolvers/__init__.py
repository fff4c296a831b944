from .base import BaseTenantResolver
from .domain_resolver import DomainTenantResolver
from .subdomain_resolver import SubdomainTenantResolver

__all__ = ["BaseTenantResolver", "DomainTenantResolver", "SubdomainTenantResolver"]
