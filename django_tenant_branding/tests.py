"""
Test case base classes for projects using tenant branding.

- ``BrandingTestCase``: database-free; wires sessions to fresh in-memory
  backends, a private style surface and in-memory referral storage.
- ``TenantBrandingTestCase`` / ``TenantBrandingAPITestCase``: create a tenant
  with the configured ORM models and point the test client at its domain,
  so requests go through ``TenantBrandingMiddleware`` as that tenant.

Usage:
    ```python
    class TestHeader(TenantBrandingAPITestCase):
        tenant_branding = {"company_name": "Agent A"}

        def test_title(self):
            response = self.client.get("/")
            self.assertContains(response, "Agent A")
    ```
"""

from django.test import SimpleTestCase, TestCase
from rest_framework.test import APITestCase

from .presentation import PresentationApplier, StyleSurface
from .referral import MemoryReferralStorage
from .resolvers import DomainTenantResolver
from .session import BrandingSession
from .stores.base import TenantRecord
from .stores.memory import InMemoryDocumentStore, InMemoryTenantDirectory
from .utils import get_domain_model, get_tenant_model


class BrandingTestCase(SimpleTestCase):
    def setUp(self):
        super().setUp()
        self.store = InMemoryDocumentStore()
        self.directory = InMemoryTenantDirectory(self.store)
        self.surface = StyleSurface()
        self.referrals = MemoryReferralStorage()

    def add_tenant(self, tenant_id, domains, branding=None, owner_id=None, settings=None):
        return self.directory.add(
            TenantRecord(
                id=tenant_id,
                name=tenant_id,
                domains=tuple(domains),
                owner_id=owner_id,
                branding=dict(branding or {}),
                settings=settings,
            )
        )

    def make_session(self, **kwargs) -> BrandingSession:
        kwargs.setdefault("resolver", DomainTenantResolver(directory=self.directory))
        kwargs.setdefault("store", self.store)
        kwargs.setdefault("applier", PresentationApplier(self.surface))
        kwargs.setdefault("referral_storage", self.referrals)
        kwargs.setdefault("resolve_timeout", None)
        session = BrandingSession(**kwargs)
        self.addCleanup(session.stop)
        return session


class _TenantMixin:
    tenant_id = "agent-a"
    tenant_name = "Agent A"
    tenant_owner = "u123"
    tenant_domains = ("agent-a.kynguyenrealai.com", "agent-a.localhost")
    tenant_branding: dict = {}

    def setUp(self):
        super().setUp()
        self.tenant = get_tenant_model().objects.create(
            tenant_id=self.tenant_id,
            name=self.tenant_name,
            owner_id=self.tenant_owner,
            branding=dict(self.tenant_branding),
        )
        Domain = get_domain_model()
        for index, domain in enumerate(self.tenant_domains):
            Domain.objects.create(tenant=self.tenant, domain=domain, is_primary=index == 0)
        self.client.defaults["HTTP_HOST"] = self.tenant_domains[0]


class TenantBrandingTestCase(_TenantMixin, TestCase):
    pass


class TenantBrandingAPITestCase(_TenantMixin, APITestCase):
    pass
