"""Tenant, domain and legacy site-settings models.

- ``BaseTenant``: abstract storefront tenant. Holds the identity used as the
  branding document key, the owning account used for referral attribution,
  a lifecycle ``status`` and two JSON layers merged over the defaults:
  ``branding`` and the older, combined ``settings`` bag.
- ``BaseDomain``: abstract hostname-to-tenant mapping. ``domain`` is unique,
  which is what guarantees that a hostname resolves to at most one tenant.
- ``SiteSettings``: concrete key/value document for the legacy single-tenant
  configuration served when no tenant matches the host.

Projects subclass the two abstract models and point ``TENANT_BRANDING``'s
``TENANT_MODEL`` and ``DOMAIN_MODEL`` at the concrete classes. Tenants are
never hard-deleted by this app; change ``status`` instead.
"""

from django.db import models

from .conf import settings
from .stores.base import TenantRecord
from .validators import validate_dns_label, validate_domain_name


class BaseTenant(models.Model):
    class Status(models.TextChoices):
        TRIAL = "trial", "Trial"
        ACTIVE = "active", "Active"
        SUSPENDED = "suspended", "Suspended"
        CANCELLED = "cancelled", "Cancelled"

    name = models.CharField(max_length=100)
    tenant_id = models.SlugField(
        unique=True,
        validators=[validate_dns_label],
        help_text="Must be a valid DNS label (RFC 1034/1035).",
    )
    owner_id = models.CharField(
        max_length=128,
        blank=True,
        default="",
        help_text="Account that owns the storefront; used for referral attribution.",
    )
    status = models.CharField(max_length=16, choices=Status.choices, default=Status.TRIAL)
    branding = models.JSONField(default=dict, blank=True)
    settings = models.JSONField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        abstract = True

    def __str__(self):
        return f"{self.name}({self.tenant_id})"

    def domain_list(self) -> list[str]:
        return [domain.domain for domain in self.domains.all()]

    def to_document(self) -> dict:
        return {
            "name": self.name,
            "domains": self.domain_list(),
            "owner_id": self.owner_id or None,
            "status": self.status,
            "branding": dict(self.branding or {}),
            "settings": self.settings,
        }

    def to_record(self) -> TenantRecord:
        return TenantRecord.from_document(self.tenant_id, self.to_document())


class BaseDomain(models.Model):
    tenant = models.ForeignKey(
        settings.TENANT_MODEL,
        on_delete=models.CASCADE,
        related_name="domains",
        help_text="The tenant this domain belongs to.",
    )
    domain = models.CharField(
        max_length=253,
        unique=True,
        validators=[validate_domain_name],
        help_text="Fully-qualified hostname, without scheme or port.",
    )
    is_primary = models.BooleanField(default=False)

    class Meta:
        abstract = True

    def __str__(self):
        return f"{str(self.tenant)} => {self.domain}"

    def save(self, *args, **kwargs):
        self.domain = (self.domain or "").strip().lower()
        super().save(*args, **kwargs)


class SiteSettings(models.Model):
    key = models.CharField(max_length=64, unique=True)
    data = models.JSONField(default=dict, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "site settings"
        verbose_name_plural = "site settings"

    def __str__(self):
        return self.key
