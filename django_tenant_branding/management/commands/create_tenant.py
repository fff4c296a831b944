"""
Create Tenant Management Command

Provisions a new storefront tenant together with its initial domains.

Flow:
    1. Collect tenant id (DNS label), display name and owner account id,
       from options or interactive prompts
    2. Derive the domains: ``<id>.<public root>`` and ``<id>.<local root>``
    3. Create the tenant (status ``trial``) with seed branding and its
       domains in one transaction
    4. Print the login URL of the new storefront

The public root is ``PRODUCTION_ROOT_DOMAIN`` unless ``--root-domain`` names
another non-local domain.

Usage:
    ```bash
    python manage.py create_tenant --tenant-id agent-a --name "Agent A" --owner u123
    python manage.py create_tenant        # interactive
    ```
"""

from django.core.exceptions import ValidationError
from django.core.management.base import BaseCommand, CommandError
from django.db import IntegrityError, transaction

from django_tenant_branding.domains import (
    build_provisioned_domains,
    provisioned_login_url,
    slugify_subdomain,
)
from django_tenant_branding.utils import get_domain_model, get_tenant_model

SEED_PRIMARY_COLOR = "#4E342E"
SEED_ACCENT_COLOR = "#CCA43B"


class Command(BaseCommand):
    help = "Create a new storefront tenant with its default domains"

    def add_arguments(self, parser):
        parser.add_argument("--tenant-id", help="Subdomain / tenant id (DNS label)")
        parser.add_argument("--name", help="Company name shown on the storefront")
        parser.add_argument("--owner", default=None, help="Owning account id (referral code)")
        parser.add_argument(
            "--root-domain",
            default=None,
            help="Public root domain (default: PRODUCTION_ROOT_DOMAIN)",
        )
        parser.add_argument(
            "--host",
            default=None,
            help="Host the login URL is derived from (default: app.<public root>)",
        )
        parser.add_argument(
            "--noinput",
            "--no-input",
            action="store_false",
            dest="interactive",
            help="Do not prompt for missing values",
        )

    def handle(self, *args, **options):
        tenant_id = slugify_subdomain(self._value(options, "tenant_id", "Enter tenant ID (subdomain): "))
        name = self._value(options, "name", "Enter company name: ")
        owner_id = self._value(options, "owner", "Enter owner account id (optional): ")

        if not tenant_id:
            raise CommandError("Tenant ID is required.")
        if not name:
            raise CommandError("Company name is required.")

        try:
            domains = build_provisioned_domains(tenant_id, options["root_domain"])
        except ValidationError as e:
            raise CommandError(f"Invalid tenant ID '{tenant_id}': {'; '.join(e.messages)}")

        Tenant = get_tenant_model()
        Domain = get_domain_model()
        try:
            with transaction.atomic():
                tenant = Tenant.objects.create(
                    tenant_id=tenant_id,
                    name=name,
                    owner_id=owner_id,
                    status=Tenant.Status.TRIAL,
                    branding={
                        "company_name": name,
                        "primary_color": SEED_PRIMARY_COLOR,
                        "accent_color": SEED_ACCENT_COLOR,
                    },
                )
                for index, domain in enumerate(domains):
                    Domain.objects.create(tenant=tenant, domain=domain, is_primary=index == 0)
        except IntegrityError as e:
            raise CommandError(f"Tenant creation failed: {e}")

        self.stdout.write(self.style.SUCCESS(f"Tenant '{name}' created successfully!"))
        for domain in domains:
            self.stdout.write(f"  - {domain}")

        host = options["host"] or f"app.{domains[0].split('.', 1)[1]}"
        self.stdout.write(
            self.style.SUCCESS(f"Login URL: {provisioned_login_url(tenant_id, host)}")
        )

    def _value(self, options, key, prompt) -> str:
        value = options[key]
        if value is None and options["interactive"]:
            value = input(prompt)
        return (value or "").strip()
