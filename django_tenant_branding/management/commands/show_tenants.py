import json

from django.core.management.base import BaseCommand

from django_tenant_branding.domains import pick_external_url
from django_tenant_branding.models import BaseTenant
from django_tenant_branding.utils import get_tenant_model


class Command(BaseCommand):
    help = "List all tenants with their domains and home URLs"

    def add_arguments(self, parser):
        parser.add_argument(
            "--status",
            type=str,
            help="Filter by status (trial/active/suspended/cancelled)",
        )
        parser.add_argument(
            "--format",
            type=str,
            choices=["table", "json"],
            default="table",
            help="Output format (default: table)",
        )
        parser.add_argument(
            "--from-host",
            default="localhost",
            help="Host the home URLs are computed from (default: localhost)",
        )

    def handle(self, *args, **options):
        TenantModel = get_tenant_model()
        tenants = TenantModel.objects.prefetch_related("domains").order_by("tenant_id")

        status = options.get("status")
        if status:
            valid_statuses = {choice[0] for choice in BaseTenant.Status.choices}
            if status.lower() not in valid_statuses:
                self.stdout.write(
                    self.style.ERROR(f"Invalid status. Valid options: {', '.join(sorted(valid_statuses))}")
                )
                return
            tenants = tenants.filter(status=status.lower())

        if not tenants.exists():
            self.stdout.write(self.style.WARNING("No tenants found."))
            return

        if options["format"] == "json":
            self._output_json(tenants, options["from_host"])
        else:
            self._output_table(tenants, options["from_host"])

    def _output_table(self, tenants, from_host):
        """Display tenants in a formatted table"""
        self.stdout.write(self.style.SUCCESS(f"\nFound {tenants.count()} tenant(s):\n"))

        header = f"{'Tenant ID':<20} {'Name':<30} {'Status':<10} {'Owner':<15} {'Home URL':<40}"
        self.stdout.write(self.style.SUCCESS(header))
        self.stdout.write(self.style.SUCCESS("-" * len(header)))

        for tenant in tenants:
            home_url = pick_external_url(tenant, from_host)
            row = (
                f"{tenant.tenant_id:<20} {tenant.name:<30} {tenant.status:<10} "
                f"{tenant.owner_id or '-':<15} {home_url:<40}"
            )
            self.stdout.write(row)
            for domain in tenant.domain_list():
                self.stdout.write(self.style.WARNING(f"           └─ {domain}"))
            self.stdout.write("")

    def _output_json(self, tenants, from_host):
        """Display tenants in JSON format"""
        tenant_list = []
        for tenant in tenants:
            tenant_list.append(
                {
                    "tenant_id": tenant.tenant_id,
                    "name": tenant.name,
                    "status": tenant.status,
                    "owner_id": tenant.owner_id or None,
                    "domains": tenant.domain_list(),
                    "home_url": pick_external_url(tenant, from_host),
                    "branding": tenant.branding,
                    "created_at": tenant.created_at.isoformat(),
                }
            )

        self.stdout.write(json.dumps(tenant_list, indent=2, ensure_ascii=False))
