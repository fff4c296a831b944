"""
Keep a stylesheet in sync with one host's branding.

Starts a branding session for ``hostname`` and rewrites the ``:root`` CSS
variable block whenever the effective configuration changes. Changes made
in this process arrive immediately; changes saved by other processes are
picked up every ``--interval`` seconds.

Usage:
    ```bash
    python manage.py watch_branding agent-a.kynguyenrealai.com --output static/branding.css
    python manage.py watch_branding localhost --once
    ```
"""

import time

from django.core.management.base import BaseCommand, CommandError

from django_tenant_branding.conf import settings
from django_tenant_branding.presentation import PresentationApplier, StyleSurface
from django_tenant_branding.session import BrandingSession


class Command(BaseCommand):
    help = "Write a host's branding CSS variables to a stylesheet and keep it updated"

    def add_arguments(self, parser):
        parser.add_argument("hostname", help="Host whose branding is watched")
        parser.add_argument(
            "--output",
            default=None,
            help="Stylesheet path (default: TENANT_BRANDING['STYLESHEET_PATH'])",
        )
        parser.add_argument(
            "--interval",
            type=float,
            default=5.0,
            help="Seconds between re-reads of the branding document (default: 5)",
        )
        parser.add_argument(
            "--once",
            action="store_true",
            help="Write the stylesheet once and exit",
        )

    def handle(self, *args, **options):
        output = options["output"] or settings.STYLESHEET_PATH
        if not output:
            raise CommandError(
                "No output path: pass --output or set TENANT_BRANDING['STYLESHEET_PATH']."
            )

        surface = StyleSurface()
        session = BrandingSession(applier=PresentationApplier(surface))

        def write_stylesheet(context):
            if surface.write(output):
                self.stdout.write(f"Wrote {output} (tenant: {context.tenant_id or '-'})")

        session.add_listener(write_stylesheet)

        with session:
            context = session.start(options["hostname"])
            self.stdout.write(
                self.style.SUCCESS(
                    f"Branding for {session.hostname} loaded (tenant: {context.tenant_id or '-'})"
                )
            )
            if options["once"]:
                return

            try:
                while True:
                    time.sleep(options["interval"])
                    session.refresh()
            except KeyboardInterrupt:
                self.stdout.write("Stopped.")
