"""
Django signals for tenant resolution and branding events.

These signals let applications react to the resolution subsystem without
touching it, e.g. to log analytics, warm caches or push a rebuilt
stylesheet to a CDN.

Signals:
    - tenant_resolved: a session finished resolving a hostname
    - branding_applied: a new effective configuration was applied
    - referral_captured: a tenant owner was stored as the referral code

Usage:
    ```python
    from django.dispatch import receiver
    from django_tenant_branding.signals import branding_applied

    @receiver(branding_applied)
    def publish_stylesheet(sender, session, config, **kwargs):
        upload_css(session.applier.surface.render())
    ```

Receivers run synchronously in the thread that triggered the event. An
exception raised by a receiver propagates to that caller, so keep them
small and handle your own errors.
"""

from django.dispatch import Signal


tenant_resolved = Signal()
"""
Sent after a session resolved its hostname.

Sender: the ``BrandingSession`` class
Arguments:
    - session: the session instance
    - hostname (str): the normalised hostname
    - tenant (TenantRecord | None): ``None`` for platform root/legacy mode
"""


branding_applied = Signal()
"""
Sent after an effective configuration has been merged and applied.

Sent for every delivered snapshot, every optimistic local update and every
degradation to defaults.

Sender: the ``BrandingSession`` class
Arguments:
    - session: the session instance
    - config (BrandingConfig): the configuration now in force
"""


referral_captured = Signal()
"""
Sent after a tenant owner id was written to referral storage.

Sender: the storage class
Arguments:
    - tenant (TenantRecord)
    - code (str): the stored owner id
"""
