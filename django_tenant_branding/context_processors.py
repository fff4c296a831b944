from django.http.request import split_domain_port
from django.utils.safestring import mark_safe

from .domains import RELATIVE_ROOT
from .presentation import PresentationApplier, StyleSurface
from .tenant_context import BrandingContext


def branding(request):
    """Expose the effective branding to templates.

    ``branding_css`` is the ``:root`` block of CSS variables, ready to be
    placed inside a ``<style>`` element.
    """
    session = getattr(request, "branding_session", None)
    if session is not None:
        config = session.config
        css = session.applier.surface.render()
        domain, port = split_domain_port(request.get_host())
        home_url = session.home_url(domain, port=port or None)
        tenant_id = session.tenant_id
    else:
        config = BrandingContext.get_config()
        surface = StyleSurface()
        PresentationApplier(surface).apply(config)
        css = surface.render()
        home_url = RELATIVE_ROOT
        tenant_id = BrandingContext.get_tenant_id()

    return {
        "branding": config,
        # colours are tenant data; "<" must not be able to close the style element
        "branding_css": mark_safe(css.replace("<", "\\3c ")),
        "tenant_id": tenant_id,
        "tenant_home_url": home_url,
    }
