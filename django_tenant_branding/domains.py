"""
Hostname classification and tenant-scoped URL helpers.

Everything here is a pure function of its arguments and the configured
host lists, so it can be tested without a directory or a store.

Host classes:
    PLATFORM_ROOT  a loopback name (``localhost``, ``127.0.0.1``) or a host
                   whose first label is a reserved platform subdomain
                   (``app.example.com``). No tenant lookup is attempted.
    CANDIDATE      anything else; handed to the tenant resolver.

Local-development hosts are the loopback names and any host ending in
``.<loopback name>`` (``agent-a.localhost``). Tenants usually carry one
public domain and one local domain; :func:`pick_external_url` chooses the
one matching where the code currently runs.
"""

import re
from enum import Enum

from .conf import settings
from .validators import validate_dns_label

MULTI_PART_SUFFIXES = ("co.uk", "com.vn", "gov.vn")
RELATIVE_ROOT = "/"


class HostClass(str, Enum):
    PLATFORM_ROOT = "platform_root"
    CANDIDATE = "candidate"


def normalize_host(host: str) -> str:
    """Lowercase ``host`` and drop any ``:port`` suffix and trailing dot."""
    host = (host or "").strip().lower()
    if host.startswith("["):
        # IPv6 literal, e.g. "[::1]:8000"
        return host.split("]", 1)[0] + "]"
    return host.split(":", 1)[0].rstrip(".")


def is_local_host(host: str) -> bool:
    host = normalize_host(host)
    for local in settings.LOCAL_HOSTS:
        if host == local or host.endswith(f".{local}"):
            return True
    return False


def classify_host(hostname: str) -> HostClass:
    host = normalize_host(hostname)
    if not host or host in settings.LOCAL_HOSTS:
        return HostClass.PLATFORM_ROOT
    first_label = host.split(".", 1)[0]
    if "." in host and first_label in settings.PLATFORM_SUBDOMAINS:
        return HostClass.PLATFORM_ROOT
    return HostClass.CANDIDATE


def _domains_of(tenant) -> list[str]:
    if tenant is None:
        return []
    if isinstance(tenant, str):
        return [tenant]
    if callable(getattr(tenant, "domain_list", None)):
        return list(tenant.domain_list())
    if hasattr(tenant, "domains"):
        return list(tenant.domains or [])
    return list(tenant)


def pick_external_url(tenant, current_hostname: str, port=None) -> str:
    """Return the tenant's home URL as seen from ``current_hostname``.

    A local current host prefers the tenant's local domain, served over
    http with the current ``port`` kept. Any other host prefers the public
    domain over https. When no domain of the same class exists, or the
    chosen domain is the current host already, the relative root ``/`` is
    returned so no cross-origin redirect happens.
    """
    current = normalize_host(current_hostname)
    local = is_local_host(current)

    target = None
    for domain in _domains_of(tenant):
        candidate = normalize_host(domain)
        if candidate and is_local_host(candidate) == local:
            target = candidate
            break

    if target is None or target == current:
        return RELATIVE_ROOT
    if local:
        suffix = f":{port}" if port else ""
        return f"http://{target}{suffix}"
    return f"https://{target}"


def slugify_subdomain(value: str) -> str:
    """Turn a user-typed subdomain into a DNS-label shaped slug."""
    return re.sub(r"\s+", "-", (value or "").strip().lower())


def infer_root_domain(hostname: str) -> str:
    """Guess the platform's public root domain from the current host.

    Heuristic: when the host has more than two labels exactly one leading
    label is dropped (``app.example.com`` -> ``example.com``), otherwise the
    host is returned unchanged. This is wrong on deeper environments such
    as ``app.staging.example.com`` and on multi-part suffixes.
    """
    host = normalize_host(hostname)
    labels = host.split(".")
    if len(labels) > 2:
        return ".".join(labels[1:])
    return host


def build_provisioned_domains(subdomain_slug: str, root_domain_guess: str | None = None) -> list[str]:
    """Derive a new tenant's initial domains: one public, one for local development.

    ``root_domain_guess`` (typically :func:`infer_root_domain` of the host the
    sign-up happened on) is used for the public domain unless it is missing
    or local-looking, in which case ``PRODUCTION_ROOT_DOMAIN`` is used.
    """
    slug = slugify_subdomain(subdomain_slug)
    validate_dns_label(slug)

    public_root = settings.PRODUCTION_ROOT_DOMAIN
    if root_domain_guess:
        guess = normalize_host(root_domain_guess)
        if guess and not is_local_host(guess) and "." in guess:
            public_root = guess

    return [f"{slug}.{public_root}", f"{slug}.{settings.LOCAL_ROOT_DOMAIN}"]


def provisioned_login_url(slug: str, current_host: str, scheme: str = "https", port=None) -> str:
    """URL of the new tenant's login page, relative to where sign-up happened."""
    root = infer_root_domain(current_host)
    suffix = f":{port}" if port else ""
    return f"{scheme}://{slugify_subdomain(slug)}.{root}{suffix}/login"


def normalize_custom_domain(value: str) -> str:
    domain = (value or "").strip().lower()
    domain = re.sub(r"^https?://", "", domain)
    return domain.rstrip("/")


def recommended_custom_domain(domain: str) -> str:
    """Recommend ``www.<domain>`` for bare root domains.

    A domain counts as a root when it has exactly two labels and is not
    itself a multi-part public suffix.
    """
    domain = normalize_custom_domain(domain)
    labels = domain.split(".")
    if len(labels) == 2 and domain not in MULTI_PART_SUFFIXES:
        return f"www.{domain}"
    return domain
