import re

from django.core.exceptions import ValidationError
from django.utils.translation import gettext as _

DNS_LABEL = re.compile(r"^(?!-)[A-Za-z0-9-]{1,63}(?<!-)$")
HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")


def is_valid_dns_label(value) -> bool:
    return bool(value) and bool(DNS_LABEL.match(value))


def validate_dns_label(value):
    """
    Validate a single DNS label according to RFC 1034/1035:
    - Only letters, digits, and hyphens.
    - Cannot start or end with a hyphen.
    - Length between 1 and 63 characters.
    """
    if not is_valid_dns_label(value):
        raise ValidationError(
            _("%(value)s is not a valid DNS label."),
            params={"value": value},
        )


def validate_domain_name(value):
    """Validate a fully-qualified hostname made of DNS labels (no port)."""
    labels = (value or "").split(".")
    if len(value or "") > 253 or not all(is_valid_dns_label(label) for label in labels):
        raise ValidationError(
            _("%(value)s is not a valid domain name."),
            params={"value": value},
        )


def validate_hex_color(value):
    if not HEX_COLOR.match(value or ""):
        raise ValidationError(
            _("%(value)s is not a valid hex color."),
            params={"value": value},
        )
