"""
Configuration merger.

The effective configuration is ``defaults ⊕ branding ⊕ settings`` where the
right-most layer that carries a concrete value for a field wins. ``settings``
is applied last so documents written with the earlier combined schema
(branding keys inside the settings bag) keep working without a migration.

A missing key and a key holding ``None`` both mean "no opinion". Keys that
are not branding fields are ignored, which lets the settings bag carry
unrelated data. A layer that is not a mapping at all (malformed or legacy
document) is treated as absent.
"""

from collections.abc import Mapping
from typing import Any, Optional

from .branding import BRANDING_FIELDS, BrandingConfig


def _opinions(layer: Any) -> dict:
    if not isinstance(layer, Mapping):
        return {}
    return {
        key: value
        for key, value in layer.items()
        if key in BRANDING_FIELDS and value is not None
    }


def merge(
    defaults: BrandingConfig,
    tenant_branding: Optional[Mapping] = None,
    tenant_settings: Optional[Mapping] = None,
) -> BrandingConfig:
    """Merge the tenant layers over ``defaults`` and return a new config."""
    changes = {}
    for layer in (tenant_branding, tenant_settings):
        changes.update(_opinions(layer))
    if not changes:
        return defaults
    return defaults.replace(**changes)


def merge_patch(config: BrandingConfig, patch: Optional[Mapping]) -> BrandingConfig:
    """Apply a partial patch on top of an already effective configuration."""
    return merge(config, patch)


def diff(old: BrandingConfig, new: BrandingConfig) -> dict:
    """Return the fields whose value differs between two configurations."""
    old_values, new_values = old.to_dict(), new.to_dict()
    return {
        key: value for key, value in new_values.items() if old_values[key] != value
    }
