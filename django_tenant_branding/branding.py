"""Branding configuration record and its system-wide defaults."""

from dataclasses import asdict, dataclass, fields, replace
from enum import Enum
from typing import Optional

from .conf import settings


class HeaderStyle(str, Enum):
    DEFAULT = "default"
    CENTERED = "centered"
    MINIMAL = "minimal"


class HomeTemplate(str, Enum):
    DEFAULT = "default"
    LUXE = "luxe"


@dataclass(frozen=True)
class BrandingConfig:
    """Flat, fully-populated set of presentation attributes for a storefront.

    Every field has a default, so any subset may be missing from a tenant
    document. Instances are immutable; use :meth:`replace` or the merger to
    derive a new configuration.
    """

    primary_color: str = "#4338ca"
    primary_dark_color: str = "#312e81"
    accent_color: str = "#fbbf24"
    accent_light_color: str = "#fffbeb"
    company_name: str = "Tên Công Ty Của Bạn"
    font_family: str = "inter"
    border_radius: str = "md"
    header_style: str = HeaderStyle.DEFAULT.value
    home_template_id: str = HomeTemplate.LUXE.value
    logo_url: Optional[str] = None
    favicon_url: Optional[str] = None
    hero_image_url: Optional[str] = (
        "https://images.unsplash.com/photo-1600585154340-be6161a56a0c?auto=format&fit=crop&q=80"
    )
    hero_title: Optional[str] = "Kiến Tạo Không Gian Sống Đẳng Cấp"
    hero_subtitle: Optional[str] = (
        "Khám phá bộ sưu tập bất động sản tinh hoa được tuyển chọn dành riêng cho bạn"
    )
    products_banner: Optional[str] = (
        "https://images.unsplash.com/photo-1560518883-ce09059eeffa?auto=format&fit=crop&q=80"
    )
    services_banner: Optional[str] = (
        "https://images.unsplash.com/photo-1581094794329-cd119277f368?auto=format&fit=crop&q=80"
    )
    news_banner: Optional[str] = (
        "https://images.unsplash.com/photo-1504711434969-e33886168f5c?auto=format&fit=crop&q=80"
    )
    about_banner: Optional[str] = (
        "https://images.unsplash.com/photo-1497366216548-37526070297c?auto=format&fit=crop&q=80"
    )
    login_banner_url: Optional[str] = (
        "https://images.unsplash.com/photo-1486406146926-c627a92ad1ab?auto=format&fit=crop&q=80"
    )

    @classmethod
    def field_names(cls) -> frozenset[str]:
        return frozenset(f.name for f in fields(cls))

    def to_dict(self) -> dict:
        return asdict(self)

    def replace(self, **changes) -> "BrandingConfig":
        return replace(self, **changes)


BRANDING_FIELDS = BrandingConfig.field_names()

IMAGE_SLOTS = (
    "logo_url",
    "favicon_url",
    "hero_image_url",
    "products_banner",
    "services_banner",
    "news_banner",
    "about_banner",
    "login_banner_url",
)


def get_default_branding() -> BrandingConfig:
    """Return the system defaults with project overrides from ``DEFAULT_BRANDING``."""
    overrides = {
        key: value
        for key, value in settings.DEFAULT_BRANDING.items()
        if key in BRANDING_FIELDS and value is not None
    }
    return BrandingConfig(**overrides)
