from dataclasses import dataclass
from types import MappingProxyType

from .exceptions import PresetNotFound


@dataclass(frozen=True)
class ThemePreset:
    key: str
    name: str
    primary: str
    primary_dark: str
    accent: str
    accent_light: str
    font: str
    radius: str

    def as_patch(self) -> dict:
        """Return the preset as a partial branding patch."""
        return {
            "primary_color": self.primary,
            "primary_dark_color": self.primary_dark,
            "accent_color": self.accent,
            "accent_light_color": self.accent_light,
            "font_family": self.font,
            "border_radius": self.radius,
        }


THEME_PRESETS = MappingProxyType(
    {
        preset.key: preset
        for preset in (
            # Navy & Indigo
            ThemePreset(
                key="future_city",
                name="Future City (Công Nghệ)",
                primary="#0f172a",
                primary_dark="#020617",
                accent="#4f46e5",
                accent_light="#eef2ff",
                font="outfit",
                radius="md",
            ),
            # Matte Black & Gold
            ThemePreset(
                key="royal_prestige",
                name="Royal Prestige (Sang Trọng)",
                primary="#1c1917",
                primary_dark="#0c0a09",
                accent="#d97706",
                accent_light="#fffbeb",
                font="playfair",
                radius="none",
            ),
            # Moss Green & Stone
            ThemePreset(
                key="zen_retreat",
                name="Zen Retreat (Nghỉ Dưỡng)",
                primary="#3f6212",
                primary_dark="#1a2e05",
                accent="#a8a29e",
                accent_light="#f5f5f4",
                font="space",
                radius="lg",
            ),
        )
    }
)


def get_preset(preset_key: str) -> ThemePreset:
    try:
        return THEME_PRESETS[preset_key]
    except KeyError:
        raise PresetNotFound(f"Unknown theme preset '{preset_key}'") from None


def apply_preset(preset_key: str) -> dict:
    """Look up ``preset_key`` and return it as a branding patch."""
    return get_preset(preset_key).as_patch()
