"""
Presentation applier.

The presentation layer is a set of CSS custom properties rendered as a
single ``:root { ... }`` block, either inlined by the template context
processor or written to a stylesheet by the ``watch_branding`` command.

Only :class:`PresentationApplier` writes to a :class:`StyleSurface`. Other
code asks for changes through the session (which merges first) and never
sets properties directly.
"""

import logging
import threading
from pathlib import Path

from .branding import BrandingConfig

logger = logging.getLogger(__name__)

RADIUS_TOKENS = {
    "none": "0px",
    "sm": "0.25rem",
    "md": "0.75rem",
    "lg": "1.5rem",
    "full": "9999px",
}
DEFAULT_RADIUS = "md"

FONT_STACKS = {
    "outfit": {"display": "'Outfit', sans-serif", "body": "'Inter', sans-serif"},
    "inter": {"display": "'Inter', sans-serif", "body": "'Inter', sans-serif"},
    "playfair": {"display": "'Playfair Display', serif", "body": "'Inter', sans-serif"},
    "space": {
        "display": "'Space Grotesk', sans-serif",
        "body": "'Be Vietnam Pro', sans-serif",
    },
    "roboto": {"display": "'Roboto', sans-serif", "body": "'Roboto', sans-serif"},
}
DEFAULT_FONT = "inter"


class StyleSurface:
    """Process-wide store of CSS custom properties.

    Writes are last-writer-wins. Rendering always yields exactly one
    ``:root`` block, so applying the same values again changes nothing.
    """

    def __init__(self):
        self._properties: dict[str, str] = {}
        self._lock = threading.Lock()

    def set_property(self, name: str, value: str) -> bool:
        """Set one variable; return ``True`` when the value actually changed."""
        with self._lock:
            if self._properties.get(name) == value:
                return False
            self._properties[name] = value
            return True

    def get_property(self, name: str, default=None):
        with self._lock:
            return self._properties.get(name, default)

    def properties(self) -> dict[str, str]:
        with self._lock:
            return dict(self._properties)

    def clear(self):
        with self._lock:
            self._properties.clear()

    def render(self) -> str:
        props = self.properties()
        body = "".join(f"  {name}: {value};\n" for name, value in sorted(props.items()))
        return f":root {{\n{body}}}\n"

    def write(self, path) -> bool:
        """Write the rendered block to ``path`` if its content changed."""
        path = Path(path)
        css = self.render()
        if path.exists() and path.read_text(encoding="utf-8") == css:
            return False
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(css, encoding="utf-8")
        return True


style_surface = StyleSurface()


class PresentationApplier:
    def __init__(self, surface: StyleSurface | None = None):
        self.surface = surface if surface is not None else style_surface

    def apply(self, config: BrandingConfig) -> bool:
        """Push ``config`` into the style surface. Returns ``True`` if anything changed."""
        fonts = FONT_STACKS.get(config.font_family, FONT_STACKS[DEFAULT_FONT])
        radius = RADIUS_TOKENS.get(config.border_radius, RADIUS_TOKENS[DEFAULT_RADIUS])

        variables = {
            "--color-primary": config.primary_color,
            "--color-primary-dark": config.primary_dark_color,
            "--color-accent": config.accent_color,
            "--color-accent-light": config.accent_light_color,
            "--radius": radius,
            "--font-display": fonts["display"],
            "--font-body": fonts["body"],
        }
        changed = False
        for name, value in variables.items():
            changed = self.surface.set_property(name, value) or changed

        if changed:
            logger.debug("Applied branding for %s", config.company_name)
        return changed
