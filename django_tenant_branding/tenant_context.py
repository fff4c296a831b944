"""Branding context helpers.

The resolved tenant id, the loading flag and the effective configuration
are exposed to the rest of the application through :class:`BrandingContext`,
a :mod:`contextvars` backed stack. The middleware pushes the request
session's context for the duration of each request, so views, templates
and background code called from them can read it without threading a
request object around.

Example:
    with BrandingContext.use(session.context):
        config = BrandingContext.get_config()
"""

from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Optional

from .branding import BrandingConfig, get_default_branding


@dataclass(frozen=True)
class ResolutionContext:
    tenant_id: Optional[str] = None
    loading: bool = True
    config: BrandingConfig = field(default_factory=BrandingConfig)


class BrandingContext:
    _context_stack = ContextVar("branding_context_stack", default=[])

    @classmethod
    def get(cls) -> Optional[ResolutionContext]:
        stack = cls._context_stack.get()
        return stack[-1] if stack else None

    @classmethod
    def get_tenant_id(cls) -> Optional[str]:
        context = cls.get()
        return context.tenant_id if context else None

    @classmethod
    def get_config(cls) -> BrandingConfig:
        """Return the active configuration, or the defaults outside any context."""
        context = cls.get()
        return context.config if context else get_default_branding()

    @classmethod
    def is_loading(cls) -> bool:
        context = cls.get()
        return context.loading if context else False

    @classmethod
    def push(cls, context: ResolutionContext):
        stack = cls._context_stack.get()
        cls._context_stack.set(stack + [context])

    @classmethod
    def pop(cls):
        stack = cls._context_stack.get()
        if stack:
            cls._context_stack.set(stack[:-1])

    @classmethod
    @contextmanager
    def use(cls, context: ResolutionContext):
        """Activate ``context`` for the duration of the ``with`` block."""
        cls.push(context)
        try:
            yield context
        finally:
            cls.pop()
