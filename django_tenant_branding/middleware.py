import logging
import threading
import time
from collections import OrderedDict
from typing import Callable

from django.http import HttpRequest, HttpResponse
from django.utils.deprecation import MiddlewareMixin

from .conf import settings
from .domains import normalize_host
from .presentation import PresentationApplier, StyleSurface
from .referral import SessionReferralStorage, capture_referral
from .session import BrandingSession
from .tenant_context import BrandingContext

logger = logging.getLogger(__name__)


class TenantBrandingMiddleware(MiddlewareMixin):
    """Attach the tenant and its live branding to every request.

    One :class:`BrandingSession` is kept per hostname. Each owns its own
    style surface, so tenants served by the same process never overwrite
    each other's variables. Sets:

        request.branding_session   the hostname's session
        request.tenant             TenantRecord, or None on the platform root
        request.branding           the effective BrandingConfig

    Sessions are revalidated once ``REFRESH_INTERVAL`` seconds have passed
    since the last check: hosts without a tenant (platform root, unknown or
    degraded) are resolved again, tenant sessions re-read their document so
    edits saved by other processes show up. At most ``MAX_SESSIONS`` are
    kept; the least recently used one is stopped when another host arrives.

    Must come after ``SessionMiddleware`` for referral capture to happen.
    """

    def __init__(
        self, get_response: Callable[[HttpRequest], HttpResponse] | None = None
    ) -> None:
        super().__init__(get_response)
        self._sessions: OrderedDict[str, BrandingSession] = OrderedDict()
        self._checked_at: dict[str, float] = {}
        self._lock = threading.Lock()

    def __len__(self):
        return len(self._sessions)

    def get_session(self, hostname: str) -> BrandingSession:
        host = normalize_host(hostname)
        evicted = []
        stale = False
        with self._lock:
            session = self._sessions.get(host)
            if session is None:
                logger.debug("Starting branding session for %s", host)
                session = BrandingSession(applier=PresentationApplier(StyleSurface()))
                session.start(host)
                self._sessions[host] = session
                self._checked_at[host] = time.monotonic()
                while len(self._sessions) > max(settings.MAX_SESSIONS, 1):
                    old_host, old_session = self._sessions.popitem(last=False)
                    del self._checked_at[old_host]
                    evicted.append(old_session)
            else:
                self._sessions.move_to_end(host)
                stale = self._is_stale(host)
                if stale:
                    self._checked_at[host] = time.monotonic()

        for old_session in evicted:
            logger.debug("Evicting branding session for %s", old_session.hostname)
            old_session.stop()
        if stale:
            self._revalidate(session, host)
        return session

    def close(self):
        """Stop every session started by this middleware."""
        with self._lock:
            sessions, self._sessions = list(self._sessions.values()), OrderedDict()
            self._checked_at.clear()
        for session in sessions:
            session.stop()

    def _is_stale(self, host) -> bool:
        interval = settings.REFRESH_INTERVAL
        if interval is None:
            return False
        return time.monotonic() - self._checked_at[host] >= interval

    def _revalidate(self, session, host):
        if session.tenant is None:
            logger.debug("Resolving %s again", host)
            session.start(host)
        else:
            session.refresh()

    def __call__(self, request):
        session = self.get_session(request.get_host())

        request.branding_session = session
        request.tenant = session.tenant
        request.branding = session.config

        if hasattr(request, "session"):
            capture_referral(session.tenant, SessionReferralStorage(request.session))

        with BrandingContext.use(session.context):
            response = self.get_response(request)

        return response
