"""
Live branding session.

A :class:`BrandingSession` owns the whole resolution lifecycle for one
hostname at a time::

    UNSTARTED -> RESOLVING -> PLATFORM_ROOT | TENANT -> SUBSCRIBED
    SUBSCRIBED -> MERGING -> APPLIED -> SUBSCRIBED      (every snapshot)
    RESOLVING | SUBSCRIBED -> ERROR -> PLATFORM_ROOT    (collaborator failure)

Resolution failures fall back to the legacy site document. Subscription
failures apply the defaults. Either way the session keeps serving a brand.

There is at most one live subscription per session. Every subscription
carries a generation number; snapshots delivered by a superseded
subscription (after ``stop()`` or a switch to another hostname) are
dropped, so two tenants can never apply each other's configuration.

Local patches (``update_branding``/``apply_preset``) are merged and applied
before they are written. The store then re-delivers the canonical document
and merging identical values again is a no-op, so the optimistic state and
the persisted state converge without locking the store.
"""

import itertools
import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeout
from enum import Enum
from typing import Callable, Optional

from django.db import connections

from .branding import BRANDING_FIELDS, BrandingConfig, get_default_branding
from .conf import settings
from .documents import BrandingDocument, legacy_document, tenant_document
from .domains import RELATIVE_ROOT, normalize_host, pick_external_url
from .exceptions import BrandingSaveError, DirectoryLookupError, DocumentStoreError, ResolutionTimeout
from .merger import merge, merge_patch
from .presentation import PresentationApplier
from .presets import apply_preset as preset_patch
from .referral import BaseReferralStorage, capture_referral
from .signals import branding_applied, tenant_resolved
from .tenant_context import ResolutionContext
from .utils import get_document_store, get_tenant_resolver

logger = logging.getLogger(__name__)

_UNSET = object()


class SessionState(str, Enum):
    UNSTARTED = "unstarted"
    RESOLVING = "resolving"
    PLATFORM_ROOT = "platform_root"
    TENANT = "tenant"
    SUBSCRIBED = "subscribed"
    MERGING = "merging"
    APPLIED = "applied"
    ERROR = "error"


def _run_closing_connections(func, *args):
    try:
        return func(*args)
    finally:
        # the worker thread is never reused; release its database connections
        connections.close_all()


def call_with_timeout(func, timeout, *args):
    """Run ``func(*args)``, raising :class:`ResolutionTimeout` after ``timeout`` seconds.

    A falsy ``timeout`` runs the call inline. Otherwise the call runs on a
    one-shot worker thread which is abandoned, not killed, on timeout.
    The worker closes its database connections when the call returns,
    including a call that already timed out.
    """
    if not timeout:
        return func(*args)
    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="tenant-resolve")
    try:
        future = executor.submit(_run_closing_connections, func, *args)
        return future.result(timeout=timeout)
    except FuturesTimeout:
        raise ResolutionTimeout(f"Tenant resolution exceeded {timeout}s") from None
    finally:
        executor.shutdown(wait=False)


class BrandingSession:
    def __init__(
        self,
        resolver=None,
        store=None,
        applier: Optional[PresentationApplier] = None,
        referral_storage: Optional[BaseReferralStorage] = None,
        defaults: Optional[BrandingConfig] = None,
        resolve_timeout=_UNSET,
    ):
        self.resolver = resolver if resolver is not None else get_tenant_resolver()
        self.store = store if store is not None else get_document_store()
        self.applier = applier if applier is not None else PresentationApplier()
        self.referral_storage = referral_storage
        self.defaults = defaults if defaults is not None else get_default_branding()
        self.resolve_timeout = (
            settings.RESOLVE_TIMEOUT if resolve_timeout is _UNSET else resolve_timeout
        )

        self._lock = threading.RLock()
        self._listeners: dict[int, Callable[[ResolutionContext], None]] = {}
        self._listener_ids = itertools.count(1)
        self._generation = 0
        self._unsubscribe = None
        self._reset()

    def __repr__(self):
        return f"<BrandingSession {self._hostname or '-'} {self._state.value}>"

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.stop()

    # --- Read-only state ---
    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def hostname(self) -> Optional[str]:
        return self._hostname

    @property
    def tenant(self):
        return self._tenant

    @property
    def tenant_id(self) -> Optional[str]:
        return self._context.tenant_id

    @property
    def document(self) -> Optional[BrandingDocument]:
        return self._document

    @property
    def context(self) -> ResolutionContext:
        return self._context

    @property
    def config(self) -> BrandingConfig:
        return self._context.config

    @property
    def loading(self) -> bool:
        return self._context.loading

    # --- Lifecycle ---
    def start(self, hostname: str) -> ResolutionContext:
        """Resolve ``hostname`` and subscribe to its branding document.

        Starting an already started session tears the previous subscription
        down first; use this to switch tenants within one session.
        """
        host = normalize_host(hostname)
        with self._lock:
            if self._state is not SessionState.UNSTARTED:
                logger.info("Switching branding session from %s to %s", self._hostname, host)
                self.stop()

            self._hostname = host
            self._set_state(SessionState.RESOLVING)
            tenant = self._resolve(host)
            self._tenant = tenant
            tenant_resolved.send(
                sender=BrandingSession, session=self, hostname=host, tenant=tenant
            )

            if tenant is None:
                self._set_state(SessionState.PLATFORM_ROOT)
                document = legacy_document()
            else:
                self._set_state(SessionState.TENANT)
                capture_referral(tenant, self.referral_storage)
                document = tenant_document(tenant.id)

            self._write_document = document
            self._context = ResolutionContext(
                tenant_id=tenant.id if tenant is not None else None,
                loading=True,
                config=self._context.config,
            )
            self._subscribe(document)
            return self._context

    def refresh(self) -> ResolutionContext:
        """Re-read the subscribed document and apply it.

        For stores whose change notifications do not reach this process,
        e.g. the ORM store when another process saves the tenant.
        """
        with self._lock:
            document, generation = self._document, self._generation
        if document is None:
            return self._context
        try:
            snapshot = self.store.get(document.collection, document.key)
        except DocumentStoreError as e:
            self._on_error(generation, e)
        else:
            self._on_snapshot(generation, snapshot)
        return self._context

    def stop(self):
        """Unsubscribe and reset the session to ``UNSTARTED``."""
        with self._lock:
            self._teardown_subscription()
            self._reset()

    # --- Local actions ---
    def update_branding(self, patch) -> BrandingConfig:
        """Apply ``patch`` locally, then persist it.

        Keys that are not branding fields and ``None`` values are ignored.
        Writes go to the document chosen when the session started, even
        after a subscription error degraded it to the defaults.

        Raises:
            BrandingSaveError: the store rejected the write (the local,
                optimistic configuration is kept), or the session is not
                started.
        """
        changes = {
            key: value
            for key, value in dict(patch or {}).items()
            if key in BRANDING_FIELDS and value is not None
        }
        if not changes:
            return self.config

        with self._lock:
            document = self._write_document
            if document is None:
                raise BrandingSaveError("Branding session is not started")
            self._apply(merge_patch(self.config, changes))

        try:
            self.store.set(
                document.collection, document.key, document.to_write(changes), merge=True
            )
        except Exception as e:
            logger.warning("Saving branding to %s failed: %s", document.path, e)
            raise BrandingSaveError(f"Could not save branding to {document.path}: {e}") from e
        return self.config

    def apply_preset(self, preset_key: str) -> BrandingConfig:
        """Apply a theme preset optimistically and persist it.

        Raises:
            PresetNotFound: unknown ``preset_key``.
            BrandingSaveError: the store rejected the write.
        """
        return self.update_branding(preset_patch(preset_key))

    def home_url(self, current_host: Optional[str] = None, port=None) -> str:
        """The resolved tenant's home URL as seen from ``current_host``."""
        if self._tenant is None:
            return RELATIVE_ROOT
        return pick_external_url(self._tenant, current_host or self._hostname or "", port)

    # --- Consumers ---
    def add_listener(self, callback: Callable[[ResolutionContext], None]) -> Callable[[], None]:
        """Call ``callback(context)`` after every applied configuration."""
        listener_id = next(self._listener_ids)
        self._listeners[listener_id] = callback

        def remove():
            self._listeners.pop(listener_id, None)

        return remove

    # --- Internals ---
    def _reset(self):
        self._state = SessionState.UNSTARTED
        self._hostname = None
        self._tenant = None
        self._document = None
        self._write_document = None
        self._context = ResolutionContext(tenant_id=None, loading=True, config=self.defaults)

    def _set_state(self, state: SessionState):
        logger.debug("%r -> %s", self, state.value)
        self._state = state

    def _resolve(self, host):
        try:
            return call_with_timeout(self.resolver.resolve, self.resolve_timeout, host)
        except DirectoryLookupError as e:
            logger.warning(
                "Tenant resolution for %s failed, falling back to platform configuration: %s",
                host,
                e,
            )
            self._set_state(SessionState.ERROR)
            return None

    def _subscribe(self, document: BrandingDocument):
        self._document = document
        self._generation += 1
        generation = self._generation
        self._set_state(SessionState.SUBSCRIBED)

        try:
            unsubscribe = self.store.subscribe(
                document.collection,
                document.key,
                lambda snapshot: self._on_snapshot(generation, snapshot),
                lambda error: self._on_error(generation, error),
            )
        except DocumentStoreError as e:
            self._on_error(generation, e)
            return

        if generation != self._generation:
            # superseded while the initial snapshot was being delivered
            unsubscribe()
            return
        self._unsubscribe = unsubscribe

    def _teardown_subscription(self):
        self._generation += 1
        unsubscribe, self._unsubscribe = self._unsubscribe, None
        if unsubscribe is not None:
            try:
                unsubscribe()
            except Exception as e:
                logger.warning("Unsubscribing from %s failed: %s", self._document, e)

    def _on_snapshot(self, generation, snapshot):
        with self._lock:
            if generation != self._generation:
                logger.debug("Dropping snapshot from superseded subscription")
                return

            self._set_state(SessionState.MERGING)
            if snapshot is None:
                logger.info("%s does not exist, using default branding", self._document.path)
            branding, tenant_settings = self._document.layers(snapshot)
            self._apply(merge(self.defaults, branding, tenant_settings))
            self._set_state(SessionState.APPLIED)
            self._set_state(SessionState.SUBSCRIBED)

    def _on_error(self, generation, error):
        with self._lock:
            if generation != self._generation:
                return
            path = self._document.path if self._document else "-"
            logger.warning("Branding subscription for %s failed, using defaults: %s", path, error)
            self._set_state(SessionState.ERROR)
            self._teardown_subscription()
            self._tenant = None
            self._document = None
            self._context = ResolutionContext(tenant_id=None, loading=True, config=self.config)
            self._set_state(SessionState.PLATFORM_ROOT)
            self._apply(self.defaults)

    def _apply(self, config: BrandingConfig):
        self._context = ResolutionContext(
            tenant_id=self._context.tenant_id, loading=False, config=config
        )
        self.applier.apply(config)
        branding_applied.send(sender=BrandingSession, session=self, config=config)
        for listener in list(self._listeners.values()):
            try:
                listener(self._context)
            except Exception:
                logger.exception("Branding listener %r failed", listener)
