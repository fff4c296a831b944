"""
Referral capture.

Whoever arrives through a tenant's hostname is attributed to that tenant's
owning account: the owner id is stored as the referral code and later read
by sign-up flows and footer "register" links. The last resolved tenant
wins.

Capturing is best effort. A storage failure is logged and swallowed so it
can never block configuration loading.
"""

import logging
from typing import Optional

from django.core.cache import caches

from .conf import settings
from .signals import referral_captured

logger = logging.getLogger(__name__)


class BaseReferralStorage:
    def get_item(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set_item(self, key: str, value: str) -> None:
        raise NotImplementedError


class SessionReferralStorage(BaseReferralStorage):
    """Stores the code in the visitor's Django session."""

    def __init__(self, session):
        self.session = session

    def get_item(self, key):
        return self.session.get(key)

    def set_item(self, key, value):
        if self.session.get(key) != value:
            self.session[key] = value


class CacheReferralStorage(BaseReferralStorage):
    def __init__(self, alias: str = "default", timeout=None):
        self.alias = alias
        self.timeout = timeout

    def get_item(self, key):
        return caches[self.alias].get(key)

    def set_item(self, key, value):
        caches[self.alias].set(key, value, timeout=self.timeout)


class MemoryReferralStorage(BaseReferralStorage):
    def __init__(self):
        self.items: dict[str, str] = {}

    def get_item(self, key):
        return self.items.get(key)

    def set_item(self, key, value):
        self.items[key] = value


def capture_referral(tenant, storage: Optional[BaseReferralStorage]) -> bool:
    """Store ``tenant.owner_id`` as the referral code. Returns ``True`` on write."""
    owner_id = getattr(tenant, "owner_id", None)
    if tenant is None or storage is None or not owner_id:
        return False

    try:
        storage.set_item(settings.REFERRAL_STORAGE_KEY, owner_id)
    except Exception as e:
        logger.warning("Could not store referral code for %s: %s", tenant.id, e)
        return False

    logger.debug("Referral code set to %s", owner_id)
    referral_captured.send(sender=type(storage), tenant=tenant, code=owner_id)
    return True


def get_referral_code(storage: Optional[BaseReferralStorage]) -> Optional[str]:
    if storage is None:
        return None
    try:
        return storage.get_item(settings.REFERRAL_STORAGE_KEY)
    except Exception as e:
        logger.warning("Could not read referral code: %s", e)
        return None
