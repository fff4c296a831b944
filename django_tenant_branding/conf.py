from django.conf import settings as django_settings
from requests.structures import CaseInsensitiveDict

from .constants import constants


class _WrappedSettings:
    """Read-only view over ``settings.TENANT_BRANDING``.

    Values are looked up on every access so ``override_settings`` in tests
    is honoured. Keys of the ``TENANT_BRANDING`` dict are case-insensitive.
    """

    def __getattr__(self, item):
        return getattr(django_settings, item)

    def __setattr__(self, key, value):
        if key in self.__dict__:
            raise ValueError("Item assignment is not supported")

        setattr(django_settings, key, value)

    @property
    def TENANT_BRANDING(self) -> CaseInsensitiveDict:
        return CaseInsensitiveDict(getattr(django_settings, constants.TENANT_BRANDING, {}))

    @property
    def TENANT_MODEL(self) -> str:
        return self.TENANT_BRANDING.get(constants.TENANT_MODEL, "")

    @property
    def DOMAIN_MODEL(self) -> str:
        return self.TENANT_BRANDING.get(constants.DOMAIN_MODEL, "")

    @property
    def TENANT_RESOLVER(self) -> str:
        return self.TENANT_BRANDING.get(
            constants.TENANT_RESOLVER,
            "django_tenant_branding.resolvers.DomainTenantResolver",
        )

    @property
    def TENANT_DIRECTORY(self) -> str:
        return self.TENANT_BRANDING.get(
            constants.TENANT_DIRECTORY,
            "django_tenant_branding.stores.orm.ModelTenantDirectory",
        )

    @property
    def DOCUMENT_STORE(self) -> str:
        return self.TENANT_BRANDING.get(
            constants.DOCUMENT_STORE,
            "django_tenant_branding.stores.orm.ModelDocumentStore",
        )

    @property
    def PLATFORM_SUBDOMAINS(self) -> list[str]:
        return list(self.TENANT_BRANDING.get(constants.PLATFORM_SUBDOMAINS, ["app"]))

    @property
    def LOCAL_HOSTS(self) -> list[str]:
        return list(
            self.TENANT_BRANDING.get(constants.LOCAL_HOSTS, ["localhost", "127.0.0.1"])
        )

    @property
    def PRODUCTION_ROOT_DOMAIN(self) -> str:
        return self.TENANT_BRANDING.get(
            constants.PRODUCTION_ROOT_DOMAIN, "kynguyenrealai.com"
        )

    @property
    def LOCAL_ROOT_DOMAIN(self) -> str:
        return self.TENANT_BRANDING.get(constants.LOCAL_ROOT_DOMAIN, "localhost")

    @property
    def RESOLVE_TIMEOUT(self) -> float | None:
        return self.TENANT_BRANDING.get(constants.RESOLVE_TIMEOUT, 5.0)

    @property
    def REFRESH_INTERVAL(self) -> float | None:
        return self.TENANT_BRANDING.get(constants.REFRESH_INTERVAL, 30.0)

    @property
    def MAX_SESSIONS(self) -> int:
        return self.TENANT_BRANDING.get(constants.MAX_SESSIONS, 256)

    @property
    def REFERRAL_STORAGE_KEY(self) -> str:
        return self.TENANT_BRANDING.get(constants.REFERRAL_STORAGE_KEY, "REF_CODE")

    @property
    def LEGACY_COLLECTION(self) -> str:
        return self.TENANT_BRANDING.get(constants.LEGACY_COLLECTION, "site_settings")

    @property
    def LEGACY_KEY(self) -> str:
        return self.TENANT_BRANDING.get(constants.LEGACY_KEY, "config")

    @property
    def DEFAULT_BRANDING(self) -> dict:
        return dict(self.TENANT_BRANDING.get(constants.DEFAULT_BRANDING, {}))

    @property
    def STYLESHEET_PATH(self) -> str | None:
        return self.TENANT_BRANDING.get(constants.STYLESHEET_PATH)


settings = _WrappedSettings()
