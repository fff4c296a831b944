from django.utils.functional import cached_property


class _Constants:
    @cached_property
    def TENANT_BRANDING(self) -> str:
        return "TENANT_BRANDING"

    @cached_property
    def TENANT_MODEL(self) -> str:
        return "TENANT_MODEL"

    @cached_property
    def DOMAIN_MODEL(self) -> str:
        return "DOMAIN_MODEL"

    @cached_property
    def TENANT_RESOLVER(self) -> str:
        return "TENANT_RESOLVER"

    @cached_property
    def TENANT_DIRECTORY(self) -> str:
        return "TENANT_DIRECTORY"

    @cached_property
    def DOCUMENT_STORE(self) -> str:
        return "DOCUMENT_STORE"

    @cached_property
    def PLATFORM_SUBDOMAINS(self) -> str:
        return "PLATFORM_SUBDOMAINS"

    @cached_property
    def LOCAL_HOSTS(self) -> str:
        return "LOCAL_HOSTS"

    @cached_property
    def PRODUCTION_ROOT_DOMAIN(self) -> str:
        return "PRODUCTION_ROOT_DOMAIN"

    @cached_property
    def LOCAL_ROOT_DOMAIN(self) -> str:
        return "LOCAL_ROOT_DOMAIN"

    @cached_property
    def RESOLVE_TIMEOUT(self) -> str:
        return "RESOLVE_TIMEOUT"

    @cached_property
    def REFERRAL_STORAGE_KEY(self) -> str:
        return "REFERRAL_STORAGE_KEY"

    @cached_property
    def LEGACY_COLLECTION(self) -> str:
        return "LEGACY_COLLECTION"

    @cached_property
    def LEGACY_KEY(self) -> str:
        return "LEGACY_KEY"

    @cached_property
    def DEFAULT_BRANDING(self) -> str:
        return "DEFAULT_BRANDING"

    @cached_property
    def STYLESHEET_PATH(self) -> str:
        return "STYLESHEET_PATH"

    @cached_property
    def REFRESH_INTERVAL(self) -> str:
        return "REFRESH_INTERVAL"

    @cached_property
    def MAX_SESSIONS(self) -> str:
        return "MAX_SESSIONS"

    @cached_property
    def TENANTS_COLLECTION(self) -> str:
        return "tenants"


constants = _Constants()
