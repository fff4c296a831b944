from django.apps import AppConfig
from django.core.exceptions import ImproperlyConfigured
from django.db.models import Model
from django.utils.module_loading import import_string

from .conf import settings
from .constants import constants
from .utils import get_domain_model, get_tenant_model

ORM_BACKEND_PREFIX = "django_tenant_branding.stores.orm."


class TenantBrandingConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "django_tenant_branding"
    verbose_name = "Tenant branding"

    def ready(self):
        for key in (constants.TENANT_RESOLVER, constants.TENANT_DIRECTORY, constants.DOCUMENT_STORE):
            dotted_path = getattr(settings, key)
            try:
                import_string(dotted_path)
            except ImportError as e:
                raise ImproperlyConfigured(
                    f"TENANT_BRANDING['{key}'] = '{dotted_path}' could not be imported: {e}"
                ) from e

        uses_orm = any(
            getattr(settings, key).startswith(ORM_BACKEND_PREFIX)
            for key in (constants.TENANT_DIRECTORY, constants.DOCUMENT_STORE)
        )
        if uses_orm:
            self._check_model(constants.TENANT_MODEL, get_tenant_model)
            self._check_model(constants.DOMAIN_MODEL, get_domain_model)

    def _check_model(self, key, getter):
        model_path = getattr(settings, key)
        if not model_path:
            raise ImproperlyConfigured(
                f"TENANT_BRANDING must define '{key}' when using the ORM backends. Example:\n"
                f"TENANT_BRANDING = {{ '{key}': 'myapp.ModelName' }}"
            )
        try:
            model = getter()
        except (LookupError, ValueError):
            raise ImproperlyConfigured(
                f"Could not find model '{model_path}'. Check TENANT_BRANDING in settings.py."
            ) from None

        if not issubclass(model, Model):
            raise ImproperlyConfigured(f"{model_path} is not a valid Django model.")
