from django.core.exceptions import ImproperlyConfigured
from django.http.request import split_domain_port
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticatedOrReadOnly
from rest_framework.response import Response

from .exceptions import BrandingSaveError, PresetNotFound
from .presets import THEME_PRESETS
from .serializers import BrandingSerializer, ThemePresetSerializer
from .session import BrandingSession


def _get_session(request) -> BrandingSession:
    session = getattr(request, "branding_session", None)
    if session is None:
        raise ImproperlyConfigured(
            "Branding views require django_tenant_branding.middleware.TenantBrandingMiddleware."
        )
    return session


def _branding_payload(request, session: BrandingSession) -> dict:
    domain, port = split_domain_port(request.get_host())
    return {
        "tenant_id": session.tenant_id,
        "loading": session.loading,
        "home_url": session.home_url(domain, port=port or None),
        "branding": session.config.to_dict(),
    }


@api_view(["GET", "PATCH"])
@permission_classes([IsAuthenticatedOrReadOnly])
def branding_view(request):
    """
    Return the effective branding of the current host, or patch it.
    """
    session = _get_session(request)
    if request.method == "GET":
        return Response(_branding_payload(request, session), status=status.HTTP_200_OK)

    serializer = BrandingSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    try:
        session.update_branding(serializer.validated_data)
    except BrandingSaveError as e:
        return Response(
            {"detail": str(e), **_branding_payload(request, session)},
            status=status.HTTP_502_BAD_GATEWAY,
        )
    return Response(_branding_payload(request, session), status=status.HTTP_200_OK)


@api_view(["GET"])
def preset_list_view(request):
    """
    List the built-in theme presets.
    """
    serializer = ThemePresetSerializer(list(THEME_PRESETS.values()), many=True)
    return Response(serializer.data, status=status.HTTP_200_OK)


@api_view(["POST"])
@permission_classes([IsAuthenticatedOrReadOnly])
def apply_preset_view(request, preset_key):
    """
    Apply a theme preset to the current host's branding.
    """
    session = _get_session(request)
    try:
        session.apply_preset(preset_key)
    except PresetNotFound as e:
        return Response({"detail": str(e)}, status=status.HTTP_404_NOT_FOUND)
    except BrandingSaveError as e:
        return Response(
            {"detail": str(e), **_branding_payload(request, session)},
            status=status.HTTP_502_BAD_GATEWAY,
        )
    return Response(_branding_payload(request, session), status=status.HTTP_200_OK)
