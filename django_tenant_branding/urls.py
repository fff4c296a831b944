from django.urls import path

from .views import apply_preset_view, branding_view, preset_list_view

app_name = "tenant_branding"

urlpatterns = [
    path("branding/", branding_view, name="branding"),
    path("branding/presets/", preset_list_view, name="preset-list"),
    path("branding/presets/<slug:preset_key>/", apply_preset_view, name="preset-apply"),
]
