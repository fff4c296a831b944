from django.urls import include, path

urlpatterns = [
    path("api/", include("django_tenant_branding.urls")),
]
