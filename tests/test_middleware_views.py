from unittest import mock

from django.conf import settings as django_settings
from django.contrib.auth import get_user_model
from django.http import HttpResponse
from django.test import RequestFactory, SimpleTestCase, override_settings
from django.urls import reverse

from django_tenant_branding.context_processors import branding
from django_tenant_branding.exceptions import DocumentStoreError
from django_tenant_branding.middleware import TenantBrandingMiddleware
from django_tenant_branding.session import SessionState
from django_tenant_branding.stores.orm import ModelDocumentStore
from django_tenant_branding.tenant_context import BrandingContext
from django_tenant_branding.tests import TenantBrandingAPITestCase, TenantBrandingTestCase
from tests.testapp.models import Agency, AgencyDomain


def branding_settings(**overrides):
    return {**django_settings.TENANT_BRANDING, **overrides}


class TestMiddleware(TenantBrandingTestCase):
    tenant_branding = {"primary_color": "#0f172a", "company_name": "Agent A"}

    def setUp(self):
        super().setUp()
        self.seen = {}

        def view(request):
            self.seen["tenant_id"] = BrandingContext.get_tenant_id()
            self.seen["company_name"] = BrandingContext.get_config().company_name
            return HttpResponse("ok")

        self.middleware = TenantBrandingMiddleware(view)
        self.addCleanup(self.middleware.close)
        self.factory = RequestFactory()

    def test_request_attributes(self):
        request = self.factory.get("/", HTTP_HOST="agent-a.kynguyenrealai.com")
        self.middleware(request)

        self.assertEqual(request.tenant.id, "agent-a")
        self.assertEqual(request.branding.primary_color, "#0f172a")
        self.assertEqual(request.branding_session.tenant_id, "agent-a")
        self.assertEqual(self.seen, {"tenant_id": "agent-a", "company_name": "Agent A"})
        self.assertIsNone(BrandingContext.get())

    def test_platform_root(self):
        request = self.factory.get("/", HTTP_HOST="localhost:8000")
        self.middleware(request)
        self.assertIsNone(request.tenant)
        self.assertIsNone(self.seen["tenant_id"])

    def test_one_session_per_host(self):
        first = self.factory.get("/", HTTP_HOST="agent-a.localhost:5173")
        second = self.factory.get("/", HTTP_HOST="agent-a.localhost")
        other = self.factory.get("/", HTTP_HOST="localhost")
        for request in (first, second, other):
            self.middleware(request)
        self.assertIs(first.branding_session, second.branding_session)
        self.assertIsNot(first.branding_session, other.branding_session)
        self.assertIsNot(
            first.branding_session.applier.surface, other.branding_session.applier.surface
        )

    def test_admin_edit_reaches_next_request(self):
        self.middleware(self.factory.get("/", HTTP_HOST="agent-a.localhost"))
        self.tenant.branding = {"primary_color": "#123456"}
        self.tenant.save()

        request = self.factory.get("/", HTTP_HOST="agent-a.localhost")
        self.middleware(request)
        self.assertEqual(request.branding.primary_color, "#123456")

    @override_settings(TENANT_BRANDING=branding_settings(REFRESH_INTERVAL=0))
    def test_tenant_created_after_first_request(self):
        first = self.factory.get("/", HTTP_HOST="agentZ.localhost")
        self.middleware(first)
        self.assertIsNone(first.tenant)

        agency = Agency.objects.create(
            tenant_id="agent-z", name="Agent Z", branding={"primary_color": "#222222"}
        )
        AgencyDomain.objects.create(tenant=agency, domain="agentz.localhost")

        second = self.factory.get("/", HTTP_HOST="agentZ.localhost")
        self.middleware(second)
        self.assertEqual(second.tenant.id, "agent-z")
        self.assertEqual(second.branding.primary_color, "#222222")
        self.assertIs(first.branding_session, second.branding_session)

    @override_settings(TENANT_BRANDING=branding_settings(REFRESH_INTERVAL=0))
    def test_edit_from_another_process_is_picked_up(self):
        self.middleware(self.factory.get("/", HTTP_HOST="agent-a.localhost"))
        # queryset updates send no post_save, like a save in another worker
        Agency.objects.filter(pk=self.tenant.pk).update(branding={"primary_color": "#654321"})

        request = self.factory.get("/", HTTP_HOST="agent-a.localhost")
        self.middleware(request)
        self.assertEqual(request.branding.primary_color, "#654321")

    @override_settings(TENANT_BRANDING=branding_settings(REFRESH_INTERVAL=None))
    def test_refresh_disabled(self):
        self.middleware(self.factory.get("/", HTTP_HOST="agent-a.localhost"))
        Agency.objects.filter(pk=self.tenant.pk).update(branding={"primary_color": "#654321"})

        request = self.factory.get("/", HTTP_HOST="agent-a.localhost")
        self.middleware(request)
        self.assertEqual(request.branding.primary_color, "#0f172a")

    @override_settings(TENANT_BRANDING=branding_settings(MAX_SESSIONS=2))
    def test_least_recently_used_session_is_stopped(self):
        requests = {
            host: self.factory.get("/", HTTP_HOST=host)
            for host in ("agent-a.localhost", "junk1.kynguyenrealai.com", "junk2.kynguyenrealai.com")
        }
        self.middleware(requests["agent-a.localhost"])
        self.middleware(requests["junk1.kynguyenrealai.com"])
        self.middleware(self.factory.get("/", HTTP_HOST="agent-a.localhost"))
        self.middleware(requests["junk2.kynguyenrealai.com"])

        self.assertEqual(len(self.middleware), 2)
        self.assertIs(
            requests["junk1.kynguyenrealai.com"].branding_session.state, SessionState.UNSTARTED
        )
        self.assertIsNot(
            requests["agent-a.localhost"].branding_session.state, SessionState.UNSTARTED
        )
        self.assertIs(
            self.middleware.get_session("agent-a.localhost"),
            requests["agent-a.localhost"].branding_session,
        )

    def test_many_hosts_stay_bounded(self):
        with override_settings(TENANT_BRANDING=branding_settings(MAX_SESSIONS=10)):
            for index in range(50):
                self.middleware(self.factory.get("/", HTTP_HOST=f"junk{index}.kynguyenrealai.com"))
        self.assertEqual(len(self.middleware), 10)


class TestContextProcessor(TenantBrandingTestCase):
    tenant_branding = {"primary_color": "</style><script>"}

    def test_branding_variables(self):
        middleware = TenantBrandingMiddleware(lambda request: HttpResponse())
        self.addCleanup(middleware.close)
        request = RequestFactory().get("/", HTTP_HOST="localhost:5173")
        middleware(request)
        request.branding_session = middleware.get_session("agent-a.localhost")

        context = branding(request)

        self.assertEqual(context["tenant_id"], "agent-a")
        self.assertEqual(context["tenant_home_url"], "http://agent-a.localhost:5173")
        self.assertIn("--color-primary: \\3c /style>\\3c script>;", context["branding_css"])
        self.assertNotIn("</style>", context["branding_css"])


class TestContextProcessorWithoutMiddleware(SimpleTestCase):
    def test_defaults(self):
        context = branding(RequestFactory().get("/"))
        self.assertIsNone(context["tenant_id"])
        self.assertEqual(context["tenant_home_url"], "/")
        self.assertEqual(context["branding"].primary_color, "#4338ca")
        self.assertIn("--color-primary: #4338ca;", context["branding_css"])


class TestBrandingAPI(TenantBrandingAPITestCase):
    tenant_branding = {"primary_color": "#0f172a", "company_name": "Agent A"}

    def setUp(self):
        super().setUp()
        self.user = get_user_model().objects.create_user("owner", password="secret")

    def test_get_branding(self):
        response = self.client.get(reverse("tenant_branding:branding"))
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data["tenant_id"], "agent-a")
        self.assertFalse(data["loading"])
        self.assertEqual(data["home_url"], "/")
        self.assertEqual(data["branding"]["company_name"], "Agent A")
        self.assertEqual(data["branding"]["accent_color"], "#fbbf24")

    def test_visit_captures_referral(self):
        self.client.get(reverse("tenant_branding:branding"))
        self.assertEqual(self.client.session["REF_CODE"], "u123")

    def test_get_branding_on_platform_root(self):
        response = self.client.get(reverse("tenant_branding:branding"), HTTP_HOST="localhost")
        self.assertEqual(response.status_code, 200)
        self.assertIsNone(response.json()["tenant_id"])

    def test_patch_requires_authentication(self):
        response = self.client.patch(
            reverse("tenant_branding:branding"), {"primary_color": "#123456"}, format="json"
        )
        self.assertIn(response.status_code, (401, 403))
        self.tenant.refresh_from_db()
        self.assertEqual(self.tenant.branding["primary_color"], "#0f172a")

    def test_patch_branding(self):
        self.client.force_authenticate(user=self.user)
        response = self.client.patch(
            reverse("tenant_branding:branding"),
            {"primary_color": "#123456", "header_style": "centered"},
            format="json",
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["branding"]["primary_color"], "#123456")
        self.tenant.refresh_from_db()
        self.assertEqual(
            self.tenant.branding,
            {"primary_color": "#123456", "company_name": "Agent A", "header_style": "centered"},
        )

    def test_patch_validation(self):
        self.client.force_authenticate(user=self.user)
        for payload in ({"primary_color": "blue"}, {"border_radius": "huge"}, {}):
            with self.subTest(payload=payload):
                response = self.client.patch(
                    reverse("tenant_branding:branding"), payload, format="json"
                )
                self.assertEqual(response.status_code, 400)

    def test_patch_save_failure(self):
        self.client.force_authenticate(user=self.user)
        with mock.patch.object(
            ModelDocumentStore, "set", side_effect=DocumentStoreError("write denied")
        ):
            response = self.client.patch(
                reverse("tenant_branding:branding"), {"accent_color": "#000000"}, format="json"
            )
        self.assertEqual(response.status_code, 502)
        self.assertEqual(response.json()["branding"]["accent_color"], "#000000")
        self.tenant.refresh_from_db()
        self.assertNotIn("accent_color", self.tenant.branding)

    def test_preset_list(self):
        response = self.client.get(reverse("tenant_branding:preset-list"))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            [preset["key"] for preset in response.json()],
            ["future_city", "royal_prestige", "zen_retreat"],
        )

    def test_apply_preset(self):
        self.client.force_authenticate(user=self.user)
        response = self.client.post(
            reverse("tenant_branding:preset-apply", args=["royal_prestige"])
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["branding"]["font_family"], "playfair")
        self.tenant.refresh_from_db()
        self.assertEqual(self.tenant.branding["accent_color"], "#d97706")

    def test_apply_unknown_preset(self):
        self.client.force_authenticate(user=self.user)
        response = self.client.post(reverse("tenant_branding:preset-apply", args=["neon"]))
        self.assertEqual(response.status_code, 404)
