from django.core.exceptions import ValidationError
from django.test import SimpleTestCase, override_settings

from django_tenant_branding.domains import (
    HostClass,
    build_provisioned_domains,
    classify_host,
    infer_root_domain,
    is_local_host,
    normalize_custom_domain,
    normalize_host,
    pick_external_url,
    provisioned_login_url,
    recommended_custom_domain,
)
from django_tenant_branding.stores.base import TenantRecord

TENANT = TenantRecord(
    id="agent-a",
    domains=("agent-a.kynguyenrealai.com", "agent-a.localhost"),
)


class TestNormalizeHost(SimpleTestCase):
    def test_strips_port_and_case(self):
        self.assertEqual(normalize_host("Agent-A.Localhost:5173"), "agent-a.localhost")

    def test_strips_trailing_dot(self):
        self.assertEqual(normalize_host("shop.example.com."), "shop.example.com")

    def test_ipv6_literal(self):
        self.assertEqual(normalize_host("[::1]:8000"), "[::1]")

    def test_empty(self):
        self.assertEqual(normalize_host(None), "")


class TestClassifyHost(SimpleTestCase):
    def test_loopback_is_platform_root(self):
        self.assertIs(classify_host("localhost"), HostClass.PLATFORM_ROOT)
        self.assertIs(classify_host("127.0.0.1:8000"), HostClass.PLATFORM_ROOT)

    def test_platform_subdomain_is_platform_root(self):
        self.assertIs(classify_host("app.kynguyenrealai.com"), HostClass.PLATFORM_ROOT)

    def test_bare_app_label_is_candidate(self):
        self.assertIs(classify_host("app"), HostClass.CANDIDATE)

    def test_tenant_hosts_are_candidates(self):
        for host in ("agent-a.localhost", "agent-a.kynguyenrealai.com", "myshop.vn"):
            with self.subTest(host=host):
                self.assertIs(classify_host(host), HostClass.CANDIDATE)

    @override_settings(TENANT_BRANDING={"PLATFORM_SUBDOMAINS": ["app", "admin"]})
    def test_configured_platform_subdomains(self):
        self.assertIs(classify_host("admin.example.com"), HostClass.PLATFORM_ROOT)

    def test_local_host_detection(self):
        self.assertTrue(is_local_host("agent-a.localhost:5173"))
        self.assertTrue(is_local_host("127.0.0.1"))
        self.assertFalse(is_local_host("agent-a.kynguyenrealai.com"))


class TestPickExternalUrl(SimpleTestCase):
    def test_local_host_prefers_local_domain_and_keeps_port(self):
        self.assertEqual(
            pick_external_url(TENANT, "localhost", port=5173),
            "http://agent-a.localhost:5173",
        )

    def test_public_host_prefers_public_domain(self):
        self.assertEqual(
            pick_external_url(TENANT, "app.kynguyenrealai.com"),
            "https://agent-a.kynguyenrealai.com",
        )

    def test_same_host_returns_relative_root(self):
        self.assertEqual(pick_external_url(TENANT, "agent-a.kynguyenrealai.com"), "/")

    def test_no_domain_of_same_class(self):
        public_only = TenantRecord(id="b", domains=("b.example.com",))
        self.assertEqual(pick_external_url(public_only, "localhost"), "/")

    def test_no_tenant(self):
        self.assertEqual(pick_external_url(None, "localhost"), "/")

    def test_plain_domain_list(self):
        self.assertEqual(
            pick_external_url(["x.example.com", "x.localhost"], "shop.example.com"),
            "https://x.example.com",
        )


class TestProvisioning(SimpleTestCase):
    def test_default_root(self):
        self.assertEqual(
            build_provisioned_domains("agent-b"),
            ["agent-b.kynguyenrealai.com", "agent-b.localhost"],
        )

    def test_local_guess_is_ignored(self):
        self.assertEqual(
            build_provisioned_domains("agent-b", "localhost"),
            ["agent-b.kynguyenrealai.com", "agent-b.localhost"],
        )

    def test_public_guess_is_used(self):
        self.assertEqual(
            build_provisioned_domains("agent-b", "example.com"),
            ["agent-b.example.com", "agent-b.localhost"],
        )

    def test_slug_is_normalised(self):
        self.assertEqual(build_provisioned_domains(" Agent B ")[0], "agent-b.kynguyenrealai.com")

    def test_invalid_slug(self):
        for slug in ("", "-agent", "agent_b", "a" * 64):
            with self.subTest(slug=slug):
                with self.assertRaises(ValidationError):
                    build_provisioned_domains(slug)

    def test_infer_root_domain(self):
        self.assertEqual(infer_root_domain("app.kynguyenrealai.com"), "kynguyenrealai.com")
        self.assertEqual(infer_root_domain("kynguyenrealai.com"), "kynguyenrealai.com")
        self.assertEqual(infer_root_domain("localhost:5173"), "localhost")

    def test_login_url(self):
        self.assertEqual(
            provisioned_login_url("agent-b", "app.kynguyenrealai.com"),
            "https://agent-b.kynguyenrealai.com/login",
        )
        self.assertEqual(
            provisioned_login_url("agent-b", "localhost", scheme="http", port=5173),
            "http://agent-b.localhost:5173/login",
        )


class TestCustomDomains(SimpleTestCase):
    def test_normalize(self):
        self.assertEqual(normalize_custom_domain(" HTTPS://MyShop.vn/ "), "myshop.vn")

    def test_recommend_www_for_root(self):
        self.assertEqual(recommended_custom_domain("myshop.vn"), "www.myshop.vn")

    def test_keep_subdomains(self):
        self.assertEqual(recommended_custom_domain("shop.myshop.vn"), "shop.myshop.vn")

    def test_multi_part_suffix_is_not_a_root(self):
        self.assertEqual(recommended_custom_domain("com.vn"), "com.vn")
