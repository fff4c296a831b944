from django.test import SimpleTestCase, override_settings

from django_tenant_branding.exceptions import DirectoryLookupError
from django_tenant_branding.resolvers import DomainTenantResolver, SubdomainTenantResolver
from django_tenant_branding.stores.base import BaseTenantDirectory, TenantRecord
from django_tenant_branding.stores.memory import InMemoryTenantDirectory
from django_tenant_branding.utils import get_tenant_resolver, reset_backends


class BrokenDirectory(BaseTenantDirectory):
    def find_by_domain(self, hostname):
        raise ConnectionError("directory unavailable")

    def get_by_id(self, tenant_id):
        raise ConnectionError("directory unavailable")


class RecordingDirectory(BaseTenantDirectory):
    def __init__(self, matches=()):
        self.matches = list(matches)
        self.queries = []

    def find_by_domain(self, hostname):
        self.queries.append(hostname)
        return list(self.matches)

    def get_by_id(self, tenant_id):
        self.queries.append(tenant_id)
        return None


class TestDomainTenantResolver(SimpleTestCase):
    def setUp(self):
        self.directory = InMemoryTenantDirectory()
        self.agent_a = self.directory.add(
            TenantRecord(id="agent-a", domains=("agent-a.kynguyenrealai.com", "agent-a.localhost"))
        )
        self.resolver = DomainTenantResolver(directory=self.directory)

    def test_exact_match(self):
        self.assertEqual(self.resolver.resolve("agent-a.localhost").id, "agent-a")
        self.assertEqual(self.resolver.resolve("agent-a.kynguyenrealai.com").id, "agent-a")

    def test_port_and_case_are_ignored(self):
        self.assertEqual(self.resolver.resolve("Agent-A.localhost:5173").id, "agent-a")

    def test_unknown_host(self):
        self.assertIsNone(self.resolver.resolve("nobody.kynguyenrealai.com"))

    def test_www_is_not_stripped(self):
        self.assertIsNone(self.resolver.resolve("www.agent-a.kynguyenrealai.com"))

    def test_platform_root_skips_directory(self):
        directory = RecordingDirectory()
        resolver = DomainTenantResolver(directory=directory)
        for host in ("localhost", "127.0.0.1", "app.kynguyenrealai.com"):
            with self.subTest(host=host):
                self.assertIsNone(resolver.resolve(host))
        self.assertEqual(directory.queries, [])

    def test_first_match_wins(self):
        first = TenantRecord(id="first", domains=("shared.example.com",))
        second = TenantRecord(id="second", domains=("shared.example.com",))
        resolver = DomainTenantResolver(directory=RecordingDirectory([first, second]))
        with self.assertLogs("django_tenant_branding.resolvers.base", level="WARNING"):
            self.assertEqual(resolver.resolve("shared.example.com").id, "first")

    def test_directory_failure(self):
        resolver = DomainTenantResolver(directory=BrokenDirectory())
        with self.assertRaises(DirectoryLookupError) as cm:
            resolver.resolve("agent-a.localhost")
        self.assertIsInstance(cm.exception.__cause__, ConnectionError)


class TestSubdomainTenantResolver(SimpleTestCase):
    def test_first_label_is_tenant_id(self):
        directory = InMemoryTenantDirectory()
        directory.add(TenantRecord(id="agent-a"))
        resolver = SubdomainTenantResolver(directory=directory)
        self.assertEqual(resolver.resolve("agent-a.anything.example").id, "agent-a")
        self.assertIsNone(resolver.resolve("agent-b.example.com"))
        self.assertIsNone(resolver.resolve("localhost"))


@override_settings(
    TENANT_BRANDING={
        "TENANT_RESOLVER": "django_tenant_branding.resolvers.SubdomainTenantResolver",
        "TENANT_DIRECTORY": "django_tenant_branding.stores.memory.shared_directory",
    }
)
class TestConfiguredResolver(SimpleTestCase):
    def setUp(self):
        reset_backends()
        self.addCleanup(reset_backends)

    def test_resolver_from_settings(self):
        resolver = get_tenant_resolver()
        self.assertIsInstance(resolver, SubdomainTenantResolver)
        self.assertIsInstance(resolver.directory, InMemoryTenantDirectory)
