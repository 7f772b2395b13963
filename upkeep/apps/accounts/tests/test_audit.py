"""Tests for the audit log sink."""

from django.test import RequestFactory, TestCase, tag

from upkeep.apps.accounts.audit import record_audit_log
from upkeep.apps.core.test_utils import create_engineer_user


@tag("models")
class RecordAuditLogTests(TestCase):
    def setUp(self):
        self.user = create_engineer_user()
        self.factory = RequestFactory()

    def test_captures_request_user_and_client(self):
        request = self.factory.post(
            "/api/sites", HTTP_USER_AGENT="dashboard/1.0", REMOTE_ADDR="203.0.113.7"
        )
        request.user = self.user

        entry = record_audit_log(request, "CREATE_SITE", "Site", 12, {"siteName": "North"})

        self.assertEqual(entry.user, self.user)
        self.assertEqual(entry.resource_id, "12")
        self.assertEqual(entry.ip_address, "203.0.113.7")
        self.assertEqual(entry.user_agent, "dashboard/1.0")
        self.assertEqual(entry.details, {"siteName": "North"})

    def test_without_request(self):
        entry = record_audit_log(None, "SYNCHRONIZE_MACHINE_TYPE", "MaintenanceTask")

        self.assertIsNone(entry.user)
        self.assertIsNone(entry.ip_address)
        self.assertEqual(entry.resource_id, "")
        self.assertEqual(str(entry), "SYNCHRONIZE_MACHINE_TYPE by system")

    def test_truncates_long_user_agent(self):
        request = self.factory.get("/", HTTP_USER_AGENT="x" * 2000)
        request.user = self.user

        entry = record_audit_log(request, "LOGIN")

        self.assertEqual(len(entry.user_agent), 512)
