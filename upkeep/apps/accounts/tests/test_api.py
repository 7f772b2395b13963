"""Tests for session login and the audit log endpoint."""

from django.test import TestCase, tag
from django.urls import reverse

from upkeep.apps.accounts.models import AuditLog
from upkeep.apps.core.test_utils import (
    JsonClientMixin,
    SuppressRequestLogsMixin,
    create_admin_user,
    create_engineer_user,
)


@tag("views")
class LoginViewTests(SuppressRequestLogsMixin, JsonClientMixin, TestCase):
    def setUp(self):
        self.user = create_engineer_user(
            username="eddie", email="eddie@example.com", password="s3cret-pass"
        )
        self.url = reverse("api-login")

    def test_login_with_email(self):
        response = self.post_json(self.url, {"email": "EDDIE@example.com", "password": "s3cret-pass"})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["user"]["role"], "engineer")
        self.assertEqual(int(self.client.session["_auth_user_id"]), self.user.pk)
        entry = AuditLog.objects.get(action="LOGIN")
        self.assertEqual(entry.user, self.user)

    def test_login_with_username(self):
        response = self.post_json(self.url, {"username": "eddie", "password": "s3cret-pass"})
        self.assertEqual(response.status_code, 200)

    def test_wrong_password(self):
        response = self.post_json(self.url, {"email": "eddie@example.com", "password": "nope"})
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {"error": "Invalid credentials"})
        self.assertFalse(AuditLog.objects.exists())

    def test_missing_credentials(self):
        response = self.post_json(self.url, {"email": "eddie@example.com"})
        self.assertEqual(response.status_code, 400)

    def test_get_returns_csrf_token(self):
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.json()["csrfToken"])

    def test_logout(self):
        self.client.force_login(self.user)

        response = self.client.post(reverse("api-logout"))

        self.assertEqual(response.status_code, 200)
        self.assertNotIn("_auth_user_id", self.client.session)
        self.assertTrue(AuditLog.objects.filter(action="LOGOUT", user=self.user).exists())


@tag("views")
class ProfileViewTests(SuppressRequestLogsMixin, TestCase):
    def test_admin_role(self):
        admin = create_admin_user(username="ada", first_name="Ada", last_name="Admin")
        self.client.force_login(admin)

        response = self.client.get(reverse("api-profile"))

        self.assertEqual(
            response.json()["user"],
            {"id": admin.pk, "name": "Ada Admin", "email": "ada@example.com", "role": "admin"},
        )

    def test_anonymous(self):
        response = self.client.get(reverse("api-profile"))
        self.assertEqual(response.status_code, 401)


@tag("views")
class AuditLogListViewTests(SuppressRequestLogsMixin, TestCase):
    def setUp(self):
        self.admin = create_admin_user()
        self.engineer = create_engineer_user()
        self.url = reverse("api-audit-logs")
        for n in range(3):
            AuditLog.objects.create(user=self.admin, action="CREATE_SITE", resource="Site", resource_id=str(n))
        AuditLog.objects.create(user=self.engineer, action="CREATE_OPERATION_LOG", resource="OperationLog")

    def test_engineer_forbidden(self):
        self.client.force_login(self.engineer)
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, 403)

    def test_newest_first(self):
        self.client.force_login(self.admin)

        response = self.client.get(self.url)

        body = response.json()
        self.assertEqual(len(body), 4)
        self.assertEqual(body[0]["action"], "CREATE_OPERATION_LOG")

    def test_filters_and_limit(self):
        self.client.force_login(self.admin)

        response = self.client.get(self.url, {"action": "CREATE_SITE", "limit": "2"})

        body = response.json()
        self.assertEqual(len(body), 2)
        self.assertEqual({e["action"] for e in body}, {"CREATE_SITE"})

    def test_filter_by_user(self):
        self.client.force_login(self.admin)
        response = self.client.get(self.url, {"userId": self.engineer.pk})
        self.assertEqual([e["user"]["id"] for e in response.json()], [self.engineer.pk])

    def test_invalid_limit(self):
        self.client.force_login(self.admin)
        response = self.client.get(self.url, {"limit": "many"})
        self.assertEqual(response.status_code, 400)
