"""
User resource tests (`/api/users/`).

What these tests verify
-----------------------
- Anonymous registration creates a USER; a client-supplied `role` is ignored
  unless an ADMIN sends it.
- Duplicate emails answer 409 (`email_exists`), case-insensitively.
- Passwords are validated, hashed, and never returned.
- Registration can be switched off (`ENABLE_REGISTRATION`).
- Only the user themself or an ADMIN may update/delete a user record.
"""

from django.test import override_settings
from rest_framework.test import APIClient, APITestCase

from accounts.models import Role, User

STRONG_PASSWORD = "S3cure-pass-123"


class RegistrationTests(APITestCase):
    def setUp(self):
        self.client = APIClient()

    def test_register_creates_user_role(self):
        r = self.client.post(
            "/api/users/",
            {"email": "new@example.com", "password": STRONG_PASSWORD, "role": "ADMIN"},
            format="json",
        )
        self.assertEqual(r.status_code, 201, r.data)
        self.assertEqual(r.data["role"], Role.USER)
        self.assertNotIn("password", r.data)
        user = User.objects.get(email="new@example.com")
        self.assertTrue(user.check_password(STRONG_PASSWORD))
        self.assertEqual(user.role, Role.USER)

    def test_duplicate_email_409(self):
        User.objects.create_user(email="taken@example.com", password=STRONG_PASSWORD)
        r = self.client.post(
            "/api/users/",
            {"email": "TAKEN@example.com", "password": STRONG_PASSWORD},
            format="json",
        )
        self.assertEqual(r.status_code, 409)
        self.assertEqual(r.json()["code"], "email_exists")

    def test_weak_password_400(self):
        r = self.client.post("/api/users/", {"email": "weak@example.com", "password": "123"}, format="json")
        self.assertEqual(r.status_code, 400)
        self.assertIn("password", r.data)

    def test_password_required(self):
        r = self.client.post("/api/users/", {"email": "nopass@example.com"}, format="json")
        self.assertEqual(r.status_code, 400)
        self.assertIn("password", r.data)

    @override_settings(ENABLE_REGISTRATION=False)
    def test_registration_disabled(self):
        r = self.client.post(
            "/api/users/",
            {"email": "new@example.com", "password": STRONG_PASSWORD},
            format="json",
        )
        self.assertEqual(r.status_code, 403)
        self.assertEqual(r.json()["code"], "registration_disabled")

    @override_settings(ENABLE_REGISTRATION=False)
    def test_admin_can_create_when_registration_disabled(self):
        root = User.objects.create_user(email="root@example.com", password=STRONG_PASSWORD, role=Role.ADMIN)
        self.client.force_authenticate(root)
        r = self.client.post(
            "/api/users/",
            {"email": "staff@example.com", "password": STRONG_PASSWORD, "role": "ADMIN"},
            format="json",
        )
        self.assertEqual(r.status_code, 201, r.data)
        self.assertEqual(r.data["role"], Role.ADMIN)


class UserRecordPermissionTests(APITestCase):
    def setUp(self):
        self.alice = User.objects.create_user(email="alice@example.com", password=STRONG_PASSWORD)
        self.bob = User.objects.create_user(email="bob@example.com", password=STRONG_PASSWORD)
        self.root = User.objects.create_user(email="root@example.com", password=STRONG_PASSWORD, role=Role.ADMIN)
        self.client = APIClient()

    def url(self, user):
        return f"/api/users/{user.id}/"

    def test_list_requires_authentication(self):
        self.assertEqual(self.client.get("/api/users/").status_code, 401)
        self.client.force_authenticate(self.alice)
        r = self.client.get("/api/users/")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.data["count"], 3)

    def test_self_update(self):
        self.client.force_authenticate(self.alice)
        r = self.client.patch(self.url(self.alice), {"first_name": "Alice"}, format="json")
        self.assertEqual(r.status_code, 200, r.data)
        self.alice.refresh_from_db()
        self.assertEqual(self.alice.first_name, "Alice")

    def test_self_cannot_promote(self):
        self.client.force_authenticate(self.alice)
        r = self.client.patch(self.url(self.alice), {"role": "ADMIN"}, format="json")
        self.assertEqual(r.status_code, 200)
        self.alice.refresh_from_db()
        self.assertEqual(self.alice.role, Role.USER)

    def test_other_user_403(self):
        self.client.force_authenticate(self.bob)
        r = self.client.patch(self.url(self.alice), {"first_name": "Mallory"}, format="json")
        self.assertEqual(r.status_code, 403)
        self.assertEqual(self.client.delete(self.url(self.alice)).status_code, 403)
        self.assertTrue(User.objects.filter(pk=self.alice.pk).exists())

    def test_email_conflict_on_update_409(self):
        self.client.force_authenticate(self.alice)
        r = self.client.patch(self.url(self.alice), {"email": "bob@example.com"}, format="json")
        self.assertEqual(r.status_code, 409)

    def test_admin_sets_role_and_deletes(self):
        self.client.force_authenticate(self.root)
        r = self.client.patch(self.url(self.bob), {"role": "ADMIN"}, format="json")
        self.assertEqual(r.status_code, 200, r.data)
        self.bob.refresh_from_db()
        self.assertEqual(self.bob.role, Role.ADMIN)

        self.assertEqual(self.client.delete(self.url(self.alice)).status_code, 204)
        self.assertFalse(User.objects.filter(pk=self.alice.pk).exists())
