"""Tests for the lightweight /health/ endpoint.

Contract
--------
- 200 when DB connectivity check passes and the policy table is sealed:
  {"app": "property-finder", "db": "ok", "policies": <guarded methods>, "time": "..."}.
- 503 when the DB check raises; payload includes {"db": "down", "error": "..."}.
- 503 when the policy table was never sealed.

These tests assert the endpoint remains minimal and dependable for load balancer checks.
"""

from unittest.mock import PropertyMock, patch

from django.test import TestCase

from authz.registry import PolicyRegistry


class HealthEndpointTests(TestCase):
    """Validate happy path and error paths for /health/."""

    def test_health_ok(self):
        resp = self.client.get("/health/")
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(data.get("db"), "ok")
        self.assertIn("time", data)
        self.assertEqual(data.get("app"), "property-finder")
        self.assertGreater(data.get("policies"), 0)

    def test_health_db_down(self):
        # Simulate DB connectivity failure to assert 503 behavior and error key.
        with patch("django.db.connection.ensure_connection", side_effect=Exception("boom")):
            resp = self.client.get("/health/")
        self.assertEqual(resp.status_code, 503)
        data = resp.json()
        self.assertEqual(data.get("db"), "down")
        self.assertIn("error", data)

    def test_health_unsealed_policies(self):
        with patch.object(PolicyRegistry, "sealed", new_callable=PropertyMock, return_value=False):
            resp = self.client.get("/health/")
        self.assertEqual(resp.status_code, 503)
        self.assertEqual(resp.json().get("policies"), "unsealed")
