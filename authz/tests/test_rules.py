"""
Rule helper tests (pure, no database).

What these tests verify
-----------------------
- `is_admin` is an exact role match (no case folding, no hierarchy).
- `follow`/`refers_to` walk relation chains and return None/False at the first
  missing link instead of raising.
- Decisions compare by kind and reason, and are truthy only when permitting.
"""

from types import SimpleNamespace

from django.test import SimpleTestCase

from authz.decisions import Deny, Operation, Permit
from authz.rules import follow, is_admin, refers_to


def user(pk, role="USER"):
    return SimpleNamespace(id=pk, role=role)


class IsAdminTests(SimpleTestCase):
    def test_exact_admin_role(self):
        self.assertTrue(is_admin(user(1, "ADMIN")))

    def test_other_roles_and_spellings_are_not_admin(self):
        self.assertFalse(is_admin(user(1, "USER")))
        self.assertFalse(is_admin(user(1, "admin")))
        self.assertFalse(is_admin(user(1, "SUPERADMIN")))
        self.assertFalse(is_admin(SimpleNamespace(id=1)))
        self.assertFalse(is_admin(None))


class RelationChainTests(SimpleTestCase):
    def setUp(self):
        self.owner = user(3)
        self.review = SimpleNamespace(
            id=5,
            author=user(4),
            property=SimpleNamespace(id=10, owner=self.owner),
        )

    def test_follow_returns_leaf(self):
        self.assertIs(follow(self.review, "property.owner"), self.owner)

    def test_follow_stops_at_missing_link(self):
        orphan = SimpleNamespace(id=6, author=None, property=None)
        self.assertIsNone(follow(orphan, "property.owner"))
        self.assertIsNone(follow(None, "owner"))

    def test_refers_to_compares_ids_by_value(self):
        self.assertTrue(refers_to(user(3), self.review, "property.owner"))
        self.assertTrue(refers_to(user(4), self.review, "author"))
        self.assertFalse(refers_to(user(4), self.review, "property.owner"))

    def test_refers_to_is_false_on_absent_links(self):
        ownerless = SimpleNamespace(id=6, author=user(4), property=SimpleNamespace(id=11, owner=None))
        self.assertFalse(refers_to(user(3), ownerless, "property.owner"))
        self.assertFalse(refers_to(None, self.review, "author"))
        # A related object without an id never matches (e.g. unsaved instance).
        self.assertFalse(refers_to(SimpleNamespace(id=None), SimpleNamespace(owner=SimpleNamespace(id=None)), "owner"))


class DecisionTests(SimpleTestCase):
    def test_permit_and_deny_differ_even_with_same_reason(self):
        self.assertNotEqual(Permit("x"), Deny("x"))
        self.assertEqual(Deny("x"), Deny("x"))

    def test_truthiness(self):
        self.assertTrue(Permit("ok"))
        self.assertFalse(Deny("no"))
        self.assertTrue(Permit("ok").permitted)
        self.assertFalse(Deny("no").permitted)

    def test_operation_str(self):
        self.assertEqual(str(Operation("properties", "update_property", "update")), "properties.update_property")
