"""
Listings HTTP API tests.

What these tests verify
-----------------------
- **Public reads**: properties and reviews list without credentials.
- **Ownership on create**: a client-supplied `owner`/`author` is ignored; the
  caller becomes the owner/author.
- **Guarded writes over HTTP**:
  * owner 200, other user 403 with `{"detail": <reason>, "code": "forbidden"}`,
  * anonymous 401 with `code: not_authenticated`,
  * admin 204 on any row, 404 on a missing one,
  * non-admin on a missing id gets the same 403 shape ("Property not found").
- **Token credentials** drive the same decisions as session credentials.
- **Search/filters** and the per-property review listing.
- **Store failure** during the check answers 503, not 403/200.
"""

from decimal import Decimal
from unittest.mock import patch

from django.db import OperationalError
from django.test import SimpleTestCase
from rest_framework.authtoken.models import Token
from rest_framework.test import APIClient, APITestCase

from accounts.models import Role, User
from authz import current_principal
from listings.api import viewsets as viewsets_module
from listings.models import ListingType, Property, PropertyType, Review


class ListingsApiTestBase(APITestCase):
    def setUp(self):
        self.alice = User.objects.create_user(email="alice@example.com", password="pass12345")
        self.bob = User.objects.create_user(email="bob@example.com", password="pass12345")
        self.root = User.objects.create_user(email="root@example.com", password="pass12345", role=Role.ADMIN)
        self.client = APIClient()
        self.villa = Property.objects.create(
            owner=self.alice,
            title="Sea view villa",
            price=Decimal("850000.00"),
            location="Lisbon",
            bedrooms=4,
            property_type=PropertyType.VILLA,
            listing_type=ListingType.FOR_SALE,
        )
        self.flat = Property.objects.create(
            owner=self.bob,
            title="City flat",
            price=Decimal("1200.00"),
            location="Porto",
            bedrooms=1,
            property_type=PropertyType.APARTMENT,
            listing_type=ListingType.FOR_RENT,
        )
        self.review = Review.objects.create(author=self.bob, property=self.villa, rating=4, comment="Great light")

    def property_url(self, prop_id):
        return f"/api/properties/{prop_id}/"

    def review_url(self, review_id):
        return f"/api/reviews/{review_id}/"


class PropertyApiTests(ListingsApiTestBase):
    def test_public_list(self):
        r = self.client.get("/api/properties/")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.data["count"], 2)

    def test_create_sets_owner(self):
        self.client.force_authenticate(self.bob)
        payload = {
            "title": "Loft",
            "price": "2500.00",
            "location": "Lisbon",
            "property_type": "STUDIO",
            "listing_type": "FOR_RENT",
            "owner": self.alice.id,  # read-only; ignored
        }
        r = self.client.post("/api/properties/", payload, format="json")
        self.assertEqual(r.status_code, 201, r.data)
        self.assertEqual(r.data["owner"], self.bob.id)
        self.assertEqual(Property.objects.get(pk=r.data["id"]).owner_id, self.bob.id)

    def test_anonymous_create_401(self):
        r = self.client.post("/api/properties/", {"title": "x"}, format="json")
        self.assertEqual(r.status_code, 401)

    def test_owner_updates(self):
        self.client.force_authenticate(self.alice)
        r = self.client.patch(self.property_url(self.villa.id), {"title": "Renovated villa"}, format="json")
        self.assertEqual(r.status_code, 200, r.data)
        self.assertEqual(r.data["title"], "Renovated villa")
        self.villa.refresh_from_db()
        self.assertEqual(self.villa.title, "Renovated villa")

    def test_full_update_by_owner(self):
        self.client.force_authenticate(self.alice)
        payload = {
            "title": "Villa",
            "description": "Pool",
            "price": "900000.00",
            "location": "Cascais",
            "bedrooms": 5,
            "property_type": "VILLA",
            "listing_type": "FOR_SALE",
        }
        r = self.client.put(self.property_url(self.villa.id), payload, format="json")
        self.assertEqual(r.status_code, 200, r.data)
        self.assertEqual(r.data["location"], "Cascais")
        self.assertEqual(r.data["owner"], self.alice.id)

    def test_other_user_update_403(self):
        self.client.force_authenticate(self.bob)
        r = self.client.patch(self.property_url(self.villa.id), {"title": "Mine"}, format="json")
        self.assertEqual(r.status_code, 403)
        self.assertEqual(r.json(), {"detail": "You can only update your own properties", "code": "forbidden"})
        self.villa.refresh_from_db()
        self.assertEqual(self.villa.title, "Sea view villa")

    def test_anonymous_delete_401(self):
        r = self.client.delete(self.property_url(self.villa.id))
        self.assertEqual(r.status_code, 401)
        self.assertEqual(r.json()["code"], "not_authenticated")
        self.assertTrue(Property.objects.filter(pk=self.villa.id).exists())

    def test_admin_delete_204(self):
        self.client.force_authenticate(self.root)
        r = self.client.delete(self.property_url(self.villa.id))
        self.assertEqual(r.status_code, 204)
        self.assertFalse(Property.objects.filter(pk=self.villa.id).exists())

    def test_missing_id_non_admin_403(self):
        self.client.force_authenticate(self.bob)
        r = self.client.delete(self.property_url(999999))
        self.assertEqual(r.status_code, 403)
        self.assertEqual(r.json()["detail"], "Property not found")

    def test_missing_id_admin_404(self):
        self.client.force_authenticate(self.root)
        r = self.client.delete(self.property_url(999999))
        self.assertEqual(r.status_code, 404)

    def test_invalid_payload_400_before_authorization(self):
        self.client.force_authenticate(self.bob)
        r = self.client.patch(self.property_url(self.villa.id), {"price": "not-a-number"}, format="json")
        self.assertEqual(r.status_code, 400)
        self.assertIn("price", r.data)

    def test_search_filters(self):
        r = self.client.get("/api/properties/search/", {"location": "lis"})
        self.assertEqual([p["id"] for p in r.data["results"]], [self.villa.id])

        r = self.client.get("/api/properties/search/", {"listing_type": "FOR_RENT", "max_price": "2000"})
        self.assertEqual([p["id"] for p in r.data["results"]], [self.flat.id])

        r = self.client.get("/api/properties/", {"bedrooms": 2})
        self.assertEqual([p["id"] for p in r.data["results"]], [self.villa.id])

    def test_store_failure_503(self):
        self.client.force_authenticate(self.alice)
        with patch("listings.lookups.Property") as model:
            model.objects.select_related.side_effect = OperationalError("database is locked")
            r = self.client.delete(self.property_url(self.villa.id))
        self.assertEqual(r.status_code, 503)
        self.assertEqual(r.json()["code"], "store_unavailable")
        self.assertTrue(Property.objects.filter(pk=self.villa.id).exists())

    def test_principal_unbound_after_request(self):
        self.client.force_authenticate(self.alice)
        self.client.delete(self.property_url(self.villa.id))
        self.assertIsNone(current_principal())


class TokenCredentialTests(ListingsApiTestBase):
    def test_token_identifies_caller(self):
        token = Token.objects.create(user=self.alice)
        self.client.credentials(HTTP_AUTHORIZATION=f"Token {token.key}")

        r = self.client.patch(self.property_url(self.villa.id), {"title": "By token"}, format="json")
        self.assertEqual(r.status_code, 200, r.data)

        r = self.client.patch(self.property_url(self.flat.id), {"title": "Not mine"}, format="json")
        self.assertEqual(r.status_code, 403)

    def test_bad_token_401(self):
        self.client.credentials(HTTP_AUTHORIZATION="Token nope")
        r = self.client.delete(self.property_url(self.villa.id))
        self.assertEqual(r.status_code, 401)


class ReviewApiTests(ListingsApiTestBase):
    def test_create_sets_author(self):
        self.client.force_authenticate(self.alice)
        payload = {"property": self.flat.id, "rating": 5, "comment": "Cosy", "author": self.bob.id}
        r = self.client.post("/api/reviews/", payload, format="json")
        self.assertEqual(r.status_code, 201, r.data)
        self.assertEqual(r.data["author"], self.alice.id)

    def test_duplicate_review_400(self):
        self.client.force_authenticate(self.bob)
        r = self.client.post("/api/reviews/", {"property": self.villa.id, "rating": 2}, format="json")
        self.assertEqual(r.status_code, 400)
        self.assertIn("property", r.data)
        self.assertEqual(Review.objects.filter(author=self.bob, property=self.villa).count(), 1)

    def test_rating_out_of_range_400(self):
        self.client.force_authenticate(self.alice)
        r = self.client.post("/api/reviews/", {"property": self.flat.id, "rating": 6}, format="json")
        self.assertEqual(r.status_code, 400)

    def test_author_updates_review(self):
        self.client.force_authenticate(self.bob)
        r = self.client.put(self.review_url(self.review.id), {"rating": 5, "comment": "Even better"}, format="json")
        self.assertEqual(r.status_code, 200, r.data)
        self.assertEqual(r.data["rating"], 5)
        self.assertEqual(r.data["property"], self.villa.id)

    def test_property_owner_cannot_update_review(self):
        self.client.force_authenticate(self.alice)
        r = self.client.patch(self.review_url(self.review.id), {"rating": 1}, format="json")
        self.assertEqual(r.status_code, 403)
        self.assertEqual(r.json()["detail"], "You can only update your own reviews")

    def test_property_owner_deletes_review(self):
        self.client.force_authenticate(self.alice)
        r = self.client.delete(self.review_url(self.review.id))
        self.assertEqual(r.status_code, 204)
        self.assertFalse(Review.objects.filter(pk=self.review.id).exists())

    def test_stranger_cannot_delete_review(self):
        carol = User.objects.create_user(email="carol@example.com", password="pass12345")
        self.client.force_authenticate(carol)
        r = self.client.delete(self.review_url(self.review.id))
        self.assertEqual(r.status_code, 403)
        self.assertEqual(
            r.json()["detail"],
            "You can only delete your own reviews or reviews on your properties",
        )

    def test_missing_review_non_admin_403(self):
        self.client.force_authenticate(self.bob)
        r = self.client.delete(self.review_url(999999))
        self.assertEqual(r.status_code, 403)
        self.assertEqual(r.json()["detail"], "Review not found")

    def test_reviews_by_property(self):
        Review.objects.create(author=self.alice, property=self.flat, rating=2)
        r = self.client.get(f"/api/reviews/property/{self.villa.id}/")
        self.assertEqual(r.status_code, 200)
        self.assertEqual([rv["id"] for rv in r.data["results"]], [self.review.id])
        self.assertEqual(r.data["results"][0]["author_name"], "bob@example.com")

    def test_anonymous_author_name(self):
        self.bob.delete()
        r = self.client.get(self.review_url(self.review.id))
        self.assertEqual(r.status_code, 200)
        self.assertIsNone(r.data["author"])
        self.assertEqual(r.data["author_name"], "Anonymous User")


class ViewSetModuleTests(SimpleTestCase):
    def test_module_docstring_is_kept(self):
        self.assertIn("Authorization", viewsets_module.__doc__ or "")
