"""
Integration tests for admin authentication and the back-office API.
"""

import io

import pytest

from myskin.core.security import ADMIN_COOKIE_NAME
from myskin.db.seed import ensure_admin_user


@pytest.mark.api
@pytest.mark.auth
class TestAdminAuthentication:
    def test_login_verify_logout(self, client):
        ensure_admin_user("owner@myskin.test", "s3cret-pass", "Owner")

        response = client.post(
            "/api/custom-admin-auth",
            json={"email": "Owner@MySkin.test", "password": "s3cret-pass"},
        )
        assert response.status_code == 200
        assert response.get_json()["user"]["email"] == "owner@myskin.test"
        assert ADMIN_COOKIE_NAME in response.headers.get("Set-Cookie", "")

        verify = client.get("/api/verify-admin")
        assert verify.status_code == 200
        assert verify.get_json()["authenticated"] is True
        assert verify.get_json()["user"]["email"] == "owner@myskin.test"

        client.post("/api/logout-admin")
        assert client.get("/api/verify-admin").status_code == 401

    def test_wrong_password(self, client):
        ensure_admin_user("owner@myskin.test", "s3cret-pass")
        response = client.post(
            "/api/custom-admin-auth", json={"email": "owner@myskin.test", "password": "nope"}
        )
        assert response.status_code == 401
        assert response.get_json()["message"] == "Invalid credentials"

    def test_missing_credentials(self, client):
        response = client.post("/api/custom-admin-auth", json={"email": "owner@myskin.test"})
        assert response.status_code == 400

    @pytest.mark.parametrize(
        "method,path",
        [
            ("get", "/api/admin/dashboard"),
            ("get", "/api/admin/manual-payments"),
            ("post", "/api/admin/products"),
            ("get", "/api/admin/pricelist-requests/export.csv"),
            ("get", "/api/bookings"),
            ("get", "/api/job-applications"),
        ],
    )
    def test_admin_routes_reject_anonymous(self, client, method, path):
        response = getattr(client, method)(path)
        assert response.status_code == 401
        assert response.get_json()["message"] == "Admin authentication required"

    def test_customer_session_is_not_admin(self, customer_client):
        assert customer_client.get("/api/admin/dashboard").status_code == 401


@pytest.mark.api
@pytest.mark.admin
class TestCatalogAdministration:
    def test_product_lifecycle(self, admin_client, client):
        category = admin_client.post("/api/admin/categories", json={"name": "Face Care"})
        assert category.status_code == 201
        category_id = category.get_json()["data"]["id"]

        created = admin_client.post(
            "/api/admin/products",
            json={"name": "Vitamin C Serum", "price": "7,500", "category_id": category_id},
        )
        assert created.status_code == 201
        product = created.get_json()["data"]
        assert product["price"] == 7500.0

        public = client.get("/api/products").get_json()["data"]
        assert [p["name"] for p in public["products"]] == ["Vitamin C Serum"]

        admin_client.patch(f"/api/admin/products/{product['id']}", json={"is_active": False})
        assert client.get("/api/products").get_json()["data"]["count"] == 0
        assert client.get(f"/api/products/{product['id']}").status_code == 404

        # Category still referenced by a product
        assert admin_client.delete(f"/api/admin/categories/{category_id}").status_code == 409

        assert admin_client.delete(f"/api/admin/products/{product['id']}").status_code == 200
        assert admin_client.delete(f"/api/admin/categories/{category_id}").status_code == 200

    def test_product_requires_fields(self, admin_client):
        response = admin_client.post("/api/admin/products", json={"name": "No price"})
        assert response.status_code == 400
        assert "price: is required" in response.get_json()["data"]["errors"]

    def test_duplicate_brand_conflict(self, admin_client):
        assert admin_client.post("/api/admin/brands", json={"name": "CeraVe"}).status_code == 201
        assert admin_client.post("/api/admin/brands", json={"name": "CeraVe"}).status_code == 409

    def test_image_upload(self, admin_client, client):
        response = admin_client.post(
            "/api/admin/upload",
            data={"folder": "products", "file": (io.BytesIO(b"\x89PNG fake"), "serum.png")},
            content_type="multipart/form-data",
        )
        assert response.status_code == 201
        url = response.get_json()["data"]["url"]
        assert url.startswith("/uploads/products/") and url.endswith(".png")
        assert client.get(url).data == b"\x89PNG fake"

    def test_upload_rejects_unknown_folder_and_type(self, admin_client):
        bad_folder = admin_client.post(
            "/api/admin/upload",
            data={"folder": "../etc", "file": (io.BytesIO(b"x"), "a.png")},
            content_type="multipart/form-data",
        )
        assert bad_folder.status_code == 400

        bad_type = admin_client.post(
            "/api/admin/upload",
            data={"folder": "blog", "file": (io.BytesIO(b"x"), "script.exe")},
            content_type="multipart/form-data",
        )
        assert bad_type.status_code == 400
        assert bad_type.get_json()["data"]["errors"][0].startswith("file: File type not allowed")


@pytest.mark.api
@pytest.mark.admin
class TestOrdersAdministration:
    def _manual_order(self, customer_client, product, customer_details, reference="TRF-1"):
        response = customer_client.post(
            "/api/orders/manual",
            json={
                "customerDetails": customer_details,
                "paymentDetails": {
                    "senderName": "Ada Obi",
                    "amountPaid": "2500",
                    "transferReference": reference,
                    "bankName": "Access",
                },
                "cartItems": [{"id": product.id, "quantity": 1}],
            },
        )
        assert response.status_code == 201, response.get_json()
        return response.get_json()["orderId"]

    def test_status_update_and_delete(self, admin_client, customer_client, make_product, customer_details):
        order_id = self._manual_order(customer_client, make_product(price="2500.00"), customer_details)

        listed = admin_client.get("/api/admin/orders?status=pending").get_json()["data"]
        assert [o["id"] for o in listed] == [order_id]

        updated = admin_client.patch(
            f"/api/admin/orders/{order_id}/status", json={"status": "shipped"}
        )
        assert updated.status_code == 200
        assert updated.get_json()["data"]["status"] == "shipped"
        assert updated.get_json()["data"]["email_sent"] is False

        invalid = admin_client.patch(f"/api/admin/orders/{order_id}/status", json={"status": "lost"})
        assert invalid.status_code == 400

        assert admin_client.delete(f"/api/admin/orders/{order_id}").status_code == 200
        assert admin_client.get(f"/api/admin/orders/{order_id}").status_code == 404
        # Payment row goes with its order
        counts = admin_client.get("/api/admin/manual-payments").get_json()["data"]["counts"]
        assert sum(counts.values()) == 0

    def test_rejected_payment_keeps_order_pending(
        self, admin_client, customer_client, make_product, customer_details
    ):
        order_id = self._manual_order(customer_client, make_product(price="2500.00"), customer_details)
        payment_id = admin_client.get("/api/admin/manual-payments").get_json()["data"]["payments"][0]["id"]

        response = admin_client.patch(
            f"/api/admin/manual-payments/{payment_id}",
            json={"status": "rejected", "notes": "No matching credit"},
        )
        assert response.status_code == 200
        assert response.get_json()["data"]["admin_notes"] == "No matching credit"
        assert admin_client.get(f"/api/admin/orders/{order_id}").get_json()["data"]["status"] == "pending"

    def test_review_requires_valid_status(self, admin_client, customer_client, make_product, customer_details):
        self._manual_order(customer_client, make_product(price="2500.00"), customer_details)
        payment_id = admin_client.get("/api/admin/manual-payments").get_json()["data"]["payments"][0]["id"]
        response = admin_client.patch(f"/api/admin/manual-payments/{payment_id}", json={"status": "maybe"})
        assert response.status_code == 400

    def test_review_unknown_payment(self, admin_client):
        response = admin_client.patch("/api/admin/manual-payments/999", json={"status": "approved"})
        assert response.status_code == 404

    def test_dashboard_counts(self, admin_client, customer_client, make_product, customer_details):
        self._manual_order(customer_client, make_product(price="2500.00"), customer_details)
        stats = admin_client.get("/api/admin/dashboard").get_json()["data"]["stats"]
        assert stats["total_orders"] == 1
        assert stats["total_products"] == 1
        assert stats["pending_payments"] == 1

    def test_bank_details_round_trip(self, admin_client, client):
        assert client.get("/api/bank-details").status_code == 404
        saved = admin_client.put(
            "/api/admin/bank-details",
            json={"bank_name": "GTBank", "account_name": "MySkin Aesthetics", "account_number": "0123456789"},
        )
        assert saved.status_code == 200
        public = client.get("/api/bank-details").get_json()["data"]
        assert public["account_number"] == "0123456789"
