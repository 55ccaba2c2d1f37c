"""
Integration tests for the public storefront endpoints: bookings, catalog filters,
careers, contact forms, content pages, customer accounts and health probes.
"""

import io
from urllib.parse import unquote

import pytest

from myskin.core.security import generate_password_reset_token
from myskin.db.base import Brand, Category, Customer


@pytest.mark.api
@pytest.mark.bookings
class TestBookings:
    def test_create_booking_returns_whatsapp_link(self, client):
        response = client.post(
            "/api/bookings",
            json={
                "name": "Ada Obi",
                "email": "ADA@example.com",
                "phone": "08012345678",
                "treatmentType": "Chemical Peel",
                "preferredDate": "2030-01-15",
                "preferredTime": "10:00",
                "notes": "First visit",
            },
        )
        assert response.status_code == 201
        data = response.get_json()["data"]
        assert data["booking"]["status"] == "pending"
        assert data["booking"]["email"] == "ada@example.com"
        assert data["whatsapp_url"].startswith("https://wa.me/2348000000000?text=")
        assert "Chemical Peel" in unquote(data["whatsapp_url"])

    def test_missing_fields(self, client):
        response = client.post("/api/bookings", json={"name": "Ada"})
        assert response.status_code == 400
        body = response.get_json()
        assert body["message"] == "Please fill in all required fields"
        assert "preferred_date: is required" in body["data"]["errors"]

    def test_admin_updates_status(self, client, admin_client):
        created = client.post(
            "/api/bookings",
            json={
                "name": "Ada Obi",
                "email": "ada@example.com",
                "phone": "08012345678",
                "treatment_type": "Facial",
                "preferred_date": "2030-01-15",
                "preferred_time": "14:00",
            },
        ).get_json()["data"]["booking"]

        response = admin_client.patch(f"/api/bookings/{created['id']}", json={"status": "confirmed"})
        assert response.status_code == 200
        assert response.get_json()["data"]["status"] == "confirmed"

        listed = admin_client.get("/api/bookings?status=confirmed").get_json()["data"]
        assert [b["id"] for b in listed] == [created["id"]]


@pytest.mark.api
@pytest.mark.catalog
class TestCatalogFilters:
    @staticmethod
    def _names(client, query=""):
        response = client.get(f"/api/products{query}")
        assert response.status_code == 200
        return [p["name"] for p in response.get_json()["data"]["products"]]

    def test_search_is_case_insensitive_on_name_and_description(self, client, make_product):
        make_product("Vitamin C Serum", description="Brightening daily serum")
        make_product("Gentle Cleanser", description="Removes SPF and makeup")
        make_product("Night Cream", description="Rich moisturiser")

        assert self._names(client, "?search=SERUM") == ["Vitamin C Serum"]
        assert self._names(client, "?search=spf") == ["Gentle Cleanser"]
        assert self._names(client, "?search=%25") == []

    def test_parent_category_includes_sub_categories(self, client, db_session, make_product):
        skincare = Category(name="Skincare")
        db_session.add(skincare)
        db_session.flush()
        db_session.add(Category(name="Serums", parent_id=skincare.id))
        db_session.commit()

        make_product("Toner", category="Skincare")
        serum = make_product("Retinol Serum", category="Serums")
        make_product("Lip Balm", category="Lips")

        assert self._names(client, f"?category={skincare.id}") == ["Retinol Serum", "Toner"]
        assert self._names(client, f"?category={serum.category_id}") == ["Retinol Serum"]

    def test_brand_filter(self, client, make_product):
        cerave = make_product("Moisturising Cream", brand="CeraVe")
        make_product("Sunscreen", brand="La Roche-Posay")

        assert self._names(client, f"?brand={cerave.brand_id}") == ["Moisturising Cream"]

    def test_invalid_filter_ids_rejected(self, client):
        response = client.get("/api/products?category=abc")
        assert response.status_code == 400
        assert response.get_json()["data"]["errors"]

    def test_sort_orders(self, client, make_product):
        make_product("Clay Mask", price="7000.00")
        make_product("Aloe Gel", price="3000.00")
        make_product("Body Oil", price="9000.00")

        assert self._names(client, "?sort=price-low") == ["Aloe Gel", "Clay Mask", "Body Oil"]
        assert self._names(client, "?sort=price-high") == ["Body Oil", "Clay Mask", "Aloe Gel"]
        assert self._names(client, "?sort=newest") == ["Aloe Gel", "Body Oil", "Clay Mask"]
        assert self._names(client) == ["Aloe Gel", "Body Oil", "Clay Mask"]

    def test_inactive_products_hidden(self, client, make_product):
        make_product("Old Formula", is_active=False)
        make_product("New Formula")

        assert self._names(client) == ["New Formula"]

    def test_categories_list_parents_first(self, client, db_session):
        body = Category(name="Body")
        face = Category(name="Face")
        db_session.add_all([body, face])
        db_session.flush()
        db_session.add_all(
            [
                Category(name="Acne", parent_id=face.id),
                Category(name="Scrubs", parent_id=body.id),
            ]
        )
        db_session.commit()

        data = client.get("/api/categories").get_json()["data"]
        assert [c["name"] for c in data] == ["Body", "Face", "Acne", "Scrubs"]
        assert data[2]["parent_name"] == "Face"

    def test_brands_sorted_by_name(self, client, db_session):
        db_session.add_all([Brand(name="Olay"), Brand(name="Bioderma"), Brand(name="Nivea")])
        db_session.commit()

        data = client.get("/api/brands").get_json()["data"]
        assert [b["name"] for b in data] == ["Bioderma", "Nivea", "Olay"]


@pytest.mark.api
@pytest.mark.jobs
class TestCareers:
    listing = {
        "title": "Aesthetician",
        "type": "Full-time",
        "location": "Lekki, Lagos",
        "requirements": ["Licensed", "2 years experience"],
    }

    def test_listing_visibility(self, client, admin_client):
        created = admin_client.post("/api/job-listings", json=self.listing)
        assert created.status_code == 201
        listing_id = created.get_json()["data"]["id"]

        admin_client.put("/api/job-listings", json={**self.listing, "id": listing_id, "is_active": False})

        public = client.get("/api/job-listings").get_json()["data"]["jobListings"]
        assert public == []
        everything = admin_client.get("/api/job-listings?includeInactive=true").get_json()
        assert [item["id"] for item in everything["data"]["jobListings"]] == [listing_id]

        assert admin_client.delete(f"/api/job-listings?id={listing_id}").status_code == 200

    def test_inactive_listings_need_admin(self, client):
        response = client.get("/api/job-listings?includeInactive=true")
        assert response.status_code == 401

    def test_listing_requires_requirements(self, admin_client):
        payload = dict(self.listing, requirements=[])
        response = admin_client.post("/api/job-listings", json=payload)
        assert response.status_code == 400
        assert "requirements: is required" in response.get_json()["data"]["errors"]

    def test_application_with_cv(self, client, admin_client):
        response = client.post(
            "/api/job-applications",
            data={
                "position": "Aesthetician",
                "full_name": "Ada Obi",
                "email": "ada@example.com",
                "phone": "08012345678",
                "cv": (io.BytesIO(b"%PDF-1.4 cv"), "ada-cv.pdf"),
            },
            content_type="multipart/form-data",
        )
        assert response.status_code == 201
        application = response.get_json()["data"]
        assert application["status"] == "pending"
        assert application["cv_url"].startswith("/uploads/job-applications/cvs/")

        applications = admin_client.get("/api/job-applications").get_json()["data"]["applications"]
        assert len(applications) == 1

        reviewed = admin_client.patch(
            f"/api/job-applications/{application['id']}", json={"status": "reviewed"}
        )
        assert reviewed.status_code == 200

    def test_application_rejects_bad_cv_type(self, client):
        response = client.post(
            "/api/job-applications",
            data={
                "position": "Aesthetician",
                "full_name": "Ada Obi",
                "email": "ada@example.com",
                "phone": "08012345678",
                "cv": (io.BytesIO(b"MZ"), "cv.exe"),
            },
            content_type="multipart/form-data",
        )
        assert response.status_code == 400
        assert response.get_json()["data"]["errors"] == [
            "cv: File type not allowed. Allowed types: doc, docx, pdf"
        ]


@pytest.mark.api
class TestContactForms:
    def test_contact_without_email_provider(self, client):
        response = client.post(
            "/api/contact",
            json={"name": "Ada", "email": "ada@example.com", "message": "Do you treat melasma?"},
        )
        assert response.status_code == 200
        data = response.get_json()["data"]
        assert data["email_sent"] is False
        assert "melasma" in unquote(data["whatsapp_url"])

    def test_contact_requires_message(self, client):
        response = client.post("/api/contact", json={"name": "Ada", "email": "ada@example.com"})
        assert response.status_code == 400

    def test_pricelist_request_and_export(self, client, admin_client):
        response = client.post(
            "/api/pricelist-requests",
            json={
                "name": "Ada Obi",
                "email": "ada@example.com",
                "phone": "08012345678",
                "address": "12 Allen Avenue, Ikeja",
            },
        )
        assert response.status_code == 201

        export = admin_client.get("/api/admin/pricelist-requests/export.csv")
        assert export.status_code == 200
        assert export.mimetype == "text/csv"
        assert export.headers["Content-Disposition"].startswith(
            "attachment; filename=pricelist-requests-"
        )
        text = export.get_data(as_text=True)
        assert "ada@example.com" in text
        assert '"12 Allen Avenue, Ikeja"' in text


@pytest.mark.api
@pytest.mark.content
class TestContent:
    def test_treatment_recommendations(self, client, admin_client, make_product):
        serum = make_product(name="Brightening Serum")
        created = admin_client.post(
            "/api/admin/treatments",
            json={"name": "Chemical Peel", "category": "Facial", "product_ids": [serum.id]},
        )
        assert created.status_code == 201
        treatment_id = created.get_json()["data"]["id"]
        assert created.get_json()["data"]["product_ids"] == [serum.id]

        treatments = client.get("/api/treatments").get_json()["data"]
        assert [t["name"] for t in treatments] == ["Chemical Peel"]

        products = client.get(f"/api/treatments/{treatment_id}/recommended-products").get_json()["data"]
        assert [p["name"] for p in products] == ["Brightening Serum"]

    def test_treatment_with_unknown_product(self, admin_client):
        response = admin_client.post(
            "/api/admin/treatments",
            json={"name": "Microneedling", "category": "Facial", "product_ids": [999]},
        )
        assert response.status_code == 400

    def test_blog_publishing(self, client, admin_client):
        draft = admin_client.post(
            "/api/admin/blog",
            json={"title": "Summer Skin Tips", "excerpt": "Stay glowing", "content": "Use SPF."},
        ).get_json()["data"]
        assert draft["slug"] == "summer-skin-tips"
        assert client.get("/api/blog/summer-skin-tips").status_code == 404

        admin_client.patch(f"/api/admin/blog/{draft['id']}", json={"is_published": True})
        post = client.get("/api/blog/summer-skin-tips").get_json()["data"]
        assert post["post"]["content"] == "Use SPF."
        assert post["related"] == []

        listing = client.get("/api/blog").get_json()["data"]
        assert "content" not in listing[0]


@pytest.mark.api
@pytest.mark.auth
class TestCustomerAccounts:
    def test_signup_signin_and_me(self, client):
        signup = client.post(
            "/api/auth/signup",
            json={"email": "bola@example.com", "full_name": "Bola", "password": "long-enough"},
        )
        assert signup.status_code == 201
        assert client.get("/api/auth/me").get_json()["data"]["email"] == "bola@example.com"

        client.post("/api/auth/signout")
        assert client.get("/api/auth/me").status_code == 401

        signin = client.post(
            "/api/auth/signin", json={"email": "bola@example.com", "password": "long-enough"}
        )
        assert signin.status_code == 200

    def test_duplicate_signup(self, customer_client):
        response = customer_client.post(
            "/api/auth/signup",
            json={"email": "ada@example.com", "full_name": "Ada", "password": "correct-horse"},
        )
        assert response.status_code == 409

    def test_forgot_password_does_not_reveal_accounts(self, client):
        response = client.post("/api/auth/forgot-password", json={"email": "nobody@example.com"})
        assert response.status_code == 200

    def test_forgot_password_with_malformed_email_reports_success(self, client):
        response = client.post("/api/auth/forgot-password", json={"email": "not-an-email"})
        assert response.status_code == 200
        assert response.get_json()["success"] is True

    def test_reset_token_works_only_once(self, app, customer_client, db_session):
        customer = db_session.query(Customer).filter_by(email="ada@example.com").one()
        token = generate_password_reset_token(
            app.config["SECRET_KEY"], customer.email, customer.password_hash
        )

        first = customer_client.post(
            "/api/auth/reset-password", json={"token": token, "password": "battery-staple"}
        )
        assert first.status_code == 200

        replay = customer_client.post(
            "/api/auth/reset-password", json={"token": token, "password": "attacker-chosen"}
        )
        assert replay.status_code == 400
        assert replay.get_json()["message"] == "Reset link is invalid or has expired"

        signin = customer_client.post(
            "/api/auth/signin", json={"email": "ada@example.com", "password": "battery-staple"}
        )
        assert signin.status_code == 200


@pytest.mark.api
class TestHealth:
    def test_liveness(self, client):
        assert client.get("/health").get_json() == {"status": "healthy"}

    def test_database(self, client):
        response = client.get("/health/db")
        assert response.status_code == 200
        assert response.get_json()["database"] == "connected"

    def test_unknown_route_is_json(self, client):
        response = client.get("/api/does-not-exist")
        assert response.status_code == 404
        assert response.get_json()["success"] is False
