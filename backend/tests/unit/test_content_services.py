"""
Unit tests for treatment recommendations, blog slugs and price list export.
"""

from datetime import datetime

import pytest

from myskin.core.exceptions import NotFoundError, ValidationError
from myskin.db.base import PricelistRequest
from myskin.services.blog_service import BlogService
from myskin.services.pricelist_service import CSV_HEADERS, build_csv
from myskin.services.treatment_service import TreatmentService


@pytest.mark.content
class TestRecommendedProducts:
    def test_linked_products_win(self, db_session, make_product):
        make_product(name="Aloe Gel", category="Skincare")
        linked = make_product(name="Zinc Sunscreen", category="Sun Protection")
        service = TreatmentService(db_session)
        treatment = service.create_treatment(
            {"name": "Chemical Peel", "category": "skin-treatment", "product_ids": [linked.id]}
        )

        assert [p.id for p in service.recommended_products(treatment.id)] == [linked.id]
        assert service.linked_product_ids(treatment.id) == [linked.id]

    def test_falls_back_to_mapped_categories(self, db_session, make_product):
        make_product(name="Whitening Strips", category="Whitening")
        make_product(name="Aloe Gel", category="Skincare")
        service = TreatmentService(db_session)
        treatment = service.create_treatment({"name": "Teeth Whitening", "category": "teeth-whitening"})

        names = [p.name for p in service.recommended_products(treatment.id)]
        assert names == ["Whitening Strips"]

    def test_falls_back_to_first_active_products(self, db_session, make_product):
        for index in range(6):
            make_product(name=f"Product {index}", category="Misc")
        service = TreatmentService(db_session)
        treatment = service.create_treatment({"name": "Consultation", "category": "unmapped"})

        assert len(service.recommended_products(treatment.id)) == 4

    def test_unknown_linked_product_rejected(self, db_session):
        with pytest.raises(ValidationError):
            TreatmentService(db_session).create_treatment(
                {"name": "Peel", "category": "skin-treatment", "product_ids": [404]}
            )

    def test_inactive_treatment_hidden(self, db_session):
        service = TreatmentService(db_session)
        treatment = service.create_treatment({"name": "Old", "category": "x", "is_active": False})
        with pytest.raises(NotFoundError):
            service.recommended_products(treatment.id)


@pytest.mark.content
class TestBlogSlugs:
    def _post(self, title, **extra):
        return dict({"title": title, "excerpt": "Short", "content": "Body"}, **extra)

    def test_duplicate_titles_get_numbered_slugs(self, db_session):
        service = BlogService(db_session)
        first = service.create_post(self._post("Glow Up Tips"))
        second = service.create_post(self._post("Glow Up Tips"))
        third = service.create_post(self._post("Glow Up Tips!"))

        assert [first.slug, second.slug, third.slug] == [
            "glow-up-tips",
            "glow-up-tips-2",
            "glow-up-tips-3",
        ]

    def test_update_keeps_own_slug(self, db_session):
        service = BlogService(db_session)
        post = service.create_post(self._post("Sun Care"))
        updated = service.update_post(post.id, {"slug": "Sun Care"})
        assert updated.slug == "sun-care"

    def test_only_published_posts_are_public(self, db_session):
        service = BlogService(db_session)
        service.create_post(self._post("Draft"))
        published = service.create_post(self._post("Live", is_published=True))
        service.create_post(self._post("Live Too", is_published=True))

        assert sorted(p.slug for p in service.list_published()) == ["live", "live-too"]
        with pytest.raises(NotFoundError):
            service.get_published("draft")
        result = service.get_published(published.slug)
        assert [p.slug for p in result["related"]] == ["live-too"]


class TestPricelistCsv:
    def test_quotes_every_field_and_formats_date(self):
        entry = PricelistRequest(
            name='Ada "AJ" Obi',
            email="ada@example.com",
            phone="080",
            address="12 Allen Ave, Ikeja",
            created_at=datetime(2025, 3, 4, 5, 6, 7),
        )
        lines = build_csv([entry]).splitlines()

        assert lines[0] == ",".join(f'"{h}"' for h in CSV_HEADERS)
        assert lines[1] == (
            '"Ada ""AJ"" Obi","ada@example.com","080","12 Allen Ave, Ikeja","2025-03-04 05:06:07"'
        )
