"""
Treatments and the products recommended alongside them.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from myskin.core.exceptions import MySkinError, NotFoundError, ValidationError
from myskin.core.validation import TreatmentValidator
from myskin.db.base import Product, Treatment
from myskin.repositories.catalog_repository import ProductRepository
from myskin.repositories.treatment_repository import TreatmentRepository

logger = logging.getLogger(__name__)

RECOMMENDATION_LIMIT = 4
CATEGORY_CANDIDATE_LIMIT = 6

# Product category names to draw from when a treatment has no linked products
CATEGORY_PRODUCT_MAP: Dict[str, List[str]] = {
    "skin-treatment": ["Skincare", "Face Care", "Anti-Aging"],
    "laser-hair-removal": ["Hair Care", "Body Care", "After Care"],
    "teeth-whitening": ["Oral Care", "Dental", "Whitening"],
    "aesthetic-dermatology": ["Skincare", "Anti-Aging", "Professional"],
    "laser-treatments": ["After Care", "Skincare", "Recovery"],
    "body-contouring": ["Body Care", "Wellness", "Recovery"],
    "hair-restoration": ["Hair Care", "Scalp Care", "Growth"],
    "injectable-treatments": ["After Care", "Skincare", "Recovery"],
    "wellness-therapy": ["Wellness", "Supplements", "Recovery"],
    "specialized-procedures": ["Professional", "After Care", "Recovery"],
}
DEFAULT_PRODUCT_CATEGORIES = ["Skincare"]


class TreatmentService:
    def __init__(self, db: Session):
        self.treatments = TreatmentRepository(db)
        self.products = ProductRepository(db)

    def list_active(self) -> List[Treatment]:
        return self.treatments.list_active()

    def list_all(self) -> List[Treatment]:
        return self.treatments.list_all()

    def get_treatment(self, treatment_id: int, active_only: bool = True) -> Treatment:
        if active_only:
            treatment = self.treatments.get_active(treatment_id)
        else:
            treatment = self.treatments.get_by_id(treatment_id)
        if treatment is None:
            raise NotFoundError("Treatment not found")
        return treatment

    def linked_product_ids(self, treatment_id: int) -> List[int]:
        return self.treatments.linked_product_ids(treatment_id)

    def recommended_products(self, treatment_id: int) -> List[Product]:
        """
        Products to suggest on a treatment page.

        Linked active products win; otherwise up to four active products from
        the categories mapped to the treatment's category; otherwise the
        first four active products.
        """
        treatment = self.get_treatment(treatment_id)

        linked = self.treatments.linked_active_products(treatment.id)
        if linked:
            return linked

        categories = CATEGORY_PRODUCT_MAP.get(treatment.category, DEFAULT_PRODUCT_CATEGORIES)
        by_category = self.products.list_active_in_categories(categories, CATEGORY_CANDIDATE_LIMIT)
        if by_category:
            return by_category[:RECOMMENDATION_LIMIT]

        logger.debug(
            "No category match for treatment, using first active products",
            extra={"context": {"treatment_id": treatment.id, "category": treatment.category}},
        )
        return self.products.list_active_limited(RECOMMENDATION_LIMIT)

    def _check_products(self, product_ids: Optional[List[int]]) -> None:
        if not product_ids:
            return
        found = {product.id for product in self.products.get_active_by_ids(product_ids)}
        unknown = [pid for pid in product_ids if pid not in found]
        if unknown:
            raise ValidationError(
                "Invalid treatment",
                [f"product_ids: product {pid} does not exist or is inactive" for pid in unknown],
            )

    def create_treatment(self, payload: Dict[str, Any]) -> Treatment:
        data = TreatmentValidator().validate(payload).raise_if_invalid("Invalid treatment")
        product_ids = data.pop("product_ids", None)
        self._check_products(product_ids)
        data.setdefault("is_active", True)

        treatment = self.treatments.save_with_products(Treatment(**data), product_ids)
        if treatment is None:
            raise MySkinError("Failed to create treatment")
        logger.info(
            "Treatment created",
            extra={"context": {"treatment_id": treatment.id, "product_ids": product_ids or []}},
        )
        return treatment

    def update_treatment(self, treatment_id: int, payload: Dict[str, Any]) -> Treatment:
        treatment = self.get_treatment(treatment_id, active_only=False)
        data = TreatmentValidator(partial=True).validate(payload).raise_if_invalid(
            "Invalid treatment"
        )
        product_ids = data.pop("product_ids", None)
        self._check_products(product_ids)

        for key, value in data.items():
            setattr(treatment, key, value)
        saved = self.treatments.save_with_products(treatment, product_ids)
        if saved is None:
            raise MySkinError("Failed to update treatment")
        return saved

    def delete_treatment(self, treatment_id: int) -> None:
        self.get_treatment(treatment_id, active_only=False)
        if not self.treatments.delete(treatment_id):
            raise MySkinError("Failed to delete treatment")
        logger.info("Treatment deleted", extra={"context": {"treatment_id": treatment_id}})
