import logging
from typing import List, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError

from myskin.db.base import Product, Treatment, TreatmentProduct
from myskin.repositories.base_repository import BaseRepository

logger = logging.getLogger(__name__)


class TreatmentRepository(BaseRepository[Treatment]):
    """Repository for treatments and their linked recommended products."""

    model = Treatment

    def list_active(self) -> List[Treatment]:
        return (
            self.db.query(Treatment)
            .filter(Treatment.is_active.is_(True))
            .order_by(Treatment.name.asc())
            .all()
        )

    def list_all(self) -> List[Treatment]:
        return self.db.query(Treatment).order_by(Treatment.name.asc()).all()

    def get_active(self, treatment_id: int) -> Optional[Treatment]:
        return (
            self.db.query(Treatment)
            .filter(Treatment.id == treatment_id, Treatment.is_active.is_(True))
            .first()
        )

    def linked_product_ids(self, treatment_id: int) -> List[int]:
        rows = (
            self.db.query(TreatmentProduct.product_id)
            .filter(TreatmentProduct.treatment_id == treatment_id)
            .order_by(TreatmentProduct.id.asc())
            .all()
        )
        return [row[0] for row in rows]

    def linked_active_products(self, treatment_id: int) -> List[Product]:
        return (
            self.db.query(Product)
            .join(TreatmentProduct, TreatmentProduct.product_id == Product.id)
            .filter(
                TreatmentProduct.treatment_id == treatment_id,
                Product.is_active.is_(True),
            )
            .order_by(TreatmentProduct.id.asc())
            .all()
        )

    def save_with_products(
        self, treatment: Treatment, product_ids: Optional[Sequence[int]]
    ) -> Optional[Treatment]:
        """
        Persist a treatment and, when ``product_ids`` is given, replace its
        linked products in the same transaction.

        Returns:
            The saved treatment or None on database error
        """
        try:
            if treatment.id is None:
                self.db.add(treatment)
                self.db.flush()
            if product_ids is not None:
                self.db.query(TreatmentProduct).filter(
                    TreatmentProduct.treatment_id == treatment.id
                ).delete(synchronize_session=False)
                for product_id in product_ids:
                    self.db.add(
                        TreatmentProduct(treatment_id=treatment.id, product_id=product_id)
                    )
            self.db.commit()
            self.db.refresh(treatment)
            return treatment
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(
                "Error saving treatment",
                extra={
                    "context": {
                        "treatment_id": treatment.id,
                        "product_ids": list(product_ids or []),
                        "error": str(e),
                    }
                },
                exc_info=True,
            )
            return None
