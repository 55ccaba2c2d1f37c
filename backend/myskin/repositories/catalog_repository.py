from typing import Iterable, List, Optional

from sqlalchemy import func, or_

from myskin.db.base import Brand, Category, Product
from myskin.repositories.base_repository import BaseRepository, like_pattern

PRODUCT_SORTS = {
    "name": (Product.name.asc(),),
    "price-low": (Product.price.asc(), Product.name.asc()),
    "price-high": (Product.price.desc(), Product.name.asc()),
}


class ProductRepository(BaseRepository[Product]):
    """Repository for the product catalog."""

    model = Product

    def _filtered(
        self,
        search: Optional[str] = None,
        category_id: Optional[int] = None,
        brand_id: Optional[int] = None,
        active_only: bool = True,
    ):
        query = self.db.query(Product)
        if active_only:
            query = query.filter(Product.is_active.is_(True))
        if search:
            pattern = like_pattern(search)
            query = query.filter(
                or_(
                    Product.name.ilike(pattern, escape="\\"),
                    Product.description.ilike(pattern, escape="\\"),
                )
            )
        if category_id is not None:
            # A parent category also matches products filed under its children
            child_ids = self.db.query(Category.id).filter(Category.parent_id == category_id)
            query = query.filter(
                or_(Product.category_id == category_id, Product.category_id.in_(child_ids))
            )
        if brand_id is not None:
            query = query.filter(Product.brand_id == brand_id)
        return query

    def list_active(
        self,
        search: Optional[str] = None,
        category_id: Optional[int] = None,
        brand_id: Optional[int] = None,
        sort: str = "name",
    ) -> List[Product]:
        """List active products with storefront filters and sort order."""
        order_by = PRODUCT_SORTS.get(sort, PRODUCT_SORTS["name"])
        return (
            self._filtered(search, category_id, brand_id)
            .order_by(*order_by, Product.id.asc())
            .all()
        )

    def list_for_admin(self, search: Optional[str] = None) -> List[Product]:
        return (
            self._filtered(search=search, active_only=False)
            .order_by(Product.created_at.desc(), Product.id.desc())
            .all()
        )

    def get_active(self, product_id: int) -> Optional[Product]:
        return (
            self.db.query(Product)
            .filter(Product.id == product_id, Product.is_active.is_(True))
            .first()
        )

    def get_active_by_ids(self, product_ids: Iterable[int]) -> List[Product]:
        ids = list(product_ids)
        if not ids:
            return []
        return (
            self.db.query(Product)
            .filter(Product.id.in_(ids), Product.is_active.is_(True))
            .all()
        )

    def list_active_in_categories(self, category_names: Iterable[str], limit: int) -> List[Product]:
        names = [name.lower() for name in category_names]
        if not names:
            return []
        return (
            self.db.query(Product)
            .join(Category, Product.category_id == Category.id)
            .filter(Product.is_active.is_(True), func.lower(Category.name).in_(names))
            .order_by(Product.name.asc(), Product.id.asc())
            .limit(limit)
            .all()
        )

    def list_active_limited(self, limit: int) -> List[Product]:
        return (
            self.db.query(Product)
            .filter(Product.is_active.is_(True))
            .order_by(Product.name.asc(), Product.id.asc())
            .limit(limit)
            .all()
        )


class CategoryRepository(BaseRepository[Category]):
    model = Category

    def list_all(self) -> List[Category]:
        """Parents first, then sub-categories, each alphabetically."""
        return (
            self.db.query(Category)
            .order_by(Category.parent_id.isnot(None), Category.name.asc())
            .all()
        )

    def has_products(self, category_id: int) -> bool:
        return (
            self.db.query(Product.id).filter(Product.category_id == category_id).first()
            is not None
        )


class BrandRepository(BaseRepository[Brand]):
    model = Brand

    def list_all(self) -> List[Brand]:
        return self.db.query(Brand).order_by(Brand.name.asc()).all()

    def get_by_name(self, name: str) -> Optional[Brand]:
        return self.db.query(Brand).filter(Brand.name == name).first()
