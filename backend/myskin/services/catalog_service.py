"""
Catalog use-cases: storefront browsing and admin product/category/brand CRUD.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from myskin.core.exceptions import ConflictError, MySkinError, NotFoundError, ValidationError
from myskin.core.validation import BaseValidator, ProductValidator, ValidationResult
from myskin.db.base import Brand, Category, Product
from myskin.repositories.catalog_repository import (
    PRODUCT_SORTS,
    BrandRepository,
    CategoryRepository,
    ProductRepository,
)

logger = logging.getLogger(__name__)


class CatalogService:
    """Application service for products, categories and brands."""

    def __init__(self, db: Session):
        self.products = ProductRepository(db)
        self.categories = CategoryRepository(db)
        self.brands = BrandRepository(db)

    # ------------------------------------------------------------------
    # Storefront
    # ------------------------------------------------------------------

    def list_products(
        self,
        search: Optional[str] = None,
        category: Optional[str] = None,
        brand: Optional[str] = None,
        sort: Optional[str] = None,
    ) -> List[Product]:
        """List active products. Unknown sort keys fall back to ``name``."""
        result = ValidationResult()
        category_id = BaseValidator.validate_integer(category, "category", result, min_value=1)
        brand_id = BaseValidator.validate_integer(brand, "brand", result, min_value=1)
        result.raise_if_invalid("Invalid filters")

        sort_key = sort if sort in PRODUCT_SORTS else "name"
        return self.products.list_active(
            search=(search or "").strip() or None,
            category_id=category_id,
            brand_id=brand_id,
            sort=sort_key,
        )

    def get_product(self, product_id: int) -> Product:
        product = self.products.get_active(product_id)
        if product is None:
            raise NotFoundError("Product not found")
        return product

    def list_categories(self) -> List[Category]:
        return self.categories.list_all()

    def list_brands(self) -> List[Brand]:
        return self.brands.list_all()

    # ------------------------------------------------------------------
    # Admin: products
    # ------------------------------------------------------------------

    def list_products_for_admin(self, search: Optional[str] = None) -> List[Product]:
        return self.products.list_for_admin((search or "").strip() or None)

    def get_product_for_admin(self, product_id: int) -> Product:
        product = self.products.get_by_id(product_id)
        if product is None:
            raise NotFoundError("Product not found")
        return product

    def _check_references(self, data: Dict[str, Any]) -> None:
        errors = []
        if data.get("category_id") is not None and self.categories.get_by_id(data["category_id"]) is None:
            errors.append("category_id: category does not exist")
        if data.get("brand_id") is not None and self.brands.get_by_id(data["brand_id"]) is None:
            errors.append("brand_id: brand does not exist")
        if errors:
            raise ValidationError("Invalid product", errors)

    def create_product(self, payload: Dict[str, Any]) -> Product:
        data = ProductValidator().validate(payload).raise_if_invalid("Invalid product")
        self._check_references(data)
        data.setdefault("is_active", True)
        data.setdefault("stock_quantity", 0)

        product = self.products.create(Product(**data))
        if product is None:
            raise MySkinError("Failed to create product")
        logger.info("Product created", extra={"context": {"product_id": product.id}})
        return product

    def update_product(self, product_id: int, payload: Dict[str, Any]) -> Product:
        self.get_product_for_admin(product_id)
        data = ProductValidator(partial=True).validate(payload).raise_if_invalid("Invalid product")
        self._check_references(data)

        product = self.products.update(product_id, data)
        if product is None:
            raise MySkinError("Failed to update product")
        logger.info(
            "Product updated",
            extra={"context": {"product_id": product_id, "fields": sorted(data)}},
        )
        return product

    def delete_product(self, product_id: int) -> None:
        self.get_product_for_admin(product_id)
        if not self.products.delete(product_id):
            raise MySkinError("Failed to delete product")
        logger.info("Product deleted", extra={"context": {"product_id": product_id}})

    # ------------------------------------------------------------------
    # Admin: categories and brands
    # ------------------------------------------------------------------

    def _category_data(self, payload: Dict[str, Any], category_id: Optional[int] = None) -> Dict[str, Any]:
        result = ValidationResult()
        BaseValidator.validate_required_field(payload.get("name"), "name", result)
        name = BaseValidator.validate_string(payload.get("name"), "name", result, max_length=100)
        parent_id = BaseValidator.validate_integer(payload.get("parent_id"), "parent_id", result, min_value=1)
        if parent_id is not None:
            if parent_id == category_id:
                result.add_error("a category cannot be its own parent", "parent_id")
            elif self.categories.get_by_id(parent_id) is None:
                result.add_error("parent category does not exist", "parent_id")
        result.raise_if_invalid("Invalid category")
        return {"name": name, "parent_id": parent_id}

    def create_category(self, payload: Dict[str, Any]) -> Category:
        category = self.categories.create(Category(**self._category_data(payload)))
        if category is None:
            raise MySkinError("Failed to create category")
        return category

    def update_category(self, category_id: int, payload: Dict[str, Any]) -> Category:
        if self.categories.get_by_id(category_id) is None:
            raise NotFoundError("Category not found")
        category = self.categories.update(category_id, self._category_data(payload, category_id))
        if category is None:
            raise MySkinError("Failed to update category")
        return category

    def delete_category(self, category_id: int) -> None:
        if self.categories.get_by_id(category_id) is None:
            raise NotFoundError("Category not found")
        if self.categories.has_products(category_id):
            raise ConflictError("Category still has products")
        if not self.categories.delete(category_id):
            raise MySkinError("Failed to delete category")

    def _brand_name(self, payload: Dict[str, Any], brand_id: Optional[int] = None) -> str:
        result = ValidationResult()
        BaseValidator.validate_required_field(payload.get("name"), "name", result)
        name = BaseValidator.validate_string(payload.get("name"), "name", result, max_length=100)
        result.raise_if_invalid("Invalid brand")
        existing = self.brands.get_by_name(name)
        if existing is not None and existing.id != brand_id:
            raise ConflictError("A brand with this name already exists")
        return name

    def create_brand(self, payload: Dict[str, Any]) -> Brand:
        brand = self.brands.create(Brand(name=self._brand_name(payload)))
        if brand is None:
            raise MySkinError("Failed to create brand")
        return brand

    def update_brand(self, brand_id: int, payload: Dict[str, Any]) -> Brand:
        if self.brands.get_by_id(brand_id) is None:
            raise NotFoundError("Brand not found")
        brand = self.brands.update(brand_id, {"name": self._brand_name(payload, brand_id)})
        if brand is None:
            raise MySkinError("Failed to update brand")
        return brand

    def delete_brand(self, brand_id: int) -> None:
        if self.brands.get_by_id(brand_id) is None:
            raise NotFoundError("Brand not found")
        if not self.brands.delete(brand_id):
            raise MySkinError("Failed to delete brand")
