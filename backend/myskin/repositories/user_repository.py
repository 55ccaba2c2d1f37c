from typing import Optional

from sqlalchemy import func

from myskin.db.base import AdminUser, Customer
from myskin.repositories.base_repository import BaseRepository


class AdminUserRepository(BaseRepository[AdminUser]):
    """Repository for back-office accounts."""

    model = AdminUser

    def get_by_email(self, email: str) -> Optional[AdminUser]:
        return (
            self.db.query(AdminUser)
            .filter(func.lower(AdminUser.email) == email.strip().lower())
            .first()
        )


class CustomerRepository(BaseRepository[Customer]):
    """Repository for storefront customer accounts."""

    model = Customer

    def get_by_email(self, email: str) -> Optional[Customer]:
        return (
            self.db.query(Customer)
            .filter(func.lower(Customer.email) == email.strip().lower())
            .first()
        )

    def set_password_hash(self, customer: Customer, password_hash: str) -> Optional[Customer]:
        return self.update(customer.id, {"password_hash": password_hash})
