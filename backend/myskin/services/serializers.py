"""
JSON representations of the ORM rows returned by the API.

Money columns are emitted as floats and timestamps as ISO 8601 strings.
"""

from typing import Any, Dict, Optional

from myskin.db.base import (
    BankDetails,
    BlogPost,
    Booking,
    Brand,
    Category,
    Customer,
    JobApplication,
    JobListing,
    ManualPayment,
    Order,
    OrderItem,
    PricelistRequest,
    Product,
    Treatment,
)
from myskin.utils.formatting import isoformat, money, short_order_id


def serialize_category(category: Category) -> Dict[str, Any]:
    return {
        "id": category.id,
        "name": category.name,
        "parent_id": category.parent_id,
        "parent_name": category.parent.name if category.parent else None,
        "created_at": isoformat(category.created_at),
    }


def serialize_brand(brand: Brand) -> Dict[str, Any]:
    return {"id": brand.id, "name": brand.name, "created_at": isoformat(brand.created_at)}


def serialize_product(product: Product) -> Dict[str, Any]:
    return {
        "id": product.id,
        "name": product.name,
        "description": product.description,
        "ingredients": product.ingredients,
        "price": money(product.price),
        "category_id": product.category_id,
        "category": serialize_category(product.category) if product.category else None,
        "brand_id": product.brand_id,
        "brand": serialize_brand(product.brand) if product.brand else None,
        "stock_quantity": product.stock_quantity,
        "image_url": product.image_url,
        "is_active": product.is_active,
        "created_at": isoformat(product.created_at),
        "updated_at": isoformat(product.updated_at),
    }


def serialize_treatment(treatment: Treatment, product_ids: Optional[list] = None) -> Dict[str, Any]:
    data = {
        "id": treatment.id,
        "name": treatment.name,
        "description": treatment.description,
        "duration": treatment.duration,
        "category": treatment.category,
        "image_url": treatment.image_url,
        "is_active": treatment.is_active,
        "created_at": isoformat(treatment.created_at),
        "updated_at": isoformat(treatment.updated_at),
    }
    if product_ids is not None:
        data["product_ids"] = product_ids
    return data


def serialize_blog_post(post: BlogPost, include_content: bool = True) -> Dict[str, Any]:
    data = {
        "id": post.id,
        "title": post.title,
        "slug": post.slug,
        "excerpt": post.excerpt,
        "image_url": post.image_url,
        "is_published": post.is_published,
        "created_at": isoformat(post.created_at),
        "updated_at": isoformat(post.updated_at),
    }
    if include_content:
        data["content"] = post.content
    return data


def serialize_booking(booking: Booking) -> Dict[str, Any]:
    return {
        "id": booking.id,
        "name": booking.name,
        "email": booking.email,
        "phone": booking.phone,
        "treatment_type": booking.treatment_type,
        "preferred_date": isoformat(booking.preferred_date),
        "preferred_time": booking.preferred_time,
        "notes": booking.notes,
        "status": booking.status,
        "created_at": isoformat(booking.created_at),
        "updated_at": isoformat(booking.updated_at),
    }


def serialize_job_listing(listing: JobListing) -> Dict[str, Any]:
    return {
        "id": listing.id,
        "title": listing.title,
        "type": listing.type,
        "location": listing.location,
        "requirements": list(listing.requirements or []),
        "is_active": listing.is_active,
        "created_at": isoformat(listing.created_at),
    }


def serialize_job_application(application: JobApplication) -> Dict[str, Any]:
    return {
        "id": application.id,
        "position": application.position,
        "position_type": application.position_type,
        "location": application.location,
        "full_name": application.full_name,
        "email": application.email,
        "phone": application.phone,
        "cover_letter": application.cover_letter,
        "cv_url": application.cv_url,
        "status": application.status,
        "applied_at": isoformat(application.applied_at),
        "updated_at": isoformat(application.updated_at),
    }


def serialize_order_item(item: OrderItem) -> Dict[str, Any]:
    return {
        "id": item.id,
        "product_id": item.product_id,
        "product_name": item.product_name or (item.product.name if item.product else None),
        "quantity": item.quantity,
        "price": money(item.price),
        "line_total": money(item.price * item.quantity),
    }


def serialize_manual_payment(payment: ManualPayment, include_order: bool = False) -> Dict[str, Any]:
    data = {
        "id": payment.id,
        "order_id": payment.order_id,
        "sender_name": payment.sender_name,
        "customer_email": payment.customer_email,
        "customer_name": payment.customer_name,
        "amount_paid": money(payment.amount_paid),
        "transfer_reference": payment.transfer_reference,
        "bank_name": payment.bank_name,
        "payment_status": payment.payment_status,
        "admin_notes": payment.admin_notes,
        "submitted_at": isoformat(payment.submitted_at),
        "reviewed_at": isoformat(payment.reviewed_at),
        "reviewed_by": payment.reviewed_by,
    }
    if include_order and payment.order is not None:
        data["order"] = serialize_order(payment.order, include_payment=False)
    return data


def serialize_order(order: Order, include_payment: bool = True) -> Dict[str, Any]:
    data = {
        "id": order.id,
        "order_number": short_order_id(order.id),
        "user_email": order.user_email,
        "customer_name": order.customer_name,
        "customer_phone": order.customer_phone,
        "customer_address": order.customer_address,
        "customer_city": order.customer_city,
        "customer_state": order.customer_state,
        "total_amount": money(order.total_amount),
        "payment_method": order.payment_method,
        "status": order.status,
        "paystack_reference": order.paystack_reference,
        "shipping_address": order.shipping_address,
        "items": [serialize_order_item(item) for item in order.items],
        "created_at": isoformat(order.created_at),
        "updated_at": isoformat(order.updated_at),
    }
    if include_payment:
        data["manual_payment"] = (
            serialize_manual_payment(order.manual_payment) if order.manual_payment else None
        )
    return data


def serialize_pricelist_request(entry: PricelistRequest) -> Dict[str, Any]:
    return {
        "id": entry.id,
        "name": entry.name,
        "email": entry.email,
        "phone": entry.phone,
        "address": entry.address,
        "created_at": isoformat(entry.created_at),
    }


def serialize_bank_details(details: BankDetails) -> Dict[str, Any]:
    return {
        "id": details.id,
        "bank_name": details.bank_name,
        "account_name": details.account_name,
        "account_number": details.account_number,
        "is_active": details.is_active,
        "updated_at": isoformat(details.updated_at),
    }


def serialize_customer(customer: Customer) -> Dict[str, Any]:
    return {
        "id": customer.id,
        "email": customer.email,
        "full_name": customer.full_name,
        "created_at": isoformat(customer.created_at),
    }
