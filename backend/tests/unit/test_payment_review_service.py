"""
Unit tests for PaymentReviewService.

Approval completes the order; rejection leaves it pending; a payment is
reviewed at most once; email failures never undo a review.
"""

import pytest

from myskin.core.exceptions import ConflictError, NotFoundError, ValidationError
from myskin.db.base import ManualPayment, Order
from myskin.domain.entities import OrderStatus, PaymentStatus
from myskin.schemas.dtos import ManualOrderRequest, PaymentReviewRequest
from myskin.services.order_service import OrderService
from myskin.services.payment_review_service import PaymentReviewService


@pytest.fixture
def pending_payment(db_session, make_product, customer_details):
    product = make_product(price="2500.00")
    request = ManualOrderRequest.from_payload(
        {
            "customerDetails": customer_details,
            "paymentDetails": {
                "senderName": "Ada Obi",
                "amountPaid": "2500",
                "transferReference": "TRF-REVIEW",
                "bankName": "GTBank",
            },
            "cartItems": [{"id": product.id, "quantity": 1}],
        }
    )
    order = OrderService(db_session).create_manual_order(request)
    return db_session.query(ManualPayment).filter_by(order_id=order.id).one()


@pytest.fixture
def service(db_session, mock_email_service):
    return PaymentReviewService(db_session, email_service=mock_email_service)


@pytest.mark.payments
class TestPaymentReview:
    def test_approval_completes_order_and_emails(self, service, db_session, pending_payment, mock_email_service):
        result = service.review(
            pending_payment.id, PaymentReviewRequest(status="approved"), reviewer="staff@myskin.test"
        )

        payment = result["payment"]
        assert payment.payment_status == PaymentStatus.APPROVED
        assert payment.reviewed_by == "staff@myskin.test"
        assert payment.reviewed_at is not None
        assert db_session.get(Order, payment.order_id).status == OrderStatus.COMPLETED
        assert result["email_sent"] is True
        assert result["message"] == "Payment approved successfully and email sent"
        mock_email_service.send_payment_approval.assert_called_once()

    def test_rejection_keeps_order_pending(self, service, db_session, pending_payment, mock_email_service):
        result = service.review(
            pending_payment.id, PaymentReviewRequest(status="rejected", notes="No transfer found")
        )

        assert result["payment"].admin_notes == "No transfer found"
        assert db_session.get(Order, pending_payment.order_id).status == OrderStatus.PENDING
        mock_email_service.send_payment_rejection.assert_called_once()
        assert mock_email_service.send_payment_rejection.call_args[0][1] == "No transfer found"

    def test_second_review_is_a_conflict(self, service, pending_payment):
        service.review(pending_payment.id, PaymentReviewRequest(status="rejected"))
        with pytest.raises(ConflictError) as exc_info:
            service.review(pending_payment.id, PaymentReviewRequest(status="approved"))
        assert exc_info.value.message == "Payment has already been rejected"

    def test_email_failure_does_not_revert_review(self, service, pending_payment, mock_email_service):
        mock_email_service.send_payment_approval.return_value = {
            "success": False,
            "message": "Email service not configured",
        }
        result = service.review(pending_payment.id, PaymentReviewRequest(status="approved"))

        assert result["payment"].payment_status == PaymentStatus.APPROVED
        assert result["email_sent"] is False
        assert result["message"] == (
            "Payment approved successfully but email failed: Email service not configured"
        )

    def test_invalid_outcome_rejected(self, service, pending_payment):
        with pytest.raises(ValidationError):
            service.review(pending_payment.id, PaymentReviewRequest(status="pending"))

    def test_unknown_payment(self, service):
        with pytest.raises(NotFoundError):
            service.review(999, PaymentReviewRequest(status="approved"))

    def test_list_counts_by_status(self, service, pending_payment):
        result = service.list_payments(status="pending")
        assert [p.id for p in result["payments"]] == [pending_payment.id]
        assert result["counts"] == {"pending": 1, "approved": 0, "rejected": 0}

    def test_search_matches_transfer_reference(self, service, pending_payment):
        assert len(service.list_payments(search="review")["payments"]) == 1
        assert service.list_payments(search="nothing-like-this")["payments"] == []
