"""
Abstract interfaces for external collaborators.

Services depend on these contracts so the payment gateway, email provider
and file storage can be swapped for mocks in tests.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, Optional


class IPaymentGateway(ABC):
    """Interface for an online card payment gateway."""

    @abstractmethod
    def initialize_transaction(
        self,
        email: str,
        amount_kobo: int,
        reference: str,
        metadata: Dict[str, Any],
        callback_url: str,
    ) -> Dict[str, Any]:
        """Start a hosted checkout and return the gateway's ``data`` payload."""
        pass

    @abstractmethod
    def verify_transaction(self, reference: str) -> Dict[str, Any]:
        """Return the gateway's ``data`` payload for a transaction reference."""
        pass


class IEmailSender(ABC):
    """Interface for transactional email delivery."""

    @abstractmethod
    def send(
        self,
        to: str,
        subject: str,
        html: str,
        reply_to: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Send one email. Returns the provider response payload."""
        pass


class IFileStorage(ABC):
    """Interface for uploaded file storage."""

    @abstractmethod
    def save(
        self, file_storage, folder: str, allowed_extensions: Iterable[str], field: str = "file"
    ) -> str:
        """Persist an uploaded file and return its public URL; ``field`` names it in errors."""
        pass

    @abstractmethod
    def delete(self, url: str) -> bool:
        """Remove a previously stored file given its public URL."""
        pass
