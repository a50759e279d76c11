"""Gateway to the external QR payment rail."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum


class VerificationOutcome(Enum):
    CONFIRMED = "CONFIRMED"
    REJECTED = "REJECTED"


class PaymentVerifier(ABC):

    @abstractmethod
    def verify(self, token: str) -> VerificationOutcome:
        """Ask the payment rail whether *token* confirms a payment.

        May block; callers bound it with a timeout.
        """
