"""Domain service: Payment Settlement.

Decides whether a payment attempt may settle an order.  It validates
the order's state, then branches by payment method:

  CASH     — the tendered amount must cover the final total; change is
             tendered minus total.
  QR_CODE  — the opaque token is handed to the external payment rail,
             bounded by a timeout.  Rejection, timeout and rail errors
             all come back as PaymentDeclinedError.

The service never mutates or persists the order.  Recording the payment
(``Order.mark_paid``) is done by the application handler while it holds
the order's lock, so a declined or insufficient attempt leaves no trace.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass

from dinepay.domain.exceptions import (
    AlreadySettledError,
    InsufficientPaymentError,
    PaymentDeclinedError,
    ValidationError,
)
from dinepay.domain.gateway.payment_verifier import PaymentVerifier, VerificationOutcome
from dinepay.domain.model import lifecycle
from dinepay.domain.model.lifecycle import Trigger
from dinepay.domain.model.order import Order, PaymentMethod
from dinepay.domain.model.value_objects import MINOR_UNIT, Money

logger = logging.getLogger("dinepay.settlement")


@dataclass(frozen=True)
class PaymentReceipt:
    """What an authorized payment attempt amounts to."""

    method: PaymentMethod
    amount_due: Money
    amount_tendered: Money
    change: Money


class PaymentSettlementService:

    def __init__(self, verifier: PaymentVerifier) -> None:
        self._verifier = verifier

    def authorize(
        self,
        order: Order,
        method: PaymentMethod,
        payload: object,
        timeout: float,
    ) -> PaymentReceipt:
        """Validate a payment attempt against *order*.

        Raises AlreadySettledError, InvalidTransitionError,
        InsufficientPaymentError or PaymentDeclinedError.
        """
        if order.is_paid:
            raise AlreadySettledError(order.order_number)
        lifecycle.check_transition(order.status, Trigger.SETTLE)
        if not order.lines:
            raise ValidationError(
                f"Order {order.order_number} has no items to pay for"
            )

        amount_due = order.total
        if method == PaymentMethod.CASH:
            return self._authorize_cash(order, amount_due, payload)
        if method == PaymentMethod.QR_CODE:
            return self._authorize_qr(order, amount_due, payload, timeout)
        raise ValidationError(f"Unsupported payment method: {method!r}")

    # --- Cash -----------------------------------------------------------------

    @staticmethod
    def _authorize_cash(order: Order, amount_due: Money, payload: object) -> PaymentReceipt:
        tendered = payload if isinstance(payload, Money) else Money.of(payload)
        if tendered.amount != tendered.amount.quantize(MINOR_UNIT):
            raise ValidationError(
                f"Tendered amount {payload} is finer than {MINOR_UNIT}"
            )
        if tendered < amount_due:
            logger.warning(
                "Insufficient cash for order %s: tendered %s, due %s",
                order.order_number, tendered, amount_due,
            )
            raise InsufficientPaymentError(tendered, amount_due)
        return PaymentReceipt(
            method=PaymentMethod.CASH,
            amount_due=amount_due,
            amount_tendered=tendered,
            change=tendered - amount_due,
        )

    # --- QR code --------------------------------------------------------------

    def _authorize_qr(
        self,
        order: Order,
        amount_due: Money,
        payload: object,
        timeout: float,
    ) -> PaymentReceipt:
        if not isinstance(payload, str) or not payload.strip():
            raise ValidationError("A QR payment confirmation token is required")
        if timeout <= 0:
            raise ValidationError("Verification timeout must be positive")

        future = self._start_verification(order.order_number, payload.strip())
        try:
            outcome = future.result(timeout=timeout)
        except FutureTimeoutError:
            logger.warning(
                "Payment rail timed out after %ss for order %s",
                timeout, order.order_number,
            )
            raise PaymentDeclinedError(f"verification timed out after {timeout}s") from None
        except Exception as exc:
            logger.exception("Payment rail failed for order %s", order.order_number)
            raise PaymentDeclinedError(f"verification failed: {exc}") from exc

        if outcome != VerificationOutcome.CONFIRMED:
            logger.warning("QR payment rejected for order %s", order.order_number)
            raise PaymentDeclinedError("rejected by the payment rail")

        return PaymentReceipt(
            method=PaymentMethod.QR_CODE,
            amount_due=amount_due,
            amount_tendered=amount_due,
            change=Money.zero(),
        )

    def _start_verification(self, order_number: str, token: str) -> Future:
        """Run one rail call on its own daemon thread.

        A call that never returns keeps only its own thread; it cannot
        delay verification of any other order.
        """
        future: Future = Future()

        def run() -> None:
            if not future.set_running_or_notify_cancel():
                return
            try:
                future.set_result(self._verifier.verify(token))
            except Exception as exc:
                future.set_exception(exc)

        threading.Thread(
            target=run, name=f"payment-verify-{order_number}", daemon=True
        ).start()
        return future
