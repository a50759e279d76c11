"""Stand-in for the QR payment rail used when running locally.

Confirms any token that looks like one of our own payment requests for
the configured merchant (``order_number=...&amount=...&merchant=...``)
and rejects everything else.  It answers immediately; real rails are
slow, which is what the settlement timeout is for.
"""

from __future__ import annotations

import logging
from urllib.parse import parse_qs

from dinepay.domain.gateway.payment_verifier import PaymentVerifier, VerificationOutcome

logger = logging.getLogger("dinepay.payment_rail")


class SimulatedPaymentRail(PaymentVerifier):

    def __init__(self, merchant: str) -> None:
        self._merchant = merchant

    def verify(self, token: str) -> VerificationOutcome:
        fields = parse_qs(token, strict_parsing=False)
        merchant = fields.get("merchant", [""])[0]
        if fields.get("order_number") and fields.get("amount") and merchant == self._merchant:
            logger.info("Confirmed QR payment for %s", fields["order_number"][0])
            return VerificationOutcome.CONFIRMED
        logger.info("Rejected QR token %r", token)
        return VerificationOutcome.REJECTED
