"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.  Components are built
once per process so every handler shares the same per-order locks.
"""

from __future__ import annotations

from functools import lru_cache

from dinepay.application.notifications import NotificationEmitter
from dinepay.application.order_locks import OrderLockRegistry
from dinepay.domain.service.invoice_coordinator import InvoiceIssuanceCoordinator
from dinepay.domain.service.payment_settlement_service import PaymentSettlementService
from dinepay.infrastructure.config import Settings
from dinepay.infrastructure.notifications.logging_sink import LoggingNotificationSink
from dinepay.infrastructure.payment.simulated_rail import SimulatedPaymentRail
from dinepay.infrastructure.persistence.json_invoice_repository import (
    JsonInvoiceRepository,
)
from dinepay.infrastructure.persistence.json_menu_repository import (
    JsonMenuRepository,
)
from dinepay.infrastructure.persistence.json_order_repository import (
    JsonOrderRepository,
)


@lru_cache(maxsize=None)
def settings() -> Settings:
    return Settings.from_env()


@lru_cache(maxsize=None)
def menu_repository() -> JsonMenuRepository:
    return JsonMenuRepository(settings().data_dir / "menu.json")


@lru_cache(maxsize=None)
def order_repository() -> JsonOrderRepository:
    return JsonOrderRepository(settings().data_dir / "orders.json")


@lru_cache(maxsize=None)
def invoice_repository() -> JsonInvoiceRepository:
    return JsonInvoiceRepository(settings().data_dir / "invoices.json")


@lru_cache(maxsize=None)
def order_locks() -> OrderLockRegistry:
    return OrderLockRegistry()


@lru_cache(maxsize=None)
def notifications() -> NotificationEmitter:
    return NotificationEmitter(LoggingNotificationSink())


@lru_cache(maxsize=None)
def invoice_coordinator() -> InvoiceIssuanceCoordinator:
    return InvoiceIssuanceCoordinator(invoice_repository())


@lru_cache(maxsize=None)
def settlement_service() -> PaymentSettlementService:
    return PaymentSettlementService(SimulatedPaymentRail(settings().merchant))


def reset() -> None:
    """Forget every built component (settings are re-read on next use)."""
    for factory in (
        settings,
        menu_repository,
        order_repository,
        invoice_repository,
        order_locks,
        notifications,
        invoice_coordinator,
        settlement_service,
    ):
        factory.cache_clear()
