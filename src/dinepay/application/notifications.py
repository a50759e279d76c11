"""Best-effort forwarding of order changes to the push channel."""

from __future__ import annotations

import logging

from dinepay.application.dto import order_to_dto
from dinepay.domain.gateway.notification_sink import NotificationSink
from dinepay.domain.model.order import Order

logger = logging.getLogger("dinepay.notifications")


class NotificationEmitter:
    """Calls the sink after a change has been persisted.

    Sink failures are logged and dropped; the order and payment state
    they describe is already committed.
    """

    def __init__(self, sink: NotificationSink | None = None) -> None:
        self._sink = sink

    def order_changed(self, order: Order, refresh_dashboard: bool = True) -> None:
        if self._sink is None:
            return
        try:
            self._sink.on_order_changed(order_to_dto(order))
        except Exception:
            logger.exception("Notification sink failed for order %s", order.order_number)
        if refresh_dashboard:
            self.dashboard_should_refresh()

    def dashboard_should_refresh(self) -> None:
        if self._sink is None:
            return
        try:
            self._sink.on_dashboard_should_refresh()
        except Exception:
            logger.exception("Notification sink failed to refresh dashboard")
