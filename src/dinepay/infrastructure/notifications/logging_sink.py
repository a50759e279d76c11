"""Notification sink that writes order events to the log.

Stands in for the websocket broadcaster (``/topic/orders``,
``/topic/dashboard``) when no push transport is wired.
"""

from __future__ import annotations

import logging

from dinepay.application.dto import OrderDTO
from dinepay.domain.gateway.notification_sink import NotificationSink

logger = logging.getLogger("dinepay.notifications")


class LoggingNotificationSink(NotificationSink):

    def on_order_changed(self, snapshot: OrderDTO) -> None:
        logger.info(
            "order %s: status=%s payment=%s total=%s",
            snapshot.order_number, snapshot.status, snapshot.payment_status, snapshot.total,
        )

    def on_dashboard_should_refresh(self) -> None:
        logger.info("dashboard refresh")
