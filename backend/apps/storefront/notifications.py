from __future__ import annotations

from apps.common import get_logger

from .protocols import NotificationLevel

logger = get_logger(__name__).bind(component="storefront", layer="notifications")


class LoggingNotifier:
    """Default notifier: messages go to the application log."""

    def notify(self, message: str, level: str = NotificationLevel.SUCCESS) -> None:
        if level == NotificationLevel.WARNING:
            logger.warning(message, level=level)
        else:
            logger.info(message, level=level)
