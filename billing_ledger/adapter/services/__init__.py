from .unit_of_work import SqlAlchemyUnitOfWork
from .notification_service import (
    LoggingNotificationService,
    WebhookNotificationService,
    CompositeNotificationService,
    create_notification_service,
)
from .client_registry import AllowAllClientRegistry, HttpClientRegistry, create_client_registry

__all__ = [
    "SqlAlchemyUnitOfWork",
    "LoggingNotificationService",
    "WebhookNotificationService",
    "CompositeNotificationService",
    "create_notification_service",
    "AllowAllClientRegistry",
    "HttpClientRegistry",
    "create_client_registry",
]
