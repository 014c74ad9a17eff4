"""Infrastructure implementations of application service interfaces."""

from app.infrastructure.services.catalog_seeder import CatalogSeeder, SeedResult
from app.infrastructure.services.notification_sink import (
    LogOnlyNotificationSink,
    WebhookNotificationSink,
    build_notification_sink,
)
from app.infrastructure.services.permission_resolver import PermissionResolver

__all__ = [
    "CatalogSeeder",
    "LogOnlyNotificationSink",
    "PermissionResolver",
    "SeedResult",
    "WebhookNotificationSink",
    "build_notification_sink",
]
