"""
Services package: business logic layered over the repositories.
"""

from .notification_service import NotificationService, get_notification_service  # noqa: F401
