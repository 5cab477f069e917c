"""
Notifications Managers Package

- NotificationStoreManager: persistence and read-state tracking for notifications
"""

from .notification_store_manager import NotificationStoreManager

__all__ = [
    'NotificationStoreManager',
]
