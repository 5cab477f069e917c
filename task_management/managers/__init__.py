"""
Task Management Managers Package

- TaskStoreManager: durable CRUD and listing queries for tasks
"""

from .task_store_manager import TaskStoreManager

__all__ = [
    'TaskStoreManager',
]
