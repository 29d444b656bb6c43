"""Owner-scoped task storage.

Every statement filters on `user_id`; a task id alone never selects a row.
"""

from .crud import create_task, delete_task, get_task, list_tasks, update_task

__all__ = [
    "create_task",
    "delete_task",
    "get_task",
    "list_tasks",
    "update_task",
]
