"""Domain layer - Pure business entities and logic"""

from .models import (
    Client, Task, TaskStatus, TimeEntry, Invoice, InvoiceItem, InvoiceStatus,
    UserProfile, ActivityLog, ActivityType, Preferences,
)
from .errors import (
    ClientDeskError, NotFoundError, PermissionDeniedError, InvalidInputError,
    TimerAlreadyRunningError,
)

__all__ = [
    "Client", "Task", "TaskStatus", "TimeEntry", "Invoice", "InvoiceItem",
    "InvoiceStatus", "UserProfile", "ActivityLog", "ActivityType", "Preferences",
    "ClientDeskError", "NotFoundError", "PermissionDeniedError",
    "InvalidInputError", "TimerAlreadyRunningError",
]
