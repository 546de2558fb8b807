"""Infrastructure layer - Database, persistence and file storage"""

from .db import DatabaseEngine, get_engine, init_db
from .models import (
    ClientModel, TaskModel, TimeEntryModel, InvoiceModel, UserModel, ActivityLogModel,
)

__all__ = [
    "DatabaseEngine", "get_engine", "init_db",
    "ClientModel", "TaskModel", "TimeEntryModel", "InvoiceModel", "UserModel",
    "ActivityLogModel",
]
