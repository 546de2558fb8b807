"""
SQLAlchemy ORM models.
Separated from db.py for cleaner imports.
"""

from .db import (
    Base, ClientModel, TaskModel, TimeEntryModel, InvoiceModel, UserModel, ActivityLogModel,
)

__all__ = [
    "Base", "ClientModel", "TaskModel", "TimeEntryModel", "InvoiceModel", "UserModel",
    "ActivityLogModel",
]
