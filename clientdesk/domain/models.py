"""
Domain Models using Pydantic for validation.

Architecture Decision: Why Pydantic?
Every collection document is validated on the way in (forms, CLI, YAML)
and on the way out of the database, so pages can trust the shape of the
records they filter and sum.
"""

import re
import uuid
from datetime import datetime, date
from enum import Enum
from typing import Optional, List, Dict, Any

from pydantic import BaseModel, Field, ConfigDict, field_validator, model_validator


EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def new_id() -> str:
    """Generate an opaque document id"""
    return uuid.uuid4().hex


class _LenientEnum(str, Enum):
    """
    String enum that accepts display spellings.

    "In Progress", "in-progress" and "IN_PROGRESS" all resolve to the
    same member. Subclasses may declare ALIASES for legacy values.
    """

    @classmethod
    def _missing_(cls, value):
        if not isinstance(value, str):
            return None
        key = value.strip().lower().replace(" ", "_").replace("-", "_")
        key = cls._aliases().get(key, key)
        for member in cls:
            if member.value == key:
                return member
        return None

    @classmethod
    def _aliases(cls) -> Dict[str, str]:
        return {}

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").title()


class TaskStatus(_LenientEnum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"

    @classmethod
    def _aliases(cls) -> Dict[str, str]:
        # Older documents used "active" for work in progress
        return {"active": "in_progress", "done": "completed"}


class InvoiceStatus(_LenientEnum):
    PAID = "paid"
    UNPAID = "unpaid"
    OVERDUE = "overdue"


class ActivityType(_LenientEnum):
    CLIENT_ADDED = "client_added"
    TASK_COMPLETED = "task_completed"
    TIME_LOGGED = "time_logged"
    INVOICE_SENT = "invoice_sent"

    @classmethod
    def _aliases(cls) -> Dict[str, str]:
        return {
            "clientadded": "client_added",
            "taskcompleted": "task_completed",
            "timelogged": "time_logged",
            "invoicesent": "invoice_sent",
        }


class Client(BaseModel):
    """
    A customer record owned by a user.
    """
    model_config = ConfigDict(from_attributes=True)

    id: Optional[str] = None
    user_id: Optional[str] = None
    name: str = Field(..., min_length=1, max_length=200)
    email: str = ""
    phone: str = ""
    company: str = ""
    address: str = ""
    created_at: datetime = Field(default_factory=datetime.now)

    @field_validator("name", "email", "phone", "company", "address", mode="before")
    @classmethod
    def _strip(cls, value):
        if value is None:
            return ""
        return value.strip() if isinstance(value, str) else value

    @field_validator("email")
    @classmethod
    def _check_email(cls, value: str) -> str:
        if value and not EMAIL_PATTERN.match(value):
            raise ValueError("Please enter a valid email")
        return value


class Task(BaseModel):
    """
    A unit of work linked to a client, with status and due date.
    """
    model_config = ConfigDict(from_attributes=True)

    id: Optional[str] = None
    user_id: Optional[str] = None
    client_id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    status: TaskStatus = TaskStatus.PENDING
    due_date: datetime
    created_at: datetime = Field(default_factory=datetime.now)

    @property
    def is_completed(self) -> bool:
        return self.status == TaskStatus.COMPLETED

    def is_overdue(self, now: Optional[datetime] = None) -> bool:
        """A task is overdue when it is not completed and its due date has passed"""
        now = now or datetime.now()
        return not self.is_completed and self.due_date < now


class TimeEntry(BaseModel):
    """
    A logged duration linked to a task/client.

    An entry without end_time is the running timer. Duration is stored in
    whole minutes once the entry is closed.
    """
    model_config = ConfigDict(from_attributes=True)

    id: Optional[str] = None
    user_id: Optional[str] = None
    task_id: str
    client_id: str = ""
    start_time: datetime
    end_time: Optional[datetime] = None
    duration_minutes: Optional[int] = None
    notes: str = ""
    created_at: datetime = Field(default_factory=datetime.now)

    @field_validator("notes", "client_id", mode="before")
    @classmethod
    def _none_to_empty(cls, value):
        return "" if value is None else value

    @property
    def is_running(self) -> bool:
        return self.end_time is None

    @property
    def hours(self) -> float:
        return (self.duration_minutes or 0) / 60.0

    @property
    def date(self) -> date:
        return self.start_time.date()


class InvoiceItem(BaseModel):
    """A single billed line. Amount is always quantity * rate."""
    description: str = Field(..., min_length=1)
    quantity: float = Field(..., gt=0)
    rate: float = Field(..., ge=0)
    amount: float = 0.0

    @model_validator(mode="after")
    def _compute_amount(self):
        self.amount = round(self.quantity * self.rate, 2)
        return self


class Invoice(BaseModel):
    """
    A billing record with line items, total, and payment status.
    """
    model_config = ConfigDict(from_attributes=True)

    id: Optional[str] = None
    user_id: Optional[str] = None
    invoice_number: str = ""
    client_id: str = Field(..., min_length=1)
    client_name: str = ""
    items: List[InvoiceItem] = Field(..., min_length=1)
    total: float = 0.0
    status: InvoiceStatus = InvoiceStatus.UNPAID
    due_date: datetime
    created_at: datetime = Field(default_factory=datetime.now)

    @field_validator("client_name", mode="before")
    @classmethod
    def _none_to_empty(cls, value):
        return "" if value is None else value

    @model_validator(mode="after")
    def _compute_total(self):
        self.total = round(sum(item.amount for item in self.items), 2)
        return self


class UserProfile(BaseModel):
    """The `users` document written at registration and on profile edits"""
    model_config = ConfigDict(from_attributes=True)

    uid: str = Field(..., min_length=1)
    email: str = ""
    display_name: str = ""
    photo_url: str = ""
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: Optional[datetime] = None


class ActivityLog(BaseModel):
    """An entry in the dashboard's recent activity feed"""
    id: Optional[str] = None
    user_id: Optional[str] = None
    type: ActivityType
    description: str = ""
    timestamp: datetime = Field(default_factory=datetime.now)
    metadata: Dict[str, Any] = Field(default_factory=dict)


class Preferences(BaseModel):
    """
    User configuration and preferences.

    This allows users to customize behavior without touching code.
    """
    model_config = ConfigDict(from_attributes=True)

    # Display
    currency_symbol: str = Field(default="$", description="Prefix for money amounts")
    language: str = Field(default="auto", description="UI language: 'en', 'de', or 'auto'")

    # Working-day calendar used for per-day report averages
    holiday_country: str = Field(default="DE", description="ISO country code for public holidays")
    holiday_subdivision: Optional[str] = Field(default=None, description="State/province code, e.g. 'BY'")
    respect_holidays: bool = True
    respect_weekends: bool = True

    # Dashboard
    dashboard_project_limit: int = Field(default=4, ge=1)
    dashboard_activity_limit: int = Field(default=5, ge=1)

    # Profile pictures
    max_upload_bytes: int = Field(default=5 * 1024 * 1024, gt=0)

    # Report settings
    reports_directory: Optional[str] = None
