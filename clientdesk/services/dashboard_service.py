"""
Dashboard figures: headline stats, upcoming work and the activity feed.
"""

import logging
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from clientdesk.domain.models import ActivityLog, InvoiceStatus, Preferences, Task
from clientdesk.i18n import tr
from clientdesk.infra.repository import (
    ClientRepository, InvoiceRepository, TaskRepository, TimeEntryRepository,
)
from clientdesk.services.activity_service import ActivityService

logger = logging.getLogger(__name__)


class DashboardStats(BaseModel):
    total_clients: int = 0
    clients_this_month: int = 0
    active_tasks: int = 0
    hours_this_month: float = 0.0
    unpaid_invoices: int = 0
    unpaid_amount: float = 0.0


class ActiveProject(BaseModel):
    """A task that is not completed yet, with its client's display name"""
    task: Task
    client_name: str


class DashboardService:
    """Read-only aggregation over every collection the user owns"""

    def __init__(self, user_id: str, session: Optional[AsyncSession] = None,
                 preferences: Optional[Preferences] = None):
        self.user_id = user_id
        self.preferences = preferences or Preferences()
        self.client_repo = ClientRepository(user_id, session=session)
        self.task_repo = TaskRepository(user_id, session=session)
        self.entry_repo = TimeEntryRepository(user_id, session=session)
        self.invoice_repo = InvoiceRepository(user_id, session=session)
        self.activity = ActivityService(user_id, session=session)

    async def stats(self, now: Optional[datetime] = None) -> DashboardStats:
        now = now or datetime.now()
        month_start = datetime(now.year, now.month, 1)

        clients = await self.client_repo.get_all()
        tasks = await self.task_repo.get_all()
        entries = await self.entry_repo.get_all(start_date=month_start)
        unpaid = await self.invoice_repo.get_all(status=InvoiceStatus.UNPAID)

        hours = sum(e.hours for e in entries)
        return DashboardStats(
            total_clients=len(clients),
            clients_this_month=sum(1 for c in clients if c.created_at >= month_start),
            active_tasks=sum(1 for t in tasks if not t.is_completed),
            hours_this_month=round(hours, 1),
            unpaid_invoices=len(unpaid),
            unpaid_amount=round(sum(inv.total for inv in unpaid), 2),
        )

    async def active_projects(self, limit: Optional[int] = None) -> List[ActiveProject]:
        """Open tasks, soonest due first"""
        limit = limit or self.preferences.dashboard_project_limit
        names = {c.id: c.name for c in await self.client_repo.get_all()}
        tasks = await self.task_repo.get_open(limit=limit)
        return [
            ActiveProject(task=t, client_name=names.get(t.client_id) or tr("common.unknown_client"))
            for t in tasks
        ]

    async def recent_activities(self, limit: Optional[int] = None) -> List[ActivityLog]:
        return await self.activity.recent(limit or self.preferences.dashboard_activity_limit)

    @staticmethod
    def relative_time(timestamp: datetime, now: Optional[datetime] = None) -> str:
        """
        Short age of a feed entry.

        Under an hour is "Just now", under a day counts hours, one day is
        "Yesterday", under a week counts days, anything older shows the date.
        """
        now = now or datetime.now()
        diff_seconds = (now - timestamp).total_seconds()
        diff_hours = int(diff_seconds // 3600)
        diff_days = int(diff_seconds // 86400)

        if diff_hours < 1:
            return tr("dashboard.just_now")
        if diff_hours < 24:
            key = "dashboard.hour_ago" if diff_hours == 1 else "dashboard.hours_ago"
            return tr(key, n=diff_hours)
        if diff_days == 1:
            return tr("dashboard.yesterday")
        if diff_days < 7:
            return tr("dashboard.days_ago", n=diff_days)
        return f"{timestamp:%b} {timestamp.day}"
