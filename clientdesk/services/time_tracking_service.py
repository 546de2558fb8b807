"""
Time tracking: the running timer, manual entries and the entry list.

Durations are stored in whole minutes, rounded down. An entry without an
end time is the running timer; at most one exists per user.
"""

import logging
import math
from datetime import date, datetime, time, timedelta
from typing import Any, Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from clientdesk.domain.errors import (
    InvalidInputError, NotFoundError, TimerAlreadyRunningError,
)
from clientdesk.domain.models import ActivityType, TimeEntry
from clientdesk.i18n import tr
from clientdesk.infra.repository import (
    ClientRepository, TaskRepository, TimeEntryRepository,
)
from clientdesk.services.activity_service import ActivityService
from clientdesk.services.export_service import to_csv

logger = logging.getLogger(__name__)

CSV_TIME_FORMAT = "%Y-%m-%d %H:%M"


class EntryFilter(BaseModel):
    """Filters applied to the entry list; empty values disable a filter"""
    text: str = Field(default="", description="Matched against task title, client name and notes")
    start_date: Optional[date] = Field(None, description="First day, inclusive")
    end_date: Optional[date] = Field(None, description="Last day, inclusive")
    client_id: Optional[str] = None
    task_id: Optional[str] = None


class TimeSummary(BaseModel):
    """Hours logged today, this week (from Monday) and this month"""
    today: float = 0.0
    week: float = 0.0
    month: float = 0.0


def floor_minutes(start: datetime, end: datetime) -> int:
    return math.floor((end - start).total_seconds() / 60)


class TimeTrackingService:
    """
    Timer and manual time entries for one user.
    """

    def __init__(self, user_id: str, session: Optional[AsyncSession] = None):
        self.user_id = user_id
        self.repo = TimeEntryRepository(user_id, session=session)
        self.task_repo = TaskRepository(user_id, session=session)
        self.client_repo = ClientRepository(user_id, session=session)
        self.activity = ActivityService(user_id, session=session)

    async def list_entries(self) -> List[TimeEntry]:
        """All entries, newest first"""
        return await self.repo.get_all()

    async def lookups(self) -> Tuple[Dict[str, str], Dict[str, str]]:
        """(task id -> title, client id -> name) for display and search"""
        tasks = await self.task_repo.get_all()
        clients = await self.client_repo.get_all()
        return {t.id: t.title for t in tasks}, {c.id: c.name for c in clients}

    async def get_entry(self, entry_id: str) -> TimeEntry:
        entry = await self.repo.get_by_id(entry_id)
        if entry is None:
            raise NotFoundError(self.repo.collection, entry_id)
        return entry

    @staticmethod
    def filter_entries(entries: List[TimeEntry], entry_filter: EntryFilter,
                       task_titles: Optional[Dict[str, str]] = None,
                       client_names: Optional[Dict[str, str]] = None) -> List[TimeEntry]:
        task_titles = task_titles or {}
        client_names = client_names or {}
        filtered = list(entries)

        text = entry_filter.text.strip().lower()
        if text:
            filtered = [
                e for e in filtered
                if text in task_titles.get(e.task_id, "").lower()
                or text in client_names.get(e.client_id, "").lower()
                or text in e.notes.lower()
            ]

        if entry_filter.start_date and entry_filter.end_date:
            start = datetime.combine(entry_filter.start_date, time.min)
            end = datetime.combine(entry_filter.end_date, time.max)
            filtered = [e for e in filtered if start <= e.start_time <= end]

        if entry_filter.client_id:
            filtered = [e for e in filtered if e.client_id == entry_filter.client_id]

        if entry_filter.task_id:
            filtered = [e for e in filtered if e.task_id == entry_filter.task_id]

        return filtered

    @staticmethod
    def summary(entries: List[TimeEntry], now: Optional[datetime] = None) -> TimeSummary:
        now = now or datetime.now()
        today_start = datetime.combine(now.date(), time.min)
        week_start = today_start - timedelta(days=now.weekday())
        month_start = today_start.replace(day=1)

        result = TimeSummary()
        for entry in entries:
            if not entry.duration_minutes:
                continue
            if entry.start_time >= today_start:
                result.today += entry.hours
            if entry.start_time >= week_start:
                result.week += entry.hours
            if entry.start_time >= month_start:
                result.month += entry.hours
        return result

    async def active_timer(self) -> Optional[TimeEntry]:
        return await self.repo.get_active_entry()

    async def start_timer(self, task_id: str, notes: str = "",
                          now: Optional[datetime] = None) -> TimeEntry:
        """
        Open a new entry for task_id.

        Raises:
            TimerAlreadyRunningError: another entry is still open
            NotFoundError: the task does not exist
        """
        if await self.repo.get_active_entry() is not None:
            raise TimerAlreadyRunningError(tr("time.timer_running"))

        task = await self.task_repo.get_by_id(task_id)
        if task is None:
            raise NotFoundError(self.task_repo.collection, task_id)

        now = now or datetime.now()
        entry = await self.repo.create(TimeEntry(
            task_id=task.id,
            client_id=task.client_id,
            start_time=now,
            notes=notes,
            created_at=now
        ))
        logger.info(f"Started timer {entry.id} for task {task.id}")
        return entry

    async def stop_timer(self, now: Optional[datetime] = None) -> TimeEntry:
        active = await self.repo.get_active_entry()
        if active is None:
            raise NotFoundError(self.repo.collection, "active timer")

        now = now or datetime.now()
        active.end_time = now
        active.duration_minutes = max(floor_minutes(active.start_time, now), 0)
        stopped = await self.repo.update(active)
        logger.info(f"Stopped timer {stopped.id} after {stopped.duration_minutes} min")
        await self._log_time(stopped)
        return stopped

    async def _entry_from_form(self, data: Mapping[str, Any],
                               base: Optional[TimeEntry] = None) -> TimeEntry:
        values: Dict[str, Any] = base.model_dump() if base else {}
        for key in ("task_id", "client_id", "start_time", "end_time", "notes"):
            if key in data and data[key] is not None:
                values[key] = data[key]

        # A newly picked task brings its own client unless one was given
        task_changed = base is not None and data.get("task_id") not in (None, base.task_id)
        if task_changed and not data.get("client_id"):
            values["client_id"] = ""
        if not values.get("client_id") and values.get("task_id"):
            task = await self.task_repo.get_by_id(values["task_id"])
            if task is not None:
                values["client_id"] = task.client_id

        entry = TimeEntry(**values)
        if entry.end_time is None:
            raise InvalidInputError(tr("time.end_before_start"))
        duration = floor_minutes(entry.start_time, entry.end_time)
        if duration <= 0:
            raise InvalidInputError(tr("time.end_before_start"))
        entry.duration_minutes = duration
        return entry

    async def add_entry(self, data: Mapping[str, Any]) -> TimeEntry:
        entry = await self._entry_from_form(data)
        entry.created_at = datetime.now()
        created = await self.repo.create(entry)
        logger.info(f"Added entry {created.id} ({created.duration_minutes} min)")
        await self._log_time(created)
        return created

    async def update_entry(self, entry_id: str, data: Mapping[str, Any]) -> TimeEntry:
        existing = await self.get_entry(entry_id)
        entry = await self._entry_from_form(data, base=existing)
        updated = await self.repo.update(entry)
        logger.info(f"Updated entry {entry_id}")
        return updated

    async def delete_entry(self, entry_id: str) -> None:
        await self.repo.delete(entry_id)
        logger.info(f"Deleted entry {entry_id}")

    async def _log_time(self, entry: TimeEntry) -> None:
        task = await self.task_repo.get_by_id(entry.task_id)
        title = task.title if task else tr("common.unknown_task")
        await self.activity.log(
            ActivityType.TIME_LOGGED,
            tr("activity.time_logged",
               duration=self.format_duration(entry.duration_minutes or 0), task=title),
            {"entry_id": entry.id, "task_id": entry.task_id,
             "duration": entry.duration_minutes or 0},
        )

    @staticmethod
    def elapsed_seconds(entry: TimeEntry, now: Optional[datetime] = None) -> int:
        end = entry.end_time or now or datetime.now()
        return max(int((end - entry.start_time).total_seconds()), 0)

    @staticmethod
    def format_duration(minutes: int) -> str:
        """95 -> '1h 35m'"""
        hours, mins = divmod(int(minutes), 60)
        return f"{hours}h {mins}m"

    @staticmethod
    def format_elapsed(seconds: int) -> str:
        """Format seconds as HH:MM:SS"""
        hours, remainder = divmod(int(seconds), 3600)
        minutes, seconds = divmod(remainder, 60)
        return f"{hours:02d}:{minutes:02d}:{seconds:02d}"

    @classmethod
    def duration_label(cls, entry: TimeEntry) -> str:
        """"Running" for the open entry, otherwise the stored duration"""
        if entry.is_running:
            return tr("time.running")
        return cls.format_duration(entry.duration_minutes or 0)

    @classmethod
    def export_csv(cls, entries: List[TimeEntry],
                   task_titles: Optional[Dict[str, str]] = None,
                   client_names: Optional[Dict[str, str]] = None) -> str:
        task_titles = task_titles or {}
        client_names = client_names or {}
        headers = [tr("time.col_task"), tr("time.col_client"), tr("time.col_start"),
                   tr("time.col_end"), tr("time.col_duration"), tr("time.col_notes")]
        rows = [
            [
                task_titles.get(e.task_id) or tr("common.unknown_task"),
                client_names.get(e.client_id) or tr("common.unknown_client"),
                e.start_time.strftime(CSV_TIME_FORMAT),
                e.end_time.strftime(CSV_TIME_FORMAT) if e.end_time else tr("time.running"),
                cls.format_duration(e.duration_minutes) if e.duration_minutes else "-",
                e.notes,
            ]
            for e in entries
        ]
        return to_csv(headers, rows)
