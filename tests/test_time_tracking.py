"""
Tests for the timer, manual entries, filtering, summaries and CSV export.
"""

from datetime import date, datetime, timedelta

import pytest
import pytest_asyncio

from clientdesk.domain.errors import InvalidInputError, NotFoundError, TimerAlreadyRunningError
from clientdesk.domain.models import ActivityType, TimeEntry
from clientdesk.services import ActivityService, ClientService, EntryFilter, TaskService, TimeTrackingService
from clientdesk.services.time_tracking_service import floor_minutes

from conftest import USER


@pytest_asyncio.fixture
async def task(db_session):
    client = await ClientService(USER, session=db_session).create_client({"name": "Acme"})
    return await TaskService(USER, session=db_session).create_task({
        "client_id": client.id,
        "title": "Landing page",
        "description": "Build it",
        "due_date": datetime(2026, 4, 1),
    })


class TestTimer:

    @pytest.mark.asyncio
    async def test_start_and_stop(self, db_session, task):
        service = TimeTrackingService(USER, session=db_session)
        start = datetime(2026, 3, 18, 9, 0, 0)

        entry = await service.start_timer(task.id, notes="kickoff", now=start)
        assert entry.is_running
        assert entry.client_id == task.client_id
        assert (await service.active_timer()).id == entry.id

        stopped = await service.stop_timer(now=start + timedelta(minutes=65, seconds=59))
        assert stopped.duration_minutes == 65
        assert stopped.end_time == start + timedelta(minutes=65, seconds=59)
        assert await service.active_timer() is None

    @pytest.mark.asyncio
    async def test_only_one_timer_at_a_time(self, db_session, task):
        service = TimeTrackingService(USER, session=db_session)
        await service.start_timer(task.id)
        with pytest.raises(TimerAlreadyRunningError):
            await service.start_timer(task.id)

    @pytest.mark.asyncio
    async def test_stop_without_timer(self, db_session):
        with pytest.raises(NotFoundError):
            await TimeTrackingService(USER, session=db_session).stop_timer()

    @pytest.mark.asyncio
    async def test_start_unknown_task(self, db_session):
        with pytest.raises(NotFoundError):
            await TimeTrackingService(USER, session=db_session).start_timer("missing")

    @pytest.mark.asyncio
    async def test_stopping_logs_time(self, db_session, task):
        service = TimeTrackingService(USER, session=db_session)
        start = datetime(2026, 3, 18, 9, 0)
        await service.start_timer(task.id, now=start)
        await service.stop_timer(now=start + timedelta(minutes=95))

        logs = await ActivityService(USER, session=db_session).recent()
        assert logs[0].type == ActivityType.TIME_LOGGED
        assert logs[0].description == "Logged 1h 35m on Landing page"


class TestManualEntries:

    @pytest.mark.asyncio
    async def test_add_fills_client_and_duration(self, db_session, task):
        service = TimeTrackingService(USER, session=db_session)
        entry = await service.add_entry({
            "task_id": task.id,
            "start_time": datetime(2026, 3, 18, 9, 0),
            "end_time": datetime(2026, 3, 18, 11, 30),
            "notes": "design",
        })
        assert entry.client_id == task.client_id
        assert entry.duration_minutes == 150

    @pytest.mark.asyncio
    async def test_end_must_follow_start(self, db_session, task):
        service = TimeTrackingService(USER, session=db_session)
        with pytest.raises(InvalidInputError):
            await service.add_entry({
                "task_id": task.id,
                "start_time": datetime(2026, 3, 18, 11, 0),
                "end_time": datetime(2026, 3, 18, 11, 0),
            })

    @pytest.mark.asyncio
    async def test_update_recomputes_duration(self, db_session, task):
        service = TimeTrackingService(USER, session=db_session)
        entry = await service.add_entry({
            "task_id": task.id,
            "start_time": datetime(2026, 3, 18, 9, 0),
            "end_time": datetime(2026, 3, 18, 10, 0),
        })
        updated = await service.update_entry(entry.id, {"end_time": datetime(2026, 3, 18, 9, 20)})
        assert updated.duration_minutes == 20

        await service.delete_entry(entry.id)
        assert await service.list_entries() == []

    @pytest.mark.asyncio
    async def test_changing_task_moves_entry_to_its_client(self, db_session, task):
        globex = await ClientService(USER, session=db_session).create_client({"name": "Globex"})
        other = await TaskService(USER, session=db_session).create_task({
            "client_id": globex.id, "title": "API", "description": "d", "due_date": datetime(2026, 4, 1),
        })
        service = TimeTrackingService(USER, session=db_session)
        entry = await service.add_entry({
            "task_id": task.id,
            "start_time": datetime(2026, 3, 18, 9, 0),
            "end_time": datetime(2026, 3, 18, 10, 0),
        })

        updated = await service.update_entry(entry.id, {"task_id": other.id})
        assert updated.task_id == other.id
        assert updated.client_id == globex.id
        assert (await service.get_entry(entry.id)).client_id == globex.id

        kept = await service.update_entry(entry.id, {"task_id": task.id, "client_id": globex.id})
        assert kept.client_id == globex.id

        same = await service.update_entry(entry.id, {"task_id": task.id, "notes": "review"})
        assert same.client_id == globex.id


def test_floor_minutes():
    start = datetime(2026, 3, 18, 9, 0, 0)
    assert floor_minutes(start, start + timedelta(seconds=59)) == 0
    assert floor_minutes(start, start + timedelta(minutes=2, seconds=1)) == 2


class TestFilterAndSummary:

    def _entry(self, start, minutes=60, **kwargs):
        return TimeEntry(task_id=kwargs.pop("task_id", "t1"), client_id=kwargs.pop("client_id", "c1"),
                         start_time=start, end_time=start + timedelta(minutes=minutes),
                         duration_minutes=minutes, **kwargs)

    def test_text_matches_task_client_and_notes(self):
        entries = [
            self._entry(datetime(2026, 3, 18, 9), notes="Wireframes"),
            self._entry(datetime(2026, 3, 18, 11), task_id="t2", client_id="c2"),
        ]
        titles = {"t1": "Landing page", "t2": "Logo"}
        names = {"c1": "Acme", "c2": "Globex"}

        def search(text):
            return TimeTrackingService.filter_entries(entries, EntryFilter(text=text), titles, names)

        assert len(search("wire")) == 1
        assert len(search("globex")) == 1
        assert len(search("LOGO")) == 1
        assert len(search("")) == 2

    def test_date_range_includes_whole_end_day(self):
        entries = [
            self._entry(datetime(2026, 3, 1, 0, 0)),
            self._entry(datetime(2026, 3, 10, 23, 30)),
            self._entry(datetime(2026, 3, 11, 0, 0)),
        ]
        result = TimeTrackingService.filter_entries(
            entries, EntryFilter(start_date=date(2026, 3, 1), end_date=date(2026, 3, 10))
        )
        assert len(result) == 2

    def test_summary_today_week_month(self, now):
        entries = [
            self._entry(datetime(2026, 3, 18, 9), minutes=90),   # today
            self._entry(datetime(2026, 3, 16, 9), minutes=60),   # Monday this week
            self._entry(datetime(2026, 3, 2, 9), minutes=30),    # this month
            self._entry(datetime(2026, 2, 27, 9), minutes=600),  # last month
            TimeEntry(task_id="t1", start_time=datetime(2026, 3, 18, 14)),  # running
        ]
        summary = TimeTrackingService.summary(entries, now)
        assert summary.today == 1.5
        assert summary.week == 2.5
        assert summary.month == 3.0


class TestFormatting:

    def test_format_duration(self):
        assert TimeTrackingService.format_duration(65) == "1h 5m"
        assert TimeTrackingService.format_duration(0) == "0h 0m"

    def test_format_elapsed(self):
        assert TimeTrackingService.format_elapsed(3723) == "01:02:03"

    def test_duration_label(self):
        start = datetime(2026, 3, 18, 9, 0)
        running = TimeEntry(task_id="t1", client_id="c1", start_time=start)
        instant = TimeEntry(task_id="t1", client_id="c1", start_time=start, end_time=start, duration_minutes=0)
        closed = TimeEntry(task_id="t1", client_id="c1", start_time=start,
                           end_time=start + timedelta(minutes=65), duration_minutes=65)
        assert TimeTrackingService.duration_label(running) == "Running"
        assert TimeTrackingService.duration_label(instant) == "0h 0m"
        assert TimeTrackingService.duration_label(closed) == "1h 5m"

    def test_export_csv(self):
        start = datetime(2026, 3, 18, 9, 0)
        entries = [
            TimeEntry(task_id="t1", client_id="c1", start_time=start,
                      end_time=start + timedelta(minutes=90), duration_minutes=90,
                      notes='Call, then "notes"'),
            TimeEntry(task_id="gone", client_id="c1", start_time=start),
        ]
        csv_text = TimeTrackingService.export_csv(entries, {"t1": "Landing page"}, {"c1": "Acme"})
        lines = csv_text.split("\n")
        assert lines[0] == "Task,Client,Start Time,End Time,Duration,Notes"
        assert lines[1] == 'Landing page,Acme,2026-03-18 09:00,2026-03-18 10:30,1h 30m,"Call, then ""notes"""'
        assert lines[2] == "Unknown Task,Acme,2026-03-18 09:00,Running,-,"
