"""
Tests for dashboard figures, active projects and the activity feed.
"""

from datetime import datetime, timedelta

import pytest

from clientdesk.domain.models import ActivityType, Preferences
from clientdesk.i18n import set_language
from clientdesk.services import (
    ActivityService, ClientService, DashboardService, InvoiceService, TaskService, TimeTrackingService,
)

from conftest import OTHER_USER, USER


@pytest.mark.asyncio
async def test_stats(db_session):
    now = datetime.now()
    clients = ClientService(USER, session=db_session)
    tasks = TaskService(USER, session=db_session)
    acme = await clients.create_client({"name": "Acme"})
    await clients.create_client({"name": "Globex"})

    open_task = await tasks.create_task({"client_id": acme.id, "title": "Open", "description": "d",
                                         "due_date": now + timedelta(days=3)})
    await tasks.create_task({"client_id": acme.id, "title": "Done", "description": "d",
                             "status": "completed", "due_date": now})

    start = datetime(now.year, now.month, 1, 9, 0)
    await TimeTrackingService(USER, session=db_session).add_entry({
        "task_id": open_task.id, "start_time": start, "end_time": start + timedelta(minutes=100),
    })

    invoices = InvoiceService(USER, session=db_session)
    await invoices.create_invoice({"client_id": acme.id, "due_date": now,
                                   "items": [{"description": "A", "quantity": 1, "rate": 100}]})
    await invoices.create_invoice({"client_id": acme.id, "due_date": now,
                                   "items": [{"description": "B", "quantity": 2, "rate": 50.25}]})
    await invoices.create_invoice({"client_id": acme.id, "due_date": now, "status": "paid",
                                   "items": [{"description": "C", "quantity": 1, "rate": 999}]})

    stats = await DashboardService(USER, session=db_session).stats(now)
    assert stats.total_clients == 2
    assert stats.clients_this_month == 2
    assert stats.active_tasks == 1
    assert stats.hours_this_month == 1.7
    assert stats.unpaid_invoices == 2
    assert stats.unpaid_amount == 200.5

    empty = await DashboardService(OTHER_USER, session=db_session).stats(now)
    assert empty.total_clients == 0
    assert empty.unpaid_amount == 0


@pytest.mark.asyncio
async def test_active_projects_soonest_first(db_session):
    now = datetime.now()
    acme = await ClientService(USER, session=db_session).create_client({"name": "Acme"})
    tasks = TaskService(USER, session=db_session)
    for days, title in ((9, "Later"), (2, "Soon"), (5, "Middle")):
        await tasks.create_task({"client_id": acme.id, "title": title, "description": "d",
                                 "due_date": now + timedelta(days=days)})
    await tasks.create_task({"client_id": acme.id, "title": "Finished", "description": "d",
                             "status": "completed", "due_date": now})
    await tasks.create_task({"client_id": "deleted", "title": "Orphan", "description": "d",
                             "due_date": now + timedelta(days=20)})

    service = DashboardService(USER, session=db_session, preferences=Preferences(dashboard_project_limit=3))
    projects = await service.active_projects()
    assert [p.task.title for p in projects] == ["Soon", "Middle", "Later"]
    assert projects[0].client_name == "Acme"

    everything = await service.active_projects(limit=10)
    assert everything[-1].client_name == "Unknown Client"


@pytest.mark.asyncio
async def test_recent_activities_newest_first(db_session):
    activity = ActivityService(USER, session=db_session)
    for i in range(7):
        await activity.log(ActivityType.CLIENT_ADDED, f"Added client {i}")

    recent = await DashboardService(USER, session=db_session).recent_activities()
    assert len(recent) == 5
    assert recent[0].description == "Added client 6"


class TestRelativeTime:
    NOW = datetime(2026, 3, 18, 15, 30)

    @pytest.mark.parametrize("delta,expected", [
        (timedelta(minutes=5), "Just now"),
        (timedelta(minutes=59), "Just now"),
        (timedelta(hours=1), "1 hour ago"),
        (timedelta(hours=5), "5 hours ago"),
        (timedelta(hours=23, minutes=59), "23 hours ago"),
        (timedelta(days=1, hours=2), "Yesterday"),
        (timedelta(days=3), "3 days ago"),
        (timedelta(days=6, hours=23), "6 days ago"),
        (timedelta(days=7), "Mar 11"),
        (timedelta(days=72), "Jan 5"),
    ])
    def test_buckets(self, delta, expected):
        assert DashboardService.relative_time(self.NOW - delta, self.NOW) == expected

    def test_german(self):
        set_language('de')
        assert DashboardService.relative_time(self.NOW - timedelta(days=1), self.NOW) != "Yesterday"
