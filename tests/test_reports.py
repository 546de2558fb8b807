"""
Tests for report aggregation and the CSV, HTML and Excel exports.
"""

import zipfile
from datetime import date, datetime, timedelta

import pytest
from pydantic import ValidationError

from clientdesk.domain.errors import InvalidInputError
from clientdesk.domain.models import Client, Invoice, InvoiceItem, Preferences, Task, TimeEntry
from clientdesk.services import ClientService, InvoiceService, ReportFilter, ReportService, TaskService
from clientdesk.services.report_service import ReportData

from conftest import USER

NOW = datetime(2026, 3, 20, 18, 0)
PERIOD = ReportFilter(start_date=date(2026, 3, 16), end_date=date(2026, 3, 20))


def _invoice(client_id, amount, status, created):
    return Invoice(id=f"inv-{created:%m%d}-{status}", invoice_number="INV-0001", client_id=client_id,
                   items=[InvoiceItem(description="Work", quantity=1, rate=amount)],
                   status=status, due_date=created + timedelta(days=14), created_at=created)


def _entry(client_id, task_id, start, minutes):
    return TimeEntry(id=f"e-{start:%d%H}", task_id=task_id, client_id=client_id, start_time=start,
                     end_time=start + timedelta(minutes=minutes), duration_minutes=minutes)


def _task(client_id, title, status, due, created=datetime(2026, 3, 16, 9)):
    return Task(id=f"t-{title}", client_id=client_id, title=title, description="d",
                status=status, due_date=due, created_at=created)


@pytest.fixture
def data():
    return ReportData(
        clients=[Client(id="c1", name="Acme"), Client(id="c2", name="Globex")],
        invoices=[
            _invoice("c1", 300, "paid", datetime(2026, 2, 10)),
            _invoice("c1", 100, "unpaid", datetime(2026, 3, 2)),
            _invoice("c2", 600, "overdue", datetime(2026, 3, 5)),
        ],
        time_entries=[
            _entry("c1", "t-Landing", datetime(2026, 3, 16, 9), 120),
            _entry("c1", "t-Landing", datetime(2026, 3, 18, 9), 60),
            _entry("c2", "t-Gone", datetime(2026, 3, 20, 9), 300),
        ],
        tasks=[
            _task("c1", "Landing", "completed", datetime(2026, 3, 10)),
            _task("c1", "Copy", "pending", datetime(2026, 3, 19)),
            _task("c2", "API", "in_progress", datetime(2026, 3, 30)),
            _task("c3", "Orphan", "pending", datetime(2026, 4, 2), created=datetime(2026, 3, 17, 9)),
        ],
        task_titles={"t-Landing": "Landing"},
    )


class TestReportFilter:

    def test_end_before_start_is_rejected(self):
        with pytest.raises(ValidationError):
            ReportFilter(start_date=date(2026, 3, 2), end_date=date(2026, 3, 1))

    def test_last_days(self):
        f = ReportFilter.last_days(30, today=date(2026, 3, 31))
        assert f.start_date == date(2026, 3, 1)
        assert f.end_datetime == datetime(2026, 3, 31, 23, 59, 59, 999999)


class TestInvoiceReport:

    def test_totals_by_status(self, data):
        report = ReportService.invoice_report(data)
        assert report.count == 3
        assert report.total == 1000
        assert (report.paid, report.unpaid, report.overdue) == (300, 100, 600)
        assert (report.paid_count, report.unpaid_count, report.overdue_count) == (1, 1, 1)

    def test_monthly_breakdown_is_chronological(self, data):
        months = ReportService.invoice_report(data).monthly
        assert [m.month for m in months] == ["2026-02", "2026-03"]
        assert months[0].paid == 300
        assert (months[1].unpaid, months[1].overdue) == (100, 600)

    def test_by_client_share(self, data):
        by_client = ReportService.invoice_report(data).by_client
        assert [c.client_name for c in by_client] == ["Globex", "Acme"]
        assert by_client[0].share == 60.0
        assert by_client[1].count == 2

    def test_empty(self):
        report = ReportService.invoice_report(ReportData())
        assert report.total == 0
        assert report.share(0) == 0


class TestTimeReport:

    def test_totals(self, data):
        report = ReportService(USER).time_report(data, report_filter=PERIOD, now=NOW)
        assert report.total_hours == 8.0
        assert report.entry_count == 3
        assert report.working_days == 5
        assert report.avg_per_working_day == 1.6

    def test_windows(self, data):
        report = ReportService(USER).time_report(data, report_filter=PERIOD, now=NOW)
        assert report.last_day == 5.0
        assert report.last_week == 8.0
        assert report.last_month == 8.0

    def test_by_client_and_daily(self, data):
        report = ReportService(USER).time_report(data, report_filter=PERIOD, now=NOW)
        assert [(c.client_name, c.hours, c.entries) for c in report.by_client] == [
            ("Globex", 5.0, 1), ("Acme", 3.0, 2),
        ]
        assert report.by_client[1].avg_per_entry == 1.5
        assert [d.day for d in report.daily] == [date(2026, 3, 16), date(2026, 3, 18), date(2026, 3, 20)]

    def test_holidays_are_not_working_days(self):
        # Good Friday and Easter Monday 2026
        easter = ReportFilter(start_date=date(2026, 4, 1), end_date=date(2026, 4, 7))
        report = ReportService(USER).time_report(ReportData(), report_filter=easter, now=NOW)
        assert report.working_days == 3
        assert [h.day for h in report.holidays] == [date(2026, 4, 3), date(2026, 4, 6)]

    def test_calendar_follows_preferences(self):
        service = ReportService(USER, preferences=Preferences(respect_weekends=False, respect_holidays=False))
        assert service.time_report(ReportData(), report_filter=PERIOD, now=NOW).working_days == 5
        week = ReportFilter(start_date=date(2026, 3, 16), end_date=date(2026, 3, 22))
        assert service.time_report(ReportData(), report_filter=week, now=NOW).working_days == 7
        easter = ReportFilter(start_date=date(2026, 4, 1), end_date=date(2026, 4, 7))
        assert service.time_report(ReportData(), report_filter=easter, now=NOW).holidays == []

    def test_without_period_uses_entry_dates(self, data):
        report = ReportService(USER).time_report(data, now=NOW)
        assert report.working_days == 5
        assert report.holidays == []
        assert ReportService(USER).time_report(ReportData(), now=NOW).working_days == 0

    def test_html_lists_holidays(self, data):
        easter = ReportFilter(start_date=date(2026, 4, 1), end_date=date(2026, 4, 7))
        html = ReportService(USER).export_html("time", data, easter, "Jane", now=NOW)
        assert "Public Holidays in Period" in html
        assert "Apr 06, 2026" in html


class TestTaskReport:

    def test_counts(self, data):
        report = ReportService.task_report(data, NOW)
        assert report.total == 4
        assert report.completed == 1
        assert report.pending == 3
        assert report.overdue == 1
        assert report.completion_rate == 25.0
        assert round(report.overdue_share_of_pending, 1) == 33.3

    def test_by_client(self, data):
        by_client = {c.client_id: c for c in ReportService.task_report(data, NOW).by_client}
        acme = by_client["c1"]
        assert (acme.completed, acme.pending, acme.overdue) == (1, 0, 1)
        assert acme.rate == 50.0
        assert by_client["c3"].client_name == "Unknown Client"

    def test_overdue_rows_first(self, data):
        rows = ReportService.task_report(data, NOW).rows
        assert rows[0].task.title == "Copy"
        assert rows[0].overdue

    def test_trend_by_creation_day(self, data):
        trend = ReportService.task_report(data, NOW).trend
        assert [(t.day, t.completed, t.pending) for t in trend] == [
            (date(2026, 3, 16), 1, 2), (date(2026, 3, 17), 0, 1),
        ]


class TestExports:

    def test_invoice_csv(self, data):
        csv_text = ReportService(USER).export_csv("invoices", data)
        lines = csv_text.split("\n")
        assert lines[0] == "ID,Invoice Number,Client ID,Client,Amount,Status,Due Date,Created At"
        assert lines[1] == "inv-0210-paid,INV-0001,c1,Acme,300.00,Paid,2026-02-24,2026-02-10"
        assert len(lines) == 4

    def test_time_csv_uses_task_titles(self, data):
        lines = ReportService(USER).export_csv("time", data).split("\n")
        assert lines[0] == "ID,Client ID,Client,Task,Hours,Date,Notes"
        assert lines[1] == "e-1609,c1,Acme,Landing,2.00,2026-03-16,"
        assert lines[3].split(",")[3] == "Unknown Task"

    def test_empty_csv_is_an_error(self):
        with pytest.raises(InvalidInputError):
            ReportService(USER).export_csv("tasks", ReportData())

    def test_unknown_type(self, data):
        with pytest.raises(InvalidInputError):
            ReportService(USER).csv_records("expenses", data)

    @pytest.mark.parametrize("report_type", ["invoices", "time", "tasks"])
    def test_html(self, data, report_type, tmp_path):
        output = tmp_path / "report.html"
        html = ReportService(USER).export_html(report_type, data, PERIOD, "jane@example.com",
                                               output_file=output, now=NOW)
        assert output.read_text(encoding="utf-8") == html
        assert "jane@example.com" in html
        assert "Globex" in html

    def test_html_overdue_badge(self, data):
        html = ReportService(USER).export_html("tasks", data, PERIOD, "Jane", now=NOW)
        assert "OVERDUE" in html

    @pytest.mark.parametrize("report_type", ["invoices", "time", "tasks"])
    def test_xlsx(self, data, report_type, tmp_path):
        path = ReportService(USER).export_xlsx(report_type, data, PERIOD, tmp_path / "out" / "report.xlsx")
        assert path.exists()
        with zipfile.ZipFile(path) as archive:
            workbook = archive.read("xl/workbook.xml").decode("utf-8")
        for sheet in ("Summary", "Details", "By Client"):
            assert sheet in workbook


@pytest.mark.asyncio
async def test_fetch_respects_period_and_client(db_session):
    acme = await ClientService(USER, session=db_session).create_client({"name": "Acme"})
    globex = await ClientService(USER, session=db_session).create_client({"name": "Globex"})
    invoices = InvoiceService(USER, session=db_session)
    for client in (acme, globex):
        await invoices.create_invoice({"client_id": client.id, "due_date": datetime.now(),
                                       "items": [{"description": "A", "quantity": 1, "rate": 10}]})
    await TaskService(USER, session=db_session).create_task({
        "client_id": acme.id, "title": "T", "description": "d", "due_date": datetime.now(),
    })

    service = ReportService(USER, session=db_session)
    data = await service.fetch(ReportFilter.last_days(30, client_id=acme.id))
    assert [i.client_id for i in data.invoices] == [acme.id]
    assert len(data.tasks) == 1
    assert {c.name for c in data.clients} == {"Acme", "Globex"}

    old = await service.fetch(ReportFilter(start_date=date(2020, 1, 1), end_date=date(2020, 1, 31)))
    assert old.invoices == [] and old.tasks == []
