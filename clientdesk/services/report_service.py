"""
Report Generation Service.

Architecture Decision: Template Pattern
Numbers are aggregated here; the printable layout lives in a Jinja2
template so it can change without touching the aggregation.

Three reports share one fetch: invoices (by created_at), time entries (by
start time) and tasks (by created_at), all limited to the filter's days
and optional client. A task filter narrows entries and tasks.
"""

import datetime
import logging
from collections import defaultdict
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, model_validator
from sqlalchemy.ext.asyncio import AsyncSession

from clientdesk.domain.errors import InvalidInputError
from clientdesk.domain.models import (
    Client, Invoice, InvoiceStatus, Preferences, Task, TimeEntry,
)
from clientdesk.i18n import tr
from clientdesk.infra.repository import (
    ClientRepository, InvoiceRepository, TaskRepository, TimeEntryRepository,
)
from clientdesk.services.calendar_service import CalendarService
from clientdesk.services.export_service import records_to_csv
from clientdesk.services.templating import create_environment

logger = logging.getLogger(__name__)

REPORT_TYPES = ("invoices", "time", "tasks")


def _share(part: float, whole: float) -> float:
    """Percentage of whole, 0 when whole is 0"""
    return (part / whole) * 100 if whole else 0.0


class ReportFilter(BaseModel):
    """Period and scope of a report. Both dates are inclusive."""
    start_date: datetime.date
    end_date: datetime.date
    client_id: Optional[str] = None
    task_id: Optional[str] = None

    @model_validator(mode="after")
    def _check_range(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self

    @classmethod
    def last_days(cls, days: int = 30, today: Optional[datetime.date] = None,
                  **kwargs) -> 'ReportFilter':
        today = today or datetime.date.today()
        return cls(start_date=today - datetime.timedelta(days=days), end_date=today, **kwargs)

    @property
    def start_datetime(self) -> datetime.datetime:
        return datetime.datetime.combine(self.start_date, datetime.time.min)

    @property
    def end_datetime(self) -> datetime.datetime:
        return datetime.datetime.combine(self.end_date, datetime.time.max)


class ReportData(BaseModel):
    """Documents a report is computed from"""
    invoices: List[Invoice] = Field(default_factory=list)
    time_entries: List[TimeEntry] = Field(default_factory=list)
    tasks: List[Task] = Field(default_factory=list)
    clients: List[Client] = Field(default_factory=list)
    # Titles of every task the user owns, for entries outside the filtered tasks
    task_titles: Dict[str, str] = Field(default_factory=dict)

    def client_name(self, client_id: str) -> str:
        for client in self.clients:
            if client.id == client_id:
                return client.name
        return tr("common.unknown_client")

    def task_title(self, task_id: str) -> str:
        return self.task_titles.get(task_id) or tr("common.unknown_task")


class MonthlyInvoices(BaseModel):
    month: str
    paid: float = 0.0
    unpaid: float = 0.0
    overdue: float = 0.0


class ClientInvoices(BaseModel):
    client_id: str
    client_name: str
    count: int = 0
    amount: float = 0.0
    share: float = 0.0


class InvoiceReport(BaseModel):
    total: float = 0.0
    count: int = 0
    paid: float = 0.0
    paid_count: int = 0
    unpaid: float = 0.0
    unpaid_count: int = 0
    overdue: float = 0.0
    overdue_count: int = 0
    monthly: List[MonthlyInvoices] = Field(default_factory=list)
    by_client: List[ClientInvoices] = Field(default_factory=list)

    def share(self, amount: float) -> float:
        return _share(amount, self.total)


class ClientHours(BaseModel):
    client_id: str
    client_name: str
    hours: float = 0.0
    entries: int = 0
    share: float = 0.0
    avg_per_entry: float = 0.0


class DailyHours(BaseModel):
    day: datetime.date
    hours: float = 0.0


class Holiday(BaseModel):
    day: datetime.date
    name: str


class TimeReport(BaseModel):
    total_hours: float = 0.0
    entry_count: int = 0
    by_client: List[ClientHours] = Field(default_factory=list)
    daily: List[DailyHours] = Field(default_factory=list)
    last_day: float = 0.0
    last_week: float = 0.0
    last_month: float = 0.0
    working_days: int = 0
    avg_per_working_day: float = 0.0
    holidays: List[Holiday] = Field(default_factory=list)


class ClientTasks(BaseModel):
    client_id: str
    client_name: str
    completed: int = 0
    pending: int = 0
    overdue: int = 0

    @property
    def total(self) -> int:
        return self.completed + self.pending + self.overdue

    @property
    def rate(self) -> float:
        return _share(self.completed, self.total)


class DailyTasks(BaseModel):
    day: datetime.date
    completed: int = 0
    pending: int = 0


class TaskRow(BaseModel):
    task: Task
    client_name: str
    overdue: bool = False


class TaskReport(BaseModel):
    total: int = 0
    completed: int = 0
    pending: int = 0
    overdue: int = 0
    by_client: List[ClientTasks] = Field(default_factory=list)
    trend: List[DailyTasks] = Field(default_factory=list)
    rows: List[TaskRow] = Field(default_factory=list)

    @property
    def completion_rate(self) -> float:
        return _share(self.completed, self.total)

    @property
    def pending_share(self) -> float:
        return _share(self.pending, self.total)

    @property
    def overdue_share_of_pending(self) -> float:
        return _share(self.overdue, self.pending)


class ReportService:
    """
    Fetches, aggregates and exports the invoice, time and task reports.
    """

    def __init__(self, user_id: str, session: Optional[AsyncSession] = None,
                 preferences: Optional[Preferences] = None,
                 template_dir: Optional[Path] = None):
        """
        Initialize the report service.

        Args:
            user_id: Owner of every document the reports read
            session: Optional session shared by the repositories
            preferences: Currency and working-day calendar settings
            template_dir: Directory containing Jinja2 templates
        """
        self.user_id = user_id
        self.preferences = preferences or Preferences()
        self.invoice_repo = InvoiceRepository(user_id, session=session)
        self.entry_repo = TimeEntryRepository(user_id, session=session)
        self.task_repo = TaskRepository(user_id, session=session)
        self.client_repo = ClientRepository(user_id, session=session)
        self.calendar = CalendarService.from_preferences(self.preferences)
        self.env = create_environment(template_dir, self.preferences.currency_symbol)

    async def fetch(self, report_filter: ReportFilter) -> ReportData:
        start = report_filter.start_datetime
        end = report_filter.end_datetime
        client_id = report_filter.client_id

        invoices = await self.invoice_repo.get_all(
            client_id=client_id, created_from=start, created_to=end
        )
        entries = await self.entry_repo.get_all(
            client_id=client_id, task_id=report_filter.task_id,
            start_date=start, end_date=end
        )
        tasks = await self.task_repo.get_all(
            client_id=client_id, created_from=start, created_to=end
        )
        if report_filter.task_id:
            tasks = [t for t in tasks if t.id == report_filter.task_id]
        clients = await self.client_repo.get_all()
        all_tasks = await self.task_repo.get_all()

        logger.info(
            f"Report data {report_filter.start_date}..{report_filter.end_date}: "
            f"{len(invoices)} invoices, {len(entries)} entries, {len(tasks)} tasks"
        )
        return ReportData(
            invoices=invoices,
            time_entries=entries,
            tasks=tasks,
            clients=clients,
            task_titles={t.id: t.title for t in all_tasks},
        )

    @staticmethod
    def invoice_report(data: ReportData) -> InvoiceReport:
        report = InvoiceReport(count=len(data.invoices))
        monthly: Dict[str, MonthlyInvoices] = {}
        per_client: Dict[str, ClientInvoices] = {}

        for inv in data.invoices:
            report.total += inv.total
            if inv.status == InvoiceStatus.PAID:
                report.paid += inv.total
                report.paid_count += 1
            elif inv.status == InvoiceStatus.UNPAID:
                report.unpaid += inv.total
                report.unpaid_count += 1
            elif inv.status == InvoiceStatus.OVERDUE:
                report.overdue += inv.total
                report.overdue_count += 1

            month_key = inv.created_at.strftime("%Y-%m")
            month = monthly.setdefault(month_key, MonthlyInvoices(month=month_key))
            setattr(month, inv.status.value, getattr(month, inv.status.value) + inv.total)

            row = per_client.setdefault(inv.client_id, ClientInvoices(
                client_id=inv.client_id, client_name=data.client_name(inv.client_id)
            ))
            row.count += 1
            row.amount += inv.total

        for row in per_client.values():
            row.share = report.share(row.amount)

        report.monthly = [monthly[k] for k in sorted(monthly)]
        report.by_client = sorted(per_client.values(), key=lambda r: r.amount, reverse=True)
        return report

    def time_report(self, data: ReportData, *, report_filter: Optional[ReportFilter] = None,
                    now: Optional[datetime.datetime] = None) -> TimeReport:
        now = now or datetime.datetime.now()
        entries = data.time_entries
        report = TimeReport(
            total_hours=sum(e.hours for e in entries),
            entry_count=len(entries),
        )

        hours_by_client: Dict[str, float] = defaultdict(float)
        count_by_client: Dict[str, int] = defaultdict(int)
        hours_by_day: Dict[datetime.date, float] = defaultdict(float)
        for entry in entries:
            hours_by_client[entry.client_id] += entry.hours
            count_by_client[entry.client_id] += 1
            hours_by_day[entry.date] += entry.hours

        report.by_client = sorted(
            (
                ClientHours(
                    client_id=cid,
                    client_name=data.client_name(cid),
                    hours=hours,
                    entries=count_by_client[cid],
                    share=_share(hours, report.total_hours),
                    avg_per_entry=hours / count_by_client[cid],
                )
                for cid, hours in hours_by_client.items()
            ),
            key=lambda r: r.hours, reverse=True
        )
        report.daily = [DailyHours(day=d, hours=hours_by_day[d]) for d in sorted(hours_by_day)]

        for attr, days in (("last_day", 1), ("last_week", 7), ("last_month", 30)):
            cutoff = now - datetime.timedelta(days=days)
            setattr(report, attr, sum(e.hours for e in entries if e.start_time >= cutoff))

        if report_filter is not None:
            first, last = report_filter.start_date, report_filter.end_date
        elif entries:
            first, last = min(e.date for e in entries), max(e.date for e in entries)
        else:
            first = last = None
        if first is not None:
            report.working_days = self.calendar.get_working_days_in_range(first, last)
            if self.calendar.respect_holidays:
                report.holidays = [Holiday(day=d, name=name)
                                   for d, name in self.calendar.holidays_in_range(first, last)]
        if report.working_days:
            report.avg_per_working_day = report.total_hours / report.working_days
        return report

    @staticmethod
    def task_report(data: ReportData, now: Optional[datetime.datetime] = None) -> TaskReport:
        now = now or datetime.datetime.now()
        report = TaskReport(total=len(data.tasks))
        per_client: Dict[str, ClientTasks] = {}
        trend: Dict[datetime.date, DailyTasks] = {}
        rows: List[TaskRow] = []

        for task in data.tasks:
            overdue = task.is_overdue(now)
            if task.is_completed:
                report.completed += 1
            else:
                report.pending += 1
                if overdue:
                    report.overdue += 1

            stats = per_client.setdefault(task.client_id, ClientTasks(
                client_id=task.client_id, client_name=data.client_name(task.client_id)
            ))
            if task.is_completed:
                stats.completed += 1
            elif overdue:
                stats.overdue += 1
            else:
                stats.pending += 1

            day = task.created_at.date()
            point = trend.setdefault(day, DailyTasks(day=day))
            if task.is_completed:
                point.completed += 1
            else:
                point.pending += 1

            rows.append(TaskRow(task=task, client_name=stats.client_name, overdue=overdue))

        report.by_client = sorted(per_client.values(), key=lambda s: s.total, reverse=True)
        report.trend = [trend[d] for d in sorted(trend)]
        report.rows = sorted(rows, key=lambda r: (not r.overdue, r.task.due_date))
        return report

    @staticmethod
    def _check_type(report_type: str) -> str:
        if report_type not in REPORT_TYPES:
            raise InvalidInputError(f"Unknown report type: {report_type}")
        return report_type

    def csv_records(self, report_type: str, data: ReportData) -> List[Dict[str, Any]]:
        """Flat rows for the CSV export, one per document"""
        self._check_type(report_type)
        if report_type == "invoices":
            return [
                {
                    "ID": inv.id,
                    "Invoice Number": inv.invoice_number,
                    "Client ID": inv.client_id,
                    "Client": data.client_name(inv.client_id),
                    "Amount": f"{inv.total:.2f}",
                    "Status": inv.status.label,
                    "Due Date": inv.due_date.date().isoformat(),
                    "Created At": inv.created_at.date().isoformat(),
                }
                for inv in data.invoices
            ]
        if report_type == "time":
            return [
                {
                    "ID": e.id,
                    "Client ID": e.client_id,
                    "Client": data.client_name(e.client_id),
                    "Task": data.task_title(e.task_id),
                    "Hours": f"{e.hours:.2f}",
                    "Date": e.date.isoformat(),
                    "Notes": e.notes,
                }
                for e in data.time_entries
            ]
        return [
            {
                "ID": t.id,
                "Client ID": t.client_id,
                "Client": data.client_name(t.client_id),
                "Title": t.title,
                "Status": t.status.label,
                "Due Date": t.due_date.date().isoformat(),
                "Created At": t.created_at.date().isoformat(),
            }
            for t in data.tasks
        ]

    def export_csv(self, report_type: str, data: ReportData) -> str:
        return records_to_csv(self.csv_records(report_type, data))

    def export_html(self, report_type: str, data: ReportData,
                    report_filter: ReportFilter, user_name: str,
                    output_file: Optional[Path] = None,
                    now: Optional[datetime.datetime] = None) -> str:
        """
        Render the print-ready report.

        Args:
            report_type: 'invoices', 'time' or 'tasks'
            data: Result of fetch()
            report_filter: Filter shown in the report header
            user_name: Display name or email shown in the header
            output_file: Optional file path to save the report
            now: Generation time, defaults to now

        Returns:
            The generated report as a string
        """
        self._check_type(report_type)
        now = now or datetime.datetime.now()
        context = {
            'report_type': report_type,
            'title': tr("report.title", kind=tr(f"report.kind.{report_type}")),
            'user_name': user_name,
            'filter': report_filter,
            'client_filter': data.client_name(report_filter.client_id) if report_filter.client_id else None,
            'generated_at': now,
            'data': data,
        }
        if report_type == "invoices":
            context['invoices'] = self.invoice_report(data)
            context['invoice_rows'] = sorted(data.invoices, key=lambda i: i.created_at, reverse=True)
        elif report_type == "time":
            context['time'] = self.time_report(data, report_filter=report_filter, now=now)
            context['entry_rows'] = sorted(data.time_entries, key=lambda e: e.start_time, reverse=True)
        else:
            context['tasks'] = self.task_report(data, now)

        template = self.env.get_template("report.html")
        report_content = template.render(**context)

        # Save to file if specified
        if output_file:
            output_file = Path(output_file)
            output_file.parent.mkdir(parents=True, exist_ok=True)
            with open(output_file, 'w', encoding='utf-8') as f:
                f.write(report_content)
            logger.info(f"HTML report written to {output_file}")

        return report_content

    def export_xlsx(self, report_type: str, data: ReportData,
                    report_filter: ReportFilter, path: Path) -> Path:
        """Write the report as an .xlsx workbook, return the path"""
        from clientdesk.services.excel_report_service import ExcelReportService

        self._check_type(report_type)
        return ExcelReportService(self).generate_report(report_type, data, report_filter, path)
