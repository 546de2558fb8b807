#!/usr/bin/env python

"""
ClientDesk - Command Line Entry Point

Clients, tasks, time tracking, invoices and reports for freelancers.
Authentication happens elsewhere; commands act on behalf of --user or the
configured default_user_id.

Usage:
    python main.py clients list
    python main.py tasks add --client <id> --title "Landing page" --description "..." --due 2026-02-01
    python main.py time start <task-id>
    python main.py invoices create --client <id> --item "Design:10:85" --due 2026-02-15
    python main.py reports html invoices --from 2026-01-01 --to 2026-01-31
"""

import argparse
import asyncio
import logging
import sys
from datetime import date, datetime
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent))

from clientdesk.domain.errors import ClientDeskError, InvalidInputError
from clientdesk.domain.models import InvoiceStatus, Preferences, TaskStatus
from clientdesk.i18n import get_available_languages, set_language, tr
from clientdesk.infra.config import get_settings
from clientdesk.infra.db import DatabaseEngine, init_db
from clientdesk.infra.storage import LocalFileStorage
from clientdesk.services import (
    ClientService, DashboardService, EntryFilter, InvoiceService, PhotoUpload,
    ProfileService, ReportFilter, ReportService, TaskService, TimeTrackingService,
)
from clientdesk.services.export_service import export_filename, save_export
from clientdesk.utils import setup_logging

logger = logging.getLogger("clientdesk.cli")


def _item(value: str) -> dict:
    """'Design work:10:85' -> invoice item"""
    description, _, rest = value.rpartition(":")
    description, _, quantity = description.rpartition(":")
    if not description:
        raise argparse.ArgumentTypeError("items look like 'description:quantity:rate'")
    return {"description": description, "quantity": float(quantity), "rate": float(rest)}


def _fields(args, names) -> dict:
    """Only the options the user actually passed"""
    return {name: getattr(args, name) for name in names if getattr(args, name, None) is not None}


def _output_dir(settings) -> Path:
    prefs_dir = settings.preferences.reports_directory
    return Path(prefs_dir) if prefs_dir else Path.cwd()


# --- clients ---------------------------------------------------------------

async def cmd_clients(args, ctx) -> None:
    service = ClientService(ctx.user_id)
    if args.action == "list":
        clients = service.search(await service.list_clients(), args.search or "")
        for c in clients:
            print(f"{c.id}  {c.name:<30} {c.email:<30} {c.company}")
    elif args.action == "add":
        await service.create_client(_fields(args, ("name", "email", "phone", "company", "address")))
        print(tr("client.added"))
    elif args.action == "update":
        await service.update_client(args.id, _fields(args, ("name", "email", "phone", "company", "address")))
        print(tr("client.updated"))
    elif args.action == "delete":
        await service.delete_client(args.id)
        print(tr("client.deleted"))


# --- tasks -----------------------------------------------------------------

async def cmd_tasks(args, ctx) -> None:
    service = TaskService(ctx.user_id)
    if args.action == "list":
        names = await ClientService(ctx.user_id).client_names()
        for t in await service.list_tasks(status=args.status, client_id=args.client_id):
            flag = "!" if t.is_overdue() else " "
            client = names.get(t.client_id) or tr("common.unknown_client")
            print(f"{t.id} {flag} {t.status.label:<12} {t.due_date:%Y-%m-%d}  {t.title} ({client})")
    elif args.action == "add":
        await service.create_task(_fields(args, ("client_id", "title", "description", "status", "due_date")))
        print(tr("task.added"))
    elif args.action == "update":
        await service.update_task(args.id, _fields(args, ("client_id", "title", "description", "status", "due_date")))
        print(tr("task.updated"))
    elif args.action == "delete":
        await service.delete_task(args.id)
        print(tr("task.deleted"))


# --- time tracking ---------------------------------------------------------

async def cmd_time(args, ctx) -> None:
    service = TimeTrackingService(ctx.user_id)
    if args.action in ("list", "export"):
        task_titles, client_names = await service.lookups()
        entries = service.filter_entries(
            await service.list_entries(),
            EntryFilter(text=args.search or "", start_date=args.start_date,
                        end_date=args.end_date, client_id=args.client_id, task_id=args.task_id),
            task_titles, client_names,
        )
        if args.action == "export":
            content = service.export_csv(entries, task_titles, client_names)
            path = Path(args.output) if args.output else \
                _output_dir(ctx.settings) / export_filename("time_tracking", "csv")
            save_export(content, path.name, path.parent)
            print(tr("report.saved_to", path=path))
            return
        summary = service.summary(entries)
        print(f"Today {summary.today:.1f}h | Week {summary.week:.1f}h | Month {summary.month:.1f}h")
        for e in entries:
            duration = service.duration_label(e)
            print(f"{e.id}  {e.start_time:%Y-%m-%d %H:%M}  {duration:<9} "
                  f"{task_titles.get(e.task_id, tr('common.unknown_task'))} "
                  f"({client_names.get(e.client_id, tr('common.unknown_client'))}) {e.notes}")
    elif args.action == "status":
        active = await service.active_timer()
        if active is None:
            print(tr("time.no_timer"))
        else:
            print(f"{active.id}  {service.format_elapsed(service.elapsed_seconds(active))}")
    elif args.action == "start":
        await service.start_timer(args.task_id, notes=args.notes or "")
        print(tr("time.timer_started"))
    elif args.action == "stop":
        entry = await service.stop_timer()
        print(tr("time.timer_stopped", duration=service.format_duration(entry.duration_minutes)))
    elif args.action == "add":
        await service.add_entry(_fields(args, ("task_id", "client_id", "start_time", "end_time", "notes")))
        print(tr("time.entry_added"))
    elif args.action == "update":
        await service.update_entry(args.id, _fields(args, ("task_id", "client_id", "start_time", "end_time", "notes")))
        print(tr("time.entry_updated"))
    elif args.action == "delete":
        await service.delete_entry(args.id)
        print(tr("time.entry_deleted"))


# --- invoices --------------------------------------------------------------

async def cmd_invoices(args, ctx) -> None:
    service = InvoiceService(ctx.user_id, preferences=ctx.settings.preferences)
    if args.action == "list":
        invoices = service.filter_invoices(
            await service.list_invoices(), args.status, args.client_id, args.search or ""
        )
        for inv in invoices:
            print(f"{inv.id}  {inv.invoice_number}  {inv.status.label:<8} "
                  f"{inv.total:>10.2f}  {inv.due_date:%Y-%m-%d}  {inv.client_name}")
    elif args.action == "create":
        await service.create_invoice(_fields(args, ("client_id", "items", "status", "due_date")))
        print(tr("invoice.created"))
    elif args.action == "update":
        await service.update_invoice(args.id, _fields(args, ("client_id", "items", "status", "due_date")))
        print(tr("invoice.updated"))
    elif args.action == "status":
        await service.update_status(args.id, args.status)
        print(tr("invoice.status_updated"))
    elif args.action == "delete":
        await service.delete_invoice(args.id)
        print(tr("invoice.deleted"))
    elif args.action in ("html", "pdf"):
        invoice = await service.get_invoice(args.id)
        content = service.render_html(invoice) if args.action == "html" else service.render_pdf(invoice)
        path = Path(args.output or _output_dir(ctx.settings) / f"{invoice.invoice_number}.{args.action}")
        save_export(content, path.name, path.parent)
        print(tr("report.saved_to", path=path))


# --- dashboard -------------------------------------------------------------

async def cmd_dashboard(args, ctx) -> None:
    service = DashboardService(ctx.user_id, preferences=ctx.settings.preferences)
    stats = await service.stats()
    symbol = ctx.settings.preferences.currency_symbol
    print(f"Clients: {stats.total_clients} (+{stats.clients_this_month} this month)")
    print(f"Active tasks: {stats.active_tasks}")
    print(f"Hours this month: {stats.hours_this_month}")
    print(f"Unpaid invoices: {stats.unpaid_invoices} ({symbol}{stats.unpaid_amount:,.2f})")
    print()
    for project in await service.active_projects():
        print(f"  {project.task.due_date:%b %d}  {project.task.title} - {project.client_name}")
    print()
    for activity in await service.recent_activities():
        print(f"  {service.relative_time(activity.timestamp):<14} {activity.description}")


# --- reports ---------------------------------------------------------------

async def cmd_reports(args, ctx) -> None:
    service = ReportService(ctx.user_id, preferences=ctx.settings.preferences)
    if args.start_date or args.end_date:
        report_filter = ReportFilter(
            start_date=args.start_date or args.end_date,
            end_date=args.end_date or date.today(),
            client_id=args.client_id, task_id=args.task_id,
        )
    else:
        report_filter = ReportFilter.last_days(30, client_id=args.client_id, task_id=args.task_id)

    data = await service.fetch(report_filter)
    names = {"invoices": "invoices_report", "time": "time_tracking_report", "tasks": "tasks_report"}
    path = Path(args.output) if args.output else \
        _output_dir(ctx.settings) / export_filename(names[args.report_type], args.format)

    if args.format == "csv":
        save_export(service.export_csv(args.report_type, data), path.name, path.parent)
    elif args.format == "html":
        user_name = ctx.user_id
        try:
            profile = await ProfileService(ctx.user_id, ctx.storage).get_profile()
            user_name = profile.display_name or profile.email or ctx.user_id
        except ClientDeskError:
            logger.debug("No profile document, using the user id in the report header")
        service.export_html(args.report_type, data, report_filter, user_name, output_file=path)
    else:
        service.export_xlsx(args.report_type, data, report_filter, path)
    print(tr("report.saved_to", path=path))


# --- profile ---------------------------------------------------------------

async def cmd_profile(args, ctx) -> None:
    service = ProfileService(ctx.user_id, ctx.storage, preferences=ctx.settings.preferences)
    if args.action == "show":
        profile = await service.get_profile()
        print(f"{profile.uid}  {profile.display_name}  <{profile.email}>")
        if profile.photo_url:
            print(profile.photo_url)
    elif args.action == "register":
        await service.register(args.email, args.name or "")
        print(tr("profile.updated"))
    elif args.action == "update":
        photo = PhotoUpload.from_path(args.photo) if args.photo else None
        await service.update_profile(args.name, photo)
        print(tr("profile.updated"))


async def cmd_init_db(args, ctx) -> None:
    print(f"Database ready: {ctx.settings.get_db_url()}")


async def cmd_settings(args, ctx) -> None:
    settings = ctx.settings
    if args.action == "show":
        for key, value in settings.preferences.model_dump().items():
            print(f"{key:<26} {value}")
        print()
        print("Languages: " + ", ".join(f"{code} ({name})" for code, name in get_available_languages()))
    else:
        values = settings.preferences.model_dump()
        if args.key not in values:
            raise InvalidInputError(f"Unknown preference: {args.key}")
        values[args.key] = args.value
        settings.preferences = Preferences(**values)
        settings.save_preferences()
        print(tr("settings.saved", path=settings.config_dir / "settings.yaml"))


COMMANDS = {
    "clients": (cmd_clients, "client.save_failed"),
    "tasks": (cmd_tasks, "task.update_failed"),
    "time": (cmd_time, "time.update_failed"),
    "invoices": (cmd_invoices, "invoice.save_failed"),
    "dashboard": (cmd_dashboard, "dashboard.load_failed"),
    "reports": (cmd_reports, "report.load_failed"),
    "profile": (cmd_profile, "profile.update_failed"),
    "init-db": (cmd_init_db, "report.load_failed"),
    "settings": (cmd_settings, "settings.save_failed"),
}

# Finer-grained failure messages per (command, action)
FAILURE_KEYS = {
    ("clients", "list"): "client.load_failed",
    ("clients", "delete"): "client.delete_failed",
    ("tasks", "list"): "task.load_failed",
    ("tasks", "add"): "task.add_failed",
    ("tasks", "delete"): "task.delete_failed",
    ("time", "list"): "time.load_failed",
    ("time", "start"): "time.start_failed",
    ("time", "stop"): "time.stop_failed",
    ("time", "add"): "time.add_failed",
    ("time", "delete"): "time.delete_failed",
    ("invoices", "list"): "invoice.load_failed",
    ("invoices", "status"): "invoice.status_failed",
    ("invoices", "delete"): "invoice.delete_failed",
    ("profile", "show"): "profile.load_failed",
}


class Context:
    def __init__(self, user_id: str, settings):
        self.user_id = user_id
        self.settings = settings
        self.storage = LocalFileStorage(settings.storage_dir)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="clientdesk",
        description="Clients, tasks, time tracking, invoices and reports",
    )
    parser.add_argument("--user", help="Authenticated user id (defaults to settings.default_user_id)")
    parser.add_argument("--lang", choices=["auto", "en", "de"], help="Message language")
    parser.add_argument("--log-level", help="DEBUG, INFO, WARNING, ...")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init-db", help="Create the database tables")
    sub.add_parser("dashboard", help="Headline figures and recent activity")

    settings_cmd = sub.add_parser("settings", help="Show or change preferences").add_subparsers(dest="action", required=True)
    settings_cmd.add_parser("show")
    p = settings_cmd.add_parser("set")
    p.add_argument("key")
    p.add_argument("value")

    # clients
    clients = sub.add_parser("clients", help="Manage clients").add_subparsers(dest="action", required=True)
    p = clients.add_parser("list")
    p.add_argument("--search")
    for name in ("add", "update"):
        p = clients.add_parser(name)
        if name == "update":
            p.add_argument("id")
        p.add_argument("--name", required=(name == "add"))
        p.add_argument("--email")
        p.add_argument("--phone")
        p.add_argument("--company")
        p.add_argument("--address")
    clients.add_parser("delete").add_argument("id")

    # tasks
    tasks = sub.add_parser("tasks", help="Manage tasks").add_subparsers(dest="action", required=True)
    p = tasks.add_parser("list")
    p.add_argument("--status", choices=["all"] + [s.value for s in TaskStatus])
    p.add_argument("--client", dest="client_id")
    for name in ("add", "update"):
        p = tasks.add_parser(name)
        required = name == "add"
        if name == "update":
            p.add_argument("id")
        p.add_argument("--client", dest="client_id", required=required)
        p.add_argument("--title", required=required)
        p.add_argument("--description", required=required)
        p.add_argument("--due", dest="due_date", type=datetime.fromisoformat, required=required)
        p.add_argument("--status", choices=[s.value for s in TaskStatus])
    tasks.add_parser("delete").add_argument("id")

    # time
    time_cmd = sub.add_parser("time", help="Timer and time entries").add_subparsers(dest="action", required=True)
    for name in ("list", "export"):
        p = time_cmd.add_parser(name)
        p.add_argument("--search")
        p.add_argument("--from", dest="start_date", type=date.fromisoformat)
        p.add_argument("--to", dest="end_date", type=date.fromisoformat)
        p.add_argument("--client", dest="client_id")
        p.add_argument("--task", dest="task_id")
        if name == "export":
            p.add_argument("--output")
    time_cmd.add_parser("status")
    p = time_cmd.add_parser("start")
    p.add_argument("task_id")
    p.add_argument("--notes")
    time_cmd.add_parser("stop")
    for name in ("add", "update"):
        p = time_cmd.add_parser(name)
        required = name == "add"
        if name == "update":
            p.add_argument("id")
        p.add_argument("--task", dest="task_id", required=required)
        p.add_argument("--client", dest="client_id")
        p.add_argument("--start", dest="start_time", type=datetime.fromisoformat, required=required)
        p.add_argument("--end", dest="end_time", type=datetime.fromisoformat, required=required)
        p.add_argument("--notes")
    time_cmd.add_parser("delete").add_argument("id")

    # invoices
    invoices = sub.add_parser("invoices", help="Manage invoices").add_subparsers(dest="action", required=True)
    p = invoices.add_parser("list")
    p.add_argument("--status", choices=["all"] + [s.value for s in InvoiceStatus])
    p.add_argument("--client", dest="client_id")
    p.add_argument("--search")
    for name in ("create", "update"):
        p = invoices.add_parser(name)
        required = name == "create"
        if name == "update":
            p.add_argument("id")
        p.add_argument("--client", dest="client_id", required=required)
        p.add_argument("--item", dest="items", type=_item, action="append", required=required,
                       help="description:quantity:rate, repeatable")
        p.add_argument("--due", dest="due_date", type=datetime.fromisoformat, required=required)
        p.add_argument("--status", choices=[s.value for s in InvoiceStatus])
    p = invoices.add_parser("status")
    p.add_argument("id")
    p.add_argument("status", choices=[s.value for s in InvoiceStatus])
    invoices.add_parser("delete").add_argument("id")
    for name in ("html", "pdf"):
        p = invoices.add_parser(name, help=f"Render a printable invoice as {name.upper()}")
        p.add_argument("id")
        p.add_argument("--output")

    # reports
    p = sub.add_parser("reports", help="Export invoice, time or task reports")
    p.add_argument("format", choices=["csv", "html", "xlsx"])
    p.add_argument("report_type", choices=["invoices", "time", "tasks"])
    p.add_argument("--from", dest="start_date", type=date.fromisoformat)
    p.add_argument("--to", dest="end_date", type=date.fromisoformat)
    p.add_argument("--client", dest="client_id")
    p.add_argument("--task", dest="task_id")
    p.add_argument("--output")

    # profile
    profile = sub.add_parser("profile", help="User profile").add_subparsers(dest="action", required=True)
    profile.add_parser("show")
    p = profile.add_parser("register")
    p.add_argument("--email", required=True)
    p.add_argument("--name")
    p = profile.add_parser("update")
    p.add_argument("--name", required=True)
    p.add_argument("--photo", type=Path)

    return parser


async def run(args, ctx) -> int:
    handler, failure_key = COMMANDS[args.command]
    failure_key = FAILURE_KEYS.get((args.command, getattr(args, "action", None)), failure_key)
    try:
        await init_db(ctx.settings.get_db_url())
        await handler(args, ctx)
        return 0
    except (ClientDeskError, ValueError, OSError) as e:
        logger.error(f"{args.command} failed: {e}")
        print(f"{tr(failure_key)}: {e}", file=sys.stderr)
        return 1
    finally:
        await DatabaseEngine.dispose_instance()


def main(argv=None) -> int:
    """Main entry point"""
    args = build_parser().parse_args(argv)
    settings = get_settings()
    setup_logging(args.log_level or settings.log_level)
    set_language(args.lang or settings.preferences.language)

    user_id = args.user or settings.default_user_id
    if not user_id and args.command not in ("init-db", "settings"):
        print(tr("app.no_user"), file=sys.stderr)
        return 2

    return asyncio.run(run(args, Context(user_id, settings)))


if __name__ == "__main__":
    sys.exit(main())
