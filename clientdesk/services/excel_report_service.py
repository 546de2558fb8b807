"""
Excel Report Service using XlsxWriter.
Generates Excel reports with a Summary dashboard, a Details table and a
per-client breakdown with chart.
"""

import logging
from pathlib import Path
from typing import List, Tuple

import xlsxwriter

from clientdesk.i18n import tr
from clientdesk.services.report_service import ReportData, ReportFilter, ReportService

logger = logging.getLogger(__name__)


class ExcelReportService:
    """
    Generates .xlsx reports with:
    - Tab 1: Summary (KPI cards)
    - Tab 2: Details (one row per document)
    - Tab 3: By Client (table + column chart)
    """

    def __init__(self, report_service: ReportService):
        self.reports = report_service
        self.currency = report_service.preferences.currency_symbol

    def generate_report(self, report_type: str, data: ReportData,
                        report_filter: ReportFilter, output_path: Path) -> Path:
        """
        Generate the Excel report and save to output_path.
        Returns the path.
        """
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        workbook = xlsxwriter.Workbook(str(output_path))

        # Colors & Formats
        self.fmt = {
            'header': workbook.add_format({
                'bold': True, 'bg_color': '#1890FF', 'font_color': 'white', 'border': 1
            }),
            'date': workbook.add_format({'num_format': 'yyyy-mm-dd', 'border': 1}),
            'money': workbook.add_format({
                'num_format': f'"{self.currency}"#,##0.00', 'border': 1
            }),
            'hours': workbook.add_format({'num_format': '0.00', 'border': 1}),
            'percent': workbook.add_format({'num_format': '0.0"%"', 'border': 1}),
            'text': workbook.add_format({'border': 1}),
            'title': workbook.add_format({'bold': True, 'font_size': 20, 'font_color': '#203764'}),
            'card_header': workbook.add_format({
                'bold': True, 'font_size': 11, 'font_color': '#666666',
                'bg_color': '#F2F2F2', 'align': 'center', 'border': 1
            }),
            'card_value': workbook.add_format({
                'bold': True, 'font_size': 18, 'font_color': '#203764',
                'bg_color': 'white', 'align': 'center', 'border': 1, 'num_format': '#,##0.0#'
            }),
        }

        if report_type == "invoices":
            report = self.reports.invoice_report(data)
            cards = [
                (tr("report.total_invoices"), report.count),
                (tr("report.total_billed"), report.total),
                (tr("report.paid"), report.paid),
                (tr("report.unpaid"), report.unpaid),
                (tr("report.overdue"), report.overdue),
            ]
        elif report_type == "time":
            report = self.reports.time_report(data, report_filter=report_filter)
            cards = [
                (tr("report.total_entries"), report.entry_count),
                (tr("report.total_hours"), report.total_hours),
                (tr("report.avg_per_day"), report.avg_per_working_day),
                (tr("report.clients"), len(report.by_client)),
            ]
        else:
            report = self.reports.task_report(data)
            cards = [
                (tr("report.total_tasks"), report.total),
                (tr("report.completed"), report.completed),
                (tr("report.pending"), report.pending),
                (tr("report.overdue"), report.overdue),
                (tr("report.completion_rate"), report.completion_rate),
            ]

        # --- TAB 1: SUMMARY ---
        ws_summary = workbook.add_worksheet(tr("report.sheet_summary"))
        title = tr("report.title", kind=tr(f"report.kind.{report_type}"))
        period = f"{report_filter.start_date.isoformat()} - {report_filter.end_date.isoformat()}"
        self._create_summary_sheet(ws_summary, title, period, cards)

        # --- TAB 2: DETAILS ---
        ws_details = workbook.add_worksheet(tr("report.sheet_details"))
        getattr(self, f"_write_{report_type}_details")(ws_details, data)

        # --- TAB 3: BY CLIENT ---
        ws_clients = workbook.add_worksheet(tr("report.sheet_by_client"))
        self._create_client_sheet(workbook, ws_clients, report_type, report)

        workbook.close()
        logger.info(f"Excel {report_type} report written to {output_path}")
        return output_path

    def _create_summary_sheet(self, worksheet, title: str, period: str,
                              cards: List[Tuple[str, float]]):
        """KPI cards laid out two columns wide, one after another"""
        worksheet.hide_gridlines(2)
        worksheet.set_column('A:A', 2)
        worksheet.set_column(1, 2 * len(cards), 14)
        worksheet.set_row(1, 28)
        worksheet.set_row(4, 28)

        worksheet.write('B2', title, self.fmt['title'])
        worksheet.write('B3', period)

        for i, (label, value) in enumerate(cards):
            col = 1 + i * 2
            worksheet.merge_range(3, col, 3, col + 1, label, self.fmt['card_header'])
            worksheet.merge_range(4, col, 4, col + 1, value, self.fmt['card_value'])

    def _write_header(self, worksheet, headers: List[str], widths: List[int]):
        for col, (header, width) in enumerate(zip(headers, widths)):
            worksheet.write(0, col, header, self.fmt['header'])
            worksheet.set_column(col, col, width)
        worksheet.freeze_panes(1, 0)

    def _write_invoices_details(self, worksheet, data: ReportData):
        self._write_header(worksheet, [
            tr("report.invoice_number"), tr("invoice.client"), tr("invoice.amount"),
            tr("invoice.status"), tr("invoice.due_date"), tr("report.created_date"),
        ], [16, 28, 14, 12, 14, 14])
        for row, inv in enumerate(data.invoices, start=1):
            worksheet.write(row, 0, inv.invoice_number, self.fmt['text'])
            worksheet.write(row, 1, data.client_name(inv.client_id), self.fmt['text'])
            worksheet.write_number(row, 2, inv.total, self.fmt['money'])
            worksheet.write(row, 3, inv.status.label, self.fmt['text'])
            worksheet.write_datetime(row, 4, inv.due_date, self.fmt['date'])
            worksheet.write_datetime(row, 5, inv.created_at, self.fmt['date'])

    def _write_time_details(self, worksheet, data: ReportData):
        self._write_header(worksheet, [
            tr("report.date"), tr("invoice.client"), tr("report.task"),
            tr("report.hours"), tr("invoice.description"),
        ], [14, 28, 28, 10, 40])
        for row, entry in enumerate(data.time_entries, start=1):
            worksheet.write_datetime(row, 0, entry.start_time, self.fmt['date'])
            worksheet.write(row, 1, data.client_name(entry.client_id), self.fmt['text'])
            worksheet.write(row, 2, data.task_title(entry.task_id), self.fmt['text'])
            worksheet.write_number(row, 3, entry.hours, self.fmt['hours'])
            worksheet.write(row, 4, entry.notes, self.fmt['text'])

    def _write_tasks_details(self, worksheet, data: ReportData):
        self._write_header(worksheet, [
            tr("report.task"), tr("invoice.client"), tr("invoice.status"),
            tr("invoice.due_date"), tr("report.created_date"),
        ], [32, 28, 14, 14, 14])
        for row, task in enumerate(data.tasks, start=1):
            worksheet.write(row, 0, task.title, self.fmt['text'])
            worksheet.write(row, 1, data.client_name(task.client_id), self.fmt['text'])
            worksheet.write(row, 2, task.status.label, self.fmt['text'])
            worksheet.write_datetime(row, 3, task.due_date, self.fmt['date'])
            worksheet.write_datetime(row, 4, task.created_at, self.fmt['date'])

    def _create_client_sheet(self, workbook, worksheet, report_type: str, report):
        """Per-client table with a column chart of the leading measure"""
        if report_type == "invoices":
            headers = [tr("invoice.client"), tr("report.invoices_count", count="#"),
                       tr("invoice.amount"), tr("report.percentage")]
            rows = [(r.client_name, r.count, r.amount, r.share) for r in report.by_client]
            formats = [self.fmt['text'], self.fmt['text'], self.fmt['money'], self.fmt['percent']]
            value_col = 2
        elif report_type == "time":
            headers = [tr("invoice.client"), tr("report.hours"), tr("report.entries"),
                       tr("report.percentage"), tr("report.avg_per_entry")]
            rows = [(r.client_name, r.hours, r.entries, r.share, r.avg_per_entry)
                    for r in report.by_client]
            formats = [self.fmt['text'], self.fmt['hours'], self.fmt['text'],
                       self.fmt['percent'], self.fmt['hours']]
            value_col = 1
        else:
            headers = [tr("invoice.client"), tr("report.total"), tr("report.completed"),
                       tr("report.pending"), tr("report.overdue"), tr("report.completion_rate")]
            rows = [(r.client_name, r.total, r.completed, r.pending, r.overdue, r.rate)
                    for r in report.by_client]
            formats = [self.fmt['text']] * 5 + [self.fmt['percent']]
            value_col = 1

        self._write_header(worksheet, headers, [28] + [14] * (len(headers) - 1))
        for row, values in enumerate(rows, start=1):
            for col, value in enumerate(values):
                worksheet.write(row, col, value, formats[col])

        if rows:
            sheet_name = worksheet.get_name()
            chart = workbook.add_chart({'type': 'column'})
            chart.add_series({
                'name': headers[value_col],
                'categories': [sheet_name, 1, 0, len(rows), 0],
                'values': [sheet_name, 1, value_col, len(rows), value_col],
                'fill': {'color': '#1890FF'},
            })
            chart.set_legend({'none': True})
            chart.set_title({'name': headers[value_col]})
            worksheet.insert_chart(1, len(headers) + 1, chart, {'x_scale': 1.4, 'y_scale': 1.2})
