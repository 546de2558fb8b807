"""Services layer - Business logic"""

from .activity_service import ActivityService
from .calendar_service import CalendarService
from .client_service import ClientService
from .dashboard_service import DashboardService
from .excel_report_service import ExcelReportService
from .invoice_service import InvoiceService
from .profile_service import PhotoUpload, ProfileService
from .report_service import ReportFilter, ReportService
from .task_service import TaskService
from .time_tracking_service import EntryFilter, TimeTrackingService

__all__ = [
    "ActivityService", "CalendarService", "ClientService", "DashboardService",
    "ExcelReportService", "InvoiceService", "PhotoUpload", "ProfileService",
    "ReportFilter", "ReportService", "TaskService", "EntryFilter",
    "TimeTrackingService",
]
