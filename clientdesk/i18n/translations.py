# -*- coding: utf-8 -*-
"""
Translation dictionaries for German and English.

This module contains all translatable strings for the ClientDesk application.
"""

TRANSLATIONS = {
    "en": {
        # Application
        "app.name": "ClientDesk",
        "app.no_user": "No user given. Pass --user or set default_user_id in settings.",

        # Shared labels
        "common.unknown_client": "Unknown Client",
        "common.unknown_task": "Unknown Task",
        "common.not_available": "N/A",
        "common.no_description": "No description",

        # Clients
        "client.added": "Client added successfully",
        "client.updated": "Client updated successfully",
        "client.deleted": "Client deleted successfully",
        "client.load_failed": "Failed to load clients",
        "client.save_failed": "Failed to save client",
        "client.delete_failed": "Failed to delete client",

        # Tasks
        "task.added": "Task added successfully",
        "task.updated": "Task updated successfully",
        "task.deleted": "Task deleted successfully",
        "task.load_failed": "Failed to load tasks",
        "task.add_failed": "Failed to add task",
        "task.update_failed": "Failed to update task",
        "task.delete_failed": "Failed to delete task",

        # Time tracking
        "time.timer_started": "Timer started successfully",
        "time.timer_stopped": "Timer stopped. Duration: {duration}",
        "time.timer_running": "A timer is already running. Please stop it first.",
        "time.no_timer": "No timer is running",
        "time.entry_added": "Entry added successfully",
        "time.entry_updated": "Entry updated successfully",
        "time.entry_deleted": "Entry deleted successfully",
        "time.end_before_start": "End time must be after start time",
        "time.load_failed": "Failed to load time entries",
        "time.start_failed": "Failed to start timer",
        "time.stop_failed": "Failed to stop timer",
        "time.add_failed": "Failed to add entry",
        "time.update_failed": "Failed to update entry",
        "time.delete_failed": "Failed to delete entry",
        "time.running": "Running",
        "time.col_task": "Task",
        "time.col_client": "Client",
        "time.col_start": "Start Time",
        "time.col_end": "End Time",
        "time.col_duration": "Duration",
        "time.col_notes": "Notes",

        # Invoices
        "invoice.created": "Invoice created successfully",
        "invoice.updated": "Invoice updated successfully",
        "invoice.deleted": "Invoice deleted successfully",
        "invoice.status_updated": "Status updated successfully",
        "invoice.load_failed": "Failed to fetch invoices",
        "invoice.save_failed": "Failed to save invoice",
        "invoice.delete_failed": "Failed to delete invoice",
        "invoice.status_failed": "Failed to update status",
        "invoice.no_permission": "You do not have permission to modify this invoice",
        "invoice.title": "INVOICE",
        "invoice.client": "Client",
        "invoice.due_date": "Due Date",
        "invoice.status": "Status",
        "invoice.description": "Description",
        "invoice.quantity": "Quantity",
        "invoice.rate": "Rate",
        "invoice.amount": "Amount",
        "invoice.total": "Total",

        # Profile
        "profile.updated": "Profile updated successfully!",
        "profile.load_failed": "Failed to load profile",
        "profile.update_failed": "Failed to update profile",
        "profile.file_too_large": "File size must be less than {limit}MB",
        "profile.not_image": "Please select an image file",

        # Settings
        "settings.saved": "Settings saved to {path}",
        "settings.save_failed": "Failed to save settings",

        # Dashboard
        "dashboard.load_failed": "Failed to load dashboard data",
        "dashboard.just_now": "Just now",
        "dashboard.hour_ago": "{n} hour ago",
        "dashboard.hours_ago": "{n} hours ago",
        "dashboard.yesterday": "Yesterday",
        "dashboard.days_ago": "{n} days ago",

        # Activity feed
        "activity.client_added": "Added client {name}",
        "activity.task_completed": "Completed task {title}",
        "activity.time_logged": "Logged {duration} on {task}",
        "activity.invoice_sent": "Created invoice {number} for {client}",

        # Reports
        "report.loaded": "Reports data loaded successfully",
        "report.load_failed": "Failed to load reports data",
        "report.no_data": "No data to export",
        "report.saved_to": "Report saved to: {path}",
        "report.title": "{kind} REPORT",
        "report.kind.invoices": "INVOICES",
        "report.kind.time": "TIME",
        "report.kind.tasks": "TASKS",
        "report.user": "User",
        "report.period": "Period",
        "report.generated": "Generated",
        "report.client_filter": "Client Filter",
        "report.executive_summary": "Executive Summary",
        "report.footer_system": "Reports System",
        "report.footer_generated": "This report was automatically generated on {date} at {time}",
        "report.no_invoices": "No invoice data available for the selected period.",
        "report.no_time": "No time tracking data available for the selected period.",
        "report.no_tasks": "No task data available for the selected period.",
        "report.total_invoices": "Total Invoices",
        "report.total_billed": "Total Billed",
        "report.paid": "Paid",
        "report.unpaid": "Unpaid",
        "report.overdue": "Overdue",
        "report.invoices_count": "{count} invoices",
        "report.invoices_by_client": "Invoices by Client",
        "report.of_total_revenue": "of total revenue",
        "report.invoice_details": "Invoice Details",
        "report.invoice_id": "Invoice ID",
        "report.invoice_number": "Invoice Number",
        "report.created_date": "Created Date",
        "report.month": "Month",
        "report.monthly_breakdown": "Monthly Breakdown",
        "report.total_entries": "Total Entries",
        "report.time_logs_recorded": "Time logs recorded",
        "report.total_hours": "Total Hours",
        "report.hours_tracked": "Hours tracked",
        "report.avg_per_day": "Avg per Working Day",
        "report.hours_per_day": "Hours per day",
        "report.clients": "Clients",
        "report.active_clients": "Active clients",
        "report.hours_by_client": "Hours by Client",
        "report.hours": "Hours",
        "report.entries": "Entries",
        "report.percentage": "Percentage",
        "report.avg_per_entry": "Avg per Entry",
        "report.time_entry_details": "Time Entry Details",
        "report.date": "Date",
        "report.daily_hours": "Daily Hours",
        "report.holidays": "Public Holidays in Period",
        "report.holiday": "Holiday",
        "report.total_tasks": "Total Tasks",
        "report.all_tasks": "All tasks",
        "report.completed": "Completed",
        "report.pending": "Pending",
        "report.completion_rate": "Completion Rate",
        "report.of_total": "of total",
        "report.of_pending": "of pending",
        "report.tasks_by_client": "Tasks by Client",
        "report.task_details": "Task Details",
        "report.task": "Task",
        "report.total": "Total",
        "report.overdue_badge": "OVERDUE",
        "report.sheet_summary": "Summary",
        "report.sheet_details": "Details",
        "report.sheet_by_client": "By Client",
    },
    "de": {
        # Application
        "app.name": "ClientDesk",
        "app.no_user": "Kein Benutzer angegeben. --user übergeben oder default_user_id konfigurieren.",

        # Shared labels
        "common.unknown_client": "Unbekannter Kunde",
        "common.unknown_task": "Unbekannte Aufgabe",
        "common.not_available": "k. A.",
        "common.no_description": "Keine Beschreibung",

        # Clients
        "client.added": "Kunde erfolgreich angelegt",
        "client.updated": "Kunde erfolgreich aktualisiert",
        "client.deleted": "Kunde erfolgreich gelöscht",
        "client.load_failed": "Kunden konnten nicht geladen werden",
        "client.save_failed": "Kunde konnte nicht gespeichert werden",
        "client.delete_failed": "Kunde konnte nicht gelöscht werden",

        # Tasks
        "task.added": "Aufgabe erfolgreich angelegt",
        "task.updated": "Aufgabe erfolgreich aktualisiert",
        "task.deleted": "Aufgabe erfolgreich gelöscht",
        "task.load_failed": "Aufgaben konnten nicht geladen werden",
        "task.add_failed": "Aufgabe konnte nicht angelegt werden",
        "task.update_failed": "Aufgabe konnte nicht aktualisiert werden",
        "task.delete_failed": "Aufgabe konnte nicht gelöscht werden",

        # Time tracking
        "time.timer_started": "Timer erfolgreich gestartet",
        "time.timer_stopped": "Timer gestoppt. Dauer: {duration}",
        "time.timer_running": "Es läuft bereits ein Timer. Bitte zuerst stoppen.",
        "time.no_timer": "Es läuft kein Timer",
        "time.entry_added": "Eintrag erfolgreich hinzugefügt",
        "time.entry_updated": "Eintrag erfolgreich aktualisiert",
        "time.entry_deleted": "Eintrag erfolgreich gelöscht",
        "time.end_before_start": "Endzeit muss nach der Startzeit liegen",
        "time.load_failed": "Zeiteinträge konnten nicht geladen werden",
        "time.start_failed": "Timer konnte nicht gestartet werden",
        "time.stop_failed": "Timer konnte nicht gestoppt werden",
        "time.add_failed": "Eintrag konnte nicht hinzugefügt werden",
        "time.update_failed": "Eintrag konnte nicht aktualisiert werden",
        "time.delete_failed": "Eintrag konnte nicht gelöscht werden",
        "time.running": "Läuft",
        "time.col_task": "Aufgabe",
        "time.col_client": "Kunde",
        "time.col_start": "Beginn",
        "time.col_end": "Ende",
        "time.col_duration": "Dauer",
        "time.col_notes": "Notizen",

        # Invoices
        "invoice.created": "Rechnung erfolgreich erstellt",
        "invoice.updated": "Rechnung erfolgreich aktualisiert",
        "invoice.deleted": "Rechnung erfolgreich gelöscht",
        "invoice.status_updated": "Status erfolgreich aktualisiert",
        "invoice.load_failed": "Rechnungen konnten nicht geladen werden",
        "invoice.save_failed": "Rechnung konnte nicht gespeichert werden",
        "invoice.delete_failed": "Rechnung konnte nicht gelöscht werden",
        "invoice.status_failed": "Status konnte nicht aktualisiert werden",
        "invoice.no_permission": "Keine Berechtigung, diese Rechnung zu ändern",
        "invoice.title": "RECHNUNG",
        "invoice.client": "Kunde",
        "invoice.due_date": "Fällig am",
        "invoice.status": "Status",
        "invoice.description": "Beschreibung",
        "invoice.quantity": "Menge",
        "invoice.rate": "Satz",
        "invoice.amount": "Betrag",
        "invoice.total": "Summe",

        # Profile
        "profile.updated": "Profil erfolgreich aktualisiert!",
        "profile.load_failed": "Profil konnte nicht geladen werden",
        "profile.update_failed": "Profil konnte nicht aktualisiert werden",
        "profile.file_too_large": "Die Datei muss kleiner als {limit}MB sein",
        "profile.not_image": "Bitte eine Bilddatei auswählen",

        # Settings
        "settings.saved": "Einstellungen gespeichert in {path}",
        "settings.save_failed": "Einstellungen konnten nicht gespeichert werden",

        # Dashboard
        "dashboard.load_failed": "Dashboard-Daten konnten nicht geladen werden",
        "dashboard.just_now": "Gerade eben",
        "dashboard.hour_ago": "vor {n} Stunde",
        "dashboard.hours_ago": "vor {n} Stunden",
        "dashboard.yesterday": "Gestern",
        "dashboard.days_ago": "vor {n} Tagen",

        # Activity feed
        "activity.client_added": "Kunde {name} angelegt",
        "activity.task_completed": "Aufgabe {title} abgeschlossen",
        "activity.time_logged": "{duration} auf {task} erfasst",
        "activity.invoice_sent": "Rechnung {number} für {client} erstellt",

        # Reports
        "report.loaded": "Berichtsdaten erfolgreich geladen",
        "report.load_failed": "Berichtsdaten konnten nicht geladen werden",
        "report.no_data": "Keine Daten zum Exportieren",
        "report.saved_to": "Bericht gespeichert unter: {path}",
        "report.title": "{kind}-BERICHT",
        "report.kind.invoices": "RECHNUNGS",
        "report.kind.time": "ZEIT",
        "report.kind.tasks": "AUFGABEN",
        "report.user": "Benutzer",
        "report.period": "Zeitraum",
        "report.generated": "Erstellt",
        "report.client_filter": "Kundenfilter",
        "report.executive_summary": "Zusammenfassung",
        "report.footer_system": "Berichtssystem",
        "report.footer_generated": "Dieser Bericht wurde am {date} um {time} automatisch erstellt",
        "report.no_invoices": "Keine Rechnungsdaten im gewählten Zeitraum.",
        "report.no_time": "Keine Zeiterfassungsdaten im gewählten Zeitraum.",
        "report.no_tasks": "Keine Aufgabendaten im gewählten Zeitraum.",
        "report.total_invoices": "Rechnungen gesamt",
        "report.total_billed": "Gesamt abgerechnet",
        "report.paid": "Bezahlt",
        "report.unpaid": "Offen",
        "report.overdue": "Überfällig",
        "report.invoices_count": "{count} Rechnungen",
        "report.invoices_by_client": "Rechnungen nach Kunde",
        "report.of_total_revenue": "des Gesamtumsatzes",
        "report.invoice_details": "Rechnungsdetails",
        "report.invoice_id": "Rechnungs-ID",
        "report.invoice_number": "Rechnungsnummer",
        "report.created_date": "Erstellt am",
        "report.month": "Monat",
        "report.monthly_breakdown": "Monatsübersicht",
        "report.total_entries": "Einträge gesamt",
        "report.time_logs_recorded": "Erfasste Zeiteinträge",
        "report.total_hours": "Stunden gesamt",
        "report.hours_tracked": "Erfasste Stunden",
        "report.avg_per_day": "Ø pro Arbeitstag",
        "report.hours_per_day": "Stunden pro Tag",
        "report.clients": "Kunden",
        "report.active_clients": "Aktive Kunden",
        "report.hours_by_client": "Stunden nach Kunde",
        "report.hours": "Stunden",
        "report.entries": "Einträge",
        "report.percentage": "Anteil",
        "report.avg_per_entry": "Ø pro Eintrag",
        "report.time_entry_details": "Zeiteinträge im Detail",
        "report.date": "Datum",
        "report.daily_hours": "Stunden pro Tag",
        "report.holidays": "Feiertage im Zeitraum",
        "report.holiday": "Feiertag",
        "report.total_tasks": "Aufgaben gesamt",
        "report.all_tasks": "Alle Aufgaben",
        "report.completed": "Erledigt",
        "report.pending": "Offen",
        "report.completion_rate": "Erledigungsquote",
        "report.of_total": "der Gesamtzahl",
        "report.of_pending": "der offenen",
        "report.tasks_by_client": "Aufgaben nach Kunde",
        "report.task_details": "Aufgabendetails",
        "report.task": "Aufgabe",
        "report.total": "Gesamt",
        "report.overdue_badge": "ÜBERFÄLLIG",
        "report.sheet_summary": "Übersicht",
        "report.sheet_details": "Details",
        "report.sheet_by_client": "Nach Kunde",
    },
}
