"""
Tests for domain models: validation, derived fields and lenient enums.
"""

from datetime import datetime

import pytest
from pydantic import ValidationError

from clientdesk.domain.models import (
    ActivityType, Client, Invoice, InvoiceItem, InvoiceStatus, Task, TaskStatus, TimeEntry,
)


class TestClient:

    def test_fields_are_trimmed(self):
        client = Client(name="  Acme  ", email=" a@b.co ", phone=None)
        assert client.name == "Acme"
        assert client.email == "a@b.co"
        assert client.phone == ""

    def test_blank_name_is_rejected(self):
        with pytest.raises(ValidationError):
            Client(name="   ")

    def test_name_longer_than_200_is_rejected(self):
        with pytest.raises(ValidationError):
            Client(name="x" * 201)

    def test_invalid_email_is_rejected(self):
        with pytest.raises(ValidationError):
            Client(name="Acme", email="not-an-email")

    def test_empty_email_is_allowed(self):
        assert Client(name="Acme").email == ""


class TestStatuses:

    @pytest.mark.parametrize("raw,expected", [
        ("pending", TaskStatus.PENDING),
        ("In Progress", TaskStatus.IN_PROGRESS),
        ("in-progress", TaskStatus.IN_PROGRESS),
        ("active", TaskStatus.IN_PROGRESS),
        ("COMPLETED", TaskStatus.COMPLETED),
    ])
    def test_task_status_spellings(self, raw, expected):
        assert TaskStatus(raw) is expected

    def test_unknown_status_is_rejected(self):
        with pytest.raises(ValueError):
            InvoiceStatus("cancelled")

    def test_camel_case_activity_types(self):
        assert ActivityType("clientAdded") is ActivityType.CLIENT_ADDED
        assert ActivityType("invoiceSent") is ActivityType.INVOICE_SENT

    def test_label(self):
        assert TaskStatus.IN_PROGRESS.label == "In Progress"


class TestInvoice:

    def test_item_amount_is_quantity_times_rate(self):
        item = InvoiceItem(description="Design", quantity=2.5, rate=80, amount=999)
        assert item.amount == 200.0

    def test_total_is_sum_of_amounts(self):
        invoice = Invoice(
            client_id="c1",
            items=[
                InvoiceItem(description="A", quantity=3, rate=33.33),
                InvoiceItem(description="B", quantity=1, rate=0.01),
            ],
            due_date=datetime(2026, 2, 1),
        )
        assert invoice.total == 100.0
        assert invoice.status == InvoiceStatus.UNPAID

    def test_invoice_needs_an_item(self):
        with pytest.raises(ValidationError):
            Invoice(client_id="c1", items=[], due_date=datetime(2026, 2, 1))

    def test_item_quantity_must_be_positive(self):
        with pytest.raises(ValidationError):
            InvoiceItem(description="A", quantity=0, rate=10)


class TestTaskAndEntry:

    def test_overdue_only_when_open_and_past_due(self, now):
        task = Task(client_id="c1", title="T", description="d", due_date=datetime(2026, 3, 1))
        assert task.is_overdue(now)
        task.status = TaskStatus.COMPLETED
        assert not task.is_overdue(now)

    def test_running_entry(self):
        entry = TimeEntry(task_id="t1", start_time=datetime(2026, 3, 18, 9))
        assert entry.is_running
        assert entry.hours == 0

    def test_entry_hours(self):
        entry = TimeEntry(task_id="t1", start_time=datetime(2026, 3, 18, 9),
                          end_time=datetime(2026, 3, 18, 10, 30), duration_minutes=90)
        assert not entry.is_running
        assert entry.hours == 1.5
        assert entry.date == datetime(2026, 3, 18).date()
