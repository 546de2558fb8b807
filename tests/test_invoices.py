"""
Tests for invoices: numbering, totals, ownership checks and rendering.
"""

from datetime import datetime

import pytest
import pytest_asyncio

from clientdesk.domain.errors import NotFoundError, PermissionDeniedError
from clientdesk.domain.models import ActivityType, Invoice, InvoiceItem, InvoiceStatus, Preferences
from clientdesk.services import ActivityService, ClientService, InvoiceService

from conftest import OTHER_USER, USER


def _invoice_data(client_id, **overrides):
    data = {
        "client_id": client_id,
        "items": [
            {"description": "Design", "quantity": 10, "rate": 85},
            {"description": "Hosting", "quantity": 1, "rate": 19.99},
        ],
        "due_date": datetime(2026, 4, 15),
    }
    data.update(overrides)
    return data


@pytest_asyncio.fixture
async def client(db_session):
    return await ClientService(USER, session=db_session).create_client({"name": "Acme"})


class TestNumbering:

    def _invoice(self, number):
        return Invoice(invoice_number=number, client_id="c",
                       items=[InvoiceItem(description="x", quantity=1, rate=1)],
                       due_date=datetime(2026, 1, 1))

    def test_first_invoice(self):
        assert InvoiceService.next_invoice_number([]) == "INV-0001"

    def test_follows_highest_number(self):
        invoices = [self._invoice("INV-0003"), self._invoice("INV-0010"), self._invoice("INV-0002")]
        assert InvoiceService.next_invoice_number(invoices) == "INV-0011"

    def test_unparseable_numbers_count_as_zero(self):
        invoices = [self._invoice("DRAFT"), self._invoice("INV-abc")]
        assert InvoiceService.next_invoice_number(invoices) == "INV-0001"


@pytest.mark.asyncio
async def test_create_invoice(db_session, client):
    service = InvoiceService(USER, session=db_session)

    first = await service.create_invoice(_invoice_data(client.id))
    second = await service.create_invoice(_invoice_data(client.id))

    assert first.invoice_number == "INV-0001"
    assert second.invoice_number == "INV-0002"
    assert first.total == 869.99
    assert first.status == InvoiceStatus.UNPAID
    assert first.client_name == "Acme"

    logs = await ActivityService(USER, session=db_session).recent()
    assert logs[0].type == ActivityType.INVOICE_SENT
    assert logs[0].description == "Created invoice INV-0002 for Acme"


@pytest.mark.asyncio
async def test_update_keeps_number_and_recomputes_total(db_session, client):
    service = InvoiceService(USER, session=db_session)
    invoice = await service.create_invoice(_invoice_data(client.id))

    updated = await service.update_invoice(invoice.id, {
        "items": [{"description": "Design", "quantity": 2, "rate": 100}],
    })
    assert updated.invoice_number == invoice.invoice_number
    assert updated.created_at == invoice.created_at
    assert updated.total == 200.0


@pytest.mark.asyncio
async def test_status_update_and_delete(db_session, client):
    service = InvoiceService(USER, session=db_session)
    invoice = await service.create_invoice(_invoice_data(client.id))

    paid = await service.update_status(invoice.id, "paid")
    assert paid.status == InvoiceStatus.PAID

    await service.delete_invoice(invoice.id)
    with pytest.raises(NotFoundError):
        await service.get_invoice(invoice.id)


@pytest.mark.asyncio
async def test_other_users_cannot_touch_an_invoice(db_session, client):
    invoice = await InvoiceService(USER, session=db_session).create_invoice(_invoice_data(client.id))
    intruder = InvoiceService(OTHER_USER, session=db_session)

    assert await intruder.list_invoices() == []
    with pytest.raises(PermissionDeniedError):
        await intruder.update_status(invoice.id, InvoiceStatus.PAID)
    with pytest.raises(PermissionDeniedError):
        await intruder.delete_invoice(invoice.id)
    with pytest.raises(PermissionDeniedError):
        await intruder.update_invoice(invoice.id, {"status": "paid"})

    unchanged = await InvoiceService(USER, session=db_session).get_invoice(invoice.id)
    assert unchanged.status == InvoiceStatus.UNPAID


def test_filter_invoices():
    def make(number, status, client_id, name):
        return Invoice(invoice_number=number, status=status, client_id=client_id, client_name=name,
                       items=[InvoiceItem(description="x", quantity=1, rate=10)],
                       due_date=datetime(2026, 1, 1))

    invoices = [
        make("INV-0001", "paid", "c1", "Acme"),
        make("INV-0002", "unpaid", "c1", "Acme"),
        make("INV-0003", "overdue", "c2", "Globex"),
    ]
    assert len(InvoiceService.filter_invoices(invoices, "all", "all")) == 3
    assert [i.invoice_number for i in InvoiceService.filter_invoices(invoices, "paid")] == ["INV-0001"]
    assert len(InvoiceService.filter_invoices(invoices, client_id="c1")) == 2
    assert [i.invoice_number for i in InvoiceService.filter_invoices(invoices, text="glob")] == ["INV-0003"]
    assert len(InvoiceService.filter_invoices(invoices, text="inv-000")) == 3


class TestRendering:

    def _invoice(self):
        return Invoice(
            invoice_number="INV-0007", client_id="c1", client_name="Acme <Labs>",
            items=[InvoiceItem(description="Design & build", quantity=2, rate=1250)],
            due_date=datetime(2026, 4, 15),
        )

    def test_html(self):
        html = InvoiceService(USER).render_html(self._invoice())
        assert "INV-0007" in html
        assert "Acme &lt;Labs&gt;" in html
        assert "Design &amp; build" in html
        assert "$2,500.00" in html
        assert "Apr 15, 2026" in html

    def test_html_uses_currency_preference(self):
        service = InvoiceService(USER, preferences=Preferences(currency_symbol="€"))
        assert "€2,500.00" in service.render_html(self._invoice())

    def test_pdf(self):
        pdf = InvoiceService(USER).render_pdf(self._invoice())
        assert pdf.startswith(b"%PDF")
        assert len(pdf) > 1000
