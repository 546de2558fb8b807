"""
Invoice management: the `invoices` collection and printable invoices.

Edits, status changes and deletes check ownership first, so a document id
belonging to someone else is refused rather than silently missed.
"""

import io
import logging
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_RIGHT
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle
from sqlalchemy.ext.asyncio import AsyncSession

from clientdesk.domain.errors import NotFoundError, PermissionDeniedError
from clientdesk.domain.models import (
    ActivityType, Invoice, InvoiceItem, InvoiceStatus, Preferences,
)
from clientdesk.i18n import tr
from clientdesk.infra.repository import ClientRepository, InvoiceRepository
from clientdesk.services.activity_service import ActivityService
from clientdesk.services.templating import create_environment, format_date, format_money

logger = logging.getLogger(__name__)

INVOICE_PREFIX = "INV-"


class InvoiceService:
    """
    CRUD over invoices plus numbering and HTML/PDF rendering.
    """

    def __init__(self, user_id: str, session: Optional[AsyncSession] = None,
                 preferences: Optional[Preferences] = None):
        self.user_id = user_id
        self.preferences = preferences or Preferences()
        self.repo = InvoiceRepository(user_id, session=session)
        self.client_repo = ClientRepository(user_id, session=session)
        self.activity = ActivityService(user_id, session=session)
        self.env = create_environment(currency_symbol=self.preferences.currency_symbol)

    async def list_invoices(self) -> List[Invoice]:
        """All invoices, newest first"""
        return await self.repo.get_all()

    async def get_invoice(self, invoice_id: str) -> Invoice:
        await self._check_owner(invoice_id)
        invoice = await self.repo.get_by_id(invoice_id)
        if invoice is None:
            raise NotFoundError(self.repo.collection, invoice_id)
        return invoice

    @staticmethod
    def filter_invoices(invoices: List[Invoice], status: Optional[str] = None,
                        client_id: Optional[str] = None, text: str = "") -> List[Invoice]:
        """Status and client must match exactly; "all" or None disables either"""
        filtered = list(invoices)
        if status and status != "all":
            wanted = InvoiceStatus(status)
            filtered = [inv for inv in filtered if inv.status == wanted]
        if client_id and client_id != "all":
            filtered = [inv for inv in filtered if inv.client_id == client_id]
        if text:
            needle = text.lower()
            filtered = [
                inv for inv in filtered
                if needle in inv.invoice_number.lower() or needle in inv.client_name.lower()
            ]
        return filtered

    @staticmethod
    def next_invoice_number(invoices: List[Invoice]) -> str:
        """INV- followed by the highest existing number plus one, four digits"""
        highest = 0
        for inv in invoices:
            _, _, suffix = inv.invoice_number.partition("-")
            try:
                number = int(suffix)
            except ValueError:
                number = 0
            highest = max(highest, number)
        return f"{INVOICE_PREFIX}{highest + 1:04d}"

    async def _check_owner(self, invoice_id: str) -> None:
        owner = await self.repo.owner_of(invoice_id)
        if owner is None:
            raise NotFoundError(self.repo.collection, invoice_id)
        if owner != self.user_id:
            logger.warning(f"User {self.user_id} tried to modify invoice {invoice_id}")
            raise PermissionDeniedError(tr("invoice.no_permission"))

    async def _client_name(self, client_id: str) -> str:
        client = await self.client_repo.get_by_id(client_id)
        return client.name if client else ""

    @staticmethod
    def _items(data: Mapping[str, Any]) -> List[InvoiceItem]:
        return [
            item if isinstance(item, InvoiceItem) else InvoiceItem(**item)
            for item in data.get("items") or []
        ]

    async def create_invoice(self, data: Mapping[str, Any]) -> Invoice:
        existing = await self.repo.get_all()
        invoice = Invoice(
            invoice_number=self.next_invoice_number(existing),
            client_id=data.get("client_id", ""),
            client_name=await self._client_name(data.get("client_id", "")),
            items=self._items(data),
            status=data.get("status") or InvoiceStatus.UNPAID,
            due_date=data.get("due_date"),
            created_at=datetime.now()
        )
        created = await self.repo.create(invoice)
        logger.info(f"Created invoice {created.invoice_number} total={created.total:.2f}")
        await self.activity.log(
            ActivityType.INVOICE_SENT,
            tr("activity.invoice_sent", number=created.invoice_number,
               client=created.client_name or tr("common.unknown_client")),
            {"invoice_id": created.id, "total": created.total},
        )
        return created

    async def update_invoice(self, invoice_id: str, data: Mapping[str, Any]) -> Invoice:
        """Number and creation date are kept; everything else comes from data"""
        current = await self.get_invoice(invoice_id)
        values: Dict[str, Any] = current.model_dump()
        for key in ("client_id", "status", "due_date"):
            if data.get(key) is not None:
                values[key] = data[key]
        if data.get("items"):
            values["items"] = self._items(data)
        values["client_name"] = await self._client_name(values["client_id"])

        updated = await self.repo.update(Invoice(**values))
        logger.info(f"Updated invoice {updated.invoice_number}")
        return updated

    async def update_status(self, invoice_id: str, status: InvoiceStatus) -> Invoice:
        await self._check_owner(invoice_id)
        await self.repo.update_status(invoice_id, InvoiceStatus(status))
        logger.info(f"Invoice {invoice_id} marked {InvoiceStatus(status).value}")
        return await self.repo.get_by_id(invoice_id)

    async def delete_invoice(self, invoice_id: str) -> None:
        await self._check_owner(invoice_id)
        await self.repo.delete(invoice_id)
        logger.info(f"Deleted invoice {invoice_id}")

    def render_html(self, invoice: Invoice) -> str:
        """Printable invoice document"""
        template = self.env.get_template("invoice.html")
        return template.render(
            invoice=invoice,
            client_name=invoice.client_name or tr("common.not_available"),
        )

    def render_pdf(self, invoice: Invoice) -> bytes:
        """The same content as render_html, laid out with ReportLab"""
        symbol = self.preferences.currency_symbol
        buf = io.BytesIO()
        doc = SimpleDocTemplate(buf, pagesize=letter, rightMargin=72, leftMargin=72,
                                topMargin=72, bottomMargin=36,
                                title=f"Invoice {invoice.invoice_number}")
        styles = getSampleStyleSheet()
        styles.add(ParagraphStyle(name='InvCenter', parent=styles['Title'], alignment=TA_CENTER))
        styles.add(ParagraphStyle(name='InvTotal', parent=styles['Heading3'], alignment=TA_RIGHT))
        story = [
            Paragraph(tr("invoice.title"), styles['InvCenter']),
            Paragraph(invoice.invoice_number, styles['Heading2']),
            Spacer(1, 12),
        ]

        details = [
            [f"{tr('invoice.client')}:", invoice.client_name or tr("common.not_available")],
            [f"{tr('invoice.due_date')}:", format_date(invoice.due_date)],
            [f"{tr('invoice.status')}:", invoice.status.label],
        ]
        dtable = Table(details, colWidths=[100, 368])
        dtable.setStyle(TableStyle([
            ('FONTNAME', (0, 0), (0, -1), 'Helvetica-Bold'),
            ('ALIGN', (0, 0), (-1, -1), 'LEFT'),
        ]))
        story.append(dtable)
        story.append(Spacer(1, 18))

        rows = [[tr("invoice.description"), tr("invoice.quantity"),
                 tr("invoice.rate"), tr("invoice.amount")]]
        for item in invoice.items:
            rows.append([
                Paragraph(escape(item.description), styles['Normal']),
                f"{item.quantity:g}",
                format_money(item.rate, symbol),
                format_money(item.amount, symbol),
            ])
        itable = Table(rows, colWidths=[238, 70, 80, 80])
        itable.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, 0), colors.whitesmoke),
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('ALIGN', (1, 0), (-1, -1), 'RIGHT'),
            ('VALIGN', (0, 0), (-1, -1), 'TOP'),
            ('LINEBELOW', (0, 0), (-1, -1), 0.5, colors.lightgrey),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 8),
        ]))
        story.append(itable)
        story.append(Spacer(1, 18))
        story.append(Paragraph(
            f"{tr('invoice.total')}: {format_money(invoice.total, symbol)}",
            styles['InvTotal']
        ))

        doc.build(story)
        return buf.getvalue()
