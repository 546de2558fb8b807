"""
Client management: the `clients` collection.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from clientdesk.domain.errors import NotFoundError
from clientdesk.domain.models import ActivityType, Client
from clientdesk.i18n import tr
from clientdesk.infra.repository import ClientRepository
from clientdesk.services.activity_service import ActivityService

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("name", "email", "phone", "company", "address")


class ClientService:
    """
    CRUD over the user's clients plus the in-memory search used by the list.
    """

    def __init__(self, user_id: str, session: Optional[AsyncSession] = None):
        self.user_id = user_id
        self.repo = ClientRepository(user_id, session=session)
        self.activity = ActivityService(user_id, session=session)

    async def list_clients(self) -> List[Client]:
        """All clients, newest first"""
        return await self.repo.get_all()

    async def get_client(self, client_id: str) -> Client:
        client = await self.repo.get_by_id(client_id)
        if client is None:
            raise NotFoundError(self.repo.collection, client_id)
        return client

    @staticmethod
    def search(clients: List[Client], text: str) -> List[Client]:
        """
        Case-insensitive match on name, email and company; phone numbers
        are matched as typed.
        """
        if not text:
            return list(clients)
        needle = text.lower()
        return [
            c for c in clients
            if needle in c.name.lower()
            or needle in c.email.lower()
            or needle in c.company.lower()
            or text in c.phone
        ]

    async def create_client(self, data: Mapping[str, Any]) -> Client:
        client = Client(
            **{k: data[k] for k in EDITABLE_FIELDS if k in data},
            created_at=datetime.now()
        )
        created = await self.repo.create(client)
        logger.info(f"Created client {created.id} ({created.name})")
        await self.activity.log(
            ActivityType.CLIENT_ADDED,
            tr("activity.client_added", name=created.name),
            {"client_id": created.id},
        )
        return created

    async def update_client(self, client_id: str, data: Mapping[str, Any]) -> Client:
        existing = await self.get_client(client_id)
        values: Dict[str, Any] = existing.model_dump()
        values.update({k: data[k] for k in EDITABLE_FIELDS if k in data})
        updated = await self.repo.update(Client(**values))
        logger.info(f"Updated client {client_id}")
        return updated

    async def delete_client(self, client_id: str) -> None:
        # Tasks, entries and invoices keep their client_id and show "Unknown Client"
        await self.repo.delete(client_id)
        logger.info(f"Deleted client {client_id}")

    async def client_names(self) -> Dict[str, str]:
        """Lookup of client id -> name for other pages"""
        return {c.id: c.name for c in await self.repo.get_all()}
