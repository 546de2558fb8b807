"""
Repository Pattern Implementation.

Architecture Decision: Why Repository Pattern?
Each repository stands in for one remote document collection. It is bound
to a single user id at construction, so every query it issues is filtered
by the owning user and pages can never see each other's documents. It also
makes it easy to:
- Switch database implementations
- Mock data for testing (inject a session)
"""

from datetime import datetime
from typing import List, Optional, Dict, Any

from sqlalchemy import select, update, delete, func
from sqlalchemy.ext.asyncio import AsyncSession

from clientdesk.domain.errors import NotFoundError
from clientdesk.domain.models import (
    Client, Task, TaskStatus, TimeEntry, Invoice, InvoiceStatus,
    UserProfile, ActivityLog, new_id,
)
from clientdesk.infra.db import (
    ClientModel, TaskModel, TimeEntryModel, InvoiceModel, UserModel,
    ActivityLogModel, get_engine,
)


class UserScopedRepository:
    """
    Shared plumbing for collections whose documents carry a user_id.
    """
    model = None
    collection = ""

    def __init__(self, user_id: str, session: Optional[AsyncSession] = None):
        if not user_id:
            raise ValueError("user_id is required")
        self.user_id = user_id
        self.session = session

    async def _get_session(self) -> AsyncSession:
        """Get session - either injected or create new one"""
        if self.session:
            return self.session
        engine = get_engine()
        return engine.get_session()

    def _select(self):
        """SELECT restricted to the current user's documents"""
        return select(self.model).where(self.model.user_id == self.user_id)

    async def _fetch_one(self, doc_id: str):
        session = await self._get_session()
        async with session:
            result = await session.execute(self._select().where(self.model.id == doc_id))
            return result.scalar_one_or_none()

    async def _fetch_all(self, stmt) -> list:
        session = await self._get_session()
        async with session:
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def _insert(self, model):
        session = await self._get_session()
        async with session:
            session.add(model)
            await session.commit()
            await session.refresh(model)
            return model

    async def _update(self, doc_id: str, **values) -> None:
        session = await self._get_session()
        async with session:
            result = await session.execute(
                update(self.model)
                .where(self.model.id == doc_id, self.model.user_id == self.user_id)
                .values(**values)
            )
            await session.commit()
        if result.rowcount == 0:
            raise NotFoundError(self.collection, doc_id)

    async def owner_of(self, doc_id: str) -> Optional[str]:
        """Return the user id owning a document, regardless of who asks"""
        session = await self._get_session()
        async with session:
            result = await session.execute(
                select(self.model.user_id).where(self.model.id == doc_id)
            )
            return result.scalar_one_or_none()

    async def delete(self, doc_id: str) -> None:
        """Delete a document by ID"""
        session = await self._get_session()
        async with session:
            result = await session.execute(
                delete(self.model).where(
                    self.model.id == doc_id,
                    self.model.user_id == self.user_id
                )
            )
            await session.commit()
        if result.rowcount == 0:
            raise NotFoundError(self.collection, doc_id)

    async def count(self) -> int:
        """Number of documents the user owns in this collection"""
        session = await self._get_session()
        async with session:
            result = await session.execute(
                select(func.count()).select_from(self.model)
                .where(self.model.user_id == self.user_id)
            )
            return result.scalar_one()


class ClientRepository(UserScopedRepository):
    """
    Handles the `clients` collection.
    """
    model = ClientModel
    collection = "clients"

    async def get_all(self) -> List[Client]:
        """All clients, newest first"""
        models = await self._fetch_all(self._select().order_by(ClientModel.created_at.desc()))
        return [Client.model_validate(m) for m in models]

    async def get_by_id(self, client_id: str) -> Optional[Client]:
        model = await self._fetch_one(client_id)
        return Client.model_validate(model) if model else None

    async def create(self, client: Client) -> Client:
        model = await self._insert(ClientModel(
            id=new_id(),
            user_id=self.user_id,
            name=client.name,
            email=client.email,
            phone=client.phone,
            company=client.company,
            address=client.address,
            created_at=client.created_at
        ))
        return Client.model_validate(model)

    async def update(self, client: Client) -> Client:
        await self._update(
            client.id,
            name=client.name,
            email=client.email,
            phone=client.phone,
            company=client.company,
            address=client.address
        )
        return await self.get_by_id(client.id)


class TaskRepository(UserScopedRepository):
    """
    Handles the `tasks` collection.
    """
    model = TaskModel
    collection = "tasks"

    async def get_all(self, status: Optional[TaskStatus] = None,
                      client_id: Optional[str] = None,
                      created_from: Optional[datetime] = None,
                      created_to: Optional[datetime] = None) -> List[Task]:
        """Tasks newest first, optionally filtered by status, client and creation range"""
        stmt = self._select()
        if status is not None:
            stmt = stmt.where(TaskModel.status == TaskStatus(status).value)
        if client_id:
            stmt = stmt.where(TaskModel.client_id == client_id)
        if created_from:
            stmt = stmt.where(TaskModel.created_at >= created_from)
        if created_to:
            stmt = stmt.where(TaskModel.created_at <= created_to)

        models = await self._fetch_all(stmt.order_by(TaskModel.created_at.desc()))
        return [Task.model_validate(m) for m in models]

    async def get_open(self, limit: Optional[int] = None) -> List[Task]:
        """Tasks that are not completed, soonest due date first"""
        stmt = (
            self._select()
            .where(TaskModel.status != TaskStatus.COMPLETED.value)
            .order_by(TaskModel.due_date.asc())
        )
        if limit:
            stmt = stmt.limit(limit)
        models = await self._fetch_all(stmt)
        return [Task.model_validate(m) for m in models]

    async def get_by_id(self, task_id: str) -> Optional[Task]:
        model = await self._fetch_one(task_id)
        return Task.model_validate(model) if model else None

    async def create(self, task: Task) -> Task:
        model = await self._insert(TaskModel(
            id=new_id(),
            user_id=self.user_id,
            client_id=task.client_id,
            title=task.title,
            description=task.description,
            status=task.status.value,
            due_date=task.due_date,
            created_at=task.created_at
        ))
        return Task.model_validate(model)

    async def update(self, task: Task) -> Task:
        await self._update(
            task.id,
            client_id=task.client_id,
            title=task.title,
            description=task.description,
            status=task.status.value,
            due_date=task.due_date
        )
        return await self.get_by_id(task.id)


class TimeEntryRepository(UserScopedRepository):
    """
    Handles the `timeTracking` collection.
    """
    model = TimeEntryModel
    collection = "timeTracking"

    async def get_all(self, client_id: Optional[str] = None,
                      task_id: Optional[str] = None,
                      start_date: Optional[datetime] = None,
                      end_date: Optional[datetime] = None) -> List[TimeEntry]:
        """Entries newest first, optionally filtered by client, task and start time range"""
        stmt = self._select()
        if client_id:
            stmt = stmt.where(TimeEntryModel.client_id == client_id)
        if task_id:
            stmt = stmt.where(TimeEntryModel.task_id == task_id)
        if start_date:
            stmt = stmt.where(TimeEntryModel.start_time >= start_date)
        if end_date:
            stmt = stmt.where(TimeEntryModel.start_time <= end_date)

        models = await self._fetch_all(stmt.order_by(TimeEntryModel.created_at.desc()))
        return [TimeEntry.model_validate(m) for m in models]

    async def get_active_entry(self) -> Optional[TimeEntry]:
        """Get the currently running (not ended) time entry"""
        models = await self._fetch_all(
            self._select()
            .where(TimeEntryModel.end_time.is_(None))
            .order_by(TimeEntryModel.start_time.desc())
            .limit(1)
        )
        return TimeEntry.model_validate(models[0]) if models else None

    async def get_by_id(self, entry_id: str) -> Optional[TimeEntry]:
        model = await self._fetch_one(entry_id)
        return TimeEntry.model_validate(model) if model else None

    async def create(self, entry: TimeEntry) -> TimeEntry:
        model = await self._insert(TimeEntryModel(
            id=new_id(),
            user_id=self.user_id,
            task_id=entry.task_id,
            client_id=entry.client_id,
            start_time=entry.start_time,
            end_time=entry.end_time,
            duration_minutes=entry.duration_minutes,
            notes=entry.notes,
            created_at=entry.created_at
        ))
        return TimeEntry.model_validate(model)

    async def update(self, entry: TimeEntry) -> TimeEntry:
        await self._update(
            entry.id,
            task_id=entry.task_id,
            client_id=entry.client_id,
            start_time=entry.start_time,
            end_time=entry.end_time,
            duration_minutes=entry.duration_minutes,
            notes=entry.notes
        )
        return await self.get_by_id(entry.id)


class InvoiceRepository(UserScopedRepository):
    """
    Handles the `invoices` collection.
    """
    model = InvoiceModel
    collection = "invoices"

    async def get_all(self, status: Optional[InvoiceStatus] = None,
                      client_id: Optional[str] = None,
                      created_from: Optional[datetime] = None,
                      created_to: Optional[datetime] = None) -> List[Invoice]:
        """Invoices newest first, optionally filtered by status, client and creation range"""
        stmt = self._select()
        if status is not None:
            stmt = stmt.where(InvoiceModel.status == InvoiceStatus(status).value)
        if client_id:
            stmt = stmt.where(InvoiceModel.client_id == client_id)
        if created_from:
            stmt = stmt.where(InvoiceModel.created_at >= created_from)
        if created_to:
            stmt = stmt.where(InvoiceModel.created_at <= created_to)

        models = await self._fetch_all(stmt.order_by(InvoiceModel.created_at.desc()))
        return [Invoice.model_validate(m) for m in models]

    async def get_by_id(self, invoice_id: str) -> Optional[Invoice]:
        model = await self._fetch_one(invoice_id)
        return Invoice.model_validate(model) if model else None

    async def create(self, invoice: Invoice) -> Invoice:
        model = await self._insert(InvoiceModel(
            id=new_id(),
            user_id=self.user_id,
            invoice_number=invoice.invoice_number,
            client_id=invoice.client_id,
            client_name=invoice.client_name,
            items=[item.model_dump() for item in invoice.items],
            total=invoice.total,
            status=invoice.status.value,
            due_date=invoice.due_date,
            created_at=invoice.created_at
        ))
        return Invoice.model_validate(model)

    async def update(self, invoice: Invoice) -> Invoice:
        await self._update(
            invoice.id,
            invoice_number=invoice.invoice_number,
            client_id=invoice.client_id,
            client_name=invoice.client_name,
            items=[item.model_dump() for item in invoice.items],
            total=invoice.total,
            status=invoice.status.value,
            due_date=invoice.due_date
        )
        return await self.get_by_id(invoice.id)

    async def update_status(self, invoice_id: str, status: InvoiceStatus) -> None:
        await self._update(invoice_id, status=InvoiceStatus(status).value)


class ActivityLogRepository(UserScopedRepository):
    """
    Handles the `activityLogs` collection.
    """
    model = ActivityLogModel
    collection = "activityLogs"

    @staticmethod
    def _to_domain(model: ActivityLogModel) -> ActivityLog:
        return ActivityLog(
            id=model.id,
            user_id=model.user_id,
            type=model.type,
            description=model.description,
            timestamp=model.timestamp,
            metadata=model.meta or {}
        )

    async def create(self, log: ActivityLog) -> ActivityLog:
        model = await self._insert(ActivityLogModel(
            id=new_id(),
            user_id=self.user_id,
            type=log.type.value,
            description=log.description,
            timestamp=log.timestamp,
            meta=log.metadata
        ))
        return self._to_domain(model)

    async def get_recent(self, limit: int = 5) -> List[ActivityLog]:
        """Newest activities first"""
        models = await self._fetch_all(
            self._select().order_by(ActivityLogModel.timestamp.desc()).limit(limit)
        )
        return [self._to_domain(m) for m in models]


class UserRepository:
    """
    Handles the `users` collection. Documents are keyed by the auth uid,
    so the repository only ever touches its own user's document.
    """

    def __init__(self, user_id: str, session: Optional[AsyncSession] = None):
        if not user_id:
            raise ValueError("user_id is required")
        self.user_id = user_id
        self.session = session

    async def _get_session(self) -> AsyncSession:
        """Get session - either injected or create new one"""
        if self.session:
            return self.session
        engine = get_engine()
        return engine.get_session()

    async def get(self) -> Optional[UserProfile]:
        session = await self._get_session()
        async with session:
            model = await session.get(UserModel, self.user_id)
            return UserProfile.model_validate(model) if model else None

    async def merge(self, fields: Dict[str, Any]) -> UserProfile:
        """
        Create or update the user's document, touching only the given fields.
        """
        allowed = {"email", "display_name", "photo_url", "updated_at", "created_at"}
        unknown = set(fields) - allowed
        if unknown:
            raise ValueError(f"Unknown profile fields: {', '.join(sorted(unknown))}")

        session = await self._get_session()
        async with session:
            model = await session.get(UserModel, self.user_id)
            if model is None:
                model = UserModel(uid=self.user_id, created_at=datetime.now())
                session.add(model)
            for key, value in fields.items():
                setattr(model, key, value)
            await session.commit()
            await session.refresh(model)
            return UserProfile.model_validate(model)
