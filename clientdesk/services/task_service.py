"""
Task management: the `tasks` collection.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from clientdesk.domain.errors import NotFoundError
from clientdesk.domain.models import ActivityType, Task, TaskStatus
from clientdesk.i18n import tr
from clientdesk.infra.repository import TaskRepository
from clientdesk.services.activity_service import ActivityService

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("client_id", "title", "description", "status", "due_date")


class TaskService:
    """CRUD over tasks; completing a task is recorded in the activity feed"""

    def __init__(self, user_id: str, session: Optional[AsyncSession] = None):
        self.user_id = user_id
        self.repo = TaskRepository(user_id, session=session)
        self.activity = ActivityService(user_id, session=session)

    async def list_tasks(self, status: Optional[TaskStatus] = None,
                         client_id: Optional[str] = None) -> List[Task]:
        """Tasks newest first. status "all" disables the status filter."""
        if isinstance(status, str) and status.lower() == "all":
            status = None
        return await self.repo.get_all(status=status, client_id=client_id)

    async def get_task(self, task_id: str) -> Task:
        task = await self.repo.get_by_id(task_id)
        if task is None:
            raise NotFoundError(self.repo.collection, task_id)
        return task

    async def create_task(self, data: Mapping[str, Any]) -> Task:
        task = Task(
            **{k: data[k] for k in EDITABLE_FIELDS if k in data},
            created_at=datetime.now()
        )
        created = await self.repo.create(task)
        logger.info(f"Created task {created.id} ({created.title})")
        return created

    async def update_task(self, task_id: str, data: Mapping[str, Any]) -> Task:
        existing = await self.get_task(task_id)
        values: Dict[str, Any] = existing.model_dump()
        values.update({k: data[k] for k in EDITABLE_FIELDS if k in data})
        updated = await self.repo.update(Task(**values))
        logger.info(f"Updated task {task_id}")

        if updated.is_completed and not existing.is_completed:
            await self.activity.log(
                ActivityType.TASK_COMPLETED,
                tr("activity.task_completed", title=updated.title),
                {"task_id": updated.id, "client_id": updated.client_id},
            )
        return updated

    async def delete_task(self, task_id: str) -> None:
        await self.repo.delete(task_id)
        logger.info(f"Deleted task {task_id}")

    @staticmethod
    def is_overdue(task: Task, now: Optional[datetime] = None) -> bool:
        return task.is_overdue(now)
