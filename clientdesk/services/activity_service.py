"""
Activity feed shown on the dashboard.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from clientdesk.domain.models import ActivityLog, ActivityType
from clientdesk.infra.repository import ActivityLogRepository

logger = logging.getLogger(__name__)


class ActivityService:
    """Appends and reads the user's activity logs"""

    def __init__(self, user_id: str, session: Optional[AsyncSession] = None):
        self.user_id = user_id
        self.repo = ActivityLogRepository(user_id, session=session)

    async def log(self, type: ActivityType, description: str,
                  metadata: Optional[Dict[str, Any]] = None) -> ActivityLog:
        entry = await self.repo.create(ActivityLog(
            type=ActivityType(type),
            description=description,
            timestamp=datetime.now(),
            metadata=metadata or {},
        ))
        logger.debug(f"Activity {entry.type.value}: {description}")
        return entry

    async def recent(self, limit: int = 5) -> List[ActivityLog]:
        """Newest activities first"""
        return await self.repo.get_recent(limit)
