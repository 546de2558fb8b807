"""
User profile: the `users` document and the profile picture upload.
"""

import logging
import mimetypes
import time
from datetime import datetime
from pathlib import Path, PurePath
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from clientdesk.domain.errors import InvalidInputError, NotFoundError
from clientdesk.domain.models import EMAIL_PATTERN, Preferences, UserProfile
from clientdesk.i18n import tr
from clientdesk.infra.repository import UserRepository
from clientdesk.infra.storage import StorageBackend

logger = logging.getLogger(__name__)


class PhotoUpload(BaseModel):
    """An image picked by the user, not yet stored"""
    filename: str = Field(..., min_length=1)
    content_type: str = ""
    data: bytes

    @classmethod
    def from_path(cls, path: Path) -> 'PhotoUpload':
        path = Path(path)
        content_type, _ = mimetypes.guess_type(path.name)
        return cls(filename=path.name, content_type=content_type or "", data=path.read_bytes())

    @property
    def size(self) -> int:
        return len(self.data)


class ProfileService:
    """
    Reads and edits the current user's profile document.
    """

    def __init__(self, user_id: str, storage: StorageBackend,
                 session: Optional[AsyncSession] = None,
                 preferences: Optional[Preferences] = None):
        self.user_id = user_id
        self.storage = storage
        self.preferences = preferences or Preferences()
        self.repo = UserRepository(user_id, session=session)

    async def register(self, email: str, display_name: str = "") -> UserProfile:
        """Write the users document for a freshly signed-up account"""
        email = email.strip()
        if not EMAIL_PATTERN.match(email):
            raise InvalidInputError("Please enter a valid email")
        fields = {"email": email, "display_name": display_name.strip()}
        # Signing up again keeps the original creation time
        if await self.repo.get() is None:
            fields["created_at"] = datetime.now()
        profile = await self.repo.merge(fields)
        logger.info(f"Registered user {self.user_id}")
        return profile

    async def get_profile(self) -> UserProfile:
        profile = await self.repo.get()
        if profile is None:
            raise NotFoundError("users", self.user_id)
        return profile

    def validate_photo(self, photo: PhotoUpload) -> None:
        limit = self.preferences.max_upload_bytes
        if photo.size > limit:
            raise InvalidInputError(
                tr("profile.file_too_large", limit=f"{limit / (1024 * 1024):g}")
            )
        if not photo.content_type.startswith("image/"):
            raise InvalidInputError(tr("profile.not_image"))

    def upload_photo(self, photo: PhotoUpload) -> str:
        """Store the picture under profile-pictures/<uid>/, return its URL"""
        self.validate_photo(photo)
        timestamp = int(time.time() * 1000)
        name = PurePath(photo.filename).name
        return self.storage.upload_bytes(
            photo.data, f"profile-pictures/{self.user_id}/{timestamp}-{name}"
        )

    async def update_profile(self, display_name: str,
                             photo: Optional[PhotoUpload] = None) -> UserProfile:
        """
        Save the display name and, when given, a new profile picture.

        The picture is validated before anything is written.
        """
        fields: Dict[str, Any] = {
            "display_name": display_name.strip(),
            "updated_at": datetime.now(),
        }
        if photo is not None:
            fields["photo_url"] = self.upload_photo(photo)

        profile = await self.repo.merge(fields)
        logger.info(f"Updated profile of {self.user_id}")
        return profile
