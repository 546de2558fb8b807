"""
File storage for user uploads (profile pictures).

The hosted app keeps uploads in an object store and hands out download
URLs. Locally the same contract is met by a directory tree and file:// URLs.
"""

import logging
import shutil
from abc import ABC, abstractmethod
from pathlib import Path, PurePosixPath
from typing import List

logger = logging.getLogger(__name__)


class StorageBackend(ABC):
    """Abstract base class for storage backends."""

    @abstractmethod
    def upload_bytes(self, data: bytes, remote_path: str) -> str:
        """Store bytes under remote_path, return a download URL."""

    @abstractmethod
    def download(self, remote_path: str, local_path: Path) -> Path:
        """Copy a stored file to local_path, return it."""

    @abstractmethod
    def list(self, prefix: str = '') -> List[str]:
        """List stored paths with optional prefix."""

    @abstractmethod
    def delete(self, remote_path: str) -> bool:
        """Delete a stored file, return success."""


class LocalFileStorage(StorageBackend):
    """Stores files below a root directory"""

    def __init__(self, root: Path):
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)

    def _resolve(self, remote_path: str) -> Path:
        parts = PurePosixPath(remote_path).parts
        if not parts or any(part in ('..', '/') for part in parts):
            raise ValueError(f"Invalid storage path: {remote_path}")
        return self.root.joinpath(*parts)

    def upload_bytes(self, data: bytes, remote_path: str) -> str:
        target = self._resolve(remote_path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
        logger.info(f"Stored {len(data)} bytes at {remote_path}")
        return target.resolve().as_uri()

    def download(self, remote_path: str, local_path: Path) -> Path:
        source = self._resolve(remote_path)
        if not source.exists():
            raise FileNotFoundError(f"Stored file not found: {remote_path}")
        local_path = Path(local_path)
        local_path.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(source, local_path)
        return local_path

    def list(self, prefix: str = '') -> List[str]:
        paths = []
        for file in self.root.rglob('*'):
            if file.is_file():
                rel = file.relative_to(self.root).as_posix()
                if rel.startswith(prefix):
                    paths.append(rel)
        return sorted(paths)

    def delete(self, remote_path: str) -> bool:
        target = self._resolve(remote_path)
        if not target.exists():
            return False
        target.unlink()
        return True
