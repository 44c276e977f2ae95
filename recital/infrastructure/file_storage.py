"""Local File Storage — audio blobs on the local filesystem under settings.upload_dir.

Invariants:
    - file names are flat: no directory components accepted
    - delete() never raises for a missing file; it reports False instead

Design Decisions:
    - Synchronous pathlib IO: uploads are capped by max_file_size_mb and the
      write happens once per request
"""

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class LocalFileStore:
    """Implements core.repository_protocols.AudioFileStore on a directory."""

    def __init__(self, root: str | Path):
        self.root = Path(root)

    def _path(self, file_name: str) -> Path:
        if Path(file_name).name != file_name or file_name in ("", ".", ".."):
            raise ValueError(f"Invalid storage file name: {file_name!r}")
        return self.root / file_name

    def save(self, file_name: str, data: bytes) -> str:
        path = self._path(file_name)
        self.root.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        logger.info(f"Stored {len(data)} bytes as {file_name}")
        return str(path)

    def delete(self, file_name: str) -> bool:
        try:
            self._path(file_name).unlink()
        except FileNotFoundError:
            logger.warning(f"Audio file already missing: {file_name}")
            return False
        except (OSError, ValueError) as e:
            logger.warning(f"Could not delete audio file {file_name}: {e}")
            return False
        return True

    def locate(self, file_name: str) -> str | None:
        """Absolute path of a stored file, or None when it is gone."""
        try:
            path = self._path(file_name)
        except ValueError:
            return None
        return str(path.resolve()) if path.is_file() else None


def get_file_store() -> LocalFileStore:
    """FastAPI dependency for the configured upload directory."""
    from recital.config import get_settings

    return LocalFileStore(get_settings().upload_dir)
