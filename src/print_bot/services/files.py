"""Storage for uploaded documents."""

import logging
from dataclasses import dataclass
from pathlib import Path
from uuid import uuid4

from print_bot.domain.errors import StorageError

_logger = logging.getLogger(__name__)


@dataclass
class FileStorage:
    """Keeps each upload in its own directory under ``uploads_dir``."""

    uploads_dir: Path

    def store(self, conversation_id: str, blob: bytes, suggested_name: str) -> Path:
        """Write the blob to disk and return its path."""
        target_dir = self.uploads_dir / uuid4().hex
        file_path = target_dir / _safe_name(suggested_name)
        try:
            target_dir.mkdir(parents=True, exist_ok=True)
            file_path.write_bytes(blob)
        except OSError as exc:
            raise StorageError(f"Could not store upload at {file_path}") from exc
        _logger.info(
            "Stored upload: conversation=%s path=%s bytes=%s",
            conversation_id,
            file_path,
            len(blob),
        )
        return file_path

    def release(self, file_path: str | Path) -> None:
        """Delete a stored upload. Missing files are ignored."""
        path = Path(file_path)
        parent = path.parent
        try:
            path.unlink(missing_ok=True)
            if (
                parent.parent == self.uploads_dir
                and parent.is_dir()
                and not any(parent.iterdir())
            ):
                parent.rmdir()
        except OSError as exc:
            raise StorageError(f"Could not delete upload at {path}") from exc
        _logger.info("Released upload: path=%s", path)


def _safe_name(suggested_name: str) -> str:
    """Strip directory components from a user-supplied file name."""
    name = Path(suggested_name.replace("\\", "/")).name.strip()
    if name in {"", ".", ".."}:
        return "upload.bin"
    return name
