"""Storage naming and relocation helpers for uploaded files."""

import logging
import re
import uuid
from pathlib import Path

from domain.model.errors import NotFoundError, PathSecurityError, RelocationError

logger = logging.getLogger(__name__)


def generate_unique_file_name(original_name: str) -> str:
    """Return ``<uuid4 hex>.<ext>`` for an uploaded file.

    The extension is whatever follows the last dot of the base name, so a
    client-supplied directory part never reaches the storage name.
    """
    base_name = re.split(r'[\\/]', original_name)[-1]
    ext = base_name.rsplit('.', 1)[-1]
    return f"{uuid.uuid4().hex}.{ext}"


def resolve_inside(root: Path, file_name: str) -> Path:
    """Resolve ``root/file_name`` and require it to sit directly in ``root``."""
    resolved_root = root.resolve()
    resolved = (root / file_name).resolve()
    if resolved.parent != resolved_root:
        raise PathSecurityError(f"Path escapes {resolved_root}")
    return resolved


def move_file(file_name: str, source_dir: Path, destination_dir: Path) -> Path:
    """Move a staged file from ``source_dir`` into ``destination_dir``.

    The file keeps its base name. Both paths are resolved before anything
    touches the disk, so a crafted name such as ``../app.py`` is rejected.

    Returns:
        Absolute path of the file in permanent storage

    Raises:
        PathSecurityError: a resolved path leaves its root directory
        NotFoundError: the staged file does not exist
        RelocationError: the rename itself failed
    """
    temp_path = resolve_inside(Path(source_dir), file_name)
    permanent_path = resolve_inside(Path(destination_dir), file_name)

    if not temp_path.exists():
        raise NotFoundError(f"File {file_name} not found in temporary directory")

    # Existence check and rename are not atomic; a concurrent delete surfaces
    # as RelocationError below.
    try:
        permanent_path.parent.mkdir(parents=True, exist_ok=True)
        temp_path.rename(permanent_path)
    except OSError as e:
        raise RelocationError(f"Failed to move file {file_name}: {e}") from e

    logger.debug("File moved", extra={"fileName": file_name, "destination": str(permanent_path)})
    return permanent_path
