from dataclasses import dataclass
from pathlib import Path


@dataclass
class UploadedFile:
    """A file received in a multipart request, staged in the temp directory."""
    original_name: str
    storage_name: str
    size: int
    mime_type: str | None
    temp_path: Path | None
    permanent_path: Path | None = None


@dataclass(frozen=True)
class UploadResult:
    """Public location of an accepted upload."""
    file_name: str
    original_name: str
