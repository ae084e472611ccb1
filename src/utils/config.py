"""Environment-driven application settings.

Settings are read once from the environment (and a ``.env`` file, loaded by
``api.main``) and handed to routes and services through the ``get_settings``
FastAPI dependency, so tests can swap in their own instance.
"""

import os
import re
from dataclasses import dataclass, field
from datetime import timedelta
from functools import lru_cache
from pathlib import Path

DEFAULT_ALLOWED_TYPES = (
    'image/png',
    'image/jpg',
    'image/jpeg',
    'image/gif',
    'image/svg+xml',
)

_DURATION_RE = re.compile(r'^\s*(\d+)\s*([smhd]?)\s*$')
_DURATION_UNITS = {'': 'seconds', 's': 'seconds', 'm': 'minutes', 'h': 'hours', 'd': 'days'}


def parse_duration(value: str) -> timedelta:
    """Parse an expiry such as ``"10m"``, ``"7d"`` or ``"3600"`` into a timedelta."""
    match = _DURATION_RE.match(value)
    if not match:
        raise ValueError(f"Invalid duration: {value!r}")
    amount, unit = match.groups()
    return timedelta(**{_DURATION_UNITS[unit]: int(amount)})


def _parse_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def _parse_list(value: str | None, default: tuple[str, ...]) -> tuple[str, ...]:
    if not value:
        return default
    return tuple(item.strip() for item in value.split(',') if item.strip())


@dataclass(frozen=True)
class Settings:
    """Runtime configuration for the API."""
    mongo_url: str | None = None
    database_name: str = 'larek'

    public_dir: Path = Path('public')
    upload_path: str = 'images'
    temp_dir: Path = Path('temp')
    min_file_size: int = 2 * 1024
    allowed_types: tuple[str, ...] = DEFAULT_ALLOWED_TYPES
    match_extension: bool = False

    access_token_secret: str | None = field(default=None, repr=False)
    access_token_expiry: timedelta = timedelta(minutes=10)
    refresh_token_secret: str | None = field(default=None, repr=False)
    refresh_token_expiry: timedelta = timedelta(days=7)

    cors_origins: tuple[str, ...] = ('http://localhost:5173',)
    rate_limit_max: int = 100
    rate_limit_window_seconds: int = 15 * 60

    @property
    def upload_dir(self) -> Path:
        """Permanent storage directory for accepted uploads."""
        return self.public_dir / self.upload_path if self.upload_path else self.public_dir

    @classmethod
    def from_env(cls) -> 'Settings':
        return cls(
            mongo_url=os.getenv('MONGO_URL'),
            database_name=os.getenv('MONGODB_DATABASE', 'larek'),
            public_dir=Path(os.getenv('PUBLIC_DIR', 'public')),
            upload_path=os.getenv('UPLOAD_PATH', 'images').strip('/'),
            temp_dir=Path(os.getenv('UPLOAD_PATH_TEMP', 'temp')),
            min_file_size=int(os.getenv('UPLOAD_MIN_FILE_SIZE', str(2 * 1024))),
            allowed_types=_parse_list(os.getenv('UPLOAD_ALLOWED_TYPES'), DEFAULT_ALLOWED_TYPES),
            match_extension=_parse_bool(os.getenv('UPLOAD_MATCH_EXTENSION')),
            access_token_secret=os.getenv('AUTH_ACCESS_TOKEN_SECRET'),
            access_token_expiry=parse_duration(os.getenv('AUTH_ACCESS_TOKEN_EXPIRY', '10m')),
            refresh_token_secret=os.getenv('AUTH_REFRESH_TOKEN_SECRET'),
            refresh_token_expiry=parse_duration(os.getenv('AUTH_REFRESH_TOKEN_EXPIRY', '7d')),
            cors_origins=_parse_list(os.getenv('CORS_ORIGINS'), ('http://localhost:5173',)),
            rate_limit_max=int(os.getenv('RATE_LIMIT_MAX', '100')),
            rate_limit_window_seconds=int(os.getenv('RATE_LIMIT_WINDOW_SECONDS', str(15 * 60))),
        )


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings, built from the environment on first use."""
    return Settings.from_env()
