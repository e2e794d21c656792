# backend/clinic_admin/config.py
import logging
import os
from dataclasses import dataclass
from logging.handlers import RotatingFileHandler
from typing import Optional

LOG_FORMAT = '%(asctime)s %(levelname)s: %(message)s'


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    log_level: str = "INFO"
    log_file: Optional[str] = None
    seed_demo: bool = True
    page_size: int = 4
    current_user_id: int = 1
    # Mon=0 .. Sun=6
    week_start: int = 6

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            log_level=os.getenv("CLINIC_LOG_LEVEL", "INFO").upper(),
            log_file=os.getenv("CLINIC_LOG_FILE") or None,
            seed_demo=_env_bool("CLINIC_SEED_DEMO", True),
            page_size=int(os.getenv("CLINIC_PAGE_SIZE", "4")),
            current_user_id=int(os.getenv("CLINIC_CURRENT_USER_ID", "1")),
            week_start=int(os.getenv("CLINIC_WEEK_START", "6")),
        )


def configure_logging(settings: Settings) -> None:
    """Console logging at the configured level, plus an optional rotating error log."""
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)
    for name in ("clinic_admin", "reporting"):
        logging.getLogger(name).setLevel(settings.log_level)

    if not settings.log_file:
        return
    root = logging.getLogger()
    log_file = os.path.abspath(settings.log_file)
    if any(getattr(h, "baseFilename", None) == log_file for h in root.handlers):
        return
    handler = RotatingFileHandler(log_file, maxBytes=100000, backupCount=3)
    handler.setLevel(logging.ERROR)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
