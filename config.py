"""Configuration loader for environment variables and constants."""
import os
from dataclasses import dataclass
from typing import Optional, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

# Load environment variables from .env file if present
load_dotenv()

# Notion credentials
NOTION_TOKEN = os.getenv("NOTION_TOKEN")
NOTION_DATABASE_ID = os.getenv("NOTION_DATABASE_ID")
NOTION_COURSES = os.getenv("NOTION_COURSES", "")

# Google calendar
GOOGLE_CALENDAR_ID = os.getenv("GOOGLE_CALENDAR_ID", "primary")
GOOGLE_CREDENTIALS_FILE = os.getenv("GOOGLE_CREDENTIALS_FILE")
GOOGLE_CLIENT_ID = os.getenv("GOOGLE_CLIENT_ID")
GOOGLE_CLIENT_SECRET = os.getenv("GOOGLE_CLIENT_SECRET")
GOOGLE_REFRESH_TOKEN = os.getenv("GOOGLE_REFRESH_TOKEN")

# Sync behaviour
POLL_INTERVAL = os.getenv("POLL_INTERVAL", "60")
DONE_STYLE = os.getenv("DONE_STYLE", "emoji")
ORPHAN_POLICY = os.getenv("ORPHAN_POLICY", "delete")
SYNC_TIMEZONE = os.getenv("SYNC_TIMEZONE")
SYNC_DRY_RUN = os.getenv("SYNC_DRY_RUN", "false")

# Slack settings
SLACK_BOT_TOKEN = os.getenv("SLACK_BOT_TOKEN")
SLACK_CHANNEL = os.getenv("SLACK_CHANNEL", "#general")
SLACK_WEBHOOK_URL = os.getenv("SLACK_WEBHOOK_URL")
SLACK_ERROR_WEBHOOK_URL = os.getenv("SLACK_ERROR_WEBHOOK_URL")

# Logging level
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

DONE_STYLES = ("emoji", "strikethrough")
ORPHAN_POLICIES = ("delete", "managed", "keep")
_TRUE_VALUES = {"1", "true", "yes", "on"}


class ConfigurationError(ValueError):
    """Raised when a required setting is missing or invalid."""


@dataclass(frozen=True)
class Settings:
    notion_token: str
    notion_database_id: str
    calendar_id: str = "primary"
    courses: Tuple[str, ...] = ()
    google_credentials_file: Optional[str] = None
    google_client_id: Optional[str] = None
    google_client_secret: Optional[str] = None
    google_refresh_token: Optional[str] = None
    poll_interval: float = 60.0
    done_style: str = "emoji"
    orphan_policy: str = "delete"
    timezone: Optional[str] = None
    dry_run: bool = False


def _split_list(value: Optional[str]) -> Tuple[str, ...]:
    if not value:
        return ()
    return tuple(x.strip() for x in value.split(",") if x.strip())


def _as_bool(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in _TRUE_VALUES


def get_settings(**overrides) -> Settings:
    """Build a :class:`Settings` value from the environment.

    Keyword arguments override the values read from the environment, which
    lets the command line and tests tweak single fields.
    """
    values = {
        "notion_token": NOTION_TOKEN,
        "notion_database_id": NOTION_DATABASE_ID,
        "calendar_id": GOOGLE_CALENDAR_ID or "primary",
        "courses": _split_list(NOTION_COURSES),
        "google_credentials_file": GOOGLE_CREDENTIALS_FILE,
        "google_client_id": GOOGLE_CLIENT_ID,
        "google_client_secret": GOOGLE_CLIENT_SECRET,
        "google_refresh_token": GOOGLE_REFRESH_TOKEN,
        "poll_interval": POLL_INTERVAL,
        "done_style": DONE_STYLE,
        "orphan_policy": ORPHAN_POLICY,
        "timezone": SYNC_TIMEZONE or None,
        "dry_run": _as_bool(SYNC_DRY_RUN),
    }
    values.update(overrides)

    for key in ("notion_token", "notion_database_id"):
        if not values[key]:
            raise ConfigurationError(f"{key.upper()} 환경 변수가 설정되지 않았습니다")

    try:
        interval = float(values["poll_interval"])
    except (TypeError, ValueError):
        raise ConfigurationError(
            f"POLL_INTERVAL 값이 올바르지 않습니다: {values['poll_interval']!r}"
        ) from None
    if interval <= 0:
        raise ConfigurationError("POLL_INTERVAL 은 0보다 커야 합니다")
    values["poll_interval"] = interval

    values["done_style"] = str(values["done_style"]).strip().lower()
    if values["done_style"] not in DONE_STYLES:
        raise ConfigurationError(f"알 수 없는 DONE_STYLE: {values['done_style']}")
    values["orphan_policy"] = str(values["orphan_policy"]).strip().lower()
    if values["orphan_policy"] not in ORPHAN_POLICIES:
        raise ConfigurationError(f"알 수 없는 ORPHAN_POLICY: {values['orphan_policy']}")

    if values["timezone"]:
        try:
            ZoneInfo(values["timezone"])
        except (ZoneInfoNotFoundError, ValueError):
            raise ConfigurationError(f"알 수 없는 SYNC_TIMEZONE: {values['timezone']}") from None

    return Settings(**values)

# Example usage:
# from config import get_settings
# settings = get_settings(dry_run=True)
