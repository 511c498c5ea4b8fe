"""Google Tasks helpers used to check the Google credentials."""
from typing import List, Tuple

from googleapiclient.discovery import build

from logging_utils import get_logger

log = get_logger(__name__)


def list_task_lists(credentials, max_results: int = 10) -> List[Tuple[str, str]]:
    """Return ``(title, id)`` pairs for the user's first task lists."""
    service = build("tasks", "v1", credentials=credentials, cache_discovery=False)
    res = service.tasklists().list(maxResults=max_results).execute()
    items = res.get("items") or []
    if not items:
        log.info("태스크 목록이 없습니다")
    return [(item.get("title", ""), item.get("id", "")) for item in items]
