"""Reconcile the Notion course task database with Google Calendar."""
import re
from dataclasses import dataclass
from typing import Dict, Optional

import google_calendar_utils as gcal
import notion_db_utils as ndb
from config import Settings
from logging_utils import get_logger
from models import SourceRecord, TargetEvent, build_event, events_equal

log = get_logger(__name__)

# Notion page ids, with or without dashes
_PAGE_ID_RE = re.compile(
    r"^[0-9a-f]{8}-?[0-9a-f]{4}-?[0-9a-f]{4}-?[0-9a-f]{4}-?[0-9a-f]{12}$", re.IGNORECASE
)


def looks_like_page_id(value: str) -> bool:
    return bool(_PAGE_ID_RE.match(value or ""))


@dataclass
class SyncResult:
    created: int = 0
    updated: int = 0
    deleted: int = 0
    unchanged: int = 0
    skipped: int = 0

    @property
    def changed(self) -> bool:
        return bool(self.created or self.updated or self.deleted)

    def summary(self) -> str:
        return (
            f"생성 {self.created} / 수정 {self.updated} / 삭제 {self.deleted} / "
            f"유지 {self.unchanged} / 건너뜀 {self.skipped}"
        )


class CalendarSync:
    """One-way sync of Notion records into a Google Calendar.

    Events link back to their page through the description, which holds the
    page id verbatim. Clients are created by the caller and passed in.
    """

    def __init__(self, notion, calendar, settings: Settings) -> None:
        self.notion = notion
        self.calendar = calendar
        self.settings = settings

    def build_event(self, record: SourceRecord) -> TargetEvent:
        return build_event(record, self.settings.done_style, self.settings.timezone)

    def _should_delete(self, event: TargetEvent) -> bool:
        policy = self.settings.orphan_policy
        if policy == "keep":
            return False
        if policy == "managed":
            return looks_like_page_id(event.description.strip())
        return True

    def sync(self) -> SyncResult:
        """Run a single reconciliation pass.

        Any API error aborts the pass and propagates; the next pass starts
        again from a full fetch.
        """
        s = self.settings
        dry = " (dry-run)" if s.dry_run else ""
        result = SyncResult()
        records: Dict[str, SourceRecord] = ndb.fetch_records(
            self.notion, s.notion_database_id, s.courses
        )
        events = gcal.fetch_events(self.calendar, s.calendar_id)
        log.info("동기화 시작: 노션 %d건, 캘린더 %d건", len(records), len(events))

        for event in events:
            # padded descriptions still link, then fail events_equal and get rewritten
            source_id = event.description.strip()
            record: Optional[SourceRecord] = records.get(source_id)
            if record is None:
                if not self._should_delete(event):
                    log.debug("연결되지 않은 이벤트 유지: %s (%s)", event.title, event.id)
                    result.skipped += 1
                    continue
                log.info("연결된 노션 페이지 없음, 이벤트 삭제%s: %s", dry, event.title)
                if not s.dry_run:
                    gcal.delete_event(self.calendar, s.calendar_id, event.id)
                result.deleted += 1
                continue

            wanted = self.build_event(record)
            if events_equal(wanted, event, s.timezone):
                result.unchanged += 1
            else:
                log.info("이벤트 변경 감지%s: %s -> %s", dry, event.title, wanted.title)
                if not s.dry_run:
                    gcal.update_event(self.calendar, s.calendar_id, event.id, wanted)
                result.updated += 1
            records.pop(source_id)

        for record in records.values():
            wanted = self.build_event(record)
            log.info("새 이벤트 생성%s: %s", dry, wanted.title)
            if not s.dry_run:
                gcal.insert_event(self.calendar, s.calendar_id, wanted)
            result.created += 1

        log.info("동기화 완료%s: %s", dry, result.summary())
        return result

# Example usage:
# sync = CalendarSync(notion, service, get_settings())
# sync.sync()
