"""Entry point that runs the Notion to Google Calendar sync."""
import argparse
import asyncio
from typing import List, Optional

import google_calendar_utils as gcal
import notion_db_utils as ndb
from calendar_sync import CalendarSync, SyncResult
from config import ConfigurationError, get_settings
from google_tasks_utils import list_task_lists
from logging_utils import configure_root, get_logger
from scheduler import SyncScheduler
from slack_utils import SlackLogHandler, send_error_webhook, send_message

log = get_logger(__name__)


def setup_logging() -> None:
    configure_root(SlackLogHandler())


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Sync a Notion database to Google Calendar")
    parser.add_argument("--once", action="store_true", help="Run a single pass and exit")
    parser.add_argument("--dry-run", action="store_true", help="Log changes without touching the calendar")
    parser.add_argument(
        "--list-task-lists", action="store_true", help="Print Google Tasks lists and exit"
    )
    return parser.parse_args(argv)


async def report_result(result: SyncResult) -> None:
    if result.changed:
        await send_message(f"📅 노션 캘린더 동기화: {result.summary()}")


async def report_error(exc: BaseException) -> None:
    # WebhookClient.send blocks
    await asyncio.to_thread(send_error_webhook, exc)


async def run(sync: CalendarSync, interval: float) -> None:
    """Run sync passes forever on a fixed interval."""
    scheduler = SyncScheduler(
        sync.sync, interval, on_success=report_result, on_error=report_error
    )
    await scheduler.start()


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging()
    try:
        overrides = {"dry_run": True} if args.dry_run else {}
        settings = get_settings(**overrides)
        credentials = gcal.load_credentials(settings)
    except ConfigurationError as exc:
        log.error("설정 오류: %s", exc)
        return 2

    if args.list_task_lists:
        for title, task_list_id in list_task_lists(credentials):
            print(f"{title} ({task_list_id})")
        return 0

    if settings.orphan_policy == "delete" and settings.calendar_id == "primary":
        log.warning(
            "ORPHAN_POLICY=delete 상태에서 primary 캘린더를 사용하면 노션과 무관한 일정도 삭제됩니다"
        )

    sync = CalendarSync(
        ndb.create_client(settings.notion_token),
        gcal.build_service(credentials),
        settings,
    )
    try:
        if args.once:
            result = sync.sync()
            asyncio.run(report_result(result))
        else:
            asyncio.run(run(sync, settings.poll_interval))
    except KeyboardInterrupt:
        log.info("사용자 요청으로 종료합니다")
    except Exception as exc:
        log.error("예상치 못한 오류: %s", exc)
        send_error_webhook(exc)
        if args.once:
            return 1
        raise
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
