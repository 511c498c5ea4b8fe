"""Utility functions for reading the course task database in Notion."""
from typing import Dict, Iterable, Iterator, List, Optional

from notion_client import Client

from logging_utils import get_logger
from models import COURSE_PROPERTY, DATE_PROPERTY, SourceRecord, reduce_page

log = get_logger(__name__)


def create_client(token: str) -> Client:
    """Return a Notion client for the given integration token."""
    return Client(auth=token)


def build_filter(
    date_property: str = DATE_PROPERTY,
    course_property: str = COURSE_PROPERTY,
    courses: Optional[Iterable[str]] = None,
) -> Dict:
    """Return a query filter for dated pages, optionally limited to courses."""
    date_filter = {"property": date_property, "date": {"is_not_empty": True}}
    courses = [c for c in (courses or []) if c]
    if not courses:
        return date_filter
    course_filter = {
        "or": [{"property": course_property, "select": {"equals": c}} for c in courses]
    }
    return {"and": [date_filter, course_filter]}


def iter_query_pages(client: Client, database_id: str, filter: Optional[Dict] = None) -> Iterator[List[Dict]]:
    """Yield one list of page objects per query request.

    Cursors are followed until Notion reports no ``next_cursor``. Each call
    starts a new query from the first page.
    """
    cursor = None
    while True:
        kwargs = {"database_id": database_id}
        if filter:
            kwargs["filter"] = filter
        if cursor:
            kwargs["start_cursor"] = cursor
        data = client.databases.query(**kwargs)
        yield data.get("results", [])
        cursor = data.get("next_cursor")
        if not cursor:
            break


def fetch_records(
    client: Client, database_id: str, courses: Optional[Iterable[str]] = None
) -> Dict[str, SourceRecord]:
    """Return every matching page reduced to a record, keyed by page id."""
    records: Dict[str, SourceRecord] = {}
    query_filter = build_filter(courses=courses)
    for results in iter_query_pages(client, database_id, query_filter):
        for page in results:
            try:
                record = reduce_page(page)
            except ValueError as exc:
                log.warning("페이지를 건너뜁니다: %s", exc)
                continue
            records[record.id] = record
    log.debug("노션 레코드 %d건 조회", len(records))
    return records


def retrieve_record(client: Client, page_id: str) -> SourceRecord:
    """Fetch a single page by id and reduce it."""
    return reduce_page(client.pages.retrieve(page_id=page_id))

# Example usage:
# notion = create_client(settings.notion_token)
# records = fetch_records(notion, settings.notion_database_id, settings.courses)
