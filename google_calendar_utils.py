"""Google Calendar integration helpers."""
from typing import Iterator, List

from google.oauth2 import service_account
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build

from config import ConfigurationError, Settings
from logging_utils import get_logger
from models import TargetEvent

log = get_logger(__name__)

SCOPES = [
    "https://www.googleapis.com/auth/calendar",
    "https://www.googleapis.com/auth/tasks.readonly",
]
TOKEN_URI = "https://oauth2.googleapis.com/token"


def load_credentials(settings: Settings):
    """Return Google credentials from a service account or a refresh token."""
    if settings.google_credentials_file:
        return service_account.Credentials.from_service_account_file(
            settings.google_credentials_file, scopes=SCOPES
        )
    if settings.google_client_id and settings.google_client_secret and settings.google_refresh_token:
        return Credentials(
            None,
            refresh_token=settings.google_refresh_token,
            client_id=settings.google_client_id,
            client_secret=settings.google_client_secret,
            token_uri=TOKEN_URI,
            scopes=SCOPES,
        )
    raise ConfigurationError(
        "GOOGLE_CREDENTIALS_FILE 또는 GOOGLE_CLIENT_ID/GOOGLE_CLIENT_SECRET/"
        "GOOGLE_REFRESH_TOKEN 설정이 필요합니다"
    )


def build_service(credentials):
    """Return a Calendar v3 service object."""
    return build("calendar", "v3", credentials=credentials, cache_discovery=False)


def iter_event_pages(service, calendar_id: str) -> Iterator[List[dict]]:
    """Yield one list of raw event resources per ``events.list`` call.

    Recurring series come back as their master event, so one delete removes
    the whole series.
    """
    page_token = None
    while True:
        data = (
            service.events()
            .list(
                calendarId=calendar_id,
                singleEvents=False,
                showDeleted=False,
                maxResults=2500,
                pageToken=page_token,
            )
            .execute()
        )
        yield data.get("items", [])
        page_token = data.get("nextPageToken")
        if not page_token:
            break


def fetch_events(service, calendar_id: str) -> List[TargetEvent]:
    """Return every event currently in the calendar."""
    events: List[TargetEvent] = []
    for items in iter_event_pages(service, calendar_id):
        events.extend(TargetEvent.from_gcal(item) for item in items)
    log.debug("캘린더 이벤트 %d건 조회", len(events))
    return events


def insert_event(service, calendar_id: str, event: TargetEvent) -> dict:
    """Create ``event`` in the calendar and return the API resource."""
    res = service.events().insert(calendarId=calendar_id, body=event.to_gcal_body()).execute()
    log.info("캘린더 이벤트 생성: %s", event.title)
    return res


def update_event(service, calendar_id: str, event_id: str, event: TargetEvent) -> dict:
    """Replace title, description, start and end of an existing event."""
    res = (
        service.events()
        .update(calendarId=calendar_id, eventId=event_id, body=event.to_gcal_body())
        .execute()
    )
    log.info("캘린더 이벤트 업데이트: %s (%s)", event.title, event_id)
    return res


def delete_event(service, calendar_id: str, event_id: str) -> None:
    service.events().delete(calendarId=calendar_id, eventId=event_id).execute()
    log.info("캘린더 이벤트 삭제: %s", event_id)
