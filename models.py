"""Reduced Notion records, calendar events and the rules linking them."""
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone as dt_timezone
from typing import Any, Dict, Optional
from zoneinfo import ZoneInfo

DONE_STATUS = "Done"
DONE_MARK = "✅"
NOT_DONE_MARK = "❌"
STRIKE = "\u0336"

# Notion property names used by the course task database
NAME_PROPERTY = "Name"
COURSE_PROPERTY = "Course"
DATE_PROPERTY = "Date"
STATUS_PROPERTY = "Status"


@dataclass(frozen=True)
class SourceRecord:
    """A Notion page reduced to the fields the calendar cares about."""

    id: str
    name: Optional[str] = None
    course: Optional[str] = None
    date: Optional[str] = None
    status: Optional[str] = None


@dataclass(frozen=True)
class TargetEvent:
    """A Google Calendar event in the shape the sync compares.

    ``start`` and ``end`` hold either ``{"date": ...}`` or
    ``{"dateTime": ...}``; ``end`` is inclusive, unlike the Calendar API.
    """

    title: str
    description: str
    start: Dict[str, str]
    end: Dict[str, str]
    id: Optional[str] = None
    raw: Optional[dict] = field(default=None, compare=False, repr=False)

    @property
    def all_day(self) -> bool:
        return "date" in self.start

    def to_gcal_body(self) -> dict:
        end = dict(self.end)
        if self.all_day:
            # Calendar API all-day ends are exclusive
            end["date"] = (date.fromisoformat(self.end["date"]) + timedelta(days=1)).isoformat()
        return {
            "summary": self.title,
            "description": self.description,
            "start": dict(self.start),
            "end": end,
        }

    @classmethod
    def from_gcal(cls, item: dict) -> "TargetEvent":
        start = _time_fields(item.get("start"))
        end = _time_fields(item.get("end")) or dict(start)
        if "date" in end:
            try:
                end["date"] = (date.fromisoformat(end["date"]) - timedelta(days=1)).isoformat()
            except ValueError:
                pass
            if start.get("date") and end["date"] < start["date"]:
                end["date"] = start["date"]
        return cls(
            id=item.get("id"),
            title=item.get("summary") or "",
            description=item.get("description") or "",
            start=start,
            end=end,
            raw=item,
        )


def _time_fields(value: Optional[dict]) -> Dict[str, str]:
    if not value:
        return {}
    if value.get("date"):
        return {"date": value["date"]}
    fields = {}
    if value.get("dateTime"):
        fields["dateTime"] = value["dateTime"]
    if value.get("timeZone"):
        fields["timeZone"] = value["timeZone"]
    return fields


def _get_plain_text(prop: dict) -> str:
    """Extract plain text from a Notion rich text or title property."""
    texts = []
    for t in prop.get("rich_text") or prop.get("title") or []:
        if not isinstance(t, dict):
            continue
        if "plain_text" in t:
            texts.append(t["plain_text"] or "")
        elif t.get("text"):
            texts.append(t["text"].get("content", ""))
    return "".join(texts)


def _option_name(prop: dict, *kinds: str) -> Optional[str]:
    for kind in kinds:
        option = prop.get(kind)
        if isinstance(option, dict) and option.get("name"):
            return option["name"]
    return None


def reduce_page(page: dict) -> SourceRecord:
    """Reduce a Notion page object to a :class:`SourceRecord`.

    Missing or malformed properties leave the matching field unset. When the
    date property holds a range its end wins over its start.
    """
    page_id = page.get("id")
    if not page_id:
        raise ValueError("노션 페이지에 id 가 없습니다")
    props = page.get("properties") or {}

    def prop(name: str) -> dict:
        value = props.get(name)
        return value if isinstance(value, dict) else {}

    name = _get_plain_text(prop(NAME_PROPERTY)) or None
    course = _option_name(prop(COURSE_PROPERTY), "select")
    status = _option_name(prop(STATUS_PROPERTY), "select", "status")

    when = None
    date_value = prop(DATE_PROPERTY).get("date")
    if isinstance(date_value, dict):
        when = date_value.get("end") or date_value.get("start") or None

    return SourceRecord(id=page_id, name=name, course=course, date=when, status=status)


def strike(text: str) -> str:
    return "".join(ch + STRIKE for ch in text)


def event_title(record: SourceRecord, done_style: str = "emoji") -> str:
    """Return the calendar title for ``record``.

    ``emoji`` prefixes a done or not-done glyph; ``strikethrough`` strikes
    the whole title through once the record is done.
    """
    title = ""
    if record.name:
        if record.course:
            title = f"[{record.course}] {record.name}"
        else:
            title = record.name
    done = record.status == DONE_STATUS
    if done_style == "strikethrough":
        return strike(title) if done else title
    if done_style != "emoji":
        raise ValueError(f"unknown done style: {done_style}")
    return f"{DONE_MARK if done else NOT_DONE_MARK} {title}"


def _has_offset(value: str) -> bool:
    try:
        return _parse_datetime(value).tzinfo is not None
    except ValueError:
        return True


def build_event(
    record: SourceRecord, done_style: str = "emoji", timezone: Optional[str] = None
) -> TargetEvent:
    """Return the calendar event implied by ``record``."""
    if not record.date:
        raise ValueError(f"날짜가 없는 레코드입니다: {record.id}")
    if len(record.date) == 10:
        when = {"date": record.date}
    else:
        when = {"dateTime": record.date}
        if timezone and not _has_offset(record.date):
            when["timeZone"] = timezone
    return TargetEvent(
        title=event_title(record, done_style),
        description=record.id,
        start=dict(when),
        end=dict(when),
    )


def _parse_datetime(value: str) -> datetime:
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)


def _epoch_ms(when: Dict[str, Any], timezone: Optional[str]) -> Any:
    raw = when.get("dateTime")
    if not raw:
        return None
    try:
        parsed = _parse_datetime(raw)
    except ValueError:
        return raw
    if parsed.tzinfo is None:
        zone = when.get("timeZone") or timezone
        parsed = parsed.replace(tzinfo=ZoneInfo(zone) if zone else dt_timezone.utc)
    return int(parsed.timestamp() * 1000)


def events_equal(a: TargetEvent, b: TargetEvent, timezone: Optional[str] = None) -> bool:
    """Return True when updating ``b`` to ``a`` would change nothing.

    Timed events compare as instants, so ``+09:00`` and ``Z`` spellings of
    the same moment are equal.
    """
    if a.title != b.title or a.description != b.description:
        return False
    if a.all_day != b.all_day:
        return False
    if a.all_day:
        return a.start.get("date") == b.start.get("date") and a.end.get("date") == b.end.get("date")
    return (
        _epoch_ms(a.start, timezone) == _epoch_ms(b.start, timezone)
        and _epoch_ms(a.end, timezone) == _epoch_ms(b.end, timezone)
    )
