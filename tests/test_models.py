import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
from models import SourceRecord, TargetEvent, build_event, event_title, events_equal, reduce_page
import pytest


def test_build_event_done_all_day():
    record = SourceRecord(id="abc", name="HW1", course="CS101", date="2024-03-01", status="Done")

    event = build_event(record)

    assert event.title == "✅ [CS101] HW1"
    assert event.description == "abc"
    assert event.start == {"date": "2024-03-01"}
    assert event.end == {"date": "2024-03-01"}
    assert event.all_day


@pytest.mark.parametrize(
    "record, expected",
    [
        (SourceRecord(id="1"), "❌ "),
        (SourceRecord(id="1", name="Read", status="In progress"), "❌ Read"),
        (SourceRecord(id="1", course="CS101", status="Done"), "✅ "),
        (SourceRecord(id="1", name="Lab", course="CS101", status="done"), "❌ [CS101] Lab"),
    ],
)
def test_event_title_emoji(record, expected):
    assert event_title(record) == expected


def test_event_title_strikethrough():
    done = SourceRecord(id="1", name="Lab", status="Done")
    todo = SourceRecord(id="1", name="Lab")

    assert event_title(done, "strikethrough") == "L\u0336a\u0336b\u0336"
    assert event_title(todo, "strikethrough") == "Lab"


def test_build_event_timed_zero_duration():
    record = SourceRecord(id="x", name="Exam", date="2024-03-01T09:00:00.000+09:00")

    event = build_event(record)

    assert not event.all_day
    assert event.start == event.end == {"dateTime": "2024-03-01T09:00:00.000+09:00"}


def test_build_event_adds_timezone_for_naive_times():
    record = SourceRecord(id="x", name="Exam", date="2024-03-01T09:00:00")

    event = build_event(record, timezone="Asia/Seoul")

    assert event.start == {"dateTime": "2024-03-01T09:00:00", "timeZone": "Asia/Seoul"}


def test_build_event_requires_date():
    with pytest.raises(ValueError):
        build_event(SourceRecord(id="x", name="Exam"))


def test_reduce_page_prefers_range_end():
    page = {
        "id": "p1",
        "properties": {
            "Name": {"title": [{"plain_text": "Essay "}, {"plain_text": "draft"}]},
            "Course": {"select": {"name": "ENG"}},
            "Date": {"date": {"start": "2024-03-01", "end": "2024-03-05"}},
            "Status": {"status": {"name": "Done"}},
        },
    }

    record = reduce_page(page)

    assert record == SourceRecord(id="p1", name="Essay draft", course="ENG", date="2024-03-05", status="Done")


def test_reduce_page_tolerates_missing_fields():
    """누락되거나 잘못된 속성은 None 으로 남아야 한다."""
    page = {
        "id": "p2",
        "properties": {
            "Name": {"title": []},
            "Course": {"select": None},
            "Date": {"date": None},
            "Status": "broken",
        },
    }

    assert reduce_page(page) == SourceRecord(id="p2")
    assert reduce_page({"id": "p3"}) == SourceRecord(id="p3")


def test_reduce_page_requires_id():
    with pytest.raises(ValueError):
        reduce_page({"properties": {}})


def test_gcal_body_round_trip_keeps_inclusive_end():
    event = build_event(SourceRecord(id="abc", name="HW", date="2024-12-31"))

    body = event.to_gcal_body()
    parsed = TargetEvent.from_gcal(dict(body, id="e1"))

    assert body["end"] == {"date": "2025-01-01"}
    assert parsed.end == {"date": "2024-12-31"}
    assert parsed.id == "e1"
    assert events_equal(event, parsed)


def test_from_gcal_missing_description():
    parsed = TargetEvent.from_gcal({"id": "e", "start": {"date": "2024-01-01"}, "end": {"date": "2024-01-02"}})

    assert parsed.description == ""
    assert parsed.title == ""


def test_events_equal_compares_instants():
    a = TargetEvent("t", "d", {"dateTime": "2024-03-01T10:00:00.000+09:00"}, {"dateTime": "2024-03-01T10:00:00.000+09:00"})
    b = TargetEvent("t", "d", {"dateTime": "2024-03-01T01:00:00Z"}, {"dateTime": "2024-03-01T01:00:00Z"})
    c = TargetEvent("t", "d", {"dateTime": "2024-03-01T02:00:00Z"}, {"dateTime": "2024-03-01T02:00:00Z"})

    assert events_equal(a, b)
    assert not events_equal(a, c)


def test_events_equal_naive_time_uses_timezone():
    a = TargetEvent("t", "d", {"dateTime": "2024-03-01T10:00:00"}, {"dateTime": "2024-03-01T10:00:00"})
    b = TargetEvent("t", "d", {"dateTime": "2024-03-01T01:00:00Z"}, {"dateTime": "2024-03-01T01:00:00Z"})

    assert events_equal(a, b, "Asia/Seoul")
    assert not events_equal(a, b)


def test_events_equal_rejects_shape_and_text_changes():
    day = TargetEvent("t", "d", {"date": "2024-03-01"}, {"date": "2024-03-01"})
    timed = TargetEvent("t", "d", {"dateTime": "2024-03-01T00:00:00Z"}, {"dateTime": "2024-03-01T00:00:00Z"})

    assert not events_equal(day, timed)
    assert not events_equal(day, TargetEvent("other", "d", day.start, day.end))
    assert not events_equal(day, TargetEvent("t", "other", day.start, day.end))


def test_from_gcal_keeps_description_verbatim():
    parsed = TargetEvent.from_gcal({"id": "e", "description": "abc\n", "start": {"date": "2024-01-01"}, "end": {"date": "2024-01-02"}})
    wanted = build_event(SourceRecord(id="abc", date="2024-01-01"))

    assert parsed.description == "abc\n"
    assert not events_equal(wanted, TargetEvent(wanted.title, parsed.description, parsed.start, parsed.end))
