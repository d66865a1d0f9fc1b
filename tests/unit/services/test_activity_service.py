from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from salesdesk.core.exceptions import ValidationError
from salesdesk.services.activity_service import ActivityService

START = datetime(2026, 5, 4, 9, 0, tzinfo=timezone.utc)


def test_complete_activity_stamps_completion(db_session):
    service = ActivityService(db=db_session)
    activity = service.create_activity(title="Intro call", type="call")

    done = service.complete_activity(activity.id, now=START)

    assert done.is_completed is True
    assert done.completed_at is not None
    assert service.complete_activity("missing") is None


def test_recent_activities_are_limited(db_session):
    service = ActivityService(db=db_session)
    for index in range(12):
        service.create_activity(title=f"Note {index}", type="note")

    assert len(service.recent_activities()) == 10
    assert len(service.recent_activities(limit=3)) == 3


def test_event_end_must_not_precede_start(db_session):
    service = ActivityService(db=db_session)
    with pytest.raises(ValidationError):
        service.create_event(title="Broken", start_date=START, end_date=START - timedelta(hours=1))

    event = service.create_event(title="Demo", start_date=START, end_date=START + timedelta(hours=1))
    with pytest.raises(ValidationError):
        service.update_event(event.id, {"end_date": START - timedelta(days=1)})


def test_list_events_by_window(db_session):
    service = ActivityService(db=db_session)
    service.create_event(title="Monday", start_date=START, end_date=START + timedelta(hours=1))
    service.create_event(title="Next week", start_date=START + timedelta(days=7), end_date=START + timedelta(days=7, hours=1))

    window = service.list_events(start=START - timedelta(days=1), end=START + timedelta(days=2))

    assert [event.title for event in window] == ["Monday"]
    assert len(service.list_events()) == 2
