"""Tests for sequential task execution."""

import json
import threading
from unittest.mock import MagicMock

import pytest

from conftest import make_event
from src.ai_agent.tasks import (
    CreateEventTask, DeleteEventTask, GetEventDetailsTask, GetEventsTask,
    PlainAnswerTask, SearchWebTask, UpdateEventTask, task_from_dict,
)
from src.assistant.errors import CollaboratorFailure
from src.assistant.task_executor import TaskExecutor
from src.memory.event_memory import EventMemory
from src.search.web_search import WebSearchResult


def test_log_lines_follow_task_order(executor):
    tasks = [
        PlainAnswerTask(text="first"),
        DeleteEventTask(title="gym"),
        PlainAnswerTask(text="third"),
    ]

    lines = executor.execute(tasks).split("\n")

    assert lines == [
        "Plain answer to user: first",
        "Deleted event g1: Event deleted successfully!",
        "Plain answer to user: third",
    ]


def test_create_event_uses_one_hour_window(executor, calendar):
    log = executor.execute([CreateEventTask(title="Dentist", date="2025-04-02", time="16:30")])

    created = [event for event in calendar.list_events() if event["summary"] == "Dentist"][0]
    assert created["start"]["dateTime"] == "2025-04-02T16:30:00"
    assert created["end"]["dateTime"] == "2025-04-02T17:30:00"
    assert log.startswith('Created event "Dentist" on 2025-04-02 at 16:30: ')


def test_unresolved_delete_never_calls_calendar(memory, web_search):
    calendar = MagicMock()
    executor = TaskExecutor(memory, calendar, web_search, timeout=2)
    task = task_from_dict({"function": "deleteEvent", "parameters": {"title": "dentist"}})
    log = executor.execute([task])

    calendar.delete_event.assert_not_called()
    assert log == ('Error in function "deleteEvent" with parameters {"title": "dentist"}: '
                   'Cannot find an event matching "dentist"')


def test_failing_task_does_not_abort_batch(memory, web_search):
    calendar = MagicMock()
    calendar.get_event_details.side_effect = CollaboratorFailure("calendar", "get failed: 500")
    calendar.delete_event.return_value = "Event deleted successfully!"
    executor = TaskExecutor(memory, calendar, web_search, timeout=2)
    results = executor.run([
        GetEventDetailsTask(event_id="g1"),
        DeleteEventTask(event_id="b2"),
    ])

    assert [result.success for result in results] == [False, True]
    assert "calendar: get failed: 500" in results[0].line
    calendar.delete_event.assert_called_once_with("b2")


def test_unexpected_exception_is_contained(memory, calendar):
    web_search = MagicMock()
    web_search.search_web.side_effect = RuntimeError("boom")
    executor = TaskExecutor(memory, calendar, web_search, timeout=2)
    log = executor.execute([SearchWebTask(query="x"), PlainAnswerTask(text="still here")])

    first, second = log.split("\n")
    assert first.startswith('Error in function "searchWeb"')
    assert first.endswith("boom")
    assert second == "Plain answer to user: still here"


def test_hung_call_times_out(memory, web_search):
    release = threading.Event()
    calendar = MagicMock()
    calendar.get_event_details.side_effect = lambda event_id: release.wait(5)
    executor = TaskExecutor(memory, calendar, web_search, timeout=0.1)
    log = executor.execute([GetEventDetailsTask(event_id="g1"), PlainAnswerTask(text="next")])
    release.set()

    first, second = log.split("\n")
    assert "calendar: timed out after 0.1s" in first
    assert second == "Plain answer to user: next"


def test_hung_calls_do_not_starve_later_calls(memory, web_search):
    release = threading.Event()
    calendar = MagicMock()
    calendar.get_event_details.side_effect = lambda event_id: release.wait(10)
    calendar.list_events.return_value = [make_event("y9", "Yoga", "2025-03-30T07:00:00Z")]
    hung = TaskExecutor(memory, calendar, web_search, timeout=0.1)
    try:
        results = hung.run([GetEventDetailsTask(event_id="g1") for _ in range(12)])
        assert not any(result.success for result in results)

        healthy = TaskExecutor(EventMemory(), calendar, web_search, timeout=1)
        assert healthy.refresh_memory() == calendar.list_events.return_value
    finally:
        release.set()


def test_get_events_refreshes_memory_for_later_tasks(web_search):
    memory = EventMemory()
    calendar = MagicMock()
    calendar.list_events.return_value = [make_event("y9", "Yoga", "2025-03-30T07:00:00Z")]
    calendar.delete_event.return_value = "ok"
    executor = TaskExecutor(memory, calendar, web_search, timeout=2)
    log = executor.execute([GetEventsTask(), DeleteEventTask(title="yoga")])

    assert memory.lookup("y9").ordinal == 1
    calendar.delete_event.assert_called_once_with("y9")
    assert log.split("\n")[1] == "Deleted event y9: ok"


def test_get_events_for_a_date(executor, memory):
    memory.clear()

    log = executor.execute([GetEventsTask(date="2025-03-30")])

    listed = json.loads(log.split(": ", 1)[1])
    assert [event["id"] for event in listed] == ["g1", "b2"]
    # memory is rebuilt from the full listing
    assert len(memory) == 4


def test_update_event(executor, calendar):
    log = executor.execute([UpdateEventTask(event_id="g1", time="18:00")])

    updated = calendar.get_event_details("g1")
    assert updated["start"]["dateTime"] == "2025-03-30T18:00:00"
    assert updated["summary"] == "Gym"
    assert log.startswith('Updated event g1 → summary "Gym", date 2025-03-30 time 18:00')


def test_ambiguous_reference_is_noted(executor):
    log = executor.execute([GetEventDetailsTask(title="meeting")])

    assert log.startswith("Fetched details for event b2: ")
    assert log.endswith('(note: "meeting" also matched p3; the first match was used)')


def test_search_web_logs_serialised_results(executor, web_search):
    web_search.search_web.return_value = [WebSearchResult("Baklava", "https://b.example", "sweet", "layers")]

    log = executor.execute([SearchWebTask(query="baklava")])

    assert log.startswith('Searched the web for "baklava": ')
    payload = json.loads(log.split(": ", 1)[1])
    assert payload == [{"title": "Baklava", "url": "https://b.example",
                        "combinedText": "Snippet: sweet\nCrawled Content: layers"}]


def test_unknown_and_invalid_tasks(executor):
    tasks = [
        task_from_dict({"function": "orderPizza", "parameters": {}}),
        task_from_dict({"function": "createEvent", "parameters": {"title": "x", "time": "whenever"}}),
    ]

    unknown, invalid = executor.execute(tasks).split("\n")

    assert unknown == 'Unknown function "orderPizza". No action taken.'
    assert invalid.startswith('Error in function "createEvent" with parameters')


def test_empty_task_list(executor):
    assert executor.execute([]) == ""


@pytest.mark.parametrize("count", [1, 5])
def test_every_task_produces_one_line(executor, count):
    tasks = [PlainAnswerTask(text=str(i)) for i in range(count)]

    assert executor.execute(tasks).split("\n") == [f"Plain answer to user: {i}" for i in range(count)]
