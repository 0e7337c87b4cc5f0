"""Shared test fixtures for Baklava Bot tests."""

from unittest.mock import MagicMock

import pytest

from src.ai_agent.mock_llm_client import MockLLMClient
from src.assistant.task_executor import TaskExecutor
from src.calendar.mock_calendar_manager import MockCalendarManager
from src.memory.event_memory import EventMemory
from src.search.web_search import WebSearchClient


def make_event(event_id, summary, start, end=None, all_day=False):
    """Calendar API shaped event resource."""
    key = "date" if all_day else "dateTime"
    event = {"id": event_id, "summary": summary, "start": {key: start}}
    if end:
        event["end"] = {key: end}
    return event


@pytest.fixture
def sample_events():
    return [
        make_event("g1", "Gym", "2025-03-30T09:00:00-07:00", "2025-03-30T10:00:00-07:00"),
        make_event("b2", "Baklava meeting", "2025-03-30T18:00:00-07:00", "2025-03-30T19:00:00-07:00"),
        make_event("p3", "Group meeting for pistachios", "2025-03-31T12:00:00-07:00", "2025-03-31T13:00:00-07:00"),
        make_event("h4", "Company holiday", "2025-04-01", "2025-04-02", all_day=True),
    ]


@pytest.fixture
def calendar(sample_events):
    return MockCalendarManager(events=sample_events)


@pytest.fixture
def memory(sample_events):
    memory = EventMemory()
    memory.refresh(sample_events)
    return memory


@pytest.fixture
def web_search():
    return MagicMock(spec=WebSearchClient)


@pytest.fixture
def executor(memory, calendar, web_search):
    return TaskExecutor(memory, calendar, web_search, timeout=2)


@pytest.fixture
def llm():
    return MockLLMClient()
