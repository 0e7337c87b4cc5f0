"""
Mock Calendar Manager for running without Google Calendar credentials
"""
import logging
import uuid
from copy import deepcopy
from datetime import datetime, timedelta
from typing import Any, Dict, List

from config.settings import Config
from src.assistant.errors import CollaboratorFailure

logger = logging.getLogger(__name__)

class MockCalendarManager:
    """In-memory calendar with the same surface as CalendarManager"""

    def __init__(self, events: List[Dict[str, Any]] = None):
        self.config = Config()
        self._events: Dict[str, Dict[str, Any]] = {}
        for event in (events if events is not None else self._create_mock_events()):
            self._events[event['id']] = deepcopy(event)

    def _create_mock_events(self) -> List[Dict[str, Any]]:
        """A few demo events over the next two days"""
        tomorrow = (datetime.now() + timedelta(days=1)).replace(minute=0, second=0, microsecond=0)
        events = []
        for i, (summary, hour) in enumerate([("GYM", 9), ("Baklava Bot developer meeting", 10),
                                              ("All hands meeting with shareholders", 11)]):
            start = tomorrow.replace(hour=hour)
            events.append(self._make_event(f"mock{i + 1}", summary,
                                           start.strftime('%Y-%m-%dT%H:%M:%S'),
                                           (start + timedelta(hours=1)).strftime('%Y-%m-%dT%H:%M:%S')))
        return events

    def _make_event(self, event_id: str, summary: str, start: str, end: str) -> Dict[str, Any]:
        return {
            'id': event_id,
            'summary': summary,
            'start': {'dateTime': start, 'timeZone': self.config.TIMEZONE},
            'end': {'dateTime': end, 'timeZone': self.config.TIMEZONE},
        }

    def _require(self, event_id: str) -> Dict[str, Any]:
        if event_id not in self._events:
            raise CollaboratorFailure("calendar", f"event {event_id} not found")
        return self._events[event_id]

    def list_events(self) -> List[Dict[str, Any]]:
        logger.info(f"📋 MOCK: Listing {len(self._events)} events")
        return [deepcopy(event) for event in self._events.values()]

    def create_event(self, summary: str, start: str, end: str) -> Dict[str, Any]:
        event = self._make_event(uuid.uuid4().hex[:26], summary, start, end)
        self._events[event['id']] = event
        logger.info(f"📋 MOCK: Created {event['id']} ({summary})")
        return deepcopy(event)

    def delete_event(self, event_id: str) -> str:
        self._require(event_id)
        del self._events[event_id]
        logger.info(f"📋 MOCK: Deleted {event_id}")
        return "Event deleted successfully!"

    def update_event(self, event_id: str, summary: str, start: str, end: str) -> Dict[str, Any]:
        self._require(event_id)
        self._events[event_id] = self._make_event(event_id, summary, start, end)
        logger.info(f"📋 MOCK: Updated {event_id}")
        return deepcopy(self._events[event_id])

    def get_event_details(self, event_id: str) -> Dict[str, Any]:
        return deepcopy(self._require(event_id))
