"""
Short-term memory of the most recently listed calendar events
"""
import logging
from typing import Any, Dict, Iterable, Iterator, List, Optional

logger = logging.getLogger(__name__)

class KnownEvent:
    """Lightweight projection of a listed calendar event"""

    def __init__(self, event_id: str, summary: str, start_time: str,
                 end_time: str = None, ordinal: int = 0):
        self.event_id = event_id
        self.summary = summary
        self.start_time = start_time
        self.end_time = end_time
        self.ordinal = ordinal

    @classmethod
    def from_calendar_event(cls, event: Dict[str, Any], ordinal: int) -> "KnownEvent":
        """Project a Calendar API event resource"""
        start = event.get('start') or {}
        end = event.get('end') or {}
        return cls(
            event_id=event.get('id', ''),
            summary=event.get('summary') or 'Untitled event',
            start_time=start.get('dateTime') or start.get('date') or '',
            end_time=end.get('dateTime') or end.get('date'),
            ordinal=ordinal
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "eventId": self.event_id,
            "summary": self.summary,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "ordinal": self.ordinal
        }

    def __eq__(self, other):
        return isinstance(other, KnownEvent) and self.to_dict() == other.to_dict()

    def __repr__(self):
        return f"KnownEvent({self.ordinal}, {self.event_id!r}, {self.summary!r})"

class EventMemory:
    """
    Event id -> KnownEvent mapping rebuilt from each calendar listing.

    Ordinals are 1..N in listing order and are only meaningful until the
    next refresh. Each conversation session owns its own instance.
    """

    def __init__(self):
        self._events: Dict[str, KnownEvent] = {}

    def refresh(self, events: Iterable[Dict[str, Any]]) -> None:
        """Replace the whole mapping with a new listing"""
        refreshed = {}
        for ordinal, event in enumerate(events, 1):
            known = KnownEvent.from_calendar_event(event, ordinal)
            refreshed[known.event_id] = known
        self._events = refreshed
        logger.debug(f"Event memory refreshed with {len(refreshed)} events")

    def lookup(self, event_id: Optional[str]) -> Optional[KnownEvent]:
        if not event_id:
            return None
        return self._events.get(event_id)

    def find_by_title_fragment(self, fragment: str) -> Optional[str]:
        """Case-insensitive substring match on summary; first listed match wins"""
        matches = self.find_all_by_title_fragment(fragment)
        return matches[0] if matches else None

    def find_all_by_title_fragment(self, fragment: str) -> List[str]:
        """All event ids whose summary contains the fragment, in listing order"""
        needle = (fragment or '').strip().lower()
        if not needle:
            return []
        return [event_id for event_id, known in self._events.items()
                if needle in known.summary.lower()]

    def find_by_ordinal(self, ordinal: int) -> Optional[str]:
        for event_id, known in self._events.items():
            if known.ordinal == ordinal:
                return event_id
        return None

    def snapshot(self) -> List[KnownEvent]:
        """Events in ordinal order"""
        return list(self._events.values())

    def clear(self) -> None:
        self._events = {}

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[KnownEvent]:
        return iter(self.snapshot())

    def __contains__(self, event_id) -> bool:
        return event_id in self._events
