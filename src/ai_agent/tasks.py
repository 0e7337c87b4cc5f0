"""
Typed tasks produced by the intent classifier

Each function kind the model may request has its own dataclass. Raw
``{function, parameters}`` objects are converted with ``task_from_dict``,
which coerces dates and times and turns anything it cannot coerce into an
``InvalidTask`` so the executor can report it in place.
"""
import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

from src.assistant.errors import TaskValidationError
from utils.validators import DateTimeNormalizer

logger = logging.getLogger(__name__)

CREATE_EVENT = "createEvent"
DELETE_EVENT = "deleteEvent"
UPDATE_EVENT = "updateEvent"
GET_EVENTS = "getEvents"
GET_EVENT_DETAILS = "getEventDetails"
SEARCH_WEB = "searchWeb"
PLAIN_ANSWER = "plainAnswer"

TASK_FUNCTIONS = (CREATE_EVENT, DELETE_EVENT, UPDATE_EVENT, GET_EVENTS,
                  GET_EVENT_DETAILS, SEARCH_WEB, PLAIN_ANSWER)

@dataclass
class Task:
    function: str = field(init=False, default="")
    parameters: Dict[str, str] = field(default_factory=dict, repr=False, compare=False)

    def describe_parameters(self) -> str:
        return json.dumps(self.parameters, ensure_ascii=False)

@dataclass
class EventReferenceTask(Task):
    """A task that targets an existing event by id, title fragment or index"""
    event_id: Optional[str] = None
    title: Optional[str] = None
    ordinal: Optional[int] = None
    alternatives: Tuple[str, ...] = field(default=(), repr=False, compare=False)

@dataclass
class CreateEventTask(Task):
    title: str = "Untitled event"
    date: str = ""
    time: str = ""

    def __post_init__(self):
        self.function = CREATE_EVENT

@dataclass
class DeleteEventTask(EventReferenceTask):
    def __post_init__(self):
        self.function = DELETE_EVENT

@dataclass
class UpdateEventTask(EventReferenceTask):
    date: Optional[str] = None
    time: Optional[str] = None

    def __post_init__(self):
        self.function = UPDATE_EVENT

@dataclass
class GetEventsTask(Task):
    date: Optional[str] = None

    def __post_init__(self):
        self.function = GET_EVENTS

@dataclass
class GetEventDetailsTask(EventReferenceTask):
    def __post_init__(self):
        self.function = GET_EVENT_DETAILS

@dataclass
class SearchWebTask(Task):
    query: str = ""

    def __post_init__(self):
        self.function = SEARCH_WEB

@dataclass
class PlainAnswerTask(Task):
    text: str = ""

    def __post_init__(self):
        self.function = PLAIN_ANSWER

@dataclass
class UnknownTask(Task):
    """A function name outside the recognised set"""
    name: str = ""

    def __post_init__(self):
        self.function = self.name

@dataclass
class InvalidTask(Task):
    """A recognised function whose parameters failed validation"""
    name: str = ""
    reason: str = ""

    def __post_init__(self):
        self.function = self.name


def _text(parameters: Dict[str, Any], key: str) -> Optional[str]:
    value = parameters.get(key)
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _date(parameters: Dict[str, Any], key: str = "date") -> Optional[str]:
    value = _text(parameters, key)
    if value is None:
        return None
    try:
        return DateTimeNormalizer.normalize_date(value)
    except ValueError as e:
        raise TaskValidationError(str(e))


def _time(parameters: Dict[str, Any], key: str = "time") -> Optional[str]:
    value = _text(parameters, key)
    if value is None:
        return None
    try:
        return DateTimeNormalizer.normalize_time(value)
    except ValueError as e:
        raise TaskValidationError(str(e))


def _ordinal(parameters: Dict[str, Any]) -> Optional[int]:
    value = _text(parameters, "index")
    if value is None:
        return None
    try:
        ordinal = int(value.rstrip('.)'))
    except ValueError:
        raise TaskValidationError(f"Invalid index: {value!r}")
    if ordinal < 1:
        raise TaskValidationError(f"Invalid index: {value!r}")
    return ordinal


def _reference(parameters: Dict[str, Any]) -> Dict[str, Any]:
    event_id = _text(parameters, "eventId")
    title = _text(parameters, "title")
    try:
        ordinal = _ordinal(parameters)
    except TaskValidationError as e:
        if not (event_id or title):
            raise
        # the id or title still identifies the event
        logger.warning(f"Ignoring {e}")
        ordinal = None
    return {"event_id": event_id, "title": title, "ordinal": ordinal}


def task_from_dict(raw: Any, now: datetime = None) -> Task:
    """Build a typed task from one ``{function, parameters}`` object"""
    if not isinstance(raw, dict):
        return InvalidTask(name=str(raw), reason="task is not an object")

    name = str(raw.get("function") or "").strip()
    parameters = raw.get("parameters") or {}
    if not isinstance(parameters, dict):
        return InvalidTask(name=name, reason="parameters is not an object")
    parameters = {str(k): v if isinstance(v, str) else json.dumps(v) if isinstance(v, (dict, list)) else str(v)
                  for k, v in parameters.items() if v is not None}

    now = now or datetime.now()
    try:
        if name == CREATE_EVENT:
            task = CreateEventTask(
                title=_text(parameters, "title") or "Untitled event",
                date=_date(parameters) or now.strftime("%Y-%m-%d"),
                time=_time(parameters) or now.strftime("%H:%M"),
            )
        elif name == DELETE_EVENT:
            task = DeleteEventTask(**_reference(parameters))
        elif name == UPDATE_EVENT:
            task = UpdateEventTask(date=_date(parameters), time=_time(parameters), **_reference(parameters))
        elif name == GET_EVENTS:
            task = GetEventsTask(date=_date(parameters))
        elif name == GET_EVENT_DETAILS:
            task = GetEventDetailsTask(**_reference(parameters))
        elif name == SEARCH_WEB:
            query = _text(parameters, "query")
            if not query:
                raise TaskValidationError("missing query")
            task = SearchWebTask(query=query)
        elif name == PLAIN_ANSWER:
            task = PlainAnswerTask(text=_text(parameters, "text") or "")
        else:
            task = UnknownTask(name=name)
    except TaskValidationError as e:
        logger.warning(f"Rejected {name} task: {e}")
        task = InvalidTask(name=name, reason=str(e))

    task.parameters = parameters
    return task
