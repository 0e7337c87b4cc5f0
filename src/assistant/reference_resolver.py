"""
Resolve event references in tasks against the session's event memory
"""
import logging
from dataclasses import replace
from typing import Optional, Tuple

from config.settings import Config
from src.ai_agent.tasks import EventReferenceTask, Task, UpdateEventTask
from src.assistant.errors import TaskValidationError, UnresolvedReference
from src.memory.event_memory import EventMemory
from utils.validators import DateTimeNormalizer

logger = logging.getLogger(__name__)

class ReferenceResolver:
    """
    Turns an id, title fragment or index into a concrete event id.

    Order: an ``eventId`` present in memory, then the ``title`` fragment,
    then the ``index`` ordinal. Update tasks are also backfilled from the
    event's current state on the calendar.
    """

    def __init__(self, memory: EventMemory, calendar, config: Config = None):
        self.memory = memory
        self.calendar = calendar
        self.config = config or Config()

    def resolve(self, task: Task) -> Task:
        if not isinstance(task, EventReferenceTask):
            return task

        event_id, alternatives, by_title = self._resolve_event_id(task)
        resolved = replace(task, event_id=event_id, alternatives=alternatives)

        if isinstance(resolved, UpdateEventTask):
            resolved = self._backfill(resolved, keep_existing_title=by_title)
        return resolved

    def _resolve_event_id(self, task: EventReferenceTask) -> Tuple[str, tuple, bool]:
        if task.event_id and task.event_id in self.memory:
            return task.event_id, (), False

        if task.title:
            matches = self.memory.find_all_by_title_fragment(task.title)
            if matches:
                if len(matches) > 1:
                    logger.warning(f"Title {task.title!r} is ambiguous, matched {matches}; using {matches[0]}")
                return matches[0], tuple(matches[1:]), True

        if task.ordinal is not None:
            event_id = self.memory.find_by_ordinal(task.ordinal)
            if event_id:
                return event_id, (), False

        raise UnresolvedReference(self._describe_failure(task))

    @staticmethod
    def _describe_failure(task: EventReferenceTask) -> str:
        if task.title:
            return f"Cannot find an event matching \"{task.title}\""
        if task.ordinal is not None:
            return f"There is no event number {task.ordinal}"
        if task.event_id:
            return f"Unknown event id {task.event_id}"
        return "No event was specified"

    def _backfill(self, task: UpdateEventTask, keep_existing_title: bool) -> UpdateEventTask:
        """Fill omitted title/date/time from the event as it is now"""
        existing = self.calendar.get_event_details(task.event_id)

        title = None if keep_existing_title else task.title
        title = title or existing.get('summary') or "Untitled event"

        existing_start: Optional[tuple] = DateTimeNormalizer.split_start(existing.get('start') or {})
        existing_date, existing_time = existing_start or (None, None)

        date = task.date or existing_date
        if not date:
            raise TaskValidationError(f"Event {task.event_id} has no start date to keep")
        time = task.time or existing_time or self.config.DEFAULT_EVENT_TIME

        backfilled = replace(task, title=title, date=date, time=time)
        return backfilled
