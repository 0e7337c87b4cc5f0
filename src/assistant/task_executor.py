"""
Task execution against the calendar and web-search collaborators
"""
import json
import logging
import threading
from concurrent.futures import Future, TimeoutError as FutureTimeout
from typing import Any, Dict, List, Optional, Sequence

from config.settings import Config
from src.ai_agent.tasks import (
    CreateEventTask, DeleteEventTask, GetEventDetailsTask, GetEventsTask,
    InvalidTask, PlainAnswerTask, SearchWebTask, Task, UnknownTask, UpdateEventTask,
)
from src.assistant.errors import AssistantError, TaskTimeout
from src.assistant.reference_resolver import ReferenceResolver
from src.calendar.calendar_manager import build_time_range
from src.memory.event_memory import EventMemory

logger = logging.getLogger(__name__)


def _dump(payload: Any) -> str:
    return json.dumps(payload, ensure_ascii=False, default=str)


class BoundedCollaborator:
    """
    Proxy that runs each method call of a collaborator with a timeout.

    Every call gets its own daemon thread, so a call that never returns is
    abandoned without holding up calls made after it.
    """

    def __init__(self, target, service: str, timeout: float):
        self._target = target
        self._service = service
        self._timeout = timeout

    def __getattr__(self, name):
        attr = getattr(self._target, name)
        if not callable(attr):
            return attr

        def bounded(*args, **kwargs):
            future = Future()

            def call():
                if not future.set_running_or_notify_cancel():
                    return
                try:
                    future.set_result(attr(*args, **kwargs))
                except BaseException as e:
                    future.set_exception(e)

            threading.Thread(target=call, name=f"{self._service}.{name}", daemon=True).start()
            try:
                return future.result(timeout=self._timeout)
            except FutureTimeout:
                logger.error(f"⏱️  {self._service}.{name} exceeded {self._timeout:g}s")
                raise TaskTimeout(self._service, self._timeout)

        return bounded


class TaskResult:
    """Outcome of one task, rendered as one execution log line"""

    def __init__(self, task: Task, success: bool, line: str):
        self.task = task
        self.success = success
        self.line = line

    @classmethod
    def failure(cls, task: Task, message: str) -> "TaskResult":
        return cls(task, False,
                   f"Error in function \"{task.function}\" with parameters {task.describe_parameters()}: {message}")

    def __repr__(self):
        return f"TaskResult({self.task.function!r}, success={self.success})"


class TaskExecutor:
    """
    Runs classified tasks strictly in order.

    Every external call is bounded by ``Config.TASK_TIMEOUT``. A task that
    fails for any reason becomes a failure line and the batch carries on.
    """

    def __init__(self, memory: EventMemory, calendar, web_search,
                 config: Config = None, timeout: Optional[float] = None):
        self.config = config or Config()
        self.memory = memory
        self.timeout = timeout if timeout is not None else self.config.TASK_TIMEOUT
        self.calendar = BoundedCollaborator(calendar, "calendar", self.timeout)
        self.web_search = BoundedCollaborator(web_search, "search", self.timeout)
        self.resolver = ReferenceResolver(memory, self.calendar, self.config)

        self._handlers = {
            CreateEventTask: self._create_event,
            DeleteEventTask: self._delete_event,
            UpdateEventTask: self._update_event,
            GetEventsTask: self._get_events,
            GetEventDetailsTask: self._get_event_details,
            SearchWebTask: self._search_web,
            PlainAnswerTask: self._plain_answer,
        }

    def refresh_memory(self) -> List[Dict[str, Any]]:
        """List the calendar and rebuild event memory from it"""
        events = self.calendar.list_events()
        self.memory.refresh(events)
        return events

    def execute(self, tasks: Sequence[Task]) -> str:
        """Run the tasks and return the execution log"""
        return "\n".join(result.line for result in self.run(tasks))

    def run(self, tasks: Sequence[Task]) -> List[TaskResult]:
        results = []
        for position, task in enumerate(tasks, 1):
            logger.info(f"▶️  Task {position}/{len(tasks)}: {task.function} {task.describe_parameters()}")
            result = self._run_one(task)
            if result.success:
                logger.info(f"   ✅ {task.function} done")
            else:
                logger.warning(f"   ❌ {result.line}")
            results.append(result)
        return results

    def _run_one(self, task: Task) -> TaskResult:
        if isinstance(task, InvalidTask):
            return TaskResult.failure(task, task.reason)
        if isinstance(task, UnknownTask):
            return TaskResult(task, True, f"Unknown function \"{task.function}\". No action taken.")

        handler = self._handlers.get(type(task))
        if handler is None:
            return TaskResult(task, True, f"Unknown function \"{task.function}\". No action taken.")

        try:
            return TaskResult(task, True, handler(task))
        except AssistantError as e:
            return TaskResult.failure(task, str(e))
        except Exception as e:
            logger.exception(f"Unexpected error in {task.function}")
            return TaskResult.failure(task, str(e))

    @staticmethod
    def _ambiguity_note(task) -> str:
        if not task.alternatives:
            return ""
        return (f" (note: \"{task.title}\" also matched {', '.join(task.alternatives)};"
                f" the first match was used)")

    def _create_event(self, task: CreateEventTask) -> str:
        start, end = build_time_range(task.date, task.time)
        result = self.calendar.create_event(task.title, start, end)
        return f"Created event \"{task.title}\" on {task.date} at {task.time}: {_dump(result)}"

    def _delete_event(self, task: DeleteEventTask) -> str:
        task = self.resolver.resolve(task)
        result = self.calendar.delete_event(task.event_id)
        return f"Deleted event {task.event_id}: {result}{self._ambiguity_note(task)}"

    def _update_event(self, task: UpdateEventTask) -> str:
        task = self.resolver.resolve(task)
        start, end = build_time_range(task.date, task.time)
        result = self.calendar.update_event(task.event_id, task.title, start, end)
        return (f"Updated event {task.event_id} → summary \"{task.title}\", date {task.date} "
                f"time {task.time}: {_dump(result)}{self._ambiguity_note(task)}")

    def _get_events(self, task: GetEventsTask) -> str:
        events = self.refresh_memory()
        if task.date:
            events = [event for event in events
                      if ((event.get('start') or {}).get('dateTime') or
                          (event.get('start') or {}).get('date') or '').startswith(task.date)]
            return f"Fetched calendar events for {task.date}: {_dump(events)}"
        return f"Fetched calendar events: {_dump(events)}"

    def _get_event_details(self, task: GetEventDetailsTask) -> str:
        task = self.resolver.resolve(task)
        result = self.calendar.get_event_details(task.event_id)
        return f"Fetched details for event {task.event_id}: {_dump(result)}{self._ambiguity_note(task)}"

    def _search_web(self, task: SearchWebTask) -> str:
        results = self.web_search.search_web(task.query)
        return f"Searched the web for \"{task.query}\": {_dump([result.to_dict() for result in results])}"

    def _plain_answer(self, task: PlainAnswerTask) -> str:
        return f"Plain answer to user: {task.text}"
