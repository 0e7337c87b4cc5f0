"""
Intent classification: chat message -> ordered list of typed tasks
"""
import json
import logging
import re
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from config.settings import Config
from src.ai_agent.tasks import TASK_FUNCTIONS, Task, task_from_dict
from src.assistant.errors import ClassificationParseFailure, CollaboratorFailure
from src.memory.event_memory import KnownEvent

logger = logging.getLogger(__name__)

_FENCED_JSON = re.compile(r"```json([\s\S]*?)```", re.IGNORECASE)


class ParseResult:
    """Outcome of parsing one classifier response"""

    def __init__(self, tasks: List[Dict[str, Any]] = None,
                 error: Optional[ClassificationParseFailure] = None):
        self.tasks = tasks or []
        self.error = error

    @property
    def ok(self) -> bool:
        return self.error is None


def parse_task_response(raw: str) -> ParseResult:
    """
    Parse raw model output into raw task objects.

    A fenced ```json block is preferred over the raw text; stray backticks
    are stripped. Anything that is not a JSON object with a ``tasks`` list
    is a parse failure, and the failed result carries an empty task list.
    """
    text = raw or ""
    fenced = _FENCED_JSON.search(text)
    if fenced:
        text = fenced.group(1)
    text = text.replace("`", "").strip()

    try:
        parsed = json.loads(text)
    except json.JSONDecodeError as e:
        return ParseResult(error=ClassificationParseFailure(f"invalid JSON: {e}"))

    if not isinstance(parsed, dict):
        return ParseResult(error=ClassificationParseFailure("response is not a JSON object"))
    tasks = parsed.get("tasks")
    if not isinstance(tasks, list):
        return ParseResult(error=ClassificationParseFailure("'tasks' is missing or not a list"))
    return ParseResult(tasks=tasks)


def format_conversation(history: Sequence, new_message: str) -> str:
    """Render the conversation as ``sender: text`` lines ending with the new message"""
    lines = [f"{message.sender}: {message.text}" for message in history]
    lines.append(f"user: {new_message}")
    return "\n".join(lines) + "\n"


def format_known_events(events: Sequence[KnownEvent]) -> str:
    if not events:
        return "No known events."
    note = "Here is the list of known events.\nThe user may refer to them by index, time, date, or summary:\n"
    for event in events:
        note += (f"{event.ordinal}) [ID: {event.event_id}]\n"
                 f"    summary: \"{event.summary}\"\n"
                 f"    starts at: {event.start_time}\n\n")
    return note.rstrip() + "\n"


class IntentClassifier:
    """Asks the model which tasks a message calls for"""

    def __init__(self, llm_client, config: Config = None):
        self.llm_client = llm_client
        self.config = config or Config()

    def build_prompt(self, history: Sequence, new_message: str,
                     known_events: Sequence[KnownEvent], now: datetime = None) -> str:
        now = now or datetime.now()
        return self.config.INTENT_PROMPT.format(
            today=now.strftime(self.config.DATE_FORMAT),
            now=now.strftime(self.config.TIME_FORMAT),
            known_events=format_known_events(known_events),
            conversation=format_conversation(history, new_message),
            intents=", ".join(TASK_FUNCTIONS),
            message=new_message
        )

    def classify(self, history: Sequence, new_message: str,
                 known_events: Sequence[KnownEvent], now: datetime = None) -> List[Task]:
        """Return the ordered tasks for a message; never raises"""
        now = now or datetime.now()
        prompt = self.build_prompt(history, new_message, known_events, now)

        try:
            raw = self.llm_client.generate(prompt)
        except CollaboratorFailure as e:
            logger.warning(f"Intent classification call failed, continuing without tasks: {e}")
            return []

        result = parse_task_response(raw)
        if not result.ok:
            logger.warning(f"Could not parse classifier output: {result.error}")
            logger.debug(f"Raw classifier output: {raw!r}")
            return []

        tasks = [task_from_dict(item, now) for item in result.tasks]
        logger.info(f"Classified {len(tasks)} task(s): {[task.function for task in tasks]}")
        return tasks
