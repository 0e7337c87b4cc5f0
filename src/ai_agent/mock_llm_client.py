"""
Mock LLM client for running without a model endpoint
"""
import json
import logging
import re
from collections import deque
from typing import Callable, Iterable, List, Optional, Union

from src.assistant.errors import CollaboratorFailure

logger = logging.getLogger(__name__)

Responder = Callable[[str], str]

class MockLLMClient:
    """
    Scripted LLM client.

    Queued responses are returned in order; a queued Exception is raised
    instead. Once the queue is empty the keyword responder takes over, which
    is enough for an offline demo of the calendar intents.
    """

    def __init__(self, responses: Iterable[Union[str, Exception]] = None,
                 responder: Optional[Responder] = None, model_name: str = None):
        self.model_name = model_name or "mock-llm"
        self._queue = deque(responses or [])
        self._responder = responder or self._keyword_responder
        self.prompts: List[str] = []
        logger.info(f"Initialized Mock LLM client: {self.model_name}")

    def queue(self, *responses: Union[str, Exception]) -> None:
        self._queue.extend(responses)

    def generate(self, prompt: str, temperature: Optional[float] = None) -> str:
        self.prompts.append(prompt)
        if self._queue:
            response = self._queue.popleft()
            if isinstance(response, Exception):
                raise response
            return response
        return self._responder(prompt)

    @staticmethod
    def _keyword_responder(prompt: str) -> str:
        """Very small rule set standing in for a real model"""
        if "System note:" in prompt:
            log = prompt.split("System note:", 1)[1]
            if "Error in function" in log:
                return "Sorry, I could not complete part of that request."
            return "Done! Let me know if there is anything else I can help with."

        match = re.search(r"User prompt:\n(.*?)\n\nPlease output", prompt, re.DOTALL)
        if not match:
            raise CollaboratorFailure("llm", "mock cannot answer this prompt")
        message = match.group(1).strip()
        lowered = message.lower()

        if any(word in lowered for word in ("cancel", "delete", "remove")):
            title = re.sub(r"^.*?(cancel|delete|remove)\s+(the\s+|my\s+)?", "", lowered)
            title = re.sub(r"\s+(event|meeting)\b.*$", "", title).strip(" .!?")
            tasks = [{"function": "deleteEvent", "parameters": {"title": title}}]
        elif any(word in lowered for word in ("schedule", "calendar", "events", "agenda")):
            tasks = [{"function": "getEvents", "parameters": {}}]
        elif lowered.startswith(("search", "look up", "who", "what")):
            tasks = [{"function": "searchWeb", "parameters": {"query": message}}]
        else:
            tasks = [{"function": "plainAnswer", "parameters": {"text": message}}]
        return json.dumps({"tasks": tasks})
