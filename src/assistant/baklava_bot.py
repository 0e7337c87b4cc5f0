"""
Baklava Bot - Main orchestrator for one conversational turn
"""
import logging
import time
from typing import Optional, Sequence, Tuple

from config.settings import Config
from src.ai_agent.intent_classifier import IntentClassifier
from src.assistant.errors import AssistantError
from src.assistant.response_synthesizer import ResponseSynthesizer
from src.assistant.session import BOT, USER, ConversationSession, SessionStore
from src.assistant.task_executor import TaskExecutor
from src.memory.event_memory import EventMemory
from utils.logger import AssistantLogger

logger = logging.getLogger(__name__)

class BaklavaBot:
    """
    Message -> intent classification -> task execution -> reply.

    Collaborators are injected; without them the Google Calendar, web search
    and OpenAI-compatible clients are built, or their in-memory mocks when
    ``use_mock`` is set.
    """

    def __init__(self, calendar=None, llm_client=None, web_search=None,
                 use_mock: bool = False, model_name: str = None, config: Config = None):
        self.config = config or Config()

        if use_mock:
            from src.ai_agent.mock_llm_client import MockLLMClient
            from src.calendar.mock_calendar_manager import MockCalendarManager
            calendar = calendar or MockCalendarManager()
            llm_client = llm_client or MockLLMClient()
            logger.info("🔄 Using mock calendar and scripted LLM")

        if calendar is None:
            from src.calendar.calendar_manager import CalendarManager
            calendar = CalendarManager()
        if llm_client is None:
            from src.ai_agent.llm_client import LLMClient
            llm_client = LLMClient(model_name)
        if web_search is None:
            from src.search.web_search import WebSearchClient
            web_search = WebSearchClient()

        self.calendar = calendar
        self.llm_client = llm_client
        self.web_search = web_search
        self.classifier = IntentClassifier(llm_client, self.config)
        self.synthesizer = ResponseSynthesizer(llm_client, self.config)
        self.sessions = SessionStore(self.config.MAX_SESSIONS, self.config.SESSION_TTL)

        logger.info("BaklavaBot initialized")

    def handle_turn(self, history: Sequence, new_message: str,
                    memory: Optional[EventMemory] = None) -> str:
        """Produce the reply to ``new_message`` given the prior conversation"""
        start_time = time.time()
        memory = memory if memory is not None else EventMemory()

        try:
            executor = TaskExecutor(memory, self.calendar, self.web_search, config=self.config)
            try:
                executor.refresh_memory()
            except AssistantError as e:
                logger.warning(f"Could not list calendar at turn start: {e}")
                memory.clear()

            tasks = self.classifier.classify(history, new_message, memory.snapshot())
            execution_log = executor.execute(tasks)
            reply = self.synthesizer.synthesize(history, new_message, execution_log)

        except Exception as e:
            logger.error(f"Error handling turn: {e}")
            return self.config.FALLBACK_REPLY

        AssistantLogger.log_turn(new_message, tasks, execution_log, reply, time.time() - start_time)
        return reply

    def chat(self, session_id: Optional[str], message: str) -> Tuple[ConversationSession, str]:
        """Run one turn in a stored session and record both sides of it"""
        session = self.sessions.get(session_id)
        reply = self.handle_turn(list(session.history), message, session.memory)
        session.add_message(USER, message)
        session.add_message(BOT, reply)
        return session, reply

    def shutdown(self) -> None:
        """Drop all sessions; collaborator calls still running are abandoned"""
        logger.info(f"Shutting down BaklavaBot with {len(self.sessions)} open sessions")
        self.sessions.clear()
