"""
Conversation sessions: chat history plus a private event memory
"""
import logging
import threading
import time
import uuid
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from config.settings import Config
from src.memory.event_memory import EventMemory

logger = logging.getLogger(__name__)

USER = "user"
BOT = "bot"

@dataclass(frozen=True)
class ChatMessage:
    sender: str
    text: str

    def __post_init__(self):
        if self.sender not in (USER, BOT):
            raise ValueError(f"Unknown sender: {self.sender!r}")

    def to_dict(self) -> Dict[str, str]:
        return {"sender": self.sender, "text": self.text}

@dataclass
class ConversationSession:
    session_id: str
    history: List[ChatMessage] = field(default_factory=list)
    memory: EventMemory = field(default_factory=EventMemory)
    last_active: float = field(default=0.0, compare=False, repr=False)

    def add_message(self, sender: str, text: str) -> ChatMessage:
        message = ChatMessage(sender, text)
        self.history.append(message)
        return message

class SessionStore:
    """
    One ConversationSession per session id; sessions never share memory.

    Sessions idle for longer than ``ttl`` seconds are dropped, and once
    ``max_sessions`` are held the least recently used one makes room.
    """

    def __init__(self, max_sessions: int = Config.MAX_SESSIONS, ttl: float = Config.SESSION_TTL,
                 clock: Callable[[], float] = time.monotonic):
        self.max_sessions = max_sessions
        self.ttl = ttl
        self._clock = clock
        self._sessions: "OrderedDict[str, ConversationSession]" = OrderedDict()
        self._lock = threading.Lock()

    def _evict_expired(self, now: float) -> None:
        # least recently used first, so stop at the first live session
        while self._sessions:
            session_id, session = next(iter(self._sessions.items()))
            if now - session.last_active <= self.ttl:
                break
            del self._sessions[session_id]
            logger.info(f"Session {session_id} expired")

    def get(self, session_id: Optional[str] = None) -> ConversationSession:
        """Existing session for the id, or a new one"""
        session_id = session_id or uuid.uuid4().hex
        with self._lock:
            now = self._clock()
            self._evict_expired(now)
            session = self._sessions.get(session_id)
            if session is None:
                while len(self._sessions) >= self.max_sessions:
                    evicted, _ = self._sessions.popitem(last=False)
                    logger.info(f"Session {evicted} evicted to make room")
                session = ConversationSession(session_id)
                self._sessions[session_id] = session
            else:
                self._sessions.move_to_end(session_id)
            session.last_active = now
            return session

    def find(self, session_id: str) -> Optional[ConversationSession]:
        with self._lock:
            self._evict_expired(self._clock())
            return self._sessions.get(session_id)

    def reset(self, session_id: str) -> bool:
        with self._lock:
            return self._sessions.pop(session_id, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
