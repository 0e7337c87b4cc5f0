"""
Configuration settings for Baklava Bot
"""
import os
from typing import Dict, List

class Config:
    # LLM Configuration (any OpenAI-compatible endpoint; Gemini by default)
    LLM_BASE_URL = os.getenv("LLM_BASE_URL", "https://generativelanguage.googleapis.com/v1beta/openai/")
    LLM_API_KEY = os.getenv("LLM_API_KEY", "")
    DEFAULT_MODEL = os.getenv("LLM_MODEL", "gemini-2.0-flash")
    LLM_TIMEOUT = int(os.getenv("LLM_TIMEOUT", "30"))
    LLM_MAX_RETRIES = 2

    MAX_TOKENS = 1024
    TEMPERATURE = 0.2  # Low temperature keeps the task JSON stable

    # Calendar Configuration
    CALENDAR_CREDENTIALS_PATH = os.getenv("CALENDAR_CREDENTIALS_PATH", "service-account-key.json")
    CALENDAR_AUTH_MODE = os.getenv("CALENDAR_AUTH_MODE", "service_account")  # or "user"
    CALENDAR_ID = os.getenv("CALENDAR_ID", "primary")
    CALENDAR_SCOPES: List[str] = [
        "https://www.googleapis.com/auth/calendar",
        "https://www.googleapis.com/auth/calendar.events",
    ]
    TIMEZONE = os.getenv("CALENDAR_TIMEZONE", "America/Toronto")
    CALENDAR_MAX_RESULTS = 10
    CALENDAR_TIMEOUT = int(os.getenv("CALENDAR_TIMEOUT", "20"))  # socket timeout, seconds
    DEFAULT_EVENT_DURATION_MINUTES = 60
    DEFAULT_EVENT_TIME = "09:00"  # used when an all-day event is moved without a time

    # Web search worker proxies
    WEB_SEARCH_URL = os.getenv("WEB_SEARCH_URL", "https://websearch.arman-dogru.workers.dev/")
    PAGE_FETCH_URL = os.getenv("PAGE_FETCH_URL", "https://openlink.arman-dogru.workers.dev/")
    WEB_SEARCH_TIMEOUT = 15  # seconds
    CRAWL_TIMEOUT = 20  # seconds for all page fetches of one search
    CRAWL_WORKERS = 5
    MAX_PAGE_CHARS = 4000

    # Turn handling
    TASK_TIMEOUT = float(os.getenv("TASK_TIMEOUT", "45"))  # seconds per task
    FALLBACK_REPLY = "I'm sorry, but I encountered an error handling your request. Please try again."
    SESSION_TTL = int(os.getenv("SESSION_TTL", "3600"))  # idle seconds before a session is dropped
    MAX_SESSIONS = int(os.getenv("MAX_SESSIONS", "1000"))

    # API Configuration
    API_HOST = "0.0.0.0"
    API_PORT = int(os.getenv("PORT", "5000"))

    # Date/Time Formats
    DATE_FORMAT = "%Y-%m-%d"
    TIME_FORMAT = "%H:%M"

    PERSONA_PROMPT = (
        "You are Baklava Bot, a helpful virtual assistant. "
        "Your job is to help users manage their schedules and appointments efficiently "
        "or answer questions by using your internal knowledge or looking up things online. "
        "You only reply in plain text and no formatting of any type.\n\n"
    )

    INTENT_PROMPT = """You are an intent classification system.
Today's date is {today}, and the current local time is {now}.
Any relative date/time references in the user prompt must be converted to valid ISO.

KNOWN EVENTS (with indexes, IDs, times, summaries):
{known_events}

CONVERSATION HISTORY:
{conversation}

The user may say things like:
- "Change the second event to 6pm"
- "Cancel the pistachio event"
- "Move my 5pm event to tomorrow"
In all these cases, figure out which event they are referencing by summary, date/time, or index.
Prefer "eventId" when you can identify the event; otherwise pass "title" with part of its summary
or "index" with its number from the list above.

# Date/Time Rules
- "tomorrow" means today+1 day.
- "noon" means "12:00" in 24-hour format.
- "2 pm" means "14:00".
- If a user says "next Tuesday," find the date that is Tuesday after the current day, etc.
- Output the final date in YYYY-MM-DD format, and time in HH:mm (24-hour) format.
- If the user does not specify a date or time, use the current date or time.

Available intents are: {intents}.

EXAMPLE OUTPUT:
{{
  "tasks": [
    {{"function": "createEvent", "parameters": {{"title": "Meeting with John", "date": "2025-03-30", "time": "12:00"}}}},
    {{"function": "getEvents", "parameters": {{"date": "2025-03-29"}}}},
    {{"function": "deleteEvent", "parameters": {{"eventId": "11kbb0fvbko7a43itv32c19mo0"}}}},
    {{"function": "updateEvent", "parameters": {{"eventId": "ao9g5vqbp1732vio7iugce6l1k", "title": "Updated Event Title", "date": "2025-03-30", "time": "14:00"}}}},
    {{"function": "getEventDetails", "parameters": {{"index": "2"}}}},
    {{"function": "searchWeb", "parameters": {{"query": "What is the name of the CEO of Google?"}}}},
    {{"function": "plainAnswer", "parameters": {{"text": "Sure, here's a direct response with no further action."}}}}
  ]
}}

You will read the user prompt, then output a valid JSON object containing a key 'tasks' (an array of objects).
Each object must have 'function' and 'parameters' fields.
Do not include triple backticks or any extra text besides the JSON.
Return only valid JSON. Nothing else.

User prompt:
{message}

Please output your JSON now:"""

    RESPONSE_PROMPT = """{persona}{conversation}
System note: The following tasks were performed, if you need to use this information to help you craft your response, here are the results:
{execution_log}
Now craft your final answer to the user. Remember to only reply in plain text (no formatting).
"""

    @classmethod
    def get_model_config(cls, model_name: str = None) -> Dict[str, object]:
        """Get client configuration for the chat model"""
        return {
            "base_url": cls.LLM_BASE_URL,
            "api_key": cls.LLM_API_KEY,
            "model": model_name or cls.DEFAULT_MODEL,
            "max_tokens": cls.MAX_TOKENS,
            "temperature": cls.TEMPERATURE,
        }

    @classmethod
    def get_credentials_path(cls) -> str:
        """Get the calendar credentials file path"""
        path = cls.CALENDAR_CREDENTIALS_PATH
        if not os.path.exists(path):
            raise FileNotFoundError(f"Calendar credentials not found: {path}. Set CALENDAR_CREDENTIALS_PATH.")
        return path
