"""
Validation utilities for Baklava Bot
"""
import re
from datetime import datetime
from typing import Dict, Any, List, Optional

MAX_MESSAGE_LENGTH = 4000

class DateTimeNormalizer:
    """Coerce model-produced dates and times to YYYY-MM-DD and 24-hour HH:mm"""

    _DATE_FORMATS = ["%Y-%m-%d", "%Y/%m/%d"]
    _CLOCK_PATTERN = re.compile(r'^(\d{1,2})(?::(\d{2}))?(?::\d{2}(?:\.\d+)?)?\s*([ap]\.?m\.?)?$', re.IGNORECASE)
    _NAMED_TIMES = {"noon": "12:00", "midday": "12:00", "midnight": "00:00"}

    @classmethod
    def normalize_date(cls, value: str) -> str:
        """Return value as YYYY-MM-DD or raise ValueError"""
        text = str(value).strip()
        # ISO date-times are truncated to their date part
        if 'T' in text:
            text = text.split('T', 1)[0]
        for fmt in cls._DATE_FORMATS:
            try:
                return datetime.strptime(text, fmt).strftime("%Y-%m-%d")
            except ValueError:
                continue
        raise ValueError(f"Invalid date: {value!r}. Expected YYYY-MM-DD")

    @classmethod
    def normalize_time(cls, value: str) -> str:
        """Return value as 24-hour HH:mm or raise ValueError"""
        text = str(value).strip().lower()
        if text in cls._NAMED_TIMES:
            return cls._NAMED_TIMES[text]
        if 'T' in text.upper() and len(text) > 10:
            text = text.upper().split('T', 1)[1][:5].lower()

        match = cls._CLOCK_PATTERN.match(text)
        if not match:
            raise ValueError(f"Invalid time: {value!r}. Expected HH:mm")

        hour = int(match.group(1))
        minute = int(match.group(2) or 0)
        meridiem = (match.group(3) or '').replace('.', '')
        if meridiem:
            if not 1 <= hour <= 12:
                raise ValueError(f"Invalid time: {value!r}")
            hour = hour % 12 + (12 if meridiem == 'pm' else 0)
        if hour > 23 or minute > 59:
            raise ValueError(f"Invalid time: {value!r}")
        return f"{hour:02d}:{minute:02d}"

    @staticmethod
    def split_start(start: Dict[str, Any]) -> Optional[tuple]:
        """Split a Calendar API start/end object into (date, time or None)"""
        if not start:
            return None
        date_time = start.get('dateTime')
        if date_time:
            date_part, _, time_part = date_time.partition('T')
            return date_part, time_part[:5] or None
        if start.get('date'):
            return start['date'], None
        return None

class RequestValidator:
    """Validator for incoming chat requests"""

    @staticmethod
    def validate_chat_request(request_data: Any) -> List[str]:
        """Validate chat request structure and return list of errors"""
        errors = []

        if not isinstance(request_data, dict):
            return ["Request body must be a JSON object"]

        message = request_data.get("message")
        if not isinstance(message, str) or not message.strip():
            errors.append("'message' must be a non-empty string")
        elif len(message) > MAX_MESSAGE_LENGTH:
            errors.append(f"'message' exceeds {MAX_MESSAGE_LENGTH} characters")

        session_id = request_data.get("session_id")
        if session_id is not None and (not isinstance(session_id, str) or not session_id.strip()):
            errors.append("'session_id' must be a non-empty string when provided")

        return errors

class DataSanitizer:
    """Sanitize and clean input data"""

    @staticmethod
    def sanitize_text(text: str) -> str:
        """Collapse whitespace and drop control characters"""
        text = re.sub(r'[\x00-\x08\x0b-\x1f\x7f]', '', text)
        return re.sub(r'\s+', ' ', text.strip())
