"""
Google Calendar integration for Baklava Bot
"""
import logging
from datetime import datetime, timedelta
from typing import Any, Dict, List, Tuple

import httplib2
from google.auth.exceptions import GoogleAuthError
from google.oauth2 import service_account
from google.oauth2.credentials import Credentials
from google_auth_httplib2 import AuthorizedHttp
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from config.settings import Config
from src.assistant.errors import CollaboratorFailure

logger = logging.getLogger(__name__)

def build_time_range(date: str, time: str,
                     duration_minutes: int = Config.DEFAULT_EVENT_DURATION_MINUTES) -> Tuple[str, str]:
    """Local start/end date-times for an event starting at date + time"""
    start = datetime.strptime(f"{date}T{time}", "%Y-%m-%dT%H:%M")
    end = start + timedelta(minutes=duration_minutes)
    return start.strftime('%Y-%m-%dT%H:%M:%S'), end.strftime('%Y-%m-%dT%H:%M:%S')

class CalendarManager:
    """Calendar collaborator backed by the Google Calendar v3 API"""

    def __init__(self, service=None):
        self.config = Config()
        self._service = service

    def _get_credentials(self):
        """Load service-account or authorized-user credentials"""
        try:
            path = self.config.get_credentials_path()
            if self.config.CALENDAR_AUTH_MODE == "user":
                return Credentials.from_authorized_user_file(path, self.config.CALENDAR_SCOPES)
            return service_account.Credentials.from_service_account_file(
                path, scopes=self.config.CALENDAR_SCOPES
            )
        except FileNotFoundError as e:
            logger.error(f"❌ Calendar credentials not available: {e}")
            raise CollaboratorFailure("calendar", str(e)) from e
        except ValueError as e:
            logger.error(f"❌ Failed to load calendar credentials: {e}")
            raise CollaboratorFailure("calendar", f"invalid credentials: {e}") from e

    @property
    def service(self):
        """Calendar API resource, built on first use"""
        if self._service is None:
            # socket timeout so a call abandoned by the task timeout still ends
            http = AuthorizedHttp(self._get_credentials(),
                                  http=httplib2.Http(timeout=self.config.CALENDAR_TIMEOUT))
            self._service = build("calendar", "v3", http=http, cache_discovery=False)
        return self._service

    def _event_body(self, summary: str, start: str, end: str) -> Dict[str, Any]:
        return {
            'summary': summary,
            'start': {'dateTime': start, 'timeZone': self.config.TIMEZONE},
            'end': {'dateTime': end, 'timeZone': self.config.TIMEZONE},
        }

    def _execute(self, action: str, request):
        try:
            return request.execute()
        except HttpError as e:
            logger.error(f"HTTP error during calendar {action}: {e}")
            raise CollaboratorFailure("calendar", f"{action} failed: {e}") from e
        except (GoogleAuthError, OSError) as e:
            logger.error(f"Calendar {action} could not reach the API: {e}")
            raise CollaboratorFailure("calendar", f"{action} failed: {e}") from e

    def list_events(self) -> List[Dict[str, Any]]:
        """Upcoming-ordered events from the configured calendar"""
        logger.info(f"📅 Listing events from calendar {self.config.CALENDAR_ID}")
        result = self._execute("list", self.service.events().list(
            calendarId=self.config.CALENDAR_ID,
            maxResults=self.config.CALENDAR_MAX_RESULTS,
            singleEvents=True,
            orderBy='startTime'
        ))
        events = result.get('items', [])
        logger.info(f"✅ Retrieved {len(events)} events")
        return events

    def create_event(self, summary: str, start: str, end: str) -> Dict[str, Any]:
        created = self._execute("create", self.service.events().insert(
            calendarId=self.config.CALENDAR_ID,
            body=self._event_body(summary, start, end)
        ))
        logger.info(f"Event created: {summary} from {start} to {end} ({created.get('id')})")
        return created

    def delete_event(self, event_id: str) -> str:
        self._execute("delete", self.service.events().delete(
            calendarId=self.config.CALENDAR_ID,
            eventId=event_id
        ))
        logger.info(f"Event deleted: {event_id}")
        return "Event deleted successfully!"

    def update_event(self, event_id: str, summary: str, start: str, end: str) -> Dict[str, Any]:
        updated = self._execute("update", self.service.events().update(
            calendarId=self.config.CALENDAR_ID,
            eventId=event_id,
            body=self._event_body(summary, start, end)
        ))
        logger.info(f"Event updated: {event_id} -> {summary} from {start} to {end}")
        return updated

    def get_event_details(self, event_id: str) -> Dict[str, Any]:
        return self._execute("get", self.service.events().get(
            calendarId=self.config.CALENDAR_ID,
            eventId=event_id
        ))
