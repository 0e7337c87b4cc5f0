"""
Baklava Bot - A conversational calendar assistant

This package provides a chat assistant that:
- Classifies chat messages into calendar and web-search tasks with an LLM
- Resolves references to listed events by id, title or position
- Executes the tasks against Google Calendar and a web-search proxy
- Writes the final plain-text reply with a second LLM call
"""

__version__ = "1.0.0"
__author__ = "Baklava Bot Team"
