"""
Utility modules for Baklava Bot
"""

from .logger import AssistantLogger
from .validators import RequestValidator, DataSanitizer, DateTimeNormalizer

__all__ = ['AssistantLogger', 'RequestValidator', 'DataSanitizer', 'DateTimeNormalizer']
