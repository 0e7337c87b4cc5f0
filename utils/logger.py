"""
Logging utilities for Baklava Bot
"""
import logging
import sys
from datetime import datetime
import json

class AssistantLogger:
    """Custom logger for Baklava Bot"""

    @staticmethod
    def setup_logging(log_level: str = "INFO", log_file: str = None):
        """Setup logging configuration"""

        # Create formatter
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

        # Setup root logger
        root_logger = logging.getLogger()
        root_logger.setLevel(getattr(logging, log_level.upper()))

        # Clear existing handlers
        root_logger.handlers.clear()

        # Console handler
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

        # File handler (if specified)
        if log_file:
            file_handler = logging.FileHandler(log_file)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)

        # Suppress some noisy loggers
        for noisy in ('urllib3', 'googleapiclient', 'httpx', 'openai'):
            logging.getLogger(noisy).setLevel(logging.WARNING)

        return root_logger

    @staticmethod
    def log_turn(message: str, tasks: list, execution_log: str,
                 reply: str, processing_time: float):
        """Log one handled turn for debugging"""
        logger = logging.getLogger(__name__)

        log_entry = {
            "timestamp": datetime.now().isoformat(),
            "processing_time_seconds": round(processing_time, 3),
            "message": message[:200],
            "tasks": [task.function for task in tasks],
            "failed_tasks": execution_log.count('Error in function'),
            "reply_length": len(reply)
        }

        logger.info(f"Turn processed: {json.dumps(log_entry, indent=2)}")
