"""
LLM client for Baklava Bot
"""
import logging
import time
from typing import Optional

from openai import OpenAI, OpenAIError

from config.settings import Config
from src.assistant.errors import CollaboratorFailure

logger = logging.getLogger(__name__)

class LLMClient:
    """Stateless single-shot client for an OpenAI-compatible chat endpoint"""

    def __init__(self, model_name: str = None):
        self.config = Config()
        self.model_config = self.config.get_model_config(model_name)
        self.model_name = self.model_config["model"]

        self.client = OpenAI(
            api_key=self.model_config["api_key"] or "NULL",
            base_url=self.model_config["base_url"],
            timeout=self.config.LLM_TIMEOUT,
            max_retries=self.config.LLM_MAX_RETRIES
        )

        self.max_tokens = self.model_config["max_tokens"]
        self.temperature = self.model_config["temperature"]
        self._total_requests = 0

        logger.info(f"Initialized LLM client: {self.model_name} @ {self.model_config['base_url']}")

    def generate(self, prompt: str, temperature: Optional[float] = None) -> str:
        """Send one prompt and return the text of the first choice"""
        temperature = temperature if temperature is not None else self.temperature
        self._total_requests += 1

        try:
            start_time = time.time()
            response = self.client.chat.completions.create(
                model=self.model_name,
                messages=[{"role": "user", "content": prompt}],
                max_tokens=self.max_tokens,
                temperature=temperature
            )
            content = response.choices[0].message.content or ""
            logger.info(f"{self.model_name} response: {time.time() - start_time:.2f}s")
            return content.strip()

        except OpenAIError as e:
            logger.error(f"{self.model_name} request failed: {e}")
            raise CollaboratorFailure("llm", str(e)) from e
        except (IndexError, AttributeError) as e:
            logger.error(f"{self.model_name} returned no choices: {e}")
            raise CollaboratorFailure("llm", "empty response") from e
