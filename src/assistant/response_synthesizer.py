"""
Final reply generation from the conversation and the execution log
"""
import logging
from typing import Sequence

from config.settings import Config
from src.ai_agent.intent_classifier import format_conversation
from src.assistant.errors import SynthesisFailure

logger = logging.getLogger(__name__)

class ResponseSynthesizer:
    """Second model call of a turn; any failure becomes the fallback apology"""

    def __init__(self, llm_client, config: Config = None):
        self.llm_client = llm_client
        self.config = config or Config()

    def build_prompt(self, history: Sequence, new_message: str, execution_log: str) -> str:
        return self.config.RESPONSE_PROMPT.format(
            persona=self.config.PERSONA_PROMPT,
            conversation=format_conversation(history, new_message),
            execution_log=execution_log
        )

    def generate_reply(self, prompt: str) -> str:
        """Run the model on the reply prompt; raises SynthesisFailure"""
        try:
            reply = self.llm_client.generate(prompt)
        except Exception as e:
            raise SynthesisFailure(f"reply generation failed: {e}") from e
        if not reply or not reply.strip():
            raise SynthesisFailure("model returned an empty reply")
        return reply

    def synthesize(self, history: Sequence, new_message: str, execution_log: str) -> str:
        prompt = self.build_prompt(history, new_message, execution_log)
        try:
            return self.generate_reply(prompt)
        except SynthesisFailure as e:
            logger.error(f"Reply synthesis failed: {e}")
            return self.config.FALLBACK_REPLY
