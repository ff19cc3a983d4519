"""OPRO-style candidate generation from a run's score history."""

import logging

from prompt_learning.agents.generator_agent import build_generator_request, create_generator_agent
from prompt_learning.config import OptimizerConfig
from prompt_learning.optimizer.context import RunContext
from prompt_learning.optimizer.utils import run_text_agent

logger = logging.getLogger(__name__)


class CandidateGenerator:
    """Asks the generator agent for a rewrite that should outscore past attempts."""

    def __init__(self, config: OptimizerConfig):
        self.config = config

    async def generate(self, current_prompt: str, domain: str, context: RunContext) -> str:
        """
        Generate a candidate rewrite of the current prompt.

        Args:
            current_prompt: Best prompt so far
            domain: Domain the rewrite must fit
            context: Run context supplying the recent history

        Returns:
            Candidate text, or ``current_prompt`` unchanged if nothing usable came back
        """
        history = context.recent_history(self.config.history_window)
        generator = create_generator_agent(self.config.generator_llm, domain)
        candidate = await run_text_agent(
            generator, build_generator_request(current_prompt, history), operation="generate"
        )

        if not candidate:
            logger.warning("Generator returned no text; keeping the current prompt")
            return current_prompt
        return candidate
