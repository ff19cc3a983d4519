"""Retrieval-augmented rewriting from similar high-performing prompts."""

import logging

from prompt_learning.agents.learner_agent import build_learner_request, create_learner_agent
from prompt_learning.config import OptimizerConfig
from prompt_learning.optimizer.utils import run_text_agent
from prompt_learning.types import PromptRecord

logger = logging.getLogger(__name__)


def select_top_performers(records: list[PromptRecord], k: int) -> list[PromptRecord]:
    """Return the ``k`` records with the highest success rate, best first."""
    return sorted(records, key=lambda r: r.metrics.success_rate, reverse=True)[:k]


class RetrievalLearner:
    """Rewrites a prompt using what made similar stored prompts succeed."""

    def __init__(self, config: OptimizerConfig):
        self.config = config

    async def learn_from_similar(
        self, prompt: str, similar_records: list[PromptRecord]
    ) -> tuple[str, str]:
        """
        Synthesize an improved prompt from the top similar records.

        Args:
            prompt: Prompt to improve
            similar_records: Historically successful prompts similar to ``prompt``

        Returns:
            Tuple of (improved text, insight summary); the text is ``prompt``
            unchanged if the learner produced nothing
        """
        top = select_top_performers(similar_records, self.config.top_similar)
        top_prompts = [record.prompt_text for record in top]

        learner = create_learner_agent(self.config.learner_llm)
        improved = await run_text_agent(
            learner, build_learner_request(prompt, top_prompts), operation="learn"
        )

        if not improved:
            logger.warning("Retrieval learner returned no text; keeping the current prompt")
            improved = prompt

        return improved, f"Learned from {len(top_prompts)} high-performing prompts"
