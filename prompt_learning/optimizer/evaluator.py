"""Weighted rubric scoring of prompts with a deterministic local fallback."""

import logging
import re

from pydantic import ValidationError

from prompt_learning.agents.judge_agent import JudgeOutput, build_judge_request, create_judge_agent
from prompt_learning.config import OptimizerConfig
from prompt_learning.optimizer.context import RunContext
from prompt_learning.optimizer.utils import run_text_agent
from prompt_learning.types import Evaluation, HeuristicEvaluation, JudgedEvaluation

logger = logging.getLogger(__name__)

_NUMBERED_ITEM = re.compile(r"\d\.")


def weighted_score(scores: dict[str, float], weights: dict[str, float]) -> float:
    """
    Combine 0-10 criterion values into a single 0-1 score.

    Args:
        scores: Criterion name to value in [0, 10]
        weights: Criterion name to weight; weights sum to 1.0

    Returns:
        Sum of (value / 10 * weight) over the weighted criteria, clipped to [0, 1]
    """
    total = sum(scores.get(criterion, 0.0) / 10 * weight for criterion, weight in weights.items())
    return min(max(total, 0.0), 1.0)


def heuristic_score(prompt: str) -> float:
    """
    Score a prompt from surface features only.

    Used when the judge response cannot be parsed; never the primary path.
    """
    score = 0.5
    if 50 < len(prompt) < 500:
        score += 0.1
    if "\n" in prompt:
        score += 0.05
    if _NUMBERED_ITEM.search(prompt):
        score += 0.05
    if "step by step" in prompt.lower():
        score += 0.1
    return min(max(score, 0.0), 1.0)


def parse_judge_output(raw: str) -> JudgeOutput:
    """
    Parse the judge's text answer into rubric scores.

    Prose or code fences around the JSON object are ignored: only the text
    from the first "{" to the last "}" is validated.

    Raises:
        ValidationError: If the text is not JSON of the expected shape
    """
    start, end = raw.find("{"), raw.rfind("}")
    payload = raw[start : end + 1] if 0 <= start < end else raw.strip()
    return JudgeOutput.model_validate_json(payload or "{}")


class Evaluator:
    """Scores prompts against the fixed rubric via the judge agent."""

    def __init__(self, config: OptimizerConfig):
        """
        Initialize evaluator.

        Args:
            config: Optimizer configuration (judge LLM and scoring weights)
        """
        self.config = config

    async def evaluate(self, text: str, domain: str = "general") -> Evaluation:
        """
        Evaluate a prompt, falling back to the local heuristic on a malformed answer.

        Args:
            text: Prompt to evaluate
            domain: Domain the prompt is judged for

        Returns:
            JudgedEvaluation on success, HeuristicEvaluation on a malformed judge answer

        Raises:
            TransportError: If the judge could not be reached
        """
        judge = create_judge_agent(self.config.judge_llm)
        raw = await run_text_agent(judge, build_judge_request(text, domain), operation="judge")

        try:
            output = parse_judge_output(raw)
        except ValidationError as e:
            logger.warning(f"Failed to parse judge response, using heuristic fallback: {e}")
            return HeuristicEvaluation(weighted_score=heuristic_score(text))

        scores = output.criterion_scores()
        return JudgedEvaluation(
            scores=scores,
            reasoning=output.reasoning,
            weighted_score=weighted_score(scores, self.config.scoring_weights),
        )

    async def score(
        self, text: str, domain: str = "general", context: RunContext | None = None
    ) -> float:
        """
        Score a prompt in [0, 1].

        Args:
            text: Prompt to score
            domain: Domain the prompt is judged for
            context: Run context that keeps the evaluation as ``last_evaluation``

        Returns:
            Weighted score in [0, 1]
        """
        evaluation = await self.evaluate(text, domain)
        if context is not None:
            context.last_evaluation = evaluation
        logger.debug(f"Scored prompt ({evaluation.kind}): {evaluation.weighted_score:.3f}")
        return evaluation.weighted_score
