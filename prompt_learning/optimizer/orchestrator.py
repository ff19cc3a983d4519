"""Main prompt optimizer orchestrating patterns, retrieval learning and iteration."""

import logging

from prompt_learning.config import OptimizerConfig
from prompt_learning.optimizer.context import RunContext
from prompt_learning.optimizer.convergence import has_converged
from prompt_learning.optimizer.evaluator import Evaluator
from prompt_learning.optimizer.generator import CandidateGenerator
from prompt_learning.optimizer.learner import RetrievalLearner
from prompt_learning.optimizer.patterns import apply_patterns
from prompt_learning.types import HistoryEntry, OptimizationResult, PromptRecord

logger = logging.getLogger(__name__)

# Characters of judge reasoning copied into the audit trail
REASONING_PREVIEW_CHARS = 100


class PromptOptimizer:
    """
    Orchestrates one optimization run per optimize() call.

    The optimizer itself is stateless between runs: all per-run state lives in
    a RunContext created inside optimize(), so one instance can serve
    concurrent runs.
    """

    def __init__(
        self,
        config: OptimizerConfig | None = None,
        evaluator: Evaluator | None = None,
        generator: CandidateGenerator | None = None,
        learner: RetrievalLearner | None = None,
    ):
        """
        Initialize the optimizer.

        Args:
            config: Optimizer configuration (defaults if None)
            evaluator: Prompt evaluator (built from config if None)
            generator: Candidate generator (built from config if None)
            learner: Retrieval learner (built from config if None)
        """
        self.config = config or OptimizerConfig()
        self.evaluator = evaluator or Evaluator(self.config)
        self.generator = generator or CandidateGenerator(self.config)
        self.learner = learner or RetrievalLearner(self.config)

    async def optimize(
        self,
        original_prompt: str,
        similar_prompts: list[PromptRecord] | None = None,
        domain: str = "general",
        max_iterations: int | None = None,
        target_score: float | None = None,
    ) -> OptimizationResult:
        """
        Optimize a prompt.

        Args:
            original_prompt: Prompt to improve
            similar_prompts: Similar high-performing records (empty for a cold start)
            domain: Domain used for scoring and generation
            max_iterations: Override for the configured iteration budget
            target_score: Override for the configured target score

        Returns:
            Optimization result with the best prompt and the audit trail

        Raises:
            TransportError: If an external call fails; the run is abandoned
        """
        similar_prompts = similar_prompts or []
        max_iterations = self.config.max_iterations if max_iterations is None else max_iterations
        target_score = self.config.target_score if target_score is None else target_score

        context = RunContext(
            original_prompt=original_prompt, domain=domain, current_prompt=original_prompt
        )

        # Baseline
        original_score = await self.evaluator.score(original_prompt, domain, context)
        context.log(f"Original score: {original_score * 100:.1f}%")

        # Pattern-based improvements (no API calls)
        improved, applied = apply_patterns(context.current_prompt)
        if applied:
            context.current_prompt = improved
            for name in applied:
                context.log(f"Applied pattern: {name}")

        # Learn from similar high-performing prompts
        if similar_prompts:
            rag_improved, insights = await self.learner.learn_from_similar(
                context.current_prompt, similar_prompts
            )
            if rag_improved != context.current_prompt:
                context.current_prompt = rag_improved
                context.log(f"Retrieval-based learning: {insights}")

        current_score = await self.evaluator.score(context.current_prompt, domain, context)
        context.scores.append(current_score)
        # Generator history starts from the unmodified baseline
        context.history.append(HistoryEntry(prompt=original_prompt, score=original_score))

        iterations = 0
        while iterations < max_iterations:
            iterations += 1

            candidate = await self.generator.generate(context.current_prompt, domain, context)
            candidate_score = await self.evaluator.score(candidate, domain, context)
            context.record(candidate, candidate_score)

            if candidate_score > current_score:
                delta = candidate_score - current_score
                context.current_prompt = candidate
                current_score = candidate_score
                context.log(
                    f"Iteration {iterations}: +{delta * 100:.1f}% "
                    f"(now {current_score * 100:.1f}%)"
                )
                evaluation = context.last_evaluation
                if evaluation is not None and evaluation.reasoning:
                    context.log(
                        f"  Reason: {evaluation.reasoning[:REASONING_PREVIEW_CHARS]}..."
                    )
            else:
                context.log(
                    f"Iteration {iterations}: No improvement "
                    f"({candidate_score * 100:.1f}% vs {current_score * 100:.1f}%)"
                )
            logger.info(
                f"Iteration {iterations}: candidate={candidate_score:.3f} best={current_score:.3f}"
            )

            if has_converged(
                context.scores,
                window_size=self.config.convergence_window,
                threshold=self.config.convergence_threshold,
            ):
                context.log("Converged - stopping optimization")
                break

            if current_score >= target_score:
                context.log(f"Target score {target_score * 100:.0f}% reached!")
                break

        return OptimizationResult(
            original_prompt=original_prompt,
            optimized_prompt=context.current_prompt,
            improvements_made=context.improvements,
            iterations=iterations,
            estimated_improvement=current_score - original_score,
            similar_prompts_used=len(similar_prompts),
        )
