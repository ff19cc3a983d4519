"""Runner wiring settings, clients and storage into a prompt learning service."""

import logging
import os

from openai import AsyncOpenAI

from prompt_learning.config import Settings
from prompt_learning.embeddings import EmbeddingService
from prompt_learning.optimizer import PromptOptimizer
from prompt_learning.service import PromptLearningService
from prompt_learning.storage import Database
from prompt_learning.types import OptimizationResult

logger = logging.getLogger(__name__)


def build_service(settings: Settings, client: AsyncOpenAI | None = None) -> PromptLearningService:
    """
    Build a service from settings.

    Args:
        settings: Loaded settings
        client: Async OpenAI client for embeddings (created from settings if None)

    Returns:
        Ready-to-use service
    """
    # Agents SDK reads the key from the environment
    if settings.openai_api_key:
        os.environ["OPENAI_API_KEY"] = settings.openai_api_key
        logger.info("OpenAI API key set from settings")

    client = client or AsyncOpenAI(api_key=settings.openai_api_key)
    return PromptLearningService(
        optimizer=PromptOptimizer(settings.optimizer),
        embeddings=EmbeddingService(
            client, model=settings.embedding_model, dimensions=settings.embedding_dim
        ),
        database=Database(settings.database_path),
        settings=settings,
    )


def display_results(result: OptimizationResult) -> None:
    """
    Display an optimization result to console.

    Args:
        result: Optimization result
    """
    print("\n" + "=" * 70)
    print("OPTIMIZATION COMPLETE!")
    print("=" * 70)
    print(f"\nIterations: {result.iterations}")
    print(f"Estimated improvement: {result.estimated_improvement * 100:+.1f}%")
    print(f"Similar prompts used: {result.similar_prompts_used}")
    print("\nImprovements:")
    for line in result.improvements_made:
        print(f"  {line}")
    print("\nOptimized prompt:")
    print("-" * 70)
    print(result.optimized_prompt)
    print("-" * 70)


async def run_optimization(
    prompt: str,
    settings: Settings,
    domain: str = "general",
    max_iterations: int | None = None,
    target_score: float | None = None,
) -> OptimizationResult | None:
    """
    Optimize one prompt from the command line.

    Returns:
        OptimizationResult if successful, None if setup validation fails
    """
    if not settings.openai_api_key:
        print("❌ ERROR: OPENAI_API_KEY not found!")
        print()
        print("Please set your OpenAI API key in one of these ways:")
        print("  1. Add to .env file: OPENAI_API_KEY=your_key_here")
        print("  2. Set environment variable: export OPENAI_API_KEY=your_key_here")
        print()
        return None

    service = build_service(settings)
    try:
        result = await service.optimize_prompt(
            prompt, domain=domain, max_iterations=max_iterations, target_score=target_score
        )
    except Exception as e:
        logger.error(f"Optimization failed: {e}", exc_info=True)
        raise
    finally:
        service.database.close()

    display_results(result)
    return result
