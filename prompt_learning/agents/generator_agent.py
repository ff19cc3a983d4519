"""Candidate Generator Agent - OPRO-style rewrites informed by score history."""

from agents import Agent, ModelSettings

from prompt_learning.config import LLMConfig
from prompt_learning.types import HistoryEntry

GENERATOR_AGENT_NAME = "CandidateGenerator"

# Characters of each historical prompt shown in the meta-prompt
HISTORY_PREVIEW_CHARS = 100


def create_generator_agent(llm_config: LLMConfig, domain: str) -> Agent:
    """
    Create a candidate generator agent for one domain.

    Args:
        llm_config: LLM configuration (higher temperature for variety)
        domain: Domain the rewritten prompt must fit

    Returns:
        Configured Agent instance
    """
    instructions = f"""You are optimizing prompts for the "{domain}" domain.
Generate improved versions that score higher than every previous attempt."""

    return Agent(
        name=GENERATOR_AGENT_NAME,
        model=llm_config.model,
        instructions=instructions.strip(),
        model_settings=ModelSettings(
            temperature=llm_config.temperature,
            max_tokens=llm_config.max_tokens,
        ),
    )


def build_generator_request(current_prompt: str, history: list[HistoryEntry]) -> str:
    """Build the meta-prompt from recent history and the current best prompt."""
    history_text = "\n".join(
        f"Prompt (score: {entry.score:.2f}): {entry.prompt[:HISTORY_PREVIEW_CHARS]}..."
        for entry in history
    )
    return f"""Previous attempts and scores:
{history_text}

Generate an improved prompt that will score higher. Focus on:
1. Clarity and specificity
2. Appropriate constraints
3. Clear output format expectations
4. Domain-appropriate language

Current prompt:
{current_prompt}

Improved prompt (output only the prompt, nothing else):"""
