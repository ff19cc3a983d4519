"""Retrieval Learner Agent - synthesizes a rewrite from high-performing prompts."""

from agents import Agent, ModelSettings

from prompt_learning.config import LLMConfig

LEARNER_AGENT_NAME = "RetrievalLearner"


def create_learner_agent(llm_config: LLMConfig) -> Agent:
    """
    Create an agent that learns from similar prompts with proven success.

    Args:
        llm_config: LLM configuration

    Returns:
        Configured Agent instance
    """
    instructions = """You are a prompt optimization expert.
Analyze high-performing prompts and suggest improvements."""

    return Agent(
        name=LEARNER_AGENT_NAME,
        model=llm_config.model,
        instructions=instructions.strip(),
        model_settings=ModelSettings(
            temperature=llm_config.temperature,
            max_tokens=llm_config.max_tokens,
        ),
    )


def build_learner_request(prompt: str, top_prompts: list[str]) -> str:
    """Build the request pairing the current prompt with top performers."""
    examples = "\n\n".join(f"{i}. {text}" for i, text in enumerate(top_prompts, start=1))
    return f"""Current prompt to improve:
{prompt}

High-performing similar prompts:
{examples}

Based on what makes the high-performing prompts effective, provide an improved version of the current prompt. Only output the improved prompt, nothing else."""
