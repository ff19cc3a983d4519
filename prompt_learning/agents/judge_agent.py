"""Judge Agent - LLM-as-judge rubric scorer for prompt quality."""

from agents import Agent, ModelSettings
from pydantic import BaseModel, Field

from prompt_learning.config import LLMConfig

JUDGE_AGENT_NAME = "PromptJudge"

CRITERIA_DESCRIPTIONS = {
    "clarity": "How clear and unambiguous is the instruction?",
    "specificity": "Does it provide specific guidance without being overly restrictive?",
    "completeness": "Does it cover all necessary aspects of the task?",
    "structure": "Is it well-organized with appropriate formatting?",
    "effectiveness": "How likely is it to produce the desired output?",
}


class JudgeOutput(BaseModel):
    """Expected structure of the judge's JSON response."""

    clarity: float = Field(ge=0, le=10, description="Clarity score (0-10)")
    specificity: float = Field(ge=0, le=10, description="Specificity score (0-10)")
    completeness: float = Field(ge=0, le=10, description="Completeness score (0-10)")
    structure: float = Field(ge=0, le=10, description="Structure score (0-10)")
    effectiveness: float = Field(ge=0, le=10, description="Effectiveness score (0-10)")
    reasoning: str = Field(default="", description="Brief explanation of scores")

    def criterion_scores(self) -> dict[str, float]:
        """Return the numeric criteria only."""
        return self.model_dump(exclude={"reasoning"})


def create_judge_agent(llm_config: LLMConfig) -> Agent:
    """
    Create a judge agent that rates prompts against the fixed rubric.

    The agent answers in plain text; the caller parses the JSON so that a
    malformed answer can be handled locally instead of failing the run.

    Args:
        llm_config: LLM configuration (uses lower temperature for consistent scoring)

    Returns:
        Configured Agent instance
    """
    instructions = """You are an expert prompt engineer evaluating prompt quality.
Rate prompts on a 0-10 scale for each criterion. Be critical but fair.
Output ONLY valid JSON, with no surrounding prose."""

    return Agent(
        name=JUDGE_AGENT_NAME,
        model=llm_config.model,
        instructions=instructions.strip(),
        model_settings=ModelSettings(
            temperature=llm_config.temperature,
            max_tokens=llm_config.max_tokens,
        ),
    )


def build_judge_request(prompt_text: str, domain: str) -> str:
    """Build the user message asking the judge to score one prompt."""
    criteria_list = "\n".join(
        f"- {name}: {description}" for name, description in CRITERIA_DESCRIPTIONS.items()
    )
    return f"""Evaluate this prompt for the "{domain}" domain:

---
{prompt_text}
---

Rate each criterion (0-10):
{criteria_list}

Output JSON format:
{{
  "clarity": <0-10>,
  "specificity": <0-10>,
  "completeness": <0-10>,
  "structure": <0-10>,
  "effectiveness": <0-10>,
  "reasoning": "<brief explanation of strengths and weaknesses>"
}}"""
