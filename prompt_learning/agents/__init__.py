"""Agent definitions for the prompt learning engine using OpenAI Agents SDK."""

from prompt_learning.agents.generator_agent import create_generator_agent
from prompt_learning.agents.judge_agent import JudgeOutput, create_judge_agent
from prompt_learning.agents.learner_agent import create_learner_agent

__all__ = [
    "JudgeOutput",
    "create_judge_agent",
    "create_generator_agent",
    "create_learner_agent",
]
