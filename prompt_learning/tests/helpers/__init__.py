"""Test helpers for prompt learning tests."""

from prompt_learning.tests.helpers.fake_agents import (
    FakeAgentRunner,
    FakeRunnerResult,
    extract_current_prompt,
    extract_judged_prompt,
    judge_json,
)
from prompt_learning.tests.helpers.fake_embeddings import FakeEmbeddingsClient, text_vector

__all__ = [
    "FakeAgentRunner",
    "FakeRunnerResult",
    "FakeEmbeddingsClient",
    "extract_current_prompt",
    "extract_judged_prompt",
    "judge_json",
    "text_vector",
]
