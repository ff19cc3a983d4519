"""Utility functions for prompt optimization."""

from prompt_learning.optimizer.utils.agent_runner import run_text_agent

__all__ = ["run_text_agent"]
