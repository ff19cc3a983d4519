"""Tools for calling text agents with transport-failure translation."""

import logging

import openai
from agents import Agent, Runner

from prompt_learning.errors import TransportError

logger = logging.getLogger(__name__)


async def run_text_agent(agent: Agent, message: str, operation: str) -> str:
    """
    Run an agent and return its final output as stripped text (async).

    Args:
        agent: Agent to run
        message: User message to send
        operation: Name of the calling operation, used in errors and logs

    Returns:
        The agent's text output, or "" if it produced nothing

    Raises:
        TransportError: If the underlying API call failed or could not be made
    """
    logger.debug(f"[{operation}] Running {agent.name} with message: {message[:50]}...")
    try:
        result = await Runner.run(agent, message)
    except openai.OpenAIError as e:
        logger.error(f"[{operation}] {agent.name} call failed: {e}")
        raise TransportError(operation, f"{operation} failed: {e}") from e

    output = result.final_output
    text = output.strip() if isinstance(output, str) else ""
    logger.debug(f"[{operation}] Received response: {text[:100]}...")
    return text
