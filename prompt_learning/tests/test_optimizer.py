"""Test the optimization controller end to end with fake agents."""

import asyncio

import httpx
import openai
import pytest

from prompt_learning.agents.generator_agent import GENERATOR_AGENT_NAME
from prompt_learning.agents.judge_agent import JUDGE_AGENT_NAME
from prompt_learning.agents.learner_agent import LEARNER_AGENT_NAME
from prompt_learning.config import OptimizerConfig
from prompt_learning.errors import TransportError
from prompt_learning.optimizer import PromptOptimizer, apply_patterns
from prompt_learning.tests.helpers import extract_current_prompt, judge_json

PATTERN_IMPROVED = apply_patterns("Write code")[0]


def connection_error() -> openai.APIConnectionError:
    return openai.APIConnectionError(
        request=httpx.Request("POST", "https://api.openai.com/v1/responses")
    )


@pytest.mark.asyncio
async def test_cold_start_improves_short_prompt(fake_runner, optimizer):
    result = await optimizer.optimize("Write code", [], "coding")

    assert result.original_prompt == "Write code"
    assert result.optimized_prompt != "Write code"
    assert len(result.optimized_prompt) > len(result.original_prompt)
    assert result.improvements_made
    assert result.improvements_made[0] == "Original score: 31.0%"
    assert "Applied pattern: add_structure" in result.improvements_made
    assert result.iterations == 3
    assert result.estimated_improvement > 0
    assert result.similar_prompts_used == 0
    assert fake_runner.calls_for(LEARNER_AGENT_NAME) == []


@pytest.mark.asyncio
async def test_improving_iterations_log_delta_and_reason(fake_runner, optimizer):
    result = await optimizer.optimize("Write code")

    iteration_lines = [line for line in result.improvements_made if line.startswith("Iteration")]
    assert len(iteration_lines) == 3
    assert all(": +" in line and "No improvement" not in line for line in iteration_lines)
    assert any(line.startswith("  Reason: Scored") for line in result.improvements_made)


@pytest.mark.asyncio
async def test_similar_record_triggers_retrieval_learning(fake_runner, optimizer, make_record):
    record = make_record(success_rate=0.95)

    result = await optimizer.optimize("Write code", [record], "coding")

    assert result.similar_prompts_used == 1
    assert any(
        line.startswith("Retrieval-based learning") for line in result.improvements_made
    )
    assert "Retrieval-based learning: Learned from 1 high-performing prompts" in (
        result.improvements_made
    )
    learner_request = fake_runner.calls_for(LEARNER_AGENT_NAME)[0]
    assert record.prompt_text in learner_request


@pytest.mark.asyncio
async def test_unchanged_learner_output_is_not_logged(fake_runner, optimizer, make_record):
    fake_runner.queue(LEARNER_AGENT_NAME, PATTERN_IMPROVED)

    result = await optimizer.optimize("Write code", [make_record()])

    assert result.similar_prompts_used == 1
    assert not any("Retrieval-based learning" in line for line in result.improvements_made)


@pytest.mark.asyncio
async def test_tie_does_not_replace_current_prompt(fake_runner):
    fake_runner.queue(JUDGE_AGENT_NAME, judge_json(5), judge_json(6), judge_json(6))
    fake_runner.queue(GENERATOR_AGENT_NAME, "Tied candidate")
    optimizer = PromptOptimizer(OptimizerConfig(max_iterations=1))

    result = await optimizer.optimize("Write code")

    assert result.optimized_prompt == PATTERN_IMPROVED
    assert "Iteration 1: No improvement (60.0% vs 60.0%)" in result.improvements_made
    assert result.estimated_improvement == pytest.approx(0.1)


@pytest.mark.asyncio
async def test_generator_history_starts_from_original_prompt(fake_runner):
    fake_runner.queue(JUDGE_AGENT_NAME, judge_json(5), judge_json(6))
    optimizer = PromptOptimizer(OptimizerConfig(max_iterations=1))

    await optimizer.optimize("Write code")

    request = fake_runner.calls_for(GENERATOR_AGENT_NAME)[0]
    assert "Prompt (score: 0.50): Write code..." in request
    assert extract_current_prompt(request) == PATTERN_IMPROVED


@pytest.mark.asyncio
async def test_stops_when_target_reached(fake_runner):
    fake_runner.queue(JUDGE_AGENT_NAME, judge_json(5), judge_json(6), judge_json(10))
    optimizer = PromptOptimizer(OptimizerConfig(max_iterations=3, target_score=0.95))

    result = await optimizer.optimize("Write code")

    assert result.iterations == 1
    assert result.improvements_made[-1] == "Target score 95% reached!"
    assert len(fake_runner.calls_for(GENERATOR_AGENT_NAME)) == 1


@pytest.mark.asyncio
async def test_target_score_override(fake_runner):
    fake_runner.queue(JUDGE_AGENT_NAME, judge_json(5), judge_json(6), judge_json(9))
    optimizer = PromptOptimizer(OptimizerConfig(max_iterations=3, target_score=0.95))

    result = await optimizer.optimize("Write code", target_score=0.8)

    assert result.iterations == 1
    assert result.improvements_made[-1] == "Target score 80% reached!"


@pytest.mark.asyncio
async def test_stops_when_scores_plateau(fake_runner):
    fake_runner.queue(
        JUDGE_AGENT_NAME, judge_json(5), judge_json(6), judge_json(6.05), judge_json(6.1)
    )
    optimizer = PromptOptimizer(OptimizerConfig(max_iterations=5))

    result = await optimizer.optimize("Write code")

    assert result.iterations == 2
    assert result.improvements_made[-1] == "Converged - stopping optimization"


@pytest.mark.asyncio
async def test_zero_iterations_returns_pattern_result(fake_runner):
    optimizer = PromptOptimizer(OptimizerConfig(max_iterations=0))

    result = await optimizer.optimize("Write code")

    assert result.iterations == 0
    assert result.optimized_prompt == PATTERN_IMPROVED
    assert fake_runner.calls_for(GENERATOR_AGENT_NAME) == []


@pytest.mark.asyncio
async def test_malformed_judge_response_does_not_fail_run(fake_runner, optimizer):
    fake_runner.queue(JUDGE_AGENT_NAME, "not json", "not json", "not json")

    result = await optimizer.optimize("Write code")

    assert 0 < len(result.improvements_made)
    assert result.iterations >= 1


@pytest.mark.asyncio
async def test_empty_generation_is_rejected(fake_runner):
    fake_runner.queue(JUDGE_AGENT_NAME, judge_json(5), judge_json(6), judge_json(6))
    fake_runner.queue(GENERATOR_AGENT_NAME, "")
    optimizer = PromptOptimizer(OptimizerConfig(max_iterations=1))

    result = await optimizer.optimize("Write code")

    assert result.optimized_prompt == PATTERN_IMPROVED
    assert result.improvements_made[-1].startswith("Iteration 1: No improvement")


@pytest.mark.asyncio
async def test_transport_failure_mid_loop_aborts_run(fake_runner, optimizer):
    fake_runner.queue(GENERATOR_AGENT_NAME, "A better prompt", connection_error())

    with pytest.raises(TransportError) as exc_info:
        await optimizer.optimize("Write code")

    assert exc_info.value.operation == "generate"


@pytest.mark.asyncio
async def test_transport_failure_on_baseline_aborts_run(fake_runner, optimizer):
    fake_runner.queue(JUDGE_AGENT_NAME, connection_error())

    with pytest.raises(TransportError):
        await optimizer.optimize("Write code")

    assert fake_runner.calls_for(GENERATOR_AGENT_NAME) == []


@pytest.mark.asyncio
async def test_concurrent_runs_do_not_share_history(fake_runner, optimizer):
    result_a, result_b = await asyncio.gather(
        optimizer.optimize("Write code", domain="coding"),
        optimizer.optimize("Draft an email", domain="business"),
    )

    assert result_a.optimized_prompt.startswith("Write code")
    assert result_b.optimized_prompt.startswith("Draft an email")
    for result in (result_a, result_b):
        iteration_lines = [line for line in result.improvements_made if line.startswith("Iteration")]
        assert len(iteration_lines) == 3

    for request in fake_runner.calls_for(GENERATOR_AGENT_NAME):
        if extract_current_prompt(request).startswith("Write code"):
            assert "Draft an email" not in request
        else:
            assert "Write code" not in request
