"""Pytest fixtures for prompt learning tests."""

import pytest
from agents import Runner

from prompt_learning.config import OptimizerConfig, Settings
from prompt_learning.embeddings import EmbeddingService
from prompt_learning.optimizer import PromptOptimizer
from prompt_learning.service import PromptLearningService
from prompt_learning.storage import Database
from prompt_learning.tests.helpers import FakeAgentRunner, FakeEmbeddingsClient
from prompt_learning.types import PromptMetrics, PromptRecord


@pytest.fixture
def fake_runner(monkeypatch):
    """
    Patch agents.Runner.run with a scripted fake.

    Prevents real LLM API calls; tests queue outputs or exceptions per agent
    name and inspect the recorded calls.
    """
    runner = FakeAgentRunner()
    monkeypatch.setattr(Runner, "run", runner.run)
    return runner


@pytest.fixture
def optimizer_config():
    """Small iteration budget for fast runs."""
    return OptimizerConfig(max_iterations=3, target_score=0.95)


@pytest.fixture
def optimizer(optimizer_config):
    return PromptOptimizer(optimizer_config)


@pytest.fixture
def temp_db_path(tmp_path):
    """Provide a temporary database path for testing."""
    db_dir = tmp_path / "test_storage"
    db_dir.mkdir(exist_ok=True)
    return db_dir / "test_prompts.db"


@pytest.fixture
def test_database(temp_db_path):
    """Provide a real SQLite Database under tmp_path."""
    db = Database(temp_db_path)
    yield db
    db.close()


@pytest.fixture
def fake_embeddings_client():
    return FakeEmbeddingsClient()


@pytest.fixture
def embedding_service(fake_embeddings_client):
    return EmbeddingService(fake_embeddings_client)


@pytest.fixture
def settings(temp_db_path, optimizer_config):
    return Settings(
        openai_api_key="test-key",
        database_path=str(temp_db_path),
        default_max_iterations=2,
        optimizer=optimizer_config,
    )


@pytest.fixture
def service(optimizer, embedding_service, test_database, settings):
    """Service wired to fakes and a temporary database."""
    return PromptLearningService(
        optimizer=optimizer,
        embeddings=embedding_service,
        database=test_database,
        settings=settings,
    )


@pytest.fixture
def make_record():
    """Factory for prompt records with a given success rate."""

    def _make(
        record_id: str = "rec-1",
        prompt_text: str = "Explain the algorithm step by step with examples.",
        success_rate: float = 0.9,
        domain: str = "general",
        **kwargs,
    ) -> PromptRecord:
        return PromptRecord(
            id=record_id,
            prompt_text=prompt_text,
            contextualized_text=f"Domain: {domain}\nTask: storage\n\n{prompt_text}",
            domain=domain,
            metrics=PromptMetrics(success_rate=success_rate, observation_count=1),
            **kwargs,
        )

    return _make
