"""Configuration for the prompt learning engine with per-agent LLM settings."""

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, model_validator

logger = logging.getLogger(__name__)

DEFAULT_SCORING_WEIGHTS = {
    "clarity": 0.25,
    "specificity": 0.25,
    "completeness": 0.20,
    "structure": 0.15,
    "effectiveness": 0.15,
}


class LLMConfig(BaseModel):
    """Configuration for a single LLM-backed agent."""

    model: str = Field(default="gpt-4o-mini", description="Model name (e.g., 'gpt-4o-mini')")
    temperature: float = Field(default=0.7, ge=0.0, le=2.0, description="Sampling temperature")
    max_tokens: int | None = Field(default=None, description="Maximum tokens to generate")


class OptimizerConfig(BaseModel):
    """Configuration for the optimization loop."""

    # Iteration control
    max_iterations: int = Field(default=10, ge=0, description="Upper bound on loop iterations")
    target_score: float = Field(
        default=0.95, ge=0.0, le=1.0, description="Stop once the current score reaches this"
    )
    convergence_threshold: float = Field(
        default=0.02, gt=0.0, description="Score range below which the window has plateaued"
    )
    convergence_window: int = Field(
        default=3, ge=1, description="Number of trailing scores inspected for convergence"
    )

    # Context sizes
    history_window: int = Field(
        default=5, ge=1, description="History entries shown to the candidate generator"
    )
    top_similar: int = Field(
        default=3, ge=1, description="Top similar records shown to the retrieval learner"
    )

    # Scoring weights
    scoring_weights: dict[str, float] = Field(
        default_factory=lambda: dict(DEFAULT_SCORING_WEIGHTS),
        description="Weights for rubric criteria",
    )

    # LLM configuration per agent
    judge_llm: LLMConfig = Field(
        default=LLMConfig(model="gpt-4o-mini", temperature=0.3, max_tokens=300),
        description="LLM for scoring (low temperature for consistency)",
    )
    generator_llm: LLMConfig = Field(
        default=LLMConfig(model="gpt-4o-mini", temperature=0.8, max_tokens=500),
        description="LLM for candidate generation (higher temperature for creativity)",
    )
    learner_llm: LLMConfig = Field(
        default=LLMConfig(model="gpt-4o-mini", temperature=0.7, max_tokens=500),
        description="LLM for synthesizing from similar high performers",
    )

    @model_validator(mode="after")
    def _check_weights(self) -> "OptimizerConfig":
        unknown = set(self.scoring_weights) ^ set(DEFAULT_SCORING_WEIGHTS)
        if unknown:
            raise ValueError(
                f"scoring_weights must use exactly the criteria {sorted(DEFAULT_SCORING_WEIGHTS)}, "
                f"mismatched: {sorted(unknown)}"
            )
        total = sum(self.scoring_weights.values())
        if abs(total - 1.0) > 1e-6:
            raise ValueError(f"scoring_weights must sum to 1.0, got {total:.4f}")
        return self


class Settings(BaseModel):
    """Process-level settings for the prompt learning service."""

    openai_api_key: str | None = Field(default=None, description="OpenAI API key")
    database_path: str = Field(
        default="prompt_learning/data/prompts.db", description="SQLite database path"
    )
    embedding_model: str = Field(default="text-embedding-3-small")
    embedding_dim: int = Field(default=1536, gt=0)

    # Learning
    ema_alpha: float = Field(
        default=0.3, gt=0.0, le=1.0, description="Weight of a new observation in metric EMAs"
    )
    retrieval_top_k: int = Field(default=5, ge=1)
    retrieval_min_performance: float = Field(default=0.7, ge=0.0, le=1.0)
    suggestion_min_performance: float = Field(default=0.8, ge=0.0, le=1.0)

    # Per-request defaults
    default_max_iterations: int = Field(default=5, ge=0)
    default_target_score: float = Field(default=0.9, ge=0.0, le=1.0)

    log_level: str = Field(default="INFO")
    optimizer: OptimizerConfig = Field(default_factory=OptimizerConfig)


# Environment variable -> settings field
ENV_OVERRIDES = {
    "OPENAI_API_KEY": "openai_api_key",
    "PROMPT_LEARNING_DB": "database_path",
    "EMBEDDING_MODEL": "embedding_model",
    "LOG_LEVEL": "log_level",
}


def load_settings(config_path: str | Path | None = None) -> Settings:
    """Load settings from an optional YAML file and the environment.

    Environment variables (including those from a ``.env`` file) take
    precedence over values in the YAML file.

    Args:
        config_path: Optional path to a YAML configuration file

    Returns:
        Validated settings
    """
    load_dotenv()

    values: dict[str, Any] = {}
    if config_path is not None:
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")
        with open(path) as f:
            values = yaml.safe_load(f) or {}
        logger.info(f"Loaded configuration from {path}")

    for env_var, field_name in ENV_OVERRIDES.items():
        env_value = os.getenv(env_var)
        if env_value:
            values[field_name] = env_value

    return Settings(**values)


def setup_logging(level: str = "INFO") -> None:
    """Set up process-wide logging."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
