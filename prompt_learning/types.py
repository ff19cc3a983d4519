"""Data types and models for prompt learning."""

from datetime import UTC, datetime
from typing import Literal

from pydantic import BaseModel, Field


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(UTC)


class PromptMetrics(BaseModel):
    """Observed performance of a stored prompt."""

    success_rate: float = Field(default=0.0, ge=0.0, le=1.0, description="EMA of task success")
    avg_latency_ms: float = Field(default=0.0, ge=0.0, description="EMA of response latency")
    token_efficiency: float = Field(default=0.0, ge=0.0, le=1.0, description="EMA of quality")
    observation_count: int = Field(default=0, ge=0, description="Number of recorded outcomes")
    last_updated: datetime = Field(default_factory=utc_now)


class PromptRecord(BaseModel):
    """A previously seen prompt together with its performance history."""

    id: str = Field(description="Opaque unique identifier")
    prompt_text: str = Field(description="Raw prompt text")
    contextualized_text: str = Field(default="", description="Domain-annotated prompt text")
    domain: str = Field(default="general")
    task_type: str = Field(default="general")
    metrics: PromptMetrics = Field(default_factory=PromptMetrics)
    created_at: datetime = Field(default_factory=utc_now)
    tags: list[str] = Field(default_factory=list)


class SearchResult(BaseModel):
    """A stored record ranked by similarity to a query vector."""

    id: str
    similarity_score: float = Field(gt=0.0, le=1.0)
    record: PromptRecord


class EmbeddingResult(BaseModel):
    """Vector for a piece of text plus the tokens spent producing it."""

    embedding: list[float]
    tokens_used: int = 0


class HistoryEntry(BaseModel):
    """One scored prompt in an optimization run."""

    prompt: str
    score: float


class JudgedEvaluation(BaseModel):
    """Rubric scores returned by the judge model."""

    kind: Literal["judged"] = "judged"
    scores: dict[str, float] = Field(description="Criterion name to value in [0, 10]")
    reasoning: str = Field(default="")
    weighted_score: float = Field(ge=0.0, le=1.0)

    @property
    def is_heuristic(self) -> bool:
        return False


class HeuristicEvaluation(BaseModel):
    """Local fallback score used when the judge response could not be parsed."""

    kind: Literal["heuristic"] = "heuristic"
    scores: dict[str, float] = Field(default_factory=dict)
    reasoning: str = Field(default="")
    weighted_score: float = Field(ge=0.0, le=1.0)

    @property
    def is_heuristic(self) -> bool:
        return True


Evaluation = JudgedEvaluation | HeuristicEvaluation


class Suggestion(BaseModel):
    """A pattern-based improvement that applies to a prompt."""

    type: str
    description: str
    example: str
    expected_improvement: float


class OptimizationResult(BaseModel):
    """Outcome of a single optimize() call."""

    original_prompt: str
    optimized_prompt: str
    improvements_made: list[str]
    iterations: int = Field(description="Loop iterations actually executed")
    estimated_improvement: float = Field(description="Final score minus baseline score")
    similar_prompts_used: int


class FeedbackOutcome(BaseModel):
    """Observed result of running a prompt."""

    success: bool
    latency_ms: float | None = Field(default=None, ge=0.0)
    output_tokens: int | None = Field(default=None, ge=0)
    quality_score: float | None = Field(default=None, ge=0.0, le=1.0)


class FeedbackResult(BaseModel):
    """Acknowledgement of a recorded outcome."""

    status: str = "recorded"
    prompt_id: str
    updated_metrics: PromptMetrics


class RetrievedPrompt(BaseModel):
    """A similar stored prompt returned by retrieval."""

    prompt_id: str
    prompt_text: str
    similarity_score: float
    metrics: PromptMetrics
    domain: str


class SimilarityBasis(BaseModel):
    """What a set of suggestions was compared against."""

    similar_prompts_analyzed: int
    avg_performance_of_similar: float


class SuggestionReport(BaseModel):
    """Suggestions for a prompt without running a full optimization."""

    suggestions: list[Suggestion]
    based_on: SimilarityBasis


class DomainStats(BaseModel):
    """Aggregate performance of the prompts in one domain."""

    count: int
    avg_success: float


class AnalyticsReport(BaseModel):
    """Aggregate performance across stored prompts."""

    total_prompts: int
    avg_success_rate: float
    by_domain: dict[str, DomainStats]
