"""Run-local state for a single optimization."""

from pydantic import BaseModel, Field

from prompt_learning.types import Evaluation, HistoryEntry


class RunContext(BaseModel):
    """
    State of one optimize() call, passed explicitly to every component.

    A fresh context is created per run and discarded when the run returns, so
    concurrent runs on a shared optimizer never observe each other's history
    or evaluations. ``history``, ``scores`` and ``improvements`` only grow by
    append.
    """

    # Run identification
    original_prompt: str = Field(description="Prompt as supplied by the caller")
    domain: str = Field(default="general", description="Domain used for scoring and generation")

    # Current best
    current_prompt: str = Field(description="Best prompt found so far")

    # Progress
    history: list[HistoryEntry] = Field(
        default_factory=list, description="Scored prompts shown to the candidate generator"
    )
    scores: list[float] = Field(
        default_factory=list, description="Score sequence inspected for convergence"
    )
    improvements: list[str] = Field(
        default_factory=list, description="Human-readable audit trail"
    )
    last_evaluation: Evaluation | None = Field(
        default=None, description="Most recent evaluation made in this run"
    )

    def record(self, prompt: str, score: float) -> None:
        """Append a scored prompt to both the history and the score sequence."""
        self.history.append(HistoryEntry(prompt=prompt, score=score))
        self.scores.append(score)

    def log(self, message: str) -> None:
        """Append a line to the audit trail."""
        self.improvements.append(message)

    def recent_history(self, window: int) -> list[HistoryEntry]:
        """Return the last ``window`` history entries."""
        return self.history[-window:]
