"""Converters between pydantic records and ORM rows."""

from datetime import UTC, datetime

from prompt_learning.storage.models import PromptRecordRow
from prompt_learning.types import PromptMetrics, PromptRecord


def _as_utc(value: datetime) -> datetime:
    # SQLite drops tzinfo; stored values are always UTC
    return value if value.tzinfo else value.replace(tzinfo=UTC)


class PromptRecordConverter:
    """Convert between PromptRecord and PromptRecordRow."""

    @staticmethod
    def to_db(record: PromptRecord, embedding: list[float]) -> PromptRecordRow:
        """Convert a PromptRecord and its embedding to an ORM row."""
        return PromptRecordRow(
            id=record.id,
            prompt_text=record.prompt_text,
            contextualized_text=record.contextualized_text,
            domain=record.domain,
            task_type=record.task_type,
            success_rate=record.metrics.success_rate,
            avg_latency_ms=record.metrics.avg_latency_ms,
            token_efficiency=record.metrics.token_efficiency,
            observation_count=record.metrics.observation_count,
            last_updated=record.metrics.last_updated,
            created_at=record.created_at,
            tags=list(record.tags),
            embedding=list(embedding),
        )

    @staticmethod
    def from_db(row: PromptRecordRow) -> PromptRecord:
        """Convert an ORM row to a PromptRecord."""
        return PromptRecord(
            id=row.id,
            prompt_text=row.prompt_text,
            contextualized_text=row.contextualized_text,
            domain=row.domain,
            task_type=row.task_type,
            metrics=PromptRecordConverter.metrics_from_db(row),
            created_at=_as_utc(row.created_at),
            tags=list(row.tags or []),
        )

    @staticmethod
    def metrics_from_db(row: PromptRecordRow) -> PromptMetrics:
        """Extract the metrics block from an ORM row."""
        return PromptMetrics(
            success_rate=row.success_rate,
            avg_latency_ms=row.avg_latency_ms,
            token_efficiency=row.token_efficiency,
            observation_count=row.observation_count,
            last_updated=_as_utc(row.last_updated),
        )

    @staticmethod
    def apply_metrics(row: PromptRecordRow, metrics: PromptMetrics) -> None:
        """Overwrite the metrics columns of an ORM row in place."""
        row.success_rate = metrics.success_rate
        row.avg_latency_ms = metrics.avg_latency_ms
        row.token_efficiency = metrics.token_efficiency
        row.observation_count = metrics.observation_count
        row.last_updated = metrics.last_updated
