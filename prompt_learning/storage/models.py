"""SQLAlchemy ORM models for prompt learning storage."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from prompt_learning.types import utc_now


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class PromptRecordRow(Base):
    """A stored prompt, its embedding and its performance metrics."""

    __tablename__ = "prompt_records"

    id: Mapped[str] = mapped_column(primary_key=True)
    prompt_text: Mapped[str] = mapped_column(Text)
    contextualized_text: Mapped[str] = mapped_column(Text, default="")
    domain: Mapped[str] = mapped_column(default="general", index=True)
    task_type: Mapped[str] = mapped_column(default="general")

    # Metrics (flattened)
    success_rate: Mapped[float] = mapped_column(default=0.0, index=True)
    avg_latency_ms: Mapped[float] = mapped_column(default=0.0)
    token_efficiency: Mapped[float] = mapped_column(default=0.0)
    observation_count: Mapped[int] = mapped_column(default=0)
    last_updated: Mapped[datetime] = mapped_column(default=utc_now)

    created_at: Mapped[datetime] = mapped_column(default=utc_now, index=True)
    tags: Mapped[list[str]] = mapped_column(JSON, default=list)
    embedding: Mapped[list[float]] = mapped_column(JSON)
