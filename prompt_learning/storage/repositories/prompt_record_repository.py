"""Repository for prompt record data access and similarity search."""

import logging
from datetime import datetime

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from prompt_learning.embeddings import cosine_similarity
from prompt_learning.errors import DimensionMismatchError
from prompt_learning.storage.converters import PromptRecordConverter
from prompt_learning.storage.models import PromptRecordRow
from prompt_learning.types import PromptMetrics, PromptRecord, SearchResult

logger = logging.getLogger(__name__)


class PromptRecordRepository:
    """Data access layer for stored prompts."""

    def __init__(self, session: Session):
        """Initialize repository with database session."""
        self.session = session

    def save(self, record: PromptRecord, embedding: list[float]) -> PromptRecord:
        """
        Save or replace a prompt record.

        Args:
            record: Record to save
            embedding: Vector for the record's contextualized text

        Returns:
            The saved record
        """
        self.session.merge(PromptRecordConverter.to_db(record, embedding))
        self.session.commit()
        return record

    def get_by_id(self, prompt_id: str) -> PromptRecord | None:
        """
        Get a prompt record by ID.

        Args:
            prompt_id: Record ID

        Returns:
            PromptRecord or None
        """
        row = self.session.get(PromptRecordRow, prompt_id)
        return PromptRecordConverter.from_db(row) if row else None

    def update_metrics(self, prompt_id: str, metrics: PromptMetrics) -> bool:
        """
        Replace the metrics of a stored prompt.

        Args:
            prompt_id: Record ID
            metrics: New metrics

        Returns:
            True if the record existed
        """
        row = self.session.get(PromptRecordRow, prompt_id)
        if row is None:
            return False

        PromptRecordConverter.apply_metrics(row, metrics)
        self.session.commit()
        return True

    def delete(self, prompt_id: str) -> bool:
        """Delete a prompt record; returns True if it existed."""
        row = self.session.get(PromptRecordRow, prompt_id)
        if row is None:
            return False

        self.session.delete(row)
        self.session.commit()
        return True

    def list_all(
        self, domain: str | None = None, since: datetime | None = None
    ) -> list[PromptRecord]:
        """
        List stored prompts, newest first.

        Args:
            domain: Only records in this domain
            since: Only records created at or after this time

        Returns:
            Matching records
        """
        query = self.session.query(PromptRecordRow)
        if domain:
            query = query.filter(PromptRecordRow.domain == domain)
        if since is not None:
            query = query.filter(PromptRecordRow.created_at >= since)
        rows = query.order_by(PromptRecordRow.created_at.desc()).all()
        return [PromptRecordConverter.from_db(row) for row in rows]

    def count(self) -> int:
        """Number of stored prompts."""
        return self.session.query(func.count(PromptRecordRow.id)).scalar() or 0

    def search(
        self,
        embedding: list[float],
        top_k: int = 10,
        min_performance: float = 0.0,
        domain: str | None = None,
    ) -> list[SearchResult]:
        """
        Rank stored prompts by cosine similarity to a query vector.

        Retrieval failures are logged and reported as no results so that
        optimization can proceed without history.

        Args:
            embedding: Query vector
            top_k: Maximum number of results
            min_performance: Minimum success rate of returned records
            domain: Only records in this domain

        Returns:
            Results sorted by similarity descending, all with similarity in (0, 1]
        """
        try:
            query = self.session.query(PromptRecordRow)
            if min_performance > 0:
                query = query.filter(PromptRecordRow.success_rate >= min_performance)
            if domain:
                query = query.filter(PromptRecordRow.domain == domain)

            scored = []
            for row in query.all():
                similarity = cosine_similarity(embedding, row.embedding)
                if similarity > 0:
                    scored.append((min(similarity, 1.0), row))
        except (SQLAlchemyError, DimensionMismatchError) as e:
            logger.error(f"Search error: {e}")
            return []

        scored.sort(key=lambda item: item[0], reverse=True)
        return [
            SearchResult(
                id=row.id,
                similarity_score=similarity,
                record=PromptRecordConverter.from_db(row),
            )
            for similarity, row in scored[:top_k]
        ]
