"""Prompt learning service: retrieval, feedback, optimization and analytics."""

import logging
import uuid
from collections import defaultdict
from datetime import timedelta

from prompt_learning.config import Settings
from prompt_learning.embeddings import EmbeddingService, contextualize
from prompt_learning.errors import PromptNotFoundError, TransportError
from prompt_learning.optimizer import PromptOptimizer, get_suggestions
from prompt_learning.storage import Database, PromptRecordRepository
from prompt_learning.types import (
    AnalyticsReport,
    DomainStats,
    FeedbackOutcome,
    FeedbackResult,
    OptimizationResult,
    PromptMetrics,
    PromptRecord,
    RetrievedPrompt,
    SearchResult,
    SimilarityBasis,
    SuggestionReport,
    utc_now,
)

logger = logging.getLogger(__name__)

TIME_RANGES = {
    "7d": timedelta(days=7),
    "30d": timedelta(days=30),
    "90d": timedelta(days=90),
    "all": None,
}


def ema(observation: float, old: float, alpha: float) -> float:
    """Exponential moving average step."""
    return alpha * observation + (1 - alpha) * old


class PromptLearningService:
    """Connects the optimizer to the embedding service and the prompt store."""

    def __init__(
        self,
        optimizer: PromptOptimizer,
        embeddings: EmbeddingService,
        database: Database,
        settings: Settings | None = None,
    ):
        """
        Initialize the service.

        Args:
            optimizer: Prompt optimizer
            embeddings: Embedding service
            database: Prompt store
            settings: Service settings (defaults if None)
        """
        self.optimizer = optimizer
        self.embeddings = embeddings
        self.database = database
        self.settings = settings or Settings()

    def _search(
        self,
        embedding: list[float],
        top_k: int,
        min_performance: float,
        domain: str | None = None,
    ) -> list[SearchResult]:
        with self.database.session_scope() as session:
            return PromptRecordRepository(session).search(
                embedding, top_k=top_k, min_performance=min_performance, domain=domain
            )

    async def retrieve_prompts(
        self,
        query: str,
        domain: str | None = None,
        top_k: int = 5,
        min_performance: float = 0.7,
    ) -> list[RetrievedPrompt]:
        """
        Find similar high-performing prompts.

        Args:
            query: Prompt to find similar examples for
            domain: Optional domain filter
            top_k: Number of results to return
            min_performance: Minimum success rate threshold

        Returns:
            Similar prompts, most similar first
        """
        result = await self.embeddings.embed_contextual(query, domain or "general", "retrieval")
        hits = self._search(result.embedding, top_k, min_performance, domain)
        return [
            RetrievedPrompt(
                prompt_id=hit.id,
                prompt_text=hit.record.prompt_text,
                similarity_score=hit.similarity_score,
                metrics=hit.record.metrics,
                domain=hit.record.domain,
            )
            for hit in hits
        ]

    async def record_feedback(
        self,
        prompt_id: str,
        outcome: FeedbackOutcome,
        prompt_text: str | None = None,
        domain: str = "general",
    ) -> FeedbackResult:
        """
        Record the outcome of running a prompt.

        Args:
            prompt_id: ID of an existing prompt, or "new" to store a new one
            outcome: Observed outcome
            prompt_text: Prompt text (required when prompt_id is "new")
            domain: Domain of a new prompt

        Returns:
            The stored prompt's ID and updated metrics

        Raises:
            ValueError: If prompt_id is "new" and no prompt_text was given
            PromptNotFoundError: If no prompt with prompt_id exists
        """
        if prompt_id == "new":
            return await self._create_prompt(outcome, prompt_text, domain)

        alpha = self.settings.ema_alpha
        with self.database.session_scope() as session:
            repo = PromptRecordRepository(session)
            existing = repo.get_by_id(prompt_id)
            if existing is None:
                raise PromptNotFoundError(prompt_id)

            old = existing.metrics
            latency = outcome.latency_ms if outcome.latency_ms else old.avg_latency_ms
            quality = outcome.quality_score if outcome.quality_score else old.token_efficiency
            metrics = PromptMetrics(
                success_rate=ema(1.0 if outcome.success else 0.0, old.success_rate, alpha),
                avg_latency_ms=ema(latency, old.avg_latency_ms, alpha),
                token_efficiency=ema(quality, old.token_efficiency, alpha),
                observation_count=old.observation_count + 1,
                last_updated=utc_now(),
            )
            repo.update_metrics(prompt_id, metrics)

        logger.info(
            f"Recorded outcome for {prompt_id}: success_rate={metrics.success_rate:.3f} "
            f"({metrics.observation_count} observations)"
        )
        return FeedbackResult(prompt_id=prompt_id, updated_metrics=metrics)

    async def _create_prompt(
        self, outcome: FeedbackOutcome, prompt_text: str | None, domain: str
    ) -> FeedbackResult:
        if not prompt_text:
            raise ValueError('prompt_text is required when prompt_id is "new"')

        contextualized_text = contextualize(prompt_text, domain, "storage")
        result = await self.embeddings.embed(contextualized_text)

        now = utc_now()
        metrics = PromptMetrics(
            success_rate=1.0 if outcome.success else 0.0,
            avg_latency_ms=outcome.latency_ms or 0.0,
            token_efficiency=outcome.quality_score or 0.0,
            observation_count=1,
            last_updated=now,
        )
        record = PromptRecord(
            id=str(uuid.uuid4()),
            prompt_text=prompt_text,
            contextualized_text=contextualized_text,
            domain=domain,
            metrics=metrics,
            created_at=now,
        )

        with self.database.session_scope() as session:
            PromptRecordRepository(session).save(record, result.embedding)

        logger.info(f"Stored new prompt {record.id} in domain '{domain}'")
        return FeedbackResult(prompt_id=record.id, updated_metrics=metrics)

    async def optimize_prompt(
        self,
        prompt: str,
        domain: str = "general",
        max_iterations: int | None = None,
        target_score: float | None = None,
    ) -> OptimizationResult:
        """
        Optimize a prompt, warm-starting from similar high performers when available.

        Args:
            prompt: Prompt to optimize
            domain: Domain for optimization context
            max_iterations: Maximum loop iterations (settings default if None)
            target_score: Target quality score (settings default if None)

        Returns:
            Optimization result

        Raises:
            TransportError: If scoring or generation could not reach the model
        """
        similar: list[PromptRecord] = []
        try:
            result = await self.embeddings.embed_contextual(prompt, domain, "optimization")
        except TransportError as e:
            logger.warning(f"Retrieval unavailable, optimizing without history: {e}")
        else:
            hits = self._search(
                result.embedding,
                self.settings.retrieval_top_k,
                self.settings.retrieval_min_performance,
                domain,
            )
            similar = [hit.record for hit in hits]

        return await self.optimizer.optimize(
            prompt,
            similar,
            domain,
            max_iterations=(
                self.settings.default_max_iterations if max_iterations is None else max_iterations
            ),
            target_score=(
                self.settings.default_target_score if target_score is None else target_score
            ),
        )

    async def suggest_improvements(self, prompt: str) -> SuggestionReport:
        """
        Suggest pattern-based improvements without running a full optimization.

        Args:
            prompt: Prompt to analyze

        Returns:
            Suggestions and the similar prompts they were compared with
        """
        suggestions = get_suggestions(prompt)

        result = await self.embeddings.embed(prompt)
        hits = self._search(
            result.embedding,
            self.settings.retrieval_top_k,
            self.settings.suggestion_min_performance,
        )
        avg_performance = (
            sum(hit.record.metrics.success_rate for hit in hits) / len(hits) if hits else 0.0
        )

        return SuggestionReport(
            suggestions=suggestions,
            based_on=SimilarityBasis(
                similar_prompts_analyzed=len(hits),
                avg_performance_of_similar=avg_performance,
            ),
        )

    def get_analytics(self, domain: str | None = None, time_range: str = "30d") -> AnalyticsReport:
        """
        Summarize stored prompt performance.

        Args:
            domain: Optional domain filter
            time_range: One of "7d", "30d", "90d" or "all"

        Returns:
            Totals and per-domain success rates
        """
        if time_range not in TIME_RANGES:
            raise ValueError(f"Unknown time_range: {time_range}")

        window = TIME_RANGES[time_range]
        since = utc_now() - window if window is not None else None

        with self.database.session_scope() as session:
            records = PromptRecordRepository(session).list_all(domain=domain, since=since)

        grouped: dict[str, list[float]] = defaultdict(list)
        for record in records:
            grouped[record.domain or "unknown"].append(record.metrics.success_rate)

        avg_success_rate = (
            sum(r.metrics.success_rate for r in records) / len(records) if records else 0.0
        )
        return AnalyticsReport(
            total_prompts=len(records),
            avg_success_rate=avg_success_rate,
            by_domain={
                name: DomainStats(count=len(rates), avg_success=sum(rates) / len(rates))
                for name, rates in grouped.items()
            },
        )
