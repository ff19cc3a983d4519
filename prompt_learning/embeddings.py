"""Embedding generation with an in-process content-hash cache."""

import hashlib
import logging
from collections.abc import Sequence

import numpy as np
import openai
from openai import AsyncOpenAI

from prompt_learning.errors import DimensionMismatchError, TransportError
from prompt_learning.types import EmbeddingResult

logger = logging.getLogger(__name__)

EMBEDDING_MODEL = "text-embedding-3-small"
EMBEDDING_DIM = 1536


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """
    Compute cosine similarity between two embeddings.

    Raises:
        DimensionMismatchError: If the vectors differ in length
    """
    if len(a) != len(b):
        raise DimensionMismatchError(f"Embedding dimensions must match ({len(a)} != {len(b)})")

    va = np.asarray(a, dtype=float)
    vb = np.asarray(b, dtype=float)
    norm = np.linalg.norm(va) * np.linalg.norm(vb)
    if norm == 0:
        return 0.0
    return float(np.dot(va, vb) / norm)


def contextualize(text: str, domain: str, task_type: str) -> str:
    """Prefix prompt text with domain and task metadata to sharpen retrieval."""
    return f"Domain: {domain}\nTask: {task_type}\n\n{text}"


class EmbeddingService:
    """Turns text into vectors, caching results by content hash.

    The cache is advisory: concurrent writers of the same key race and the
    last write wins. A miss only costs tokens.
    """

    def __init__(
        self, client: AsyncOpenAI, model: str = EMBEDDING_MODEL, dimensions: int | None = None
    ):
        """
        Initialize embedding service.

        Args:
            client: Async OpenAI client
            model: Embedding model name
            dimensions: Requested vector size (model default if None)
        """
        self.client = client
        self.model = model
        self.dimensions = dimensions
        self._cache: dict[str, list[float]] = {}
        logger.info(f"EmbeddingService initialized with model {model}")

    @staticmethod
    def cache_key(text: str) -> str:
        """Return the cache key for a piece of text."""
        return hashlib.sha256(text.encode()).hexdigest()[:16]

    async def embed(self, text: str, use_cache: bool = True) -> EmbeddingResult:
        """
        Embed a single text.

        Args:
            text: Text to embed
            use_cache: Whether to read from the cache

        Returns:
            Embedding and the tokens spent (0 on a cache hit)

        Raises:
            TransportError: If the embeddings API call failed
        """
        key = self.cache_key(text)
        if use_cache and key in self._cache:
            return EmbeddingResult(embedding=self._cache[key], tokens_used=0)

        response = await self._create(text)
        embedding = list(response.data[0].embedding)
        tokens_used = response.usage.total_tokens if response.usage else 0

        self._cache[key] = embedding
        return EmbeddingResult(embedding=embedding, tokens_used=tokens_used)

    async def embed_contextual(self, text: str, domain: str, task_type: str) -> EmbeddingResult:
        """Embed text prefixed with its domain and task type."""
        return await self.embed(contextualize(text, domain, task_type))

    async def embed_batch(self, texts: list[str]) -> list[EmbeddingResult]:
        """
        Embed several texts with one API call for all uncached entries.

        Args:
            texts: Texts to embed

        Returns:
            Results in the same order as ``texts``
        """
        results: list[EmbeddingResult | None] = [None] * len(texts)
        uncached: list[int] = []

        for i, text in enumerate(texts):
            key = self.cache_key(text)
            if key in self._cache:
                results[i] = EmbeddingResult(embedding=self._cache[key], tokens_used=0)
            else:
                uncached.append(i)

        if uncached:
            response = await self._create([texts[i] for i in uncached])
            total_tokens = response.usage.total_tokens if response.usage else 0
            per_text = total_tokens // len(uncached)
            for position, i in enumerate(uncached):
                embedding = list(response.data[position].embedding)
                self._cache[self.cache_key(texts[i])] = embedding
                results[i] = EmbeddingResult(embedding=embedding, tokens_used=per_text)

        return [r for r in results if r is not None]

    async def _create(self, texts: str | list[str]):
        try:
            if self.dimensions:
                return await self.client.embeddings.create(
                    model=self.model, input=texts, dimensions=self.dimensions
                )
            return await self.client.embeddings.create(model=self.model, input=texts)
        except openai.OpenAIError as e:
            logger.error(f"Embedding API call failed: {e}")
            raise TransportError("embed", f"embed failed: {e}") from e
