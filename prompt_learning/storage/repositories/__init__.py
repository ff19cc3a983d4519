"""Repository pattern for data access."""

from prompt_learning.storage.repositories.prompt_record_repository import PromptRecordRepository

__all__ = ["PromptRecordRepository"]
