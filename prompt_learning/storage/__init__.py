"""Storage layer for prompt learning using SQLAlchemy."""

from prompt_learning.storage.converters import PromptRecordConverter
from prompt_learning.storage.database import Database
from prompt_learning.storage.models import Base, PromptRecordRow
from prompt_learning.storage.repositories import PromptRecordRepository

__all__ = [
    "Database",
    "Base",
    "PromptRecordRow",
    "PromptRecordRepository",
    "PromptRecordConverter",
]
