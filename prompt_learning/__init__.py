"""
Prompt Learning - retrieval-augmented prompt optimization.

A prompt is improved in three passes:
1. Pattern library: cheap deterministic rewrites
2. Retrieval learning: rewrite informed by similar high-performing prompts
3. OPRO-style iteration: LLM rewrites scored by an LLM judge until the
   score converges or reaches the target

Public API:
- PromptOptimizer: Runs a single optimization
- PromptLearningService: Retrieval, feedback, optimization and analytics over a prompt store
- OptimizerConfig / Settings: Configuration
"""

from prompt_learning.config import LLMConfig, OptimizerConfig, Settings, load_settings
from prompt_learning.errors import (
    DimensionMismatchError,
    PromptLearningError,
    PromptNotFoundError,
    TransportError,
)
from prompt_learning.optimizer import PromptOptimizer
from prompt_learning.service import PromptLearningService
from prompt_learning.types import OptimizationResult

__version__ = "0.1.0"

__all__ = [
    "PromptOptimizer",
    "PromptLearningService",
    "OptimizerConfig",
    "LLMConfig",
    "Settings",
    "load_settings",
    "OptimizationResult",
    "PromptLearningError",
    "TransportError",
    "DimensionMismatchError",
    "PromptNotFoundError",
]
