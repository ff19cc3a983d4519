"""Optimization engine: scoring, rewriting, retrieval learning and convergence."""

from prompt_learning.optimizer.context import RunContext
from prompt_learning.optimizer.convergence import has_converged
from prompt_learning.optimizer.evaluator import Evaluator, heuristic_score, weighted_score
from prompt_learning.optimizer.generator import CandidateGenerator
from prompt_learning.optimizer.learner import RetrievalLearner
from prompt_learning.optimizer.orchestrator import PromptOptimizer
from prompt_learning.optimizer.patterns import (
    IMPROVEMENT_PATTERNS,
    Pattern,
    apply_patterns,
    get_suggestions,
)

__all__ = [
    "PromptOptimizer",
    "RunContext",
    "Evaluator",
    "CandidateGenerator",
    "RetrievalLearner",
    "Pattern",
    "IMPROVEMENT_PATTERNS",
    "apply_patterns",
    "get_suggestions",
    "has_converged",
    "heuristic_score",
    "weighted_score",
]
