"""
Pattern library for cheap, deterministic prompt improvements.

Each pattern pairs a predicate with a transform that appends guidance the
prompt is missing. Patterns are applied left to right against the
progressively rewritten text, so a pattern whose guidance is already present
(or was just added by an earlier pattern) is skipped.
"""

from collections.abc import Callable
from dataclasses import dataclass

from prompt_learning.types import Suggestion


@dataclass(frozen=True)
class Pattern:
    """A single improvement rule."""

    name: str
    predicate: Callable[[str], bool]
    transform: Callable[[str], str]
    expected_improvement: float

    def applies_to(self, text: str) -> bool:
        """Check whether the prompt still lacks what this pattern adds."""
        return self.predicate(text)

    def apply(self, text: str) -> str:
        """Return the text with this pattern's guidance appended."""
        return self.transform(text)


IMPROVEMENT_PATTERNS: tuple[Pattern, ...] = (
    Pattern(
        name="add_structure",
        predicate=lambda p: "1." not in p and "step" not in p and "first" not in p,
        transform=lambda p: (
            f"{p}\n\nProvide your response in a structured format with clear sections."
        ),
        expected_improvement=0.15,
    ),
    Pattern(
        name="add_chain_of_thought",
        predicate=lambda p: "step by step" not in p.lower() and "think through" not in p.lower(),
        transform=lambda p: f"{p}\n\nThink through this step by step, showing your reasoning.",
        expected_improvement=0.20,
    ),
    Pattern(
        name="add_constraints",
        predicate=lambda p: len(p) < 150 and "Requirements" not in p,
        transform=lambda p: (
            f"{p}\n\nRequirements:\n- Be specific and precise\n"
            "- Support claims with evidence\n- Stay focused on the core question"
        ),
        expected_improvement=0.10,
    ),
    Pattern(
        name="add_output_format",
        predicate=lambda p: "format" not in p.lower() and "respond with" not in p.lower(),
        transform=lambda p: f"{p}\n\nFormat your response clearly with headers where appropriate.",
        expected_improvement=0.08,
    ),
    Pattern(
        name="add_context_request",
        predicate=lambda p: "context" not in p.lower() and "background" not in p.lower(),
        transform=lambda p: f"{p}\n\nConsider relevant context and background information.",
        expected_improvement=0.05,
    ),
)


def apply_patterns(
    text: str, patterns: tuple[Pattern, ...] = IMPROVEMENT_PATTERNS
) -> tuple[str, list[str]]:
    """
    Apply every pattern whose predicate holds, in declaration order.

    Args:
        text: Prompt to improve
        patterns: Patterns to apply (defaults to the built-in library)

    Returns:
        Tuple of (rewritten text, names of the patterns that fired)
    """
    improved = text
    applied: list[str] = []

    for pattern in patterns:
        if pattern.applies_to(improved):
            improved = pattern.apply(improved)
            applied.append(pattern.name)

    return improved, applied


def get_suggestions(
    text: str, patterns: tuple[Pattern, ...] = IMPROVEMENT_PATTERNS
) -> list[Suggestion]:
    """
    List the patterns that apply to a prompt without rewriting it.

    Unlike apply_patterns, every predicate is checked against the original text.

    Args:
        text: Prompt to analyze
        patterns: Patterns to check (defaults to the built-in library)

    Returns:
        One suggestion per applicable pattern
    """
    suggestions = []
    for pattern in patterns:
        if pattern.applies_to(text):
            suggestions.append(
                Suggestion(
                    type=pattern.name,
                    description=f"Add {pattern.name.replace('_', ' ')}",
                    example=pattern.apply(text)[len(text) :].strip(),
                    expected_improvement=pattern.expected_improvement,
                )
            )
    return suggestions
