"""Convergence detection over a run's score sequence."""

from collections.abc import Sequence

DEFAULT_WINDOW_SIZE = 3
DEFAULT_CONVERGENCE_THRESHOLD = 0.02


def has_converged(
    scores: Sequence[float],
    window_size: int = DEFAULT_WINDOW_SIZE,
    threshold: float = DEFAULT_CONVERGENCE_THRESHOLD,
) -> bool:
    """
    Check whether the trailing scores have plateaued.

    Only the last ``window_size`` scores are inspected, so earlier volatility
    does not prevent a run that has since stabilized from converging.

    Args:
        scores: Scores in iteration order
        window_size: Number of trailing scores to inspect
        threshold: Range (max - min) below which the window counts as flat

    Returns:
        True if at least ``window_size`` scores exist and their range is below threshold
    """
    if len(scores) < window_size:
        return False

    recent = scores[-window_size:]
    return (max(recent) - min(recent)) < threshold
