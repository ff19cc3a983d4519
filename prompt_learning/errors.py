"""Exception types raised by the prompt learning engine."""


class PromptLearningError(Exception):
    """Base class for all prompt learning errors."""


class TransportError(PromptLearningError):
    """An external call could not be completed at the transport level.

    Raised once per failed operation; the underlying client exception is
    chained as ``__cause__``.
    """

    def __init__(self, operation: str, message: str | None = None):
        self.operation = operation
        super().__init__(message or f"Transport failure during '{operation}'")


class DimensionMismatchError(PromptLearningError, ValueError):
    """Two embedding vectors of different length were compared."""


class PromptNotFoundError(PromptLearningError, LookupError):
    """No stored prompt record exists for the requested id."""

    def __init__(self, prompt_id: str):
        self.prompt_id = prompt_id
        super().__init__(f"Prompt not found: {prompt_id}")
