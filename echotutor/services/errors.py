"""Exceptions raised by the game, scheduling and content services."""


class InvalidInput(ValueError):
    """Malformed argument, e.g. a quality rating outside 1-4."""


class InvalidGuessLength(ValueError):
    """Guess length differs from the answer length. Does not consume an attempt."""

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Guess must be {expected} letters long (got {actual})")


class InvalidState(RuntimeError):
    """Operation attempted on a game session that is already over."""


class NotFoundError(LookupError):
    """Requested record does not exist for this user."""


class QuestionGenerationError(RuntimeError):
    """The language model produced no usable questions."""
