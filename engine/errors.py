"""Errors raised by the bracket engine."""


class BracketError(Exception):
    """Base class for everything the engine reports to its caller."""


class InvalidResult(BracketError):
    """A submitted result can't be recorded. Nothing was changed."""


class InvalidWinner(InvalidResult):
    """The winner isn't one of the two teams in the targeted series."""


class InvalidSeriesLength(InvalidResult):
    """The series length is outside the allowed range."""


class MissingPrerequisite(BracketError):
    """Something the operation depends on (e.g. the official bracket) doesn't exist yet."""


class PartialBatchFailure(BracketError):
    """Some participant writes in a fan-out failed."""

    def __init__(self, result):
        self.result = result
        super().__init__(
            f"{result.summary()}; failed: {', '.join(result.failed)}"
        )


class InconsistentConfig(BracketError):
    """A scoring setting is present but unusable. Callers fall back to the default."""

    def __init__(self, field: str, value, reason: str):
        self.field = field
        self.value = value
        super().__init__(f"Invalid scoring setting {field}={value!r}: {reason}")
