"""Errors raised by the transaction tree and its services."""


class InvalidFrequency(ValueError):
    """Raised when a frequency is not one of the supported values."""

    def __init__(self, frequency):
        self.frequency = frequency
        super().__init__(
            f"Frequency must be none, day, week, biweek, or month (got {frequency!r})"
        )


class TreeStructureError(ValueError):
    """Raised when a structural mutation is not valid for a node."""
