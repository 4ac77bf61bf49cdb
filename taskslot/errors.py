"""Exceptions raised at the input boundary."""


class ValidationError(ValueError):
    """Raised when an interval, task, timestamp or setting is malformed."""
