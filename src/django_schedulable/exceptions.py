"""Exceptions for django-schedulable."""


def _model_name(model) -> str:
    return getattr(model, "__name__", repr(model))


class SchedulableError(Exception):
    """Base exception for schedulable errors."""
    pass


class ScheduleConfigError(SchedulableError):
    """Raised when a schedule declaration or lookup is invalid."""
    pass


class DuplicateScheduleError(ScheduleConfigError):
    """Raised when a model already has a schedule on the same start field."""

    def __init__(self, model, start_field: str):
        self.model = model
        self.start_field = start_field
        super().__init__(
            f"{_model_name(model)} already has a schedule starting at '{start_field}'"
        )


class UnconfiguredBoundaryError(ScheduleConfigError):
    """Raised when a predicate or filter needs a boundary no schedule declares."""

    def __init__(self, model, field: str | None = None, message: str | None = None):
        self.model = model
        self.field = field
        if message is None:
            if field is None:
                message = f"{_model_name(model)} has no schedule configured"
            else:
                message = f"{_model_name(model)} has no schedule boundary '{field}'"
        super().__init__(message)
