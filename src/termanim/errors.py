"""Exception hierarchy for termanim."""

from __future__ import annotations


class TermanimError(Exception):
    """Base class for every error raised by termanim."""


class InvalidStepError(TermanimError):
    """A step carries values the compiler cannot schedule.

    Raised for negative or non-finite timing values and for an empty
    step sequence.
    """

    def __init__(self, message: str, step_index: int | None = None,
                 field: str | None = None):
        self.step_index = step_index
        self.field = field
        if step_index is not None:
            location = f"step {step_index}"
            if field:
                location += f" ({field})"
            message = f"{location}: {message}"
        super().__init__(message)


class DegenerateTimingError(TermanimError):
    """Two keyframe events cannot be ordered after rounding and perturbation."""

    def __init__(self, message: str, step_index: int | None = None,
                 element: str | None = None):
        self.step_index = step_index
        self.element = element
        if element:
            message = f"{element}: {message}"
        super().__init__(message)


class ConfigurationError(TermanimError):
    """Configuration is missing required fields or has the wrong shape."""

    def __init__(self, message: str, path: str | None = None):
        self.path = path
        if path:
            message = f"{path}: {message}"
        super().__init__(message)
