"""Exceptions raised by the course helpers."""


class CourseError(Exception):
    """Base class for every error raised by coursekit."""


class InputTypeError(CourseError, TypeError):
    """An argument has the wrong type (fail-fast argument checks)."""


class LengthMismatchError(CourseError, ValueError):
    """Paired inputs have different lengths."""


class InsufficientDataError(CourseError, ValueError):
    """Too few (or degenerate) observations to compute a statistic."""


class DatasetUnavailableError(CourseError):
    """A dataset could not be read from disk or downloaded."""

    def __init__(self, name, hint=""):
        self.name = name
        self.hint = hint
        msg = f"Dataset '{name}' is unavailable"
        if hint:
            msg = f"{msg}: {hint}"
        super().__init__(msg)
