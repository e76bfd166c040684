"""Custom exception hierarchy for foodinflation.

Every error raised by the package derives from ``FoodInflationError`` so
callers (the CLI in particular) can catch one type and print a clean
message.
"""

from __future__ import annotations
from typing import Optional, Any


# ============================================================================
# BASE EXCEPTIONS
# ============================================================================

class FoodInflationError(Exception):
    """Base class for every foodinflation error."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


# ============================================================================
# CONFIGURATION ERRORS
# ============================================================================

class ConfigurationError(FoodInflationError):
    """Invalid or unreadable configuration."""
    pass


# ============================================================================
# VALIDATION ERRORS
# ============================================================================

class ValidationError(FoodInflationError):
    """Invalid argument passed to an operation."""
    pass


class InvalidFieldError(ValidationError):
    """A field or group key that is not part of the record schema."""

    def __init__(self, field: str, allowed: Optional[tuple[str, ...]] = None):
        details: dict[str, Any] = {"field": field}
        if allowed:
            details["allowed"] = "|".join(allowed)
        super().__init__(f"Unknown field: {field}", details)
        self.field = field


# ============================================================================
# ANALYTICS ERRORS
# ============================================================================

class AnalyticsError(FoodInflationError):
    """Base for errors raised while computing a view."""
    pass


class EmptyInputError(AnalyticsError):
    """A statistic was requested over zero non-null values."""

    def __init__(self, field: str):
        super().__init__(
            f"No non-null values to aggregate for {field}",
            {"field": field},
        )
        self.field = field


class InsufficientHistoryError(AnalyticsError):
    """A lag lookup reached before the start of its partition.

    Only raised by the window helpers; the engine catches it and drops
    the record instead of surfacing it.
    """

    def __init__(self, index: int, required: int):
        super().__init__(
            f"Not enough prior observations at position {index}",
            {"index": index, "required": required},
        )
        self.index = index
        self.required = required


class ReportNotFoundError(AnalyticsError):
    """Unknown report name."""

    def __init__(self, name: str):
        super().__init__(f"Report not found: {name}", {"name": name})
        self.name = name


# ============================================================================
# LOADING ERRORS
# ============================================================================

class DataLoadError(FoodInflationError):
    """Source file missing or malformed."""

    def __init__(self, path: str, reason: str = "", line: Optional[int] = None):
        msg = f"Failed to load records from {path}"
        if reason:
            msg += f": {reason}"
        details: dict[str, Any] = {"path": path}
        if line is not None:
            details["line"] = line
        super().__init__(msg, details)
        self.path = path
        self.line = line


# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

def format_exception_chain(exc: Exception, include_traceback: bool = False) -> str:
    """Format an exception together with its ``__cause__`` chain.

    Args:
        exc: Exception to format
        include_traceback: Return the full traceback instead

    Returns:
        One line with each cause separated by ``->``
    """
    import traceback

    if include_traceback:
        return "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))

    messages = []
    current = exc
    while current is not None:
        if isinstance(current, FoodInflationError):
            messages.append(str(current))
        else:
            messages.append(f"{type(current).__name__}: {current}")
        current = getattr(current, "__cause__", None)

    return " -> ".join(messages)
