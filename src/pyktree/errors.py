"""Error handling utilities for pyktree.

Provides the exception hierarchy used by the layout, scene and
interaction layers, plus small validation helpers.
"""


class PyktreeError(Exception):
    """Base exception for pyktree errors."""

    pass


class GraphicsContextUnavailable(PyktreeError):
    """Exception raised when there is no surface to render into.

    This is fatal for a scene build and is never retried by the core.
    """

    def __init__(self, reason: str) -> None:
        """Initialize graphics context error.

        Args:
            reason: Why the host surface cannot be used
        """
        self.reason = reason
        super().__init__(f"No rendering context: {reason}")


class MalformedNode(PyktreeError):
    """Exception raised when a tree node cannot be placed."""

    def __init__(self, name: object, reason: str) -> None:
        """Initialize malformed node error.

        Args:
            name: Name of the offending node (may itself be missing)
            reason: Reason the node was rejected
        """
        self.name = name
        self.reason = reason
        super().__init__(f"Malformed node {name!r}: {reason}")


class LayoutError(PyktreeError):
    """Exception raised when layout calculation fails."""

    def __init__(self, reason: str) -> None:
        """Initialize layout error.

        Args:
            reason: Reason for failure
        """
        self.reason = reason
        super().__init__(f"Layout calculation failed: {reason}")


class ValidationError(PyktreeError):
    """Exception raised when input validation fails."""

    def __init__(self, field: str, value: object, expected: str) -> None:
        """Initialize validation error.

        Args:
            field: Field name that failed validation
            value: Invalid value
            expected: Expected type/description
        """
        self.field = field
        self.value = value
        self.expected = expected
        super().__init__(f"Validation failed for '{field}': expected {expected}, got {value!r}")


def validate_range(value: int | float, min_val: int | float, max_val: int | float, name: str = "value") -> None:
    """Validate that a value is within range.

    Args:
        value: Value to validate
        min_val: Minimum allowed value
        max_val: Maximum allowed value
        name: Name of the value for error messages

    Raises:
        ValidationError: If value is out of range
    """
    if not (min_val <= value <= max_val):
        raise ValidationError(name, value, f"value between {min_val} and {max_val}")


def validate_positive(value: int | float, name: str = "value") -> None:
    """Validate that a value is strictly positive.

    Raises:
        ValidationError: If value is zero or negative
    """
    if not value > 0:
        raise ValidationError(name, value, "positive number")
