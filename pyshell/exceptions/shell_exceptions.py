"""
Shell Exceptions

Base exception for the shell engine plus the errors raised before a
command runs: malformed input, variable misuse and bad configuration.

Author: YSNRFD
Version: 1.0.0
"""

from typing import Optional, Any


class ShellException(Exception):
    """
    Base exception for all shell engine errors.

    Attributes:
        message: Human-readable error description
        error_code: Numeric error code for programmatic handling
        context: Additional context about the error

    Example:
        >>> raise ShellException("Registry unavailable", error_code=1000)
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[int] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code or 0
        self.context = context or {}

    def __str__(self) -> str:
        return self.message

    def describe(self) -> str:
        """Long form including the error code and context."""
        base = f"[Error {self.error_code}] {self.message}"
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base = f"{base} ({context_str})"
        return base

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code})"
        )


class ParseError(ShellException):
    """
    Malformed command line.

    Raised for unterminated quotes and bad ``${...}`` substitutions.
    Never raised for empty input.

    Example:
        >>> raise ParseError("Unterminated quote", line='echo "abc', position=5)
    """

    def __init__(
        self,
        reason: str,
        line: str = '',
        position: Optional[int] = None
    ) -> None:
        self.reason = reason
        self.line = line
        self.position = position

        message = reason
        if position is not None:
            message = f"{reason} at column {position + 1}"

        super().__init__(
            message=message,
            error_code=2001,
            context={'line': line} if line else None
        )


class VariableError(ShellException):
    """
    Illegal variable operation, e.g. overwriting an immutable variable.

    Example:
        >>> raise VariableError("shell.home", "immutable")
    """

    def __init__(self, name: str, reason: str = "immutable") -> None:
        self.name = name
        self.reason = reason
        super().__init__(
            message=f"Variable '{name}' is {reason}",
            error_code=2101,
            context={'variable': name}
        )


class ConfigValidationError(ShellException):
    """Raised when configuration cannot be loaded or is invalid."""

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        self.path = path
        super().__init__(
            message=message,
            error_code=2201,
            context={'path': path} if path else None
        )
