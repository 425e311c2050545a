"""
PyShell Exception Hierarchy

All shell errors inherit from ShellException. ExitNotification is a
control signal rather than an error and deliberately sits outside it.

Architecture:
    ShellException (Base)
    ├── ParseError
    ├── VariableError
    ├── ConfigValidationError
    ├── CommandError
    ├── UsageError
    └── ExecutionError
    ExitNotification
"""

from .shell_exceptions import (
    ShellException,
    ParseError,
    VariableError,
    ConfigValidationError,
)

from .command_exceptions import (
    CommandError,
    UsageError,
    ExecutionError,
    ExitNotification,
)

__all__ = [
    "ShellException",
    "ParseError",
    "VariableError",
    "ConfigValidationError",
    "CommandError",
    "UsageError",
    "ExecutionError",
    "ExitNotification",
]
