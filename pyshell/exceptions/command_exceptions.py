"""
Command Exceptions

Errors raised while resolving, binding and running commands, plus the
exit control signal.

Author: YSNRFD
Version: 1.0.0
"""

from typing import Optional, Any, Sequence

from .shell_exceptions import ShellException


class CommandError(ShellException):
    """
    Command resolution failure.

    Raised when a name resolves to neither an alias nor a registered
    command, when an alias expands into itself, and for registry misuse.

    Example:
        >>> raise CommandError("Unable to resolve command", name="frob")
    """

    def __init__(
        self,
        message: str,
        name: Optional[str] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        if name:
            ctx['command'] = name
        super().__init__(message=message, error_code=3001, context=ctx)
        self.name = name

    @classmethod
    def unresolved(cls, name: str) -> 'CommandError':
        return cls(f"Unable to resolve command: {name}", name=name)


class UsageError(ShellException):
    """
    Invalid command-line arguments.

    Carries the offending parameter (if any) and the violated constraint.
    The executor prints the command usage alongside this error.

    Example:
        >>> raise UsageError("path", "missing required argument")
    """

    def __init__(
        self,
        parameter: Optional[str],
        reason: str,
        command: Optional[str] = None
    ) -> None:
        self.parameter = parameter
        self.reason = reason
        self.command = command

        if parameter:
            message = f"{reason}: {parameter}"
        else:
            message = reason

        ctx = {}
        if command:
            ctx['command'] = command
        super().__init__(message=message, error_code=3002, context=ctx)


class ExecutionError(ShellException):
    """
    Unexpected failure raised by a command body.

    The original exception is kept as ``__cause__`` so the full chain
    reaches the error handler untouched.
    """

    def __init__(self, command: str, arguments: Sequence[Any] = ()) -> None:
        self.command = command
        self.arguments = list(arguments)
        super().__init__(
            message=f"Command '{command}' failed",
            error_code=3003,
            context={'command': command}
        )

    @property
    def original(self) -> Optional[BaseException]:
        return self.__cause__


class ExitNotification(Exception):
    """
    Request to terminate the shell.

    Not an error. Raised by commands such as ``exit`` and unwound by the
    executor into an EXIT result that stops the interactive loop.
    """

    def __init__(self, code: int = 0) -> None:
        super().__init__(f"exit {code}")
        self.code = code
