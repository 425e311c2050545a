"""
Command Executor

Runs command lines: parse, resolve, bind, invoke. Every failure below
this layer is turned into an ExecutionResult; nothing but programming
errors escapes execute().

Author: YSNRFD
Version: 1.0.0
"""

import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional, Sequence, TYPE_CHECKING

from pyshell.cli import CommandLineProcessor, HelpPrinter
from pyshell.core.action import CommandContext, CommandDescriptor
from pyshell.core.resolver import AliasAction, CommandResolver
from pyshell.core.variables import Variables, VariableNames
from pyshell.exceptions import (
    CommandError,
    ExecutionError,
    ExitNotification,
    ParseError,
    ShellException,
    UsageError,
)
from pyshell.logger import get_logger
from .parser import CommandLineParser

if TYPE_CHECKING:
    from .shell import Shell


class ExecutionStatus(Enum):
    """Outcome of running a line or a command."""
    SUCCESS = "success"
    USAGE = "usage"      # help was shown, command body skipped
    FAILURE = "failure"
    EXIT = "exit"


@dataclass
class ExecutionResult:
    """
    Result of an execution.

    Attributes:
        status: Outcome
        value: Return value of the last command run
        error: The failure, for FAILURE results
        exit_code: Requested code, for EXIT results
    """
    status: ExecutionStatus
    value: Any = None
    error: Optional[BaseException] = None
    exit_code: int = 0

    @property
    def ok(self) -> bool:
        return self.status in (ExecutionStatus.SUCCESS, ExecutionStatus.USAGE)

    @property
    def stops(self) -> bool:
        """True when the rest of a sequence must not run."""
        return self.status in (ExecutionStatus.FAILURE, ExecutionStatus.EXIT)

    @classmethod
    def success(cls, value: Any = None) -> 'ExecutionResult':
        return cls(ExecutionStatus.SUCCESS, value=value)

    @classmethod
    def usage(cls) -> 'ExecutionResult':
        return cls(ExecutionStatus.USAGE)

    @classmethod
    def failure(cls, error: BaseException) -> 'ExecutionResult':
        return cls(ExecutionStatus.FAILURE, error=error)

    @classmethod
    def exit(cls, code: int = 0) -> 'ExecutionResult':
        return cls(ExecutionStatus.EXIT, exit_code=code)


class CommandExecutor:
    """
    Executes command lines for a shell.

    The executor holds no per-call state on the instance. The stack of
    running command scopes and the stack of expanding aliases are kept
    per thread, so nested calls made from inside a command see that
    command's scope and alias loops are caught.

    Example:
        >>> executor = CommandExecutor(resolver)
        >>> result = executor.execute(shell, 'echo hello; pwd')
        >>> result.status
        <ExecutionStatus.SUCCESS: 'success'>
    """

    def __init__(self, resolver: CommandResolver, parser: Optional[CommandLineParser] = None):
        self._resolver = resolver
        self._parser = parser or CommandLineParser()
        self._logger = get_logger('executor')
        self._local = threading.local()

    @property
    def resolver(self) -> CommandResolver:
        return self._resolver

    @property
    def parser(self) -> CommandLineParser:
        return self._parser

    def _scopes(self) -> List[Variables]:
        if not hasattr(self._local, 'scopes'):
            self._local.scopes = []
        return self._local.scopes

    def _aliases(self) -> List[str]:
        if not hasattr(self._local, 'aliases'):
            self._local.aliases = []
        return self._local.aliases

    def caller_scope(self, shell: 'Shell', variables: Optional[Variables] = None) -> Variables:
        """Scope a new call layers over: explicit, running command, or session."""
        if variables is not None:
            return variables
        scopes = self._scopes()
        if scopes:
            return scopes[-1]
        return shell.variables

    def execute(
        self,
        shell: 'Shell',
        line: str,
        variables: Optional[Variables] = None
    ) -> ExecutionResult:
        """
        Execute a command line.

        The whole line is parsed first so that a syntax error anywhere
        runs nothing. Commands after the first are parsed again just
        before they run, so ${name} sees what earlier commands set.

        Args:
            shell: The owning shell
            line: Raw command line
            variables: Caller scope; defaults to the running command's
                scope, or the session scope at top level

        Returns:
            Result of the last command run
        """
        scope = self.caller_scope(shell, variables)

        try:
            command_line = self._parser.parse(line, scope)
        except ParseError as e:
            self._logger.debug(f"Parse failed: {e}", context={'line': line})
            return ExecutionResult.failure(e)

        result = ExecutionResult.success()

        for index, command in enumerate(command_line.commands):
            if index > 0:
                try:
                    reparsed = self._parser.parse(command.source, scope)
                except ParseError as e:
                    return ExecutionResult.failure(e)
                if reparsed.is_empty:
                    continue
                command = reparsed.commands[0]

            result = self.execute_command(shell, command.name, command.args, scope)
            if result.stops:
                break

        return result

    def execute_command(
        self,
        shell: 'Shell',
        name: str,
        args: Sequence[Any] = (),
        variables: Optional[Variables] = None
    ) -> ExecutionResult:
        """
        Execute one already-tokenized command.

        On success the value is stored as shell.last.result in the
        caller scope.
        """
        scope = self.caller_scope(shell, variables)
        args = [str(a) for a in args]

        try:
            result = self._run(shell, name, args, scope)
        finally:
            shell.io.flush()

        if result.status == ExecutionStatus.SUCCESS:
            scope.set_system(VariableNames.LAST_RESULT, result.value)
        return result

    def _run(
        self,
        shell: 'Shell',
        name: str,
        args: List[str],
        scope: Variables
    ) -> ExecutionResult:
        try:
            descriptor = self._resolver.resolve(name, scope)
        except CommandError as e:
            return ExecutionResult.failure(e)

        if not issubclass(descriptor.action_type, AliasAction):
            return self._invoke(shell, descriptor, name, args, scope)

        expanding = self._aliases()
        if name in expanding:
            chain = ' -> '.join(expanding + [name])
            return ExecutionResult.failure(
                CommandError(f"Alias loop detected: {chain}", name=name)
            )

        expanding.append(name)
        try:
            return self._invoke(shell, descriptor, name, args, scope)
        finally:
            expanding.pop()

    def _invoke(
        self,
        shell: 'Shell',
        descriptor: CommandDescriptor,
        name: str,
        args: List[str],
        scope: Variables
    ) -> ExecutionResult:
        io = shell.io

        if descriptor.opaque_arguments:
            arguments: Any = list(args)
        else:
            processor = CommandLineProcessor(descriptor.parameters, name)
            printer = HelpPrinter(descriptor.parameters)
            try:
                arguments = processor.bind(args)
            except UsageError as e:
                printer.print_usage(io.err, name, descriptor.description)
                return ExecutionResult.failure(e)

            if arguments.help_requested:
                printer.print_usage(io.out, name, descriptor.description)
                return ExecutionResult.usage()

        action = descriptor.create_action()
        local = scope.child()
        context = CommandContext(
            shell=shell,
            name=name,
            arguments=arguments,
            variables=local,
            io=io,
            tokens=list(args)
        )

        self._logger.debug(f"Executing command: {name}", context={'arguments': args})

        scopes = self._scopes()
        scopes.append(local)
        try:
            value = action.execute(context)
        except ExitNotification as e:
            self._logger.debug(f"Exit requested by {name}", context={'code': e.code})
            return ExecutionResult.exit(e.code)
        except ShellException as e:
            return ExecutionResult.failure(e)
        except Exception as e:
            self._logger.error(
                f"Command failed: {name}",
                context={'arguments': args, 'error': str(e)},
                exc_info=e
            )
            error = ExecutionError(name, args)
            error.__cause__ = e
            return ExecutionResult.failure(error)
        finally:
            scopes.pop()

        if isinstance(value, ExecutionResult):
            return value
        return ExecutionResult.success(value)
