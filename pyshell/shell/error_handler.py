"""
Console Error Handler

Reports failed command lines on the console.

Author: YSNRFD
Version: 1.0.0
"""

import traceback
from typing import Optional

from pyshell.core.variables import Variables, VariableNames
from pyshell.exceptions import ExecutionError
from pyshell.logger import get_logger
from .io import IO


class ConsoleErrorHandler:
    """
    Prints errors to the error stream.

    The short form is one line, 'ERROR <Type>: <message>'. The full
    traceback with its cause chain follows when the
    'shell.show.stacktrace' variable is true or the IO is verbose.
    Wrapped command failures are reported as the exception the command
    actually raised.
    """

    def __init__(self, io: IO):
        self._io = io
        self._logger = get_logger('errors')

    @staticmethod
    def root_error(error: BaseException) -> BaseException:
        if isinstance(error, ExecutionError) and error.original is not None:
            return error.original
        return error

    def format(self, error: BaseException) -> str:
        cause = self.root_error(error)
        message = str(cause)
        if message:
            return f"ERROR {type(cause).__name__}: {message}"
        return f"ERROR {type(cause).__name__}"

    def handle(self, error: BaseException, variables: Optional[Variables] = None) -> bool:
        """
        Report an error.

        Returns:
            True if the full trace was printed
        """
        self._logger.debug(f"Reporting error: {type(error).__name__}", context={'error': str(error)})
        self._io.print_err(self.format(error))

        show_trace = self._io.is_verbose()
        if variables is not None:
            show_trace = show_trace or variables.get_bool(VariableNames.SHOW_STACKTRACE)

        if show_trace:
            trace = ''.join(traceback.format_exception(type(error), error, error.__traceback__))
            self._io.print_err(trace, end='')

        self._io.flush()
        return show_trace
