"""
Shell I/O

Output and error streams handed to every command.

Author: YSNRFD
Version: 1.0.0
"""

import sys
from typing import Any, Optional, TextIO


class IO:
    """
    Console streams with verbosity flags.

    Commands write through println/print_err so that tests and embedding
    applications can redirect everything by passing their own streams.
    """

    def __init__(
        self,
        out: Optional[TextIO] = None,
        err: Optional[TextIO] = None,
        verbose: bool = False,
        quiet: bool = False
    ):
        self.out = out if out is not None else sys.stdout
        self.err = err if err is not None else sys.stderr
        self._verbose = verbose
        self._quiet = quiet

    def println(self, *values: Any, end: str = '\n') -> None:
        print(*values, end=end, file=self.out)

    def print_err(self, *values: Any, end: str = '\n') -> None:
        print(*values, end=end, file=self.err)

    def info(self, *values: Any) -> None:
        """Print unless quiet."""
        if not self._quiet:
            self.println(*values)

    def is_verbose(self) -> bool:
        return self._verbose

    def is_quiet(self) -> bool:
        return self._quiet

    def set_verbose(self, verbose: bool) -> None:
        self._verbose = verbose

    def flush(self) -> None:
        for stream in (self.out, self.err):
            try:
                stream.flush()
            except (OSError, ValueError):
                # closed stream
                pass
