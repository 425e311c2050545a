"""
PyShell Shell Module

Provides the command shell session:
- Command line parsing
- Command execution
- Completion candidates
- Error reporting
- Built-in commands
"""

from .parser import CommandLineParser, CommandLine, ParsedCommand, Token, TokenType
from .io import IO
from .executor import CommandExecutor, ExecutionResult, ExecutionStatus
from .completer import (
    Candidate,
    StringsCompleter,
    DynamicCompleter,
    CommandNameCompleter,
    AliasNameCompleter,
    HelpPageNameCompleter,
    AggregateCompleter,
)
from .help_pages import HelpPage, HelpPageManager
from .error_handler import ConsoleErrorHandler
from .builtins import BUILTIN_COMMANDS
from .shell import Shell, create_shell

__all__ = [
    'CommandLineParser',
    'CommandLine',
    'ParsedCommand',
    'Token',
    'TokenType',
    'IO',
    'CommandExecutor',
    'ExecutionResult',
    'ExecutionStatus',
    'Candidate',
    'StringsCompleter',
    'DynamicCompleter',
    'CommandNameCompleter',
    'AliasNameCompleter',
    'HelpPageNameCompleter',
    'AggregateCompleter',
    'HelpPage',
    'HelpPageManager',
    'ConsoleErrorHandler',
    'BUILTIN_COMMANDS',
    'Shell',
    'create_shell',
]
