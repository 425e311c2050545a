"""
PyShell - An Embeddable Interactive Command Shell

This package provides a command shell engine: parsing, command and alias
registries, typed argument binding, scoped variables, execution and
completion, implemented using only the standard library.
"""

import logging

__version__ = "1.0.0"
__author__ = "YSNRFD"

logging.getLogger('pyshell').addHandler(logging.NullHandler())

# Import main components for convenience
from .shell.shell import Shell, create_shell
from .shell.executor import CommandExecutor, ExecutionResult, ExecutionStatus
from .core.action import CommandAction, ActionScope

__all__ = [
    'Shell',
    'create_shell',
    'CommandExecutor',
    'ExecutionResult',
    'ExecutionStatus',
    'CommandAction',
    'ActionScope',
]
