"""
PyShell CLI Module

Declarative command parameters and the binder:
- Parameter descriptors and builder
- Type handlers
- Token binding
- Usage rendering
"""

from .handlers import (
    Handler,
    HandlerType,
    register_handler,
    get_handler,
)
from .descriptors import (
    ParameterDescriptor,
    OptionDescriptor,
    ArgumentDescriptor,
    CommandParameters,
    ParametersBuilder,
    EMPTY_PARAMETERS,
)
from .processor import BoundArguments, CommandLineProcessor, bind
from .help import HelpPrinter

__all__ = [
    'Handler',
    'HandlerType',
    'register_handler',
    'get_handler',
    'ParameterDescriptor',
    'OptionDescriptor',
    'ArgumentDescriptor',
    'CommandParameters',
    'ParametersBuilder',
    'EMPTY_PARAMETERS',
    'BoundArguments',
    'CommandLineProcessor',
    'bind',
    'HelpPrinter',
]
