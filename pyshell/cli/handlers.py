"""
Parameter Type Handlers

Each declared parameter names one handler which converts its raw token
into a typed value. The set is open: register_handler() adds new ones.

Author: YSNRFD
Version: 1.0.0
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, TYPE_CHECKING
from urllib.parse import urlparse, ParseResult
import threading

if TYPE_CHECKING:
    from .descriptors import ParameterDescriptor


class HandlerType:
    """Built-in handler identifiers."""
    STRING = 'string'
    INTEGER = 'integer'
    FILE = 'file'
    URI = 'uri'
    BOOLEAN = 'boolean'
    ENUM = 'enum'
    REST = 'rest'
    STOP = 'stop'
    HELP = 'help'


class Handler(ABC):
    """
    Converts a raw token for one parameter.

    Subclasses raise ValueError with a short reason when the token is
    not acceptable; the binder turns that into a UsageError.
    """

    #: False for flags that never consume a separate value token
    takes_value: bool = True

    @abstractmethod
    def convert(self, param: 'ParameterDescriptor', token: str) -> Any:
        pass

    def flag_value(self, param: 'ParameterDescriptor') -> Any:
        """Value used when a flag appears without an explicit value."""
        raise ValueError("requires a value")


class StringHandler(Handler):
    def convert(self, param, token):
        return token


class IntegerHandler(Handler):
    def convert(self, param, token):
        try:
            return int(token)
        except ValueError:
            raise ValueError(f"invalid integer '{token}'") from None


class FileHandler(Handler):
    def convert(self, param, token):
        if not token:
            raise ValueError("empty path")
        return Path(token).expanduser()


class UriHandler(Handler):
    """Accepts any URI with a scheme, e.g. 'file:/tmp' or 'foo:bar'."""

    def convert(self, param, token) -> ParseResult:
        result = urlparse(token)
        if not result.scheme:
            raise ValueError(f"invalid URI '{token}'")
        return result


class BooleanHandler(Handler):
    takes_value = False

    TRUE = ('true', 'yes', 'on', '1')
    FALSE = ('false', 'no', 'off', '0')

    def convert(self, param, token):
        value = token.strip().lower()
        if value in self.TRUE:
            return True
        if value in self.FALSE:
            return False
        raise ValueError(f"invalid boolean '{token}'")

    def flag_value(self, param):
        return True


class EnumHandler(Handler):
    def convert(self, param, token):
        if token not in param.choices:
            allowed = ", ".join(param.choices)
            raise ValueError(f"invalid choice '{token}' (choose from {allowed})")
        return token


class RestHandler(Handler):
    """Collects every remaining positional token; the binder does the collecting."""

    def convert(self, param, token):
        return token


class StopHandler(Handler):
    """Flag that ends option processing for the rest of the line."""
    takes_value = False

    def convert(self, param, token):
        raise ValueError("does not take a value")

    def flag_value(self, param):
        return True


class HelpHandler(Handler):
    """Flag that asks for usage instead of execution."""
    takes_value = False

    def convert(self, param, token):
        raise ValueError("does not take a value")

    def flag_value(self, param):
        return True


_handlers: dict[str, Handler] = {
    HandlerType.STRING: StringHandler(),
    HandlerType.INTEGER: IntegerHandler(),
    HandlerType.FILE: FileHandler(),
    HandlerType.URI: UriHandler(),
    HandlerType.BOOLEAN: BooleanHandler(),
    HandlerType.ENUM: EnumHandler(),
    HandlerType.REST: RestHandler(),
    HandlerType.STOP: StopHandler(),
    HandlerType.HELP: HelpHandler(),
}
_lock = threading.Lock()


def register_handler(name: str, handler: Handler) -> None:
    """
    Add or replace a handler.

    Args:
        name: Identifier used in parameter declarations
        handler: Handler instance
    """
    with _lock:
        _handlers[name] = handler


def get_handler(name: str) -> Handler:
    """
    Look up a handler by identifier.

    Raises:
        KeyError: If no handler is registered under name
    """
    with _lock:
        if name not in _handlers:
            raise KeyError(f"Unknown parameter handler '{name}'")
        return _handlers[name]


def has_handler(name: str) -> bool:
    with _lock:
        return name in _handlers
