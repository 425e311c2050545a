"""
Argument/Option Binder

Binds command-line tokens to a command's declared parameters.

Author: YSNRFD
Version: 1.0.0
"""

import re
from dataclasses import dataclass, field
from typing import Optional, Any, List, Sequence

from pyshell.exceptions import UsageError
from .descriptors import CommandParameters, ParameterDescriptor, OptionDescriptor
from .handlers import get_handler


NEGATIVE_NUMBER = re.compile(r'-\d+(\.\d+)?')


@dataclass
class BoundArguments:
    """
    Result of a successful bind.

    Values are keyed by parameter name and also reachable as attributes:
        >>> bound.path
    """
    values: dict[str, Any] = field(default_factory=dict)
    help_requested: bool = False
    tokens: List[str] = field(default_factory=list)

    def get(self, name: str, default: Any = None) -> Any:
        return self.values.get(name, default)

    def __getitem__(self, name: str) -> Any:
        return self.values[name]

    def __contains__(self, name: str) -> bool:
        return name in self.values

    def __getattr__(self, name: str) -> Any:
        values = self.__dict__.get('values', {})
        if name in values:
            return values[name]
        raise AttributeError(name)


class CommandLineProcessor:
    """
    Binds tokens against a CommandParameters table.

    The processor holds only the table; bind() keeps all per-call state
    in locals so one instance may serve concurrent callers.

    Example:
        >>> processor = CommandLineProcessor(params)
        >>> bound = processor.bind(['-l', '/tmp'])
    """

    def __init__(self, parameters: CommandParameters, command: Optional[str] = None):
        self._parameters = parameters
        self._command = command

    @property
    def parameters(self) -> CommandParameters:
        return self._parameters

    def bind(self, tokens: Sequence[str]) -> BoundArguments:
        """
        Bind tokens to the declared parameters.

        Args:
            tokens: Argument tokens, command name excluded

        Returns:
            BoundArguments; help_requested is set when the help flag
            was given, in which case no other checks are made

        Raises:
            UsageError: On unknown options, bad values, missing required
                parameters or surplus positional tokens
        """
        values: dict[str, Any] = {}
        seen: set[str] = set()
        positionals: List[str] = []
        stopped = False

        i = 0
        while i < len(tokens):
            token = tokens[i]
            i += 1

            if stopped or not self._looks_like_option(token):
                positionals.append(token)
                continue

            flag, has_inline, inline = token.partition('=')
            option = self._parameters.find_option(flag)
            if option is None:
                raise self._error(flag, "unknown option")

            if option.is_help:
                return BoundArguments(help_requested=True, tokens=list(tokens))

            if option.is_stop:
                if has_inline:
                    raise self._error(option.name, "option does not take a value")
                values[option.name] = True
                seen.add(option.name)
                stopped = True
                continue

            handler = get_handler(option.handler)
            if has_inline:
                raw = inline
            elif not option.takes_value:
                self._assign(values, option, handler.flag_value(option))
                seen.add(option.name)
                continue
            elif i < len(tokens):
                raw = tokens[i]
                i += 1
            else:
                raise self._error(option.name, "option requires a value")

            self._assign(values, option, self._convert(option, raw))
            seen.add(option.name)

        self._bind_arguments(values, seen, positionals)

        for param in self._parameters.all:
            if param.name in seen:
                continue
            if param.required:
                kind = "option" if isinstance(param, OptionDescriptor) else "argument"
                raise self._error(param.name, f"missing required {kind}")
            values[param.name] = param.default_value()

        return BoundArguments(values=values, tokens=list(tokens))

    def _looks_like_option(self, token: str) -> bool:
        if not token.startswith('-') or token == '-':
            return False
        if NEGATIVE_NUMBER.fullmatch(token):
            # Only an option if something is declared with that flag
            return self._parameters.find_option(token) is not None
        return True

    def _bind_arguments(
        self,
        values: dict[str, Any],
        seen: set[str],
        positionals: List[str]
    ) -> None:
        """Assign positional tokens in ascending index order."""
        remaining = list(positionals)

        for argument in self._parameters.arguments:
            if not remaining:
                break
            if argument.is_rest:
                values[argument.name] = [self._convert(argument, t) for t in remaining]
                remaining = []
            else:
                values[argument.name] = self._convert(argument, remaining.pop(0))
            seen.add(argument.name)

        if remaining:
            raise self._error(remaining[0], "too many arguments")

    def _assign(self, values: dict[str, Any], option: OptionDescriptor, value: Any) -> None:
        if option.multi:
            values.setdefault(option.name, []).append(value)
        else:
            values[option.name] = value

    def _convert(self, param: ParameterDescriptor, raw: str) -> Any:
        try:
            return get_handler(param.handler).convert(param, raw)
        except ValueError as e:
            raise self._error(param.name, str(e)) from e

    def _error(self, parameter: Optional[str], reason: str) -> UsageError:
        return UsageError(parameter, reason, command=self._command)


def bind(
    parameters: CommandParameters,
    tokens: Sequence[str],
    command: Optional[str] = None
) -> BoundArguments:
    """Convenience wrapper around CommandLineProcessor.bind()."""
    return CommandLineProcessor(parameters, command).bind(tokens)
