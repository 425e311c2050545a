"""
Parameter Descriptors

Static declaration tables for command parameters. A command builds its
table once, at registration time, through ParametersBuilder.

Author: YSNRFD
Version: 1.0.0
"""

from dataclasses import dataclass
from typing import Optional, Any, List, Sequence, Tuple

from .handlers import HandlerType, get_handler, has_handler


@dataclass(frozen=True)
class ParameterDescriptor:
    """Common part of an option or positional argument declaration."""
    name: str
    description: str = ''
    required: bool = False
    handler: str = HandlerType.STRING
    default: Any = None
    choices: Tuple[str, ...] = ()
    token: Optional[str] = None

    @property
    def is_rest(self) -> bool:
        return self.handler == HandlerType.REST

    @property
    def is_stop(self) -> bool:
        return self.handler == HandlerType.STOP

    @property
    def is_help(self) -> bool:
        return self.handler == HandlerType.HELP

    @property
    def takes_value(self) -> bool:
        return get_handler(self.handler).takes_value

    @property
    def metavar(self) -> str:
        return self.token or self.name.upper()

    def default_value(self) -> Any:
        return self.default


@dataclass(frozen=True)
class OptionDescriptor(ParameterDescriptor):
    """A named option introduced by one of its flags, e.g. -l or --long."""
    flags: Tuple[str, ...] = ()
    multi: bool = False

    def default_value(self) -> Any:
        if self.default is not None:
            return self.default
        if self.multi:
            return []
        if self.handler == HandlerType.BOOLEAN:
            return False
        return None


@dataclass(frozen=True)
class ArgumentDescriptor(ParameterDescriptor):
    """A positional argument consumed in index order."""
    index: int = 0

    def default_value(self) -> Any:
        if self.default is None and self.is_rest:
            return []
        return self.default


@dataclass(frozen=True)
class CommandParameters:
    """Immutable parameter table for one command."""
    options: Tuple[OptionDescriptor, ...] = ()
    arguments: Tuple[ArgumentDescriptor, ...] = ()

    def find_option(self, flag: str) -> Optional[OptionDescriptor]:
        for option in self.options:
            if flag in option.flags:
                return option
        return None

    @property
    def all(self) -> List[ParameterDescriptor]:
        return list(self.options) + list(self.arguments)

    @classmethod
    def builder(cls, help_option: bool = True) -> 'ParametersBuilder':
        return ParametersBuilder(help_option=help_option)


EMPTY_PARAMETERS = CommandParameters()


class ParametersBuilder:
    """
    Builds a CommandParameters table.

    Example:
        >>> params = (CommandParameters.builder()
        ...     .option('long', '-l', '--long', handler=HandlerType.BOOLEAN)
        ...     .argument('path', handler=HandlerType.FILE)
        ...     .build())
    """

    HELP_FLAGS = ('-h', '--help')

    def __init__(self, help_option: bool = True):
        self._options: List[OptionDescriptor] = []
        self._arguments: List[ArgumentDescriptor] = []
        if help_option:
            self.option(
                'help', *self.HELP_FLAGS,
                handler=HandlerType.HELP,
                description='Display this help message'
            )

    def option(
        self,
        name: str,
        *flags: str,
        handler: str = HandlerType.STRING,
        description: str = '',
        required: bool = False,
        default: Any = None,
        choices: Sequence[str] = (),
        multi: bool = False,
        token: Optional[str] = None
    ) -> 'ParametersBuilder':
        """Declare a named option."""
        self._options.append(OptionDescriptor(
            name=name,
            description=description,
            required=required,
            handler=handler,
            default=default,
            choices=tuple(choices),
            token=token,
            flags=tuple(flags) or (f"--{name}",),
            multi=multi,
        ))
        return self

    def argument(
        self,
        name: str,
        index: Optional[int] = None,
        handler: str = HandlerType.STRING,
        description: str = '',
        required: bool = False,
        default: Any = None,
        choices: Sequence[str] = (),
        token: Optional[str] = None
    ) -> 'ParametersBuilder':
        """Declare a positional argument; index defaults to the next free slot."""
        if index is None:
            index = len(self._arguments)
        self._arguments.append(ArgumentDescriptor(
            name=name,
            description=description,
            required=required,
            handler=handler,
            default=default,
            choices=tuple(choices),
            token=token,
            index=index,
        ))
        return self

    def build(self) -> CommandParameters:
        """
        Validate and freeze the declarations.

        Raises:
            ValueError: On inconsistent declarations
        """
        names: set[str] = set()
        flags: set[str] = set()

        for param in self._options + self._arguments:
            if not has_handler(param.handler):
                raise ValueError(f"Unknown handler '{param.handler}' for '{param.name}'")
            if param.name in names:
                raise ValueError(f"Duplicate parameter name '{param.name}'")
            names.add(param.name)
            if param.handler == HandlerType.ENUM and not param.choices:
                raise ValueError(f"Enumerated parameter '{param.name}' declares no choices")

        for option in self._options:
            for flag in option.flags:
                if not flag.startswith('-') or flag == '-':
                    raise ValueError(f"Invalid option flag '{flag}'")
                if flag in flags:
                    raise ValueError(f"Duplicate option flag '{flag}'")
                flags.add(flag)
            if option.is_rest:
                raise ValueError(f"Option '{option.name}' cannot collect remaining tokens")

        stops = [o for o in self._options if o.is_stop]
        if len(stops) > 1:
            raise ValueError("Only one stop-processing parameter may be declared")

        arguments = sorted(self._arguments, key=lambda a: a.index)
        indices = [a.index for a in arguments]
        if indices != list(range(len(arguments))):
            raise ValueError(
                f"Argument indices must be unique and contiguous from 0, got {indices}"
            )

        for argument in arguments:
            if argument.handler in (HandlerType.STOP, HandlerType.HELP):
                raise ValueError(f"Argument '{argument.name}' cannot use a flag handler")
            if argument.is_rest and argument is not arguments[-1]:
                raise ValueError(
                    f"Argument '{argument.name}' collects remaining tokens and must be last"
                )

        return CommandParameters(
            options=tuple(self._options),
            arguments=tuple(arguments),
        )
