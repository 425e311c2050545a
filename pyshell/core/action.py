"""
Command Actions

The runtime side of a command: the CommandAction base class, the
context handed to it, and the scope tag deciding whether one instance
is shared or a fresh one is built for every call.

Author: YSNRFD
Version: 1.0.0
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, List, Optional, Union, TYPE_CHECKING

from pyshell.cli import BoundArguments, CommandParameters, ParametersBuilder, EMPTY_PARAMETERS
from .variables import Variables

if TYPE_CHECKING:
    from pyshell.shell.io import IO
    from pyshell.shell.shell import Shell


class ActionScope(Enum):
    """Instantiation policy for an action."""
    SINGLETON = auto()   # one shared instance
    PROTOTYPE = auto()   # new instance per invocation


@dataclass
class CommandContext:
    """
    Everything a command sees while it runs.

    Attributes:
        shell: The owning session
        name: The name the command was invoked as
        arguments: Bound arguments, or the raw token list for opaque commands
        variables: Per-call scope layered over the caller's scope
        io: Output and error streams
    """
    shell: 'Shell'
    name: str
    arguments: Union[BoundArguments, List[str]]
    variables: Variables
    io: 'IO'
    tokens: List[str] = field(default_factory=list)


class CommandAction(ABC):
    """
    Base class for shell commands.

    Subclasses set the class attributes and implement execute().
    Parameters are declared by overriding declare(); the table is built
    once when the command is registered.

    Example:
        >>> class EchoCommand(CommandAction):
        ...     name = 'echo'
        ...     description = 'Print arguments'
        ...
        ...     @classmethod
        ...     def declare(cls, params):
        ...         params.argument('text', handler=HandlerType.REST)
        ...
        ...     def execute(self, context):
        ...         context.io.println(' '.join(context.arguments.text))
    """

    name: str = ''
    description: str = ''
    scope: ActionScope = ActionScope.SINGLETON
    opaque_arguments: bool = False

    @classmethod
    def declare(cls, params: ParametersBuilder) -> None:
        """Declare options and arguments. Default: none besides --help."""

    @classmethod
    def build_parameters(cls) -> CommandParameters:
        if cls.opaque_arguments:
            return EMPTY_PARAMETERS
        builder = CommandParameters.builder()
        cls.declare(builder)
        return builder.build()

    @abstractmethod
    def execute(self, context: CommandContext) -> Any:
        """
        Run the command.

        Returns:
            Any value; it becomes the shell's last result

        Raises:
            ExitNotification: To end the shell session
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


@dataclass(frozen=True)
class CommandDescriptor:
    """
    Immutable registration record for a command.

    Built once from an action class (or a ready singleton instance);
    the registry owns it from then on.
    """
    name: str
    action_type: type
    parameters: CommandParameters = EMPTY_PARAMETERS
    description: str = ''
    enabled: bool = True
    scope: ActionScope = ActionScope.SINGLETON
    opaque_arguments: bool = False
    instance: Optional[CommandAction] = field(default=None, compare=False, repr=False)

    @classmethod
    def of(
        cls,
        action: Union[type, CommandAction],
        name: Optional[str] = None,
        enabled: bool = True
    ) -> 'CommandDescriptor':
        """
        Describe an action class or instance.

        Args:
            action: CommandAction subclass, or an instance to share
            name: Registration name; defaults to the action's name
            enabled: Whether the command may be registered

        Raises:
            TypeError: If action is not a CommandAction
            ValueError: If no name is available or parameters are invalid
        """
        if isinstance(action, CommandAction):
            action_type = type(action)
            instance: Optional[CommandAction] = action
        elif isinstance(action, type) and issubclass(action, CommandAction):
            action_type = action
            instance = None
        else:
            raise TypeError(f"Not a command action: {action!r}")

        name = name or action_type.name
        if not name:
            raise ValueError(f"Command {action_type.__name__} has no name")

        scope = action_type.scope
        if instance is None and scope == ActionScope.SINGLETON:
            instance = action_type()

        return cls(
            name=name,
            action_type=action_type,
            parameters=action_type.build_parameters(),
            description=action_type.description,
            enabled=enabled,
            scope=scope,
            opaque_arguments=action_type.opaque_arguments,
            instance=instance,
        )

    def create_action(self) -> CommandAction:
        """The shared instance, or a new one for prototype commands."""
        if self.scope == ActionScope.PROTOTYPE or self.instance is None:
            return self.action_type()
        return self.instance
