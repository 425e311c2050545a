"""
Command Resolver

Turns a command name into something executable. Aliases win over
registered commands; registered commands are looked up relative to the
current command group held in the 'shell.group' variable.

Author: YSNRFD
Version: 1.0.0
"""

from typing import Any, Optional

from pyshell.exceptions import CommandError
from pyshell.logger import get_logger
from .action import ActionScope, CommandAction, CommandContext, CommandDescriptor
from .paths import CommandPath, ROOT
from .registry import AliasRegistry, CommandRegistry
from .variables import Variables, VariableNames


class AliasAction(CommandAction):
    """
    Runs an alias by re-submitting its expanded text to the shell.

    Trailing caller arguments are appended to the target with single
    spaces, and the whole line is parsed and executed again. Arguments
    are opaque here; the expanded line is bound by whatever it resolves
    to.
    """

    description = 'Alias'
    scope = ActionScope.SINGLETON
    opaque_arguments = True

    def __init__(self, alias: str = '', target: str = ''):
        self.alias = alias
        self.target = target

    def expand(self, args) -> str:
        if args:
            return self.target + ' ' + ' '.join(str(a) for a in args)
        return self.target

    def execute(self, context: CommandContext) -> Any:
        line = self.expand(context.arguments)
        return context.shell.execute(line, variables=context.variables)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AliasAction):
            return NotImplemented
        return (self.alias, self.target) == (other.alias, other.target)

    def __hash__(self) -> int:
        return hash((self.alias, self.target))

    def __repr__(self) -> str:
        return f"AliasAction({self.alias!r} -> {self.target!r})"


class CommandResolver:
    """
    Resolves names against the alias table and the command registry.

    Resolution order:
        1. Exact alias name
        2. For plain names: the current group, then the root group
        3. For qualified names ('/a/b', '../b', './b'): the path resolved
           against the current group
    """

    def __init__(self, commands: CommandRegistry, aliases: AliasRegistry):
        self._commands = commands
        self._aliases = aliases
        self._logger = get_logger('resolver')

    @property
    def commands(self) -> CommandRegistry:
        return self._commands

    @property
    def aliases(self) -> AliasRegistry:
        return self._aliases

    def resolve(self, name: str, variables: Optional[Variables] = None) -> CommandDescriptor:
        """
        Resolve a command name.

        Args:
            name: Name as typed
            variables: Scope supplying the current group

        Returns:
            Descriptor of the command, or of a synthesized alias command

        Raises:
            CommandError: If nothing matches
        """
        self._logger.debug(f"Resolving command for name: {name}")

        descriptor = self.resolve_alias(name)
        if descriptor is None:
            descriptor = self.resolve_registered(name, self.current_group(variables))

        if descriptor is None:
            raise CommandError.unresolved(name)

        self._logger.debug(f"Resolved command: {descriptor.name}")
        return descriptor

    def resolve_alias(self, name: str) -> Optional[CommandDescriptor]:
        target = self._aliases.get(name)
        if target is None:
            return None
        return CommandDescriptor.of(AliasAction(name, target), name=name)

    def resolve_registered(self, name: str, group: str = ROOT) -> Optional[CommandDescriptor]:
        if not name:
            return None

        if CommandPath.is_qualified(name):
            candidates = [CommandPath.key(name, group)]
        else:
            candidates = [CommandPath.key(name, group), name]

        for key in candidates:
            if not key or key == '.':
                continue
            descriptor = self._commands.get(key)
            if descriptor is not None:
                return descriptor
        return None

    @staticmethod
    def current_group(variables: Optional[Variables]) -> str:
        if variables is None:
            return ROOT
        return str(variables.get(VariableNames.GROUP) or ROOT)
