"""
Command Registrar

Registers commands from command-set descriptors supplied by a discovery
collaborator (configuration, plugins, tests). Sets are applied in rank
order so that higher ranked sets override lower ranked ones.

Author: YSNRFD
Version: 1.0.0
"""

import importlib
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence, Union

from pyshell.logger import get_logger
from .action import CommandAction, CommandDescriptor
from .registry import CommandRegistry


@dataclass
class CommandEntry:
    """
    One command within a set.

    Attributes:
        action: CommandAction subclass, or a 'package.module:ClassName' reference
        name: Registration name; defaults to the action's own name
        enabled: Disabled entries are skipped
    """
    action: Union[str, type]
    name: Optional[str] = None
    enabled: bool = True


@dataclass
class CommandSetDescriptor:
    """A group of commands sharing an enabled flag and a rank."""
    id: str
    commands: List[CommandEntry] = field(default_factory=list)
    enabled: bool = True
    rank: int = 0


class CommandRegistrar:
    """
    Applies command sets to a registry.

    Example:
        >>> registrar = CommandRegistrar(registry)
        >>> registrar.register_sets([
        ...     CommandSetDescriptor('standard', [CommandEntry('pyshell.shell.builtins:EchoCommand')]),
        ... ])
    """

    def __init__(self, registry: CommandRegistry):
        self._registry = registry
        self._logger = get_logger('registrar')
        self._applied: List[CommandSetDescriptor] = []

    @property
    def applied_sets(self) -> List[CommandSetDescriptor]:
        return list(self._applied)

    def register_sets(self, sets: Sequence[CommandSetDescriptor]) -> int:
        """
        Register every enabled command of every enabled set.

        Sets are sorted by rank, ties keeping declaration order. A failing
        entry is logged and skipped; the rest of the batch continues.

        Returns:
            Number of commands registered
        """
        count = 0

        for command_set in sorted(sets, key=lambda s: s.rank):
            if not command_set.enabled:
                self._logger.debug(f"Skipping disabled commands: {command_set.id}")
                continue

            self._logger.debug(
                f"Registering commands for: {command_set.id}",
                context={'rank': command_set.rank}
            )
            self._applied.append(command_set)

            for entry in command_set.commands:
                if not entry.enabled:
                    self._logger.debug(f"Skipping disabled command: {entry.name or entry.action}")
                    continue
                try:
                    self.register_command(entry.action, entry.name)
                    count += 1
                except Exception as e:
                    self._logger.error(
                        f"Failed to register command: {entry.action}",
                        context={'set': command_set.id, 'error': str(e)},
                        exc_info=e
                    )

        return count

    def register_command(
        self,
        action: Union[str, type, CommandAction],
        name: Optional[str] = None
    ) -> CommandDescriptor:
        """
        Register a single command.

        Raises:
            ImportError: If a string reference cannot be imported
            TypeError: If the target is not a CommandAction
        """
        if isinstance(action, str):
            action = self.load_action(action)
        descriptor = CommandDescriptor.of(action, name=name)
        self._registry.register(descriptor.name, descriptor)
        return descriptor

    @staticmethod
    def load_action(reference: str) -> Any:
        """
        Import 'package.module:ClassName' (or 'package.module.ClassName').

        Raises:
            ImportError: If the module or attribute is missing
        """
        if ':' in reference:
            module_name, _, attr = reference.partition(':')
        else:
            module_name, _, attr = reference.rpartition('.')

        if not module_name or not attr:
            raise ImportError(f"Invalid action reference: {reference}")

        module = importlib.import_module(module_name)
        try:
            return getattr(module, attr)
        except AttributeError:
            raise ImportError(f"No attribute '{attr}' in module '{module_name}'") from None
