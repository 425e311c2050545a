"""
PyShell Command Registry

Central tables mapping names to commands and aliases:
- Command registration and removal
- Alias definitions
- Synchronous change events for completers and other observers
- Concurrent reads, serialized mutations

Author: YSNRFD
Version: 1.0.0
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from pyshell.exceptions import CommandError
from .action import CommandDescriptor
from .events import EventSource, RegistryEvent, RegistryEventType
from .paths import CommandPath


class CommandRegistry(EventSource):
    """
    Registry of command descriptors.

    Keys are normalized command paths ('ls', 'file/ls'). Registering a
    name that already exists replaces the previous descriptor; this is
    how higher priority command sets override lower ones.

    Example:
        >>> registry = CommandRegistry()
        >>> registry.register('echo', CommandDescriptor.of(EchoCommand))
        >>> registry.get('echo').description
        'Print arguments'
    """

    def __init__(self):
        super().__init__('registry')
        self._commands: dict[str, CommandDescriptor] = {}

    def register(self, name: str, descriptor: CommandDescriptor) -> bool:
        """
        Register a command.

        Args:
            name: Command name, optionally group-qualified
            descriptor: Command descriptor

        Returns:
            False if the descriptor is disabled and was skipped

        Raises:
            CommandError: If the name is empty or reserved
        """
        key = self._key(name)

        if not descriptor.enabled:
            self._logger.debug(f"Skipping disabled command '{key}'")
            return False

        with self._mutation_lock:
            with self._rw_lock.write():
                replaced = key in self._commands
                self._commands[key] = descriptor

            self._logger.debug(
                f"{'Replaced' if replaced else 'Registered'} command '{key}'",
                context={'action': descriptor.action_type.__name__}
            )
            self._publish(RegistryEvent(
                RegistryEventType.COMMAND_REGISTERED,
                key,
                descriptor.description,
                descriptor
            ))
        return True

    def unregister(self, name: str) -> None:
        """
        Unregister a command.

        Raises:
            CommandError: If the command is not registered
        """
        key = self._key(name)

        with self._mutation_lock:
            with self._rw_lock.write():
                if key not in self._commands:
                    raise CommandError(f"Command not registered: {name}", name=name)
                descriptor = self._commands.pop(key)

            self._logger.debug(f"Unregistered command '{key}'")
            self._publish(RegistryEvent(
                RegistryEventType.COMMAND_REMOVED,
                key,
                descriptor.description,
                descriptor
            ))

    def get(self, name: str) -> Optional[CommandDescriptor]:
        """Get a descriptor by exact key, or None."""
        with self._rw_lock.read():
            return self._commands.get(self._key(name))

    def contains(self, name: str) -> bool:
        with self._rw_lock.read():
            return self._key(name) in self._commands

    def names(self) -> List[str]:
        with self._rw_lock.read():
            return sorted(self._commands)

    def descriptors(self) -> List[CommandDescriptor]:
        with self._rw_lock.read():
            return [self._commands[k] for k in sorted(self._commands)]

    def groups(self) -> List[str]:
        """All non-root groups that contain at least one command."""
        with self._rw_lock.read():
            result: set[str] = set()
            for key in self._commands:
                group = CommandPath.group_of(key)
                while group:
                    result.add(group)
                    group = CommandPath.group_of(group)
            return sorted(result)

    def _snapshot_events(self) -> Iterable[RegistryEvent]:
        with self._rw_lock.read():
            items = sorted(self._commands.items())
        return [
            RegistryEvent(RegistryEventType.COMMAND_REGISTERED, key, d.description, d)
            for key, d in items
        ]

    @staticmethod
    def _key(name: str) -> str:
        if not name or not name.strip():
            raise CommandError("Command name must not be empty")
        key = CommandPath.key(name.strip())
        if not key or key == '.':
            raise CommandError(f"Invalid command name: {name}", name=name)
        return key

    def __len__(self) -> int:
        with self._rw_lock.read():
            return len(self._commands)


class AliasRegistry(EventSource):
    """
    Registry of aliases: name -> target command-line text.

    Aliases are consulted before commands during resolution. Targets are
    stored verbatim and parsed only when the alias runs.
    """

    def __init__(self):
        super().__init__('aliases')
        self._aliases: dict[str, str] = {}

    def register_alias(self, name: str, target: str) -> None:
        """
        Define or redefine an alias.

        Raises:
            CommandError: On an empty name or target, or when the target
                starts with the alias itself
        """
        name = (name or '').strip()
        target = (target or '').strip()

        if not name or any(c.isspace() for c in name):
            raise CommandError(f"Invalid alias name: {name!r}", name=name)
        if not target:
            raise CommandError(f"Alias target must not be empty: {name}", name=name)

        head = target.split(None, 1)[0].rstrip(';')
        if head == name:
            raise CommandError(f"Alias refers to itself: {name} -> {target}", name=name)

        with self._mutation_lock:
            with self._rw_lock.write():
                self._aliases[name] = target

            self._logger.debug(f"Defined alias '{name}'", context={'target': target})
            self._publish(RegistryEvent(
                RegistryEventType.ALIAS_REGISTERED,
                name,
                f"Alias to: {target}",
                target
            ))

    def remove_alias(self, name: str) -> None:
        """
        Remove an alias.

        Raises:
            CommandError: If no such alias exists
        """
        with self._mutation_lock:
            with self._rw_lock.write():
                if name not in self._aliases:
                    raise CommandError(f"Alias not defined: {name}", name=name)
                target = self._aliases.pop(name)

            self._logger.debug(f"Removed alias '{name}'")
            self._publish(RegistryEvent(
                RegistryEventType.ALIAS_REMOVED,
                name,
                f"Alias to: {target}",
                target
            ))

    def get(self, name: str) -> Optional[str]:
        with self._rw_lock.read():
            return self._aliases.get(name)

    def contains(self, name: str) -> bool:
        with self._rw_lock.read():
            return name in self._aliases

    def aliases(self) -> dict[str, str]:
        """Snapshot of all aliases."""
        with self._rw_lock.read():
            return dict(sorted(self._aliases.items()))

    def _snapshot_events(self) -> Iterable[RegistryEvent]:
        return [
            RegistryEvent(RegistryEventType.ALIAS_REGISTERED, name, f"Alias to: {target}", target)
            for name, target in self.aliases().items()
        ]

    def __len__(self) -> int:
        with self._rw_lock.read():
            return len(self._aliases)
