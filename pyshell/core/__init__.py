"""
PyShell Core Module

Core shell components including:
- Variable scopes
- Command paths and groups
- Command actions and descriptors
- Command and alias registries
- Command resolution
- Command-set registration
- Configuration Loader
"""

from .variables import Variables, VariableNames
from .paths import CommandPath, ParsedPath
from .events import EventSource, ReadWriteLock, RegistryEvent, RegistryEventType
from .action import ActionScope, CommandAction, CommandContext, CommandDescriptor
from .registry import CommandRegistry, AliasRegistry
from .resolver import AliasAction, CommandResolver
from .registrar import CommandEntry, CommandSetDescriptor, CommandRegistrar
from .config_loader import ConfigLoader, Config, get_config

__all__ = [
    # Variables
    'Variables',
    'VariableNames',
    # Paths
    'CommandPath',
    'ParsedPath',
    # Events
    'EventSource',
    'ReadWriteLock',
    'RegistryEvent',
    'RegistryEventType',
    # Actions
    'ActionScope',
    'CommandAction',
    'CommandContext',
    'CommandDescriptor',
    # Registries
    'CommandRegistry',
    'AliasRegistry',
    'AliasAction',
    'CommandResolver',
    'CommandEntry',
    'CommandSetDescriptor',
    'CommandRegistrar',
    # Config
    'ConfigLoader',
    'Config',
    'get_config',
]
