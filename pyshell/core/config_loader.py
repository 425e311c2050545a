"""
PyShell Configuration Loader

Settings that shape a shell session: the session variables seeded at
startup, logging, the command sets to register and predefined aliases.
Settings come from JSON and are checked against the dataclass fields.

Author: YSNRFD
Version: 1.0.0
"""

import json
from dataclasses import asdict, dataclass, field, fields, is_dataclass, replace
from pathlib import Path
from typing import Any, Optional, List
import threading

from pyshell.exceptions import ConfigValidationError


@dataclass
class ShellConfig:
    """Session settings."""
    program: str = "pyshell"
    version: str = "1.0.0"
    home: str = ""
    user_home: str = "~"
    user_dir: str = ""
    prompt: str = "${shell.program}:${shell.user.dir}> "
    show_stacktrace: bool = False
    verbose: bool = False
    quiet: bool = False
    enable_autocomplete: bool = True
    profile_scripts: List[str] = field(default_factory=list)


@dataclass
class LoggingConfig:
    """Logging configuration settings."""
    level: str = "WARNING"
    log_file: Optional[str] = None
    console_output: bool = True


@dataclass
class CommandEntryConfig:
    """One command reference inside a command set."""
    action: str
    name: Optional[str] = None
    enabled: bool = True


@dataclass
class CommandSetConfig:
    """A configured command set."""
    id: str
    commands: List[CommandEntryConfig] = field(default_factory=list)
    enabled: bool = True
    rank: int = 0


def _default_command_sets() -> List[CommandSetConfig]:
    return [CommandSetConfig(
        id="builtins",
        commands=[
            CommandEntryConfig(action=f"pyshell.shell.builtins:{name}")
            for name in (
                "HelpCommand", "ExitCommand", "EchoCommand", "SetCommand",
                "UnsetCommand", "AliasCommand", "UnaliasCommand", "ChangeDirectoryCommand",
                "PrintWorkingDirectoryCommand", "ListDirectoryCommand", "SourceCommand",
                "EvalCommand", "GroupCommand",
            )
        ],
        rank=0,
    )]


@dataclass
class Config:
    """
    Main configuration container.

    Holds all configuration settings for the shell.
    """
    shell: ShellConfig = field(default_factory=ShellConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    command_sets: List[CommandSetConfig] = field(default_factory=_default_command_sets)
    aliases: dict[str, str] = field(default_factory=dict)


def _section(cls, data: Any, name: str):
    """
    Build a settings dataclass from one JSON object.

    Unknown keys are rejected and values must match the type of the
    field default; a None default accepts a string or null.
    """
    if not isinstance(data, dict):
        raise ConfigValidationError(f"'{name}' must be an object")

    known = {f.name: f for f in fields(cls)}
    unknown = sorted(set(data) - set(known))
    if unknown:
        raise ConfigValidationError(f"Unknown key(s) in '{name}': {', '.join(unknown)}")

    template = cls()
    for key, value in data.items():
        expected = getattr(template, key)
        if expected is None:
            ok = value is None or isinstance(value, str)
        elif isinstance(expected, bool):
            ok = isinstance(value, bool)
        else:
            ok = isinstance(value, type(expected))
        if not ok:
            raise ConfigValidationError(
                f"'{name}.{key}' expects {type(expected).__name__}, got {type(value).__name__}"
            )
    return replace(template, **{k: list(v) if isinstance(v, list) else v for k, v in data.items()})


def _command_entry(entry: Any, set_id: str) -> CommandEntryConfig:
    if isinstance(entry, str):
        return CommandEntryConfig(action=entry)
    if isinstance(entry, dict) and 'action' in entry:
        return CommandEntryConfig(
            action=entry['action'],
            name=entry.get('name'),
            enabled=bool(entry.get('enabled', True)),
        )
    raise ConfigValidationError(f"Command set '{set_id}' has an entry without 'action'")


def _command_set(data: Any) -> CommandSetConfig:
    if not isinstance(data, dict) or 'id' not in data:
        raise ConfigValidationError("Every command set needs an 'id'")

    set_id = str(data['id'])
    try:
        rank = int(data.get('rank', 0))
    except (TypeError, ValueError) as e:
        raise ConfigValidationError(f"Command set '{set_id}' has a non-numeric rank") from e

    return CommandSetConfig(
        id=set_id,
        commands=[_command_entry(entry, set_id) for entry in data.get('commands', [])],
        enabled=bool(data.get('enabled', True)),
        rank=rank,
    )


class ConfigLoader:
    """
    Process-wide holder of the shell configuration.

    Settings come from a JSON file (or an already decoded dict) whose
    top-level keys mirror the Config fields:

        {
            "shell": {"program": "demo", "show_stacktrace": true},
            "logging": {"level": "DEBUG"},
            "command_sets": [{"id": "tools", "commands": ["pkg.mod:Cls"]}],
            "aliases": {"ll": "ls -l"}
        }

    Until something is loaded, `config` holds the defaults; runtime
    `set()` calls change the same instance that `get_config()` returns.
    """

    _instance: Optional['ConfigLoader'] = None
    _lock = threading.Lock()

    def __new__(cls) -> 'ConfigLoader':
        with cls._lock:
            if cls._instance is None:
                instance = super().__new__(cls)
                instance._config = Config()
                cls._instance = instance
            return cls._instance

    def load(self, config_path: str) -> Config:
        """
        Read and apply a JSON configuration file.

        Raises:
            ConfigValidationError: missing or unreadable file, bad JSON,
                or settings of the wrong shape
        """
        path = Path(config_path).expanduser()
        if not path.is_file():
            raise ConfigValidationError(f"No such configuration file: {config_path}", path=str(path))

        try:
            data = json.loads(path.read_text(encoding='utf-8'))
        except json.JSONDecodeError as e:
            raise ConfigValidationError(
                f"{path.name}: line {e.lineno} column {e.colno}: {e.msg}", path=str(path)
            ) from e
        except OSError as e:
            raise ConfigValidationError(f"{path.name}: {e.strerror or e}", path=str(path)) from e

        return self.load_dict(data)

    def load_dict(self, data: dict[str, Any]) -> Config:
        """Apply already decoded settings, replacing the current ones."""
        if not isinstance(data, dict):
            raise ConfigValidationError("Configuration root must be an object")

        config = Config()
        if 'shell' in data:
            config.shell = _section(ShellConfig, data['shell'], 'shell')
        if 'logging' in data:
            config.logging = _section(LoggingConfig, data['logging'], 'logging')
        if 'command_sets' in data:
            if not isinstance(data['command_sets'], list):
                raise ConfigValidationError("'command_sets' must be a list")
            config.command_sets = [_command_set(item) for item in data['command_sets']]
        if 'aliases' in data:
            if not isinstance(data['aliases'], dict):
                raise ConfigValidationError("'aliases' must map names to command lines")
            config.aliases = {str(k): str(v) for k, v in data['aliases'].items()}

        self._config = config
        return config

    @property
    def config(self) -> Config:
        return self._config

    def _walk(self, key: str) -> tuple[Any, str]:
        """Resolve 'a.b.c' to (owner of c, 'c'); None owner if a step is missing."""
        *parents, leaf = key.split('.')
        owner: Any = self._config
        for part in parents:
            if not is_dataclass(owner) or not hasattr(owner, part):
                return None, leaf
            owner = getattr(owner, part)
        if not is_dataclass(owner) or not hasattr(owner, leaf):
            return None, leaf
        return owner, leaf

    def get(self, key: str, default: Any = None) -> Any:
        """Value at a dotted key such as 'shell.prompt', or default."""
        owner, leaf = self._walk(key)
        return default if owner is None else getattr(owner, leaf)

    def set(self, key: str, value: Any) -> None:
        """Change a setting at runtime; unknown keys raise ConfigValidationError."""
        owner, leaf = self._walk(key)
        if owner is None:
            raise ConfigValidationError(f"Unknown configuration key: {key}")
        setattr(owner, leaf, value)

    def reset(self) -> None:
        """Forget loaded settings."""
        self._config = Config()

    def to_dict(self) -> dict[str, Any]:
        return asdict(self._config)


def get_config() -> Config:
    """Current configuration, or defaults when nothing was loaded."""
    return ConfigLoader().config
