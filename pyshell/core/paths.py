"""
Command Path Module

Path-style addressing for registered commands. Names may be grouped,
e.g. 'file/ls', and addressed relative to a current group using the
reserved segments '/', '.' and '..'.

Author: YSNRFD
Version: 1.0.0
"""

from dataclasses import dataclass
from typing import List


ROOT = '/'
CURRENT = '.'
PARENT = '..'
SEPARATOR = '/'


@dataclass
class ParsedPath:
    """A parsed command path with its components."""
    is_absolute: bool
    components: List[str]


class CommandPath:
    """
    Resolves and manipulates command paths.

    Registry keys are normalized paths without the leading separator:
    'ls', 'file/ls'.
    """

    @staticmethod
    def parse(path: str) -> ParsedPath:
        is_absolute = path.startswith(SEPARATOR)
        components = [c for c in path.split(SEPARATOR) if c and c != CURRENT]
        return ParsedPath(is_absolute=is_absolute, components=components)

    @staticmethod
    def normalize(path: str) -> str:
        """
        Normalize a path by resolving . and ..

        '..' above the root stays at the root.
        """
        parsed = CommandPath.parse(path)

        result: List[str] = []
        for component in parsed.components:
            if component == PARENT:
                if result:
                    result.pop()
            else:
                result.append(component)

        if parsed.is_absolute:
            return SEPARATOR + SEPARATOR.join(result)
        return SEPARATOR.join(result) if result else CURRENT

    @staticmethod
    def join(*paths: str) -> str:
        """Join path components; an absolute component restarts the path."""
        if not paths:
            return CURRENT

        result = paths[0]
        for path in paths[1:]:
            if path.startswith(SEPARATOR):
                result = path
            else:
                result = result.rstrip(SEPARATOR) + SEPARATOR + path

        return CommandPath.normalize(result)

    @staticmethod
    def absolute(path: str, group: str = ROOT) -> str:
        """Resolve path against the current group, giving an absolute path."""
        if path.startswith(SEPARATOR):
            return CommandPath.normalize(path)
        return CommandPath.join(CommandPath.normalize(SEPARATOR + group.lstrip(SEPARATOR)), path)

    @staticmethod
    def key(path: str, group: str = ROOT) -> str:
        """Registry key for path: absolute, without the leading separator."""
        return CommandPath.absolute(path, group).lstrip(SEPARATOR)

    @staticmethod
    def is_qualified(name: str) -> bool:
        return SEPARATOR in name or name in (CURRENT, PARENT)

    @staticmethod
    def group_of(key: str) -> str:
        """Group part of a registry key ('' for root-level commands)."""
        head, _, _ = key.rpartition(SEPARATOR)
        return head
