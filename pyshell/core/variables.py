"""
Variable Environment

Hierarchical name/value scopes. Lookups walk from the current scope up
the parent chain; writes always land in the current scope.

One root scope exists per shell session. The executor layers a child
scope over it for every command line so commands can read everything
the session defined without leaking their own bindings back.

Author: YSNRFD
Version: 1.0.0
"""

from typing import Optional, Any, Iterator, List

from pyshell.exceptions import VariableError


class VariableNames:
    """Well-known variable names."""

    # Reserved; set by the session or executor and immutable for users
    HOME = 'shell.home'
    PROGRAM = 'shell.program'
    VERSION = 'shell.version'
    USER_HOME = 'shell.user.home'
    LAST_RESULT = 'shell.last.result'

    # Mutable session state
    USER_DIR = 'shell.user.dir'
    PROMPT = 'shell.prompt'
    GROUP = 'shell.group'
    SHOW_STACKTRACE = 'shell.show.stacktrace'

    RESERVED = frozenset({HOME, PROGRAM, VERSION, USER_HOME, LAST_RESULT})


class Variables:
    """
    A variable scope.

    Example:
        >>> session = Variables()
        >>> session.set('HOME', '/x')
        >>> scope = session.child()
        >>> scope.get('HOME')
        '/x'
        >>> scope.set('TMP', '1')
        >>> session.contains('TMP')
        False
    """

    _MISSING = object()

    def __init__(self, parent: Optional['Variables'] = None):
        self._parent = parent
        self._values: dict[str, Any] = {}
        self._immutables: set[str] = set()

    @property
    def parent(self) -> Optional['Variables']:
        return self._parent

    def child(self) -> 'Variables':
        """Create a new scope layered over this one."""
        return Variables(parent=self)

    def _find(self, name: str) -> Optional['Variables']:
        """Return the nearest scope defining name."""
        scope: Optional[Variables] = self
        while scope is not None:
            if name in scope._values:
                return scope
            scope = scope._parent
        return None

    def get(self, name: str, default: Any = None) -> Any:
        """
        Look up a variable.

        Args:
            name: Variable name
            default: Returned when no scope defines the name

        Returns:
            The nearest definition's value, or default
        """
        scope = self._find(name)
        if scope is None:
            return default
        return scope._values[name]

    def get_bool(self, name: str, default: bool = False) -> bool:
        """Look up a variable and interpret it as a boolean flag."""
        value = self.get(name)
        if value is None:
            return default
        if isinstance(value, bool):
            return value
        return str(value).strip().lower() in ('true', 'yes', 'on', '1')

    def contains(self, name: str) -> bool:
        return self._find(name) is not None

    def __contains__(self, name: str) -> bool:
        return self.contains(name)

    def is_mutable(self, name: str) -> bool:
        """
        Check whether name may be written.

        The nearest definition decides: a child may not shadow a
        variable that an ancestor marked immutable.
        """
        scope = self._find(name)
        if scope is None:
            return True
        return name not in scope._immutables

    def set(self, name: str, value: Any, mutable: bool = True) -> None:
        """
        Set a variable in this scope.

        Args:
            name: Variable name
            value: Any value; None is stored as-is
            mutable: When False, later writes to name fail

        Raises:
            VariableError: If name is immutable
        """
        if not self.is_mutable(name):
            raise VariableError(name, "immutable")

        self._values[name] = value
        if mutable:
            self._immutables.discard(name)
        else:
            self._immutables.add(name)

    def set_system(self, name: str, value: Any) -> None:
        """
        Write a reserved variable, bypassing immutability.

        Only the session and the executor call this; the name stays
        immutable for everyone else.
        """
        self._values[name] = value
        self._immutables.add(name)

    def unset(self, name: str) -> None:
        """
        Remove name from this scope.

        Unknown names are ignored. Parent scopes are never touched.

        Raises:
            VariableError: If name is immutable
        """
        if name not in self._values:
            return
        if name in self._immutables:
            raise VariableError(name, "immutable")
        del self._values[name]

    def names(self) -> List[str]:
        """All visible variable names, sorted."""
        seen: set[str] = set()
        scope: Optional[Variables] = self
        while scope is not None:
            seen.update(scope._values)
            scope = scope._parent
        return sorted(seen)

    def items(self) -> Iterator[tuple[str, Any]]:
        """Visible (name, value) pairs, nearest definition wins."""
        for name in self.names():
            yield name, self.get(name)

    def __repr__(self) -> str:
        depth = 0
        scope = self._parent
        while scope is not None:
            depth += 1
            scope = scope._parent
        return f"Variables(local={len(self._values)}, depth={depth})"
