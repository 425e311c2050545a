"""
Completion Index

Candidate sets for tab completion, kept current by registry events.

Author: YSNRFD
Version: 1.0.0
"""

import threading
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from pyshell.core.events import EventSource, RegistryEvent, RegistryEventType
from pyshell.core.paths import CommandPath
from pyshell.logger import get_logger


@dataclass(frozen=True)
class Candidate:
    """A completion candidate."""
    name: str
    description: str = ''


class StringsCompleter:
    """
    Name-keyed candidate set.

    Adding a name twice keeps one candidate (the newer description wins);
    removing an absent name does nothing.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._candidates: dict[str, Candidate] = {}

    def add(self, name: str, description: str = '') -> None:
        with self._lock:
            self._candidates[name] = Candidate(name, description)

    def remove(self, name: str) -> None:
        with self._lock:
            self._candidates.pop(name, None)

    def clear(self) -> None:
        with self._lock:
            self._candidates.clear()

    def candidates(self) -> set[Candidate]:
        with self._lock:
            return set(self._candidates.values())

    def names(self) -> List[str]:
        with self._lock:
            return sorted(self._candidates)

    def complete(self, prefix: str) -> List[str]:
        """Names starting with prefix, sorted."""
        with self._lock:
            return sorted(n for n in self._candidates if n.startswith(prefix))


class DynamicCompleter(StringsCompleter):
    """
    A candidate set that follows an event source.

    attach() replays the source's current contents once and then
    receives every later change.
    """

    added_events: Sequence[RegistryEventType] = ()
    removed_events: Sequence[RegistryEventType] = ()

    def __init__(self, source: EventSource):
        super().__init__()
        self._source = source
        self._attached = False
        self._logger = get_logger('completer')

    def attach(self) -> None:
        if self._attached:
            return
        self._source.subscribe(self.on_event, replay=True)
        self._attached = True

    def detach(self) -> None:
        self._source.unsubscribe(self.on_event)
        self._attached = False

    def candidate_name(self, event: RegistryEvent) -> str:
        return event.name

    def on_event(self, event: RegistryEvent) -> None:
        name = self.candidate_name(event)
        if event.type in self.added_events:
            self.add(name, event.description)
        elif event.type in self.removed_events:
            self.remove(name)


class CommandNameCompleter(DynamicCompleter):
    """Names of registered commands."""

    added_events = (RegistryEventType.COMMAND_REGISTERED,)
    removed_events = (RegistryEventType.COMMAND_REMOVED,)

    def candidate_name(self, event: RegistryEvent) -> str:
        # root commands complete bare, grouped ones absolute
        if CommandPath.group_of(event.name):
            return CommandPath.absolute(event.name)
        return event.name


class AliasNameCompleter(DynamicCompleter):
    """Names of defined aliases."""

    added_events = (RegistryEventType.ALIAS_REGISTERED,)
    removed_events = (RegistryEventType.ALIAS_REMOVED,)


class HelpPageNameCompleter(DynamicCompleter):
    """Names of meta help pages."""

    added_events = (RegistryEventType.HELP_PAGE_ADDED,)


class AggregateCompleter:
    """
    Union of several completers.

    Exposes a readline-style complete(text, state) as well.
    """

    def __init__(self, completers: Optional[Iterable[StringsCompleter]] = None):
        self._completers: List[StringsCompleter] = list(completers or [])
        self._matches: List[str] = []

    def add_completer(self, completer: StringsCompleter) -> None:
        self._completers.append(completer)

    def attach(self) -> None:
        for completer in self._completers:
            if isinstance(completer, DynamicCompleter):
                completer.attach()

    def detach(self) -> None:
        for completer in self._completers:
            if isinstance(completer, DynamicCompleter):
                completer.detach()

    def candidates(self) -> set[Candidate]:
        result: set[Candidate] = set()
        for completer in self._completers:
            result |= completer.candidates()
        return result

    def complete(self, prefix: str) -> List[str]:
        names: set[str] = set()
        for completer in self._completers:
            names.update(completer.complete(prefix))
        return sorted(names)

    def readline_complete(self, text: str, state: int) -> Optional[str]:
        if state == 0:
            self._matches = self.complete(text)
        if state < len(self._matches):
            return self._matches[state]
        return None
