"""
Registry Events

Synchronous, ordered change notification for registries. A publisher
calls every subscriber in subscription order and returns only after all
of them have seen the event.

Author: YSNRFD
Version: 1.0.0
"""

import threading
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Callable, Iterable, Iterator, List

from pyshell.logger import get_logger


class RegistryEventType(Enum):
    """Kinds of registry change."""
    COMMAND_REGISTERED = auto()
    COMMAND_REMOVED = auto()
    ALIAS_REGISTERED = auto()
    ALIAS_REMOVED = auto()
    HELP_PAGE_ADDED = auto()


@dataclass(frozen=True)
class RegistryEvent:
    """
    Payload for a registry change.

    Attributes:
        type: What happened
        name: Key of the affected entry
        description: Human-readable description for completion
        data: The descriptor, alias target or help page, when relevant
    """
    type: RegistryEventType
    name: str
    description: str = ''
    data: Any = None


Subscriber = Callable[[RegistryEvent], None]


class ReadWriteLock:
    """
    Many concurrent readers or one writer.

    Writers wait for active readers to drain; new readers wait while a
    writer holds or is waiting for the lock.
    """

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._waiting_writers = 0

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._waiting_writers:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            self._waiting_writers += 1
            while self._writer or self._readers:
                self._cond.wait()
            self._waiting_writers -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class EventSource:
    """
    Base class for registries that publish change events.

    Subclasses wrap each mutation in ``with self._mutation_lock`` and
    publish while still holding it, so subscribers see every change in
    order and never interleaved with another mutation.
    """

    def __init__(self, name: str):
        self._logger = get_logger(name)
        self._mutation_lock = threading.RLock()
        self._rw_lock = ReadWriteLock()
        self._subscribers: List[Subscriber] = []

    def subscribe(self, subscriber: Subscriber, replay: bool = False) -> None:
        """
        Add a subscriber.

        Args:
            subscriber: Callable receiving RegistryEvent objects
            replay: Deliver the current contents as events first
        """
        with self._mutation_lock:
            if replay:
                for event in self._snapshot_events():
                    subscriber(event)
            self._subscribers.append(subscriber)

    def unsubscribe(self, subscriber: Subscriber) -> None:
        with self._mutation_lock:
            if subscriber in self._subscribers:
                self._subscribers.remove(subscriber)

    def _publish(self, event: RegistryEvent) -> None:
        """Deliver event to all subscribers. Caller holds the mutation lock."""
        for subscriber in list(self._subscribers):
            try:
                subscriber(event)
            except Exception as e:
                self._logger.error(
                    f"Subscriber failed on {event.type.name}: {e}",
                    context={'name': event.name},
                    exc_info=e
                )

    def _snapshot_events(self) -> Iterable[RegistryEvent]:
        """Events describing the current contents, for replay."""
        return ()
