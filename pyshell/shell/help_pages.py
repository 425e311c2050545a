"""
Help Pages

Named meta help pages, for topics that are not commands.

Author: YSNRFD
Version: 1.0.0
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional

from pyshell.core.events import EventSource, RegistryEvent, RegistryEventType


@dataclass(frozen=True)
class HelpPage:
    """A help topic."""
    name: str
    description: str
    text: str = ''


class HelpPageManager(EventSource):
    """Holds help pages and announces new ones."""

    def __init__(self):
        super().__init__('help')
        self._pages: dict[str, HelpPage] = {}

    def add_page(self, page: HelpPage) -> None:
        if not page.name:
            raise ValueError("Help page name must not be empty")

        with self._mutation_lock:
            with self._rw_lock.write():
                self._pages[page.name] = page

            self._logger.debug(f"Added help page '{page.name}'")
            self._publish(RegistryEvent(
                RegistryEventType.HELP_PAGE_ADDED,
                page.name,
                page.description,
                page
            ))

    def get_page(self, name: str) -> Optional[HelpPage]:
        with self._rw_lock.read():
            return self._pages.get(name)

    def pages(self) -> List[HelpPage]:
        with self._rw_lock.read():
            return [self._pages[k] for k in sorted(self._pages)]

    def _snapshot_events(self) -> Iterable[RegistryEvent]:
        return [
            RegistryEvent(RegistryEventType.HELP_PAGE_ADDED, p.name, p.description, p)
            for p in self.pages()
        ]
