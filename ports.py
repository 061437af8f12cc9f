"""
Capability interfaces consumed by the submission flow.

The flow only ever talks to these three abstractions; database.py and
mailer.py provide the production implementations and the tests provide
in-memory ones.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Union


@dataclass(frozen=True)
class Filter:
    field: str
    operator: str
    value: Any


@dataclass(frozen=True)
class Column:
    """A projected field, optionally read through a joined record."""

    name: str
    join: Optional[str] = None

    @property
    def key(self) -> str:
        return f"{self.join}.{self.name}" if self.join else self.name


class SearchResult:
    """One directory row, addressed by column name and optional join."""

    def __init__(self, values: Dict[str, Any]):
        self._values = values

    def get_value(self, name: str, join: Optional[str] = None) -> Any:
        return self._values.get(Column(name, join).key)

    def __repr__(self) -> str:
        return f"SearchResult({self._values!r})"


class DirectoryQuery(ABC):
    @abstractmethod
    def search(self, type: str, filters: List[Filter], columns: List[Column]) -> Iterable[SearchResult]:
        """Yield rows of `type` matching every filter, projected onto `columns`."""


class RecordHandle(ABC):
    """A new, unsaved record."""

    @abstractmethod
    def set_value(self, field: str, value: Any) -> None:
        pass

    @abstractmethod
    def get_value(self, field: str) -> Any:
        pass

    @abstractmethod
    def save(self, enforce_required_fields: bool = False) -> str:
        """Persist the record and return its new id."""


class RecordStore(ABC):
    @abstractmethod
    def create(self, type: str) -> RecordHandle:
        pass


Recipient = Union[str, List[str]]


class MailTransport(ABC):
    @abstractmethod
    def send(self, author: str, recipients: Recipient, subject: str, body: str) -> None:
        """Hand one message to the transport. No delivery confirmation."""
