"""Collaborator contracts consumed by persistent collections.

The document manager and unit of work belong to the persistence layer; only
the operations used by the decoration support code are described here.
"""

from collections.abc import Iterable
from typing import Any, Protocol


class BaseCollection(Iterable[Any], Protocol):
    """The wrapped collection holding the actual elements."""

    def clear(self) -> None: ...


class ClassMetadata(Protocol):
    """Mapping metadata of a document class."""

    def is_change_tracking_notify(self) -> bool: ...


class DocumentManager(Protocol):
    def get_class_metadata(self, class_name: type) -> ClassMetadata: ...


class UnitOfWork(Protocol):
    def load_collection(self, collection: Any) -> None: ...

    def schedule_for_synchronization(self, document: object) -> None: ...
