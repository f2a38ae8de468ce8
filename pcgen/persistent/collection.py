"""Decoration support shared by every generated persistent collection."""

import inspect
from typing import Any

from .types import BaseCollection, DocumentManager, UnitOfWork


def original_default(owner: type, method: str, parameter: str) -> Any:
    """Return the default value of a parameter as declared on `owner`.

    Generated modules use this for defaults that are not plain literals, so
    sentinel objects keep their identity.
    """
    return inspect.signature(getattr(owner, method)).parameters[parameter].default


class PersistentCollectionInterface:
    """Operations supported by every persistent collection.

    Generated classes get these through PersistentCollectionMixin.
    """

    def initialize(self) -> None:
        """Load the wrapped collection if it has not been loaded yet."""
        raise NotImplementedError("initialize() must be implemented by the decoration support")

    def changed(self) -> None:
        """Mark the collection as modified."""
        raise NotImplementedError("changed() must be implemented by the decoration support")

    def needs_scheduling_for_synchronization(self) -> bool:
        raise NotImplementedError(
            "needs_scheduling_for_synchronization() must be implemented by the decoration support"
        )

    def is_dirty(self) -> bool:
        raise NotImplementedError("is_dirty() must be implemented by the decoration support")

    def set_dirty(self, dirty: bool) -> None:
        raise NotImplementedError("set_dirty() must be implemented by the decoration support")

    def is_initialized(self) -> bool:
        raise NotImplementedError("is_initialized() must be implemented by the decoration support")

    def set_initialized(self, initialized: bool) -> None:
        raise NotImplementedError(
            "set_initialized() must be implemented by the decoration support"
        )

    def set_owner(self, document: object, mapping: dict[str, Any]) -> None:
        raise NotImplementedError("set_owner() must be implemented by the decoration support")

    def get_owner(self) -> object | None:
        raise NotImplementedError("get_owner() must be implemented by the decoration support")

    def get_mapping(self) -> dict[str, Any] | None:
        raise NotImplementedError("get_mapping() must be implemented by the decoration support")

    def unwrap(self) -> BaseCollection:
        """Return the wrapped collection."""
        raise NotImplementedError("unwrap() must be implemented by the decoration support")


class PersistentCollectionMixin(PersistentCollectionInterface):
    """State and hooks of a persistent collection.

    The generated constructor only sets `_coll`, `_dm` and `_uow`; all other
    state starts from the class-level defaults below.

    Example:
        coll = CollectionClass(BaseList(), dm, uow)
        coll.set_owner(document, {"is_owning_side": True})
        coll.set_initialized(False)
        coll.append(item)  # loads through the unit of work, then marks dirty
    """

    _coll: BaseCollection
    _dm: DocumentManager | None = None
    _uow: UnitOfWork | None = None
    _owner: object | None = None
    _mapping: dict[str, Any] | None = None
    _snapshot: tuple[Any, ...] = ()
    _is_dirty: bool = False
    _initialized: bool = True

    def initialize(self) -> None:
        if self._initialized or not self._mapping or self._uow is None:
            return

        new_objects = list(self._coll) if self._is_dirty else []

        self._initialized = True
        self._coll.clear()
        self._uow.load_collection(self)
        self.take_snapshot()

        # Objects added before loading are kept on top of the loaded ones
        if new_objects:
            append = getattr(self._coll, "append", None) or getattr(self._coll, "add")
            for obj in new_objects:
                append(obj)
            self._is_dirty = True

    def changed(self) -> None:
        if self._is_dirty:
            return

        self._is_dirty = True

        if not self.needs_scheduling_for_synchronization():
            return

        if self._uow is None:
            raise RuntimeError("Cannot schedule synchronization without a unit of work")
        self._uow.schedule_for_synchronization(self._owner)

    def needs_scheduling_for_synchronization(self) -> bool:
        if self._owner is None or self._dm is None or not self._mapping:
            return False
        if not self._mapping.get("is_owning_side"):
            return False
        return self._dm.get_class_metadata(type(self._owner)).is_change_tracking_notify()

    def is_dirty(self) -> bool:
        if self._is_dirty:
            return True
        if not self._initialized:
            return False
        return self.get_insert_diff() != [] or self.get_delete_diff() != []

    def set_dirty(self, dirty: bool) -> None:
        self._is_dirty = dirty

    def is_initialized(self) -> bool:
        return self._initialized

    def set_initialized(self, initialized: bool) -> None:
        self._initialized = initialized

    def set_owner(self, document: object, mapping: dict[str, Any]) -> None:
        self._owner = document
        self._mapping = mapping

    def get_owner(self) -> object | None:
        return self._owner

    def get_mapping(self) -> dict[str, Any] | None:
        return self._mapping

    def take_snapshot(self) -> None:
        """Remember the current elements and reset the dirty flag."""
        self._snapshot = tuple(self._coll)
        self._is_dirty = False

    def get_snapshot(self) -> list[Any]:
        return list(self._snapshot)

    def clear_snapshot(self) -> None:
        self._snapshot = ()
        self._is_dirty = True

    def get_insert_diff(self) -> list[Any]:
        """Return elements added since the last snapshot, compared by identity."""
        known = {id(obj) for obj in self._snapshot}
        return [obj for obj in self._coll if id(obj) not in known]

    def get_delete_diff(self) -> list[Any]:
        """Return elements removed since the last snapshot, compared by identity."""
        current = {id(obj) for obj in self._coll}
        return [obj for obj in self._snapshot if id(obj) not in current]

    def unwrap(self) -> BaseCollection:
        return self._coll
