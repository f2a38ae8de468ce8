"""Runtime support for generated persistent collections."""

from .collection import PersistentCollectionInterface as PersistentCollectionInterface
from .collection import PersistentCollectionMixin as PersistentCollectionMixin
from .collection import original_default as original_default
from .types import BaseCollection as BaseCollection
from .types import ClassMetadata as ClassMetadata
from .types import DocumentManager as DocumentManager
from .types import UnitOfWork as UnitOfWork
