"""Persistent collection class generator."""

from .config import Configuration as Configuration
from .errors import *
from .introspect import introspect as introspect
from .introspect import resolve_target as resolve_target
from .loader import PersistentCollectionGenerator as PersistentCollectionGenerator
from .registry import GeneratedTypeRegistry as GeneratedTypeRegistry
from .registry import default_registry as default_registry
from .types import *
