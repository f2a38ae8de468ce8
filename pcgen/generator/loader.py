"""Load persistent collection classes according to a generation policy."""

import logging
from pathlib import Path, PurePath

from .errors import DirectoryRequiredError, NamespaceRequiredError
from .introspect import resolve_target
from .registry import GeneratedTypeRegistry, default_registry
from .synthesizer import (
    defined_class,
    file_name_for,
    generate_collection_class,
    require,
    short_name,
)
from .types import GeneratedType, GenerationPolicy

logger = logging.getLogger(__name__)


class PersistentCollectionGenerator:
    """Generate and load persistent collection classes.

    Classes are written to `collection_dir` and live in modules under
    `collection_namespace`.
    """

    def __init__(
        self,
        collection_dir: str | Path,
        collection_namespace: str,
        registry: GeneratedTypeRegistry | None = None,
    ):
        # Path("") is truthy and reads as "."; it still means no directory was configured
        if isinstance(collection_dir, PurePath) and not collection_dir.parts:
            collection_dir = ""
        self.collection_dir = str(collection_dir) if collection_dir else ""
        self.collection_namespace = collection_namespace
        self.registry = registry if registry is not None else default_registry

    def class_name_for(self, target: type) -> str:
        return f"{self.collection_namespace}.{short_name(target)}"

    def generate_class(self, target: type | str, directory: str | Path) -> GeneratedType:
        """Write the persistent collection class for `target` into `directory`."""
        cls = resolve_target(target)
        class_name = short_name(cls)
        return generate_collection_class(
            cls,
            f"{self.collection_namespace}.{class_name}",
            file_name_for(directory, class_name),
            self.registry,
        )

    def load_class(self, target: type | str, policy: GenerationPolicy) -> str:
        """Make the persistent collection class for `target` available.

        Returns the name the class is registered under. Nothing is generated
        if a class with that name is already defined in this process.
        """
        if not self.collection_dir:
            raise DirectoryRequiredError()

        if not self.collection_namespace:
            raise NamespaceRequiredError()

        cls = resolve_target(target)
        class_name = short_name(cls)
        name = f"{self.collection_namespace}.{class_name}"
        if defined_class(name, self.registry) is not None:
            return name

        file_name = file_name_for(self.collection_dir, class_name)
        policy = GenerationPolicy(policy)
        logger.debug("Loading persistent collection %s with policy %s", name, policy)

        if policy == GenerationPolicy.NEVER:
            require(name, file_name, self.registry)
        elif policy == GenerationPolicy.ALWAYS:
            generate_collection_class(cls, name, file_name, self.registry)
            require(name, file_name, self.registry)
        elif policy == GenerationPolicy.IF_MISSING:
            if not file_name.exists():
                generate_collection_class(cls, name, file_name, self.registry)
            require(name, file_name, self.registry)
        elif policy == GenerationPolicy.EPHEMERAL:
            generate_collection_class(cls, name, None, self.registry)

        return name

    def get_class(self, name: str) -> type:
        """Return a class previously made available by load_class()."""
        return self.registry.get(name)

    def load(self, target: type | str, policy: GenerationPolicy) -> type:
        return self.get_class(self.load_class(target, policy))
