"""Generator configuration."""

from dataclasses import dataclass
from pathlib import Path

from dataclasses_json import DataClassJsonMixin

from .loader import PersistentCollectionGenerator
from .registry import GeneratedTypeRegistry
from .types import GenerationPolicy


@dataclass
class Configuration(DataClassJsonMixin):
    """Where persistent collection classes live and when they are generated.

    Example config file:
        {
            "collection_dir": "var/cache/collections",
            "collection_namespace": "app_collections",
            "autogenerate": "if_missing"
        }
    """

    collection_dir: str = ""
    collection_namespace: str = ""
    autogenerate: GenerationPolicy = GenerationPolicy.ALWAYS

    @classmethod
    def from_file(cls, path: str | Path) -> "Configuration":
        with open(path, encoding="utf-8") as f:
            return cls.from_json(f.read())

    def build_generator(
        self, registry: GeneratedTypeRegistry | None = None
    ) -> PersistentCollectionGenerator:
        return PersistentCollectionGenerator(
            self.collection_dir, self.collection_namespace, registry=registry
        )

    def load_class(
        self, target: type | str, registry: GeneratedTypeRegistry | None = None
    ) -> str:
        """Load the class for `target` with the configured policy."""
        return self.build_generator(registry).load_class(target, self.autogenerate)
