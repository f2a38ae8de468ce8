"""Registry of persistent collection classes defined in this process."""


class GeneratedTypeRegistry:
    """Generated classes by name (`<namespace>.<ShortName>`).

    A name is defined at most once; later registrations keep the first class.
    """

    def __init__(self) -> None:
        self._types: dict[str, type] = {}

    def __contains__(self, name: object) -> bool:
        return name in self._types

    def __len__(self) -> int:
        return len(self._types)

    def register(self, name: str, cls: type) -> type:
        return self._types.setdefault(name, cls)

    def get(self, name: str) -> type:
        return self._types[name]

    def names(self) -> list[str]:
        return sorted(self._types)


default_registry = GeneratedTypeRegistry()
