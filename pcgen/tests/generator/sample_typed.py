"""Collection classes with evaluated annotations."""

from typing import Optional, Union


class TypedCollection:
    def __init__(self) -> None:
        self.values: dict[Union[int, str], object] = {}

    def add(self, value: Optional[int]) -> bool:
        self.values[len(self.values)] = value
        return True

    def put(self, key: Union[int, str, None], value: "TypedCollection") -> None:
        self.values[key or 0] = value

    def find(self, value: int = 5, fallback: Optional[int] = 3) -> Optional[int]:
        return value if value in self.values else fallback

    def items(self) -> list[tuple[str, int]]:
        return [(str(k), 0) for k in self.values]
