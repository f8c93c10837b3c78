"""
Generic registry for named strategies (decomposition, aggregation, update, ...).

Keys are case-insensitive; strategy lookups that miss raise InvalidStrategyError
so configuration mistakes surface with the list of valid names.
"""

from __future__ import annotations

from typing import Any, Callable, Generic, Iterable, Iterator, TypeVar

from moeadra.foundation.exceptions import InvalidStrategyError

T = TypeVar("T")


def _normalize(key: str) -> str:
    return str(key).strip().lower()


class Registry(Generic[T]):
    """
    A registry mapping strategy names (and aliases) to implementations.

    Supports usage as a decorator:

        aggregation_registry = Registry("aggregation")

        @aggregation_registry.register("wt")
        def weighted_tchebycheff(...): ...
    """

    def __init__(self, name: str = "Registry") -> None:
        self._name = name
        self._items: dict[str, T] = {}
        self._aliases: dict[str, str] = {}

    @property
    def name(self) -> str:
        return self._name

    def register(
        self,
        key: str,
        item: T | None = None,
        *,
        aliases: Iterable[str] = (),
        override: bool = False,
    ) -> Callable[[T], T] | T:
        """
        Register an item under ``key`` (plus optional aliases).

        Args:
            key: The canonical name for the item.
            item: The item to register. If None, returns a decorator.
            aliases: Additional names resolving to the same item.
            override: If False, registering an existing key raises ValueError.
        """
        canonical = _normalize(key)

        def _do_register(obj: T) -> T:
            if canonical in self._items and not override:
                raise ValueError(f"Key '{key}' already exists in registry '{self._name}'")
            self._items[canonical] = obj
            for alias in aliases:
                self._aliases[_normalize(alias)] = canonical
            return obj

        if item is None:
            return _do_register
        return _do_register(item)

    def canonical(self, key: str) -> str:
        """Return the canonical name for ``key`` or raise InvalidStrategyError."""
        normalized = _normalize(key)
        normalized = self._aliases.get(normalized, normalized)
        if normalized not in self._items:
            raise InvalidStrategyError(self._name, str(key), self.list())
        return normalized

    def get(self, key: str, default: Any = ...) -> T:
        """
        Retrieve an item by name or alias.

        Raises InvalidStrategyError when missing and no default is given.
        """
        normalized = _normalize(key)
        normalized = self._aliases.get(normalized, normalized)
        if normalized not in self._items:
            if default is not ...:
                return default
            raise InvalidStrategyError(self._name, str(key), self.list())
        return self._items[normalized]

    def list(self) -> list[str]:
        """Return a sorted list of canonical keys."""
        return sorted(self._items.keys())

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        normalized = _normalize(key)
        return self._aliases.get(normalized, normalized) in self._items

    def __getitem__(self, key: str) -> T:
        return self.get(key)

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)


__all__ = ["Registry"]
