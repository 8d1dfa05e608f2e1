"""Comparator Registry: named "which side is better" rules for property values."""

from __future__ import annotations

from typing import Any, Callable, Dict, List

from pydantic import BaseModel

BuffComparator = Callable[[Any, Any], bool]


def higher_is_better(prev: Any, curr: Any) -> bool:
    return curr > prev


def lower_is_better(prev: Any, curr: Any) -> bool:
    return curr < prev


def true_is_better(prev: Any, curr: Any) -> bool:
    return curr is True


def false_is_better(prev: Any, curr: Any) -> bool:
    return curr is False


class ComparatorRegistry(BaseModel):
    """Maps comparator names used in schema files to comparator functions."""

    comparators: Dict[str, BuffComparator] = {}

    model_config = {"arbitrary_types_allowed": True}

    def register(self, name: str, comparator: BuffComparator) -> None:
        if name in self.comparators:
            raise ValueError(f"Duplicate comparator: {name}")
        self.comparators[name] = comparator

    def get(self, name: str) -> BuffComparator:
        """
        Resolve a comparator by name.

        Raises:
            KeyError: If no comparator is registered under ``name``
        """
        if name not in self.comparators:
            known = ", ".join(sorted(self.comparators))
            raise KeyError(f"Unknown comparator: {name}. Available: {known}")
        return self.comparators[name]

    def names(self) -> List[str]:
        return sorted(self.comparators)


def default_comparators() -> ComparatorRegistry:
    """Registry holding the four built-in comparators."""
    registry = ComparatorRegistry(comparators={})
    registry.register("higher_is_better", higher_is_better)
    registry.register("lower_is_better", lower_is_better)
    registry.register("true_is_better", true_is_better)
    registry.register("false_is_better", false_is_better)
    return registry


__all__ = [
    "BuffComparator",
    "ComparatorRegistry",
    "default_comparators",
    "higher_is_better",
    "lower_is_better",
    "true_is_better",
    "false_is_better",
]
