"""
Class-level containers produced by the decomposition stages.

  StateClass    one strongly connected class (name + member state ids)
  Partition     ordered classes covering every state exactly once
  ClassLink     directed link between two distinct classes
  ClassLinkSet  insertion-ordered, deduplicated collection of links

All containers are immutable once built except ClassLinkSet, which only
grows while the condensation builder fills it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from .errors import InvalidArgumentError, InvariantViolation


@dataclass(frozen=True)
class StateClass:
    """One class of the partition.

    Attributes:
        name:    Label such as ``"C1"``.
        members: 1-based state ids, in the order the decomposer emitted them.
    """

    name: str
    members: Tuple[int, ...]

    def __len__(self) -> int:
        return len(self.members)

    def __contains__(self, state: object) -> bool:
        return state in self.members


@dataclass(frozen=True)
class Partition:
    """Ordered classes over states ``1..n_states``.

    Construction checks the partition invariant: every state belongs to
    exactly one class.
    """

    classes: Tuple[StateClass, ...]
    n_states: int

    def __post_init__(self) -> None:
        seen: Dict[int, str] = {}
        for cls in self.classes:
            for state in cls.members:
                if not 1 <= state <= self.n_states:
                    raise InvariantViolation(
                        f"{cls.name} holds state {state} outside [1, {self.n_states}]"
                    )
                if state in seen:
                    raise InvariantViolation(
                        f"state {state} appears in both {seen[state]} and {cls.name}"
                    )
                seen[state] = cls.name
        if len(seen) != self.n_states:
            missing = sorted(set(range(1, self.n_states + 1)) - set(seen))
            raise InvariantViolation(f"states not assigned to any class: {missing}")

    def __len__(self) -> int:
        return len(self.classes)

    def __getitem__(self, index: int) -> StateClass:
        return self.classes[index]

    def __iter__(self) -> Iterator[StateClass]:
        return iter(self.classes)

    @property
    def names(self) -> List[str]:
        return [cls.name for cls in self.classes]

    def class_of(self, state: int) -> int:
        """0-based index of the class containing ``state``."""
        for index, cls in enumerate(self.classes):
            if state in cls.members:
                return index
        raise InvalidArgumentError(f"state {state} is not in this partition")

    def as_sets(self) -> List[frozenset]:
        """Member sets, convenient for order-insensitive comparison."""
        return [frozenset(cls.members) for cls in self.classes]


@dataclass(frozen=True, order=True)
class ClassLink:
    """Directed link ``source -> dest`` between two distinct class indices."""

    source: int
    dest: int

    def __post_init__(self) -> None:
        if self.source < 0 or self.dest < 0:
            raise InvalidArgumentError(
                f"class indices must be >= 0, got {self.source} -> {self.dest}"
            )
        if self.source == self.dest:
            raise InvalidArgumentError(
                f"a class link needs two distinct classes, got {self.source} -> {self.dest}"
            )


class ClassLinkSet:
    """Deduplicated links, iterated in first-insertion order."""

    def __init__(self, links: Optional[Iterable[Tuple[int, int]]] = None) -> None:
        self._links: Dict[ClassLink, None] = {}
        for source, dest in links or ():
            self.add(source, dest)

    def add(self, source: int, dest: int) -> bool:
        """Insert ``source -> dest``; returns False if it was already present."""
        link = ClassLink(source, dest)
        if link in self._links:
            return False
        self._links[link] = None
        return True

    def successors(self, source: int) -> List[int]:
        return [link.dest for link in self._links if link.source == source]

    def has_outgoing(self, source: int) -> bool:
        return any(link.source == source for link in self._links)

    def pairs(self) -> List[Tuple[int, int]]:
        return [(link.source, link.dest) for link in self._links]

    def __iter__(self) -> Iterator[ClassLink]:
        return iter(list(self._links))

    def __len__(self) -> int:
        return len(self._links)

    def __contains__(self, item: object) -> bool:
        if isinstance(item, tuple) and len(item) == 2:
            source, dest = item
            if source == dest or source < 0 or dest < 0:
                return False
            item = ClassLink(source, dest)
        return item in self._links

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ClassLinkSet):
            return NotImplemented
        return set(self._links) == set(other._links)

    def __repr__(self) -> str:
        body = ", ".join(f"{link.source}->{link.dest}" for link in self._links)
        return f"ClassLinkSet([{body}])"
