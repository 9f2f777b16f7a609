"""
Class classifier.

Pure predicates over an already computed partition and link set, with no further
graph traversal.  Reduction only removes implied links, so every predicate
gives the same answer on the raw links and on the Hasse diagram.

Class taxonomy:

  TRANSIENT   — has a link to a different class; mass can leave for good
  PERSISTENT  — no outgoing link
  ABSORBING   — persistent with exactly one member state
"""

from __future__ import annotations

from enum import IntEnum, unique
from typing import Dict, List

from ..core.errors import ClassIndexError
from ..core.partition import ClassLinkSet, Partition


@unique
class ClassKind(IntEnum):
    """Long-run behaviour of a class."""

    TRANSIENT = 0
    PERSISTENT = 1
    ABSORBING = 2


def is_transient(class_index: int, links: ClassLinkSet) -> bool:
    """True iff the class has an outgoing link to a different class."""
    return any(
        link.source == class_index and link.dest != class_index for link in links
    )


def is_persistent(class_index: int, links: ClassLinkSet) -> bool:
    """True iff the class is not transient."""
    return not is_transient(class_index, links)


def is_absorbing(class_index: int, partition: Partition, links: ClassLinkSet) -> bool:
    """True iff the class is persistent and holds exactly one state."""
    if not 0 <= class_index < len(partition):
        raise ClassIndexError(
            f"class index {class_index} out of range (n_classes={len(partition)})"
        )
    return is_persistent(class_index, links) and len(partition[class_index]) == 1


def is_irreducible(partition: Partition) -> bool:
    """True iff the chain forms a single class."""
    return len(partition) == 1


def classify(class_index: int, partition: Partition, links: ClassLinkSet) -> ClassKind:
    """Most specific label for one class."""
    if is_transient(class_index, links):
        return ClassKind.TRANSIENT
    if is_absorbing(class_index, partition, links):
        return ClassKind.ABSORBING
    return ClassKind.PERSISTENT


def classify_classes(partition: Partition, links: ClassLinkSet) -> List[ClassKind]:
    """Label of every class, in partition order."""
    return [classify(i, partition, links) for i in range(len(partition))]


def absorbing_states(partition: Partition, links: ClassLinkSet) -> List[int]:
    """State ids of every absorbing state, in class order."""
    return [
        partition[i].members[0]
        for i in range(len(partition))
        if is_absorbing(i, partition, links)
    ]


def kind_distribution(kinds: List[ClassKind]) -> Dict[str, int]:
    """Count of classes per label."""
    counts = {kind.name.lower(): 0 for kind in ClassKind}
    for kind in kinds:
        counts[kind.name.lower()] += 1
    return counts
