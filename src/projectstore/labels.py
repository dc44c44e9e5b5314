"""
Label sanitizing for new projects.

Labels are compared as exact (case-sensitive) strings and keep the order in
which they were first given. Empty strings are never kept. Adds and removals
on stored projects run in the database; see ProjectStore.
"""

from typing import Iterable, List, Set


class LabelSet:
    """Insertion-ordered set of non-empty labels.

    Keeps a list for order and a set for membership, so repeated adds do not
    scan the list.
    """

    def __init__(self, labels: Iterable[str] = ()) -> None:
        self._order: List[str] = []
        self._index: Set[str] = set()
        for label in labels:
            self.add(label)

    def add(self, label: str) -> bool:
        """Append label if it is non-empty and new. Returns True if the set changed."""
        if not label or label in self._index:
            return False
        self._order.append(label)
        self._index.add(label)
        return True

    def to_list(self) -> List[str]:
        return list(self._order)


def sanitize_labels(labels: Iterable[str]) -> List[str]:
    """Drop empty strings and duplicates, keeping first-occurrence order."""
    return LabelSet(labels or ()).to_list()
