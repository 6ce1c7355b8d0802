"""
Core data model: subjects and the triples they flatten into.
"""

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, Iterator, List, Set, Tuple


@dataclass(frozen=True, slots=True)
class Triple:
    """A single (subject, predicate, object) relation."""
    subject: str
    predicate: str
    object: str


@dataclass
class Subject:
    """
    One resource and its predicate/object pairs.

    Each predicate maps to a set of object strings, so repeated objects for
    the same predicate collapse into one.

    Example:
        subject = Subject("http://example.com/s1")
        subject.add("http://example.com/tag", "a")
        subject.add("http://example.com/tag", "b")
        subject.get("http://example.com/tag")  # frozenset({"a", "b"})
    """
    name: str
    _pairs: Dict[str, Set[str]] = field(default_factory=dict, repr=False)

    def add(self, predicate: str, obj: str) -> None:
        """Add an object to the set held for predicate."""
        self._pairs.setdefault(predicate, set()).add(obj)

    def extend(self, predicate: str, objects: Iterable[str]) -> None:
        for obj in objects:
            self.add(predicate, obj)

    def remove(self, predicate: str) -> bool:
        """Drop predicate and all its objects. Returns True if it was present."""
        return self._pairs.pop(predicate, None) is not None

    def get(self, predicate: str) -> FrozenSet[str]:
        """Objects for predicate; empty if the predicate is absent."""
        return frozenset(self._pairs.get(predicate, ()))

    def predicates(self) -> List[str]:
        return list(self._pairs)

    def predicate_objects(self) -> Iterator[Tuple[str, FrozenSet[str]]]:
        for predicate, objects in self._pairs.items():
            yield predicate, frozenset(objects)

    def as_dict(self) -> Dict[str, FrozenSet[str]]:
        return {p: frozenset(o) for p, o in self._pairs.items()}

    def triples(self) -> Iterator[Triple]:
        """Flatten into one Triple per (predicate, object) pair."""
        for predicate, objects in self._pairs.items():
            for obj in objects:
                yield Triple(self.name, predicate, obj)

    def copy(self) -> "Subject":
        return Subject(self.name, {p: set(o) for p, o in self._pairs.items()})

    def __len__(self) -> int:
        return sum(len(objects) for objects in self._pairs.values())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Subject):
            return NotImplemented
        return self.name == other.name and self.as_dict() == other.as_dict()

    def __str__(self) -> str:
        return f"Subject IRI: {self.name}, Predicate Objects: {len(self._pairs)}"
