"""
Validation failures.

Two shapes, both path-qualified:

  Unexpected  - the chosen pattern does not match the value
  Ambiguity   - two or more alternatives matched the same value

A failure renders as text with ``str()`` and as a plain mapping with ``to_dict()``.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, Tuple, Union

Path = Tuple[Union[str, int], ...]

class LabelSet:
    """Insertion-ordered set of short descriptions.

    Iterates in discovery order; compares equal to any LabelSet or set holding the
    same labels regardless of order.
    """

    __slots__ = ("_labels",)

    def __init__(self, labels: Iterable[str] = ()):
        self._labels: Dict[str, None] = dict.fromkeys(labels)

    @classmethod
    def union(cls, sets: Iterable["LabelSet"]) -> "LabelSet":
        out = cls()
        for s in sets:
            out._labels.update(s._labels)
        return out

    def __or__(self, other: "LabelSet") -> "LabelSet":
        return LabelSet.union([self, other])

    def __iter__(self) -> Iterator[str]:
        return iter(self._labels)

    def __len__(self) -> int:
        return len(self._labels)

    def __contains__(self, label: object) -> bool:
        return label in self._labels

    def __eq__(self, other: object) -> bool:
        if isinstance(other, LabelSet):
            return self._labels.keys() == other._labels.keys()
        if isinstance(other, (set, frozenset)):
            return self._labels.keys() == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(frozenset(self._labels))

    def __repr__(self) -> str:
        return f"LabelSet({list(self._labels)!r})"

    def to_list(self) -> list:
        return list(self._labels)

def path_to_str(path: Path) -> str:
    return "$" + "".join(f"['{p}']" if isinstance(p, str) else f"[{p}]" for p in path)

def _plain(value: Any) -> Any:
    return value.to_list() if isinstance(value, LabelSet) else value

@dataclass(frozen=True)
class Failure:
    path: Path
    found: str

    def path_to_str(self) -> str:
        return path_to_str(self.path)

    def to_dict(self) -> Dict[str, Any]:
        raise NotImplementedError

@dataclass(frozen=True)
class Unexpected(Failure):
    expected: Union[str, LabelSet] = field(default="")

    def __str__(self) -> str:
        expected = self.expected
        if isinstance(expected, LabelSet):
            labels = expected.to_list()
            expected = labels[0] if len(labels) == 1 else "one of: " + ", ".join(labels)
        return f"at {self.path_to_str()}; found {self.found}; expected {expected}"

    def to_dict(self) -> Dict[str, Any]:
        return {"path": list(self.path), "found": self.found, "expected": _plain(self.expected)}

@dataclass(frozen=True)
class Ambiguity(Failure):
    overlapping_patterns: LabelSet = field(default_factory=LabelSet)

    def __str__(self) -> str:
        overlapping = ", ".join(self.overlapping_patterns)
        return f"ambiguous patterns at {self.path_to_str()}; found {self.found}; overlapping patterns: {overlapping}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": list(self.path),
            "found": self.found,
            "overlapping_patterns": self.overlapping_patterns.to_list(),
        }

def failures_to_dicts(failures: Iterable[Failure]) -> list:
    return [f.to_dict() for f in failures]
