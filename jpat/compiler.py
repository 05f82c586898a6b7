"""
Pattern → validator compiler.

The pattern graph may share sub-patterns and, through ``cyclic``, refer back to
itself. Each distinct pattern node (by identity) becomes exactly one validator: the
validator is registered in the translation table *before* its children are
compiled, so a back-reference finds the validator still under construction instead
of recursing forever.
"""
from __future__ import annotations
import re
from typing import Any, Dict, List, Tuple

from .errors import PatternError
from .failures import Failure
from .logging import log
from .members import (
    FlattenMembers, ManyMembers, MembersDisjunction, MembersValidator, NamedMember,
    OptionalMembers, SequenceMembers,
)
from .patterns import (
    BUILTIN_MARKERS, Anything, ArrayOf, Cyclic, ManyKey, MembersKey, OneOf, OneOfKey,
    OptionalKey, TypeMarker,
)
from .validators import (
    AnythingValidator, ArrayValidator, DisjunctionValidator, EmailValidator,
    LiteralValidator, ObjectValidator, RegexValidator, TypeValidator, URLValidator,
    Validator,
)

class _Compilation:
    """State of one compile call; never shared between calls"""

    def __init__(self) -> None:
        # id(pattern) -> (pattern, validator); the pattern is kept so its id stays unique
        self.translation: Dict[int, Tuple[Any, Validator]] = {}
        self.expanding: set = set()
        # nodes resolved lazily at run time, forced once the whole graph exists
        self.deferred: List[Any] = []

    def compile(self, pattern: Any) -> Validator:
        root = self.value(pattern)
        for node in self.deferred:
            node.resolve()
        log().debug(f"compiled {len(self.translation)} validators "
                    f"({len(self.deferred)} deferred) from {type(pattern).__name__} pattern")
        return root

    def value(self, pattern: Any) -> Validator:
        hit = self.translation.get(id(pattern))
        if hit is not None:
            return hit[1]

        if isinstance(pattern, Cyclic):
            return self.cyclic(pattern)

        v = self.new_validator(pattern)
        self.translation[id(pattern)] = (pattern, v)

        if isinstance(pattern, dict):
            v.members = self.members(pattern)
        elif isinstance(pattern, ArrayOf):
            v.element = self.value(pattern.value)
        elif isinstance(pattern, OneOf):
            if not pattern.alternatives:
                raise PatternError("one_of needs at least one alternative")
            v.alternatives = [self.value(a) for a in pattern.alternatives]
        return v

    def cyclic(self, pattern: Cyclic) -> Validator:
        if pattern.interior is None:
            raise PatternError("cyclic pattern was never given an interior")
        hit = self.translation.get(id(pattern.interior))
        if hit is not None:
            return hit[1]
        if id(pattern) in self.expanding:
            raise PatternError("cyclic pattern refers only to itself")
        self.expanding.add(id(pattern))
        try:
            return self.value(pattern.interior)
        finally:
            self.expanding.discard(id(pattern))

    def new_validator(self, pattern: Any) -> Validator:
        if isinstance(pattern, dict):
            return ObjectValidator()
        if isinstance(pattern, ArrayOf):
            return ArrayValidator()
        if isinstance(pattern, OneOf):
            v = DisjunctionValidator()
            self.deferred.append(v)
            return v
        if isinstance(pattern, re.Pattern):
            return RegexValidator(pattern)
        if isinstance(pattern, TypeMarker):
            return self.marker(pattern)
        if isinstance(pattern, type) and pattern in BUILTIN_MARKERS:
            return self.marker(BUILTIN_MARKERS[pattern])
        if pattern is None or isinstance(pattern, (str, bool, int, float)):
            return LiteralValidator(pattern)
        if isinstance(pattern, Anything):
            return AnythingValidator()
        raise PatternError(f"unrecognized type in pattern: {type(pattern).__name__}")

    @staticmethod
    def marker(marker: TypeMarker) -> Validator:
        if marker is TypeMarker.EMAIL:
            return EmailValidator()
        if marker is TypeMarker.URL:
            return URLValidator()
        return TypeValidator(marker)

    def members(self, pattern: Dict[Any, Any]) -> MembersValidator:
        return SequenceMembers([self.clause(k, v) for k, v in pattern.items()])

    def clause(self, key: Any, value: Any) -> MembersValidator:
        if isinstance(key, str):
            return NamedMember(key, self.value(value))
        if isinstance(key, OneOfKey):
            if not isinstance(value, (list, tuple)):
                raise PatternError("one_of() as a member clause takes a list of object patterns")
            return MembersDisjunction([self.flatten(p) for p in value])
        if isinstance(key, OptionalKey):
            return OptionalMembers(self.flatten(value))
        if isinstance(key, ManyKey):
            return ManyMembers(self.value(value))
        if isinstance(key, MembersKey):
            return self.flatten(value)
        raise PatternError(f"unrecognized key type in pattern: {type(key).__name__}")

    def flatten(self, pattern: Any) -> FlattenMembers:
        adapter = FlattenMembers(self.value(pattern))
        self.deferred.append(adapter)
        return adapter

def compile_pattern(pattern: Any) -> Validator:
    """Compile a pattern graph into a reusable validator; raises PatternError"""
    return _Compilation().compile(pattern)

def validate(pattern: Any, value: Any) -> List[Failure]:
    """One-off validation; compile once with compile_pattern when checking many values"""
    return compile_pattern(pattern).validate_from_root(value)

def matches(pattern: Any, value: Any) -> bool:
    return not validate(pattern, value)
