"""
Object-member validators.

An object pattern compiles to a sequence of member clauses. Each clause consumes
some members of the object being checked and hands the rest (the remainder) to the
next clause; whatever is left at the end is reported by the enclosing object
validator.

Besides ``validate_members``, every clause answers the dispatch questions a
members-disjunction asks of its alternatives:

  possible_first_names()          names the clause could start with
  matching_first_names(obj)       those of them present in obj
  first_value_matches(name, v)    does v shallow-match the validator for name
  first_value_validators(name)    the validators a value for name is checked with
"""
from __future__ import annotations
import json
from typing import Any, Dict, List, NamedTuple, Optional

from .errors import PatternError
from .failures import Ambiguity, Failure, LabelSet, Path, Unexpected
from .render import RenderContext, render
from .values import describe_names, shallow_value

class MembersResult(NamedTuple):
    failures: List[Failure]
    remainder: Dict[str, Any]

def _without(obj: Dict[str, Any], name: str) -> Dict[str, Any]:
    return {k: v for k, v in obj.items() if k != name}

def name_label(name: str) -> str:
    return f"name: {json.dumps(name, ensure_ascii=False)}"

def _unique(validators) -> list:
    seen = {}
    for v in validators:
        seen.setdefault(id(v), v)
    return list(seen.values())

class MembersValidator:
    def validate_members(self, path: Path, remaining: Dict[str, Any]) -> MembersResult:
        raise NotImplementedError

    def possible_first_names(self) -> LabelSet:
        return LabelSet()

    def matching_first_names(self, remaining: Dict[str, Any]) -> LabelSet:
        return LabelSet()

    def first_value_matches(self, name: str, value: Any) -> bool:
        return False

    def first_value_validators(self, name: str) -> list:
        return []

    def render(self, ctx: RenderContext) -> str:
        raise NotImplementedError

    def __str__(self) -> str:
        return render(self)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self}>"

class NamedMember(MembersValidator):
    def __init__(self, name: str, validator):
        self.name = name
        self.validator = validator

    def possible_first_names(self) -> LabelSet:
        return LabelSet([self.name])

    def matching_first_names(self, remaining: Dict[str, Any]) -> LabelSet:
        return LabelSet([self.name]) if self.name in remaining else LabelSet()

    def first_value_matches(self, name: str, value: Any) -> bool:
        return name == self.name and self.validator.shallow_match(value)

    def first_value_validators(self, name: str) -> list:
        return [self.validator] if name == self.name else []

    def validate_members(self, path: Path, remaining: Dict[str, Any]) -> MembersResult:
        if self.name not in remaining:
            return MembersResult(
                [Unexpected(path, describe_names(remaining), name_label(self.name))],
                remaining,
            )
        failures = self.validator.validate(path + (self.name,), remaining[self.name])
        return MembersResult(failures, _without(remaining, self.name))

    def render(self, ctx: RenderContext) -> str:
        return f"{json.dumps(self.name, ensure_ascii=False)}: {ctx.render(self.validator)}"

class SequenceMembers(MembersValidator):
    """Clauses applied strictly in declared order; dispatch looks at the first only"""

    def __init__(self, clauses: Optional[List[MembersValidator]] = None):
        self.clauses = clauses or []

    def _first(self) -> MembersValidator:
        return self.clauses[0] if self.clauses else EMPTY_MEMBERS

    def possible_first_names(self) -> LabelSet:
        return self._first().possible_first_names()

    def matching_first_names(self, remaining: Dict[str, Any]) -> LabelSet:
        return self._first().matching_first_names(remaining)

    def first_value_matches(self, name: str, value: Any) -> bool:
        return self._first().first_value_matches(name, value)

    def first_value_validators(self, name: str) -> list:
        return self._first().first_value_validators(name)

    def validate_members(self, path: Path, remaining: Dict[str, Any]) -> MembersResult:
        failures: List[Failure] = []
        for clause in self.clauses:
            result = clause.validate_members(path, remaining)
            failures.extend(result.failures)
            remaining = result.remainder
        return MembersResult(failures, remaining)

    def render(self, ctx: RenderContext) -> str:
        parts = [ctx.render(c) for c in self.clauses]
        return ", ".join(p for p in parts if p)

class EmptyMembers(MembersValidator):
    def validate_members(self, path: Path, remaining: Dict[str, Any]) -> MembersResult:
        return MembersResult([], remaining)

    def render(self, ctx: RenderContext) -> str:
        return ""

EMPTY_MEMBERS = EmptyMembers()

class OptionalMembers(MembersValidator):
    """All-or-nothing group: once any of its first names is present, every member is required"""

    def __init__(self, inner: MembersValidator):
        self.inner = inner

    def possible_first_names(self) -> LabelSet:
        return self.inner.possible_first_names()

    def matching_first_names(self, remaining: Dict[str, Any]) -> LabelSet:
        return self.inner.matching_first_names(remaining)

    def first_value_matches(self, name: str, value: Any) -> bool:
        return self.inner.first_value_matches(name, value)

    def first_value_validators(self, name: str) -> list:
        return self.inner.first_value_validators(name)

    def validate_members(self, path: Path, remaining: Dict[str, Any]) -> MembersResult:
        if self.matching_first_names(remaining):
            return self.inner.validate_members(path, remaining)
        return MembersResult([], remaining)

    def render(self, ctx: RenderContext) -> str:
        return f"({ctx.render(self.inner)})?"

class ManyMembers(MembersValidator):
    """Every remaining member, whatever its name, checked against one validator"""

    def __init__(self, validator):
        self.validator = validator

    def matching_first_names(self, remaining: Dict[str, Any]) -> LabelSet:
        return LabelSet(remaining)

    def first_value_matches(self, name: str, value: Any) -> bool:
        return not self.validator.validate((), value)

    def first_value_validators(self, name: str) -> list:
        return [self.validator]

    def validate_members(self, path: Path, remaining: Dict[str, Any]) -> MembersResult:
        failures: List[Failure] = []
        for name, value in remaining.items():
            failures.extend(self.validator.validate(path + (name,), value))
        return MembersResult(failures, {})

    def render(self, ctx: RenderContext) -> str:
        return f"__: {ctx.render(self.validator)}, ..."

class FlattenMembers(MembersValidator):
    """An object (or disjunction of objects) pattern reused inline as member clauses.

    The wrapped validator may still be under construction when this adapter is
    created, so its members are looked up on first use (or by ``resolve``).
    """

    def __init__(self, wrapped):
        self.wrapped = wrapped
        self._members: Optional[MembersValidator] = None

    def resolve(self) -> MembersValidator:
        if self._members is None:
            if not self.wrapped.expects_object():
                raise PatternError(f"cannot use a non-object pattern as object members: {self.wrapped}")
            self._members = self.wrapped.as_object_members()
        return self._members

    def possible_first_names(self) -> LabelSet:
        return self.resolve().possible_first_names()

    def matching_first_names(self, remaining: Dict[str, Any]) -> LabelSet:
        return self.resolve().matching_first_names(remaining)

    def first_value_matches(self, name: str, value: Any) -> bool:
        return self.resolve().first_value_matches(name, value)

    def first_value_validators(self, name: str) -> list:
        return self.resolve().first_value_validators(name)

    def validate_members(self, path: Path, remaining: Dict[str, Any]) -> MembersResult:
        return self.resolve().validate_members(path, remaining)

    def render(self, ctx: RenderContext) -> str:
        return ctx.render(self.resolve())

class MembersDisjunction(MembersValidator):
    """Alternative member-clause sequences, dispatched on the first member.

    The alternative is picked by which of their first names is present in the
    object, then, if several alternatives share that name, by which of their
    validators for it shallow-matches the member's value. Anything short of exactly
    one survivor is reported as a failure (nothing matched) or an ambiguity.
    """

    def __init__(self, alternatives: List[MembersValidator]):
        self.alternatives = alternatives

    def possible_first_names(self) -> LabelSet:
        return LabelSet.union(a.possible_first_names() for a in self.alternatives)

    def matching_first_names(self, remaining: Dict[str, Any]) -> LabelSet:
        return LabelSet.union(a.matching_first_names(remaining) for a in self.alternatives)

    def first_value_matches(self, name: str, value: Any) -> bool:
        return any(a.first_value_matches(name, value) for a in self.alternatives)

    def first_value_validators(self, name: str) -> list:
        return _unique(v for a in self.alternatives for v in a.first_value_validators(name))

    @staticmethod
    def _name_labels(alternatives) -> LabelSet:
        return LabelSet(
            name_label(n) for a in alternatives for n in a.possible_first_names()
        )

    @staticmethod
    def _value_labels(alternatives, name: str) -> LabelSet:
        return LabelSet.union(
            v.shallow_describe() for a in alternatives for v in a.first_value_validators(name)
        )

    def validate_members(self, path: Path, remaining: Dict[str, Any]) -> MembersResult:
        by_alternative = [(a, a.matching_first_names(remaining)) for a in self.alternatives]
        candidates = [a for a, names in by_alternative if names]
        all_names = LabelSet.union(names for _, names in by_alternative)

        if not all_names:
            return MembersResult(
                [Unexpected(path, describe_names(remaining), self._name_labels(self.alternatives))],
                remaining,
            )
        if len(all_names) > 1:
            overlapping = LabelSet.union(a.possible_first_names() for a in candidates)
            return MembersResult(
                [Ambiguity(path, describe_names(all_names), overlapping)],
                remaining,
            )

        name = next(iter(all_names))
        value = remaining[name]
        reduced = _without(remaining, name)
        winners = [a for a in candidates if a.first_value_matches(name, value)]

        if len(winners) == 1:
            # the winner consumes the distinguishing member itself
            return winners[0].validate_members(path, remaining)
        if not winners:
            return MembersResult(
                [Unexpected(path + (name,), shallow_value(value), self._value_labels(candidates, name))],
                reduced,
            )
        return MembersResult(
            [Ambiguity(path + (name,), shallow_value(value), self._value_labels(winners, name))],
            reduced,
        )

    def render(self, ctx: RenderContext) -> str:
        return "(" + " | ".join(ctx.render(a) for a in self.alternatives) + ")"
