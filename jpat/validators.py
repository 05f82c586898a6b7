"""
Value validators: the compiled counterpart of each value-level pattern node.

Every validator answers ``validate(path, value)`` with an ordered list of failures.
Validators that can appear as alternatives also answer the cheap questions used to
pick a branch: ``shallow_match(value)`` and ``shallow_describe()``.
"""
from __future__ import annotations
import re
from typing import Any, List, Optional

from .errors import PatternError
from .failures import Ambiguity, Failure, LabelSet, Path, Unexpected
from .members import MembersDisjunction, MembersValidator
from .patterns import TypeMarker
from .render import RenderContext, render
from .values import (
    ARRAY, END_OF_MEMBERS, OBJECT, STRING, describe_names, json_equal, json_kind,
    kind_matches, render_scalar, shallow_value,
)

class Validator:
    def validate(self, path: Path, value: Any) -> List[Failure]:
        raise NotImplementedError

    def validate_from_root(self, value: Any) -> List[Failure]:
        return self.validate((), value)

    def shallow_match(self, value: Any) -> bool:
        return not self.validate((), value)

    def shallow_describe(self) -> LabelSet:
        return LabelSet([str(self)])

    def expects_object(self) -> bool:
        return False

    def as_object_members(self) -> MembersValidator:
        raise PatternError(f"attempted to treat non-object pattern as object members: {self}")

    def render(self, ctx: RenderContext) -> str:
        raise NotImplementedError

    def __str__(self) -> str:
        return render(self)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self}>"

class TypeValidator(Validator):
    def __init__(self, marker: TypeMarker):
        self.marker = marker

    def validate(self, path: Path, value: Any) -> List[Failure]:
        if kind_matches(self.marker.value, value):
            return []
        return [Unexpected(path, json_kind(value), self.marker.value)]

    def render(self, ctx: RenderContext) -> str:
        return self.marker.value

class LiteralValidator(Validator):
    def __init__(self, value: Any):
        self.value = value

    def validate(self, path: Path, value: Any) -> List[Failure]:
        expected_kind = json_kind(self.value)
        if json_kind(value) != expected_kind:
            return [Unexpected(path, json_kind(value), expected_kind)]
        if json_equal(value, self.value):
            return []
        return [Unexpected(path, render_scalar(value), str(self))]

    def render(self, ctx: RenderContext) -> str:
        return render_scalar(self.value)

class RegexValidator(Validator):
    """String matching a regular expression anywhere (``re.search``)"""

    def __init__(self, regex: re.Pattern):
        self.regex = regex

    def matches(self, text: str) -> bool:
        return self.regex.search(text) is not None

    def mismatch_label(self) -> str:
        return f"string matching {self}"

    def validate(self, path: Path, value: Any) -> List[Failure]:
        if not isinstance(value, str):
            return [Unexpected(path, json_kind(value), STRING)]
        if self.matches(value):
            return []
        return [Unexpected(path, render_scalar(value), self.mismatch_label())]

    def render(self, ctx: RenderContext) -> str:
        return f"/{self.regex.pattern}/"

_LABEL = r"(?:[a-z\u00a1-\uffff0-9]+(?:-[a-z\u00a1-\uffff0-9]+)*)"
_HOST = _LABEL + r"(?:\." + _LABEL + r")*" + r"(?:\.(?:[a-z\u00a1-\uffff]{2,}))"

EMAIL_RE = re.compile(
    r"(?:" + _LABEL + r'|(?:"[^"]+"))'   # local name, bare or quoted
    + r"@" + _HOST,
    re.IGNORECASE,
)

URL_RE = re.compile(
    r"(?:(?:https?|ftp)://)"
    r"(?:\S+(?::\S*)?@)?"                 # user:pass
    r"(?:"
    # private and local networks are not public URLs
    r"(?!10(?:\.\d{1,3}){3})"
    r"(?!127(?:\.\d{1,3}){3})"
    r"(?!169\.254(?:\.\d{1,3}){2})"
    r"(?!192\.168(?:\.\d{1,3}){2})"
    r"(?!172\.(?:1[6-9]|2\d|3[0-1])(?:\.\d{1,3}){2})"
    # dotted quad, excluding network, broadcast and reserved addresses
    r"(?:[1-9]\d?|1\d\d|2[01]\d|22[0-3])"
    r"(?:\.(?:1?\d{1,2}|2[0-4]\d|25[0-5])){2}"
    r"(?:\.(?:[1-9]\d?|1\d\d|2[0-4]\d|25[0-4]))"
    r"|" + _HOST +
    r")"
    r"(?::\d{2,5})?"                      # port
    r"(?:/[^\s]*)?",                      # resource path
    re.IGNORECASE,
)

class EmailValidator(RegexValidator):
    def __init__(self):
        super().__init__(EMAIL_RE)

    def matches(self, text: str) -> bool:
        return self.regex.fullmatch(text) is not None

    def mismatch_label(self) -> str:
        return "email"

    def render(self, ctx: RenderContext) -> str:
        return "email"

class URLValidator(RegexValidator):
    def __init__(self):
        super().__init__(URL_RE)

    def matches(self, text: str) -> bool:
        return self.regex.fullmatch(text) is not None

    def mismatch_label(self) -> str:
        return "URL"

    def render(self, ctx: RenderContext) -> str:
        return "URL"

class AnythingValidator(Validator):
    def validate(self, path: Path, value: Any) -> List[Failure]:
        return []

    def render(self, ctx: RenderContext) -> str:
        return "__"

class ArrayValidator(Validator):
    def __init__(self, element: Optional[Validator] = None):
        self.element = element

    def validate(self, path: Path, value: Any) -> List[Failure]:
        if not isinstance(value, list):
            return [Unexpected(path, json_kind(value), ARRAY)]
        failures: List[Failure] = []
        for i, item in enumerate(value):
            failures.extend(self.element.validate(path + (i,), item))
        return failures

    def shallow_match(self, value: Any) -> bool:
        return isinstance(value, list)

    def shallow_describe(self) -> LabelSet:
        return LabelSet([ARRAY])

    def render(self, ctx: RenderContext) -> str:
        return f"[ {ctx.render(self.element)}, ... ]"

class ObjectValidator(Validator):
    def __init__(self, members: Optional[MembersValidator] = None):
        self.members = members

    def validate(self, path: Path, value: Any) -> List[Failure]:
        if not isinstance(value, dict):
            return [Unexpected(path, json_kind(value), OBJECT)]
        result = self.members.validate_members(path, value)
        failures = list(result.failures)
        if result.remainder:
            failures.append(Unexpected(path, describe_names(result.remainder), END_OF_MEMBERS))
        return failures

    def shallow_match(self, value: Any) -> bool:
        return isinstance(value, dict)

    def shallow_describe(self) -> LabelSet:
        return LabelSet([OBJECT])

    def expects_object(self) -> bool:
        return True

    def as_object_members(self) -> MembersValidator:
        return self.members

    def render(self, ctx: RenderContext) -> str:
        inner = ctx.render(self.members)
        return f"{{ {inner} }}" if inner else "{}"

class ValueDisjunctionValidator(Validator):
    def __init__(self, alternatives: List[Validator]):
        self.alternatives = alternatives

    def _matching(self, value: Any) -> List[Validator]:
        return [v for v in self.alternatives if v.shallow_match(value)]

    def validate(self, path: Path, value: Any) -> List[Failure]:
        matching = self._matching(value)
        if len(matching) == 1:
            return matching[0].validate(path, value)
        if not matching:
            return [Unexpected(path, shallow_value(value), self.shallow_describe())]
        return [Ambiguity(
            path, shallow_value(value),
            LabelSet.union(v.shallow_describe() for v in matching),
        )]

    def shallow_match(self, value: Any) -> bool:
        return len(self._matching(value)) == 1

    def shallow_describe(self) -> LabelSet:
        return LabelSet.union(v.shallow_describe() for v in self.alternatives)

    def render(self, ctx: RenderContext) -> str:
        return "(" + " | ".join(ctx.render(v) for v in self.alternatives) + ")"

class DisjunctionValidator(Validator):
    """``one_of(...)`` as compiled.

    Once resolved it behaves as an object validator over a members-disjunction when
    every alternative expects an object, and as a value disjunction otherwise.
    Resolution waits until the alternatives are compiled, since with cyclic patterns
    they may still be under construction when this node is created.
    """

    def __init__(self, alternatives: Optional[List[Validator]] = None):
        self.alternatives = alternatives
        self._concrete: Optional[Validator] = None
        self._members: Optional[MembersValidator] = None
        self._busy = False

    def _guarded(self, compute):
        if self._busy:
            raise PatternError("one_of refers to itself as its own alternative")
        self._busy = True
        try:
            return compute()
        finally:
            self._busy = False

    def resolve(self) -> Validator:
        if self._concrete is None:
            self._concrete = self._guarded(self._build_concrete)
        return self._concrete

    def _build_concrete(self) -> Validator:
        if all(v.expects_object() for v in self.alternatives):
            if self._members is None:
                self._members = MembersDisjunction([v.as_object_members() for v in self.alternatives])
            return ObjectValidator(self._members)
        return ValueDisjunctionValidator(self.alternatives)

    def expects_object(self) -> bool:
        if self._concrete is not None:
            return isinstance(self._concrete, ObjectValidator)
        return self._guarded(lambda: all(v.expects_object() for v in self.alternatives))

    def as_object_members(self) -> MembersValidator:
        if self._members is None:
            self._members = self._guarded(
                lambda: MembersDisjunction([v.as_object_members() for v in self.alternatives])
            )
        return self._members

    def validate(self, path: Path, value: Any) -> List[Failure]:
        return self.resolve().validate(path, value)

    def shallow_match(self, value: Any) -> bool:
        return self.resolve().shallow_match(value)

    def shallow_describe(self) -> LabelSet:
        return self.resolve().shallow_describe()

    def render(self, ctx: RenderContext) -> str:
        return ctx.render(self.resolve())
