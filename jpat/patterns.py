"""
Pattern graph: the authored, literal-shaped form of a schema.

Patterns are ordinary Python values laid out like the JSON they describe:

    PERSON = cyclic(lambda person: {
        "name": str,
        "email": Email,
        optional(): {"age": int},
        "friends": array_of(person),
    })

  literal        "xyz", 54, 54.32, True, None
  type marker    str, int, float, bool, list, dict, Number, Null, Email, URL
  regex          re.compile("who+ah")
  object         dict; keys are member names or clause keys
  array          array_of(p)
  alternation    one_of(a, b, ...)            as a value
                 {one_of(): [obj_a, obj_b]}   as a member clause
  optional group {optional(): obj}
  many members   {many(): p}
  flatten        {members(): obj}
  anything       ANYTHING
  self reference cyclic(lambda self_ref: ...)

Nothing here validates; see jpat.compiler.
"""
from __future__ import annotations
from enum import Enum
from typing import Any, Callable, Optional, Sequence

class TypeMarker(Enum):
    BOOLEAN = "boolean"
    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    NUMBER = "number"
    NULL = "null"
    ARRAY = "array"
    OBJECT = "object"
    EMAIL = "email"
    URL = "URL"

    def __str__(self) -> str:
        return self.value

Number = TypeMarker.NUMBER
Null = TypeMarker.NULL
Email = TypeMarker.EMAIL
URL = TypeMarker.URL

# Python classes usable directly as type markers
BUILTIN_MARKERS = {
    bool: TypeMarker.BOOLEAN,
    str: TypeMarker.STRING,
    int: TypeMarker.INTEGER,
    float: TypeMarker.FLOAT,
    list: TypeMarker.ARRAY,
    dict: TypeMarker.OBJECT,
    type(None): TypeMarker.NULL,
}

class OneOf:
    __slots__ = ("alternatives",)

    def __init__(self, alternatives: Sequence[Any]):
        self.alternatives = tuple(alternatives)

    def __repr__(self) -> str:
        return "one_of(" + ", ".join(repr(a) for a in self.alternatives) + ")"

class ArrayOf:
    __slots__ = ("value",)

    def __init__(self, value: Any):
        self.value = value

    def __repr__(self) -> str:
        return f"array_of({self.value!r})"

class Anything:
    def __repr__(self) -> str:
        return "__"

ANYTHING = Anything()

class Cyclic:
    """Forward handle to a pattern still being built.

    ``interior`` is assigned exactly once, by ``cyclic``, after the body that
    refers to this handle has been constructed.
    """

    __slots__ = ("interior",)

    def __init__(self) -> None:
        self.interior: Optional[Any] = None

    def __repr__(self) -> str:
        return f"<cyclic 0x{id(self):x}>"

# Member-clause keys. Identity matters: every call makes a new key, so one dict can
# hold several clauses of the same kind.

class ClauseKey:
    label = "?"

    def __repr__(self) -> str:
        return f"{self.label}()"

class OneOfKey(ClauseKey):
    label = "one_of"

class OptionalKey(ClauseKey):
    label = "optional"

class ManyKey(ClauseKey):
    label = "many"

class MembersKey(ClauseKey):
    label = "members"

def one_of(*alternatives: Any):
    """Alternation. With no arguments, a member-clause key for ``{one_of(): [...]}``."""
    if not alternatives:
        return OneOfKey()
    return OneOf(alternatives)

def array_of(value: Any) -> ArrayOf:
    return ArrayOf(value)

def optional() -> OptionalKey:
    return OptionalKey()

def many() -> ManyKey:
    return ManyKey()

def members() -> MembersKey:
    return MembersKey()

def anything() -> Anything:
    return ANYTHING

def cyclic(build: Callable[[Cyclic], Any]) -> Cyclic:
    handle = Cyclic()
    handle.interior = build(handle)
    return handle
