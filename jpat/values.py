from __future__ import annotations
import json
from typing import Any, Iterable

OBJECT = "object"
ARRAY = "array"
STRING = "string"
INTEGER = "integer"
FLOAT = "float"
BOOLEAN = "boolean"
NULL = "null"

END_OF_MEMBERS = "end of object members"

def json_kind(value: Any) -> str:
    """Name of the JSON kind of an already-parsed value"""
    # bool before int: True is an int in Python
    if isinstance(value, bool):
        return BOOLEAN
    if isinstance(value, dict):
        return OBJECT
    if isinstance(value, list):
        return ARRAY
    if isinstance(value, str):
        return STRING
    if isinstance(value, int):
        return INTEGER
    if isinstance(value, float):
        return FLOAT
    if value is None:
        return NULL
    raise TypeError(f"value has no JSON kind: {value!r}")

def kind_matches(declared: str, value: Any) -> bool:
    """True when a value of this kind may stand where `declared` is expected"""
    actual = json_kind(value)
    if actual == declared:
        return True
    # integers are accepted wherever a float or number is declared
    if actual == INTEGER and declared in (FLOAT, "number"):
        return True
    if actual == FLOAT and declared == "number":
        return True
    return False

def render_scalar(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False)

def shallow_value(value: Any) -> str:
    """Short description of a value, used when reporting a failed dispatch"""
    kind = json_kind(value)
    if kind in (OBJECT, ARRAY, NULL):
        return kind
    return render_scalar(value)

def describe_names(names: Iterable[str]) -> str:
    """`end of object members` when nothing is left, else `names: "a", "b"`"""
    names = list(names)
    if not names:
        return END_OF_MEMBERS
    return "names: " + ", ".join(render_scalar(name) for name in names)

def json_equal(a: Any, b: Any) -> bool:
    """Deep equality over the seven JSON kinds.

    Unlike ``==``, values of different kinds are never equal: ``True`` is not
    ``1`` and ``1`` is not ``1.0``. Object member order is irrelevant.
    """
    ka, kb = json_kind(a), json_kind(b)
    if ka != kb:
        return False
    if ka == OBJECT:
        if a.keys() != b.keys():
            return False
        return all(json_equal(a[k], b[k]) for k in a)
    if ka == ARRAY:
        if len(a) != len(b):
            return False
        return all(json_equal(x, y) for x, y in zip(a, b))
    return a == b
