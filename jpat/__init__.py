"""Structural validation of JSON values against JSON-shaped patterns."""
from .compiler import compile_pattern, matches, validate
from .errors import ContractError, LoaderError, PatternError
from .failures import Ambiguity, Failure, LabelSet, Unexpected, failures_to_dicts, path_to_str
from .patterns import (
    ANYTHING, URL, Email, Null, Number, TypeMarker, anything, array_of, cyclic, many,
    members, one_of, optional,
)
from .values import json_equal, json_kind

__version__ = "0.3.0"

__all__ = [
    "compile_pattern", "validate", "matches",
    "PatternError", "LoaderError", "ContractError",
    "Failure", "Unexpected", "Ambiguity", "LabelSet", "failures_to_dicts", "path_to_str",
    "ANYTHING", "URL", "Email", "Null", "Number", "TypeMarker",
    "anything", "array_of", "cyclic", "many", "members", "one_of", "optional",
    "json_equal", "json_kind",
]
