from __future__ import annotations

class PatternError(ValueError):
    """A pattern graph that cannot be compiled into validators"""

class LoaderError(ImportError):
    """A pattern reference (``module:NAME`` or ``file.py:NAME``) that cannot be resolved"""

class ContractError(ValueError):
    """A malformed contract document"""
