"""Pytest configuration and fixtures for jpat tests"""
import os
import textwrap
from pathlib import Path
import pytest

ROOT = Path(__file__).resolve().parents[1]

@pytest.fixture
def patterns_file(tmp_path):
    """A pattern module on disk, referenced as patterns.py:NAME from tmp_path"""
    path = tmp_path / "patterns.py"
    path.write_text(textwrap.dedent('''
        import re
        from jpat import Email, array_of, cyclic, many, one_of, optional

        PERSON = cyclic(lambda person: {
            "name": str,
            "email": Email,
            optional(): {"friends": array_of(person)},
        })

        EVENT = {
            one_of(): [
                {"type": "click", "x": int, "y": int},
                {"type": "key", "code": str},
            ],
            "at": float,
        }

        TAGS = {many(): array_of(str)}

        BROKEN = {"name": str, 7: int}
    '''), encoding="utf-8")
    return path

@pytest.fixture
def cli_env():
    """Environment for running `python -m jpat` from a temporary directory"""
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(p for p in [str(ROOT), env.get("PYTHONPATH", "")] if p)
    env.pop("JPAT_VERBOSE", None)
    env.pop("JPAT_MAX_FAILURES", None)
    return env
