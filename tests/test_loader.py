import json

import pytest

from jpat import Email, LoaderError
from jpat.loader import load_pattern, split_ref

def test_split_ref():
    assert split_ref("pkg.mod:NAME") == ("pkg.mod", "NAME")
    assert split_ref("C:/x/patterns.py:NAME") == ("C:/x/patterns.py", "NAME")
    for bad in ("NAME", ":NAME", "pkg.mod:"):
        with pytest.raises(LoaderError):
            split_ref(bad)

def test_load_from_module():
    assert load_pattern("jpat.patterns:Email") is Email
    assert load_pattern("json:loads") is json.loads

def test_load_from_file(tmp_path, patterns_file):
    tags = load_pattern("patterns.py:TAGS", tmp_path)
    assert isinstance(tags, dict)
    assert load_pattern(f"{patterns_file}:EVENT") is not None

def test_load_errors(tmp_path, patterns_file):
    with pytest.raises(LoaderError, match="cannot import"):
        load_pattern("jpat_no_such_module:X")
    with pytest.raises(LoaderError, match="not found"):
        load_pattern("absent.py:X", tmp_path)
    with pytest.raises(LoaderError, match="no attribute"):
        load_pattern("patterns.py:MISSING", tmp_path)

def test_errors_inside_pattern_files_become_loader_errors(tmp_path):
    (tmp_path / "syntax.py").write_text("PATTERN = {\n", encoding="utf-8")
    (tmp_path / "names.py").write_text("PATTERN = {'a': undefined_name}\n", encoding="utf-8")
    (tmp_path / "builder.py").write_text(
        "from jpat import compile_pattern\nPATTERN = compile_pattern({7: int})\n", encoding="utf-8",
    )
    for name in ("syntax.py", "names.py", "builder.py"):
        with pytest.raises(LoaderError, match="error loading"):
            load_pattern(f"{name}:PATTERN", tmp_path)
