"""End-to-end tests for the jpat command line"""
import json
import subprocess
import sys

import yaml

from jpat.cli import EXIT_FAILURES, EXIT_OK, EXIT_USAGE, main

def run(args, cwd, env):
    proc = subprocess.run(
        [sys.executable, "-m", "jpat", *args],
        cwd=cwd, env=env, capture_output=True, text=True, encoding="utf-8",
    )
    return proc.returncode, proc.stdout, proc.stderr

def test_check_passing_jsonl(tmp_path, patterns_file, cli_env):
    (tmp_path / "people.jsonl").write_text(
        '{"name": "Ann", "email": "ann@example.com"}\n'
        '{"name": "Bob", "email": "bob@example.com", "friends": [{"name": "Ann", "email": "ann@example.com"}]}\n'
    )
    code, out, err = run(["check", "patterns.py:PERSON", "people.jsonl"], tmp_path, cli_env)
    assert code == EXIT_OK, err
    assert "✓ people.jsonl" in out

def test_check_failures_and_report(tmp_path, patterns_file, cli_env):
    (tmp_path / "people.jsonl").write_text(
        '{"name": "Ann", "email": "ann@example.com"}\n'
        '{"name": "Bob", "email": "bob"}\n'
    )
    code, out, err = run(
        ["check", "patterns.py:PERSON", "people.jsonl", "--report", "out/report.json"],
        tmp_path, cli_env,
    )
    assert code == EXIT_FAILURES, err
    assert "people.jsonl:2: at $['email']; found \"bob\"; expected email" in out

    report = json.loads((tmp_path / "out" / "report.json").read_text())
    assert report["pattern"] == "patterns.py:PERSON"
    assert report["ok"] is False
    assert report["files"][0]["failures"] == [{
        "line": 2,
        "path": ["email"],
        "found": '"bob"',
        "expected": "email",
        "message": "at $['email']; found \"bob\"; expected email",
    }]

def test_check_json_document(tmp_path, patterns_file, cli_env):
    (tmp_path / "tags.json").write_text(json.dumps({"fruit": ["apple"], "veg": ["kale", 3]}))
    code, out, err = run(["check", "patterns.py:TAGS", "tags.json"], tmp_path, cli_env)
    assert code == EXIT_FAILURES, err
    assert "tags.json: at $['veg'][1]; found integer; expected string" in out

def test_check_forced_jsonl_and_failure_limit(tmp_path, patterns_file, cli_env):
    (tmp_path / "events.txt").write_text("\n".join(
        json.dumps({"type": "scroll", "at": i}) for i in range(3)
    ))
    cli_env["JPAT_MAX_FAILURES"] = "1"
    code, out, err = run(["check", "patterns.py:EVENT", "events.txt", "--jsonl"], tmp_path, cli_env)
    assert code == EXIT_FAILURES, err
    assert "3 failure(s)" in out
    assert "2 more" in out

def test_check_usage_errors(tmp_path, patterns_file, cli_env):
    (tmp_path / "a.json").write_text("{}")
    code, out, _ = run(["check", "patterns.py:NOPE", "a.json"], tmp_path, cli_env)
    assert code == EXIT_USAGE
    assert "has no attribute 'NOPE'" in out

    code, out, _ = run(["check", "patterns.py:BROKEN", "a.json"], tmp_path, cli_env)
    assert code == EXIT_USAGE
    assert "unrecognized key type" in out

    code, out, _ = run(["check", "patterns.py:TAGS", "missing.json"], tmp_path, cli_env)
    assert code == EXIT_USAGE
    assert "file not found" in out

    (tmp_path / "bad.jsonl").write_text('{"fruit": []}\n{oops\n')
    code, out, _ = run(["check", "patterns.py:TAGS", "bad.jsonl"], tmp_path, cli_env)
    assert code == EXIT_USAGE
    assert "invalid JSON" in out

def test_show(tmp_path, patterns_file, cli_env):
    code, out, err = run(["show", "patterns.py:EVENT"], tmp_path, cli_env)
    assert code == EXIT_OK, err
    assert out.strip() == (
        '{ ("type": "click", "x": integer, "y": integer | "type": "key", "code": string), "at": float }'
    )

def test_show_cyclic_pattern(tmp_path, patterns_file, cli_env):
    code, out, err = run(["show", "patterns.py:PERSON"], tmp_path, cli_env)
    assert code == EXIT_OK, err
    assert out.strip() == '&1={ "name": string, "email": email, ("friends": [ &1, ... ])? }'

def test_verify(tmp_path, patterns_file, cli_env):
    (tmp_path / "people.jsonl").write_text('{"name": "Ann", "email": "ann@example.com"}\n')
    (tmp_path / "people.yml").write_text(yaml.safe_dump({
        "artifacts": [{"path": "people.jsonl", "pattern": "patterns.py:PERSON", "min_lines": 1}],
    }))
    code, out, err = run(["verify", "people.yml", "--report-dir", "report"], tmp_path, cli_env)
    assert code == EXIT_OK, err
    assert "OK" in out
    report = json.loads((tmp_path / "report" / "verify_people.json").read_text())
    assert report["ok"] is True

def test_verify_report_dir_from_environment(tmp_path, patterns_file, cli_env):
    (tmp_path / "people.yml").write_text(yaml.safe_dump({
        "artifacts": [{"path": "people.jsonl", "pattern": "patterns.py:PERSON"}],
    }))
    cli_env["JPAT_REPORT_DIR"] = str(tmp_path / "env-report")
    code, out, err = run(["verify", "people.yml"], tmp_path, cli_env)
    assert code == EXIT_FAILURES, err
    report = json.loads((tmp_path / "env-report" / "verify_people.json").read_text())
    assert report["errors"] == ["missing: people.jsonl"]

def test_main_in_process(tmp_path, patterns_file, capsys, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert main(["show", "patterns.py:TAGS"]) == EXIT_OK
    assert "{ __: [ string, ... ], ... }" in capsys.readouterr().out

def test_broken_pattern_file_is_a_usage_error(tmp_path, cli_env):
    (tmp_path / "bad.py").write_text("PATTERN = {'a': undefined_name}\n")
    (tmp_path / "a.json").write_text("{}")
    code, out, err = run(["check", "bad.py:PATTERN", "a.json"], tmp_path, cli_env)
    assert code == EXIT_USAGE
    assert "error loading" in out
    assert "Traceback" not in err
