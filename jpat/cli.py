#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
jpat CLI: check JSON documents against patterns

Usage:
  python -m jpat check myproject.patterns:PERSON people.jsonl
  python -m jpat check patterns.py:CONFIG settings.json --report build/report/settings.json
  python -m jpat verify contracts/people.yml
  python -m jpat show myproject.patterns:PERSON
"""
from __future__ import annotations
import argparse, sys
from pathlib import Path
from typing import Any, Dict, List

from rich.console import Console

from .compiler import compile_pattern
from .config import CheckConfig
from .contracts import verify
from .errors import LoaderError, PatternError
from .io import read_json, read_jsonl, write_json
from .loader import load_pattern
from .logging import log, set_verbosity

console = Console()

EXIT_OK = 0
EXIT_FAILURES = 1
EXIT_USAGE = 2

def main(argv: List[str] = None) -> int:
    ap = argparse.ArgumentParser(prog="jpat", description="Structural JSON pattern validation")
    sub = ap.add_subparsers(dest="cmd", required=True)

    chk = sub.add_parser("check", help="Validate JSON/JSONL files against a pattern")
    chk.add_argument("pattern", help="Pattern reference: module:NAME or file.py:NAME")
    chk.add_argument("files", nargs="+", help="JSON or JSONL files")
    chk.add_argument("--jsonl", action="store_true", help="Treat every file as JSONL")
    chk.add_argument("--report", default=None, help="Write structured failures to this JSON file")
    chk.add_argument("--verbose", action="store_true")

    ver = sub.add_parser("verify", help="Run a YAML contract")
    ver.add_argument("contract", help="Contract file (.yml)")
    ver.add_argument("--report-dir", dest="report_dir", default=None, help="Report directory")
    ver.add_argument("--verbose", action="store_true")

    show = sub.add_parser("show", help="Print a compiled pattern")
    show.add_argument("pattern", help="Pattern reference: module:NAME or file.py:NAME")
    show.add_argument("--verbose", action="store_true")

    args = ap.parse_args(argv)
    cfg = CheckConfig.from_env().with_overrides(
        report_dir=getattr(args, "report_dir", None), verbose=args.verbose,
    )
    set_verbosity(cfg.verbose)
    log().debug(f"config: {cfg.as_dict()}")

    if args.cmd == "verify":
        return verify(Path(args.contract), cfg.report_dir, verbose=cfg.verbose)
    if args.cmd == "show":
        return run_show(args.pattern)
    return run_check(args.pattern, [Path(f) for f in args.files], cfg, force_jsonl=args.jsonl,
                     report=Path(args.report) if args.report else None)

def _compile(ref: str):
    try:
        return compile_pattern(load_pattern(ref, Path.cwd()))
    except (LoaderError, PatternError) as e:
        console.print(f"❌ {e}", style="red bold", markup=False, soft_wrap=True)
        return None

def run_show(ref: str) -> int:
    validator = _compile(ref)
    if validator is None:
        return EXIT_USAGE
    console.print(str(validator), markup=False, soft_wrap=True)
    return EXIT_OK

def _check_file(validator, path: Path, jsonl: bool) -> List[Dict[str, Any]]:
    """Structured failures for one file; JSONL failures carry their line number"""
    out: List[Dict[str, Any]] = []
    if jsonl:
        for line_no, row in read_jsonl(path):
            for f in validator.validate_from_root(row):
                out.append({"line": line_no, **f.to_dict(), "message": str(f)})
    else:
        for f in validator.validate_from_root(read_json(path)):
            out.append({**f.to_dict(), "message": str(f)})
    return out

def run_check(ref: str, files: List[Path], cfg: CheckConfig, force_jsonl: bool = False,
              report: Path = None) -> int:
    validator = _compile(ref)
    if validator is None:
        return EXIT_USAGE

    summary = {"pattern": ref, "ok": True, "files": []}
    for path in files:
        if not path.exists():
            console.print(f"❌ {path}: file not found", style="red bold", markup=False, soft_wrap=True)
            return EXIT_USAGE
        jsonl = force_jsonl or path.suffix == ".jsonl"
        try:
            failures = _check_file(validator, path, jsonl)
        except ValueError as e:
            console.print(f"❌ {path}: {e}", style="red bold", markup=False, soft_wrap=True)
            return EXIT_USAGE

        summary["files"].append({"path": str(path), "ok": not failures, "failures": failures})
        if not failures:
            console.print(f"  ✓ {path}", style="green", markup=False, soft_wrap=True)
            continue

        summary["ok"] = False
        console.print(f"  ❌ {path}: {len(failures)} failure(s)", style="red", markup=False, soft_wrap=True)
        for f in failures[:cfg.max_failures_shown]:
            where = f"{path}:{f['line']}" if "line" in f else str(path)
            console.print(f"    • {where}: {f['message']}", style="red", markup=False, soft_wrap=True)
        hidden = len(failures) - cfg.max_failures_shown
        if hidden > 0:
            console.print(f"    … {hidden} more", style="yellow", soft_wrap=True)

    if report is not None:
        write_json(report, summary)
        log().debug(f"report written to {report}")

    return EXIT_OK if summary["ok"] else EXIT_FAILURES

if __name__ == "__main__":
    sys.exit(main())
