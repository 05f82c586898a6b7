from __future__ import annotations
import traceback
from pathlib import Path
from typing import Any, Dict, List

import yaml
from jsonschema import Draft202012Validator
from rich.console import Console

from .compiler import compile_pattern
from .errors import ContractError, LoaderError, PatternError
from .io import ensure_dir, read_json, read_jsonl, write_json
from .loader import load_pattern
from .logging import log
from .validators import Validator

console = Console()

# Shape of a contract document (kept local, the contract format is small)
_CONTRACT_SCHEMA: Dict[str, Any] = {
    "title": "jpat contract",
    "type": "object",
    "required": ["artifacts"],
    "additionalProperties": False,
    "properties": {
        "artifacts": {"type": "array", "items": {"$ref": "#/$defs/artifact"}},
        "notes": {"type": "string"},
    },
    "$defs": {
        "artifact": {
            "type": "object",
            "additionalProperties": False,
            "required": ["path", "pattern"],
            "properties": {
                "path": {"type": "string", "minLength": 1},
                "type": {"type": "string", "enum": ["json", "jsonl"]},
                "pattern": {"type": "string", "pattern": "^.+:[A-Za-z_][A-Za-z0-9_]*$"},
                "must_exist": {"type": "boolean"},
                "min_lines": {"type": "integer", "minimum": 0},
                "max_lines": {"type": "integer", "minimum": 0},
            },
        },
    },
}

def check_contract(spec: Any) -> None:
    """Raise ContractError listing every schema violation in a contract document"""
    validator = Draft202012Validator(_CONTRACT_SCHEMA)
    problems = []
    for err in sorted(validator.iter_errors(spec), key=lambda e: list(e.absolute_path)):
        where = "/".join(str(p) for p in err.absolute_path) or "<root>"
        problems.append(f"{where}: {err.message}")
    if problems:
        raise ContractError("invalid contract: " + "; ".join(problems))

def run_contract(spec: Dict[str, Any], base_dir: Path) -> List[str]:
    """Check every artifact of a contract against its pattern; returns error strings"""
    check_contract(spec)
    errs: List[str] = []
    compiled: Dict[str, Validator] = {}

    for art in spec["artifacts"]:
        rel = art["path"]
        path = base_dir / rel
        if not path.exists():
            if art.get("must_exist", True):
                errs.append(f"missing: {rel}")
            continue

        ref = art["pattern"]
        if ref not in compiled:
            compiled[ref] = compile_pattern(load_pattern(ref, base_dir))
        validator = compiled[ref]

        if art.get("type", "jsonl") == "jsonl":
            rows = read_jsonl(path)
            if "min_lines" in art and len(rows) < art["min_lines"]:
                errs.append(f"{rel}: min_lines {art['min_lines']} not met (got {len(rows)})")
            if "max_lines" in art and len(rows) > art["max_lines"]:
                errs.append(f"{rel}: max_lines {art['max_lines']} exceeded (got {len(rows)})")
            for line_no, row in rows:
                errs.extend(f"{rel}:{line_no}: {f}" for f in validator.validate_from_root(row))
            log().debug(f"{rel}: {len(rows)} rows checked against {ref}")
        else:
            doc = read_json(path)
            errs.extend(f"{rel}: {f}" for f in validator.validate_from_root(doc))
            log().debug(f"{rel}: document checked against {ref}")
    return errs

def verify(contract_path: Path, report_dir: Path, verbose: bool = False) -> int:
    """Run a YAML contract; returns 0 for success, 1 for failure"""
    ensure_dir(report_dir)
    report_path = report_dir / f"verify_{contract_path.stem}.json"

    errors: List[str] = []
    if not contract_path.exists():
        errors.append(f"contract file not found: {contract_path}")
    else:
        try:
            spec = yaml.safe_load(contract_path.read_text(encoding="utf-8"))
            errors.extend(run_contract(spec or {}, contract_path.parent))
        except (yaml.YAMLError, ContractError, LoaderError, PatternError, ValueError) as e:
            errors.append(f"contract error: {e}")
            if verbose:
                traceback.print_exc()

    report = {
        "contract": str(contract_path),
        "errors": errors,
        "ok": len(errors) == 0,
        "error_count": len(errors),
    }
    write_json(report_path, report)

    if errors:
        console.print(f"✗ Verify {contract_path.name}: {len(errors)} issue(s), see {report_path}", style="red", markup=False, soft_wrap=True)
        if verbose:
            for e in errors:
                console.print(f"  - {e}", style="red", markup=False, soft_wrap=True)
        return 1
    console.print(f"✓ Verify {contract_path.name}: OK", style="green")
    return 0
