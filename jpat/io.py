from __future__ import annotations
import json
from pathlib import Path
from typing import Any, List, Tuple

def ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)

def read_json(p: Path) -> Any:
    return json.loads(Path(p).read_text(encoding="utf-8"))

def write_json(p: Path, obj: Any) -> None:
    p = Path(p)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(json.dumps(obj, ensure_ascii=False, indent=2), encoding="utf-8")

def read_jsonl(p: Path) -> List[Tuple[int, Any]]:
    """Rows of a JSONL file as (line number, value), skipping blank lines and // comments"""
    rows: List[Tuple[int, Any]] = []
    for i, raw in enumerate(Path(p).read_text(encoding="utf-8").splitlines(), 1):
        s = raw.strip()
        if not s or s.startswith("//"):
            continue
        try:
            rows.append((i, json.loads(s)))
        except json.JSONDecodeError as e:
            raise ValueError(f"{p}:{i}: invalid JSON: {e}")
    return rows
