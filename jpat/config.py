from __future__ import annotations
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Dict, Optional

DEFAULT_REPORT_DIR = "build/report"
DEFAULT_MAX_FAILURES = 50

def _env_flag(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).strip().lower() in ("1", "true", "yes", "on")

@dataclass
class CheckConfig:
    report_dir: Path
    verbose: bool = False
    max_failures_shown: int = DEFAULT_MAX_FAILURES

    @staticmethod
    def from_env() -> "CheckConfig":
        root = Path(os.environ.get("JPAT_REPORT_DIR", DEFAULT_REPORT_DIR))
        raw_max = os.environ.get("JPAT_MAX_FAILURES", str(DEFAULT_MAX_FAILURES))
        try:
            max_failures = int(raw_max)
        except ValueError:
            raise ValueError(f"JPAT_MAX_FAILURES must be an integer, got {raw_max!r}")
        return CheckConfig(
            report_dir=root,
            verbose=_env_flag("JPAT_VERBOSE"),
            max_failures_shown=max_failures,
        )

    def with_overrides(self, report_dir: Optional[str] = None, verbose: bool = False) -> "CheckConfig":
        """CLI flags win over the environment"""
        cfg = self
        if report_dir:
            cfg = replace(cfg, report_dir=Path(report_dir))
        if verbose:
            cfg = replace(cfg, verbose=True)
        return cfg

    def as_dict(self) -> Dict[str, str]:
        return {
            "report_dir": str(self.report_dir),
            "verbose": str(self.verbose).lower(),
            "max_failures_shown": str(self.max_failures_shown),
        }
