"""Run summary model and serialization."""

import json
import math
import os
import uuid
from dataclasses import dataclass, field, asdict
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Any


def _sanitize_for_json(obj: Any) -> Any:
    """Recursively replace NaN/Inf and numpy-like numbers so JSON round-trip works."""
    if isinstance(obj, dict):
        return {k: _sanitize_for_json(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_sanitize_for_json(v) for v in obj]
    if isinstance(obj, float):
        return 0.0 if (math.isnan(obj) or math.isinf(obj)) else obj
    if isinstance(obj, (int, str, type(None), bool)):
        return obj
    # numpy scalars etc.
    try:
        f = float(obj)
        if math.isnan(f) or math.isinf(f):
            return 0.0
        return f
    except (TypeError, ValueError):
        pass
    return str(obj)


@dataclass
class RunSummary:
    """Summary of an analysis run."""
    run_id: str
    profile_name: str
    output_dir: str
    started_at: str
    finished_at: Optional[str] = None
    status: str = "RUNNING"  # RUNNING, COMPLETED, FAILED

    # Statistics
    total_sources: int = 0
    ok_count: int = 0
    empty_count: int = 0
    failed_count: int = 0
    invalid_count: int = 0
    token_count: int = 0
    vocabulary_size: int = 0

    # Outputs
    tfidf_path: Optional[str] = None
    top_terms_path: Optional[str] = None
    subset: Optional[str] = None

    # Details
    errors: List[Dict[str, Any]] = field(default_factory=list)
    durations: Dict[str, float] = field(default_factory=dict)  # Stage durations

    @classmethod
    def create(cls, profile_name: str, output_dir: str) -> 'RunSummary':
        """Create a new run summary."""
        return cls(
            run_id=str(uuid.uuid4()),
            profile_name=profile_name,
            output_dir=str(output_dir),
            started_at=datetime.now().isoformat()
        )

    def record_batch(self, batch: Dict[str, Any]) -> None:
        """Copy counts and per-source errors from a build_corpus result."""
        self.total_sources = batch["total"]
        self.ok_count = batch["ok"]
        self.empty_count = batch["empty"]
        self.failed_count = batch["failed"]
        self.invalid_count = batch["invalid"]
        self.errors = [
            {"name": r["name"], "status": r["status"], "error": r["error"]}
            for r in batch["results"]
            if r.get("error")
        ]

    def complete(self, status: str = "COMPLETED"):
        """Mark run as completed."""
        self.status = status
        self.finished_at = datetime.now().isoformat()

    def save(self, path: Path):
        """Save summary to JSON file (atomic write to avoid truncated file on interrupt)."""
        path = Path(path)
        data = _sanitize_for_json(asdict(self))
        tmp = path.with_suffix(path.suffix + ".tmp")
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        os.replace(tmp, path)

    @classmethod
    def load(cls, path: Path) -> 'RunSummary':
        """Load summary from JSON file."""
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return cls(**data)
