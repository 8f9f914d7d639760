"""
Run reports: structured records of the effects a driver triggered.
"""

import json
import uuid
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional


@dataclass
class StepReport:
    """Report for a single triggered effect."""

    step_number: int
    effect_kind: str
    description: str
    duration_ms: float
    success: bool
    error: Optional[str] = None


@dataclass
class RunReport:
    """Report for one workflow run."""

    workflow: str
    run_id: str = field(default_factory=lambda: f"run_{uuid.uuid4().hex[:8]}")
    timestamp: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
    steps: List[StepReport] = field(default_factory=list)
    execution_time_ms: float = 0.0
    completed: bool = False
    error: Optional[str] = None

    @property
    def total_steps(self) -> int:
        return len(self.steps)

    @property
    def success(self) -> bool:
        return self.completed and self.error is None

    def to_dict(self) -> Dict[str, Any]:
        """Convert report to dictionary for JSON serialization."""
        return asdict(self)

    def to_json(self, indent: int = 2) -> str:
        """Convert report to JSON string."""
        return json.dumps(self.to_dict(), indent=indent, default=str)

    def get_summary(self) -> Dict[str, Any]:
        """Get a summary of the run."""
        return {
            "run_id": self.run_id,
            "workflow": self.workflow,
            "timestamp": self.timestamp,
            "total_steps": self.total_steps,
            "failed_steps": sum(1 for step in self.steps if not step.success),
            "execution_time_ms": self.execution_time_ms,
            "success": self.success,
        }


def save_json_report(report: RunReport, output_path: str) -> None:
    """Save a run report as JSON."""
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(report.to_json(), encoding="utf-8")
