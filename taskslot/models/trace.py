"""Decision trace models for observability."""

from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Dict, List, Optional, Any


@dataclass
class PlacementDecision:
    """Records what happened to one task during a placement pass."""

    task_id: str
    task_name: str
    priority: int
    total_minutes: int
    start: Optional[datetime]
    end: Optional[datetime]
    reason: str
    constraint_applied: Optional[str] = None


@dataclass
class DecisionTrace:
    """Complete trace of a placement pass.

    Holds no wall-clock values so that equal inputs give equal traces;
    ``run_id`` is stamped by whoever persists the trace.
    """

    policy_name: str
    horizon_start: Optional[datetime]
    horizon_end: Optional[datetime]
    config: Dict[str, Any]
    decisions: List[PlacementDecision]
    summary_stats: Dict[str, Any]
    run_id: Optional[str] = field(default=None, compare=False)

    def to_dict(self) -> Dict[str, Any]:
        """Convert trace to dictionary for JSON export."""
        return asdict(self)

    def to_human_readable(self) -> str:
        """Generate human-readable log format."""
        lines = [
            f"=== Scheduling Run: {self.run_id or '-'} ===",
            f"Policy: {self.policy_name}",
            f"Horizon: {self.horizon_start} -> {self.horizon_end}",
            "",
            "Configuration:",
        ]

        for key, value in self.config.items():
            lines.append(f"  {key}: {value}")

        lines.extend([
            "",
            "Placement Decisions:",
        ])

        for decision in self.decisions:
            if decision.start is not None:
                lines.append(
                    f"  {decision.task_name} (p{decision.priority}) -> "
                    f"{decision.start:%Y-%m-%d %H:%M}-{decision.end:%H:%M}"
                )
            else:
                lines.append(f"  {decision.task_name} (p{decision.priority}) -> unscheduled")
            lines.append(f"    Total: {decision.total_minutes} min")
            lines.append(f"    Reason: {decision.reason}")
            if decision.constraint_applied:
                lines.append(f"    Constraint: {decision.constraint_applied}")

        lines.extend([
            "",
            "Summary Statistics:",
        ])

        for key, value in self.summary_stats.items():
            lines.append(f"  {key}: {value}")

        lines.append("=" * 50)

        return "\n".join(lines)
