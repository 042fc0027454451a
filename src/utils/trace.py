"""Tracing module: logs pipeline and solver steps and writes them to CSV."""

import csv
import threading
from dataclasses import dataclass, asdict
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional


@dataclass
class TraceStep:
    """A single step in the checking pipeline."""

    timestamp: float
    step_number: int
    action_type: str  # 'compile', 'assign', 'backtrack', 'domain_reduced', 'ac3', 'aggregate', etc.
    variable: Optional[str] = None
    value: Optional[Any] = None
    domain_size: Optional[int] = None
    assignment_size: Optional[int] = None  # Number of lines placed
    model_count: Optional[int] = None
    reason: Optional[str] = None  # Why backtracking occurred, etc.


class Tracer:
    """Records pipeline steps for logging and analysis."""

    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self.steps: List[TraceStep] = []
        self.start_time = datetime.now().timestamp()
        self.step_counter = 0
        # Solves run in worker threads while compiles log from the event loop.
        self._lock = threading.Lock()

    def _get_timestamp(self) -> float:
        """Get elapsed time in seconds since tracer creation."""
        return datetime.now().timestamp() - self.start_time

    def _record(self, action_type: str, **fields: Any) -> None:
        if not self.enabled:
            return
        with self._lock:
            self.step_counter += 1
            self.steps.append(TraceStep(
                timestamp=self._get_timestamp(),
                step_number=self.step_counter,
                action_type=action_type,
                **fields,
            ))

    def log_compile(self, fact_count: int):
        """Log a specification compile."""
        self._record('compile', reason=f"Emitted {fact_count} clue facts")

    def log_assign(self, variable: str, value: Any, domain_size: int, assignment_size: int):
        """Log a line placement."""
        self._record(
            'assign',
            variable=variable,
            value=str(value),
            domain_size=domain_size,
            assignment_size=assignment_size,
        )

    def log_backtrack(self, variable: str, reason: str = "No valid values"):
        """Log a backtrack event."""
        self._record('backtrack', variable=variable, reason=reason)

    def log_domain_reduction(self, variable: str, new_domain_size: int, reason: str = ""):
        """Log domain reduction for a variable."""
        self._record('domain_reduced', variable=variable, domain_size=new_domain_size, reason=reason)

    def log_ac3_run(self, variables_affected: int, arcs_processed: int):
        """Log an AC-3 arc consistency pass."""
        self._record('ac3', reason=f"Affected {variables_affected} vars, processed {arcs_processed} arcs")

    def log_forward_check(self, variable: str, domains_pruned: int):
        """Log forward checking."""
        self._record(
            'forward_check',
            variable=variable,
            reason=f"Pruned {domains_pruned} placements from crossing lines",
        )

    def log_solution_found(self, assignment_size: int, model_count: int):
        """Log when a model is found."""
        self._record('solution_found', assignment_size=assignment_size, model_count=model_count)

    def log_aggregate(self, classification: str, model_count: int):
        """Log the classification of a model set."""
        self._record('aggregate', value=classification, model_count=model_count)

    def to_csv(self, filepath: Path) -> None:
        """Write trace to CSV file."""
        if not self.steps:
            print("No trace steps to write")
            return

        filepath = Path(filepath)
        filepath.parent.mkdir(parents=True, exist_ok=True)

        fieldnames = [
            'timestamp', 'step_number', 'action_type', 'variable', 'value',
            'domain_size', 'assignment_size', 'model_count', 'reason'
        ]

        with open(filepath, 'w', newline='', encoding='utf-8') as f:
            writer = csv.DictWriter(f, fieldnames=fieldnames)
            writer.writeheader()
            for step in self.steps:
                writer.writerow(asdict(step))

        print(f"Trace written to {filepath} ({len(self.steps)} steps)")

    def summary(self) -> Dict[str, Any]:
        """Get a summary of the trace."""
        action_counts = {}
        for step in self.steps:
            action_counts[step.action_type] = action_counts.get(step.action_type, 0) + 1

        return {
            'total_steps': len(self.steps),
            'elapsed_time_seconds': self._get_timestamp(),
            'action_counts': action_counts,
            'num_assignments': action_counts.get('assign', 0),
            'num_backtracks': action_counts.get('backtrack', 0),
            'num_models': action_counts.get('solution_found', 0),
        }


# Global tracer instance
_global_tracer: Optional[Tracer] = None


def get_tracer() -> Tracer:
    """Get or create the global tracer."""
    global _global_tracer
    if _global_tracer is None:
        _global_tracer = Tracer(enabled=True)
    return _global_tracer


def reset_tracer() -> None:
    """Reset the global tracer."""
    global _global_tracer
    _global_tracer = None


def enable_tracing(enabled: bool = True) -> None:
    """Enable or disable tracing."""
    get_tracer().enabled = enabled
