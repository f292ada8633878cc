"""Timestamped event log for one evolution run (``events.log``).

Besides free-form lines, the logger knows the run's recurring events: the
population plan it starts from, every new champion, and the fitness summary of
each evaluated generation.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timezone
from pathlib import Path

from .metrics import MetricsRow
from .population import GenerationPlan


class EventLogger:
    """Append-only log where every line starts with a UTC ISO timestamp."""

    def __init__(self, path: Path) -> None:
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._handle = self._path.open("a", encoding="utf-8")

    def __enter__(self) -> EventLogger:
        return self

    def __exit__(self, exc_type, exc, exc_tb) -> None:
        self.close()

    def log(self, message: str) -> None:
        timestamp = datetime.now(timezone.utc).isoformat()
        self._handle.write(f"{timestamp} {message}\n")
        self._handle.flush()

    def log_setup(
        self, task: str, layer_shape: Sequence[int], plan: GenerationPlan
    ) -> None:
        self.log(
            f"Config -> task={task} shape={list(layer_shape)} "
            f"population={plan.total} keep={plan.keep} mutate={plan.mutate} "
            f"breed={plan.breed} random={plan.random}"
        )

    def log_champion(self, generation: int, fitness: float) -> None:
        self.log(
            f"New champion at generation {generation} (fitness={fitness:.4f})."
        )

    def log_generation(self, row: MetricsRow) -> None:
        """Record the fitness summary of one evaluated generation."""
        self.log(
            f"Generation {row.generation}: best={row.best_fitness:.4f} "
            f"mean={row.mean_fitness:.4f} median={row.median_fitness:.4f} "
            f"networks={row.population_size} eval={row.eval_time_s:.3f}s"
        )

    def close(self) -> None:
        if not self._handle.closed:
            self._handle.close()

    @property
    def path(self) -> Path:
        return self._path


__all__ = ["EventLogger"]
