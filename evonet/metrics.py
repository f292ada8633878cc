"""Per-generation fitness statistics written to CSV."""

from __future__ import annotations

import csv
from collections.abc import Sequence
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from statistics import mean, median
from typing import Any, IO


@dataclass(frozen=True, slots=True)
class MetricsRow:
    """Aggregate statistics recorded after each evaluation pass."""

    generation: int
    population_size: int
    best_fitness: float
    mean_fitness: float
    median_fitness: float
    eval_time_s: float

    @classmethod
    def from_fitnesses(
        cls,
        generation: int,
        fitnesses: Sequence[float],
        *,
        eval_time_s: float,
    ) -> MetricsRow:
        if not fitnesses:
            msg = "Cannot summarise an empty generation."
            raise ValueError(msg)
        return cls(
            generation=generation,
            population_size=len(fitnesses),
            best_fitness=max(fitnesses),
            mean_fitness=mean(fitnesses),
            median_fitness=median(fitnesses),
            eval_time_s=eval_time_s,
        )


class MetricsWriter:
    """CSV writer that appends one row per generation and flushes eagerly."""

    _fieldnames = [item.name for item in fields(MetricsRow)]

    def __init__(self, path: Path) -> None:
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        exists = self._path.exists()
        self._handle: IO[str] = self._path.open(
            "a" if exists else "w", encoding="utf-8", newline=""
        )
        self._writer = csv.DictWriter(self._handle, fieldnames=self._fieldnames)
        if not exists:
            self._writer.writeheader()
            self._handle.flush()

    def __enter__(self) -> MetricsWriter:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        exc_tb: Any,
    ) -> None:
        self.close()

    def append(self, row: MetricsRow) -> None:
        self._writer.writerow(asdict(row))
        self._handle.flush()

    def close(self) -> None:
        if not self._handle.closed:
            self._handle.close()

    @property
    def path(self) -> Path:
        return self._path


__all__ = ["MetricsRow", "MetricsWriter"]
