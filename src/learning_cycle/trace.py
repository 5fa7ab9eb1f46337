"""
trace.py — Lightweight audit log for process runs
=================================================
The engine emits a ``StepRun`` record for every dispatch and collects them
into the ``RunTrace`` of the current run.  The CLI renders the trace as a
rich table on exit; listeners subscribed to the engine receive each record
as it is produced.

Data model
----------
  StepRun       One dispatch: step, triggering event, emitted event, timing.
  RunTrace      Full trace for a single ``ProcessEngine.start`` call.

Key fields
----------
  StepRun.status        "emitted" | "halted" (no event) | "failed" (raised)
  StepRun.duration_ms   Wall-clock milliseconds for that dispatch, human
                        think-time included
  RunTrace.total_ms     Sum of all dispatch durations
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from rich import box
from rich.table import Table


@dataclass
class StepRun:
    """One step dispatch inside a process run."""
    step_name:    str
    trigger:      str              # event that caused the dispatch
    emitted:      Optional[str]    # event the step emitted, if any
    started_at:   str
    duration_ms:  float
    status:       str              # "emitted" | "halted" | "failed"
    detail:       str = ""


@dataclass
class RunTrace:
    """Full trace for a single process run."""
    run_id:     str = field(default_factory=lambda: str(uuid.uuid4())[:8].upper())
    started_at: str = field(default_factory=lambda: datetime.now().strftime("%Y-%m-%d %H:%M:%S"))
    steps:      list[StepRun] = field(default_factory=list)

    def append(self, step: StepRun) -> None:
        self.steps.append(step)

    @property
    def total_ms(self) -> float:
        return sum(s.duration_ms for s in self.steps)

    def events(self) -> list[str]:
        """Emitted event names, in order."""
        return [s.emitted for s in self.steps if s.emitted]

    def to_table(self) -> Table:
        table = Table(title=f"Run {self.run_id} — started {self.started_at}", box=box.SIMPLE_HEAVY)
        table.add_column("#", justify="right")
        table.add_column("Step")
        table.add_column("Trigger")
        table.add_column("Emitted")
        table.add_column("Status")
        table.add_column("ms", justify="right")
        for i, s in enumerate(self.steps, 1):
            table.add_row(str(i), s.step_name, s.trigger, s.emitted or "—", s.status, f"{s.duration_ms:.0f}")
        return table
