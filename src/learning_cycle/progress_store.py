"""
progress_store.py — Durable single-record progress persistence
==============================================================
Stores the one ``ProgressState`` that lets a multi-hour, human-paced
learning cycle survive a process restart.

Record format
-------------
  {
    "LearningType": "New" | "Mandatory",
    "LearningPlan": {
      "Resources": [
        {"Id": "<guid>", "Title": "...", "Url": "...", "Type": "...",
         "Description": "...", "EstimatedMinutes": 30 | null,
         "IsComplete": false, "IsExamScope": true}
      ]
    }
  }

Semantics
---------
  save()    overwrite unconditionally (last write wins, no versioning)
  load()    None when no record exists or it cannot be read
  delete()  remove the record; no-op when absent

There is no locking.  One workflow instance per record location.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from learning_cycle.models import ProgressState

logger = logging.getLogger(__name__)


class ProgressStore:
    """JSON file holding at most one ProgressState."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.is_file()

    def save(self, state: ProgressState) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        # Written beside the record, then swapped in whole.
        tmp = self._path.with_name(self._path.name + ".tmp")
        tmp.write_text(json.dumps(state.to_wire(), indent=2), encoding="utf-8")
        os.replace(tmp, self._path)
        logger.info(
            "Progress saved to %s (%s, %d resources)",
            self._path, state.learning_type.value, len(state.learning_plan.resources),
        )

    def load(self) -> Optional[ProgressState]:
        if not self.exists():
            return None
        try:
            return ProgressState.model_validate(json.loads(self._path.read_text(encoding="utf-8")))
        except (json.JSONDecodeError, ValidationError, OSError) as exc:
            logger.warning("Ignoring unreadable progress record %s: %s", self._path, exc)
            return None

    def delete(self) -> None:
        if self.exists():
            self._path.unlink()
            logger.info("Progress record %s deleted", self._path)
