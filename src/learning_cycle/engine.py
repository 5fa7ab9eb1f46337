"""
engine.py — Event-driven step scheduler
=======================================
The ``ProcessEngine`` is a finite-state-machine driver: the current state is
"whichever step is executing", transitions are the registered event
bindings.  It owns no domain logic.

Contract
--------
  register(step)                     add a step (unique name)
  bind(event, step, parameter=None)  route *event* to *step*, passing the
                                     event payload as keyword *parameter*
  bind_terminal(event)               *event* intentionally ends its branch
  validate()                         every event a registered step can emit
                                     is bound or terminal
  start(event, payload=None)         run the event loop from *event*

Event loop
----------
  pop event → look up transition → restore the target step's StepState →
  execute → snapshot StepState → queue the emitted event → repeat

  The loop ends when nothing is pending or ``stop()`` is called (for
  instance by a subscribed listener).  A step may re-target itself and may
  be the target of several events; neither is special-cased.  There are no
  timeouts: a step may block on human input indefinitely.

Failure modes
-------------
  * start() with an event that has no binding    → ConfigurationError
  * an emittable event with no binding           → ConfigurationError at
                                                   validate()/start()
  * a step that emits nothing                    → dispatch logged as
                                                   "halted"; branch ends
  * an exception inside a step                   → recorded as "failed"
                                                   in the trace, re-raised
"""

from __future__ import annotations

import logging
import time
from collections import deque
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Optional

from learning_cycle.errors import ConfigurationError
from learning_cycle.events import ProcessEvent
from learning_cycle.step import ProcessStep, StepContext, StepState
from learning_cycle.trace import RunTrace, StepRun

logger = logging.getLogger(__name__)

Listener = Callable[[StepRun, Any], None]


@dataclass(frozen=True)
class Transition:
    event:     ProcessEvent
    step_name: Optional[str]     # None marks a terminal event
    parameter: Optional[str] = None

    @property
    def terminal(self) -> bool:
        return self.step_name is None


class ProcessEngine:
    """Registers steps, holds the transition table and runs the event loop."""

    def __init__(self, name: str = "LearningCycle") -> None:
        self.name = name
        self._steps:       dict[str, ProcessStep] = {}
        self._transitions: dict[ProcessEvent, Transition] = {}
        self._states:      dict[str, StepState] = {}
        self._listeners:   list[Listener] = []
        self._stopped = False
        self.trace = RunTrace()

    # ── Wiring ───────────────────────────────────────────────────────────────

    def register(self, step: ProcessStep) -> ProcessStep:
        if not step.name:
            raise ConfigurationError(f"{type(step).__name__} has no step name")
        if step.name in self._steps:
            raise ConfigurationError(f"step {step.name!r} is already registered")
        self._steps[step.name] = step
        return step

    def bind(self, event: ProcessEvent, step: ProcessStep, parameter: Optional[str] = None) -> None:
        if self._steps.get(step.name) is not step:
            raise ConfigurationError(f"step {step.name!r} must be registered before binding")
        if parameter != step.parameter:
            raise ConfigurationError(
                f"{event.value} → {step.name}: parameter {parameter!r} does not match "
                f"the step's input {step.parameter!r}"
            )
        self._add(Transition(event, step.name, parameter))

    def bind_terminal(self, event: ProcessEvent) -> None:
        self._add(Transition(event, None))

    def _add(self, transition: Transition) -> None:
        if transition.event in self._transitions:
            raise ConfigurationError(f"event {transition.event.value} is already bound")
        self._transitions[transition.event] = transition

    @property
    def steps(self) -> dict[str, ProcessStep]:
        return dict(self._steps)

    @property
    def transitions(self) -> dict[ProcessEvent, Transition]:
        return dict(self._transitions)

    def validate(self) -> None:
        unbound = sorted(
            f"{step.name}:{event.value}"
            for step in self._steps.values()
            for event in step.emits
            if event not in self._transitions
        )
        if unbound:
            raise ConfigurationError("unbound events: " + ", ".join(unbound))

    # ── Listeners / control ──────────────────────────────────────────────────

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def stop(self) -> None:
        """Terminate the run after the current dispatch."""
        self._stopped = True

    # ── State snapshots ──────────────────────────────────────────────────────

    def state_snapshot(self) -> dict[str, dict]:
        """JSON-ready copy of every step's StepState."""
        return {name: state.model_dump(mode="json") for name, state in self._states.items()}

    def restore_state_snapshot(self, snapshot: dict[str, dict]) -> None:
        self._states = {name: StepState.model_validate(data) for name, data in snapshot.items()}

    def step_state(self, name: str) -> Optional[StepState]:
        return self._states.get(name)

    # ── Event loop ───────────────────────────────────────────────────────────

    def start(self, initial_event: ProcessEvent, payload: Any = None) -> RunTrace:
        self.validate()
        first = self._transitions.get(initial_event)
        if first is None or first.terminal:
            raise ConfigurationError(f"process cannot start: {initial_event.value} is not bound to a step")

        self._stopped = False
        self.trace = RunTrace()
        logger.info("Process %s started with %s (run %s)", self.name, initial_event.value, self.trace.run_id)

        pending: deque[tuple[ProcessEvent, Any]] = deque([(initial_event, payload)])
        while pending and not self._stopped:
            event, data = pending.popleft()
            transition = self._transitions.get(event)
            if transition is None:
                logger.warning("No transition bound for %s; branch ends", event.value)
                continue
            if transition.terminal:
                logger.info("%s is terminal; branch ends", event.value)
                continue
            emitted = self._dispatch(transition, data)
            if emitted is not None:
                pending.append(emitted)

        logger.info("Process %s finished after %d dispatch(es)", self.name, len(self.trace.steps))
        return self.trace

    def _dispatch(self, transition: Transition, payload: Any) -> Optional[tuple[ProcessEvent, Any]]:
        step = self._steps[transition.step_name]
        step.activate(self._states.get(step.name))
        context = StepContext(step)
        kwargs = {transition.parameter: payload} if transition.parameter else {}

        started_at = datetime.now().isoformat(timespec="seconds")
        t0 = time.perf_counter()
        status, detail = "failed", ""
        try:
            step.execute(context, **kwargs)
            status = "emitted" if context.emitted else "halted"
        except Exception as exc:
            detail = f"{type(exc).__name__}: {exc}"
            raise
        finally:
            self._states[step.name] = step.snapshot()
            run = StepRun(
                step_name   = step.name,
                trigger     = transition.event.value,
                emitted     = context.event.value if context.event else None,
                started_at  = started_at,
                duration_ms = (time.perf_counter() - t0) * 1000,
                status      = status,
                detail      = detail,
            )
            self.trace.append(run)
            if status == "halted":
                logger.warning("%s emitted no event; the process halts here", step.name)
            for listener in self._listeners:
                listener(run, context.payload)

        return (context.event, context.payload) if context.emitted else None
