# src/delegation_hub/core/controller.py

"""
Run controller: lifecycle of one delegation run.

    idle --trigger--> scanning --step--> extracting --step--> notifying
      ^                   |                  |                    |
      |                   +------ call settles / times out / fails +--> complete
      +---------------------------- reset delay ------------------------------+

The scanning -> extracting -> notifying steps are display-only timers; the
remote call reports no progress. Settlement always wins: pending step timers
are cancelled before the outcome is applied, so a late step can never
overwrite the terminal phase. A single run is supported; triggering while one
is in flight is ignored.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Sequence
from dataclasses import dataclass, replace

from ..config import DEFAULT_KEYWORDS, DEFAULT_MANAGER_AGENT_ID
from .agents import build_run_instruction
from .classifier import (
    Classification,
    GenericComplete,
    IntegrationAuthError,
    StructuredSuccess,
    TextSuccess,
    classify_response,
)
from .errors import DEFAULT_FAILURE_MESSAGE, NETWORK_ERROR_MESSAGE, AgentTransportError, timeout_message
from .history import HistoryLedger
from .models import NotificationStatus, ProcessingPhase, RunResult
from .ports import AgentClient, SnapshotListener
from .retry import RetryOutcome, request_retry
from .state import (
    DashboardSnapshot,
    OutcomeKind,
    RunOutcome,
    RunState,
    advance_phase,
    apply_outcome,
    begin_run,
    finish_run,
    reset_to_idle,
    snapshot,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RunTimings:
    request_timeout_seconds: float = 90.0
    phase_step_seconds: float = 2.0
    complete_reset_seconds: float = 3.0

    @classmethod
    def from_settings(cls, settings) -> RunTimings:
        return cls(
            request_timeout_seconds=float(getattr(settings, "request_timeout_seconds", 90.0)),
            phase_step_seconds=float(getattr(settings, "phase_step_seconds", 2.0)),
            complete_reset_seconds=float(getattr(settings, "complete_reset_seconds", 3.0)),
        )


def outcome_from_classification(classification: Classification) -> RunOutcome:
    if isinstance(classification, StructuredSuccess):
        return RunOutcome(
            kind=OutcomeKind.STRUCTURED,
            result=RunResult(
                stats=classification.stats,
                items=classification.items,
                summary=classification.summary,
            ),
        )
    if isinstance(classification, TextSuccess):
        return RunOutcome(kind=OutcomeKind.TEXT, result=RunResult(None, (), classification.summary))
    if isinstance(classification, GenericComplete):
        return RunOutcome(kind=OutcomeKind.GENERIC, result=RunResult(None, (), classification.summary))
    if isinstance(classification, IntegrationAuthError):
        return RunOutcome(kind=OutcomeKind.INTEGRATION_AUTH, error=classification.message)
    return RunOutcome(kind=OutcomeKind.REMOTE_FAILURE, error=classification.message)


class RunController:
    """
    Sole writer of the run state during a run.

    Must be driven from inside a running event loop. Call aclose() on teardown
    so no timer fires after the owning scope is gone.
    """

    def __init__(
        self,
        client: AgentClient,
        *,
        agent_id: str = DEFAULT_MANAGER_AGENT_ID,
        timings: RunTimings | None = None,
        keywords: Sequence[str] = DEFAULT_KEYWORDS,
        show_sample: bool = False,
        history: HistoryLedger | None = None,
    ) -> None:
        self._client = client
        self._agent_id = agent_id
        self._timings = timings or RunTimings()
        self._keywords = tuple(keywords)
        self._instruction = build_run_instruction(self._keywords)

        self._state = RunState(show_sample=show_sample)
        self._history = history if history is not None else HistoryLedger()

        self._phase_timers: list[asyncio.TimerHandle] = []
        self._reset_timer: asyncio.TimerHandle | None = None
        self._run_task: asyncio.Task[RunOutcome] | None = None

        # Bumped on every run start; a retry that straddles a run start must not
        # write into the new run's items.
        self._generation = 0
        self._retry_in_flight = False

        self._listeners: list[SnapshotListener] = []
        self._closed = False

    # ---- read side ----

    @property
    def agent_id(self) -> str:
        return self._agent_id

    @property
    def instruction(self) -> str:
        return self._instruction

    @property
    def history(self) -> HistoryLedger:
        return self._history

    @property
    def timings(self) -> RunTimings:
        return self._timings

    @property
    def is_running(self) -> bool:
        return self._state.processing

    @property
    def is_retrying(self) -> bool:
        return self._retry_in_flight

    def snapshot(self) -> DashboardSnapshot:
        return snapshot(self._state, self._history.entries(), keywords=self._keywords)

    def subscribe(self, listener: SnapshotListener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: SnapshotListener) -> None:
        with contextlib.suppress(ValueError):
            self._listeners.remove(listener)

    # ---- run ----

    def trigger(self) -> asyncio.Task[RunOutcome] | None:
        """
        Start a run. Phase is 'scanning' when this returns.

        Returns the task carrying the network call, or None when a run is
        already in progress (the trigger is ignored, nothing is queued).
        """
        if self._closed:
            raise RuntimeError("RunController is closed.")
        if self._state.processing:
            logger.debug("Run trigger ignored: a run is already in progress.")
            return None

        loop = asyncio.get_running_loop()

        self._cancel_reset_timer()
        self._cancel_phase_timers()
        self._generation += 1
        begin_run(self._state, self._agent_id)

        step = self._timings.phase_step_seconds
        self._phase_timers = [
            loop.call_later(step, self._on_phase_timer, ProcessingPhase.EXTRACTING),
            loop.call_later(step * 2, self._on_phase_timer, ProcessingPhase.NOTIFYING),
        ]
        logger.info("Run started (agent=%s, timeout=%.0fs)", self._agent_id, self._timings.request_timeout_seconds)
        self._notify()

        task = loop.create_task(self._run(), name="delegation-run")
        self._run_task = task
        task.add_done_callback(self._on_run_task_done)
        return task

    async def start_run(self) -> RunOutcome | None:
        task = self.trigger()
        if task is None:
            return None
        return await task

    async def _run(self) -> RunOutcome:
        loop = asyncio.get_running_loop()
        t0 = loop.time()
        deadline = asyncio.timeout(self._timings.request_timeout_seconds)

        try:
            try:
                async with deadline:
                    envelope = await self._client.invoke_agent(self._instruction, self._agent_id)
            except TimeoutError:
                self._cancel_phase_timers()
                if deadline.expired():
                    logger.warning("Run timed out after %.1fs", loop.time() - t0)
                    outcome = RunOutcome(
                        kind=OutcomeKind.TIMEOUT,
                        error=timeout_message(self._timings.request_timeout_seconds),
                    )
                else:
                    logger.warning("Agent call raised a timeout of its own", exc_info=True)
                    outcome = RunOutcome(kind=OutcomeKind.TRANSPORT, error=NETWORK_ERROR_MESSAGE)
            except AgentTransportError as e:
                self._cancel_phase_timers()
                logger.warning("Agent call failed: %s", e)
                outcome = RunOutcome(kind=OutcomeKind.TRANSPORT, error=NETWORK_ERROR_MESSAGE)
            except Exception:
                self._cancel_phase_timers()
                logger.exception("Agent call crashed")
                outcome = RunOutcome(kind=OutcomeKind.TRANSPORT, error=NETWORK_ERROR_MESSAGE)
            else:
                self._cancel_phase_timers()
                outcome = self._classify(envelope)
        except asyncio.CancelledError:
            # Teardown: no terminal display, no reset timer.
            self._cancel_phase_timers()
            self._state.active_agent_id = None
            self._state.processing = False
            raise

        try:
            apply_outcome(self._state, outcome)
            if outcome.kind.is_success and outcome.result is not None:
                self._history.record(outcome.result)
        finally:
            # Every settled run ends in 'complete' with the flags cleared.
            finish_run(self._state)
            self._schedule_reset()

        logger.info(
            "Run finished kind=%s items=%d elapsed=%.2fs",
            outcome.kind.value,
            len(outcome.result.items) if outcome.result is not None else 0,
            loop.time() - t0,
        )
        self._notify()
        return outcome

    def _classify(self, envelope: object) -> RunOutcome:
        try:
            return outcome_from_classification(classify_response(envelope))
        except Exception:
            logger.exception("Could not interpret the agent response")
            return RunOutcome(kind=OutcomeKind.REMOTE_FAILURE, error=DEFAULT_FAILURE_MESSAGE)

    def _on_run_task_done(self, task: asyncio.Task[RunOutcome]) -> None:
        if self._run_task is task:
            self._run_task = None

    def _on_phase_timer(self, phase: ProcessingPhase) -> None:
        if advance_phase(self._state, phase):
            logger.debug("Phase -> %s", phase.value)
            self._notify()

    def _on_reset_timer(self) -> None:
        self._reset_timer = None
        if reset_to_idle(self._state):
            logger.debug("Phase -> idle")
            self._notify()

    def _schedule_reset(self) -> None:
        self._cancel_reset_timer()
        loop = asyncio.get_running_loop()
        self._reset_timer = loop.call_later(self._timings.complete_reset_seconds, self._on_reset_timer)

    def _cancel_phase_timers(self) -> None:
        for handle in self._phase_timers:
            handle.cancel()
        self._phase_timers = []

    def _cancel_reset_timer(self) -> None:
        if self._reset_timer is not None:
            self._reset_timer.cancel()
            self._reset_timer = None

    # ---- retry ----

    async def retry(self, index: int) -> RetryOutcome:
        """
        Resend the notification of items[index].

        On success only that item's notification_status becomes 'sent'. On
        failure nothing changes and no error is shown; the outcome carries
        the reason. Overlapping retries and retries during a run are rejected.
        """
        if self._state.processing:
            return RetryOutcome.rejected("a run is in progress")
        if self._retry_in_flight:
            return RetryOutcome.rejected("another retry is in flight")
        if not 0 <= index < len(self._state.items):
            return RetryOutcome.rejected(f"no item at index {index}")

        item = self._state.items[index]
        generation = self._generation

        self._retry_in_flight = True
        self._state.active_agent_id = self._agent_id
        self._notify()
        try:
            outcome = await request_retry(
                self._client,
                item,
                agent_id=self._agent_id,
                timeout_seconds=self._timings.request_timeout_seconds,
            )
        finally:
            self._retry_in_flight = False
            if generation == self._generation:
                self._state.active_agent_id = None

        if not outcome.ok:
            logger.info("Retry failed index=%d task=%r: %s", index, item.title, outcome.error)
        elif generation != self._generation:
            logger.info("Retry succeeded index=%d but a new run started; item left unchanged", index)
        elif index < len(self._state.items):
            current = self._state.items[index]
            self._state.items[index] = replace(current, notification_status=NotificationStatus.SENT)
            logger.info("Retry succeeded index=%d task=%r", index, item.title)

        self._notify()
        return outcome

    # ---- UI selection ----

    def expand(self, index: int | None) -> None:
        self._state.expanded_index = index
        self._notify()

    def collapse(self) -> None:
        self.expand(None)

    def set_show_sample(self, enabled: bool) -> None:
        self._state.show_sample = bool(enabled)
        self._notify()

    # ---- teardown ----

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True

        self._cancel_phase_timers()
        self._cancel_reset_timer()

        task = self._run_task
        if task is not None and not task.done():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task

        await self._client.aclose()
        self._listeners.clear()
        logger.debug("RunController closed.")

    def _notify(self) -> None:
        if not self._listeners:
            return
        snap = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snap)
            except Exception:
                logger.exception("Snapshot listener failed.")
