"""
Recording Orchestrator

Drives one capture cycle per attempt:

    IDLE --start--> ARMED --decision--> TRIMMING --pipeline done--> IDLE

Start and decision events arrive on the event-delivery thread. The trim
pipeline (stop, settle, discover, trim, file) runs on a worker thread so
a slow FFmpeg run never delays the next attempt's start.

Control calls (reset/start, stop/reset) are serialized by one lock. The
worker keeps that lock from stop until the capture files are discovered,
so the next attempt cannot reset OBS while the previous files flush.

Captures that end up unprocessed (failed trim, failed stop, forced stop)
are moved to <capture_dir>/failed under the attempt's name, so a later
attempt never files them as its own.

In background mode status notifications go through their own queue, so
a slow sink never holds up event handling.
"""

import logging
import queue
import threading
import time
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from config.settings import (
    CAPTURE_DIR,
    FAILED_CAPTURE_SUBDIR,
    LEAD_MS,
    RAW_CAPTURE_EXTENSION,
    SETTLE_DELAY_SECONDS,
    TRIMMED_EXTENSION,
)
from control.constants import DEFAULT_HOTKEYS, ControlAction
from control.interfaces.control_client_interface import (
    ControlClientInterface,
    ControlError,
)
from core.state_store import AttemptState, LiftType, StateStore
from recording.constants import RecordingState, compute_trim_offset
from recording.interfaces.trimmer_interface import (
    FileDiscoveryError,
    TranscodeError,
    TrimmerInterface,
)
from recording.utils.recording_utils import (
    camera_index_from_path,
    discover_capture_files,
    keep_failed_capture,
    trimmed_path_for,
)
from status.constants import StatusPhase
from status.implementations.logging_sink import LoggingStatusSink
from status.interfaces.status_sink_interface import StatusSinkInterface
from storage.interfaces.storage_interface import (
    ArtifactStorageInterface,
    StorageError,
)
from storage.managers.file_organizer import format_attempt_timestamp
from storage.utils.path_utils import sanitize_name


@dataclass
class AttemptResult:
    """Outcome of one trim pipeline run."""

    descriptor: str
    artifacts: List[Path] = field(default_factory=list)
    failures: Dict[str, str] = field(default_factory=dict)
    kept: List[Path] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None and bool(self.artifacts)

    @property
    def partial(self) -> bool:
        return self.succeeded and bool(self.failures)

    def summary(self) -> str:
        if not self.succeeded:
            return f"Failed: {self.descriptor}: {self.error}"
        message = f"Videos ready: {self.descriptor}"
        if self.failures:
            total = len(self.artifacts) + len(self.failures)
            cameras = ", ".join(f"Camera{index}" for index in sorted(self.failures))
            message += f" ({len(self.failures)} of {total} cameras failed: {cameras})"
        return message


@dataclass(frozen=True)
class _AttemptJob:
    cycle: int
    state: AttemptState


class RecordingOrchestrator:
    """
    State machine tying control, trimming and storage together.

    Usage:
        orchestrator = RecordingOrchestrator(client, trimmer, organizer, store)
        orchestrator.start()

        orchestrator.on_attempt_start("Jane Doe", "SNATCH", 1, start_ms)
        orchestrator.on_decision(stop_ms)  # returns at once, trims in background

        orchestrator.force_stop()          # shutdown: stop capture, no trim
        orchestrator.shutdown()

    With background=False the pipeline runs inside on_decision (tests).
    """

    def __init__(
        self,
        control: ControlClientInterface,
        trimmer: TrimmerInterface,
        organizer: ArtifactStorageInterface,
        state_store: StateStore,
        status_sink: Optional[StatusSinkInterface] = None,
        capture_dir: Path = CAPTURE_DIR,
        raw_extension: str = RAW_CAPTURE_EXTENSION,
        trimmed_extension: str = TRIMMED_EXTENSION,
        failed_dir: Optional[Path] = None,
        hotkeys: Optional[Dict[ControlAction, str]] = None,
        lead_ms: int = LEAD_MS,
        settle_delay: float = SETTLE_DELAY_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], datetime] = datetime.now,
        background: bool = True,
    ):
        """
        Initialize recording orchestrator.

        Args:
            control: Capture tool control client
            trimmer: Trim implementation (FFmpeg or mock)
            organizer: Places finished clips
            state_store: Shared attempt state
            status_sink: Phase notifications (defaults to the log)
            capture_dir: Directory the capture tool writes into
            raw_extension: Extension of raw capture files
            trimmed_extension: Extension of trimmed clips
            failed_dir: Where unprocessed captures are kept
                (defaults to <capture_dir>/failed)
            hotkeys: Key id per action (defaults from settings)
            lead_ms: Pre-roll kept before the decision
            settle_delay: Seconds to wait for the capture tool to flush
            sleep: Pause function (injectable for tests)
            clock: Source of the per-attempt timestamp
            background: Run the pipeline on a worker thread
        """
        self.logger = logging.getLogger(__name__)

        self.control = control
        self.trimmer = trimmer
        self.organizer = organizer
        self.state_store = state_store
        self.status_sink = status_sink or LoggingStatusSink()

        self.capture_dir = Path(capture_dir)
        self.raw_extension = raw_extension
        self.trimmed_extension = trimmed_extension
        self.failed_dir = Path(failed_dir) if failed_dir else self.capture_dir / FAILED_CAPTURE_SUBDIR
        self.hotkeys = dict(DEFAULT_HOTKEYS)
        self.hotkeys.update(hotkeys or {})
        self.lead_ms = lead_ms
        self.settle_delay = settle_delay
        self._sleep = sleep
        self._clock = clock
        self.background = background

        # State machine
        self.state = RecordingState.IDLE
        self._state_lock = threading.Lock()
        self._cycle = 0  # bumped each time an attempt is armed
        self._control_lock = threading.Lock()

        # Files of the attempt being processed
        self._current_files: List[Path] = []
        self.last_result: Optional[AttemptResult] = None

        # Trim worker
        self._jobs: queue.Queue = queue.Queue()
        self._worker_thread: Optional[threading.Thread] = None
        self._running = False
        self._pending_jobs = 0
        self._pending_condition = threading.Condition()

        # Status notifier (background mode only, keeps a slow sink off the event thread)
        self._status_queue: queue.Queue = queue.Queue()
        self._status_thread: Optional[threading.Thread] = None
        self._status_thread_lock = threading.Lock()
        self._pending_status = 0

        # Callbacks
        self.on_error: Optional[Callable[[str], None]] = None
        self.on_result: Optional[Callable[[AttemptResult], None]] = None

        self.logger.info(
            f"Recording Orchestrator initialized "
            f"(captures: {self.capture_dir}, lead: {lead_ms}ms, "
            f"settle: {settle_delay:g}s)",
        )

    # =========================================================================
    # EVENT HANDLERS
    # =========================================================================

    def on_attempt_start(
        self,
        athlete: str,
        lift_type: Union[LiftType, str],
        attempt_number: int,
        start_time_ms: int,
    ) -> bool:
        """
        Arm and start the capture for a new attempt.

        Returns:
            True if the capture tool is recording, False otherwise
        """
        try:
            lift = LiftType.parse(lift_type)
            attempt_number = int(attempt_number)
            if attempt_number < 1:
                raise ValueError(f"attempt number must be positive: {attempt_number}")
        except (TypeError, ValueError) as e:
            self._report_error(f"Rejected attempt start for {athlete}: {e}")
            return False

        with self._state_lock:
            if self.state == RecordingState.ARMED:
                self.logger.warning("Attempt start while armed, re-arming capture")

        with self._control_lock:
            try:
                self._ensure_connected()
                self._trigger(ControlAction.RESET)
                self._trigger(ControlAction.START)
            except ControlError as e:
                with self._state_lock:
                    if self.state == RecordingState.ARMED:
                        self.state = RecordingState.IDLE
                self._report_error(f"Failed to start recording: {e}")
                return False

        snapshot = self.state_store.begin_attempt(
            athlete,
            lift,
            attempt_number,
            start_time_ms,
        )
        if not snapshot.has_valid_start:
            self.logger.warning("Attempt started without a valid start time, clips will not be trimmed")

        self._publish(StatusPhase.RECORDING, f"Recording: {snapshot.descriptor}")

        with self._state_lock:
            self._cycle += 1
            self.state = RecordingState.ARMED

        self.logger.info(f"Started recording: {snapshot.descriptor}")
        return True

    def on_decision(self, stop_time_ms: int) -> bool:
        """
        Stop the capture and process the attempt's clips.

        Only valid while ARMED.

        Returns:
            True if the pipeline was started (or queued)
        """
        with self._state_lock:
            if self.state != RecordingState.ARMED:
                self.logger.warning(
                    f"Decision ignored - not recording (state: {self.state.value})",
                )
                return False
            self.state = RecordingState.TRIMMING
            snapshot = self.state_store.record_stop(stop_time_ms)
            job = _AttemptJob(self._cycle, snapshot)

        self._publish(StatusPhase.TRIMMING, f"Trimming: {snapshot.descriptor}")

        if not self.background:
            self._process_job(job)
            return True

        self.start()
        with self._pending_condition:
            self._pending_jobs += 1
        self._jobs.put(job)
        return True

    def force_stop(self) -> None:
        """
        Stop the capture without trimming. Best-effort, never raises.

        No-op unless an attempt is being recorded.
        """
        with self._state_lock:
            if self.state != RecordingState.ARMED:
                self.logger.debug(
                    f"Force stop: nothing recording (state: {self.state.value})",
                )
                return
            self.state = RecordingState.IDLE
            self._cycle += 1

        self.logger.info("Forcing capture stop")
        with self._control_lock:
            try:
                self._trigger(ControlAction.STOP)
            except ControlError as e:
                self.logger.error(f"Failed to force stop recording: {e}")

            # The aborted attempt's captures must not reach the next attempt
            self._keep_leftover_captures(self.state_store.get())

    # =========================================================================
    # TRIM PIPELINE
    # =========================================================================

    def _process_job(self, job: _AttemptJob) -> AttemptResult:
        result = AttemptResult(descriptor=job.state.descriptor)
        try:
            self._run_pipeline(job.state, result)
        except ControlError as e:
            result.error = f"Failed to stop recording: {e}"
        except FileDiscoveryError as e:
            result.error = str(e)
        except Exception as e:
            self.logger.error(f"Unexpected error in trim pipeline: {e}", exc_info=True)
            result.error = f"Unexpected error: {e}"
            leftovers = [path for path in self._current_files if path.exists()]
            self._keep_captures(job.state, leftovers, self._clock(), result)

        try:
            if result.succeeded:
                self._publish(StatusPhase.READY, result.summary())
                self.logger.info(f"Processed videos: {[str(p) for p in result.artifacts]}")
            else:
                self._report_error(result.summary())

            self.last_result = result
            self._trigger_result_callback(result)
        finally:
            self._current_files = []
            self._finish_cycle(job.cycle)

        return result

    def _run_pipeline(self, state: AttemptState, result: AttemptResult) -> None:
        with self._control_lock:
            # Stop recording and release the replay source's files
            try:
                self._trigger(ControlAction.STOP)
                self._trigger(ControlAction.RESET)
            except ControlError:
                self._keep_leftover_captures(state, result)
                raise

            # Give the capture tool a moment to finish writing files
            if self.settle_delay > 0:
                self._sleep(self.settle_delay)

            self._current_files = discover_capture_files(
                self.capture_dir,
                self.raw_extension,
            )

        offset_ms = compute_trim_offset(
            state.start_time_ms,
            state.stop_time_ms,
            self.lead_ms,
        )
        if state.has_valid_start:
            self.logger.info(
                f"Trim offset {offset_ms}ms "
                f"(start {state.start_time_ms}, stop {state.stop_time_ms}, "
                f"lead {self.lead_ms})",
            )
        else:
            self.logger.warning("No valid start time, keeping full captures")

        # Shared by every camera of the attempt
        timestamp = self._clock()

        for raw_file in self._current_files:
            camera_index = camera_index_from_path(raw_file)
            trimmed = trimmed_path_for(
                self.capture_dir,
                camera_index,
                self.trimmed_extension,
            )
            self.logger.info(
                f"Trimming video for Camera {camera_index}: {state.descriptor}",
            )
            try:
                self.trimmer.trim(raw_file, offset_ms, trimmed)
                final_path = self.organizer.place(state, camera_index, trimmed, timestamp)
            except (TranscodeError, StorageError) as e:
                self.logger.error(f"Camera {camera_index} failed: {e}")
                result.failures[camera_index] = str(e)
                if raw_file.exists():
                    self._keep_captures(state, [raw_file], timestamp, result)
                continue
            result.artifacts.append(final_path)

        if not result.artifacts:
            failed = ", ".join(f"Camera{index}" for index in result.failures)
            result.error = f"All cameras failed ({failed})"

    def _keep_captures(
        self,
        state: AttemptState,
        files: List[Path],
        timestamp: datetime,
        result: Optional[AttemptResult] = None,
    ) -> None:
        """Set unprocessed captures aside under the attempt's name."""
        prefix = (
            f"{format_attempt_timestamp(timestamp)}"
            f"_{sanitize_name(state.athlete) or 'unknown'}"
            f"_{state.lift_type.value}_attempt{state.attempt_number}"
        )
        for path in files:
            kept = keep_failed_capture(path, self.failed_dir, prefix)
            if kept and result is not None:
                result.kept.append(kept)

    def _keep_leftover_captures(
        self,
        state: AttemptState,
        result: Optional[AttemptResult] = None,
    ) -> None:
        """
        Set aside every capture of an abandoned attempt.

        Call with the control lock held. Files claimed by a pipeline that
        is still trimming are left alone.
        """
        try:
            files = discover_capture_files(self.capture_dir, self.raw_extension)
        except FileDiscoveryError:
            return
        busy = set(self._current_files)
        leftovers = [path for path in files if path not in busy]
        if leftovers:
            self._keep_captures(state, leftovers, self._clock(), result)

    def _finish_cycle(self, cycle: int) -> None:
        """Return to IDLE unless a newer attempt armed meanwhile."""
        with self._state_lock:
            if self.state == RecordingState.TRIMMING and self._cycle == cycle:
                self.state = RecordingState.IDLE

    # =========================================================================
    # WORKER
    # =========================================================================

    def start(self) -> None:
        """Start the trim worker thread (idempotent)."""
        if self._worker_thread and self._worker_thread.is_alive():
            return
        self._running = True
        self._worker_thread = threading.Thread(
            target=self._trim_worker,
            daemon=True,
            name="TrimWorker",
        )
        self._worker_thread.start()
        self.logger.debug("Trim worker started")

    def _trim_worker(self) -> None:
        while self._running:
            try:
                job = self._jobs.get(timeout=0.5)
            except queue.Empty:
                continue

            if job is None:
                break

            try:
                self._process_job(job)
            finally:
                with self._pending_condition:
                    self._pending_jobs -= 1
                    self._pending_condition.notify_all()

        self.logger.debug("Trim worker stopped")

    def _start_status_worker(self) -> None:
        with self._status_thread_lock:
            if self._status_thread and self._status_thread.is_alive():
                return
            self._status_thread = threading.Thread(
                target=self._status_worker,
                daemon=True,
                name="StatusNotifier",
            )
            self._status_thread.start()

    def _status_worker(self) -> None:
        """Deliver notifications in publication order."""
        while True:
            item = self._status_queue.get()
            if item is None:
                break

            try:
                self._deliver_status(*item)
            finally:
                with self._pending_condition:
                    self._pending_status -= 1
                    self._pending_condition.notify_all()

    def wait_for_status(self, timeout: Optional[float] = None) -> bool:
        """
        Block until every queued status notification was delivered.

        Returns:
            True if delivered, False on timeout
        """
        with self._pending_condition:
            return self._pending_condition.wait_for(
                lambda: self._pending_status == 0,
                timeout,
            )

    def wait_for_pipeline(self, timeout: Optional[float] = None) -> bool:
        """
        Block until every queued pipeline has finished.

        Returns:
            True if idle, False on timeout
        """
        with self._pending_condition:
            return self._pending_condition.wait_for(
                lambda: self._pending_jobs == 0,
                timeout,
            )

    def shutdown(self, timeout: float = 30.0) -> None:
        """Let queued pipelines finish (up to timeout) and stop the worker."""
        if not self.wait_for_pipeline(timeout):
            self.logger.warning("Trim pipeline still running at shutdown")

        self._running = False
        if self._worker_thread and self._worker_thread.is_alive():
            self._jobs.put(None)
            self._worker_thread.join(timeout=5.0)
        self._worker_thread = None

        # Last notifications (READY of the final attempt) still go out
        if not self.wait_for_status(timeout=5.0):
            self.logger.warning("Status sink still busy at shutdown")
        with self._status_thread_lock:
            if self._status_thread and self._status_thread.is_alive():
                self._status_queue.put(None)
                self._status_thread.join(timeout=5.0)
            self._status_thread = None

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _ensure_connected(self) -> None:
        if not self.control.is_connected():
            self.logger.warning("Control channel down, reconnecting")
            self.control.connect()

    def _trigger(self, action: ControlAction) -> None:
        key_id = self.hotkeys[action]
        self.logger.debug(f"Sending {action.value} ({key_id})")
        self.control.trigger_action(key_id)

    def _publish(self, phase: StatusPhase, message: str) -> None:
        """Fire-and-forget status notification"""
        if not self.background:
            self._deliver_status(phase, message)
            return

        self._start_status_worker()
        with self._pending_condition:
            self._pending_status += 1
        self._status_queue.put((phase, message))

    def _deliver_status(self, phase: StatusPhase, message: str) -> None:
        try:
            self.status_sink.send_status(phase, message)
        except Exception as e:
            self.logger.warning(f"Status sink failed for {phase.value}: {e}")

    def _report_error(self, message: str) -> None:
        self.logger.error(message)
        if self.on_error:
            try:
                self.on_error(message)
            except Exception as e:
                self.logger.error(f"Error in error callback: {e}")

    def _trigger_result_callback(self, result: AttemptResult) -> None:
        if self.on_result:
            try:
                self.on_result(result)
            except Exception as e:
                self.logger.error(f"Error in result callback: {e}")

    # =========================================================================
    # STATUS AND INFO
    # =========================================================================

    def get_state(self) -> RecordingState:
        with self._state_lock:
            return self.state

    def get_status(self) -> Dict[str, Any]:
        attempt = self.state_store.get()
        with self._pending_condition:
            pending = self._pending_jobs
        return {
            "state": self.get_state().value,
            "attempt": attempt.descriptor if attempt.athlete else None,
            "session": attempt.session_name or None,
            "pending_pipelines": pending,
            "control_connected": self.control.is_connected(),
            "last_result": self.last_result.summary() if self.last_result else None,
        }
