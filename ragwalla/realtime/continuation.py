"""Continuation mode for paused runs."""

from typing import Any

from ..config import DEFAULT_CONTINUATION_MODE, validate_continuation_mode
from ..errors import PreconditionError
from ..models import ContinuationMode, ContinuationModeUpdated
from ..protocol import continuation_mode_message, continue_run_message


class ContinuationController:
    """Tracks whether paused runs resume automatically or need approval.

    In ``auto`` mode the server resumes paused runs itself and ``runPaused``
    is informational. In ``manual`` mode the caller resumes each run with
    ``continue_run``.
    """

    def __init__(self, mode: ContinuationMode = DEFAULT_CONTINUATION_MODE):
        self._mode: ContinuationMode = validate_continuation_mode(mode)

    @property
    def mode(self) -> ContinuationMode:
        return self._mode

    @property
    def requires_approval(self) -> bool:
        """True when paused runs wait for continue_run."""
        return self._mode == "manual"

    def set_mode(self, mode: str) -> bool:
        """Switch mode. Returns whether it changed."""
        new_mode = validate_continuation_mode(mode)
        changed = new_mode != self._mode
        self._mode = new_mode
        return changed

    def mode_message(self) -> dict[str, Any]:
        """Control message announcing the current mode."""
        return continuation_mode_message(self._mode)

    def continue_message(self, run_id: str) -> dict[str, Any]:
        """Control message resuming one paused run."""
        if not run_id:
            raise PreconditionError("run_id is required to continue a run")
        return continue_run_message(run_id)

    def apply_ack(self, ack: ContinuationModeUpdated) -> None:
        """Adopt the mode confirmed by the server, if it is a valid one."""
        if ack.success is False or ack.mode not in ("auto", "manual"):
            return
        self._mode = ack.mode  # type: ignore[assignment]
