"""Best-effort debug trace of metadata and parser writes."""

import time
from pathlib import Path

LOG_NAME = "rerunctl.log"


def debug_log_path() -> Path:
    """``<state_root>/rerunctl.log``."""
    from ..core.paths import state_root

    return state_root() / LOG_NAME


def _log_debug(message: str) -> None:
    """Append ``[timestamp] message`` to the debug log.

    add/remove-option write several files without rollback; the trace shows
    which steps of a failed run completed.  Failing to write the log is
    never an error for the caller.
    """
    try:
        log_path = debug_log_path()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        stamp = time.strftime("%Y-%m-%d %H:%M:%S", time.localtime())
        with open(log_path, "a", encoding="utf-8") as f:
            f.write(f"[{stamp}] {message}\n")
    except OSError:
        pass
