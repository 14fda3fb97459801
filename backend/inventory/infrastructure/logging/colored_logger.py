"""Colored sync logger — ANSI-colored console logging for reconciliation runs.

Provides a SyncLogger with color-coded output per sync stage, making it
easy to follow a batch from the device to the server and back.

Color scheme:
    🟡 Yellow  — Collecting dirty records
    🔵 Blue    — Sending the batch
    🟣 Magenta — Server applying records
    🟢 Green   — Acknowledgment / completion
    🔴 Red     — Errors
    ⚪ Gray    — Timing / Stats
"""

import logging
import time
from contextlib import contextmanager
from typing import Any


# ── ANSI Color Codes ─────────────────────────────────────────────────

class _Colors:
    """ANSI escape codes for terminal colors."""

    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    BLUE = "\033[94m"
    MAGENTA = "\033[95m"
    GRAY = "\033[90m"


# ── Sync Stage Definitions ───────────────────────────────────────────

class SyncStage:
    """Predefined sync stages with colors and icons."""

    COLLECT = ("COLLECT", _Colors.YELLOW, "📋")
    SEND = ("SEND", _Colors.BLUE, "📤")
    APPLY = ("APPLY", _Colors.MAGENTA, "🗄️")
    ACK = ("ACK", _Colors.GREEN, "📥")
    ERROR = ("ERROR", _Colors.RED, "❌")
    COMPLETE = ("COMPLETE", _Colors.GREEN, "✅")


# ── SyncLogger ───────────────────────────────────────────────────────

class SyncLogger:
    """Color-coded logger for sync runs.

    Usage:
        log = SyncLogger("inventory.sync.client")
        with log.timed_step(SyncStage.SEND, "Sending 12 assets"):
            outcome = await transport.send_batch(batch)
        log.stats(submitted=12, cleared=11)
    """

    def __init__(self, component_name: str):
        self._logger = logging.getLogger(component_name)

    def step_start(self, stage: tuple[str, str, str], message: str, **kwargs: Any) -> None:
        label, color, icon = stage
        formatted = (
            f"{color}{_Colors.BOLD}{icon} [{label}]{_Colors.RESET} "
            f"{color}{message}{_Colors.RESET}"
        )
        if kwargs:
            details = " | ".join(f"{k}={v}" for k, v in kwargs.items())
            formatted += f" {_Colors.GRAY}({details}){_Colors.RESET}"
        self._logger.info(formatted)

    def step_complete(self, stage: tuple[str, str, str], message: str, **kwargs: Any) -> None:
        label, color, icon = stage
        formatted = (
            f"{color}{icon} [{label}]{_Colors.RESET} "
            f"{_Colors.GREEN}✓ {message}{_Colors.RESET}"
        )
        if kwargs:
            details = " | ".join(f"{k}={v}" for k, v in kwargs.items())
            formatted += f" {_Colors.GRAY}({details}){_Colors.RESET}"
        self._logger.info(formatted)

    def step_error(self, stage: tuple[str, str, str], message: str, error: Exception | None = None) -> None:
        """Log a failed step in red. Sync failures are retryable, so WARNING."""
        label, _, icon = stage
        formatted = (
            f"{_Colors.RED}{_Colors.BOLD}❌ [{label}]{_Colors.RESET} "
            f"{_Colors.RED}{message}{_Colors.RESET}"
        )
        if error:
            formatted += f" {_Colors.DIM}→ {type(error).__name__}: {error}{_Colors.RESET}"
        self._logger.warning(formatted)

    def detail(self, message: str, **kwargs: Any) -> None:
        formatted = f"   {_Colors.GRAY}├─ {message}{_Colors.RESET}"
        if kwargs:
            details = " | ".join(f"{k}={v}" for k, v in kwargs.items())
            formatted += f" {_Colors.DIM}({details}){_Colors.RESET}"
        self._logger.debug(formatted)

    def stats(self, **kwargs: Any) -> None:
        parts = [f"{k}: {v}" for k, v in kwargs.items()]
        self._logger.info(f"   {_Colors.GRAY}📈 {' | '.join(parts)}{_Colors.RESET}")

    @contextmanager
    def timed_step(self, stage: tuple[str, str, str], message: str, **kwargs: Any):
        """Context manager that logs start/end with elapsed time."""
        self.step_start(stage, message, **kwargs)
        start = time.perf_counter()
        try:
            yield
        except Exception as e:
            elapsed = time.perf_counter() - start
            self.step_error(stage, f"{message} — failed after {elapsed:.2f}s", error=e)
            raise
        else:
            elapsed = time.perf_counter() - start
            self.step_complete(stage, f"{message} — {elapsed:.2f}s")
