"""Progress reporting for bootstrap runs.

The pipeline emits one event per stage; front ends decide how to show them:
- CLI: print each message to the console
- Callback: forward events to another system (tests, wrappers)
- Null: no-op
"""

from __future__ import annotations

import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, TextIO


class Stage(str, Enum):
    """Pipeline stage an event belongs to."""

    PLATFORM = "platform"
    RELEASE = "release"
    DOWNLOAD = "download"
    VERIFY = "verify"
    EXTRACT = "extract"
    INSTALL = "install"
    DONE = "done"


# Rich styles for stages worth highlighting
STAGE_STYLES = {
    Stage.VERIFY: "green",
    Stage.INSTALL: "yellow",
    Stage.DONE: "bold green",
}


@dataclass
class ProgressEvent:
    """A user-facing progress message from one pipeline stage."""

    stage: Stage
    message: str


class ProgressHandler(ABC):
    """Receives progress events from the pipeline."""

    @abstractmethod
    def emit(self, event: ProgressEvent) -> None:
        """Emit a progress event.

        Args:
            event: The event to emit.
        """


class NullProgressHandler(ProgressHandler):
    """Discards all events."""

    def emit(self, event: ProgressEvent) -> None:
        pass


class ConsoleProgressHandler(ProgressHandler):
    """Prints event messages, one per line, optionally styled with Rich."""

    def __init__(self, output: Optional[TextIO] = None, use_rich: bool = False) -> None:
        """Initialize ConsoleProgressHandler.

        Args:
            output: Stream to write to (default: stdout at emit time).
            use_rich: Whether to use Rich for styled output.
        """
        self._output = output
        self._console = None

        if use_rich:
            from rich.console import Console

            self._console = Console(file=output, highlight=False)

    def emit(self, event: ProgressEvent) -> None:
        if self._console is not None:
            self._console.print(
                event.message, style=STAGE_STYLES.get(event.stage), markup=False, soft_wrap=True,
            )
            return
        print(event.message, file=self._output or sys.stdout, flush=True)


class CallbackProgressHandler(ProgressHandler):
    """Forwards events to a callable."""

    def __init__(self, on_event: Callable[[ProgressEvent], None]) -> None:
        self._on_event = on_event

    def emit(self, event: ProgressEvent) -> None:
        self._on_event(event)
