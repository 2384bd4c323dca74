from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Protocol, runtime_checkable

from rich.console import Console
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn

logger = logging.getLogger(__name__)


class EventKind(str, Enum):
    STAGE = "stage"
    POST_START = "post_start"
    ASSET_DONE = "asset_done"
    POST_DONE = "post_done"
    POST_SKIPPED = "post_skipped"
    RUN_DONE = "run_done"
    INTERRUPTED = "interrupted"


@dataclass(slots=True)
class UIEvent:
    kind: EventKind
    message: str | None = None
    creator_id: str | None = None
    post_id: str | None = None
    filename: str | None = None
    assets_done: int | None = None
    posts_processed: int | None = None
    posts_skipped: int | None = None
    ok: bool | None = None


@runtime_checkable
class ProgressSink(Protocol):
    def emit(self, event: UIEvent) -> None: ...
    def close(self) -> None: ...


class NullSink:
    def emit(self, event: UIEvent) -> None:
        pass

    def close(self) -> None:
        pass


class RichSink:
    def __init__(self, console: Console) -> None:
        self._console = console
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("{task.description}"),
            console=console,
            transient=True,
        )
        self._task_id = self._progress.add_task("Initializing...", total=None)
        self._post_id = ""
        self._progress.start()

    def emit(self, event: UIEvent) -> None:
        try:
            self._handle(event)
        except Exception:
            logger.debug("RichSink.emit failed", exc_info=True)

    def close(self) -> None:
        try:
            self._progress.stop()
        except Exception:
            logger.debug("RichSink.close failed", exc_info=True)

    def _handle(self, event: UIEvent) -> None:
        kind = event.kind
        if kind == EventKind.STAGE:
            self._progress.update(self._task_id, description=escape(event.message or ""))
        elif kind == EventKind.POST_START:
            self._post_id = escape(event.post_id or "")
            self._progress.update(self._task_id, description=f"Post {self._post_id}")
        elif kind == EventKind.ASSET_DONE:
            self._progress.update(
                self._task_id,
                description=f"Post {self._post_id}: {event.assets_done} assets, {escape(event.filename or '')}",
            )
        elif kind == EventKind.POST_SKIPPED:
            self._progress.update(self._task_id, description=f"Skipped post {escape(event.post_id or '')}")
        elif kind == EventKind.POST_DONE:
            self._progress.update(
                self._task_id,
                description=f"Processed posts: {event.posts_processed}",
            )
        elif kind == EventKind.RUN_DONE:
            self._progress.update(self._task_id, description="")
            creator = escape(event.creator_id or "")
            if event.ok:
                self._console.print(
                    f"[green]✓[/green] {creator}: {event.posts_processed} posts, "
                    f"{event.posts_skipped} without access"
                )
            else:
                self._console.print(
                    f"[red]✗[/red] {creator}: stopped after {event.posts_processed} posts"
                )
        elif kind == EventKind.INTERRUPTED:
            self._progress.update(self._task_id, description=f"Interrupted: {escape(event.creator_id or '')}")
