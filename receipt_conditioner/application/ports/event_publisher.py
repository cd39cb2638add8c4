"""Event Publisher port - progress notifications from the processor."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Protocol, runtime_checkable

logger = logging.getLogger(__name__)


class ProcessingStage(str, Enum):
    """Stages reported while conditioning images."""
    START = "start"
    CROP = "crop"
    ENHANCE = "enhance"
    COMPLETE = "complete"
    BATCH_START = "batch_start"
    STITCH = "stitch"
    SEPARATE = "separate"
    BATCH_COMPLETE = "batch_complete"


@dataclass(frozen=True, slots=True)
class ProcessingEvent:
    """Progress notification for one stage of a receipt."""
    stage: ProcessingStage
    message: str
    progress: float | None = None  # 0.0 to 1.0
    image_path: Path | None = None

    def __post_init__(self) -> None:
        if self.progress is not None and not 0.0 <= self.progress <= 1.0:
            raise ValueError(f"progress must be within [0, 1], got {self.progress}")


EventCallback = Callable[[ProcessingEvent], None]


@runtime_checkable
class EventPublisher(Protocol):
    """Port for publishing processing events."""

    def publish(self, event: ProcessingEvent) -> None:
        ...

    def subscribe(self, callback: EventCallback) -> None:
        ...


class SimpleEventPublisher:
    """In-process publisher; callbacks run synchronously in subscription order."""

    def __init__(self):
        self._subscribers: list[EventCallback] = []

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def publish(self, event: ProcessingEvent) -> None:
        logger.debug(f"[{event.stage.value}] {event.message}")
        for callback in self._subscribers:
            callback(event)

    def subscribe(self, callback: EventCallback) -> None:
        self._subscribers.append(callback)

    def unsubscribe(self, callback: EventCallback) -> None:
        """Stop delivering events to a callback (no-op if unknown)."""
        if callback in self._subscribers:
            self._subscribers.remove(callback)
