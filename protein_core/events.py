"""Message and progress notification for protein caching."""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum

logger = logging.getLogger(__name__)

MessageListener = Callable[[str], None]
StartListener = Callable[[], None]
CachedListener = Callable[[int], None]
ProgressListener = Callable[[int, float], None]
CompleteListener = Callable[[], None]


class MessageLevel(str, Enum):
    STATUS = "status"
    WARNING = "warning"
    ERROR = "error"
    DEBUG = "debug"


_LOG_LEVELS = {
    MessageLevel.STATUS: logging.INFO,
    MessageLevel.WARNING: logging.WARNING,
    MessageLevel.ERROR: logging.ERROR,
    MessageLevel.DEBUG: logging.DEBUG,
}


class EventNotifier:
    """Publishes status, warning, error and debug messages.

    Every message is written to the ``logging`` logger of the emitting
    component and then handed to the subscribed callbacks. A callback that
    raises is logged with its traceback and skipped.
    """

    def __init__(self, log: logging.Logger | None = None) -> None:
        self._log = log or logger
        self._listeners: dict[MessageLevel, list[MessageListener]] = {
            level: [] for level in MessageLevel
        }

    def subscribe(self, level: MessageLevel | str, listener: MessageListener) -> None:
        self._listeners[MessageLevel(level)].append(listener)

    def unsubscribe(self, level: MessageLevel | str, listener: MessageListener) -> None:
        listeners = self._listeners[MessageLevel(level)]
        if listener in listeners:
            listeners.remove(listener)

    def forward_to(self, other: "EventNotifier") -> None:
        """Re-publish every message of this notifier through ``other``."""
        for level in MessageLevel:
            self.subscribe(level, _Forwarder(other, level))

    def on_status(self, message: str) -> None:
        self._emit(MessageLevel.STATUS, message)

    def on_warning(self, message: str) -> None:
        self._emit(MessageLevel.WARNING, message)

    def on_error(self, message: str, exc: BaseException | None = None) -> None:
        self._emit(MessageLevel.ERROR, message, exc)

    def on_debug(self, message: str) -> None:
        self._emit(MessageLevel.DEBUG, message)

    def _emit(self, level: MessageLevel, message: str, exc: BaseException | None = None) -> None:
        exc_info = (type(exc), exc, exc.__traceback__) if exc is not None else None
        self._log.log(_LOG_LEVELS[level], message, exc_info=exc_info)
        self._deliver(level, message)

    def _deliver(self, level: MessageLevel, message: str) -> None:
        for listener in list(self._listeners[level]):
            try:
                listener(message)
            except Exception:  # noqa: BLE001
                self._log.exception(f"{level.value} listener {listener!r} failed")


class _Forwarder:
    # Already logged by the source notifier; only deliver.
    def __init__(self, target: EventNotifier, level: MessageLevel) -> None:
        self.target = target
        self.level = level

    def __call__(self, message: str) -> None:
        self.target._deliver(self.level, message)


class ProgressReporter:
    """Carries the caching progress state of one ingest run.

    ``record_cached`` is called after every inserted record; every
    ``interval``-th record additionally fires the progress listeners with the
    percentage of the input file consumed so far.
    """

    interval: int
    records_cached: int
    last_percent: float
    started: bool
    completed: bool

    def __init__(self, interval: int = 100, notifier: EventNotifier | None = None) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.interval = interval
        self.notifier = notifier
        self.listener_errors: list[Exception] = []
        self._start_listeners: list[StartListener] = []
        self._cached_listeners: list[CachedListener] = []
        self._progress_listeners: list[ProgressListener] = []
        self._complete_listeners: list[CompleteListener] = []
        self.reset()

    def reset(self) -> None:
        self.records_cached = 0
        self.last_percent = 0.0
        self.started = False
        self.completed = False

    def on_caching_start(self, listener: StartListener) -> None:
        self._start_listeners.append(listener)

    def on_record_cached(self, listener: CachedListener) -> None:
        self._cached_listeners.append(listener)

    def on_progress(self, listener: ProgressListener) -> None:
        self._progress_listeners.append(listener)

    def on_caching_complete(self, listener: CompleteListener) -> None:
        self._complete_listeners.append(listener)

    def caching_started(self) -> None:
        self.reset()
        self.started = True
        for listener in list(self._start_listeners):
            self._call(listener)

    def record_cached(self, records_cached: int, percent_processed: Callable[[], float]) -> None:
        self.records_cached = records_cached
        for listener in list(self._cached_listeners):
            self._call(listener, records_cached)
        if records_cached % self.interval == 0:
            self.last_percent = percent_processed()
            for progress_listener in list(self._progress_listeners):
                self._call(progress_listener, records_cached, self.last_percent)

    def caching_complete(self) -> None:
        self.completed = True
        for listener in list(self._complete_listeners):
            self._call(listener)

    def _call(self, listener: Callable[..., None], *args: object) -> None:
        try:
            listener(*args)
        except Exception as exc:  # noqa: BLE001
            self.listener_errors.append(exc)
            logger.exception(f"Progress listener {listener!r} failed")
            if self.notifier is not None:
                self.notifier.on_warning(f"Progress listener failed: {exc}")
