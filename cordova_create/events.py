"""Event emission for project creation.

Creation steps report progress on named channels (``verbose``, ``log``,
``warn``, ``error``).  Callers pass any sink they like; the default discards
everything so call sites never branch on whether someone is listening.
"""

from __future__ import annotations

from typing import Any, Callable, Protocol, runtime_checkable

from rich.console import Console
from rich.markup import escape

from .utils import console as default_console


@runtime_checkable
class EventSink(Protocol):
    """Fire-and-forget receiver of creation events."""

    def emit(self, channel: str, message: str) -> None: ...


class NullEventSink:
    """Sink that drops every event."""

    def emit(self, channel: str, message: str) -> None:
        return None


class ConsoleEventSink:
    """Render events on a Rich console.

    ``verbose`` events are only shown when *verbose* is set.
    """

    _STYLES: dict[str, str] = {
        "log": "",
        "info": "cyan",
        "warn": "yellow",
        "error": "bold red",
        "verbose": "dim",
    }

    def __init__(self, console: Console | None = None, verbose: bool = False) -> None:
        self.console = console or default_console
        self.verbose = verbose

    def emit(self, channel: str, message: str) -> None:
        if channel == "verbose" and not self.verbose:
            return
        style = self._STYLES.get(channel, "")
        text = escape(message)
        self.console.print(f"[{style}]{text}[/{style}]" if style else text)


class _CallableEventSink:
    def __init__(self, func: Callable[[str, str], Any]) -> None:
        self._func = func

    def emit(self, channel: str, message: str) -> None:
        self._func(channel, message)


def as_event_sink(events: Any) -> EventSink:
    """Adapt *events* to an :class:`EventSink`.

    Accepts ``None`` (no-op sink), anything with an ``emit(channel, message)``
    method, or a plain ``callable(channel, message)``.
    """
    if events is None:
        return NullEventSink()
    if isinstance(events, EventSink):
        return events
    if callable(events):
        return _CallableEventSink(events)
    raise TypeError(f"Unsupported event sink: {events!r}")
