"""Structural sinks notified while a document is scanned."""

import sys
from dataclasses import dataclass
from dataclasses import field
from typing import IO
from typing import TYPE_CHECKING
from typing import Protocol

if TYPE_CHECKING:
    from jsonscan import ValueKind


class StructureSink(Protocol):
    """
    Receives structural notifications from the scanner.

    Sinks only observe: nothing they do can change a scan's outcome. Each
    sink owns its own nesting state, which ``reset`` clears before every
    top-level scan.
    """

    def reset(self) -> None: ...

    def enter(self, kind: "ValueKind") -> None: ...

    def leave(self, kind: "ValueKind") -> None: ...

    def value(self, kind: "ValueKind", key: str | None = None) -> None: ...

    def content(self, text: str) -> None: ...


class NullSink:
    """Discards every notification."""

    def reset(self) -> None:
        pass

    def enter(self, kind: "ValueKind") -> None:
        pass

    def leave(self, kind: "ValueKind") -> None:
        pass

    def value(self, kind: "ValueKind", key: str | None = None) -> None:
        pass

    def content(self, text: str) -> None:
        pass


class PrintSink:
    """
    Prints an indented outline of the scanned structure.

    Each value gets a line ``KIND`` (array members) or ``KIND "key" :``
    (object members). Members of the top-level object start at column
    zero and every further level of nesting adds ``indent_step`` spaces.
    With ``show_content`` the raw text of each primitive follows on its
    own line, one step deeper.
    """

    def __init__(
        self,
        stream: IO[str] | None = None,
        indent_step: int = 4,
        show_content: bool = True,
    ) -> None:
        if not isinstance(indent_step, int) or indent_step < 0:
            raise ValueError("indent_step must be a non-negative integer")

        self._stream = stream
        self.indent_step = indent_step
        self.show_content = show_content
        self.depth = 0

    @property
    def stream(self) -> IO[str]:
        return self._stream if self._stream is not None else sys.stdout

    def _indent(self, extra: int = 0) -> str:
        return " " * (self.indent_step * (max(self.depth - 1, 0) + extra))

    def reset(self) -> None:
        self.depth = 0

    def enter(self, kind: "ValueKind") -> None:
        self.depth += 1

    def leave(self, kind: "ValueKind") -> None:
        self.depth -= 1

    def value(self, kind: "ValueKind", key: str | None = None) -> None:
        label = kind.name if key is None else f'{kind.name} "{key}" :'
        self.stream.write(f"{self._indent()}{label}\n")

    def content(self, text: str) -> None:
        if self.show_content:
            self.stream.write(f"{self._indent(1)}{text}\n")


@dataclass(frozen=True)
class SinkEvent:
    """One recorded notification."""

    action: str
    kind: "ValueKind | None" = None
    key: str | None = None
    text: str | None = None


@dataclass
class RecordingSink:
    """Keeps every notification in order, for tests and tooling."""

    events: list[SinkEvent] = field(default_factory=list)
    depth: int = 0

    def reset(self) -> None:
        self.events.clear()
        self.depth = 0

    def enter(self, kind: "ValueKind") -> None:
        self.depth += 1
        self.events.append(SinkEvent("enter", kind))

    def leave(self, kind: "ValueKind") -> None:
        self.depth -= 1
        self.events.append(SinkEvent("leave", kind))

    def value(self, kind: "ValueKind", key: str | None = None) -> None:
        self.events.append(SinkEvent("value", kind, key))

    def content(self, text: str) -> None:
        self.events.append(SinkEvent("content", text=text))

    def values(self) -> list[tuple["ValueKind | None", str | None]]:
        """Returns ``(kind, key)`` for every value notification."""
        return [(event.kind, event.key) for event in self.events if event.action == "value"]
