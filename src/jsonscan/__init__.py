"""
Validating JSON scanner with structural reporting.

Walks raw text with a recursive-descent scanner to decide whether it is an
(approximately) well-formed JSON object, notifying a sink of every value kind,
key and nesting level on the way. No value tree is built: the scanners only
locate value boundaries inside the original buffer.
"""

import logging
import os
import time
from dataclasses import dataclass
from dataclasses import field
from enum import Enum
from pathlib import Path
from typing import Any
from typing import TypeAlias

from jsonscan._sink import NullSink
from jsonscan._sink import PrintSink
from jsonscan._sink import RecordingSink
from jsonscan._sink import SinkEvent
from jsonscan._sink import StructureSink

__version__ = "0.1.0"

logger = logging.getLogger(__name__)

Position: TypeAlias = int

# Two frames per nesting level, so this stays well inside the interpreter's
# recursion limit.
DEFAULT_MAX_DEPTH = 256

JSON_WHITESPACE = " \t\n\r"

# Per-function timing of the scanners, switched on by JSONSCAN_PROFILE
PROFILE_HOT_PATHS = __debug__ and "JSONSCAN_PROFILE" in os.environ


@dataclass
class HotPathStats:
    """
    Accumulated timings for one scanner.

    ``chars_matched`` sums the lengths of the spans the scanner matched
    (for ``classify``, the characters skipped before the marker), so over
    a whole document it stays proportional to the document's size.
    """

    function_name: str
    call_count: int = 0
    total_time_ns: int = 0
    chars_matched: int = 0

    @property
    def mean_time_ns(self) -> float:
        return self.total_time_ns / self.call_count if self.call_count else 0.0


if PROFILE_HOT_PATHS:
    _hot_path_stats: dict[str, HotPathStats] = {}

    class ProfileContext:
        """
        Times a ``with`` block and charges it to ``func_name``.

        Set ``chars`` inside the block, or pass the block's result through
        ``matched``, to record how much text the call covered.
        """

        def __init__(self, func_name: str) -> None:
            self.func_name = func_name
            self.chars = 0
            self._started = 0

        def matched(self, result: "ScanResult") -> "ScanResult":
            if result.span is not None:
                self.chars = len(result.span)
            return result

        def __enter__(self) -> "ProfileContext":
            self._started = time.perf_counter_ns()
            return self

        def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
            stats = _hot_path_stats.setdefault(self.func_name, HotPathStats(self.func_name))
            stats.call_count += 1
            stats.total_time_ns += time.perf_counter_ns() - self._started
            stats.chars_matched += self.chars

    def get_hot_path_stats() -> dict[str, HotPathStats]:
        """Returns a snapshot of the timings gathered so far."""
        return dict(_hot_path_stats)

    def clear_hot_path_stats() -> None:
        _hot_path_stats.clear()

else:

    class ProfileContext:  # type: ignore[no-redef]
        def __init__(self, func_name: str) -> None:
            self.chars = 0

        def matched(self, result: "ScanResult") -> "ScanResult":
            return result

        def __enter__(self) -> "ProfileContext":
            return self

        def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
            pass

    def get_hot_path_stats() -> dict[str, HotPathStats]:
        return {}

    def clear_hot_path_stats() -> None:
        pass


class JSONScanError(ValueError):
    """
    Raised when a scanner is called on a span that breaks its precondition.

    Malformed documents never raise; they produce failed ScanResults. This
    error signals a caller bug, such as handing scan_string a span that does
    not start with a quote.
    """


class ValueKind(Enum):
    """Kinds of JSON value the classifier can recognize."""

    STRING = "string"
    NUMBER = "number"
    OBJECT = "object"
    ARRAY = "array"
    TRUE = "true"
    FALSE = "false"
    NULL = "null"
    UNKNOWN = "unknown"

    @property
    def is_container(self) -> bool:
        return self in (ValueKind.OBJECT, ValueKind.ARRAY)


class ScanFailure(Enum):
    """
    Reasons a scan can fail.

    Failures carry no position: the scanner reports whether a document
    scanned, not where it went wrong.
    """

    UNRECOGNIZED_MARKER = "unrecognized_marker"
    UNTERMINATED_STRING = "unterminated_string"
    INVALID_NUMBER = "invalid_number"
    LITERAL_MISMATCH = "literal_mismatch"
    MISSING_SEPARATOR = "missing_separator"
    MISSING_CLOSING_DELIMITER = "missing_closing_delimiter"
    DEPTH_EXCEEDED = "depth_exceeded"
    NOT_AN_OBJECT = "not_an_object"


class NumberState(Enum):
    """
    States of the JSON number recognizer.

    INTEGER, ZERO, FRACTION and EXPONENT_DIGIT accept end of input; DONE is
    the terminal accepting state and DEAD aborts the scan.
    """

    START = "start"
    NEGATIVE = "negative"
    INTEGER = "integer"
    ZERO = "zero"
    FRACTION_DOT = "fraction_dot"
    FRACTION = "fraction"
    EXPONENT_E = "exponent_e"
    EXPONENT_SIGN = "exponent_sign"
    EXPONENT_DIGIT = "exponent_digit"
    DONE = "done"
    DEAD = "dead"

    @property
    def accepting(self) -> bool:
        return self in _ACCEPTING_NUMBER_STATES


@dataclass(frozen=True)
class Span:
    """
    Immutable half-open view ``[start, end)`` into a backing text buffer.

    Spans are the only thing scanners pass to each other. They never copy the
    buffer; ``content`` materializes the covered text on demand.
    """

    text: str = field(repr=False)
    start: Position
    end: Position

    def __post_init__(self) -> None:
        if not 0 <= self.start <= self.end <= len(self.text):
            raise ValueError(
                f"invalid span {self.start}:{self.end} "
                f"for text of length {len(self.text)}"
            )

    @classmethod
    def of(cls, text: str) -> "Span":
        """Returns a span covering the whole of ``text``."""
        return cls(text, 0, len(text))

    def __len__(self) -> int:
        return self.end - self.start

    @property
    def is_empty(self) -> bool:
        return self.start == self.end

    @property
    def content(self) -> str:
        return self.text[self.start : self.end]

    def first(self) -> str:
        """Returns the first character, or an empty string for empty spans."""
        return self.text[self.start] if self.start < self.end else ""

    def last(self) -> str:
        """Returns the last character, or an empty string for empty spans."""
        return self.text[self.end - 1] if self.start < self.end else ""

    def advance(self, count: int = 1) -> "Span":
        """Drops up to ``count`` characters from the front."""
        return Span(self.text, min(self.start + count, self.end), self.end)

    def from_position(self, pos: Position) -> "Span":
        """Returns the remainder of this span starting at ``pos``."""
        return Span(self.text, pos, self.end)

    def up_to(self, pos: Position) -> "Span":
        """Returns the part of this span that ends just before ``pos``."""
        return Span(self.text, self.start, pos)

    def exhausted(self) -> "Span":
        """Returns the empty span positioned at this span's end."""
        return Span(self.text, self.end, self.end)

    def skip_whitespace(self) -> "Span":
        pos = self.start
        while pos < self.end and self.text[pos] in JSON_WHITESPACE:
            pos += 1
        return self.from_position(pos)

    def find_any(self, chars: str) -> Position | None:
        """Returns the position of the first character in ``chars``, if any."""
        hits = [
            pos
            for pos in (self.text.find(char, self.start, self.end) for char in chars)
            if pos >= 0
        ]
        return min(hits) if hits else None


@dataclass(frozen=True)
class ClassifiedValue:
    """A value kind plus the span that starts at its marker character."""

    kind: ValueKind
    span: Span


@dataclass(frozen=True)
class ScanResult:
    """
    Outcome of a scan: the matched span on success, a failure otherwise.

    Exactly one of ``span`` and ``failure`` is set.
    """

    span: Span | None = None
    failure: ScanFailure | None = None

    def __post_init__(self) -> None:
        if (self.span is None) == (self.failure is None):
            raise ValueError("ScanResult needs exactly one of span or failure")

    @classmethod
    def success(cls, span: Span) -> "ScanResult":
        return cls(span=span)

    @classmethod
    def fail(cls, failure: ScanFailure) -> "ScanResult":
        return cls(failure=failure)

    @property
    def ok(self) -> bool:
        return self.span is not None


@dataclass(frozen=True)
class ScanConfig:
    """
    Configures scanning behavior with immutable settings.

    ``strict_numbers`` rejects numbers cut short by the end of the input
    (a trailing ``-``, ``.`` or exponent marker) instead of accepting the
    consumed text. ``escape_aware_strings`` pairs backslash escapes when
    looking for a closing quote rather than checking only the preceding
    character.
    """

    max_depth: int = DEFAULT_MAX_DEPTH
    strict_numbers: bool = False
    escape_aware_strings: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.max_depth, int) or isinstance(self.max_depth, bool):
            raise TypeError("max_depth must be an integer")
        if self.max_depth < 1:
            raise ValueError("max_depth must be a positive integer")
        if not isinstance(self.strict_numbers, bool):
            raise TypeError("strict_numbers must be a boolean")
        if not isinstance(self.escape_aware_strings, bool):
            raise TypeError("escape_aware_strings must be a boolean")


_DIGITS = "0123456789"

_MARKERS: dict[str, ValueKind] = {
    '"': ValueKind.STRING,
    "{": ValueKind.OBJECT,
    "[": ValueKind.ARRAY,
    "t": ValueKind.TRUE,
    "f": ValueKind.FALSE,
    "n": ValueKind.NULL,
    "-": ValueKind.NUMBER,
    **{digit: ValueKind.NUMBER for digit in _DIGITS},
}

_CLOSING: dict[ValueKind, str] = {
    ValueKind.OBJECT: "}",
    ValueKind.ARRAY: "]",
}


def _transitions(*rules: tuple[str, NumberState]) -> dict[str, NumberState]:
    return {char: target for chars, target in rules for char in chars}


_NUMBER_TRANSITIONS: dict[NumberState, dict[str, NumberState]] = {
    NumberState.START: _transitions(
        ("-", NumberState.NEGATIVE),
        ("123456789", NumberState.INTEGER),
        ("0", NumberState.ZERO),
    ),
    NumberState.NEGATIVE: _transitions(
        ("123456789", NumberState.INTEGER),
        ("0", NumberState.ZERO),
    ),
    NumberState.INTEGER: _transitions(
        (_DIGITS, NumberState.INTEGER),
        (".", NumberState.FRACTION_DOT),
        ("eE", NumberState.EXPONENT_E),
    ),
    NumberState.ZERO: _transitions(
        (".", NumberState.FRACTION_DOT),
        ("eE", NumberState.EXPONENT_E),
    ),
    NumberState.FRACTION_DOT: _transitions((_DIGITS, NumberState.FRACTION)),
    NumberState.FRACTION: _transitions(
        (_DIGITS, NumberState.FRACTION),
        ("eE", NumberState.EXPONENT_E),
    ),
    # The exponent sign is optional: "1e5" and "1e+5" are both numbers.
    NumberState.EXPONENT_E: _transitions(
        ("+-", NumberState.EXPONENT_SIGN),
        (_DIGITS, NumberState.EXPONENT_DIGIT),
    ),
    NumberState.EXPONENT_SIGN: _transitions((_DIGITS, NumberState.EXPONENT_DIGIT)),
    NumberState.EXPONENT_DIGIT: _transitions((_DIGITS, NumberState.EXPONENT_DIGIT)),
}

_ACCEPTING_NUMBER_STATES = frozenset(
    {
        NumberState.INTEGER,
        NumberState.ZERO,
        NumberState.FRACTION,
        NumberState.EXPONENT_DIGIT,
    }
)


def classify(span: Span) -> ClassifiedValue:
    """
    Finds the first value marker in ``span`` and reports its kind.

    Every character that is not a marker is skipped, whitespace and garbage
    alike. The returned span starts at the marker and runs to the end of
    ``span``; callers refine it with the matching scanner. Without a marker
    the kind is UNKNOWN and the span is empty at ``span.end``.
    """
    with ProfileContext("classify") as prof:
        text = span.text
        for pos in range(span.start, span.end):
            kind = _MARKERS.get(text[pos])
            if kind is not None:
                prof.chars = pos - span.start
                return ClassifiedValue(kind, span.from_position(pos))

        prof.chars = len(span)
        return ClassifiedValue(ValueKind.UNKNOWN, span.exhausted())


def _find_quote(text: str, start: Position, end: Position) -> Position | None:
    """
    Finds the first quote not directly preceded by a backslash.

    A quote at ``start`` always counts. Only one character of lookback is
    checked, so the quote in ``\\\\"`` is taken to be escaped.
    """
    pos = text.find('"', start, end)
    while pos != -1:
        if pos == start or text[pos - 1] != "\\":
            return pos
        pos = text.find('"', pos + 1, end)
    return None


def _find_quote_escape_aware(
    text: str, start: Position, end: Position
) -> Position | None:
    """Finds the first quote outside a backslash escape pair."""
    pos = start
    while pos < end:
        char = text[pos]
        if char == '"':
            return pos
        pos += 2 if char == "\\" else 1
    return None


def scan_string(span: Span, *, escape_aware: bool = False) -> ScanResult:
    """Scans a string from its opening quote through its closing quote."""
    with ProfileContext("scan_string") as prof:
        if span.first() != '"':
            raise JSONScanError("scan_string expects a span starting with '\"'")

        find = _find_quote_escape_aware if escape_aware else _find_quote
        closing = find(span.text, span.start + 1, span.end)

        if closing is None:
            logger.debug("unterminated string starting at %d", span.start)
            return ScanResult.fail(ScanFailure.UNTERMINATED_STRING)

        return prof.matched(ScanResult.success(span.up_to(closing + 1)))


def scan_number(span: Span, *, strict: bool = False) -> ScanResult:
    """
    Scans a number with an explicit state machine.

    A character with no transition ends the scan (without being consumed)
    when the current state accepts, and kills it otherwise; a dead scan
    fails without keeping any of the consumed text. Running out of input
    in a non-accepting state returns the consumed text as a number unless
    ``strict`` is set.
    """
    with ProfileContext("scan_number") as prof:
        if span.is_empty:
            raise JSONScanError("scan_number expects a non-empty span")

        text = span.text
        state = NumberState.START
        pos = span.start

        while pos < span.end:
            target = _NUMBER_TRANSITIONS[state].get(text[pos])
            if target is None:
                state = NumberState.DONE if state.accepting else NumberState.DEAD
                break
            state = target
            pos += 1

        if state is NumberState.DEAD:
            logger.debug("invalid number at %d", span.start)
            return ScanResult.fail(ScanFailure.INVALID_NUMBER)

        if strict and state is not NumberState.DONE and not state.accepting:
            logger.debug("number truncated by end of input at %d", span.start)
            return ScanResult.fail(ScanFailure.INVALID_NUMBER)

        return prof.matched(ScanResult.success(span.up_to(pos)))


def scan_literal(span: Span, literal: str) -> ScanResult:
    """Matches ``literal`` exactly at the start of ``span``."""
    with ProfileContext("scan_literal") as prof:
        if not literal or span.first() != literal[0]:
            raise JSONScanError(f"scan_literal expects a span starting with {literal[:1]!r}")

        end = span.start + len(literal)
        if end <= span.end and span.text.startswith(literal, span.start, end):
            return prof.matched(ScanResult.success(span.up_to(end)))

        logger.debug("expected literal %r at %d", literal, span.start)
        return ScanResult.fail(ScanFailure.LITERAL_MISMATCH)


def scan_true(span: Span) -> ScanResult:
    return scan_literal(span, "true")


def scan_false(span: Span) -> ScanResult:
    return scan_literal(span, "false")


def scan_null(span: Span) -> ScanResult:
    return scan_literal(span, "null")


class StructureScanner:
    """
    Recursive-descent traversal of objects and arrays.

    Classifies each member, dispatches it to the matching primitive scanner
    or recurses into nested containers, and skips to the next separator.
    The sink sees every member kind and key plus container entry and exit;
    nesting depth is passed explicitly and capped by ``config.max_depth``.
    """

    def __init__(
        self,
        config: ScanConfig | None = None,
        sink: StructureSink | None = None,
    ):
        self.config = config if config is not None else ScanConfig()
        self.sink: StructureSink = sink if sink is not None else NullSink()

    def scan_value(self, value: ClassifiedValue, depth: int = 0) -> ScanResult:
        """Scans a classified value found inside a container at ``depth``."""
        kind = value.kind

        if kind.is_container:
            return self._scan_container(value.span, kind, depth + 1)
        elif kind is ValueKind.UNKNOWN:
            # Nothing recognizable is left, so the rest of the enclosing
            # container is consumed and it can never find its closing
            # delimiter.
            logger.debug("no value marker before %d", value.span.end)
            return ScanResult.fail(ScanFailure.UNRECOGNIZED_MARKER)

        if kind is ValueKind.STRING:
            result = scan_string(
                value.span, escape_aware=self.config.escape_aware_strings
            )
        elif kind is ValueKind.NUMBER:
            result = scan_number(value.span, strict=self.config.strict_numbers)
        elif kind is ValueKind.TRUE:
            result = scan_true(value.span)
        elif kind is ValueKind.FALSE:
            result = scan_false(value.span)
        else:
            result = scan_null(value.span)

        if result.span is not None:
            self.sink.content(result.span.content)
        return result

    def scan_object(self, span: Span, depth: int = 1) -> ScanResult:
        if span.first() != "{":
            raise JSONScanError("scan_object expects a span starting with '{'")
        return self._scan_container(span, ValueKind.OBJECT, depth)

    def scan_array(self, span: Span, depth: int = 1) -> ScanResult:
        if span.first() != "[":
            raise JSONScanError("scan_array expects a span starting with '['")
        return self._scan_container(span, ValueKind.ARRAY, depth)

    def _scan_key(self, cursor: Span) -> ScanResult:
        """Finds the next member name in an object."""
        opening = _find_quote(cursor.text, cursor.start, cursor.end)
        if opening is None:
            logger.debug("no member name after %d", cursor.start)
            return ScanResult.fail(ScanFailure.MISSING_SEPARATOR)
        return scan_string(
            cursor.from_position(opening),
            escape_aware=self.config.escape_aware_strings,
        )

    def _scan_container(self, span: Span, kind: ValueKind, depth: int) -> ScanResult:
        """
        Scans an object or array from its opening delimiter.

        On success the result runs from the opening through the closing
        delimiter. Any member failure exhausts the container and is
        reported as the container's own failure.
        """
        if depth > self.config.max_depth:
            logger.debug("nesting deeper than %d at %d", self.config.max_depth, span.start)
            return ScanResult.fail(ScanFailure.DEPTH_EXCEEDED)

        closing = _CLOSING[kind]
        delimiters = "," + closing

        with ProfileContext(f"scan_{kind.value}") as prof:
            self.sink.enter(kind)
            try:
                cursor = span.advance()

                body = cursor.skip_whitespace()
                if body.first() == closing:
                    return prof.matched(ScanResult.success(span.up_to(body.start + 1)))

                while True:
                    key: str | None = None

                    if kind is ValueKind.OBJECT:
                        name = self._scan_key(cursor)
                        if name.span is None:
                            return name
                        colon = cursor.from_position(name.span.end).find_any(":")
                        if colon is None:
                            logger.debug("missing ':' after member name at %d", name.span.start)
                            return ScanResult.fail(ScanFailure.MISSING_SEPARATOR)
                        key = name.span.content[1:-1]
                        cursor = cursor.from_position(colon + 1)

                    value = classify(cursor)
                    self.sink.value(value.kind, key)

                    member = self.scan_value(value, depth)
                    if member.span is None:
                        return member

                    # Anything between a member and its separator is ignored.
                    delimiter = cursor.from_position(member.span.end).find_any(delimiters)
                    if delimiter is None:
                        logger.debug("unclosed %s starting at %d", kind.value, span.start)
                        return ScanResult.fail(ScanFailure.MISSING_CLOSING_DELIMITER)

                    if span.text[delimiter] == closing:
                        result = ScanResult.success(span.up_to(delimiter + 1))
                        return prof.matched(result)

                    cursor = cursor.from_position(delimiter + 1)
            finally:
                self.sink.leave(kind)


def scan_object(
    span: Span,
    *,
    sink: StructureSink | None = None,
    config: ScanConfig | None = None,
) -> ScanResult:
    """Scans the object starting at ``span.start``."""
    return StructureScanner(config, sink).scan_object(span)


def scan_array(
    span: Span,
    *,
    sink: StructureSink | None = None,
    config: ScanConfig | None = None,
) -> ScanResult:
    """Scans the array starting at ``span.start``."""
    return StructureScanner(config, sink).scan_array(span)


def scan_document(
    text: str,
    *,
    sink: StructureSink | None = None,
    config: ScanConfig | None = None,
) -> ScanResult:
    """
    Scans a whole document, which must hold a JSON object.

    The first value found in ``text`` has to be an object that scans
    successfully; anything after its closing brace is ignored.
    """
    if not isinstance(text, str):
        raise TypeError(
            f"the JSON document must be str, not {type(text).__name__}"
        )

    scanner = StructureScanner(config, sink)
    scanner.sink.reset()

    value = classify(Span.of(text))
    if value.kind is not ValueKind.OBJECT:
        logger.debug("document starts with %s, not an object", value.kind.value)
        return ScanResult.fail(ScanFailure.NOT_AN_OBJECT)

    result = scanner.scan_object(value.span)
    if result.span is None:
        return result

    if result.span.start != value.span.start or result.span.last() != "}":
        return ScanResult.fail(ScanFailure.MISSING_CLOSING_DELIMITER)

    return result


def validate(
    text: str,
    *,
    sink: StructureSink | None = None,
    config: ScanConfig | None = None,
) -> bool:
    """
    Reports whether ``text`` holds a well-formed JSON object.

    The check is permissive: characters between values and separators are
    skipped and trailing data after the object is allowed.
    """
    return scan_document(text, sink=sink, config=config).ok


def load_file(path: str | os.PathLike[str], encoding: str = "utf-8") -> str:
    """
    Reads a whole file into memory as the scanning buffer.

    Undecodable bytes are kept as surrogate escapes; string contents are
    never validated, so they cannot change the outcome.
    """
    return Path(path).read_text(encoding=encoding, errors="surrogateescape")


def validate_file(
    path: str | os.PathLike[str],
    *,
    sink: StructureSink | None = None,
    config: ScanConfig | None = None,
) -> bool:
    """Loads ``path`` and validates its contents."""
    return validate(load_file(path), sink=sink, config=config)


__all__ = [
    "DEFAULT_MAX_DEPTH",
    "ClassifiedValue",
    "HotPathStats",
    "JSONScanError",
    "NullSink",
    "NumberState",
    "PrintSink",
    "ProfileContext",
    "RecordingSink",
    "ScanConfig",
    "ScanFailure",
    "ScanResult",
    "SinkEvent",
    "Span",
    "StructureScanner",
    "StructureSink",
    "ValueKind",
    "classify",
    "clear_hot_path_stats",
    "get_hot_path_stats",
    "load_file",
    "scan_array",
    "scan_document",
    "scan_false",
    "scan_literal",
    "scan_null",
    "scan_number",
    "scan_object",
    "scan_string",
    "scan_true",
    "validate",
    "validate_file",
]
