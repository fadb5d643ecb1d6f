# Copyright 2026 TinyLex Contributors
# SPDX-License-Identifier: Apache-2.0

"""Regex-driven, line-oriented lexer with one token of lookahead.

Token definitions are tried in registration order and the first pattern that
matches at the start of the remaining line wins. The text of the pattern's
first capturing group becomes the token value.
"""

import contextlib
import enum
import io
import logging
import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path
from types import TracebackType
from typing import Generic, Protocol, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

# ###############
# Public Interface
# ###############


class LineSource(Protocol):
    """Anything that yields text one line at a time (files, stdin, StringIO)."""

    def readline(self) -> str: ...

    def close(self) -> None: ...


@dataclass(frozen=True)
class SourcePosition:
    """Location of the lexer cursor.

    Attributes:
        line: 1-based line number (0 before the first line is read).
        column: Number of characters consumed by matches on the current line.
            Trimmed whitespace is not counted.
    """

    line: int = 0
    column: int = 0

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


@dataclass(frozen=True)
class Token(Generic[T]):
    """A classified unit of text.

    Attributes:
        type: The caller-supplied type tag of the matching definition.
        value: Text of the pattern's first capturing group.
        position: Where the token starts. Not part of token equality.
    """

    type: T
    value: str
    position: SourcePosition = field(default=SourcePosition(), compare=False)


@dataclass(frozen=True)
class EndOfInput:
    """Occupies the lookahead slot once the source is exhausted."""

    def __str__(self) -> str:
        return "end of input"


END_OF_INPUT = EndOfInput()

Lookahead = Token | EndOfInput


@dataclass(frozen=True)
class TokenDefinition(Generic[T]):
    """A registered rule: compiled pattern, type tag and ignore flag."""

    type: T
    regex: re.Pattern[str]
    ignored: bool = False


class LexerState(enum.Enum):
    """Where the lexer is in its token-production lifecycle."""

    NOT_STARTED = "not started"
    HAS_TOKEN = "has token"
    AT_END_OF_INPUT = "at end of input"
    ERRORED = "errored"


class DefinitionError(ValueError):
    """Raised when a token definition cannot be registered."""


class LexerError(Exception):
    """Base class for errors raised while producing or consuming tokens.

    Attributes:
        line: 1-based line number of the error.
        column: Column of the error, counted as in SourcePosition.
    """

    def __init__(self, message: str, line: int, column: int) -> None:
        super().__init__(f"At line {line} position {column}: {message}")
        self.line = line
        self.column = column

    @property
    def position(self) -> SourcePosition:
        return SourcePosition(self.line, self.column)


class LexerSyntaxError(LexerError):
    """Raised when no definition matches the start of the remaining line.

    The cursor is left in front of the offending text, so asking for the next
    token again fails the same way. ``Lexer.discard()`` does not help here
    since no token was produced; use ``Lexer.skip_line()`` to abandon the rest
    of the line.

    Attributes:
        remainder: The unmatched rest of the line.
    """

    def __init__(self, remainder: str, line: int, column: int) -> None:
        super().__init__(f'Unable to match "{remainder}" against any tokens', line, column)
        self.remainder = remainder


class UnexpectedTokenError(LexerError):
    """Raised by ``Lexer.consume`` when the current token is not the one required.

    The offending token stays current until it is consumed or discarded.

    Attributes:
        expected_type: The type tag that was required.
        expected_value: The exact text that was required, if any.
        actual: The token (or end of input) found instead.
    """

    def __init__(
        self,
        expected_type: object,
        expected_value: str | None,
        actual: Lookahead,
        position: SourcePosition,
    ) -> None:
        if isinstance(actual, Token):
            message = f'Unexpected token "{actual.value}"'
        else:
            message = "Unexpected end of input"
        super().__init__(message, position.line, position.column)
        self.expected_type = expected_type
        self.expected_value = expected_value
        self.actual = actual


class Lexer(Generic[T]):
    """Pulls lines from a text source and turns them into typed tokens.

    The lexer owns its source and closes it exactly once, either through
    ``close()`` or by leaving a ``with`` block::

        with Lexer.from_string("47 + 11") as lexer:
            lexer.define(Kind.NUMBER, r"(\\d+)")
            lexer.define(Kind.OPERATOR, r"(\\+|-)")
            a = lexer.consume(Kind.NUMBER)

    Definitions must be registered before the first token is requested.
    """

    def __init__(self, source: LineSource, definitions: Iterable[TokenDefinition[T]] = ()) -> None:
        self._source = source
        self._definitions: list[TokenDefinition[T]] = list(definitions)
        self._buffer: str | None = ""
        self._line = 0
        self._column = 0
        self._lookahead: Lookahead = END_OF_INPUT
        self._state = LexerState.NOT_STARTED
        # Set when the lookahead was consumed or discarded and the next one
        # has not been computed yet.
        self._pending = True
        # Set while the cursor sits in front of text no definition matches.
        self._stuck = False
        self._closed = False

    @classmethod
    def from_string(cls, text: str, definitions: Iterable[TokenDefinition[T]] = ()) -> "Lexer[T]":
        """Create a lexer reading from an in-memory string."""
        return cls(io.StringIO(text), definitions)

    @classmethod
    def from_path(cls, path: Path | str, definitions: Iterable[TokenDefinition[T]] = ()) -> "Lexer[T]":
        """Create a lexer reading a UTF-8 text file. The file is opened immediately."""
        return cls(open(path, encoding="utf-8"), definitions)  # noqa: SIM115

    # ------------------------------------------------------------------
    # Definitions
    # ------------------------------------------------------------------

    def define(self, type: T, pattern: str, ignore: bool = False) -> None:
        """Register a token definition.

        Args:
            type: Type tag given to tokens produced by this definition.
            pattern: Regular expression matched at the start of the remaining
                line. It must contain a capturing group; the first group's
                text becomes the token value.
            ignore: Recognise and skip matches without producing tokens.

        Raises:
            DefinitionError: If the pattern does not compile, has no capturing
                group, or tokens have already been requested.
        """
        if self._state is not LexerState.NOT_STARTED:
            raise DefinitionError("Token definitions must be registered before lexing starts")
        self._definitions.append(make_definition(type, pattern, ignore))

    @property
    def definitions(self) -> tuple[TokenDefinition[T], ...]:
        return tuple(self._definitions)

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------

    @property
    def state(self) -> LexerState:
        """Lifecycle state. Computes the next lookahead if a token was just dropped.

        A syntax error met while doing so is not raised here: the state becomes
        ERRORED and the next call that reads the current token raises it.
        """
        if self._state is not LexerState.NOT_STARTED and self._pending and not (self._stuck or self._closed):
            with contextlib.suppress(LexerSyntaxError):
                self._next_token()
        return self._state

    @property
    def position(self) -> SourcePosition:
        """The cursor position: just past the last matched text."""
        return SourcePosition(self._line, self._column)

    @property
    def current(self) -> Lookahead:
        """The lookahead token, or END_OF_INPUT. Computes it if needed."""
        self._ensure_lookahead()
        return self._lookahead

    @property
    def at_end(self) -> bool:
        return isinstance(self.current, EndOfInput)

    @property
    def closed(self) -> bool:
        return self._closed

    def start(self) -> None:
        """Compute the first lookahead token without consuming anything."""
        self._ensure_lookahead()

    # ------------------------------------------------------------------
    # Consumption
    # ------------------------------------------------------------------

    def match(self, type: T, value: str | None = None) -> bool:
        """Return True if the current token has the given type (and exact value)."""
        token = self.current
        if not isinstance(token, Token):
            return False
        return token.type == type and (value is None or token.value == value)

    def try_consume(self, type: T, value: str | None = None) -> bool:
        """Consume the current token if it matches; return whether it did."""
        if not self.match(type, value):
            return False
        self._drop_lookahead()
        return True

    def consume(self, type: T, value: str | None = None) -> str:
        """Consume the current token and return its text.

        Raises:
            UnexpectedTokenError: If the current token does not match. The
                token stays current.
            LexerSyntaxError: If computing the current token fails.
        """
        if not self.match(type, value):
            actual = self._lookahead
            position = actual.position if isinstance(actual, Token) else self.position
            raise UnexpectedTokenError(type, value, actual, position)
        token = self._lookahead
        assert isinstance(token, Token)
        self._drop_lookahead()
        return token.value

    def discard(self) -> None:
        """Drop the current token without checking it.

        After a LexerSyntaxError there is no current token to drop and the
        cursor has not moved, so the next request fails again.
        """
        self._check_open()
        if not self._stuck:
            self._ensure_lookahead()
        self._drop_lookahead()

    def skip_line(self) -> None:
        """Abandon the rest of the current line and drop the current token."""
        self._check_open()
        if self._buffer:
            logger.debug("Skipping %r at %s", self._buffer, self.position)
            self._buffer = ""
        self._stuck = False
        self._drop_lookahead()

    def tokens(self) -> Iterator[Token[T]]:
        """Yield every remaining token until the source is exhausted."""
        while True:
            token = self.current
            if not isinstance(token, Token):
                return
            self._drop_lookahead()
            yield token

    # ------------------------------------------------------------------
    # Resource handling
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Close the underlying source. Calling this again has no effect."""
        if self._closed:
            return
        self._closed = True
        self._source.close()

    def __enter__(self) -> "Lexer[T]":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Implementation
    # ------------------------------------------------------------------

    def _check_open(self) -> None:
        if self._closed:
            raise ValueError("I/O operation on closed lexer")

    def _drop_lookahead(self) -> None:
        self._lookahead = END_OF_INPUT
        self._pending = True

    def _ensure_lookahead(self) -> None:
        if self._pending:
            self._check_open()
            self._next_token()

    def _fill_buffer(self) -> str | None:
        """Read lines until the buffer has content. Returns None at end of input."""
        while self._buffer is not None and not self._buffer:
            self._line += 1
            self._column = 0
            line = self._source.readline()
            if not line:
                self._buffer = None
                break
            self._buffer = line.rstrip("\r\n").lstrip()
        return self._buffer

    def _next_token(self) -> None:
        """Advance to the next non-ignored token or to end of input."""
        try:
            while (buffer := self._fill_buffer()) is not None:
                result = self._match_definition(buffer)
                if result is None:
                    raise LexerSyntaxError(buffer, self._line, self._column)
                definition, found = result

                start = SourcePosition(self._line, self._column)
                self._column += found.end()
                self._buffer = buffer[found.end() :].lstrip()
                logger.debug("Matched %r as %s at %s", found.group(1), definition.type, start)

                if not definition.ignored:
                    self._set_lookahead(Token(definition.type, found.group(1) or "", start))
                    return
        except LexerSyntaxError:
            self._state = LexerState.ERRORED
            self._stuck = True
            raise
        self._set_lookahead(END_OF_INPUT)

    def _match_definition(self, buffer: str) -> tuple[TokenDefinition[T], re.Match[str]] | None:
        """Return the first definition matching at the start of ``buffer``.

        Zero-length matches do not count; they would never move the cursor.
        """
        for definition in self._definitions:
            found = definition.regex.match(buffer)
            if found is not None and found.end() > 0:
                return definition, found
        return None

    def _set_lookahead(self, lookahead: Lookahead) -> None:
        self._lookahead = lookahead
        self._pending = False
        self._state = LexerState.HAS_TOKEN if isinstance(lookahead, Token) else LexerState.AT_END_OF_INPUT


def make_definition(type: T, pattern: str, ignore: bool = False) -> TokenDefinition[T]:
    """Compile ``pattern`` into a TokenDefinition.

    Raises:
        DefinitionError: If the pattern does not compile or has no capturing group.
    """
    try:
        regex = re.compile(pattern)
    except re.error as exc:
        raise DefinitionError(f"Invalid pattern for {type}: {pattern!r}: {exc}") from exc
    if regex.groups < 1:
        raise DefinitionError(f"Pattern for {type} has no capturing group: {pattern!r}")
    return TokenDefinition(type=type, regex=regex, ignored=ignore)


def tokenize(text: str, definitions: Iterable[TokenDefinition[T]]) -> list[Token[T]]:
    """Lex ``text`` completely and return its non-ignored tokens.

    Raises:
        LexerSyntaxError: On text no definition matches.
    """
    with Lexer.from_string(text, definitions) as lexer:
        return list(lexer.tokens())
