"""Incremental reader for Lisp-family source forms.

The reader consumes a character stream one character at a time and stops as
soon as a single complete form has been read. Streams can echo every consumed
character into a buffer, which is how the source extractor recovers the exact
text of a definition including its comments and formatting.
"""

from __future__ import annotations

import io
import re
from dataclasses import dataclass
from typing import Any, List, Optional, TextIO

_TERMINATORS = frozenset('";@^`~()[]{}\\')
_CLOSERS = {")": "(", "]": "[", "}": "{"}

_CHAR_NAMES = {
    "newline": "\n",
    "space": " ",
    "tab": "\t",
    "backspace": "\b",
    "formfeed": "\f",
    "return": "\r",
}
_CHAR_LITERALS = {value: name for name, value in _CHAR_NAMES.items()}

_STRING_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    '"': '"',
    "\\": "\\",
}

_INT_PATTERN = re.compile(r"^[+-]?\d+N?$")
_FLOAT_PATTERN = re.compile(r"^[+-]?\d+(\.\d*)?([eE][+-]?\d+)?M?$")
_NUMBER_START = re.compile(r"^[+-]?\d")

_SYMBOLIC_VALUES = {"Inf": float("inf"), "-Inf": float("-inf"), "NaN": float("nan")}


class ReaderError(ValueError):
    """Raised when the input is not a well-formed form."""

    def __init__(self, message: str, line: int, column: int) -> None:
        super().__init__(f"{message} (line {line}, column {column})")
        self.line = line
        self.column = column


@dataclass(frozen=True)
class Symbol:
    name: str
    ns: Optional[str] = None

    @classmethod
    def parse(cls, token: str) -> "Symbol":
        if token != "/" and "/" in token[1:]:
            ns, _, name = token.partition("/")
            return cls(name=name, ns=ns)
        return cls(name=token)

    def __str__(self) -> str:
        return f"{self.ns}/{self.name}" if self.ns else self.name


@dataclass(frozen=True)
class Keyword:
    name: str
    ns: Optional[str] = None
    auto: bool = False

    def __str__(self) -> str:
        prefix = "::" if self.auto else ":"
        return f"{prefix}{self.ns}/{self.name}" if self.ns else f"{prefix}{self.name}"


@dataclass(frozen=True)
class Char:
    value: str


@dataclass(frozen=True)
class Regex:
    pattern: str


@dataclass(frozen=True)
class NumberLiteral:
    """Numeric token the reader recognises but does not evaluate (ratios, radix)."""

    text: str


@dataclass(frozen=True)
class Meta:
    """A form carrying ``^`` metadata."""

    meta: Any
    form: Any


@dataclass(frozen=True)
class Tagged:
    """Dispatch forms such as tagged literals and reader conditionals."""

    tag: Symbol
    form: Any


class ListForm(tuple):
    def __repr__(self) -> str:
        return f"ListForm({tuple.__repr__(self)})"


class VectorForm(tuple):
    def __repr__(self) -> str:
        return f"VectorForm({tuple.__repr__(self)})"


class SetForm(tuple):
    def __repr__(self) -> str:
        return f"SetForm({tuple.__repr__(self)})"


class MapForm(tuple):
    """Map literal kept as ordered ``(key, value)`` pairs."""

    def get(self, key: Any, default: Any = None) -> Any:
        for candidate, value in self:
            if candidate == key:
                return value
        return default

    def keys(self) -> List[Any]:
        return [key for key, _ in self]

    def __repr__(self) -> str:
        return f"MapForm({tuple.__repr__(self)})"


@dataclass(frozen=True)
class TopLevelForm:
    form: Any
    line: int
    end_line: int


class CharStream:
    """Character source with pushback, position tracking and optional echo."""

    def __init__(
        self,
        source: TextIO,
        *,
        line: int = 1,
        echo: Optional[List[str]] = None,
    ) -> None:
        self._source = source
        self._pushback: List[str] = []
        self._echo = echo
        self._columns: List[int] = []
        self.line = line
        self.column = 1

    @classmethod
    def from_text(cls, text: str, **kwargs: Any) -> "CharStream":
        return cls(io.StringIO(text), **kwargs)

    def read(self) -> str:
        """Return the next character, or an empty string at end of input."""
        if self._pushback:
            char = self._pushback.pop()
        else:
            char = self._source.read(1)
        if not char:
            return ""
        if self._echo is not None:
            self._echo.append(char)
        if char == "\n":
            self._columns.append(self.column)
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        return char

    def unread(self, char: str) -> None:
        """Push ``char`` back; it is also withdrawn from the echo buffer."""
        if not char:
            return
        self._pushback.append(char)
        if self._echo:
            self._echo.pop()
        if char == "\n":
            self.line -= 1
            self.column = self._columns.pop() if self._columns else 1
        else:
            self.column -= 1

    def peek(self) -> str:
        char = self.read()
        self.unread(char)
        return char


_NOTHING = object()


class FormReader:
    """Reads one form at a time from a ``CharStream``."""

    def __init__(self, stream: CharStream) -> None:
        self.stream = stream

    def read(self) -> Any:
        """Read exactly one form; raise ``ReaderError`` if input ends first."""
        located = self.read_located()
        if located is None:
            raise self._error("EOF while reading")
        return located.form

    def read_located(self) -> Optional[TopLevelForm]:
        """Read the next form with its line span, or ``None`` at clean end of input."""
        while True:
            self.skip_whitespace()
            line = self.stream.line
            char = self.stream.read()
            if not char:
                return None
            form = self._dispatch(char)
            if form is not _NOTHING:
                return TopLevelForm(form=form, line=line, end_line=self.stream.line)

    def skip_whitespace(self) -> None:
        while True:
            char = self.stream.read()
            if not char:
                return
            if char.isspace() or char == ",":
                continue
            if char == ";":
                self._skip_line()
                continue
            self.stream.unread(char)
            return

    # ------------------------------------------------------------------
    # Dispatch

    def _dispatch(self, char: str) -> Any:
        if char == "(":
            return ListForm(self._read_delimited(")"))
        if char == "[":
            return VectorForm(self._read_delimited("]"))
        if char == "{":
            return self._read_map()
        if char in _CLOSERS:
            raise self._error(f"Unmatched delimiter: {char}")
        if char == '"':
            return self._read_string()
        if char == ";":
            self._skip_line()
            return _NOTHING
        if char == "'":
            return ListForm((Symbol("quote"), self.read()))
        if char == "`":
            return ListForm((Symbol("syntax-quote"), self.read()))
        if char == "~":
            if self.stream.peek() == "@":
                self.stream.read()
                return ListForm((Symbol("unquote-splicing"), self.read()))
            return ListForm((Symbol("unquote"), self.read()))
        if char == "@":
            return ListForm((Symbol("deref"), self.read()))
        if char == "^":
            meta = self.read()
            return Meta(meta=meta, form=self.read())
        if char == "\\":
            return self._read_char()
        if char == "#":
            return self._dispatch_hash()
        return self._interpret_token(self._read_token(char))

    def _dispatch_hash(self) -> Any:
        char = self.stream.read()
        if not char:
            raise self._error("EOF after #")
        if char == "{":
            return SetForm(self._read_delimited("}"))
        if char == "(":
            return ListForm((Symbol("fn*"), ListForm(self._read_delimited(")"))))
        if char == '"':
            return Regex(self._read_raw_string())
        if char == "'":
            return ListForm((Symbol("var"), self.read()))
        if char == "_":
            self.read()
            return _NOTHING
        if char == "!":
            self._skip_line()
            return _NOTHING
        if char == "^":
            meta = self.read()
            return Meta(meta=meta, form=self.read())
        if char == "=":
            return Tagged(Symbol("="), self.read())
        if char == "?":
            tag = "?"
            if self.stream.peek() == "@":
                self.stream.read()
                tag = "?@"
            if self.stream.peek() != "(":
                raise self._error("Reader conditional body must be a list")
            return Tagged(Symbol(tag), self.read())
        if char == ":":
            return self._read_namespaced_map()
        if char == "#":
            token = self._read_token(self.stream.read())
            if token not in _SYMBOLIC_VALUES:
                raise self._error(f"Unknown symbolic value: ##{token}")
            return _SYMBOLIC_VALUES[token]
        if char.isalpha():
            tag = Symbol.parse(self._read_token(char))
            return Tagged(tag, self.read())
        raise self._error(f"Unsupported dispatch macro: #{char}")

    # ------------------------------------------------------------------
    # Collections

    def _read_delimited(self, closer: str) -> List[Any]:
        start_line = self.stream.line
        items: List[Any] = []
        while True:
            self.skip_whitespace()
            char = self.stream.read()
            if not char:
                raise self._error(
                    f"EOF while reading collection started on line {start_line}, expected {closer}"
                )
            if char == closer:
                return items
            if char in _CLOSERS:
                raise self._error(f"Mismatched delimiter: expected {closer}, found {char}")
            form = self._dispatch(char)
            if form is not _NOTHING:
                items.append(form)

    def _read_map(self) -> MapForm:
        items = self._read_delimited("}")
        if len(items) % 2:
            raise self._error("Map literal must contain an even number of forms")
        return MapForm(zip(items[::2], items[1::2]))

    def _read_namespaced_map(self) -> Tagged:
        prefix: List[str] = []
        while True:
            char = self.stream.read()
            if not char:
                raise self._error("EOF while reading namespaced map")
            if char == "{":
                break
            if char.isspace():
                self.skip_whitespace()
                if self.stream.read() != "{":
                    raise self._error("Namespaced map must be followed by a map")
                break
            prefix.append(char)
        return Tagged(Symbol(":" + "".join(prefix)), self._read_map())

    # ------------------------------------------------------------------
    # Atoms

    def _read_string(self) -> str:
        start_line = self.stream.line
        chars: List[str] = []
        while True:
            char = self.stream.read()
            if not char:
                raise self._error(f"EOF while reading string started on line {start_line}")
            if char == '"':
                return "".join(chars)
            if char != "\\":
                chars.append(char)
                continue
            escape = self.stream.read()
            if escape in _STRING_ESCAPES:
                chars.append(_STRING_ESCAPES[escape])
            elif escape == "u":
                digits = "".join(self.stream.read() for _ in range(4))
                chars.append(self._code_point(digits, 16))
            elif escape.isdigit():
                digits = escape
                while len(digits) < 3 and self.stream.peek().isdigit():
                    digits += self.stream.read()
                chars.append(self._code_point(digits, 8))
            else:
                raise self._error(f"Unsupported escape character: \\{escape}")

    def _read_raw_string(self) -> str:
        start_line = self.stream.line
        chars: List[str] = []
        while True:
            char = self.stream.read()
            if not char:
                raise self._error(f"EOF while reading regex started on line {start_line}")
            if char == '"':
                return "".join(chars)
            chars.append(char)
            if char == "\\":
                escaped = self.stream.read()
                if not escaped:
                    raise self._error("EOF while reading regex")
                chars.append(escaped)

    def _read_char(self) -> Char:
        first = self.stream.read()
        if not first:
            raise self._error("EOF while reading character")
        token = first + self._read_token_rest()
        if len(token) == 1:
            return Char(token)
        if token in _CHAR_NAMES:
            return Char(_CHAR_NAMES[token])
        if token.startswith("u") and len(token) == 5:
            return Char(self._code_point(token[1:], 16))
        if token.startswith("o") and 2 <= len(token) <= 4:
            return Char(self._code_point(token[1:], 8))
        raise self._error(f"Unsupported character: \\{token}")

    def _read_token(self, first: str) -> str:
        if not first:
            raise self._error("EOF while reading token")
        return first + self._read_token_rest()

    def _read_token_rest(self) -> str:
        chars: List[str] = []
        while True:
            char = self.stream.read()
            if not char:
                break
            if char.isspace() or char == "," or char in _TERMINATORS:
                self.stream.unread(char)
                break
            chars.append(char)
        return "".join(chars)

    def _interpret_token(self, token: str) -> Any:
        if token == "nil":
            return None
        if token == "true":
            return True
        if token == "false":
            return False
        if token.startswith(":"):
            return self._keyword(token)
        if _NUMBER_START.match(token):
            if _INT_PATTERN.match(token):
                return int(token.rstrip("N"))
            if _FLOAT_PATTERN.match(token):
                return float(token.rstrip("M"))
            return NumberLiteral(token)
        return Symbol.parse(token)

    def _keyword(self, token: str) -> Keyword:
        auto = token.startswith("::")
        body = token[2:] if auto else token[1:]
        if not body:
            raise self._error(f"Invalid keyword: {token}")
        symbol = Symbol.parse(body)
        return Keyword(name=symbol.name, ns=symbol.ns, auto=auto)

    # ------------------------------------------------------------------
    # Helpers

    def _skip_line(self) -> None:
        while True:
            char = self.stream.read()
            if not char or char == "\n":
                return

    def _code_point(self, digits: str, base: int) -> str:
        try:
            return chr(int(digits, base))
        except ValueError as exc:
            raise self._error(f"Invalid character code: {digits}") from exc

    def _error(self, message: str) -> ReaderError:
        return ReaderError(message, self.stream.line, self.stream.column)


def read_form(stream: CharStream) -> Any:
    """Read a single form from ``stream``."""
    return FormReader(stream).read()


def read_all(text: str) -> List[TopLevelForm]:
    """Read every top-level form in ``text`` together with its starting line."""
    reader = FormReader(CharStream.from_text(text))
    forms: List[TopLevelForm] = []
    while True:
        located = reader.read_located()
        if located is None:
            return forms
        forms.append(located)


def to_source(form: Any) -> str:
    """Render a read form back to source text; metadata is dropped."""
    if form is None:
        return "nil"
    if form is True:
        return "true"
    if form is False:
        return "false"
    if isinstance(form, str):
        escaped = form.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
        return f'"{escaped}"'
    if isinstance(form, (Symbol, Keyword)):
        return str(form)
    if isinstance(form, Char):
        return "\\" + _CHAR_LITERALS.get(form.value, form.value)
    if isinstance(form, NumberLiteral):
        return form.text
    if isinstance(form, Regex):
        return f'#"{form.pattern}"'
    if isinstance(form, Meta):
        return to_source(form.form)
    if isinstance(form, Tagged):
        return f"#{form.tag} {to_source(form.form)}"
    if isinstance(form, VectorForm):
        return "[" + " ".join(to_source(item) for item in form) + "]"
    if isinstance(form, SetForm):
        return "#{" + " ".join(to_source(item) for item in form) + "}"
    if isinstance(form, MapForm):
        return "{" + ", ".join(f"{to_source(k)} {to_source(v)}" for k, v in form) + "}"
    if isinstance(form, ListForm):
        return "(" + " ".join(to_source(item) for item in form) + ")"
    return str(form)


__all__ = [
    "Char",
    "CharStream",
    "FormReader",
    "Keyword",
    "ListForm",
    "MapForm",
    "Meta",
    "NumberLiteral",
    "ReaderError",
    "Regex",
    "SetForm",
    "Symbol",
    "Tagged",
    "TopLevelForm",
    "VectorForm",
    "read_all",
    "read_form",
    "to_source",
]
