"""Data-literal parser for JS/TS content modules.

Parses the subset of JavaScript expression syntax that content files use to
declare records, without evaluating anything:

  objects       { id: 'a', "quoted": 1, 2: x, trailing: true, }
  arrays        [1, 'two', { three: 3 },]
  strings       'single', "double" — JS escapes (\\n, \\xHH, \\uHHHH, \\u{H…})
  templates     `multi-line text` — kept as plain strings; ``${NAME}`` only
                when NAME is a known constant
  numbers       decimal, exponent, 0x / 0o / 0b, ``_`` separators, unary sign
  identifiers   true, false, null, undefined, NaN, Infinity + caller-supplied
                constants
  comments      // line and /* block */

Anything else (calls, spreads, computed keys, unknown identifiers) is a
``LiteralSyntaxError``.

Usage:
    value, end = parse_literal(text, pos)
    value = loads("[{ id: 'a' }]")
"""

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from typing import Any

_TRIVIA_RE = re.compile(r"(?:\s+|//[^\n]*|/\*.*?\*/)*", re.DOTALL)
_IDENT_RE = re.compile(r"[A-Za-z_$][\w$]*")
_NUMBER_RE = re.compile(
    r"0[xX][0-9a-fA-F](?:_?[0-9a-fA-F])*"
    r"|0[oO][0-7](?:_?[0-7])*"
    r"|0[bB][01](?:_?[01])*"
    r"|(?:\d(?:_?\d)*(?:\.(?:\d(?:_?\d)*)?)?|\.\d(?:_?\d)*)(?:[eE][+-]?\d(?:_?\d)*)?"
)
_HEX_RE = re.compile(r"[0-9a-fA-F]+")

# Runs of characters that need no escape handling inside each string form.
_PLAIN_RUN = {
    "'": re.compile(r"[^'\\\r\n]+"),
    '"': re.compile(r'[^"\\\r\n]+'),
    "`": re.compile(r"[^`\\$\r]+"),
}

_SIMPLE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
}

BUILTIN_CONSTANTS: Mapping[str, Any] = {
    "true": True,
    "false": False,
    "null": None,
    "undefined": None,
    "NaN": math.nan,
    "Infinity": math.inf,
}

# Upper bound for turning an integral float back into an int (2**53).
_MAX_SAFE_INTEGER = 9_007_199_254_740_992

# Deepest allowed object/array nesting.
MAX_DEPTH = 200


class LiteralSyntaxError(ValueError):
    """Raised when text is not a supported data literal.

    Attributes:
        pos: Offset into the parsed text.
        line: 1-based line number of *pos*.
        column: 1-based column number of *pos*.
    """

    def __init__(self, message: str, text: str, pos: int) -> None:
        self.pos = pos
        self.line = text.count("\n", 0, pos) + 1
        self.column = pos - text.rfind("\n", 0, pos)
        super().__init__(f"{message} (line {self.line}, column {self.column})")


class _Parser:
    def __init__(self, text: str, pos: int, constants: Mapping[str, Any]) -> None:
        self.text = text
        self.pos = pos
        self.constants = constants
        self.depth = 0

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def error(self, message: str, pos: int | None = None) -> LiteralSyntaxError:
        return LiteralSyntaxError(message, self.text, self.pos if pos is None else pos)

    def skip_trivia(self) -> None:
        self.pos = _TRIVIA_RE.match(self.text, self.pos).end()
        if self.text.startswith("/*", self.pos):
            raise self.error("unterminated block comment")

    def peek(self) -> str:
        return self.text[self.pos : self.pos + 1]

    def describe(self) -> str:
        char = self.peek()
        return repr(char) if char else "end of input"

    def enter(self) -> None:
        self.depth += 1
        if self.depth > MAX_DEPTH:
            raise self.error("literal nested too deeply")

    def lookup(self, name: str, pos: int) -> Any:
        if name in BUILTIN_CONSTANTS:
            return BUILTIN_CONSTANTS[name]
        if name in self.constants:
            return self.constants[name]
        raise self.error(f"unknown identifier {name!r}", pos)

    # ------------------------------------------------------------------
    # Values
    # ------------------------------------------------------------------

    def parse_value(self) -> Any:
        self.skip_trivia()
        char = self.peek()
        if char == "{":
            return self.parse_object()
        if char == "[":
            return self.parse_array()
        if char in ("'", '"'):
            return self.parse_string(char)
        if char == "`":
            return self.parse_template()
        if char in ("-", "+"):
            sign_pos = self.pos
            self.pos += 1
            self.skip_trivia()
            if self.text.startswith("Infinity", self.pos) or self.text.startswith("NaN", self.pos):
                number = self.parse_value()
            elif _NUMBER_RE.match(self.text, self.pos):
                number = self.parse_number()
            else:
                raise self.error(f"expected a number after {char!r}", sign_pos)
            return -number if char == "-" else number
        if char.isdigit() or (char == "." and self.text[self.pos + 1 : self.pos + 2].isdigit()):
            return self.parse_number()
        if self.text.startswith("...", self.pos):
            raise self.error("spread syntax is not supported")
        match = _IDENT_RE.match(self.text, self.pos)
        if match:
            self.pos = match.end()
            return self.lookup(match.group(), match.start())
        raise self.error(f"unexpected {self.describe()}")

    def parse_object(self) -> dict[str, Any]:
        self.enter()
        self.pos += 1  # {
        result: dict[str, Any] = {}
        while True:
            self.skip_trivia()
            if self.peek() == "}":
                self.pos += 1
                self.depth -= 1
                return result
            key_pos = self.pos
            key, is_identifier = self.parse_key()
            self.skip_trivia()
            if self.peek() == ":":
                self.pos += 1
                result[key] = self.parse_value()
            elif is_identifier and self.peek() in (",", "}"):
                # Shorthand property: { name } means { name: name }
                result[key] = self.lookup(key, key_pos)
            else:
                raise self.error(f"expected ':' after key {key!r}, found {self.describe()}")
            self.skip_trivia()
            if self.peek() == ",":
                self.pos += 1
            elif self.peek() != "}":
                raise self.error(f"expected ',' or '}}' in object, found {self.describe()}")

    def parse_key(self) -> tuple[str, bool]:
        char = self.peek()
        if char in ("'", '"'):
            return self.parse_string(char), False
        if char == "[":
            raise self.error("computed property keys are not supported")
        if self.text.startswith("...", self.pos):
            raise self.error("spread syntax is not supported")
        if char.isdigit() or char == ".":
            number = self.parse_number()
            return _number_key(number), False
        match = _IDENT_RE.match(self.text, self.pos)
        if not match:
            raise self.error(f"expected a property key, found {self.describe()}")
        self.pos = match.end()
        return match.group(), True

    def parse_array(self) -> list[Any]:
        self.enter()
        self.pos += 1  # [
        result: list[Any] = []
        while True:
            self.skip_trivia()
            char = self.peek()
            if char == "]":
                self.pos += 1
                self.depth -= 1
                return result
            if char == ",":
                raise self.error("array holes are not supported")
            result.append(self.parse_value())
            self.skip_trivia()
            if self.peek() == ",":
                self.pos += 1
            elif self.peek() != "]":
                raise self.error(f"expected ',' or ']' in array, found {self.describe()}")

    def parse_number(self) -> int | float:
        match = _NUMBER_RE.match(self.text, self.pos)
        if not match:
            raise self.error(f"malformed number at {self.describe()}")
        self.pos = match.end()
        if _IDENT_RE.match(self.text, self.pos):
            raise self.error("identifier directly after number", match.start())
        raw = match.group().replace("_", "")
        prefix = raw[:2].lower()
        if prefix == "0x":
            return int(raw[2:], 16)
        if prefix == "0o":
            return int(raw[2:], 8)
        if prefix == "0b":
            return int(raw[2:], 2)
        if not any(c in raw for c in ".eE"):
            return int(raw)
        value = float(raw)
        if value.is_integer() and abs(value) <= _MAX_SAFE_INTEGER:
            return int(value)
        return value

    # ------------------------------------------------------------------
    # Strings
    # ------------------------------------------------------------------

    def parse_string(self, quote: str) -> str:
        start = self.pos
        self.pos += 1
        plain = _PLAIN_RUN[quote]
        parts: list[str] = []
        while True:
            match = plain.match(self.text, self.pos)
            if match:
                parts.append(match.group())
                self.pos = match.end()
            char = self.peek()
            if char == quote:
                self.pos += 1
                return _join(parts, self, start)
            if char == "\\":
                parts.append(self.parse_escape())
            else:
                # newline or end of input
                raise self.error("unterminated string literal", start)

    def parse_template(self) -> str:
        start = self.pos
        self.pos += 1
        plain = _PLAIN_RUN["`"]
        parts: list[str] = []
        while True:
            match = plain.match(self.text, self.pos)
            if match:
                parts.append(match.group())
                self.pos = match.end()
            char = self.peek()
            if char == "`":
                self.pos += 1
                return _join(parts, self, start)
            if char == "\\":
                parts.append(self.parse_escape())
            elif char == "\r":
                # Template literals normalise CRLF and CR to LF.
                self.pos += 2 if self.text.startswith("\r\n", self.pos) else 1
                parts.append("\n")
            elif char == "$":
                if self.text.startswith("${", self.pos):
                    parts.append(self.parse_interpolation())
                else:
                    parts.append("$")
                    self.pos += 1
            else:
                raise self.error("unterminated template literal", start)

    def parse_interpolation(self) -> str:
        open_pos = self.pos
        self.pos += 2  # ${
        self.skip_trivia()
        match = _IDENT_RE.match(self.text, self.pos)
        if not match:
            raise self.error("template interpolation must name a known constant", open_pos)
        self.pos = match.end()
        self.skip_trivia()
        if self.peek() != "}":
            raise self.error("template interpolation must name a known constant", open_pos)
        self.pos += 1
        return _stringify(self.lookup(match.group(), match.start()))

    def parse_escape(self) -> str:
        escape_pos = self.pos
        self.pos += 1  # backslash
        char = self.peek()
        if not char:
            raise self.error("unterminated escape sequence", escape_pos)
        self.pos += 1
        if char in _SIMPLE_ESCAPES:
            return _SIMPLE_ESCAPES[char]
        if char == "\r":
            # Line continuation
            if self.peek() == "\n":
                self.pos += 1
            return ""
        if char in ("\n", "\u2028", "\u2029"):
            return ""
        if char == "x":
            digits = self.text[self.pos : self.pos + 2]
            if len(digits) != 2 or not _HEX_RE.fullmatch(digits):
                raise self.error("malformed \\x escape", escape_pos)
            self.pos += 2
            return chr(int(digits, 16))
        if char == "u":
            if self.peek() == "{":
                close = self.text.find("}", self.pos)
                digits = self.text[self.pos + 1 : close] if close != -1 else ""
                if not _HEX_RE.fullmatch(digits) or int(digits, 16) > 0x10FFFF:
                    raise self.error("malformed \\u{...} escape", escape_pos)
                self.pos = close + 1
                return chr(int(digits, 16))
            digits = self.text[self.pos : self.pos + 4]
            if len(digits) != 4 or not _HEX_RE.fullmatch(digits):
                raise self.error("malformed \\u escape", escape_pos)
            self.pos += 4
            return chr(int(digits, 16))
        # Identity escape: \' \" \` \\ \$ and any other character
        return char


def _join(parts: list[str], parser: _Parser, start: int) -> str:
    """Join string parts, recombining surrogate pairs written as two escapes."""
    value = "".join(parts)
    if not any("\ud800" <= c <= "\udfff" for c in value):
        return value
    try:
        return value.encode("utf-16", "surrogatepass").decode("utf-16")
    except UnicodeDecodeError:
        raise parser.error("lone surrogate in string literal", start) from None


def _number_key(number: int | float) -> str:
    if isinstance(number, float):
        return repr(number)
    return str(number)


def _stringify(value: Any) -> str:
    """Render a constant the way a template literal would."""
    if value is True:
        return "true"
    if value is False:
        return "false"
    if value is None:
        return "null"
    if isinstance(value, float) and not math.isfinite(value):
        if math.isnan(value):
            return "NaN"
        return "Infinity" if value > 0 else "-Infinity"
    return str(value)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def parse_literal(
    text: str,
    pos: int = 0,
    *,
    constants: Mapping[str, Any] | None = None,
) -> tuple[Any, int]:
    """Parse one data literal from *text* starting at *pos*.

    Leading whitespace and comments are skipped. Parsing stops at the
    literal's own closing delimiter, so whatever follows it in *text* (a
    ``;``, a type assertion, more declarations) is left alone.

    Args:
        text: Source text.
        pos: Offset where the literal (or leading trivia) begins.
        constants: Extra identifiers the literal may reference by name.

    Returns:
        ``(value, end)`` where *end* is the offset just past the literal.

    Raises:
        LiteralSyntaxError: If the text at *pos* is not a supported literal.
    """
    parser = _Parser(text, pos, constants or {})
    value = parser.parse_value()
    return value, parser.pos


def loads(text: str, *, constants: Mapping[str, Any] | None = None) -> Any:
    """Parse *text* that holds exactly one literal (an optional ``;`` may follow)."""
    parser = _Parser(text, 0, constants or {})
    value = parser.parse_value()
    parser.skip_trivia()
    if parser.peek() == ";":
        parser.pos += 1
        parser.skip_trivia()
    if parser.pos != len(text):
        raise parser.error(f"unexpected {parser.describe()} after literal")
    return value
