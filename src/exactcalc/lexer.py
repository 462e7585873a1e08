"""Lazy tokenizer for arithmetic expressions.

The lexer is a cursor over the source text: `next()` produces one token and
advances, `peek()` looks ahead without advancing, and `reset()` rewinds to the
start. It never inserts implicit-multiplication tokens; the evaluator decides
that from `peek()`.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum, auto

from exactcalc.errors import CalcSyntaxError


class TokenKind(Enum):
    """All lexical token types produced by the lexer."""

    NUMBER = auto()  # 42, 3.14, 0x1f, 0b101, 0o17
    IDENT = auto()  # function name
    PLUS = auto()  # +
    MINUS = auto()  # -
    STAR = auto()  # *
    SLASH = auto()  # /
    PERCENT = auto()  # %
    AMP = auto()  # &
    PIPE = auto()  # |
    CARET = auto()  # ^
    TILDE = auto()  # ~
    BANG = auto()  # !
    SHL = auto()  # <<
    SHR = auto()  # >>
    LPAREN = auto()  # (
    RPAREN = auto()  # )
    COMMA = auto()  # ,
    EOF = auto()  # end of input


@dataclass(frozen=True, slots=True)
class Token:
    """A single lexical token.

    For NUMBER tokens `text` holds the digits without any base prefix, `base`
    is 2/8/10/16 and `is_decimal` marks a literal with a decimal point.
    """

    kind: TokenKind
    text: str
    pos: int
    base: int = 10
    is_decimal: bool = False

    def describe(self) -> str:
        if self.kind is TokenKind.EOF:
            return "end of input"
        if self.kind is TokenKind.NUMBER:
            return f"number {self.text!r}"
        if self.kind is TokenKind.IDENT:
            return f"name {self.text!r}"
        return repr(self.text)


_SINGLE_CHAR: dict[str, TokenKind] = {
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
    "*": TokenKind.STAR,
    "/": TokenKind.SLASH,
    "%": TokenKind.PERCENT,
    "&": TokenKind.AMP,
    "|": TokenKind.PIPE,
    "^": TokenKind.CARET,
    "~": TokenKind.TILDE,
    "!": TokenKind.BANG,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    ",": TokenKind.COMMA,
}

_DOUBLE_CHAR: dict[str, TokenKind] = {
    "<<": TokenKind.SHL,
    ">>": TokenKind.SHR,
}

_PREFIXES: dict[str, tuple[int, str]] = {
    "b": (2, "binary"),
    "o": (8, "octal"),
    "x": (16, "hexadecimal"),
}

_DIGITS = "0123456789abcdef"


def _is_digit(c: str) -> bool:
    return "0" <= c <= "9"


def _is_ident_start(c: str) -> bool:
    return c == "_" or (c.isascii() and c.isalpha())


def _is_ident_char(c: str) -> bool:
    return c == "_" or (c.isascii() and c.isalnum())


def _valid_digit(c: str, base: int) -> bool:
    return c.lower() in _DIGITS[:base]


class Lexer:
    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0
        self._peeked: Token | None = None

    def reset(self) -> None:
        self.pos = 0
        self._peeked = None

    def peek(self) -> Token:
        if self._peeked is None:
            self._peeked = self._scan()
        return self._peeked

    def next(self) -> Token:
        tok = self.peek()
        self._peeked = None
        return tok

    def __iter__(self) -> Iterator[Token]:
        while True:
            tok = self.next()
            yield tok
            if tok.kind is TokenKind.EOF:
                return

    # -- scanning -----------------------------------------------------

    def _scan(self) -> Token:
        text = self.text
        n = len(text)
        while self.pos < n and text[self.pos].isspace():
            self.pos += 1
        if self.pos >= n:
            return Token(TokenKind.EOF, "", n)

        start = self.pos
        c = text[start]

        if _is_digit(c):
            return self._scan_number()
        if _is_ident_start(c):
            end = start + 1
            while end < n and _is_ident_char(text[end]):
                end += 1
            self.pos = end
            return Token(TokenKind.IDENT, text[start:end], start)

        pair = text[start : start + 2]
        if pair in _DOUBLE_CHAR:
            self.pos = start + 2
            return Token(_DOUBLE_CHAR[pair], pair, start)
        if c in "<>":
            raise CalcSyntaxError(f"expected {c + c!r} at position {start}", start)

        kind = _SINGLE_CHAR.get(c)
        if kind is None:
            raise CalcSyntaxError(f"unexpected character {c!r} at position {start}", start)
        self.pos = start + 1
        return Token(kind, c, start)

    def _scan_number(self) -> Token:
        text = self.text
        n = len(text)
        start = self.pos

        if text[start] == "0" and start + 1 < n and text[start + 1].lower() in _PREFIXES:
            return self._scan_based(start)

        end = start
        while end < n and _is_digit(text[end]):
            end += 1
        is_decimal = False
        if end < n and text[end] == ".":
            is_decimal = True
            end += 1
            frac_start = end
            while end < n and _is_digit(text[end]):
                end += 1
            if end == frac_start:
                raise CalcSyntaxError(
                    f"unterminated decimal literal at position {start}", frac_start
                )
        self.pos = end
        return Token(TokenKind.NUMBER, text[start:end], start, 10, is_decimal)

    def _scan_based(self, start: int) -> Token:
        text = self.text
        n = len(text)
        base, name = _PREFIXES[text[start + 1].lower()]
        digits_start = start + 2
        end = digits_start
        while end < n and _is_ident_char(text[end]):
            if not _valid_digit(text[end], base):
                raise CalcSyntaxError(
                    f"invalid digit {text[end]!r} in {name} literal at position {end}", end
                )
            end += 1
        if end == digits_start:
            raise CalcSyntaxError(
                f"unterminated {name} literal at position {start}", digits_start
            )
        if end < n and text[end] == ".":
            raise CalcSyntaxError(
                f"{name} literal cannot have a decimal point (position {end})", end
            )
        self.pos = end
        return Token(TokenKind.NUMBER, text[digits_start:end], start, base)


def tokenize(text: str) -> list[Token]:
    """Lex `text` eagerly; the last token is always EOF."""
    return list(Lexer(text))
