"""Recursive-descent evaluator.

Parsing and evaluation are interleaved: each precedence tier is one method
that pulls tokens from the lexer, recurses into the next-tighter tier for its
operands, and folds the result into a `Number` straight away. No syntax tree
is built; the call stack is the only parser state.

Precedence, loosest first:

    additive        + -
    bitwise         & | ^
    shift           << >>
    multiplicative  * / %  and implicit multiplication
    unary           - ~
    postfix         !
    primary         number, ( expr ), name(args...)
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from exactcalc.config import DEFAULT_LIMITS, Limits
from exactcalc.errors import (
    ArityMismatchError,
    CalcError,
    CalcSyntaxError,
    DomainError,
    ResourceLimitExceededError,
    TimeoutExceededError,
    TypeMismatchError,
    UnknownFunctionError,
)
from exactcalc.functions import EMPTY_FUNCTIONS, FunctionTable
from exactcalc.lexer import Lexer, Token, TokenKind
from exactcalc.numbers import Number

logger = logging.getLogger("exactcalc.evaluator")

BinaryOp = Callable[[Number, Number, Limits], Number]

_BINARY: dict[TokenKind, BinaryOp] = {
    TokenKind.PLUS: lambda a, b, lim: a.add(b),
    TokenKind.MINUS: lambda a, b, lim: a.sub(b),
    TokenKind.STAR: lambda a, b, lim: a.mul(b),
    TokenKind.SLASH: lambda a, b, lim: a.div(b, precision=lim.precision),
    TokenKind.PERCENT: lambda a, b, lim: a.mod(b),
    TokenKind.AMP: lambda a, b, lim: a.bit_and(b),
    TokenKind.PIPE: lambda a, b, lim: a.bit_or(b),
    TokenKind.CARET: lambda a, b, lim: a.bit_xor(b),
    TokenKind.SHL: lambda a, b, lim: a.shift_left(b, max_bits=lim.max_bits),
    TokenKind.SHR: lambda a, b, lim: a.shift_right(b),
}

_ADDITIVE = frozenset({TokenKind.PLUS, TokenKind.MINUS})
_BITWISE = frozenset({TokenKind.AMP, TokenKind.PIPE, TokenKind.CARET})
_SHIFT = frozenset({TokenKind.SHL, TokenKind.SHR})
_MULTIPLICATIVE = frozenset({TokenKind.STAR, TokenKind.SLASH, TokenKind.PERCENT})
_UNARY = frozenset({TokenKind.MINUS, TokenKind.TILDE})
# Tokens that can begin a primary term; adjacency means implicit multiplication.
_PRIMARY_START = frozenset({TokenKind.NUMBER, TokenKind.IDENT, TokenKind.LPAREN})


@dataclass(frozen=True, slots=True)
class EvalResult:
    """Outcome of one evaluation: exactly one of `value` and `error` is set."""

    value: Number | None = None
    error: CalcError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Number:
        if self.error is not None:
            raise self.error
        assert self.value is not None
        return self.value


class Evaluator:
    """State for a single evaluation: the lexer cursor plus budget counters."""

    def __init__(
        self,
        text: str,
        functions: FunctionTable = EMPTY_FUNCTIONS,
        limits: Limits = DEFAULT_LIMITS,
    ) -> None:
        self.lexer = Lexer(text)
        self.functions = functions
        self.limits = limits
        self._depth = 0
        self._operations = 0
        self._deadline = (
            time.monotonic() + limits.timeout if limits.timeout is not None else None
        )

    def run(self) -> Number:
        first = self.lexer.peek()
        if first.kind is TokenKind.EOF:
            raise CalcSyntaxError("empty expression", first.pos)
        value = self.expression()
        tok = self.lexer.peek()
        if tok.kind is not TokenKind.EOF:
            raise CalcSyntaxError(f"unexpected trailing input: {tok.describe()}", tok.pos)
        return value

    # -- budgets ------------------------------------------------------

    @contextmanager
    def _nested(self, tok: Token) -> Iterator[None]:
        self._depth += 1
        try:
            if self._depth > self.limits.max_depth:
                raise ResourceLimitExceededError(
                    f"expression nesting exceeds {self.limits.max_depth} levels", tok.pos
                )
            yield
        finally:
            self._depth -= 1

    def check_deadline(self, position: int | None = None) -> None:
        if self._deadline is not None and time.monotonic() > self._deadline:
            raise TimeoutExceededError(
                f"evaluation exceeded {self.limits.timeout}s", position
            )

    def _tick(self, tok: Token) -> None:
        self._operations += 1
        if self._operations > self.limits.max_operations:
            raise ResourceLimitExceededError(
                f"evaluation exceeds {self.limits.max_operations} operations", tok.pos
            )
        self.check_deadline(tok.pos)

    def _binary(self, op: Token, left: Number, right: Number) -> Number:
        self._tick(op)
        try:
            return _BINARY[op.kind](left, right, self.limits)
        except CalcError as e:
            e.at(op.pos)
            raise

    # -- precedence tiers ---------------------------------------------

    def additive(self) -> Number:
        left = self.bitwise()
        while self.lexer.peek().kind in _ADDITIVE:
            op = self.lexer.next()
            left = self._binary(op, left, self.bitwise())
        return left

    expression = additive

    def bitwise(self) -> Number:
        left = self.shift()
        while self.lexer.peek().kind in _BITWISE:
            op = self.lexer.next()
            left = self._binary(op, left, self.shift())
        return left

    def shift(self) -> Number:
        left = self.multiplicative()
        while self.lexer.peek().kind in _SHIFT:
            op = self.lexer.next()
            left = self._binary(op, left, self.multiplicative())
        return left

    def multiplicative(self) -> Number:
        left = self.unary()
        while True:
            tok = self.lexer.peek()
            if tok.kind in _MULTIPLICATIVE:
                self.lexer.next()
                left = self._binary(tok, left, self.unary())
            elif tok.kind in _PRIMARY_START:
                implicit = Token(TokenKind.STAR, "*", tok.pos)
                left = self._binary(implicit, left, self.unary())
            else:
                return left

    def unary(self) -> Number:
        tok = self.lexer.peek()
        if tok.kind not in _UNARY:
            return self.postfix()
        self.lexer.next()
        with self._nested(tok):
            operand = self.unary()
        self._tick(tok)
        try:
            if tok.kind is TokenKind.MINUS:
                return operand.negate()
            return operand.bit_not()
        except CalcError as e:
            e.at(tok.pos)
            raise

    def postfix(self) -> Number:
        value = self.primary()
        while self.lexer.peek().kind is TokenKind.BANG:
            tok = self.lexer.next()
            self._tick(tok)
            try:
                value = value.factorial(
                    max_argument=self.limits.max_factorial,
                    checkpoint=lambda: self.check_deadline(tok.pos),
                )
            except CalcError as e:
                e.at(tok.pos)
                raise
        return value

    def primary(self) -> Number:
        tok = self.lexer.next()
        if tok.kind is TokenKind.NUMBER:
            return Number.from_literal(tok.text, base=tok.base, is_decimal=tok.is_decimal)
        if tok.kind is TokenKind.LPAREN:
            with self._nested(tok):
                value = self.expression()
            self._expect_close(tok)
            return value
        if tok.kind is TokenKind.IDENT:
            if self.lexer.peek().kind is not TokenKind.LPAREN:
                raise CalcSyntaxError(f"expected '(' after function name {tok.text!r}", tok.pos)
            return self._call(tok)
        if tok.kind is TokenKind.EOF:
            raise CalcSyntaxError("unexpected end of input", tok.pos)
        raise CalcSyntaxError(f"unexpected {tok.describe()}", tok.pos)

    # -- helpers ------------------------------------------------------

    def _expect_close(self, open_tok: Token) -> None:
        tok = self.lexer.next()
        if tok.kind is not TokenKind.RPAREN:
            raise CalcSyntaxError(
                f"expected ')' to close '(' at position {open_tok.pos}, "
                f"found {tok.describe()}",
                tok.pos,
            )

    def _call(self, name_tok: Token) -> Number:
        open_tok = self.lexer.next()
        args: list[Number] = []
        with self._nested(open_tok):
            if self.lexer.peek().kind is not TokenKind.RPAREN:
                args.append(self.expression())
                while self.lexer.peek().kind is TokenKind.COMMA:
                    self.lexer.next()
                    args.append(self.expression())
        self._expect_close(open_tok)

        name = name_tok.text
        spec = self.functions.lookup(name)
        if spec is None:
            raise UnknownFunctionError(name, name_tok.pos)
        if len(args) != spec.arity:
            raise ArityMismatchError(name, spec.arity, len(args), name_tok.pos)

        self._tick(name_tok)
        try:
            result = spec.invoke(tuple(args))
        except CalcError as e:
            e.at(name_tok.pos)
            raise
        except (ArithmeticError, ValueError) as e:
            raise DomainError(f"{name}(): {e}", name_tok.pos) from e
        if not isinstance(result, Number):
            raise TypeMismatchError(
                f"{name}() returned {type(result).__name__}, expected Number", name_tok.pos
            )
        return result


def evaluate(
    text: str,
    functions: FunctionTable | None = None,
    *,
    limits: Limits | None = None,
) -> Number:
    """Evaluate `text` and return its value, raising `CalcError` on failure.

    `functions` defaults to the empty table; pass `DEFAULT_FUNCTIONS` (or a
    table of your own) to allow calls. Every call reparses `text`.
    """

    if not isinstance(text, str):
        raise TypeError(f"expression must be a str, got {type(text).__name__}")
    table = EMPTY_FUNCTIONS if functions is None else functions
    lim = DEFAULT_LIMITS if limits is None else limits

    logger.debug("Evaluating %r", text)
    try:
        value = Evaluator(text, table, lim).run()
    except RecursionError as e:
        raise ResourceLimitExceededError(
            "expression nesting exceeds the interpreter recursion limit"
        ) from e
    except MemoryError as e:
        raise ResourceLimitExceededError("evaluation ran out of memory") from e
    logger.debug("Evaluated %r (exact=%s)", text, value.exact)
    return value


def try_evaluate(
    text: str,
    functions: FunctionTable | None = None,
    *,
    limits: Limits | None = None,
) -> EvalResult:
    """Like `evaluate`, but returns an `EvalResult` instead of raising."""

    try:
        return EvalResult(value=evaluate(text, functions, limits=limits))
    except CalcError as e:
        logger.debug("Evaluation of %r failed: %s", text, e)
        return EvalResult(error=e)
