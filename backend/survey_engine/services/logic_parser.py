"""Logic condition language.

A narrow, purpose-built expression language for question branching rules.
Conditions are author-supplied DATA: they are tokenized, parsed by a small
recursive-descent parser and interpreted against the answer map.  Nothing in
a condition can reach outside that map.

Grammar
-------
    expr       := and_expr ( "||" and_expr )*
    and_expr   := comparison ( "&&" comparison )*
    comparison := operand ( CMP_OP operand )?
    operand    := "answer" "(" STRING ")"
                | "contains" "(" STRING "," (STRING | NUMBER) ")"
                | "(" expr ")"
                | STRING | NUMBER | "true" | "false" | IDENT

A bare IDENT is a string literal, so legacy conditions such as
``answer("q1") == Web`` keep working.

Comparison semantics
--------------------
- Numbers and numeric strings compare numerically; everything else compares
  as stripped text.  List answers compare as their comma-joined text.
- A comparison that touches a missing answer (absent, null, empty) is never
  matched, whatever the operator.
- Ordering a number against text is never matched; ``!=`` between them is.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Mapping, NamedTuple, Optional, Tuple, Union

from ..config import MAX_CONDITION_LENGTH
from ..constants import MAX_CONDITION_DEPTH


class ConditionSyntaxError(ValueError):
    """Raised when a condition cannot be parsed."""


# ── AST ─────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Const:
    value: Union[str, float, bool]


@dataclass(frozen=True)
class AnswerRef:
    question_id: str


@dataclass(frozen=True)
class Contains:
    question_id: str
    value: str


@dataclass(frozen=True)
class Compare:
    op: str
    left: "Node"
    right: "Node"


@dataclass(frozen=True)
class And:
    operands: Tuple["Node", ...]


@dataclass(frozen=True)
class Or:
    operands: Tuple["Node", ...]


Node = Union[Const, AnswerRef, Contains, Compare, And, Or]

COMPARISON_OPS = ("==", "!=", "<=", ">=", "<", ">")


# ── Tokenizer ───────────────────────────────────────────────────────────

class Token(NamedTuple):
    kind: str
    value: str
    pos: int


_TOKEN_RE = re.compile(
    r"""
    (?P<number>-?\d+(?:\.\d+)?)
    |(?P<string>"(?:[^"\\]|\\.)*"|'(?:[^'\\]|\\.)*')
    |(?P<op>==|!=|<=|>=|&&|\|\||<|>)
    |(?P<lparen>\()
    |(?P<rparen>\))
    |(?P<comma>,)
    |(?P<ident>[A-Za-z_][A-Za-z0-9_\-]*)
    """,
    re.VERBOSE,
)

_ESCAPE_RE = re.compile(r"\\(.)")


def tokenize(text: str) -> list[Token]:
    tokens: list[Token] = []
    pos = 0
    length = len(text)
    while pos < length:
        if text[pos].isspace():
            pos += 1
            continue
        match = _TOKEN_RE.match(text, pos)
        if match is None:
            raise ConditionSyntaxError(f"Unexpected character {text[pos]!r} at position {pos}")
        kind = match.lastgroup
        raw = match.group(kind)
        if kind == "string":
            raw = _ESCAPE_RE.sub(r"\1", raw[1:-1])
        tokens.append(Token(kind, raw, pos))
        pos = match.end()
    tokens.append(Token("eof", "", length))
    return tokens


# ── Parser ──────────────────────────────────────────────────────────────

class _Parser:
    def __init__(self, tokens: list[Token]):
        self.tokens = tokens
        self.index = 0
        self.depth = 0

    def peek(self) -> Token:
        return self.tokens[self.index]

    def advance(self) -> Token:
        token = self.tokens[self.index]
        self.index += 1
        return token

    def expect(self, kind: str, value: Optional[str] = None) -> Token:
        token = self.advance()
        if token.kind != kind or (value is not None and token.value != value):
            wanted = value or kind
            found = token.value or token.kind
            raise ConditionSyntaxError(f"Expected {wanted} at position {token.pos}, found {found!r}")
        return token

    def parse(self) -> Node:
        node = self.parse_or()
        token = self.peek()
        if token.kind != "eof":
            raise ConditionSyntaxError(f"Unexpected {token.value!r} at position {token.pos}")
        return node

    def parse_or(self) -> Node:
        operands = [self.parse_and()]
        while self.peek().kind == "op" and self.peek().value == "||":
            self.advance()
            operands.append(self.parse_and())
        return operands[0] if len(operands) == 1 else Or(tuple(operands))

    def parse_and(self) -> Node:
        operands = [self.parse_comparison()]
        while self.peek().kind == "op" and self.peek().value == "&&":
            self.advance()
            operands.append(self.parse_comparison())
        return operands[0] if len(operands) == 1 else And(tuple(operands))

    def parse_comparison(self) -> Node:
        left = self.parse_operand()
        token = self.peek()
        if token.kind == "op" and token.value in COMPARISON_OPS:
            self.advance()
            right = self.parse_operand()
            return Compare(token.value, left, right)
        return left

    def parse_operand(self) -> Node:
        token = self.advance()

        if token.kind == "lparen":
            self.depth += 1
            if self.depth > MAX_CONDITION_DEPTH:
                raise ConditionSyntaxError("Condition is nested too deeply")
            node = self.parse_or()
            self.expect("rparen")
            self.depth -= 1
            return node

        if token.kind == "number":
            return Const(float(token.value))

        if token.kind == "string":
            return Const(token.value)

        if token.kind == "ident":
            name = token.value
            if self.peek().kind == "lparen" and name in ("answer", "contains"):
                self.advance()
                question_id = self.expect("string").value
                if name == "answer":
                    self.expect("rparen")
                    return AnswerRef(question_id)
                self.expect("comma")
                target = self.advance()
                if target.kind not in ("string", "number"):
                    raise ConditionSyntaxError(
                        f"contains() expects a value at position {target.pos}"
                    )
                self.expect("rparen")
                return Contains(question_id, target.value)
            if name == "true":
                return Const(True)
            if name == "false":
                return Const(False)
            return Const(name)

        found = token.value or token.kind
        raise ConditionSyntaxError(f"Unexpected {found!r} at position {token.pos}")


@lru_cache(maxsize=1024)
def parse_condition(text: str, max_length: int = MAX_CONDITION_LENGTH) -> Node:
    """Parse *text* into an immutable AST.

    Raises
    ------
    ConditionSyntaxError
        On empty, oversized or malformed conditions.
    """
    if text is None or not text.strip():
        raise ConditionSyntaxError("Empty condition")
    if len(text) > max_length:
        raise ConditionSyntaxError(f"Condition exceeds {max_length} characters")
    return _Parser(tokenize(text)).parse()


# ── Interpreter ─────────────────────────────────────────────────────────

class _Missing:
    __slots__ = ()


MISSING = _Missing()


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, tuple)):
        return len(value) == 0
    return False


def _coerce(value: Any) -> Union[str, float]:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, (list, tuple)):
        value = ",".join(str(v) for v in value)
    text = str(value).strip()
    try:
        number = float(text)
    except ValueError:
        return text
    return number if math.isfinite(number) else text


def _contains(answer: Any, target: str) -> bool:
    if _is_missing(answer):
        return False
    if isinstance(answer, (list, tuple)):
        return target in [str(v) for v in answer]
    if isinstance(answer, str):
        return answer == target or target in [part.strip() for part in answer.split(",")]
    return False


def _resolve(node: Node, answers: Mapping[str, Any]) -> Any:
    if isinstance(node, Const):
        return node.value
    if isinstance(node, AnswerRef):
        value = answers.get(node.question_id)
        return MISSING if _is_missing(value) else value
    return _truthy(node, answers)


def _compare(op: str, left: Any, right: Any) -> bool:
    if left is MISSING or right is MISSING:
        return False
    a, b = _coerce(left), _coerce(right)
    if op == "==":
        return a == b
    if op == "!=":
        return a != b
    if type(a) is not type(b):
        return False
    if op == "<":
        return a < b
    if op == "<=":
        return a <= b
    if op == ">":
        return a > b
    if op == ">=":
        return a >= b
    raise ConditionSyntaxError(f"Unknown operator {op!r}")


def _truthy(node: Node, answers: Mapping[str, Any]) -> bool:
    if isinstance(node, Or):
        return any(_truthy(operand, answers) for operand in node.operands)
    if isinstance(node, And):
        return all(_truthy(operand, answers) for operand in node.operands)
    if isinstance(node, Compare):
        return _compare(node.op, _resolve(node.left, answers), _resolve(node.right, answers))
    if isinstance(node, Contains):
        return _contains(answers.get(node.question_id), node.value)
    if isinstance(node, AnswerRef):
        return not _is_missing(answers.get(node.question_id))
    if isinstance(node, Const):
        return bool(node.value)
    raise TypeError(f"Unknown condition node {type(node).__name__}")


def evaluate_condition(node: Node, answers: Optional[Mapping[str, Any]]) -> bool:
    """Interpret a parsed condition against the answers collected so far."""
    return _truthy(node, answers or {})


def referenced_question_ids(node: Node) -> set[str]:
    """Question ids read by a parsed condition."""
    if isinstance(node, (AnswerRef, Contains)):
        return {node.question_id}
    if isinstance(node, Compare):
        return referenced_question_ids(node.left) | referenced_question_ids(node.right)
    if isinstance(node, (And, Or)):
        ids: set[str] = set()
        for operand in node.operands:
            ids |= referenced_question_ids(operand)
        return ids
    return set()
