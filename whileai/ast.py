"""whileai/ast.py – Abstract syntax of the while language.

Three syntactic categories, each a family of frozen dataclasses:

* arithmetic expressions (``AExpr``): numbers, interval literals,
  variables, ``x++`` / ``x--`` and binary ``+ - * /``;
* boolean expressions (``BExpr``): ``true``, ``false``, ``!``, ``&&``,
  ``||`` and the six numeric comparisons;
* statements (``Stmt``): ``skip``, assignment, sequencing, ``if``,
  ``while`` and ``repeat ... until``.

Design invariants
-----------------
* Every node is immutable; numeric literals are stored as
  :class:`~whileai.integer.ExtendedInteger` (plain ``int`` arguments are
  coerced on construction).
* ``str(node)`` renders concrete syntax accepted by :mod:`whileai.parser`.
* Loops carry an optional ``delay`` overriding the configured widening
  delay for that loop only.

Helpers
-------
``negate``      push a negation through a boolean expression
``is_same``     syntactic equality modulo commutativity of ``+`` and ``*``
``to_sexp``     S-expression rendering (via :mod:`sexpdata`)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, FrozenSet, List, Optional, Union

import sexpdata

from whileai.integer import ExtendedInteger, Kind, ZERO

__all__ = [
    "ArithOp",
    "CmpOp",
    "Number",
    "IntervalLiteral",
    "Variable",
    "PostIncrement",
    "PostDecrement",
    "BinOp",
    "BoolLiteral",
    "Not",
    "And",
    "Or",
    "Compare",
    "Skip",
    "Assign",
    "Chain",
    "If",
    "While",
    "RepeatUntil",
    "AExpr",
    "BExpr",
    "Stmt",
    "negate",
    "is_same",
    "is_constant_zero",
    "written_names",
    "chain",
    "to_sexp",
]


def _literal(n: ExtendedInteger) -> str:
    if n.kind is Kind.NEG_INF:
        return "neginf"
    if n.kind is Kind.POS_INF:
        return "posinf"
    return str(n.value)


# ════════════════════════════════════════════════════════════════════════
# §1  Operators
# ════════════════════════════════════════════════════════════════════════


class ArithOp(Enum):
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"

    @property
    def commutative(self) -> bool:
        return self in (ArithOp.ADD, ArithOp.MUL)


class CmpOp(Enum):
    EQ = "=="
    NE = "!="
    LT = "<"
    LE = "<="
    GT = ">"
    GE = ">="

    def negated(self) -> CmpOp:
        """The comparison holding exactly when this one does not."""
        return _CMP_NEGATION[self]


_CMP_NEGATION = {
    CmpOp.EQ: CmpOp.NE,
    CmpOp.NE: CmpOp.EQ,
    CmpOp.LT: CmpOp.GE,
    CmpOp.GE: CmpOp.LT,
    CmpOp.GT: CmpOp.LE,
    CmpOp.LE: CmpOp.GT,
}


# ════════════════════════════════════════════════════════════════════════
# §2  Arithmetic expressions
# ════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Number:
    value: ExtendedInteger

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", ExtendedInteger.coerce(self.value))

    def __str__(self) -> str:
        return _literal(self.value)


@dataclass(frozen=True, slots=True)
class IntervalLiteral:
    """``[lo, hi]``; well-formedness (lo ≤ hi) is checked at evaluation."""

    lo: ExtendedInteger
    hi: ExtendedInteger

    def __post_init__(self) -> None:
        object.__setattr__(self, "lo", ExtendedInteger.coerce(self.lo))
        object.__setattr__(self, "hi", ExtendedInteger.coerce(self.hi))

    def __str__(self) -> str:
        return f"[{_literal(self.lo)}, {_literal(self.hi)}]"


@dataclass(frozen=True, slots=True)
class Variable:
    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True, slots=True)
class PostIncrement:
    """``x++``: evaluates to the old value of ``x``, then adds one."""

    name: str

    def __str__(self) -> str:
        return f"{self.name}++"


@dataclass(frozen=True, slots=True)
class PostDecrement:
    name: str

    def __str__(self) -> str:
        return f"{self.name}--"


@dataclass(frozen=True, slots=True)
class BinOp:
    op: ArithOp
    left: AExpr
    right: AExpr

    def __str__(self) -> str:
        return f"({self.left} {self.op.value} {self.right})"


AExpr = Union[Number, IntervalLiteral, Variable, PostIncrement, PostDecrement, BinOp]


# ════════════════════════════════════════════════════════════════════════
# §3  Boolean expressions
# ════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class BoolLiteral:
    value: bool

    def __str__(self) -> str:
        return "true" if self.value else "false"


@dataclass(frozen=True, slots=True)
class Not:
    operand: BExpr

    def __str__(self) -> str:
        return f"!{self.operand}"


@dataclass(frozen=True, slots=True)
class And:
    left: BExpr
    right: BExpr

    def __str__(self) -> str:
        return f"({self.left} && {self.right})"


@dataclass(frozen=True, slots=True)
class Or:
    left: BExpr
    right: BExpr

    def __str__(self) -> str:
        return f"({self.left} || {self.right})"


@dataclass(frozen=True, slots=True)
class Compare:
    op: CmpOp
    left: AExpr
    right: AExpr

    def __str__(self) -> str:
        return f"({self.left} {self.op.value} {self.right})"


BExpr = Union[BoolLiteral, Not, And, Or, Compare]


# ════════════════════════════════════════════════════════════════════════
# §4  Statements
# ════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Skip:
    def __str__(self) -> str:
        return "skip"


@dataclass(frozen=True, slots=True)
class Assign:
    name: str
    expr: AExpr

    def __str__(self) -> str:
        return f"{self.name} := {self.expr}"


@dataclass(frozen=True, slots=True)
class Chain:
    first: Stmt
    second: Stmt

    def __str__(self) -> str:
        return f"{self.first}; {self.second}"


@dataclass(frozen=True, slots=True)
class If:
    cond: BExpr
    then: Stmt
    orelse: Stmt

    def __str__(self) -> str:
        return f"if {self.cond} then {self.then} else {self.orelse} end"


@dataclass(frozen=True, slots=True)
class While:
    cond: BExpr
    body: Stmt
    delay: Optional[int] = None

    def __str__(self) -> str:
        head = "while" if self.delay is None else f"while[{self.delay}]"
        return f"{head} {self.cond} do {self.body} done"


@dataclass(frozen=True, slots=True)
class RepeatUntil:
    """``repeat body until cond``: the body runs at least once."""

    body: Stmt
    cond: BExpr
    delay: Optional[int] = None

    def __str__(self) -> str:
        head = "repeat" if self.delay is None else f"repeat[{self.delay}]"
        return f"{head} {self.body} until {self.cond}"


Stmt = Union[Skip, Assign, Chain, If, While, RepeatUntil]


def chain(*stmts: Stmt) -> Stmt:
    """Right-nested sequence of one or more statements."""
    if not stmts:
        raise ValueError("chain() needs at least one statement")
    result = stmts[-1]
    for stmt in reversed(stmts[:-1]):
        result = Chain(stmt, result)
    return result


# ════════════════════════════════════════════════════════════════════════
# §5  Syntactic helpers
# ════════════════════════════════════════════════════════════════════════


def negate(b: BExpr) -> BExpr:
    """Logical negation with ``!`` pushed inwards.

    De Morgan through ``&&`` / ``||``; comparisons flip to their
    complement; a double negation cancels.

    >>> str(negate(Compare(CmpOp.LT, Variable("x"), Number(5))))
    '(x >= 5)'
    """
    if isinstance(b, BoolLiteral):
        return BoolLiteral(not b.value)
    if isinstance(b, Not):
        return b.operand
    if isinstance(b, And):
        return Or(Not(b.left), Not(b.right))
    if isinstance(b, Or):
        return And(Not(b.left), Not(b.right))
    if isinstance(b, Compare):
        return Compare(b.op.negated(), b.left, b.right)
    raise TypeError(f"not a boolean expression: {b!r}")


def is_same(a: AExpr, b: AExpr) -> bool:
    """Do *a* and *b* denote the same value in every state?

    Interval literals stand for an unknown member of the range and
    ``x++`` / ``x--`` change the state, so neither is ever the same as
    anything.
    """
    if isinstance(a, Number) and isinstance(b, Number):
        return a.value == b.value
    if isinstance(a, Variable) and isinstance(b, Variable):
        return a.name == b.name
    if isinstance(a, BinOp) and isinstance(b, BinOp) and a.op is b.op:
        if is_same(a.left, b.left) and is_same(a.right, b.right):
            return True
        return a.op.commutative and is_same(a.left, b.right) and is_same(a.right, b.left)
    return False


def is_constant_zero(a: AExpr) -> bool:
    """Is *a* the literal ``0`` (or ``[0, 0]``)?"""
    if isinstance(a, Number):
        return a.value == ZERO
    if isinstance(a, IntervalLiteral):
        return a.lo == ZERO and a.hi == ZERO
    return False


def written_names(*nodes: Any) -> FrozenSet[str]:
    """Variables assigned, incremented or decremented anywhere in *nodes*."""
    names = set()
    stack = list(nodes)
    while stack:
        node = stack.pop()
        if isinstance(node, Assign):
            names.add(node.name)
            stack.append(node.expr)
        elif isinstance(node, (PostIncrement, PostDecrement)):
            names.add(node.name)
        elif isinstance(node, (BinOp, Compare, And, Or)):
            stack.extend((node.left, node.right))
        elif isinstance(node, Not):
            stack.append(node.operand)
        elif isinstance(node, Chain):
            stack.extend((node.first, node.second))
        elif isinstance(node, If):
            stack.extend((node.cond, node.then, node.orelse))
        elif isinstance(node, (While, RepeatUntil)):
            stack.extend((node.cond, node.body))
    return frozenset(names)


# ════════════════════════════════════════════════════════════════════════
# §6  S-expression rendering
# ════════════════════════════════════════════════════════════════════════

_S = sexpdata.Symbol


def _sexp_int(n: ExtendedInteger) -> Any:
    return n.value if n.is_finite else _S(_literal(n))


def _to_sexp_data(node: Any) -> Any:
    if isinstance(node, Number):
        return _sexp_int(node.value)
    if isinstance(node, IntervalLiteral):
        return [_S("interval"), _sexp_int(node.lo), _sexp_int(node.hi)]
    if isinstance(node, Variable):
        return _S(node.name)
    if isinstance(node, PostIncrement):
        return [_S("post++"), _S(node.name)]
    if isinstance(node, PostDecrement):
        return [_S("post--"), _S(node.name)]
    if isinstance(node, (BinOp, Compare)):
        return [_S(node.op.value), _to_sexp_data(node.left), _to_sexp_data(node.right)]
    if isinstance(node, BoolLiteral):
        return _S(str(node))
    if isinstance(node, Not):
        return [_S("not"), _to_sexp_data(node.operand)]
    if isinstance(node, And):
        return [_S("and"), _to_sexp_data(node.left), _to_sexp_data(node.right)]
    if isinstance(node, Or):
        return [_S("or"), _to_sexp_data(node.left), _to_sexp_data(node.right)]
    if isinstance(node, Skip):
        return [_S("skip")]
    if isinstance(node, Assign):
        return [_S(":="), _S(node.name), _to_sexp_data(node.expr)]
    if isinstance(node, Chain):
        items: List[Any] = [_S("seq")]
        while isinstance(node, Chain):
            items.append(_to_sexp_data(node.first))
            node = node.second
        items.append(_to_sexp_data(node))
        return items
    if isinstance(node, If):
        return [
            _S("if"),
            _to_sexp_data(node.cond),
            _to_sexp_data(node.then),
            _to_sexp_data(node.orelse),
        ]
    if isinstance(node, While):
        head = [_S("while")] if node.delay is None else [_S("while"), [_S("delay"), node.delay]]
        return head + [_to_sexp_data(node.cond), _to_sexp_data(node.body)]
    if isinstance(node, RepeatUntil):
        head = [_S("repeat")] if node.delay is None else [_S("repeat"), [_S("delay"), node.delay]]
        return head + [_to_sexp_data(node.body), _to_sexp_data(node.cond)]
    raise TypeError(f"not a while-language node: {node!r}")


def to_sexp(node: Any) -> str:
    """Render any AST node as an S-expression string.

    >>> to_sexp(Assign("x", BinOp(ArithOp.ADD, Variable("x"), Number(1))))
    '(:= x (+ x 1))'
    """
    return sexpdata.dumps(_to_sexp_data(node))
