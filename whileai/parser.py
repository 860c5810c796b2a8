"""
whileai/parser.py — Concrete syntax of the while language.

Built on a Parsimonious PEG grammar and a ``NodeVisitor`` that turns the
parse tree into :mod:`whileai.ast` nodes.

Example program::

    // count to three
    x := 0;
    while x < 3 do
        x := x + 1
    done;
    if x == 3 then y := 1 else y := [0, 10] end

Initial-state files use the same lexical rules::

    x: [0, 10]
    y: 5;
    z: [neginf, 0]
"""

from __future__ import annotations

import logging
from typing import Dict

from parsimonious.exceptions import ParseError as PegParseError
from parsimonious.grammar import Grammar
from parsimonious.nodes import Node, NodeVisitor

from whileai.ast import (
    AExpr,
    And,
    ArithOp,
    Assign,
    BExpr,
    BinOp,
    BoolLiteral,
    CmpOp,
    Compare,
    If,
    IntervalLiteral,
    Not,
    Number,
    Or,
    PostDecrement,
    PostIncrement,
    RepeatUntil,
    Skip,
    Stmt,
    Variable,
    While,
    chain,
)
from whileai.errors import ErrorCode, ParseError
from whileai.integer import ExtendedInteger

__all__ = [
    "WHILE_GRAMMAR",
    "WhileASTBuilder",
    "parse_program",
    "parse_aexpr",
    "parse_bexpr",
    "parse_state",
]

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════
#  PART 1 — GRAMMAR
# ═══════════════════════════════════════════════════════════════════

WHILE_GRAMMAR = Grammar(r'''
    # ─────────────────────────────────────────────────────────────
    # Statements
    # ─────────────────────────────────────────────────────────────

    program             = _ stmt_seq trailing_semi _
    trailing_semi       = (_ ";")?
    stmt_seq            = stmt more_stmts
    more_stmts          = (_ ";" _ stmt)*
    stmt                = if_stmt
                        / while_stmt
                        / repeat_stmt
                        / kw_skip
                        / assign_stmt

    if_stmt             = kw_if _ bexpr _ kw_then _ stmt_seq else_part _ kw_end
    else_part           = (_ kw_else _ stmt_seq)?
    while_stmt          = kw_while delay _ bexpr _ kw_do _ stmt_seq _ kw_done
    repeat_stmt         = kw_repeat delay _ stmt_seq _ kw_until _ bexpr
    delay               = ("[" _ natural _ "]")?
    assign_stmt         = identifier _ ":=" _ aexpr

    # ─────────────────────────────────────────────────────────────
    # Arithmetic expressions
    # ─────────────────────────────────────────────────────────────

    aexpr               = term more_terms
    more_terms          = (_ add_op _ term)*
    term                = factor more_factors
    more_factors        = (_ mul_op _ factor)*
    factor              = interval
                        / integer
                        / post_inc
                        / post_dec
                        / identifier
                        / paren_aexpr
    paren_aexpr         = "(" _ aexpr _ ")"
    post_inc            = identifier "++"
    post_dec            = identifier "--"
    interval            = "[" _ integer _ "," _ integer _ "]"
    add_op              = "+" / "-"
    mul_op              = "*" / "/"

    # ─────────────────────────────────────────────────────────────
    # Boolean expressions
    # ─────────────────────────────────────────────────────────────

    bexpr               = bterm more_bterms
    more_bterms         = (_ "||" _ bterm)*
    bterm               = bfactor more_bfactors
    more_bfactors       = (_ "&&" _ bfactor)*
    bfactor             = not_expr
                        / kw_true
                        / kw_false
                        / comparison
                        / paren_bexpr
    not_expr            = "!" _ bfactor
    comparison          = aexpr _ cmp_op _ aexpr
    cmp_op              = "==" / "!=" / "<=" / ">=" / "<" / ">"
    paren_bexpr         = "(" _ bexpr _ ")"

    # ─────────────────────────────────────────────────────────────
    # Initial-state files
    # ─────────────────────────────────────────────────────────────

    state_file          = _ binding*
    binding             = identifier _ ":" _ state_value _ binding_sep
    binding_sep         = (";" _)?
    state_value         = interval / integer

    # ─────────────────────────────────────────────────────────────
    # Lexical
    # ─────────────────────────────────────────────────────────────

    kw_if               = ~r"if\b"
    kw_then             = ~r"then\b"
    kw_else             = ~r"else\b"
    kw_end              = ~r"end\b"
    kw_while            = ~r"while\b"
    kw_do               = ~r"do\b"
    kw_done             = ~r"done\b"
    kw_repeat           = ~r"repeat\b"
    kw_until            = ~r"until\b"
    kw_skip             = ~r"skip\b"
    kw_true             = ~r"true\b"
    kw_false            = ~r"false\b"

    integer             = ~r"(?:neginf|posinf)\b|-?[0-9]+"
    natural             = ~r"[0-9]+"
    identifier          = ~r"(?!(?:if|then|else|end|while|do|done|repeat|until|skip|true|false|neginf|posinf)\b)[A-Za-z_][A-Za-z0-9_]*"
    _                   = ~r"(?:\s|//[^\n]*)*"
''')


# ═══════════════════════════════════════════════════════════════════
#  PART 2 — AST VISITOR (Parse Tree → AST)
# ═══════════════════════════════════════════════════════════════════

class WhileASTBuilder(NodeVisitor):
    """Transforms a Parsimonious parse tree into :mod:`whileai.ast` nodes."""

    def generic_visit(self, node, visited_children):
        return visited_children or node

    # ─────────────────────────────────────────────────────────────
    # Statements
    # ─────────────────────────────────────────────────────────────

    def visit_program(self, node, visited_children):
        _, stmt, _, _ = visited_children
        return stmt

    def visit_stmt_seq(self, node, visited_children):
        first, rest = visited_children
        return chain(first, *rest)

    def visit_more_stmts(self, node, visited_children):
        return [item[3] for item in visited_children]

    def visit_stmt(self, node, visited_children):
        return visited_children[0]

    def visit_kw_skip(self, node, visited_children):
        return Skip()

    def visit_if_stmt(self, node, visited_children):
        _, _, cond, _, _, _, then, orelse, _, _ = visited_children
        return If(cond, then, orelse)

    def visit_else_part(self, node, visited_children):
        if not visited_children:
            return Skip()
        return visited_children[0][3]

    def visit_while_stmt(self, node, visited_children):
        _, delay, _, cond, _, _, _, body, _, _ = visited_children
        return While(cond, body, delay)

    def visit_repeat_stmt(self, node, visited_children):
        _, delay, _, body, _, _, _, cond = visited_children
        return RepeatUntil(body, cond, delay)

    def visit_delay(self, node, visited_children):
        if not visited_children:
            return None
        return visited_children[0][2]

    def visit_natural(self, node, visited_children):
        return int(node.text)

    def visit_assign_stmt(self, node, visited_children):
        name, _, _, _, expr = visited_children
        return Assign(name, expr)

    # ─────────────────────────────────────────────────────────────
    # Arithmetic expressions
    # ─────────────────────────────────────────────────────────────

    def _fold_binops(self, node, visited_children):
        result, rest = visited_children
        for op, operand in rest:
            result = BinOp(op, result, operand)
        return result

    visit_aexpr = _fold_binops
    visit_term = _fold_binops

    def visit_more_terms(self, node, visited_children):
        return [(item[1], item[3]) for item in visited_children]

    visit_more_factors = visit_more_terms

    def visit_add_op(self, node, visited_children):
        return ArithOp(node.text)

    visit_mul_op = visit_add_op

    def visit_factor(self, node, visited_children):
        value = visited_children[0]
        if isinstance(value, str):
            return Variable(value)
        if isinstance(value, ExtendedInteger):
            return Number(value)
        return value

    def visit_paren_aexpr(self, node, visited_children):
        return visited_children[2]

    def visit_post_inc(self, node, visited_children):
        return PostIncrement(visited_children[0])

    def visit_post_dec(self, node, visited_children):
        return PostDecrement(visited_children[0])

    def visit_interval(self, node, visited_children):
        _, _, lo, _, _, _, hi, _, _ = visited_children
        return IntervalLiteral(lo, hi)

    def visit_integer(self, node, visited_children):
        return ExtendedInteger.parse(node.text)

    def visit_identifier(self, node, visited_children):
        return node.text

    # ─────────────────────────────────────────────────────────────
    # Boolean expressions
    # ─────────────────────────────────────────────────────────────

    def visit_bexpr(self, node, visited_children):
        result, rest = visited_children
        for operand in rest:
            result = Or(result, operand)
        return result

    def visit_bterm(self, node, visited_children):
        result, rest = visited_children
        for operand in rest:
            result = And(result, operand)
        return result

    def visit_more_bterms(self, node, visited_children):
        return [item[3] for item in visited_children]

    visit_more_bfactors = visit_more_bterms

    def visit_bfactor(self, node, visited_children):
        return visited_children[0]

    def visit_not_expr(self, node, visited_children):
        return Not(visited_children[2])

    def visit_kw_true(self, node, visited_children):
        return BoolLiteral(True)

    def visit_kw_false(self, node, visited_children):
        return BoolLiteral(False)

    def visit_comparison(self, node, visited_children):
        left, _, op, _, right = visited_children
        return Compare(op, left, right)

    def visit_cmp_op(self, node, visited_children):
        return CmpOp(node.text)

    def visit_paren_bexpr(self, node, visited_children):
        return visited_children[2]

    # ─────────────────────────────────────────────────────────────
    # Initial-state files
    # ─────────────────────────────────────────────────────────────

    def visit_state_file(self, node, visited_children):
        _, bindings = visited_children
        if isinstance(bindings, Node):
            return {}
        return dict(bindings)

    def visit_binding(self, node, visited_children):
        name, _, _, _, value, _, _ = visited_children
        return name, value

    def visit_state_value(self, node, visited_children):
        value = visited_children[0]
        if isinstance(value, ExtendedInteger):
            return Number(value)
        return value


# ═══════════════════════════════════════════════════════════════════
#  PART 3 — PUBLIC API
# ═══════════════════════════════════════════════════════════════════

def _syntax_error(exc: PegParseError, filename: str, code: ErrorCode) -> ParseError:
    snippet = exc.text[exc.pos:exc.pos + 20].split("\n", 1)[0]
    where = f"near {snippet!r}" if snippet else "at end of input"
    return ParseError(f"syntax error {where}", exc.line(), exc.column(), filename, code)


def _parse(rule: str, text: str, filename: str, code: ErrorCode = ErrorCode.SYNTAX):
    try:
        tree = WHILE_GRAMMAR[rule].parse(text)
    except PegParseError as exc:
        raise _syntax_error(exc, filename, code) from exc
    return WhileASTBuilder().visit(tree)


def parse_program(text: str, filename: str = "<input>") -> Stmt:
    """Parse a whole program.

    >>> str(parse_program("x := 5; y := x + 3"))
    'x := 5; y := (x + 3)'
    """
    stmt = _parse("program", text, filename)
    logger.debug("parsed %s: %s", filename, stmt)
    return stmt


def parse_aexpr(text: str) -> AExpr:
    """Parse a single arithmetic expression."""
    return _parse("aexpr", text.strip(), "<expression>")


def parse_bexpr(text: str) -> BExpr:
    """Parse a single boolean expression."""
    return _parse("bexpr", text.strip(), "<expression>")


def parse_state(text: str, filename: str = "<state>") -> Dict[str, AExpr]:
    """Parse ``name: [a, b]`` / ``name: n`` bindings into literal expressions."""
    return _parse("state_file", text, filename, ErrorCode.STATE_FILE)
