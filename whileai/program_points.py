"""
whileai/program_points.py — Static enumeration of program points.

The interpreter records one state per program point, in the order
produced here, so the two sequences can be zipped by position:

    skip / x := e      one point
    if                 [if-guard]  then...  [else-guard]  else...  [end-if]
    while              [while-inv]  [while-guard]  body...  [end-while]
    repeat             body...  [while-inv]  [while-guard]  body...  [end-while]
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Sequence, Tuple, TypeVar

from whileai.ast import Assign, BExpr, Chain, If, RepeatUntil, Skip, Stmt, While, negate
from whileai.invariant import Invariant
from whileai.state import State

__all__ = ["PointKind", "ProgramPoint", "program_points", "annotate"]

V = TypeVar("V")


class PointKind(Enum):
    SKIP = "skip"
    ASSIGNMENT = "assignment"
    IF_GUARD = "if-guard"
    ELSE_GUARD = "else-guard"
    END_IF = "end-if"
    WHILE_INV = "while-inv"
    WHILE_GUARD = "while-guard"
    END_WHILE = "end-while"


@dataclass(frozen=True, slots=True)
class ProgramPoint:
    kind: PointKind
    label: str

    def __str__(self) -> str:
        return self.label


def _loop_points(
    cond: BExpr, body: Stmt, delay: int, default_delay: int, out: List[ProgramPoint]
) -> None:
    out.append(ProgramPoint(PointKind.WHILE_INV, f"[while-inv] @delay:{delay}"))
    out.append(ProgramPoint(PointKind.WHILE_GUARD, f"[while-guard] {cond}"))
    _collect(body, default_delay, out)
    out.append(ProgramPoint(PointKind.END_WHILE, f"[end-while] {negate(cond)}"))


def _collect(stmt: Stmt, default_delay: int, out: List[ProgramPoint]) -> None:
    if isinstance(stmt, Skip):
        out.append(ProgramPoint(PointKind.SKIP, str(stmt)))
    elif isinstance(stmt, Assign):
        out.append(ProgramPoint(PointKind.ASSIGNMENT, str(stmt)))
    elif isinstance(stmt, Chain):
        _collect(stmt.first, default_delay, out)
        _collect(stmt.second, default_delay, out)
    elif isinstance(stmt, If):
        out.append(ProgramPoint(PointKind.IF_GUARD, f"[if-guard] {stmt.cond}"))
        _collect(stmt.then, default_delay, out)
        out.append(ProgramPoint(PointKind.ELSE_GUARD, f"[else-guard] {negate(stmt.cond)}"))
        _collect(stmt.orelse, default_delay, out)
        out.append(ProgramPoint(PointKind.END_IF, "[end-if]"))
    elif isinstance(stmt, While):
        delay = default_delay if stmt.delay is None else stmt.delay
        _loop_points(stmt.cond, stmt.body, delay, default_delay, out)
    elif isinstance(stmt, RepeatUntil):
        delay = default_delay if stmt.delay is None else stmt.delay
        _collect(stmt.body, default_delay, out)
        _loop_points(negate(stmt.cond), stmt.body, delay, default_delay, out)
    else:
        raise TypeError(f"not a statement: {stmt!r}")


def program_points(stmt: Stmt, default_delay: int = 0) -> List[ProgramPoint]:
    """Program points of *stmt* in invariant order."""
    out: List[ProgramPoint] = []
    _collect(stmt, default_delay, out)
    return out


def annotate(
    points: Sequence[ProgramPoint], invariant: Invariant[V]
) -> List[Tuple[ProgramPoint, State[V]]]:
    """Pair each program point with its recorded state."""
    if len(points) != len(invariant):
        raise ValueError(
            f"invariant has {len(invariant)} states for {len(points)} program points"
        )
    return list(zip(points, invariant))
