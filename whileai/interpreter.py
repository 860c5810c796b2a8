"""
whileai/interpreter.py — Abstract denotational semantics of statements.

:class:`AbstractInterpreter` walks the syntax tree recursively.  Every
statement maps an entry state to an exit state and appends the states
of its program points to the invariant, in the order given by
:mod:`whileai.program_points`.

Loops are solved in two phases, each capped at ``max_iterations`` or, when
the domain reports a finite height, at a bound derived from that height:

1. *widening*: from ⊥, ``X ← X ∇ (entry ⊔ body(guard(X)))``, with plain
   ``⊔`` during the first ``delay`` steps, until ``X`` is stable;
2. *narrowing*: ``X ← X Δ (entry ⊔ body(guard(X)))``, with plain ``⊓``
   during the first ``delay`` steps, until ``X`` is stable.

Widening reaches a post-fixpoint in finitely many steps because every
chain of widenings stabilises; narrowing only ever shrinks ``X`` and
stays above the least fixpoint.  A phase that exhausts the cap raises
:class:`~whileai.errors.FixpointDivergenceError`: it means a domain
operator broke its termination obligation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Generic, Mapping, Optional, Tuple, TypeVar

from whileai.ast import (
    AExpr,
    Assign,
    BExpr,
    Chain,
    If,
    RepeatUntil,
    Skip,
    Stmt,
    While,
    negate,
    written_names,
)
from whileai.config import AnalysisConfig
from whileai.domain import Domain
from whileai.errors import FixpointDivergenceError
from whileai.invariant import Invariant
from whileai.state import State

__all__ = ["AbstractInterpreter", "AnalysisResult", "analyze"]

logger = logging.getLogger(__name__)

V = TypeVar("V")


@dataclass(frozen=True)
class AnalysisResult(Generic[V]):
    """Final abstract state and the per-program-point trace."""

    state: State[V]
    invariant: Invariant[V]


class AbstractInterpreter(Generic[V]):
    """Recursive abstract interpreter over one domain."""

    def __init__(
        self,
        domain: Domain[V],
        delay: int = 0,
        max_iterations: int = 1000,
    ) -> None:
        self.domain = domain
        self.delay = delay
        self.max_iterations = max_iterations

    @classmethod
    def from_config(cls, config: AnalysisConfig) -> AbstractInterpreter:
        return cls(config.make_domain(), config.delay, config.max_iterations)

    # ---- Entry points ------------------------------------------------------

    def initial_state(self, bindings: Optional[Mapping[str, AExpr]] = None) -> State[V]:
        """Reachable state binding each name to the abstraction of an expression."""
        state = State.empty(self.domain)
        for name, expr in (bindings or {}).items():
            value, state = self.domain.eval_aexpr(expr, state)
            state = state.put(name, value)
        return state

    def run(self, stmt: Stmt, state: Optional[State[V]] = None) -> AnalysisResult[V]:
        """Analyse *stmt* from *state* (default: the empty state)."""
        if state is None:
            state = State.empty(self.domain)
        logger.info("analysing with %r, delay=%d", self.domain, self.delay)
        final, invariant = self.denote(stmt, state, Invariant())
        logger.info("analysis finished: %d program points, final state %s", len(invariant), final)
        return AnalysisResult(final, invariant)

    # ---- Statements --------------------------------------------------------

    def denote(
        self, stmt: Stmt, state: State[V], invariant: Invariant[V]
    ) -> Tuple[State[V], Invariant[V]]:
        """Exit state of *stmt* from *state*, with its points appended to *invariant*."""
        if isinstance(stmt, Skip):
            return state, invariant.append(state)

        if isinstance(stmt, Assign):
            value, state = self.domain.eval_aexpr(stmt.expr, state)
            state = state.put(stmt.name, value)
            return state, invariant.append(state)

        if isinstance(stmt, Chain):
            state, invariant = self.denote(stmt.first, state, invariant)
            return self.denote(stmt.second, state, invariant)

        if isinstance(stmt, If):
            then_guard = self.domain.eval_bexpr(stmt.cond, state)
            else_guard = self.domain.eval_bexpr(negate(stmt.cond), state)
            then_out, then_inv = self.denote(stmt.then, then_guard, Invariant())
            else_out, else_inv = self.denote(stmt.orelse, else_guard, Invariant())
            merged = then_out.lub(else_out)
            invariant = (
                invariant.append(then_guard)
                .extend(then_inv)
                .append(else_guard)
                .extend(else_inv)
                .append(merged)
            )
            return merged, invariant

        if isinstance(stmt, While):
            return self._loop(stmt.cond, stmt.body, stmt.delay, state, invariant)

        if isinstance(stmt, RepeatUntil):
            state, invariant = self.denote(stmt.body, state, invariant)
            return self._loop(negate(stmt.cond), stmt.body, stmt.delay, state, invariant)

        raise TypeError(f"not a statement: {stmt!r}")

    # ---- Loops -------------------------------------------------------------

    def _step(
        self, cond: BExpr, body: Stmt, entry: State[V], candidate: State[V]
    ) -> Tuple[State[V], Invariant[V], State[V]]:
        """One guard→body pass: guard state, body trace, entry ⊔ body exit."""
        guard = self.domain.eval_bexpr(cond, candidate)
        body_out, body_inv = self.denote(body, guard, Invariant())
        return guard, body_inv, entry.lub(body_out)

    def _phase_cap(self, cond: BExpr, body: Stmt, delay: int) -> int:
        """Iteration cap for each fixpoint phase of one loop.

        When widening is the join of a finite-height lattice, every step
        grows at least one variable the loop writes, so the chain can be
        as long as the height times the number of such variables.
        """
        height = self.domain.height()
        if height is None:
            return self.max_iterations
        variables = max(1, len(written_names(cond, body)))
        return max(self.max_iterations, height * variables + delay + 2)

    def _loop(
        self,
        cond: BExpr,
        body: Stmt,
        loop_delay: Optional[int],
        entry: State[V],
        invariant: Invariant[V],
    ) -> Tuple[State[V], Invariant[V]]:
        delay = self.delay if loop_delay is None else loop_delay
        cap = self._phase_cap(cond, body, delay)

        candidate = State.unreachable(self.domain)
        for iteration in range(cap):
            _, _, new = self._step(cond, body, entry, candidate)
            if iteration < delay:
                widened = candidate.lub(new)
            else:
                widened = candidate.widen(new)
            logger.debug("while %s: widening step %d: %s", cond, iteration, widened)
            if widened == candidate:
                break
            candidate = widened
        else:
            raise FixpointDivergenceError("widening", cap)

        for iteration in range(cap):
            guard, body_inv, new = self._step(cond, body, entry, candidate)
            if iteration < delay:
                narrowed = candidate.glb(new)
            else:
                narrowed = candidate.narrow(new)
            logger.debug("while %s: narrowing step %d: %s", cond, iteration, narrowed)
            if narrowed == candidate:
                break
            candidate = narrowed
        else:
            raise FixpointDivergenceError("narrowing", cap)

        exit_state = self.domain.eval_bexpr(negate(cond), candidate)
        invariant = invariant.append(candidate, guard).extend(body_inv).append(exit_state)
        return exit_state, invariant


def analyze(
    stmt: Stmt,
    config: Optional[AnalysisConfig] = None,
    bindings: Optional[Mapping[str, AExpr]] = None,
) -> AnalysisResult:
    """Analyse *stmt* under *config* starting from *bindings*."""
    interpreter = AbstractInterpreter.from_config(config or AnalysisConfig())
    return interpreter.run(stmt, interpreter.initial_state(bindings))
