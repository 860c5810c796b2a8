"""
whileai/config.py — Analysis configuration.

Configuration is fixed before an analysis starts: :class:`AnalysisConfig`
is frozen and validated on construction, and the domain it builds
captures the clamp window in an immutable :class:`IntervalBounds`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, FrozenSet, List, Optional, Tuple

from whileai.constant import ConstantDomain
from whileai.domain import Domain
from whileai.errors import ConfigurationError, ErrorCode
from whileai.interval import IntervalBounds, IntervalDomain

__all__ = ["AnalysisConfig", "DomainRegistry", "DEFAULT_REGISTRY"]


# ===================================================================== #
#  Domain registry                                                       #
# ===================================================================== #

class DomainRegistry:
    """Registry of domain factories by name.

    A factory takes the configuration and returns a fresh domain.
    """

    def __init__(self) -> None:
        self._factories: Dict[str, Callable[[AnalysisConfig], Domain]] = {}
        self._factories["interval"] = lambda config: IntervalDomain(config.bounds())
        self._factories["constant"] = lambda config: ConstantDomain()

    def register(self, tag: str, factory: Callable[[AnalysisConfig], Domain]) -> None:
        """Register a domain factory under the given *tag*."""
        self._factories[tag] = factory

    def has(self, tag: str) -> bool:
        return tag in self._factories

    def tags(self) -> FrozenSet[str]:
        return frozenset(self._factories)

    def create(self, tag: str, config: AnalysisConfig) -> Domain:
        """Instantiate the domain identified by *tag*."""
        if tag not in self._factories:
            raise ConfigurationError(
                f"unknown domain {tag!r} (choose from {', '.join(sorted(self._factories))})",
                ErrorCode.UNKNOWN_DOMAIN,
            )
        return self._factories[tag](config)


DEFAULT_REGISTRY = DomainRegistry()


# ===================================================================== #
#  AnalysisConfig                                                        #
# ===================================================================== #

@dataclass(frozen=True)
class AnalysisConfig:
    """Tuning knobs for one analysis run.

    ``lower_bound`` / ``upper_bound`` form the interval clamp window;
    ``None`` leaves that side unbounded.  ``delay`` is the number of
    plain lub (resp. glb) steps before widening (resp. narrowing) starts,
    and ``max_iterations`` caps each fixpoint phase of every loop.
    """

    domain: str = "interval"
    lower_bound: Optional[int] = None
    upper_bound: Optional[int] = None
    delay: int = 0
    max_iterations: int = 1000

    def __post_init__(self) -> None:
        problems = self.validate()
        if problems:
            code, message = problems[0]
            raise ConfigurationError(message, code)

    def validate(self, registry: Optional[DomainRegistry] = None) -> List[Tuple[ErrorCode, str]]:
        """Return ``(ErrorCode, message)`` pairs (empty if valid)."""
        registry = registry or DEFAULT_REGISTRY
        problems: List[Tuple[ErrorCode, str]] = []
        if (
            self.lower_bound is not None
            and self.upper_bound is not None
            and self.lower_bound > self.upper_bound
        ):
            problems.append((
                ErrorCode.INVERTED_BOUNDS,
                f"lower bound {self.lower_bound} is greater than upper bound {self.upper_bound}",
            ))
        if self.delay < 0:
            problems.append((ErrorCode.NEGATIVE_DELAY, "delay must be non-negative"))
        if self.max_iterations < 1:
            problems.append((ErrorCode.BAD_ITERATION_CAP, "max_iterations must be positive"))
        if not registry.has(self.domain):
            problems.append((ErrorCode.UNKNOWN_DOMAIN, f"unknown domain {self.domain!r}"))
        return problems

    def bounds(self) -> IntervalBounds:
        return IntervalBounds.of(self.lower_bound, self.upper_bound)

    def make_domain(self, registry: Optional[DomainRegistry] = None) -> Domain:
        return (registry or DEFAULT_REGISTRY).create(self.domain, self)
