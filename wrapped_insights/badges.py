"""Ordered badge ladders shared by the scorers"""
from dataclasses import dataclass
from typing import AbstractSet, Dict, List, Mapping, Optional, Sequence, Tuple

from wrapped_insights.errors import ConfigurationError


@dataclass(frozen=True)
class Badge:
    """A resolved badge tier; rank 0 is the ladder's default"""
    name: str
    description: str
    rank: int


def validate_ladder(tiers: Sequence, default_badge: str,
                    signals: Optional[AbstractSet[str]] = None) -> None:
    """
    Check a ladder listed highest tier first.

    Each tier needs a unique badge, gates on known signals only, and for
    every signal the minimums must never increase going down the ladder.
    """
    names = [tier.badge for tier in tiers]
    if len(set(names)) != len(names):
        raise ConfigurationError(f"Duplicate badge names in ladder: {names}")
    if default_badge in names:
        raise ConfigurationError(f"Default badge '{default_badge}' must not appear as a gated tier")

    previous: Dict[str, Tuple[str, float]] = {}
    for tier in tiers:
        if not tier.gates:
            raise ConfigurationError(f"Tier '{tier.badge}' has no gates")
        for signal, minimum in tier.gates.items():
            if signals is not None and signal not in signals:
                raise ConfigurationError(
                    f"Tier '{tier.badge}' gates on unknown signal '{signal}' (expected one of {sorted(signals)})"
                )
            if minimum < 0:
                raise ConfigurationError(f"Tier '{tier.badge}' has a negative minimum for '{signal}'")
            if signal in previous and minimum > previous[signal][1]:
                higher_badge, higher_minimum = previous[signal]
                raise ConfigurationError(
                    f"Ladder is not monotonic on '{signal}': '{tier.badge}' needs {minimum} "
                    f"but higher tier '{higher_badge}' only needs {higher_minimum}"
                )
            previous[signal] = (tier.badge, minimum)


class BadgeLadder:
    """
    Resolves a set of signals to exactly one badge.

    Tiers are evaluated from highest to lowest; a tier is unlocked when any
    one of its gates is met (signal >= minimum). When no tier unlocks, the
    default badge is returned, so resolution is total.
    """

    def __init__(self, tiers: Sequence, default_badge: str, default_description: str = "",
                 signals: Optional[AbstractSet[str]] = None):
        validate_ladder(tiers, default_badge, signals)
        count = len(tiers)
        self._tiers: List[Tuple[Badge, Dict[str, float]]] = [
            (Badge(name=tier.badge, description=tier.description, rank=count - index), dict(tier.gates))
            for index, tier in enumerate(tiers)
        ]
        self.default = Badge(name=default_badge, description=default_description, rank=0)

    @property
    def names(self) -> List[str]:
        """Badge names from highest to lowest, default last"""
        return [badge.name for badge, _ in self._tiers] + [self.default.name]

    def rank_of(self, name: str) -> int:
        for badge, _ in self._tiers:
            if badge.name == name:
                return badge.rank
        if name == self.default.name:
            return 0
        raise KeyError(name)

    def resolve(self, signals: Mapping[str, float]) -> Badge:
        """Return the highest unlocked tier for the given signal values"""
        for badge, gates in self._tiers:
            if any(signals.get(signal, 0) >= minimum for signal, minimum in gates.items()):
                return badge
        return self.default
