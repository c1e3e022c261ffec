"""Declarative funnel stages.

A funnel is an ordered tuple of stages; each stage multiplies the running
count by one percentage field of Params.
"""

from __future__ import annotations

from dataclasses import dataclass

from backend.models.params import Params


@dataclass(frozen=True)
class Stage:
    """One multiplicative conversion step."""

    name: str  # what the count is called after this stage
    rate: str  # Params field holding the percentage
    label: str  # short text used in derivation steps

    def apply(self, count: float, params: Params) -> float:
        return count * (self.rate_value(params) / 100)

    def rate_value(self, params: Params) -> float:
        return getattr(params, self.rate)


@dataclass(frozen=True)
class FunnelTrace:
    """Counts observed at every stage of one funnel run."""

    start: float
    stages: tuple[Stage, ...]
    counts: tuple[float, ...]

    @property
    def final(self) -> float:
        return self.counts[-1] if self.counts else self.start

    def count(self, name: str) -> float:
        for stage, value in zip(self.stages, self.counts):
            if stage.name == name:
                return value
        raise KeyError(name)


@dataclass(frozen=True)
class Funnel:
    stages: tuple[Stage, ...]

    def run(self, start: float, params: Params) -> FunnelTrace:
        counts: list[float] = []
        current = start
        for stage in self.stages:
            current = stage.apply(current, params)
            counts.append(current)
        return FunnelTrace(start=start, stages=self.stages, counts=tuple(counts))

    def without(self, name: str) -> Funnel:
        return Funnel(tuple(s for s in self.stages if s.name != name))
