from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Union

from backend.engine.options import EngineOptions
from backend.engine.result import ChannelResult, SavingsResult
from backend.models.enums import ChannelKind
from backend.models.params import Params

ChannelFn = Callable[[Params, EngineOptions], Union[ChannelResult, SavingsResult]]

# Global registry -- maps channel_id -> ChannelDefinition, in registration order
_REGISTRY: dict[str, ChannelDefinition] = {}


@dataclass(frozen=True)
class ChannelDefinition:
    """A value channel the engine evaluates on every run."""

    id: str
    label: str
    description: str
    required_params: list[str]  # Params field names
    formula_fn: ChannelFn
    kind: ChannelKind = ChannelKind.SALES


def register_channel(
    channel_id: str,
    label: str,
    description: str,
    required_params: list[str],
    kind: ChannelKind = ChannelKind.SALES,
) -> Callable:
    """Decorator to register a funnel function as a channel."""

    def decorator(fn: ChannelFn) -> ChannelFn:
        definition = ChannelDefinition(
            id=channel_id,
            label=label,
            description=description,
            required_params=required_params,
            formula_fn=fn,
            kind=kind,
        )
        _REGISTRY[channel_id] = definition
        return fn

    return decorator


def get_channel(channel_id: str) -> Optional[ChannelDefinition]:
    """Look up a channel definition by ID."""
    return _REGISTRY.get(channel_id)


def get_all_channels(kind: Optional[ChannelKind] = None) -> dict[str, ChannelDefinition]:
    """Return the registry (read-only copy), optionally filtered by kind."""
    return {
        cid: definition
        for cid, definition in _REGISTRY.items()
        if kind is None or definition.kind is kind
    }
