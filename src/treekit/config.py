"""Engine configuration for treekit.

``TreeConfig`` carries the tunables of the order-key allocator and the
history store.  It can be built in code, from a plain mapping, or from a
YAML document::

    order_gap: 10
    min_order_gap: 1
    history_limit: 100
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

import yaml

ORDER_GAP: int = 10
MIN_ORDER_GAP: int = 1
HISTORY_LIMIT: int = 100


class ConfigError(ValueError):
    """Raised when a configuration value is missing, malformed or out of range."""


@dataclass(frozen=True)
class TreeConfig:
    """Tunables shared by the allocator, the engine and the history store.

    Parameters
    ----------
    order_gap:
        Distance between consecutive keys when keys are appended or a
        sibling list is renormalized.
    min_order_gap:
        A positional insert between two neighbours takes their midpoint
        only while the neighbours are more than this far apart.
    history_limit:
        Maximum number of undo steps kept.  The oldest step is evicted
        first.  ``None`` keeps every step.
    """

    order_gap: int = ORDER_GAP
    min_order_gap: int = MIN_ORDER_GAP
    history_limit: int | None = field(default=HISTORY_LIMIT)

    def __post_init__(self) -> None:
        if not isinstance(self.order_gap, int) or self.order_gap < 2:
            raise ConfigError(f"order_gap must be an integer >= 2, got {self.order_gap!r}")
        if not isinstance(self.min_order_gap, int) or not 0 <= self.min_order_gap < self.order_gap:
            raise ConfigError(
                f"min_order_gap must be an integer in [0, order_gap), got {self.min_order_gap!r}"
            )
        if self.history_limit is not None and (
            not isinstance(self.history_limit, int) or self.history_limit < 1
        ):
            raise ConfigError(
                f"history_limit must be a positive integer or null, got {self.history_limit!r}"
            )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "TreeConfig":
        """Build a config from a mapping, rejecting unknown keys."""
        if data is None:
            return cls()
        if not isinstance(data, Mapping):
            raise ConfigError(f"configuration must be a mapping, got {type(data).__name__}")
        known = {"order_gap", "min_order_gap", "history_limit"}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"unknown configuration keys: {', '.join(unknown)}")
        return cls(**dict(data))

    @classmethod
    def from_yaml(cls, text: str) -> "TreeConfig":
        """Build a config from YAML text.  An empty document yields the defaults."""
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ConfigError(f"invalid YAML configuration: {exc}") from exc
        return cls.from_mapping(data)


DEFAULT_CONFIG = TreeConfig()


def load_config(path: str | Path) -> TreeConfig:
    """Read a YAML configuration file."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"cannot read configuration {str(path)!r}: {exc}") from exc
    return TreeConfig.from_yaml(text)
