"""Error taxonomy shared by the scheduling engine and its callers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable


class ConfigurationError(ValueError):
    """Raised when a scheduling run is given a configuration it cannot honour."""


@dataclass(frozen=True)
class NormalizationWarning:
    """A unit field was missing or malformed and a default was substituted.

    These are reported to an observer and never raised.
    """

    unit_id: str
    field: str
    raw_value: Any
    default: Any


NormalizationObserver = Callable[[NormalizationWarning], None]
