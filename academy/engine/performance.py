"""
Player performance aggregation.

Two pure, total functions derive a player's summary numbers from the
current attribute snapshot and the append-only performance history.

Overall rating
--------------
1. **Blend**: when the history is non-empty, every current attribute that
   also appears (non-zero) in the most recent history entry's snapshot is
   replaced by the mean of the two values:

       value = (current + latest_historical) / 2

   This halves the weight of the newest submission whenever history
   exists; the behaviour is kept as-is.
2. **Weighted mean**: the six technical attributes weigh 0.15 each and
   ``session_rating`` 0.10.  The sum of ``value × weight`` is divided by the
   sum of the weights of the fields actually present, so a missing field
   does not drag the score toward zero.  Fields outside the weight table
   are ignored.
3. Rounded half-up to one decimal; 0 when no weighted field is present.

Average performance
-------------------
Each history entry contributes its first usable rating among:
nested ``attributes.session_rating``, nested ``attributes.rating``,
top-level ``rating``, top-level ``session_rating``.  Missing, zero and
non-numeric values are not usable.  The mean of usable ratings is rounded
to one decimal; 0 when no entry qualifies.

Both functions accept pydantic models or plain mappings, in snake_case or
camelCase (``ballControl``), and never raise.
"""

from __future__ import annotations

import math
import re
from typing import Any, Iterable, Mapping, Optional

from pydantic import BaseModel, Field

# ======================================================================
# Configuration
# ======================================================================

_DEFAULT_WEIGHTS: dict[str, float] = { "shooting": 0.15,
                                       "pace": 0.15,
                                       "positioning": 0.15,
                                       "passing": 0.15,
                                       "ball_control": 0.15,
                                       "crossing": 0.15,
                                       "session_rating": 0.10, }

# Lookup order for an entry's usable rating: (nested?, field)
_RATING_SOURCES: list[tuple[bool, str]] = [(True, "session_rating"), (True, "rating"), (False, "rating"),
                                           (False, "session_rating"), ]


class PerformanceConfig(BaseModel):
    """Weights and rounding for the aggregation, injectable for testing."""

    weights: dict[str, float] = Field(default_factory=lambda: dict(_DEFAULT_WEIGHTS))
    decimals: int = Field(1, ge=0, le=4)


DEFAULT_PERFORMANCE_CONFIG = PerformanceConfig()


class PerformanceSummary(BaseModel):
    overall_rating: float
    average_performance: float


# ======================================================================
# Normalisation helpers
# ======================================================================

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def _snake(key: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", key).lower()


def _as_dict(value: Any) -> dict[str, Any]:
    """Snake-cased shallow dict view of a model or mapping ({} otherwise)."""
    if isinstance(value, BaseModel):
        raw = value.model_dump(exclude_none=True)
    elif isinstance(value, Mapping):
        raw = dict(value)
    else:
        return { }
    return { _snake(str(k)): v for k, v in raw.items() }


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _round_half_up(value: float, decimals: int) -> float:
    factor = 10 ** decimals
    return math.floor(value * factor + 0.5) / factor


def _history_list(performance_history: Optional[Iterable[Any]]) -> list[Any]:
    if performance_history is None or isinstance(performance_history, (str, bytes, Mapping)):
        return []
    try:
        return list(performance_history)
    except TypeError:
        return []


# ======================================================================
# Overall rating
# ======================================================================


def blend_with_latest(attributes: Any, performance_history: Optional[Iterable[Any]]) -> dict[str, Any]:
    """Blend current attributes with the most recent history snapshot."""
    current = _as_dict(attributes)
    history = _history_list(performance_history)
    if not history:
        return current

    latest = _as_dict(_as_dict(history[-1]).get("attributes"))
    for key, value in list(current.items()):
        historical = latest.get(key)
        if _is_number(value) and _is_number(historical) and historical != 0:
            current[key] = (value + historical) / 2
    return current


def overall_rating(attributes: Any, performance_history: Optional[Iterable[Any]] = None,
                   config: Optional[PerformanceConfig] = None, ) -> float:
    """Weighted, blended overall rating (one decimal)."""
    cfg = config or DEFAULT_PERFORMANCE_CONFIG
    blended = blend_with_latest(attributes, performance_history)

    total = 0.0
    weight_sum = 0.0
    for field, weight in cfg.weights.items():
        value = blended.get(field)
        if _is_number(value):
            total += value * weight
            weight_sum += weight

    if weight_sum <= 0:
        return 0.0
    return _round_half_up(total / weight_sum, cfg.decimals)


# ======================================================================
# Average performance
# ======================================================================


def usable_rating(entry: Any) -> Optional[float]:
    """First usable rating of a history entry, or ``None``."""
    top = _as_dict(entry)
    nested = _as_dict(top.get("attributes"))
    for is_nested, field in _RATING_SOURCES:
        value = (nested if is_nested else top).get(field)
        if _is_number(value) and value != 0:
            return float(value)
    return None


def average_performance(performance_history: Optional[Iterable[Any]],
                        config: Optional[PerformanceConfig] = None, ) -> float:
    """Mean of usable ratings across the history (one decimal)."""
    cfg = config or DEFAULT_PERFORMANCE_CONFIG
    ratings = [r for r in (usable_rating(e) for e in _history_list(performance_history)) if r is not None]
    if not ratings:
        return 0.0
    return _round_half_up(sum(ratings) / len(ratings), cfg.decimals)


def summarise(attributes: Any, performance_history: Optional[Iterable[Any]],
              config: Optional[PerformanceConfig] = None, ) -> PerformanceSummary:
    """Both derived values in one call."""
    history = _history_list(performance_history)
    return PerformanceSummary(overall_rating=overall_rating(attributes, history, config),
                              average_performance=average_performance(history, config), )
