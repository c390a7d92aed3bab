# -*- coding: utf-8 -*-
"""
Veil: Compact cosine-basis placeholders for raster images
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Execution strategies for the basis transform.

    scalar      nested loops in the reference order (bit-reproducible)
    vectorized  NumPy tensor contractions
    parallel    Numba ``prange`` over input tiles / output rows

Callers pass a registry name, a ``ComputeStrategy`` instance or ``None``;
``None`` resolves to the process-wide default set with
``set_default_strategy``.
"""

import threading
from types import MappingProxyType
from typing import Dict, Mapping, Type, Union

from .parallel import DataParallelStrategy, set_strict_ieee
from .scalar import ScalarStrategy
from .strategy import ComputeStrategy
from .vectorized import VectorizedStrategy

__all__ = [
    "ComputeStrategy",
    "ScalarStrategy",
    "VectorizedStrategy",
    "DataParallelStrategy",
    "STRATEGIES",
    "StrategyLike",
    "get_strategy",
    "set_default_strategy",
    "get_default_strategy",
    "set_strict_ieee",
]

StrategyLike = Union[str, ComputeStrategy, None]

STRATEGIES: Mapping[str, Type[ComputeStrategy]] = MappingProxyType({
    cls.name: cls
    for cls in (ScalarStrategy, VectorizedStrategy, DataParallelStrategy)
})

# Strategies hold no per-call state, so one instance per name is shared.
_instances: Dict[str, ComputeStrategy] = {}
_default_name: str = ScalarStrategy.name
_lock = threading.RLock()


def _instance_for(name: str) -> ComputeStrategy:
    try:
        cls = STRATEGIES[name]
    except KeyError:
        raise ValueError(
            f"Unknown compute strategy {name!r}; expected one of {sorted(STRATEGIES)}"
        ) from None
    with _lock:
        instance = _instances.get(name)
        if instance is None:
            instance = cls()
            _instances[name] = instance
        return instance


def get_strategy(strategy: StrategyLike = None) -> ComputeStrategy:
    """
    Resolves a strategy argument.

    Raises:
        ValueError: Unknown registry name.
        TypeError: Anything that is neither a name, an instance nor None.
    """
    if strategy is None:
        with _lock:
            name = _default_name
        return _instance_for(name)
    if isinstance(strategy, ComputeStrategy):
        return strategy
    if isinstance(strategy, str):
        return _instance_for(strategy)
    raise TypeError(
        f"strategy must be a name, a ComputeStrategy or None, got {type(strategy).__name__}"
    )


def set_default_strategy(name: str) -> None:
    """Selects the strategy used when callers pass ``strategy=None``."""
    if name not in STRATEGIES:
        raise ValueError(
            f"Unknown compute strategy {name!r}; expected one of {sorted(STRATEGIES)}"
        )
    global _default_name
    with _lock:
        _default_name = name


def get_default_strategy() -> str:
    with _lock:
        return _default_name
