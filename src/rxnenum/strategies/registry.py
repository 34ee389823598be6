# -*- coding: ascii -*-
"""Registry of enumeration strategies by their type tag."""

import logging
from typing import Dict, List, Type

LOG = logging.getLogger(__name__)

_STRATEGY_CLASSES: Dict[str, Type] = {}


def register_strategy(strategy_class: Type, name: str = None) -> Type:
    """
    Register a strategy class under its type tag.

    Usable as a class decorator. The tag is what persisted states record, so
    it must stay stable once states have been written.
    """
    from .base import EnumerationStrategyBase

    if not issubclass(strategy_class, EnumerationStrategyBase):
        raise ValueError(f"Strategy class {strategy_class} must inherit from EnumerationStrategyBase")

    strategy_name = name or strategy_class.type
    if strategy_name in _STRATEGY_CLASSES and _STRATEGY_CLASSES[strategy_name] is not strategy_class:
        LOG.warning(f"Strategy '{strategy_name}' is already registered, overwriting")

    _STRATEGY_CLASSES[strategy_name] = strategy_class
    LOG.debug(f"Registered strategy class: {strategy_name}")
    return strategy_class


def get_strategy_class(name: str) -> Type:
    """Look up a registered strategy class; raises KeyError if unknown."""
    if name not in _STRATEGY_CLASSES:
        raise KeyError(f"Unknown enumeration strategy '{name}'. "
                       f"Available: {', '.join(available_strategies())}")
    return _STRATEGY_CLASSES[name]


def make_strategy(name: str, **kwargs):
    """Instantiate a registered strategy, passing kwargs to its constructor."""
    return get_strategy_class(name)(**kwargs)


def available_strategies() -> List[str]:
    return sorted(_STRATEGY_CLASSES)
