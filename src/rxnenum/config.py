# -*- coding: ascii -*-
"""
Enumeration configuration loaded from YAML.

Example:

    strategy:
      name: RandomSampleStrategy
      seed: 42
    enumeration:
      max_products: 1000
      reagent_max_match_count: null
      sane_partial_products: false
    checkpoint:
      path: checkpoints/run1.json
      every: 500
"""

import logging
from typing import Any, Dict, Optional

import yaml

from .strategies import get_strategy_class

LOG = logging.getLogger(__name__)

KNOWN_SECTIONS = ('strategy', 'enumeration', 'checkpoint')


class EnumConfig:
    """
    Settings for a library enumeration run.

    Args:
        strategy: Registered strategy name (default: CartesianProductStrategy)
        seed: Random seed for sampling strategies (default: None for non-deterministic)
        max_products: Stop after this many reagent combinations (None: until exhausted)
        reagent_max_match_count: See EnumerationParams
        sane_partial_products: See EnumerationParams
        checkpoint_path: File to save strategy state to (None: no checkpoints)
        checkpoint_every: Save every N combinations; 0 saves only at the end
    """

    def __init__(self, strategy: str = 'CartesianProductStrategy',
                 seed: Optional[int] = None,
                 max_products: Optional[int] = None,
                 reagent_max_match_count: Optional[int] = None,
                 sane_partial_products: bool = False,
                 checkpoint_path: Optional[str] = None,
                 checkpoint_every: int = 0):
        try:
            strategy_class = get_strategy_class(strategy)
        except KeyError as e:
            raise ValueError(str(e)) from e
        if seed is not None and (isinstance(seed, bool) or not isinstance(seed, int)):
            raise ValueError(f"seed must be an integer, got {seed!r}")
        if seed is not None and not strategy_class.is_random:
            LOG.warning(f"Seed {seed} ignored: {strategy} is not a random strategy")
        if max_products is not None and max_products < 0:
            raise ValueError(f"max_products must be non-negative, got {max_products}")
        if checkpoint_every < 0:
            raise ValueError(f"checkpoint_every must be non-negative, got {checkpoint_every}")

        self.strategy = strategy
        self.seed = seed
        self.max_products = max_products
        self.reagent_max_match_count = reagent_max_match_count
        self.sane_partial_products = sane_partial_products
        self.checkpoint_path = checkpoint_path
        self.checkpoint_every = checkpoint_every

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'EnumConfig':
        """Build a config from the parsed YAML structure."""
        data = data or {}
        if not isinstance(data, dict):
            raise ValueError(f"Configuration must be a mapping, got {type(data).__name__}")
        for section in data:
            if section not in KNOWN_SECTIONS:
                LOG.warning(f"Ignoring unknown configuration section '{section}'")

        strategy_cfg = data.get('strategy') or {}
        enum_cfg = data.get('enumeration') or {}
        checkpoint_cfg = data.get('checkpoint') or {}

        return cls(
            strategy=strategy_cfg.get('name', 'CartesianProductStrategy'),
            seed=strategy_cfg.get('seed'),
            max_products=enum_cfg.get('max_products'),
            reagent_max_match_count=enum_cfg.get('reagent_max_match_count'),
            sane_partial_products=bool(enum_cfg.get('sane_partial_products', False)),
            checkpoint_path=checkpoint_cfg.get('path'),
            checkpoint_every=int(checkpoint_cfg.get('every', 0) or 0),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'strategy': {'name': self.strategy, 'seed': self.seed},
            'enumeration': {
                'max_products': self.max_products,
                'reagent_max_match_count': self.reagent_max_match_count,
                'sane_partial_products': self.sane_partial_products,
            },
            'checkpoint': {'path': self.checkpoint_path, 'every': self.checkpoint_every},
        }

    def make_strategy(self):
        """Construct a fresh, uninitialized strategy for this configuration."""
        strategy_class = get_strategy_class(self.strategy)
        if strategy_class.is_random:
            return strategy_class(seed=self.seed)
        return strategy_class()

    def make_params(self):
        """EnumerationParams for the reaction driver."""
        from .enumerate_library import EnumerationParams

        return EnumerationParams(
            reagent_max_match_count=self.reagent_max_match_count,
            sane_partial_products=self.sane_partial_products,
        )


def load_config(config_path: Optional[str] = None) -> EnumConfig:
    """Load configuration from a YAML file; no path gives the defaults."""
    if config_path is None:
        return EnumConfig()
    with open(config_path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f)
    LOG.debug(f"Loaded configuration from {config_path}")
    return EnumConfig.from_dict(data)
