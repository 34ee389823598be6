# -*- coding: ascii -*-
"""Exceptions raised by enumeration strategies and their persisted state."""


class EnumerationStrategyError(Exception):
    """Base class for all enumeration strategy failures."""


class ExhaustionError(EnumerationStrategyError):
    """next() was called on an exhaustive strategy with no tuples left."""


class EmptySpaceError(EnumerationStrategyError, ValueError):
    """A sampling strategy was initialized with a site holding no building blocks."""

    def __init__(self, site: int):
        super().__init__(f"Cannot sample from site {site}: it has no building blocks")
        self.site = site


class StateMismatchError(EnumerationStrategyError, ValueError):
    """Persisted strategy state is malformed or internally inconsistent."""
