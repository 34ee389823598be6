# -*- coding: ascii -*-
"""
Reaction enumeration driver.

Combines a reaction with per-reactant building-block lists, asking an
enumeration strategy which combination to run next and handing the selected
reagents to RDKit's ChemicalReaction.RunReactants.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

from rdkit import Chem
from rdkit.Chem import rdChemReactions

from .errors import StateMismatchError
from .product_size import get_reactants_from_rgroups
from .strategies import CartesianProductStrategy, EnumerationStrategyBase
from . import state_io

LOG = logging.getLogger(__name__)


class EnumerationParams:
    """
    Options applied when preparing building blocks.

    Args:
        reagent_max_match_count: Drop building blocks matching their reactant
            template more than this many times (None: no limit)
        sane_partial_products: Keep products that fail sanitization instead
            of dropping them
    """

    def __init__(self, reagent_max_match_count: Optional[int] = None,
                 sane_partial_products: bool = False):
        if reagent_max_match_count is not None and reagent_max_match_count < 1:
            raise ValueError(f"reagent_max_match_count must be >= 1, got {reagent_max_match_count}")
        self.reagent_max_match_count = reagent_max_match_count
        self.sane_partial_products = sane_partial_products

    def to_dict(self) -> Dict[str, Any]:
        return {
            'reagent_max_match_count': self.reagent_max_match_count,
            'sane_partial_products': self.sane_partial_products,
        }


def reaction_from_smarts(smarts: str) -> rdChemReactions.ChemicalReaction:
    """Parse and initialize a reaction SMARTS; raises ValueError if RDKit rejects it."""
    try:
        rxn = rdChemReactions.ReactionFromSmarts(smarts)
    except Exception as e:
        raise ValueError(f"Invalid reaction SMARTS {smarts!r}: {e}") from e
    if rxn is None:
        raise ValueError(f"Invalid reaction SMARTS {smarts!r}")
    rxn.Initialize()
    return rxn


def preprocess_reagents(rxn, bbs: Sequence[Sequence[Any]],
                        params: EnumerationParams) -> List[List[Any]]:
    """
    Remove building blocks that cannot take part in the reaction.

    A building block is kept when it matches its reactant template at least
    once and, if params.reagent_max_match_count is set, no more than that
    many times.
    """
    result = []
    for i, reagents in enumerate(bbs):
        template = rxn.GetReactantTemplate(i)
        kept = []
        for mol in reagents:
            if mol is None:
                LOG.warning("Reactant %d: skipping missing building block", i)
                continue
            matches = mol.GetSubstructMatches(template, uniquify=True)
            if not matches:
                LOG.warning("Reactant %d: building block %s does not match its template",
                            i, Chem.MolToSmiles(mol))
                continue
            if (params.reagent_max_match_count is not None
                    and len(matches) > params.reagent_max_match_count):
                LOG.warning("Reactant %d: building block %s matches %d times (max %d)",
                            i, Chem.MolToSmiles(mol), len(matches),
                            params.reagent_max_match_count)
                continue
            kept.append(mol)
        LOG.debug("Reactant %d: kept %d of %d building blocks", i, len(kept), len(reagents))
        result.append(kept)
    return result


class EnumerateLibrary:
    """
    Iterate over reaction products of a combinatorial library.

    Usage:

        lib = EnumerateLibrary(rxn, [amines, acids], RandomSampleStrategy(seed=1))
        for product_sets in itertools.islice(lib, 100):
            ...

    Each step yields the product sets of one reagent combination: a list with
    one entry per way the reaction applied, each a list of product mols.
    """

    def __init__(self, rxn, bbs: Sequence[Sequence[Any]],
                 strategy: Optional[EnumerationStrategyBase] = None,
                 params: Optional[EnumerationParams] = None):
        if not rxn.IsInitialized():
            rxn.Initialize()
        if len(bbs) != rxn.GetNumReactantTemplates():
            raise ValueError(
                f"Reaction has {rxn.GetNumReactantTemplates()} reactant templates "
                f"but {len(bbs)} building-block lists were supplied")

        self._rxn = rxn
        self._params = params or EnumerationParams()
        self._bbs = preprocess_reagents(rxn, bbs, self._params)
        self._strategy = strategy if strategy is not None else CartesianProductStrategy()
        self._num_sanitize_failures = 0
        self._strategy.initialize(self._bbs)

    @property
    def strategy(self) -> EnumerationStrategyBase:
        return self._strategy

    @property
    def params(self) -> EnumerationParams:
        return self._params

    @property
    def num_sanitize_failures(self) -> int:
        return self._num_sanitize_failures

    def get_reagents(self) -> List[List[Any]]:
        return self._bbs

    def get_position(self):
        return self._strategy.get_position()

    def has_next(self) -> bool:
        return self._strategy.has_next()

    def __bool__(self) -> bool:
        return self.has_next()

    def __iter__(self):
        return self

    def __next__(self) -> List[List[Any]]:
        if not self.has_next():
            raise StopIteration
        return self.next()

    def next(self) -> List[List[Any]]:
        """Run the reaction on the next reagent combination."""
        rgroups = self._strategy.next()
        reactants = get_reactants_from_rgroups(self._bbs, rgroups)
        product_sets = []
        for products in self._rxn.RunReactants(tuple(reactants)):
            kept = []
            for prod in products:
                if self._sanitize(prod, rgroups):
                    kept.append(prod)
            if kept:
                product_sets.append(kept)
        return product_sets

    def next_smiles(self) -> List[List[str]]:
        """Like next(), with products as SMILES."""
        return [[Chem.MolToSmiles(prod) for prod in products] for products in self.next()]

    def _sanitize(self, prod, rgroups) -> bool:
        try:
            Chem.SanitizeMol(prod)
            return True
        except (ValueError, RuntimeError) as e:
            self._num_sanitize_failures += 1
            LOG.debug("Product of %s failed sanitization: %s", rgroups, e)
            return self._params.sane_partial_products

    def reset_state(self) -> None:
        """Start over from the beginning of the strategy."""
        self._strategy.initialize(self._bbs)
        self._num_sanitize_failures = 0

    def get_state(self) -> Dict[str, Any]:
        return {
            'strategy_state': self._strategy.get_state(),
            'params': self._params.to_dict(),
            'num_sanitize_failures': self._num_sanitize_failures,
        }

    def set_state(self, state: Mapping[str, Any]) -> None:
        """
        Restore a state from get_state().

        The strategy is rebuilt from the saved state, so the current strategy
        is replaced only when the whole state is valid. Building blocks and
        params must be the same as when the state was saved.
        """
        state_io.require_fields(state, ('strategy_state', 'params', 'num_sanitize_failures'),
                                'library state')
        if state['params'] != self._params.to_dict():
            raise StateMismatchError(
                f"Saved params {state['params']!r} do not match {self._params.to_dict()!r}")
        failures = state_io.require_int(state['num_sanitize_failures'], 'num_sanitize_failures')
        strategy = state_io.strategy_from_state(state['strategy_state'])
        if list(strategy.get_sizes()) != [len(bbs) for bbs in self._bbs]:
            raise StateMismatchError(
                f"Saved sizes {list(strategy.get_sizes())} do not match the building blocks "
                f"{[len(bbs) for bbs in self._bbs]}")
        self._strategy = strategy
        self._num_sanitize_failures = failures
