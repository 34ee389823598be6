# -*- coding: ascii -*-
"""Command line interface."""

import argparse
import logging
import sys
from typing import Any, Dict, List, Optional

from .config import EnumConfig, load_config
from .errors import EnumerationStrategyError
from .product_size import compute_num_products, is_overflow
from .strategies import available_strategies
from . import state_io

LOG = logging.getLogger(__name__)

# Random strategies never run out; cap them when no limit is configured
DEFAULT_SAMPLE_COUNT = 10


def configure_logging(args) -> None:
    """Configure Python logging and the RDKit logger based on CLI arguments."""
    log_level = 'ERROR' if args.quiet else args.log_level
    logging.basicConfig(
        level=getattr(logging, log_level),
        format='%(levelname)s - %(name)s - %(message)s'
    )
    setup_rdkit_logging(log_level)


def setup_rdkit_logging(level: str) -> None:
    """Silence RDKit messages below the requested level."""
    try:
        from rdkit import RDLogger
    except ImportError:
        LOG.debug("RDKit not importable; skipping RDKit logger setup")
        return

    order = ['DEBUG', 'INFO', 'WARNING', 'ERROR']
    rdkit_names = {'DEBUG': 'rdApp.debug', 'INFO': 'rdApp.info',
                   'WARNING': 'rdApp.warning', 'ERROR': 'rdApp.error'}
    threshold = order.index(level)
    for name in order:
        if order.index(name) < threshold:
            RDLogger.DisableLog(rdkit_names[name])
        else:
            RDLogger.EnableLog(rdkit_names[name])


def _resolve_config(args) -> EnumConfig:
    """Load the config file, then apply command-line overrides."""
    config = load_config(getattr(args, 'config', None))
    overrides: Dict[str, Any] = config.to_dict()
    if getattr(args, 'strategy', None):
        overrides['strategy']['name'] = args.strategy
    if getattr(args, 'seed', None) is not None:
        overrides['strategy']['seed'] = args.seed
    if getattr(args, 'num', None) is not None:
        overrides['enumeration']['max_products'] = args.num
    if getattr(args, 'save_state', None):
        overrides['checkpoint']['path'] = args.save_state
    if getattr(args, 'checkpoint_every', None) is not None:
        overrides['checkpoint']['every'] = args.checkpoint_every
    return EnumConfig.from_dict(overrides)


def _sample_limit(config: EnumConfig, strategy) -> Optional[int]:
    if config.max_products is not None:
        return config.max_products
    if strategy.is_random:
        LOG.info(f"No sample count given for {strategy.type}; drawing {DEFAULT_SAMPLE_COUNT}")
        return DEFAULT_SAMPLE_COUNT
    return None


def cmd_count(args) -> None:
    """Print the number of combinations for the given sizes."""
    count = compute_num_products(args.sizes)
    print('overflow' if is_overflow(count) else count)


def cmd_sample(args) -> None:
    """Print index tuples produced by a strategy, optionally resuming from a checkpoint."""
    config = _resolve_config(args)

    if args.resume:
        strategy = state_io.load_state(args.resume)
        if args.sizes and list(strategy.get_sizes()) != args.sizes:
            raise EnumerationStrategyError(
                f"Checkpoint sizes {list(strategy.get_sizes())} do not match --sizes {args.sizes}")
        LOG.info(f"Resumed {strategy.type} from {args.resume} at {strategy.get_position()}")
    else:
        if not args.sizes:
            raise ValueError("--sizes is required unless --resume is given")
        strategy = config.make_strategy()
        strategy.initialize_from_sizes(args.sizes)

    limit = _sample_limit(config, strategy)
    produced = 0
    while strategy.has_next() and (limit is None or produced < limit):
        print(' '.join(str(idx) for idx in strategy.next()))
        produced += 1
        if (config.checkpoint_path and config.checkpoint_every
                and produced % config.checkpoint_every == 0):
            state_io.save_state(strategy, config.checkpoint_path)

    if config.checkpoint_path:
        state_io.save_state(strategy, config.checkpoint_path)
        LOG.info(f"Saved state after {produced} tuples to {config.checkpoint_path}")


def cmd_enum(args) -> None:
    """Run a reaction over building-block files and write or print the products."""
    from .enumerate_library import EnumerateLibrary, reaction_from_smarts
    from .io_utils import load_building_blocks, write_table

    config = _resolve_config(args)
    rxn = reaction_from_smarts(args.rxn)
    bbs = load_building_blocks(args.reagents)
    library = EnumerateLibrary(rxn, bbs, config.make_strategy(), config.make_params())

    if args.resume:
        library.set_state(state_io.read_json(args.resume))
        LOG.info(f"Resumed enumeration from {args.resume} at {library.get_position()}")

    limit = _sample_limit(config, library.strategy)
    reagents = library.get_reagents()
    records: List[Dict[str, Any]] = []
    produced = 0
    while library.has_next() and (limit is None or produced < limit):
        product_sets = library.next()
        position = library.get_position()
        names = [reagents[i][idx].GetProp('_Name') for i, idx in enumerate(position)]
        for smiles in _product_smiles(product_sets):
            records.append({
                'position': ' '.join(str(idx) for idx in position),
                'reagents': '.'.join(names),
                'product_smiles': smiles,
            })
        produced += 1
        if (config.checkpoint_path and config.checkpoint_every
                and produced % config.checkpoint_every == 0):
            state_io.write_json_atomic(library.get_state(), config.checkpoint_path)

    LOG.info(f"Ran {produced} reagent combinations, {len(records)} product sets, "
             f"{library.num_sanitize_failures} sanitization failures")

    if args.output:
        write_table(records, args.output)
        LOG.info(f"Wrote products to {args.output}")
    else:
        for record in records:
            print(f"{record['product_smiles']}\t{record['reagents']}")

    if config.checkpoint_path:
        state_io.write_json_atomic(library.get_state(), config.checkpoint_path)


def _product_smiles(product_sets) -> List[str]:
    from rdkit import Chem

    return ['.'.join(Chem.MolToSmiles(prod) for prod in products) for products in product_sets]


def _add_run_options(parser) -> None:
    parser.add_argument('-c', '--config', help='YAML configuration file')
    parser.add_argument('--strategy', choices=available_strategies(),
                        help='Enumeration strategy (overrides config)')
    parser.add_argument('--seed', type=int, help='Random seed for sampling strategies')
    parser.add_argument('-n', '--num', type=int, help='Number of combinations to produce')
    parser.add_argument('--resume', metavar='STATE', help='Resume from a saved state file')
    parser.add_argument('--save-state', metavar='STATE', help='Write a state file when done')
    parser.add_argument('--checkpoint-every', type=int, metavar='N',
                        help='Also write the state file every N combinations')


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='rxnenum',
        description='rxnenum: building-block combination enumeration for reaction libraries',
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument('--log-level', choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'], default='INFO',
                        help='Set logging level (default: INFO)')
    parser.add_argument('--quiet', action='store_true',
                        help='Suppress all but error messages (equivalent to --log-level ERROR)')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    count_parser = subparsers.add_parser('count', help='Number of combinations for building-block counts')
    count_parser.add_argument('sizes', type=int, nargs='*', help='Building blocks per reactant')

    sample_parser = subparsers.add_parser('sample', help='Print index tuples from a strategy')
    sample_parser.add_argument('--sizes', type=int, nargs='+', help='Building blocks per reactant')
    _add_run_options(sample_parser)

    enum_parser = subparsers.add_parser('enum', help='Enumerate reaction products')
    enum_parser.add_argument('--rxn', required=True, help='Reaction SMARTS')
    enum_parser.add_argument('--reagents', required=True, nargs='+',
                             help='One SMILES file per reactant template')
    enum_parser.add_argument('-o', '--output', help='Output table (.csv or .parquet)')
    _add_run_options(enum_parser)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args)

    if not args.command:
        parser.print_help()
        return 1

    commands = {'count': cmd_count, 'sample': cmd_sample, 'enum': cmd_enum}
    try:
        commands[args.command](args)
    except (ValueError, OSError, EnumerationStrategyError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
