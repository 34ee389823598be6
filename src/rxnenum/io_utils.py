# -*- coding: ascii -*-
"""Input/output utilities."""

import logging
import os
import re
from typing import Any, Dict, List, Sequence, Tuple

import pandas as pd
from rdkit import Chem

LOG = logging.getLogger(__name__)


def read_smi(path: str) -> List[Tuple[str, str]]:
    """Read SMILES file with robust separator handling: SMILES<TAB>Name or SMILES<2+spaces>Name."""
    if not os.path.exists(path):
        raise FileNotFoundError(f"SMILES file not found: {path}")

    pairs = []
    with open(path, 'r', encoding='utf-8') as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith('#'):
                continue

            if '\t' in line:
                # Tab separated - preferred format
                smiles, name = line.split('\t', 1)
                pairs.append((smiles.strip(), name.strip()))
                continue

            parts = re.split(r'  +', line)  # 2 or more spaces
            if len(parts) >= 2:
                pairs.append((parts[0], parts[-1]))
            else:
                # SMILES-only line - generate default name
                pairs.append((line, f"bb_{len(pairs) + 1}"))
    return pairs


def load_building_blocks(paths: Sequence[str]) -> List[List[Any]]:
    """
    Load one building-block list per reactant from SMILES files.

    Lines RDKit cannot parse are skipped with a warning. The name column is
    stored on each mol as _Name.
    """
    bbs = []
    for site, path in enumerate(paths):
        mols = []
        for smiles, name in read_smi(path):
            mol = Chem.MolFromSmiles(smiles)
            if mol is None:
                LOG.warning(f"Reactant {site}: could not parse SMILES {smiles!r} ({name}) in {path}")
                continue
            mol.SetProp('_Name', name)
            mols.append(mol)
        LOG.info(f"Reactant {site}: loaded {len(mols)} building blocks from {path}")
        bbs.append(mols)
    return bbs


def write_table(records: List[Dict[str, Any]], path: str) -> None:
    """Write table file (parquet/csv)."""
    if not (path.endswith('.parquet') or path.endswith('.csv')):
        raise ValueError(f"Unsupported file format: {path}")

    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    df = pd.DataFrame(records)
    if path.endswith('.parquet'):
        df.to_parquet(path, index=False)
    else:
        df.to_csv(path, index=False)
    LOG.debug(f"Wrote {len(df)} rows to {path}")
