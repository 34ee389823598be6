# -*- coding: ascii -*-
"""
Versioned persistence of enumeration strategy state.

A checkpoint is a JSON object:

    {"format_version": 1,
     "strategy": "RandomSampleStrategy",
     "sizes": [...], "position": [...],
     "num_permutations": 123 | "overflow",
     "variant": {...}}

Readers accept any format_version >= 1. Newer versions are read in
compatibility mode: keys this reader does not know are ignored, keys it does
know must be present.
"""

import json
import logging
import os
import tempfile
from typing import Any, Dict, Iterable, Mapping

from .errors import StateMismatchError
from .product_size import ENUMERATION_OVERFLOW, ProductCount

LOG = logging.getLogger(__name__)

FORMAT_VERSION = 1

STATE_FIELDS = ('strategy', 'sizes', 'position', 'num_permutations', 'variant')

_OVERFLOW_TOKEN = 'overflow'


def check_format_version(state: Mapping[str, Any]) -> int:
    """Validate the version tag of a persisted state and return it."""
    if 'format_version' not in state:
        raise StateMismatchError("State is missing 'format_version'")
    version = state['format_version']
    if isinstance(version, bool) or not isinstance(version, int):
        raise StateMismatchError(f"format_version must be an integer, got {version!r}")
    if version < 1:
        raise StateMismatchError(f"Unsupported format_version {version}")
    if version > FORMAT_VERSION:
        LOG.warning("Reading state format_version %d with a version %d reader; "
                    "unknown fields are ignored", version, FORMAT_VERSION)
    return version


def require_fields(payload: Any, fields: Iterable[str], where: str) -> None:
    """Raise StateMismatchError unless payload is a mapping holding every field."""
    if not isinstance(payload, Mapping):
        raise StateMismatchError(f"{where} must be a mapping, got {type(payload).__name__}")
    missing = [f for f in fields if f not in payload]
    if missing:
        raise StateMismatchError(f"{where} is missing required fields: {', '.join(missing)}")


def require_int(value: Any, name: str, minimum: int = 0) -> int:
    """Return value if it is an int >= minimum, else raise StateMismatchError."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise StateMismatchError(f"{name} must be an integer, got {value!r}")
    if value < minimum:
        raise StateMismatchError(f"{name} must be >= {minimum}, got {value}")
    return value


def count_to_payload(count: ProductCount) -> Any:
    return _OVERFLOW_TOKEN if count is ENUMERATION_OVERFLOW else count


def count_from_payload(value: Any) -> ProductCount:
    if value == _OVERFLOW_TOKEN:
        return ENUMERATION_OVERFLOW
    return require_int(value, 'num_permutations')


def strategy_from_state(state: Mapping[str, Any]):
    """Build a fresh strategy of the recorded variant and restore state into it."""
    from .strategies.registry import get_strategy_class

    require_fields(state, ('strategy',), 'state')
    try:
        cls = get_strategy_class(state['strategy'])
    except (KeyError, TypeError) as e:
        raise StateMismatchError(f"Unknown strategy in state: {state['strategy']!r}") from e

    strategy = cls()
    strategy.set_state(state)
    return strategy


def dumps(strategy, indent: int = None) -> str:
    """Serialize a strategy's state to a JSON string."""
    return json.dumps(strategy.get_state(), indent=indent, sort_keys=True)


def loads(text: str):
    """Rebuild a strategy from a JSON string produced by dumps()."""
    try:
        state = json.loads(text)
    except json.JSONDecodeError as e:
        raise StateMismatchError(f"State is not valid JSON: {e}") from e
    return strategy_from_state(state)


def save_state(strategy, path: str) -> None:
    """Atomically write a strategy checkpoint to path."""
    write_json_atomic(strategy.get_state(), path)
    LOG.debug("Saved %s state to %s", strategy.type, path)


def load_state(path: str):
    """Read a checkpoint written by save_state()."""
    return strategy_from_state(read_json(path))


def write_json_atomic(payload: Dict[str, Any], path: str) -> None:
    """Write payload as JSON via a temporary file and os.replace()."""
    text = json.dumps(payload, indent=2, sort_keys=True)
    directory = os.path.dirname(os.path.abspath(path))
    os.makedirs(directory, exist_ok=True)

    fd, tmp_path = tempfile.mkstemp(prefix='.rxnenum-state-', dir=directory)
    try:
        with os.fdopen(fd, 'w', encoding='ascii') as f:
            f.write(text)
        os.replace(tmp_path, path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise


def read_json(path: str) -> Any:
    """Parse a JSON checkpoint file."""
    if not os.path.exists(path):
        raise FileNotFoundError(f"State file not found: {path}")
    with open(path, 'r', encoding='ascii') as f:
        try:
            return json.load(f)
        except json.JSONDecodeError as e:
            raise StateMismatchError(f"State file {path} is not valid JSON: {e}") from e


def state_summary(state: Dict[str, Any]) -> str:
    """One-line description of a state payload for log messages."""
    return (f"{state.get('strategy')} sizes={state.get('sizes')} "
            f"position={state.get('position')} total={state.get('num_permutations')}")
