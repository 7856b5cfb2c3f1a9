# scalar_aad/__init__.py
# Reverse-mode automatic differentiation over scalar values

import logging

from .core.var import ADVar
from .core.config import EngineConfig
from .core.tape import Tape, use_tape
from .core.engine import (
    toposort,
    reverse,
    zero_adjoints,
)
from .core.seeds import grad, grads, grads_list, value
from .core.errors import TapeMismatchError, StaleHandleError, NegativeExponentError
from .core.graph_utils import get_graph_stats, format_graph, log_graph_summary

from . import ops

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Core
    'ADVar',
    'EngineConfig',
    'Tape',
    'use_tape',
    # Engine
    'toposort',
    'reverse',
    'zero_adjoints',
    # Drivers
    'grad',
    'grads',
    'grads_list',
    'value',
    # Errors
    'TapeMismatchError',
    'StaleHandleError',
    'NegativeExponentError',
    # Graph inspection
    'get_graph_stats',
    'format_graph',
    'log_graph_summary',
    # Ops
    'ops',
]
