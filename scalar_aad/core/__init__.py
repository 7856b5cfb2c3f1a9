# scalar_aad/core/__init__.py

"""
Core public API for the scalar AAD package.

Exports:
    ADVar         : Handle to one differentiable scalar node on a tape.
    Tape          : Arena of nodes (values, adjoints, operation records).
    global_tape   : The default tape used to record ops.
    use_tape      : Context manager to temporarily switch the active tape.
    EngineConfig  : Per-tape reverse-sweep settings.
    toposort      : Processing order (tape indices) for a reverse pass.
    reverse       : Run a single reverse pass to accumulate first-order adjoints.
    zero_adjoints : Reset all adjoints on the active tape to zero.
    grad, grads, grads_list : Gradients of a Python function on an isolated tape.
    value         : Extract the primal value from an ADVar.
"""

from .var import ADVar
from .node import Node, OpTag
from .config import EngineConfig
from .tape import Tape, global_tape, use_tape
from .engine import toposort, reverse, zero_adjoints
from .seeds import grad, grads, grads_list, value
from .errors import TapeMismatchError, StaleHandleError, NegativeExponentError

__all__ = [
    "ADVar", "Node", "OpTag", "EngineConfig",
    "Tape", "global_tape", "use_tape",
    "toposort", "reverse", "zero_adjoints",
    "grad", "grads", "grads_list", "value",
    "TapeMismatchError", "StaleHandleError", "NegativeExponentError",
]
