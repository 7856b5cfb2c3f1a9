# scalar_aad/ops/arithmetic.py
import numpy as np
from ..core.var import ADVar, is_numeric
from ..core.node import OpTag
from ..core.errors import TapeMismatchError, NegativeExponentError
from ..core import tape as tape_mod  # Use module access for use_tape() compatibility


def _as_ad(x, tape):
    """Ensure x is an ADVar; otherwise lift it to a leaf on `tape`."""
    if isinstance(x, ADVar):
        return x
    if not is_numeric(x):
        raise TypeError(f"unsupported operand type for AAD arithmetic: {type(x)}")
    return ADVar._from_index(tape, tape.new_leaf(x))


def _common_tape(tag, *args):
    """
    The tape shared by every ADVar among `args`. Plain numbers take no part;
    if there are no ADVars at all the active global tape is used.
    """
    handles = [a for a in args if isinstance(a, ADVar)]
    for a in handles:
        a.index  # raises StaleHandleError before anything is recorded
    tapes = [a.tape for a in handles]
    if not tapes:
        return tape_mod.global_tape
    for t in tapes[1:]:
        if t is not tapes[0]:
            raise TapeMismatchError(tag.value)
    return tapes[0]


def _binary(x, y, f, tag):
    """
    Generic binary primitive:
      - computes out.val = f(x.val, y.val)
      - records (tag, x, y) on the shared tape; the local rule is applied by
        the engine during the reverse sweep
    """
    tape = _common_tape(tag, x, y)
    x = _as_ad(x, tape)
    y = _as_ad(y, tape)
    idx = tape.push_node(op_tag=tag, operands=(x.index, y.index), value=f(x.val, y.val))
    return ADVar._from_index(tape, idx)


def add(x, y): return _binary(x, y, lambda a, b: a + b, OpTag.ADD)
def sub(x, y): return _binary(x, y, lambda a, b: a - b, OpTag.SUB)
def mul(x, y): return _binary(x, y, lambda a, b: a * b, OpTag.MUL)


def neg(x):
    """
    Unary negation:
      out.val = -x.val
      reverse : x.adj -= out.adj
    """
    tape = _common_tape(OpTag.NEG, x)
    x = _as_ad(x, tape)
    idx = tape.push_node(op_tag=OpTag.NEG, operands=(x.index,), value=-x.val)
    return ADVar._from_index(tape, idx)


def pow(x, n):
    """
    Integer power with a fixed exponent:
      out.val = x.val ** n

    The exponent is a plain non-negative integer, not a graph node, so it
    never receives an adjoint. n == 0 records a constant node (value 1.0)
    whose reverse rule contributes nothing to x.

    Raises
    ------
    TypeError
        If `n` is not an integer (ADVar exponents included).
    NegativeExponentError
        If `n` < 0.
    """
    if isinstance(n, (bool, np.bool_)) or not isinstance(n, (int, np.integer)):
        raise TypeError(f"pow: exponent must be a non-negative int, got {type(n)}")
    n = int(n)
    if n < 0:
        raise NegativeExponentError(n)
    tape = _common_tape(OpTag.POW, x)
    x = _as_ad(x, tape)
    value = np.float64(x.val) ** n
    idx = tape.push_node(op_tag=OpTag.POW, operands=(x.index,), value=value, exponent=n)
    return ADVar._from_index(tape, idx)
