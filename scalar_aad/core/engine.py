# scalar_aad/core/engine.py
from __future__ import annotations
import logging
import numpy as np
from typing import List, Optional, Sequence, Union

from . import tape as tape_mod
from .errors import TapeMismatchError
from .node import Node, OpTag
from .tape import Tape
from .var import ADVar

logger = logging.getLogger(__name__)


def zero_adjoints():
    """
    Set all adjoints (bar variables) on the current tape to zero.
    Call this between two reverse passes over the same graph; otherwise the
    second pass accumulates on top of the first.
    """
    tape_mod.global_tape.zero_adjoints()


def _roots(outputs: Union[ADVar, Sequence[ADVar]]) -> tuple:
    """Normalize `outputs` to (tape, [root indices])."""
    if isinstance(outputs, ADVar):
        outputs = [outputs]
    outputs = list(outputs)
    if not outputs:
        raise ValueError("reverse/toposort needs at least one output")
    for y in outputs:
        if not isinstance(y, ADVar):
            raise TypeError(f"expected ADVar outputs, got {type(y)}")
    tape = outputs[0].tape
    for y in outputs:
        if y.tape is not tape:
            raise TapeMismatchError("reverse")
    return tape, [y.index for y in outputs]


def toposort_indices(tape: Tape, roots: Sequence[int]) -> List[int]:
    """
    Reverse post-order of every slot reachable from `roots`.

    Iterative DFS with an explicit stack of (index, expanded) pairs: operands
    are expanded left before right and a slot is emitted only after all of
    its operands. Reversing that traversal puts each consumer before every
    one of its operands, roots first and leaves last. Each slot appears once,
    however many paths reach it.
    """
    traversal: List[int] = []
    visited = set()
    for root in roots:
        stack = [(root, False)]  # (index, expanded?)
        while stack:
            idx, expanded = stack.pop()

            if expanded:
                traversal.append(idx)
                continue

            if idx in visited:
                continue
            visited.add(idx)

            # postorder
            stack.append((idx, True))
            record = tape.records[idx]
            if record is not None:
                # pushed right-to-left so the left operand is expanded first
                for operand in reversed(record.operands):
                    if operand not in visited:
                        stack.append((operand, False))

    traversal.reverse()
    return traversal


def toposort(outputs: Union[ADVar, Sequence[ADVar]]) -> List[int]:
    """
    Processing order for a reverse pass from `outputs`, as tape indices.
    See `toposort_indices`.
    """
    tape, roots = _roots(outputs)
    return toposort_indices(tape, roots)


def reverse(outputs: Union[ADVar, Sequence[ADVar]], seed: Optional[float] = None):
    """
    Run a single reverse pass from the given output(s).

    Args:
        outputs: an ADVar or a (list/tuple) of ADVars on the same tape.
        seed: adjoint written on a single output (defaults to
              `tape.config.default_seed`, i.e. 1.0). If `outputs` is a
              sequence, each output is seeded with 1.0 and `seed` is ignored.

    Notes:
        - Seeds overwrite the outputs' adjoints.
        - For each reachable node we accumulate: p.adj += y.adj * (dy/dp).
          Accumulation holds for every rule, so a node reached through several
          paths, or used twice by one operation, collects every contribution.
        - Adjoints of other nodes are not cleared first; see `zero_adjoints`.
    """
    tape, roots = _roots(outputs)
    if len(roots) == 1:
        tape.set_adjoint(roots[0], tape.config.default_seed if seed is None else seed)
    else:
        for r in roots:
            tape.set_adjoint(r, 1.0)

    order = toposort_indices(tape, roots)
    logger.debug("reverse sweep over %d of %d tape nodes", len(order), len(tape))

    skip_zero = tape.config.skip_zero_adjoints
    for idx in order:
        record = tape.records[idx]
        if record is None:
            continue  # leaf
        g = tape.adjoints[idx]
        if skip_zero and g == 0.0:
            continue  # nothing to propagate
        _propagate(tape, record, g)


def _propagate(tape: Tape, node: Node, g: float):
    """
    Apply the local rule of `node` with incoming adjoint `g`.

    Each contribution is a separate, fully committed accumulate on the tape,
    so when both operands are the same slot it receives both of them.
    """
    tag = node.op_tag

    if tag is OpTag.ADD:
        lhs, rhs = node.operands
        tape.accumulate(lhs, g)
        tape.accumulate(rhs, g)

    elif tag is OpTag.SUB:
        lhs, rhs = node.operands
        tape.accumulate(lhs, g)
        tape.accumulate(rhs, -g)

    elif tag is OpTag.MUL:
        # y = x * z: dy/dx = z, dy/dz = x
        lhs, rhs = node.operands
        tape.accumulate(lhs, g * tape.values[rhs])
        tape.accumulate(rhs, g * tape.values[lhs])

    elif tag is OpTag.POW:
        # y = x^n: dy/dx = n * x^(n-1), and 0 for the constant x^0
        (base,) = node.operands
        n = node.exponent
        if n > 0:
            tape.accumulate(base, float(g * n * np.float64(tape.values[base]) ** (n - 1)))
        else:
            tape.accumulate(base, 0.0)

    elif tag is OpTag.NEG:
        (x,) = node.operands
        tape.accumulate(x, -g)

    else:
        raise NotImplementedError(f"no reverse rule for {tag!r}")
