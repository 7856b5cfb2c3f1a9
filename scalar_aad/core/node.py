# scalar_aad/core/node.py
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class OpTag(Enum):
    """Primitive operations the tape knows how to differentiate."""
    ADD = "add"
    SUB = "sub"
    MUL = "mul"
    POW = "pow"
    NEG = "neg"


@dataclass(frozen=True)
class Node:
    """
    Operation record attached to a non-leaf slot of the tape.

    Attributes
    ----------
    op_tag   : OpTag
        Which primitive produced the slot.
    operands : Tuple[int, ...]
        Tape indices of the inputs, left operand first. The same index may
        appear twice (e.g. `a + a`).
    exponent : Optional[int]
        Fixed integer exponent for OpTag.POW, None otherwise. It is not a
        graph node and never receives an adjoint.
    """
    op_tag: OpTag
    operands: Tuple[int, ...]
    exponent: Optional[int] = None
