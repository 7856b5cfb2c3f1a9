# scalar_aad/core/tape.py
from __future__ import annotations
from typing import List, Optional, Sequence
from contextlib import contextmanager

import numpy as np

from .config import EngineConfig
from .node import Node, OpTag


class Tape:
    """
    Arena holding every node recorded in forward order.

    Each node is a slot addressed by a stable integer index. Three parallel
    columns hold the slot's state:
      - values   : forward value, fixed when the slot is created
      - adjoints : gradient accumulator, starts at 0.0
      - records  : Node describing the producing operation, None for leaves

    Operands are referenced by index, so a Node can only point at slots that
    already exist and the graph is acyclic by construction.
    """
    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or EngineConfig()
        self.values: List[float] = []
        self.adjoints: List[float] = []
        self.records: List[Optional[Node]] = []
        # bumped by reset() so handles from before can be detected
        self.generation = 0

    def __len__(self):
        return len(self.values)

    def __repr__(self):
        return f"Tape(nodes={len(self)}, generation={self.generation})"

    def reset(self):
        self.values.clear()
        self.adjoints.clear()
        self.records.clear()
        self.generation += 1

    def new_leaf(self, value: float) -> int:
        """Append a leaf slot (no operation record) and return its index."""
        self.values.append(float(value))
        self.adjoints.append(0.0)
        self.records.append(None)
        return len(self.values) - 1

    def push_node(self, *, op_tag: OpTag, operands: Sequence[int], value: float,
                  exponent: Optional[int] = None) -> int:
        """
        Append a slot produced by `op_tag` applied to `operands`.
        Returns the new slot's index.
        """
        for i in operands:
            if not 0 <= i < len(self.values):
                raise IndexError(f"{op_tag.value}: operand index {i} is not on this tape")
        self.values.append(float(value))
        self.adjoints.append(0.0)
        self.records.append(Node(op_tag=op_tag, operands=tuple(operands), exponent=exponent))
        return len(self.values) - 1

    def accumulate(self, index: int, contribution: float):
        # read-modify-write committed straight to the column; aliases share it
        self.adjoints[index] += contribution

    def set_adjoint(self, index: int, adjoint: float):
        self.adjoints[index] = float(adjoint)

    def zero_adjoints(self):
        """Set every adjoint on this tape back to 0.0."""
        for i in range(len(self.adjoints)):
            self.adjoints[i] = 0.0

    def value_array(self) -> np.ndarray:
        return np.asarray(self.values, dtype=np.float64)

    def adjoint_array(self) -> np.ndarray:
        return np.asarray(self.adjoints, dtype=np.float64)


# Global singleton tape (simple and practical default)
global_tape = Tape()


@contextmanager
def use_tape(tape: Optional[Tape] = None):
    """
    Context manager to temporarily use a fresh (or the given) tape:
        with use_tape() as t:
            ... build computation ...
            reverse(y)
    """
    from . import tape as _tape_mod  # module access so callers see the swap
    prev = _tape_mod.global_tape
    try:
        _tape_mod.global_tape = tape if tape is not None else Tape()
        yield _tape_mod.global_tape
    finally:
        _tape_mod.global_tape = prev
