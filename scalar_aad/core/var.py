# scalar_aad/core/var.py
from __future__ import annotations
import numpy as np
from typing import Any, Optional

from .errors import StaleHandleError

# bool is an int subclass but never a meaningful literal here
_NUMERIC = (int, float, np.integer, np.floating)


def is_numeric(x: Any) -> bool:
    return isinstance(x, _NUMERIC) and not isinstance(x, (bool, np.bool_))


class ADVar:
    """
    Handle to one scalar node on a tape.

    The node's state (value, adjoint, operation record) lives in the tape's
    columns; the handle only carries (tape, index). Copies of a handle, and
    handles returned by operators that reuse a node, all alias the same slot:
    writing the adjoint through one is visible through every other.

    Attributes
    ----------
    val  : float
        Forward value, fixed at creation.
    adj  : float
        Accumulated adjoint (gradient). 0.0 until a reverse pass reaches it.
    name : Optional[str]
        Optional debug/pretty-print name.
    """

    def __init__(self, val: Any, *, name: Optional[str] = None):
        if not is_numeric(val):
            raise TypeError(
                f"ADVar only accepts real numeric scalars (int, float, numpy scalar), "
                f"but got {type(val)}"
            )
        from . import tape as tape_mod  # module access for use_tape() compatibility
        self._bind(tape_mod.global_tape, tape_mod.global_tape.new_leaf(val))
        self.name = name

    @classmethod
    def from_literal(cls, val: Any, *, name: Optional[str] = None) -> "ADVar":
        """Lift a raw number into a leaf node on the active tape."""
        return cls(val, name=name)

    @classmethod
    def _from_index(cls, tape, index: int) -> "ADVar":
        # wraps an already-recorded slot, used by the ops module
        out = cls.__new__(cls)
        out._bind(tape, index)
        out.name = None
        return out

    def _bind(self, tape, index: int):
        self._tape = tape
        self._idx = index
        self._generation = tape.generation

    def _check(self):
        if self._generation != self._tape.generation:
            raise StaleHandleError(self._idx)

    @property
    def tape(self):
        return self._tape

    @property
    def index(self) -> int:
        self._check()
        return self._idx

    @property
    def val(self) -> float:
        self._check()
        return self._tape.values[self._idx]

    @property
    def adj(self) -> float:
        self._check()
        return self._tape.adjoints[self._idx]

    def set_adj(self, adj: float):
        """
        Overwrite this node's adjoint in place. Every handle aliasing the same
        node observes the new value. Useful to seed a non-unit gradient.
        """
        self._check()
        self._tape.set_adjoint(self._idx, adj)

    @property
    def is_leaf(self) -> bool:
        self._check()
        return self._tape.records[self._idx] is None

    def is_same(self, other: Any) -> bool:
        """True iff `other` is a handle to the very same node."""
        return (
            isinstance(other, ADVar)
            and other._tape is self._tape
            and other._idx == self._idx
            and other._generation == self._generation
        )

    def __eq__(self, other):
        # identity by storage slot, not by value
        if not isinstance(other, ADVar):
            return NotImplemented
        return self.is_same(other)

    def __hash__(self):
        return hash((id(self._tape), self._generation, self._idx))

    def __repr__(self):
        if self._generation != self._tape.generation:
            return f"ADVar(<stale node {self._idx}>, name={self.name!r})"
        return f"ADVar({self.val!r}, adj={self.adj!r}, name={self.name!r})"

    def backward(self, seed: Optional[float] = None):
        """Run a reverse pass seeded at this node (dy/dy = 1 by default)."""
        from .engine import reverse
        reverse(self, seed=seed)

    # Operator overloading for arithmetic operations
    def __add__(self, other):
        from ..ops.arithmetic import add
        return add(self, other)

    def __radd__(self, other):
        from ..ops.arithmetic import add
        return add(other, self)

    def __sub__(self, other):
        from ..ops.arithmetic import sub
        return sub(self, other)

    def __rsub__(self, other):
        from ..ops.arithmetic import sub
        return sub(other, self)

    def __mul__(self, other):
        from ..ops.arithmetic import mul
        return mul(self, other)

    def __rmul__(self, other):
        from ..ops.arithmetic import mul
        return mul(other, self)

    def __neg__(self):
        from ..ops.arithmetic import neg
        return neg(self)

    def __pow__(self, exponent):
        from ..ops.arithmetic import pow
        return pow(self, exponent)
