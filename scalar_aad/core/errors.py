# scalar_aad/core/errors.py
"""
Exceptions raised by the scalar AAD engine.

Recording and reverse propagation are total over finite scalars, so these
only cover misuse of the handle API: mixing handles from different tapes,
touching a handle whose tape was reset, and out-of-domain exponents.
"""


class TapeMismatchError(ValueError):
    """
    Raised when the operands of one operation live on different tapes.

    Attributes
    ----------
    op : str
        Tag of the operation being recorded (e.g. "add", "mul").
    """

    def __init__(self, op: str) -> None:
        super().__init__(f"{op}: operands belong to different tapes.")
        self.op = op


class StaleHandleError(RuntimeError):
    """
    Raised when an ADVar is used after the tape it points into was reset.
    """

    def __init__(self, index: int) -> None:
        super().__init__(
            f"ADVar refers to node {index} of a tape that has since been reset."
        )
        self.index = index


class NegativeExponentError(ValueError):
    """
    Raised by `pow` for a negative integer exponent.
    """

    def __init__(self, exponent: int) -> None:
        super().__init__(f"pow: exponent must be a non-negative integer, got {exponent}.")
        self.exponent = exponent
