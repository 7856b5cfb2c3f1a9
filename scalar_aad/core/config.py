# scalar_aad/core/config.py
from dataclasses import dataclass


@dataclass
class EngineConfig:
    """
    Per-tape knobs for the reverse sweep.

    Attributes
    ----------
    skip_zero_adjoints : bool
        Skip nodes whose adjoint is exactly 0.0 during the sweep. Every local
        rule is linear in the incoming adjoint, so skipping them never changes
        the result.
    default_seed : float
        Adjoint written on a single output when `reverse` is called without
        an explicit seed.
    """
    skip_zero_adjoints: bool = True
    default_seed: float = 1.0
