# scalar_aad/ops/__init__.py

# Convenience re-exports so users can do: from scalar_aad.ops import mul, pow, ...
from .arithmetic import add, sub, mul, neg, pow

__all__ = [
    "add", "sub", "mul", "neg", "pow",
]
