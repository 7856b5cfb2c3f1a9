# scalar_aad/core/seeds.py

#-----------------------------------------------------------------------------
# We "plant" a seed (dy/dy = 1) at the scalar output and let gradients grow
# backwards through the tape. Each helper works on its own isolated tape so
# repeated calls never see each other's nodes or adjoints.
#-----------------------------------------------------------------------------
from __future__ import annotations
from typing import Any, Callable, Dict, Iterable, List

from .var import ADVar
from .tape import use_tape
from .engine import reverse


def value(x: Any) -> Any:
    """Return the numeric value of an ADVar; pass through plain numbers unchanged."""
    return x.val if isinstance(x, ADVar) else x


def _ensure_ad(v: Any, *, name: str) -> ADVar:
    """
    Fresh leaf on the active tape holding `v`. An ADVar input contributes its
    value only; it may live on another tape and carry a stale adjoint.
    """
    return ADVar(value(v), name=name)


def _run(y: Any):
    # f may return a plain number when the output does not depend on its
    # inputs; every gradient is then 0.0 and there is nothing to sweep
    if isinstance(y, ADVar):
        reverse(y, seed=1.0)


# ----------------------------- single-input grad ----------------------------- #
def grad(f: Callable[[ADVar], Any], x0: float) -> float:
    """
    Derivative of a scalar function y=f(x) at x0.
    Runs one reverse pass within a fresh, isolated tape.

    Example
    -------
    grad(lambda x: 4.0 * x ** 5, 3.0) -> 1620.0
    """
    with use_tape():
        x = _ensure_ad(x0, name="x")
        _run(f(x))
        return x.adj


# ----------------------------- multi-input grads ----------------------------- #
def grads(f: Callable[[Dict[str, ADVar]], Any],
          inputs: Dict[str, float]) -> Dict[str, float]:
    """
    Gradient of a scalar function y=f(vars) w.r.t. ALL inputs (dict form).
    Performs ONE reverse pass to obtain all dy/dvar simultaneously.

    Parameters
    ----------
    f       : function taking a dict {name: ADVar} and returning an ADVar
    inputs  : dict {name: numeric}

    Returns
    -------
    dict {name: float}  # gradients in the same key order as `inputs`
    """
    with use_tape():
        vars_ad: Dict[str, ADVar] = {
            k: _ensure_ad(v, name=k) for k, v in inputs.items()
        }
        _run(f(vars_ad))
        return {k: vars_ad[k].adj for k in inputs.keys()}


def grads_list(f: Callable[[List[ADVar]], Any],
               x0_list: Iterable[float]) -> List[float]:
    """
    Same as grads(), but the inputs are provided as a list and the result is a list
    of partials in the same order.

    Example
    -------
    f = lambda xs: xs[0]*xs[0] + 3*xs[1]
    grads_list(f, [2.0, 4.0]) -> [4.0, 3.0]
    """
    with use_tape():
        xs: List[ADVar] = [
            _ensure_ad(v, name=f"x{i}") for i, v in enumerate(x0_list)
        ]
        _run(f(xs))
        return [x.adj for x in xs]
