"""Post-optimal analysis read straight off the final simplex tableau."""

from typing import Any, Dict, List, Tuple

import numpy as np

from .standard_form import StandardForm


def analyze_sensitivity(form: StandardForm, tableau: np.ndarray, tol: float) -> Dict[str, Any]:
    """
    Shadow prices, one-at-a-time feasibility of each requested bound variation and
    the optimal value it would produce, plus the bound range keeping the basis optimal.

    Column ``n + i`` of the final tableau is B^-1 applied to constraint i's slack
    column, so a change ``v`` in bound i moves the basic values by ``v`` times that
    column (the row flip cancels out: the slack coefficient and the stored bound
    carry the same sign).
    """

    m = form.num_constraints
    basic_values = tableau[:m, -1]
    optimal_value = form.transform.sense_sign * float(tableau[-1, -1])
    prices = shadow_prices(form, tableau)

    feasible: List[bool] = []
    new_values: List[float] = []
    ranges: List[Tuple[float, float]] = []
    for i in range(m):
        direction = tableau[:m, form.slack_column(i)]
        v = float(form.variations[i])

        shifted = basic_values + v * direction
        ok = bool(np.all(shifted >= -tol))
        feasible.append(ok)
        new_values.append(_clean(optimal_value + prices[i] * v, tol) if ok else 0.0)

        low, high = _variation_limits(basic_values, direction, tol)
        ranges.append((float(form.bounds[i]) + low, float(form.bounds[i]) + high))

    return {
        "optimal_value": optimal_value,
        "shadow_prices": [_clean(p, tol) for p in prices],
        "variation_feasible": feasible,
        "new_optimal_values": new_values,
        "rhs_ranges": ranges,
    }


def shadow_prices(form: StandardForm, tableau: np.ndarray) -> np.ndarray:
    m = form.num_constraints
    n = form.num_vars
    # a flipped row stores its slack as b - a.x with coefficient -1, so the objective
    # row entry is already the rate against the original bound
    return form.transform.sense_sign * tableau[-1, n : n + m]


def _variation_limits(values: np.ndarray, direction: np.ndarray, tol: float) -> Tuple[float, float]:
    """Largest decrease and increase of one bound keeping ``values + v * direction >= 0``."""
    low, high = -np.inf, np.inf
    for value, d in zip(values, direction):
        if d > tol:
            low = max(low, -value / d)
        elif d < -tol:
            high = min(high, -value / d)
    return float(low), float(high)


def _clean(value: float, tol: float) -> float:
    value = float(value)
    if abs(value) < tol:
        return 0.0
    return value
