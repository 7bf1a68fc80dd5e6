from typing import Any, Dict, List

import numpy as np

from .standard_form import StandardForm
from ..schemas import RhsRange, Solution, Status

MESSAGES = {
    Status.SUCCESS: "Optimal solution found.",
    Status.INFEASIBLE: "Infeasible: no point satisfies every constraint.",
    Status.UNBOUNDED: "Unbounded: the objective can grow without limit.",
    Status.ITERATION_LIMIT: "Hit iteration limit before reaching optimality.",
}

_RUN_STATUS = {
    "optimal": Status.SUCCESS,
    "infeasible": Status.INFEASIBLE,
    "unbounded": Status.UNBOUNDED,
    "iteration_limit": Status.ITERATION_LIMIT,
}


def assemble_solution(
    form: StandardForm, run: Dict[str, Any], report: Dict[str, Any] | None, tol: float
) -> Solution:
    status = _RUN_STATUS[run["status"]]
    if status is not Status.SUCCESS or report is None:
        return failure_solution(
            status,
            MESSAGES[status],
            form.num_vars,
            form.num_constraints,
            iterations=run["iterations"],
        )

    return Solution(
        status=status,
        message=MESSAGES[status],
        optimal_value=report["optimal_value"],
        variable_values=_reconstruct_original_solution(form, run["tableau"], run["basis"], tol),
        shadow_prices=report["shadow_prices"],
        variation_feasible=report["variation_feasible"],
        new_optimal_values=report["new_optimal_values"],
        rhs_ranges=[RhsRange(lower=low, upper=high) for low, high in report["rhs_ranges"]],
        iterations=run["iterations"],
    )


def failure_solution(
    status: Status,
    message: str,
    num_vars: int = 0,
    num_constraints: int = 0,
    iterations: int = 0,
) -> Solution:
    """Zero-filled record for every terminal state other than optimal."""
    return Solution(
        status=status,
        message=message,
        optimal_value=0.0,
        variable_values=[0.0] * num_vars,
        shadow_prices=[0.0] * num_constraints,
        variation_feasible=[False] * num_constraints,
        new_optimal_values=[0.0] * num_constraints,
        iterations=iterations,
    )


def _reconstruct_original_solution(
    form: StandardForm, tableau: np.ndarray, basis: List[int], tol: float
) -> List[float]:
    values = [0.0] * form.num_vars
    for row, col in enumerate(basis):
        if col < form.num_vars:
            value = float(tableau[row, -1])
            if abs(value) < tol:
                value = 0.0
            values[col] = value
    return values
