import logging
from typing import Any, Dict, List, Optional, Set

import numpy as np

from .standard_form import StandardForm
from ..schemas import SolveOptions

logger = logging.getLogger(__name__)


def simplex_run(form: StandardForm, opts: SolveOptions) -> Dict[str, Any]:
    """
    Two-phase primal simplex on a dense tableau.

    Dantzig's most-negative rule picks the entering column, the ratio test breaks
    ties on the smallest basic index, and a run of degenerate pivots switches the
    entering rule to Bland's until progress resumes. The returned dict carries the
    terminal ``status`` (optimal, infeasible, unbounded, iteration_limit), the final
    ``tableau`` and ``basis`` and the pivot count.
    """

    tableau = form.tableau.copy()
    basis = form.basis.copy()
    artificial = set(form.transform.artificial_indices)

    phase1 = _phase_I(tableau, basis, artificial, opts)
    iterations = phase1["iterations"]
    if phase1["status"] != "feasible":
        return {
            "status": phase1["status"],
            "tableau": tableau,
            "basis": basis,
            "iterations": iterations,
        }

    remaining_iters = max(opts.max_iters - iterations, 1)
    phase2 = _phase_II(tableau, basis, form.c, artificial, opts, remaining_iters)
    iterations += phase2["iterations"]

    return {
        "status": phase2["status"],
        "tableau": tableau,
        "basis": basis,
        "iterations": iterations,
        "objective": float(tableau[-1, -1]),
    }


def _phase_I(
    tableau: np.ndarray,
    basis: List[int],
    artificial: Set[int],
    opts: SolveOptions,
) -> Dict[str, Any]:
    if not artificial:
        return {"status": "feasible", "iterations": 0}

    m = tableau.shape[0] - 1
    # maximise -sum(artificials); row holds -c, so +1 on each artificial column
    tableau[m, :] = 0.0
    for idx in artificial:
        tableau[m, idx] = 1.0
    for row, col in enumerate(basis):
        if col in artificial:
            tableau[m, :] -= tableau[row, :]

    result = _run_simplex(tableau, basis, opts, max_iterations=opts.max_iters, forbidden=None)
    if result["status"] != "optimal":
        # -sum(artificials) is bounded above by zero, so only the iteration cap lands here
        return result

    scale = max(1.0, float(np.abs(tableau[:m, -1]).sum()))
    if tableau[m, -1] < -opts.tol * scale:
        logger.debug("Phase I stopped at %.6g; no feasible basis.", tableau[m, -1])
        return {"status": "infeasible", "iterations": result["iterations"]}

    _drive_out_artificials(tableau, basis, artificial, opts.tol)
    return {"status": "feasible", "iterations": result["iterations"]}


def _phase_II(
    tableau: np.ndarray,
    basis: List[int],
    c: np.ndarray,
    artificial: Set[int],
    opts: SolveOptions,
    max_iterations: int,
) -> Dict[str, Any]:
    m = tableau.shape[0] - 1
    n = c.shape[0]
    tableau[m, :] = 0.0
    tableau[m, :n] = -c
    for row, col in enumerate(basis):
        factor = tableau[m, col]
        if factor != 0.0:
            tableau[m, :] -= factor * tableau[row, :]
    _snap(tableau, opts.tol)

    return _run_simplex(tableau, basis, opts, max_iterations=max_iterations, forbidden=artificial)


def _run_simplex(
    tableau: np.ndarray,
    basis: List[int],
    opts: SolveOptions,
    max_iterations: Optional[int],
    forbidden: Optional[Set[int]],
) -> Dict[str, Any]:
    forbidden = set() if forbidden is None else set(forbidden)
    tol = opts.tol
    max_iter = max(max_iterations if max_iterations is not None else opts.max_iters, 1)
    iterations = 0
    degenerate_run = 0

    while True:
        use_bland = opts.pivot_rule == "bland" or degenerate_run >= opts.degenerate_streak
        entering = _entering_column(tableau[-1, :-1], forbidden, tol, use_bland)
        if entering is None:
            return {"status": "optimal", "iterations": iterations}

        if iterations >= max_iter:
            return {"status": "iteration_limit", "iterations": iterations}

        pivot_row = _leaving_row(tableau, entering, basis, tol)
        if pivot_row is None:
            logger.debug("Column %d has no positive entry; objective unbounded.", entering)
            return {"status": "unbounded", "iterations": iterations}

        theta = tableau[pivot_row, -1] / tableau[pivot_row, entering]
        if theta <= tol:
            degenerate_run += 1
            if degenerate_run == opts.degenerate_streak and opts.pivot_rule != "bland":
                logger.debug("%d degenerate pivots in a row; using Bland's rule.", degenerate_run)
        else:
            degenerate_run = 0

        logger.debug(
            "pivot %d: column %d enters, column %d leaves (row %d, step %.6g)",
            iterations + 1,
            entering,
            basis[pivot_row],
            pivot_row,
            theta,
        )
        _pivot(tableau, basis, pivot_row, entering, tol)
        iterations += 1


def _entering_column(
    reduced: np.ndarray, forbidden: Set[int], tol: float, use_bland: bool
) -> Optional[int]:
    best: Optional[int] = None
    for j, value in enumerate(reduced):
        if j in forbidden or value >= -tol:
            continue
        if use_bland:
            return j
        if best is None or value < reduced[best]:
            best = j
    return best


def _leaving_row(tableau: np.ndarray, entering: int, basis: List[int], tol: float) -> Optional[int]:
    m = tableau.shape[0] - 1
    best: Optional[int] = None
    best_ratio = np.inf
    for row in range(m):
        coef = tableau[row, entering]
        if coef <= tol:
            continue
        ratio = tableau[row, -1] / coef
        if best is None or ratio < best_ratio - tol:
            best, best_ratio = row, ratio
        elif abs(ratio - best_ratio) <= tol and basis[row] < basis[best]:
            best, best_ratio = row, min(ratio, best_ratio)
    return best


def _pivot(tableau: np.ndarray, basis: List[int], row: int, col: int, tol: float) -> None:
    tableau[row, :] /= tableau[row, col]
    factors = tableau[:, col].copy()
    factors[row] = 0.0
    tableau -= np.outer(factors, tableau[row, :])
    tableau[:, col] = 0.0
    tableau[row, col] = 1.0
    _snap(tableau, tol)
    basis[row] = col


def _drive_out_artificials(
    tableau: np.ndarray, basis: List[int], artificial: Set[int], tol: float
) -> None:
    """Swap zero-level artificials out of the basis with degenerate pivots."""
    m = tableau.shape[0] - 1
    num_cols = tableau.shape[1] - 1
    for row in range(m):
        if basis[row] not in artificial:
            continue
        for col in range(num_cols):
            if col in artificial or col in basis:
                continue
            if abs(tableau[row, col]) > tol:
                _pivot(tableau, basis, row, col, tol)
                break
        else:
            # row is redundant; the artificial stays basic at zero and never re-enters
            logger.debug("Row %d is redundant after Phase I.", row)


def _snap(tableau: np.ndarray, tol: float) -> None:
    tableau[np.abs(tableau) < tol] = 0.0
