from dataclasses import dataclass
from typing import List

import numpy as np

from ..schemas import Problem


@dataclass(frozen=True)
class TransformRecord:
    """Sign changes applied before solving, undone by the result assembler."""

    sense_sign: float
    row_signs: np.ndarray
    artificial_indices: List[int]


@dataclass
class StandardForm:
    tableau: np.ndarray
    basis: List[int]
    c: np.ndarray
    transform: TransformRecord
    num_vars: int
    num_constraints: int
    bounds: np.ndarray
    variations: np.ndarray

    def slack_column(self, row: int) -> int:
        return self.num_vars + row


def build_standard_form(problem: Problem) -> StandardForm:
    """
    Convert ``max/min c.x s.t. A x <= b, x >= 0`` into a canonical maximisation
    tableau with one slack column per row.

    Rows with a negative bound are multiplied by -1. Their slack keeps the meaning
    ``b - a.x`` and so enters the flipped row with coefficient -1; an artificial
    column is appended and made basic for Phase I.
    """

    n = len(problem.objective)
    m = len(problem.constraints)
    if n == 0:
        raise ValueError("Objective has no decision variables.")
    if m == 0:
        raise ValueError("Problem has no constraints.")

    for idx, cons in enumerate(problem.constraints):
        if len(cons.coefficients) != n:
            raise ValueError(
                f"Constraint {idx + 1} has {len(cons.coefficients)} coefficients, expected {n}."
            )

    # fresh arrays: the caller's problem is never touched
    c_raw = np.array(problem.objective, dtype=float)
    A = np.array([cons.coefficients for cons in problem.constraints], dtype=float)
    b = np.array([cons.bound for cons in problem.constraints], dtype=float)
    variations = np.array([cons.requested_variation for cons in problem.constraints], dtype=float)

    for label, values in (("objective", c_raw), ("constraint coefficients", A),
                          ("bounds", b), ("requested variations", variations)):
        if not np.all(np.isfinite(values)):
            raise ValueError(f"Non-finite value in {label}.")

    sense_sign = 1.0 if problem.sense == "max" else -1.0
    c = sense_sign * c_raw

    row_signs = np.where(b < 0, -1.0, 1.0)
    flipped = [i for i in range(m) if row_signs[i] < 0]
    k = len(flipped)

    num_cols = n + m + k
    tableau = np.zeros((m + 1, num_cols + 1), dtype=float)
    tableau[:m, :n] = A * row_signs[:, None]
    tableau[:m, -1] = b * row_signs

    basis: List[int] = []
    artificial_indices: List[int] = []
    for i in range(m):
        tableau[i, n + i] = row_signs[i]
        if row_signs[i] > 0:
            basis.append(n + i)
        else:
            idx_art = n + m + len(artificial_indices)
            tableau[i, idx_art] = 1.0
            basis.append(idx_art)
            artificial_indices.append(idx_art)

    return StandardForm(
        tableau=tableau,
        basis=basis,
        c=c,
        transform=TransformRecord(
            sense_sign=sense_sign,
            row_signs=row_signs,
            artificial_indices=artificial_indices,
        ),
        num_vars=n,
        num_constraints=m,
        bounds=b,
        variations=variations,
    )
