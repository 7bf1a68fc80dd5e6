"""Simplex calculator: tableau simplex with right-hand-side sensitivity analysis."""

from .lp import solve_problem, solve_request
from .schemas import Constraint, Problem, SimplexInput, SimplexOutput, Solution, SolveOptions, Status

__all__ = [
    "solve_problem",
    "solve_request",
    "Constraint",
    "Problem",
    "SimplexInput",
    "SimplexOutput",
    "Solution",
    "SolveOptions",
    "Status",
]
