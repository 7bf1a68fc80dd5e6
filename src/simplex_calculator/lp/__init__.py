"""Simplex engine and sensitivity analysis for the simplex calculator."""

from .simplex import simplex_run
from .solve import solve_problem, solve_request

__all__ = ["simplex_run", "solve_problem", "solve_request"]
