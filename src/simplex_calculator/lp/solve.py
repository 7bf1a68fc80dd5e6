import logging
from typing import Any, Mapping

from pydantic import ValidationError

from .assembler import assemble_solution, failure_solution
from .sensitivity import analyze_sensitivity
from .simplex import simplex_run
from .standard_form import build_standard_form
from ..schemas import Constraint, Problem, SimplexInput, SimplexOutput, Solution, SolveOptions, Status

logger = logging.getLogger(__name__)


def solve_problem(problem: Problem, opts: SolveOptions | None = None) -> Solution:
    """Standardise, pivot, analyse and map back. Never raises for a well-typed problem."""
    opts = opts or SolveOptions()

    try:
        form = build_standard_form(problem)
    except ValueError as exc:
        logger.info("Rejected problem: %s", exc)
        return failure_solution(Status.INVALID_INPUT, f"Invalid input: {exc}")

    run = simplex_run(form, opts)
    report = None
    if run["status"] == "optimal":
        report = analyze_sensitivity(form, run["tableau"], opts.tol)

    solution = assemble_solution(form, run, report, opts.tol)
    logger.info(
        "Solved %dx%d problem: status=%s iterations=%d",
        form.num_constraints,
        form.num_vars,
        solution.status.name.lower(),
        solution.iterations,
    )
    return solution


def problem_from_request(request: SimplexInput) -> Problem:
    m = len(request.lhs_ineq)
    if len(request.rhs_ineq) != m:
        raise ValueError(f"lhs_ineq has {m} rows but rhs_ineq has {len(request.rhs_ineq)} entries.")
    if len(request.desired_variations) != m:
        raise ValueError(
            f"lhs_ineq has {m} rows but desired_variations has {len(request.desired_variations)} entries."
        )

    return Problem(
        sense="max" if request.maximize else "min",
        objective=list(request.objective),
        constraints=[
            Constraint(coefficients=list(row), bound=rhs, requested_variation=variation)
            for row, rhs, variation in zip(request.lhs_ineq, request.rhs_ineq, request.desired_variations)
        ],
    )


def solve_request_model(request: SimplexInput, opts: SolveOptions | None = None) -> Solution:
    try:
        problem = problem_from_request(request)
    except ValueError as exc:
        logger.info("Rejected request: %s", exc)
        return failure_solution(Status.INVALID_INPUT, f"Invalid input: {exc}")
    return solve_problem(problem, opts)


def solve_request(payload: SimplexInput | Mapping[str, Any], opts: SolveOptions | None = None) -> SimplexOutput:
    """Wire-level entry point: request JSON (or model) in, response model out."""
    if isinstance(payload, SimplexInput):
        request = payload
    else:
        try:
            request = SimplexInput.model_validate(payload)
        except ValidationError as exc:
            logger.info("Malformed request: %d validation error(s)", exc.error_count())
            return failure_solution(Status.INVALID_INPUT, f"Invalid input: {exc}").to_output()
    return solve_request_model(request, opts).to_output()
