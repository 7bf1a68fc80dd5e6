import json
from pathlib import Path

import pytest

from simplex_calculator.schemas import Constraint, Problem, SimplexInput, SolveOptions, Status
from simplex_calculator.lp.simplex import simplex_run
from simplex_calculator.lp.solve import problem_from_request, solve_problem
from simplex_calculator.lp.standard_form import build_standard_form


def load_example(name: str) -> Problem:
    data = json.loads(Path(__file__).parent.parent.joinpath("examples", name).read_text())
    return problem_from_request(SimplexInput.model_validate(data))


def make_problem(objective, rows, bounds, sense="max") -> Problem:
    return Problem(
        sense=sense,
        objective=objective,
        constraints=[Constraint(coefficients=row, bound=bound) for row, bound in zip(rows, bounds)],
    )


def test_simplex_solves_small_lp():
    solution = solve_problem(load_example("wyndor.json"), SolveOptions())

    assert solution.status == Status.SUCCESS
    assert solution.optimal_value == pytest.approx(36.0, rel=1e-9)
    assert solution.variable_values == pytest.approx([2.0, 6.0], rel=1e-9)


def test_minimisation_with_negative_bounds():
    solution = solve_problem(load_example("diet.json"), SolveOptions())

    assert solution.status == Status.SUCCESS
    assert solution.optimal_value == pytest.approx(9.6, rel=1e-6)
    assert solution.variable_values == pytest.approx([0.8, 3.6], rel=1e-6)


def test_negative_bound_row_needs_phase_one():
    problem = make_problem([0.0, 0.0], [[-1.0, -1.0]], [-5.0])
    solution = solve_problem(problem, SolveOptions())

    assert solution.status == Status.SUCCESS
    assert solution.optimal_value == pytest.approx(0.0, abs=1e-12)
    x1, x2 = solution.variable_values
    assert x1 >= 0 and x2 >= 0
    assert x1 + x2 >= 5.0 - 1e-9


def test_infeasible_region():
    problem = make_problem([1.0, 1.0], [[1.0, 1.0], [-1.0, -1.0]], [2.0, -5.0])
    solution = solve_problem(problem, SolveOptions())

    assert solution.status == Status.INFEASIBLE
    assert solution.optimal_value == 0.0
    assert solution.variable_values == [0.0, 0.0]
    assert solution.shadow_prices == [0.0, 0.0]
    assert solution.variation_feasible == [False, False]


def test_unbounded_objective_terminates():
    problem = make_problem([1.0], [[-1.0]], [0.0])
    solution = solve_problem(problem, SolveOptions())

    assert solution.status == Status.UNBOUNDED
    assert "Unbounded" in solution.message
    assert solution.variable_values == [0.0]


def test_ratio_tie_breaks_on_smallest_basic_index():
    problem = make_problem([2.0, 1.0], [[1.0, 0.0], [1.0, 1.0], [0.0, 1.0]], [2.0, 2.0, 3.0])
    form = build_standard_form(problem)
    run = simplex_run(form, SolveOptions())

    assert run["status"] == "optimal"
    # x1 replaces the slack of row 0 (column 2) rather than the tied slack of row 1
    assert run["basis"][0] == 0
    assert run["iterations"] <= 3
    assert run["objective"] == pytest.approx(4.0)


@pytest.mark.parametrize("pivot_rule", ["dantzig", "bland"])
def test_cycling_example_terminates(pivot_rule):
    # Chvatal's example cycles under the plain largest-coefficient rule
    problem = make_problem(
        [10.0, -57.0, -9.0, -24.0],
        [
            [0.5, -5.5, -2.5, 9.0],
            [0.5, -1.5, -0.5, 1.0],
            [1.0, 0.0, 0.0, 0.0],
        ],
        [0.0, 0.0, 1.0],
    )
    solution = solve_problem(problem, SolveOptions(pivot_rule=pivot_rule, degenerate_streak=10))

    assert solution.status == Status.SUCCESS
    assert solution.optimal_value == pytest.approx(1.0, abs=1e-9)
    assert solution.variable_values == pytest.approx([1.0, 0.0, 1.0, 0.0], abs=1e-9)
    assert solution.iterations < 100


def test_iteration_limit_is_reported():
    solution = solve_problem(load_example("wyndor.json"), SolveOptions(max_iters=1))

    assert solution.status == Status.ITERATION_LIMIT
    assert solution.iterations == 1
    assert solution.variable_values == [0.0, 0.0]


def test_invalid_problem_reports_status():
    problem = make_problem([1.0, 1.0], [[1.0]], [1.0])
    solution = solve_problem(problem)

    assert solution.status == Status.INVALID_INPUT
    assert solution.message.startswith("Invalid input")
    assert solution.variable_values == []
    assert solution.shadow_prices == []
