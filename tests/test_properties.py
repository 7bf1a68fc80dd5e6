import numpy as np
import pytest
from scipy.optimize import linprog

from simplex_calculator.schemas import Constraint, Problem, SolveOptions, Status
from simplex_calculator.lp.solve import solve_problem


def random_problem(seed: int, mixed: bool = False, boxed: bool = True) -> Problem:
    rng = np.random.default_rng(seed)
    n = int(rng.integers(2, 6))
    m = int(rng.integers(2, 6))
    if mixed:
        A = rng.integers(-5, 6, size=(m, n)).astype(float)
        b = rng.integers(-10, 21, size=m).astype(float)
        c = rng.integers(-5, 6, size=n).astype(float)
        # a box row keeps every instance bounded
        if boxed:
            A = np.vstack([A, np.ones(n)])
            b = np.append(b, 100.0)
        sense = "max" if rng.random() < 0.5 else "min"
    else:
        A = rng.integers(1, 10, size=(m, n)).astype(float)
        b = rng.integers(5, 50, size=m).astype(float)
        c = rng.integers(1, 10, size=n).astype(float)
        sense = "max"
    variations = rng.integers(-5, 6, size=A.shape[0]).astype(float)
    return Problem(
        sense=sense,
        objective=c.tolist(),
        constraints=[
            Constraint(coefficients=row.tolist(), bound=float(bound), requested_variation=float(v))
            for row, bound, v in zip(A, b, variations)
        ],
    )


def highs_solve(problem: Problem):
    c = np.array(problem.objective)
    A = np.array([cons.coefficients for cons in problem.constraints])
    b = np.array([cons.bound for cons in problem.constraints])
    sign = -1.0 if problem.sense == "max" else 1.0
    res = linprog(sign * c, A_ub=A, b_ub=b, bounds=[(0, None)] * len(c), method="highs")
    if res.status == 2:
        # presolve may call an unbounded model infeasible
        res = linprog(
            sign * c, A_ub=A, b_ub=b, bounds=[(0, None)] * len(c), method="highs", options={"presolve": False}
        )
    return res, sign


@pytest.mark.parametrize("seed", range(25))
def test_optimum_satisfies_constraints_and_objective(seed):
    problem = random_problem(seed)
    solution = solve_problem(problem, SolveOptions())

    assert solution.status == Status.SUCCESS
    x = np.array(solution.variable_values)
    c = np.array(problem.objective)
    A = np.array([cons.coefficients for cons in problem.constraints])
    b = np.array([cons.bound for cons in problem.constraints])

    assert np.all(x >= 0)
    assert np.all(A @ x <= b + 1e-7)
    assert float(c @ x) == pytest.approx(solution.optimal_value, rel=1e-7, abs=1e-7)

    slack = b - A @ x
    for i, s in enumerate(slack):
        if s > 1e-7:
            assert solution.shadow_prices[i] == 0.0


@pytest.mark.parametrize("seed", range(25))
def test_feasible_variations_round_trip(seed):
    problem = random_problem(seed)
    solution = solve_problem(problem, SolveOptions())

    for i, cons in enumerate(problem.constraints):
        if not solution.variation_feasible[i]:
            assert solution.new_optimal_values[i] == 0.0
            continue
        v = cons.requested_variation
        expected = solution.optimal_value + solution.shadow_prices[i] * v
        assert solution.new_optimal_values[i] == pytest.approx(expected, rel=1e-9, abs=1e-9)

        changed = problem.model_copy(deep=True)
        changed.constraints[i].bound += v
        resolved = solve_problem(changed, SolveOptions())
        assert resolved.status == Status.SUCCESS
        assert resolved.optimal_value == pytest.approx(solution.new_optimal_values[i], rel=1e-7, abs=1e-7)


@pytest.mark.parametrize("seed", range(40))
def test_agrees_with_highs(seed):
    problem = random_problem(seed, mixed=True)
    solution = solve_problem(problem, SolveOptions())
    res, sign = highs_solve(problem)

    if res.status == 0:
        assert solution.status == Status.SUCCESS
        assert solution.optimal_value == pytest.approx(sign * res.fun, rel=1e-6, abs=1e-6)
    elif res.status == 3:
        assert solution.status == Status.UNBOUNDED
    else:
        assert res.status == 2
        assert solution.status == Status.INFEASIBLE


@pytest.mark.parametrize("seed", range(10))
def test_ranges_contain_current_bound(seed):
    problem = random_problem(seed)
    solution = solve_problem(problem, SolveOptions())

    for cons, rng in zip(problem.constraints, solution.rhs_ranges):
        assert rng.lower <= cons.bound + 1e-9
        assert rng.upper >= cons.bound - 1e-9


@pytest.mark.parametrize("seed", range(40, 80))
def test_agrees_with_highs_without_box_row(seed):
    problem = random_problem(seed, mixed=True, boxed=False)
    solution = solve_problem(problem, SolveOptions())
    res, sign = highs_solve(problem)

    expected = {0: Status.SUCCESS, 2: Status.INFEASIBLE, 3: Status.UNBOUNDED}
    assert solution.status == expected[res.status]
    if res.status == 0:
        assert solution.optimal_value == pytest.approx(sign * res.fun, rel=1e-6, abs=1e-6)
