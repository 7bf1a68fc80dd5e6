#!/usr/bin/env python3
import json
import time
from pathlib import Path

from simplex_calculator.lp.solve import solve_request_model
from simplex_calculator.schemas import SimplexInput, SolveOptions
from scripts.generate_instances import generate_random_request


def load_example(name: str) -> SimplexInput:
    path = Path(__file__).resolve().parent.parent / "examples" / name
    return SimplexInput.model_validate(json.loads(path.read_text()))


def main() -> None:
    opts = SolveOptions()
    cases = [
        ("examples/wyndor.json", load_example("wyndor.json")),
        ("examples/diet.json", load_example("diet.json")),
    ]
    for seed, size in enumerate((5, 20, 60)):
        cases.append((f"random-{size}x{size}", generate_random_request(size, size, seed)))

    print("name,status,objective,iterations,time_ms")
    for name, request in cases:
        start = time.perf_counter()
        solution = solve_request_model(request, opts)
        elapsed_ms = (time.perf_counter() - start) * 1000
        print(
            f"{name},{solution.status.name.lower()},{solution.optimal_value},{solution.iterations},{elapsed_ms:.2f}"
        )


if __name__ == "__main__":
    main()
