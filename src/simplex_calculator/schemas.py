from enum import IntEnum
from typing import List, Literal

from pydantic import BaseModel, Field

Sense = Literal["min", "max"]
PivotRule = Literal["dantzig", "bland"]


class Status(IntEnum):
    """Wire status codes. The form treats 1 as success."""

    SUCCESS = 1
    INFEASIBLE = 2
    UNBOUNDED = 3
    INVALID_INPUT = 4
    ITERATION_LIMIT = 5


class Constraint(BaseModel):
    coefficients: List[float]
    bound: float
    requested_variation: float = 0.0


class Problem(BaseModel):
    sense: Sense = "max"
    objective: List[float]
    constraints: List[Constraint]


class SolveOptions(BaseModel):
    max_iters: int = Field(default=10_000, ge=1)
    tol: float = Field(default=1e-9, gt=0.0)
    pivot_rule: PivotRule = "dantzig"
    # consecutive zero-ratio pivots tolerated before switching to Bland's rule
    degenerate_streak: int = Field(default=50, ge=1)


class RhsRange(BaseModel):
    lower: float
    upper: float


class SimplexInput(BaseModel):
    maximize: bool
    objective: List[float]
    lhs_ineq: List[List[float]]
    rhs_ineq: List[float]
    desired_variations: List[float]


class SimplexOutput(BaseModel):
    status: int
    message: str
    optimal_value: float
    solution: List[float]
    shadow_prices: List[float]
    variation_viable: List[bool]
    new_optimal_values: List[float]


class Solution(BaseModel):
    status: Status
    message: str = ""
    optimal_value: float = 0.0
    variable_values: List[float] = Field(default_factory=list)
    shadow_prices: List[float] = Field(default_factory=list)
    variation_feasible: List[bool] = Field(default_factory=list)
    new_optimal_values: List[float] = Field(default_factory=list)
    rhs_ranges: List[RhsRange] = Field(default_factory=list)
    iterations: int = 0

    def to_output(self) -> SimplexOutput:
        return SimplexOutput(
            status=int(self.status),
            message=self.message,
            optimal_value=self.optimal_value,
            solution=list(self.variable_values),
            shadow_prices=list(self.shadow_prices),
            variation_viable=list(self.variation_feasible),
            new_optimal_values=list(self.new_optimal_values),
        )
