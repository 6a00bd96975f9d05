"""
Allocation Optimizer Module

Objective-specific refinement of constrained allocations. One strategy
is selected per engine and blended with its input weights.
"""

from .strategies import (
    OptimizationObjective,
    OBJECTIVE_DESCRIPTIONS,
    ObjectiveStrategy,
    MaxSharpeStrategy,
    MinRiskStrategy,
    RiskParityStrategy,
    MaxReturnStrategy,
    MaxDiversificationStrategy,
    get_strategy,
    parse_objective,
)

__all__ = [
    "OptimizationObjective",
    "OBJECTIVE_DESCRIPTIONS",
    "ObjectiveStrategy",
    "MaxSharpeStrategy",
    "MinRiskStrategy",
    "RiskParityStrategy",
    "MaxReturnStrategy",
    "MaxDiversificationStrategy",
    "get_strategy",
    "parse_objective",
]
