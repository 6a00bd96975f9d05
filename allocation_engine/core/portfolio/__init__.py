"""
Portfolio Module

Core allocation logic including:
- Risk profiles and profile inference
- Weight normalization helpers
- Constraint projection
- Rebalancing trade planning
"""
from allocation_engine.core.portfolio.risk_profiles import (
    AssetClass,
    RiskProfile,
    DefaultRiskProfile,
    CONSERVATIVE_PROFILE,
    MODERATE_CONSERVATIVE_PROFILE,
    MODERATE_PROFILE,
    MODERATE_AGGRESSIVE_PROFILE,
    AGGRESSIVE_PROFILE,
    DEFAULT_RISK_PROFILES,
    get_default_risk_profile,
    get_all_profiles,
    get_base_allocations,
    infer_risk_score,
    resolve_risk_profile,
)
from allocation_engine.core.portfolio.allocation import (
    AllocationWeights,
    equal_weights,
    normalize_weights,
    blend_weights,
    proportional_weights,
    scale_weights,
    weights_sum_to_one,
)
from allocation_engine.core.portfolio.constraints import (
    ConstraintProjector,
    apply_constraints,
)
from allocation_engine.core.portfolio.rebalancing import (
    RebalancingPlanner,
    drift_priority,
)

__all__ = [
    # Risk Profiles
    "AssetClass",
    "RiskProfile",
    "DefaultRiskProfile",
    "CONSERVATIVE_PROFILE",
    "MODERATE_CONSERVATIVE_PROFILE",
    "MODERATE_PROFILE",
    "MODERATE_AGGRESSIVE_PROFILE",
    "AGGRESSIVE_PROFILE",
    "DEFAULT_RISK_PROFILES",
    "get_default_risk_profile",
    "get_all_profiles",
    "get_base_allocations",
    "infer_risk_score",
    "resolve_risk_profile",
    # Weights
    "AllocationWeights",
    "equal_weights",
    "normalize_weights",
    "blend_weights",
    "proportional_weights",
    "scale_weights",
    "weights_sum_to_one",
    # Constraints
    "ConstraintProjector",
    "apply_constraints",
    # Rebalancing
    "RebalancingPlanner",
    "drift_priority",
]
