"""
Asset Allocation Engine

Produces a multi-asset-class allocation recommendation from an account
size, market snapshot, per-class statistics and investor preferences.

Usage:
    from allocation_engine import AssetAllocationEngine, AllocationInput

    engine = AssetAllocationEngine()
    recommendation = await engine.generate_allocation(allocation_input)
"""
# Engine first: it loads the portfolio package before the schemas that depend on it
from allocation_engine.core.engine import (
    AssetAllocationEngine,
    EngineConfig,
    generate_optimal_allocation,
)
from allocation_engine.core.optimizer.strategies import OptimizationObjective
from allocation_engine.core.portfolio.risk_profiles import (
    AssetClass,
    RiskProfile,
    DefaultRiskProfile,
    get_default_risk_profile,
)
from allocation_engine.schemas.allocation import (
    MarketCondition,
    MarketMetrics,
    AssetClassCharacteristics,
    AllocationPreferences,
    AllocationConstraint,
    AllocationInput,
    AllocationRecommendation,
)
from allocation_engine.utils.exceptions import (
    AllocationEngineException,
    ConfigurationError,
    ValidationError,
)

__version__ = "0.1.0"

__all__ = [
    "AssetAllocationEngine",
    "EngineConfig",
    "generate_optimal_allocation",
    "OptimizationObjective",
    "AssetClass",
    "RiskProfile",
    "DefaultRiskProfile",
    "get_default_risk_profile",
    "MarketCondition",
    "MarketMetrics",
    "AssetClassCharacteristics",
    "AllocationPreferences",
    "AllocationConstraint",
    "AllocationInput",
    "AllocationRecommendation",
    "AllocationEngineException",
    "ConfigurationError",
    "ValidationError",
]
